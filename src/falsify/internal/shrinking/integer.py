# This file is part of Falsify.
#
# Copyright the Falsify Authors.
# Individual contributors are listed in AUTHORS.rst and the git log.
#
# This Source Code Form is subject to the terms of the Mozilla Public License,
# v. 2.0. If a copy of the MPL was not distributed with this file, You can
# obtain one at https://mozilla.org/MPL/2.0/.

from sortedcontainers import SortedKeyList

from falsify.internal.shrinking.distance import ShrinkingDistance
from falsify.internal.shrinking.shrinkable import Shrinkable


def shrinking_target(min_value, max_value):
    """Zero if it lies within the bounds, otherwise the bound closest to
    it."""
    if min_value is not None and min_value > 0:
        return min_value
    if max_value is not None and max_value < 0:
        return max_value
    return 0


def candidates_towards(value, target):
    """The integers strictly between value and target (and target itself)
    that a value is tried against, ordered by their distance to target.

    These are the target, the points reached by halving the distance to
    the target again and again, and the neighbour of value one step
    closer.
    """
    candidates = set()
    delta = value - target
    # Halving ends on a delta of one, which is the neighbour.
    while delta != 0:
        candidates.add(value - delta)
        delta = delta // 2 if delta > 0 else -(-delta // 2)
    return SortedKeyList(candidates, key=lambda c: abs(c - target))


class IntegerShrinkable(Shrinkable):
    def __init__(self, value, target):
        self.__value = value
        self.target = target

    @property
    def value(self):
        return self.__value

    def shrink(self):
        return (
            IntegerShrinkable(c, self.target)
            for c in candidates_towards(self.__value, self.target)
        )

    def distance(self):
        return ShrinkingDistance.of(abs(self.__value - self.target))
