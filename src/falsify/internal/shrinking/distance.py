# This file is part of Falsify.
#
# Copyright the Falsify Authors.
# Individual contributors are listed in AUTHORS.rst and the git log.
#
# This Source Code Form is subject to the terms of the Mozilla Public License,
# v. 2.0. If a copy of the MPL was not distributed with this file, You can
# obtain one at https://mozilla.org/MPL/2.0/.

from functools import total_ordering
from itertools import zip_longest


@total_ordering
class ShrinkingDistance:
    """How far a shrinkable's value is from the simplest value it could
    shrink to.

    A distance is a sequence of non-negative integers compared
    lexicographically. Missing trailing dimensions count as zero, so
    ``of(3) == of(3, 0)``. Every shrink candidate must be strictly closer
    than its parent, which makes any descent through candidates finite.
    """

    __slots__ = ("dimensions",)

    def __init__(self, dimensions):
        dimensions = tuple(dimensions)
        for d in dimensions:
            if d < 0:
                raise ValueError(
                    f"Distance dimensions must not be negative: {dimensions!r}"
                )
        self.dimensions = dimensions

    @classmethod
    def of(cls, *dimensions):
        return cls(dimensions)

    @classmethod
    def for_collection(cls, shrinkables):
        """The size of the collection followed by the dimensionwise sum of
        its elements' distances."""
        shrinkables = list(shrinkables)
        return cls.of(len(shrinkables)).append(
            cls.sum(s.distance() for s in shrinkables)
        )

    @classmethod
    def combine(cls, shrinkables):
        """Dimensionwise sum of the distances of a fixed number of parts.

        Shrinking any single part lowers the sum, whatever the widths of
        the parts' distances are.
        """
        return cls.sum(s.distance() for s in shrinkables)

    @classmethod
    def sum(cls, distances):
        result = MIN
        for d in distances:
            result = result.plus(d)
        return result

    def plus(self, other):
        return ShrinkingDistance(
            a + b
            for a, b in zip_longest(self.dimensions, other.dimensions, fillvalue=0)
        )

    def append(self, other):
        return ShrinkingDistance(self.dimensions + other.dimensions)

    def _normalized(self):
        dims = self.dimensions
        end = len(dims)
        while end > 0 and dims[end - 1] == 0:
            end -= 1
        return dims[:end]

    def __eq__(self, other):
        if not isinstance(other, ShrinkingDistance):
            return NotImplemented
        return self._normalized() == other._normalized()

    def __lt__(self, other):
        if not isinstance(other, ShrinkingDistance):
            return NotImplemented
        for a, b in zip_longest(self.dimensions, other.dimensions, fillvalue=0):
            if a != b:
                return a < b
        return False

    def __hash__(self):
        return hash(self._normalized())

    def __repr__(self):
        return "ShrinkingDistance{!r}".format(self.dimensions)


MIN = ShrinkingDistance.of(0)
