# This file is part of Falsify.
#
# Copyright the Falsify Authors.
# Individual contributors are listed in AUTHORS.rst and the git log.
#
# This Source Code Form is subject to the terms of the Mozilla Public License,
# v. 2.0. If a copy of the MPL was not distributed with this file, You can
# obtain one at https://mozilla.org/MPL/2.0/.

from bisect import bisect_right
from itertools import accumulate

from falsify.errors import InvalidArgument
from falsify.internal.validation import check_valid_weight


class Sampler:
    """Chooses indices with probability proportional to their integer
    weights.

    The table of cumulative weights is searched with bisection, so an index
    with weight zero can never be chosen: it shares its cumulative weight
    with its predecessor and bisect_right always skips past it.
    """

    def __init__(self, weights):
        weights = list(weights)
        for i, w in enumerate(weights):
            check_valid_weight(w, f"weights[{i}]")
        self.weights = weights
        self.cumulative = list(accumulate(weights))
        self.total = self.cumulative[-1] if self.cumulative else 0
        if self.total == 0:
            raise InvalidArgument(
                f"At least one of weights={weights!r} must be positive"
            )

    def sample(self, random):
        return bisect_right(self.cumulative, random.randrange(self.total))

    def ordering(self, random):
        """Yields every index with positive weight exactly once, in a
        weighted random order."""
        remaining = [i for i, w in enumerate(self.weights) if w > 0]
        while remaining:
            if len(remaining) == 1:
                yield remaining.pop()
                return
            cumulative = list(accumulate(self.weights[i] for i in remaining))
            j = bisect_right(cumulative, random.randrange(cumulative[-1]))
            yield remaining.pop(j)
