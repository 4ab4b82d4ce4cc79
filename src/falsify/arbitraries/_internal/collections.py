# This file is part of Falsify.
#
# Copyright the Falsify Authors.
# Individual contributors are listed in AUTHORS.rst and the git log.
#
# This Source Code Form is subject to the terms of the Mozilla Public License,
# v. 2.0. If a copy of the MPL was not distributed with this file, You can
# obtain one at https://mozilla.org/MPL/2.0/.

import math
from itertools import product

from falsify.arbitraries._internal.arbitraries import Arbitrary
from falsify.internal.shrinking import ListShrinkable, TupleShrinkable
from falsify.internal.validation import check_arbitrary, check_valid_sizes

# Upper bound on the number of edge cases a tuple arbitrary combines from
# its elements' edge cases.
MAX_TUPLE_EDGE_CASES = 100


class TupleArbitrary(Arbitrary):
    """An arbitrary responsible for fixed length tuples based on heterogeneous
    arbitraries for each of their elements."""

    def __init__(self, arbitraries):
        self.element_arbitraries = tuple(arbitraries)

    def do_validate(self):
        for a in self.element_arbitraries:
            a.validate()

    def __repr__(self):
        return "tuples({})".format(", ".join(map(repr, self.element_arbitraries)))

    def draw_function(self, gen_size):
        draws = [a.draw_function(gen_size) for a in self.element_arbitraries]
        return lambda random: TupleShrinkable(draw(random) for draw in draws)

    def edge_cases(self):
        result = []
        for combination in product(*(a.edge_cases() for a in self.element_arbitraries)):
            if len(result) >= MAX_TUPLE_EDGE_CASES:
                break
            result.append(TupleShrinkable(combination))
        return result


def tuples(*args):
    """Return an arbitrary which generates a tuple of the same length as args
    by generating the value at index i from args[i].

    e.g. tuples(integers(), integers()) would generate a tuple of length
    two with both values an integer.
    """
    for i, arg in enumerate(args):
        check_arbitrary(arg, f"args[{i}]")
    return TupleArbitrary(args)


class ListArbitrary(Arbitrary):
    """A generic arbitrary for lists of elements drawn from a single element
    arbitrary.

    Without an explicit max_size, lists grow with the square root of the
    size hint.
    """

    def __init__(self, elements, min_size, max_size):
        self.element_arbitrary = elements
        self.min_size = min_size
        self.max_size = max_size

    def do_validate(self):
        self.element_arbitrary.validate()

    def __repr__(self):
        bits = [repr(self.element_arbitrary)]
        if self.min_size:
            bits.append(f"min_size={self.min_size!r}")
        if self.max_size is not None:
            bits.append(f"max_size={self.max_size!r}")
        return "lists({})".format(", ".join(bits))

    def effective_max_size(self, gen_size):
        if self.max_size is not None:
            return self.max_size
        return self.min_size + max(1, round(math.sqrt(gen_size)))

    def draw_function(self, gen_size):
        draw_element = self.element_arbitrary.draw_function(gen_size)
        min_size = self.min_size
        max_size = self.effective_max_size(gen_size)

        def draw(random):
            size = random.randint(min_size, max_size)
            return ListShrinkable([draw_element(random) for _ in range(size)], min_size)

        return draw

    def edge_cases(self):
        element_cases = self.element_arbitrary.edge_cases()
        result = []
        if self.min_size == 0:
            result.append(ListShrinkable([], 0))
        if self.min_size <= 1 and (self.max_size is None or self.max_size >= 1):
            result.extend(ListShrinkable([e], self.min_size) for e in element_cases)
        return result


def lists(elements, *, min_size=0, max_size=None):
    """Returns an arbitrary which generates lists of values drawn from
    ``elements``, with lengths between ``min_size`` and ``max_size``.

    Lists shrink by dropping elements, down to ``min_size``, and then by
    shrinking their elements.
    """
    check_arbitrary(elements, "elements")
    check_valid_sizes(min_size, max_size)
    if min_size is None:
        min_size = 0
    return ListArbitrary(elements, min_size, max_size)
