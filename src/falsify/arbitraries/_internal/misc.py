# This file is part of Falsify.
#
# Copyright the Falsify Authors.
# Individual contributors are listed in AUTHORS.rst and the git log.
#
# This Source Code Form is subject to the terms of the Mozilla Public License,
# v. 2.0. If a copy of the MPL was not distributed with this file, You can
# obtain one at https://mozilla.org/MPL/2.0/.

from falsify.arbitraries._internal.arbitraries import Arbitrary
from falsify.errors import InvalidArgument
from falsify.internal.sampler import Sampler
from falsify.internal.shrinking import IntegerShrinkable, MappedShrinkable, Unshrinkable
from falsify.internal.validation import check_arbitrary, check_valid_weight


class JustArbitrary(Arbitrary):
    """An arbitrary which always returns a single fixed value."""

    def __init__(self, value):
        self.value = value

    def __repr__(self):
        return f"just({self.value!r})"

    def draw_function(self, gen_size):
        value = self.value
        return lambda random: Unshrinkable(value)

    def edge_cases(self):
        return [Unshrinkable(self.value)]


def just(value):
    """Return an arbitrary which only generates ``value``.

    The value is not copied, so mutating it changes later samples.
    """
    return JustArbitrary(value)


class SampledFromArbitrary(Arbitrary):
    """Chooses uniformly among a fixed sequence of values, shrinking towards
    the first of them."""

    def __init__(self, elements, name=None):
        self.elements = elements
        self.name = name

    def __repr__(self):
        if self.name is not None:
            return f"{self.name}()"
        return f"sampled_from({self.elements!r})"

    def shrinkable_for(self, index):
        return MappedShrinkable(IntegerShrinkable(index, 0), self.elements.__getitem__)

    def draw_function(self, gen_size):
        n = len(self.elements)
        return lambda random: self.shrinkable_for(random.randrange(n))

    def edge_cases(self):
        indices = sorted({0, len(self.elements) - 1})
        return [self.shrinkable_for(i) for i in indices]


def sampled_from(elements):
    """Returns an arbitrary which generates any value present in
    ``elements``.

    Values shrink towards the start of the sequence.
    """
    elements = tuple(elements)
    if not elements:
        raise InvalidArgument("sampled_from requires at least one element")
    return SampledFromArbitrary(elements)


def booleans():
    """Returns an arbitrary which generates instances of :class:`python:bool`.

    Values shrink towards False.
    """
    return SampledFromArbitrary((False, True), name="booleans")


class FrequencyArbitrary(Arbitrary):
    """Chooses one of several arbitraries with probability proportional to
    its weight and then draws from it.

    A sample only shrinks within the arbitrary it was drawn from.
    """

    def __init__(self, weighted, name="frequency"):
        self.weighted = weighted
        self.name = name

    def __repr__(self):
        if self.name == "one_of":
            return " | ".join(repr(a) for _, a in self.weighted)
        return "frequency({})".format(
            ", ".join(f"({w!r}, {a!r})" for w, a in self.weighted)
        )

    def do_validate(self):
        for _, a in self.weighted:
            a.validate()

    def draw_function(self, gen_size):
        sampler = Sampler(w for w, _ in self.weighted)
        draws = [a.draw_function(gen_size) for _, a in self.weighted]
        return lambda random: draws[sampler.sample(random)](random)

    def edge_cases(self):
        return [e for w, a in self.weighted if w > 0 for e in a.edge_cases()]


def frequency(*weighted):
    """Returns an arbitrary which draws from one of the given arbitraries,
    chosen with probability proportional to its weight.

    Each argument is a ``(weight, arbitrary)`` pair. Arbitraries with weight
    zero are never drawn from.
    """
    if not weighted:
        raise InvalidArgument(
            "frequency requires at least one (weight, arbitrary) pair"
        )
    checked = []
    for i, pair in enumerate(weighted):
        try:
            weight, arbitrary = pair
        except (TypeError, ValueError):
            raise InvalidArgument(
                f"Expected a (weight, arbitrary) pair but got {pair!r}"
            ) from None
        check_valid_weight(weight, f"weight of argument {i}")
        check_arbitrary(arbitrary, f"arbitrary of argument {i}")
        checked.append((weight, arbitrary))
    if not any(w > 0 for w, _ in checked):
        raise InvalidArgument("frequency requires at least one positive weight")
    return FrequencyArbitrary(tuple(checked))


def one_of(*args):
    """Return an arbitrary which generates values from any of the argument
    arbitraries, each chosen with equal probability.

    This may be called with one iterable argument instead of multiple
    arbitrary arguments.
    """
    if len(args) == 1 and not isinstance(args[0], Arbitrary):
        try:
            args = tuple(args[0])
        except TypeError:
            pass
    if not args:
        raise InvalidArgument("one_of requires at least one arbitrary")
    for i, arg in enumerate(args):
        check_arbitrary(arg, f"args[{i}]")
    return FrequencyArbitrary(tuple((1, a) for a in args), name="one_of")
