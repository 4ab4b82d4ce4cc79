# This file is part of Falsify.
#
# Copyright the Falsify Authors.
# Individual contributors are listed in AUTHORS.rst and the git log.
#
# This Source Code Form is subject to the terms of the Mozilla Public License,
# v. 2.0. If a copy of the MPL was not distributed with this file, You can
# obtain one at https://mozilla.org/MPL/2.0/.

from random import Random

from falsify.errors import InvalidArgument, TooManyFilterMisses
from falsify.internal.reflection import get_pretty_function_description
from falsify.internal.shrinking import (
    FilteredShrinkable,
    FlatMappedShrinkable,
    MappedShrinkable,
)
from falsify.internal.validation import check_valid_integer

# How many consecutive draws a filtered arbitrary may reject before the
# run is aborted.
MAX_FILTER_MISSES = 10000

# Size hint used by example() and whenever no explicit size is asked for.
DEFAULT_GEN_SIZE = 1000


def check_gen_size(gen_size):
    check_valid_integer(gen_size, "gen_size")
    if gen_size is None or gen_size < 1:
        raise InvalidArgument(f"gen_size={gen_size!r} must be a positive integer")


class RandomGenerator:
    """Turns a random source into shrinkables.

    ``next`` is reproducible: two random sources in the same state produce
    shrinkables with equal values.
    """

    def __init__(self, draw, description):
        self.__draw = draw
        self.description = description

    def next(self, random):
        return self.__draw(random)

    def __repr__(self):
        return f"RandomGenerator({self.description})"


class Arbitrary:
    """An Arbitrary describes a space of values and knows how to generate
    shrinkable samples from it.

    Arbitraries hold configuration only, so a single instance can be
    reused for any number of samples.

    Except where noted otherwise, methods on this class are not part of
    the public API and their behaviour may change significantly between
    minor version releases.
    """

    validate_called = False

    def validate(self):
        """Throw an exception if the arbitrary is not valid.

        This can happen due to lazy construction.
        """
        if self.validate_called:
            return
        try:
            self.validate_called = True
            self.do_validate()
        except Exception:
            self.validate_called = False
            raise

    def do_validate(self):
        pass

    def generator(self, gen_size):
        """Returns a :class:`RandomGenerator` for samples of this arbitrary.

        ``gen_size`` is a hint of how many samples will be drawn. Some
        arbitraries use it to scale the values they produce.

        This method is part of the public API.
        """
        check_gen_size(gen_size)
        self.validate()
        return RandomGenerator(self.draw_function(gen_size), repr(self))

    def draw_function(self, gen_size):
        """Returns a function from a random source to a shrinkable."""
        raise NotImplementedError(f"{type(self).__name__}.draw_function")

    def edge_cases(self):
        """Returns a list of shrinkables for values that are especially
        likely to break things, like bounds and empty collections.

        This method is part of the public API.
        """
        return []

    def example(self, random=None):
        """Provide an example of the sort of value that this arbitrary
        generates.

        This method shouldn't be taken too seriously. It's here for
        interactive exploration of the API, not for any sort of real
        testing.

        This method is part of the public API.
        """
        if random is None:
            random = Random()
        return self.generator(DEFAULT_GEN_SIZE).next(random).value

    def map(self, f):
        """Returns a new arbitrary that generates values by generating a value
        from this arbitrary and then calling f() on the result.

        This method is part of the public API.
        """
        return MappedArbitrary(self, f)

    def filter(self, condition):
        """Returns a new arbitrary that generates values from this arbitrary
        which satisfy the provided condition.

        If the condition rejects too many values in a row, generation fails
        with :class:`~falsify.errors.TooManyFilterMisses`.

        This method is part of the public API.
        """
        return FilteredArbitrary(self, condition)

    def flatmap(self, expand):
        """Returns a new arbitrary that generates values by generating a value
        from this arbitrary, say x, then generating a value from the arbitrary
        expand(x).

        This method is part of the public API.
        """
        return FlatMappedArbitrary(self, expand)

    def __or__(self, other):
        from falsify.arbitraries._internal.misc import one_of

        return one_of(self, other)


class MappedArbitrary(Arbitrary):
    def __init__(self, arbitrary, pack):
        self.mapped_arbitrary = arbitrary
        self.pack = pack

    def __repr__(self):
        if not hasattr(self, "_cached_repr"):
            self._cached_repr = "{!r}.map({})".format(
                self.mapped_arbitrary, get_pretty_function_description(self.pack)
            )
        return self._cached_repr

    def do_validate(self):
        self.mapped_arbitrary.validate()

    def draw_function(self, gen_size):
        draw = self.mapped_arbitrary.draw_function(gen_size)
        pack = self.pack
        return lambda random: MappedShrinkable(draw(random), pack)

    def edge_cases(self):
        return [
            MappedShrinkable(s, self.pack) for s in self.mapped_arbitrary.edge_cases()
        ]


class FilteredArbitrary(Arbitrary):
    def __init__(self, arbitrary, condition):
        self.filtered_arbitrary = arbitrary
        self.condition = condition

    def __repr__(self):
        if not hasattr(self, "_cached_repr"):
            self._cached_repr = "{!r}.filter({})".format(
                self.filtered_arbitrary,
                get_pretty_function_description(self.condition),
            )
        return self._cached_repr

    def do_validate(self):
        self.filtered_arbitrary.validate()

    def draw_function(self, gen_size):
        source = self.filtered_arbitrary.draw_function(gen_size)
        condition = self.condition

        def draw(random):
            for _ in range(MAX_FILTER_MISSES):
                shrinkable = source(random)
                if condition(shrinkable.value):
                    return FilteredShrinkable(shrinkable, condition)
            raise TooManyFilterMisses(self, MAX_FILTER_MISSES)

        return draw

    def edge_cases(self):
        return [
            FilteredShrinkable(s, self.condition)
            for s in self.filtered_arbitrary.edge_cases()
            if self.condition(s.value)
        ]


class FlatMappedArbitrary(Arbitrary):
    def __init__(self, arbitrary, expand):
        self.flatmapped_arbitrary = arbitrary
        self.expand = expand

    def __repr__(self):
        if not hasattr(self, "_cached_repr"):
            self._cached_repr = "{!r}.flatmap({})".format(
                self.flatmapped_arbitrary,
                get_pretty_function_description(self.expand),
            )
        return self._cached_repr

    def do_validate(self):
        self.flatmapped_arbitrary.validate()

    def checked_expand(self, value):
        result = self.expand(value)
        if not isinstance(result, Arbitrary):
            raise InvalidArgument(
                f"Expected an arbitrary from {self!r} for {value!r}, but got "
                f"{result!r} (type={type(result).__name__})"
            )
        return result

    def draw_function(self, gen_size):
        source = self.flatmapped_arbitrary.draw_function(gen_size)

        def draw(random):
            outer = source(random)
            seed = random.getrandbits(64)
            return FlatMappedShrinkable(outer, self.checked_expand, gen_size, seed)

        return draw
