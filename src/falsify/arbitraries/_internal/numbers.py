# This file is part of Falsify.
#
# Copyright the Falsify Authors.
# Individual contributors are listed in AUTHORS.rst and the git log.
#
# This Source Code Form is subject to the terms of the Mozilla Public License,
# v. 2.0. If a copy of the MPL was not distributed with this file, You can
# obtain one at https://mozilla.org/MPL/2.0/.

import math
from decimal import Decimal

from falsify.arbitraries._internal.arbitraries import Arbitrary, MappedArbitrary
from falsify.errors import InvalidArgument
from falsify.internal.shrinking import IntegerShrinkable
from falsify.internal.shrinking.integer import shrinking_target
from falsify.internal.validation import (
    check_type,
    check_valid_bound,
    check_valid_integer,
    check_valid_interval,
    try_convert,
)

# Bounds used for drawing when an integer arbitrary is unbounded on a side.
DEFAULT_MIN_INTEGER = -(2 ** 31)
DEFAULT_MAX_INTEGER = 2 ** 31 - 1


class IntegersArbitrary(Arbitrary):
    """Integers between min_value and max_value inclusive, shrinking towards
    shrink_towards.

    Half of the samples come from a window around the shrinking target
    whose width grows with the size hint, the rest from the whole range.
    """

    def __init__(self, min_value, max_value, shrink_towards):
        self.min_value = min_value
        self.max_value = max_value
        self.shrink_towards = shrink_towards

    def __repr__(self):
        bits = []
        if self.min_value is not None:
            bits.append(f"min_value={self.min_value!r}")
        if self.max_value is not None:
            bits.append(f"max_value={self.max_value!r}")
        return "integers({})".format(", ".join(bits))

    @property
    def lower(self):
        return DEFAULT_MIN_INTEGER if self.min_value is None else self.min_value

    @property
    def upper(self):
        return DEFAULT_MAX_INTEGER if self.max_value is None else self.max_value

    def draw_function(self, gen_size):
        lower, upper = self.lower, self.upper
        target = self.shrink_towards
        window_lower = max(lower, target - gen_size)
        window_upper = min(upper, target + gen_size)

        def draw(random):
            if random.random() < 0.5:
                value = random.randint(window_lower, window_upper)
            else:
                value = random.randint(lower, upper)
            return IntegerShrinkable(value, target)

        return draw

    def edge_cases(self):
        lower, upper = self.min_value, self.max_value
        candidates = [self.shrink_towards, 0, 1, -1]
        if lower is not None:
            candidates.extend((lower, lower + 1))
        if upper is not None:
            candidates.extend((upper, upper - 1))
        result = []
        for c in candidates:
            if self.lower <= c <= self.upper and c not in result:
                result.append(c)
        return [IntegerShrinkable(c, self.shrink_towards) for c in result]


def integers(min_value=None, max_value=None, *, shrink_towards=None):
    """Returns an arbitrary which generates integers.

    If min_value is not None then all values will be >= min_value. If
    max_value is not None then all values will be <= max_value.

    Values shrink towards zero if it is in range and towards the bound
    closest to zero otherwise, unless ``shrink_towards`` names another
    target inside the range.
    """
    check_valid_integer(min_value, "min_value")
    check_valid_integer(max_value, "max_value")
    check_valid_interval(min_value, max_value, "min_value", "max_value")
    if shrink_towards is None:
        shrink_towards = shrinking_target(min_value, max_value)
    else:
        check_valid_integer(shrink_towards, "shrink_towards")
        if (min_value is not None and shrink_towards < min_value) or (
            max_value is not None and shrink_towards > max_value
        ):
            raise InvalidArgument(
                f"shrink_towards={shrink_towards!r} must lie between "
                f"min_value={min_value!r} and max_value={max_value!r}"
            )
    return IntegersArbitrary(min_value, max_value, shrink_towards)


class DecimalsArbitrary(MappedArbitrary):
    """Decimals with a fixed number of digits after the decimal point.

    A decimal is generated and shrunk as its unscaled integer value, so
    ``Decimal("1.25")`` with scale 2 is handled as the integer 125.
    """

    def __init__(self, min_value, max_value, scale):
        self.min_value = min_value
        self.max_value = max_value
        self.scale = scale
        factor = 10 ** scale
        unscaled_min = None if min_value is None else math.ceil(min_value * factor)
        unscaled_max = None if max_value is None else math.floor(max_value * factor)
        if (
            unscaled_min is not None
            and unscaled_max is not None
            and unscaled_min > unscaled_max
        ):
            raise InvalidArgument(
                f"There are no decimals with scale={scale!r} between "
                f"min_value={min_value!r} and max_value={max_value!r}"
            )
        super().__init__(integers(unscaled_min, unscaled_max), self.from_unscaled)

    def from_unscaled(self, unscaled):
        return Decimal(unscaled).scaleb(-self.scale)

    def __repr__(self):
        bits = []
        if self.min_value is not None:
            bits.append(f"min_value={self.min_value!r}")
        if self.max_value is not None:
            bits.append(f"max_value={self.max_value!r}")
        bits.append(f"scale={self.scale!r}")
        return "decimals({})".format(", ".join(bits))


def as_decimal(value, name):
    # Floats convert through their shortest repr, so 0.1 becomes
    # Decimal("0.1") and not its exact binary expansion.
    if isinstance(value, float):
        value = repr(value)
    return try_convert(Decimal, value, name)


def decimals(min_value=None, max_value=None, *, scale=2):
    """Returns an arbitrary which generates instances of
    :class:`python:decimal.Decimal` with ``scale`` digits after the
    decimal point.

    Bounds may be given as anything that converts to a Decimal, such as
    ints, strings or Decimals. Values shrink towards zero, or the bound
    closest to it.
    """
    check_type(int, scale, "scale")
    if isinstance(scale, bool) or scale < 0:
        raise InvalidArgument(f"scale={scale!r} must be a non-negative integer")
    min_value = as_decimal(min_value, "min_value")
    max_value = as_decimal(max_value, "max_value")
    check_valid_bound(min_value, "min_value")
    check_valid_bound(max_value, "max_value")
    check_valid_interval(min_value, max_value, "min_value", "max_value")
    return DecimalsArbitrary(min_value, max_value, scale)
