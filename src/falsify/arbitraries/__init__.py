# This file is part of Falsify.
#
# Copyright the Falsify Authors.
# Individual contributors are listed in AUTHORS.rst and the git log.
#
# This Source Code Form is subject to the terms of the Mozilla Public License,
# v. 2.0. If a copy of the MPL was not distributed with this file, You can
# obtain one at https://mozilla.org/MPL/2.0/.

from falsify.arbitraries._internal import Arbitrary, RandomGenerator
from falsify.arbitraries._internal.arbitraries import MAX_FILTER_MISSES
from falsify.arbitraries._internal.collections import lists, tuples
from falsify.arbitraries._internal.misc import (
    booleans,
    frequency,
    just,
    one_of,
    sampled_from,
)
from falsify.arbitraries._internal.numbers import decimals, integers
from falsify.arbitraries._internal.types import from_type, register_type_arbitrary

# The implementation of all of these lives in `_internal`, but we re-export
# them via this module to avoid exposing implementation details to
# over-zealous tab completion in editors that do not respect __all__.

__all__ = [
    "MAX_FILTER_MISSES",
    "Arbitrary",
    "RandomGenerator",
    "booleans",
    "decimals",
    "frequency",
    "from_type",
    "integers",
    "just",
    "lists",
    "one_of",
    "register_type_arbitrary",
    "sampled_from",
    "tuples",
]
