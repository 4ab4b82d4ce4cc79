# This file is part of Falsify.
#
# Copyright the Falsify Authors.
# Individual contributors are listed in AUTHORS.rst and the git log.
#
# This Source Code Form is subject to the terms of the Mozilla Public License,
# v. 2.0. If a copy of the MPL was not distributed with this file, You can
# obtain one at https://mozilla.org/MPL/2.0/.

"""Falsify is a generation-and-shrinking engine for property-based testing.

It generates samples from composable arbitraries, checks a property
against them and shrinks the first falsifying sample it finds to a
minimal one. Chains of state transformations are supported for stateful
properties.
"""

from falsify._settings import (
    EdgeCasesMode,
    Reporting,
    ShrinkingMode,
    Verbosity,
    settings,
)
from falsify.control import assume, reject
from falsify.core import CheckResult, CheckStatus, check
from falsify.internal.shrinking.property import (
    PropertyShrinker,
    PropertyShrinkingResult,
)
from falsify.version import __version__, __version_info__

__all__ = [
    "CheckResult",
    "CheckStatus",
    "EdgeCasesMode",
    "PropertyShrinker",
    "PropertyShrinkingResult",
    "Reporting",
    "ShrinkingMode",
    "Verbosity",
    "assume",
    "check",
    "reject",
    "settings",
    "__version__",
    "__version_info__",
]
