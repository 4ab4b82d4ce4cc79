# This file is part of Falsify.
#
# Copyright the Falsify Authors.
# Individual contributors are listed in AUTHORS.rst and the git log.
#
# This Source Code Form is subject to the terms of the Mozilla Public License,
# v. 2.0. If a copy of the MPL was not distributed with this file, You can
# obtain one at https://mozilla.org/MPL/2.0/.

from falsify.arbitraries._internal.arbitraries import Arbitrary, RandomGenerator

__all__ = ["Arbitrary", "RandomGenerator"]
