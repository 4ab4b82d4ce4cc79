# This file is part of Falsify.
#
# Copyright the Falsify Authors.
# Individual contributors are listed in AUTHORS.rst and the git log.
#
# This Source Code Form is subject to the terms of the Mozilla Public License,
# v. 2.0. If a copy of the MPL was not distributed with this file, You can
# obtain one at https://mozilla.org/MPL/2.0/.

from falsify.errors import UnsatisfiedAssumption


def reject():
    raise UnsatisfiedAssumption()


def assume(condition):
    """Calling ``assume`` is like an :ref:`assert <python:assert>` that marks
    the sample as invalid, rather than falsifying the property.

    Invalid samples are counted against ``max_discard_ratio``, and shrink
    candidates that are invalid are not accepted.
    """
    if not condition:
        raise UnsatisfiedAssumption()
    return True
