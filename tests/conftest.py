# This file is part of Falsify.
#
# Copyright the Falsify Authors.
# Individual contributors are listed in AUTHORS.rst and the git log.
#
# This Source Code Form is subject to the terms of the Mozilla Public License,
# v. 2.0. If a copy of the MPL was not distributed with this file, You can
# obtain one at https://mozilla.org/MPL/2.0/.

import gc

import pytest

from falsify import settings

from tests.common.setup import run

run()


@pytest.fixture(scope="function", autouse=True)
def gc_before_each_test():
    gc.collect()


@pytest.fixture(scope="function", autouse=True)
def _restore_settings_profile():
    """Tests that load another profile must not leak it into later tests."""
    profile = settings._current_profile
    yield
    settings.load_profile(profile)
