# This file is part of Falsify.
#
# Copyright the Falsify Authors.
# Individual contributors are listed in AUTHORS.rst and the git log.
#
# This Source Code Form is subject to the terms of the Mozilla Public License,
# v. 2.0. If a copy of the MPL was not distributed with this file, You can
# obtain one at https://mozilla.org/MPL/2.0/.

import os

from falsify import Verbosity, _settings as settings_module, settings


def run():
    # We do a smoke test here before we mess around with settings.
    for setting_name, setting in settings_module.all_settings.items():
        value = getattr(settings(), setting_name)
        default_value = getattr(settings.default, setting_name)
        assert value == default_value == setting.default, (
            f"({value!r} == x.{setting_name}) != "
            f"(s.{setting_name} == {default_value!r})"
        )

    settings.register_profile("default", settings(tries=200))
    settings.register_profile("speedy", settings(tries=10))
    settings.register_profile("debug", settings(verbosity=Verbosity.debug))

    settings.load_profile(os.getenv("FALSIFY_PROFILE", "default"))
