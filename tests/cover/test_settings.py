# This file is part of Falsify.
#
# Copyright the Falsify Authors.
# Individual contributors are listed in AUTHORS.rst and the git log.
#
# This Source Code Form is subject to the terms of the Mozilla Public License,
# v. 2.0. If a copy of the MPL was not distributed with this file, You can
# obtain one at https://mozilla.org/MPL/2.0/.

import pytest

from falsify import EdgeCasesMode, Reporting, ShrinkingMode, Verbosity, settings
from falsify._settings import all_settings, local_settings
from falsify.errors import InvalidArgument, InvalidState


def test_has_docstrings():
    assert settings.tries.__doc__
    assert "default value" in settings.shrinking.__doc__


def test_inherits_from_default_profile():
    assert settings().tries == settings.default.tries


def test_can_set_values():
    x = settings(tries=5, shrinking=ShrinkingMode.full)
    assert x.tries == 5
    assert x.shrinking is ShrinkingMode.full


def test_inherits_from_parent():
    parent = settings(tries=5)
    child = settings(parent, seed=3)
    assert child.tries == 5
    assert child.seed == 3


@pytest.mark.parametrize(
    "kwargs",
    [
        {"tries": 0},
        {"tries": True},
        {"tries": 1.5},
        {"max_discard_ratio": -1},
        {"gen_size": 0},
        {"seed": "1"},
        {"shrinking": "full"},
        {"max_shrink_attempts": 0},
        {"max_shrinking_seconds": 0},
        {"max_shrinking_seconds": True},
        {"edge_cases": None},
        {"verbosity": 5},
        {"reporting": ["generated"]},
        {"reporting": 5},
        {"no_such_setting": 1},
    ],
)
def test_rejects_invalid_values(kwargs):
    with pytest.raises(InvalidArgument):
        settings(**kwargs)


def test_rejects_non_settings_parent():
    with pytest.raises(InvalidArgument):
        settings(5)


def test_reporting_is_normalised_to_a_tuple():
    assert settings(reporting=[Reporting.generated]).reporting == (Reporting.generated,)


def test_optional_settings_accept_none():
    x = settings(gen_size=None, seed=None)
    assert x.gen_size is None
    assert x.seed is None


def test_settings_are_immutable():
    x = settings()
    with pytest.raises(AttributeError):
        x.tries = 10
    with pytest.raises(AttributeError):
        del x.tries


def test_cannot_assign_default():
    with pytest.raises(AttributeError):
        settings.default = settings()


def test_cannot_set_class_attributes():
    with pytest.raises(AttributeError):
        settings.tries = 10


def test_cannot_define_settings_once_locked():
    with pytest.raises(InvalidState):
        settings._define_setting("hi", "a setting", default=1, options=(1,))


def test_repr_lists_every_setting():
    r = repr(settings())
    for name in all_settings:
        assert f"{name}=" in r


def test_show_changed():
    assert settings(tries=7).show_changed() == "tries=7"


def test_can_register_and_load_profiles():
    settings.register_profile("fast", settings(tries=10), edge_cases=EdgeCasesMode.none)
    assert settings.get_profile("fast").tries == 10
    settings.load_profile("fast")
    assert settings.default.tries == 10
    assert settings.default.edge_cases is EdgeCasesMode.none
    assert settings().tries == 10


def test_loading_unknown_profile_fails():
    with pytest.raises(InvalidArgument):
        settings.load_profile("does not exist")
    with pytest.raises(InvalidArgument):
        settings.get_profile("does not exist")


def test_profile_names_must_be_strings():
    with pytest.raises(InvalidArgument):
        settings.register_profile(5)


def test_local_settings_replace_default():
    with local_settings(settings(verbosity=Verbosity.quiet)):
        assert settings.default.verbosity is Verbosity.quiet
    assert settings.default.verbosity is not Verbosity.quiet


def test_settings_decorate_falsifiers():
    @settings(tries=3)
    def falsifier(x):
        return True

    assert falsifier._falsify_internal_use_settings.tries == 3


def test_cannot_decorate_twice():
    with pytest.raises(InvalidArgument):

        @settings(tries=3)
        @settings(tries=4)
        def falsifier(x):
            return True


def test_can_only_decorate_callables():
    with pytest.raises(InvalidArgument):
        settings()(5)
