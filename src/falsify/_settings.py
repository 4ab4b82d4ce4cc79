# This file is part of Falsify.
#
# Copyright the Falsify Authors.
# Individual contributors are listed in AUTHORS.rst and the git log.
#
# This Source Code Form is subject to the terms of the Mozilla Public License,
# v. 2.0. If a copy of the MPL was not distributed with this file, You can
# obtain one at https://mozilla.org/MPL/2.0/.

"""A module controlling settings for Falsify to use when checking
properties.

Either an explicit settings object can be used or the default object on
this module can be modified through profiles.
"""

import contextlib
from enum import Enum, IntEnum, unique
from typing import Any, Dict

import attr

from falsify.errors import InvalidArgument, InvalidState
from falsify.internal.reflection import get_pretty_function_description
from falsify.internal.validation import check_type, try_convert
from falsify.utils.conventions import not_set
from falsify.utils.dynamicvariables import DynamicVariable

__all__ = ["settings"]

all_settings = {}  # type: Dict[str, Setting]


class settingsProperty:
    def __init__(self, name):
        self.name = name

    def __get__(self, obj, type=None):
        if obj is None:
            return self
        try:
            return obj.__dict__[self.name]
        except KeyError:
            raise AttributeError(self.name) from None

    def __set__(self, obj, value):
        obj.__dict__[self.name] = value

    def __delete__(self, obj):
        raise AttributeError(f"Cannot delete attribute {self.name}")

    @property
    def __doc__(self):
        description = all_settings[self.name].description
        default = repr(getattr(settings.default, self.name))
        return f"{description}\n\ndefault value: ``{default}``"


default_variable = DynamicVariable(None)


class settingsMeta(type):
    @property
    def default(self):
        v = default_variable.value
        if v is not None:
            return v
        if hasattr(settings, "_current_profile"):
            settings.load_profile(settings._current_profile)
            assert default_variable.value is not None
        return default_variable.value

    def _assign_default_internal(self, value):
        default_variable.value = value

    def __setattr__(self, name, value):
        if name == "default":
            raise AttributeError(
                "Cannot assign to the property settings.default - "
                "consider using settings.load_profile instead."
            )
        elif not (isinstance(value, settingsProperty) or name.startswith("_")):
            raise AttributeError(
                f"Cannot assign falsify.settings.{name}={value!r} - the settings "
                "class is immutable.  You can change the global default "
                "settings with settings.load_profile, or use @settings(...) "
                "to decorate your falsifier instead."
            )
        return type.__setattr__(self, name, value)


class settings(metaclass=settingsMeta):
    """A settings object controls how a property is checked: how many tries
    are made, how hard a falsifying sample is shrunk and what is reported
    along the way.

    Default values are picked up from the settings.default object and
    changes made there will be picked up in newly created settings.
    """

    _WHITELISTED_REAL_PROPERTIES = ["_construction_complete"]
    __definitions_are_locked = False
    _profiles = {}  # type: dict
    __module__ = "falsify"

    def __getattr__(self, name):
        if name in all_settings:
            return all_settings[name].default
        raise AttributeError(f"settings has no attribute {name}")

    def __init__(self, parent: "settings" = None, **kwargs: Any) -> None:
        if parent is not None and not isinstance(parent, settings):
            raise InvalidArgument(
                f"Invalid argument: parent={parent!r} is not a settings instance"
            )
        self._construction_complete = False
        defaults = parent or settings.default
        for setting in all_settings.values():
            if kwargs.get(setting.name, not_set) is not_set:
                if defaults is not None:
                    kwargs[setting.name] = getattr(defaults, setting.name)
                else:
                    kwargs[setting.name] = setting.default
            elif setting.validator:
                kwargs[setting.name] = setting.validator(kwargs[setting.name])
        for name, value in kwargs.items():
            if name not in all_settings:
                raise InvalidArgument(
                    f"Invalid argument: {name!r} is not a valid setting"
                )
            setattr(self, name, value)
        self._construction_complete = True

    def __call__(self, falsifier):
        """Make the settings object (self) an attribute of the falsifier.

        :func:`falsify.check` looks the settings up on the falsifier when no
        explicit settings are passed.
        """
        if not callable(falsifier):
            raise InvalidArgument(
                "settings objects can be called as a decorator, but decorated "
                f"falsifier={falsifier!r} is not callable."
            )
        if hasattr(falsifier, "_falsify_internal_use_settings"):
            raise InvalidArgument(
                f"{get_pretty_function_description(falsifier)} has already been "
                "decorated with a settings object."
                f"\n    Previous:  {falsifier._falsify_internal_use_settings!r}"
                f"\n    This:  {self!r}"
            )
        falsifier._falsify_internal_use_settings = self
        return falsifier

    @classmethod
    def _define_setting(cls, name, description, default, options=None, validator=None):
        """Add a new setting.

        - name is the name of the property that will be used to access the
          setting. This must be a valid python identifier.
        - description will appear in the property's docstring
        - default is the default value.
        - exactly one of options (the allowed values) and validator (a
          function normalising and checking a value) should be passed.
        """
        if settings.__definitions_are_locked:
            raise InvalidState(
                "settings have been locked and may no longer be defined."
            )
        if options is not None:
            options = tuple(options)
            assert default in options
        else:
            assert validator is not None

        all_settings[name] = Setting(
            name=name,
            description=description.strip(),
            default=default,
            options=options,
            validator=validator,
        )
        setattr(settings, name, settingsProperty(name))

    @classmethod
    def lock_further_definitions(cls):
        settings.__definitions_are_locked = True

    def __setattr__(self, name, value):
        if name in settings._WHITELISTED_REAL_PROPERTIES:
            return object.__setattr__(self, name, value)
        elif name in all_settings:
            if self._construction_complete:
                raise AttributeError(
                    "settings objects are immutable and may not be assigned to"
                    " after construction."
                )
            setting = all_settings[name]
            if setting.options is not None and value not in setting.options:
                raise InvalidArgument(
                    f"Invalid {name}, {value!r}. Valid options: {setting.options!r}"
                )
            return object.__setattr__(self, name, value)
        else:
            raise AttributeError(f"No such setting {name}")

    def __repr__(self):
        bits = (f"{name}={getattr(self, name)!r}" for name in all_settings)
        return "settings({})".format(", ".join(sorted(bits)))

    def show_changed(self):
        bits = []
        for name, setting in all_settings.items():
            value = getattr(self, name)
            if value != setting.default:
                bits.append(f"{name}={value!r}")
        return ", ".join(sorted(bits, key=len))

    @staticmethod
    def register_profile(name: str, parent: "settings" = None, **kwargs: Any) -> None:
        """Registers a collection of values to be used as a settings profile.

        Settings profiles can be loaded by name - for example, you might
        create a 'fast' profile which makes fewer tries, keep the 'default'
        profile, and create a 'ci' profile that shrinks without bounds.

        The arguments to this method are exactly as for
        :class:`~falsify.settings`: optional ``parent`` settings, and
        keyword arguments for each setting that will be set differently to
        parent (or settings.default, if parent is None).
        """
        check_type(str, name, "name")
        settings._profiles[name] = settings(parent=parent, **kwargs)

    @staticmethod
    def get_profile(name: str) -> "settings":
        """Return the profile with the given name."""
        check_type(str, name, "name")
        try:
            return settings._profiles[name]
        except KeyError:
            raise InvalidArgument(f"Profile {name!r} is not registered") from None

    @staticmethod
    def load_profile(name: str) -> None:
        """Loads in the settings defined in the profile provided.

        If the profile does not exist, InvalidArgument will be raised.
        Any setting not defined in the profile will be the library
        defined default for that setting.
        """
        check_type(str, name, "name")
        settings._current_profile = name
        settings._assign_default_internal(settings.get_profile(name))


@contextlib.contextmanager
def local_settings(s):
    with default_variable.with_value(s):
        yield s


@attr.s()
class Setting:
    name = attr.ib()
    description = attr.ib()
    default = attr.ib()
    options = attr.ib()
    validator = attr.ib()


def _positive_int_validator(name):
    def validate(x):
        check_type(int, x, name=name)
        if isinstance(x, bool) or x < 1:
            raise InvalidArgument(f"{name}={x!r} should be at least one.")
        return x

    validate.__name__ = f"_validate_{name}"
    return validate


settings._define_setting(
    "tries",
    default=1000,
    validator=_positive_int_validator("tries"),
    description="""
Once this many samples have been tried without finding a falsifying one,
the property is considered satisfied.
""",
)


settings._define_setting(
    "max_discard_ratio",
    default=5,
    validator=_positive_int_validator("max_discard_ratio"),
    description="""
The maximum ratio of rejected samples (through ``assume`` or ``reject``) to
checked samples before the run is aborted as exhausted.
""",
)


def _validate_gen_size(x):
    if x is None:
        return x
    return _positive_int_validator("gen_size")(x)


settings._define_setting(
    "gen_size",
    default=None,
    validator=_validate_gen_size,
    description="""
The size hint handed to every arbitrary's generator.  ``None`` means the
number of tries is used.
""",
)


def _validate_seed(x):
    if x is None:
        return x
    check_type(int, x, name="seed")
    return x


settings._define_setting(
    "seed",
    default=None,
    validator=_validate_seed,
    description="""
Seed for the random source of a run.  With ``None`` a fresh seed is chosen
for every run and reported along with a falsifying sample.
""",
)


@unique
class ShrinkingMode(Enum):
    """How hard a falsifying sample is shrunk."""

    off = "off"
    """Report the original falsifying sample without shrinking it."""

    bounded = "bounded"
    """Shrink until ``max_shrink_attempts`` or ``max_shrinking_seconds``
    is hit."""

    full = "full"
    """Shrink until no candidate falsifies any more."""

    def __repr__(self):
        return f"ShrinkingMode.{self.name}"


settings._define_setting(
    "shrinking",
    options=tuple(ShrinkingMode),
    default=ShrinkingMode.bounded,
    description="Control how a falsifying sample is shrunk.",
)


settings._define_setting(
    "max_shrink_attempts",
    default=10000,
    validator=_positive_int_validator("max_shrink_attempts"),
    description="""
With bounded shrinking, stop after the falsifier has been called this many
times while shrinking.
""",
)


def _validate_max_shrinking_seconds(x):
    if isinstance(x, bool) or not isinstance(x, (int, float)) or x <= 0:
        raise InvalidArgument(
            f"max_shrinking_seconds={x!r} must be a positive number of seconds."
        )
    return x


settings._define_setting(
    "max_shrinking_seconds",
    default=10,
    validator=_validate_max_shrinking_seconds,
    description="""
With bounded shrinking, stop after shrinking has taken this many seconds.
""",
)


@unique
class EdgeCasesMode(Enum):
    mixin = "mixin"
    first = "first"
    none = "none"

    def __repr__(self):
        return f"EdgeCasesMode.{self.name}"


settings._define_setting(
    "edge_cases",
    options=tuple(EdgeCasesMode),
    default=EdgeCasesMode.mixin,
    description="""
How edge cases of the arbitraries are used: mixed in with a small
probability per sample, all tried first, or not used at all.
""",
)


@unique
class Verbosity(IntEnum):
    quiet = 0
    normal = 1
    verbose = 2
    debug = 3

    def __repr__(self):
        return f"Verbosity.{self.name}"


settings._define_setting(
    "verbosity",
    options=tuple(Verbosity),
    default=Verbosity.normal,
    description="Control the verbosity level of Falsify messages",
)


@unique
class Reporting(Enum):
    generated = "generated"
    """Report every generated sample."""

    falsified = "falsified"
    """Report every sample accepted as a shrinking step."""

    def __repr__(self):
        return f"Reporting.{self.name}"


def _validate_reporting(reporting):
    reporting = try_convert(tuple, reporting, "reporting")
    for r in reporting:
        if not isinstance(r, Reporting):
            raise InvalidArgument(
                f"Non-Reporting value {r!r} of type {type(r).__name__} is "
                "invalid in reporting."
            )
    return reporting


settings._define_setting(
    "reporting",
    default=(),
    validator=_validate_reporting,
    description="A collection of :class:`~falsify.Reporting` items to enable.",
)

settings.lock_further_definitions()

settings.register_profile("default", settings())
settings.load_profile("default")
assert settings.default is not None
