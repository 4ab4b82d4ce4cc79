# This file is part of Falsify.
#
# Copyright the Falsify Authors.
# Individual contributors are listed in AUTHORS.rst and the git log.
#
# This Source Code Form is subject to the terms of the Mozilla Public License,
# v. 2.0. If a copy of the MPL was not distributed with this file, You can
# obtain one at https://mozilla.org/MPL/2.0/.

"""An explicit registry mapping types to the arbitraries that generate
their instances.

Lookups happen when :func:`from_type` is called, so registrations made
after an arbitrary was built do not change that arbitrary.
"""

import decimal
import typing

from falsify.arbitraries._internal.arbitraries import Arbitrary
from falsify.arbitraries._internal.collections import lists, tuples
from falsify.arbitraries._internal.misc import booleans
from falsify.arbitraries._internal.numbers import decimals, integers
from falsify.errors import InvalidArgument
from falsify.internal.reflection import get_pretty_function_description


def type_arguments(thing):
    return typing.get_args(thing)


def origin_of(thing):
    """The class a (possibly parametrised) generic type stands for."""
    return typing.get_origin(thing) or thing


def is_a_type(thing):
    return isinstance(thing, type) or typing.get_origin(thing) is not None


def resolve_list(thing):
    args = type_arguments(thing)
    if not args:
        raise InvalidArgument(
            f"Cannot resolve {thing!r}: a list type needs its element type, "
            "e.g. list[int]"
        )
    return lists(from_type(args[0]))


def resolve_tuple(thing):
    args = type_arguments(thing)
    if len(args) == 2 and args[1] is Ellipsis:
        return lists(from_type(args[0])).map(tuple)
    if not args:
        raise InvalidArgument(
            f"Cannot resolve {thing!r}: a tuple type needs its element types, "
            "e.g. tuple[int, bool] or tuple[int, ...]"
        )
    if args == ((),):
        return tuples()
    return tuples(*map(from_type, args))


_global_type_lookup = {
    int: lambda thing: integers(),
    bool: lambda thing: booleans(),
    decimal.Decimal: lambda thing: decimals(),
    list: resolve_list,
    tuple: resolve_tuple,
}


def register_type_arbitrary(custom_type, arbitrary):
    """Add an entry to the global type-to-arbitrary lookup used by
    :func:`from_type`.

    ``arbitrary`` may be an arbitrary, or a function that takes a type and
    returns an arbitrary (useful for generic types, which are registered
    under their unparametrised form, e.g. ``list``).
    """
    if not is_a_type(custom_type):
        raise InvalidArgument(f"custom_type={custom_type!r} must be a type")
    if not (isinstance(arbitrary, Arbitrary) or callable(arbitrary)):
        raise InvalidArgument(
            f"arbitrary={arbitrary!r} must be an Arbitrary, or a function that "
            "takes a type and returns a specific Arbitrary"
        )
    if type_arguments(custom_type):
        raise InvalidArgument(
            f"Cannot register {custom_type!r}, because it has type arguments. "
            f"Register a function for {origin_of(custom_type)!r} instead, which "
            "can inspect the type arguments and return an arbitrary."
        )
    _global_type_lookup[custom_type] = arbitrary


def from_type(thing):
    """Looks up the arbitrary registered for ``thing``.

    Parametrised generics like ``list[int]`` are resolved through the entry
    for their origin type. Unknown types raise
    :class:`~falsify.errors.InvalidArgument`.
    """
    if not is_a_type(thing):
        raise InvalidArgument(f"thing={thing!r} must be a type")
    try:
        entry = _global_type_lookup[origin_of(thing)]
    except KeyError:
        raise InvalidArgument(
            f"No arbitrary is registered for {thing!r}. Use "
            "register_type_arbitrary to add one."
        ) from None
    if isinstance(entry, Arbitrary):
        return entry
    result = entry(thing)
    if not isinstance(result, Arbitrary):
        raise InvalidArgument(
            f"{get_pretty_function_description(entry)} returned {result!r} for "
            f"{thing!r}, which is not an Arbitrary"
        )
    return result
