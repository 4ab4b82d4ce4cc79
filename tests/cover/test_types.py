# This file is part of Falsify.
#
# Copyright the Falsify Authors.
# Individual contributors are listed in AUTHORS.rst and the git log.
#
# This Source Code Form is subject to the terms of the Mozilla Public License,
# v. 2.0. If a copy of the MPL was not distributed with this file, You can
# obtain one at https://mozilla.org/MPL/2.0/.

import typing
from decimal import Decimal

import pytest

from falsify.arbitraries import (
    Arbitrary,
    from_type,
    integers,
    just,
    register_type_arbitrary,
)
from falsify.errors import InvalidArgument

from tests.common.utils import generate, temp_registered


class Custom:
    def __init__(self, n):
        self.n = n


def test_resolves_builtin_types():
    assert all(isinstance(x, int) for x in generate(from_type(int)))
    assert set(generate(from_type(bool))) == {False, True}
    assert all(isinstance(x, Decimal) for x in generate(from_type(Decimal)))


@pytest.mark.parametrize("thing", [list[int], typing.List[int]])
def test_resolves_lists(thing):
    values = generate(from_type(thing))
    assert all(isinstance(xs, list) for xs in values)
    assert all(isinstance(x, int) for xs in values for x in xs)


def test_resolves_fixed_length_tuples():
    values = generate(from_type(tuple[int, bool]))
    assert all(len(t) == 2 for t in values)
    assert all(isinstance(a, int) and isinstance(b, bool) for a, b in values)


def test_resolves_variable_length_tuples():
    values = generate(from_type(tuple[bool, ...]))
    assert all(isinstance(t, tuple) for t in values)
    assert any(len(t) > 2 for t in values)


def test_resolves_nested_generics():
    values = generate(from_type(list[tuple[int, int]]))
    assert all(len(t) == 2 for xs in values for t in xs)


@pytest.mark.parametrize("thing", [list, tuple, Custom, 5, "int"])
def test_cannot_resolve(thing):
    with pytest.raises(InvalidArgument):
        from_type(thing)


def test_registered_arbitrary_is_used():
    with temp_registered(Custom, integers(0, 3).map(Custom)):
        values = generate(from_type(Custom))
        assert all(isinstance(c, Custom) and 0 <= c.n <= 3 for c in values)
    with pytest.raises(InvalidArgument):
        from_type(Custom)


def test_registered_function_receives_the_type():
    seen = []

    def resolve(thing):
        seen.append(thing)
        return just(Custom(0))

    with temp_registered(Custom, resolve):
        assert isinstance(from_type(Custom), Arbitrary)
    assert seen == [Custom]


def test_registration_overrides_builtin_lookup():
    with temp_registered(int, just(7)):
        assert set(generate(from_type(int))) == {7}
    assert len(set(generate(from_type(int)))) > 1


def test_registered_function_must_return_an_arbitrary():
    with temp_registered(Custom, lambda thing: 5):
        with pytest.raises(InvalidArgument):
            from_type(Custom)


@pytest.mark.parametrize(
    "custom_type, arbitrary",
    [
        (5, just(1)),
        (Custom, 5),
        (list[int], just([])),
    ],
)
def test_invalid_registrations(custom_type, arbitrary):
    with pytest.raises(InvalidArgument):
        register_type_arbitrary(custom_type, arbitrary)
