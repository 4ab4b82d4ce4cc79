# This file is part of Falsify.
#
# Copyright the Falsify Authors.
# Individual contributors are listed in AUTHORS.rst and the git log.
#
# This Source Code Form is subject to the terms of the Mozilla Public License,
# v. 2.0. If a copy of the MPL was not distributed with this file, You can
# obtain one at https://mozilla.org/MPL/2.0/.

import threading

import pytest

from falsify import assume, reject
from falsify.errors import UnsatisfiedAssumption
from falsify.utils.dynamicvariables import DynamicVariable


def test_assume_passes_true_conditions():
    assert assume(1 + 1 == 2) is True


def test_assume_rejects_false_conditions():
    with pytest.raises(UnsatisfiedAssumption):
        assume([])


def test_reject_always_rejects():
    with pytest.raises(UnsatisfiedAssumption):
        reject()


def test_dynamic_variable_restores_value():
    d = DynamicVariable(1)
    with d.with_value(2):
        with d.with_value(3):
            assert d.value == 3
        assert d.value == 2
    assert d.value == 1


def test_dynamic_variable_is_thread_local():
    d = DynamicVariable(1)
    seen = []
    with d.with_value(2):
        t = threading.Thread(target=lambda: seen.append(d.value))
        t.start()
        t.join()
    assert seen == [1]
