# This file is part of Falsify.
#
# Copyright the Falsify Authors.
# Individual contributors are listed in AUTHORS.rst and the git log.
#
# This Source Code Form is subject to the terms of the Mozilla Public License,
# v. 2.0. If a copy of the MPL was not distributed with this file, You can
# obtain one at https://mozilla.org/MPL/2.0/.

import contextlib
import sys
from io import StringIO
from random import Random

from falsify import PropertyShrinker, ShrinkingMode
from falsify.arbitraries import register_type_arbitrary
from falsify.arbitraries._internal.types import _global_type_lookup
from falsify.errors import UnsatisfiedAssumption
from falsify.internal.shrinking.distance import ShrinkingDistance
from falsify.internal.shrinking.shrinkable import Shrinkable
from falsify.reporting import default, silent, with_reporter


@contextlib.contextmanager
def capture_out():
    old_out = sys.stdout
    try:
        new_out = StringIO()
        sys.stdout = new_out
        with with_reporter(default):
            yield new_out
    finally:
        sys.stdout = old_out


@contextlib.contextmanager
def capture_reports():
    reports = []
    with with_reporter(reports.append):
        yield reports


class OneStepShrinkable(Shrinkable):
    """An integer that can only shrink by one at a time, towards zero."""

    def __init__(self, value):
        self.__value = value

    @property
    def value(self):
        return self.__value

    def shrink(self):
        if self.__value > 0:
            yield OneStepShrinkable(self.__value - 1)

    def distance(self):
        return ShrinkingDistance.of(self.__value)


class BrokenShrinkable(Shrinkable):
    """Offers a candidate that is not any closer than itself."""

    @property
    def value(self):
        return 1

    def shrink(self):
        yield BrokenShrinkable()

    def distance(self):
        return ShrinkingDistance.of(1)


def holds(falsifier, value):
    try:
        result = falsifier(value)
    except UnsatisfiedAssumption:
        return True
    except Exception:
        return False
    return result is None or bool(result)


def falsify_then_shrink(arbitrary, random, falsifier, gen_size=1000):
    """Generates values until one falsifies ``falsifier`` and returns the
    result of fully shrinking it."""
    generator = arbitrary.generator(gen_size)
    for _ in range(10000):
        shrinkable = generator.next(random)
        if not holds(falsifier, shrinkable.value):
            break
    else:
        raise AssertionError(f"Could not falsify with any value of {arbitrary!r}")
    shrinker = PropertyShrinker([shrinkable], ShrinkingMode.full, reporter=silent)
    result = shrinker.shrink(lambda values: falsifier(*values), None)
    return result.values[0]


def minimal(arbitrary, condition=lambda x: True, seed=0):
    """The simplest value of ``arbitrary`` satisfying ``condition`` that
    shrinking finds."""
    return falsify_then_shrink(arbitrary, Random(seed), lambda x: not condition(x))


def generate(arbitrary, n=100, seed=0, gen_size=1000):
    generator = arbitrary.generator(gen_size)
    random = Random(seed)
    return [generator.next(random).value for _ in range(n)]


def all_candidates(shrinkable):
    return [c.value for c in shrinkable.shrink()]


@contextlib.contextmanager
def temp_registered(type_, arbitrary_or_factory):
    """Register an arbitrary for the duration of a block, restoring any
    previous registration for that type afterwards."""
    prev = _global_type_lookup.get(type_)
    register_type_arbitrary(type_, arbitrary_or_factory)
    try:
        yield
    finally:
        del _global_type_lookup[type_]
        if prev is not None:
            register_type_arbitrary(type_, prev)
