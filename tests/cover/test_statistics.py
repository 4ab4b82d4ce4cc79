# This file is part of Falsify.
#
# Copyright the Falsify Authors.
# Individual contributors are listed in AUTHORS.rst and the git log.
#
# This Source Code Form is subject to the terms of the Mozilla Public License,
# v. 2.0. If a copy of the MPL was not distributed with this file, You can
# obtain one at https://mozilla.org/MPL/2.0/.

import pytest

from falsify import CheckStatus, check, settings
from falsify.arbitraries import integers
from falsify.errors import CoverageFailure, InvalidArgument, InvalidState
from falsify.statistics import (
    collect,
    coverage,
    describe_statistics,
    label,
    statistics_for_property,
)


def test_cannot_collect_outside_a_property():
    with pytest.raises(InvalidState):
        collect("a")
    with pytest.raises(InvalidState):
        label("sizes")


def test_counts_collected_values():
    with statistics_for_property("p") as stats:
        for key in "aaab":
            collect(key)
    c = stats.collector("statistics")
    assert c.total == 4
    assert c.count("a") == 3
    assert c.percentage("a") == 75.0
    assert c.percentage("c") == 0.0
    assert c.entries() == [(("a",), 3), (("b",), 1)]


def test_keys_can_have_several_values():
    with statistics_for_property("p") as stats:
        collect("even", True)
        collect("even", True)
        collect("odd", False)
    assert stats.collector("statistics").count("even", True) == 2


def test_keys_must_have_the_same_number_of_values():
    with statistics_for_property("p"):
        collect("a")
        with pytest.raises(InvalidArgument):
            collect("a", "b")


def test_must_collect_something():
    with statistics_for_property("p"):
        with pytest.raises(InvalidArgument):
            collect()


def test_labels_are_counted_separately():
    with statistics_for_property("p") as stats:
        label("sizes").collect(3)
        collect("a")
    assert stats.collector("sizes").count(3) == 1
    assert stats.collector("sizes").count("a") == 0
    assert stats.collector("statistics").total == 1


def test_coverage_checks_pass_silently():
    with statistics_for_property("p") as stats:
        collect("a")
        coverage(lambda checker: checker.check("a").count(lambda c: c == 1))
    stats.check_coverage()


def test_failing_coverage_check_raises():
    with statistics_for_property("p") as stats:
        collect("a")
        coverage(lambda checker: checker.check("b").percentage(lambda p: p > 10))
    with pytest.raises(CoverageFailure) as err:
        stats.check_coverage()
    assert "Percentage of 'b'" in str(err.value)


def test_coverage_checks_are_registered_once():
    calls = []
    with statistics_for_property("p") as stats:
        for _ in range(10):
            collect("a")
            coverage(lambda checker: calls.append(1))
    stats.check_coverage()
    assert calls == [1]


def test_coverage_check_must_be_callable():
    with statistics_for_property("p"):
        with pytest.raises(InvalidArgument):
            coverage(5)


def test_describes_statistics():
    with statistics_for_property("p") as stats:
        for key in "aaab":
            collect(key)
    assert describe_statistics(stats) == [
        "[p] (4) statistics:",
        "    'a' :  75.00%  (3)",
        "    'b' :  25.00%  (1)",
    ]


def test_check_runs_coverage_after_all_tries():
    def falsifier(n):
        collect("even" if n % 2 == 0 else "odd")
        coverage(lambda checker: checker.check("even").count(lambda c: c > 0))
        return True

    result = check(falsifier, integers(), settings=settings(tries=100, seed=0))
    assert result.status is CheckStatus.satisfied
    counts = result.statistics.collector("statistics")
    assert counts.count("even") + counts.count("odd") == 100


def test_check_fails_on_coverage_failure():
    def falsifier(n):
        collect("even" if n % 2 == 0 else "odd")
        coverage(lambda checker: checker.check("even").percentage(lambda p: p > 99))
        return True

    result = check(falsifier, integers(0, 100), settings=settings(tries=100, seed=0))
    assert result.status is CheckStatus.falsified
    assert result.shrunk_sample is None
    assert isinstance(result.exception, CoverageFailure)
    with pytest.raises(CoverageFailure):
        result.raise_on_failure()


def test_values_collected_while_shrinking_are_not_counted():
    def falsifier(n):
        collect("tried")
        return n < 10

    result = check(falsifier, integers(0, 1000), settings=settings(seed=0))
    assert result.status is CheckStatus.falsified
    assert result.statistics.collector("statistics").count("tried") == result.tries
