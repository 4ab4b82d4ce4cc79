# This file is part of Falsify.
#
# Copyright the Falsify Authors.
# Individual contributors are listed in AUTHORS.rst and the git log.
#
# This Source Code Form is subject to the terms of the Mozilla Public License,
# v. 2.0. If a copy of the MPL was not distributed with this file, You can
# obtain one at https://mozilla.org/MPL/2.0/.

"""Collecting statistics about generated values, and checking that the
values covered what a property is meant to cover.

Call :func:`collect` from a falsifier once per try::

    def falsifier(n):
        collect("even" if n % 2 == 0 else "odd")
        coverage(lambda checker: checker.check("even").percentage(lambda p: p > 30))
        return abs(n) >= 0

The coverage check is registered once and evaluated after all tries have
completed, against the counts of the whole run.
"""

from collections import Counter
from contextlib import contextmanager

from falsify.errors import CoverageFailure, InvalidArgument, InvalidState
from falsify.internal.reflection import get_pretty_function_description
from falsify.utils.dynamicvariables import DynamicVariable

DEFAULT_LABEL = "statistics"

collector = DynamicVariable(None)


class StatisticsCollector:
    """Counts the keys collected under one label during a property run."""

    def __init__(self, label):
        self.label = label
        self.counts = Counter()
        self.key_size = None
        self.coverage_checks = {}

    def collect(self, *values):
        if not values:
            raise InvalidArgument("collect() needs at least one value")
        if self.key_size is None:
            self.key_size = len(values)
        elif len(values) != self.key_size:
            raise InvalidArgument(
                f"Collected {values!r} under label {self.label!r}, but earlier "
                f"keys had {self.key_size} value(s). All keys collected under one "
                "label must have the same number of values."
            )
        self.counts[values] += 1

    def coverage(self, check):
        """Registers ``check`` to run once all tries have completed.

        Registering the same function again, or a new closure over the same
        code, has no effect.
        """
        if not callable(check):
            raise InvalidArgument(f"check={check!r} must be callable")
        key = getattr(check, "__code__", check)
        self.coverage_checks.setdefault(key, check)

    @property
    def total(self):
        return sum(self.counts.values())

    def count(self, *key):
        return self.counts[key]

    def percentage(self, *key):
        total = self.total
        if total == 0:
            return 0.0
        return 100.0 * self.counts[key] / total

    def entries(self):
        """Returns ``(key, count)`` pairs, most frequent first."""
        return sorted(self.counts.items(), key=lambda kv: (-kv[1], repr(kv[0])))

    def check_coverage(self):
        checker = CoverageChecker(self)
        for check in self.coverage_checks.values():
            check(checker)


class CoverageChecker:
    """Passed to coverage checks to state what should have been covered."""

    def __init__(self, collector):
        self.collector = collector

    def check(self, *key):
        return Coverage(self.collector, key)


class Coverage:
    def __init__(self, collector, key):
        self.collector = collector
        self.key = key

    def describe_key(self):
        return repr(self.key[0]) if len(self.key) == 1 else repr(self.key)

    def count(self, predicate):
        """Fails unless predicate(count) holds for the number of times the
        key was collected."""
        count = self.collector.count(*self.key)
        if not predicate(count):
            raise CoverageFailure(
                f"Count of {self.describe_key()} under label "
                f"{self.collector.label!r} is {count}, which does not satisfy "
                f"{get_pretty_function_description(predicate)}"
            )
        return self

    def percentage(self, predicate):
        """Fails unless predicate(percentage) holds, where percentage is in
        the range 0 to 100."""
        percentage = self.collector.percentage(*self.key)
        if not predicate(percentage):
            raise CoverageFailure(
                f"Percentage of {self.describe_key()} under label "
                f"{self.collector.label!r} is {percentage:.2f}%, which does not "
                f"satisfy {get_pretty_function_description(predicate)}"
            )
        return self


class PropertyStatistics:
    """All statistics of a single property run."""

    def __init__(self, name):
        self.name = name
        self.collectors = {}

    def collector(self, label):
        try:
            return self.collectors[label]
        except KeyError:
            result = StatisticsCollector(label)
            self.collectors[label] = result
            return result

    def check_coverage(self):
        for c in list(self.collectors.values()):
            c.check_coverage()


@contextmanager
def statistics_for_property(name):
    """Makes a fresh :class:`PropertyStatistics` current for the duration
    of the block."""
    stats = PropertyStatistics(name)
    with collector.with_value(stats):
        yield stats


def current_statistics():
    stats = collector.value
    if stats is None:
        raise InvalidState(
            "Statistics can only be collected while a property is checked"
        )
    return stats


def label(name):
    """Returns the collector for ``name`` in the current property, e.g.
    ``label("sizes").collect(len(xs))``."""
    return current_statistics().collector(name)


def collect(*values):
    """Records one occurrence of ``values`` in the current property."""
    current_statistics().collector(DEFAULT_LABEL).collect(*values)


def coverage(check):
    """Registers a coverage check for the default statistics of the current
    property."""
    current_statistics().collector(DEFAULT_LABEL).coverage(check)


def describe_statistics(stats):
    """Return a list of lines describing the collected statistics of a
    property run."""
    lines = []
    for c in stats.collectors.values():
        if not c.counts:
            continue
        entries = c.entries()
        keys = [" ".join(map(repr, key)) for key, _ in entries]
        width = max(map(len, keys))
        header = f"[{stats.name}] " if stats.name else ""
        lines.append(f"{header}({c.total}) {c.label}:")
        for key, (_, count) in zip(keys, entries):
            lines.append(
                f"    {key:<{width}} : {100.0 * count / c.total:6.2f}%  ({count})"
            )
    return lines
