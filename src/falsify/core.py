# This file is part of Falsify.
#
# Copyright the Falsify Authors.
# Individual contributors are listed in AUTHORS.rst and the git log.
#
# This Source Code Form is subject to the terms of the Mozilla Public License,
# v. 2.0. If a copy of the MPL was not distributed with this file, You can
# obtain one at https://mozilla.org/MPL/2.0/.

"""This module provides the core primitive of Falsify, the check function
that tries a property against generated samples and shrinks the first
falsifying one it finds."""

import itertools
from enum import Enum, unique
from random import Random

import attr

from falsify._settings import (
    EdgeCasesMode,
    Reporting,
    local_settings,
    settings as Settings,
)
from falsify.errors import (
    CoverageFailure,
    GenerationExhausted,
    PropertyFalsified,
    UnsatisfiedAssumption,
)
from falsify.internal.reflection import get_pretty_function_description
from falsify.internal.shrinking.property import PropertyShrinker
from falsify.internal.validation import check_arbitrary
from falsify.reporting import debug_report, report, verbose_report
from falsify.statistics import (
    PropertyStatistics,
    collector,
    describe_statistics,
    statistics_for_property,
)

# Probability with which a parameter is replaced by one of its edge cases
# when edge cases are mixed in.
EDGE_CASE_PROBABILITY = 0.05

_global_random = Random()


@unique
class CheckStatus(Enum):
    satisfied = "satisfied"
    falsified = "falsified"
    exhausted = "exhausted"

    def __repr__(self):
        return f"CheckStatus.{self.name}"


@attr.s(frozen=True)
class CheckResult:
    """The outcome of checking a property.

    ``tries`` counts all generated samples and ``checks`` the ones that were
    not rejected by ``assume``. For a falsified property,
    ``original_sample`` is the first falsifying sample and
    ``shrunk_sample`` the result of shrinking it.
    """

    name = attr.ib()
    status = attr.ib()
    tries = attr.ib()
    checks = attr.ib()
    seed = attr.ib()
    original_sample = attr.ib(default=None)
    shrunk_sample = attr.ib(default=None)
    shrinking_steps = attr.ib(default=0)
    exception = attr.ib(default=None)
    statistics = attr.ib(default=None, repr=False)

    @property
    def satisfied(self):
        return self.status is CheckStatus.satisfied

    def raise_on_failure(self):
        """Raises an exception unless the property was satisfied, and returns
        self otherwise."""
        if self.status is CheckStatus.satisfied:
            return self
        if self.status is CheckStatus.exhausted:
            if isinstance(self.exception, GenerationExhausted):
                raise self.exception
            raise GenerationExhausted(
                f"Property {self.name} was exhausted after {self.tries} tries "
                f"with only {self.checks} checks"
            )
        if isinstance(self.exception, CoverageFailure) and self.shrunk_sample is None:
            raise self.exception
        raise PropertyFalsified(
            f"Property {self.name} was falsified by "
            f"{format_sample(self.shrunk_sample)} after {self.tries} tries "
            f"(seed={self.seed!r})",
            self,
        ) from self.exception


def format_sample(sample):
    return "({})".format(", ".join(map(repr, sample)))


def evaluate(falsifier, values):
    """Returns ``(status, exception)`` where status is None for an invalid
    sample, True when the property holds and False when it is falsified."""
    try:
        result = falsifier(*values)
    except UnsatisfiedAssumption:
        return None, None
    except GenerationExhausted:
        raise
    except Exception as e:
        return False, e
    return (result is None or bool(result)), None


class SampleSource:
    """Draws one shrinkable per arbitrary for every try, mixing in edge
    cases according to the ``edge_cases`` setting."""

    def __init__(self, arbitraries, gen_size, mode, random, tries):
        self.generators = [a.generator(gen_size) for a in arbitraries]
        self.edge_cases = [a.edge_cases() for a in arbitraries]
        self.mode = mode
        self.random = random
        if mode is EdgeCasesMode.first and all(self.edge_cases):
            self.pending = itertools.islice(itertools.product(*self.edge_cases), tries)
        else:
            self.pending = iter(())

    def next(self):
        combination = next(self.pending, None)
        if combination is not None:
            return list(combination)
        sample = []
        for generator, edge_cases in zip(self.generators, self.edge_cases):
            if (
                self.mode is EdgeCasesMode.mixin
                and edge_cases
                and self.random.random() < EDGE_CASE_PROBABILITY
            ):
                sample.append(self.random.choice(edge_cases))
            else:
                sample.append(generator.next(self.random))
        return sample


def check(falsifier, *arbitraries, settings=None, name=None):
    """Checks the property ``falsifier`` against samples drawn from
    ``arbitraries`` and returns a :class:`CheckResult`.

    ``falsifier`` is called with one value per arbitrary. Returning ``False``
    or raising an exception falsifies the property; returning anything else
    means it holds for that sample. The first falsifying sample is shrunk
    according to the ``shrinking`` setting.

    Settings are taken from the ``settings`` argument, or from a
    ``@settings(...)`` decorator on the falsifier, or from the current
    default settings.
    """
    for i, arbitrary in enumerate(arbitraries):
        check_arbitrary(arbitrary, f"arbitraries[{i}]")
    if settings is None:
        settings = getattr(falsifier, "_falsify_internal_use_settings", None)
    if settings is None:
        settings = Settings.default
    if name is None:
        name = get_pretty_function_description(falsifier)

    seed = settings.seed
    if seed is None:
        seed = _global_random.getrandbits(64)
    random = Random(seed)
    gen_size = settings.gen_size or settings.tries

    with local_settings(settings):
        with statistics_for_property(name) as stats:
            result = run(
                falsifier, arbitraries, settings, name, seed, random, gen_size, stats
            )
        if result.status is CheckStatus.falsified and result.shrunk_sample is not None:
            report(f"Falsifying sample: {format_sample(result.shrunk_sample)}")
            if settings.seed is None:
                reproduce = Settings(settings, seed=seed)
                report(
                    f"You can pass settings({reproduce.show_changed()}) to "
                    "reproduce this failure."
                )
        for line in describe_statistics(stats):
            verbose_report(line)
    return result


def run(falsifier, arbitraries, settings, name, seed, random, gen_size, stats):
    def make_result(status, **kwargs):
        return CheckResult(
            name=name,
            status=status,
            tries=tries,
            checks=checks,
            seed=seed,
            statistics=stats,
            **kwargs,
        )

    tries = 0
    checks = 0
    try:
        source = SampleSource(
            arbitraries, gen_size, settings.edge_cases, random, settings.tries
        )
        while tries < settings.tries:
            sample = source.next()
            tries += 1
            values = [s.value for s in sample]
            if Reporting.generated in settings.reporting:
                report(f"Generated sample {tries}: {format_sample(values)}")
            else:
                debug_report(lambda: f"Try {tries}: {format_sample(values)}")
            holds, exception = evaluate(falsifier, values)
            if holds is None:
                continue
            checks += 1
            if not holds:
                return shrink_failure(
                    falsifier, sample, exception, settings, name, make_result
                )
    except GenerationExhausted as e:
        return make_result(CheckStatus.exhausted, exception=e)

    if checks == 0 or (tries - checks) / checks > settings.max_discard_ratio:
        return make_result(CheckStatus.exhausted)
    try:
        stats.check_coverage()
    except CoverageFailure as e:
        return make_result(CheckStatus.falsified, exception=e)
    return make_result(CheckStatus.satisfied)


def shrink_failure(falsifier, sample, exception, settings, name, make_result):
    original = [s.value for s in sample]
    verbose_report(
        lambda: f"Trying to shrink falsifying sample {format_sample(original)}"
    )
    shrinker = PropertyShrinker(
        sample, settings.shrinking, reporting=settings.reporting, settings=settings
    )
    # Values collected while shrinking do not count towards the statistics.
    with collector.with_value(PropertyStatistics(name)):
        shrunk = shrinker.shrink(lambda values: falsifier(*values), exception)
    return make_result(
        CheckStatus.falsified,
        original_sample=original,
        shrunk_sample=shrunk.values,
        shrinking_steps=shrunk.steps,
        exception=shrunk.exception,
    )
