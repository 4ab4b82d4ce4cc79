# This file is part of Falsify.
#
# Copyright the Falsify Authors.
# Individual contributors are listed in AUTHORS.rst and the git log.
#
# This Source Code Form is subject to the terms of the Mozilla Public License,
# v. 2.0. If a copy of the MPL was not distributed with this file, You can
# obtain one at https://mozilla.org/MPL/2.0/.

import time

import attr

from falsify._settings import Reporting, ShrinkingMode, settings as Settings
from falsify.errors import (
    GenerationExhausted,
    ShrinkingInvariantViolated,
    UnsatisfiedAssumption,
)
from falsify.reporting import report


@attr.s(frozen=True)
class PropertyShrinkingResult:
    """The outcome of shrinking a falsifying sample.

    ``exception`` is the exception raised by the last accepted evaluation,
    None if that evaluation returned False, or the original exception if no
    shrinking step was accepted.
    """

    values = attr.ib()
    steps = attr.ib()
    exception = attr.ib()


class StopShrinking(Exception):
    """Raised internally when bounded shrinking runs out of budget."""


class PropertyShrinker:
    """Minimizes a falsifying list of parameter shrinkables.

    Parameters are shrunk one at a time, left to right, while the others
    stay at their current values. For each parameter the shrinker walks its
    candidates in order and accepts the first one that still falsifies the
    property, then continues from the candidate's own candidates. Passes
    over all parameters are repeated until a whole pass accepts nothing.
    """

    def __init__(self, parameters, mode, reporter=None, reporting=(), settings=None):
        self.parameters = list(parameters)
        self.mode = mode
        self.reporter = report if reporter is None else reporter
        self.reporting = tuple(reporting)
        self.settings = Settings.default if settings is None else settings
        self.attempts = 0
        self.start_time = None

    def shrink(self, falsifier, original_exception):
        if self.mode is ShrinkingMode.off:
            return PropertyShrinkingResult(
                values=[p.value for p in self.parameters],
                steps=0,
                exception=original_exception,
            )

        self.attempts = 0
        self.start_time = time.perf_counter()
        current = list(self.parameters)
        steps = 0
        exception = original_exception
        try:
            changed = True
            while changed:
                changed = False
                for i in range(len(current)):
                    while True:
                        accepted = self.first_falsifying_candidate(
                            falsifier, current, i
                        )
                        if accepted is None:
                            break
                        current[i], exception = accepted
                        steps += 1
                        changed = True
                        if Reporting.falsified in self.reporting:
                            self.reporter(
                                f"Shrinking step {steps}: "
                                f"{[p.value for p in current]!r}"
                            )
        except StopShrinking as e:
            report(str(e))

        return PropertyShrinkingResult(
            values=[p.value for p in current], steps=steps, exception=exception
        )

    def first_falsifying_candidate(self, falsifier, current, index):
        """Returns ``(candidate, exception)`` for the first candidate of
        ``current[index]`` that still falsifies the property, or None."""
        parent = current[index]
        parent_distance = parent.distance()
        for candidate in parent.shrink():
            distance = candidate.distance()
            if not distance < parent_distance:
                raise ShrinkingInvariantViolated(
                    f"Shrink candidate {candidate!r} with distance {distance!r} is "
                    f"not closer than its parent {parent!r} with distance "
                    f"{parent_distance!r}"
                )
            self.check_limits()
            self.attempts += 1
            parameters = list(current)
            parameters[index] = candidate
            falsified, exception = self.evaluate(falsifier, parameters)
            if falsified:
                return candidate, exception
        return None

    def check_limits(self):
        if self.mode is not ShrinkingMode.bounded:
            return
        if self.attempts >= self.settings.max_shrink_attempts:
            raise StopShrinking(
                f"Shrinking stopped after {self.attempts} attempts. Use "
                "shrinking=ShrinkingMode.full to shrink further."
            )
        elapsed = time.perf_counter() - self.start_time
        if elapsed >= self.settings.max_shrinking_seconds:
            raise StopShrinking(
                f"Shrinking stopped after {elapsed:.2f} seconds. Use "
                "shrinking=ShrinkingMode.full to shrink further."
            )

    def evaluate(self, falsifier, parameters):
        """Returns ``(falsified, exception)`` for one evaluation."""
        try:
            result = falsifier([p.value for p in parameters])
        # Unlike other exceptions these do not falsify: the candidate could
        # not be evaluated, so it is rejected.
        except (UnsatisfiedAssumption, GenerationExhausted):
            return False, None
        except Exception as e:
            return True, e
        if result is None or result:
            return False, None
        return True, None
