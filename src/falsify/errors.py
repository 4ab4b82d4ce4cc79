# This file is part of Falsify.
#
# Copyright the Falsify Authors.
# Individual contributors are listed in AUTHORS.rst and the git log.
#
# This Source Code Form is subject to the terms of the Mozilla Public License,
# v. 2.0. If a copy of the MPL was not distributed with this file, You can
# obtain one at https://mozilla.org/MPL/2.0/.


class FalsifyException(Exception):
    """Generic parent class for exceptions thrown by Falsify."""


class InvalidArgument(FalsifyException, TypeError):
    """Used to indicate that the arguments to a Falsify function were in
    some manner incorrect."""


class InvalidState(FalsifyException):
    """The system is not in a state where you were allowed to do that."""


class UnsatisfiedAssumption(FalsifyException):
    """An internal error raised by assume.

    If you're seeing this error something has gone wrong.
    """


class GenerationExhausted(FalsifyException):
    """We could not generate enough valid values for this property.

    This usually means a filter, an ``assume`` call or a chain's
    transformer providers reject almost everything that is generated. The
    run is aborted rather than failed: nothing was falsified, but nothing
    was properly checked either.
    """


class TooManyFilterMisses(GenerationExhausted):
    """A filtered arbitrary rejected too many consecutive draws."""

    def __init__(self, arbitrary, misses):
        super().__init__(
            f"{arbitrary!r} rejected {misses} values in a row. Consider "
            "generating valid values directly instead of filtering them."
        )
        self.misses = misses


class NoTransformerAvailable(FalsifyException):
    """A chain has no transformer provider that could ever apply.

    Raised when a chain is configured without (positively weighted)
    providers, or when none of its providers offer a transformer for the
    initial state.
    """


class ShrinkingInvariantViolated(FalsifyException):
    """A shrink candidate was not strictly smaller than its parent.

    This is always a bug in the shrinkable that produced the candidate.
    Shrinking cannot safely continue, because the descent might never
    terminate.
    """


class CoverageFailure(FalsifyException, AssertionError):
    """A coverage check registered with ``statistics.coverage`` failed."""


class PropertyFalsified(FalsifyException, AssertionError):
    """A property has been falsified.

    ``result`` is the :class:`~falsify.core.CheckResult` describing the
    original and the shrunk falsifying sample.
    """

    def __init__(self, message, result):
        super().__init__(message)
        self.result = result
