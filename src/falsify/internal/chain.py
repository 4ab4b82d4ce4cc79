# This file is part of Falsify.
#
# Copyright the Falsify Authors.
# Individual contributors are listed in AUTHORS.rst and the git log.
#
# This Source Code Form is subject to the terms of the Mozilla Public License,
# v. 2.0. If a copy of the MPL was not distributed with this file, You can
# obtain one at https://mozilla.org/MPL/2.0/.

"""Generation of single chain steps and the public view of a chain.

A chain is a sequence of states: an initial state followed by the result of
applying one transformer after another. Which transformer is applied at a
step is decided by the chain's transformer providers, which may look at the
state the step starts from.
"""

import threading
from random import Random

import attr

from falsify.errors import InvalidArgument, NoTransformerAvailable
from falsify.internal.reflection import get_pretty_function_description
from falsify.internal.shrinking.distance import MIN, ShrinkingDistance
from falsify.utils.conventions import end_of_chain, no_transformer


class Transformer:
    """A named function from one chain state to the next.

    ``transformation`` describes what the transformer does. It is used for
    reporting only: two transformers with the same description are still
    different transformers.
    """

    def __init__(self, transformation, f):
        if not callable(f):
            raise InvalidArgument(f"f={f!r} must be callable")
        self.transformation = str(transformation)
        self.f = f

    @classmethod
    def mutate(cls, transformation, mutator):
        """A transformer that changes the state in place, for mutable
        states like lists."""

        def apply(state):
            mutator(state)
            return state

        return cls(transformation, apply)

    @classmethod
    def noop(cls):
        return cls("noop", lambda state: state)

    def __call__(self, state):
        return self.f(state)

    def __repr__(self):
        return f"Transformer({self.transformation!r})"


def as_transformer(value):
    if isinstance(value, Transformer):
        return value
    if callable(value):
        return Transformer(get_pretty_function_description(value), value)
    raise InvalidArgument(
        f"Transformer arbitraries must generate callables, but got {value!r} "
        f"(type={type(value).__name__})"
    )


@attr.s(frozen=True, slots=True)
class ChainIteration:
    """What happened at one step of a chain.

    ``seed`` seeds the random source the step was generated from, so the
    step can be generated again for a different state. ``accessed_state``
    records whether any provider asked for the state during the step.
    """

    seed = attr.ib()
    shrinkable = attr.ib()
    accessed_state = attr.ib()

    @property
    def transformer(self):
        return as_transformer(self.shrinkable.value)

    def with_shrinkable(self, shrinkable):
        return attr.evolve(self, shrinkable=shrinkable)

    def distance(self):
        return ShrinkingDistance.of(int(self.accessed_state)).append(
            self.shrinkable.distance()
        )


class StatelessStep:
    """Stands in for a step that looked at the state until the step is
    generated again from a provider that does not."""

    accessed_state = False

    def distance(self):
        return MIN


class StepSlot:
    """Holds the step record for one position of a chain.

    The first iteration to reach an empty slot fills it while holding the
    slot's lock. Every later reader, in any thread, sees the filled record.
    ``pending`` is a record carried over from a shrunk chain that has to be
    generated again before it is used, or None.
    """

    __slots__ = ("lock", "record", "pending")

    def __init__(self, record=None, pending=None):
        self.lock = threading.Lock()
        self.record = record
        self.pending = pending

    def get(self, realize):
        record = self.record
        if record is None:
            with self.lock:
                record = self.record
                if record is None:
                    record = realize(self.pending)
                    self.record = record
        return record


class StateSupplier:
    """Gives providers access to the state a step starts from, remembering
    whether anybody asked."""

    def __init__(self, state):
        self.__state = state
        self.accessed = False

    def __call__(self):
        self.accessed = True
        return self.__state


@attr.s(frozen=True)
class ChainGenerator:
    """The configuration of a chain arbitrary, and generation of single
    steps from it."""

    initial = attr.ib()
    providers = attr.ib()
    sampler = attr.ib()
    gen_size = attr.ib()

    @property
    def has_alternatives(self):
        """Whether more than one provider can ever be chosen."""
        return sum(w > 0 for w in self.sampler.weights) > 1

    def generate_step(self, index, seed, state, regenerate=False, stateless=False):
        """Generates the step at ``index`` for ``state`` from ``Random(seed)``.

        Providers are asked in a weighted random order until one of them
        offers a transformer arbitrary. Returns ``end_of_chain`` when all of
        them decline, unless this is the first step of a newly generated
        chain: then no transformer was ever available and
        NoTransformerAvailable is raised.

        With ``stateless`` set, providers that look at the state count as
        declining.
        """
        random = Random(seed)
        supplier = StateSupplier(state)
        for i in self.sampler.ordering(random):
            provider = self.providers[i]
            if stateless:
                supplier = StateSupplier(state)
            arbitrary = provider(supplier)
            if arbitrary is no_transformer or (stateless and supplier.accessed):
                continue
            if arbitrary is None:
                raise InvalidArgument(
                    f"Transformer provider {get_pretty_function_description(provider)} "
                    "returned None. Return no_transformer when no transformer "
                    "applies to the current state."
                )
            from falsify.arbitraries import Arbitrary

            if not isinstance(arbitrary, Arbitrary):
                raise InvalidArgument(
                    f"Transformer provider {get_pretty_function_description(provider)} "
                    f"returned {arbitrary!r}, which is not an Arbitrary"
                )
            shrinkable = arbitrary.generator(self.gen_size).next(random)
            return ChainIteration(seed, shrinkable, supplier.accessed)
        if index == 0 and not regenerate:
            raise NoTransformerAvailable(
                "None of the transformer providers offered a transformer for "
                f"the initial state {state!r}"
            )
        return end_of_chain


class Chain:
    """A replayable sequence of states.

    Every iteration starts from a fresh initial state and applies the same
    transformers, so iterating a chain again, even from several threads at
    once, always produces equal states. Steps are generated lazily by
    whichever iteration reaches them first.

    This class is part of the public API.
    """

    def __init__(self, shrinkable):
        self.__shrinkable = shrinkable

    @property
    def max_transformations(self):
        return self.__shrinkable.max_transformations

    @property
    def transformations(self):
        """Descriptions of the transformers of the steps generated so far."""
        return self.__shrinkable.transformations()

    def __iter__(self):
        shrinkable = self.__shrinkable
        state = shrinkable.initial_state()
        yield state
        for index in range(shrinkable.max_transformations):
            record = shrinkable.step(index, state)
            if record is end_of_chain:
                return
            state = record.transformer(state)
            yield state

    def __repr__(self):
        return "Chain(max_transformations={!r}, transformations={!r})".format(
            self.max_transformations, self.transformations
        )
