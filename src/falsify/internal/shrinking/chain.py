# This file is part of Falsify.
#
# Copyright the Falsify Authors.
# Individual contributors are listed in AUTHORS.rst and the git log.
#
# This Source Code Form is subject to the terms of the Mozilla Public License,
# v. 2.0. If a copy of the MPL was not distributed with this file, You can
# obtain one at https://mozilla.org/MPL/2.0/.

"""Shrinking of chains.

A chain shrinks in four ways, tried in this order:

1. Dropping the steps that were never generated, so that the chain is only
   as long as it needed to be to falsify the property.
2. Removing ranges of steps whose providers did not look at the state.
3. Removing ranges of steps that include ones that did look at the state.
4. Changing a single step in place, steps that did not look at the state
   first. A step that looked at the state is first generated again from
   a provider that does not, then its transformer is shrunk.

Removing or changing a step changes the states every later step starts
from. Later steps that looked at the state are therefore generated again
from their own seed when the new chain is iterated. Steps that did not
look at the state are replayed as they are.
"""

from falsify.internal.chain import Chain, ChainIteration, StatelessStep, StepSlot
from falsify.internal.shrinking.distance import MIN, ShrinkingDistance
from falsify.internal.shrinking.shrinkable import Shrinkable
from falsify.utils.conventions import end_of_chain


class ShrinkableChain(Shrinkable):
    """The shrinkable behind a generated :class:`~falsify.internal.chain.Chain`.

    ``entries`` holds, for each step, a pair ``(record, stale)``: the known
    step record or None, and whether the record has to be generated again
    before it can be replayed. The chain value is created once, so all
    users of this shrinkable share its generated steps.
    """

    def __init__(self, generator, max_transformations, seeds, entries=None):
        assert len(seeds) == max_transformations
        self.generator = generator
        self.max_transformations = max_transformations
        self.seeds = list(seeds)
        if entries is None:
            entries = [(None, False)] * max_transformations
        assert len(entries) == max_transformations
        self.slots = [
            StepSlot(pending=record) if stale or record is None else StepSlot(record)
            for record, stale in entries
        ]
        self.__chain = Chain(self)

    @property
    def value(self):
        return self.__chain

    def initial_state(self):
        return self.generator.initial()

    def step(self, index, state):
        seed = self.seeds[index]
        return self.slots[index].get(
            lambda pending: self.generator.generate_step(
                index,
                seed,
                state,
                regenerate=pending is not None,
                stateless=isinstance(pending, StatelessStep),
            )
        )

    def transformations(self):
        result = []
        for slot in self.slots:
            record = slot.record
            if not isinstance(record, ChainIteration):
                break
            result.append(record.transformer.transformation)
        return result

    def entries(self):
        """The current ``(record, stale)`` pair of every step."""
        result = []
        for slot in self.slots:
            record = slot.record
            if record is end_of_chain:
                result.append((None, False))
            elif record is not None:
                result.append((record, False))
            else:
                result.append((slot.pending, slot.pending is not None))
        return result

    def realized(self):
        """The number of leading steps that have been generated or replayed."""
        count = 0
        for slot in self.slots:
            if not isinstance(slot.record, ChainIteration):
                break
            count += 1
        return count

    def distance(self):
        # A step that looked at the state is further away than any step
        # that did not.
        distances = [
            MIN if record is None else record.distance() for record, _ in self.entries()
        ]
        return ShrinkingDistance.of(self.max_transformations).append(
            ShrinkingDistance.sum(distances)
        )

    def derive(self, seeds, entries):
        return ShrinkableChain(self.generator, len(seeds), seeds, entries)

    def shrink(self):
        return chain_candidates(self)

    def __repr__(self):
        return f"ShrinkableChain({self.__chain!r})"


def mark_stale(entries, start):
    """Marks every record from ``start`` on that looked at the state as
    needing to be generated again."""
    return entries[:start] + [
        (record, stale or (record is not None and record.accessed_state))
        for record, stale in entries[start:]
    ]


def removal_sizes(realized, max_transformations):
    size = min(realized, max_transformations - 1)
    while size > 0:
        yield size
        size //= 2


def chain_candidates(chain):
    entries = chain.entries()
    seeds = chain.seeds
    max_transformations = chain.max_transformations
    realized = chain.realized()

    if 0 < realized < max_transformations:
        yield chain.derive(seeds[:realized], entries[:realized])

    def accesses_state(index):
        return entries[index][0].accessed_state

    def ranges(include_state_access):
        for size in removal_sizes(realized, max_transformations):
            for start in range(realized - size + 1):
                touched = any(map(accesses_state, range(start, start + size)))
                if touched == include_state_access:
                    yield start, size

    for include_state_access in (False, True):
        for start, size in ranges(include_state_access):
            yield chain.derive(
                seeds[:start] + seeds[start + size :],
                mark_stale(entries[:start] + entries[start + size :], start),
            )

    indices = sorted(range(realized), key=accesses_state)
    for index in indices:
        record, _ = entries[index]
        if record.accessed_state and chain.generator.has_alternatives:
            changed = list(entries)
            changed[index] = (StatelessStep(), True)
            yield chain.derive(seeds, mark_stale(changed, index + 1))
        for candidate in record.shrinkable.shrink():
            changed = list(entries)
            changed[index] = (record.with_shrinkable(candidate), False)
            yield chain.derive(seeds, mark_stale(changed, index + 1))
