# This file is part of Falsify.
#
# Copyright the Falsify Authors.
# Individual contributors are listed in AUTHORS.rst and the git log.
#
# This Source Code Form is subject to the terms of the Mozilla Public License,
# v. 2.0. If a copy of the MPL was not distributed with this file, You can
# obtain one at https://mozilla.org/MPL/2.0/.

"""This module provides support for stateful property testing with chains.

A chain starts from an initial state and applies a sequence of
transformers to it. Each transformer is drawn from the arbitrary that one
of the chain's transformer providers offers for the current state::

    def push(state):
        return integers(0, 10).map(
            lambda i: Transformer.mutate(f"push {i}", lambda s: s.append(i))
        )

    def pop(state):
        if not state():
            return no_transformer
        return just(Transformer.mutate("pop", lambda s: s.pop()))

    stacks = chains(list, push, pop).with_max_transformations(20)

A provider receives a zero-argument function returning the current state.
Providers that never call it describe steps that can be removed from a
falsifying chain without changing what later steps see, which makes
shrinking much more effective.
"""

import math

from falsify.arbitraries import Arbitrary
from falsify.errors import InvalidArgument, NoTransformerAvailable
from falsify.internal.chain import Chain, ChainGenerator, Transformer
from falsify.internal.reflection import get_pretty_function_description
from falsify.internal.sampler import Sampler
from falsify.internal.shrinking.chain import ShrinkableChain
from falsify.internal.validation import check_valid_integer, check_valid_weight
from falsify.utils.conventions import no_transformer

__all__ = [
    "Chain",
    "ChainArbitrary",
    "Transformer",
    "chains",
    "no_transformer",
]


def default_max_transformations(gen_size):
    return max(round(math.sqrt(gen_size)), 10)


class ChainArbitrary(Arbitrary):
    """Generates :class:`~falsify.internal.chain.Chain` objects.

    Use :func:`chains` to create one.
    """

    def __init__(self, initial, weighted_providers, max_transformations=None):
        self.initial = initial
        self.weighted_providers = weighted_providers
        self.max_transformations = max_transformations

    def with_max_transformations(self, max_transformations):
        """Returns a copy of this arbitrary whose chains have at most
        ``max_transformations`` steps."""
        check_valid_integer(max_transformations, "max_transformations")
        if max_transformations is None or max_transformations < 1:
            raise InvalidArgument(
                f"max_transformations={max_transformations!r} must be at least one"
            )
        return ChainArbitrary(
            self.initial, self.weighted_providers, max_transformations
        )

    def __repr__(self):
        bits = [get_pretty_function_description(self.initial)]
        for weight, provider in self.weighted_providers:
            description = get_pretty_function_description(provider)
            bits.append(description if weight == 1 else f"({weight!r}, {description})")
        result = "chains({})".format(", ".join(bits))
        if self.max_transformations is not None:
            result += f".with_max_transformations({self.max_transformations!r})"
        return result

    def draw_function(self, gen_size):
        max_transformations = self.max_transformations
        if max_transformations is None:
            max_transformations = default_max_transformations(gen_size)
        generator = ChainGenerator(
            initial=self.initial,
            providers=tuple(p for _, p in self.weighted_providers),
            sampler=Sampler(w for w, _ in self.weighted_providers),
            gen_size=gen_size,
        )

        def draw(random):
            seeds = [random.getrandbits(64) for _ in range(max_transformations)]
            return ShrinkableChain(generator, max_transformations, seeds)

        return draw


def chains(initial, *providers):
    """Returns an arbitrary of chains starting from ``initial()``.

    Each of ``providers`` is either a transformer provider or a
    ``(weight, provider)`` pair; providers without a weight have weight one.
    A provider is called with a function returning the current state and
    returns an arbitrary of transformers, or :data:`no_transformer` if it
    has nothing to offer for that state. Transformers may be
    :class:`Transformer` instances or plain callables.

    At every step providers are asked in a weighted random order, so a
    provider with weight zero is never used. When all of them decline, the
    chain ends early.
    """
    if not callable(initial):
        raise InvalidArgument(
            f"initial={initial!r} must be a function returning the initial state"
        )
    weighted = []
    for i, provider in enumerate(providers):
        if isinstance(provider, tuple):
            try:
                weight, provider = provider
            except ValueError:
                raise InvalidArgument(
                    f"Expected a provider or a (weight, provider) pair, but got "
                    f"providers[{i}]={provider!r}"
                ) from None
            check_valid_weight(weight, f"weight of providers[{i}]")
        else:
            weight = 1
        if not callable(provider):
            raise InvalidArgument(f"providers[{i}]={provider!r} must be callable")
        weighted.append((weight, provider))
    if not any(w > 0 for w, _ in weighted):
        raise NoTransformerAvailable(
            "A chain needs at least one transformer provider with a positive weight"
        )
    return ChainArbitrary(initial, tuple(weighted))
