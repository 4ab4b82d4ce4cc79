# This file is part of Falsify.
#
# Copyright the Falsify Authors.
# Individual contributors are listed in AUTHORS.rst and the git log.
#
# This Source Code Form is subject to the terms of the Mozilla Public License,
# v. 2.0. If a copy of the MPL was not distributed with this file, You can
# obtain one at https://mozilla.org/MPL/2.0/.

import threading
from random import Random

import pytest

from falsify.arbitraries import integers, just
from falsify.errors import InvalidArgument, NoTransformerAvailable
from falsify.stateful import Transformer, chains, no_transformer


def add_one(state):
    return just(Transformer("+1", lambda t: t + 1))


def add_random(state):
    return integers(0, 100).map(
        lambda i: Transformer(f"+{i}", lambda t: t + i)
    )


def first_chain(arbitrary, seed=0, gen_size=100):
    return arbitrary.generator(gen_size).next(Random(seed)).value


def test_deterministic_chain():
    chain = first_chain(chains(lambda: 0, add_one).with_max_transformations(10))
    assert list(chain) == list(range(11))
    assert chain.transformations == ["+1"] * 10
    assert chain.max_transformations == 10


def test_transformations_are_generated_lazily():
    chain = first_chain(chains(lambda: 0, add_random).with_max_transformations(50))
    assert chain.transformations == []
    iterator = iter(chain)
    next(iterator)
    next(iterator)
    assert len(chain.transformations) == 1
    list(iterator)
    assert len(chain.transformations) == 50


def test_providers_see_the_current_state():
    def grow_below_100_otherwise_shrink(state):
        if state() < 100:
            return integers(0, 10).map(
                lambda i: Transformer(f"+{i}", lambda t: t + i)
            )
        return integers(1, 10).map(
            lambda i: Transformer(f"-{i}", lambda t: t - i)
        )

    arbitrary = chains(lambda: 1, grow_below_100_otherwise_shrink)
    for seed in range(10):
        chain = first_chain(arbitrary.with_max_transformations(50), seed=seed)
        values = list(chain)
        for last, next_value in zip(values, values[1:]):
            if last < 100:
                assert next_value >= last
            else:
                assert next_value < last


@pytest.mark.parametrize("seed", range(5))
def test_chain_can_be_rerun_with_same_values(seed):
    chain = first_chain(chains(lambda: 1, add_random, add_one), seed=seed)
    assert list(chain) == list(chain)


def test_every_run_starts_from_a_fresh_initial_state():
    append_one = Transformer.mutate("append 1", lambda state: state.append(1))
    chain = first_chain(
        chains(list, lambda state: just(append_one)).with_max_transformations(3)
    )
    first = [list(state) for state in chain]
    second = [list(state) for state in chain]
    assert first == second == [[], [1], [1, 1], [1, 1, 1]]


@pytest.mark.parametrize("seed", range(5))
def test_concurrently_iterating_chain_produces_same_result(seed):
    chain = first_chain(
        chains(lambda: 1, add_random, add_one).with_max_transformations(30), seed=seed
    )
    results = [None] * 3

    def collect(i):
        results[i] = list(chain)

    threads = [threading.Thread(target=collect, args=(i,)) for i in range(3)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    assert len(results[0]) == 31
    assert results[0] == results[1] == results[2]


@pytest.mark.parametrize("seed", range(10))
def test_uses_weights_to_choose_transformers(seed):
    def just_42(state):
        return just(Transformer("42", lambda t: 42))

    def just_1(state):
        return just(Transformer("1", lambda t: 1))

    def never(state):
        return just(Transformer("never", lambda t: -1))

    arbitrary = chains(lambda: 0, (5, just_42), (1, just_1), (0, never))
    chain = first_chain(arbitrary.with_max_transformations(20), seed=seed)
    values = list(chain)
    assert -1 not in values
    assert "never" not in chain.transformations
    assert set(values[1:]) <= {42, 1}


@pytest.mark.parametrize("seed", range(10))
def test_providers_can_decline_a_state(seed):
    def push(state):
        return integers(0, 9).map(
            lambda i: Transformer.mutate(f"push {i}", lambda s: s.append(i))
        )

    def pop(state):
        if not state():
            return no_transformer
        return just(Transformer.mutate("pop", lambda s: s.pop()))

    chain = first_chain(chains(list, push, pop).with_max_transformations(20), seed=seed)
    sizes = [len(state) for state in chain]
    assert len(sizes) == 21
    assert all(abs(a - b) == 1 for a, b in zip(sizes, sizes[1:]))


def test_chain_ends_when_no_transformer_applies():
    def add_one_below_three(state):
        if state() < 3:
            return add_one(state)
        return no_transformer

    arbitrary = chains(lambda: 0, add_one_below_three).with_max_transformations(10)
    chain = first_chain(arbitrary)
    assert list(chain) == [0, 1, 2, 3]
    assert chain.transformations == ["+1"] * 3


def test_plain_callables_can_be_transformers():
    arbitrary = chains(lambda: 1, lambda state: just(lambda t: t * 2))
    chain = first_chain(arbitrary.with_max_transformations(3))
    assert list(chain) == [1, 2, 4, 8]
    assert chain.transformations == ["lambda t: t * 2"] * 3


def test_fails_when_no_transformer_is_ever_available():
    chain = first_chain(chains(lambda: 0, lambda state: no_transformer))
    with pytest.raises(NoTransformerAvailable):
        list(chain)


def test_provider_must_not_return_none():
    chain = first_chain(chains(lambda: 0, lambda state: None))
    with pytest.raises(InvalidArgument):
        list(chain)


def test_provider_must_return_an_arbitrary():
    chain = first_chain(chains(lambda: 0, lambda state: 5))
    with pytest.raises(InvalidArgument):
        list(chain)


def test_transformer_arbitrary_must_generate_callables():
    chain = first_chain(chains(lambda: 0, lambda state: just(5)))
    with pytest.raises(InvalidArgument):
        list(chain)


@pytest.mark.parametrize(
    "providers",
    [(), ((0, add_one),), ((0, add_one), (0, add_random))],
)
def test_chains_need_a_provider_with_positive_weight(providers):
    with pytest.raises(NoTransformerAvailable):
        chains(lambda: 0, *providers)


@pytest.mark.parametrize(
    "initial, providers",
    [
        (0, (add_one,)),
        (lambda: 0, (5,)),
        (lambda: 0, ((-1, add_one),)),
        (lambda: 0, ((1.5, add_one),)),
        (lambda: 0, ((1, add_one, 2),)),
    ],
)
def test_validates_arguments(initial, providers):
    with pytest.raises(InvalidArgument):
        chains(initial, *providers)


@pytest.mark.parametrize("n", [0, -1, None, 1.5])
def test_max_transformations_must_be_positive(n):
    with pytest.raises(InvalidArgument):
        chains(lambda: 0, add_one).with_max_transformations(n)


@pytest.mark.parametrize("gen_size, expected", [(1, 10), (100, 10), (10000, 100)])
def test_default_max_transformations_grows_with_gen_size(gen_size, expected):
    chain = first_chain(chains(lambda: 0, add_one), gen_size=gen_size)
    assert chain.max_transformations == expected


def test_transformer_helpers():
    assert Transformer.noop()(5) == 5
    state = [1]
    assert Transformer.mutate("clear", list.clear)(state) is state
    assert state == []
    assert repr(Transformer("grow", lambda t: t)) == "Transformer('grow')"
    with pytest.raises(InvalidArgument):
        Transformer("broken", 5)


def test_repr():
    arbitrary = chains(lambda: 0, add_one, (3, add_random)).with_max_transformations(5)
    assert repr(arbitrary) == (
        "chains(lambda: 0, add_one, (3, add_random)).with_max_transformations(5)"
    )
