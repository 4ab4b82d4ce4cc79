# This file is part of Falsify.
#
# Copyright the Falsify Authors.
# Individual contributors are listed in AUTHORS.rst and the git log.
#
# This Source Code Form is subject to the terms of the Mozilla Public License,
# v. 2.0. If a copy of the MPL was not distributed with this file, You can
# obtain one at https://mozilla.org/MPL/2.0/.

from random import Random

import pytest
from hypothesis import given, strategies as st

from falsify.errors import InvalidArgument
from falsify.internal.sampler import Sampler

weights = st.lists(st.integers(0, 10), min_size=1).filter(any)


@pytest.mark.parametrize("bad", [[], [0], [0, 0], [1, -1], [1, 1.5], [True]])
def test_rejects_invalid_weights(bad):
    with pytest.raises(InvalidArgument):
        Sampler(bad)


def test_never_samples_zero_weights():
    sampler = Sampler([0, 3, 0, 1, 0])
    random = Random(0)
    assert {sampler.sample(random) for _ in range(200)} == {1, 3}


@given(weights, st.randoms(use_true_random=False))
def test_sample_has_positive_weight(ws, random):
    assert ws[Sampler(ws).sample(random)] > 0


@given(weights, st.randoms(use_true_random=False))
def test_ordering_yields_each_positive_index_once(ws, random):
    order = list(Sampler(ws).ordering(random))
    assert sorted(order) == [i for i, w in enumerate(ws) if w > 0]
