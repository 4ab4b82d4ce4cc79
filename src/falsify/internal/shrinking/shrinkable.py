# This file is part of Falsify.
#
# Copyright the Falsify Authors.
# Individual contributors are listed in AUTHORS.rst and the git log.
#
# This Source Code Form is subject to the terms of the Mozilla Public License,
# v. 2.0. If a copy of the MPL was not distributed with this file, You can
# obtain one at https://mozilla.org/MPL/2.0/.

"""Shrinkables pair a generated value with the lazily computed candidates
it may shrink to.

A shrinkable never changes once built. ``shrink()`` returns a fresh
iterator each time it is called and every candidate it produces is
strictly closer to the target than the shrinkable itself, as measured by
``distance()``.
"""

from random import Random

from falsify.internal.shrinking.distance import MIN, ShrinkingDistance

# Upper bound on the number of rejected candidates a filtered shrinkable
# looks through in a single call to shrink().
MAX_REJECTED_DESCENT = 10000


class Shrinkable:
    @property
    def value(self):
        """The value this shrinkable stands for.

        Shrinkables for mutable values build a fresh value on every access.
        """
        raise NotImplementedError()

    def shrink(self):
        """Returns an iterator over smaller candidates, closest first where
        that order is known."""
        raise NotImplementedError()

    def distance(self):
        raise NotImplementedError()

    def map(self, f):
        return MappedShrinkable(self, f)

    def filter(self, condition):
        return FilteredShrinkable(self, condition)

    def __repr__(self):
        return f"{type(self).__name__}({self.value!r})"


class Unshrinkable(Shrinkable):
    def __init__(self, value, distance=MIN):
        self.__value = value
        self.__distance = distance

    @property
    def value(self):
        return self.__value

    def shrink(self):
        return iter(())

    def distance(self):
        return self.__distance


class MappedShrinkable(Shrinkable):
    def __init__(self, source, f):
        self.source = source
        self.f = f

    @property
    def value(self):
        return self.f(self.source.value)

    def shrink(self):
        return (MappedShrinkable(c, self.f) for c in self.source.shrink())

    def distance(self):
        return self.source.distance()


class FilteredShrinkable(Shrinkable):
    """Candidates of the source that fail the condition are not offered,
    but the search continues through their own candidates."""

    def __init__(self, source, condition):
        self.source = source
        self.condition = condition

    @property
    def value(self):
        return self.source.value

    def shrink(self):
        stack = [self.source.shrink()]
        rejected = 0
        while stack:
            candidate = next(stack[-1], None)
            if candidate is None:
                stack.pop()
                continue
            if self.condition(candidate.value):
                yield FilteredShrinkable(candidate, self.condition)
                continue
            rejected += 1
            if rejected >= MAX_REJECTED_DESCENT:
                return
            stack.append(candidate.shrink())

    def distance(self):
        return self.source.distance()


class FlatMappedShrinkable(Shrinkable):
    """The result of generating an outer value and then an inner value from
    the arbitrary the outer value maps to.

    The inner shrinkable is always drawn from ``Random(seed)`` so that it
    can be regenerated for every candidate of the outer one.

    The outer distance is padded to ``width``, the widest outer distance
    seen so far in this descent, so that the inner distance never shifts
    into outer positions.
    """

    def __init__(self, outer, f, gen_size, seed, inner=None, width=0):
        self.outer = outer
        self.f = f
        self.gen_size = gen_size
        self.seed = seed
        if inner is None:
            inner = f(outer.value).generator(gen_size).next(Random(seed))
        self.inner = inner
        self.width = max(width, len(outer.distance().dimensions))

    @property
    def value(self):
        return self.inner.value

    def shrink(self):
        # A closer outer value wins whatever inner value it regenerates.
        for candidate in self.outer.shrink():
            yield FlatMappedShrinkable(
                candidate, self.f, self.gen_size, self.seed, width=self.width
            )
        for candidate in self.inner.shrink():
            yield FlatMappedShrinkable(
                self.outer,
                self.f,
                self.gen_size,
                self.seed,
                inner=candidate,
                width=self.width,
            )

    def distance(self):
        outer = self.outer.distance().dimensions
        padding = (0,) * (self.width - len(outer))
        return ShrinkingDistance(outer + padding).append(self.inner.distance())


class TupleShrinkable(Shrinkable):
    def __init__(self, elements):
        self.elements = tuple(elements)

    @property
    def value(self):
        return tuple(e.value for e in self.elements)

    def shrink(self):
        for i, element in enumerate(self.elements):
            for candidate in element.shrink():
                yield TupleShrinkable(
                    self.elements[:i] + (candidate,) + self.elements[i + 1 :]
                )

    def distance(self):
        return ShrinkingDistance.combine(self.elements)


class ListShrinkable(Shrinkable):
    """Shrinks by removing ranges of elements, largest ranges first, and
    then by shrinking single elements in place."""

    def __init__(self, elements, min_size=0):
        self.elements = list(elements)
        self.min_size = min_size

    @property
    def value(self):
        return [e.value for e in self.elements]

    def shrink(self):
        elements = self.elements
        n = len(elements)
        size = n - self.min_size
        while size > 0:
            for start in range(n - size + 1):
                yield ListShrinkable(
                    elements[:start] + elements[start + size :], self.min_size
                )
            size //= 2
        for i, element in enumerate(elements):
            for candidate in element.shrink():
                yield ListShrinkable(
                    elements[:i] + [candidate] + elements[i + 1 :], self.min_size
                )

    def distance(self):
        return ShrinkingDistance.for_collection(self.elements)
