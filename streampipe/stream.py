"""
Lazy, chainable streams.

A Stream owns exactly one single-pass flow of ``(key, value)`` pairs.
Intermediate operations return a new Stream whose flow pulls from this one
on demand; nothing is computed until a terminal operation pulls elements,
one at a time, from source to sink.
"""

import logging
from collections.abc import Mapping

from .callables import ABSENT, adapt, identity

logger = logging.getLogger(__name__)


def _pairs(source):
    """Yield (key, value) pairs from a keyed or positional source"""
    if isinstance(source, Stream):
        yield from source._take_flow("from_iterable")
    elif isinstance(source, Mapping):
        yield from source.items()
    else:
        yield from enumerate(source)


class Stream:
    """
    A sequence of elements supporting lazy intermediate operations and
    terminal operations that drain it.

    Each element keeps the key it was created with (the mapping key for a
    keyed source, the position for a positional one) through every 1:1
    stage. Callables receive ``(value, index, key)`` where ``index`` counts
    the elements seen by that stage.
    """

    def __init__(self, flow):
        self._flow = flow

    # --------- construction ----------
    @classmethod
    def of(cls, *elements):
        """Stream over the given elements, keyed by position"""
        return cls.from_iterable(elements)

    @classmethod
    def from_iterable(cls, collection):
        """Stream over any iterable; mappings keep their own keys"""
        return cls(_pairs(collection))

    @classmethod
    def iterate(cls, initial, step):
        """
        Infinite stream: ``initial``, ``step(initial)``, ``step(step(initial))``...

        Must be bounded (limit, take_while or a short-circuiting terminal)
        before anything drains it.
        """
        step = adapt(step, 1)

        def _generate():
            current = initial
            while True:
                yield current
                current = step(current)

        return cls(enumerate(_generate()))

    # --------- intermediate operations (lazy) ----------
    def map(self, fn):
        fn = adapt(fn)

        def _map(flow):
            for index, (key, value) in enumerate(flow):
                yield key, fn(value, index, key)

        return self._chain(_map)

    def filter(self, pred):
        pred = adapt(pred)

        def _filter(flow):
            for index, (key, value) in enumerate(flow):
                if pred(value, index, key):
                    yield key, value

        return self._chain(_filter)

    def peek(self, fn):
        """Call ``fn`` on each element as it passes; mainly for debugging"""
        fn = adapt(fn)

        def _peek(flow):
            for index, (key, value) in enumerate(flow):
                fn(value, index, key)
                yield key, value

        return self._chain(_peek)

    def limit(self, n):
        n = int(n)

        def _limit(flow):
            if n <= 0:
                return
            for emitted, pair in enumerate(flow, 1):
                yield pair
                if emitted >= n:
                    return

        return self._chain(_limit)

    def skip(self, n):
        n = int(n)

        def _skip(flow):
            for index, pair in enumerate(flow):
                if index < n:
                    continue
                yield pair

        return self._chain(_skip)

    def distinct(self, key_fn=None):
        """
        Keep the first element for each distinct ``key_fn(value, index, key)``.

        Surviving elements are keyed by that distinct key.
        """
        key_fn = adapt(key_fn or identity)

        def _distinct(flow):
            seen = set()
            for index, (key, value) in enumerate(flow):
                distinct_key = key_fn(value, index, key)
                if distinct_key in seen:
                    continue
                seen.add(distinct_key)
                yield distinct_key, value

        return self._chain(_distinct)

    def flat_map(self, fn=None):
        """Flatten one level of the iterables produced by ``fn`` (default: the elements)"""
        fn = adapt(fn or identity)

        def _flat_map(flow):
            for index, (key, value) in enumerate(flow):
                yield from _pairs(fn(value, index, key))

        return self._chain(_flat_map)

    def concat(self, other):
        """Elements of this stream followed by the elements of ``other``"""

        def _concat(flow):
            yield from flow
            yield from _pairs(other)

        return self._chain(_concat)

    def take_while(self, pred):
        pred = adapt(pred)

        def _take_while(flow):
            for index, (key, value) in enumerate(flow):
                if not pred(value, index, key):
                    return
                yield key, value

        return self._chain(_take_while)

    def drop_while(self, pred):
        pred = adapt(pred)

        def _drop_while(flow):
            dropping = True
            for index, (key, value) in enumerate(flow):
                if dropping and pred(value, index, key):
                    continue
                dropping = False
                yield key, value

        return self._chain(_drop_while)

    # --------- terminal operations (drain the flow) ----------
    def for_each(self, fn):
        fn = adapt(fn)
        for index, (key, value) in enumerate(self._take_flow("for_each")):
            fn(value, index, key)

    def find_first(self, default=None):
        """Return the first element, or default if empty"""
        for _, value in self._take_flow("find_first"):
            return value
        return default

    def count(self):
        return sum(1 for _ in self._take_flow("count"))

    def any_match(self, pred):
        pred = adapt(pred)
        for index, (key, value) in enumerate(self._take_flow("any_match")):
            if pred(value, index, key):
                return True
        return False

    def all_match(self, pred):
        pred = adapt(pred)
        for index, (key, value) in enumerate(self._take_flow("all_match")):
            if not pred(value, index, key):
                return False
        return True

    def none_match(self, pred):
        pred = adapt(pred)
        for index, (key, value) in enumerate(self._take_flow("none_match")):
            if pred(value, index, key):
                return False
        return True

    def reduce(self, fn, initial):
        """Left fold; ``fn(accumulator, value, index, key)``"""
        fn = adapt(fn, 4)
        accumulator = initial
        for index, (key, value) in enumerate(self._take_flow("reduce")):
            accumulator = fn(accumulator, value, index, key)
        return accumulator

    def to_list(self):
        return [value for _, value in self._take_flow("to_list")]

    def to_dict(self):
        """Key -> value mapping; a later element overwrites an earlier one with the same key"""
        return dict(self._take_flow("to_dict"))

    def to_array(self, preserve_keys=False):
        return self.to_dict() if preserve_keys else self.to_list()

    def collect(self, collector):
        """
        Fold without a caller-supplied seed.

        The collector is called as ``collector(None, first, 0)`` to build the
        seed, then ``collector(accumulator, value, index)`` for every other
        element. On an empty stream it is still called once, with the falsy
        ``ABSENT`` marker as the first item, so a real leading ``None`` can be
        told apart from no element at all.
        """
        collector = adapt(collector)
        flow = self._take_flow("collect")
        _, first = next(flow, (None, ABSENT))

        accumulator = collector(None, first, 0)
        logger.debug("Collector seeded with %r", accumulator)
        for index, (_, value) in enumerate(flow, 1):
            accumulator = collector(accumulator, value, index)
        return accumulator

    # --------- iterator protocol ----------
    def __iter__(self):
        for _, value in self._take_flow("__iter__"):
            yield value

    def items(self):
        """Iterate over (key, value) pairs"""
        yield from self._take_flow("items")

    # --------- helpers ----------
    def _chain(self, stage):
        return Stream(stage(self._flow))

    def _take_flow(self, operation):
        # Hand the flow to one consumer; this stream yields nothing afterwards.
        logger.debug("Draining stream for %s", operation)
        flow, self._flow = iter(self._flow), iter(())
        return flow
