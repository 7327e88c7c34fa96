"""
Collector factories for Stream.collect.

A collector is called as ``collector(accumulator, item, index)``. At
``index == 0`` it builds the seed from the first item (``ABSENT`` when the
stream is empty) instead of folding into an existing accumulator.
"""

from .callables import ABSENT, adapt, identity, keep_newest


def _text(item):
    return "" if item is None or item is ABSENT else str(item)


class Collectors:
    """Ready-made collectors"""

    @staticmethod
    def join(delimiter=""):
        """Concatenate the items as text, separated by ``delimiter``"""

        def collector(accumulator, item, index):
            if index == 0:
                return _text(item)
            return f"{accumulator}{delimiter}{_text(item)}"

        return collector

    @staticmethod
    def sum(mapper=None):
        """Add up ``mapper(item)`` for every item; 0 for an empty stream"""
        mapper = adapt(mapper or identity, 1)

        def collector(accumulator, item, index):
            if index == 0:
                return 0 if item is ABSENT else mapper(item)
            return accumulator + mapper(item)

        return collector

    @staticmethod
    def count():
        def collector(accumulator, item, index):
            if index == 0:
                return 0 if item is ABSENT else 1
            return accumulator + 1

        return collector

    @staticmethod
    def to_list(mapper=None):
        mapper = adapt(mapper or identity, 1)

        def collector(accumulator, item, index):
            if index == 0:
                return [] if item is ABSENT else [mapper(item)]
            accumulator.append(mapper(item))
            return accumulator

        return collector

    @staticmethod
    def group_by(classifier=None, mapper=None):
        """
        Group items into lists keyed by ``classifier(item)``.

        Grouping always starts from an empty dict, so the first item is
        classified like any other. ``None`` items and the empty-stream
        marker are skipped, so an empty stream collects to ``{}``. Groups
        keep encounter order.
        """
        classifier = adapt(classifier or identity, 1)
        mapper = adapt(mapper or identity, 1)

        def collector(groups, item, index):
            if index == 0:
                groups = {}
            if item is None or item is ABSENT:
                return groups
            groups.setdefault(classifier(item), []).append(mapper(item))
            return groups

        return collector

    @staticmethod
    def group_and_reduce_by(classifier=None, mapper=None, reducer=None):
        """
        Like group_by, but each key holds one value: the first mapped item,
        then ``reducer(existing, new)`` for every later item with the same
        key. The default reducer keeps the newest value.
        """
        classifier = adapt(classifier or identity, 1)
        mapper = adapt(mapper or identity, 1)
        reducer = adapt(reducer or keep_newest, 2)

        def collector(groups, item, index):
            if index == 0:
                groups = {}
            if item is None or item is ABSENT:
                return groups
            group_key = classifier(item)
            value = mapper(item)
            if group_key in groups:
                groups[group_key] = reducer(groups[group_key], value)
            else:
                groups[group_key] = value
            return groups

        return collector
