"""
Object and record access for stream flows.

Records may be mappings (dict-like rows) or plain objects; property lookups
work on both.
"""

from collections.abc import Mapping
from types import SimpleNamespace


def _getter_names(name: str):
    return f"get_{name}", f"get{name[:1].upper()}{name[1:]}"


def has_property(element, name: str) -> bool:
    if isinstance(element, Mapping):
        return name in element
    return hasattr(element, name) and not callable(getattr(element, name))


def read_property(element, name: str, use_getter: bool = True):
    """Mapping item, getter method, or attribute; None when missing"""
    if isinstance(element, Mapping):
        return element.get(name)
    if use_getter:
        for getter in _getter_names(name):
            method = getattr(element, getter, None)
            if callable(method):
                return method()
    return getattr(element, name, None)


class Objects:
    """Object operations"""

    @staticmethod
    def has_property(name: str):
        return lambda element: has_property(element, name)

    @staticmethod
    def has_property_with_value(name: str, value):
        return lambda element: has_property(element, name) and read_property(element, name, False) == value

    @staticmethod
    def call_method(name: str, *args):
        return lambda element: getattr(element, name)(*args)

    @staticmethod
    def construct(cls):
        return lambda element: cls(element)

    @staticmethod
    def is_instance_of(cls):
        return lambda element: isinstance(element, cls)

    @staticmethod
    def cast_object():
        """Turn mappings into attribute-style objects"""
        return lambda element: SimpleNamespace(**element) if isinstance(element, Mapping) else element

    @staticmethod
    def get(name: str, use_getter: bool = True):
        return lambda element: read_property(element, name, use_getter)
