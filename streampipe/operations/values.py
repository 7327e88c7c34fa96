"""
Generic value checks for stream flows.
"""


def _equals(element, value, strict: bool) -> bool:
    if strict:
        return type(element) is type(value) and element == value
    if element == value:
        return True
    # Loose comparison treats 1 and "1" as equal
    if element is None or value is None:
        return False
    return str(element) == str(value)


class Values:
    """Value operations"""

    @staticmethod
    def is_empty():
        return lambda element: not element

    @staticmethod
    def is_not_empty():
        return lambda element: bool(element)

    @staticmethod
    def is_null():
        return lambda element: element is None

    @staticmethod
    def is_not_null():
        return lambda element: element is not None

    @staticmethod
    def equals_to(value, strict: bool = True):
        return lambda element: _equals(element, value, strict)

    @staticmethod
    def is_in(values, strict: bool = False):
        """Element equals one of ``values``"""
        candidates = list(values)
        return lambda element: any(_equals(element, value, strict) for value in candidates)

    @staticmethod
    def key_in(keys, strict: bool = False):
        """The element's key equals one of ``keys``"""
        candidates = list(keys)
        return lambda element, index, key: any(_equals(key, value, strict) for value in candidates)
