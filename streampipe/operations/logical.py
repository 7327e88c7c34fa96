"""
Logical operations for readable stream flows.
"""

from ..callables import adapt, identity


class Logical:
    """Identity, negation and constant predicates"""

    @staticmethod
    def identity():
        """Return the element unchanged"""
        return identity

    @staticmethod
    def not_(operation=None):
        """Negate ``operation``, or the element's own truthiness when omitted"""
        if operation is None:
            return lambda element: not element
        operation = adapt(operation)
        return lambda element, index=None, key=None: not operation(element, index, key)

    @staticmethod
    def true():
        return lambda: True

    @staticmethod
    def false():
        return lambda: False
