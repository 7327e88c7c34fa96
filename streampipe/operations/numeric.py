"""
Numeric conversions, comparisons and arithmetic for stream flows.
"""

from numbers import Number


def is_number(element) -> bool:
    """Numbers and numeric strings count; booleans do not"""
    if isinstance(element, bool):
        return False
    if isinstance(element, Number):
        return True
    if isinstance(element, str):
        try:
            float(element.strip())
        except ValueError:
            return False
        return True
    return False


class Numbers:
    """Number operations"""

    @staticmethod
    def to_int():
        def convert(element):
            if element is None:
                return 0
            if isinstance(element, str):
                return int(float(element))
            return int(element)

        return convert

    @staticmethod
    def to_float():
        return lambda element: 0.0 if element is None else float(element)

    @staticmethod
    def is_odd():
        return lambda element: element % 2 != 0

    @staticmethod
    def is_even():
        return lambda element: element % 2 == 0

    @staticmethod
    def is_numeric():
        return is_number

    @staticmethod
    def is_greater_than(number):
        return lambda element: element > number

    @staticmethod
    def is_less_than(number):
        return lambda element: element < number

    @staticmethod
    def is_greater_or_equal_than(number):
        return lambda element: element >= number

    @staticmethod
    def is_less_or_equal_than(number):
        return lambda element: element <= number

    @staticmethod
    def plus(number):
        return lambda element: element + number

    @staticmethod
    def multiply(number):
        return lambda element: element * number
