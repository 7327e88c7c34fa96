"""
String transformations and checks for stream flows.

Transformations other than to_string expect str elements; replace passes
anything else through untouched.
"""

import re

_WORD_START = re.compile(r"(^|\s)(\S)")


class Strings:
    """String operations"""

    @staticmethod
    def to_string():
        return lambda element: "" if element is None else str(element)

    @staticmethod
    def trim():
        return lambda element: element.strip()

    @staticmethod
    def to_lower():
        return lambda element: element.lower()

    @staticmethod
    def to_upper():
        return lambda element: element.upper()

    @staticmethod
    def ucwords():
        """Upper-case the first character of each word, leaving the rest alone"""
        return lambda element: _WORD_START.sub(
            lambda match: match.group(1) + match.group(2).upper(), element
        )

    @staticmethod
    def concat(suffix: str):
        return lambda element: f"{element}{suffix}"

    @staticmethod
    def substr(offset: int, length=None):
        """Slice from ``offset``; a negative ``length`` drops characters from the end"""

        def cut(element):
            if length is None:
                return element[offset:]
            if length < 0:
                return element[offset:length]
            return element[offset:offset + length]

        return cut

    @staticmethod
    def starts_with(prefix: str):
        return lambda element: isinstance(element, str) and element.startswith(prefix)

    @staticmethod
    def is_string():
        return lambda element: isinstance(element, str)

    @staticmethod
    def replace(search, replacement: str):
        searches = [search] if isinstance(search, str) else list(search)

        def substitute(element):
            if not isinstance(element, str):
                return element
            for needle in searches:
                element = element.replace(needle, replacement)
            return element

        return substitute
