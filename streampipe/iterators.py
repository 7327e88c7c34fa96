"""
Step functions for Stream.iterate.
"""


class NumberGenerator:
    """Callable step that adds a fixed amount to the previous number"""

    def __init__(self, step=1):
        self.step = step

    def __call__(self, element):
        return element + self.step
