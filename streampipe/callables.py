"""
Helpers for calling user-supplied functions inside a pipeline.

Stages call operations with ``(value, index, key)``, collectors with
``(accumulator, value, index)`` and reducers with
``(accumulator, value, index, key)``. Callables only have to accept as many
leading arguments as they need, so ``str.upper`` or ``lambda x: x * 2`` work
just as well as a full three-argument function. Builtins and classes only
get the value (plus any further required arguments), so ``print`` or ``int``
are not handed an index and key through their ``*args`` or defaults.
"""

import inspect


class _Absent:
    """Stands in for the first item when a collector runs on an empty stream"""

    def __repr__(self):
        return "ABSENT"

    def __bool__(self):
        return False


ABSENT = _Absent()


def identity(value):
    """Return the value unchanged"""
    return value


def keep_newest(existing, new):
    """Reducer that discards the existing value"""
    return new


def _passes_optional_args(fn) -> bool:
    # Builtins and classes only get their required arguments: passing an
    # index into str.strip(chars) or a constructor default would change
    # the result.
    if inspect.isfunction(fn) or inspect.ismethod(fn):
        return True
    if inspect.isclass(fn):
        return False
    return inspect.isfunction(getattr(type(fn), "__call__", None))


def positional_arity(fn, max_args: int) -> int:
    """Number of leading positional arguments ``fn`` should receive"""
    try:
        signature = inspect.signature(fn)
    except (TypeError, ValueError):
        # No introspectable signature (some builtins); value only
        return min(1, max_args)

    include_optional = _passes_optional_args(fn)
    count = 0
    optional = 0
    for param in signature.parameters.values():
        if param.kind == param.VAR_POSITIONAL:
            if include_optional:
                return max_args
            optional += 1
            continue
        if param.kind not in (param.POSITIONAL_ONLY, param.POSITIONAL_OR_KEYWORD):
            continue
        if param.default is not param.empty and not include_optional:
            optional += 1
            continue
        count += 1
    if count == 0 and optional:
        # float(x=0, /) still needs the value
        count = 1
    return min(count, max_args)


def adapt(fn, max_args: int = 3):
    """
    Wrap ``fn`` so it can always be called with ``max_args`` positional
    arguments; extra trailing arguments are dropped.
    """
    if fn is None:
        raise TypeError("Expected a callable, got None")
    if not callable(fn):
        raise TypeError(f"Expected a callable, got {type(fn).__name__}")

    arity = positional_arity(fn, max_args)
    if arity == max_args:
        return fn

    def call(*args):
        return fn(*args[:arity])

    return call
