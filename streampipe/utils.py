"""
Declarative pipelines, logging setup and run measurement.

A pipeline described by a PipelineSpec (or the equivalent dict) is turned
into a lazy Stream by resolving each stage's callable from the operation
library, then drained by its terminal operation.
"""

import logging
import sys
import time
import tracemalloc
from typing import Any, Dict, Iterable, Optional, Union

from .collectors import Collectors
from .models import (
    CollectorSpec,
    CollectorType,
    OperationRef,
    OperationSpec,
    PipelineResult,
    PipelineSettings,
    PipelineSpec,
    TerminalType,
    COUNTED_OPERATIONS,
)
from .operations import Logical, Numbers, Objects, Strings, Values
from .stream import Stream

logger = logging.getLogger(__name__)

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - [%(funcName)s:%(lineno)d] - %(message)s'

OPERATION_LIBRARY = {
    "Logical": Logical,
    "Numbers": Numbers,
    "Objects": Objects,
    "Strings": Strings,
    "Values": Values,
}


class StreamPipeError(Exception):
    """Base error for the streampipe package."""
    pass


class PipelineSpecError(StreamPipeError):
    """Raised when a declarative pipeline cannot be built."""
    pass


def setup_logging(level: str = "INFO") -> logging.Logger:
    """Attach a stdout handler to the streampipe logger (once) and set its level"""
    package_logger = logging.getLogger("streampipe")
    if not package_logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        package_logger.addHandler(handler)
    package_logger.setLevel(PipelineSettings(log_level=level).log_level)
    return package_logger


def resolve_operation(ref: Union[OperationRef, str, None]):
    """Look up a factory like 'Objects.get' and call it with the ref's args"""
    if ref is None:
        return None
    if isinstance(ref, str):
        ref = OperationRef(name=ref)

    group, _, factory_name = ref.name.partition(".")
    owner = OPERATION_LIBRARY.get(group)
    factory = getattr(owner, factory_name, None) if not factory_name.startswith("_") else None
    if factory is None:
        raise PipelineSpecError(f"Unknown operation: {ref.name}")

    try:
        return factory(*ref.args)
    except TypeError as e:
        raise PipelineSpecError(f"Bad arguments for {ref.name}: {e}") from e


def _validate_spec(spec: Union[PipelineSpec, Dict[str, Any]]) -> PipelineSpec:
    if isinstance(spec, PipelineSpec):
        return spec
    return PipelineSpec.model_validate(spec)


def apply_operation(stream: Stream, op: OperationSpec) -> Stream:
    """Add one stage to ``stream``"""
    stage = getattr(stream, op.type.value)
    if op.type in COUNTED_OPERATIONS:
        return stage(op.count)
    return stage(resolve_operation(op.operation))


def build_collector(spec: CollectorSpec):
    """Create the collector function described by ``spec``"""
    classifier = resolve_operation(spec.classifier)
    mapper = resolve_operation(spec.mapper)

    if spec.type == CollectorType.JOIN:
        return Collectors.join(spec.delimiter)
    elif spec.type == CollectorType.SUM:
        return Collectors.sum(mapper)
    elif spec.type == CollectorType.COUNT:
        return Collectors.count()
    elif spec.type == CollectorType.TO_LIST:
        return Collectors.to_list(mapper)
    elif spec.type == CollectorType.GROUP_BY:
        return Collectors.group_by(classifier, mapper)
    elif spec.type == CollectorType.GROUP_AND_REDUCE_BY:
        return Collectors.group_and_reduce_by(classifier, mapper, resolve_operation(spec.reducer))
    raise PipelineSpecError(f"Unknown collector: {spec.type}")


def build_pipeline(source: Iterable[Any], spec: Union[PipelineSpec, Dict[str, Any]]) -> Stream:
    """Build the lazy stream for ``spec``; nothing is pulled from ``source``"""
    spec = _validate_spec(spec)
    stream = Stream.from_iterable(source)
    for op in spec.operations:
        stream = apply_operation(stream, op)
    return stream


def run_terminal(stream: Stream, spec: PipelineSpec) -> Any:
    """Drain ``stream`` with the terminal operation named by ``spec``"""
    if spec.terminal == TerminalType.TO_LIST:
        return stream.to_list()
    elif spec.terminal == TerminalType.TO_DICT:
        return stream.to_dict()
    elif spec.terminal == TerminalType.COUNT:
        return stream.count()
    elif spec.terminal == TerminalType.FIND_FIRST:
        return stream.find_first()
    elif spec.terminal == TerminalType.COLLECT:
        return stream.collect(build_collector(spec.collector))
    raise PipelineSpecError(f"Unknown terminal operation: {spec.terminal}")


def run_pipeline(source: Iterable[Any], spec: Union[PipelineSpec, Dict[str, Any]],
                 settings: Optional[PipelineSettings] = None) -> PipelineResult:
    """Build and run a declarative pipeline, measuring time and peak memory"""
    settings = settings or PipelineSettings()
    spec = _validate_spec(spec)
    operations_applied = [op.type.value for op in spec.operations]

    owns_tracing = not tracemalloc.is_tracing()
    if owns_tracing:
        tracemalloc.start()
    start_time = time.perf_counter()

    try:
        stream = build_pipeline(source, spec)
        if settings.max_elements is not None:
            stream = stream.limit(settings.max_elements)
            operations_applied.append("limit")
        result = run_terminal(stream, spec)
        _, peak = tracemalloc.get_traced_memory()
    except Exception as e:
        elapsed_ms = (time.perf_counter() - start_time) * 1000
        logger.error(f"Pipeline failed after {elapsed_ms:.3f}ms: {e}", exc_info=True)
        raise
    finally:
        if owns_tracing:
            tracemalloc.stop()

    processing_time_ms = (time.perf_counter() - start_time) * 1000
    logger.info(
        f"Pipeline {' -> '.join(operations_applied) or '(no stages)'} -> {spec.terminal.value} "
        f"completed in {processing_time_ms:.3f}ms"
    )

    return PipelineResult(
        result=result,
        operations_applied=operations_applied,
        terminal=spec.terminal,
        processing_time_ms=processing_time_ms,
        memory_usage_mb=peak / 1024 / 1024,
    )
