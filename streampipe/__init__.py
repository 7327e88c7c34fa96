"""
streampipe - lazy, composable stream pipelines.

Build a Stream from a collection, a fixed list of elements or an infinite
step function, chain lazy stages onto it, then drain it with exactly one
terminal operation:

    Stream.iterate(1, NumberGenerator(1)).filter(Numbers.is_even()).skip(5).limit(11).to_list()
"""

from .callables import ABSENT
from .collectors import Collectors
from .iterators import NumberGenerator
from .models import PipelineResult, PipelineSettings, PipelineSpec
from .operations import Logical, Numbers, Objects, Strings, Values
from .stream import Stream
from .utils import PipelineSpecError, StreamPipeError, build_pipeline, run_pipeline, setup_logging

__all__ = [
    "ABSENT",
    "Stream",
    "Collectors",
    "NumberGenerator",
    "Logical",
    "Numbers",
    "Objects",
    "Strings",
    "Values",
    "PipelineSpec",
    "PipelineSettings",
    "PipelineResult",
    "StreamPipeError",
    "PipelineSpecError",
    "build_pipeline",
    "run_pipeline",
    "setup_logging",
]
