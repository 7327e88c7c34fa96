"""
Pydantic models for declarative pipelines and run settings.
"""

import logging
from enum import Enum
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class OperationType(str, Enum):
    """Intermediate stream operations"""
    MAP = "map"
    FILTER = "filter"
    PEEK = "peek"
    LIMIT = "limit"
    SKIP = "skip"
    DISTINCT = "distinct"
    FLAT_MAP = "flat_map"
    TAKE_WHILE = "take_while"
    DROP_WHILE = "drop_while"


class TerminalType(str, Enum):
    """Terminal stream operations"""
    TO_LIST = "to_list"
    TO_DICT = "to_dict"
    COUNT = "count"
    FIND_FIRST = "find_first"
    COLLECT = "collect"


class CollectorType(str, Enum):
    """Supported collectors"""
    JOIN = "join"
    SUM = "sum"
    COUNT = "count"
    TO_LIST = "to_list"
    GROUP_BY = "group_by"
    GROUP_AND_REDUCE_BY = "group_and_reduce_by"


COUNTED_OPERATIONS = {OperationType.LIMIT, OperationType.SKIP}
OPTIONAL_CALLABLE_OPERATIONS = {OperationType.DISTINCT, OperationType.FLAT_MAP}


class OperationRef(BaseModel):
    """Reference to an operation-library factory, e.g. ``Objects.get('age')``"""
    name: str = Field(
        ...,
        description="Dotted factory name",
        examples=["Numbers.is_even", "Objects.get"]
    )
    args: List[Any] = Field(
        default_factory=list,
        description="Positional arguments passed to the factory"
    )

    @field_validator('name')
    @classmethod
    def validate_name(cls, v):
        """Require a 'Group.factory' name"""
        v = v.strip()
        group, _, factory = v.partition(".")
        if not group or not factory:
            raise ValueError(f"Operation name must look like 'Group.factory', got '{v}'")
        return v


def _coerce_ref(v):
    if isinstance(v, str):
        return {"name": v}
    return v


class OperationSpec(BaseModel):
    """One intermediate stage of a declarative pipeline"""
    type: OperationType = Field(..., description="Stage type")
    operation: Optional[OperationRef] = Field(
        None,
        description="Callable for the stage; a bare string is treated as a name with no args"
    )
    count: Optional[int] = Field(
        None,
        description="Element count for limit and skip"
    )

    @field_validator('operation', mode='before')
    @classmethod
    def coerce_operation(cls, v):
        """Accept a bare factory name"""
        return _coerce_ref(v)

    @model_validator(mode='after')
    def validate_requirements(self):
        """Check the stage has what its type needs"""
        if self.type in COUNTED_OPERATIONS:
            if self.count is None:
                raise ValueError(f"'{self.type.value}' requires a count")
        elif self.operation is None and self.type not in OPTIONAL_CALLABLE_OPERATIONS:
            raise ValueError(f"'{self.type.value}' requires an operation")
        return self


class CollectorSpec(BaseModel):
    """Collector used by the collect terminal"""
    type: CollectorType = Field(..., description="Collector type")
    delimiter: str = Field("", description="Delimiter for join")
    classifier: Optional[OperationRef] = Field(None, description="Grouping key for group_by collectors")
    mapper: Optional[OperationRef] = Field(None, description="Item transform applied before collecting")
    reducer: Optional[OperationRef] = Field(None, description="Combiner for group_and_reduce_by")

    @field_validator('classifier', 'mapper', 'reducer', mode='before')
    @classmethod
    def coerce_refs(cls, v):
        """Accept bare factory names"""
        return _coerce_ref(v)


class PipelineSpec(BaseModel):
    """A complete declarative pipeline: stages plus one terminal"""
    operations: List[OperationSpec] = Field(
        default_factory=list,
        description="Intermediate stages, applied in order"
    )
    terminal: TerminalType = Field(
        TerminalType.TO_LIST,
        description="Terminal operation that drains the stream"
    )
    collector: Optional[CollectorSpec] = Field(
        None,
        description="Collector, required when terminal is 'collect'"
    )

    @model_validator(mode='after')
    def validate_collector(self):
        """A collect terminal needs a collector"""
        if self.terminal == TerminalType.COLLECT and self.collector is None:
            raise ValueError("terminal 'collect' requires a collector")
        return self

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "operations": [
                    {"type": "filter", "operation": "Numbers.is_even"},
                    {"type": "skip", "count": 5},
                    {"type": "limit", "count": 11}
                ],
                "terminal": "collect",
                "collector": {"type": "sum"}
            }
        }
    )


class PipelineSettings(BaseModel):
    """Settings for running declarative pipelines"""
    log_level: str = Field(
        "INFO",
        description="Level for the streampipe loggers"
    )
    max_elements: Optional[int] = Field(
        None,
        description="Bound applied with limit() before the terminal; None means unbounded",
        ge=1
    )

    @field_validator('log_level')
    @classmethod
    def validate_log_level(cls, v):
        """Validate the level is a standard logging level name"""
        level = v.strip().upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"Invalid log level: {v}")
        return level


class PipelineResult(BaseModel):
    """Outcome of a declarative pipeline run"""
    result: Any = Field(None, description="Value produced by the terminal operation")
    operations_applied: List[str] = Field(
        default_factory=list,
        description="Stage types in the order they were applied"
    )
    terminal: TerminalType = Field(..., description="Terminal operation that ran")
    processing_time_ms: float = Field(
        ...,
        description="Wall time of the run in milliseconds",
        ge=0
    )
    memory_usage_mb: float = Field(
        ...,
        description="Peak traced memory during the run in megabytes",
        ge=0
    )
