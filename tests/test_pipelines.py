"""
Test suite for declarative pipelines, run settings and logging.
"""

import logging
import tracemalloc

import pytest
from pydantic import ValidationError

from streampipe import (
    PipelineResult, PipelineSettings, PipelineSpec, PipelineSpecError, StreamPipeError,
    Stream, build_pipeline, run_pipeline, setup_logging,
)
from streampipe.models import OperationSpec, TerminalType
from streampipe.utils import resolve_operation


class TestPipelineModels:
    """Test validation of pipeline descriptions"""

    def test_schema_example_is_valid(self):
        """Test that the documented example validates"""
        example = PipelineSpec.model_config["json_schema_extra"]["example"]
        spec = PipelineSpec.model_validate(example)

        assert spec.terminal == TerminalType.COLLECT
        assert [op.type.value for op in spec.operations] == ["filter", "skip", "limit"]
        assert spec.operations[0].operation.name == "Numbers.is_even"
        assert spec.operations[0].operation.args == []

    def test_counted_operation_requires_count(self):
        with pytest.raises(ValidationError, match="requires a count"):
            OperationSpec(type="limit")

    def test_callable_operation_requires_operation(self):
        with pytest.raises(ValidationError, match="requires an operation"):
            OperationSpec(type="map")

    def test_distinct_and_flat_map_allow_no_operation(self):
        assert OperationSpec(type="distinct").operation is None
        assert OperationSpec(type="flat_map").operation is None

    def test_collect_requires_collector(self):
        with pytest.raises(ValidationError, match="requires a collector"):
            PipelineSpec(terminal="collect")

    def test_operation_name_format(self):
        with pytest.raises(ValidationError, match="Group.factory"):
            OperationSpec(type="map", operation="upper")

    def test_unknown_operation_type(self):
        with pytest.raises(ValidationError):
            OperationSpec(type="sort", operation="Logical.identity")

    def test_settings_validation(self):
        """Test log level normalization and max_elements bounds"""
        assert PipelineSettings(log_level=" debug ").log_level == "DEBUG"

        with pytest.raises(ValidationError, match="Invalid log level"):
            PipelineSettings(log_level="LOUD")

        with pytest.raises(ValidationError):
            PipelineSettings(max_elements=0)


class TestOperationResolution:
    """Test lookup of operation-library factories"""

    def test_resolve_with_args(self):
        assert resolve_operation("Numbers.is_even")(4) is True
        assert resolve_operation(None) is None

        spec = OperationSpec(type="map", operation={"name": "Numbers.plus", "args": [3]})
        assert resolve_operation(spec.operation)(4) == 7

    def test_unknown_operation(self):
        with pytest.raises(PipelineSpecError, match="Unknown operation: Numbers.nope"):
            resolve_operation("Numbers.nope")

        with pytest.raises(PipelineSpecError, match="Unknown operation: Math.plus"):
            resolve_operation("Math.plus")

    def test_private_names_are_not_resolved(self):
        with pytest.raises(PipelineSpecError, match="Unknown operation"):
            resolve_operation("Numbers.__init__")

    def test_bad_arguments(self):
        """Test that a factory argument mismatch becomes a spec error"""
        with pytest.raises(PipelineSpecError, match="Bad arguments for Numbers.plus"):
            resolve_operation("Numbers.plus")

    def test_spec_error_is_package_error(self):
        assert issubclass(PipelineSpecError, StreamPipeError)


class TestBuildPipeline:
    """Test turning a description into a lazy stream"""

    def test_build_is_lazy(self):
        """Test that building pulls nothing from the source"""
        pulled = []

        def source():
            for i in range(5):
                pulled.append(i)
                yield i

        stream = build_pipeline(source(), {"operations": [{"type": "map", "operation": {"name": "Numbers.plus", "args": [1]}}]})

        assert isinstance(stream, Stream)
        assert pulled == [], f"Build should not pull: {pulled}"
        assert stream.to_list() == [1, 2, 3, 4, 5]

    def test_build_applies_stages_only(self, people):
        """Test that the terminal and collector are left to the caller"""
        spec = {
            "operations": [
                {"type": "filter", "operation": {"name": "Objects.has_property_with_value", "args": ["age", 20]}},
            ],
            "terminal": "collect",
            "collector": {"type": "join", "delimiter": ", "},
        }
        stream = build_pipeline(people, spec)
        names = stream.map(lambda p: p["name"] if isinstance(p, dict) else p.name)

        assert names.to_list() == ["Johny", "Mario", "Rachel"]


class TestRunPipeline:
    """Test running pipelines end to end"""

    def test_run_documented_example(self):
        example = PipelineSpec.model_config["json_schema_extra"]["example"]

        result = run_pipeline(Stream.iterate(1, lambda x: x + 1), example)

        assert isinstance(result, PipelineResult)
        assert result.result == sum(range(12, 33, 2)), f"Unexpected result: {result.result}"
        assert result.operations_applied == ["filter", "skip", "limit"]
        assert result.terminal == TerminalType.COLLECT
        assert result.processing_time_ms >= 0
        assert result.memory_usage_mb >= 0

    @pytest.mark.parametrize("terminal,expected", [
        ("to_list", [2, 4, 6]),
        ("to_dict", {1: 2, 3: 4, 5: 6}),
        ("count", 3),
        ("find_first", 2),
    ])
    def test_terminals(self, terminal, expected):
        spec = {"operations": [{"type": "filter", "operation": "Numbers.is_even"}], "terminal": terminal}

        result = run_pipeline([1, 2, 3, 4, 5, 6], spec)

        assert result.result == expected, f"{terminal} gave {result.result}"

    def test_group_by_collector(self, people):
        spec = PipelineSpec(
            terminal="collect",
            collector={"type": "group_by", "classifier": {"name": "Objects.get", "args": ["age"]},
                       "mapper": {"name": "Objects.get", "args": ["name"]}},
        )

        result = run_pipeline(people, spec)

        assert result.result == {20: ["Johny", "Mario", "Rachel"], 30: ["Anna", "Zeus"], 40: ["Tomas"]}

    def test_group_and_reduce_by_collector(self):
        spec = {
            "operations": [{"type": "distinct"}],
            "terminal": "collect",
            "collector": {"type": "group_and_reduce_by", "classifier": "Numbers.is_even",
                          "reducer": {"name": "Logical.identity"}},
        }

        result = run_pipeline([1, 2, 2, 3, 4], spec)

        assert result.result == {False: 1, True: 2}, f"Unexpected result: {result.result}"

    def test_max_elements_bounds_infinite_source(self):
        settings = PipelineSettings(max_elements=3)

        result = run_pipeline(Stream.iterate(0, lambda x: x + 5), {}, settings)

        assert result.result == [0, 5, 10]
        assert result.operations_applied == ["limit"]

    def test_tracing_left_running_when_already_started(self):
        """Test that an outer tracemalloc session is not stopped"""
        tracemalloc.start()
        try:
            run_pipeline([1, 2], {"terminal": "count"})
            assert tracemalloc.is_tracing(), "run_pipeline should not stop outer tracing"
        finally:
            tracemalloc.stop()

    def test_failure_is_logged_and_raised(self, caplog):
        spec = {"operations": [{"type": "map", "operation": {"name": "Numbers.multiply", "args": [2]}}]}

        with caplog.at_level(logging.ERROR, logger="streampipe"):
            with pytest.raises(TypeError):
                run_pipeline([1, None], spec)

        assert "Pipeline failed" in caplog.text
        assert not tracemalloc.is_tracing(), "Tracing should stop after a failure"

    def test_invalid_spec_raises_validation_error(self):
        with pytest.raises(ValidationError):
            run_pipeline([1], {"terminal": "collect"})

    def test_success_is_logged(self, caplog):
        with caplog.at_level(logging.INFO, logger="streampipe"):
            run_pipeline([1, 2, 3], {"operations": [{"type": "skip", "count": 1}]})

        assert "Pipeline skip -> to_list completed" in caplog.text


class TestLoggingSetup:
    """Test the package logging configuration"""

    def test_setup_logging_adds_one_handler(self):
        package_logger = setup_logging("debug")
        handlers = list(package_logger.handlers)

        setup_logging("WARNING")

        assert package_logger.name == "streampipe"
        assert package_logger.handlers == handlers, "Handler should only be added once"
        assert package_logger.level == logging.WARNING

    def test_setup_logging_rejects_bad_level(self):
        with pytest.raises(ValidationError):
            setup_logging("chatty")

    def test_debug_logs_terminal_operations(self, caplog):
        with caplog.at_level(logging.DEBUG, logger="streampipe"):
            Stream.of(1, 2).collect(lambda acc, item, index: item)

        assert "Draining stream for collect" in caplog.text
        assert "Collector seeded with 1" in caplog.text
