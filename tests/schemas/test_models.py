"""
Tests for the build definition and result models.
"""
import json

from schemas import (
    BuildDefinition,
    CleanCommand,
    CommandResult,
    HelpCommand,
    MkdirCommand,
    RunCommand,
    RunSummary,
    StageCommand,
    TargetOutcome,
    TargetRecord,
    TargetSpec,
    TaskStatus,
)


class TestTargetSpec:
    def test_defaults_describe_a_source_leaf(self):
        spec = TargetSpec()
        assert spec.phony is False
        assert spec.prerequisites == []
        assert spec.order_only == []
        assert spec.sources == []
        assert spec.command is None

    def test_stage_command_is_selected_by_kind(self, release_target):
        spec = TargetSpec.model_validate(release_target)
        assert isinstance(spec.command, StageCommand)
        assert spec.command.destination == "build/release"
        assert spec.order_only == ["build/release"]

    def test_run_command_is_selected_by_kind(self, compile_target):
        spec = TargetSpec.model_validate(compile_target)
        assert isinstance(spec.command, RunCommand)
        assert spec.command.cwd is None
        assert spec.command.env == {}

    def test_every_command_kind_parses(self):
        kinds = {
            "mkdir": MkdirCommand,
            "clean": CleanCommand,
            "help": HelpCommand,
        }
        payloads = {"mkdir": {}, "clean": {"root": "build"}, "help": {"source": "build.yaml"}}
        for kind, cls in kinds.items():
            spec = TargetSpec.model_validate({"command": {"kind": kind, **payloads[kind]}})
            assert isinstance(spec.command, cls)


class TestCommandDescriptions:
    def test_run_description_quotes_arguments(self):
        cmd = RunCommand(argv=["cargo", "build", "--features", "fancy graphics"])
        assert cmd.describe() == "cargo build --features 'fancy graphics'"

    def test_run_description_mentions_directory(self):
        assert RunCommand(argv=["./grid-world"], cwd="build/debug").describe() == "cd build/debug; ./grid-world"

    def test_builtin_descriptions(self):
        assert MkdirCommand(path="build").describe() == "mkdir -p build"
        assert StageCommand(artifact="target/debug/app", destination="build/debug").describe() == (
            "stage target/debug/app -> build/debug/"
        )
        assert CleanCommand(root="build").describe() == "clean build"


class TestBuildDefinition:
    def test_default_target_is_first_declared(self):
        definition = BuildDefinition.model_validate(
            {"targets": {"all": {"phony": True}, "clean": {"phony": True}}}
        )
        assert definition.default_target() == "all"

    def test_explicit_default_target(self):
        definition = BuildDefinition.model_validate(
            {"default": "clean", "targets": {"all": {"phony": True}, "clean": {"phony": True}}}
        )
        assert definition.default_target() == "clean"


class TestRunSummary:
    def test_outcome_helpers(self):
        summary = RunSummary(
            requested=["release"],
            records=[
                TargetRecord(name="grid-world/src/main.rs", outcome=TargetOutcome.UP_TO_DATE),
                TargetRecord(name="target/release/grid-world", outcome=TargetOutcome.UP_TO_DATE),
                TargetRecord(name="build/release", outcome=TargetOutcome.UP_TO_DATE),
                TargetRecord(name="release", outcome=TargetOutcome.BUILT, command="stage"),
            ],
        )
        assert summary.built == ["release"]
        assert len(summary.up_to_date) == 3
        assert summary.outcomes()["release"] is TargetOutcome.BUILT

    def test_summary_serializes_for_event_payloads(self):
        summary = RunSummary(requested=["clean"], records=[TargetRecord(name="clean", outcome=TargetOutcome.BUILT)])
        data = json.loads(summary.model_dump_json())
        assert data["records"][0] == {"name": "clean", "outcome": "BUILT", "command": None}


class TestCommandResult:
    def test_failure_without_returncode(self):
        result = CommandResult(target="t", argv=["cargo"], cwd="/w", status=TaskStatus.FAILURE, error="cargo: not found")
        assert result.returncode is None
        assert result.completed_at is None
