"""
Tests for the enum vocabularies in the schemas package.
"""
from schemas import CommandKind, PrerequisiteKind, TargetOutcome, TaskStatus


class TestPrerequisiteKind:
    def test_enum_members(self):
        assert {m.name for m in PrerequisiteKind} == {"TIMESTAMP", "ORDER_ONLY"}

    def test_enum_is_string_valued(self):
        assert PrerequisiteKind("ORDER_ONLY") is PrerequisiteKind.ORDER_ONLY
        assert PrerequisiteKind.TIMESTAMP == "TIMESTAMP"


class TestCommandKind:
    def test_enum_values(self):
        assert [k.value for k in CommandKind] == ["run", "mkdir", "stage", "clean", "help"]

    def test_compares_with_discriminator_strings(self):
        assert CommandKind.STAGE == "stage"


class TestTaskStatus:
    def test_enum_values(self):
        assert TaskStatus.SUCCESS.value == "SUCCESS"
        assert TaskStatus.FAILURE.value == "FAILURE"


class TestTargetOutcome:
    def test_enum_members(self):
        expected = {"BUILT", "UP_TO_DATE", "NOTHING_TO_DO", "WOULD_BUILD"}
        assert {m.name for m in TargetOutcome} == expected
