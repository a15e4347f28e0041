"""Schema validator tests. No chain state involved."""
import pytest

from code_reasoning.core import ReasonCode, ThoughtValidationError, ThoughtValidator
from conftest import make_thought


@pytest.fixture
def validator() -> ThoughtValidator:
    return ThoughtValidator(max_thought_length=50)


def rejection(validator: ThoughtValidator, payload) -> ThoughtValidationError:
    with pytest.raises(ThoughtValidationError) as excinfo:
        validator.validate(payload)
    return excinfo.value


def test_minimal_thought_is_accepted(validator):
    step = validator.validate(make_thought())
    assert step.thought_number == 1
    assert step.total_thoughts == 3
    assert step.next_thought_needed is True
    assert step.is_revision is None
    assert step.branch_id is None


def test_thought_text_is_trimmed(validator):
    step = validator.validate(make_thought(thought="  padded  "))
    assert step.thought == "padded"


def test_unknown_keys_are_ignored(validator):
    step = validator.validate(make_thought(extra_key="whatever"))
    assert not hasattr(step, "extra_key")


@pytest.mark.parametrize("payload", [None, "thought", 42, ["thought"]])
def test_non_object_payload(validator, payload):
    error = rejection(validator, payload)
    assert error.reason == ReasonCode.INVALID_PAYLOAD


@pytest.mark.parametrize(
    "field", ["thought", "thought_number", "total_thoughts", "next_thought_needed"]
)
def test_missing_required_field(validator, field):
    error = rejection(validator, make_thought(**{field: ...}))
    assert error.reason == ReasonCode.MISSING_FIELD
    assert error.field == field
    assert field in error.message


@pytest.mark.parametrize("text", ["", "   ", "\n\t"])
def test_empty_thought(validator, text):
    error = rejection(validator, make_thought(thought=text))
    assert error.reason == ReasonCode.INVALID_THOUGHT
    assert "Thought cannot be empty" in error.message


def test_thought_must_be_a_string(validator):
    error = rejection(validator, make_thought(thought=123))
    assert error.reason == ReasonCode.INVALID_THOUGHT


def test_thought_too_long_names_the_limit(validator):
    error = rejection(validator, make_thought(thought="x" * 51))
    assert error.reason == ReasonCode.THOUGHT_TOO_LONG
    assert "50 characters" in error.message


def test_thought_at_the_limit_is_accepted(validator):
    step = validator.validate(make_thought(thought="x" * 50))
    assert len(step.thought) == 50


@pytest.mark.parametrize("value", [0, -1, 1.5, True, "1"])
def test_invalid_thought_number(validator, value):
    error = rejection(validator, make_thought(thought_number=value))
    assert error.reason == ReasonCode.INVALID_THOUGHT_NUMBER
    assert error.field == "thought_number"


@pytest.mark.parametrize("value", [0, -3, 2.0, None])
def test_invalid_total_thoughts(validator, value):
    error = rejection(validator, make_thought(total_thoughts=value))
    assert error.reason == ReasonCode.INVALID_TOTAL_THOUGHTS


def test_next_thought_needed_must_be_boolean(validator):
    error = rejection(validator, make_thought(next_thought_needed="yes"))
    assert error.reason == ReasonCode.INVALID_FIELD
    assert error.field == "next_thought_needed"


def test_revision_requires_target(validator):
    error = rejection(validator, make_thought(is_revision=True))
    assert error.reason == ReasonCode.REVISION_MISUSE
    assert "revises_thought" in error.message


@pytest.mark.parametrize("flag", [..., False])
def test_revision_target_without_flag(validator, flag):
    error = rejection(validator, make_thought(is_revision=flag, revises_thought=1))
    assert error.reason == ReasonCode.REVISION_MISUSE
    assert "Cannot set revises_thought" in error.message


def test_revision_target_must_be_positive(validator):
    error = rejection(validator, make_thought(is_revision=True, revises_thought=0))
    assert error.reason == ReasonCode.REVISION_MISUSE


@pytest.mark.parametrize(
    "branch_fields",
    [
        {"branch_id": "alt"},
        {"branch_from_thought": 1},
        {"branch_id": "alt", "branch_from_thought": 1},
    ],
)
def test_revision_and_branch_are_exclusive(validator, branch_fields):
    payload = make_thought(is_revision=True, revises_thought=1, **branch_fields)
    error = rejection(validator, payload)
    assert error.reason == ReasonCode.REVISION_MISUSE


def test_valid_revision(validator):
    step = validator.validate(make_thought(thought_number=2, is_revision=True, revises_thought=1))
    assert step.is_revision is True
    assert step.revises_thought == 1


def test_branch_origin_requires_branch_id(validator):
    error = rejection(validator, make_thought(branch_from_thought=1))
    assert error.reason == ReasonCode.BRANCH_MISUSE


def test_branch_id_must_not_be_blank(validator):
    error = rejection(validator, make_thought(branch_id="   ", branch_from_thought=1))
    assert error.reason == ReasonCode.BRANCH_MISUSE


def test_branch_start_and_continuation_shapes(validator):
    start = validator.validate(make_thought(branch_id=" alt ", branch_from_thought=1))
    assert start.branch_id == "alt"
    assert start.branch_from_thought == 1

    continuation = validator.validate(make_thought(branch_id="alt"))
    assert continuation.branch_from_thought is None


def test_optional_hint_is_kept(validator):
    step = validator.validate(make_thought(needs_more_thoughts=True))
    assert step.needs_more_thoughts is True


def test_error_message_lists_every_problem(validator):
    error = rejection(validator, make_thought(thought_number=0, total_thoughts=0))
    assert error.message.startswith("Validation Error: ")
    assert "thought_number" in error.message
    assert "total_thoughts" in error.message
