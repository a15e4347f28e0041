"""Chain tracker invariants."""
import pytest

from code_reasoning.core import ChainReferenceError, ChainState, ChainTracker, ReasonCode
from code_reasoning.models import ThoughtData
from conftest import make_thought


def step(**overrides) -> ThoughtData:
    return ThoughtData.model_validate(make_thought(**overrides))


@pytest.fixture
def tracker() -> ChainTracker:
    return ChainTracker(ChainState())


def test_track_appends_to_history(tracker):
    result = tracker.track(step(thought_number=1))
    assert result.thought_history_length == 1
    assert result.branches == []
    assert len(tracker.state.history) == 1


def test_total_is_raised_to_thought_number(tracker):
    result = tracker.track(step(thought_number=5, total_thoughts=3))
    assert result.thought.total_thoughts == 5
    assert tracker.state.history[0].total_thoughts == 5


def test_total_is_kept_when_already_large_enough(tracker):
    result = tracker.track(step(thought_number=2, total_thoughts=9))
    assert result.thought.total_thoughts == 9


def test_revision_of_missing_thought_is_rejected(tracker):
    with pytest.raises(ChainReferenceError) as excinfo:
        tracker.track(step(thought_number=4, total_thoughts=4, is_revision=True, revises_thought=1))
    assert excinfo.value.reason == ReasonCode.INVALID_REVISION_REFERENCE
    assert "(1)" in excinfo.value.message
    assert "0 thoughts" in excinfo.value.message
    assert tracker.state.history == []


def test_revision_may_reuse_a_thought_number(tracker):
    tracker.track(step(thought_number=1))
    tracker.track(step(thought_number=2))
    result = tracker.track(step(thought_number=2, is_revision=True, revises_thought=2))
    assert result.thought_history_length == 3
    assert tracker.summary().revision_count == 1


def test_branch_from_missing_thought_is_rejected(tracker):
    tracker.track(step(thought_number=1))
    with pytest.raises(ChainReferenceError) as excinfo:
        tracker.track(step(thought_number=2, branch_id="alt", branch_from_thought=7))
    assert excinfo.value.reason == ReasonCode.INVALID_BRANCH_REFERENCE
    assert len(tracker.state.history) == 1
    assert tracker.state.branches == {}


def test_reference_must_name_an_existing_number(tracker):
    tracker.track(step(thought_number=1))
    tracker.track(step(thought_number=5))
    # two thoughts recorded, but there is no thought 2
    with pytest.raises(ChainReferenceError):
        tracker.track(step(thought_number=6, is_revision=True, revises_thought=2))
    result = tracker.track(step(thought_number=6, is_revision=True, revises_thought=5))
    assert result.thought_history_length == 3


def test_branch_start_and_continuation(tracker):
    tracker.track(step(thought_number=1))
    first = tracker.track(step(thought_number=3, total_thoughts=5, branch_id="X", branch_from_thought=1))
    assert first.created_branch is True
    second = tracker.track(step(thought_number=4, total_thoughts=5, branch_id="X"))
    assert second.created_branch is False
    assert second.branches == ["X"]
    assert len(tracker.state.branches["X"]) == 2
    assert len(tracker.state.history) == 3


def test_continuation_of_unknown_branch_is_rejected(tracker):
    tracker.track(step(thought_number=1))
    with pytest.raises(ChainReferenceError) as excinfo:
        tracker.track(step(thought_number=2, branch_id="ghost"))
    assert excinfo.value.reason == ReasonCode.INVALID_BRANCH_REFERENCE
    assert "ghost" in excinfo.value.message


def test_branch_numbers_do_not_collide_with_main_line(tracker):
    tracker.track(step(thought_number=1))
    tracker.track(step(thought_number=2))
    tracker.track(step(thought_number=2, branch_id="alt", branch_from_thought=1))
    assert len(tracker.state.history) == 3


def test_duplicate_main_line_number_is_rejected(tracker):
    tracker.track(step(thought_number=1))
    with pytest.raises(ChainReferenceError) as excinfo:
        tracker.track(step(thought_number=1, thought="Again"))
    assert excinfo.value.reason == ReasonCode.DUPLICATE_THOUGHT_NUMBER
    assert len(tracker.state.history) == 1


def test_main_line_terminates_once(tracker):
    tracker.track(step(thought_number=1, next_thought_needed=False))
    with pytest.raises(ChainReferenceError) as excinfo:
        tracker.track(step(thought_number=2, next_thought_needed=False))
    assert excinfo.value.reason == ReasonCode.LINE_ALREADY_TERMINATED
    # continuing thoughts are still accepted after the conclusion
    tracker.track(step(thought_number=2))


def test_each_branch_terminates_independently(tracker):
    tracker.track(step(thought_number=1))
    tracker.track(step(thought_number=2, next_thought_needed=False))
    tracker.track(step(thought_number=2, branch_id="a", branch_from_thought=1, next_thought_needed=False))
    tracker.track(step(thought_number=2, branch_id="b", branch_from_thought=1, next_thought_needed=False))
    with pytest.raises(ChainReferenceError) as excinfo:
        tracker.track(step(thought_number=3, branch_id="a", next_thought_needed=False))
    assert "branch 'a'" in excinfo.value.message


def test_summary_counts(tracker):
    tracker.track(step(thought_number=1))
    tracker.track(step(thought_number=2, is_revision=True, revises_thought=1))
    tracker.track(step(thought_number=3, branch_id="a", branch_from_thought=1))
    tracker.track(step(thought_number=3, branch_id="b", branch_from_thought=2))
    summary = tracker.summary()
    assert summary.thought_history_length == 4
    assert summary.branch_count == 2
    assert summary.revision_count == 1


def test_snapshot_is_a_copy(tracker):
    tracker.track(step(thought_number=1))
    snapshot = tracker.snapshot()
    snapshot.history.clear()
    assert len(tracker.state.history) == 1
    assert snapshot.summary.thought_history_length == 1


def test_every_accepted_reference_existed_at_acceptance(tracker):
    submissions = [
        step(thought_number=1),
        step(thought_number=2, is_revision=True, revises_thought=3),
        step(thought_number=2),
        step(thought_number=3, branch_id="a", branch_from_thought=2),
        step(thought_number=4, branch_id="b", branch_from_thought=9),
        step(thought_number=3, is_revision=True, revises_thought=2),
    ]
    for submission in submissions:
        before = tracker.state.known_numbers()
        try:
            tracker.track(submission)
        except ChainReferenceError:
            continue
        for target in (submission.revises_thought, submission.branch_from_thought):
            assert target is None or target in before
    assert len(tracker.state.history) == 4
