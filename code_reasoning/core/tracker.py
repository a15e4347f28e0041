"""Chain state and the tracker that enforces chain-level rules."""
from typing import Dict, List, Optional, Set
from pydantic import BaseModel
from code_reasoning.core.errors import ChainReferenceError, ReasonCode
from code_reasoning.models.responses import ChainSnapshot, ChainSummary
from code_reasoning.models.thought import ThoughtData
from code_reasoning.utils.logging import get_logger

logger = get_logger(__name__)


class ChainState:
    """Accepted thoughts in acceptance order, plus the per-branch index.

    Only ChainTracker mutates this object.
    """

    def __init__(self):
        self.history: List[ThoughtData] = []
        self.branches: Dict[str, List[ThoughtData]] = {}

    def known_numbers(self) -> Set[int]:
        return {step.thought_number for step in self.history}

    def main_line(self) -> List[ThoughtData]:
        return [step for step in self.history if step.branch_id is None]

    def line(self, branch_id: Optional[str]) -> List[ThoughtData]:
        if branch_id is None:
            return self.main_line()
        return self.branches.get(branch_id, [])

    def summary(self) -> ChainSummary:
        return ChainSummary(
            thought_history_length=len(self.history),
            branch_count=len(self.branches),
            revision_count=sum(1 for step in self.history if step.is_revision),
        )


class TrackResult(BaseModel):
    """Outcome of recording one thought."""
    thought: ThoughtData
    thought_history_length: int
    branches: List[str]
    created_branch: bool = False


class ChainTracker:
    """Check a validated thought against the chain and record it."""

    def __init__(self, state: ChainState):
        self.state = state

    def check(self, step: ThoughtData) -> None:
        """Raise ChainReferenceError if ``step`` cannot join the chain."""
        known = self.state.known_numbers()
        history_length = len(self.state.history)

        if step.revises_thought is not None and step.revises_thought not in known:
            raise ChainReferenceError(
                ReasonCode.INVALID_REVISION_REFERENCE,
                f"Invalid revises_thought ({step.revises_thought}): cannot revise a "
                f"non-existent thought. Current thought history has {history_length} thoughts.",
                "revises_thought",
            )

        if step.branch_from_thought is not None:
            if step.branch_from_thought not in known:
                raise ChainReferenceError(
                    ReasonCode.INVALID_BRANCH_REFERENCE,
                    f"Invalid branch_from_thought ({step.branch_from_thought}): cannot "
                    f"branch from a non-existent thought. Current thought history has "
                    f"{history_length} thoughts.",
                    "branch_from_thought",
                )
        elif step.branch_id is not None and step.branch_id not in self.state.branches:
            raise ChainReferenceError(
                ReasonCode.INVALID_BRANCH_REFERENCE,
                f"Unknown branch_id '{step.branch_id}': branch_from_thought is required "
                f"on the first thought of a new branch.",
                "branch_from_thought",
            )

        if step.branch_id is None and not step.is_revision:
            used = {existing.thought_number for existing in self.state.main_line()}
            if step.thought_number in used:
                raise ChainReferenceError(
                    ReasonCode.DUPLICATE_THOUGHT_NUMBER,
                    f"thought_number {step.thought_number} is already used on the main "
                    f"line. Use the next number, or set is_revision with revises_thought "
                    f"to correct an earlier thought.",
                    "thought_number",
                )

        if not step.next_thought_needed:
            line = self.state.line(step.branch_id)
            if any(not existing.next_thought_needed for existing in line):
                label = f"branch '{step.branch_id}'" if step.branch_id else "the main line"
                raise ChainReferenceError(
                    ReasonCode.LINE_ALREADY_TERMINATED,
                    f"{label} already has a final thought (next_thought_needed=false).",
                    "next_thought_needed",
                )

    def track(self, step: ThoughtData) -> TrackResult:
        """Check, normalize and append ``step``. State is untouched on failure."""
        self.check(step)

        if step.thought_number > step.total_thoughts:
            logger.debug(
                "total_thoughts_adjusted",
                old_total=step.total_thoughts,
                new_total=step.thought_number,
            )
            step = step.model_copy(update={"total_thoughts": step.thought_number})

        created_branch = False
        self.state.history.append(step)
        if step.branch_id is not None:
            if step.branch_id not in self.state.branches:
                self.state.branches[step.branch_id] = []
                created_branch = True
                logger.info(
                    "branch_created",
                    branch_id=step.branch_id,
                    from_thought=step.branch_from_thought,
                )
            self.state.branches[step.branch_id].append(step)

        return TrackResult(
            thought=step,
            thought_history_length=len(self.state.history),
            branches=list(self.state.branches),
            created_branch=created_branch,
        )

    def summary(self) -> ChainSummary:
        return self.state.summary()

    def snapshot(self) -> ChainSnapshot:
        return ChainSnapshot(
            history=list(self.state.history),
            branches={key: list(steps) for key, steps in self.state.branches.items()},
            summary=self.state.summary(),
        )
