"""Reasoning engine: validate, limit-check, track, respond."""
import threading
import time
from typing import Any, Optional
from code_reasoning.config import ReasoningConfig
from code_reasoning.core.errors import ReasonCode, ReasoningError
from code_reasoning.core.guidance import GuidanceGenerator
from code_reasoning.core.tracker import ChainState, ChainTracker
from code_reasoning.core.validation import ThoughtValidator
from code_reasoning.models.responses import (
    AbortedResponse,
    ChainSnapshot,
    FailedResponse,
    ProcessedResponse,
    ThoughtResponse,
)
from code_reasoning.models.thought import ThoughtData
from code_reasoning.utils.logging import get_logger

logger = get_logger(__name__)


def format_thought(step: ThoughtData) -> str:
    """Render a thought as a short block for the debug log."""
    if step.is_revision:
        header = f"Revision {step.thought_number}/{step.total_thoughts} (revising thought {step.revises_thought})"
    elif step.branch_id is not None:
        origin = step.branch_from_thought if step.branch_from_thought is not None else "-"
        header = f"Branch {step.thought_number}/{step.total_thoughts} (from thought {origin}, ID: {step.branch_id})"
    else:
        header = f"Thought {step.thought_number}/{step.total_thoughts}"
    body = "\n".join(f"  {line}" for line in step.thought.split("\n"))
    return f"\n{header}\n---\n{body}\n---"


class ReasoningEngine:
    """Owns one reasoning chain and processes thoughts against it.

    Every call is a full pass: validate, check the thought cap, check
    references and record, build the response. Rejections never change the
    chain. Chain mutation is serialized by a per-engine lock, so one engine
    can be shared by concurrent transport handlers.
    """

    def __init__(self, config: ReasoningConfig, state: Optional[ChainState] = None):
        """Initialize with limits and an optional pre-built chain state."""
        self.config = config
        self.state = state if state is not None else ChainState()
        self.validator = ThoughtValidator(config.max_thought_length)
        self.tracker = ChainTracker(self.state)
        self.guidance = GuidanceGenerator(config)
        self._lock = threading.Lock()
        logger.info(
            "engine_initialized",
            max_thought_length=config.max_thought_length,
            max_thoughts=config.max_thoughts,
            timeout_ms=config.timeout_ms,
        )

    def process(self, raw: Any) -> ThoughtResponse:
        """Process one raw thought payload. Never raises."""
        start = time.monotonic()
        try:
            response = self._process(raw)
        except ReasoningError as exc:
            logger.warning(
                "thought_rejected",
                reason=exc.reason.value,
                field=exc.field,
                error=exc.message,
            )
            response = self._failed(exc.reason, exc.message)
        except Exception as exc:
            logger.exception("thought_processing_error", error=str(exc))
            response = self._failed(ReasonCode.INTERNAL_ERROR, f"Internal error: {exc}")

        elapsed_ms = (time.monotonic() - start) * 1000
        if self.config.timeout_ms and elapsed_ms > self.config.timeout_ms:
            logger.warning(
                "slow_thought",
                elapsed_ms=round(elapsed_ms, 1),
                timeout_ms=self.config.timeout_ms,
            )
        return response

    def _process(self, raw: Any) -> ThoughtResponse:
        step = self.validator.validate(raw)
        logger.debug(
            "thought_validated",
            thought_number=step.thought_number,
            is_revision=bool(step.is_revision),
            branch_id=step.branch_id,
        )

        with self._lock:
            if step.thought_number > self.config.max_thoughts:
                return self._aborted(step)
            result = self.tracker.track(step)

        recorded = result.thought
        logger.debug("thought_recorded", display=format_thought(recorded))
        logger.info(
            "thought_processed",
            thought_number=recorded.thought_number,
            is_revision=bool(recorded.is_revision),
            branch_id=recorded.branch_id,
            next_thought_needed=recorded.next_thought_needed,
            history_length=result.thought_history_length,
        )
        return ProcessedResponse(
            thought_number=recorded.thought_number,
            total_thoughts=recorded.total_thoughts,
            next_thought_needed=recorded.next_thought_needed,
            branches=result.branches,
            thought_history_length=result.thought_history_length,
        )

    def _aborted(self, step: ThoughtData) -> AbortedResponse:
        summary = self.tracker.summary()
        logger.warning(
            "chain_aborted",
            max_thoughts=self.config.max_thoughts,
            thought_number=step.thought_number,
            history_length=summary.thought_history_length,
        )
        guidance = self.guidance.example_for(ReasonCode.MAX_THOUGHTS_EXCEEDED)
        return AbortedResponse(
            error=f"Max thought_number exceeded ({self.config.max_thoughts})",
            reason=ReasonCode.MAX_THOUGHTS_EXCEEDED.value,
            guidance=guidance.hint,
            max_thoughts=self.config.max_thoughts,
            summary=summary,
        )

    def _failed(self, reason: ReasonCode, message: str) -> FailedResponse:
        guidance = self.guidance.example_for(reason)
        return FailedResponse(
            error=message,
            reason=reason.value,
            guidance=guidance.hint,
            example=guidance.example,
        )

    def snapshot(self) -> ChainSnapshot:
        """Copy of the current chain for read-only consumers."""
        with self._lock:
            return self.tracker.snapshot()
