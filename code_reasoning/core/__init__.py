"""Core business logic modules."""
from .engine import ReasoningEngine, format_thought
from .errors import ChainReferenceError, ReasonCode, ReasoningError, ThoughtValidationError
from .guidance import Guidance, GuidanceCategory, GuidanceGenerator
from .tracker import ChainState, ChainTracker, TrackResult
from .validation import ThoughtValidator

__all__ = [
    "ReasoningEngine",
    "format_thought",
    "ChainReferenceError",
    "ReasonCode",
    "ReasoningError",
    "ThoughtValidationError",
    "Guidance",
    "GuidanceCategory",
    "GuidanceGenerator",
    "ChainState",
    "ChainTracker",
    "TrackResult",
    "ThoughtValidator",
]
