"""Quiz Engines - Logica de negocios."""

from .attempt_engine import AnswerOutcome, AttemptRegistry, AttemptSession
from .catalog_engine import build_catalog, summarize_questions
from .grading_engine import GradeOutcome, GradingEngine

__all__ = [
    "GradingEngine",
    "GradeOutcome",
    "AttemptSession",
    "AttemptRegistry",
    "AnswerOutcome",
    "build_catalog",
    "summarize_questions",
]
