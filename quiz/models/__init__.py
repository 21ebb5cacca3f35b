"""Quiz Models - Enums, Schemas e State."""

from .enums import AttemptStatus, QuestionKind
from .schemas import (
    DEFAULT_QUIZ_NAME,
    NO_RESULTS_MARKER,
    CatalogRow,
    CompletionSummary,
    GradeAnswerRequest,
    GradeAnswerResponse,
    ListQuizzesResponse,
    LoadQuizResponse,
    PublicQuestion,
    Question,
    Quiz,
    QuizDocument,
    RecordResultRequest,
    RecordResultResponse,
    ResultRecord,
    SaveQuizRequest,
    SaveQuizResponse,
    ServiceResponse,
    StoredQuizDocument,
)
from .state import Attempt

__all__ = [
    # Enums
    "QuestionKind",
    "AttemptStatus",
    # Dominio
    "DEFAULT_QUIZ_NAME",
    "NO_RESULTS_MARKER",
    "Question",
    "ResultRecord",
    "Quiz",
    "QuizDocument",
    "StoredQuizDocument",
    "PublicQuestion",
    # Request/Response
    "ServiceResponse",
    "SaveQuizRequest",
    "SaveQuizResponse",
    "CatalogRow",
    "ListQuizzesResponse",
    "LoadQuizResponse",
    "CompletionSummary",
    "GradeAnswerRequest",
    "GradeAnswerResponse",
    "RecordResultRequest",
    "RecordResultResponse",
    # State
    "Attempt",
]
