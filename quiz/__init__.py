"""Quiz Module - Quizzes persistidos em paginas de um document store.

Arquitetura:
- models/: Enums, Schemas Pydantic, Attempt
- codec/: Escape HTML e formato storage (create e wire-safe)
- storage/: DocumentStoreClient (Confluence v2 pages)
- engine/: GradingEngine, catalogo, AttemptSession/AttemptRegistry
- service.py: QuizService (operacoes do nucleo)
- router.py: FastAPI endpoints
"""

from .config import QuizConfig, get_config
from .engine import AttemptRegistry, AttemptSession, GradingEngine, build_catalog
from .exceptions import QuizError
from .models import Attempt, AttemptStatus, Question, QuestionKind, Quiz, ResultRecord
from .service import QuizService
from .storage import DocumentStoreClient

__all__ = [
    # Config
    "QuizConfig",
    "get_config",
    # Models
    "QuestionKind",
    "AttemptStatus",
    "Question",
    "ResultRecord",
    "Quiz",
    "Attempt",
    # Engines
    "GradingEngine",
    "AttemptSession",
    "AttemptRegistry",
    "build_catalog",
    # Storage
    "DocumentStoreClient",
    # Service
    "QuizService",
    "QuizError",
]
