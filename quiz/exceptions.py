"""Quiz Exceptions - Taxonomia de erros do nucleo de quiz.

Todas as falhas de store, codec, grading e sessao sao levantadas como
subclasses de ``QuizError``. O ``QuizService`` converte essas excecoes em
valores de erro (``error`` + ``error_kind``) antes de chegar na camada de
apresentacao.
"""

from typing import Any


class QuizError(Exception):
    """Erro base do quiz com mensagem e detalhes estruturados."""

    kind = "quiz_error"

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        return {"error": self.message, "error_kind": self.kind, "details": self.details}


# =============================================================================
# STORE BOUNDARY
# =============================================================================


class TransportError(QuizError):
    """Falha de rede/conectividade com o document store."""

    kind = "transport_error"


class StoreUnavailable(QuizError):
    """Resposta non-2xx que nao se encaixa em outro tipo."""

    kind = "store_unavailable"

    def __init__(
        self, message: str, status_code: int | None = None, details: dict[str, Any] | None = None
    ):
        super().__init__(message, details)
        self.status_code = status_code


class DuplicateName(QuizError):
    """Store rejeitou a criacao por colisao de titulo."""

    kind = "duplicate_name"


class NotFound(QuizError):
    kind = "not_found"


class MalformedDocument(QuizError):
    """Corpo do documento nao decodifica como quiz."""

    kind = "malformed_document"


class VersionConflict(QuizError):
    """Update com versao desatualizada (outro writer venceu a corrida)."""

    kind = "version_conflict"


class MissingContent(QuizError):
    kind = "missing_content"


# =============================================================================
# GRADING / ATTEMPT
# =============================================================================


class InvalidQuestionIndex(QuizError):
    kind = "invalid_question_index"


class AlreadyAnswered(QuizError):
    """Segunda submissao para a mesma pergunta na mesma tentativa."""

    kind = "already_answered"


class NoActiveAttempt(QuizError):
    kind = "no_active_attempt"


# =============================================================================
# AUTHORING
# =============================================================================


class EmptyQuizSubmission(QuizError):
    kind = "empty_quiz_submission"


class InvalidQuestion(QuizError):
    """Pergunta nao publicavel (choices vazias/duplicadas, gabarito invalido)."""

    kind = "invalid_question"
