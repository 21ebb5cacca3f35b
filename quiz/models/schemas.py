"""Quiz Schemas - Modelos Pydantic do dominio e request/response."""

from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from .enums import QuestionKind

DEFAULT_QUIZ_NAME = "Quiz"
NO_RESULTS_MARKER = "No results yet"


def utc_timestamp() -> str:
    """Instante atual em ISO-8601 (UTC, com milissegundos e sufixo Z)."""
    now = datetime.now(timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")


# =============================================================================
# DOMINIO (formato persistido no documento)
# =============================================================================


class Question(BaseModel):
    """Pergunta do quiz.

    Os aliases correspondem as chaves do JSON persistido no store
    (`question`, `type`, `correctAnswer`). O modelo aceita documentos
    legados; as regras de publicacao ficam em ``validate_publishable``.
    """

    model_config = ConfigDict(populate_by_name=True)

    text: str = Field(..., alias="question", description="Enunciado da pergunta")
    kind: QuestionKind = Field(
        default=QuestionKind.SINGLE_CHOICE, alias="type", description="radio ou checkbox"
    )
    choices: list[str] = Field(default_factory=list, description="Alternativas em ordem")
    correct_answers: list[str] = Field(
        default_factory=list, alias="correctAnswer", description="Gabarito (subconjunto de choices)"
    )

    def to_storage(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, mode="json")


class ResultRecord(BaseModel):
    """Resultado de uma tentativa concluida. Append-only."""

    model_config = ConfigDict(populate_by_name=True)

    score: int = Field(..., ge=0)
    total_questions: int = Field(..., ge=0, alias="totalQuestions")
    timestamp: str = Field(default_factory=utc_timestamp)

    @field_validator("timestamp")
    @classmethod
    def _check_iso8601(cls, value: str) -> str:
        # fromisoformat so aceita sufixo Z a partir do 3.11
        datetime.fromisoformat(value.replace("Z", "+00:00"))
        return value

    @model_validator(mode="after")
    def _score_within_total(self) -> "ResultRecord":
        if self.total_questions < self.score:
            raise ValueError("totalQuestions deve ser >= score")
        return self

    def to_storage(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, mode="json")


class Quiz(BaseModel):
    """Quiz completo: nome, perguntas e historico de resultados."""

    id: str | None = Field(default=None, description="ID da pagina (ausente ate o 1o save)")
    name: str = Field(default=DEFAULT_QUIZ_NAME)
    questions: list[Question] = Field(default_factory=list)
    results: list[ResultRecord] = Field(default_factory=list)

    @field_validator("name")
    @classmethod
    def _normalize_name(cls, value: str) -> str:
        return value.strip() or DEFAULT_QUIZ_NAME


class QuizDocument(BaseModel):
    """Conteudo decodificado do corpo de uma pagina."""

    questions: list[Question] = Field(default_factory=list)
    results: list[ResultRecord] = Field(default_factory=list)


class StoredQuizDocument(QuizDocument):
    """Documento decodificado junto com metadados da pagina."""

    id: str
    name: str = ""
    version: int = 1


class PublicQuestion(BaseModel):
    """Pergunta como enviada ao participante: sem gabarito."""

    index: int
    text: str
    kind: QuestionKind
    choices: list[str]

    @classmethod
    def from_question(cls, index: int, question: Question) -> "PublicQuestion":
        return cls(index=index, text=question.text, kind=question.kind, choices=question.choices)


# =============================================================================
# RESPOSTAS DO SERVICO / REQUESTS HTTP
# =============================================================================


class ServiceResponse(BaseModel):
    """Base de toda resposta do servico: sucesso ou erro como valor."""

    error: str | None = Field(None, description="Mensagem de erro (se houver)")
    error_kind: str | None = Field(None, description="Tipo estavel do erro")

    @property
    def ok(self) -> bool:
        return self.error is None


class SaveQuizRequest(BaseModel):
    quiz_name: str = Field(default="", description="Nome do quiz (vazio = 'Quiz')")
    questions: list[Question] = Field(default_factory=list)


class SaveQuizResponse(ServiceResponse):
    success: bool = False
    page_id: str | None = None


class CatalogRow(BaseModel):
    """Linha da listagem de quizzes (view model somente leitura)."""

    row_key: str
    id: str
    name: str
    questions_summary: str
    results: list[ResultRecord] | str = Field(
        ..., description="Historico ou marcador 'No results yet'"
    )


class ListQuizzesResponse(ServiceResponse):
    quizzes: list[CatalogRow] = Field(default_factory=list)


class LoadQuizResponse(ServiceResponse):
    page_id: str | None = None
    questions: list[PublicQuestion] = Field(default_factory=list)


class CompletionSummary(BaseModel):
    """Resumo exibido ao participante ao final da tentativa."""

    score: int
    total_questions: int
    percentage: float
    passed: bool
    message: str


class GradeAnswerRequest(BaseModel):
    question_index: int = Field(..., ge=0)
    selected_answers: list[str] = Field(default_factory=list)
    session_id: str = Field(default="default")


class GradeAnswerResponse(ServiceResponse):
    is_correct: bool = False
    feedback: str | None = None
    completed: bool = False
    summary: CompletionSummary | None = None
    result_recorded: bool | None = Field(
        None, description="Se o append do resultado funcionou (so ao completar)"
    )


class RecordResultRequest(BaseModel):
    score: int = Field(..., ge=0)
    total_questions: int = Field(..., ge=0)
    session_id: str = Field(default="default")


class RecordResultResponse(ServiceResponse):
    success: bool = False
