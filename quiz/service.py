"""Quiz Service - Fachada consumida pela camada de apresentacao.

Cada operacao devolve um response model; erros do nucleo nunca propagam
como excecao para fora daqui, chegam como ``error`` + ``error_kind``.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from .config import QuizConfig, get_config
from .engine.attempt_engine import (
    DEFAULT_SESSION_ID,
    AttemptRegistry,
    AttemptSession,
)
from .engine.catalog_engine import build_catalog
from .engine.grading_engine import GradingEngine
from .exceptions import (
    EmptyQuizSubmission,
    InvalidQuestion,
    NoActiveAttempt,
    QuizError,
    StoreUnavailable,
    TransportError,
)
from .models.enums import AttemptStatus, QuestionKind
from .models.schemas import (
    DEFAULT_QUIZ_NAME,
    GradeAnswerResponse,
    ListQuizzesResponse,
    LoadQuizResponse,
    PublicQuestion,
    Question,
    Quiz,
    RecordResultResponse,
    SaveQuizResponse,
)

if TYPE_CHECKING:
    from .storage.document_store import DocumentStoreClient

logger = logging.getLogger(__name__)

_STORE_FAILURES = (TransportError, StoreUnavailable)


def sanitize_question(question: Question) -> Question:
    """Remove do gabarito respostas vazias ou que nao estao entre as choices."""
    correct = [
        answer
        for answer in question.correct_answers
        if answer.strip() and answer in question.choices
    ]
    return question.model_copy(update={"correct_answers": correct})


def validate_publishable(question: Question, index: int) -> None:
    """Verifica as regras de publicacao de uma pergunta.

    Raises:
        InvalidQuestion: com o indice e o motivo em ``details``
    """

    def fail(reason: str) -> None:
        raise InvalidQuestion(
            f"Pergunta {index + 1} invalida: {reason}", details={"index": index, "reason": reason}
        )

    if not question.choices:
        fail("sem alternativas")
    if any(not choice.strip() for choice in question.choices):
        fail("alternativa vazia")
    if len(set(question.choices)) != len(question.choices):
        fail("alternativas duplicadas")
    if not question.correct_answers:
        fail("nenhuma resposta correta marcada")
    if question.kind == QuestionKind.SINGLE_CHOICE and len(question.correct_answers) != 1:
        fail("pergunta radio deve ter exatamente uma resposta correta")


def _error(response_cls, error: QuizError, **extra: Any):
    return response_cls(error=error.message, error_kind=error.kind, **extra)


class QuizService:
    """Operacoes do nucleo: salvar, listar, carregar, corrigir, registrar.

    Example:
        >>> service = QuizService(store)
        >>> saved = await service.save_quiz("Capitais", questions)
        >>> loaded = await service.load_quiz_for_attempt(saved.page_id)
        >>> graded = await service.grade_answer(0, ["Paris"])
    """

    def __init__(
        self,
        store: DocumentStoreClient,
        config: QuizConfig | None = None,
        registry: AttemptRegistry | None = None,
    ):
        self.store = store
        self.config = config or get_config()
        self.grading = GradingEngine(pass_threshold=self.config.pass_threshold)
        self.registry = registry or AttemptRegistry(
            store,
            self.grading,
            max_sessions=self.config.max_sessions,
            session_ttl_seconds=self.config.session_ttl_seconds,
        )

    def _active_session(self, session_id: str) -> AttemptSession:
        session = self.registry.find(session_id)
        if session is None:
            raise NoActiveAttempt(
                "Nenhum quiz carregado para esta sessao", details={"session_id": session_id}
            )
        return session

    @staticmethod
    def _log(operation: str, error: QuizError) -> None:
        if isinstance(error, _STORE_FAILURES):
            logger.error(f"{operation} falhou: [{error.kind}] {error.message}")
        else:
            logger.warning(f"{operation} falhou: [{error.kind}] {error.message}")

    async def save_quiz(self, name: str, questions: list[Question]) -> SaveQuizResponse:
        """Valida e cria a pagina do quiz.

        Quiz sem perguntas falha com ``EmptyQuizSubmission`` antes de
        qualquer chamada ao store.
        """
        try:
            if not questions:
                raise EmptyQuizSubmission("Invalid or empty quiz array")

            prepared = [sanitize_question(q) for q in questions]
            for index, question in enumerate(prepared):
                validate_publishable(question, index)

            quiz = Quiz(name=name or DEFAULT_QUIZ_NAME, questions=prepared)
            page_id = await self.store.create_quiz(quiz.name, quiz.questions)
        except QuizError as e:
            self._log("save_quiz", e)
            return _error(SaveQuizResponse, e)

        return SaveQuizResponse(success=True, page_id=page_id)

    async def list_quizzes(self) -> ListQuizzesResponse:
        try:
            documents = await self.store.list_quiz_documents()
        except QuizError as e:
            self._log("list_quizzes", e)
            return _error(ListQuizzesResponse, e)

        return ListQuizzesResponse(quizzes=build_catalog(documents))

    async def load_quiz_for_attempt(
        self, page_id: str, session_id: str = DEFAULT_SESSION_ID
    ) -> LoadQuizResponse:
        """Abre uma tentativa e devolve as perguntas sem gabarito."""
        created = session_id not in self.registry
        session = self.registry.get(session_id)
        try:
            attempt = await session.start(page_id)
        except QuizError as e:
            if created:
                self.registry.discard(session_id)
            self._log("load_quiz_for_attempt", e)
            return _error(LoadQuizResponse, e)

        return LoadQuizResponse(
            page_id=page_id,
            questions=[
                PublicQuestion.from_question(i, q) for i, q in enumerate(attempt.questions)
            ],
        )

    async def grade_answer(
        self,
        question_index: int,
        selected_answers: list[str],
        session_id: str = DEFAULT_SESSION_ID,
    ) -> GradeAnswerResponse:
        try:
            session = self._active_session(session_id)
            outcome = await session.submit_answer(selected_answers, question_index)
        except QuizError as e:
            self._log("grade_answer", e)
            return _error(GradeAnswerResponse, e)

        return GradeAnswerResponse(
            is_correct=outcome.grade.is_correct,
            feedback=outcome.grade.feedback,
            completed=outcome.completed,
            summary=outcome.summary,
            result_recorded=outcome.result_recorded,
        )

    async def record_result(
        self, score: int, total_questions: int, session_id: str = DEFAULT_SESSION_ID
    ) -> RecordResultResponse:
        """Anexa um resultado explicito ao quiz carregado na sessao."""
        try:
            session = self._active_session(session_id)
            await session.record_result(score, total_questions)
        except QuizError as e:
            self._log("record_result", e)
            return _error(RecordResultResponse, e)
        except ValueError as e:
            # score > total_questions (validacao do ResultRecord)
            logger.warning(f"record_result rejeitado: {e}")
            return RecordResultResponse(error=str(e), error_kind="invalid_result")

        return RecordResultResponse(success=True)

    def session_state(self, session_id: str = DEFAULT_SESSION_ID) -> dict[str, Any]:
        """Estado publico da sessao (para debug/monitoramento)."""
        session = self.registry.find(session_id)
        if session is None:
            return {"session_id": session_id, "status": AttemptStatus.IDLE.value}
        if session.attempt is None:
            return {"session_id": session_id, "status": session.status.value}
        return {"session_id": session_id, **session.attempt.to_dict()}


__all__ = ["QuizService", "sanitize_question", "validate_publishable"]
