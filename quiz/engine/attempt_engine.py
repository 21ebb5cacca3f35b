"""Attempt Engine - Maquina de estados da tentativa de quiz.

Ciclo de vida: IDLE -> LOADED -> IN_PROGRESS -> COMPLETED.

Cada ``AttemptSession`` guarda no maximo uma tentativa; um novo ``start``
descarta a anterior sem persistir nada. O ``AttemptRegistry`` mantem uma
sessao por session_id, entao varios participantes podem usar o mesmo
processo. O registry e limitado (LRU com TTL) e so cria sessoes no
``get`` chamado ao carregar um quiz. Submissoes concorrentes na mesma
sessao nao sao suportadas: a correcao deve seguir a ordem do cursor.
"""

from __future__ import annotations

import logging
import time
from collections import OrderedDict
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from ..exceptions import (
    AlreadyAnswered,
    InvalidQuestionIndex,
    MalformedDocument,
    NoActiveAttempt,
    QuizError,
)
from ..models.enums import AttemptStatus
from ..models.schemas import CompletionSummary, ResultRecord
from ..models.state import Attempt
from .grading_engine import GradeOutcome, GradingEngine

if TYPE_CHECKING:
    from ..storage.document_store import DocumentStoreClient

logger = logging.getLogger(__name__)

DEFAULT_SESSION_ID = "default"


@dataclass
class AnswerOutcome:
    """Resultado de uma submissao dentro da tentativa."""

    grade: GradeOutcome
    completed: bool = False
    summary: CompletionSummary | None = None
    result_recorded: bool | None = None
    record_error: QuizError | None = None


class AttemptSession:
    """Tentativa de um participante sobre um snapshot do quiz.

    Example:
        >>> session = AttemptSession(store)
        >>> await session.start("12345")
        >>> outcome = await session.submit_answer(["Paris"])
        >>> outcome.grade.feedback
        'Correct!'
    """

    def __init__(self, store: DocumentStoreClient, grading: GradingEngine | None = None):
        self.store = store
        self.grading = grading or GradingEngine()
        self.attempt: Attempt | None = None

    @property
    def status(self) -> AttemptStatus:
        return self.attempt.status if self.attempt else AttemptStatus.IDLE

    async def start(self, quiz_id: str) -> Attempt:
        """Carrega o quiz e abre uma nova tentativa.

        Em caso de erro o estado anterior e mantido e a excecao propaga.

        Raises:
            NotFound, MissingContent, MalformedDocument, StoreUnavailable, TransportError
        """
        document = await self.store.fetch_quiz_document(quiz_id)
        if not document.questions:
            raise MalformedDocument(f"Quiz {quiz_id} nao tem perguntas")

        if self.attempt is not None and not self.attempt.is_complete:
            logger.info(f"Tentativa anterior do quiz {self.attempt.quiz_document_id} descartada")

        self.attempt = Attempt(
            quiz_document_id=quiz_id,
            questions=[q.model_copy(deep=True) for q in document.questions],
        )
        logger.debug(f"Tentativa iniciada: quiz {quiz_id}, {len(document.questions)} perguntas")
        return self.attempt

    def _require_attempt(self) -> Attempt:
        if self.attempt is None:
            raise NoActiveAttempt("Nenhum quiz carregado para esta sessao")
        return self.attempt

    async def submit_answer(
        self, selected: list[str], question_index: int | None = None
    ) -> AnswerOutcome:
        """Corrige a pergunta do cursor e avanca.

        Ao passar da ultima pergunta a tentativa vira COMPLETED e o
        resultado e anexado ao documento uma unica vez. Falha no append
        nao impede o resumo de conclusao: ela e logada e devolvida em
        ``record_error``.

        Args:
            selected: Respostas escolhidas
            question_index: Indice esperado (default: cursor atual)

        Raises:
            NoActiveAttempt: nenhuma tentativa carregada
            InvalidQuestionIndex: indice fora do snapshot ou a frente do cursor
            AlreadyAnswered: pergunta ja corrigida nesta tentativa
        """
        attempt = self._require_attempt()
        index = attempt.current_index if question_index is None else question_index

        if index < 0 or index >= attempt.total_questions:
            raise InvalidQuestionIndex(
                "Invalid question index.",
                details={"index": index, "total": attempt.total_questions},
            )
        if index in attempt.answered:
            raise AlreadyAnswered(
                f"Pergunta {index} ja foi respondida nesta tentativa", details={"index": index}
            )
        if index != attempt.current_index:
            raise InvalidQuestionIndex(
                f"Pergunta {index} ainda nao foi alcancada",
                details={"index": index, "current_index": attempt.current_index},
            )

        grade = self.grading.grade_question(attempt.questions, index, selected)
        attempt.record_answer(index, grade.is_correct)

        if not attempt.is_complete:
            return AnswerOutcome(grade=grade)

        summary = self.grading.summarize(attempt.score, attempt.total_questions)
        outcome = AnswerOutcome(grade=grade, completed=True, summary=summary)

        if not attempt.result_recorded:
            attempt.result_recorded = True
            record = ResultRecord(score=attempt.score, total_questions=attempt.total_questions)
            try:
                await self.store.append_result(attempt.quiz_document_id, record)
                outcome.result_recorded = True
            except QuizError as e:
                logger.error(
                    f"Falha ao registrar resultado do quiz {attempt.quiz_document_id}: "
                    f"[{e.kind}] {e.message}"
                )
                outcome.result_recorded = False
                outcome.record_error = e

        return outcome

    async def record_result(self, score: int, total_questions: int) -> ResultRecord:
        """Anexa explicitamente um resultado ao quiz carregado na sessao.

        Raises:
            NoActiveAttempt: nenhuma tentativa carregada
            VersionConflict, MissingContent, NotFound, StoreUnavailable, TransportError
        """
        attempt = self._require_attempt()
        record = ResultRecord(score=score, total_questions=total_questions)
        await self.store.append_result(attempt.quiz_document_id, record)
        return record


# =============================================================================
# Registry de sessoes
# =============================================================================


@dataclass
class _SessionEntry:
    """Sessao registrada com horario do ultimo acesso."""

    session: AttemptSession
    last_accessed: float = field(default_factory=time.time)

    def is_expired(self, ttl_seconds: float) -> bool:
        return time.time() - self.last_accessed > ttl_seconds

    def touch(self) -> None:
        self.last_accessed = time.time()


class AttemptRegistry:
    """Uma ``AttemptSession`` por session_id, em cache LRU com TTL.

    Apenas ``get`` cria sessoes; ``find`` nunca cria, entao consultas com
    IDs arbitrarios nao aumentam o registry.
    """

    def __init__(
        self,
        store: DocumentStoreClient,
        grading: GradingEngine | None = None,
        max_sessions: int = 1000,
        session_ttl_seconds: float = 3600.0,
    ):
        self.store = store
        self.grading = grading or GradingEngine()
        self.max_sessions = max(1, max_sessions)
        self.session_ttl_seconds = session_ttl_seconds
        self._sessions: OrderedDict[str, _SessionEntry] = OrderedDict()
        self.evictions = 0

    def _lookup(self, session_id: str) -> _SessionEntry | None:
        entry = self._sessions.get(session_id)
        if entry is None:
            return None
        if entry.is_expired(self.session_ttl_seconds):
            del self._sessions[session_id]
            self.evictions += 1
            logger.debug(f"Sessao {session_id} expirada")
            return None
        # Move para o final (mais recente)
        self._sessions.move_to_end(session_id)
        entry.touch()
        return entry

    def find(self, session_id: str = DEFAULT_SESSION_ID) -> AttemptSession | None:
        """Retorna a sessao existente e ativa, ou None."""
        entry = self._lookup(session_id)
        return entry.session if entry else None

    def get(self, session_id: str = DEFAULT_SESSION_ID) -> AttemptSession:
        """Retorna a sessao, criando uma vazia (IDLE) se necessario."""
        entry = self._lookup(session_id)
        if entry is not None:
            return entry.session

        self._purge_expired()
        while len(self._sessions) >= self.max_sessions:
            oldest_id, _ = self._sessions.popitem(last=False)
            self.evictions += 1
            logger.info(f"Sessao {oldest_id} removida (limite de {self.max_sessions})")

        session = AttemptSession(self.store, self.grading)
        self._sessions[session_id] = _SessionEntry(session=session)
        return session

    def _purge_expired(self) -> None:
        expired = [
            sid
            for sid, entry in self._sessions.items()
            if entry.is_expired(self.session_ttl_seconds)
        ]
        for sid in expired:
            del self._sessions[sid]
        self.evictions += len(expired)

    def discard(self, session_id: str) -> None:
        self._sessions.pop(session_id, None)

    def __contains__(self, session_id: str) -> bool:
        entry = self._sessions.get(session_id)
        return entry is not None and not entry.is_expired(self.session_ttl_seconds)

    def __len__(self) -> int:
        return len(self._sessions)
