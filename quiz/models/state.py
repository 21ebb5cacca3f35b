"""Quiz State - Estado em memoria de uma tentativa."""

from dataclasses import dataclass, field
from typing import Any

from .enums import AttemptStatus
from .schemas import Question


@dataclass
class Attempt:
    """Snapshot de uma tentativa em andamento.

    A tentativa referencia o quiz apenas pelo ID: as perguntas sao copiadas
    no momento do load e edicoes posteriores na pagina nao afetam a
    tentativa em curso.

    Attributes:
        quiz_document_id: ID da pagina do quiz
        questions: Snapshot das perguntas (com gabarito, nunca enviado ao cliente)
        current_index: Cursor 0-based da pergunta atual
        score: Acertos ate o momento
        status: Estado do ciclo de vida
        answered: Indices ja corrigidos nesta tentativa
        result_recorded: Se o append do resultado ja foi disparado
    """

    quiz_document_id: str
    questions: list[Question] = field(default_factory=list)
    current_index: int = 0
    score: int = 0
    status: AttemptStatus = AttemptStatus.LOADED
    answered: set[int] = field(default_factory=set)
    result_recorded: bool = False

    @property
    def total_questions(self) -> int:
        return len(self.questions)

    @property
    def is_complete(self) -> bool:
        return self.status == AttemptStatus.COMPLETED

    def record_answer(self, index: int, is_correct: bool) -> None:
        """Registra a correcao e avanca o cursor."""
        self.answered.add(index)
        if is_correct:
            self.score += 1
        self.current_index = index + 1
        if self.current_index >= self.total_questions:
            self.status = AttemptStatus.COMPLETED
        else:
            self.status = AttemptStatus.IN_PROGRESS

    def to_dict(self) -> dict[str, Any]:
        """Visao publica do estado (sem gabarito)."""
        return {
            "quiz_document_id": self.quiz_document_id,
            "status": self.status.value,
            "current_index": self.current_index,
            "score": self.score,
            "total_questions": self.total_questions,
            "result_recorded": self.result_recorded,
        }
