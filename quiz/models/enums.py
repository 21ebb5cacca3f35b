"""Quiz Enums - Tipos de pergunta e estados da tentativa."""

from enum import Enum


class QuestionKind(str, Enum):
    """Tipo da pergunta (valor = chave `type` persistida no documento)."""

    SINGLE_CHOICE = "radio"  # Exatamente uma resposta correta
    MULTIPLE_CHOICE = "checkbox"  # Conjunto de respostas corretas


class AttemptStatus(str, Enum):
    """Ciclo de vida de uma tentativa."""

    IDLE = "idle"
    LOADED = "loaded"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
