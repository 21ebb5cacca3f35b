# =============================================================================
# TESTES - Quiz Schemas Module
# =============================================================================
# Testes unitarios para modelos Pydantic do quiz
# =============================================================================

import pytest
from pydantic import ValidationError


class TestQuestion:
    """Testes para Question."""

    def test_parse_storage_keys(self):
        """Verifica parse pelas chaves persistidas."""
        from quiz.models import Question, QuestionKind

        q = Question.model_validate(
            {"question": "Q?", "type": "checkbox", "choices": ["a", "b"], "correctAnswer": ["a"]}
        )

        assert q.text == "Q?"
        assert q.kind == QuestionKind.MULTIPLE_CHOICE
        assert q.correct_answers == ["a"]

    def test_to_storage_uses_aliases(self):
        """Verifica serializacao com as chaves do documento."""
        from quiz.models import Question

        data = Question(text="Q?", choices=["a"], correct_answers=["a"]).to_storage()

        assert data == {"question": "Q?", "type": "radio", "choices": ["a"], "correctAnswer": ["a"]}

    def test_unknown_type_rejected(self):
        """Verifica erro com tipo desconhecido."""
        from quiz.models import Question

        with pytest.raises(ValidationError):
            Question.model_validate({"question": "Q?", "type": "dropdown"})


class TestResultRecord:
    """Testes para ResultRecord."""

    def test_storage_keys(self):
        """Verifica chave totalQuestions e timestamp padrao."""
        from quiz.models import ResultRecord

        data = ResultRecord(score=1, total_questions=3).to_storage()

        assert data["score"] == 1
        assert data["totalQuestions"] == 3
        assert data["timestamp"].endswith("Z")

    def test_score_above_total(self):
        """Verifica erro quando score > total."""
        from quiz.models import ResultRecord

        with pytest.raises(ValidationError):
            ResultRecord(score=4, total_questions=3)

    def test_negative_score(self):
        """Verifica erro com score negativo."""
        from quiz.models import ResultRecord

        with pytest.raises(ValidationError):
            ResultRecord(score=-1, total_questions=3)

    def test_invalid_timestamp(self):
        """Verifica erro com timestamp fora do ISO-8601."""
        from quiz.models import ResultRecord

        with pytest.raises(ValidationError):
            ResultRecord(score=0, total_questions=1, timestamp="yesterday")

    def test_browser_timestamp_accepted(self):
        """Verifica timestamp no formato toISOString."""
        from quiz.models import ResultRecord

        record = ResultRecord.model_validate(
            {"score": 1, "totalQuestions": 1, "timestamp": "2024-01-15T12:00:00.000Z"}
        )

        assert record.timestamp == "2024-01-15T12:00:00.000Z"


class TestQuiz:
    """Testes para Quiz."""

    def test_name_trimmed(self):
        """Verifica trim do nome."""
        from quiz.models import Quiz

        assert Quiz(name="  Capitals ").name == "Capitals"

    def test_blank_name_defaults(self):
        """Verifica nome padrao."""
        from quiz.models import Quiz

        assert Quiz(name="   ").name == "Quiz"


class TestAttempt:
    """Testes para Attempt dataclass."""

    def test_record_answer_transitions(self, sample_questions):
        """Verifica LOADED -> IN_PROGRESS -> COMPLETED."""
        from quiz.models import Attempt, AttemptStatus

        attempt = Attempt(quiz_document_id="1", questions=sample_questions)
        assert attempt.status == AttemptStatus.LOADED

        attempt.record_answer(0, True)
        assert attempt.status == AttemptStatus.IN_PROGRESS

        attempt.record_answer(1, False)
        assert attempt.status == AttemptStatus.COMPLETED
        assert attempt.score == 1

    def test_to_dict_has_no_questions(self, sample_questions):
        """Verifica que a visao publica nao traz perguntas."""
        from quiz.models import Attempt

        data = Attempt(quiz_document_id="1", questions=sample_questions).to_dict()

        assert "questions" not in data
        assert data["total_questions"] == 2
