"""Grading Engine - Correcao de respostas e resumo de conclusao."""

from dataclasses import dataclass

from ..exceptions import InvalidQuestionIndex
from ..models.enums import QuestionKind
from ..models.schemas import CompletionSummary, Question

CORRECT_FEEDBACK = "Correct!"
WRONG_FEEDBACK = "Wrong! Try again."


@dataclass(frozen=True)
class GradeOutcome:
    """Resultado da correcao. Nunca carrega o gabarito."""

    is_correct: bool

    @property
    def feedback(self) -> str:
        return CORRECT_FEEDBACK if self.is_correct else WRONG_FEEDBACK


class GradingEngine:
    """Motor de correcao de perguntas.

    Semantica por tipo:
        - SINGLE_CHOICE (radio): lista submetida igual ao gabarito,
          mesma ordem e mesmo tamanho
        - MULTIPLE_CHOICE (checkbox): igualdade de conjuntos (ordem e
          duplicatas irrelevantes)

    A comparacao e case-sensitive e pura: mesmas entradas, mesma saida.

    Example:
        >>> engine = GradingEngine()
        >>> engine.grade(QuestionKind.MULTIPLE_CHOICE, ["A", "B"], ["B", "A"]).is_correct
        True
    """

    DEFAULT_PASS_THRESHOLD = 90.0

    PASS_MESSAGE = (
        "Congratulations! You have successfully passed the quiz. It included {total} questions. "
        "To pass it, you needed to answer {threshold:g}% of questions correctly. "
        "Your score is {percentage:.2f}% ({score} questions out of {total})."
    )
    FAIL_MESSAGE = (
        "Sorry, you have failed this attempt. It included {total} questions. "
        "To pass it, you needed to answer {threshold:g}% questions correctly. "
        "Your score is {percentage:.2f}% ({score} questions out of {total})."
    )

    def __init__(self, pass_threshold: float = DEFAULT_PASS_THRESHOLD):
        self.pass_threshold = pass_threshold

    @staticmethod
    def grade(
        kind: QuestionKind, correct_answers: list[str], submitted: list[str]
    ) -> GradeOutcome:
        """Corrige uma submissao contra o gabarito.

        Args:
            kind: Tipo da pergunta
            correct_answers: Gabarito
            submitted: Respostas selecionadas pelo participante

        Returns:
            GradeOutcome com is_correct e feedback
        """
        if kind == QuestionKind.MULTIPLE_CHOICE:
            correct_set = set(correct_answers)
            submitted_set = set(submitted)
            is_correct = len(correct_set) == len(submitted_set) and correct_set <= submitted_set
        else:
            is_correct = list(submitted) == list(correct_answers)
        return GradeOutcome(is_correct)

    def grade_question(
        self, questions: list[Question], index: int, submitted: list[str]
    ) -> GradeOutcome:
        """Corrige a pergunta ``index`` de uma lista.

        Raises:
            InvalidQuestionIndex: indice fora da lista
        """
        if index < 0 or index >= len(questions):
            raise InvalidQuestionIndex(
                "Invalid question index.", details={"index": index, "total": len(questions)}
            )
        question = questions[index]
        return self.grade(question.kind, question.correct_answers, submitted)

    def summarize(self, score: int, total_questions: int) -> CompletionSummary:
        """Calcula percentual e aprovacao ao final da tentativa."""
        percentage = (score / total_questions * 100) if total_questions > 0 else 0.0
        passed = percentage >= self.pass_threshold
        template = self.PASS_MESSAGE if passed else self.FAIL_MESSAGE

        return CompletionSummary(
            score=score,
            total_questions=total_questions,
            percentage=round(percentage, 2),
            passed=passed,
            message=template.format(
                total=total_questions,
                threshold=self.pass_threshold,
                percentage=percentage,
                score=score,
            ),
        )
