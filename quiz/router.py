"""Quiz Router - Endpoints FastAPI sobre o QuizService."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException

import app_state

from .models.schemas import (
    GradeAnswerRequest,
    GradeAnswerResponse,
    ListQuizzesResponse,
    LoadQuizResponse,
    RecordResultRequest,
    RecordResultResponse,
    SaveQuizRequest,
    SaveQuizResponse,
    ServiceResponse,
)
from .service import QuizService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/quiz", tags=["Quiz"])

# error_kind -> status HTTP
ERROR_STATUS = {
    "empty_quiz_submission": 400,
    "invalid_question": 400,
    "invalid_result": 400,
    "invalid_question_index": 400,
    "no_active_attempt": 409,
    "already_answered": 409,
    "duplicate_name": 409,
    "version_conflict": 409,
    "not_found": 404,
    "missing_content": 422,
    "malformed_document": 422,
    "store_unavailable": 502,
    "transport_error": 503,
}


# =============================================================================
# DEPENDENCY INJECTION
# =============================================================================


async def get_quiz_service() -> QuizService:
    """Dependency para obter o QuizService compartilhado."""
    return await app_state.get_quiz_service()


def _raise_for_error(response: ServiceResponse) -> None:
    if response.ok:
        return
    status = ERROR_STATUS.get(response.error_kind or "", 500)
    raise HTTPException(
        status_code=status,
        detail={"error": response.error, "error_kind": response.error_kind},
    )


# =============================================================================
# AUTORIA
# =============================================================================


@router.post("/save", response_model=SaveQuizResponse)
async def save_quiz(request: SaveQuizRequest, service: QuizService = Depends(get_quiz_service)):
    """Salva um novo quiz como pagina no document store."""
    response = await service.save_quiz(request.quiz_name, request.questions)
    _raise_for_error(response)
    return response


@router.get("/list", response_model=ListQuizzesResponse)
async def list_quizzes(service: QuizService = Depends(get_quiz_service)):
    """Lista quizzes com resumo das perguntas e historico de resultados.

    Paginas do space que nao sao quiz sao omitidas.
    """
    response = await service.list_quizzes()
    _raise_for_error(response)
    return response


# =============================================================================
# TENTATIVA
# =============================================================================


@router.post("/{page_id}/load", response_model=LoadQuizResponse)
async def load_quiz(
    page_id: str,
    session_id: str = "default",
    service: QuizService = Depends(get_quiz_service),
):
    """Abre uma tentativa (descarta a anterior da mesma sessao)."""
    response = await service.load_quiz_for_attempt(page_id, session_id)
    _raise_for_error(response)
    return response


@router.post("/answer", response_model=GradeAnswerResponse)
async def grade_answer(
    request: GradeAnswerRequest, service: QuizService = Depends(get_quiz_service)
):
    """Corrige a resposta da pergunta atual.

    Retorna apenas acerto/erro e feedback; o gabarito nunca e exposto.
    """
    response = await service.grade_answer(
        request.question_index, request.selected_answers, request.session_id
    )
    _raise_for_error(response)
    return response


@router.post("/result", response_model=RecordResultResponse)
async def record_result(
    request: RecordResultRequest, service: QuizService = Depends(get_quiz_service)
):
    """Anexa um resultado ao quiz carregado na sessao."""
    response = await service.record_result(
        request.score, request.total_questions, request.session_id
    )
    _raise_for_error(response)
    return response


@router.get("/session/{session_id}")
async def get_session_state(session_id: str, service: QuizService = Depends(get_quiz_service)):
    """Estado da tentativa da sessao (debug/monitoramento)."""
    return service.session_state(session_id)
