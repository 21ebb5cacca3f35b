"""Catalog Engine - Projecao dos documentos em linhas de listagem."""

import re

from ..models.schemas import NO_RESULTS_MARKER, CatalogRow, Question, StoredQuizDocument

_ARTICLE_RE = re.compile(r"^(the|a|an)", re.IGNORECASE)
_WHITESPACE_RE = re.compile(r"\s")


def row_key(name: str, index: int) -> str:
    """Chave unica da linha: nome sem artigo inicial nem espacos + posicao."""
    compact = _WHITESPACE_RE.sub("", _ARTICLE_RE.sub("", name))
    return f"row-{index}-{compact}"


def summarize_questions(questions: list[Question]) -> str:
    """Resumo legivel: ``Q1: texto (Choices: a, b); Q2: ...``."""
    return "; ".join(
        f"Q{i + 1}: {q.text} (Choices: {', '.join(q.choices)})" for i, q in enumerate(questions)
    )


def build_catalog(documents: list[StoredQuizDocument]) -> list[CatalogRow]:
    """Monta as linhas da listagem, preservando a ordem do store."""
    return [
        CatalogRow(
            row_key=row_key(doc.name, index),
            id=doc.id,
            name=doc.name,
            questions_summary=summarize_questions(doc.questions),
            results=list(doc.results) if doc.results else NO_RESULTS_MARKER,
        )
        for index, doc in enumerate(documents)
    ]
