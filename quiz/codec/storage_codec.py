"""Storage Codec - Serializacao do quiz no formato storage do Confluence.

O corpo da pagina e tratado pelo store como markup, entao o texto livre
precisa ser escapado antes de ir para o store. Existem dois caminhos de escrita:

- criacao (``encode``): JSON cru, com cada campo de texto escapado;
- atualizacao de resultados (``encode_wire_safe``): o mesmo JSON escapado
  mais uma vez como um todo e envolvido em ``<p>...</p>``.

``decode`` desfaz as duas camadas na ordem inversa, cada uma exatamente
uma vez. Apenas tags ``<p>`` sao removidas; outro markup no corpo faz o
decode falhar.
"""

import json
import logging
import re
from dataclasses import dataclass
from typing import Any

from pydantic import ValidationError

from ..exceptions import MalformedDocument
from ..models.schemas import Question, QuizDocument, ResultRecord

logger = logging.getLogger(__name__)

# Ordem importa: & primeiro no escape, por ultimo no unescape
_ESCAPE_TABLE = [
    ("&", "&amp;"),
    ("<", "&lt;"),
    (">", "&gt;"),
    ('"', "&quot;"),
    ("'", "&#39;"),
]

_P_TAG_RE = re.compile(r"</?p>")


def escape_html(text: str) -> str:
    """Escapa &, <, >, aspas duplas e apostrofo."""
    for raw, entity in _ESCAPE_TABLE:
        text = text.replace(raw, entity)
    return text


def unescape_html(text: str) -> str:
    """Inverso exato de ``escape_html``."""
    for raw, entity in reversed(_ESCAPE_TABLE):
        text = text.replace(entity, raw)
    return text


def strip_paragraphs(text: str) -> str:
    return _P_TAG_RE.sub("", text)


# =============================================================================
# ESCAPE POR CAMPO
# =============================================================================


def _escape_question(question: Question) -> dict[str, Any]:
    data = question.to_storage()
    data["question"] = escape_html(question.text)
    data["choices"] = [escape_html(choice) for choice in question.choices]
    data["correctAnswer"] = [escape_html(answer) for answer in question.correct_answers]
    return data


def _unescape_question(raw: Any) -> Question:
    if not isinstance(raw, dict):
        raise MalformedDocument("Pergunta nao e um objeto", details={"value": repr(raw)[:80]})

    data = dict(raw)
    if isinstance(data.get("question"), str):
        data["question"] = unescape_html(data["question"])
    for key in ("choices", "correctAnswer"):
        values = data.get(key)
        if isinstance(values, list):
            data[key] = [unescape_html(v) if isinstance(v, str) else v for v in values]
    return Question.model_validate(data)


def _payload(questions: list[Question], results: list[ResultRecord]) -> str:
    return json.dumps(
        {
            "quiz": [_escape_question(q) for q in questions],
            "result": [r.to_storage() for r in results],
        },
        ensure_ascii=False,
    )


# =============================================================================
# ENCODE / DECODE
# =============================================================================


def encode(questions: list[Question], results: list[ResultRecord] | None = None) -> str:
    """Gera o corpo de criacao da pagina (JSON com campos escapados)."""
    return _payload(questions, results or [])


def encode_wire_safe(questions: list[Question], results: list[ResultRecord]) -> str:
    """Gera o corpo de atualizacao: payload escapado de novo e envolvido em <p>."""
    return f"<p>{escape_html(_payload(questions, results))}</p>"


def _parse_json(cleaned: str) -> Any:
    try:
        return json.loads(cleaned)
    except json.JSONDecodeError:
        pass

    # Corpo escrito pelo caminho de atualizacao (ou normalizado pelo store)
    try:
        return json.loads(unescape_html(cleaned))
    except json.JSONDecodeError as e:
        raise MalformedDocument(
            "Corpo da pagina nao e JSON valido", details={"reason": str(e)}
        ) from e


def decode(storage_text: str | None) -> QuizDocument:
    """Decodifica o corpo de uma pagina em ``QuizDocument``.

    Raises:
        MalformedDocument: corpo vazio, JSON invalido, sem lista ``quiz``
            ou perguntas/resultados com formato invalido
    """
    if not storage_text:
        raise MalformedDocument("Corpo da pagina vazio")

    parsed = _parse_json(strip_paragraphs(storage_text).strip())

    if not isinstance(parsed, dict) or not isinstance(parsed.get("quiz"), list):
        raise MalformedDocument("Documento nao contem lista 'quiz'")

    raw_results = parsed.get("result") or []
    if not isinstance(raw_results, list):
        raise MalformedDocument("Campo 'result' nao e uma lista")

    try:
        questions = [_unescape_question(item) for item in parsed["quiz"]]
        results = [ResultRecord.model_validate(item) for item in raw_results]
    except ValidationError as e:
        raise MalformedDocument(
            "Documento com perguntas ou resultados invalidos",
            details={"errors": e.error_count()},
        ) from e

    return QuizDocument(questions=questions, results=results)


@dataclass
class DecodeResult:
    """Resultado explicito de decode: documento ou erro, nunca os dois."""

    document: QuizDocument | None = None
    error: MalformedDocument | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


def try_decode(storage_text: str | None) -> DecodeResult:
    """Versao de ``decode`` que devolve o erro como valor (filtro de listagem)."""
    try:
        return DecodeResult(document=decode(storage_text))
    except MalformedDocument as e:
        logger.debug(f"Documento ignorado: {e.message}")
        return DecodeResult(error=e)
