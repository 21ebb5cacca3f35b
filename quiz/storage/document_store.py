"""Document Store - Cliente assincrono da API de paginas do Confluence (v2).

Encapsula create/read/update/list de paginas de quiz e traduz as falhas
HTTP em excecoes tipadas de ``quiz.exceptions``.

Endpoints usados:
    - POST /wiki/api/v2/pages                        -> criar quiz
    - GET  /wiki/api/v2/pages/{id}?body-format=storage -> ler quiz
    - GET  /wiki/api/v2/pages?body-format=storage     -> listar
    - PUT  /wiki/api/v2/pages/{id}                    -> atualizar (version + 1)
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from ..codec import decode, encode, encode_wire_safe, try_decode
from ..config import QuizConfig
from ..exceptions import (
    DuplicateName,
    MissingContent,
    NotFound,
    StoreUnavailable,
    TransportError,
    VersionConflict,
)
from ..models.schemas import Question, ResultRecord, StoredQuizDocument

logger = logging.getLogger(__name__)

PAGES_PATH = "/wiki/api/v2/pages"
RESULT_VERSION_MESSAGE = "Updated quiz results"


def _body_value(page: dict[str, Any]) -> str | None:
    return ((page.get("body") or {}).get("storage") or {}).get("value")


def _version_number(page: dict[str, Any]) -> int:
    return int((page.get("version") or {}).get("number") or 1)


class DocumentStoreClient:
    """Cliente do document store com controle de concorrencia otimista.

    Todas as operacoes sao corrotinas; cada uma faz uma ou duas idas ao
    store e nao ha retry automatico.

    Example:
        >>> async with DocumentStoreClient(config) as store:
        ...     page_id = await store.create_quiz("Geografia", questions)
        ...     doc = await store.fetch_quiz_document(page_id)
    """

    def __init__(self, config: QuizConfig, client: httpx.AsyncClient | None = None):
        """Inicializa o cliente.

        Args:
            config: Configuracao com URL, credenciais e space
            client: AsyncClient externo (testes injetam um com MockTransport)
        """
        self.config = config
        self._owns_client = client is None
        if client is None:
            auth = (config.email, config.api_token) if config.has_credentials else None
            client = httpx.AsyncClient(
                base_url=config.base_url,
                auth=auth,
                timeout=config.timeout_seconds,
                headers={"Accept": "application/json"},
            )
        self.client = client

    async def __aenter__(self) -> DocumentStoreClient:
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self.client.aclose()

    # =========================================================================
    # HTTP
    # =========================================================================

    async def _request(self, method: str, url: str, **kwargs) -> httpx.Response:
        try:
            return await self.client.request(method, url, **kwargs)
        except httpx.TransportError as e:
            logger.error(f"Falha de transporte em {method} {url}: {e}")
            raise TransportError(
                f"Falha de rede ao acessar o store: {e}", details={"url": url}
            ) from e

    @staticmethod
    def _unavailable(response: httpx.Response, action: str) -> StoreUnavailable:
        return StoreUnavailable(
            f"Failed to {action}. Status: {response.status_code}",
            status_code=response.status_code,
            details={"body": response.text[:200]},
        )

    @staticmethod
    def _json(response: httpx.Response, action: str) -> dict[str, Any]:
        """Le o corpo JSON de uma resposta 2xx.

        Proxies e paginas de login SSO podem responder 200 com HTML; isso
        vira ``StoreUnavailable`` em vez de um erro de parsing.
        """
        try:
            data = response.json()
        except ValueError as e:
            raise StoreUnavailable(
                f"Failed to {action}. Invalid response body",
                status_code=response.status_code,
                details={"body": response.text[:200]},
            ) from e
        if not isinstance(data, dict):
            raise StoreUnavailable(
                f"Failed to {action}. Unexpected response body",
                status_code=response.status_code,
                details={"body": response.text[:200]},
            )
        return data

    async def _get_page(self, page_id: str) -> dict[str, Any]:
        response = await self._request(
            "GET", f"{PAGES_PATH}/{page_id}", params={"body-format": "storage"}
        )
        if response.status_code == 404:
            raise NotFound(f"Quiz {page_id} nao encontrado", details={"page_id": page_id})
        if not response.is_success:
            raise self._unavailable(response, "fetch quiz page")
        return self._json(response, "fetch quiz page")

    # =========================================================================
    # OPERACOES
    # =========================================================================

    async def create_quiz(self, name: str, questions: list[Question]) -> str:
        """Cria a pagina do quiz e retorna seu ID.

        Raises:
            DuplicateName: store rejeitou o titulo (HTTP 400)
            StoreUnavailable: qualquer outra resposta non-2xx
            TransportError: falha de rede
        """
        payload = {
            "spaceId": self.config.space_id,
            "status": "current",
            "title": name,
            "body": {"representation": "storage", "value": encode(questions)},
        }
        response = await self._request("POST", PAGES_PATH, json=payload)

        if response.status_code == 400:
            raise DuplicateName(
                "Fail to save a quiz. Use unique quiz name", details={"title": name}
            )
        if not response.is_success:
            raise self._unavailable(response, "save questions")

        page_id = self._json(response, "save questions").get("id")
        if not page_id:
            raise StoreUnavailable(
                "Failed to save questions. Missing page id",
                status_code=response.status_code,
                details={"title": name},
            )
        page_id = str(page_id)
        logger.info(f"Quiz criado: {page_id} ({name})")
        return page_id

    async def fetch_quiz_document(self, page_id: str) -> StoredQuizDocument:
        """Le e decodifica a pagina de um quiz.

        Raises:
            NotFound: pagina inexistente
            MissingContent: pagina sem corpo
            MalformedDocument: corpo nao decodifica como quiz
        """
        page = await self._get_page(page_id)
        body = _body_value(page)
        if not body:
            raise MissingContent(f"No content found in page {page_id}")

        document = decode(body)
        return StoredQuizDocument(
            id=str(page.get("id", page_id)),
            name=page.get("title", ""),
            version=_version_number(page),
            questions=document.questions,
            results=document.results,
        )

    async def list_quiz_documents(self) -> list[StoredQuizDocument]:
        """Lista paginas que decodificam como quiz, na ordem do store.

        Paginas que nao sao quiz sao descartadas silenciosamente.
        """
        documents: list[StoredQuizDocument] = []
        url: str | None = PAGES_PATH
        params: dict[str, str] | None = {"body-format": "storage"}

        while url:
            response = await self._request("GET", url, params=params)
            if not response.is_success:
                raise self._unavailable(response, "fetch quizzes")

            data = self._json(response, "fetch quizzes")
            for page in data.get("results") or []:
                if not isinstance(page, dict) or not page.get("id"):
                    continue
                decoded = try_decode(_body_value(page))
                if not decoded.ok:
                    continue
                documents.append(
                    StoredQuizDocument(
                        id=str(page["id"]),
                        name=page.get("title", ""),
                        version=_version_number(page),
                        questions=decoded.document.questions,
                        results=decoded.document.results,
                    )
                )

            # Cursor de paginacao ja traz a query string completa
            url = (data.get("_links") or {}).get("next")
            params = None

        logger.debug(f"{len(documents)} quizzes listados")
        return documents

    async def append_result(self, page_id: str, record: ResultRecord) -> StoredQuizDocument:
        """Anexa um resultado a pagina (read-modify-write com version + 1).

        Raises:
            MissingContent: pagina sem corpo para atualizar
            MalformedDocument: corpo atual nao decodifica
            VersionConflict: outro writer atualizou a pagina primeiro
        """
        page = await self._get_page(page_id)
        body = _body_value(page)
        if not body:
            raise MissingContent(f"No content found in page {page_id}")

        document = decode(body)
        results = [*document.results, record]
        current_version = _version_number(page)

        payload = {
            "id": str(page.get("id", page_id)),
            "status": page.get("status", "current"),
            "title": page.get("title", ""),
            "body": {
                "representation": "storage",
                "value": encode_wire_safe(document.questions, results),
            },
            "version": {"number": current_version + 1, "message": RESULT_VERSION_MESSAGE},
        }
        response = await self._request("PUT", f"{PAGES_PATH}/{page_id}", json=payload)

        if response.status_code == 409 or (
            response.status_code == 400 and "version" in response.text.lower()
        ):
            raise VersionConflict(
                f"Pagina {page_id} foi atualizada por outro writer",
                details={"page_id": page_id, "attempted_version": current_version + 1},
            )
        if response.status_code == 404:
            raise NotFound(f"Quiz {page_id} nao encontrado", details={"page_id": page_id})
        if not response.is_success:
            raise self._unavailable(response, "update page")

        logger.info(f"Resultado anexado ao quiz {page_id} (versao {current_version + 1})")
        return StoredQuizDocument(
            id=str(page.get("id", page_id)),
            name=page.get("title", ""),
            version=current_version + 1,
            questions=document.questions,
            results=results,
        )
