# =============================================================================
# CONFTEST - Fixtures compartilhadas para todos os testes
# =============================================================================
# Fake do Confluence (httpx.MockTransport), config e perguntas de exemplo
# =============================================================================

import asyncio
import json
import re
from typing import Any

import httpx
import pytest

BASE_URL = "https://quiz-test.atlassian.net"
PAGES_PATH = "/wiki/api/v2/pages"
_PAGE_RE = re.compile(r"^/wiki/api/v2/pages/(?P<page_id>[^/]+)$")


# =============================================================================
# FAKE DO DOCUMENT STORE
# =============================================================================


class ReadBarrier:
    """Segura leituras ate que ``parties`` leituras tenham chegado."""

    def __init__(self, parties: int):
        self.parties = parties
        self.arrived = 0
        self._event = asyncio.Event()

    async def wait(self) -> None:
        self.arrived += 1
        if self.arrived >= self.parties:
            self._event.set()
        await self._event.wait()


class FakeConfluence:
    """Store de paginas versionadas em memoria, servido via MockTransport.

    Regras:
        - POST com titulo repetido -> 400
        - PUT exige version.number == atual + 1, senao 409
        - ``status_overrides[(method, kind)]`` forca um status
          (kind: "create", "get", "list", "update")
        - ``fail_transport`` faz toda chamada levantar ConnectError
    """

    def __init__(self, page_size: int | None = None):
        self.pages: dict[str, dict[str, Any]] = {}
        self.calls: list[tuple[str, str]] = []
        self.status_overrides: dict[str, int] = {}
        self.fail_transport = False
        self.read_barrier: ReadBarrier | None = None
        self.page_size = page_size
        self._next_id = 1000

    # -------------------------------------------------------------------------
    # Helpers de teste
    # -------------------------------------------------------------------------

    def add_page(self, title: str, body: str | None, version: int = 1) -> str:
        page_id = str(self._next_id)
        self._next_id += 1
        self.pages[page_id] = {
            "id": page_id,
            "title": title,
            "status": "current",
            "version": version,
            "body": body,
        }
        return page_id

    def hold_reads(self, parties: int) -> None:
        """Faz as proximas leituras de pagina esperarem umas pelas outras."""
        self.read_barrier = ReadBarrier(parties)

    def body_of(self, page_id: str) -> str | None:
        return self.pages[page_id]["body"]

    def count(self, method: str) -> int:
        return sum(1 for m, _ in self.calls if m == method)

    @staticmethod
    def _page_json(page: dict[str, Any]) -> dict[str, Any]:
        data = {
            "id": page["id"],
            "title": page["title"],
            "status": page["status"],
            "version": {"number": page["version"]},
            "body": {},
        }
        if page["body"] is not None:
            data["body"] = {"storage": {"representation": "storage", "value": page["body"]}}
        return data

    # -------------------------------------------------------------------------
    # Handler
    # -------------------------------------------------------------------------

    async def __call__(self, request: httpx.Request) -> httpx.Response:
        method, path = request.method, request.url.path
        self.calls.append((method, path))

        if self.fail_transport:
            raise httpx.ConnectError("connection refused", request=request)

        if path == PAGES_PATH and method == "POST":
            return self._create(json.loads(request.content))
        if path == PAGES_PATH and method == "GET":
            return self._list(request)

        match = _PAGE_RE.match(path)
        if match and method == "GET":
            return await self._get(match["page_id"])
        if match and method == "PUT":
            return self._update(match["page_id"], json.loads(request.content))

        return httpx.Response(405)

    def _create(self, payload: dict[str, Any]) -> httpx.Response:
        if "create" in self.status_overrides:
            return httpx.Response(self.status_overrides["create"], json={"errors": []})
        if any(p["title"] == payload["title"] for p in self.pages.values()):
            return httpx.Response(400, json={"errors": [{"title": "duplicate title"}]})
        page_id = self.add_page(payload["title"], payload["body"]["value"])
        return httpx.Response(200, json=self._page_json(self.pages[page_id]))

    def _list(self, request: httpx.Request) -> httpx.Response:
        if "list" in self.status_overrides:
            return httpx.Response(self.status_overrides["list"])
        pages = [self._page_json(p) for p in self.pages.values()]
        links: dict[str, str] = {}
        if self.page_size:
            start = int(request.url.params.get("cursor", 0))
            end = start + self.page_size
            if end < len(pages):
                links["next"] = f"{PAGES_PATH}?body-format=storage&cursor={end}"
            pages = pages[start:end]
        return httpx.Response(200, json={"results": pages, "_links": links})

    async def _get(self, page_id: str) -> httpx.Response:
        if "get" in self.status_overrides:
            return httpx.Response(self.status_overrides["get"])
        page = self.pages.get(page_id)
        if page is None:
            return httpx.Response(404, json={"errors": [{"title": "not found"}]})
        snapshot = self._page_json(page)
        if self.read_barrier is not None:
            await self.read_barrier.wait()
        return httpx.Response(200, json=snapshot)

    def _update(self, page_id: str, payload: dict[str, Any]) -> httpx.Response:
        if "update" in self.status_overrides:
            return httpx.Response(self.status_overrides["update"])
        page = self.pages.get(page_id)
        if page is None:
            return httpx.Response(404)
        if payload["version"]["number"] != page["version"] + 1:
            return httpx.Response(409, json={"errors": [{"title": "Version conflict"}]})
        page["version"] = payload["version"]["number"]
        page["body"] = payload["body"]["value"]
        page["title"] = payload["title"]
        return httpx.Response(200, json=self._page_json(page))


# =============================================================================
# FIXTURES
# =============================================================================


@pytest.fixture
def quiz_config():
    """Config de teste (sem ler variaveis de ambiente)."""
    from quiz.config import QuizConfig

    return QuizConfig(
        base_url=BASE_URL,
        email="bot@example.com",
        api_token="token-123",
        space_id="65866",
        pass_threshold=90.0,
        timeout_seconds=5.0,
    )


@pytest.fixture
def fake_confluence():
    return FakeConfluence()


@pytest.fixture
def store(quiz_config, fake_confluence):
    """DocumentStoreClient apontando para o fake."""
    from quiz.storage import DocumentStoreClient

    client = httpx.AsyncClient(
        base_url=BASE_URL, transport=httpx.MockTransport(fake_confluence)
    )
    return DocumentStoreClient(quiz_config, client=client)


@pytest.fixture
def quiz_service(store, quiz_config):
    from quiz.service import QuizService

    return QuizService(store, config=quiz_config)


@pytest.fixture
def sample_questions():
    """Duas perguntas: uma radio e uma checkbox."""
    from quiz.models import Question, QuestionKind

    return [
        Question(
            text="What is the capital of France?",
            kind=QuestionKind.SINGLE_CHOICE,
            choices=["Paris", "Lyon", "Marseille"],
            correct_answers=["Paris"],
        ),
        Question(
            text="Which are <b>primary</b> colors & why?",
            kind=QuestionKind.MULTIPLE_CHOICE,
            choices=["Red", "Blue", "Green's \"shade\""],
            correct_answers=["Red", "Blue"],
        ),
    ]


@pytest.fixture
def make_quiz_page(fake_confluence, sample_questions):
    """Factory que cria uma pagina de quiz valida no fake."""
    from quiz.codec import encode

    def _make(title: str = "Capitals", questions=None, results=None) -> str:
        return fake_confluence.add_page(title, encode(questions or sample_questions, results))

    return _make


@pytest.fixture
def capture_logs(caplog):
    """Captura logs para verificacao em testes."""
    import logging

    caplog.set_level(logging.DEBUG)
    return caplog


@pytest.fixture
def make_static_store(quiz_config):
    """Fabrica de DocumentStoreClient cujo store sempre da a mesma resposta."""
    from quiz.storage import DocumentStoreClient

    def factory(status_code: int = 200, **response_kwargs) -> DocumentStoreClient:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(status_code, **response_kwargs)

        client = httpx.AsyncClient(base_url=BASE_URL, transport=httpx.MockTransport(handler))
        return DocumentStoreClient(quiz_config, client=client)

    return factory
