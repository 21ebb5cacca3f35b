"""Quiz Config - Configuracao centralizada via variaveis de ambiente."""

import os
from dataclasses import dataclass
from typing import Any


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        return default


@dataclass
class QuizConfig:
    """Configuracao do servico de quiz.

    Attributes:
        base_url: URL base do site Confluence (sem /wiki)
        email: Email do usuario para basic auth
        api_token: API token do Confluence
        space_id: Space onde as paginas de quiz sao criadas
        pass_threshold: Percentual minimo para aprovacao (0-100)
        timeout_seconds: Timeout das chamadas HTTP ao store
        log_level: Nivel de log aplicado pelo server
        max_sessions: Limite de sessoes de tentativa mantidas em memoria
        session_ttl_seconds: Inatividade apos a qual uma sessao expira
    """

    base_url: str = "https://example.atlassian.net"
    email: str = ""
    api_token: str = ""
    space_id: str = "65866"
    pass_threshold: float = 90.0
    timeout_seconds: float = 30.0
    log_level: str = "INFO"
    max_sessions: int = 1000
    session_ttl_seconds: float = 3600.0

    @classmethod
    def from_env(cls) -> "QuizConfig":
        """Cria config a partir das variaveis de ambiente."""
        return cls(
            base_url=os.getenv("CONFLUENCE_BASE_URL", cls.base_url).rstrip("/"),
            email=os.getenv("CONFLUENCE_EMAIL", ""),
            api_token=os.getenv("CONFLUENCE_API_TOKEN", ""),
            space_id=os.getenv("CONFLUENCE_SPACE_ID", cls.space_id),
            pass_threshold=_env_float("QUIZ_PASS_THRESHOLD", cls.pass_threshold),
            timeout_seconds=_env_float("STORE_TIMEOUT_SECONDS", cls.timeout_seconds),
            log_level=os.getenv("LOG_LEVEL", cls.log_level).upper(),
            max_sessions=_env_int("QUIZ_MAX_SESSIONS", cls.max_sessions),
            session_ttl_seconds=_env_float(
                "QUIZ_SESSION_TTL_SECONDS", cls.session_ttl_seconds
            ),
        )

    @property
    def has_credentials(self) -> bool:
        return bool(self.email and self.api_token)

    def to_dict(self) -> dict[str, Any]:
        """Converte para dicionario (sem expor o token)."""
        return {
            "store": {
                "base_url": self.base_url,
                "space_id": self.space_id,
                "email": self.email,
                "has_credentials": self.has_credentials,
                "timeout_seconds": self.timeout_seconds,
            },
            "grading": {"pass_threshold": self.pass_threshold},
            "sessions": {
                "max_sessions": self.max_sessions,
                "ttl_seconds": self.session_ttl_seconds,
            },
            "logging": {"level": self.log_level},
        }


_config: QuizConfig | None = None


def get_config() -> QuizConfig:
    """Retorna config singleton (carregada na primeira chamada)."""
    global _config
    if _config is None:
        _config = QuizConfig.from_env()
    return _config


def reset_config() -> None:
    """Descarta o singleton (usado em testes)."""
    global _config
    _config = None
