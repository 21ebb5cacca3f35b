# =============================================================================
# TESTES - Config Module
# =============================================================================
# Testes unitarios para configuracao via variaveis de ambiente
# =============================================================================

import os
from unittest.mock import patch


class TestQuizConfig:
    """Testes para QuizConfig dataclass."""

    def test_from_env_defaults(self):
        """Verifica valores padrao do from_env."""
        from quiz.config import QuizConfig

        with patch.dict(os.environ, {}, clear=True):
            config = QuizConfig.from_env()

        assert config.base_url == "https://example.atlassian.net"
        assert config.space_id == "65866"
        assert config.pass_threshold == 90.0
        assert config.timeout_seconds == 30.0
        assert config.log_level == "INFO"
        assert config.has_credentials is False

    def test_from_env_custom_values(self):
        """Verifica valores customizados via env vars."""
        from quiz.config import QuizConfig

        env_vars = {
            "CONFLUENCE_BASE_URL": "https://acme.atlassian.net/",
            "CONFLUENCE_EMAIL": "bot@acme.com",
            "CONFLUENCE_API_TOKEN": "secret",
            "CONFLUENCE_SPACE_ID": "42",
            "QUIZ_PASS_THRESHOLD": "75",
            "STORE_TIMEOUT_SECONDS": "10",
            "LOG_LEVEL": "debug",
        }

        with patch.dict(os.environ, env_vars, clear=True):
            config = QuizConfig.from_env()

        assert config.base_url == "https://acme.atlassian.net"
        assert config.space_id == "42"
        assert config.pass_threshold == 75.0
        assert config.timeout_seconds == 10.0
        assert config.log_level == "DEBUG"
        assert config.has_credentials is True

    def test_invalid_number_falls_back(self):
        """Verifica fallback para valor numerico invalido."""
        from quiz.config import QuizConfig

        with patch.dict(os.environ, {"QUIZ_PASS_THRESHOLD": "ninety"}, clear=True):
            config = QuizConfig.from_env()

        assert config.pass_threshold == 90.0

    def test_to_dict_hides_token(self):
        """Verifica que to_dict nao expoe o token."""
        from quiz.config import QuizConfig

        data = QuizConfig(api_token="secret", email="a@b.c").to_dict()

        assert "secret" not in str(data)
        assert data["store"]["has_credentials"] is True
        assert data["grading"]["pass_threshold"] == 90.0


class TestGetConfig:
    """Testes para get_config singleton."""

    def test_singleton(self):
        """Verifica mesma instancia em chamadas seguidas."""
        from quiz.config import get_config, reset_config

        reset_config()

        assert get_config() is get_config()

    def test_reset_reloads_env(self):
        """Verifica que reset_config relê o ambiente."""
        from quiz.config import get_config, reset_config

        reset_config()
        with patch.dict(os.environ, {"CONFLUENCE_SPACE_ID": "777"}):
            reset_config()
            assert get_config().space_id == "777"
        reset_config()


class TestSessionLimits:
    """Testes para limites do registry de sessoes."""

    def test_session_defaults(self):
        """Verifica limites padrao."""
        from quiz.config import QuizConfig

        with patch.dict(os.environ, {}, clear=True):
            config = QuizConfig.from_env()

        assert config.max_sessions == 1000
        assert config.session_ttl_seconds == 3600.0

    def test_session_custom_values(self):
        """Verifica limites via env vars, com fallback para inteiro invalido."""
        from quiz.config import QuizConfig

        env_vars = {"QUIZ_MAX_SESSIONS": "25", "QUIZ_SESSION_TTL_SECONDS": "120"}
        with patch.dict(os.environ, env_vars, clear=True):
            config = QuizConfig.from_env()

        assert config.max_sessions == 25
        assert config.session_ttl_seconds == 120.0
        assert config.to_dict()["sessions"]["max_sessions"] == 25

        with patch.dict(os.environ, {"QUIZ_MAX_SESSIONS": "lots"}, clear=True):
            assert QuizConfig.from_env().max_sessions == 1000
