# =============================================================================
# CONFTEST - Pytest Fixtures Globais
# =============================================================================
# Root no sys.path (app_state/server) e ambiente isolado
# =============================================================================

import os
import sys
from pathlib import Path
from unittest.mock import patch

import pytest

# Adicionar root ao path
sys.path.insert(0, str(Path(__file__).parent))


@pytest.fixture(autouse=True)
def setup_test_env():
    """Configura variaveis de ambiente para testes."""
    env_vars = {
        "CONFLUENCE_BASE_URL": "https://quiz-test.atlassian.net",
        "CONFLUENCE_SPACE_ID": "65866",
        "LOG_LEVEL": "ERROR",
    }
    with patch.dict(os.environ, env_vars):
        yield
    from quiz.config import reset_config

    reset_config()
