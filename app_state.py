"""Core module - shared state and helper functions."""

from __future__ import annotations

import logging
from typing import Optional

from quiz.config import get_config
from quiz.service import QuizService
from quiz.storage import DocumentStoreClient

logger = logging.getLogger(__name__)

# =============================================================================
# GLOBAL INSTANCES
# =============================================================================

store: Optional[DocumentStoreClient] = None
quiz_service: Optional[QuizService] = None


async def get_store() -> DocumentStoreClient:
    """Get shared DocumentStoreClient (lazy, one httpx pool per process)."""
    global store
    if store is None:
        config = get_config()
        store = DocumentStoreClient(config)
        logger.info(f"Document store client created for {config.base_url}")
    return store


async def get_quiz_service() -> QuizService:
    """Get shared QuizService (attempt registry lives inside it)."""
    global quiz_service
    client = await get_store()
    if quiz_service is None:
        quiz_service = QuizService(client, config=get_config())
    return quiz_service


async def shutdown() -> None:
    """Close the store client and drop the shared instances."""
    global store, quiz_service
    if store is not None:
        await store.aclose()
    store = None
    quiz_service = None
