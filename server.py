"""
Quiz Server - FastAPI app for quiz authoring and taking

- Quiz pages persisted in Confluence (storage format)
- Server-side grading, answer key never sent to the client
- Result history appended with optimistic concurrency
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

import app_state
from quiz.config import get_config
from quiz.router import router as quiz_router

config = get_config()
logging.basicConfig(
    level=config.log_level,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger("server")


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info(f"Quiz server starting (store: {config.base_url}, space: {config.space_id})")
    if not config.has_credentials:
        logger.warning("CONFLUENCE_EMAIL/CONFLUENCE_API_TOKEN not set, store calls will be anonymous")
    yield
    await app_state.shutdown()
    logger.info("Quiz server stopped")


app = FastAPI(
    title="Quiz Server",
    description="Quiz authoring, grading and result recording over a versioned document store",
    version="1.0.0",
    lifespan=lifespan,
)

app.include_router(quiz_router)


@app.get("/health")
async def health():
    return {"status": "healthy", "config": config.to_dict()}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8001)
