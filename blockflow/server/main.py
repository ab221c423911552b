"""
Python FastAPI server exposing the block compiler and diff engine to the
editor UI.

Start with:
    python -m blockflow.server.main

Or via uvicorn directly:
    uvicorn blockflow.server.main:app --port 3001 --reload

Settings are read from the environment (a .env file in the working
directory is loaded first):

    BLOCKFLOW_HOST          bind address          (default 0.0.0.0)
    BLOCKFLOW_PORT          port                  (default 3001)
    BLOCKFLOW_CORS_ORIGINS  comma-separated list  (default *)
    BLOCKFLOW_LOG_LEVEL     logging level name    (default INFO)
"""
from __future__ import annotations

import logging
import os
from typing import List

from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from blockflow.server.routes.editor_routes import router

load_dotenv()

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Settings
# ---------------------------------------------------------------------------

def _cors_origins() -> List[str]:
    raw = os.environ.get("BLOCKFLOW_CORS_ORIGINS", "*")
    return [origin.strip() for origin in raw.split(",") if origin.strip()]


HOST = os.environ.get("BLOCKFLOW_HOST", "0.0.0.0")
PORT = int(os.environ.get("BLOCKFLOW_PORT", "3001"))
LOG_LEVEL = os.environ.get("BLOCKFLOW_LOG_LEVEL", "INFO").upper()


# ---------------------------------------------------------------------------
# FastAPI application
# ---------------------------------------------------------------------------

app = FastAPI(title="blockflow API", version="1.0.0")

app.add_middleware(
    CORSMiddleware,
    allow_origins=_cors_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(router, prefix="/api")


@app.get("/health")
async def health() -> dict:
    return {"status": "ok"}


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------

if __name__ == "__main__":
    import uvicorn

    logging.basicConfig(
        level=LOG_LEVEL,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    logger.info("serving blockflow API on %s:%d", HOST, PORT)
    uvicorn.run(
        "blockflow.server.main:app",
        host=HOST,
        port=PORT,
        reload=True,
    )
