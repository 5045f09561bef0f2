"""FastAPI application exposing the document search endpoints."""

from __future__ import annotations

import json
import logging
from typing import Any, Dict

import openai
from fastapi import FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field, ValidationError

from sharefinder.auth.credentials import bearer_from_header
from sharefinder.config import AppConfig
from sharefinder.errors import AuthorizationError, SearchProviderError
from sharefinder.pipeline.service import SearchMode, run_search

LOGGER = logging.getLogger(__name__)

app = FastAPI(title="ShareFinder", version="0.1.0")
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)


class SearchPayload(BaseModel):
    search_term: str = Field("", alias="searchTerm")
    query: str | None = None


def _get_config() -> AppConfig:
    return AppConfig.from_env()


async def _read_payload(request: Request) -> SearchPayload:
    """Merge query-string parameters over an optional JSON body."""
    body: Dict[str, Any] = {}
    raw = await request.body()
    if raw:
        try:
            decoded = json.loads(raw)
        except ValueError:
            raise HTTPException(status_code=400, detail="Request body must be JSON")
        if isinstance(decoded, dict):
            body = decoded

    merged = {key: value for key, value in body.items() if key in ("searchTerm", "query")}
    for key in ("searchTerm", "query"):
        if request.query_params.get(key):
            merged[key] = request.query_params[key]

    try:
        payload = SearchPayload.model_validate(merged)
    except ValidationError as exc:
        raise HTTPException(status_code=400, detail=str(exc))

    if not payload.search_term.strip():
        raise HTTPException(status_code=400, detail="Missing searchTerm")
    return payload


async def _handle(request: Request, mode: SearchMode) -> Dict[str, Any]:
    payload = await _read_payload(request)
    if mode is SearchMode.RELEVANCE and not (payload.query or "").strip():
        raise HTTPException(status_code=400, detail="Missing query")

    try:
        config = _get_config()
    except ValueError as exc:
        LOGGER.error("Invalid configuration: %s", exc)
        raise HTTPException(status_code=500, detail=f"Invalid configuration: {exc}")

    bearer_token = bearer_from_header(request.headers.get("authorization"))
    try:
        outcome = await run_search(
            config,
            mode,
            payload.search_term.strip(),
            query=payload.query,
            bearer_token=bearer_token,
        )
    except AuthorizationError as exc:
        raise HTTPException(status_code=401, detail=f"Error generating Graph token: {exc}")
    except SearchProviderError as exc:
        raise HTTPException(status_code=502, detail=f"Error performing search: {exc}")
    except openai.OpenAIError as exc:
        LOGGER.error("OpenAI client could not be created: %s", exc)
        raise HTTPException(status_code=500, detail=f"Error: {exc}")

    return outcome.to_dict()


@app.on_event("startup")
async def startup_event() -> None:
    logging.basicConfig(level=logging.INFO, format="[%(levelname)s] %(message)s")


@app.get("/health")
async def health() -> dict[str, str]:
    return {"status": "ok"}


@app.api_route("/documents", methods=["GET", "POST"])
async def search_documents(request: Request) -> Dict[str, Any]:
    """Title, link and last-modified details of the top search hits."""
    return await _handle(request, SearchMode.METADATA)


@app.api_route("/documents/text", methods=["GET", "POST"])
async def search_document_text(request: Request) -> Dict[str, Any]:
    """Extracted text of the top search hits."""
    return await _handle(request, SearchMode.TEXT)


@app.api_route("/documents/relevant", methods=["GET", "POST"])
async def search_relevant_content(request: Request) -> Dict[str, Any]:
    """Parts of the top search hits relevant to ``query``."""
    return await _handle(request, SearchMode.RELEVANCE)
