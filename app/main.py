#!/usr/bin/env python3
# -*- coding: utf-8 -*-
import logging
import time
from contextlib import asynccontextmanager
from dataclasses import replace
from functools import lru_cache
from typing import Dict, Optional

from fastapi import FastAPI, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from profile_qa.config import Settings
from profile_qa.embeddings import EmbeddingGenerator
from profile_qa.engine import GroundedAnswerer
from profile_qa.errors import DataError, DependencyError, InputError, ProfileQAError
from profile_qa.indexer import KnowledgeBaseIndexer
from profile_qa.llm import OpenAIChatLLM
from profile_qa.log import configure_logging
from profile_qa.models import ChatReply
from profile_qa.profile import load_profile
from profile_qa.responder import RuleBasedResponder
from profile_qa.retriever import Retriever
from profile_qa.vectorstore import VectorIndex, close_weaviate_client, get_weaviate_client

SETTINGS = Settings.from_env()
configure_logging(SETTINGS.log_level)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Клиент Weaviate создаётся лениво первым запросом и закрывается при остановке."""
    yield
    close_weaviate_client()


app = FastAPI(title="Profile Q&A API", version="1.0.0", lifespan=lifespan)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


class ChatRequest(BaseModel):
    """Тело запроса чата: одно сообщение пользователя."""
    message: Optional[str] = None


class IngestRequest(BaseModel):
    """Необязательные переопределения параметров индексации."""
    index_name: Optional[str] = None
    chunk_size: Optional[int] = Field(default=None, gt=0)
    chunk_overlap: Optional[int] = Field(default=None, ge=0)
    batch_size: Optional[int] = Field(default=None, gt=0)


class IngestResponse(BaseModel):
    """Ответ на операцию индексации: имя коллекции, число чанков и длительность."""
    collection: str
    chunks_indexed: int
    took_ms: int
    detail: str = "ok"


class StatsResponse(BaseModel):
    collection: str
    count: int


@app.exception_handler(InputError)
async def _input_error(request: Request, exc: InputError) -> JSONResponse:
    return JSONResponse(status_code=400, content={"error": str(exc) or "Bad request"})


@app.exception_handler(RequestValidationError)
async def _validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(status_code=400, content={"error": "Invalid request"})


@app.exception_handler(ProfileQAError)
async def _server_error(request: Request, exc: ProfileQAError) -> JSONResponse:
    # Детали и трассировка остаются в логах; наружу уходит только общий текст
    logger.error(f"[API] {type(exc).__name__}: {exc}", exc_info=exc)
    ingesting = request.url.path == "/ingest"
    message = "Ingestion failed" if ingesting and isinstance(exc, DataError) else "Server error"
    return JSONResponse(status_code=500, content={"error": message})


@app.exception_handler(Exception)
async def _unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    logger.error(f"[API] Unexpected {type(exc).__name__} on {request.url.path}", exc_info=exc)
    return JSONResponse(status_code=500, content={"error": "Server error"})


def _make_index(index_name: Optional[str] = None) -> VectorIndex:
    """Фасад коллекции поверх общего клиента; закрывать его после запроса не нужно."""
    vs_cfg = SETTINGS.vector_store
    return VectorIndex(get_weaviate_client(vs_cfg), index_name or vs_cfg.index_name)


@lru_cache(maxsize=1)
def get_offline_responder() -> RuleBasedResponder:
    return RuleBasedResponder(load_profile(SETTINGS.indexing.profile_path))


def _require_message(req: ChatRequest) -> str:
    message = (req.message or "").strip()
    if not message:
        raise InputError("Missing message")
    return message


def _answer_online(message: str) -> ChatReply:
    index = _make_index()
    answerer = GroundedAnswerer(
        retriever=Retriever(index, EmbeddingGenerator(SETTINGS.embedding)),
        llm=OpenAIChatLLM.from_config(SETTINGS.llm),
        ret_cfg=SETTINGS.retrieval,
    )
    return answerer.answer(message)


@app.get("/health")
def health() -> Dict[str, str]:
    """Простой health-check эндпоинт для мониторинга/оркестраторов."""
    return {"status": "ok"}


@app.post("/api/chat", response_model=ChatReply, response_model_exclude_none=True)
async def chat(req: ChatRequest) -> ChatReply:
    """Онлайн-ответ: поиск по базе знаний и синтез ответа LLM строго по найденному контексту.

    Пустое сообщение отклоняется до любых обращений к индексу и LLM.
    """
    message = _require_message(req)
    try:
        return await run_in_threadpool(_answer_online, message)
    except ProfileQAError:
        raise
    except Exception as exc:
        logger.exception("[API] Unexpected failure in online chat")
        raise DependencyError("Unexpected failure") from exc


@app.post("/api/chat/offline", response_model=ChatReply, response_model_exclude_none=True)
def chat_offline(req: ChatRequest) -> ChatReply:
    """Офлайн-ответ по правилам над профилем: без сети и детерминированно."""
    return get_offline_responder().answer(_require_message(req))


@app.post("/ingest", response_model=IngestResponse)
def ingest(req: Optional[IngestRequest] = None) -> IngestResponse:
    """Полностью перестраивает базу знаний из настроенных источников."""
    t0 = time.time()
    req = req or IngestRequest()

    vs_cfg = replace(SETTINGS.vector_store, index_name=req.index_name or SETTINGS.vector_store.index_name)
    overrides = {k: v for k, v in req.model_dump(exclude={"index_name"}).items() if v is not None}
    idx_cfg = replace(SETTINGS.indexing, **overrides)

    indexer = KnowledgeBaseIndexer(vs_cfg, SETTINGS.embedding, idx_cfg, index=_make_index(vs_cfg.index_name))
    try:
        report = indexer.run()
    except ValueError as exc:
        raise InputError(str(exc)) from exc
    finally:
        indexer.close()
    took_ms = int((time.time() - t0) * 1000)
    return IngestResponse(collection=report.collection, chunks_indexed=report.upserted, took_ms=took_ms)


@app.get("/kb/stats", response_model=StatsResponse)
def kb_stats() -> StatsResponse:
    """Сколько чанков сейчас лежит в коллекции."""
    index = _make_index()
    return StatsResponse(collection=index.name, count=index.count())


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("app.main:app", host="0.0.0.0", port=8000, reload=False)
