#!/usr/bin/env python3
# -*- coding: utf-8 -*-
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

PROJECT_ROOT = Path(__file__).resolve().parent.parent

DEFAULT_SYSTEM_PROMPT = "\n".join(
    [
        "You are a helpful assistant embedded in a personal portfolio.",
        "Use ONLY the provided sources to answer.",
        "If the sources do not contain the answer, say you do not know.",
        "Do not reveal private or sensitive info like phone, address, secrets, tokens.",
        "Keep it friendly and concise.",
    ]
)


@dataclass
class EmbeddingConfig:
    """Параметры модели эмбеддингов.

    - model_name: имя модели HuggingFace (sentence-transformers, mean pooling)
    - embed_batch_size: размер батча внутри одного вызова модели
    - dimension: ожидаемая размерность вектора
    """
    model_name: str = "sentence-transformers/all-MiniLM-L6-v2"
    embed_batch_size: int = 32
    dimension: int = 384


@dataclass
class VectorStoreConfig:
    """Параметры векторного хранилища (Weaviate).

    - index_name: имя коллекции в Weaviate (должно начинаться с заглавной буквы)
    - use_embedded: использовать ли встроенный (embedded) Weaviate
    - weaviate_url: URL удалённого Weaviate (если используется)
    - weaviate_api_key: API-ключ для удалённого Weaviate (опционально)
    - grpc_port: gRPC-порт удалённого Weaviate
    """
    index_name: str = "PortfolioKB"
    use_embedded: bool = True
    weaviate_url: Optional[str] = None
    weaviate_api_key: Optional[str] = None
    grpc_port: int = 50051


@dataclass
class LLMConfig:
    """Параметры языковой модели (OpenAI-совместимый API).

    - base_url: базовый URL сервиса LLM (по умолчанию Groq)
    - api_key: ключ доступа
    - model_name: имя модели
    - temperature, top_p, max_tokens: параметры генерации
    - system_prompt: системный промпт для роли system
    """
    base_url: str = "https://api.groq.com/openai/v1"
    api_key: str = ""
    model_name: str = "llama-3.1-8b-instant"
    temperature: float = 0.2
    top_p: float = 1.0
    max_tokens: int = 600
    system_prompt: str = DEFAULT_SYSTEM_PROMPT


@dataclass
class IndexingConfig:
    """Параметры построения базы знаний.

    - profile_path: JSON со структурированным профилем
    - resume_path: PDF-резюме (None: источник не подключён)
    - chunk_size: размер текстового чанка в символах
    - chunk_overlap: перекрытие соседних чанков
    - batch_size: сколько чанков эмбеддить и загружать за один шаг
    """
    profile_path: str = str(PROJECT_ROOT / "data" / "profile.json")
    resume_path: Optional[str] = None
    chunk_size: int = 1100
    chunk_overlap: int = 200
    batch_size: int = 24


@dataclass
class RetrievalConfig:
    """Параметры извлечения.

    - top_k: сколько ближайших чанков доставать из индекса
    - max_sources: сколько первых чанков указывать как источники ответа
    """
    top_k: int = 6
    max_sources: int = 4


@dataclass
class Settings:
    """Сводная конфигурация приложения."""
    embedding: EmbeddingConfig = field(default_factory=EmbeddingConfig)
    vector_store: VectorStoreConfig = field(default_factory=VectorStoreConfig)
    llm: LLMConfig = field(default_factory=LLMConfig)
    indexing: IndexingConfig = field(default_factory=IndexingConfig)
    retrieval: RetrievalConfig = field(default_factory=RetrievalConfig)
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, env_file: Optional[str] = None) -> "Settings":
        """Собирает конфигурацию из переменных окружения (и .env, если он есть)."""
        load_dotenv(dotenv_path=env_file or Path.cwd() / ".env")

        weaviate_url = os.getenv("WEAVIATE_URL") or None
        return cls(
            embedding=EmbeddingConfig(
                model_name=os.getenv("EMBEDDING_MODEL", EmbeddingConfig.model_name),
            ),
            vector_store=VectorStoreConfig(
                index_name=os.getenv("PROFILE_QA_COLLECTION", VectorStoreConfig.index_name),
                use_embedded=weaviate_url is None,
                weaviate_url=weaviate_url,
                weaviate_api_key=os.getenv("WEAVIATE_API_KEY") or None,
                grpc_port=int(os.getenv("WEAVIATE_GRPC_PORT", VectorStoreConfig.grpc_port)),
            ),
            llm=LLMConfig(
                base_url=os.getenv("LLM_BASE_URL", LLMConfig.base_url),
                api_key=os.getenv("LLM_API_KEY") or os.getenv("GROQ_API_KEY", ""),
                model_name=os.getenv("LLM_MODEL", LLMConfig.model_name),
                temperature=float(os.getenv("LLM_TEMPERATURE", LLMConfig.temperature)),
            ),
            indexing=IndexingConfig(
                profile_path=os.getenv("PROFILE_PATH", IndexingConfig.profile_path),
                resume_path=os.getenv("RESUME_PATH") or None,
                chunk_size=int(os.getenv("CHUNK_SIZE", IndexingConfig.chunk_size)),
                chunk_overlap=int(os.getenv("CHUNK_OVERLAP", IndexingConfig.chunk_overlap)),
                batch_size=int(os.getenv("INGEST_BATCH_SIZE", IndexingConfig.batch_size)),
            ),
            retrieval=RetrievalConfig(
                top_k=int(os.getenv("RETRIEVAL_TOP_K", RetrievalConfig.top_k)),
            ),
            log_level=os.getenv("LOG_LEVEL", "INFO"),
        )
