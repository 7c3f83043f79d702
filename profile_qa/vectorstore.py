#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""Клиент Weaviate (embedded или remote) и фасад коллекции базы знаний."""

from __future__ import annotations

import logging
import threading
from typing import Any, Dict, List, Optional, Sequence
from urllib.parse import urlparse

import weaviate
from weaviate.classes.config import Configure, DataType, Property, VectorDistances
from weaviate.classes.data import DataObject
from weaviate.classes.init import Auth
from weaviate.classes.query import MetadataQuery
from weaviate.util import generate_uuid5

from .config import VectorStoreConfig
from .errors import DependencyError
from .models import RetrievedChunk

logger = logging.getLogger(__name__)

_client: Optional[weaviate.WeaviateClient] = None
_client_lock = threading.Lock()


def make_weaviate_client(cfg: VectorStoreConfig) -> weaviate.WeaviateClient:
    """Создаёт клиент Weaviate в зависимости от конфигурации.

    - embedded: локальный встроенный сервер Weaviate (без внешних сервисов)
    - remote: подключение к удалённому Weaviate (Docker/K8s/Cloud) по URL, опционально с API‑ключом
    """
    try:
        if cfg.use_embedded:
            return weaviate.connect_to_embedded()
        if not cfg.weaviate_url:
            raise DependencyError("Remote Weaviate requested but no URL configured")

        parsed = urlparse(cfg.weaviate_url)
        if parsed.scheme not in ("http", "https") or not parsed.hostname:
            raise DependencyError(
                f"WEAVIATE_URL must look like http(s)://host[:port], got '{cfg.weaviate_url}'"
            )
        secure = parsed.scheme == "https"
        auth = Auth.api_key(cfg.weaviate_api_key) if cfg.weaviate_api_key else None
        return weaviate.connect_to_custom(
            http_host=parsed.hostname,
            http_port=parsed.port or (443 if secure else 80),
            http_secure=secure,
            grpc_host=parsed.hostname,
            grpc_port=cfg.grpc_port,
            grpc_secure=secure,
            auth_credentials=auth,
        )
    except DependencyError:
        raise
    except Exception as exc:
        raise DependencyError("Vector index is unavailable") from exc


def get_weaviate_client(cfg: VectorStoreConfig) -> weaviate.WeaviateClient:
    """Один клиент Weaviate на процесс.

    Embedded-сервер занимает фиксированные порты, поэтому второй клиент в том же
    процессе не поднимется; все запросы делят этот экземпляр. Создание идёт под
    блокировкой, неудачное подключение не кэшируется.
    """
    global _client
    if _client is not None:
        return _client
    with _client_lock:
        if _client is None:
            _client = make_weaviate_client(cfg)
            logger.info("[VECTOR_INDEX] Weaviate client connected")
    return _client


def close_weaviate_client() -> None:
    """Закрывает общий клиент (остановка приложения, тесты)."""
    global _client
    with _client_lock:
        if _client is not None:
            _client.close()
            _client = None
            logger.info("[VECTOR_INDEX] Weaviate client closed")


class VectorIndex:
    """Коллекция чанков в Weaviate с интерфейсом upsert/query/delete/count.

    Векторы считаются снаружи (vectorizer отключён), метрика косинусная,
    поэтому расстояние монотонно: меньше значит ближе. UUID объекта выводится
    из id чанка, так что повторная загрузка перезаписывает, а не дублирует.
    """

    def __init__(self, client: weaviate.WeaviateClient, name: str) -> None:
        self._client = client
        self.name = name

    def _collection(self):
        return self._client.collections.get(self.name)

    def delete_collection(self) -> None:
        """Удаляет коллекцию; отсутствие коллекции ошибкой не считается."""
        try:
            if self._client.collections.exists(self.name):
                self._client.collections.delete(self.name)
                logger.info(f"[VECTOR_INDEX] Deleted collection '{self.name}'")
            else:
                logger.info(f"[VECTOR_INDEX] No collection '{self.name}' to delete")
        except Exception as exc:
            raise DependencyError(f"Failed to delete collection '{self.name}'") from exc

    def create_collection(self) -> None:
        try:
            self._client.collections.create(
                self.name,
                vectorizer_config=Configure.Vectorizer.none(),
                vector_index_config=Configure.VectorIndex.hnsw(distance_metric=VectorDistances.COSINE),
                properties=[
                    Property(name="chunk_id", data_type=DataType.TEXT),
                    Property(name="text", data_type=DataType.TEXT),
                    Property(name="source", data_type=DataType.TEXT),
                    Property(name="part", data_type=DataType.INT),
                ],
            )
        except Exception as exc:
            raise DependencyError(f"Failed to create collection '{self.name}'") from exc
        logger.info(f"[VECTOR_INDEX] Created fresh collection '{self.name}'")

    def reset(self) -> None:
        self.delete_collection()
        self.create_collection()

    def upsert(
        self,
        ids: Sequence[str],
        documents: Sequence[str],
        metadatas: Sequence[Dict[str, Any]],
        embeddings: Sequence[Sequence[float]],
    ) -> int:
        """Записывает чанки с готовыми векторами; возвращает число записанных объектов."""
        if not (len(ids) == len(documents) == len(metadatas) == len(embeddings)):
            raise ValueError("ids, documents, metadatas and embeddings must have equal length")

        objects = [
            DataObject(
                properties={
                    "chunk_id": chunk_id,
                    "text": text,
                    "source": meta.get("source"),
                    "part": meta.get("part"),
                },
                uuid=generate_uuid5(chunk_id),
                vector=list(vector),
            )
            for chunk_id, text, meta, vector in zip(ids, documents, metadatas, embeddings)
        ]
        try:
            result = self._collection().data.insert_many(objects)
        except Exception as exc:
            raise DependencyError(f"Upsert into '{self.name}' failed") from exc
        if result.has_errors:
            raise DependencyError(f"Upsert into '{self.name}' failed for {len(result.errors)} objects")
        return len(objects)

    def query(self, query_embedding: Sequence[float], n_results: int = 6) -> List[RetrievedChunk]:
        """Ближайшие соседи вектора запроса в порядке, который вернул индекс."""
        try:
            response = self._collection().query.near_vector(
                near_vector=list(query_embedding),
                limit=n_results,
                return_metadata=MetadataQuery(distance=True),
            )
        except Exception as exc:
            raise DependencyError(f"Query against '{self.name}' failed") from exc

        return [
            RetrievedChunk(
                text=o.properties.get("text") or "",
                metadata={"source": o.properties.get("source"), "part": o.properties.get("part")},
                distance=o.metadata.distance,
            )
            for o in response.objects
        ]

    def count(self) -> int:
        try:
            return self._collection().aggregate.over_all(total_count=True).total_count
        except Exception as exc:
            raise DependencyError(f"Count on '{self.name}' failed") from exc

    def peek(self, limit: int = 5) -> List[Dict[str, Any]]:
        """Несколько сохранённых чанков для ручной проверки базы."""
        try:
            response = self._collection().query.fetch_objects(limit=limit)
        except Exception as exc:
            raise DependencyError(f"Fetch from '{self.name}' failed") from exc
        return [dict(o.properties) for o in response.objects]

    def close(self) -> None:
        self._client.close()
