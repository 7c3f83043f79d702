#!/usr/bin/env python3
# -*- coding: utf-8 -*-
import logging
from typing import List

from .embeddings import EmbeddingGenerator
from .models import RetrievedChunk
from .vectorstore import VectorIndex

logger = logging.getLogger(__name__)

DEFAULT_TOP_K = 6


class Retriever:
    """Поиск ближайших чанков к вопросу: один эмбеддинг, один запрос к индексу, без реранкинга."""

    def __init__(self, index: VectorIndex, embedder: EmbeddingGenerator) -> None:
        self._index = index
        self._embedder = embedder

    def retrieve(self, query: str, k: int = DEFAULT_TOP_K) -> List[RetrievedChunk]:
        [query_vector] = self._embedder.embed([query])
        results = self._index.query(query_vector, n_results=k)
        if not results:
            logger.warning("[RETRIEVER] No chunks retrieved for query")
        else:
            logger.info(f"[RETRIEVER] Retrieved {len(results)} chunks for query: {query[:80]}")
        return results
