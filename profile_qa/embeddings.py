#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""Генератор эмбеддингов: одна модель на процесс, векторы единичной длины."""

import logging
import threading
from typing import List, Optional, Sequence

import numpy as np
from llama_index.core.base.embeddings.base import BaseEmbedding
from llama_index.embeddings.huggingface import HuggingFaceEmbedding

from .config import EmbeddingConfig
from .errors import DependencyError

logger = logging.getLogger(__name__)

_model: Optional[BaseEmbedding] = None
_model_lock = threading.Lock()


def get_embedding_model(cfg: EmbeddingConfig) -> BaseEmbedding:
    """Лениво создаёт модель эмбеддингов.

    Первый вызывающий загружает модель под блокировкой; конкурентные вызовы
    ждут на той же блокировке и получают тот же экземпляр. Неудачная загрузка
    не кэшируется.
    """
    global _model
    if _model is not None:
        return _model
    with _model_lock:
        if _model is None:
            logger.info(f"[EMBEDDINGS] Loading model {cfg.model_name}")
            try:
                # all-MiniLM-L6-v2 использует mean pooling из своего конфига sentence-transformers
                _model = HuggingFaceEmbedding(
                    model_name=cfg.model_name,
                    embed_batch_size=cfg.embed_batch_size,
                    normalize=False,
                )
            except Exception as exc:
                raise DependencyError(f"Embedding model is unavailable: {cfg.model_name}") from exc
    return _model


def reset_embedding_model() -> None:
    """Сбрасывает кэшированную модель (тесты, смена модели)."""
    global _model
    with _model_lock:
        _model = None


def to_unit(vec: Sequence[float]) -> List[float]:
    """L2-нормализация; нулевой вектор возвращается как есть (норма считается равной 1)."""
    arr = np.asarray(vec, dtype=np.float64)
    norm = float(np.linalg.norm(arr)) or 1.0
    return (arr / norm).tolist()


class EmbeddingGenerator:
    """Переводит тексты в векторы единичной длины, сохраняя порядок входа."""

    def __init__(self, cfg: Optional[EmbeddingConfig] = None) -> None:
        self.cfg = cfg or EmbeddingConfig()

    def embed(self, texts: Sequence[str]) -> List[List[float]]:
        if not texts:
            return []
        model = get_embedding_model(self.cfg)
        try:
            raw = model.get_text_embedding_batch(list(texts))
        except Exception as exc:
            raise DependencyError("Embedding batch failed") from exc
        if len(raw) != len(texts):
            raise DependencyError(f"Embedding model returned {len(raw)} vectors for {len(texts)} texts")
        return [to_unit(v) for v in raw]
