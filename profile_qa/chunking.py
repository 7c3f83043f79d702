#!/usr/bin/env python3
# -*- coding: utf-8 -*-
import re
from typing import List

_WHITESPACE = re.compile(r"\s+")


def normalize_whitespace(text: str) -> str:
    """Схлопывает любые последовательности пробельных символов в один пробел и обрезает края."""
    return _WHITESPACE.sub(" ", text or "").strip()


def segment(text: str, chunk_size: int = 1100, overlap: int = 200) -> List[str]:
    """Режет нормализованный текст на окна фиксированного размера с перекрытием.

    - шаг окна: chunk_size - overlap
    - последний чанк может быть короче и не дополняется
    - пустой текст даёт пустой список, а не [""]
    """
    if chunk_size <= 0:
        raise ValueError("chunk_size must be positive")
    if overlap < 0 or overlap >= chunk_size:
        raise ValueError("overlap must be in [0, chunk_size)")

    clean = normalize_whitespace(text)
    chunks: List[str] = []

    start = 0
    while start < len(clean):
        end = min(start + chunk_size, len(clean))
        chunks.append(clean[start:end])
        if end == len(clean):
            break
        start = end - overlap
    return chunks
