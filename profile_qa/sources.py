#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""Разрешение источников базы знаний: профиль (JSON) и резюме (PDF)."""

import logging
from pathlib import Path
from typing import List

from llama_index.core import SimpleDirectoryReader

from .config import IndexingConfig
from .errors import DataError
from .models import SourceDocument
from .profile import load_profile

logger = logging.getLogger(__name__)


def extract_document_text(path: str) -> str:
    """Извлекает обычный текст из бинарного документа (PDF) через SimpleDirectoryReader."""
    p = Path(path)
    if not p.is_file():
        raise DataError(f"Document not found: {p}")
    try:
        docs = SimpleDirectoryReader(input_files=[str(p)]).load_data()
    except Exception as exc:
        raise DataError(f"Document is unreadable: {p}") from exc
    return "\n".join((d.text or "") for d in docs).strip()


def resolve_sources(cfg: IndexingConfig) -> List[SourceDocument]:
    """Читает все настроенные источники целиком до любых изменений индекса.

    Отсутствующий или повреждённый источник даёт DataError.
    """
    profile = load_profile(cfg.profile_path)
    documents = [
        SourceDocument(id="profile", text=profile.to_text(), origin=Path(cfg.profile_path).name),
    ]
    if cfg.resume_path:
        documents.append(
            SourceDocument(
                id="resume",
                text=extract_document_text(cfg.resume_path),
                origin=Path(cfg.resume_path).name,
            )
        )
    for d in documents:
        logger.info(f"[SOURCES] Resolved '{d.origin}' ({len(d.text):,} chars)")
    return documents
