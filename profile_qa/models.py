#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""Модели данных: документы, чанки, результаты поиска и контракт ответа."""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class SourceDocument(BaseModel):
    """Исходный документ: id является ключом для id чанков, origin подписью источника."""
    id: str
    text: str
    origin: str


class Chunk(BaseModel):
    id: str
    text: str
    source_id: str
    ordinal: int = Field(ge=0)
    origin: str

    @property
    def metadata(self) -> Dict[str, Any]:
        return {"source": self.origin, "part": self.ordinal}


class RetrievedChunk(BaseModel):
    """Чанк, найденный в индексе; чем меньше distance, тем ближе."""
    text: str
    metadata: Dict[str, Any] = Field(default_factory=dict)
    distance: Optional[float] = None

    @property
    def source(self) -> str:
        return self.metadata.get("source") or "unknown"

    @property
    def part(self) -> Optional[int]:
        return self.metadata.get("part")


class InquiryContext(BaseModel):
    """Контекст одного запроса; живёт только в пределах запроса."""
    query: str
    chunks: List[RetrievedChunk] = Field(default_factory=list)


class QuickAction(BaseModel):
    """Кнопка быстрого действия; неизменяема, поэтому наборы кнопок можно делить между ответами."""
    model_config = ConfigDict(frozen=True)

    label: str
    message: str


class SourceRef(BaseModel):
    source: str
    part: Optional[int] = None


class ChatReply(BaseModel):
    """Единый контракт ответа для онлайн- и офлайн-ответчика."""
    answer: str
    quickActions: Optional[List[QuickAction]] = None
    sources: Optional[List[SourceRef]] = None

    @field_validator("answer")
    @classmethod
    def _answer_not_empty(cls, value: str) -> str:
        if not value or not value.strip():
            raise ValueError("answer must be a non-empty string")
        return value

    @field_validator("quickActions")
    @classmethod
    def _unique_labels(cls, value: Optional[List[QuickAction]]) -> Optional[List[QuickAction]]:
        if value is not None:
            labels = [a.label for a in value]
            if len(labels) != len(set(labels)):
                raise ValueError("quick action labels must be unique")
        return value

    def to_payload(self) -> Dict[str, Any]:
        return self.model_dump(exclude_none=True)


class IngestReport(BaseModel):
    """Итог одного прогона индексации."""
    collection: str
    total_chunks: int
    upserted: int
    sources: List[str] = Field(default_factory=list)
