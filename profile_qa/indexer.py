#!/usr/bin/env python3
# -*- coding: utf-8 -*-
import logging
from typing import Callable, List, Optional

from .chunking import segment
from .config import EmbeddingConfig, IndexingConfig, Settings, VectorStoreConfig
from .embeddings import EmbeddingGenerator
from .models import Chunk, IngestReport, SourceDocument
from .sources import resolve_sources
from .vectorstore import VectorIndex, make_weaviate_client

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[int, int], None]


class KnowledgeBaseIndexer:
    """Индексатор базы знаний профиля в Weaviate.

    1) Читает все источники (ошибка любого из них прерывает прогон до изменения индекса)
    2) Удаляет и заново создаёт коллекцию
    3) Режет источники на чанки с перекрытием
    4) Батчами эмбеддит и загружает чанки, сообщая прогресс

    Уже записанные батчи при сбое посреди прогона остаются в индексе:
    отката и продолжения с места сбоя нет.
    """
    def __init__(
        self,
        vs_cfg: VectorStoreConfig,
        emb_cfg: EmbeddingConfig,
        idx_cfg: IndexingConfig,
        index: Optional[VectorIndex] = None,
        embedder: Optional[EmbeddingGenerator] = None,
    ) -> None:
        self.vs_cfg = vs_cfg
        self.emb_cfg = emb_cfg
        self.idx_cfg = idx_cfg
        self._index = index
        # переданный снаружи индекс живёт на общем клиенте и закрывается владельцем
        self._owns_index = index is None
        self._embedder = embedder or EmbeddingGenerator(emb_cfg)

    @property
    def index(self) -> VectorIndex:
        if self._index is None:
            self._index = VectorIndex(make_weaviate_client(self.vs_cfg), self.vs_cfg.index_name)
        return self._index

    def close(self) -> None:
        if self._owns_index and self._index is not None:
            self._index.close()
            self._index = None

    def _to_chunks(self, docs: List[SourceDocument]) -> List[Chunk]:
        """Разбивает документы на чанки с id вида `{source}_{ordinal}`."""
        chunks: List[Chunk] = []
        for d in docs:
            for ordinal, text in enumerate(segment(d.text, self.idx_cfg.chunk_size, self.idx_cfg.chunk_overlap)):
                chunks.append(
                    Chunk(id=f"{d.id}_{ordinal}", text=text, source_id=d.id, ordinal=ordinal, origin=d.origin)
                )
        return chunks

    def run(self, progress: Optional[ProgressCallback] = None) -> IngestReport:
        """Полностью перестраивает базу знаний; повторный запуск даёт тот же результат.

        Неверный batch_size отклоняется до чтения источников и любых изменений индекса.
        """
        if self.idx_cfg.batch_size <= 0:
            raise ValueError("batch_size must be positive")
        docs = resolve_sources(self.idx_cfg)
        chunks = self._to_chunks(docs)

        index = self.index
        index.reset()

        total = len(chunks)
        done = 0
        batch_size = self.idx_cfg.batch_size
        for start in range(0, total, batch_size):
            batch = chunks[start:start + batch_size]
            vectors = self._embedder.embed([c.text for c in batch])
            done += index.upsert(
                ids=[c.id for c in batch],
                documents=[c.text for c in batch],
                metadatas=[c.metadata for c in batch],
                embeddings=vectors,
            )
            logger.info(f"[INDEXER] Upserted {done}/{total}")
            if progress is not None:
                progress(done, total)

        logger.info(f"[INDEXER] Knowledge base '{index.name}' rebuilt: {done} chunks")
        return IngestReport(
            collection=index.name,
            total_chunks=total,
            upserted=done,
            sources=[d.origin for d in docs],
        )


if __name__ == "__main__":
    from .log import configure_logging

    settings = Settings.from_env()
    configure_logging(settings.log_level)

    indexer = KnowledgeBaseIndexer(settings.vector_store, settings.embedding, settings.indexing)
    report = indexer.run()
    print(f"Done. Collection '{report.collection}' now holds {indexer.index.count()} chunks.")
    for row in indexer.index.peek(3):
        print(f"--- {row.get('chunk_id')} ({row.get('source')}) ---")
        print((row.get("text") or "")[:250])
    indexer.close()
