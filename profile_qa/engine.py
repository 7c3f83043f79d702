#!/usr/bin/env python3
# -*- coding: utf-8 -*-
import logging
from typing import List

from llama_index.core import PromptTemplate
from llama_index.core.llms import CustomLLM

from .config import RetrievalConfig
from .errors import InputError
from .models import ChatReply, InquiryContext, RetrievedChunk, SourceRef
from .retriever import Retriever

logger = logging.getLogger(__name__)

NO_ANSWER = "No answer."


class GroundedAnswerer:
    """Онлайн-ответчик: извлечение и синтез ответа строго по найденному контексту.

    - retriever: один эмбеддинг вопроса и один запрос top-k к индексу
    - synthesizer: ровно один вызов LLM с системной инструкцией
      «только по источникам, иначе "не знаю", без персональных данных»
    - источники: первые max_sources чанков из контекста
    """
    def __init__(self, retriever: Retriever, llm: CustomLLM, ret_cfg: RetrievalConfig) -> None:
        self._retriever = retriever
        self._llm = llm
        self._ret_cfg = ret_cfg

        self._qa_prompt = PromptTemplate("Question:\n{query_str}\n\nSources:\n{context_str}")

    @staticmethod
    def build_context(chunks: List[RetrievedChunk]) -> str:
        """Склеивает чанки в блок контекста с 1-based номером и подписью источника."""
        return "\n\n".join(
            f"Source {i} ({c.source}):\n{c.text}" for i, c in enumerate(chunks, start=1)
        )

    def synthesize(self, query: str, chunks: List[RetrievedChunk]) -> ChatReply:
        """Строит промпт из контекста, вызывает LLM один раз и собирает ответ с атрибуцией.

        Ошибки LLM не перехватываются и не повторяются.
        """
        prompt = self._qa_prompt.format(query_str=query, context_str=self.build_context(chunks))
        resp = self._llm.complete(prompt)

        answer = (resp.text or "").strip() or NO_ANSWER
        sources = [
            SourceRef(source=c.source, part=c.part) for c in chunks[: self._ret_cfg.max_sources]
        ]
        return ChatReply(answer=answer, sources=sources)

    def answer(self, message: str) -> ChatReply:
        """Полный онлайн-путь: проверка ввода → поиск → синтез."""
        query = (message or "").strip()
        if not query:
            raise InputError("Missing message")

        ctx = InquiryContext(query=query, chunks=self._retriever.retrieve(query, k=self._ret_cfg.top_k))
        reply = self.synthesize(ctx.query, ctx.chunks)
        logger.info(f"[ENGINE] Answered with {len(ctx.chunks)} chunks in context")
        return reply
