#!/usr/bin/env python3
# -*- coding: utf-8 -*-
from typing import Any, Dict, List

from llama_index.core.llms import (
    CompletionResponse,
    CompletionResponseGen,
    CustomLLM,
    LLMMetadata,
)
from openai import OpenAI, OpenAIError

from .config import DEFAULT_SYSTEM_PROMPT, LLMConfig
from .errors import DependencyError


class OpenAIChatLLM(CustomLLM):
    """Адаптер LlamaIndex CustomLLM для OpenAI-совместимого Chat Completions API (Groq и т.п.).

    Один вызов complete делает ровно один запрос chat.completions без повторов;
    ошибки сервиса поднимаются как DependencyError.
    """
    def __init__(
        self,
        base_url: str,
        api_key: str,
        model_name: str,
        temperature: float = 0.2,
        top_p: float = 1.0,
        max_tokens: int = 600,
        system_prompt: str = DEFAULT_SYSTEM_PROMPT,
    ) -> None:
        super().__init__()
        self._client = OpenAI(base_url=base_url, api_key=api_key, max_retries=0)
        self._model = model_name
        self._temperature = float(temperature)
        self._top_p = float(top_p)
        self._max_tokens = int(max_tokens)
        self._system_prompt = system_prompt

    @classmethod
    def from_config(cls, cfg: LLMConfig) -> "OpenAIChatLLM":
        return cls(
            base_url=cfg.base_url,
            api_key=cfg.api_key,
            model_name=cfg.model_name,
            temperature=cfg.temperature,
            top_p=cfg.top_p,
            max_tokens=cfg.max_tokens,
            system_prompt=cfg.system_prompt,
        )

    @property
    def metadata(self) -> LLMMetadata:
        return LLMMetadata(
            model_name=f"openai-compat::{self._model}",
            num_output=self._max_tokens,
            is_chat_model=True,
        )

    def _make_messages(self, user_prompt: str) -> List[Dict[str, str]]:
        """Формирует список сообщений (system + user) для Chat API."""
        return [
            {"role": "system", "content": self._system_prompt},
            {"role": "user", "content": user_prompt},
        ]

    def complete(self, prompt: str, formatted: bool = False, **kwargs: Any) -> CompletionResponse:
        """Получение единого текста ответа; пустой ответ сервиса даёт пустую строку."""
        try:
            resp = self._client.chat.completions.create(
                model=self._model,
                messages=self._make_messages(prompt),
                temperature=self._temperature,
                top_p=self._top_p,
                max_tokens=self._max_tokens,
            )
        except OpenAIError as exc:
            raise DependencyError("Generation service call failed") from exc

        text = ""
        if resp.choices:
            text = (resp.choices[0].message.content or "").strip()
        return CompletionResponse(text=text)

    def stream_complete(self, prompt: str, formatted: bool = False, **kwargs: Any) -> CompletionResponseGen:
        """Потоковая выдача токенов не поддерживается: отдаёт готовый ответ одним куском."""
        yield self.complete(prompt, formatted=formatted, **kwargs)
