#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""Иерархия ошибок ядра.

- InputError: пустое/отсутствующее сообщение (HTTP 400, без вызовов зависимостей)
- DependencyError: недоступна модель эмбеддингов, индекс или LLM (HTTP 500)
- DataError: источник для индексации отсутствует или повреждён (HTTP 500)
"""


class ProfileQAError(Exception):
    """Базовая ошибка пакета."""


class InputError(ProfileQAError):
    pass


class DependencyError(ProfileQAError):
    pass


class DataError(ProfileQAError):
    pass
