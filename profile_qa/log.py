#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""Настройка логирования: один обработчик в stdout с ISO-временем."""

import logging
import sys

NOISY_LOGGERS = ("httpx", "httpcore", "urllib3", "sentence_transformers", "weaviate")


def configure_logging(level: str = "INFO") -> None:
    """Переустанавливает обработчики корневого логгера."""
    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    )
    root_logger.setLevel(level.upper())
    root_logger.addHandler(handler)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
