#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Тонкий лаунчер API вопрос-ответа по профилю.

Запуск сервера:
  uvicorn app.main:app --host 0.0.0.0 --port 8000

Перестройка базы знаний:
  python -m profile_qa.indexer
"""

if __name__ == "__main__":
    import uvicorn

    uvicorn.run("app.main:app", host="0.0.0.0", port=8000, reload=False)
