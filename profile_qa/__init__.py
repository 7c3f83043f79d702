"""Ядро вопрос-ответной системы по профилю/резюме.

Содержит:
- config: dataclass-конфиги для эмбеддингов, векторного хранилища, LLM, индексирования и поиска
- chunking: нормализация пробелов и нарезка текста на перекрывающиеся окна
- embeddings: ленивая модель эмбеддингов (один экземпляр на процесс) и нормализация векторов
- vectorstore: фабрика клиента Weaviate и фасад коллекции (upsert/query/delete/count)
- sources: чтение источников (JSON-профиль, PDF-резюме)
- indexer: полная пересборка базы знаний батчами
- retriever: поиск ближайших чанков к вопросу
- llm: адаптер LlamaIndex CustomLLM для OpenAI‑совместимого Chat API
- engine: синтез ответа строго по найденному контексту (онлайн-путь)
- responder: локальный детерминированный ответчик по правилам (офлайн-путь)
"""
