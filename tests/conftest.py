"""Общие заглушки для тестов: индекс в памяти, детерминированный эмбеддер и профиль."""

import json
import math
from pathlib import Path
from typing import Any, Dict, List, Sequence

import pytest

from profile_qa.models import RetrievedChunk
from profile_qa.profile import Profile


class FakeEmbedder:
    """Детерминированный «эмбеддер»: частоты нескольких букв, нормированные к 1."""

    LETTERS = "aeiostnr"

    def __init__(self) -> None:
        self.calls: List[List[str]] = []

    def embed(self, texts: Sequence[str]) -> List[List[float]]:
        self.calls.append(list(texts))
        out = []
        for t in texts:
            vec = [float(t.lower().count(ch)) + 0.01 for ch in self.LETTERS]
            norm = math.sqrt(sum(v * v for v in vec))
            out.append([v / norm for v in vec])
        return out


class FakeIndex:
    """Векторный индекс в памяти с косинусным расстоянием и тем же интерфейсом, что VectorIndex."""

    def __init__(self, name: str = "TestKB") -> None:
        self.name = name
        self.rows: Dict[str, Dict[str, Any]] = {}
        self.upsert_calls = 0
        self.reset_calls = 0
        self.queries: List[int] = []
        self.closed = False

    def reset(self) -> None:
        self.reset_calls += 1
        self.rows = {}

    def upsert(self, ids, documents, metadatas, embeddings) -> int:
        self.upsert_calls += 1
        for i, d, m, e in zip(ids, documents, metadatas, embeddings):
            self.rows[i] = {"text": d, "metadata": dict(m), "vector": list(e)}
        return len(ids)

    def query(self, query_embedding, n_results: int = 6) -> List[RetrievedChunk]:
        self.queries.append(n_results)
        scored = []
        for row in self.rows.values():
            dot = sum(a * b for a, b in zip(query_embedding, row["vector"]))
            scored.append(RetrievedChunk(text=row["text"], metadata=row["metadata"], distance=1.0 - dot))
        scored.sort(key=lambda c: c.distance)
        return scored[:n_results]

    def count(self) -> int:
        return len(self.rows)

    def close(self) -> None:
        self.closed = True


PROFILE_DATA: Dict[str, Any] = {
    "name": "Test Person",
    "hero": {
        "headline": "Backend Developer",
        "subline": "Builds APIs.",
        "pills": ["Python • FastAPI", "Testing"],
        "cta": {
            "email": "test@example.com",
            "links": [{"label": "GitHub", "url": "https://github.com/test-person"}],
        },
        "note": "Open to work",
    },
    "about": {
        "title": "About",
        "paragraphs": ["First paragraph.", "Second paragraph.", "Third paragraph."],
        "focusAreas": ["APIs", "Search"],
    },
    "tech": [
        {"title": f"Face{i}", "badge": "b", "items": [f"item{i}_{j}" for j in range(10)]}
        for i in range(7)
    ],
    "experience": [
        {"title": f"Role {i}", "when": f"201{i}", "bullets": [f"Did thing {i}a", f"Did thing {i}b"]}
        for i in range(5)
    ],
    "projects": [
        {"title": f"Project {i}", "desc": f"Description {i}", "meta": "m",
         "url": f"https://example.com/p{i}" if i % 2 == 0 else None}
        for i in range(8)
    ],
    "contact": {"email": "test@example.com", "links": []},
}


@pytest.fixture
def profile() -> Profile:
    return Profile.model_validate(PROFILE_DATA)


@pytest.fixture
def profile_file(tmp_path: Path) -> Path:
    path = tmp_path / "profile.json"
    path.write_text(json.dumps(PROFILE_DATA), encoding="utf-8")
    return path


@pytest.fixture
def fake_index() -> FakeIndex:
    return FakeIndex()


@pytest.fixture
def fake_embedder() -> FakeEmbedder:
    return FakeEmbedder()
