"""Тесты поиска ближайших чанков."""

from profile_qa.retriever import Retriever


def _fill(index, embedder, texts):
    vectors = embedder.embed(texts)
    index.upsert(
        ids=[f"doc_{i}" for i in range(len(texts))],
        documents=texts,
        metadatas=[{"source": "profile.json", "part": i} for i in range(len(texts))],
        embeddings=vectors,
    )
    embedder.calls.clear()


def test_retrieve_returns_ascending_distances(fake_index, fake_embedder) -> None:
    _fill(fake_index, fake_embedder, [
        "aaaa aaaa", "eeee ssss", "tttt nnnn rrrr", "a e i o s t n r", "ooooo", "iii sss",
        "rest", "tension", "ratio",
    ])
    results = Retriever(fake_index, fake_embedder).retrieve("sea tone", k=5)

    assert len(results) == 5
    distances = [r.distance for r in results]
    assert distances == sorted(distances)


def test_query_is_embedded_once_as_single_item_batch(fake_index, fake_embedder) -> None:
    _fill(fake_index, fake_embedder, ["alpha", "beta"])
    Retriever(fake_index, fake_embedder).retrieve("what is alpha?")

    assert fake_embedder.calls == [["what is alpha?"]]
    assert fake_index.queries == [6]


def test_empty_index_returns_nothing(fake_index, fake_embedder) -> None:
    assert Retriever(fake_index, fake_embedder).retrieve("anything", k=3) == []
