from aima.cache import CategoryCache


def test_put_and_get(store):
    cache = CategoryCache(store)
    assert cache.get("Grammar") is None
    cache.put("Grammar", ["a", "b"])
    assert cache.get("Grammar") == ("a", "b")
    assert "Grammar" in cache
    assert len(cache) == 1
    assert store.writes == ["Grammar"]


def test_cached_lines_are_detached_from_caller():
    cache = CategoryCache()
    lines = ["a"]
    cache.put("Idioms", lines)
    lines.append("b")
    assert cache.get("Idioms") == ("a",)


def test_clear():
    cache = CategoryCache()
    cache.put("Idioms", ["a"])
    cache.clear()
    assert len(cache) == 0
    assert cache.keys() == []
