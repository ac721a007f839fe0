import threading

import pytest

from dataup.errors import VideoNotFound
from dataup.models import Video
from dataup.registry import VideoRegistry, data_url_for

BASE = "http://localhost:8080"


class TestCreate:

    def test_ids_start_at_one_and_increase(self, registry):
        ids = [registry.create(Video(title=t), BASE).id for t in "abcde"]
        assert ids == [1, 2, 3, 4, 5]

    def test_data_url_points_at_data_endpoint(self, registry):
        v = registry.create(Video(title="a"), BASE)
        assert v.data_url == f"{BASE}/video/{v.id}/data"

    def test_trailing_slash_in_base_url(self, registry):
        v = registry.create(Video(title="a"), BASE + "/")
        assert v.data_url == f"{BASE}/video/1/data"

    def test_client_data_url_is_replaced(self, registry):
        v = registry.create(Video(title="a", data_url="http://evil/x"), BASE)
        assert v.data_url == f"{BASE}/video/1/data"

    def test_candidate_not_mutated(self, registry):
        candidate = Video(title="a")
        registry.create(candidate, BASE)
        assert candidate.id == 0
        assert candidate.data_url is None

    def test_explicit_id_is_kept_and_skipped_by_counter(self, registry):
        registry.create(Video(id=2, title="claimed"), BASE)
        first = registry.create(Video(title="a"), BASE)
        second = registry.create(Video(title="b"), BASE)
        assert (first.id, second.id) == (1, 3)
        assert registry.get(2).title == "claimed"

    def test_taken_id_gets_fresh_one(self, registry):
        original = registry.create(Video(title="a"), BASE)
        second = registry.create(Video(id=original.id, title="other"), BASE)
        assert second.id == 2
        assert second.data_url == f"{BASE}/video/2/data"
        assert registry.get(original.id).title == "a"

    def test_negative_id_rejected(self, registry):
        candidate = Video(title="a")
        candidate.id = -5
        with pytest.raises(ValueError):
            registry.create(candidate, BASE)
        assert len(registry) == 0

    def test_concurrent_creates_get_unique_ids(self, registry):
        results = []
        lock = threading.Lock()

        def worker():
            for _ in range(50):
                v = registry.create(Video(title="t"), BASE)
                with lock:
                    results.append(v.id)

        threads = [threading.Thread(target=worker) for _ in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert len(results) == 400
        assert sorted(results) == list(range(1, 401))
        assert len(registry) == 400


class TestLookup:

    def test_get_round_trip(self, registry):
        created = registry.create(Video(title="a", duration=12, subject="s"), BASE)
        assert registry.get(created.id) == created

    def test_get_unknown(self, registry):
        with pytest.raises(VideoNotFound):
            registry.get(999)

    def test_list_and_contains(self, registry):
        a = registry.create(Video(title="a"), BASE)
        b = registry.create(Video(title="b"), BASE)
        assert {v.id for v in registry.list()} == {a.id, b.id}
        assert a.id in registry
        assert 999 not in registry

    def test_empty_registry(self):
        assert VideoRegistry().list() == []


def test_data_url_for():
    assert data_url_for("https://h:9000/", 7) == "https://h:9000/video/7/data"
