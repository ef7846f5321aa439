"""Unit tests for StatusCache."""

from providerhub.domain.services.status_cache import StatusCache


class FakeClock:
    def __init__(self) -> None:
        self.now = 1000.0

    def __call__(self) -> float:
        return self.now


def test_get_and_set():
    cache = StatusCache(ttl_seconds=30)

    assert cache.get("calendar") is None
    assert cache.set("calendar", "summary") is True
    assert cache.get("calendar") == "summary"


def test_entries_are_scoped_by_owner():
    cache = StatusCache()

    cache.set("calendar", "global-summary")
    cache.set("calendar", "tenant-summary", owner_scope="tenant-1")

    assert cache.get("calendar") == "global-summary"
    assert cache.get("calendar", "tenant-1") == "tenant-summary"


def test_entry_expires_after_ttl():
    clock = FakeClock()
    cache = StatusCache(ttl_seconds=30, clock=clock)
    cache.set("calendar", "summary")

    clock.now += 29
    assert cache.get("calendar") == "summary"

    clock.now += 1
    assert cache.get("calendar") is None
    assert cache.size() == 0


def test_per_family_ttl():
    clock = FakeClock()
    ttls = {"backup_storage": 300}
    cache = StatusCache(ttl_seconds=30, ttl_for_family=lambda f: ttls.get(f, 30), clock=clock)

    cache.set("backup_storage", "backup")
    cache.set("calendar", "calendar")
    clock.now += 60

    assert cache.get("backup_storage") == "backup"
    assert cache.get("calendar") is None


def test_invalidate_family_drops_every_scope():
    cache = StatusCache()
    cache.set("calendar", "a")
    cache.set("calendar", "b", owner_scope="tenant-1")
    cache.set("invoicing", "c")

    assert cache.invalidate_family("calendar") == 2
    assert cache.get("calendar") is None
    assert cache.get("calendar", "tenant-1") is None
    assert cache.get("invoicing") == "c"


def test_stale_generation_is_not_stored():
    cache = StatusCache()
    generation = cache.generation("calendar")

    cache.invalidate_family("calendar")

    assert cache.set("calendar", "stale", generation=generation) is False
    assert cache.get("calendar") is None
    assert cache.set("calendar", "fresh", generation=cache.generation("calendar")) is True


def test_invalidate_all():
    cache = StatusCache()
    cache.set("calendar", "a")
    cache.set("invoicing", "b")

    cache.invalidate_all()

    assert cache.size() == 0
