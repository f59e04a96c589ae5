import pytest

from gearx.core.errors import InvalidPercentileInput
from gearx.db.repositories import PercentileMapRepository
from gearx.engine.percentiles.store import InMemoryPercentileMapStore
from gearx.models import PercentileMap


def test_in_memory_store_round_trip_and_full_replace():
    store = InMemoryPercentileMapStore()

    assert store.save("ugee-1", [1.0, 2.0, 3.0], 2) == "ugee-1"
    first = store.load("ugee-1")
    assert first.table == (1.0, 2.0, 3.0)
    assert first.max_marks == 2
    assert first.updated_at is not None

    store.save("ugee-1", [5.0, 6.0], 1)
    second = store.load("ugee-1")
    assert second.table == (5.0, 6.0)
    assert second.max_marks == 1
    assert len(store) == 1


def test_in_memory_store_unknown_test_is_none():
    store = InMemoryPercentileMapStore()

    assert store.load("missing") is None
    assert store.delete("missing") is False


@pytest.mark.parametrize(
    "table,max_marks",
    [([], 0), ([1.0, "x"], 1), ([1.0], -1), ("1,2", 1)],
)
def test_store_rejects_unusable_input(table, max_marks):
    with pytest.raises(InvalidPercentileInput):
        InMemoryPercentileMapStore().save("t", table, max_marks)


def test_store_rejects_blank_test_id():
    with pytest.raises(InvalidPercentileInput):
        InMemoryPercentileMapStore().save("  ", [1.0], 0)


def test_repository_upsert_replaces_whole_table(session):
    repo = PercentileMapRepository(session)

    repo.save("jee-main-1", [0.0, 50.0, 100.0], 2)
    session.commit()
    repo.save("jee-main-1", [10.0, 90.0], 1)
    session.commit()

    document = repo.load("jee-main-1")
    assert document.table == (10.0, 90.0)
    assert document.max_marks == 1
    assert session.query(PercentileMap).count() == 1


def test_repository_load_missing_returns_none(session):
    assert PercentileMapRepository(session).load("nope") is None


def test_repository_load_ignores_non_list_payload(session):
    session.add(PercentileMap(test_id="legacy", max_marks=3, percentile_table={"0": 1.0}))
    session.commit()

    assert PercentileMapRepository(session).load("legacy") is None


def test_repository_delete_and_list(session):
    repo = PercentileMapRepository(session)
    repo.save("b-test", [1.0], 0)
    repo.save("a-test", [2.0], 0)
    session.commit()

    assert repo.list_test_ids() == ["a-test", "b-test"]
    assert repo.delete("a-test") is True
    assert repo.delete("a-test") is False
    session.commit()
    assert repo.list_test_ids() == ["b-test"]
