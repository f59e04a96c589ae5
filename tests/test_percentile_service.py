import pytest
from sqlalchemy.exc import OperationalError

from gearx.core.errors import InvalidPercentileInput, PercentileMapNotFoundError, PercentileParseError
from gearx.db.repositories import AuditLogRepository, PercentileMapRepository
from gearx.i18n.en_messages import PercentileMessages
from gearx.services import percentiles as service


def test_import_persists_table_and_audit(session):
    summary = service.import_percentile_map(
        session, "jee-full-3", "marks,percentile\n0,1.0\nfoo,bar\n300,99.9", 300, actor="admin@gearx.dev"
    )
    session.commit()

    assert summary.test_id == "jee-full-3"
    assert summary.slots == 301
    assert summary.anchors == 2
    assert summary.errors == ['Line 3: Non-numeric values "foo", "bar"']
    assert len(summary.payload_hash) == 64

    document = service.get_percentile_map(session, "jee-full-3")
    assert document.max_marks == 300
    assert document.table[0] == 1.0
    assert document.table[300] == 99.9

    audit = AuditLogRepository(session).for_action_prefix("percentile_import:")
    assert [(a.actor, a.action) for a in audit] == [("admin@gearx.dev", "percentile_import:jee-full-3")]


def test_import_without_valid_rows_writes_nothing(session):
    with pytest.raises(PercentileParseError) as excinfo:
        service.import_percentile_map(session, "jee-empty", "foo,bar", 100)
    session.commit()

    assert PercentileMessages.NO_VALID_ROWS in excinfo.value.detail["errors"]
    assert PercentileMapRepository(session).load("jee-empty") is None
    assert AuditLogRepository(session).for_action_prefix("percentile_import:") == []


def test_import_rejects_oversized_max_marks(session):
    with pytest.raises(InvalidPercentileInput):
        service.import_percentile_map(session, "huge", "0,1", 10_000)


def test_import_rejects_bad_test_id(session):
    with pytest.raises(InvalidPercentileInput):
        service.import_percentile_map(session, "   ", "0,1", 10)
    with pytest.raises(InvalidPercentileInput):
        service.import_percentile_map(session, "x" * 129, "0,1", 10)


def test_reimport_replaces_previous_map(session):
    service.import_percentile_map(session, "ugee-2", "0,10\n100,90", 100)
    service.import_percentile_map(session, "ugee-2", "0,0\n50,100", 50)
    session.commit()

    document = service.get_percentile_map(session, "ugee-2")
    assert document.max_marks == 50
    assert len(document.table) == 51


def test_preview_does_not_persist(session):
    result = service.preview_percentile_map("0,0\n10,100", 10)

    assert result.table[5] == 50.0
    assert PercentileMapRepository(session).list_test_ids() == []


def test_get_and_delete_missing_map_raise(session):
    with pytest.raises(PercentileMapNotFoundError):
        service.get_percentile_map(session, "missing")
    with pytest.raises(PercentileMapNotFoundError):
        service.delete_percentile_map(session, "missing")


def test_resolve_uses_stored_table(session):
    service.import_percentile_map(session, "jee-4", "0,0\n10,100", 10)
    session.commit()

    result = service.resolve_score_percentile(session, "jee-4", 6.6, 40)

    assert result.source == "table"
    assert result.index == 7
    assert result.percentile == 70.0


def test_resolve_without_map_falls_back(session):
    result = service.resolve_score_percentile(session, "unknown", 120, 300)

    assert result.source == "fallback"
    assert 0.0 <= result.percentile <= 99.99


def test_resolve_falls_back_when_storage_fails(session, monkeypatch):
    def _boom(self, test_id):
        raise OperationalError("SELECT", {}, Exception("database is locked"))

    monkeypatch.setattr(PercentileMapRepository, "load", _boom)

    result = service.resolve_score_percentile(session, "jee-4", 10, 40)

    assert result.source == "fallback"
