from gearx.core.metrics import get_counters
from gearx.i18n.en_messages import PercentileMessages


def test_admin_endpoints_require_header(client):
    response = client.post("/admin/percentiles/preview", json={"csv_text": "0,1", "max_marks": 10})

    assert response.status_code == 401


def test_admin_endpoints_reject_unlisted_email(client):
    response = client.post(
        "/admin/percentiles/preview",
        json={"csv_text": "0,1", "max_marks": 10},
        headers={"X-Admin-Email": "student@example.com"},
    )

    assert response.status_code == 403
    assert response.json()["error"] == "permission_denied"


def test_admin_allowlist_is_case_insensitive(client):
    response = client.post(
        "/admin/percentiles/preview",
        json={"csv_text": "0,1", "max_marks": 1},
        headers={"X-Admin-Email": "OPS@GearX.dev"},
    )

    assert response.status_code == 200


def test_preview_returns_table_and_line_errors(client, admin_headers):
    response = client.post(
        "/admin/percentiles/preview",
        json={"csv_text": "0,1.0\nfoo,bar\n100,99.0", "max_marks": 100},
        headers=admin_headers,
    )

    assert response.status_code == 200
    body = response.json()
    assert len(body["table"]) == 101
    assert body["table"][50] == 50.0
    assert body["anchors"] == 2
    assert body["errors"] == ['Line 2: Non-numeric values "foo", "bar"']


def test_preview_without_rows_returns_null_table(client, admin_headers):
    response = client.post(
        "/admin/percentiles/preview",
        json={"csv_text": "foo,bar", "max_marks": 100},
        headers=admin_headers,
    )

    assert response.status_code == 200
    assert response.json()["table"] is None
    assert PercentileMessages.NO_VALID_ROWS in response.json()["errors"]


def test_put_then_get_percentile_map(client, admin_headers):
    put = client.put(
        "/admin/percentiles/jee-adv-1",
        json={"csv_text": "marks,percentile\n0,0\n10,100", "max_marks": 10},
        headers=admin_headers,
    )
    assert put.status_code == 200
    assert put.json()["slots"] == 11
    assert put.json()["errors"] == []

    got = client.get("/admin/percentiles/jee-adv-1", headers=admin_headers)
    assert got.status_code == 200
    body = got.json()
    assert body["max_marks"] == 10
    assert body["table"] == [float(v) for v in range(0, 101, 10)]


def test_put_without_valid_rows_is_rejected(client, admin_headers):
    response = client.put(
        "/admin/percentiles/jee-bad",
        json={"csv_text": "foo,bar", "max_marks": 100},
        headers=admin_headers,
    )

    assert response.status_code == 422
    body = response.json()
    assert body["error"] == "percentile_parse_failed"
    assert PercentileMessages.NO_VALID_ROWS in body["detail"]["errors"]
    assert client.get("/admin/percentiles/jee-bad", headers=admin_headers).status_code == 404


def test_put_rejects_max_marks_above_limit(client, admin_headers):
    response = client.put(
        "/admin/percentiles/jee-huge",
        json={"csv_text": "0,1", "max_marks": 5000},
        headers=admin_headers,
    )

    assert response.status_code == 400
    assert response.json()["error"] == "invalid_percentile_input"


def test_upload_csv_file(client, admin_headers):
    response = client.post(
        "/admin/percentiles/ugee-5/upload",
        params={"max_marks": 10},
        files={"file": ("ugee.csv", b"marks,percentile\n0,1\n10,99\n", "text/csv")},
        headers=admin_headers,
    )

    assert response.status_code == 200
    assert response.json()["slots"] == 11
    assert response.json()["anchors"] == 2


def test_upload_rejects_other_extensions(client, admin_headers):
    response = client.post(
        "/admin/percentiles/ugee-5/upload",
        params={"max_marks": 10},
        files={"file": ("ugee.xlsx", b"0,1", "application/octet-stream")},
        headers=admin_headers,
    )

    assert response.status_code == 400


def test_delete_percentile_map(client, admin_headers):
    client.put(
        "/admin/percentiles/jee-del",
        json={"csv_text": "0,5", "max_marks": 3},
        headers=admin_headers,
    )

    assert client.delete("/admin/percentiles/jee-del", headers=admin_headers).status_code == 204
    missing = client.get("/admin/percentiles/jee-del", headers=admin_headers)
    assert missing.status_code == 404
    assert missing.json()["error"] == "percentile_map_not_found"


def test_perf_metrics_exposes_counters(client, admin_headers):
    client.post(
        "/admin/percentiles/preview",
        json={"csv_text": "0,1", "max_marks": 1},
        headers=admin_headers,
    )

    response = client.get("/admin/perf-metrics", headers=admin_headers)

    assert response.status_code == 200
    assert response.json()["counters"]["percentile.build.success"] == 1
    assert "percentile.build" in response.json()["timings"]


def test_perf_metrics_reset_clears_counters(client, admin_headers):
    client.post(
        "/admin/percentiles/preview",
        json={"csv_text": "0,1", "max_marks": 1},
        headers=admin_headers,
    )

    client.get("/admin/perf-metrics", params={"reset": True}, headers=admin_headers)

    assert "percentile.build.success" not in get_counters()
