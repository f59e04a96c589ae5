def _store_map(client, admin_headers, test_id="jee-mock-9"):
    response = client.put(
        f"/admin/percentiles/{test_id}",
        json={"csv_text": "0,10\n1,20\n2,30", "max_marks": 2},
        headers=admin_headers,
    )
    assert response.status_code == 200


def test_percentile_lookup_uses_table(client, admin_headers):
    _store_map(client, admin_headers)

    response = client.post(
        "/score/percentile",
        json={"test_id": "jee-mock-9", "score": 1.4, "max_possible_score": 300},
    )

    assert response.status_code == 200
    body = response.json()
    assert body["percentile"] == 20.0
    assert body["source"] == "table"
    assert body["index"] == 1
    assert body["rank_estimate"] == 960000


def test_percentile_lookup_clamps_high_scores(client, admin_headers):
    _store_map(client, admin_headers)

    response = client.post(
        "/score/percentile",
        json={"test_id": "jee-mock-9", "score": 5, "max_possible_score": 300},
    )

    assert response.json()["percentile"] == 30.0


def test_percentile_lookup_without_map_falls_back(client):
    response = client.post(
        "/score/percentile",
        json={"test_id": "never-imported", "score": 150, "max_possible_score": 300},
    )

    assert response.status_code == 200
    body = response.json()
    assert body["source"] == "fallback"
    assert body["index"] is None
    assert 0.0 <= body["percentile"] <= 99.99


def test_percentile_lookup_with_huge_score_is_capped(client):
    response = client.post(
        "/score/percentile",
        json={"test_id": "never-imported", "score": 1e30, "max_possible_score": 1},
    )

    assert response.status_code == 200
    assert response.json()["percentile"] == 99.99


def test_percentile_lookup_validates_payload(client):
    response = client.post(
        "/score/percentile",
        json={"test_id": "t", "score": 10, "max_possible_score": 0},
    )

    assert response.status_code == 422


def test_submission_scoring(client, admin_headers):
    client.put(
        "/admin/percentiles/jee-mock-10",
        json={"csv_text": "0,0\n360,100", "max_marks": 360},
        headers=admin_headers,
    )

    response = client.post(
        "/score/submissions/jee-mock-10",
        json={
            "subjects": [
                {"subject": "Mathematics", "total_questions": 30, "attempted": 20, "correct": 15},
                {"subject": "Physics", "total_questions": 30, "attempted": 25, "correct": 20},
                {"subject": "Chemistry", "total_questions": 30, "attempted": 10, "correct": 10},
            ]
        },
    )

    assert response.status_code == 200
    body = response.json()
    assert body["total_score"] == 170
    assert body["percentile"] == 47.22
    assert body["percentile_source"] == "table"
    assert body["subjects"]["Mathematics"]["score"] == 55


def test_submission_rejects_inconsistent_counts(client):
    response = client.post(
        "/score/submissions/jee",
        json={"subjects": [{"subject": "Physics", "total_questions": 5, "attempted": 6, "correct": 1}]},
    )

    assert response.status_code == 422


def test_health_and_request_id(client):
    response = client.get("/health", headers={"X-Request-ID": "req-123"})

    assert response.status_code == 200
    assert response.json()["status"] == "healthy"
    assert response.headers["X-Request-ID"] == "req-123"
