def record(client, headers, activity_type, **extra):
    response = client.post("/api/streak/activity", json={"activityType": activity_type, **extra}, headers=headers)
    assert response.status_code == 200
    return response.json()


def test_activities_for_date(client, clock, auth_headers):
    record(client, auth_headers, "message")
    clock.advance(hours=2)
    record(client, auth_headers, "drawing")
    clock.advance(days=1)
    record(client, auth_headers, "edit")

    response = client.get("/api/activity/date/2026-03-10", headers=auth_headers)

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert [a["activityType"] for a in body["data"]] == ["drawing", "message"]


def test_activities_for_empty_date(client, auth_headers):
    body = client.get("/api/activity/date/2025-01-01", headers=auth_headers).json()

    assert body == {"success": True, "data": []}


def test_invalid_date_is_rejected(client, auth_headers):
    response = client.get("/api/activity/date/yesterday", headers=auth_headers)

    assert response.status_code == 400
    assert response.json()["success"] is False


def test_all_activities_paginates_newest_first(client, clock, auth_headers):
    for activity_type in ["login", "message", "edit", "drawing"]:
        record(client, auth_headers, activity_type)
        clock.advance(minutes=10)

    body = client.get("/api/activity/all?limit=2&offset=1", headers=auth_headers).json()

    assert body["total"] == 4
    assert body["limit"] == 2
    assert body["offset"] == 1
    assert [a["activityType"] for a in body["data"]] == ["edit", "message"]


def test_all_activities_limit_is_bounded(client, auth_headers):
    assert client.get("/api/activity/all?limit=0", headers=auth_headers).status_code == 400
    assert client.get("/api/activity/all?limit=501", headers=auth_headers).status_code == 400


def test_activity_stats(client, clock, auth_headers):
    record(client, auth_headers, "message")
    record(client, auth_headers, "message")
    clock.advance(days=1)
    record(client, auth_headers, "drawing")
    record(client, auth_headers, "message")

    body = client.get("/api/activity/stats", headers=auth_headers).json()

    assert body["success"] is True
    stats = body["data"]
    assert stats["totalActivities"] == 4
    assert stats["activitiesByType"] == [
        {"activityType": "message", "count": 3},
        {"activityType": "drawing", "count": 1},
    ]
    assert stats["activitiesByDate"] == [
        {"day": "2026-03-11", "count": 2},
        {"day": "2026-03-10", "count": 2},
    ]


def test_stats_by_date_only_cover_last_30_days(client, clock, auth_headers):
    record(client, auth_headers, "message")
    clock.advance(days=45)
    record(client, auth_headers, "message")

    stats = client.get("/api/activity/stats", headers=auth_headers).json()["data"]

    assert stats["totalActivities"] == 2
    assert stats["activitiesByDate"] == [{"day": "2026-04-24", "count": 1}]


def test_history_is_per_user(client, auth_headers, other_user):
    record(client, auth_headers, "message")

    body = client.get("/api/activity/all", headers={"X-User-ID": other_user.id}).json()

    assert body["total"] == 0
    assert body["data"] == []
