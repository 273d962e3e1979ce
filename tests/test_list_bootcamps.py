"""
GET /api/v1/bootcamps query shaping: select, sort, pagination and filters.
"""

from datetime import datetime, timezone

import pytest
from fastapi.testclient import TestClient


@pytest.fixture
def five_bootcamps(make_bootcamp):
    return [
        make_bootcamp(user_id=1, name="Alpha Camp", average_cost=8000, housing=True, state="MA"),
        make_bootcamp(user_id=2, name="Bravo Camp", average_cost=12000, housing=False, state="CA"),
        make_bootcamp(user_id=3, name="Charlie Camp", average_cost=10000, housing=True, state="NY"),
        make_bootcamp(user_id=4, name="Delta Camp", average_cost=15000, housing=False, state="MA"),
        make_bootcamp(user_id=5, name="Echo Camp", average_cost=9000, housing=True, state="CA"),
    ]


def test_list_returns_all_bootcamps(client: TestClient, five_bootcamps):
    response = client.get("/api/v1/bootcamps")

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["count"] == 5
    assert body["pagination"] == {}
    assert len(body["data"]) == 5


def test_list_on_empty_collection(client: TestClient):
    response = client.get("/api/v1/bootcamps")

    assert response.json() == {"success": True, "count": 0, "pagination": {}, "data": []}


def test_select_limits_fields(client: TestClient, five_bootcamps):
    response = client.get("/api/v1/bootcamps", params={"select": "name,state"})

    for item in response.json()["data"]:
        assert set(item) == {"id", "name", "state"}


def test_sort_ascending_and_descending(client: TestClient, five_bootcamps):
    ascending = client.get("/api/v1/bootcamps", params={"sort": "average_cost"}).json()["data"]
    descending = client.get("/api/v1/bootcamps", params={"sort": "-average_cost"}).json()["data"]

    assert [b["name"] for b in ascending] == ["Alpha Camp", "Echo Camp", "Charlie Camp", "Bravo Camp", "Delta Camp"]
    assert [b["name"] for b in descending] == list(reversed([b["name"] for b in ascending]))


def test_pagination_links(client: TestClient, five_bootcamps):
    first = client.get("/api/v1/bootcamps", params={"limit": 2, "page": 1, "sort": "name"}).json()
    middle = client.get("/api/v1/bootcamps", params={"limit": 2, "page": 2, "sort": "name"}).json()
    last = client.get("/api/v1/bootcamps", params={"limit": 2, "page": 3, "sort": "name"}).json()

    assert [b["name"] for b in first["data"]] == ["Alpha Camp", "Bravo Camp"]
    assert first["pagination"] == {"next": {"page": 2, "limit": 2}}
    assert middle["pagination"] == {"next": {"page": 3, "limit": 2}, "prev": {"page": 1, "limit": 2}}
    assert [b["name"] for b in last["data"]] == ["Echo Camp"]
    assert last["pagination"] == {"prev": {"page": 2, "limit": 2}}


def test_invalid_page_returns_400(client: TestClient):
    response = client.get("/api/v1/bootcamps", params={"page": "zero"})

    assert response.status_code == 400
    assert response.json()["success"] is False


def test_equality_and_boolean_filters(client: TestClient, five_bootcamps):
    response = client.get("/api/v1/bootcamps", params={"housing": "true", "state": "CA"})

    assert [b["name"] for b in response.json()["data"]] == ["Echo Camp"]


def test_comparison_filters(client: TestClient, five_bootcamps):
    response = client.get(
        "/api/v1/bootcamps", params={"average_cost[gte]": "9000", "average_cost[lt]": "12000", "sort": "name"}
    )

    assert [b["name"] for b in response.json()["data"]] == ["Charlie Camp", "Echo Camp"]


def test_in_filter(client: TestClient, five_bootcamps):
    response = client.get("/api/v1/bootcamps", params={"state[in]": "NY,CA", "sort": "name"})

    assert [b["name"] for b in response.json()["data"]] == ["Bravo Camp", "Charlie Camp", "Echo Camp"]


def test_unknown_filters_are_ignored(client: TestClient, five_bootcamps):
    response = client.get("/api/v1/bootcamps", params={"color": "blue", "average_cost[near]": "1"})

    assert response.json()["count"] == 5


def test_string_equality_filter(client: TestClient, five_bootcamps):
    response = client.get("/api/v1/bootcamps", params={"name": "Bravo Camp"})

    assert response.status_code == 200
    assert [b["name"] for b in response.json()["data"]] == ["Bravo Camp"]


def test_string_in_filter_on_name(client: TestClient, five_bootcamps):
    response = client.get("/api/v1/bootcamps", params={"name[in]": "Alpha Camp,Delta Camp", "sort": "name"})

    assert [b["name"] for b in response.json()["data"]] == ["Alpha Camp", "Delta Camp"]


def test_integer_filters(client: TestClient, five_bootcamps):
    exact = client.get("/api/v1/bootcamps", params={"user_id": "3"}).json()["data"]
    above = client.get("/api/v1/bootcamps", params={"user_id[gt]": "3", "sort": "name"}).json()["data"]

    assert [b["name"] for b in exact] == ["Charlie Camp"]
    assert [b["name"] for b in above] == ["Delta Camp", "Echo Camp"]


def test_invalid_integer_filter_returns_400(client: TestClient, five_bootcamps):
    response = client.get("/api/v1/bootcamps", params={"user_id": "three"})

    assert response.status_code == 400
    assert response.json() == {"success": False, "error": "Invalid value 'three' for user_id"}


def test_sort_by_string_field(client: TestClient, five_bootcamps):
    response = client.get("/api/v1/bootcamps", params={"sort": "-name"})

    assert response.status_code == 200
    assert [b["name"] for b in response.json()["data"]][0] == "Echo Camp"


@pytest.fixture
def dated_bootcamps(make_bootcamp):
    return [
        make_bootcamp(user_id=1, name="Old Camp", created_at=datetime(2025, 6, 1, tzinfo=timezone.utc)),
        make_bootcamp(user_id=2, name="New Camp", created_at=datetime(2026, 3, 1, tzinfo=timezone.utc)),
        make_bootcamp(user_id=3, name="Newest Camp", created_at=datetime(2026, 9, 1, tzinfo=timezone.utc)),
    ]


def test_datetime_comparison_filter(client: TestClient, dated_bootcamps):
    response = client.get("/api/v1/bootcamps", params={"created_at[gte]": "2026-01-01T00:00:00", "sort": "name"})

    assert response.status_code == 200
    assert [b["name"] for b in response.json()["data"]] == ["New Camp", "Newest Camp"]


def test_datetime_filter_with_offset(client: TestClient, dated_bootcamps):
    response = client.get("/api/v1/bootcamps", params={"created_at[lt]": "2026-03-01T02:00:00+02:00"})

    assert [b["name"] for b in response.json()["data"]] == ["Old Camp"]


def test_default_sort_is_newest_first(client: TestClient, dated_bootcamps):
    response = client.get("/api/v1/bootcamps")

    assert [b["name"] for b in response.json()["data"]] == ["Newest Camp", "New Camp", "Old Camp"]


def test_invalid_datetime_filter_returns_400(client: TestClient, dated_bootcamps):
    response = client.get("/api/v1/bootcamps", params={"created_at[gte]": "last week"})

    assert response.status_code == 400


@pytest.fixture
def career_bootcamps(make_bootcamp):
    return [
        make_bootcamp(user_id=1, name="Web Camp", careers=["Web Development"]),
        make_bootcamp(user_id=2, name="Biz Camp", careers=["Business", "UI/UX"]),
        make_bootcamp(user_id=3, name="Mixed Camp", careers=["Web Development", "Other"]),
        make_bootcamp(user_id=4, name="Empty Camp", careers=None),
    ]


def test_list_field_filter_matches_rows_holding_value(client: TestClient, career_bootcamps):
    response = client.get("/api/v1/bootcamps", params={"careers": "Web Development", "sort": "name"})

    assert response.status_code == 200
    assert [b["name"] for b in response.json()["data"]] == ["Mixed Camp", "Web Camp"]


def test_list_field_filter_matches_whole_values_only(client: TestClient, career_bootcamps):
    response = client.get("/api/v1/bootcamps", params={"careers": "Web"})

    assert response.json()["count"] == 0


def test_list_field_in_filter(client: TestClient, career_bootcamps):
    response = client.get("/api/v1/bootcamps", params={"careers[in]": "Business,Other", "sort": "name"})

    assert [b["name"] for b in response.json()["data"]] == ["Biz Camp", "Mixed Camp"]


def test_list_field_comparison_and_sort_are_ignored(client: TestClient, career_bootcamps):
    response = client.get("/api/v1/bootcamps", params={"careers[gt]": "A", "sort": "careers"})

    assert response.status_code == 200
    assert response.json()["count"] == 4
