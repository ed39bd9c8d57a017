"""
Tests for transaction endpoints: CRUD, ownership, filters and pagination.
"""
from decimal import Decimal

import pytest

from fintrack.tests.conftest import create_transaction


def _list(client, headers, **params):
    response = client.get("/api/transactions", params=params, headers=headers)
    assert response.status_code == 200, response.text
    return response.json()


def _ids(body):
    return [t["id"] for t in body["data"]]


class TestCrud:

    def test_create(self, client, alice):
        data = create_transaction(
            client, alice["headers"],
            kind="income", category="Salary", amount="100.00",
            description="January salary", date="2024-01-15T09:00:00"
        )
        assert data["user_id"] == alice["id"]
        assert data["kind"] == "income"
        assert data["category"] == "Salary"
        assert Decimal(data["amount"]) == Decimal("100.00")
        assert data["date"].startswith("2024-01-15")

    @pytest.mark.parametrize("field,value", [
        ("amount", "0"),
        ("amount", "-5"),
        ("kind", "transfer"),
        ("category", "   "),
        ("description", ""),
        ("date", "yesterday"),
    ])
    def test_create_validation(self, client, alice, field, value):
        payload = {
            "kind": "expense",
            "category": "Food",
            "amount": "10.00",
            "description": "Lunch",
            "date": "2024-01-10T12:00:00",
        }
        payload[field] = value
        response = client.post("/api/transactions", json=payload, headers=alice["headers"])
        assert response.status_code == 400
        body = response.json()
        assert body["success"] is False
        assert field in {error["field"] for error in body["errors"]}

    def test_requires_authentication(self, client):
        assert client.get("/api/transactions").status_code == 401
        assert client.post("/api/transactions", json={}).status_code == 401

    def test_get(self, client, alice):
        created = create_transaction(client, alice["headers"])
        response = client.get(f"/api/transactions/{created['id']}", headers=alice["headers"])
        assert response.status_code == 200
        assert response.json()["data"] == created

    def test_update_merges_fields(self, client, alice):
        created = create_transaction(client, alice["headers"], category="Food", amount="10.00")
        response = client.put(
            f"/api/transactions/{created['id']}",
            json={"amount": "12.50"},
            headers=alice["headers"]
        )
        assert response.status_code == 200
        data = response.json()["data"]
        assert Decimal(data["amount"]) == Decimal("12.50")
        assert data["category"] == "Food"
        assert data["description"] == created["description"]

    def test_update_validation(self, client, alice):
        created = create_transaction(client, alice["headers"])
        response = client.put(
            f"/api/transactions/{created['id']}",
            json={"amount": "0.001"},
            headers=alice["headers"]
        )
        assert response.status_code == 400

    def test_delete(self, client, alice):
        created = create_transaction(client, alice["headers"])
        response = client.delete(f"/api/transactions/{created['id']}", headers=alice["headers"])
        assert response.status_code == 200
        assert response.json()["success"] is True

        response = client.get(f"/api/transactions/{created['id']}", headers=alice["headers"])
        assert response.status_code == 404

    def test_missing_record(self, client, alice):
        assert client.get("/api/transactions/9999", headers=alice["headers"]).status_code == 404


class TestOwnership:

    def test_other_user_cannot_touch_record(self, client, alice, bob):
        created = create_transaction(client, alice["headers"], amount="50.00")
        url = f"/api/transactions/{created['id']}"

        foreign_get = client.get(url, headers=bob["headers"])
        foreign_put = client.put(url, json={"amount": "1.00"}, headers=bob["headers"])
        foreign_delete = client.delete(url, headers=bob["headers"])
        missing = client.get("/api/transactions/9999", headers=bob["headers"])

        for response in (foreign_get, foreign_put, foreign_delete):
            assert response.status_code == 404
            # Same answer as a record that does not exist at all
            assert response.json() == missing.json()

        still_there = client.get(url, headers=alice["headers"])
        assert still_there.status_code == 200
        assert Decimal(still_there.json()["data"]["amount"]) == Decimal("50.00")

    def test_listing_only_shows_own_records(self, client, alice, bob):
        mine = create_transaction(client, alice["headers"])
        create_transaction(client, bob["headers"])

        body = _list(client, alice["headers"])
        assert _ids(body) == [mine["id"]]
        assert body["total"] == 1


class TestFilters:

    @pytest.fixture
    def records(self, client, alice):
        headers = alice["headers"]
        return {
            "salary": create_transaction(
                client, headers, kind="income", category="Salary", amount="100.00",
                description="January pay", date="2024-01-15T09:00:00"
            ),
            "food": create_transaction(
                client, headers, kind="expense", category="Food", amount="30.00",
                description="Groceries", date="2024-01-20T18:00:00"
            ),
            "early": create_transaction(
                client, headers, kind="expense", category="Fast food", amount="5.00",
                description="Snack 100%", date="2024-01-10T08:00:00"
            ),
            "late_day": create_transaction(
                client, headers, kind="expense", category="Transport", amount="7.00",
                description="Taxi home", date="2024-01-31T23:30:00"
            ),
        }

    def test_no_filters_returns_all_owned(self, client, alice, records):
        body = _list(client, alice["headers"])
        assert body["total"] == 4
        assert set(_ids(body)) == {t["id"] for t in records.values()}

    def test_kind(self, client, alice, records):
        body = _list(client, alice["headers"], kind="income")
        assert _ids(body) == [records["salary"]["id"]]

    def test_category_is_case_insensitive_substring(self, client, alice, records):
        body = _list(client, alice["headers"], category="FOOD")
        assert set(_ids(body)) == {records["food"]["id"], records["early"]["id"]}

    def test_date_range_is_inclusive(self, client, alice, records):
        body = _list(client, alice["headers"], start_date="2024-01-15", end_date="2024-01-20")
        assert set(_ids(body)) == {records["salary"]["id"], records["food"]["id"]}

    def test_end_date_covers_whole_day(self, client, alice, records):
        body = _list(client, alice["headers"], start_date="2024-01-31", end_date="2024-01-31")
        assert _ids(body) == [records["late_day"]["id"]]

    def test_single_bound(self, client, alice, records):
        after = _list(client, alice["headers"], start_date="2024-01-20")
        assert set(_ids(after)) == {records["food"]["id"], records["late_day"]["id"]}
        before = _list(client, alice["headers"], end_date="2024-01-15")
        assert set(_ids(before)) == {records["salary"]["id"], records["early"]["id"]}

    def test_search_matches_description_or_category(self, client, alice, records):
        body = _list(client, alice["headers"], search="sal")
        assert _ids(body) == [records["salary"]["id"]]

        body = _list(client, alice["headers"], search="groc")
        assert _ids(body) == [records["food"]["id"]]

    def test_search_treats_wildcards_literally(self, client, alice, records):
        assert _ids(_list(client, alice["headers"], search="%")) == [records["early"]["id"]]
        assert _list(client, alice["headers"], search="_")["total"] == 0

    def test_filters_combine(self, client, alice, records):
        body = _list(
            client, alice["headers"],
            kind="expense", category="food", start_date="2024-01-15", search="groc"
        )
        assert _ids(body) == [records["food"]["id"]]

    def test_default_sort_is_newest_first(self, client, alice, records):
        body = _list(client, alice["headers"])
        dates = [t["date"] for t in body["data"]]
        assert dates == sorted(dates, reverse=True)

    def test_sort_by_amount(self, client, alice, records):
        ascending = [Decimal(t["amount"]) for t in _list(client, alice["headers"], sort="amount")["data"]]
        assert ascending == sorted(ascending)
        descending = [Decimal(t["amount"]) for t in _list(client, alice["headers"], sort="-amount")["data"]]
        assert descending == sorted(descending, reverse=True)

    def test_offsets_are_stored_as_utc(self, client, alice):
        headers = alice["headers"]
        east = create_transaction(client, headers, date="2024-01-01T10:00:00+05:00")
        utc = create_transaction(client, headers, date="2024-01-01T06:00:00Z")
        assert east["date"] == "2024-01-01T05:00:00"
        assert utc["date"] == "2024-01-01T06:00:00"

        assert _ids(_list(client, headers, sort="date")) == [east["id"], utc["id"]]

        moved = client.put(
            f"/api/transactions/{utc['id']}",
            json={"date": "2024-01-01T00:30:00-02:00"},
            headers=headers
        )
        assert moved.json()["data"]["date"] == "2024-01-01T02:30:00"

        # 23:30 at -02:00 is the next UTC day
        late = create_transaction(client, headers, date="2023-12-31T23:30:00-02:00")
        body = _list(client, headers, start_date="2024-01-01", end_date="2024-01-01")
        assert late["id"] in _ids(body)

    @pytest.mark.parametrize("params", [
        {"page": 0},
        {"limit": 0},
        {"limit": 101},
        {"kind": "transfer"},
        {"sort": "category"},
        {"start_date": "not-a-date"},
    ])
    def test_invalid_parameters(self, client, alice, params):
        response = client.get("/api/transactions", params=params, headers=alice["headers"])
        assert response.status_code == 400
        assert response.json()["errors"]


class TestPagination:

    def test_pages_cover_every_record_once(self, client, alice):
        for day in range(1, 8):
            create_transaction(
                client, alice["headers"],
                amount=f"{day}.00", date=f"2024-03-{day:02d}T10:00:00"
            )
        # Same date for two records exercises the tie-break
        create_transaction(client, alice["headers"], amount="9.00", date="2024-03-04T10:00:00")

        full = _list(client, alice["headers"], limit=100)
        assert full["total"] == 8

        collected = []
        first = _list(client, alice["headers"], limit=3, page=1)
        assert first["pages"] == 3
        for page in range(1, first["pages"] + 1):
            body = _list(client, alice["headers"], limit=3, page=page)
            assert body["page"] == page
            assert body["total"] == 8
            assert body["count"] == len(body["data"])
            collected.extend(_ids(body))

        assert collected == _ids(full)
        assert len(set(collected)) == 8

    def test_page_past_end_is_empty(self, client, alice):
        create_transaction(client, alice["headers"])
        body = _list(client, alice["headers"], page=5)
        assert body["data"] == []
        assert body["count"] == 0
        assert body["total"] == 1
        assert body["pages"] == 1

    def test_empty_set(self, client, alice):
        body = _list(client, alice["headers"])
        assert body == {
            "success": True,
            "message": None,
            "data": [],
            "count": 0,
            "total": 0,
            "page": 1,
            "pages": 0,
        }
