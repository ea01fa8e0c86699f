from types import SimpleNamespace
from unittest.mock import MagicMock

import bcrypt
import pytest

from funwalk import config
from funwalk.errors import RecordStoreError

@pytest.fixture
def rows(monkeypatch, registration_rows):
    monkeypatch.setattr("funwalk.registrations.repository.list_registrations", lambda: list(registration_rows))
    by_id = {r["id"]: r for r in registration_rows}
    monkeypatch.setattr("funwalk.registrations.repository.get_registration", lambda rid: by_id.get(rid))

    def _update(rid, data):
        by_id[rid] = {**by_id[rid], **data}
        return by_id[rid]
    monkeypatch.setattr("funwalk.registrations.repository.update_registration", _update)
    return by_id

@pytest.fixture
def admin_secret(monkeypatch):
    monkeypatch.setattr(config, "ADMIN_SECRET_HASH", bcrypt.hashpw(b"s3cret", bcrypt.gensalt(rounds=4)).decode())
    return "s3cret"

def test_list_newest_first(client, rows):
    data = client.get("/admin/api/registrations").json()
    assert data["count"] == 5
    assert [r["id"] for r in data["items"]] == ["r5", "r4", "r3", "r2", "r1"]

def test_filter_and_search(client, rows):
    data = client.get("/admin/api/registrations", params={"status": "paid", "search": "oak"}).json()
    assert [r["id"] for r in data["items"]] == ["r3"]
    assert client.get("/admin/api/registrations", params={"status": "bogus"}).status_code == 400

def test_detail(client, rows):
    assert client.get("/admin/api/registrations/r2").json()["item"]["name"] == "Ben Ash"
    assert client.get("/admin/api/registrations/zz").status_code == 404

def test_stats(client, rows):
    stats = client.get("/admin/api/stats").json()
    assert stats["total_paid"] == 3
    assert stats["total_revenue"] == 180.0

def test_toggle_status(client, rows):
    r = client.post("/admin/api/registrations/r2/status")
    assert r.status_code == 200
    item = r.json()["item"]
    assert item["payment_status"] == "paid"
    assert item["transaction_id"].startswith("tx_")

    r = client.post("/admin/api/registrations/r2/status", json={"status": "pending"})
    assert r.json()["item"]["transaction_id"] is None
    assert client.post("/admin/api/registrations/zz/status").status_code == 404

def test_toggle_status_when_update_returns_no_row(client, registration_rows, monkeypatch):
    client_mock = MagicMock()
    table = client_mock.table.return_value
    table.select.return_value.eq.return_value.limit.return_value.execute.return_value = SimpleNamespace(data=[registration_rows[3]])
    table.update.return_value.eq.return_value.execute.return_value = SimpleNamespace(data=[])
    monkeypatch.setattr("funwalk.infra.supabase_client.get_store_client", lambda: client_mock)
    r = client.post("/admin/api/registrations/r2/status")
    assert r.status_code == 502
    assert r.json()["code"] == "record_store_error"

def test_export_csv(client, rows):
    r = client.get("/admin/api/registrations/export.csv")
    assert r.status_code == 200
    assert r.headers["content-type"].startswith("text/csv")
    assert "attachment; filename=\"registrations-" in r.headers["content-disposition"]
    assert r.text.splitlines()[0].startswith("Name,Email,Phone,Adults,Kids")
    quoted = client.get("/admin/api/registrations/export.csv", params={"format": "quoted"})
    assert "\"One Family, One Kid\"" in quoted.text

def test_store_failure(client, monkeypatch):
    def _boom():
        raise RecordStoreError("connection reset", operation="select")
    monkeypatch.setattr("funwalk.registrations.repository.list_registrations", _boom)
    r = client.get("/admin/api/registrations")
    assert r.status_code == 502
    assert r.json()["message"] == "Please try again or contact support"

def test_no_cache_headers(client, rows):
    r = client.get("/admin/api/stats")
    assert "no-store" in r.headers["cache-control"]

def test_gate_blocks_without_login(client, rows, admin_secret):
    assert client.get("/admin/api/registrations").status_code == 401
    r = client.get("/admin/api/registrations", headers={"accept": "text/html"}, follow_redirects=False)
    assert r.status_code == 303
    assert r.headers["location"] == "/"

def test_login_and_logout(client, rows, admin_secret):
    assert client.post("/admin/login", json={"secret": "wrong"}).status_code == 401
    assert client.post("/admin/login", json={"secret": admin_secret}).json() == {"ok": True}
    assert client.get("/admin/api/registrations").status_code == 200

    r = client.get("/admin/logout", follow_redirects=False)
    assert r.status_code == 303
    assert r.headers["location"] == "/"
    assert client.get("/admin/api/registrations").status_code == 401

def test_login_with_form(client, rows, admin_secret):
    assert client.post("/admin/login", data={"secret": admin_secret}).status_code == 200
    assert client.get("/admin/api/stats").status_code == 200
