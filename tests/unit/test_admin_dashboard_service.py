import re
from datetime import date

import pytest

from funwalk.admin import service as admin_service
from funwalk.errors import ValidationError

def test_filter_paid_returns_only_paid(registration_rows):
    paid = admin_service.filter_registrations(registration_rows, status="paid")
    assert [r["id"] for r in paid] == ["r4", "r3", "r1"]

def test_filter_paid_whatever_the_search_term(registration_rows):
    for term in ("", "org", "one family"):
        result = admin_service.filter_registrations(registration_rows, search=term, status="paid")
        assert {r["id"] for r in result} == {"r4", "r3", "r1"}

def test_search_is_case_insensitive_over_name_email_category(registration_rows):
    assert [r["id"] for r in admin_service.filter_registrations(registration_rows, search="CARA")] == ["r3"]
    assert [r["id"] for r in admin_service.filter_registrations(registration_rows, search="ash.org")] == ["r2"]
    assert [r["id"] for r in admin_service.filter_registrations(registration_rows, search="multiple")] == ["r5"]
    assert admin_service.filter_registrations(registration_rows, search="4085550101") == []

def test_filter_keeps_order_and_pending(registration_rows):
    pending = admin_service.filter_registrations(registration_rows, status="PENDING")
    assert [r["id"] for r in pending] == ["r5", "r2"]

def test_unknown_status_filter(registration_rows):
    with pytest.raises(ValidationError):
        admin_service.filter_registrations(registration_rows, status="refunded")

def test_stats(registration_rows):
    assert admin_service.compute_stats(registration_rows) == {
        "total_registrations": 5,
        "total_participants": 15,
        "total_paid": 3,
        "total_pending": 2,
        "total_revenue": 180.0,
    }

def test_generated_transaction_id_shape():
    tx = admin_service.generate_transaction_id()
    assert re.fullmatch(r"tx_[0-9a-z]{9}", tx)

class _Repo:
    def __init__(self, row):
        self.row = row
        self.updates = []

    def get_registration(self, registration_id):
        return self.row if self.row and self.row["id"] == registration_id else None

    def update_registration(self, registration_id, data):
        self.updates.append(data)
        self.row = {**self.row, **data}
        return self.row

    def now_iso(self):
        return "2024-05-06T12:00:00+00:00"

@pytest.fixture
def fake_repo(monkeypatch):
    def _install(row):
        repo = _Repo(row)
        monkeypatch.setattr("funwalk.admin.service.registrations_repository", repo)
        return repo
    return _install

def test_toggle_pending_to_paid_generates_transaction(fake_repo):
    repo = fake_repo({"id": "r2", "payment_status": "pending", "transaction_id": None})
    updated = admin_service.set_payment_status("r2")
    assert updated["payment_status"] == "paid"
    assert re.fullmatch(r"tx_[0-9a-z]{9}", updated["transaction_id"])
    assert repo.updates[0]["updated_at"] == "2024-05-06T12:00:00+00:00"

def test_toggle_keeps_existing_transaction(fake_repo):
    fake_repo({"id": "r2", "payment_status": "pending", "transaction_id": "pi_old"})
    assert admin_service.set_payment_status("r2", "paid")["transaction_id"] == "pi_old"

def test_toggle_paid_to_pending_clears_transaction(fake_repo):
    fake_repo({"id": "r1", "payment_status": "paid", "transaction_id": "tx_abc123xyz"})
    updated = admin_service.set_payment_status("r1")
    assert updated["payment_status"] == "pending"
    assert updated["transaction_id"] is None

def test_set_status_invalid_and_missing(fake_repo):
    fake_repo({"id": "r1", "payment_status": "paid", "transaction_id": "tx_1"})
    with pytest.raises(ValidationError):
        admin_service.set_payment_status("r1", "refunded")
    assert admin_service.set_payment_status("unknown") is None

def test_legacy_csv(registration_rows):
    lines = admin_service.export_csv(registration_rows).split("\n")
    assert lines[0] == "Name,Email,Phone,Adults,Kids,Family Type,Amount,Status,Transaction ID,Date,T-Shirt Sizes"
    assert lines[4] == "Ben Ash,ben@ash.org,4085550102,1,1,One Family, One Kid,40,pending,N/A,5/2/2024,N/A"
    assert lines[5] == "Ann Elm,ann@elm.org,4085550101,2,1,One Family, One Kid,60,paid,tx_abc123xyz,5/1/2024,M, M, S"
    assert len(lines) == 6

def test_quoted_csv_escapes_and_neutralizes():
    rows = [{
        "name": "=HYPERLINK(\"http://x\")", "email": "a@b.org", "phone": "4085550101", "adult_count": 1, "kids_count": 1,
        "family_category": "One Family, One Kid", "total_amount": 40, "payment_status": "paid",
        "transaction_id": None, "created_at": "2024-12-31T23:00:00Z", "t_shirt_sizes": ["M", "S"],
    }]
    lines = admin_service.export_csv(rows, fmt="quoted").splitlines()
    assert lines[1] == "\"'=HYPERLINK(\"\"http://x\"\")\",a@b.org,4085550101,1,1,\"One Family, One Kid\",40,paid,N/A,12/31/2024,\"M, S\""

def test_unknown_csv_format():
    with pytest.raises(ValidationError):
        admin_service.export_csv([], fmt="xlsx")

def test_csv_filename():
    assert admin_service.csv_filename(date(2024, 5, 6)) == "registrations-2024-05-06.csv"
