from types import SimpleNamespace
from unittest.mock import MagicMock

import stripe
import pytest

from funwalk.payments import stripe_client

def _event(event_type, registration_id="r1"):
    return {"type": event_type, "data": {"object": {"id": "pi_999", "metadata": {"registrationId": registration_id}}}}

@pytest.fixture
def rows(monkeypatch):
    data = {"r1": {"id": "r1", "payment_status": "pending", "transaction_id": None}}
    monkeypatch.setattr("funwalk.registrations.repository.get_registration", lambda rid: data.get(rid))

    def _mark_paid(rid, tx):
        data[rid].update(payment_status="paid", transaction_id=tx)
        return data[rid]
    monkeypatch.setattr("funwalk.registrations.repository.mark_registration_paid", _mark_paid)
    return data

def test_webhook_invalid_signature(client, monkeypatch):
    def _bad(payload, sig, secret):
        raise stripe.SignatureVerificationError("bad signature", sig)
    monkeypatch.setattr(stripe.Webhook, "construct_event", _bad)
    r = client.post("/api/v1/payments/webhook", content=b"{}", headers={"Stripe-Signature": "t=1,v1=bad"})
    assert r.status_code == 400

def test_webhook_uses_signature_and_secret(client, monkeypatch, rows):
    seen = {}
    def _construct(payload, sig, secret):
        seen.update(payload=payload, sig=sig, secret=secret)
        return _event("payment_intent.succeeded")
    monkeypatch.setattr(stripe.Webhook, "construct_event", _construct)
    r = client.post("/api/v1/payments/webhook", content=b"{\"id\": \"evt_1\"}", headers={"Stripe-Signature": "t=1,v1=abc"})
    assert r.status_code == 200
    assert seen == {"payload": b"{\"id\": \"evt_1\"}", "sig": "t=1,v1=abc", "secret": "whsec_dummy"}

def test_webhook_marks_pending_row_paid_once(client, monkeypatch, rows):
    async def _fake_parse_event(request):
        return _event("payment_intent.succeeded")
    monkeypatch.setattr(stripe_client, "parse_event", _fake_parse_event)

    r = client.post("/api/v1/payments/webhook", content=b"{}")
    assert r.json() == {"status": "ok", "updated": True}
    assert rows["r1"]["payment_status"] == "paid"
    assert rows["r1"]["transaction_id"] == "pi_999"

    r = client.post("/api/v1/payments/webhook", content=b"{}")
    assert r.json() == {"status": "ok", "updated": False}

def test_webhook_ignores_other_events(client, monkeypatch, rows):
    async def _fake_parse_event(request):
        return {"type": "customer.created", "data": {"object": {}}}
    monkeypatch.setattr(stripe_client, "parse_event", _fake_parse_event)
    assert client.post("/api/v1/payments/webhook", content=b"{}").json() == {"status": "ignored"}

def test_webhook_goes_through_payments_service(client, monkeypatch):
    seen = []

    async def _fake_parse_event(request):
        return _event("payment_intent.succeeded", registration_id="r7")
    monkeypatch.setattr(stripe_client, "parse_event", _fake_parse_event)
    monkeypatch.setattr("funwalk.payments.service.handle_webhook_event", lambda event: seen.append(event) or {"status": "ok", "updated": True})
    assert client.post("/api/v1/payments/webhook", content=b"{}").json() == {"status": "ok", "updated": True}
    assert seen[0]["data"]["object"]["metadata"]["registrationId"] == "r7"

def test_webhook_update_matching_no_row_is_retryable(client, monkeypatch):
    async def _fake_parse_event(request):
        return _event("payment_intent.succeeded")
    monkeypatch.setattr(stripe_client, "parse_event", _fake_parse_event)
    store = MagicMock()
    table = store.table.return_value
    table.select.return_value.eq.return_value.limit.return_value.execute.return_value = SimpleNamespace(
        data=[{"id": "r1", "payment_status": "pending", "transaction_id": None}]
    )
    table.update.return_value.eq.return_value.execute.return_value = SimpleNamespace(data=[])
    monkeypatch.setattr("funwalk.infra.supabase_client.get_store_client", lambda: store)
    r = client.post("/api/v1/payments/webhook", content=b"{}")
    assert r.status_code == 502
