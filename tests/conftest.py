import os

# Doit précéder l'import de l'app: le lifespan et la config lisent l'environnement
os.environ.setdefault("DISABLE_FASTAPI_LIMITER_INIT_FOR_TESTS", "1")
os.environ.setdefault("ALLOWED_HOSTS", "localhost,127.0.0.1,testserver")
os.environ.setdefault("SESSION_SECRET_KEY", "test-session-secret")

import pytest
from typing import Generator, Dict, Any, List
from fastapi.testclient import TestClient
from unittest.mock import MagicMock

from funwalk import config
from funwalk.asgi import app as fastapi_app

# Marquage automatique selon le dossier
def pytest_collection_modifyitems(config, items):
    for item in items:
        nodeid = item.nodeid.replace("\\", "/")
        if "tests/unit/" in nodeid:
            item.add_marker(pytest.mark.unit)
        elif "tests/integration/" in nodeid:
            item.add_marker(pytest.mark.integration)
        elif "tests/functional/" in nodeid:
            item.add_marker(pytest.mark.functional)

@pytest.fixture(scope="session")
def app():
    return fastapi_app

@pytest.fixture()
def client(app) -> Generator[TestClient, None, None]:
    with TestClient(app) as c:
        yield c

@pytest.fixture
def contact_payload() -> Dict[str, Any]:
    return {
        "name": "Jane Walker",
        "email": "jane@walkers.org",
        "phone": "(408) 555-0199",
        "addressLine1": "12 Orchard Lane",
        "city": "Santa Clara",
        "postalCode": "95051",
        "adultCount": 2,
        "kidsCount": 1,
    }

@pytest.fixture
def registration_rows() -> List[Dict[str, Any]]:
    return [
        {"id": "r5", "name": "Eve Moss", "email": "eve@moss.org", "phone": "4085550105", "adult_count": 1, "kids_count": 3,
         "family_category": "One Family, Multiple Kids", "total_amount": 80, "payment_status": "pending",
         "transaction_id": None, "created_at": "2024-05-05T10:00:00+00:00", "t_shirt_sizes": ["L", "S", "S", "XS"]},
        {"id": "r4", "name": "Dan Birch", "email": "dan@birch.org", "phone": "4085550104", "adult_count": 2, "kids_count": 0,
         "family_category": "One Family, No Kids", "total_amount": 40, "payment_status": "paid",
         "transaction_id": "pi_4", "created_at": "2024-05-04T10:00:00+00:00", "t_shirt_sizes": ["M", "L"]},
        {"id": "r3", "name": "Cara Oak", "email": "cara@oak.org", "phone": "4085550103", "adult_count": 2, "kids_count": 2,
         "family_category": "One Family, Two Kids", "total_amount": 80, "payment_status": "paid",
         "transaction_id": "pi_3", "created_at": "2024-05-03T10:00:00+00:00", "t_shirt_sizes": ["M", "M", "S", "XS"]},
        {"id": "r2", "name": "Ben Ash", "email": "ben@ash.org", "phone": "4085550102", "adult_count": 1, "kids_count": 1,
         "family_category": "One Family, One Kid", "total_amount": 40, "payment_status": "pending",
         "transaction_id": None, "created_at": "2024-05-02T10:00:00+00:00", "t_shirt_sizes": None},
        {"id": "r1", "name": "Ann Elm", "email": "ann@elm.org", "phone": "4085550101", "adult_count": 2, "kids_count": 1,
         "family_category": "One Family, One Kid", "total_amount": 60, "payment_status": "paid",
         "transaction_id": "tx_abc123xyz", "created_at": "2024-05-01T10:00:00+00:00", "t_shirt_sizes": ["M", "M", "S"]},
    ]

# Aucun test ne doit joindre Supabase ni Stripe
@pytest.fixture(scope="function", autouse=True)
def mock_external_services(monkeypatch):
    monkeypatch.setattr("funwalk.infra.supabase_client.get_supabase", lambda: MagicMock())
    monkeypatch.setattr("funwalk.infra.supabase_client.get_service_supabase", lambda: MagicMock())
    monkeypatch.setattr("funwalk.infra.supabase_client.get_store_client", lambda: MagicMock())
    monkeypatch.setattr(config, "STRIPE_SECRET_KEY", "sk_test_dummy")
    monkeypatch.setattr(config, "STRIPE_WEBHOOK_SECRET", "whsec_dummy")
    monkeypatch.setattr(config, "ADMIN_SECRET_HASH", "")
