"""
Accès aux données pour la table 'registrations' (Supabase).
Toute erreur distante est journalisée puis remontée en RecordStoreError.
"""
import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

import funwalk.infra.supabase_client as supabase_client
from funwalk import config
from funwalk.errors import RecordStoreError

logger = logging.getLogger(__name__)

# module funwalk.registrations.repository
def _table():
    return supabase_client.get_store_client().table(config.REGISTRATIONS_TABLE)

def _first_row(res) -> Optional[Dict[str, Any]]:
    rows = getattr(res, "data", None) or []
    if isinstance(rows, list):
        return rows[0] if rows else None
    return rows or None

def now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()

def insert_registration(row: Dict[str, Any]) -> Dict[str, Any]:
    """
    Insère une inscription et retourne la ligne créée (avec 'id' généré par la base).
    - RecordStoreError si l'insert échoue ou ne renvoie aucune ligne
    """
    try:
        res = _table().insert(row).execute()
    except Exception as e:
        logger.exception("registrations.repository.insert_registration failed email=%s", row.get("email"))
        raise RecordStoreError(str(e) or "Failed to save registration", operation="insert") from e
    created = _first_row(res)
    if not created or not created.get("id"):
        logger.error("registrations.repository.insert_registration returned no row email=%s", row.get("email"))
        raise RecordStoreError("Failed to save registration", operation="insert")
    return created

def update_registration(registration_id: str, data: Dict[str, Any]) -> Dict[str, Any]:
    """
    Met à jour une inscription par id et retourne la ligne mise à jour.
    - RecordStoreError si l'update échoue ou ne touche aucune ligne (id inconnu, RLS)
    """
    try:
        res = _table().update(data).eq("id", str(registration_id)).execute()
    except Exception as e:
        logger.exception("registrations.repository.update_registration failed id=%s", registration_id)
        raise RecordStoreError(str(e) or "Failed to update registration", operation="update") from e
    updated = _first_row(res)
    if not updated:
        logger.error("registrations.repository.update_registration matched no row id=%s", registration_id)
        raise RecordStoreError("Failed to update registration", operation="update")
    return updated

def mark_registration_paid(registration_id: str, transaction_id: str) -> Dict[str, Any]:
    return update_registration(
        registration_id,
        {"payment_status": "paid", "transaction_id": transaction_id, "updated_at": now_iso()},
    )

def list_registrations() -> List[Dict[str, Any]]:
    """Toutes les inscriptions, plus récentes d'abord (created_at desc)."""
    try:
        res = _table().select("*").order("created_at", desc=True).execute()
    except Exception as e:
        logger.exception("registrations.repository.list_registrations failed")
        raise RecordStoreError(str(e) or "Failed to load registrations", operation="select") from e
    return list(res.data or [])

def get_registration(registration_id: str) -> Optional[Dict[str, Any]]:
    try:
        res = _table().select("*").eq("id", str(registration_id)).limit(1).execute()
    except Exception as e:
        logger.exception("registrations.repository.get_registration failed id=%s", registration_id)
        raise RecordStoreError(str(e) or "Failed to load registration", operation="select") from e
    return _first_row(res)
