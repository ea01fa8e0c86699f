# module funwalk.admin.service

import csv
import io
import logging
import secrets
import string
from datetime import date, datetime, timezone
from typing import Any, Dict, Iterable, List, Optional

from funwalk.errors import ValidationError
from funwalk.registrations import repository as registrations_repository
from funwalk.registrations.models import PaymentStatus

logger = logging.getLogger(__name__)

STATUS_FILTERS = ("all", "paid", "pending")
TRANSACTION_PREFIX = "tx_"
_BASE36 = string.digits + string.ascii_lowercase

CSV_HEADERS = [
    "Name", "Email", "Phone", "Adults", "Kids", "Family Type",
    "Amount", "Status", "Transaction ID", "Date", "T-Shirt Sizes",
]
CSV_FORMATS = ("legacy", "quoted")
MISSING = "N/A"
_FORMULA_PREFIXES = ("=", "+", "-", "@", "\t", "\r")

def list_registrations() -> List[dict]:
    return registrations_repository.list_registrations()

def get_registration(registration_id: str) -> Optional[dict]:
    return registrations_repository.get_registration(registration_id)

def filter_registrations(rows: Iterable[dict], search: str = "", status: str = "all") -> List[dict]:
    """
    Recherche insensible à la casse (nom, email, catégorie) + filtre de statut.
    - status: all | paid | pending
    """
    status = (status or "all").strip().lower()
    if status not in STATUS_FILTERS:
        raise ValidationError({"status": f"status must be one of {', '.join(STATUS_FILTERS)}"})
    term = (search or "").strip().lower()
    result = []
    for row in rows:
        if term:
            haystack = (row.get("name") or "", row.get("email") or "", row.get("family_category") or "")
            if not any(term in value.lower() for value in haystack):
                continue
        if status != "all" and row.get("payment_status") != status:
            continue
        result.append(row)
    return result

def compute_stats(rows: Iterable[dict]) -> Dict[str, Any]:
    rows = list(rows)
    paid = [r for r in rows if r.get("payment_status") == PaymentStatus.PAID.value]
    return {
        "total_registrations": len(rows),
        "total_participants": sum(int(r.get("adult_count") or 0) + int(r.get("kids_count") or 0) for r in rows),
        "total_paid": len(paid),
        "total_pending": sum(1 for r in rows if r.get("payment_status") == PaymentStatus.PENDING.value),
        "total_revenue": sum(float(r.get("total_amount") or 0) for r in paid),
    }

def generate_transaction_id() -> str:
    """Identifiant synthétique: 'tx_' + 9 caractères base 36."""
    return TRANSACTION_PREFIX + "".join(secrets.choice(_BASE36) for _ in range(9))

def set_payment_status(registration_id: str, status: Optional[str] = None) -> Optional[dict]:
    """
    Change le statut d'une inscription.
    - status None: bascule paid <-> pending
    - pending -> paid: conserve la transaction existante, sinon en génère une (tx_...)
    - paid -> pending: transaction_id remis à null
    Retourne la ligne mise à jour, None si l'inscription n'existe pas;
    RecordStoreError si la base ne renvoie aucune ligne mise à jour.
    """
    current = registrations_repository.get_registration(registration_id)
    if current is None:
        return None
    if status is None:
        target = PaymentStatus.PENDING if current.get("payment_status") == PaymentStatus.PAID.value else PaymentStatus.PAID
    else:
        try:
            target = PaymentStatus((status or "").strip().lower())
        except ValueError:
            raise ValidationError({"status": "status must be paid or pending"})

    if target is PaymentStatus.PAID:
        transaction_id = current.get("transaction_id") or generate_transaction_id()
    else:
        transaction_id = None
    data = {
        "payment_status": target.value,
        "transaction_id": transaction_id,
        "updated_at": registrations_repository.now_iso(),
    }
    updated = registrations_repository.update_registration(registration_id, data)
    logger.info("admin.service.set_payment_status id=%s status=%s", registration_id, target.value)
    return updated

def _format_date(value: Any) -> str:
    if not value:
        return MISSING
    try:
        d = datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    except ValueError:
        return MISSING
    return f"{d.month}/{d.day}/{d.year}"

def _csv_row(row: dict) -> List[Any]:
    sizes = row.get("t_shirt_sizes")
    return [
        row.get("name") or "",
        row.get("email") or "",
        row.get("phone") or "",
        row.get("adult_count"),
        row.get("kids_count"),
        row.get("family_category") or "",
        row.get("total_amount"),
        row.get("payment_status") or "",
        row.get("transaction_id") or MISSING,
        _format_date(row.get("created_at")),
        ", ".join(sizes) if sizes else MISSING,
    ]

def _neutralize(value: Any) -> Any:
    if isinstance(value, str) and value.startswith(_FORMULA_PREFIXES):
        return "'" + value
    return value

def export_csv(rows: Iterable[dict], fmt: str = "legacy") -> str:
    """
    Export CSV, colonnes dans l'ordre fixe CSV_HEADERS.
    - legacy: jointure par virgules sans échappement (format historique)
    - quoted: module csv (guillemets si nécessaire) + neutralisation des formules tableur
    """
    fmt = (fmt or "legacy").strip().lower()
    if fmt not in CSV_FORMATS:
        raise ValidationError({"format": f"format must be one of {', '.join(CSV_FORMATS)}"})
    data = [_csv_row(r) for r in rows]
    if fmt == "legacy":
        lines = [",".join(CSV_HEADERS)]
        lines.extend(",".join("" if v is None else str(v) for v in line) for line in data)
        return "\n".join(lines)
    buf = io.StringIO()
    writer = csv.writer(buf, lineterminator="\n")
    writer.writerow(CSV_HEADERS)
    for line in data:
        writer.writerow([_neutralize(v) for v in line])
    return buf.getvalue()

def csv_filename(today: Optional[date] = None) -> str:
    return f"registrations-{(today or datetime.now(timezone.utc).date()).isoformat()}.csv"
