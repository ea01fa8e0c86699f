"""
Cas d'usage 'payments': orchestre repository (Supabase) et stripe_client.

Séquence (aucune relance automatique):
  1) insert 'registrations' en pending  -> RecordStoreError interrompt tout
  2) PaymentIntent.create               -> PaymentSetupError (la ligne reste pending)
  3) PaymentIntent.confirm              -> PaymentDeclinedError (la ligne reste pending)
  4) update en paid + transaction_id    -> échec journalisé, jamais remonté
Le webhook payment_intent.succeeded rattrape l'étape 4 si elle a échoué.
"""
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from funwalk.errors import PaymentDeclinedError, RecordStoreError
from funwalk.registrations import repository
from funwalk.registrations.wizard import WizardState, require_payment_step
from . import stripe_client

logger = logging.getLogger(__name__)

SUCCEEDED = "succeeded"


@dataclass
class PaymentResult:
    registration_id: str
    transaction_id: str
    status: str
    recorded: bool
    summary: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "registration_id": self.registration_id,
            "transaction_id": self.transaction_id,
            "status": self.status,
            "recorded": self.recorded,
            "registration": self.summary,
        }


# module funwalk.payments.service
def submit_registration_and_pay(state: WizardState, payment_token: str) -> PaymentResult:
    """
    Enregistre l'inscription puis encaisse le montant par carte.
    - state doit être à l'étape 3 (WizardError sinon)
    - payment_token: PaymentMethod "pm_..." ou token carte "tok_..."
    """
    payload = require_payment_step(state)
    contact = state.contact

    row = repository.insert_registration(payload.to_row())
    registration_id = str(row.get("id"))
    logger.info("payments.submit inserted registration id=%s amount=%s", registration_id, payload.total_amount)

    intent = stripe_client.create_payment_intent(
        amount=payload.total_amount,
        email=contact.email,
        registration_id=registration_id,
        customer_name=contact.name,
        address=contact.shipping_address(),
    )
    intent_id = str(intent.get("id") or "")

    confirmed = stripe_client.confirm_payment_intent(
        intent_id,
        payment_token=payment_token,
        name=contact.name,
        email=contact.email,
    )
    status = str(confirmed.get("status") or "")
    if status != SUCCEEDED:
        logger.warning("payments.submit not succeeded id=%s intent=%s status=%s", registration_id, intent_id, status)
        raise PaymentDeclinedError(f"Payment was not completed (status={status or 'unknown'})")

    recorded = True
    try:
        repository.mark_registration_paid(registration_id, intent_id)
    except RecordStoreError:
        # Le paiement est encaissé: on ne remonte pas l'erreur, le webhook rattrapera
        recorded = False
        logger.exception("payments.submit mark paid failed id=%s intent=%s", registration_id, intent_id)

    summary = {
        "name": payload.name,
        "email": payload.email,
        "adult_count": payload.adult_count,
        "kids_count": payload.kids_count,
        "family_category": payload.family_category,
        "total_amount": payload.total_amount,
        "t_shirt_sizes": list(payload.t_shirt_sizes),
        "is_tulip_parent": payload.is_tulip_parent,
    }
    return PaymentResult(
        registration_id=registration_id,
        transaction_id=intent_id,
        status=status,
        recorded=recorded,
        summary=summary,
    )

def _registration_id_from(obj: Dict[str, Any]) -> Optional[str]:
    metadata = obj.get("metadata") or {}
    value = metadata.get("registrationId") or metadata.get("registration_id")
    return str(value) if value else None

def handle_webhook_event(event: Dict[str, Any]) -> Dict[str, Any]:
    """
    Réconciliation via webhook Stripe.
    - payment_intent.succeeded: passe la ligne en paid si elle ne l'est pas déjà (idempotent)
    - payment_intent.payment_failed: journalisé seulement
    - autres types: ignorés
    """
    event_type = (event or {}).get("type") or ""
    obj = ((event or {}).get("data") or {}).get("object") or {}

    if event_type == "payment_intent.succeeded":
        registration_id = _registration_id_from(obj)
        intent_id = str(obj.get("id") or "")
        if not registration_id:
            logger.warning("payments.webhook succeeded without registrationId intent=%s", intent_id)
            return {"status": "ignored"}
        current = repository.get_registration(registration_id)
        if current is None:
            logger.warning("payments.webhook unknown registration id=%s intent=%s", registration_id, intent_id)
            return {"status": "ignored"}
        if current.get("payment_status") == "paid":
            return {"status": "ok", "updated": False}
        repository.mark_registration_paid(registration_id, intent_id)
        logger.info("payments.webhook reconciled id=%s intent=%s", registration_id, intent_id)
        return {"status": "ok", "updated": True}

    if event_type == "payment_intent.payment_failed":
        error = obj.get("last_payment_error") or {}
        logger.warning(
            "payments.webhook payment failed id=%s intent=%s code=%s",
            _registration_id_from(obj), obj.get("id"), error.get("code"),
        )
        return {"status": "ok", "updated": False}

    return {"status": "ignored"}
