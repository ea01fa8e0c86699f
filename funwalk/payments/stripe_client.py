"""
Adaptateur Stripe: centralise les appels PaymentIntent et la vérification des webhooks.
Les erreurs du SDK sont traduites dans la taxonomie funwalk.errors.
"""
import logging
from typing import Any, Dict, Optional

import stripe
from fastapi import Request

from funwalk import config
from funwalk.errors import PaymentDeclinedError, PaymentSetupError
from funwalk.registrations.pricing import to_minor_units

logger = logging.getLogger(__name__)

# module funwalk.payments.stripe_client
def is_configured() -> bool:
    return bool(config.STRIPE_SECRET_KEY)

def require_stripe():
    """
    Prépare et retourne le module stripe prêt à l'emploi.
    - Configure stripe.api_key via STRIPE_SECRET_KEY
    - PaymentSetupError si la clé secrète est absente
    """
    if not config.STRIPE_SECRET_KEY:
        raise PaymentSetupError("Stripe secret key is not configured")
    stripe.api_key = config.STRIPE_SECRET_KEY
    return stripe

def create_payment_intent(
    *,
    amount: int,
    email: str,
    registration_id: str,
    customer_name: str,
    address: Dict[str, str],
) -> Dict[str, Any]:
    """
    Crée un PaymentIntent carte.
    - amount: montant en unités principales (converti en centimes)
    - metadata.registrationId relie le paiement à la ligne 'registrations'
    - shipping: nom + adresse (pays fixe)
    Retour: dict intent (id, client_secret, status, ...)
    """
    missing = [k for k, v in (("amount", amount), ("email", email), ("registration_id", registration_id)) if not v]
    if missing:
        raise PaymentSetupError(f"Missing payment fields: {', '.join(missing)}")
    require_stripe()
    try:
        intent = stripe.PaymentIntent.create(
            amount=to_minor_units(amount),
            currency=config.PAYMENT_CURRENCY,
            payment_method_types=["card"],
            receipt_email=email,
            description=config.PAYMENT_DESCRIPTION,
            metadata={"registrationId": str(registration_id)},
            shipping={"name": customer_name, "address": address},
        )
    except stripe.StripeError as e:
        logger.exception("payments.stripe_client.create_payment_intent failed registration_id=%s", registration_id)
        raise PaymentSetupError(getattr(e, "user_message", None) or str(e) or "Failed to create payment intent") from e
    return dict(intent)

def confirm_payment_intent(
    intent_id: str,
    *,
    payment_token: str,
    name: str,
    email: str,
) -> Dict[str, Any]:
    """
    Confirme le PaymentIntent avec la carte saisie.
    - payment_token "pm_..." : PaymentMethod créé côté navigateur (billing_details déjà attachés)
    - sinon: token carte ("tok_...") transmis via payment_method_data avec nom + email
    """
    if not payment_token:
        raise PaymentDeclinedError("Card details are missing")
    require_stripe()
    if payment_token.startswith("pm_"):
        params: Dict[str, Any] = {"payment_method": payment_token}
    else:
        params = {
            "payment_method_data": {
                "type": "card",
                "card": {"token": payment_token},
                "billing_details": {"name": name, "email": email},
            }
        }
    try:
        intent = stripe.PaymentIntent.confirm(intent_id, **params)
    except stripe.CardError as e:
        logger.warning("payments.stripe_client.confirm_payment_intent declined intent=%s code=%s", intent_id, getattr(e, "code", None))
        raise PaymentDeclinedError(getattr(e, "user_message", None) or str(e), decline_code=getattr(e, "code", None)) from e
    except stripe.StripeError as e:
        logger.exception("payments.stripe_client.confirm_payment_intent failed intent=%s", intent_id)
        raise PaymentDeclinedError(getattr(e, "user_message", None) or str(e) or "Payment failed") from e
    return dict(intent)

def retrieve_payment_intent(intent_id: str) -> Dict[str, Any]:
    require_stripe()
    return dict(stripe.PaymentIntent.retrieve(intent_id))

async def parse_event(request: Request):
    """
    Parse et valide un événement Stripe signé (webhook).
    - Lit le body brut + en-tête Stripe-Signature
    - Valide la signature via Webhook.construct_event (STRIPE_WEBHOOK_SECRET)
    Retour: l'objet event si la signature est valide.
    """
    payload = await request.body()
    sig_header: Optional[str] = request.headers.get("stripe-signature")
    return stripe.Webhook.construct_event(payload, sig_header, config.STRIPE_WEBHOOK_SECRET or "")
