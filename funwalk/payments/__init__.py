"""
Module 'payments' (feature-first): point d'entrée public.
Réunit le client Stripe (PaymentIntent, webhook) et l'orchestration inscription + paiement.
"""

from .stripe_client import (
    require_stripe,
    create_payment_intent,
    confirm_payment_intent,
    retrieve_payment_intent,
    parse_event,
)
from .service import PaymentResult, submit_registration_and_pay, handle_webhook_event

__all__ = [
    # stripe
    "require_stripe",
    "create_payment_intent",
    "confirm_payment_intent",
    "retrieve_payment_intent",
    "parse_event",
    # services
    "PaymentResult",
    "submit_registration_and_pay",
    "handle_webhook_event",
]
