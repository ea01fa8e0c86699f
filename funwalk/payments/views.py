import logging

from fastapi import APIRouter, Request, HTTPException
from fastapi.responses import JSONResponse

from funwalk.payments import service as payments_service, stripe_client

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/payments", tags=["Payments API"])

# module funwalk.payments.views
@router.post("/webhook", include_in_schema=False)
async def webhook_stripe(request: Request):
    """
    Webhook Stripe (PaymentIntent): réconcilie le statut des inscriptions.
    - Signature: stripe_client.parse_event (Stripe-Signature + STRIPE_WEBHOOK_SECRET)
    - payment_intent.succeeded -> ligne passée en paid si nécessaire
    - Réponses: {"status": "ok", "updated": bool} ou {"status": "ignored"}
    - Erreurs: 400 si signature/payload invalide
    """
    try:
        event = await stripe_client.parse_event(request)
    except Exception:
        logger.exception("payments.webhook invalid payload")
        raise HTTPException(status_code=400, detail="Invalid Stripe webhook payload")
    result = payments_service.handle_webhook_event(event)
    logger.info("payments.webhook type=%s result=%s", (event or {}).get("type"), result.get("status"))
    return JSONResponse(result)
