import logging
from typing import Any, Dict

from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import JSONResponse

from funwalk import config
from funwalk.errors import ValidationError
from funwalk.payments import service as payments_service
from funwalk.registrations import wizard
from funwalk.registrations.apparel import DEFAULT_TSHIRT_SIZE, TSHIRT_SIZES
from funwalk.registrations.pricing import derive_fee
from funwalk.registrations.wizard import WizardState
from funwalk.utils.rate_limit import optional_rate_limit

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/registration", tags=["Registration API"])

SESSION_KEY = "wizard"

# module funwalk.registrations.views
def load_state(request: Request) -> WizardState:
    return WizardState.from_session(request.session.get(SESSION_KEY))

def save_state(request: Request, state: WizardState) -> Dict[str, Any]:
    request.session[SESSION_KEY] = state.to_session()
    return state.summary()

async def _json_body(request: Request) -> Dict[str, Any]:
    try:
        body = await request.json()
    except ValueError:
        raise ValidationError({"body": "Invalid JSON body"})
    if not isinstance(body, dict):
        raise ValidationError({"body": "JSON object expected"})
    return body

def _pick(body: Dict[str, Any], *keys: str, default: Any = None) -> Any:
    for key in keys:
        if key in body:
            return body[key]
    return default

@router.get("/config")
def registration_config():
    """Clé publique Stripe + constantes de tarification/formulaire pour le front."""
    return {
        "event_name": config.EVENT_NAME,
        "stripe_public_key": config.STRIPE_PUBLIC_KEY,
        "currency": config.PAYMENT_CURRENCY,
        "adult_price": config.ADULT_PRICE,
        "kid_price": config.KID_PRICE,
        "max_adults": config.MAX_ADULTS,
        "max_kids": config.MAX_KIDS,
        "tshirt_sizes": list(TSHIRT_SIZES),
        "default_tshirt_size": DEFAULT_TSHIRT_SIZE,
    }

@router.get("/quote")
def registration_quote(
    adults: int = Query(default=1, ge=1, le=config.MAX_ADULTS),
    kids: int = Query(default=0, ge=0, le=config.MAX_KIDS),
):
    category, amount = derive_fee(adults, kids)
    return {
        "adult_count": adults,
        "kids_count": kids,
        "family_category": category,
        "total_amount": amount,
        "currency": config.PAYMENT_CURRENCY,
    }

@router.get("/wizard")
def get_wizard(request: Request):
    return save_state(request, load_state(request))

@router.post("/wizard/contact")
async def submit_contact(request: Request):
    """
    Étape 1 -> 2. Body JSON: name, email, phone, address_line1, city, postal_code,
    adult_count, kids_count (sinon ceux de l'état), is_tulip_parent (clés camelCase acceptées).
    - 400 + {"errors": {champ: message}} si invalide
    """
    body = await _json_body(request)
    state = wizard.submit_contact(load_state(request), body)
    return save_state(request, state)

@router.post("/wizard/counts")
async def set_counts(request: Request):
    body = await _json_body(request)
    state = load_state(request)
    state = wizard.set_counts(
        state,
        _pick(body, "adult_count", "adultCount", default=state.adult_count),
        _pick(body, "kids_count", "kidsCount", default=state.kids_count),
    )
    return save_state(request, state)

@router.post("/wizard/tshirt-sizes")
async def set_tshirt_sizes(request: Request):
    """Body {"index": i, "size": "L"} pour une taille, ou {"sizes": [...]} pour toutes."""
    body = await _json_body(request)
    state = load_state(request)
    sizes = _pick(body, "sizes", "t_shirt_sizes", "tShirtSizes")
    if sizes is not None:
        state = wizard.set_tshirt_sizes(state, sizes)
    else:
        state = wizard.set_tshirt_size(state, body.get("index"), body.get("size"))
    return save_state(request, state)

@router.post("/wizard/step")
async def go_to_step(request: Request):
    body = await _json_body(request)
    state = wizard.go_to_step(load_state(request), body.get("step"))
    return save_state(request, state)

@router.post("/wizard/reset")
def reset_wizard(request: Request):
    return save_state(request, wizard.reset())

@router.post("/wizard/pay", dependencies=[Depends(optional_rate_limit(times=5, seconds=60))])
async def pay(request: Request):
    """
    Étape 3: inscription + paiement carte.
    - Body: {"payment_token": "pm_..." | "tok_..."} (alias paymentMethodId)
    - Succès: confirmation (transaction_id, récapitulatif), l'assistant est réinitialisé
    - Échec: l'assistant reste à l'étape 3, l'utilisateur peut resoumettre
    """
    body = await _json_body(request)
    token = str(_pick(body, "payment_token", "paymentMethodId", "payment_method", default="") or "").strip()
    if not token:
        raise ValidationError({"payment_token": "Card details are required."})
    result = payments_service.submit_registration_and_pay(load_state(request), token)
    save_state(request, wizard.reset())
    logger.info("registration.pay ok id=%s recorded=%s", result.registration_id, result.recorded)
    return JSONResponse(result.to_dict())
