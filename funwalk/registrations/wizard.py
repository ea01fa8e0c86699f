"""
Assistant d'inscription en 3 étapes (état explicite, transitions pures).

Étapes:
  1) CONTACT: coordonnées, adresse de facturation, effectifs
  2) APPAREL: récapitulatif famille + tailles de t-shirt
  3) PAYMENT: saisie carte et paiement

Chaque transition prend un WizardState et retourne un nouvel état (modèle figé).
L'état est sérialisé dans la session (cookie signé) par la couche web.
"""
from enum import IntEnum
from typing import Any, Dict, Mapping, Optional, Sequence, Tuple

from pydantic import BaseModel, ConfigDict
from pydantic import ValidationError as PydanticValidationError

from funwalk.config import MAX_ADULTS, MAX_KIDS
from funwalk.errors import ValidationError, WizardError
from funwalk.registrations.apparel import (
    DEFAULT_TSHIRT_SIZE,
    TSHIRT_SIZES,
    participant_count,
    participant_labels,
    resize_sizes,
)
from funwalk.registrations.models import ContactDetails, RegistrationCreate, parse_registration_form
from funwalk.registrations.pricing import derive_family_category, compute_total_amount

# module funwalk.registrations.wizard
class WizardStep(IntEnum):
    CONTACT = 1
    APPAREL = 2
    PAYMENT = 3


class WizardState(BaseModel):
    model_config = ConfigDict(frozen=True)

    step: WizardStep = WizardStep.CONTACT
    contact: Optional[ContactDetails] = None
    adult_count: int = 1
    kids_count: int = 0
    is_tulip_parent: bool = False
    t_shirt_sizes: Tuple[str, ...] = (DEFAULT_TSHIRT_SIZE,)

    @property
    def participant_count(self) -> int:
        return participant_count(self.adult_count, self.kids_count)

    @property
    def family_category(self) -> str:
        return derive_family_category(self.adult_count, self.kids_count)

    @property
    def total_amount(self) -> int:
        return compute_total_amount(self.adult_count, self.kids_count)

    def to_session(self) -> Dict[str, Any]:
        return self.model_dump(mode="json")

    @classmethod
    def from_session(cls, data: Optional[Mapping[str, Any]]) -> "WizardState":
        """Relit l'état depuis la session; repart d'un état neuf si absent ou illisible."""
        if not data:
            return cls()
        try:
            return cls.model_validate(dict(data))
        except PydanticValidationError:
            return cls()

    def summary(self) -> Dict[str, Any]:
        return {
            "step": int(self.step),
            "contact": self.contact.model_dump() if self.contact else None,
            "adult_count": self.adult_count,
            "kids_count": self.kids_count,
            "is_tulip_parent": self.is_tulip_parent,
            "family_category": self.family_category,
            "total_amount": self.total_amount,
            "t_shirt_sizes": list(self.t_shirt_sizes),
            "participants": participant_labels(self.adult_count, self.kids_count),
        }

    def to_registration(self) -> RegistrationCreate:
        if self.contact is None:
            raise WizardError("Contact details are missing", code="contact_required")
        return RegistrationCreate(
            name=self.contact.name,
            email=self.contact.email,
            phone=self.contact.phone,
            adult_count=self.adult_count,
            kids_count=self.kids_count,
            family_category=self.family_category,
            total_amount=self.total_amount,
            is_tulip_parent=self.is_tulip_parent,
            t_shirt_sizes=list(self.t_shirt_sizes),
        )


def reset() -> WizardState:
    return WizardState()

def _with_counts(state: WizardState, adult_count: int, kids_count: int, **changes: Any) -> WizardState:
    sizes = resize_sizes(state.t_shirt_sizes, participant_count(adult_count, kids_count))
    return state.model_copy(update={
        "adult_count": adult_count,
        "kids_count": kids_count,
        "t_shirt_sizes": tuple(sizes),
        **changes,
    })

def submit_contact(state: WizardState, data: Optional[Mapping[str, Any]]) -> WizardState:
    """
    Étape 1 -> 2: valide coordonnées/adresse/effectifs localement.
    - effectifs absents du corps: ceux déjà choisis dans l'état (set_counts) sont conservés
    - ValidationError par champ si invalide (l'état reste à l'étape 1)
    """
    if state.step != WizardStep.CONTACT:
        raise WizardError("Go back to step 1 to edit contact details")
    body = dict(data or {})
    for field, alias, current in (
        ("adult_count", "adultCount", state.adult_count),
        ("kids_count", "kidsCount", state.kids_count),
    ):
        if field not in body and alias not in body:
            body[field] = current
    form = parse_registration_form(body)
    return _with_counts(
        state,
        form.adult_count,
        form.kids_count,
        step=WizardStep.APPAREL,
        contact=form.contact(),
        is_tulip_parent=form.is_tulip_parent,
    )

def _coerce_count(value: Any, field: str, minimum: int, maximum: int) -> int:
    try:
        count = int(value)
    except (TypeError, ValueError):
        raise ValidationError({field: f"{field} must be a number"})
    if count < minimum or count > maximum:
        raise ValidationError({field: f"{field} must be between {minimum} and {maximum}"})
    return count

def set_counts(state: WizardState, adult_count: Any, kids_count: Any) -> WizardState:
    """Change les effectifs (étape 1) et redimensionne les tailles en conservant les choix existants."""
    if state.step != WizardStep.CONTACT:
        raise WizardError("Participant counts can only be changed on step 1")
    adults = _coerce_count(adult_count, "adult_count", 1, MAX_ADULTS)
    kids = _coerce_count(kids_count, "kids_count", 0, MAX_KIDS)
    return _with_counts(state, adults, kids)

def _check_size(size: Any) -> str:
    value = str(size or "").strip().upper()
    if value not in TSHIRT_SIZES:
        raise ValidationError({"t_shirt_sizes": f"Size must be one of {', '.join(TSHIRT_SIZES)}"})
    return value

def set_tshirt_size(state: WizardState, index: Any, size: Any) -> WizardState:
    if state.step != WizardStep.APPAREL:
        raise WizardError("T-shirt sizes are chosen on step 2")
    try:
        i = int(index)
    except (TypeError, ValueError):
        raise ValidationError({"index": "index must be a number"})
    if i < 0 or i >= len(state.t_shirt_sizes):
        raise ValidationError({"index": f"index must be between 0 and {len(state.t_shirt_sizes) - 1}"})
    sizes = list(state.t_shirt_sizes)
    sizes[i] = _check_size(size)
    return state.model_copy(update={"t_shirt_sizes": tuple(sizes)})

def set_tshirt_sizes(state: WizardState, sizes: Sequence[Any]) -> WizardState:
    if state.step != WizardStep.APPAREL:
        raise WizardError("T-shirt sizes are chosen on step 2")
    if not isinstance(sizes, (list, tuple)) or len(sizes) != state.participant_count:
        raise ValidationError({"t_shirt_sizes": f"Exactly {state.participant_count} sizes are required"})
    return state.model_copy(update={"t_shirt_sizes": tuple(_check_size(s) for s in sizes)})

def go_to_step(state: WizardState, target: Any) -> WizardState:
    """
    Navigation: retour arrière toujours permis, avance uniquement 2 -> 3.
    Le passage 1 -> 2 se fait exclusivement par submit_contact.
    """
    try:
        step = WizardStep(int(target))
    except (TypeError, ValueError):
        raise WizardError(f"Unknown step: {target}", code="unknown_step")
    if step == state.step:
        return state
    if step < state.step:
        return state.model_copy(update={"step": step})
    if state.step == WizardStep.APPAREL and step == WizardStep.PAYMENT:
        if state.contact is None:
            raise WizardError("Contact details are missing", code="contact_required")
        return state.model_copy(update={"step": step})
    raise WizardError(f"Cannot move from step {int(state.step)} to step {int(step)}")

def require_payment_step(state: WizardState) -> RegistrationCreate:
    """Vérifie que l'assistant est prêt pour le paiement et retourne le payload d'insertion."""
    if state.step != WizardStep.PAYMENT:
        raise WizardError("Payment is only available on step 3")
    return state.to_registration()
