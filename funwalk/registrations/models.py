"""
Modèles Pydantic du formulaire d'inscription et de la ligne 'registrations'.
- ContactDetails / RegistrationForm: étape 1 (coordonnées, adresse, effectifs)
- RegistrationCreate: payload inséré dans Supabase (statut 'pending')
- parse_registration_form: transforme les erreurs Pydantic en erreurs par champ
"""
import re
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator
from pydantic import ValidationError as PydanticValidationError
from pydantic.alias_generators import to_camel

from funwalk.config import MAX_ADULTS, MAX_KIDS, PAYMENT_COUNTRY
from funwalk.errors import ValidationError

POSTAL_CODE_RE = re.compile(r"[0-9]{5}")
MIN_PHONE_DIGITS = 10

FIELD_MESSAGES = {
    "name": "Name must be at least 2 characters.",
    "email": "Please enter a valid email address.",
    "phone": "Please enter a valid phone number.",
    "address_line1": "Address is required.",
    "city": "City is required.",
    "postal_code": "Please enter a valid 5-digit US zip code.",
    "adult_count": f"At least one adult is required (maximum {MAX_ADULTS}).",
    "kids_count": f"Please select between 0 and {MAX_KIDS} kids.",
    "is_tulip_parent": "Invalid value.",
}


class PaymentStatus(str, Enum):
    PENDING = "pending"
    PAID = "paid"


class ContactDetails(BaseModel):
    # Les clés camelCase du front d'origine (addressLine1, postalCode...) sont acceptées
    model_config = ConfigDict(frozen=True, str_strip_whitespace=True, alias_generator=to_camel, populate_by_name=True)

    name: str = Field(min_length=2)
    email: EmailStr
    phone: str
    address_line1: str = Field(min_length=1)
    city: str = Field(min_length=1)
    postal_code: str

    @field_validator("phone")
    @classmethod
    def phone_has_enough_digits(cls, v: str) -> str:
        if len(re.sub(r"\D", "", v or "")) < MIN_PHONE_DIGITS:
            raise ValueError(FIELD_MESSAGES["phone"])
        return v

    # Valeur brute: str_strip_whitespace ne doit pas rendre " 95051 " valide
    @field_validator("postal_code", mode="before")
    @classmethod
    def postal_code_is_five_digits(cls, v: Any) -> Any:
        if not isinstance(v, str) or not POSTAL_CODE_RE.fullmatch(v):
            raise ValueError(FIELD_MESSAGES["postal_code"])
        return v

    def shipping_address(self, country: str = PAYMENT_COUNTRY) -> Dict[str, str]:
        """Adresse au format Stripe (shipping.address)."""
        return {
            "line1": self.address_line1,
            "city": self.city,
            "postal_code": self.postal_code,
            "country": country,
        }


class RegistrationForm(ContactDetails):
    adult_count: int = Field(default=1, ge=1, le=MAX_ADULTS)
    kids_count: int = Field(default=0, ge=0, le=MAX_KIDS)
    is_tulip_parent: bool = False

    def contact(self) -> ContactDetails:
        return ContactDetails(**self.model_dump(include=set(ContactDetails.model_fields)))


class RegistrationCreate(BaseModel):
    name: str
    email: str
    phone: str
    adult_count: int
    kids_count: int
    family_category: str
    total_amount: int
    payment_status: PaymentStatus = PaymentStatus.PENDING
    is_tulip_parent: bool = False
    t_shirt_sizes: List[str] = Field(default_factory=list)

    def to_row(self) -> Dict[str, Any]:
        return self.model_dump(mode="json")


def _field_name(model: type, loc: Any) -> str:
    key = str(loc[0]) if loc else "__root__"
    for name, info in model.model_fields.items():
        if key in (name, info.alias):
            return name
    return key

def parse_registration_form(data: Optional[Mapping[str, Any]]) -> RegistrationForm:
    """
    Valide les données de l'étape 1.
    Soulève ValidationError({champ: message}) sans contacter aucun service externe.
    """
    try:
        return RegistrationForm.model_validate(dict(data or {}))
    except PydanticValidationError as e:
        errors: Dict[str, str] = {}
        for err in e.errors():
            field = _field_name(RegistrationForm, err.get("loc"))
            errors.setdefault(field, FIELD_MESSAGES.get(field, err.get("msg") or "Invalid value."))
        raise ValidationError(errors)
