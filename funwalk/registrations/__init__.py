"""
Module 'registrations' (feature-first): point d'entrée public.
Tarification, tailles de t-shirt, formulaire, assistant en 3 étapes et accès à la table.
"""

from .pricing import derive_family_category, compute_total_amount, derive_fee, to_minor_units
from .apparel import TSHIRT_SIZES, DEFAULT_TSHIRT_SIZE, resize_sizes, participant_labels
from .models import PaymentStatus, ContactDetails, RegistrationForm, RegistrationCreate, parse_registration_form
from .wizard import (
    WizardStep,
    WizardState,
    submit_contact,
    set_counts,
    set_tshirt_size,
    set_tshirt_sizes,
    go_to_step,
    reset,
)

__all__ = [
    # pricing
    "derive_family_category",
    "compute_total_amount",
    "derive_fee",
    "to_minor_units",
    # apparel
    "TSHIRT_SIZES",
    "DEFAULT_TSHIRT_SIZE",
    "resize_sizes",
    "participant_labels",
    # models
    "PaymentStatus",
    "ContactDetails",
    "RegistrationForm",
    "RegistrationCreate",
    "parse_registration_form",
    # wizard
    "WizardStep",
    "WizardState",
    "submit_contact",
    "set_counts",
    "set_tshirt_size",
    "set_tshirt_sizes",
    "go_to_step",
    "reset",
]
