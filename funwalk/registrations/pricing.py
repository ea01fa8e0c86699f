"""
Catégorie famille et montant de l'inscription (logique pure, pas de Stripe, pas de DB).
"""
from typing import Tuple
from funwalk.config import ADULT_PRICE, KID_PRICE

# module funwalk.registrations.pricing
NO_KIDS = "One Family, No Kids"
ONE_KID = "One Family, One Kid"
TWO_KIDS = "One Family, Two Kids"
MULTIPLE_KIDS = "One Family, Multiple Kids"
CUSTOM_CASE = "Custom Case"

FAMILY_CATEGORIES = (NO_KIDS, ONE_KID, TWO_KIDS, MULTIPLE_KIDS)

def derive_family_category(adult_count: int, kids_count: int) -> str:
    """
    Libellé de catégorie, basé uniquement sur le nombre d'enfants.
    - 0 enfant -> "No Kids", 2 -> "Two Kids", > 2 -> "Multiple Kids", sinon "One Kid"
    - le nombre d'adultes n'intervient que via la condition >= 1
    """
    if adult_count >= 1:
        if kids_count == 0:
            return NO_KIDS
        elif kids_count == 2:
            return TWO_KIDS
        elif kids_count > 2:
            return MULTIPLE_KIDS
        else:
            return ONE_KID
    return CUSTOM_CASE

def compute_total_amount(adult_count: int, kids_count: int) -> int:
    return adult_count * ADULT_PRICE + kids_count * KID_PRICE

def derive_fee(adult_count: int, kids_count: int) -> Tuple[str, int]:
    """Retourne (family_category, total_amount) pour les effectifs donnés."""
    return derive_family_category(adult_count, kids_count), compute_total_amount(adult_count, kids_count)

def to_minor_units(amount: float) -> int:
    """Montant en centimes pour Stripe."""
    return int(round(float(amount) * 100))
