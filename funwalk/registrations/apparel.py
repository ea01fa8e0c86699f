from typing import List, Sequence

# module funwalk.registrations.apparel
TSHIRT_SIZES = ("XS", "S", "M", "L", "XL", "XXL")
DEFAULT_TSHIRT_SIZE = "M"

def participant_count(adult_count: int, kids_count: int) -> int:
    return max(int(adult_count), 0) + max(int(kids_count), 0)

def resize_sizes(sizes: Sequence[str], total: int, default: str = DEFAULT_TSHIRT_SIZE) -> List[str]:
    """
    Redimensionne la liste des tailles à `total` entrées.
    - conserve les tailles déjà choisies aux indices < total
    - complète avec la taille par défaut
    """
    total = max(int(total), 0)
    kept = list(sizes or [])[:total]
    return kept + [default] * (total - len(kept))

def participant_labels(adult_count: int, kids_count: int) -> List[str]:
    """Libellés d'affichage: "Adult 1", "Adult 2", "Child", ... (numéro seulement s'il y en a plusieurs)."""
    labels: List[str] = []
    for i in range(adult_count):
        labels.append(f"Adult {i + 1}" if adult_count > 1 else "Adult")
    for i in range(kids_count):
        labels.append(f"Child {i + 1}" if kids_count > 1 else "Child")
    return labels
