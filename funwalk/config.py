# funwalk.config
from pathlib import Path
import os
from dotenv import load_dotenv

# Calculer le chemin du projet puis charger .env de manière explicite
BASE_DIR = Path(__file__).resolve().parent.parent
ENV_PATH = BASE_DIR / ".env"
load_dotenv(dotenv_path=ENV_PATH, override=True)


"""
Configuration centrale du service d'inscription.

- Charge le fichier .env à la racine du projet (BASE_DIR/.env)
- Normalise et expose les secrets/URLs (Supabase, Stripe), sécurité cookies, CORS/hosts
- Expose les constantes métier: prix unitaire, bornes du formulaire, devise et pays de paiement
"""

def _clean_env(v: str) -> str:
    """
    Nettoie une valeur d'environnement:
    - supprime les espaces et guillemets (simples, doubles) et backticks
    - retourne toujours une chaîne (jamais None)
    """
    return (v or "").strip().strip("'").strip('"').strip("`")

def _int_env(name: str, default: int) -> int:
    raw = _clean_env(os.getenv(name) or "")
    try:
        return int(raw) if raw else default
    except ValueError:
        return default

# Supabase: URL et clés (anon/service)
# - SUPABASE_URL peut parfois être sans schéma: on préfixe en https:// si nécessaire
SUPABASE_URL = _clean_env(os.getenv("SUPABASE_URL") or os.getenv("NEXT_PUBLIC_SUPABASE_URL") or "")
SUPABASE_ANON = _clean_env(os.getenv("SUPABASE_ANON_KEY") or os.getenv("SUPABASE_KEY") or "")
SUPABASE_SERVICE_KEY = _clean_env(os.getenv("SUPABASE_SERVICE_KEY") or "")

if SUPABASE_URL and not SUPABASE_URL.startswith("http"):
    SUPABASE_URL = "https://" + SUPABASE_URL
if SUPABASE_URL.endswith("/"):
    SUPABASE_URL = SUPABASE_URL.rstrip("/")

REGISTRATIONS_TABLE = _clean_env(os.getenv("REGISTRATIONS_TABLE") or "registrations")

# Cookies / sécurité
COOKIE_SECURE = (os.getenv("COOKIE_SECURE", "false").lower() == "true")
SESSION_SECRET_KEY = os.getenv("SESSION_SECRET_KEY", "replace_me_with_a_long_random_secret")

# Hash bcrypt du mot de passe admin. Vide => tableau de bord ouvert (comportement historique)
ADMIN_SECRET_HASH = _clean_env(os.getenv("ADMIN_SECRET_HASH", ""))

# CORS (dev)
CORS_ORIGINS = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()]
ALLOWED_HOSTS = [h.strip() for h in os.getenv("ALLOWED_HOSTS", "localhost,127.0.0.1").split(",") if h.strip()]

# Stripe: clés publiques/privées et secret webhook
STRIPE_PUBLIC_KEY = _clean_env(os.getenv("STRIPE_PUBLIC_KEY") or os.getenv("STRIPE_PUBLISHABLE_KEY") or "")
STRIPE_SECRET_KEY = _clean_env(os.getenv("STRIPE_SECRET_KEY") or "")
STRIPE_WEBHOOK_SECRET = _clean_env(os.getenv("STRIPE_WEBHOOK_SECRET") or "")

# Paiement: devise ISO unique, pays fixe de l'adresse de livraison, libellé Stripe
PAYMENT_CURRENCY = _clean_env(os.getenv("PAYMENT_CURRENCY") or "usd").lower()
PAYMENT_COUNTRY = _clean_env(os.getenv("PAYMENT_COUNTRY") or "IN").upper()
PAYMENT_DESCRIPTION = _clean_env(os.getenv("PAYMENT_DESCRIPTION") or "Family Registration Fee")

# Tarification: même prix pour adultes et enfants
UNIT_PRICE = _int_env("UNIT_PRICE", 20)
ADULT_PRICE = UNIT_PRICE
KID_PRICE = UNIT_PRICE

# Bornes des listes déroulantes du formulaire public
MAX_ADULTS = _int_env("MAX_ADULTS", 5)
MAX_KIDS = _int_env("MAX_KIDS", 5)

EVENT_NAME = _clean_env(os.getenv("EVENT_NAME") or "Family Fun Walk")
BASE_URL = _clean_env(os.getenv("BASE_URL") or "http://localhost:8000")
