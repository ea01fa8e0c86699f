from typing import Optional
from supabase import create_client, Client
from funwalk.config import SUPABASE_URL, SUPABASE_ANON, SUPABASE_SERVICE_KEY

_supabase: Optional[Client] = None
_service_supabase: Optional[Client] = None

def get_supabase() -> Client:
    global _supabase
    if _supabase is None:
        if not SUPABASE_URL or not SUPABASE_ANON:
            raise RuntimeError("SUPABASE_URL / SUPABASE_ANON_KEY manquants pour get_supabase()")
        _supabase = create_client(SUPABASE_URL, SUPABASE_ANON)
    return _supabase

def get_service_supabase() -> Client:
    global _service_supabase
    if not SUPABASE_SERVICE_KEY:
        raise RuntimeError("SUPABASE_SERVICE_KEY manquant pour get_service_supabase()")
    if _service_supabase is None:
        _service_supabase = create_client(SUPABASE_URL, SUPABASE_SERVICE_KEY)
    return _service_supabase

def get_store_client() -> Client:
    """
    Client utilisé pour la table des inscriptions.
    - service-role si SUPABASE_SERVICE_KEY est défini (écritures serveur, lecture admin)
    - sinon client anon (RLS côté Supabase, comme le front d'origine)
    """
    if SUPABASE_SERVICE_KEY:
        return get_service_supabase()
    return get_supabase()
