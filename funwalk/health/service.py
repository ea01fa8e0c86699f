from urllib.parse import urlparse
import socket
from funwalk import config
import funwalk.infra.supabase_client as supabase_client
from funwalk.payments import stripe_client

def _check_table(client, name: str):
    try:
        res = client.table(name).select("id").limit(1).execute()
        cnt = len(res.data or [])
        return {"ok": True, "rows": cnt}
    except Exception as e:
        return {"ok": False, "error": str(e)}

def health_supabase_info():
    effective_url = config.SUPABASE_URL
    parsed = urlparse(effective_url) if effective_url else None
    hostname = parsed.hostname if parsed else None
    dns_ok = None
    dns_error = None
    if hostname:
        try:
            socket.getaddrinfo(hostname, 443)
            dns_ok = True
        except OSError as e:
            dns_ok = False
            dns_error = str(e)

    info = {
        "supabase_url": effective_url,
        "hostname": hostname,
        "dns_ok": dns_ok,
        "dns_error": dns_error,
        "connect_ok": False,
        "error": None,
        "tables": {},
    }
    try:
        client = supabase_client.get_store_client()
        info["tables"][config.REGISTRATIONS_TABLE] = _check_table(client, config.REGISTRATIONS_TABLE)
        info["connect_ok"] = True
    except Exception as e:
        info["error"] = str(e)
    return info

def health_stripe_info():
    return {
        "configured": stripe_client.is_configured(),
        "publishable_key": bool(config.STRIPE_PUBLIC_KEY),
        "webhook_secret": bool(config.STRIPE_WEBHOOK_SECRET),
        "currency": config.PAYMENT_CURRENCY,
    }
