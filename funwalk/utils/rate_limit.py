from typing import Dict, Any
from fastapi import Request, Response, HTTPException
import os
import time
import logging

logger = logging.getLogger(__name__)

def client_key(request: Request) -> str:
    # Clé = IP du client (X-Forwarded-For déjà résolu par ProxyHeadersMiddleware) + chemin
    ip = request.client.host if request.client else "local"
    return f"ip:{ip}:{request.url.path}"

def optional_rate_limit(times: int, seconds: int):
    """
    Dépendance FastAPI de limitation de débit.
    - LOCAL_RATE_LIMIT_FALLBACK=1: fenêtre glissante en mémoire (app.state)
    - app.state.rate_limit_enabled False: aucune limite
    - sinon fastapi-limiter (Redis); une panne du limiteur ne bloque jamais la requête
    """
    async def _dep(request: Request, response: Response):
        if os.getenv("LOCAL_RATE_LIMIT_FALLBACK") == "1":
            now = time.time()
            key = client_key(request)
            store = getattr(request.app.state, "_rl_store", {})
            hits = [t for t in store.get(key, []) if now - t < seconds]
            if len(hits) >= times:
                raise HTTPException(status_code=429, detail="Too Many Requests")
            hits.append(now)
            store[key] = hits
            request.app.state._rl_store = store
            return

        if getattr(request.app.state, "rate_limit_enabled", None) is False:
            return

        try:
            from fastapi_limiter.depends import RateLimiter
            async def _identifier(req: Request) -> str:
                return client_key(req)
            return await RateLimiter(times=times, seconds=seconds, identifier=_identifier)(request, response)
        except HTTPException:
            raise
        except Exception:
            logger.warning("rate_limit: limiter unavailable path=%s", request.url.path)
            return
    return _dep

def rate_limit_health_info(request: Request) -> Dict[str, Any]:
    enabled = getattr(request.app.state, "rate_limit_enabled", None)
    limiter_ready = False
    try:
        from fastapi_limiter import FastAPILimiter
        limiter_ready = getattr(FastAPILimiter, "redis", None) is not None
    except ImportError:
        limiter_ready = False
    return {
        "enabled": (bool(enabled) if enabled is not None else None),
        "ready": limiter_ready,
        "backend": "redis" if limiter_ready else None,
    }
