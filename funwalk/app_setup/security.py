from fastapi import FastAPI
from funwalk import config

STRIPE_SCRIPT_SOURCES = ["https://js.stripe.com"]
STRIPE_CONNECT_SOURCES = ["https://api.stripe.com"]
STRIPE_FRAME_SOURCES = ["https://js.stripe.com", "https://hooks.stripe.com"]

def register_security_middleware(app: FastAPI) -> None:
    @app.middleware("http")
    async def security_headers(request, call_next):
        response = await call_next(request)

        # En-têtes de sécurité
        response.headers.setdefault("X-Frame-Options", "DENY")
        response.headers.setdefault("X-Content-Type-Options", "nosniff")
        response.headers.setdefault("Referrer-Policy", "no-referrer")
        response.headers.setdefault("Permissions-Policy", "geolocation=(), microphone=(), camera=()")
        if config.COOKIE_SECURE:
            response.headers.setdefault("Strict-Transport-Security", "max-age=63072000; includeSubDomains; preload")

        # CSP: le formulaire carte est servi par Stripe (js.stripe.com, iframes)
        csp_connect = ["'self'"] + STRIPE_CONNECT_SOURCES
        if config.SUPABASE_URL:
            csp_connect.append(config.SUPABASE_URL.rstrip("/"))
        swagger_cdns = ["https://cdn.jsdelivr.net"]

        csp = (
            "default-src 'self'; "
            "base-uri 'self'; object-src 'none'; frame-ancestors 'none'; "
            "img-src 'self' data: blob: https://fastapi.tiangolo.com; "
            f"style-src 'self' 'unsafe-inline' {' '.join(swagger_cdns)}; "
            f"script-src 'self' 'unsafe-inline' {' '.join(swagger_cdns + STRIPE_SCRIPT_SOURCES)}; "
            f"frame-src {' '.join(STRIPE_FRAME_SOURCES)}; "
            f"connect-src {' '.join(csp_connect)}"
        )
        response.headers["Content-Security-Policy"] = csp

        return response
