"""
Middlewares transverses de l'application.
- register_basic_middlewares: session (état de l'assistant + session admin), CORS, TrustedHost, X-Forwarded-*.
- register_no_cache_middleware: empêche la mise en cache sur /admin et l'état de l'assistant.
- register_force_https_middleware: force la redirection HTTPS (utile derrière proxy).
Note: le middleware HTTPS est ajouté en dernier pour s'exécuter en premier.
"""
from fastapi import Request, FastAPI
from fastapi.responses import RedirectResponse
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.trustedhost import TrustedHostMiddleware
from starlette.middleware.sessions import SessionMiddleware
from uvicorn.middleware.proxy_headers import ProxyHeadersMiddleware
from funwalk import config

SESSION_COOKIE_NAME = "funwalk_session"

def register_basic_middlewares(app: FastAPI) -> None:
    """
    Ajoute les middlewares « de base »:
    - SessionMiddleware: cookie signé portant l'état de l'assistant et la session admin.
    - CORSMiddleware: autorise les origines définies (dev/prod).
    - TrustedHostMiddleware: limite les hôtes acceptés (défense host header).
    - ProxyHeadersMiddleware: fait confiance aux en-têtes du proxy (x-forwarded-*).
    """
    app.add_middleware(
        SessionMiddleware,
        secret_key=config.SESSION_SECRET_KEY,
        session_cookie=SESSION_COOKIE_NAME,
        https_only=config.COOKIE_SECURE,
        same_site="lax",
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.CORS_ORIGINS,
        allow_credentials="*" not in config.CORS_ORIGINS,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(
        TrustedHostMiddleware,
        allowed_hosts=config.ALLOWED_HOSTS + ["*"] if "*" in config.CORS_ORIGINS else config.ALLOWED_HOSTS,
    )
    app.add_middleware(ProxyHeadersMiddleware, trusted_hosts=["*"])

def register_no_cache_middleware(app: FastAPI) -> None:
    @app.middleware("http")
    async def no_cache_for_protected(request: Request, call_next):
        response = await call_next(request)
        path = request.url.path.rstrip("/")
        if request.method == "GET" and (path.startswith("/admin") or path.startswith("/api/v1/registration/wizard")):
            response.headers["Cache-Control"] = "no-store, no-cache, must-revalidate, max-age=0"
            response.headers["Pragma"] = "no-cache"
            response.headers["Expires"] = "0"
        return response

def register_force_https_middleware(app: FastAPI) -> None:
    """
    Force la redirection HTTP -> HTTPS lorsqu'un proxy place x-forwarded-proto=http.
    Activé uniquement si COOKIE_SECURE (production).
    """
    @app.middleware("http")
    async def force_https(request: Request, call_next):
        if request.headers.get("x-forwarded-proto") == "http":
            url = str(request.url).replace("http://", "https://", 1)
            return RedirectResponse(url, status_code=301)
        return await call_next(request)
