"""
Factory d'application pour les entrypoints (ex: funwalk.asgi).
Ordonne les étapes d'initialisation de manière lisible et testable.
"""
from fastapi import FastAPI
from funwalk import config
from .lifespan import lifespan
from .middlewares import register_basic_middlewares, register_no_cache_middleware, register_force_https_middleware
from .security import register_security_middleware
from .exception_handlers import register_exception_handlers
from .routes import register_routes
from .routers import register_routers

def create_app() -> FastAPI:
    """
    Construit l'app FastAPI avec le lifespan et enregistre:
      - middlewares de base, sécurité (CSP Stripe), no-cache, HTTPS (si COOKIE_SECURE)
      - gestionnaires d'exceptions et routes simples
      - tous les routers (inscription, paiements, admin, health)
    """
    app = FastAPI(title=f"{config.EVENT_NAME} registration", lifespan=lifespan)
    register_basic_middlewares(app)
    register_security_middleware(app)
    register_no_cache_middleware(app)
    register_exception_handlers(app)
    register_routes(app)
    register_routers(app)
    if config.COOKIE_SECURE:
        register_force_https_middleware(app)
    return app
