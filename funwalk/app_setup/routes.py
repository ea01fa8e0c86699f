"""
Routes simples (hors routers).
- /: informations du service (nom de l'événement, points d'entrée principaux)
- /favicon.ico: pas de contenu (204) pour éviter des 404 dans les logs.
"""
from fastapi import FastAPI
from fastapi.responses import Response
from starlette.status import HTTP_204_NO_CONTENT
from funwalk import config

def register_routes(app: FastAPI) -> None:
    @app.get("/", include_in_schema=False)
    def root():
        return {
            "service": config.EVENT_NAME,
            "registration": "/api/v1/registration/wizard",
            "config": "/api/v1/registration/config",
            "admin": "/admin/api/registrations",
            "docs": "/docs",
        }

    @app.get("/favicon.ico", include_in_schema=False)
    async def favicon():
        return Response(status_code=HTTP_204_NO_CONTENT)
