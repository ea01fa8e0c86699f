"""
ASGI entrypoint: expose `app` pour les process managers / déploiements.

- En production, un process manager (ex: gunicorn -k uvicorn.workers.UvicornWorker) importe `funwalk.asgi:app`.
- Toute la configuration FastAPI (routes, middlewares, sécurité, lifespan) est centralisée
  dans funwalk.app_setup.factory, ce fichier ne fait qu'exposer l'instance `app`.
"""

from funwalk.app_setup.factory import create_app

app = create_app()

if __name__ == "__main__":
    import os
    import uvicorn
    uvicorn.run(
        "funwalk.asgi:app",
        host="0.0.0.0",
        port=int(os.getenv("PORT", "8000")),
        reload=True,
    )
