"""
Registre central des routers (API v1, admin, health).
- API v1: registration (assistant + paiement), payments (webhook Stripe)
- Admin: admin_router
- Health: health_router
"""
from fastapi import FastAPI
from funwalk.registrations import views as registrations_views
from funwalk.payments import views as payments_views
from funwalk.admin.views import router as admin_router
from funwalk.health.router import router as health_router

def register_routers(app: FastAPI) -> None:
    # API v1
    app.include_router(registrations_views.router)
    app.include_router(payments_views.router)
    # Admin
    app.include_router(admin_router)
    # Health & monitoring
    app.include_router(health_router)
