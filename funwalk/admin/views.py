from typing import Optional
from fastapi import APIRouter, Request, Depends, Query, HTTPException
from fastapi.responses import RedirectResponse, JSONResponse, Response
from starlette.status import HTTP_303_SEE_OTHER
from funwalk.admin import service as admin_service
from funwalk.errors import ValidationError
from funwalk.utils.rate_limit import optional_rate_limit
from funwalk.utils.security import require_admin, verify_admin_secret, login_admin, logout_admin, admin_gate_enabled
# module funwalk.admin.views

router = APIRouter(prefix="/admin", tags=["Admin"])

@router.post("/login", dependencies=[Depends(optional_rate_limit(times=5, seconds=60))])
async def admin_login(request: Request):
    """Ouvre la session admin. Body JSON {"secret": "..."} ou formulaire secret=..."""
    if not admin_gate_enabled():
        return JSONResponse({"ok": True, "gate": "open"})
    ctype = request.headers.get("content-type", "")
    if ctype.startswith("application/json"):
        try:
            body = await request.json()
        except ValueError:
            raise ValidationError({"body": "Invalid JSON body"})
        secret = str((body or {}).get("secret") or "")
    else:
        form_data = await request.form()
        secret = str(form_data.get("secret") or "")
    if not verify_admin_secret(secret):
        raise HTTPException(status_code=401, detail="Invalid admin secret")
    login_admin(request)
    return JSONResponse({"ok": True})

@router.get("/logout")
@router.post("/logout")
def admin_logout(request: Request):
    logout_admin(request)
    return RedirectResponse(url="/", status_code=HTTP_303_SEE_OTHER)

# API JSON: liste, recherche et filtre de statut
@router.get("/api/registrations")
def admin_list_registrations(
    search: str = "",
    status: str = Query(default="all"),
    user: dict = Depends(require_admin),
):
    rows = admin_service.list_registrations()
    items = admin_service.filter_registrations(rows, search=search, status=status)
    return JSONResponse({"items": items, "count": len(items)})

@router.get("/api/stats")
def admin_stats(user: dict = Depends(require_admin)):
    return JSONResponse(admin_service.compute_stats(admin_service.list_registrations()))

# Déclarée avant /{registration_id} pour ne pas être capturée par le paramètre
@router.get("/api/registrations/export.csv")
def admin_export_csv(format: str = "legacy", user: dict = Depends(require_admin)):
    content = admin_service.export_csv(admin_service.list_registrations(), fmt=format)
    filename = admin_service.csv_filename()
    return Response(
        content=content,
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )

@router.get("/api/registrations/{registration_id}")
def admin_registration_detail(registration_id: str, user: dict = Depends(require_admin)):
    item = admin_service.get_registration(registration_id)
    if not item:
        raise HTTPException(status_code=404, detail="Registration not found")
    return JSONResponse({"item": item})

@router.post("/api/registrations/{registration_id}/status")
async def api_update_status(registration_id: str, request: Request, user: dict = Depends(require_admin)):
    """Body optionnel {"status": "paid"|"pending"}; sans statut, bascule l'état courant."""
    status: Optional[str] = None
    body = await request.body()
    if body:
        try:
            payload = await request.json()
        except ValueError:
            raise ValidationError({"body": "Invalid JSON body"})
        status = (payload or {}).get("status") if isinstance(payload, dict) else None
    updated = admin_service.set_payment_status(registration_id, status)
    if not updated:
        raise HTTPException(status_code=404, detail="Registration not found")
    return JSONResponse({"ok": True, "item": updated})
