"""Admin API: /admin altında modüler router'lar."""
from fastapi import APIRouter, Depends

from app.admin.deps import require_admin
from app.admin.routers import discounts

admin_router = APIRouter(prefix="/admin", tags=["admin"], dependencies=[Depends(require_admin)])

admin_router.include_router(discounts.router, prefix="/discounts", tags=["admin-discounts"])
