# routers/__init__.py

from fastapi import APIRouter

from .auth import router as auth_router
from .verification import router as verification_router
from .owner_dashboard import router as owner_dashboard_router
from .rooms import router as rooms_router
from .tenants import router as tenants_router
from .maintenance import owner_router as owner_maintenance_router
from .maintenance import tenant_router as tenant_maintenance_router
from .payments import owner_router as owner_payments_router
from .payments import history_router as payment_history_router
from .payments import submission_router as payment_submission_router
from .notifications import owner_router as owner_notifications_router
from .notifications import tenant_router as tenant_notifications_router
from .tenant_portal import dashboard_router as tenant_dashboard_router
from .tenant_portal import profile_router as tenant_profile_router
from .health import router as health_router


# Every page + action router; the catch-all fallback is added separately, last
api_router = APIRouter()

# Auth
api_router.include_router(auth_router)
api_router.include_router(verification_router)

# Owner pages
api_router.include_router(owner_dashboard_router)
api_router.include_router(rooms_router)
api_router.include_router(tenants_router)
api_router.include_router(owner_maintenance_router)
api_router.include_router(owner_payments_router)
api_router.include_router(owner_notifications_router)

# Tenant pages (submission before history: more specific prefix)
api_router.include_router(tenant_dashboard_router)
api_router.include_router(tenant_profile_router)
api_router.include_router(payment_submission_router)
api_router.include_router(payment_history_router)
api_router.include_router(tenant_maintenance_router)
api_router.include_router(tenant_notifications_router)

# Health
api_router.include_router(health_router)

__all__ = ["api_router"]
