# routers/owner_dashboard.py

from fastapi import APIRouter, Depends

from core.errors import RemoteFetchError, handle_supabase_error
from dependencies.auth import get_current_user, get_stores, require_page
from models.enums import MaintenanceStatus, VerificationStatus
from stores.registry import StoreRegistry
from stores.session import SessionUser


router = APIRouter(
    prefix="/owner",
    tags=["Owner Dashboard"],
    dependencies=[Depends(require_page("/owner"))],
)


# -----------------------------------------------------
# GET /owner
# Occupancy, verified income, open maintenance + payments
# -----------------------------------------------------
@router.get("", summary="Owner dashboard")
def owner_dashboard(
    current_user: SessionUser = Depends(get_current_user),
    stores: StoreRegistry = Depends(get_stores),
):
    try:
        stores.rooms.fetch_all()
        stores.maintenance.fetch_all()
        stores.payments.fetch_all()
    except RemoteFetchError as e:
        raise handle_supabase_error(e, "Failed to load dashboard")

    payments = stores.payments
    maintenance = stores.maintenance

    return {
        "page": "owner_dashboard",
        "user": {"id": current_user.id, "name": current_user.name},
        "occupancy": stores.rooms.occupancy(),
        "income": {
            "total_verified": payments.total_verified(),
            "verified_payments": len(payments.by_status(VerificationStatus.verified)),
        },
        "maintenance": {
            "pending": len(maintenance.by_status(MaintenanceStatus.pending)),
            "in_progress": len(maintenance.by_status(MaintenanceStatus.in_progress)),
        },
        "payments": {
            "pending": len(payments.by_status(VerificationStatus.pending)),
            "rejected": len(payments.by_status(VerificationStatus.rejected)),
        },
        "recent_requests": maintenance.rows[:5],
        "recent_payments": payments.rows[:5],
    }
