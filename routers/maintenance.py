# routers/maintenance.py

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from core.errors import RemoteFetchError, RemoteMutationError, handle_supabase_error
from core.logging_config import logger
from dependencies.auth import get_current_user, get_stores, require_page
from models.enums import MaintenanceStatus, NotificationType, Role
from models.maintenance import (
    REQUEST_TYPES,
    MaintenanceRequestCreate,
    MaintenanceRequestRead,
    MaintenanceStatusUpdate,
)
from stores.registry import StoreRegistry
from stores.session import SessionUser


owner_router = APIRouter(
    prefix="/owner/maintenance",
    tags=["Maintenance"],
    dependencies=[Depends(require_page("/owner/maintenance"))],
)

tenant_router = APIRouter(
    prefix="/tenant/maintenance",
    tags=["Maintenance"],
    dependencies=[Depends(require_page("/tenant/maintenance"))],
)


STATUS_MESSAGES = {
    MaintenanceStatus.in_progress: ("Maintenance in progress", "Work has started on your {type} request.", NotificationType.info),
    MaintenanceStatus.completed: ("Maintenance completed", "Your {type} request has been completed.", NotificationType.success),
    MaintenanceStatus.cancelled: ("Maintenance cancelled", "Your {type} request was cancelled.", NotificationType.warning),
}


def owner_ids(client) -> list[str]:
    """Profiles with the owner role (recipients of new-request notices)."""
    result = client.table("profiles").select("id").eq("role", Role.owner.value).execute()
    return [row["id"] for row in (result.data or [])]


# =============================================================
# OWNER
# =============================================================
@owner_router.get("", summary="Maintenance management page")
def list_requests(
    status: Optional[MaintenanceStatus] = Query(None),
    stores: StoreRegistry = Depends(get_stores),
):
    try:
        stores.maintenance.fetch_all()
    except RemoteFetchError as e:
        raise handle_supabase_error(e, "Failed to fetch maintenance requests")

    rows = stores.maintenance.by_status(status) if status else stores.maintenance.rows
    return {
        "page": "maintenance_management",
        "requests": [MaintenanceRequestRead.model_validate(r) for r in rows],
        "counts": stores.maintenance.status_counts(),
    }


@owner_router.patch("/{request_id}", response_model=MaintenanceRequestRead, summary="Change request status")
def update_request_status(
    request_id: str,
    payload: MaintenanceStatusUpdate,
    stores: StoreRegistry = Depends(get_stores),
):
    try:
        request = stores.maintenance.set_status(request_id, payload.status)
    except RemoteMutationError as e:
        raise handle_supabase_error(e, "Failed to update maintenance request")

    if request is None:
        raise HTTPException(404, "Maintenance request not found")

    logger.info(f"Maintenance request {request_id} → {payload.status}")

    message = STATUS_MESSAGES.get(payload.status)
    if message and request.get("tenant_id"):
        title, body, kind = message
        try:
            stores.notifications.notify(
                request["tenant_id"],
                title,
                body.format(type=request.get("request_type", "maintenance")),
                kind,
                link="/tenant/maintenance",
            )
        except RemoteMutationError as e:
            logger.warning(f"Request {request_id} updated but tenant not notified: {e}")

    return request


# =============================================================
# TENANT
# =============================================================
@tenant_router.get("", summary="My maintenance requests")
def my_requests(
    current_user: SessionUser = Depends(get_current_user),
    stores: StoreRegistry = Depends(get_stores),
):
    try:
        rows = stores.maintenance.fetch_all({"tenant_id": current_user.id})
    except RemoteFetchError as e:
        raise handle_supabase_error(e, "Failed to fetch maintenance requests")

    return {
        "page": "maintenance_requests",
        "requests": [MaintenanceRequestRead.model_validate(r) for r in rows],
        "active_count": len(stores.maintenance.active(current_user.id)),
        "request_types": REQUEST_TYPES,
    }


@tenant_router.post("", response_model=MaintenanceRequestRead, status_code=201, summary="Submit a request")
def submit_request(
    payload: MaintenanceRequestCreate,
    current_user: SessionUser = Depends(get_current_user),
    stores: StoreRegistry = Depends(get_stores),
):
    room = stores.room_for_tenant(current_user.id)
    data = {
        "tenant_id": current_user.id,
        "room_id": room["id"] if room else None,
        **payload.model_dump(),
    }

    try:
        request = stores.maintenance.create(data)
    except RemoteMutationError as e:
        raise handle_supabase_error(e, "Failed to submit maintenance request")

    logger.info(f"Tenant {current_user.id} submitted a {payload.request_type} request")

    try:
        for owner_id in owner_ids(stores.client):
            stores.notifications.notify(
                owner_id,
                "New maintenance request",
                f"{current_user.name} reported a {payload.request_type} issue.",
                NotificationType.info,
                link="/owner/maintenance",
            )
    except Exception as e:
        logger.warning(f"Request {request.get('id')} saved but owners not notified: {e}")

    return request
