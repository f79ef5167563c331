# routers/tenants.py

from fastapi import APIRouter, Depends, HTTPException, Query

from core.errors import RemoteFetchError, RemoteMutationError, handle_supabase_error
from core.logging_config import logger
from dependencies.auth import get_stores, require_page
from models.enums import NotificationType
from models.tenant import TenantCreate, TenantRead, TenantUpdate
from stores.registry import StoreRegistry


router = APIRouter(
    prefix="/owner/tenants",
    tags=["Tenants"],
    dependencies=[Depends(require_page("/owner/tenants"))],
)


# -------------------------------------------------------------
# LIST leases (profile + room expanded)
# -------------------------------------------------------------
@router.get("", summary="Tenant management page")
def list_tenants(
    unverified: bool = Query(False, description="Only tenants awaiting identity verification"),
    stores: StoreRegistry = Depends(get_stores),
):
    try:
        stores.tenants.fetch_all()
    except RemoteFetchError as e:
        raise handle_supabase_error(e, "Failed to fetch tenants")

    rows = stores.tenants.unverified() if unverified else stores.tenants.rows
    return {
        "page": "tenant_management",
        "tenants": [TenantRead.model_validate(t) for t in rows],
        "unverified_count": len(stores.tenants.unverified()),
    }


# -------------------------------------------------------------
# CREATE lease, then mark the room occupied
# -------------------------------------------------------------
@router.post("", response_model=TenantRead, status_code=201, summary="Add a tenant lease")
def create_tenant(payload: TenantCreate, stores: StoreRegistry = Depends(get_stores)):
    try:
        tenant = stores.tenants.create(payload.model_dump())
    except RemoteMutationError as e:
        raise handle_supabase_error(e, "Failed to create tenant")

    # Separate call; a failure here leaves the lease in place
    try:
        stores.rooms.assign_tenant(payload.room_id, payload.id)
    except RemoteMutationError as e:
        logger.warning(f"Lease {payload.id} created but room {payload.room_id} not marked occupied: {e}")

    logger.info(f"Tenant {payload.id} leased room {payload.room_id}")
    return tenant


# -------------------------------------------------------------
# UPDATE lease (PATCH); moving rooms frees the old one
# -------------------------------------------------------------
@router.patch("/{tenant_id}", response_model=TenantRead, summary="Edit a lease")
def update_tenant(tenant_id: str, payload: TenantUpdate, stores: StoreRegistry = Depends(get_stores)):
    patch = payload.model_dump(exclude_unset=True)
    if not patch:
        raise HTTPException(400, "No fields to update")

    try:
        previous = stores.tenants.fetch_one(tenant_id)
        if previous is None:
            raise HTTPException(404, "Tenant not found")
        tenant = stores.tenants.update(tenant_id, patch)
    except RemoteMutationError as e:
        raise handle_supabase_error(e, "Failed to update tenant")

    if tenant is None:
        raise HTTPException(404, "Tenant not found")

    old_room, new_room = previous.get("room_id"), tenant.get("room_id")
    if new_room and new_room != old_room:
        _move_tenant(stores, tenant_id, old_room, new_room)
    return tenant


def _move_tenant(stores: StoreRegistry, tenant_id: str, old_room, new_room: str):
    # Separate calls; failures leave the lease change in place
    if old_room:
        try:
            stores.rooms.release(old_room, tenant_id)
        except RemoteMutationError as e:
            logger.warning(f"Lease {tenant_id} moved but room {old_room} not vacated: {e}")
    try:
        stores.rooms.assign_tenant(new_room, tenant_id)
    except RemoteMutationError as e:
        logger.warning(f"Lease {tenant_id} moved but room {new_room} not marked occupied: {e}")
    logger.info(f"Tenant {tenant_id} moved from room {old_room} to {new_room}")


# -------------------------------------------------------------
# DELETE lease, then free the room
# -------------------------------------------------------------
@router.delete("/{tenant_id}", summary="End a lease")
def delete_tenant(tenant_id: str, stores: StoreRegistry = Depends(get_stores)):
    try:
        lease = stores.tenants.fetch_one(tenant_id)
        if lease is None:
            raise HTTPException(404, "Tenant not found")
        stores.tenants.delete(tenant_id)
    except RemoteMutationError as e:
        raise handle_supabase_error(e, "Failed to delete tenant")

    room_id = lease.get("room_id")
    if room_id:
        try:
            stores.rooms.release(room_id, tenant_id)
        except RemoteMutationError as e:
            logger.warning(f"Lease {tenant_id} deleted but room {room_id} not vacated: {e}")

    logger.info(f"Lease {tenant_id} ended")
    return {"success": True, "deleted_id": tenant_id}


# -------------------------------------------------------------
# VERIFY identity (owner reviewed the Aadhaar details)
# -------------------------------------------------------------
@router.post("/{tenant_id}/verify", response_model=TenantRead, summary="Mark identity verified")
def verify_tenant(tenant_id: str, stores: StoreRegistry = Depends(get_stores)):
    try:
        tenant = stores.tenants.verify_identity(tenant_id)
    except RemoteMutationError as e:
        raise handle_supabase_error(e, "Failed to verify tenant")

    if tenant is None:
        raise HTTPException(404, "Tenant not found")

    try:
        stores.notifications.notify(
            tenant_id,
            "Identity verified",
            "Your Aadhaar details have been verified by the owner.",
            NotificationType.success,
            link="/tenant/profile",
        )
    except RemoteMutationError as e:
        logger.warning(f"Tenant {tenant_id} verified but not notified: {e}")

    return tenant
