# routers/rooms.py

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from core.errors import RemoteFetchError, RemoteMutationError, handle_supabase_error
from core.logging_config import logger
from dependencies.auth import get_stores, require_page
from models.enums import RoomStatus
from models.meter_reading import MeterReadingCreate, MeterReadingRead
from models.room import RoomCreate, RoomRead, RoomUpdate
from stores.registry import StoreRegistry


router = APIRouter(
    prefix="/owner/rooms",
    tags=["Rooms"],
    dependencies=[Depends(require_page("/owner/rooms"))],
)


# -------------------------------------------------------------
# LIST rooms (+ occupancy summary)
# -------------------------------------------------------------
@router.get("", summary="Room management page")
def list_rooms(
    status: Optional[RoomStatus] = Query(None, description="occupied | available"),
    stores: StoreRegistry = Depends(get_stores),
):
    try:
        stores.rooms.fetch_all()
    except RemoteFetchError as e:
        raise handle_supabase_error(e, "Failed to fetch rooms")

    rows = stores.rooms.by_status(status) if status else stores.rooms.rows
    return {
        "page": "room_management",
        "rooms": [RoomRead.model_validate(r) for r in rows],
        "occupancy": stores.rooms.occupancy(),
    }


# -------------------------------------------------------------
# CREATE room
# -------------------------------------------------------------
@router.post("", response_model=RoomRead, status_code=201, summary="Add a room")
def create_room(payload: RoomCreate, stores: StoreRegistry = Depends(get_stores)):
    try:
        room = stores.rooms.create(payload.model_dump())
    except RemoteMutationError as e:
        raise handle_supabase_error(e, "Failed to create room")

    logger.info(f"Room {room.get('room_number')} created")
    return room


# -------------------------------------------------------------
# UPDATE room (PATCH)
# -------------------------------------------------------------
@router.patch("/{room_id}", response_model=RoomRead, summary="Edit a room")
def update_room(room_id: str, payload: RoomUpdate, stores: StoreRegistry = Depends(get_stores)):
    patch = payload.model_dump(exclude_unset=True)
    if not patch:
        raise HTTPException(400, "No fields to update")

    try:
        room = stores.rooms.update(room_id, patch)
    except RemoteMutationError as e:
        raise handle_supabase_error(e, "Failed to update room")

    if room is None:
        raise HTTPException(404, "Room not found")
    return room


# -------------------------------------------------------------
# DELETE room
# -------------------------------------------------------------
@router.delete("/{room_id}", summary="Remove a room")
def delete_room(room_id: str, stores: StoreRegistry = Depends(get_stores)):
    try:
        stores.rooms.delete(room_id)
    except RemoteMutationError as e:
        raise handle_supabase_error(e, "Failed to delete room")

    logger.info(f"Room {room_id} deleted")
    return {"success": True, "deleted_id": room_id}


# -------------------------------------------------------------
# METER READINGS (per room)
# -------------------------------------------------------------
@router.get("/{room_id}/meter-readings", summary="Meter readings for a room")
def list_meter_readings(room_id: str, stores: StoreRegistry = Depends(get_stores)):
    try:
        readings = stores.meter_readings.fetch_all({"room_id": room_id})
    except RemoteFetchError as e:
        raise handle_supabase_error(e, "Failed to fetch meter readings")

    return {
        "room_id": room_id,
        "readings": [MeterReadingRead.model_validate(r) for r in readings],
        "consumption": stores.meter_readings.consumption(room_id),
    }


@router.post(
    "/{room_id}/meter-readings",
    response_model=MeterReadingRead,
    status_code=201,
    summary="Record a meter reading",
)
def create_meter_reading(
    room_id: str,
    payload: MeterReadingCreate,
    stores: StoreRegistry = Depends(get_stores),
):
    try:
        return stores.meter_readings.create({"room_id": room_id, **payload.model_dump()})
    except RemoteMutationError as e:
        raise handle_supabase_error(e, "Failed to record meter reading")
