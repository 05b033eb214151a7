"""
Bluetooth Device Routes
Device registry, health-data sync and history endpoints
"""

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List, Optional

from fitsync.database.connection import get_db
from fitsync.middlewares.clerk_auth import get_authenticated_user
from fitsync.models.user import User
from fitsync.api.v1.controllers.bluetooth_controller import BluetoothController
from fitsync.schemas.bluetooth_schemas import (
    PairDeviceRequest,
    DeviceStatusUpdate,
    SyncRequest,
    DeviceResponse,
    HealthDataResponse,
    SyncSessionResponse,
    SyncResultResponse,
    MessageResponse,
)

router = APIRouter(prefix="/bluetooth", tags=["Bluetooth Devices"])


@router.get("/devices", response_model=List[DeviceResponse])
async def list_devices(
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_authenticated_user)
):
    """Active paired devices, most recently synced first"""
    return await BluetoothController.list_devices(user, db)


@router.post("/devices/pair", response_model=DeviceResponse, status_code=status.HTTP_201_CREATED)
async def pair_device(
    payload: PairDeviceRequest,
    response: Response,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_authenticated_user)
):
    """
    Pair a device with the current user

    Returns 201 for a new device, 200 when an existing pairing is reactivated
    """
    device, created = await BluetoothController.pair_device(user, db, payload)
    if not created:
        response.status_code = status.HTTP_200_OK
    return device


@router.put("/devices/{device_id}/status", response_model=DeviceResponse)
async def update_device_status(
    device_id: str,
    payload: DeviceStatusUpdate,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_authenticated_user)
):
    """Update connection flag, battery and signal of a device"""
    return await BluetoothController.update_status(user, db, device_id, payload)


@router.delete("/devices/{device_id}", response_model=MessageResponse)
async def unpair_device(
    device_id: str,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_authenticated_user)
):
    """Unpair a device; its health history is deactivated, not deleted"""
    return await BluetoothController.unpair_device(user, db, device_id)


@router.post("/devices/{device_id}/sync", response_model=SyncResultResponse)
async def sync_device(
    device_id: str,
    payload: SyncRequest,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_authenticated_user)
):
    """
    Sync a batch of health samples from a device

    - **healthData**: samples, one upserted record per calendar day
    - **syncType**: full or incremental (default)

    Returns the session id and the counters of the finished sync session
    """
    return await BluetoothController.sync_device(user, db, device_id, payload)


@router.get("/devices/{device_id}/health-data", response_model=List[HealthDataResponse])
async def get_device_health_data(
    device_id: str,
    start_date: Optional[str] = Query(default=None, alias="startDate"),
    end_date: Optional[str] = Query(default=None, alias="endDate"),
    limit: int = Query(default=30, ge=1, le=1000),
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_authenticated_user)
):
    """Day records of a device, newest first"""
    return await BluetoothController.get_health_data(user, db, device_id, start_date, end_date, limit)


@router.get("/devices/{device_id}/sync-history", response_model=List[SyncSessionResponse])
async def get_device_sync_history(
    device_id: str,
    limit: int = Query(default=20, ge=1, le=1000),
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_authenticated_user)
):
    """Sync sessions of a device, newest first"""
    return await BluetoothController.get_device_sync_history(user, db, device_id, limit)


@router.get("/sync-sessions", response_model=List[SyncSessionResponse])
async def get_sync_sessions(
    limit: int = Query(default=50, ge=1, le=1000),
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_authenticated_user)
):
    """Sync sessions across all devices of the current user"""
    return await BluetoothController.get_sync_sessions(user, db, limit)
