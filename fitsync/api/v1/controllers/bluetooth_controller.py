"""
Bluetooth Controller
Handles HTTP request/response logic for device registry and health sync endpoints
"""

from fastapi import HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Dict, List, Optional, Tuple

from fitsync.models.user import User
from fitsync.services.device_service import DeviceService
from fitsync.services.health_sync_service import HealthSyncService
from fitsync.schemas.bluetooth_schemas import (
    PairDeviceRequest,
    DeviceStatusUpdate,
    SyncRequest,
    DeviceResponse,
    HealthDataResponse,
    SyncSessionResponse,
    SyncResultResponse,
)
from fitsync.exceptions.errors import ApplicationException, ValidationException
from fitsync.utils.dates import parse_timestamp
from fitsync.core.logger import get_logger

logger = get_logger("bluetooth_controller")


def _parse_date_bound(value: Optional[str], name: str):
    if value is None:
        return None
    try:
        return parse_timestamp(value)
    except ValueError:
        raise ValidationException(f"Invalid {name}: {value}")


class BluetoothController:
    """Controller for Bluetooth device and sync operations."""

    @staticmethod
    async def list_devices(user: User, db: AsyncSession) -> List[DeviceResponse]:
        try:
            devices = await DeviceService(db).list_devices(user.id)
            return [DeviceResponse.model_validate(d) for d in devices]

        except (HTTPException, ApplicationException):
            raise
        except Exception as e:
            logger.error(f"Error listing devices: {e}")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Failed to list devices"
            )

    @staticmethod
    async def pair_device(
        user: User,
        db: AsyncSession,
        payload: PairDeviceRequest
    ) -> Tuple[DeviceResponse, bool]:
        """Pair a device. Returns the device and whether it was newly created."""
        try:
            device, created = await DeviceService(db).pair_device(
                user.id,
                payload.model_dump(mode="json")
            )
            return DeviceResponse.model_validate(device), created

        except (HTTPException, ApplicationException):
            raise
        except Exception as e:
            logger.error(f"Error pairing device {payload.device_id}: {e}")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Failed to pair device"
            )

    @staticmethod
    async def update_status(
        user: User,
        db: AsyncSession,
        device_id: str,
        payload: DeviceStatusUpdate
    ) -> DeviceResponse:
        try:
            device = await DeviceService(db).update_status(
                user.id,
                device_id,
                is_connected=payload.is_connected,
                battery_level=payload.battery_level,
                signal_strength=payload.signal_strength
            )
            return DeviceResponse.model_validate(device)

        except (HTTPException, ApplicationException):
            raise
        except Exception as e:
            logger.error(f"Error updating status of device {device_id}: {e}")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Failed to update device status"
            )

    @staticmethod
    async def unpair_device(user: User, db: AsyncSession, device_id: str) -> Dict:
        try:
            await DeviceService(db).unpair_device(user.id, device_id)
            return {"message": "Device unpaired successfully"}

        except (HTTPException, ApplicationException):
            raise
        except Exception as e:
            logger.error(f"Error unpairing device {device_id}: {e}")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Failed to unpair device"
            )

    @staticmethod
    async def sync_device(
        user: User,
        db: AsyncSession,
        device_id: str,
        payload: SyncRequest
    ) -> SyncResultResponse:
        """Sync a batch of health samples from a paired device."""
        try:
            result = await HealthSyncService(db).sync_device(
                user_id=user.id,
                device_id=device_id,
                samples=[
                    s.model_dump(mode="json", exclude_unset=True, exclude_none=True)
                    for s in payload.health_data
                ],
                sync_type=payload.sync_type
            )
            return SyncResultResponse(**result)

        except (HTTPException, ApplicationException):
            raise
        except Exception as e:
            logger.error(f"Error syncing device {device_id} for user {user.id}: {e}", exc_info=True)
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Failed to sync device data"
            )

    @staticmethod
    async def get_health_data(
        user: User,
        db: AsyncSession,
        device_id: str,
        start_date: Optional[str],
        end_date: Optional[str],
        limit: int
    ) -> List[HealthDataResponse]:
        try:
            rows = await HealthSyncService(db).get_health_data(
                user.id,
                device_id,
                start_date=_parse_date_bound(start_date, "startDate"),
                end_date=_parse_date_bound(end_date, "endDate"),
                limit=limit
            )
            return [HealthDataResponse.model_validate(r) for r in rows]

        except (HTTPException, ApplicationException):
            raise
        except Exception as e:
            logger.error(f"Error reading health data for device {device_id}: {e}")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Failed to fetch health data"
            )

    @staticmethod
    async def get_device_sync_history(
        user: User,
        db: AsyncSession,
        device_id: str,
        limit: int
    ) -> List[SyncSessionResponse]:
        try:
            sessions = await HealthSyncService(db).get_device_sync_history(user.id, device_id, limit)
            return [SyncSessionResponse.model_validate(s) for s in sessions]

        except (HTTPException, ApplicationException):
            raise
        except Exception as e:
            logger.error(f"Error reading sync history for device {device_id}: {e}")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Failed to fetch sync history"
            )

    @staticmethod
    async def get_sync_sessions(user: User, db: AsyncSession, limit: int) -> List[SyncSessionResponse]:
        try:
            sessions = await HealthSyncService(db).get_sync_sessions(user.id, limit)
            return [SyncSessionResponse.model_validate(s) for s in sessions]

        except (HTTPException, ApplicationException):
            raise
        except Exception as e:
            logger.error(f"Error reading sync sessions: {e}")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Failed to fetch sync sessions"
            )
