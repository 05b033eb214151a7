"""
Device Registry Service
Pairing, connection status and unpairing of Bluetooth devices.
"""

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import IntegrityError
from sqlalchemy import select, update, desc
from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple

from fitsync.models.bluetooth_device import BluetoothDevice
from fitsync.models.health_data import HealthData
from fitsync.enums import DeviceType
from fitsync.exceptions.errors import NotFoundException
from fitsync.core.logger import get_logger

logger = get_logger("device_service")


class DeviceService:
    """Service for the per-user device registry"""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_device(
        self,
        user_id: str,
        device_id: str,
        active_only: bool = False
    ) -> Optional[BluetoothDevice]:
        stmt = select(BluetoothDevice).where(
            BluetoothDevice.user_id == user_id,
            BluetoothDevice.device_id == device_id
        )
        if active_only:
            stmt = stmt.where(BluetoothDevice.is_active.is_(True))
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()

    async def list_devices(self, user_id: str) -> List[BluetoothDevice]:
        """Active devices, most recently synced first"""
        stmt = (
            select(BluetoothDevice)
            .where(
                BluetoothDevice.user_id == user_id,
                BluetoothDevice.is_active.is_(True)
            )
            .order_by(desc(BluetoothDevice.last_sync))
        )
        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def _reactivate(self, device: BluetoothDevice) -> BluetoothDevice:
        now = datetime.utcnow()
        device.is_connected = True
        device.is_active = True
        device.last_connected = now
        device.last_sync = now
        await self.db.commit()
        await self.db.refresh(device)
        logger.info(f"Reactivated device {device.device_id} for user {device.user_id}")
        return device

    async def pair_device(
        self,
        user_id: str,
        data: Dict[str, Any]
    ) -> Tuple[BluetoothDevice, bool]:
        """
        Pair a device, reactivating an existing (user, device_id) record.
        Returns (device, created).
        """
        device_id = data["device_id"]
        existing = await self.get_device(user_id, device_id)
        if existing:
            return await self._reactivate(existing), False

        now = datetime.utcnow()
        device = BluetoothDevice(
            user_id=user_id,
            device_id=device_id,
            device_name=data["device_name"],
            device_type=data.get("device_type") or DeviceType.SMARTWATCH.value,
            brand=data["brand"],
            model=data["model"],
            mac_address=data.get("mac_address"),
            firmware_version=data.get("firmware_version"),
            is_connected=True,
            last_connected=now,
            last_sync=now
        )
        self.db.add(device)
        try:
            await self.db.commit()
        except IntegrityError:
            # A concurrent pairing inserted the same (user, device_id) first
            await self.db.rollback()
            existing = await self.get_device(user_id, device_id)
            if existing is None:
                raise
            return await self._reactivate(existing), False

        await self.db.refresh(device)
        logger.info(f"Paired new device {device_id} ({device.brand} {device.model}) for user {user_id}")
        return device, True

    async def update_status(
        self,
        user_id: str,
        device_id: str,
        is_connected: bool,
        battery_level: Optional[int] = None,
        signal_strength: Optional[int] = None
    ) -> BluetoothDevice:
        device = await self.get_device(user_id, device_id)
        if not device:
            raise NotFoundException("Device not found")

        now = datetime.utcnow()
        device.is_connected = is_connected
        if battery_level is not None:
            device.battery_level = battery_level
        if signal_strength is not None:
            device.signal_strength = signal_strength

        if is_connected:
            device.last_connected = now
        else:
            device.last_disconnected = now

        await self.db.commit()
        await self.db.refresh(device)
        return device

    async def unpair_device(self, user_id: str, device_id: str) -> BluetoothDevice:
        """Soft-delete the device and deactivate its health data"""
        device = await self.get_device(user_id, device_id, active_only=True)
        if not device:
            raise NotFoundException("Device not found")

        device.is_active = False
        device.is_connected = False
        device.last_disconnected = datetime.utcnow()

        result = await self.db.execute(
            update(HealthData)
            .where(
                HealthData.user_id == user_id,
                HealthData.device_id == device_id
            )
            .values(is_active=False)
        )
        await self.db.commit()

        logger.info(
            f"Unpaired device {device_id} for user {user_id}, "
            f"deactivated {result.rowcount} health data rows"
        )
        return device
