"""
Health Data Sync Service
Applies batches of device health samples as day-level upserts and keeps
the SyncSession audit trail.
"""

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, desc
from datetime import datetime, timedelta
from typing import List, Dict, Any, Optional
import time

from fitsync.models.bluetooth_device import BluetoothDevice
from fitsync.models.health_data import HealthData, default_sleep_stages
from fitsync.models.sync_session import SyncSession
from fitsync.enums import SyncStatus, SyncType, SyncErrorCode
from fitsync.exceptions.errors import NotFoundException
from fitsync.utils.dates import parse_timestamp, start_of_day
from fitsync.core.config import settings
from fitsync.core.logger import get_logger

logger = get_logger("health_sync_service")

# Scalar metrics counted towards SyncSession.data_points
METRIC_FIELDS = (
    "steps",
    "heart_rate",
    "calories",
    "distance",
    "sleep_hours",
    "active_minutes",
    "blood_oxygen",
    "blood_pressure",
    "temperature",
    "stress_level",
)

# Every column a sample may write
WRITABLE_FIELDS = METRIC_FIELDS + ("sleep_stages", "workouts")

# Fixed size estimate per data point
BYTES_PER_DATA_POINT = 64


def generate_session_id(device_id: str) -> str:
    return f"sync_{time.time_ns()}_{device_id}"


class HealthSyncService:
    """Service for syncing device health data to the database"""

    def __init__(self, db: AsyncSession, stale_after: Optional[timedelta] = None):
        self.db = db
        self.stale_after = stale_after or timedelta(minutes=settings.SYNC_SESSION_STALE_MINUTES)

    async def get_active_device(self, user_id: str, device_id: str) -> BluetoothDevice:
        stmt = select(BluetoothDevice).where(
            BluetoothDevice.user_id == user_id,
            BluetoothDevice.device_id == device_id,
            BluetoothDevice.is_active.is_(True)
        )
        result = await self.db.execute(stmt)
        device = result.scalar_one_or_none()
        if not device:
            raise NotFoundException("Device not found")
        return device

    def _resolve_sample_date(self, sample: Dict[str, Any], session: SyncSession) -> datetime:
        """timestamp, else date, else now; unparseable values fall back to now"""
        raw = sample.get("timestamp")
        if raw is None:
            raw = sample.get("date")
        if raw is None:
            return datetime.utcnow()

        try:
            return parse_timestamp(raw)
        except ValueError:
            logger.warning(
                f"Invalid date {raw!r} in sync {session.session_id}, using current time"
            )
            session.add_error(f"Invalid date {raw!r}, used sync time", SyncErrorCode.INVALID_DATE.value)
            return datetime.utcnow()

    @staticmethod
    def _sample_values(sample: Dict[str, Any]) -> Dict[str, Any]:
        values = {field: sample[field] for field in WRITABLE_FIELDS if field in sample}
        if "sleep_stages" in values:
            values["sleep_stages"] = {**default_sleep_stages(), **values["sleep_stages"]}
        return values

    async def _upsert_health_data(
        self,
        user_id: str,
        device_id: str,
        day: datetime,
        sample: Dict[str, Any],
        session: SyncSession
    ) -> HealthData:
        """Insert or overwrite the (user, device, day) row"""
        stmt = select(HealthData).where(
            HealthData.user_id == user_id,
            HealthData.device_id == device_id,
            HealthData.date == day
        )
        result = await self.db.execute(stmt)
        record = result.scalar_one_or_none()

        values = self._sample_values(sample)
        if record:
            # Last write wins; nested lists/objects are replaced, not merged
            for field, value in values.items():
                setattr(record, field, value)
            record.sync_session_id = session.id
            record.is_active = True
        else:
            record = HealthData(
                user_id=user_id,
                device_id=device_id,
                date=day,
                sync_session_id=session.id,
                **values
            )
            self.db.add(record)

        await self.db.commit()
        return record

    async def sync_device(
        self,
        user_id: str,
        device_id: str,
        samples: List[Dict[str, Any]],
        sync_type: SyncType = SyncType.INCREMENTAL
    ) -> Dict[str, Any]:
        """
        Apply a batch of samples for one device.
        Returns: {'session_id', 'data_points', 'health_data_count',
                  'workout_data_count', 'sleep_data_count'}
        """
        device = await self.get_active_device(user_id, device_id)

        logger.info(f"Syncing {len(samples)} health samples from device {device_id} for user {user_id}")

        session = SyncSession(
            user_id=user_id,
            session_id=generate_session_id(device_id),
            device_id=device_id,
            device_name=device.device_name,
            start_time=datetime.utcnow(),
            status=SyncStatus.IN_PROGRESS.value,
            sync_type=SyncType(sync_type).value,
            sync_errors=[]
        )
        self.db.add(session)
        await self.db.commit()

        data_points = 0
        health_data_count = 0
        workout_data_count = 0
        sleep_data_count = 0

        # Strictly in input order so the last sample of a day wins
        for sample in samples:
            day = start_of_day(self._resolve_sample_date(sample, session))
            await self._upsert_health_data(user_id, device_id, day, sample, session)

            data_points += sum(1 for field in METRIC_FIELDS if field in sample)
            workout_data_count += len(sample.get("workouts") or [])
            if sample.get("sleep_stages") is not None:
                sleep_data_count += 1
            health_data_count += 1

        now = datetime.utcnow()
        # Re-read under a row lock; a history read may have timed this session out
        await self.db.refresh(session, with_for_update=True)
        if session.is_finished:
            logger.warning(
                f"Sync {session.session_id} was marked {session.status} while running, keeping that status"
            )
        else:
            session.finish(SyncStatus.COMPLETED, when=now)
        session.data_points = data_points
        session.bytes_transferred = data_points * BYTES_PER_DATA_POINT
        session.health_data_count = health_data_count
        session.workout_data_count = workout_data_count
        session.sleep_data_count = sleep_data_count

        device.last_sync = now
        await self.db.commit()

        logger.info(
            f"Sync {session.session_id} complete: {health_data_count} days, "
            f"{data_points} data points, {workout_data_count} workouts, {sleep_data_count} sleep records"
        )
        return {
            "session_id": session.session_id,
            "data_points": data_points,
            "health_data_count": health_data_count,
            "workout_data_count": workout_data_count,
            "sleep_data_count": sleep_data_count
        }

    async def reconcile_stale_sessions(self, user_id: str, device_id: Optional[str] = None) -> int:
        """
        Mark sessions that never finalized as failed.
        A session still in-progress after stale_after is treated as abandoned.
        """
        cutoff = datetime.utcnow() - self.stale_after
        stmt = select(SyncSession).where(
            SyncSession.user_id == user_id,
            SyncSession.status == SyncStatus.IN_PROGRESS.value,
            SyncSession.start_time < cutoff
        ).with_for_update().execution_options(populate_existing=True)
        if device_id is not None:
            stmt = stmt.where(SyncSession.device_id == device_id)

        result = await self.db.execute(stmt)
        stale = list(result.scalars().all())
        if not stale:
            return 0

        now = datetime.utcnow()
        for session in stale:
            session.finish(SyncStatus.FAILED, when=now)
            session.add_error("Sync session did not complete", SyncErrorCode.SESSION_TIMEOUT.value, when=now)
        await self.db.commit()

        logger.warning(f"Marked {len(stale)} stale sync sessions as failed for user {user_id}")
        return len(stale)

    async def get_health_data(
        self,
        user_id: str,
        device_id: str,
        start_date: Optional[datetime] = None,
        end_date: Optional[datetime] = None,
        limit: int = 30
    ) -> List[HealthData]:
        stmt = select(HealthData).where(
            HealthData.user_id == user_id,
            HealthData.device_id == device_id,
            HealthData.is_active.is_(True)
        )
        if start_date is not None:
            stmt = stmt.where(HealthData.date >= start_date)
        if end_date is not None:
            stmt = stmt.where(HealthData.date <= end_date)

        result = await self.db.execute(stmt.order_by(desc(HealthData.date)).limit(limit))
        return list(result.scalars().all())

    async def get_device_sync_history(
        self,
        user_id: str,
        device_id: str,
        limit: int = 20
    ) -> List[SyncSession]:
        await self.reconcile_stale_sessions(user_id, device_id)
        stmt = (
            select(SyncSession)
            .where(
                SyncSession.user_id == user_id,
                SyncSession.device_id == device_id
            )
            .order_by(desc(SyncSession.start_time))
            .limit(limit)
        )
        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def get_sync_sessions(self, user_id: str, limit: int = 50) -> List[SyncSession]:
        await self.reconcile_stale_sessions(user_id)
        stmt = (
            select(SyncSession)
            .where(SyncSession.user_id == user_id)
            .order_by(desc(SyncSession.start_time))
            .limit(limit)
        )
        result = await self.db.execute(stmt)
        return list(result.scalars().all())
