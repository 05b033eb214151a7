from sqlalchemy import Column, String, ForeignKey, DateTime, Integer, JSON, Index
from sqlalchemy.orm import relationship
from datetime import datetime
from fitsync.database.base import Base
from fitsync.enums import SyncStatus, SyncType
import cuid


class SyncSession(Base):
    """
    Audit record for one invocation of the device sync endpoint.
    Status only moves forward: in-progress -> completed | failed | cancelled.
    """
    __tablename__ = "sync_sessions"

    id = Column(String(25), primary_key=True, index=True, default=lambda: cuid.cuid())
    user_id = Column(String(25), ForeignKey("users.id"), nullable=False, index=True)
    session_id = Column(String(200), nullable=False, unique=True)
    device_id = Column(String(128), nullable=False)
    device_name = Column(String(128), nullable=False)  # copied at creation

    start_time = Column(DateTime, nullable=False, default=datetime.utcnow)
    end_time = Column(DateTime, nullable=True)
    status = Column(String(16), nullable=False, default=SyncStatus.IN_PROGRESS.value)
    sync_type = Column(String(16), nullable=False, default=SyncType.INCREMENTAL.value)

    data_points = Column(Integer, nullable=False, default=0)
    bytes_transferred = Column(Integer, nullable=False, default=0)  # estimate, not measured
    health_data_count = Column(Integer, nullable=False, default=0)
    workout_data_count = Column(Integer, nullable=False, default=0)
    sleep_data_count = Column(Integer, nullable=False, default=0)

    sync_errors = Column(JSON, nullable=False, default=list)  # [{"timestamp", "message", "code"}]

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    user = relationship("User", back_populates="sync_sessions")
    health_data = relationship("HealthData", back_populates="sync_session")

    __table_args__ = (
        Index("ix_sync_session_user_start", "user_id", "start_time"),
        Index("ix_sync_session_device_start", "device_id", "start_time"),
        Index("ix_sync_session_status", "status"),
    )

    @property
    def is_finished(self) -> bool:
        return self.status not in (None, SyncStatus.IN_PROGRESS.value)

    def finish(self, status: SyncStatus, when: datetime = None):
        """Leave in-progress for a terminal status, stamping end_time once."""
        if status == SyncStatus.IN_PROGRESS:
            raise ValueError("Cannot move a sync session back to in-progress")
        if self.is_finished:
            raise ValueError(
                f"Sync session {self.session_id} already {self.status}, cannot mark {status.value}"
            )
        self.status = status.value
        self.end_time = when or datetime.utcnow()

    def add_error(self, message: str, code: str, when: datetime = None):
        entry = {
            "timestamp": (when or datetime.utcnow()).isoformat(),
            "message": message,
            "code": code,
        }
        # Reassign so the JSON column is flagged dirty
        self.sync_errors = [*(self.sync_errors or []), entry]
