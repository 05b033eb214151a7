from sqlalchemy import Column, String, ForeignKey, DateTime, Boolean, Integer, Float, JSON, UniqueConstraint, Index
from sqlalchemy.orm import relationship
from datetime import datetime
from fitsync.database.base import Base
from fitsync.enums import DataSource
import cuid


def default_sleep_stages():
    return {"deep": 0, "light": 0, "rem": 0, "awake": 0}


class HealthData(Base):
    """
    One calendar-day aggregate of a device's health metrics for a user.
    date is midnight of the day (naive UTC); one row per (user, device, date).
    """
    __tablename__ = "health_data"

    id = Column(String(25), primary_key=True, index=True, default=lambda: cuid.cuid())
    user_id = Column(String(25), ForeignKey("users.id"), nullable=False, index=True)
    device_id = Column(String(128), nullable=False)
    date = Column(DateTime, nullable=False)

    steps = Column(Integer, nullable=False, default=0)
    heart_rate = Column(Float, nullable=True)       # bpm, 0-300
    calories = Column(Float, nullable=False, default=0)
    distance = Column(Float, nullable=False, default=0)
    sleep_hours = Column(Float, nullable=True)      # 0-24
    active_minutes = Column(Integer, nullable=False, default=0)
    blood_oxygen = Column(Float, nullable=True)     # SpO2 %, 0-100
    blood_pressure = Column(JSON, nullable=True)    # {"systolic": 120, "diastolic": 80}
    temperature = Column(Float, nullable=True)      # celsius, 30-45
    stress_level = Column(Float, nullable=True)     # 0-100

    sleep_stages = Column(JSON, nullable=False, default=default_sleep_stages)  # minutes per stage
    workouts = Column(JSON, nullable=False, default=list)  # [{"type", "duration", "calories", "intensity"}]

    sync_session_id = Column(String(25), ForeignKey("sync_sessions.id"), nullable=True, index=True)
    data_source = Column(String(16), nullable=False, default=DataSource.BLUETOOTH.value)
    is_active = Column(Boolean, nullable=False, default=True)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    user = relationship("User", back_populates="health_data")
    sync_session = relationship("SyncSession", back_populates="health_data")

    __table_args__ = (
        UniqueConstraint("user_id", "device_id", "date", name="uq_health_data_user_device_date"),
        Index("ix_health_data_user_date", "user_id", "date"),
        Index("ix_health_data_device_date", "device_id", "date"),
    )
