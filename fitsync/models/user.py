from sqlalchemy import Column, String, Boolean, DateTime
from sqlalchemy.orm import relationship
from datetime import datetime
from fitsync.database.base import Base
import cuid


class User(Base):
    """User model for authentication and user management."""

    __tablename__ = "users"

    id = Column(String(25), primary_key=True, index=True, default=lambda: cuid.cuid())
    email = Column(String(255), unique=True, index=True, nullable=True)
    clerk_id = Column(String(255), unique=True, index=True, nullable=False)
    is_active = Column(Boolean, default=True)
    is_deleted = Column(Boolean, default=False)
    type = Column(String(50), nullable=False, default="user")  # admin, user only

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Device sync relationships
    bluetooth_devices = relationship("BluetoothDevice", back_populates="user")
    health_data = relationship("HealthData", back_populates="user")
    sync_sessions = relationship("SyncSession", back_populates="user")
