from sqlalchemy import Column, String, ForeignKey, DateTime, Boolean, Integer, UniqueConstraint, Index
from sqlalchemy.orm import relationship
from datetime import datetime
from fitsync.database.base import Base
from fitsync.enums import DeviceType
import cuid


class BluetoothDevice(Base):
    """
    A wearable, phone or health monitor paired with a user.
    device_id is the vendor-assigned identifier, unique per user.
    """
    __tablename__ = "bluetooth_devices"

    id = Column(String(25), primary_key=True, index=True, default=lambda: cuid.cuid())
    user_id = Column(String(25), ForeignKey("users.id"), nullable=False, index=True)

    device_id = Column(String(128), nullable=False)
    device_name = Column(String(128), nullable=False)
    device_type = Column(String(24), nullable=False, default=DeviceType.SMARTWATCH.value)
    brand = Column(String(80), nullable=False)
    model = Column(String(80), nullable=False)
    mac_address = Column(String(32), nullable=True)
    firmware_version = Column(String(80), nullable=True)

    is_connected = Column(Boolean, nullable=False, default=False)
    battery_level = Column(Integer, nullable=False, default=100)    # 0-100
    signal_strength = Column(Integer, nullable=False, default=100)  # 0-100

    last_sync = Column(DateTime, default=datetime.utcnow)
    last_connected = Column(DateTime, nullable=True)
    last_disconnected = Column(DateTime, nullable=True)

    # Unpairing clears this flag; rows are never removed
    is_active = Column(Boolean, nullable=False, default=True)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    user = relationship("User", back_populates="bluetooth_devices")

    __table_args__ = (
        UniqueConstraint("user_id", "device_id", name="uq_bluetooth_device_user_device"),
        Index("ix_bluetooth_device_user_last_sync", "user_id", "last_sync"),
    )
