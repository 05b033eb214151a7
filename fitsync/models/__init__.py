"""
Models package for the application.
"""

from .user import User
from .bluetooth_device import BluetoothDevice
from .sync_session import SyncSession
from .health_data import HealthData

__all__ = [
    "User",
    "BluetoothDevice",
    "SyncSession",
    "HealthData",
]
