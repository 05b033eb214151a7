"""
Shared enums for the application.
"""

from .device_enums import (
    DeviceType,
    SyncStatus,
    SyncType,
    DataSource,
    WorkoutCategory,
    WorkoutIntensity,
    SyncErrorCode
)

__all__ = [
    "DeviceType",
    "SyncStatus",
    "SyncType",
    "DataSource",
    "WorkoutCategory",
    "WorkoutIntensity",
    "SyncErrorCode"
]
