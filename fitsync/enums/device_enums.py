"""
Device and sync related enums.
"""

from enum import Enum


class DeviceType(str, Enum):
    SMARTWATCH = "smartwatch"
    FITNESS_BAND = "fitness-band"
    PHONE = "phone"
    TABLET = "tablet"
    HEALTH_MONITOR = "health-monitor"


class SyncStatus(str, Enum):
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"
    FAILED = "failed"
    CANCELLED = "cancelled"


class SyncType(str, Enum):
    FULL = "full"
    INCREMENTAL = "incremental"


class DataSource(str, Enum):
    BLUETOOTH = "bluetooth"
    MANUAL = "manual"
    IMPORT = "import"


class WorkoutCategory(str, Enum):
    CARDIO = "cardio"
    STRENGTH = "strength"
    FLEXIBILITY = "flexibility"
    SPORTS = "sports"


class WorkoutIntensity(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class SyncErrorCode(str, Enum):
    INVALID_DATE = "INVALID_DATE"
    SESSION_TIMEOUT = "SESSION_TIMEOUT"
