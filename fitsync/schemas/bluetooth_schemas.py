"""
Bluetooth device and health sync API schemas.
Wire format is camelCase; snake_case is accepted on input as well.
"""
from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel
from typing import Optional, List, Union
from datetime import datetime

from fitsync.enums import DeviceType, SyncType, WorkoutCategory, WorkoutIntensity


class CamelModel(BaseModel):
    class Config:
        alias_generator = to_camel
        populate_by_name = True
        from_attributes = True


# ============================================================================
# Requests
# ============================================================================

class PairDeviceRequest(CamelModel):
    """Device details reported by the browser after a Bluetooth pairing"""
    device_id: str = Field(..., min_length=1, max_length=128, description="Vendor-assigned device id")
    device_name: str = Field(..., min_length=1, max_length=128)
    device_type: DeviceType = Field(default=DeviceType.SMARTWATCH)
    brand: str = Field(..., min_length=1, max_length=80)
    model: str = Field(..., min_length=1, max_length=80)
    mac_address: Optional[str] = Field(default=None, max_length=32)
    firmware_version: Optional[str] = Field(default=None, max_length=80)

    class Config:
        json_schema_extra = {
            "example": {
                "deviceId": "watch-1",
                "deviceName": "Acme Watch",
                "deviceType": "smartwatch",
                "brand": "Acme",
                "model": "X1",
                "macAddress": "AA:BB:CC:DD:EE:FF",
                "firmwareVersion": "1.4.2"
            }
        }


class DeviceStatusUpdate(CamelModel):
    """Connection state reported by the client"""
    is_connected: bool
    battery_level: Optional[int] = Field(default=None, ge=0, le=100)
    signal_strength: Optional[int] = Field(default=None, ge=0, le=100)


class BloodPressureInput(CamelModel):
    systolic: Optional[float] = Field(default=None, ge=0)
    diastolic: Optional[float] = Field(default=None, ge=0)


class SleepStagesInput(CamelModel):
    """Minutes spent in each sleep stage"""
    deep: float = Field(default=0, ge=0)
    light: float = Field(default=0, ge=0)
    rem: float = Field(default=0, ge=0)
    awake: float = Field(default=0, ge=0)


class WorkoutSummaryInput(CamelModel):
    type: Optional[WorkoutCategory] = None
    duration: Optional[float] = Field(default=None, ge=0, description="Minutes")
    calories: Optional[float] = Field(default=None, ge=0)
    intensity: Optional[WorkoutIntensity] = None


class HealthSampleInput(CamelModel):
    """
    One health sample. Every field is optional; unknown keys are ignored.
    date/timestamp are kept raw, booleans included so they are not coerced
    to epoch 1. A malformed value is recovered per sample instead of
    rejecting the batch.
    """
    date: Optional[Union[bool, str, int, float]] = None
    timestamp: Optional[Union[bool, str, int, float]] = None

    steps: Optional[int] = Field(default=None, ge=0)
    heart_rate: Optional[float] = Field(default=None, ge=0, le=300)
    calories: Optional[float] = Field(default=None, ge=0)
    distance: Optional[float] = Field(default=None, ge=0)
    sleep_hours: Optional[float] = Field(default=None, ge=0, le=24)
    active_minutes: Optional[int] = Field(default=None, ge=0)
    blood_oxygen: Optional[float] = Field(default=None, ge=0, le=100)
    blood_pressure: Optional[BloodPressureInput] = None
    temperature: Optional[float] = Field(default=None, ge=30, le=45)
    stress_level: Optional[float] = Field(default=None, ge=0, le=100)
    sleep_stages: Optional[SleepStagesInput] = None
    workouts: Optional[List[WorkoutSummaryInput]] = None


class SyncRequest(CamelModel):
    """Batch of health samples for one device"""
    health_data: List[HealthSampleInput] = Field(default_factory=list)
    sync_type: SyncType = Field(default=SyncType.INCREMENTAL)

    class Config:
        json_schema_extra = {
            "example": {
                "healthData": [
                    {
                        "timestamp": "2024-01-05T08:00:00Z",
                        "steps": 1000,
                        "heartRate": 72
                    }
                ],
                "syncType": "incremental"
            }
        }


# ============================================================================
# Responses
# ============================================================================

class DeviceResponse(CamelModel):
    id: str
    user_id: str
    device_id: str
    device_name: str
    device_type: str
    brand: str
    model: str
    mac_address: Optional[str] = None
    firmware_version: Optional[str] = None
    is_connected: bool
    battery_level: int
    signal_strength: int
    last_sync: Optional[datetime] = None
    last_connected: Optional[datetime] = None
    last_disconnected: Optional[datetime] = None
    is_active: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class HealthDataResponse(CamelModel):
    id: str
    user_id: str
    device_id: str
    date: datetime
    steps: int
    heart_rate: Optional[float] = None
    calories: float
    distance: float
    sleep_hours: Optional[float] = None
    active_minutes: int
    blood_oxygen: Optional[float] = None
    blood_pressure: Optional[dict] = None
    temperature: Optional[float] = None
    stress_level: Optional[float] = None
    sleep_stages: dict
    workouts: List[dict]
    sync_session_id: Optional[str] = None
    data_source: str
    is_active: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class SyncErrorEntry(CamelModel):
    timestamp: str
    message: str
    code: str


class SyncSessionResponse(CamelModel):
    id: str
    user_id: str
    session_id: str
    device_id: str
    device_name: str
    start_time: datetime
    end_time: Optional[datetime] = None
    status: str
    sync_type: str
    data_points: int
    bytes_transferred: int
    health_data_count: int
    workout_data_count: int
    sleep_data_count: int
    sync_errors: List[SyncErrorEntry]
    created_at: Optional[datetime] = None


class SyncResultResponse(CamelModel):
    """Counters of a finished sync"""
    session_id: str
    data_points: int
    health_data_count: int
    workout_data_count: int
    sleep_data_count: int


class MessageResponse(BaseModel):
    message: str
