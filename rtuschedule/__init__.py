"""
Discovery and caching of RTU scheduling data (periods, programs, events).
"""

from rtuschedule.api_client import ScheduleApiClient
from rtuschedule.cache import ExpiringCache
from rtuschedule.discovery import DiscoveryService
from rtuschedule.errors import (
    DiscoveryError,
    InvalidResponseError,
    ScheduleError,
    TransportError,
    ValidationError,
)
from rtuschedule.model import Faculty, StudyPeriod, StudyProgram

__all__ = [
    "DiscoveryError",
    "DiscoveryService",
    "ExpiringCache",
    "Faculty",
    "InvalidResponseError",
    "ScheduleApiClient",
    "ScheduleError",
    "StudyPeriod",
    "StudyProgram",
    "TransportError",
    "ValidationError",
]
