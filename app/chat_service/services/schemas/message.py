"""
Schemas for transcript messages and captured locations.
"""

from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class Message(BaseModel):
    """
    One transcript entry. Immutable once created.
    """

    model_config = ConfigDict(frozen=True)

    text: str = Field(
        ...,
        description="Message text as shown in the bubble",
    )
    is_user: bool = Field(
        ...,
        description="True for user submissions, False for assistant replies",
    )
    timestamp: datetime = Field(
        default_factory=_utc_now,
        description="Creation time (UTC)",
    )

    def display_time(self) -> str:
        """Local HH:MM label for the bubble footer."""
        return self.timestamp.astimezone().strftime("%H:%M")


class Coordinates(BaseModel):
    """
    Device position reported by the geolocation capability.
    """

    model_config = ConfigDict(frozen=True)

    latitude: float
    longitude: float


class Location(BaseModel):
    """
    Delivery location captured by the location dialog.
    """

    model_config = ConfigDict(frozen=True)

    address: str
    coordinates: Optional[Coordinates] = None
