"""
Device capability interfaces.

Speech recognition, speech synthesis, geolocation and user notifications
live in the browser. The chat logic only sees these protocols, so it can
run against the NiceGUI adapters in frontend.browser or against fakes.
"""

from enum import Enum
from typing import Callable, Protocol

from app.chat_service.services.schemas.message import Coordinates
from app.chat_service.utils.logger import get_logger

logger = get_logger(__name__)


class Availability(str, Enum):
    AVAILABLE = "available"
    UNAVAILABLE = "unavailable"
    DENIED = "denied"


class GeolocationError(RuntimeError):
    """Raised when a location fix cannot be obtained."""


class GeolocationUnavailable(GeolocationError):
    """The device or browser has no geolocation support."""


class GeolocationDenied(GeolocationError):
    """The user refused permission or the fix failed."""


class SpeechRecognizer(Protocol):
    availability: Availability

    def start(
        self,
        on_result: Callable[[str], None],
        on_end: Callable[[], None],
    ) -> None: ...

    def stop(self) -> None: ...

    def reset(self) -> None: ...


class SpeechSynthesizer(Protocol):
    def speak(self, text: str) -> None: ...

    def cancel(self) -> None: ...


class Geolocator(Protocol):
    async def locate(self) -> Coordinates: ...


class Notifier(Protocol):
    def notify(self, message: str, kind: str = "info") -> None: ...


# --------------------------------------------------
# Null implementations
# --------------------------------------------------
class NullSpeechRecognizer:
    """Recognizer for environments without speech input."""

    availability = Availability.UNAVAILABLE

    def start(self, on_result, on_end) -> None:
        logger.debug("Speech recognition unavailable; not starting")

    def stop(self) -> None:
        return None

    def reset(self) -> None:
        return None


class NullSpeechSynthesizer:
    """Synthesizer that stays silent."""

    def speak(self, text: str) -> None:
        logger.debug("Speech synthesis unavailable; skipping")

    def cancel(self) -> None:
        return None


class NullGeolocator:
    async def locate(self) -> Coordinates:
        raise GeolocationUnavailable("Geolocation is not supported")


class LoggingNotifier:
    """Notifier that writes to the log instead of the screen."""

    def notify(self, message: str, kind: str = "info") -> None:
        logger.info("Notification (%s): %s", kind, message)
