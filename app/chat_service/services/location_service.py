"""
Location capture for shopping orders.

Two ways in, one way out: a device fix or a typed address, both ending
in confirm(address, coordinates).
"""

from typing import Callable, Optional

from app.chat_service.services.capabilities import (
    Geolocator,
    GeolocationError,
    GeolocationUnavailable,
    LoggingNotifier,
    Notifier,
    NullGeolocator,
)
from app.chat_service.services.schemas.message import Coordinates, Location
from app.chat_service.utils.logger import get_logger

logger = get_logger(__name__)

CURRENT_LOCATION_LABEL = "Current Location"

ConfirmFn = Callable[[str, Optional[Coordinates]], None]


class LocationCapture:
    """
    Logic behind the location dialog. Visibility belongs to the page.
    """

    def __init__(
        self,
        *,
        confirm: ConfirmFn,
        notifier: Optional[Notifier] = None,
        geolocator: Optional[Geolocator] = None,
    ) -> None:
        self._confirm = confirm
        self._notifier = notifier or LoggingNotifier()
        self._geolocator = geolocator or NullGeolocator()
        self.is_locating = False

    async def share_current_location(self) -> Optional[Location]:
        """
        Request one device fix and confirm it.

        On failure the user is told to type the address instead.
        """
        self.is_locating = True
        try:
            coordinates = await self._geolocator.locate()

        except GeolocationUnavailable:
            logger.info("Geolocation unsupported")
            self._notifier.notify(
                "Geolocation is not supported by your browser", "negative"
            )
            return None

        except GeolocationError:
            logger.warning("Geolocation failed", exc_info=True)
            self._notifier.notify(
                "Couldn't get your location. Please enter manually.", "negative"
            )
            return None

        finally:
            self.is_locating = False

        self._confirm(CURRENT_LOCATION_LABEL, coordinates)
        self._notifier.notify("Location shared successfully", "positive")
        logger.info("Device location captured")

        return Location(address=CURRENT_LOCATION_LABEL, coordinates=coordinates)

    def submit_manual(self, address: str) -> bool:
        """
        Confirm a typed address. Blank input is rejected.
        """
        if not (address or "").strip():
            self._notifier.notify("Please enter a valid address", "warning")
            return False

        self._confirm(address, None)
        self._notifier.notify("Address saved successfully", "positive")
        logger.info("Manual address captured")
        return True
