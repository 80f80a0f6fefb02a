"""
Browser geolocation adapter.
"""

from nicegui import Client

from app.chat_service.services.capabilities import (
    GeolocationDenied,
    GeolocationUnavailable,
)
from app.chat_service.services.schemas.message import Coordinates
from frontend.utils.logger import get_logger

logger = get_logger(__name__)

FIX_TIMEOUT_MS = 10_000

_LOCATE_JS = """
return await new Promise((resolve) => {
    if (!navigator.geolocation) {
        resolve({status: 'unavailable'});
        return;
    }
    navigator.geolocation.getCurrentPosition(
        (position) => resolve({
            status: 'ok',
            latitude: position.coords.latitude,
            longitude: position.coords.longitude,
        }),
        (error) => resolve({status: 'error', code: error.code, message: error.message}),
        {timeout: %d},
    );
});
""" % FIX_TIMEOUT_MS


class BrowserGeolocator:
    """One-shot navigator.geolocation fix."""

    def __init__(self, client: Client) -> None:
        self._client = client

    async def locate(self) -> Coordinates:
        try:
            result = await self._client.run_javascript(
                _LOCATE_JS,
                timeout=FIX_TIMEOUT_MS / 1000 + 5,
            )
        except TimeoutError as exc:
            raise GeolocationDenied("Timed out waiting for a location fix") from exc

        status = (result or {}).get("status")

        if status == "unavailable":
            raise GeolocationUnavailable("Browser has no geolocation support")

        if status != "ok":
            logger.warning(
                "Geolocation error",
                extra={"code": (result or {}).get("code")},
            )
            raise GeolocationDenied((result or {}).get("message") or "Location failed")

        return Coordinates(
            latitude=float(result["latitude"]),
            longitude=float(result["longitude"]),
        )
