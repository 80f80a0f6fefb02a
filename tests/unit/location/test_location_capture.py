"""
Tests for the location dialog logic.
"""

from unittest.mock import MagicMock

import pytest

from app.chat_service.services.capabilities import (
    GeolocationDenied,
    GeolocationUnavailable,
    NullGeolocator,
)
from app.chat_service.services.location_service import (
    CURRENT_LOCATION_LABEL,
    LocationCapture,
)
from app.chat_service.services.schemas.message import Coordinates


class FakeGeolocator:
    def __init__(self, result=None, error=None):
        self.result = result
        self.error = error
        self.calls = 0

    async def locate(self):
        self.calls += 1
        if self.error:
            raise self.error
        return self.result


@pytest.mark.asyncio
async def test_device_location_confirms_exact_coordinates(notifier):
    confirm = MagicMock()
    coordinates = Coordinates(latitude=28.6139, longitude=77.2090)
    capture = LocationCapture(
        confirm=confirm,
        notifier=notifier,
        geolocator=FakeGeolocator(result=coordinates),
    )

    location = await capture.share_current_location()

    confirm.assert_called_once_with(CURRENT_LOCATION_LABEL, coordinates)
    assert location.address == "Current Location"
    assert location.coordinates.latitude == 28.6139
    assert location.coordinates.longitude == 77.2090
    assert ("Location shared successfully", "positive") in notifier.notifications
    assert capture.is_locating is False


@pytest.mark.asyncio
async def test_denied_location_falls_back_to_manual(notifier):
    confirm = MagicMock()
    capture = LocationCapture(
        confirm=confirm,
        notifier=notifier,
        geolocator=FakeGeolocator(error=GeolocationDenied("User denied")),
    )

    assert await capture.share_current_location() is None

    confirm.assert_not_called()
    assert "Couldn't get your location. Please enter manually." in notifier.messages
    assert capture.is_locating is False


@pytest.mark.asyncio
async def test_unsupported_geolocation_notifies(notifier):
    confirm = MagicMock()
    capture = LocationCapture(
        confirm=confirm,
        notifier=notifier,
        geolocator=FakeGeolocator(error=GeolocationUnavailable("none")),
    )

    await capture.share_current_location()

    confirm.assert_not_called()
    assert "Geolocation is not supported by your browser" in notifier.messages


@pytest.mark.asyncio
async def test_default_geolocator_is_unavailable(notifier):
    confirm = MagicMock()
    capture = LocationCapture(confirm=confirm, notifier=notifier)

    await capture.share_current_location()

    confirm.assert_not_called()
    assert isinstance(capture._geolocator, NullGeolocator)


@pytest.mark.parametrize("address", ["", "   ", "\t\n"])
def test_blank_manual_address_is_rejected(notifier, address):
    confirm = MagicMock()
    capture = LocationCapture(confirm=confirm, notifier=notifier)

    assert capture.submit_manual(address) is False

    confirm.assert_not_called()
    assert ("Please enter a valid address", "warning") in notifier.notifications


def test_manual_address_confirms_without_coordinates(notifier):
    confirm = MagicMock()
    capture = LocationCapture(confirm=confirm, notifier=notifier)

    assert capture.submit_manual("12 MG Road, Pune") is True

    confirm.assert_called_once_with("12 MG Road, Pune", None)
    assert "Address saved successfully" in notifier.messages
