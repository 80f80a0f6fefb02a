from typing import Optional

from app.chat_service.services.schemas.message import Location


class PageState:
    """Per-page UI state for one chat page."""

    def __init__(self) -> None:
        # Location dialog
        self.show_location_prompt: bool = False
        self.location: Optional[Location] = None

    def open_location_prompt(self) -> None:
        self.show_location_prompt = True

    def close_location_prompt(self) -> None:
        self.show_location_prompt = False
