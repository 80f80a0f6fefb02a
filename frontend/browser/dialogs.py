"""
Notifications and the API key prompt.
"""

from typing import Optional

from nicegui import Client, ui

from frontend.utils.logger import get_logger

logger = get_logger(__name__)


class BrowserNotifier:
    """Toast notifications for one client."""

    def __init__(self, client: Client) -> None:
        self._client = client

    def notify(self, message: str, kind: str = "info") -> None:
        with self._client:
            ui.notify(message, type=kind, position="top")


class ApiKeyPrompt:
    """
    Modal asking for a Gemini API key.

    Resolves to the entered key, or None when cancelled or dismissed.
    """

    def __init__(self, client: Client) -> None:
        self._client = client

    async def __call__(self, message: str) -> Optional[str]:
        with self._client:
            with ui.dialog() as dialog, ui.card().classes("w-[420px] p-6"):
                ui.label(message).classes("text-lg mb-2")
                key_input = (
                    ui.input(
                        label="API key",
                        password=True,
                        password_toggle_button=True,
                    )
                    .props("outlined")
                    .classes("w-full")
                    .on("keydown.enter", lambda: dialog.submit(key_input.value))
                )
                with ui.row().classes("w-full justify-end gap-2 mt-4"):
                    ui.button("Cancel", on_click=lambda: dialog.submit(None)).props(
                        "flat"
                    )
                    ui.button(
                        "Save",
                        on_click=lambda: dialog.submit(key_input.value),
                    )

        logger.info("Prompting for API key")
        result = await dialog
        dialog.delete()

        return result or None
