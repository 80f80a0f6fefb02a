"""
Location prompt dialog.

Rendered once per chat page; opened and closed by the page through
PageState.show_location_prompt.
"""

from nicegui import ui

from app.chat_service.services.location_service import LocationCapture
from frontend.state.app_state import PageState
from frontend.utils.logger import get_logger

logger = get_logger(__name__)

SHARE_LABEL = "Share my current location"
LOCATING_LABEL = "Getting location..."


def render_location_prompt(page_state: PageState, capture: LocationCapture) -> ui.dialog:
    """
    Build the dialog and bind its visibility to the page state.
    """
    with ui.dialog().bind_value(page_state, "show_location_prompt") as dialog:
        with ui.card().classes("w-[425px] p-6 gap-4"):
            ui.label("Share your location").classes("text-2xl font-bold")
            ui.label("We need your location to process your order.").classes(
                "text-lg text-gray-500"
            )

            share_btn = ui.button(SHARE_LABEL, icon="my_location").classes(
                "w-full text-lg py-3"
            )

            async def _share() -> None:
                share_btn.disable()
                share_btn.set_text(LOCATING_LABEL)
                try:
                    await capture.share_current_location()
                finally:
                    share_btn.enable()
                    share_btn.set_text(SHARE_LABEL)

            share_btn.on_click(_share)

            with ui.row().classes("w-full items-center no-wrap"):
                ui.separator().classes("flex-1")
                ui.label("OR").classes("mx-4 text-gray-500")
                ui.separator().classes("flex-1")

            address = (
                ui.input(placeholder="Enter your address manually")
                .props("outlined")
                .classes("w-full text-lg")
            )

            def _submit_manual() -> None:
                if capture.submit_manual(address.value):
                    address.set_value("")

            address.on("keydown.enter", _submit_manual)

            ui.button(
                "Confirm address",
                on_click=_submit_manual,
                color="green",
            ).classes("w-full text-lg py-3")

    logger.debug("Location prompt rendered")
    return dialog
