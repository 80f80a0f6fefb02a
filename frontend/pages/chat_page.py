"""
Chat page for Sahayak.

One page per mode. The ConversationController owns all conversation
state; this module only renders it and wires browser capabilities in.
"""

from typing import Optional

from nicegui import app, ui

from app.chat_service.repositories.preference_repository import (
    PreferenceRepository,
)
from app.chat_service.services.location_service import LocationCapture
from app.chat_service.services.mode_registry import (
    SHOPPING_MODE_KEY,
    Mode,
    get_mode,
)
from app.chat_service.services.orchestrator.conversation_controller import (
    ConversationController,
)
from app.chat_service.services.schemas.message import (
    Coordinates,
    Location,
    Message,
)
from frontend.browser.dialogs import ApiKeyPrompt, BrowserNotifier
from frontend.browser.geolocation import BrowserGeolocator
from frontend.browser.speech import BrowserSpeechRecognizer, BrowserSpeechSynthesizer
from frontend.layouts.location_prompt import render_location_prompt
from frontend.state.app_state import PageState
from frontend.utils.logger import get_logger

logger = get_logger(__name__)

USER_BUBBLE_COLOR = "#2563EB"

_SCROLL_JS = """
setTimeout(() => {
    const el = document.querySelector('.chat-scroll');
    if (el) {
        el.scrollTo({top: el.scrollHeight, behavior: 'smooth'});
    }
}, 50);
"""


# =================================================
# MAIN PAGE
# =================================================
async def show_chat_page(mode_key: Optional[str]) -> None:
    """
    Render the chat page for a mode and start the conversation.
    """
    mode = get_mode(mode_key)
    client = ui.context.client
    page_state = PageState()

    logger.debug("Rendering chat page", extra={"mode": mode.key})

    notifier = BrowserNotifier(client)
    recognizer = BrowserSpeechRecognizer(client)

    def _confirm_location(address: str, coordinates: Optional[Coordinates]) -> None:
        page_state.location = Location(address=address, coordinates=coordinates)
        page_state.close_location_prompt()
        logger.info("Delivery location set", extra={"has_coordinates": bool(coordinates)})

    capture = LocationCapture(
        confirm=_confirm_location,
        notifier=notifier,
        geolocator=BrowserGeolocator(client),
    )

    controller = ConversationController(
        mode=mode,
        preferences=PreferenceRepository(app.storage.user),
        recognizer=recognizer,
        synthesizer=BrowserSpeechSynthesizer(client),
        notifier=notifier,
        credential_prompt=ApiKeyPrompt(client),
        on_location_request=(
            page_state.open_location_prompt
            if mode.key == SHOPPING_MODE_KEY
            else None
        ),
    )

    with ui.column().classes("h-screen w-full overflow-hidden gap-0"):
        _render_header(mode, page_state)

        with ui.element("div").classes("flex-1 w-full overflow-y-auto chat-scroll"):
            chat_container = ui.column().classes(
                "w-full max-w-4xl mx-auto px-4 py-4 gap-4"
            )
            with ui.row().classes("w-full max-w-4xl mx-auto px-4") as typing_row:
                _render_typing_indicator()
            typing_row.bind_visibility_from(controller, "is_loading")

        mic_btn, speech_btn = _render_input_bar(controller, mode)

    render_location_prompt(page_state, capture)

    def _on_message(message: Message) -> None:
        _render_message(message, chat_container, mode)
        client.run_javascript(_SCROLL_JS)

    def _refresh_controls() -> None:
        mic_btn.props(f"icon={'mic_off' if controller.is_listening else 'mic'}")
        if controller.is_listening:
            mic_btn.classes(add="bg-red-100")
        else:
            mic_btn.classes(remove="bg-red-100")

        speech_btn.props(
            f"icon={'volume_up' if controller.use_speech else 'volume_off'}"
        )

    controller.on_message(_on_message)
    controller.on_change(_refresh_controls)
    client.on_disconnect(controller.release_microphone)
    client.on_delete(controller.teardown)

    await client.connected()
    await recognizer.detect()

    controller.mount()
    _refresh_controls()


# =================================================
# LAYOUT
# =================================================
def _render_header(mode: Mode, page_state: PageState) -> None:
    with ui.row().classes("w-full items-center p-4 border-b shrink-0").style(
        f"background-color: {mode.color}10"
    ):
        with ui.element("div").classes(
            "w-10 h-10 rounded-full flex items-center justify-center text-white"
        ).style(f"background-color: {mode.color}"):
            ui.icon(mode.icon, size="sm")

        ui.label(mode.name).classes("text-2xl font-bold")

        ui.space()

        ui.label().classes("text-sm text-gray-500").bind_text_from(
            page_state,
            "location",
            backward=lambda location: f"Location: {location.address}" if location else "",
        ).bind_visibility_from(page_state, "location", backward=bool)


def _render_typing_indicator() -> None:
    with ui.card().classes("rounded-xl p-4 shadow-none bg-gray-100"):
        ui.html(
            """
            <div class="flex gap-2">
                <div class="w-3 h-3 rounded-full bg-gray-400 animate-pulse"></div>
                <div class="w-3 h-3 rounded-full bg-gray-400 animate-pulse" style="animation-delay: 0.2s"></div>
                <div class="w-3 h-3 rounded-full bg-gray-400 animate-pulse" style="animation-delay: 0.4s"></div>
            </div>
            """,
            sanitize=False,
        )


def _render_input_bar(controller: ConversationController, mode: Mode):
    """
    Mic toggle, text input, send button and the read-aloud toggle.

    Returns the two buttons whose icons follow controller state.
    """

    async def _send() -> None:
        await controller.submit(input_box.value)

    with ui.row().classes("w-full p-4 border-t items-center gap-2 shrink-0 no-wrap"):
        mic_btn = (
            ui.button(icon="mic", on_click=controller.toggle_listening)
            .props("outline round size=lg")
            .tooltip("Speak your message")
        )

        input_box = (
            ui.input(placeholder="Type your message...")
            .props("outlined rounded")
            .classes("flex-1 text-lg")
            .bind_value(controller, "input_text")
            .on("keydown.enter", _send)
        )

        ui.button(icon="send", on_click=_send).props("round size=lg").style(
            f"background-color: {mode.color} !important"
        ).tooltip("Send")

        speech_btn = (
            ui.button(icon="volume_up", on_click=controller.toggle_speech)
            .props("flat round size=lg")
            .tooltip("Read replies aloud")
            .bind_visibility_from(controller, "speech_toggle_visible")
        )

    return mic_btn, speech_btn


# =================================================
# MESSAGES
# =================================================
def _render_message(message: Message, container, mode: Mode) -> None:
    """
    User messages on the right, assistant messages on the left
    tinted with the mode's accent color.
    """
    if message.is_user:
        bubble_style = f"background-color: {USER_BUBBLE_COLOR}; color: white"
    else:
        bubble_style = f"background-color: {mode.color}20"

    with container:
        with ui.row().classes(
            "w-full justify-end" if message.is_user else "w-full justify-start"
        ):
            with ui.card().classes("max-w-[80%] rounded-xl p-4 shadow-none").style(
                bubble_style
            ):
                ui.label(message.text).classes("text-lg whitespace-pre-wrap")
                ui.label(message.display_time()).classes("text-xs mt-1 opacity-70")
