"""
Conversation controller for a single chat page.

This module coordinates:
- The message transcript and input box state
- One model request per user turn, with busy rejection
- Credential prompting when the key is missing or rejected
- Speech input/output toggles and the speech toggle reveal window
- The shopping-mode location request

It holds no UI objects; the NiceGUI page subscribes through on_message
and on_change and injects browser-backed capabilities.
"""

import asyncio
from enum import Enum
from typing import Awaitable, Callable, List, Optional

from app.chat_service.config import settings
from app.chat_service.repositories.preference_repository import (
    PreferenceRepository,
)
from app.chat_service.services.capabilities import (
    Availability,
    LoggingNotifier,
    Notifier,
    NullSpeechRecognizer,
    NullSpeechSynthesizer,
    SpeechRecognizer,
    SpeechSynthesizer,
)
from app.chat_service.services.intent_classifier import has_order_intent
from app.chat_service.services.llm_service import GeminiReply, generate_reply
from app.chat_service.services.mode_registry import SHOPPING_MODE_KEY, Mode
from app.chat_service.services.reveal_window import RevealWindow
from app.chat_service.services.schemas.message import Message
from app.chat_service.utils.logger import get_logger

logger = get_logger(__name__)

GREETING_TEMPLATE = "Hello! I'm your {name} assistant. How can I help you today?"
APOLOGY_TEXT = "Sorry, I encountered an error. Please try again later."

ASK_KEY_PROMPT = "Please enter your Gemini API Key:"
REPLACE_KEY_PROMPT = "Your Gemini API key was rejected. Please enter a valid key:"

ReplyFn = Callable[..., GeminiReply]
CredentialPrompt = Callable[[str], Awaitable[Optional[str]]]


class SubmitOutcome(str, Enum):
    SENT = "sent"
    IGNORED = "ignored"
    BUSY = "busy"
    NO_CREDENTIAL = "no_credential"


async def _no_credential_prompt(message: str) -> Optional[str]:
    return None


class ConversationController:
    """
    UI state machine for one conversation in one mode.
    """

    def __init__(
        self,
        *,
        mode: Mode,
        preferences: PreferenceRepository,
        recognizer: Optional[SpeechRecognizer] = None,
        synthesizer: Optional[SpeechSynthesizer] = None,
        notifier: Optional[Notifier] = None,
        credential_prompt: Optional[CredentialPrompt] = None,
        on_location_request: Optional[Callable[[], None]] = None,
        reply_fn: Optional[ReplyFn] = None,
        reveal_seconds: Optional[float] = None,
    ) -> None:
        self.mode = mode
        self._preferences = preferences
        self._recognizer = recognizer or NullSpeechRecognizer()
        self._synthesizer = synthesizer or NullSpeechSynthesizer()
        self._notifier = notifier or LoggingNotifier()
        self._credential_prompt = credential_prompt or _no_credential_prompt
        self._on_location_request = on_location_request
        self._reply_fn = reply_fn or generate_reply

        self.messages: List[Message] = []
        self.input_text: str = ""
        self.is_listening: bool = False
        self.is_loading: bool = False
        self.use_speech: bool = True
        self.api_key: Optional[str] = None

        self._reveal = RevealWindow(
            reveal_seconds
            if reveal_seconds is not None
            else settings.SPEECH_TOGGLE_REVEAL_SECONDS,
            on_change=lambda _visible: self._emit_change(),
        )
        self._recognition_session = 0
        self._submitting = False
        self._torn_down = False
        self._message_listeners: List[Callable[[Message], None]] = []
        self._change_listeners: List[Callable[[], None]] = []

    # =================================================
    # OBSERVERS
    # =================================================
    def on_message(self, listener: Callable[[Message], None]) -> None:
        self._message_listeners.append(listener)

    def on_change(self, listener: Callable[[], None]) -> None:
        self._change_listeners.append(listener)

    def _emit_change(self) -> None:
        for listener in list(self._change_listeners):
            listener()

    @property
    def speech_toggle_visible(self) -> bool:
        return self._reveal.visible

    def last_assistant_message(self) -> Optional[Message]:
        for message in reversed(self.messages):
            if not message.is_user:
                return message
        return None

    # =================================================
    # LIFECYCLE
    # =================================================
    def mount(self) -> None:
        """
        Load stored preferences and seed the greeting.

        Must run inside the event loop; the greeting starts the reveal window.
        """
        self.api_key = self._preferences.load_api_key()
        self.use_speech = self._preferences.load_use_speech()

        logger.info(
            "Conversation mounted",
            extra={
                "mode": self.mode.key,
                "has_key": bool(self.api_key),
                "use_speech": self.use_speech,
            },
        )

        self.messages = []
        self._append(
            Message(
                text=GREETING_TEMPLATE.format(name=self.mode.name),
                is_user=False,
            )
        )

    def release_microphone(self) -> None:
        """Stop speech capture without ending the conversation."""
        self._recognition_session += 1
        self._recognizer.stop()
        if self.is_listening:
            self.is_listening = False
            self._emit_change()

    def teardown(self) -> None:
        """
        Release the microphone and pending timers. Idempotent.

        Replies still in flight are recorded but neither revealed nor spoken.
        """
        self._torn_down = True
        self._message_listeners.clear()
        self._change_listeners.clear()
        self.release_microphone()
        self._reveal.cancel()
        logger.debug("Conversation torn down", extra={"mode": self.mode.key})

    # =================================================
    # SUBMIT
    # =================================================
    async def submit(self, text: Optional[str] = None) -> SubmitOutcome:
        """
        Send one user turn and append the assistant's reply.

        Uses the input box text when text is None. Only one request may
        be outstanding; later submissions are rejected as BUSY.
        """
        raw = self.input_text if text is None else text
        cleaned = raw.strip()

        if not cleaned:
            logger.debug("Empty input ignored")
            return SubmitOutcome.IGNORED

        if self._submitting:
            logger.info("Submission rejected; a reply is still pending")
            self._notifier.notify("Please wait for the current reply.", "warning")
            return SubmitOutcome.BUSY

        self._submitting = True

        try:
            if not self.api_key and not await self._ask_for_credential():
                return SubmitOutcome.NO_CREDENTIAL

            self._append(Message(text=cleaned, is_user=True))
            self.input_text = ""
            self.is_loading = True
            self._emit_change()

            if self.mode.key == SHOPPING_MODE_KEY and has_order_intent(cleaned):
                self._request_location()

            reply = await self._fetch_reply(cleaned)
            self._append(Message(text=reply.text, is_user=False))
            self.is_loading = False
            self._emit_change()

            if reply.is_credential_error and not self._torn_down:
                await self._replace_credential()

            return SubmitOutcome.SENT

        finally:
            self._submitting = False
            if self.is_loading:
                self.is_loading = False
                self._emit_change()

    async def _fetch_reply(self, user_text: str) -> GeminiReply:
        try:
            return await asyncio.to_thread(
                self._reply_fn,
                system_prompt=self.mode.system_prompt,
                user_text=user_text,
                api_key=self.api_key,
            )
        except Exception:
            logger.exception(
                "Assistant request failed",
                extra={"mode": self.mode.key},
            )
            return GeminiReply(text=APOLOGY_TEXT)

    def _request_location(self) -> None:
        if self._on_location_request is None:
            logger.debug("Order intent detected but no location handler set")
            return

        logger.info("Order intent detected; requesting location")
        self._on_location_request()

    # =================================================
    # CREDENTIAL
    # =================================================
    async def _ask_for_credential(self) -> bool:
        key = await self._credential_prompt(ASK_KEY_PROMPT)
        saved = self._preferences.save_api_key(key) if key else None

        if not saved:
            self._notifier.notify("API key is required to continue", "negative")
            return False

        self.api_key = saved
        return True

    async def _replace_credential(self) -> None:
        logger.warning("Gemini rejected the API key; asking for a new one")

        key = await self._credential_prompt(REPLACE_KEY_PROMPT)
        saved = self._preferences.save_api_key(key) if key else None

        if saved:
            self.api_key = saved
            self._notifier.notify("API key updated. Please try again.", "positive")
        else:
            self._notifier.notify("API key is required to continue", "warning")

    # =================================================
    # SPEECH
    # =================================================
    def toggle_listening(self) -> None:
        """
        Flip speech capture.

        The running capture is stopped on every flip; a new one starts
        when the flag turns on.
        """
        self.is_listening = not self.is_listening
        self._sync_recognition()
        self._emit_change()

    def _sync_recognition(self) -> None:
        self._recognition_session += 1
        self._recognizer.stop()

        if not self.is_listening:
            return

        availability = self._recognizer.availability
        if availability is not Availability.AVAILABLE:
            if availability is Availability.DENIED:
                self._notifier.notify(
                    "Microphone access was denied. Allow it and try again.",
                    "warning",
                )
                # The next toggle asks the browser again
                self._recognizer.reset()
            else:
                self._notifier.notify(
                    "Speech recognition is not supported in this browser.",
                    "warning",
                )
            self.is_listening = False
            return

        session = self._recognition_session
        self._recognizer.start(
            on_result=lambda transcript: self._on_transcript(session, transcript),
            on_end=lambda: self._on_recognition_end(session),
        )

    def _on_transcript(self, session: int, transcript: str) -> None:
        if session != self._recognition_session:
            return
        self.input_text = transcript
        self._emit_change()

    def _on_recognition_end(self, session: int) -> None:
        if session != self._recognition_session or not self.is_listening:
            return
        self.is_listening = False
        self._emit_change()

    def toggle_speech(self) -> None:
        """
        Flip read-aloud and persist it.

        Turning off silences any ongoing speech; turning on reads the
        latest assistant message immediately.
        """
        self.use_speech = not self.use_speech
        self._preferences.save_use_speech(self.use_speech)

        if not self.use_speech:
            self._synthesizer.cancel()
        else:
            last = self.last_assistant_message()
            if last is not None:
                self._synthesizer.speak(last.text)

        self._emit_change()

    # =================================================
    # TRANSCRIPT
    # =================================================
    def _append(self, message: Message) -> None:
        self.messages.append(message)

        for listener in list(self._message_listeners):
            listener(message)

        if message.is_user or self._torn_down:
            return

        self._reveal.show()

        if self.use_speech:
            self._synthesizer.speak(message.text)
