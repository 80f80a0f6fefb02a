"""
Browser speech adapters.

Speech recognition and synthesis run in the page through the Web Speech
API. Results come back to Python as NiceGUI events emitted from JavaScript.
"""

import json
from typing import Callable, Optional

from nicegui import Client, ui
from nicegui.events import GenericEventArguments

from app.chat_service.config import settings
from app.chat_service.services.capabilities import Availability
from frontend.utils.logger import get_logger

logger = get_logger(__name__)

TRANSCRIPT_EVENT = "sahayak_transcript"
RECOGNITION_END_EVENT = "sahayak_recognition_end"

_DETECT_JS = "return !!(window.SpeechRecognition || window.webkitSpeechRecognition);"

_START_JS = """
(() => {
    const SR = window.SpeechRecognition || window.webkitSpeechRecognition;
    if (!SR) {
        emitEvent('%(end_event)s', {error: 'unsupported'});
        return;
    }
    if (window._sahayakRecognition) {
        window._sahayakRecognition.onend = null;
        window._sahayakRecognition.stop();
    }
    const recognition = new SR();
    recognition.continuous = true;
    recognition.interimResults = true;
    recognition.lang = %(locale)s;
    let lastError = null;
    recognition.onresult = (event) => {
        const transcript = Array.from(event.results)
            .map((result) => result[0].transcript)
            .join('');
        emitEvent('%(transcript_event)s', {transcript: transcript});
    };
    recognition.onerror = (event) => { lastError = event.error; };
    recognition.onend = () => {
        window._sahayakRecognition = null;
        emitEvent('%(end_event)s', {error: lastError});
    };
    window._sahayakRecognition = recognition;
    recognition.start();
})();
"""

_STOP_JS = """
if (window._sahayakRecognition) {
    window._sahayakRecognition.onend = null;
    window._sahayakRecognition.stop();
    window._sahayakRecognition = null;
}
"""

_SPEAK_JS = """
(() => {
    if (!('speechSynthesis' in window)) return;
    const utterance = new SpeechSynthesisUtterance(%(text)s);
    const voices = window.speechSynthesis.getVoices();
    const preferred = voices.find((voice) =>
        voice.name.includes('Google') ||
        voice.name.includes('Natural') ||
        voice.name.includes('Female')
    );
    if (preferred) utterance.voice = preferred;
    utterance.lang = %(locale)s;
    utterance.rate = %(rate)s;
    utterance.pitch = %(pitch)s;
    window.speechSynthesis.speak(utterance);
})();
"""

_CANCEL_JS = "if ('speechSynthesis' in window) window.speechSynthesis.cancel();"


class BrowserSpeechRecognizer:
    """
    Continuous speech-to-text with interim results.

    Call detect() once the client is connected to learn whether the
    browser supports recognition at all.
    """

    def __init__(self, client: Client) -> None:
        self._client = client
        self.availability = Availability.UNAVAILABLE
        self._on_result: Optional[Callable[[str], None]] = None
        self._on_end: Optional[Callable[[], None]] = None

        with client:
            ui.on(TRANSCRIPT_EVENT, self._handle_transcript)
            ui.on(RECOGNITION_END_EVENT, self._handle_end)

    async def detect(self) -> Availability:
        try:
            supported = await self._client.run_javascript(_DETECT_JS, timeout=3.0)
        except TimeoutError:
            logger.warning("Speech recognition support check timed out")
            supported = False

        self.availability = (
            Availability.AVAILABLE if supported else Availability.UNAVAILABLE
        )
        logger.debug(
            "Speech recognition support checked",
            extra={"availability": self.availability.value},
        )
        return self.availability

    def start(
        self,
        on_result: Callable[[str], None],
        on_end: Callable[[], None],
    ) -> None:
        self._on_result = on_result
        self._on_end = on_end

        self._client.run_javascript(
            _START_JS
            % {
                "locale": json.dumps(settings.SPEECH_LOCALE),
                "transcript_event": TRANSCRIPT_EVENT,
                "end_event": RECOGNITION_END_EVENT,
            }
        )
        logger.info("Speech recognition started")

    def stop(self) -> None:
        self._on_result = None
        self._on_end = None
        self._client.run_javascript(_STOP_JS)

    def reset(self) -> None:
        """Forget a denied permission so the next start asks again."""
        if self.availability is Availability.DENIED:
            self.availability = Availability.AVAILABLE

    def _handle_transcript(self, event: GenericEventArguments) -> None:
        if self._on_result is None:
            return
        self._on_result(str(event.args.get("transcript", "")))

    def _handle_end(self, event: GenericEventArguments) -> None:
        error = (event.args or {}).get("error")

        if error in ("not-allowed", "service-not-allowed"):
            logger.warning("Microphone permission denied")
            self.availability = Availability.DENIED
        elif error:
            logger.info("Speech recognition ended", extra={"error": error})

        on_end = self._on_end
        self._on_result = None
        self._on_end = None

        if on_end is not None:
            on_end()


class BrowserSpeechSynthesizer:
    """Reads text aloud with a preferred natural voice."""

    def __init__(self, client: Client) -> None:
        self._client = client

    def speak(self, text: str) -> None:
        self._client.run_javascript(
            _SPEAK_JS
            % {
                "text": json.dumps(text),
                "locale": json.dumps(settings.SPEECH_LOCALE),
                "rate": json.dumps(settings.SPEECH_RATE),
                "pitch": json.dumps(settings.SPEECH_PITCH),
            }
        )

    def cancel(self) -> None:
        self._client.run_javascript(_CANCEL_JS)
