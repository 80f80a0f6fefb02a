"""
Pytest configuration and fixtures.
"""

import pytest

from app.chat_service.repositories.preference_repository import (
    MemoryStore,
    PreferenceRepository,
)
from app.chat_service.services.capabilities import Availability
from app.chat_service.services.llm_service import GeminiReply
from app.chat_service.services.mode_registry import get_mode
from app.chat_service.services.orchestrator.conversation_controller import (
    ConversationController,
)


# --------------------------------------------------
# Capability fakes
# --------------------------------------------------
class FakeRecognizer:
    def __init__(self, availability=Availability.AVAILABLE):
        self.availability = availability
        self.starts = []
        self.stop_count = 0
        self.reset_count = 0

    def start(self, on_result, on_end):
        self.starts.append((on_result, on_end))

    def stop(self):
        self.stop_count += 1

    def reset(self):
        self.reset_count += 1
        if self.availability is Availability.DENIED:
            self.availability = Availability.AVAILABLE


class RecordingSynthesizer:
    def __init__(self):
        self.spoken = []
        self.cancel_count = 0

    def speak(self, text):
        self.spoken.append(text)

    def cancel(self):
        self.cancel_count += 1


class RecordingNotifier:
    def __init__(self):
        self.notifications = []

    def notify(self, message, kind="info"):
        self.notifications.append((message, kind))

    @property
    def messages(self):
        return [message for message, _ in self.notifications]


class ScriptedPrompt:
    """Async credential prompt returning queued answers."""

    def __init__(self, *answers):
        self.answers = list(answers)
        self.questions = []

    async def __call__(self, message):
        self.questions.append(message)
        return self.answers.pop(0) if self.answers else None


def echo_reply(*, system_prompt, user_text, api_key):
    return GeminiReply(text=f"reply to {user_text}")


@pytest.fixture
def scripted_prompt():
    return ScriptedPrompt


@pytest.fixture
def store():
    return MemoryStore(geminiApiKey="stored-key")


@pytest.fixture
def recognizer():
    return FakeRecognizer()


@pytest.fixture
def synthesizer():
    return RecordingSynthesizer()


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def make_controller(store, recognizer, synthesizer, notifier):
    """Factory building a controller wired to the fakes above."""

    def _make(mode_key="information", **overrides):
        options = {
            "mode": get_mode(mode_key),
            "preferences": PreferenceRepository(store, provisioned_api_key=""),
            "recognizer": recognizer,
            "synthesizer": synthesizer,
            "notifier": notifier,
            "credential_prompt": ScriptedPrompt(),
            "reply_fn": echo_reply,
            "reveal_seconds": 5.0,
        }
        options.update(overrides)
        return ConversationController(**options)

    return _make
