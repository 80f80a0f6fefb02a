"""
Tests for read-aloud, speech capture and the speech toggle reveal window.
"""

import asyncio
import threading

import pytest

from app.chat_service.services.capabilities import Availability
from app.chat_service.services.llm_service import GeminiReply


# --------------------------------------------------
# Read aloud
# --------------------------------------------------
@pytest.mark.asyncio
async def test_assistant_messages_are_spoken(make_controller, synthesizer):
    controller = make_controller()
    controller.mount()

    await controller.submit("Hello")

    assert synthesizer.spoken == [controller.messages[0].text, "reply to Hello"]


@pytest.mark.asyncio
async def test_stored_preference_disables_speech(make_controller, store, synthesizer):
    store["useSpeech"] = False
    controller = make_controller()
    controller.mount()

    await controller.submit("Hello")

    assert controller.use_speech is False
    assert synthesizer.spoken == []


@pytest.mark.asyncio
async def test_toggle_speech_off_cancels_and_persists(make_controller, store, synthesizer):
    controller = make_controller()
    controller.mount()

    controller.toggle_speech()

    assert controller.use_speech is False
    assert store["useSpeech"] is False
    assert synthesizer.cancel_count == 1


@pytest.mark.asyncio
async def test_toggle_speech_on_repeats_last_reply(make_controller, store, synthesizer):
    store["useSpeech"] = False
    controller = make_controller()
    controller.mount()
    await controller.submit("Hello")

    controller.toggle_speech()

    assert controller.use_speech is True
    assert store["useSpeech"] is True
    assert synthesizer.spoken == ["reply to Hello"]
    assert synthesizer.cancel_count == 0


def test_toggle_speech_on_without_messages_is_silent(make_controller, synthesizer):
    controller = make_controller()
    controller.use_speech = False

    controller.toggle_speech()

    assert controller.use_speech is True
    assert synthesizer.spoken == []


# --------------------------------------------------
# Speech capture
# --------------------------------------------------
def test_toggle_listening_starts_and_streams_transcript(make_controller, recognizer):
    controller = make_controller()

    controller.toggle_listening()

    assert controller.is_listening is True
    assert recognizer.stop_count == 1
    assert len(recognizer.starts) == 1

    on_result, _ = recognizer.starts[0]
    on_result("I need")
    on_result("I need groceries")
    assert controller.input_text == "I need groceries"


def test_toggle_listening_off_stops_capture(make_controller, recognizer):
    controller = make_controller()
    controller.toggle_listening()
    on_result, _ = recognizer.starts[0]

    controller.toggle_listening()
    on_result("late transcript")

    assert controller.is_listening is False
    assert recognizer.stop_count == 2
    assert controller.input_text == ""


def test_recognition_end_clears_listening(make_controller, recognizer):
    changes = []
    controller = make_controller()
    controller.on_change(lambda: changes.append(controller.is_listening))
    controller.toggle_listening()

    _, on_end = recognizer.starts[0]
    on_end()

    assert controller.is_listening is False
    assert changes[-1] is False


def test_stale_session_end_is_ignored(make_controller, recognizer):
    controller = make_controller()
    controller.toggle_listening()
    _, stale_end = recognizer.starts[0]
    controller.toggle_listening()
    controller.toggle_listening()

    stale_end()

    assert controller.is_listening is True
    assert len(recognizer.starts) == 2


@pytest.mark.parametrize(
    "availability, expected",
    [
        (Availability.UNAVAILABLE, "Speech recognition is not supported in this browser."),
        (Availability.DENIED, "Microphone access was denied. Allow it and try again."),
    ],
)
def test_listening_without_recognizer_notifies(
    make_controller, recognizer, notifier, availability, expected
):
    recognizer.availability = availability
    controller = make_controller()

    controller.toggle_listening()

    assert controller.is_listening is False
    assert recognizer.starts == []
    assert expected in notifier.messages


@pytest.mark.asyncio
async def test_teardown_releases_microphone_and_timer(make_controller, recognizer):
    controller = make_controller()
    controller.mount()
    controller.toggle_listening()
    stops_before = recognizer.stop_count

    controller.teardown()
    controller.teardown()

    assert controller.is_listening is False
    assert recognizer.stop_count == stops_before + 2
    assert controller._reveal.pending is False


def test_denied_microphone_can_be_retried(make_controller, recognizer, notifier):
    recognizer.availability = Availability.DENIED
    controller = make_controller()

    controller.toggle_listening()

    assert controller.is_listening is False
    assert recognizer.starts == []
    assert recognizer.reset_count == 1

    controller.toggle_listening()

    assert controller.is_listening is True
    assert len(recognizer.starts) == 1
    assert notifier.messages == [
        "Microphone access was denied. Allow it and try again."
    ]


@pytest.mark.asyncio
async def test_released_microphone_keeps_page_attached(
    make_controller, recognizer, synthesizer
):
    controller = make_controller()
    seen = []
    changes = []
    controller.on_message(seen.append)
    controller.on_change(lambda: changes.append(controller.is_listening))
    controller.mount()
    controller.toggle_listening()
    stops_before = recognizer.stop_count

    controller.release_microphone()
    await controller.submit("Hello again")

    assert controller.is_listening is False
    assert recognizer.stop_count == stops_before + 1
    assert [m.text for m in seen[1:]] == ["Hello again", "reply to Hello again"]
    assert False in changes
    assert synthesizer.spoken[-1] == "reply to Hello again"
    assert controller.speech_toggle_visible is True


@pytest.mark.asyncio
async def test_reply_after_teardown_is_not_revealed_or_spoken(
    make_controller, synthesizer
):
    gate = threading.Event()

    def slow_reply(**kwargs):
        gate.wait(timeout=5)
        return GeminiReply(text="late reply")

    controller = make_controller(reply_fn=slow_reply)
    controller.mount()

    pending = asyncio.create_task(controller.submit("Hello"))
    while not controller.is_loading:
        await asyncio.sleep(0)

    controller.teardown()
    gate.set()
    await pending

    assert controller.messages[-1].text == "late reply"
    assert "late reply" not in synthesizer.spoken
    assert controller._reveal.pending is False


# --------------------------------------------------
# Speech toggle reveal window
# --------------------------------------------------
@pytest.mark.asyncio
async def test_speech_toggle_hides_after_window(make_controller):
    controller = make_controller(reveal_seconds=0.05)
    controller.mount()

    assert controller.speech_toggle_visible is True

    await asyncio.sleep(0.15)

    assert controller.speech_toggle_visible is False


@pytest.mark.asyncio
async def test_new_reply_restarts_reveal_window(make_controller):
    controller = make_controller(reveal_seconds=0.3)
    controller.mount()

    await asyncio.sleep(0.2)
    await controller.submit("Hello")
    await asyncio.sleep(0.2)

    # The greeting's hide would have fired by now.
    assert controller.speech_toggle_visible is True

    await asyncio.sleep(0.3)

    assert controller.speech_toggle_visible is False
