from app.chat_service.repositories.preference_repository import (
    API_KEY_STORAGE_KEY,
    USE_SPEECH_STORAGE_KEY,
    MemoryStore,
    PreferenceRepository,
)


def test_stored_key_wins_over_provisioned():
    store = MemoryStore({API_KEY_STORAGE_KEY: "stored"})
    repo = PreferenceRepository(store, provisioned_api_key="provisioned")

    assert repo.load_api_key() == "stored"


def test_provisioned_key_is_persisted_on_first_use():
    store = MemoryStore()
    repo = PreferenceRepository(store, provisioned_api_key="provisioned")

    assert repo.load_api_key() == "provisioned"
    assert store[API_KEY_STORAGE_KEY] == "provisioned"


def test_no_key_without_provisioning():
    repo = PreferenceRepository(MemoryStore(), provisioned_api_key="")

    assert repo.load_api_key() is None


def test_blank_key_is_not_saved():
    store = MemoryStore()
    repo = PreferenceRepository(store, provisioned_api_key="")

    assert repo.save_api_key("   ") is None
    assert API_KEY_STORAGE_KEY not in store


def test_speech_preference_defaults_on_and_persists():
    store = MemoryStore()
    repo = PreferenceRepository(store, provisioned_api_key="")

    assert repo.load_use_speech() is True

    repo.save_use_speech(False)

    assert store[USE_SPEECH_STORAGE_KEY] is False
    assert repo.load_use_speech() is False
