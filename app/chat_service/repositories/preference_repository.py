"""
Per-browser preference storage.

Holds the Gemini API key and the read-aloud preference.
"""

from typing import Any, Optional, Protocol

from app.chat_service.config import settings
from app.chat_service.utils.logger import get_logger

logger = get_logger(__name__)

API_KEY_STORAGE_KEY = "geminiApiKey"
USE_SPEECH_STORAGE_KEY = "useSpeech"


class KeyValueStore(Protocol):
    def get(self, key: str, default: Any = None) -> Any: ...

    def __setitem__(self, key: str, value: Any) -> None: ...


class MemoryStore(dict):
    """In-process store; app.storage.user behaves the same way."""


class PreferenceRepository:
    """
    Credential and speech preference backed by a key-value store.
    """

    def __init__(
        self,
        store: KeyValueStore,
        provisioned_api_key: Optional[str] = None,
    ) -> None:
        self._store = store
        self._provisioned_api_key = (
            provisioned_api_key
            if provisioned_api_key is not None
            else settings.GEMINI_API_KEY
        )

    # ---------------- CREDENTIAL ----------------
    def load_api_key(self) -> Optional[str]:
        """
        Stored key, else the provisioned key (persisted on first use).

        Returns None when neither exists; the caller must ask the user.
        """
        stored = self._store.get(API_KEY_STORAGE_KEY)
        if isinstance(stored, str) and stored.strip():
            return stored

        if self._provisioned_api_key:
            logger.info("Using provisioned Gemini API key")
            self._store[API_KEY_STORAGE_KEY] = self._provisioned_api_key
            return self._provisioned_api_key

        return None

    def save_api_key(self, api_key: str) -> Optional[str]:
        """Persist a non-empty key. Returns the stored value or None."""
        cleaned = (api_key or "").strip()
        if not cleaned:
            return None

        self._store[API_KEY_STORAGE_KEY] = cleaned
        logger.info("Gemini API key updated")
        return cleaned

    # ---------------- SPEECH ----------------
    def load_use_speech(self) -> bool:
        value = self._store.get(USE_SPEECH_STORAGE_KEY)
        if value is None:
            return True
        return bool(value)

    def save_use_speech(self, value: bool) -> None:
        self._store[USE_SPEECH_STORAGE_KEY] = bool(value)
