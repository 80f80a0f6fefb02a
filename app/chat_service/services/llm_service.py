"""
Gemini REST client for the companion chat.

Performs one generateContent call per user turn and turns the
response into the text shown in the transcript.
"""

from dataclasses import dataclass
from typing import Optional

import requests
from pydantic import ValidationError
from requests import RequestException

from app.chat_service.config import settings
from app.chat_service.services.schemas.gemini_request import (
    Content,
    GeminiRequest,
    Part,
)
from app.chat_service.services.schemas.gemini_response import GeminiResponse
from app.chat_service.utils.logger import get_logger

logger = get_logger(__name__)

CREDENTIAL_ERROR_STATUSES = {"PERMISSION_DENIED", "UNAUTHENTICATED"}


class GeminiRequestError(RuntimeError):
    """Raised when the model endpoint cannot be reached or read."""


@dataclass(frozen=True)
class GeminiReply:
    """
    Text to append as the assistant message.

    error_status is set when the API answered with an error payload.
    """

    text: str
    error_status: Optional[str] = None

    @property
    def is_error(self) -> bool:
        return self.error_status is not None

    @property
    def is_credential_error(self) -> bool:
        if self.error_status in CREDENTIAL_ERROR_STATUSES:
            return True
        return self.is_error and "api key not valid" in self.text.lower()


# ==================================================
# REQUEST
# ==================================================
def build_prompt(system_prompt: str, user_text: str) -> str:
    """Mode instructions followed by the user's turn."""
    return f"{system_prompt}\n\nUser: {user_text}"


def build_request_body(system_prompt: str, user_text: str) -> dict:
    """
    Build the JSON body for a single-turn generateContent call.

    Generation parameters and the harassment safety threshold are fixed.
    """
    request = GeminiRequest(
        contents=[
            Content(
                role="user",
                parts=[Part(text=build_prompt(system_prompt, user_text))],
            )
        ]
    )
    return request.to_payload()


def _endpoint_url() -> str:
    base = settings.GEMINI_API_URL.rstrip("/")
    return f"{base}/models/{settings.GEMINI_MODEL}:generateContent"


# ==================================================
# PUBLIC ENTRY POINT
# ==================================================
def generate_reply(
    *,
    system_prompt: str,
    user_text: str,
    api_key: str,
) -> GeminiReply:
    """
    Ask the model for a reply to one user turn.

    Args:
        system_prompt: Mode instructions.
        user_text: The user's message.
        api_key: Gemini API key, sent as a request header.

    Returns:
        GeminiReply with the first candidate's text, or
        "Error: <message>" when the API answers with an error payload.

    Raises:
        GeminiRequestError: On transport failure or an unreadable response.
    """
    url = _endpoint_url()
    headers = {
        "Content-Type": "application/json",
        "x-goog-api-key": api_key,
    }
    payload = build_request_body(system_prompt, user_text)

    logger.info(
        "Sending generateContent request",
        extra={"model": settings.GEMINI_MODEL, "has_key": bool(api_key)},
    )

    try:
        response = requests.post(
            url,
            json=payload,
            headers=headers,
            timeout=settings.REQUEST_TIMEOUT_SECONDS,
        )
    except RequestException as exc:
        logger.exception(
            "Gemini request failed",
            extra={"url": url},
        )
        raise GeminiRequestError("Failed to reach the assistant service") from exc

    return _parse_response(response)


# ==================================================
# HELPERS
# ==================================================
def _parse_response(response: requests.Response) -> GeminiReply:
    """
    Turn an HTTP response into a GeminiReply.

    Error payloads are returned, not raised: Gemini reports bad keys
    with a 4xx status and an error body the user should see.
    """
    try:
        data = response.json()
    except ValueError as exc:
        logger.exception(
            "Invalid JSON response from Gemini",
            extra={"status_code": response.status_code},
        )
        raise GeminiRequestError("Invalid response received from assistant") from exc

    try:
        parsed = GeminiResponse.model_validate(data)
    except ValidationError as exc:
        logger.exception("Unexpected Gemini response shape")
        raise GeminiRequestError("Invalid response received from assistant") from exc

    if parsed.error is not None:
        logger.warning(
            "Gemini returned an error payload",
            extra={
                "status": parsed.error.status,
                "status_code": response.status_code,
            },
        )
        return GeminiReply(
            text=f"Error: {parsed.error.message}",
            error_status=parsed.error.status or "UNKNOWN",
        )

    try:
        response.raise_for_status()
    except RequestException as exc:
        logger.exception(
            "Gemini returned an HTTP error without details",
            extra={"status_code": response.status_code},
        )
        raise GeminiRequestError("Assistant service returned an error") from exc

    text = parsed.first_text()
    if text is None:
        logger.warning("Gemini response had no candidate text")
        raise GeminiRequestError("Assistant returned no text")

    return GeminiReply(text=text)
