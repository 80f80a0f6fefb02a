"""
Schemas for generateContent responses.

Only the fields the chat reads are modelled; everything else is ignored.
"""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class _LenientModel(BaseModel):
    model_config = ConfigDict(extra="ignore")


class ResponsePart(_LenientModel):
    text: Optional[str] = None


class ResponseContent(_LenientModel):
    parts: List[ResponsePart] = Field(default_factory=list)


class Candidate(_LenientModel):
    content: Optional[ResponseContent] = None


class GeminiError(_LenientModel):
    code: Optional[int] = None
    status: Optional[str] = None
    message: str = ""


class GeminiResponse(_LenientModel):
    """
    Either a list of candidates or an error object.
    """

    candidates: List[Candidate] = Field(default_factory=list)
    error: Optional[GeminiError] = None

    def first_text(self) -> Optional[str]:
        """Text of the first part of the first candidate, if present."""
        if not self.candidates:
            return None

        content = self.candidates[0].content
        if content is None or not content.parts:
            return None

        return content.parts[0].text
