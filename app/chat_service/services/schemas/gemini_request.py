"""
Schemas for generateContent requests.
"""

from typing import List

from pydantic import BaseModel, ConfigDict, Field


class _CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class Part(_CamelModel):
    text: str


class Content(_CamelModel):
    role: str = "user"
    parts: List[Part]


class SafetySetting(_CamelModel):
    category: str = "HARM_CATEGORY_HARASSMENT"
    threshold: str = "BLOCK_MEDIUM_AND_ABOVE"


class GenerationConfig(_CamelModel):
    temperature: float = 0.7
    top_p: float = Field(0.8, alias="topP")
    top_k: int = Field(40, alias="topK")
    max_output_tokens: int = Field(2048, alias="maxOutputTokens")


class GeminiRequest(_CamelModel):
    """
    Body of a single-turn generateContent call.
    """

    contents: List[Content]
    safety_settings: List[SafetySetting] = Field(
        default_factory=lambda: [SafetySetting()],
        alias="safetySettings",
    )
    generation_config: GenerationConfig = Field(
        default_factory=GenerationConfig,
        alias="generationConfig",
    )

    def to_payload(self) -> dict:
        """Serialize with the camelCase field names the API expects."""
        return self.model_dump(by_alias=True)
