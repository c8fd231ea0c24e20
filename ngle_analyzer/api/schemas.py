"""
ngle_analyzer/api/schemas.py

Defines Pydantic models used for API request validation and response serialization.
"""

from typing import Any, Dict, Optional

from pydantic import BaseModel, Field, field_validator


class SentenceAnalysisRequest(BaseModel):
    """Request model for analyzing a single sentence."""

    sentence: str = Field(..., max_length=1000)

    @field_validator("sentence")
    @classmethod
    def sentence_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("sentence must not be blank")
        return value


class SentenceAnalysisResponse(BaseModel):
    """
    Response model for a sentence analysis.

    `available` is False when the service answered with an empty or unusable
    reply; `analysis` is then null.
    """

    sentence: str
    available: bool
    analysis: Optional[Dict[str, Any]] = None


class ServiceStatusResponse(BaseModel):
    """Reports whether the text completion service is usable."""

    configured: bool
    provider: Optional[str] = None
    model: Optional[str] = None
