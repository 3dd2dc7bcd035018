"""Educational content schemas."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict


class Difficulty(str, Enum):
    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"


class EducationalContent(BaseModel):
    model_config = ConfigDict(frozen=True)

    title: str
    content: str
    difficulty: Difficulty
    category: str


__all__ = ["Difficulty", "EducationalContent"]
