# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20260206v1
# ---------------------------------------------------------------------------
"""Pydantic request / response models for the password generator."""

from typing import List

from pydantic import BaseModel, Field


class GeneratedPasswordResponse(BaseModel):
    password: str
    strength: int = Field(ge=0, le=100)


class StrengthRequest(BaseModel):
    password: str


class StrengthResponse(BaseModel):
    strength: int = Field(ge=0, le=100)
    feedback: List[str]
