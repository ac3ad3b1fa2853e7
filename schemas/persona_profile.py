"""
Persona Profile Schema

How the coach should phrase things for one user.
"""
from typing import Literal, Optional

from pydantic import BaseModel, Field

Tone = Literal["gentle", "direct", "inspirational", "practical"]
TONES = ("gentle", "direct", "inspirational", "practical")


class PersonaProfile(BaseModel):
    """User phrasing preferences."""

    tone: Tone = Field(default="gentle", description="Phrasing style for engine text")
    display_name: Optional[str] = Field(
        default=None,
        max_length=64,
        description="Replaces the generic address 'друг' when set"
    )
