from __future__ import annotations

from datetime import date
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


class User(BaseModel):
    """Profile of the signed-in athlete."""

    id: int
    name: str = ""
    height_cm: Optional[float] = Field(None, description="Height in centimetres")
    dob: Optional[str] = Field(None, description="Date of birth, ISO-8601")
    sex: Optional[str] = Field(None, description="'M' or 'F'")
    activity_level: Optional[str] = None
    weight_goal: Optional[str] = None

    def birth_date(self) -> Optional[date]:
        if not self.dob:
            return None
        try:
            return date.fromisoformat(self.dob.split("T")[0])
        except ValueError:
            return None


class UserUpdate(BaseModel):
    """Payload accepted by ``POST /user`` and ``PUT /user``."""

    name: str = Field(..., min_length=1)
    height_cm: Optional[float] = Field(None, gt=0)
    dob: Optional[str] = None
    sex: Optional[Literal["M", "F"]] = None
    activity_level: Optional[str] = None
    weight_goal: Optional[str] = None


class PhoneSignIn(BaseModel):
    """Identity-provider token exchanged for a backend session."""

    model_config = ConfigDict(populate_by_name=True)

    id_token: str = Field(..., alias="idToken", min_length=1)
    phone_number: str = Field(..., alias="phoneNumber")
