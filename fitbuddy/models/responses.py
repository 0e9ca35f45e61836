from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, model_serializer


class OperationStatus(BaseModel):
    """Acknowledgement for companion commands that produce no resource body."""

    status: str = Field(..., description="Outcome, e.g. ``logged`` or ``abandoned``.")
    id: Optional[str] = Field(
        None, description="Live-run id the command finished, omitted when the run continues."
    )
    model_config = ConfigDict(json_schema_extra={"required": ["status"]})

    @model_serializer(mode="wrap")
    def _drop_missing_id(self, handler):  # type: ignore[override]
        payload = handler(self)
        if payload.get("id") is None:
            payload.pop("id", None)
        return payload
