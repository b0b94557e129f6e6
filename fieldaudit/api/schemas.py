"""Response models for the HTTP surface."""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class Envelope(BaseModel):
    """Uniform response body: {"isOK": bool, "msg": str}, msg omitted on success."""

    model_config = ConfigDict(populate_by_name=True)

    is_ok: bool = Field(alias="isOK")
    msg: Optional[str] = None

    def to_content(self) -> dict:
        return self.model_dump(by_alias=True, exclude_none=True)


class HealthResponse(BaseModel):
    status: str
    version: str
    audit_log_path: str
