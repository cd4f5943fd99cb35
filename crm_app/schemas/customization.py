"""UI customization schemas (modification sets, candidates, responses)."""

from datetime import datetime
from typing import Any, Dict, List, Optional
from uuid import UUID

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    field_validator,
)

from crm_app.schemas.common import SuccessResponse

def _to_length(value: Any) -> Any:
    """Coerce loose length values produced by the model into strings.

    Numbers become pixel lengths; a mapping (older records stored
    ``{"base": "14px"}``) collapses to its last non-null value.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return f"{value}px"
    if isinstance(value, dict):
        values = [v for v in value.values() if v is not None]
        return _to_length(values[-1]) if values else None
    return value

def _to_text(value: Any) -> Any:
    """Coerce a loose scalar (e.g. a bare `0` colour) into a string."""
    if isinstance(value, (bool, dict, list)):
        return None
    if isinstance(value, (int, float)):
        return str(value)
    return value

class _OpenCategory(BaseModel):
    """A modification category with known keys plus free-form extras.

    Extra keys are kept rather than dropped; the compiler emits them as
    CSS custom properties.
    """

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    def custom_properties(self) -> Dict[str, str]:
        return {
            key: str(value)
            for key, value in (self.model_extra or {}).items()
            if value is not None
        }

class ColorSet(_OpenCategory):
    background: Optional[str] = None
    text: Optional[str] = None
    border: Optional[str] = None

    @field_validator("background", "text", "border", mode="before")
    @classmethod
    def _coerce_colour(cls, value: Any) -> Any:
        return _to_text(value)

class SpacingSet(_OpenCategory):
    padding: Optional[str] = None
    margin: Optional[str] = None
    gap: Optional[str] = None

    @field_validator("padding", "margin", "gap", mode="before")
    @classmethod
    def _coerce_length(cls, value: Any) -> Any:
        return _to_length(value)

class LayoutSet(_OpenCategory):
    width: Optional[str] = None
    height: Optional[str] = None
    display: Optional[str] = None
    flex_direction: Optional[str] = Field(None, alias="flexDirection")

    @field_validator("width", "height", mode="before")
    @classmethod
    def _coerce_length(cls, value: Any) -> Any:
        return _to_length(value)

    @field_validator("display", "flex_direction", mode="before")
    @classmethod
    def _coerce_keyword(cls, value: Any) -> Any:
        return _to_text(value)

class Modifications(BaseModel):
    """Typed modification set attached to a customization rule."""

    model_config = ConfigDict(populate_by_name=True)

    theme: Optional[str] = None
    colors: Optional[ColorSet] = None
    spacing: Optional[SpacingSet] = None
    layout: Optional[LayoutSet] = None
    font_size: Optional[str] = Field(None, alias="fontSize")
    border_radius: Optional[str] = Field(None, alias="borderRadius")

    @field_validator("font_size", "border_radius", mode="before")
    @classmethod
    def _coerce_length(cls, value: Any) -> Any:
        return _to_length(value)

    @field_validator("theme", mode="before")
    @classmethod
    def _normalise_theme(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.strip().lower() or None
        return value

    @classmethod
    def lenient(cls, data: Any) -> "Modifications":
        """Validate *data*, dropping any category that does not validate.

        Model output is loosely typed; a bad ``colors`` value must not
        cost the caller the valid ``theme`` next to it.
        """
        if isinstance(data, cls):
            return data
        if not isinstance(data, dict):
            return cls()
        try:
            return cls.model_validate(data)
        except ValidationError:
            kept: Dict[str, Any] = {}
            for key, value in data.items():
                try:
                    cls.model_validate({key: value})
                except ValidationError:
                    continue
                kept[key] = value
            return cls.model_validate(kept)

    def to_payload(self) -> Dict[str, Any]:
        """Serialise with the camelCase keys used by stored records."""
        return self.model_dump(by_alias=True, exclude_none=True)

# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------

class WizardGenerateRequest(BaseModel):
    """Request body for POST /api/v1/ui-wizard/generate."""

    user_request: str = Field(..., min_length=1, max_length=2000)
    session_id: Optional[UUID] = None

# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------

class CustomizationCandidate(BaseModel):
    """A generated, stored-but-inactive customization."""

    id: UUID
    component: str
    modifications: Dict[str, Any] = Field(default_factory=dict)
    description: str
    preview: str
    user_request: str
    degraded: bool = False
    applied: bool = False
    model: Optional[str] = None

class CustomizationOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    customization_name: Optional[str] = None
    component_name: str
    modifications: Dict[str, Any] = Field(default_factory=dict)
    description: Optional[str] = None
    preview_text: Optional[str] = None
    is_active: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

class CustomizationActionResponse(SuccessResponse):
    """Returned by apply / rollback with the recompiled stylesheet."""

    message: str
    customization: CustomizationOut
    stylesheet: str

class PreviewResponse(BaseModel):
    enabled: bool
    customization_id: Optional[UUID] = None
    css: str = ""

class CustomizationListResponse(BaseModel):
    customizations: List[CustomizationOut]
    active_count: int
