"""Workflow rule schemas."""

from datetime import datetime
from typing import Any, Dict, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from crm_app.schemas.common import WorkflowAction, WorkflowTrigger


class WorkflowRuleCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    trigger_type: WorkflowTrigger
    trigger_value: Dict[str, Any] = Field(default_factory=dict)
    action_type: WorkflowAction
    action_value: Dict[str, Any] = Field(default_factory=dict)
    is_active: bool = True

    @field_validator("name")
    @classmethod
    def _strip_name(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("name must not be blank")
        return value


class WorkflowRuleUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    trigger_type: Optional[WorkflowTrigger] = None
    trigger_value: Optional[Dict[str, Any]] = None
    action_type: Optional[WorkflowAction] = None
    action_value: Optional[Dict[str, Any]] = None
    is_active: Optional[bool] = None


class WorkflowRuleOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    trigger_type: str
    trigger_value: Dict[str, Any] = Field(default_factory=dict)
    action_type: str
    action_value: Dict[str, Any] = Field(default_factory=dict)
    is_active: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
