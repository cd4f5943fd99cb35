from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends

from crm_app.api.deps import get_current_user_id, get_workflow_service
from crm_app.schemas.crm import DeleteResponse
from crm_app.schemas.workflow import WorkflowRuleCreate, WorkflowRuleOut, WorkflowRuleUpdate
from crm_app.services.record_service import WorkflowRuleService

router = APIRouter(prefix="/workflows", tags=["Workflows"])


@router.get("", response_model=List[WorkflowRuleOut])
async def list_workflow_rules(
    owner_id: UUID = Depends(get_current_user_id),
    service: WorkflowRuleService = Depends(get_workflow_service),
) -> List[WorkflowRuleOut]:
    """All of the owner's rules, newest first."""
    return [WorkflowRuleOut.model_validate(r) for r in await service.list(owner_id)]


@router.get("/{rule_id}", response_model=WorkflowRuleOut)
async def get_workflow_rule(
    rule_id: UUID,
    owner_id: UUID = Depends(get_current_user_id),
    service: WorkflowRuleService = Depends(get_workflow_service),
) -> WorkflowRuleOut:
    return WorkflowRuleOut.model_validate(await service.get(owner_id, rule_id))


@router.post("", response_model=WorkflowRuleOut, status_code=201)
async def create_workflow_rule(
    request_body: WorkflowRuleCreate,
    owner_id: UUID = Depends(get_current_user_id),
    service: WorkflowRuleService = Depends(get_workflow_service),
) -> WorkflowRuleOut:
    return WorkflowRuleOut.model_validate(await service.create(owner_id, request_body))


@router.put("/{rule_id}", response_model=WorkflowRuleOut)
async def update_workflow_rule(
    rule_id: UUID,
    request_body: WorkflowRuleUpdate,
    owner_id: UUID = Depends(get_current_user_id),
    service: WorkflowRuleService = Depends(get_workflow_service),
) -> WorkflowRuleOut:
    """Partial update; send ``{"is_active": false}`` to pause a rule."""
    row = await service.update(owner_id, rule_id, request_body)
    return WorkflowRuleOut.model_validate(row)


@router.delete("/{rule_id}", response_model=DeleteResponse)
async def delete_workflow_rule(
    rule_id: UUID,
    owner_id: UUID = Depends(get_current_user_id),
    service: WorkflowRuleService = Depends(get_workflow_service),
) -> DeleteResponse:
    await service.delete(owner_id, rule_id)
    return DeleteResponse(message="Workflow rule deleted successfully")
