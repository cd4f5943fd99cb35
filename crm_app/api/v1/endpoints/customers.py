from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends

from crm_app.api.deps import get_current_user_id, get_customer_service
from crm_app.schemas.crm import CustomerCreate, CustomerOut, CustomerUpdate, DeleteResponse
from crm_app.services.record_service import CustomerService

router = APIRouter(prefix="/customers", tags=["Customers"])


@router.get("", response_model=List[CustomerOut])
async def list_customers(
    owner_id: UUID = Depends(get_current_user_id),
    service: CustomerService = Depends(get_customer_service),
) -> List[CustomerOut]:
    return [CustomerOut.model_validate(c) for c in await service.list(owner_id)]


@router.get("/{customer_id}", response_model=CustomerOut)
async def get_customer(
    customer_id: UUID,
    owner_id: UUID = Depends(get_current_user_id),
    service: CustomerService = Depends(get_customer_service),
) -> CustomerOut:
    return CustomerOut.model_validate(await service.get(owner_id, customer_id))


@router.post("", response_model=CustomerOut, status_code=201)
async def create_customer(
    request_body: CustomerCreate,
    owner_id: UUID = Depends(get_current_user_id),
    service: CustomerService = Depends(get_customer_service),
) -> CustomerOut:
    return CustomerOut.model_validate(await service.create(owner_id, request_body))


@router.put("/{customer_id}", response_model=CustomerOut)
async def update_customer(
    customer_id: UUID,
    request_body: CustomerUpdate,
    owner_id: UUID = Depends(get_current_user_id),
    service: CustomerService = Depends(get_customer_service),
) -> CustomerOut:
    """Partial update: only the fields present in the body change."""
    row = await service.update(owner_id, customer_id, request_body)
    return CustomerOut.model_validate(row)


@router.delete("/{customer_id}", response_model=DeleteResponse)
async def delete_customer(
    customer_id: UUID,
    owner_id: UUID = Depends(get_current_user_id),
    service: CustomerService = Depends(get_customer_service),
) -> DeleteResponse:
    await service.delete(owner_id, customer_id)
    return DeleteResponse(message="Customer deleted successfully")
