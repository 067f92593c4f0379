"""Customer routes."""
import logging

from fastapi import APIRouter, Depends, HTTPException, Response, status

from api.dependencies import get_account_store, get_customer_store
from db.models import Customer, CustomerCreate, CustomerRead, CustomerStatus, CustomerUpdate
from db.store import AccountStore, CustomerStore

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/customers", tags=["Customers"])


@router.get("/", response_model=list[Customer])
async def list_customers(customers: CustomerStore = Depends(get_customer_store)):
    """All customers, in insertion order."""
    return await customers.list_all()


@router.get("/email/{email}", response_model=CustomerRead)
async def get_customer_by_email(
    email: str,
    customers: CustomerStore = Depends(get_customer_store),
    accounts: AccountStore = Depends(get_account_store),
):
    """Look a customer up by email (case-insensitive)."""
    customer = await customers.get_by_email(email)
    if customer is None:
        raise HTTPException(status_code=404, detail=f"Customer with email '{email}' not found")
    return CustomerRead(**customer.model_dump(exclude={"full_name"}),
                        accounts=await accounts.list_by_customer(customer.id))


@router.get("/{customer_id}", response_model=CustomerRead)
async def get_customer(
    customer_id: str,
    customers: CustomerStore = Depends(get_customer_store),
    accounts: AccountStore = Depends(get_account_store),
):
    """Customer details including the accounts they own."""
    customer = await customers.get_by_id(customer_id)
    if customer is None:
        raise HTTPException(status_code=404, detail=f"Customer with ID '{customer_id}' not found")
    return CustomerRead(**customer.model_dump(exclude={"full_name"}),
                        accounts=await accounts.list_by_customer(customer_id))


@router.post("/", response_model=Customer, status_code=status.HTTP_201_CREATED)
async def create_customer(
    req: CustomerCreate,
    customers: CustomerStore = Depends(get_customer_store),
):
    """Create a customer. The id is assigned by the store; new customers are ACTIVE."""
    logger.info("Creating new customer with email: %s", req.email)
    customer = Customer(**req.model_dump(), status=CustomerStatus.ACTIVE)
    return await customers.create(customer)


@router.put("/{customer_id}", response_model=Customer)
async def update_customer(
    customer_id: str,
    req: CustomerUpdate,
    customers: CustomerStore = Depends(get_customer_store),
):
    updated = await customers.update(customer_id, req.model_dump(exclude_unset=True, exclude_none=True))
    if updated is None:
        raise HTTPException(status_code=404, detail=f"Customer with ID '{customer_id}' not found")
    return updated


@router.delete("/{customer_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_customer(
    customer_id: str,
    customers: CustomerStore = Depends(get_customer_store),
):
    """Delete a customer. Their accounts and transactions are left untouched."""
    await customers.delete(customer_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
