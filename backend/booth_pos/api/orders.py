"""
Orders API Endpoints
Commit requests and transaction history
"""
import logging

from fastapi import APIRouter, Depends

from booth_pos.api.deps import get_transaction_repository, http_error
from booth_pos.core.exceptions import NotFound, PosError, ValidationError
from booth_pos.domain.order import CommitRequest
from booth_pos.repositories.order_repository import TransactionRepository

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/", status_code=201)
async def create_order(
    payload: CommitRequest,
    repo: TransactionRepository = Depends(get_transaction_repository),
):
    """
    Commit an order from explicit lines

    Each line carries the product name and unit price to snapshot.
    Monetary fields are integer cents.
    """
    try:
        transaction = repo.commit(payload.commit_lines(), payload.payment_method, payload.cash_received)
    except ValidationError as e:
        logger.info(f"Order rejected ({e.code}): {e.message}")
        raise http_error(e)
    except PosError as e:
        raise http_error(e)

    return {"status": "success", "data": transaction.to_dict()}


@router.get("/")
async def get_orders(repo: TransactionRepository = Depends(get_transaction_repository)):
    """All transactions, oldest first, with their line items"""
    try:
        transactions = repo.list()
    except PosError as e:
        raise http_error(e)

    return {
        "status": "success",
        "count": len(transactions),
        "data": [transaction.to_dict() for transaction in transactions],
    }


@router.get("/{transaction_id}")
async def get_order(
    transaction_id: str,
    repo: TransactionRepository = Depends(get_transaction_repository),
):
    try:
        transaction = repo.find_by_id(transaction_id)
        if transaction is None:
            raise NotFound(f"Transaction not found: {transaction_id}")
    except PosError as e:
        raise http_error(e)

    return {"status": "success", "data": transaction.to_dict()}
