"""
Dashboard and export endpoints
"""
from datetime import datetime

from fastapi import APIRouter, Depends
from fastapi.responses import Response

from booth_pos.api.deps import get_transaction_repository, http_error
from booth_pos.core.exceptions import PosError
from booth_pos.repositories.order_repository import TransactionRepository
from booth_pos.services import export_service
from booth_pos.services.sales_aggregation_service import SalesAggregationService

router = APIRouter()

CSV_MEDIA_TYPE = "text/csv; charset=utf-8"


def _csv_download(content: str, kind: str) -> Response:
    filename = export_service.export_filename(kind, datetime.now())
    return Response(
        content=content,
        media_type=CSV_MEDIA_TYPE,
        headers={"Content-Disposition": f"attachment; filename={filename}"},
    )


@router.get("/dashboard")
async def get_dashboard(repo: TransactionRepository = Depends(get_transaction_repository)):
    """
    Sales dashboard

    Returns:
    - Total revenue and transaction count
    - Per-product quantities and revenue
    - Per-payment-method revenue and counts
    """
    try:
        summary = SalesAggregationService(repo).dashboard_summary()
    except PosError as e:
        raise http_error(e)

    return {"status": "success", "data": summary.to_dict()}


@router.get("/exports/transactions.csv")
async def export_transactions(repo: TransactionRepository = Depends(get_transaction_repository)):
    try:
        content = export_service.export_transactions(repo.list())
    except PosError as e:
        raise http_error(e)
    return _csv_download(content, "transactions")


@router.get("/exports/products.csv")
async def export_products(repo: TransactionRepository = Depends(get_transaction_repository)):
    try:
        rows = SalesAggregationService(repo).per_product_summary()
    except PosError as e:
        raise http_error(e)
    return _csv_download(export_service.export_product_summary(rows), "products")


@router.get("/exports/payment-methods.csv")
async def export_payment_methods(repo: TransactionRepository = Depends(get_transaction_repository)):
    try:
        rows = SalesAggregationService(repo).per_payment_method_summary()
    except PosError as e:
        raise http_error(e)
    return _csv_download(export_service.export_payment_summary(rows), "payment_methods")
