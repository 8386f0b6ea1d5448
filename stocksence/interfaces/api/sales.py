"""Sales API routes — list, record and export sales."""

from fastapi import APIRouter, Depends, Response, status

from stocksence.application.services.alerts import AlertBuffer
from stocksence.application.services.product_service import to_product_read
from stocksence.application.services.sale_service import list_sales, record_sale, sellable_products
from stocksence.application.services.sales_export import MEDIA_TYPE, export_sales_csv
from stocksence.domain import reporting
from stocksence.domain.models.user import User
from stocksence.domain.repositories.product_repository import ProductRepository
from stocksence.domain.repositories.sale_repository import SaleRepository
from stocksence.domain.schemas.product import ProductRead
from stocksence.domain.schemas.sale import SaleCreate, SaleList, SaleRead, SaleRecordedRead
from stocksence.interfaces.api.deps import get_current_user
from stocksence.interfaces.deps import (
    drain_alerts,
    get_alert_buffer,
    get_product_repository,
    get_sale_repository,
)

router = APIRouter(prefix="/api/sales", tags=["Sales"])


@router.get("", response_model=SaleList)
def list_all(
    search: str = "",
    date: str = "",
    repo: SaleRepository = Depends(get_sale_repository),
    user: User = Depends(get_current_user),
):
    """Sales newest first; ``date`` is a YYYY-MM-DD day."""
    sales = list_sales(repo, search=search, day=date)
    return SaleList(
        items=[SaleRead.model_validate(s) for s in sales],
        total_revenue=reporting.aggregate_revenue(sales),
        total_items=reporting.aggregate_items(sales),
    )


@router.get("/products", response_model=list[ProductRead])
def products_for_sale(
    repo: ProductRepository = Depends(get_product_repository),
    user: User = Depends(get_current_user),
):
    """Products with stock on hand, for the sale form."""
    return [to_product_read(p) for p in sellable_products(repo)]


@router.get("/export")
def export_csv(
    search: str = "",
    date: str = "",
    repo: SaleRepository = Depends(get_sale_repository),
    user: User = Depends(get_current_user),
):
    export = export_sales_csv(list_sales(repo, search=search, day=date))
    if export is None:
        return Response(status_code=status.HTTP_204_NO_CONTENT)
    return Response(
        content=export.content,
        media_type=MEDIA_TYPE,
        headers={"Content-Disposition": f'attachment; filename="{export.filename}"'},
    )


@router.post("", response_model=SaleRecordedRead, status_code=status.HTTP_201_CREATED)
def create(
    body: SaleCreate,
    product_repo: ProductRepository = Depends(get_product_repository),
    sale_repo: SaleRepository = Depends(get_sale_repository),
    alerts: AlertBuffer = Depends(get_alert_buffer),
    user: User = Depends(get_current_user),
):
    result = record_sale(product_repo, sale_repo, body.product_id, body.quantity, user, alerts)
    return SaleRecordedRead(
        sale=SaleRead.model_validate(result.sale),
        product_quantity=result.product_quantity,
        alerts=drain_alerts(alerts),
    )
