"""Reports API — revenue, profit and top sellers per time window."""

from fastapi import APIRouter, Depends

from stocksence.application.services.report_service import DEFAULT_WINDOW, sales_report
from stocksence.domain.models.user import User
from stocksence.domain.repositories.product_repository import ProductRepository
from stocksence.domain.repositories.sale_repository import SaleRepository
from stocksence.domain.schemas.report import SalesReport, TimeWindow
from stocksence.interfaces.api.deps import get_current_user
from stocksence.interfaces.deps import get_product_repository, get_sale_repository

router = APIRouter(prefix="/api/reports", tags=["Reports"])


@router.get("/summary", response_model=SalesReport)
def summary(
    window: TimeWindow = DEFAULT_WINDOW,
    product_repo: ProductRepository = Depends(get_product_repository),
    sale_repo: SaleRepository = Depends(get_sale_repository),
    user: User = Depends(get_current_user),
):
    return sales_report(product_repo, sale_repo, window)
