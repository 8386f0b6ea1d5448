"""Dashboard API — headline stats, low-stock list and recent sales."""

from fastapi import APIRouter, Depends

from stocksence.application.services.report_service import dashboard_summary
from stocksence.domain.models.user import User
from stocksence.domain.repositories.product_repository import ProductRepository
from stocksence.domain.repositories.sale_repository import SaleRepository
from stocksence.domain.schemas.report import DashboardSummary
from stocksence.interfaces.api.deps import get_current_user
from stocksence.interfaces.deps import get_product_repository, get_sale_repository

router = APIRouter(prefix="/api/dashboard", tags=["Dashboard"])


@router.get("/summary", response_model=DashboardSummary)
def summary(
    product_repo: ProductRepository = Depends(get_product_repository),
    sale_repo: SaleRepository = Depends(get_sale_repository),
    user: User = Depends(get_current_user),
):
    return dashboard_summary(product_repo, sale_repo)
