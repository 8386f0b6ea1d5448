"""CSV export of a sale list.

Layout::

    Product,Quantity,Total Price,Date
    "Desk Lamp",2,39.98,"10/19/2026, 02:05:09 PM"

Product names and dates are always quoted; the total has two decimals and
the date is rendered in the configured timezone.
"""

import csv
import io
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Iterable, Optional

import pytz

from stocksence.config import get_settings
from stocksence.domain.models.timestamps import as_utc

settings = get_settings()
tz = pytz.timezone(settings.TIMEZONE)

CSV_HEADERS = ("Product", "Quantity", "Total Price", "Date")
DATE_FORMAT = "%m/%d/%Y, %I:%M:%S %p"
MEDIA_TYPE = "text/csv; charset=utf-8"


@dataclass(frozen=True)
class CsvExport:
    filename: str
    content: str


def export_filename(now: datetime) -> str:
    return f"sales_report_{now.date().isoformat()}.csv"


def format_sale_date(value: datetime) -> str:
    return as_utc(value).astimezone(tz).strftime(DATE_FORMAT)


def export_sales_csv(sales: Iterable, now: Optional[datetime] = None) -> Optional[CsvExport]:
    """Render sales as CSV; None when there is nothing to export."""
    sales = list(sales)
    if not sales:
        return None

    buffer = io.StringIO()
    buffer.write(",".join(CSV_HEADERS) + "\n")
    # QUOTE_NONNUMERIC leaves the int and Decimal columns bare
    writer = csv.writer(buffer, quoting=csv.QUOTE_NONNUMERIC, lineterminator="\n")
    for sale in sales:
        writer.writerow([
            sale.product_name,
            sale.quantity,
            Decimal(f"{sale.total_price:.2f}"),
            format_sale_date(sale.date),
        ])

    now = now or datetime.now(pytz.utc)
    return CsvExport(filename=export_filename(now), content=buffer.getvalue())
