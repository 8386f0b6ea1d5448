from datetime import datetime, timezone
from types import SimpleNamespace

from stocksence.application.services.sales_export import export_filename, export_sales_csv

NOW = datetime(2026, 10, 19, 16, 0, tzinfo=timezone.utc)


def sale(product_name, quantity, total_price, date):
    return SimpleNamespace(
        product_name=product_name,
        quantity=quantity,
        total_price=total_price,
        date=date,
    )


def test_export_layout():
    sales = [
        sale("Desk Lamp", 2, 39.98, datetime(2026, 10, 19, 14, 5, 9, tzinfo=timezone.utc)),
        sale("Mug", 1, 5, datetime(2026, 10, 18, 8, 0, 0, tzinfo=timezone.utc)),
    ]

    export = export_sales_csv(sales, now=NOW)

    assert export.filename == "sales_report_2026-10-19.csv"
    assert export.content.splitlines() == [
        "Product,Quantity,Total Price,Date",
        '"Desk Lamp",2,39.98,"10/19/2026, 02:05:09 PM"',
        '"Mug",1,5.00,"10/18/2026, 08:00:00 AM"',
    ]


def test_quotes_inside_names_are_doubled():
    export = export_sales_csv(
        [sale('The "Best" Mug', 1, 3.5, datetime(2026, 10, 19, 9, 0, tzinfo=timezone.utc))],
        now=NOW,
    )

    assert export.content.splitlines()[1].startswith('"The ""Best"" Mug",1,3.50,')


def test_naive_dates_are_treated_as_utc():
    export = export_sales_csv([sale("Mug", 1, 1.0, datetime(2026, 10, 19, 23, 59, 59))], now=NOW)

    assert export.content.splitlines()[1].endswith('"10/19/2026, 11:59:59 PM"')


def test_nothing_to_export():
    assert export_sales_csv([], now=NOW) is None


def test_export_filename_uses_the_day():
    assert export_filename(datetime(2027, 1, 2, 23, 0)) == "sales_report_2027-01-02.csv"
