from datetime import date, datetime
from types import SimpleNamespace

from openpyxl import load_workbook

from models.order_management import OrderStatus, OrderType
from services.export import EXPORT_COLUMNS, build_report_rows, report_filename, write_pdf, write_xlsx


def order(total, customer, order_type=OrderType.ONLINE, notes=None):
    return SimpleNamespace(
        created_at=datetime(2026, 10, 19, 9, 5),
        customer_name=customer,
        customer_phone="081234567890",
        order_type=order_type,
        total_amount=total,
        status=OrderStatus.COMPLETED,
        notes=notes,
    )


ORDERS = [order(15000, "Budi", notes="Jangan terlalu pedas"), order(20000, "Siti", OrderType.OFFLINE)]
RECAP = SimpleNamespace(id=1, period_start=date(2026, 10, 1), period_end=date(2026, 10, 19))


def test_report_columns_keep_their_labels_and_order():
    assert EXPORT_COLUMNS == ["Tanggal", "Nama Pelanggan", "Telepon", "Tipe Pesanan", "Total Pesanan", "Status", "Catatan"]
    assert all(list(row) == EXPORT_COLUMNS for row in build_report_rows(ORDERS))


def test_report_rows_and_summary():
    rows = build_report_rows(ORDERS)

    assert rows[0] == {
        "Tanggal": "19/10/2026 09.05",
        "Nama Pelanggan": "Budi",
        "Telepon": "081234567890",
        "Tipe Pesanan": "Online",
        "Total Pesanan": 15000,
        "Status": "completed",
        "Catatan": "Jangan terlalu pedas",
    }
    assert rows[1]["Tipe Pesanan"] == "Offline"
    assert rows[1]["Catatan"] == "-"
    assert set(rows[2].values()) == {""}
    assert rows[3]["Tanggal"] == "RINGKASAN"
    assert rows[3]["Nama Pelanggan"] == "Total Pesanan: 2"
    assert rows[3]["Total Pesanan"] == 35000


def test_empty_report_still_has_summary():
    rows = build_report_rows([])

    assert len(rows) == 2
    assert rows[-1]["Nama Pelanggan"] == "Total Pesanan: 0"
    assert rows[-1]["Total Pesanan"] == 0


def test_xlsx_contains_header_rows_and_summary():
    workbook = load_workbook(write_xlsx(build_report_rows(ORDERS)))
    sheet = workbook["Laporan Penjualan"]
    values = list(sheet.iter_rows(values_only=True))

    assert list(values[0]) == EXPORT_COLUMNS
    assert values[1][1] == "Budi"
    assert values[2][4] == 20000
    assert values[-1][0] == "RINGKASAN"
    assert values[-1][4] == 35000


def test_pdf_is_rendered():
    buffer = write_pdf(RECAP, build_report_rows(ORDERS))

    assert buffer.read(5) == b"%PDF-"


def test_report_filename():
    assert report_filename(RECAP, "xlsx") == "Laporan_Penjualan_2026-10-01_2026-10-19.xlsx"
