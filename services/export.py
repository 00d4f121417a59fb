from io import BytesIO
from typing import List
import logging

from openpyxl import Workbook
from openpyxl.styles import Font, PatternFill
from openpyxl.utils import get_column_letter
from reportlab.lib.pagesizes import A4, landscape
from reportlab.lib.units import inch
from reportlab.pdfgen import canvas

from models.order_management import OrderType
from services.recap import summarize

logger = logging.getLogger(__name__)

SHEET_TITLE = "Laporan Penjualan"
EXPORT_COLUMNS = ["Tanggal", "Nama Pelanggan", "Telepon", "Tipe Pesanan", "Total Pesanan", "Status", "Catatan"]
COLUMN_WIDTHS = [20, 25, 15, 15, 15, 12, 30]

XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
PDF_MEDIA_TYPE = "application/pdf"


def format_order_date(moment) -> str:
    return moment.strftime("%d/%m/%Y %H.%M")


def format_rupiah(amount: int) -> str:
    return f"Rp {amount:,}".replace(",", ".")


def build_report_rows(orders) -> List[dict]:
    """
    One row per order, a blank separator row, then the summary row carrying
    the order count and the revenue.
    """
    orders = list(orders)
    rows = [
        {
            "Tanggal": format_order_date(order.created_at),
            "Nama Pelanggan": order.customer_name,
            "Telepon": order.customer_phone,
            "Tipe Pesanan": "Online" if order.order_type == OrderType.ONLINE else "Offline",
            "Total Pesanan": order.total_amount,
            "Status": order.status.value,
            "Catatan": order.notes or "-",
        }
        for order in orders
    ]
    total_revenue, total_orders = summarize(orders)
    rows.append({column: "" for column in EXPORT_COLUMNS})
    rows.append({
        "Tanggal": "RINGKASAN",
        "Nama Pelanggan": f"Total Pesanan: {total_orders}",
        "Telepon": "",
        "Tipe Pesanan": "",
        "Total Pesanan": total_revenue,
        "Status": "",
        "Catatan": "",
    })
    return rows


def report_filename(recap, extension: str) -> str:
    return f"Laporan_Penjualan_{recap.period_start.isoformat()}_{recap.period_end.isoformat()}.{extension}"


def write_xlsx(rows: List[dict]) -> BytesIO:
    wb = Workbook()
    ws = wb.active
    ws.title = SHEET_TITLE

    for col, header in enumerate(EXPORT_COLUMNS, 1):
        cell = ws.cell(row=1, column=col, value=header)
        cell.font = Font(bold=True)
        cell.fill = PatternFill(start_color="CCCCCC", end_color="CCCCCC", fill_type="solid")
        ws.column_dimensions[get_column_letter(col)].width = COLUMN_WIDTHS[col - 1]

    for row_number, row in enumerate(rows, 2):
        for col, column in enumerate(EXPORT_COLUMNS, 1):
            ws.cell(row=row_number, column=col, value=row[column])

    # Summary row
    for col in range(1, len(EXPORT_COLUMNS) + 1):
        ws.cell(row=len(rows) + 1, column=col).font = Font(bold=True)

    buffer = BytesIO()
    wb.save(buffer)
    buffer.seek(0)
    return buffer


def write_pdf(recap, rows: List[dict]) -> BytesIO:
    """Same rows as the spreadsheet, laid out on landscape A4 pages."""
    buffer = BytesIO()
    page_width, page_height = landscape(A4)
    c = canvas.Canvas(buffer, pagesize=(page_width, page_height))
    margin = 0.5 * inch
    widths = [w * 0.09 * inch for w in COLUMN_WIDTHS]
    scale = (page_width - 2 * margin) / sum(widths)
    widths = [w * scale for w in widths]

    def draw_header(y_pos):
        c.setFont("Helvetica-Bold", 14)
        c.drawString(margin, y_pos, SHEET_TITLE)
        y_pos -= 0.25 * inch
        c.setFont("Helvetica", 9)
        c.drawString(margin, y_pos, f"Periode: {recap.period_start.isoformat()} - {recap.period_end.isoformat()}")
        y_pos -= 0.3 * inch
        c.setFont("Helvetica-Bold", 8)
        x_pos = margin
        for column, width in zip(EXPORT_COLUMNS, widths):
            c.drawString(x_pos, y_pos, column)
            x_pos += width
        y_pos -= 0.08 * inch
        c.line(margin, y_pos, page_width - margin, y_pos)
        return y_pos - 0.18 * inch

    y_pos = draw_header(page_height - margin)
    for index, row in enumerate(rows):
        if y_pos < margin:
            c.showPage()
            y_pos = draw_header(page_height - margin)
        is_summary = index == len(rows) - 1
        c.setFont("Helvetica-Bold" if is_summary else "Helvetica", 8)
        x_pos = margin
        for column, width in zip(EXPORT_COLUMNS, widths):
            value = row[column]
            text = format_rupiah(value) if isinstance(value, int) else str(value)
            max_chars = int(width / 4.2)
            if len(text) > max_chars:
                text = text[:max_chars - 3] + "..."
            c.drawString(x_pos, y_pos, text)
            x_pos += width
        y_pos -= 0.2 * inch

    c.showPage()
    c.save()
    buffer.seek(0)
    logger.debug(f"Rendered PDF report for recap {recap.id} with {len(rows)} rows")
    return buffer
