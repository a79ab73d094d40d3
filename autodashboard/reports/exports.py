"""Admin data exports as Excel (openpyxl) or PDF (fpdf2) tables"""
import logging
from io import BytesIO

from django.db.models import Count, Q
from fpdf import FPDF
from openpyxl import Workbook
from openpyxl.styles import Font, PatternFill, Alignment
from openpyxl.utils import get_column_letter

from autodashboard.balances.models import Transaction
from autodashboard.core.models import User
from autodashboard.invoices.models import Invoice
from autodashboard.invoices.pdf import pdf_text
from autodashboard.vehicles.models import Vehicle

logger = logging.getLogger(__name__)

FORMAT_EXCEL = 'excel'
FORMAT_PDF = 'pdf'

EXCEL_CONTENT_TYPE = 'application/vnd.openxmlformats-officedocument.spreadsheetml.sheet'
PDF_CONTENT_TYPE = 'application/pdf'


def _date(value):
    return value.strftime('%Y-%m-%d') if value else ''


def _yes_no(value):
    return 'Yes' if value else 'No'


# Each column: (header, excel width, pdf width in mm, value getter)
DEALER_COLUMNS = [
    ('Name', 25, 40, lambda d: d.name),
    ('Email', 30, 55, lambda d: d.email),
    ('Phone', 15, 30, lambda d: d.phone),
    ('Company Name', 25, 40, lambda d: d.company_name or ''),
    ('ID Number', 15, 25, lambda d: d.identification_number or ''),
    ('Status', 10, 18, lambda d: d.status),
    ('Balance', 12, 22, lambda d: float(d.balance)),
    ('Vehicle Count', 12, 20, lambda d: d.vehicle_count),
    ('Created At', 12, 22, lambda d: _date(d.created_at)),
]

VEHICLE_COLUMNS = [
    ('VIN', 20, 38, lambda v: v.vin),
    ('Year', 6, 10, lambda v: v.year),
    ('Make', 12, 20, lambda v: v.make.name),
    ('Model', 15, 22, lambda v: v.model.name),
    ('Color', 10, 0, lambda v: v.color),
    ('Lot Number', 12, 22, lambda v: v.lot_number),
    ('Auction', 12, 18, lambda v: v.auction.name),
    ('Status', 18, 30, lambda v: v.status.name_en),
    ('Dealer', 20, 30, lambda v: v.dealer.name),
    ('Dealer Email', 25, 0, lambda v: v.dealer.email),
    ('Transportation Price', 12, 22, lambda v: float(v.transportation_price)),
    ('Damage Type', 12, 0, lambda v: v.damage_type),
    ('Has Keys', 8, 0, lambda v: _yes_no(v.has_keys)),
    ('Ship Name', 15, 0, lambda v: v.ship_name),
    ('Container Number', 15, 0, lambda v: v.container_number),
    ('ETA', 12, 0, lambda v: _date(v.eta)),
    ('Country', 12, 0, lambda v: v.country.name_en),
    ('State', 15, 0, lambda v: v.state.name_en),
    ('City', 15, 0, lambda v: v.city.name if v.city else ''),
    ('Port', 15, 25, lambda v: v.port.name if v.port else ''),
    ('Archived', 8, 0, lambda v: _yes_no(v.is_archived)),
    ('Created At', 12, 22, lambda v: _date(v.created_at)),
]

TRANSACTION_COLUMNS = [
    ('Dealer', 25, 40, lambda t: t.dealer.name),
    ('Email', 30, 50, lambda t: t.dealer.email),
    ('Type', 16, 32, lambda t: t.type),
    ('Amount', 12, 22, lambda t: float(t.amount)),
    ('Balance After', 12, 24, lambda t: float(t.balance_after)),
    ('Description', 40, 60, lambda t: t.description),
    ('Reference', 15, 0, lambda t: t.reference_type or ''),
    ('Date', 12, 22, lambda t: _date(t.created_at)),
]

INVOICE_COLUMNS = [
    ('Invoice Number', 16, 32, lambda i: i.invoice_number),
    ('Dealer', 25, 45, lambda i: i.dealer.name),
    ('Email', 30, 55, lambda i: i.dealer.email),
    ('Total Amount', 14, 25, lambda i: float(i.total_amount)),
    ('Status', 12, 22, lambda i: i.status),
    ('Items', 8, 15, lambda i: i.item_count),
    ('Created At', 12, 22, lambda i: _date(i.created_at)),
    ('Paid At', 12, 22, lambda i: _date(i.paid_at)),
]


def dealers_export_rows():
    return User.objects.filter(role=User.ROLE_DEALER).annotate(
        vehicle_count=Count('vehicles', filter=Q(vehicles__is_archived=False))
    ).order_by('-created_at')


def vehicles_export_rows(show_archived=False):
    return Vehicle.objects.filter(is_archived=show_archived).select_related(
        'make', 'model', 'auction', 'status', 'dealer', 'country', 'state', 'city', 'port'
    ).order_by('-created_at')


def transactions_export_rows(date_from=None, date_to=None):
    queryset = Transaction.objects.select_related('dealer')
    if date_from:
        queryset = queryset.filter(created_at__date__gte=date_from)
    if date_to:
        queryset = queryset.filter(created_at__date__lte=date_to)
    return queryset.order_by('-created_at')


def invoices_export_rows(date_from=None, date_to=None, status=None):
    queryset = Invoice.objects.select_related('dealer').annotate(item_count=Count('items'))
    if status:
        queryset = queryset.filter(status=status)
    if date_from:
        queryset = queryset.filter(created_at__date__gte=date_from)
    if date_to:
        queryset = queryset.filter(created_at__date__lte=date_to)
    return queryset.order_by('-created_at')


def build_excel(sheet_title, columns, rows):
    """One header row, one row per object, fixed column widths"""
    wb = Workbook()
    ws = wb.active
    ws.title = sheet_title

    header_fill = PatternFill(start_color='2563EB', end_color='2563EB', fill_type='solid')
    header_font = Font(bold=True, color='FFFFFF')
    for col, (header, width, _, _) in enumerate(columns, 1):
        cell = ws.cell(row=1, column=col, value=header)
        cell.fill = header_fill
        cell.font = header_font
        cell.alignment = Alignment(horizontal='center')
        ws.column_dimensions[get_column_letter(col)].width = width

    for row_idx, obj in enumerate(rows, 2):
        for col, (_, _, _, getter) in enumerate(columns, 1):
            ws.cell(row=row_idx, column=col, value=getter(obj))

    buffer = BytesIO()
    wb.save(buffer)
    return buffer.getvalue()


class TablePDF(FPDF):

    def __init__(self, title):
        super().__init__(orientation='L', unit='mm', format='A4')
        self.title_text = title

    def header(self):
        self.set_font('Helvetica', 'B', 14)
        self.cell(0, 8, pdf_text(self.title_text), align='C', new_x='LMARGIN', new_y='NEXT')
        self.ln(2)

    def footer(self):
        self.set_y(-15)
        self.set_font('Helvetica', '', 7)
        self.cell(0, 10, f'Page {self.page_no()}/{{nb}}', align='C')


def build_pdf(title, columns, rows):
    """
    Paginated table. Columns with a zero pdf width are left out so wide
    exports still fit a landscape page.
    """
    columns = [column for column in columns if column[2]]
    pdf = TablePDF(title)
    pdf.alias_nb_pages()
    pdf.set_auto_page_break(auto=True, margin=15)
    pdf.add_page()

    def table_header():
        pdf.set_font('Helvetica', 'B', 7)
        pdf.set_fill_color(37, 99, 235)
        pdf.set_text_color(255, 255, 255)
        for header, _, width, _ in columns:
            pdf.cell(width, 7, pdf_text(header), border=1, fill=True, align='C')
        pdf.ln()
        pdf.set_text_color(0, 0, 0)
        pdf.set_font('Helvetica', '', 7)

    table_header()
    for obj in rows:
        if pdf.will_page_break(6):
            pdf.add_page()
            table_header()
        for _, _, width, getter in columns:
            value = getter(obj)
            if isinstance(value, float):
                text, align = f'{value:,.2f}', 'R'
            else:
                text, align = pdf_text(value), 'L'
            # Truncate to roughly what fits the cell at 7pt
            pdf.cell(width, 6, text[:int(width / 1.6)], border=1, align=align)
        pdf.ln()

    return bytes(pdf.output())
