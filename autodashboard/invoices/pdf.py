"""Invoice PDF rendering with fpdf2"""
import logging

from fpdf import FPDF

logger = logging.getLogger(__name__)

COMPANY_NAME = 'Auto Dashboard'


def pdf_text(value):
    """Core fonts are latin-1 only; anything else is replaced with '?'"""
    if value is None:
        return ''
    return str(value).encode('latin-1', 'replace').decode('latin-1')


def _money(amount):
    return f"${float(amount):,.2f}"


class InvoicePDF(FPDF):

    def __init__(self, invoice):
        super().__init__(orientation='P', unit='mm', format='A4')
        self.invoice = invoice

    def header(self):
        self.set_font('Helvetica', 'B', 16)
        self.cell(0, 10, pdf_text(COMPANY_NAME), new_x='LMARGIN', new_y='NEXT')
        self.set_font('Helvetica', '', 10)
        self.cell(0, 6, pdf_text(f'Invoice {self.invoice.invoice_number}'), new_x='LMARGIN', new_y='NEXT')
        self.ln(4)

    def footer(self):
        self.set_y(-15)
        self.set_font('Helvetica', '', 8)
        self.cell(0, 10, f'Page {self.page_no()}/{{nb}}', align='C')


def render_invoice_pdf(invoice):
    """Return the PDF bytes for an invoice with its items and dealer"""
    dealer = invoice.dealer
    pdf = InvoicePDF(invoice)
    pdf.alias_nb_pages()
    pdf.add_page()
    pdf.set_auto_page_break(auto=True, margin=20)

    pdf.set_font('Helvetica', '', 10)
    details = [
        ('Date', invoice.created_at.strftime('%Y-%m-%d')),
        ('Status', invoice.get_status_display()),
        ('Dealer', dealer.name),
        ('Company', dealer.company_name or '-'),
        ('Email', dealer.email),
        ('Phone', dealer.phone or '-'),
    ]
    if invoice.paid_at:
        details.append(('Paid', invoice.paid_at.strftime('%Y-%m-%d')))
    for label, value in details:
        pdf.set_font('Helvetica', 'B', 10)
        pdf.cell(30, 6, pdf_text(label))
        pdf.set_font('Helvetica', '', 10)
        pdf.cell(0, 6, pdf_text(value), new_x='LMARGIN', new_y='NEXT')
    pdf.ln(6)

    col_w = [12, 138, 40]
    pdf.set_font('Helvetica', 'B', 10)
    pdf.set_fill_color(37, 99, 235)
    pdf.set_text_color(255, 255, 255)
    for width, header in zip(col_w, ['#', 'Description', 'Amount']):
        pdf.cell(width, 8, header, border=1, fill=True, align='C')
    pdf.ln()
    pdf.set_text_color(0, 0, 0)

    pdf.set_font('Helvetica', '', 9)
    for index, item in enumerate(invoice.items.all(), 1):
        pdf.cell(col_w[0], 7, str(index), border=1, align='C')
        pdf.cell(col_w[1], 7, pdf_text(item.description[:90]), border=1)
        pdf.cell(col_w[2], 7, _money(item.amount), border=1, align='R')
        pdf.ln()

    pdf.set_font('Helvetica', 'B', 10)
    pdf.cell(col_w[0] + col_w[1], 8, 'Total', border=1, align='R')
    pdf.cell(col_w[2], 8, _money(invoice.total_amount), border=1, align='R')
    pdf.ln()

    logger.debug(f"Rendered PDF for invoice {invoice.invoice_number}")
    return bytes(pdf.output())
