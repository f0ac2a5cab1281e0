"""
Printable bill generation.
Renders a committed sale (store header, line items, total) to PDF.
"""
from datetime import datetime
from io import BytesIO

from reportlab.lib import colors
from reportlab.lib.enums import TA_CENTER
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import inch
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle
from xml.sax.saxutils import escape

from pharmacy_pos.models.sale import Sale
from pharmacy_pos.models.store import Store


def _money(value) -> str:
    return f"Rs. {float(value):,.2f}"


def _store_address(store: Store) -> str:
    parts = [store.address, store.city, store.state, store.zip_code]
    return ", ".join(escape(p) for p in parts if p)


def generate_bill_pdf(sale: Sale, store: Store) -> BytesIO:
    """
    Generate the PDF bill for a sale.

    Args:
        sale: committed Sale with its items loaded
        store: the store the sale belongs to

    Returns:
        BytesIO buffer positioned at the start of the PDF
    """
    buffer = BytesIO()
    doc = SimpleDocTemplate(buffer, pagesize=A4, topMargin=0.5*inch, bottomMargin=0.5*inch)

    elements = []
    styles = getSampleStyleSheet()

    title_style = ParagraphStyle(
        'BillTitle',
        parent=styles['Heading1'],
        fontSize=20,
        textColor=colors.HexColor('#1a56db'),
        alignment=TA_CENTER,
        spaceAfter=6
    )
    normal_style = ParagraphStyle(
        'BillNormal',
        parent=styles['Normal'],
        fontSize=10,
        textColor=colors.HexColor('#374151')
    )
    footer_style = ParagraphStyle(
        'BillFooter',
        parent=styles['Normal'],
        fontSize=8,
        textColor=colors.grey,
        alignment=TA_CENTER
    )

    elements.append(Paragraph(escape(store.name), title_style))
    address = _store_address(store)
    if address:
        elements.append(Paragraph(address, ParagraphStyle('Addr', parent=normal_style, alignment=TA_CENTER)))
    elements.append(Spacer(1, 0.3*inch))

    sale_date = sale.sale_date.strftime('%d %b %Y, %I:%M %p') if sale.sale_date else ""
    info_data = [[
        Paragraph(f"<b>Bill No:</b> {escape(sale.bill_number)}<br/>"
                  f"<b>Date:</b> {sale_date}", normal_style),
        Paragraph(f"<b>Customer:</b> {escape(sale.customer_name or 'Walk-in')}", normal_style),
    ]]
    info_table = Table(info_data, colWidths=[3.5*inch, 3*inch])
    info_table.setStyle(TableStyle([
        ('VALIGN', (0, 0), (-1, -1), 'TOP'),
        ('TOPPADDING', (0, 0), (-1, -1), 6),
        ('BOTTOMPADDING', (0, 0), (-1, -1), 6),
    ]))
    elements.append(info_table)
    elements.append(Spacer(1, 0.2*inch))

    items_data = [["#", "Medicine", "Qty", "Rate", "Amount"]]
    for n, item in enumerate(sale.items, start=1):
        items_data.append([
            str(n),
            Paragraph(escape(item.medicine_name), normal_style),
            str(item.quantity_sold),
            _money(item.price_per_unit),
            _money(item.total_price),
        ])
    items_data.append(["", "", "", "TOTAL", _money(sale.total_amount)])

    items_table = Table(items_data, colWidths=[0.4*inch, 3*inch, 0.7*inch, 1.1*inch, 1.3*inch])
    items_table.setStyle(TableStyle([
        ('BACKGROUND', (0, 0), (-1, 0), colors.HexColor('#f3f4f6')),
        ('FONTNAME', (0, 0), (-1, 0), 'Helvetica-Bold'),
        ('FONTNAME', (0, -1), (-1, -1), 'Helvetica-Bold'),
        ('ALIGN', (2, 0), (-1, -1), 'RIGHT'),
        ('GRID', (0, 0), (-1, -2), 0.5, colors.grey),
        ('LINEABOVE', (3, -1), (-1, -1), 1, colors.black),
        ('TOPPADDING', (0, 0), (-1, -1), 5),
        ('BOTTOMPADDING', (0, 0), (-1, -1), 5),
    ]))
    elements.append(items_table)

    elements.append(Spacer(1, 0.5*inch))
    elements.append(Paragraph("Thank you for your purchase. Get well soon!", footer_style))
    elements.append(Paragraph(f"Printed on {datetime.now().strftime('%d %b %Y at %I:%M %p')}", footer_style))

    doc.build(elements)
    buffer.seek(0)
    return buffer
