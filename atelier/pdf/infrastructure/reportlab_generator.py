import logging
import os
import io
from typing import Optional
from xml.sax.saxutils import escape

# ReportLab Imports
from reportlab.platypus import SimpleDocTemplate, Paragraph, Spacer, Table, TableStyle
from reportlab.lib.styles import getSampleStyleSheet, ParagraphStyle
from reportlab.lib.units import mm
from reportlab.lib.pagesizes import A5
from reportlab.lib import colors

from atelier.config import Settings, settings as default_settings

# Domain
from atelier.pdf.domain.generator import AbstractReceiptPDFGenerator
from atelier.pdf.domain.exceptions import ReceiptGenerationException
from atelier.sales.application.receipts import describe_line, format_money
from atelier.sales.domain.entities import Sale, SaleChannel

logger = logging.getLogger(__name__)

PRIMARY_COLOR = colors.HexColor("#7a1f3d")
FOOTER_TEXT = "Merci de votre visite !"

class ReportLabReceiptGenerator(AbstractReceiptPDFGenerator):
    """Implémentation du générateur de reçus utilisant ReportLab."""

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or default_settings

    async def generate_receipt_pdf(
        self,
        sale: Sale,
        customer_name: Optional[str] = None,
        output_path: Optional[str] = None
    ) -> bytes:
        number = sale.invoice_number
        currency = self.settings.CURRENCY
        logger.info(f"[PDFGen] Génération PDF reçu {number}")

        buffer = io.BytesIO() # Buffer mémoire pour le PDF
        doc = SimpleDocTemplate(buffer, pagesize=A5, leftMargin=12*mm, rightMargin=12*mm, topMargin=12*mm)
        elements = []
        styles = getSampleStyleSheet()

        # Styles personnalisés
        title_style = ParagraphStyle(name="StoreTitle", parent=styles["Heading1"], textColor=PRIMARY_COLOR, alignment=1)
        centered_style = ParagraphStyle(name="Centered", parent=styles["Normal"], alignment=1)
        normal_style = styles["Normal"]
        bold_style = ParagraphStyle(name="Bold", parent=normal_style, fontName='Helvetica-Bold')
        footer_style = ParagraphStyle(name="Footer", fontSize=9, textColor=colors.gray, alignment=1)

        # 1. En-tête boutique
        elements.append(Paragraph(escape(self.settings.STORE_NAME), title_style))
        elements.append(Paragraph(escape(self.settings.STORE_TAGLINE), centered_style))
        elements.append(Spacer(1, 4*mm))

        # 2. Infos de la vente
        is_order = sale.channel == SaleChannel.BOUTIQUE
        elements.append(Paragraph(f"<b>{'Commande' if is_order else 'Facture'} N° :</b> {escape(number)}", normal_style))
        elements.append(Paragraph(f"Date : {sale.created_at:%d/%m/%Y %H:%M}", normal_style))
        if sale.seller_name:
            elements.append(Paragraph(f"Vendeur : {escape(sale.seller_name)}", normal_style))
        if sale.customer is not None:
            elements.append(Paragraph(f"Client : {escape(sale.customer.full_name)} ({escape(sale.customer.phone)})", normal_style))
        elif customer_name:
            elements.append(Paragraph(f"Client : {escape(customer_name)}", normal_style))
        elements.append(Spacer(1, 4*mm))

        # 3. Tableau des lignes
        table_data = [["Article", "Qté", "P.U.", "Total"]]
        for line in sale.lines:
            table_data.append([
                Paragraph(escape(describe_line(line)), normal_style),
                str(line.quantity),
                format_money(line.unit_price, ""),
                format_money(line.line_total, ""),
            ])
        table_data.append(["", "", "Sous-total", format_money(sale.subtotal, currency)])
        if sale.discount > 0:
            table_data.append(["", "", "Remise", f"-{format_money(sale.discount, currency)}"])
        table_data.append(["", "", Paragraph("<b>TOTAL</b>", bold_style), Paragraph(f"<b>{format_money(sale.total, currency)}</b>", bold_style)])

        total_rows = 2 if sale.discount > 0 else 1
        table = Table(table_data, colWidths=[52*mm, 12*mm, 26*mm, 34*mm])
        table.setStyle(TableStyle([
            ('BACKGROUND', (0, 0), (-1, 0), PRIMARY_COLOR),
            ('TEXTCOLOR', (0, 0), (-1, 0), colors.whitesmoke),
            ('FONTNAME', (0, 0), (-1, 0), 'Helvetica-Bold'),
            ('VALIGN', (0, 0), (-1, -1), 'MIDDLE'),
            ('ALIGN', (1, 0), (-1, -1), 'RIGHT'),
            ('FONTSIZE', (0, 1), (-1, -1), 9),
            ('LINEBELOW', (0, 0), (-1, -(total_rows + 2)), 0.5, colors.darkgrey),
            ('LINEABOVE', (2, -1), (-1, -1), 1, colors.black),
            ('BOTTOMPADDING', (0, 0), (-1, 0), 6),
        ]))
        elements.append(table)
        elements.append(Spacer(1, 4*mm))

        # 4. Paiement
        elements.append(Paragraph(f"Mode de paiement : {sale.payment_method.label}", normal_style))

        def add_footer(canvas, doc):
            canvas.saveState()
            footer = Paragraph(FOOTER_TEXT, footer_style)
            w, h = footer.wrap(doc.width, doc.bottomMargin)
            footer.drawOn(canvas, doc.leftMargin, h)
            canvas.restoreState()

        # --- Génération du PDF dans le buffer ---
        try:
            doc.build(elements, onFirstPage=add_footer, onLaterPages=add_footer)
            pdf_bytes = buffer.getvalue()
        except Exception as e:
            logger.error(f"[PDFGen] Erreur ReportLab build() pour reçu {number}: {e}", exc_info=True)
            raise ReceiptGenerationException(f"Erreur lors de la construction du PDF: {e}", original_exception=e)
        finally:
            buffer.close()
        logger.info(f"[PDFGen] PDF reçu {number} généré en mémoire ({len(pdf_bytes)} bytes).")

        if output_path:
            try:
                output_dir = os.path.dirname(output_path)
                if output_dir:
                    os.makedirs(output_dir, exist_ok=True)
                with open(output_path, "wb") as f:
                    f.write(pdf_bytes)
                logger.info(f"[PDFGen] PDF reçu {number} sauvegardé dans: {output_path}")
            except OSError as save_err:
                logger.error(f"[PDFGen] Erreur sauvegarde PDF dans {output_path}: {save_err}", exc_info=True)
                raise ReceiptGenerationException(f"Sauvegarde impossible dans {output_path}", original_exception=save_err)

        return pdf_bytes
