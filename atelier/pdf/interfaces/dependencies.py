from typing import Annotated
from fastapi import Depends

# Domain
from atelier.pdf.domain.generator import AbstractReceiptPDFGenerator

# Infrastructure
from atelier.pdf.infrastructure.reportlab_generator import ReportLabReceiptGenerator

# Application
from atelier.pdf.application.services import ReceiptPDFService

# --- PDF Generator Dependency ---

def get_receipt_pdf_generator() -> AbstractReceiptPDFGenerator:
    """Fournit l'implémentation concrète du générateur (ReportLab)."""
    return ReportLabReceiptGenerator()

ReceiptPDFGeneratorDep = Annotated[AbstractReceiptPDFGenerator, Depends(get_receipt_pdf_generator)]

# --- PDF Service Dependency ---

def get_receipt_pdf_service(
    pdf_generator: ReceiptPDFGeneratorDep
) -> ReceiptPDFService:
    return ReceiptPDFService(pdf_generator=pdf_generator)

ReceiptPDFServiceDep = Annotated[ReceiptPDFService, Depends(get_receipt_pdf_service)]
