"""Prescription PDF export.

Layout is in millimetres measured from the top of an A4 page, the same way
the clinic's printed prescriptions are specified; ``_y`` flips it into
reportlab's bottom-left coordinates.
"""

import io
import re

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.units import mm
from reportlab.lib.utils import simpleSplit
from reportlab.pdfgen import canvas

from core.config import CLINIC_NAME
from core.time_utils import local_now, to_instant

PAGE_WIDTH, PAGE_HEIGHT = A4

HEADER_COLOUR = colors.Color(15 / 255, 191 / 255, 165 / 255)
TEXT_COLOUR = colors.Color(51 / 255, 51 / 255, 51 / 255)
RULE_COLOUR = colors.Color(200 / 255, 200 / 255, 200 / 255)
TABLE_HEADER_COLOUR = colors.Color(240 / 255, 240 / 255, 240 / 255)
FOOTER_COLOUR = colors.Color(150 / 255, 150 / 255, 150 / 255)

LEFT = 15
RIGHT = 195
PAGE_BREAK_AT = 270
CONTINUE_AT = 20
NOTES_WIDTH = 170
NOTES_BLOCK_HEIGHT = 25

DISCLAIMER = f"This is a digitally generated prescription from {CLINIC_NAME} Management System."


def _y(top_mm: float) -> float:
    return PAGE_HEIGHT - top_mm * mm


def _field(record, name):
    if isinstance(record, dict):
        return record.get(name)
    return getattr(record, name, None)


class PrescriptionDocument:
    """Draws one prescription; ``page_count`` is available after ``render``."""

    def __init__(self, prescription, patient_name: str | None, doctor_name: str | None, generated_at=None):
        self.prescription = prescription
        self.patient_name = patient_name or "—"
        self.doctor_name = doctor_name or "—"
        self.generated_at = generated_at or local_now()
        self.page_count = 0
        self._canvas = None

    # -- drawing primitives --------------------------------------------
    def _text(self, x, y, text, size=11, bold=False, colour=TEXT_COLOUR):
        c = self._canvas
        c.setFont("Helvetica-Bold" if bold else "Helvetica", size)
        c.setFillColor(colour)
        c.drawString(x * mm, _y(y), str(text))

    def _rule(self, y):
        c = self._canvas
        c.setStrokeColor(RULE_COLOUR)
        c.line(LEFT * mm, _y(y), RIGHT * mm, _y(y))

    def _new_page(self):
        self._canvas.showPage()
        self.page_count += 1
        return CONTINUE_AT

    # -- sections ------------------------------------------------------
    def _header(self, issued):
        c = self._canvas
        c.setFillColor(HEADER_COLOUR)
        c.rect(0, _y(35), PAGE_WIDTH, 35 * mm, stroke=0, fill=1)
        self._text(15, 18, CLINIC_NAME, size=20, bold=True, colour=colors.white)
        self._text(15, 27, "Digital Prescription", size=10, colour=colors.white)
        date_label = issued.astimezone().strftime("%B %d, %Y") if issued else "—"
        self._text(140, 27, f"Date: {date_label}", size=10, colour=colors.white)

    def _parties(self):
        y = 48
        self._text(15, y, "Patient:", bold=True)
        self._text(45, y, self.patient_name)
        y += 8
        self._text(15, y, "Doctor:", bold=True)
        self._text(45, y, f"Dr. {self.doctor_name}")
        diagnosis = _field(self.prescription, "diagnosis")
        if diagnosis:
            y += 8
            self._text(15, y, "Diagnosis:", bold=True)
            self._text(50, y, diagnosis)
        return y

    def _medicines(self, y):
        y += 12
        self._rule(y)
        y += 10
        self._text(15, y, "Prescribed Medicines", size=13, bold=True)
        y += 8

        c = self._canvas
        c.setFillColor(TABLE_HEADER_COLOUR)
        c.rect(LEFT * mm, _y(y + 4), (RIGHT - LEFT) * mm, 8 * mm, stroke=0, fill=1)
        for x, label in ((18, "#"), (28, "Medicine"), (100, "Dosage"), (140, "Instructions")):
            self._text(x, y + 1, label, size=9, bold=True)
        y += 10

        for index, medicine in enumerate(_field(self.prescription, "medicines") or [], start=1):
            self._text(18, y, index, size=10)
            self._text(28, y, medicine.get("name") or "—", size=10)
            self._text(100, y, medicine.get("dosage") or "—", size=10)
            self._text(140, y, medicine.get("instruction") or "—", size=10)
            y += 8
            if y > PAGE_BREAK_AT:
                y = self._new_page()
        return y

    def _notes(self, y):
        notes = _field(self.prescription, "notes")
        if not notes:
            return y
        # rule, heading and a first line must share a page
        if y + NOTES_BLOCK_HEIGHT > PAGE_BREAK_AT:
            y = self._new_page()
        y += 8
        self._rule(y)
        y += 10
        self._text(15, y, "Notes:", size=10, bold=True)
        y += 7
        for line in wrap_text(notes, NOTES_WIDTH):
            if y > PAGE_BREAK_AT:
                y = self._new_page()
            self._text(15, y, line, size=9)
            y += 5
        return y

    def _footer(self, y):
        y = max(y + 20, 250)
        if y > PAGE_BREAK_AT:
            y = self._new_page()
        self._rule(y)
        y += 8
        self._text(15, y, DISCLAIMER, size=8, colour=FOOTER_COLOUR)
        stamp = self.generated_at.strftime("%Y-%m-%d %H:%M:%S")
        self._text(15, y + 5, f"Generated on: {stamp}", size=8, colour=FOOTER_COLOUR)

    def render(self) -> bytes:
        buffer = io.BytesIO()
        self._canvas = canvas.Canvas(buffer, pagesize=A4)
        self._canvas.setTitle("Prescription")
        self.page_count = 1

        self._header(to_instant(_field(self.prescription, "created_at")))
        y = self._parties()
        y = self._medicines(y)
        y = self._notes(y)
        self._footer(y)

        self._canvas.showPage()
        self._canvas.save()
        return buffer.getvalue()


def wrap_text(text: str, width_mm: float, font: str = "Helvetica", size: int = 9) -> list[str]:
    lines = []
    for paragraph in str(text).splitlines() or [""]:
        lines.extend(simpleSplit(paragraph, font, size, width_mm * mm) or [""])
    return lines


def render_prescription_pdf(prescription, patient_name, doctor_name, generated_at=None) -> bytes:
    return PrescriptionDocument(prescription, patient_name, doctor_name, generated_at).render()


def prescription_filename(patient_name: str | None, issued) -> str:
    name = re.sub(r"\s+", "_", (patient_name or "").strip()) or "patient"
    instant = to_instant(issued)
    day = instant.astimezone().strftime("%Y-%m-%d") if instant else "undated"
    return f"prescription_{name}_{day}.pdf"
