"""
PDF composition primitives shared by every report recipe.

``ReportDocument`` collects a reportlab platypus story (letterhead, headings,
tables, notices, signature block) and renders it on ``finalize()`` through
``NumberedCanvas``, which stamps "Page X of Y" once the page count is known.
"""
import base64
import logging
import os
from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from io import BytesIO
from typing import Optional
from xml.sax.saxutils import escape

import requests
from reportlab.lib import colors
from reportlab.lib.enums import TA_CENTER
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.utils import ImageReader
from reportlab.pdfgen import canvas
from reportlab.platypus import (
    SimpleDocTemplate, Table, TableStyle, Paragraph, Spacer,
    PageBreak, KeepTogether, Image
)
from reportlab.platypus.flowables import HRFlowable

from utils.errors import RenderError

logger = logging.getLogger(__name__)

SIGNATURE_IMAGE_TIMEOUT = 10


@dataclass(frozen=True)
class TablePreset:
    header_bg: colors.Color
    header_fg: colors.Color = colors.white
    alt_row_bg: Optional[colors.Color] = None
    font_size: int = 9
    grid_color: colors.Color = colors.grey


INDIGO = TablePreset(
    header_bg=colors.Color(75 / 255, 70 / 255, 229 / 255),
    alt_row_bg=colors.Color(240 / 255, 240 / 255, 255 / 255)
)
GREY = TablePreset(
    header_bg=colors.Color(240 / 255, 240 / 255, 240 / 255),
    header_fg=colors.black
)
ACTIVITY = TablePreset(
    header_bg=colors.Color(41 / 255, 128 / 255, 185 / 255),
    font_size=8
)
DEPARTMENT = TablePreset(
    header_bg=colors.Color(41 / 255, 128 / 255, 185 / 255),
    alt_row_bg=colors.Color(245 / 255, 245 / 255, 245 / 255),
    font_size=8
)


@dataclass(frozen=True)
class GeneratedReport:
    filename: str
    content: bytes
    page_count: int


def column_title(key):
    """``faculty_name`` -> ``Faculty Name``"""
    return " ".join(word[:1].upper() + word[1:] for word in key.replace("_", " ").split())


def format_cell(value):
    if value is None or value == "":
        return "-"
    if isinstance(value, datetime):
        return value.strftime("%d-%m-%Y %H:%M")
    if isinstance(value, date):
        return value.strftime("%d-%m-%Y")
    if isinstance(value, bool):
        return "Yes" if value else "No"
    if isinstance(value, Decimal):
        return f"{value:.2f}"
    return str(value)


class NumberedCanvas(canvas.Canvas):
    """Defers every page until save() so each can be stamped 'Page X of Y'."""

    def __init__(self, *args, footer_note=None, **kwargs):
        super().__init__(*args, **kwargs)
        self._saved_page_states = []
        self.footer_note = footer_note
        self.page_labels = []
        self.page_count = 0

    def showPage(self):
        self._saved_page_states.append(dict(self.__dict__))
        self._startPage()

    def save(self):
        page_count = len(self._saved_page_states)
        for state in self._saved_page_states:
            self.__dict__.update(state)
            self.draw_page_footer(page_count)
            super().showPage()
        self.page_count = page_count
        super().save()

    def draw_page_footer(self, page_count):
        label = f"Page {self._pageNumber} of {page_count}"
        page_width = self._pagesize[0]

        self.saveState()
        self.setFont("Helvetica", 8)
        self.setFillColor(colors.grey)
        self.drawCentredString(page_width / 2, 20, label)
        if self.footer_note:
            self.drawString(36, 20, self.footer_note)
        self.restoreState()

        self.page_labels.append(label)


def signature_image_source(signature_ref):
    """Image bytes behind a signature reference; RenderError when unavailable."""
    if signature_ref.startswith("data:"):
        try:
            _, encoded = signature_ref.split(",", 1)
            return BytesIO(base64.b64decode(encoded))
        except ValueError as exc:
            raise RenderError("Malformed signature data URL") from exc

    if signature_ref.startswith(("http://", "https://")):
        try:
            response = requests.get(signature_ref, timeout=SIGNATURE_IMAGE_TIMEOUT)
            response.raise_for_status()
        except requests.RequestException as exc:
            raise RenderError(f"Signature download failed: {exc}") from exc
        return BytesIO(response.content)

    if not os.path.isfile(signature_ref):
        raise RenderError(f"Signature image not found: {signature_ref}")
    with open(signature_ref, "rb") as fh:
        return BytesIO(fh.read())


def load_signature_image(signature_ref, width=120, height=40):
    """
    Flowable for a signature reference (file path, data URL or http URL).
    Returns None when the reference is missing or cannot be read.
    """
    if not signature_ref:
        return None

    try:
        source = signature_image_source(signature_ref)
        ImageReader(source).getSize()
    except RenderError as exc:
        logger.warning(exc.message)
        return None
    except Exception:
        logger.warning("Could not load signature image %s", signature_ref[:80], exc_info=True)
        return None

    source.seek(0)
    return Image(source, width=width, height=height)


class ReportDocument:

    def __init__(self, title, pagesize=A4, footer_note=None, margin=36):
        self.title = title
        self.footer_note = footer_note
        self.buffer = BytesIO()
        self.doc = SimpleDocTemplate(
            self.buffer,
            pagesize=pagesize,
            leftMargin=margin,
            rightMargin=margin,
            topMargin=margin,
            bottomMargin=margin + 12,
            title=title
        )
        self.styles = getSampleStyleSheet()
        self.cell_style = ParagraphStyle(
            "ReportCell", parent=self.styles["Normal"], fontSize=8, leading=10
        )
        self.centered = ParagraphStyle(
            "ReportCentered", parent=self.styles["Normal"], alignment=TA_CENTER
        )
        self.story = []
        self.notices = []
        self.tables = []
        self.signature = None
        self.canvas = None

    @property
    def width(self):
        return self.doc.width

    # =========================================================
    # TEXT
    # =========================================================

    def heading(self, text, style="Title"):
        self.story.append(Paragraph(escape(text), self.styles[style]))

    def paragraph(self, text, style="Normal"):
        self.story.append(Paragraph(escape(text), self.styles[style]))

    def centered_line(self, text, bold=False):
        markup = f"<b>{escape(text)}</b>" if bold else escape(text)
        self.story.append(Paragraph(markup, self.centered))

    def spacer(self, height=12):
        self.story.append(Spacer(1, height))

    def notice(self, text):
        self.notices.append(text)
        self.story.append(Paragraph(f"<i>{escape(text)}</i>", self.styles["Normal"]))
        self.spacer()

    def page_break(self):
        self.story.append(PageBreak())

    def generated_line(self, department_name=None):
        self.paragraph(f"Generated on: {date.today().strftime('%d/%m/%Y')}")
        if department_name:
            self.paragraph(f"Department: {department_name}")
        self.spacer()

    # =========================================================
    # LETTERHEAD
    # =========================================================

    def logo_flowable(self, logo_path, size=60):
        if logo_path and os.path.isfile(logo_path):
            try:
                ImageReader(logo_path).getSize()
                return Image(logo_path, width=size, height=size)
            except Exception:
                logger.warning("Unreadable report logo %s", logo_path, exc_info=True)
        else:
            logger.warning("Report logo missing at %s", logo_path)

        placeholder = Table([["LOGO"]], colWidths=[size], rowHeights=[size])
        placeholder.setStyle(TableStyle([
            ("BOX", (0, 0), (-1, -1), 1, colors.black),
            ("ALIGN", (0, 0), (-1, -1), "CENTER"),
            ("VALIGN", (0, 0), (-1, -1), "MIDDLE"),
            ("FONTNAME", (0, 0), (-1, -1), "Helvetica-Bold"),
        ]))
        return placeholder

    def letterhead(self, header_lines, logo_path=None):
        lines = [
            Paragraph(f"<b>{escape(line)}</b>" if i < 2 else escape(line), self.centered)
            for i, line in enumerate(header_lines)
        ]
        header = Table(
            [[self.logo_flowable(logo_path), lines]],
            colWidths=[80, self.width - 80]
        )
        header.setStyle(TableStyle([
            ("VALIGN", (0, 0), (-1, -1), "MIDDLE"),
            ("LINEBELOW", (0, 0), (-1, 0), 1, colors.black),
        ]))
        self.story.append(header)
        self.spacer(16)

    # =========================================================
    # TABLES
    # =========================================================

    def add_table(self, columns, rows, preset=GREY, titles=None,
                  col_widths=None, empty_notice=None):
        """
        Append a table of ``rows`` (dicts) restricted to ``columns``.
        With no rows, ``empty_notice`` is shown instead when given.
        """
        if not rows and empty_notice:
            self.notice(empty_notice)
            return None

        titles = titles or [column_title(c) for c in columns]
        header_style = ParagraphStyle(
            "ReportHeader", parent=self.cell_style,
            fontName="Helvetica-Bold", textColor=preset.header_fg,
            fontSize=preset.font_size
        )
        body_style = ParagraphStyle(
            "ReportBody", parent=self.cell_style, fontSize=preset.font_size,
            leading=preset.font_size + 2
        )

        data = [[Paragraph(escape(t), header_style) for t in titles]]
        for row in rows:
            data.append([
                Paragraph(escape(format_cell(row.get(c))), body_style) for c in columns
            ])

        table = Table(data, colWidths=col_widths, repeatRows=1)
        commands = [
            ("BACKGROUND", (0, 0), (-1, 0), preset.header_bg),
            ("GRID", (0, 0), (-1, -1), 0.5, preset.grid_color),
            ("VALIGN", (0, 0), (-1, -1), "TOP"),
        ]
        if preset.alt_row_bg is not None:
            commands.append(
                ("ROWBACKGROUNDS", (0, 1), (-1, -1), [colors.white, preset.alt_row_bg])
            )
        table.setStyle(TableStyle(commands))

        self.tables.append(data)
        self.story.append(table)
        self.spacer()
        return table

    def key_value_table(self, pairs, preset=GREY):
        """Two-column table of (label, value) pairs with a header row."""
        rows = [{"label": label, "value": value} for label, value in pairs[1:]]
        return self.add_table(
            ["label", "value"], rows, preset=preset, titles=list(pairs[0]),
            col_widths=[self.width * 0.6, self.width * 0.4]
        )

    # =========================================================
    # SIGNATURES
    # =========================================================

    def signature_block(self, signatory, hod_name):
        def ruled_line():
            return HRFlowable(
                width="70%", thickness=0.7, color=colors.black,
                spaceBefore=28, spaceAfter=4, hAlign="LEFT"
            )

        image = load_signature_image(signatory.signature_ref)
        normal = self.styles["Normal"]

        faculty_slot = [
            Paragraph("<b>Faculty Signature:</b>", normal),
            image if image is not None else ruled_line(),
            Paragraph(escape(signatory.faculty_name), normal),
            Paragraph("Faculty", normal),
        ]
        hod_slot = [
            Paragraph("<b>HOD Signature:</b>", normal),
            ruled_line(),
            Paragraph(escape(hod_name), normal),
            Paragraph("Head of Department", normal),
        ]

        block = Table([[faculty_slot, hod_slot]], colWidths=[self.width / 2] * 2)
        block.setStyle(TableStyle([("VALIGN", (0, 0), (-1, -1), "TOP")]))

        self.signature = {
            "faculty_name": signatory.faculty_name,
            "hod_name": hod_name,
            "has_image": image is not None,
        }
        self.story.append(KeepTogether([Spacer(1, 30), block]))

    # =========================================================
    # OUTPUT
    # =========================================================

    def finalize(self):
        """Build the story and return the PDF bytes."""

        def make_canvas(*args, **kwargs):
            self.canvas = NumberedCanvas(*args, footer_note=self.footer_note, **kwargs)
            return self.canvas

        if not self.story:
            self.spacer()

        self.doc.build(self.story, canvasmaker=make_canvas)
        return self.buffer.getvalue()

    @property
    def page_count(self):
        return self.canvas.page_count if self.canvas else 0
