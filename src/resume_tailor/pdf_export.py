# Copyright 2026 Justin Cook
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""
Renders a resume to PDF with reportlab: coloured header band, ruled section
headers, wrapped body text and automatic page breaks.
"""

import logging
from io import BytesIO
from typing import List

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.utils import simpleSplit
from reportlab.pdfgen import canvas

from resume_tailor.generator import DEFAULT_THEME, resolve_theme_color
from resume_tailor.models import StructuredResume

logger = logging.getLogger(__name__)

FONT_REGULAR = "Helvetica"
FONT_BOLD = "Helvetica-Bold"
FONT_ITALIC = "Helvetica-Oblique"

MARGIN = 56
HEADER_HEIGHT = 100
SZ_NAME = 24
SZ_CONTACT = 10
SZ_SECTION = 12
SZ_TITLE = 11
SZ_BODY = 10
LEADING = 1.35

MUTED = colors.HexColor("#646464")
RULE_FALLBACK = colors.HexColor("#C8C8C8")


class _PdfWriter:
    """Cursor over a reportlab canvas that starts a new page when content runs out."""

    def __init__(self, pdf: canvas.Canvas, page_size, accent: str):
        self.pdf = pdf
        self.width, self.height = page_size
        self.content_width = self.width - 2 * MARGIN
        self.plain = accent == "000000"
        self.accent = colors.HexColor(f"#{accent}")
        self.y = self.height - MARGIN

    def ensure_space(self, needed: float):
        if self.y - needed < MARGIN:
            self.pdf.showPage()
            self.y = self.height - MARGIN

    def header(self, name: str, contact: str):
        pdf = self.pdf
        if self.plain:
            text_color = colors.black
        else:
            pdf.setFillColor(self.accent)
            pdf.rect(0, self.height - HEADER_HEIGHT, self.width, HEADER_HEIGHT, stroke=0, fill=1)
            text_color = colors.white

        pdf.setFillColor(text_color)
        pdf.setFont(FONT_BOLD, SZ_NAME)
        pdf.drawString(MARGIN, self.height - 50, name)
        if contact:
            pdf.setFont(FONT_REGULAR, SZ_CONTACT)
            pdf.drawString(MARGIN, self.height - 72, contact)
        pdf.setFillColor(colors.black)
        self.y = self.height - HEADER_HEIGHT - 24

    def section(self, title: str):
        self.ensure_space(SZ_SECTION * 3)
        self.y -= 8
        pdf = self.pdf
        pdf.setFont(FONT_BOLD, SZ_SECTION)
        pdf.setFillColor(colors.black if self.plain else self.accent)
        pdf.drawString(MARGIN, self.y, title.upper())
        self.y -= 4
        pdf.setStrokeColor(RULE_FALLBACK if self.plain else self.accent)
        pdf.setLineWidth(0.5)
        pdf.line(MARGIN, self.y, self.width - MARGIN, self.y)
        pdf.setFillColor(colors.black)
        self.y -= SZ_SECTION + 2

    def text(self, text: str, font: str = FONT_REGULAR, size: float = SZ_BODY,
             color=colors.black, indent: float = 0):
        lines: List[str] = simpleSplit(text, font, size, self.content_width - indent)
        leading = size * LEADING
        for line in lines:
            self.ensure_space(leading)
            self.pdf.setFont(font, size)
            self.pdf.setFillColor(color)
            self.pdf.drawString(MARGIN + indent, self.y, line)
            self.y -= leading
        self.pdf.setFillColor(colors.black)

    def gap(self, amount: float = 4):
        self.y -= amount


def render_resume_pdf(resume: StructuredResume, theme: str = DEFAULT_THEME, page_size=A4) -> bytes:
    """Returns the PDF document for resume as bytes."""
    buffer = BytesIO()
    pdf = canvas.Canvas(buffer, pagesize=page_size)
    pdf.setTitle(f"{resume.name} - Resume")
    writer = _PdfWriter(pdf, page_size, resolve_theme_color(theme))

    contact_parts = [p for p in (resume.email, resume.phone, resume.location) if p]
    writer.header(resume.name, "  |  ".join(contact_parts) or resume.contact)

    if resume.summary:
        writer.section("Professional Summary")
        writer.text(resume.summary)

    if resume.skills:
        writer.section("Skills")
        writer.text("  •  ".join(resume.skills))

    if resume.experience:
        writer.section("Professional Experience")
        for exp in resume.experience:
            heading = exp.title + (f" at {exp.company}" if exp.company else "")
            writer.text(heading, font=FONT_BOLD, size=SZ_TITLE)
            if exp.duration:
                writer.text(exp.duration, font=FONT_ITALIC, color=MUTED)
            for line in exp.description.split("\n"):
                line = line.strip()
                if not line:
                    continue
                if not line.startswith(("•", "-")):
                    line = f"• {line}"
                writer.text(line, indent=8)
            writer.gap()

    if resume.education:
        writer.section("Education")
        for edu in resume.education:
            writer.text(edu.degree or "Degree", font=FONT_BOLD, size=SZ_TITLE)
            if edu.institution:
                writer.text(edu.institution)
            if edu.year:
                writer.text(edu.year, font=FONT_ITALIC, color=MUTED)
            writer.gap()

    if resume.projects:
        writer.section("Projects")
        for project in resume.projects:
            writer.text(f"• {project}", indent=8)

    if resume.certifications:
        writer.section("Certifications")
        for cert in resume.certifications:
            writer.text(f"• {cert}", indent=8)

    pdf.save()
    return buffer.getvalue()


def write_resume_pdf(resume: StructuredResume, output_path: str, theme: str = DEFAULT_THEME) -> str:
    data = render_resume_pdf(resume, theme=theme)
    with open(output_path, "wb") as f:
        f.write(data)
    logger.info(f"PDF generated successfully: {output_path}")
    return output_path
