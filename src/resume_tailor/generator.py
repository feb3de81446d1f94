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
Handles the generation of MS Word (DOCX) resumes and cover letters.
"""

import re
import logging
from datetime import datetime

from docx import Document
from docx.enum.text import WD_ALIGN_PARAGRAPH
from docx.oxml import OxmlElement
from docx.oxml.ns import qn
from docx.shared import Inches, Pt, RGBColor

from resume_tailor.models import StructuredResume

logger = logging.getLogger(__name__)

THEME_COLORS = {
    "Rose": "F86A68",
    "Blue": "3B82F6",
    "Green": "22C55E",
    "Purple": "9333EA",
    "Orange": "F97316",
    "Slate": "475569",
    "None": "000000",
}
DEFAULT_THEME = "Rose"
MUTED_COLOR = "666666"
RULE_FALLBACK_COLOR = "CCCCCC"

_HEX_RE = re.compile(r"^#?[0-9A-Fa-f]{6}$")


def resolve_theme_color(theme: str) -> str:
    """Accepts a theme name (case-insensitive) or a 6 digit hex colour."""
    if not theme:
        return THEME_COLORS[DEFAULT_THEME]
    for name, hex_value in THEME_COLORS.items():
        if name.lower() == theme.lower():
            return hex_value
    if _HEX_RE.match(theme):
        return theme.lstrip("#").upper()
    raise ValueError(f"Unknown theme '{theme}'. Choose one of: {', '.join(THEME_COLORS)}")


class ResumeDocxGenerator:
    """
    Generates a styled DOCX resume from a StructuredResume.
    """
    def __init__(self, template_path: str = None, theme_color: str = THEME_COLORS[DEFAULT_THEME]):
        self.theme_color = resolve_theme_color(theme_color)
        self.template_path = template_path
        self.template_used = False
        self.styles = {
            'title': 'Title',
            'h1': 'Heading 2',
            'body': 'Normal',
            'bullet': 'List Bullet',
        }

    # --- document setup ---

    def _new_document(self):
        """Fresh document, from the template when one loads cleanly."""
        if self.template_path:
            try:
                logger.info(f"Loading template: {self.template_path}")
                document = Document(self.template_path)
                self.template_used = True
                self._detect_template_styles(document)
                self._clear_body_content(document)
                return document
            except Exception as e:
                logger.error(f"Error loading template: {e}. Falling back to default.")
                self.template_used = False

        document = Document()
        self._setup_styles(document)
        return document

    def _detect_template_styles(self, document):
        """
        Picks heading and bullet styles from the template's own paragraphs.
        Short, upper-case or section-named paragraphs vote for the heading style.
        """
        paragraphs = [p for p in document.paragraphs if p.text.strip()]
        if paragraphs:
            self.styles['title'] = paragraphs[0].style.name
            logger.debug(f"    > Detected Title Style: '{self.styles['title']}'")

        header_scores = {}
        bullet_scores = {}
        for p in paragraphs[1:]:
            text = p.text.strip()
            name = p.style.name
            score = 0
            if len(text) < 50:
                score += 1
            if text.isupper() and len(text) > 4:
                score += 3
            if any(k in text.lower() for k in ('experience', 'education', 'skills', 'summary', 'projects')):
                score += 5
            if 'title' not in name.lower():
                header_scores[name] = header_scores.get(name, 0) + score

            if 'list' in name.lower() or 'bullet' in name.lower():
                bullet_scores[name] = bullet_scores.get(name, 0) + 10
            if text.startswith(('•', '-', '➢')):
                bullet_scores[name] = bullet_scores.get(name, 0) + 5

        if header_scores:
            best = max(header_scores, key=header_scores.get)
            if header_scores[best] > 0:
                self.styles['h1'] = best
                logger.info(f"    > Heuristic Header Detection: Using '{best}'")
        if bullet_scores:
            best = max(bullet_scores, key=bullet_scores.get)
            self.styles['bullet'] = best
            logger.info(f"    > Heuristic Bullet Detection: Using '{best}'")

    def _clear_body_content(self, document):
        """Removes template placeholder paragraphs and tables, keeping section properties and graphics."""
        body = document.element.body
        for element in list(body):
            if element.tag.endswith('sectPr'):
                continue
            if 'w:drawing' in element.xml or 'w:pict' in element.xml:
                continue
            if element.tag.endswith('}p') or element.tag.endswith('}tbl'):
                body.remove(element)

    def _setup_styles(self, document):
        style = document.styles['Normal']
        style.font.name = 'Calibri'
        style.font.size = Pt(11)
        for section in document.sections:
            section.top_margin = section.bottom_margin = Inches(0.5)
            section.left_margin = section.right_margin = Inches(0.5)

    def _style(self, document, key: str):
        """Named style when the document defines it, else None (python-docx default)."""
        name = self.styles.get(key)
        if name and any(s.name == name for s in document.styles):
            return name
        return None

    # --- building blocks ---

    @property
    def _accent(self) -> str:
        return self.theme_color

    @property
    def _rule_color(self) -> str:
        return RULE_FALLBACK_COLOR if self.theme_color == "000000" else self.theme_color

    def _add_bottom_border(self, paragraph):
        p_pr = paragraph._p.get_or_add_pPr()
        borders = OxmlElement('w:pBdr')
        bottom = OxmlElement('w:bottom')
        bottom.set(qn('w:val'), 'single')
        bottom.set(qn('w:sz'), '6')
        bottom.set(qn('w:space'), '1')
        bottom.set(qn('w:color'), self._rule_color)
        borders.append(bottom)
        p_pr.append(borders)

    def _add_header(self, document, resume: StructuredResume):
        p = document.add_paragraph(style=self._style(document, 'title'))
        run = p.add_run(resume.name)
        run.bold = True
        run.font.size = Pt(24)
        run.font.color.rgb = RGBColor.from_string(self._accent)
        p.alignment = WD_ALIGN_PARAGRAPH.CENTER

        contact_parts = [part for part in (resume.email, resume.phone, resume.location) if part]
        if not contact_parts and resume.contact:
            contact_parts = [resume.contact]
        if contact_parts:
            p = document.add_paragraph()
            run = p.add_run("  |  ".join(contact_parts))
            run.font.size = Pt(10)
            run.font.color.rgb = RGBColor.from_string(MUTED_COLOR)
            p.alignment = WD_ALIGN_PARAGRAPH.CENTER

    def _add_section_header(self, document, title: str):
        p = document.add_paragraph(style=self._style(document, 'h1'))
        run = p.add_run(title.upper())
        run.bold = True
        run.font.size = Pt(12)
        run.font.color.rgb = RGBColor.from_string(self._accent)
        p.paragraph_format.space_before = Pt(15)
        p.paragraph_format.space_after = Pt(5)
        p.paragraph_format.keep_with_next = True
        self._add_bottom_border(p)

    def _add_bullet(self, document, text: str):
        p = document.add_paragraph(f"• {text}")
        p.paragraph_format.left_indent = Inches(0.25)
        p.paragraph_format.widow_control = True

    def _add_muted(self, document, text: str):
        p = document.add_paragraph()
        run = p.add_run(text)
        run.italic = True
        run.font.size = Pt(10)
        run.font.color.rgb = RGBColor.from_string(MUTED_COLOR)

    # --- public API ---

    def build(self, resume: StructuredResume):
        """Assembles and returns the python-docx Document without saving it."""
        document = self._new_document()
        self._add_header(document, resume)

        if resume.summary:
            self._add_section_header(document, "Professional Summary")
            document.add_paragraph(resume.summary)

        if resume.skills:
            self._add_section_header(document, "Skills")
            document.add_paragraph("  •  ".join(resume.skills))

        if resume.experience:
            self._add_section_header(document, "Professional Experience")
            for exp in resume.experience:
                p = document.add_paragraph()
                p.add_run(exp.title).bold = True
                if exp.company:
                    p.add_run(f" at {exp.company}")
                p.paragraph_format.keep_with_next = True
                if exp.duration:
                    self._add_muted(document, exp.duration)
                for line in exp.description.split("\n"):
                    clean = re.sub(r"^[•\-]\s*", "", line).strip()
                    if clean:
                        self._add_bullet(document, clean)

        if resume.education:
            self._add_section_header(document, "Education")
            for edu in resume.education:
                p = document.add_paragraph()
                p.add_run(edu.degree or "Degree").bold = True
                p.paragraph_format.keep_with_next = True
                if edu.institution:
                    document.add_paragraph(edu.institution)
                if edu.year:
                    self._add_muted(document, edu.year)
                if edu.details:
                    document.add_paragraph(edu.details)

        if resume.projects:
            self._add_section_header(document, "Projects")
            for project in resume.projects:
                self._add_bullet(document, project)

        if resume.certifications:
            self._add_section_header(document, "Certifications")
            for cert in resume.certifications:
                self._add_bullet(document, cert)

        return document

    def generate(self, resume: StructuredResume, output):
        """
        Writes the resume DOCX.

        Args:
            resume: The (tailored) resume to render.
            output: A file path or a writable binary stream.
        """
        document = self.build(resume)
        document.save(output)
        logger.info(f"Resume generated successfully: {output}")

    def generate_cover_letter(self, resume: StructuredResume, letter_body: str, output):
        """
        Writes a cover letter DOCX with the same header as the resume.
        A closing is added unless the body already signs off.
        """
        document = self._new_document()
        self._add_header(document, resume)
        document.add_paragraph()
        document.add_paragraph(datetime.now().strftime("%B %d, %Y"))
        document.add_paragraph()

        for paragraph in letter_body.split('\n'):
            if paragraph.strip():
                document.add_paragraph(paragraph.strip())

        if "sincerely" not in letter_body.lower():
            document.add_paragraph()
            document.add_paragraph("Sincerely,")
            document.add_paragraph(resume.name)

        document.save(output)
        logger.info(f"Cover Letter generated successfully: {output}")
