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

import io
import os
import shutil
import tempfile
import unittest

from docx import Document
from reportlab.lib.pagesizes import LETTER
from reportlab.pdfgen import canvas

from resume_tailor import ingest
from resume_tailor.errors import ExtractionFailure, FileTooLarge, UnsupportedFormat


def make_docx(paragraphs, table_rows=None) -> bytes:
    document = Document()
    for text in paragraphs:
        document.add_paragraph(text)
    if table_rows:
        table = document.add_table(rows=len(table_rows), cols=len(table_rows[0]))
        for r, row in enumerate(table_rows):
            for c, value in enumerate(row):
                table.cell(r, c).text = value
    buffer = io.BytesIO()
    document.save(buffer)
    return buffer.getvalue()


def make_pdf(lines) -> bytes:
    buffer = io.BytesIO()
    pdf = canvas.Canvas(buffer, pagesize=LETTER)
    y = 720
    for line in lines:
        pdf.drawString(72, y, line)
        y -= 18
    pdf.save()
    return buffer.getvalue()


class TestDetectFormat(unittest.TestCase):
    def test_mime_type_wins(self):
        self.assertEqual(ingest.detect_format("resume.bin", "application/pdf"), ingest.PDF)
        self.assertEqual(ingest.detect_format("resume", "text/plain; charset=utf-8"), ingest.TEXT)

    def test_extension_fallback(self):
        self.assertEqual(ingest.detect_format("CV.DOCX", "application/octet-stream"), ingest.DOCX)
        self.assertEqual(ingest.detect_format("cv.txt"), ingest.TEXT)

    def test_unsupported(self):
        with self.assertRaises(UnsupportedFormat):
            ingest.detect_format("resume.odt")
        with self.assertRaises(UnsupportedFormat):
            ingest.extract_text(b"data", "image.png", "image/png")


class TestReaders(unittest.TestCase):
    def test_read_docx_paragraphs_and_tables(self):
        data = make_docx(["Jane Doe", "Skills"], table_rows=[["Python", "SQL"]])
        text = ingest.extract_text(data, "cv.docx")
        self.assertIn("Jane Doe", text)
        self.assertIn("Python", text)
        self.assertIn("SQL", text)
        self.assertLess(text.index("Skills"), text.index("Python"))

    def test_read_docx_merged_cells_once(self):
        document = Document()
        table = document.add_table(rows=1, cols=2)
        merged = table.cell(0, 0).merge(table.cell(0, 1))
        merged.text = "Merged heading"
        buffer = io.BytesIO()
        document.save(buffer)

        text = ingest.read_docx(buffer.getvalue())
        self.assertEqual(text.count("Merged heading"), 1)

    def test_read_pdf(self):
        data = make_pdf(["Jane Doe", "Experience"])
        text = ingest.extract_text(data, "cv.pdf")
        self.assertIn("Jane Doe", text)
        self.assertIn("Experience", text)

    def test_read_text_strips_bom(self):
        self.assertEqual(ingest.extract_text(b"\xef\xbb\xbfJane Doe", "cv.txt"), "Jane Doe")

    def test_read_text_replaces_invalid_bytes(self):
        text = ingest.read_text(b"Jane \xff Doe")
        self.assertTrue(text.startswith("Jane"))
        self.assertTrue(text.endswith("Doe"))

    def test_corrupt_pdf_raises(self):
        with self.assertRaises(ExtractionFailure):
            ingest.extract_text(b"%PDF-1.4 this is not really a pdf", "cv.pdf")

    def test_corrupt_docx_raises(self):
        with self.assertRaises(ExtractionFailure):
            ingest.extract_text(b"PK\x03\x04 broken zip", "cv.docx")


class TestLimits(unittest.TestCase):
    def test_check_size(self):
        ingest.check_size(b"x" * 10, limit=10)
        with self.assertRaises(FileTooLarge):
            ingest.check_size(b"x" * 11, limit=10)

    def test_file_too_large_is_an_extraction_failure(self):
        self.assertTrue(issubclass(FileTooLarge, ExtractionFailure))


class TestReadFile(unittest.TestCase):
    def setUp(self):
        self.test_dir = tempfile.mkdtemp()

    def tearDown(self):
        shutil.rmtree(self.test_dir)

    def test_read_file(self):
        path = os.path.join(self.test_dir, "cv.txt")
        with open(path, "w", encoding="utf-8") as f:
            f.write("Jane Doe\nSkills\nPython\n")
        self.assertIn("Python", ingest.read_file(path))

    def test_missing_file(self):
        with self.assertRaises(ExtractionFailure):
            ingest.read_file(os.path.join(self.test_dir, "nonexistent.docx"))


if __name__ == '__main__':
    unittest.main()
