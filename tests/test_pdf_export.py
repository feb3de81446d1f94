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

from pypdf import PdfReader

from resume_tailor.models import EducationEntry, ExperienceEntry, StructuredResume
from resume_tailor.pdf_export import render_resume_pdf, write_resume_pdf


def sample_resume(bullets=2):
    return StructuredResume(
        name="Jane Doe",
        email="jane@example.com",
        phone="555-123-4567",
        summary="Backend engineer focused on reliable data services.",
        skills=["Python", "SQL"],
        experience=[ExperienceEntry(
            id="exp-1", title="Senior Engineer", company="Acme", duration="2020 - Present",
            description="\n".join(f"• Delivered improvement number {i}" for i in range(bullets)),
        )],
        education=[EducationEntry(id="edu-1", degree="B.S. Computer Science",
                                  institution="State University", year="2017")],
        certifications=["AWS Certified Developer"],
    )


def pdf_text(data: bytes) -> str:
    reader = PdfReader(io.BytesIO(data))
    return "\n".join(page.extract_text() for page in reader.pages)


class TestRenderResumePdf(unittest.TestCase):
    def test_content(self):
        data = render_resume_pdf(sample_resume())
        self.assertTrue(data.startswith(b"%PDF"))
        text = pdf_text(data)
        for expected in ("Jane Doe", "jane@example.com", "PROFESSIONAL SUMMARY", "SKILLS",
                         "Senior Engineer at Acme", "EDUCATION", "State University",
                         "CERTIFICATIONS"):
            self.assertIn(expected, text)

    def test_every_theme_renders(self):
        for theme in ("Rose", "Blue", "Green", "Purple", "Orange", "Slate", "None", "#123456"):
            self.assertTrue(render_resume_pdf(sample_resume(), theme=theme).startswith(b"%PDF"))

    def test_unknown_theme(self):
        with self.assertRaises(ValueError):
            render_resume_pdf(sample_resume(), theme="Chartreuse")

    def test_long_resume_breaks_pages(self):
        data = render_resume_pdf(sample_resume(bullets=120))
        reader = PdfReader(io.BytesIO(data))
        self.assertGreater(len(reader.pages), 1)
        self.assertIn("number 119", pdf_text(data))

    def test_long_lines_wrap(self):
        resume = sample_resume()
        resume.summary = "reliable " * 60
        data = render_resume_pdf(resume)
        self.assertIn("reliable", pdf_text(data))


class TestWriteResumePdf(unittest.TestCase):
    def setUp(self):
        self.test_dir = tempfile.mkdtemp()

    def tearDown(self):
        shutil.rmtree(self.test_dir)

    def test_writes_file(self):
        path = os.path.join(self.test_dir, "resume.pdf")
        self.assertEqual(write_resume_pdf(sample_resume(), path, theme="Green"), path)
        with open(path, "rb") as f:
            self.assertTrue(f.read().startswith(b"%PDF"))


if __name__ == '__main__':
    unittest.main()
