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

import unittest
from datetime import datetime, timezone

from resume_tailor.models import (
    UNKNOWN_NAME,
    AnalysisResult,
    EducationEntry,
    ExperienceEntry,
    JobDescription,
    StructuredResume,
    TailoredOutput,
)


class TestStructuredResume(unittest.TestCase):
    def test_defaults(self):
        resume = StructuredResume()
        self.assertEqual(resume.name, UNKNOWN_NAME)
        self.assertEqual(resume.skills, [])
        self.assertEqual(resume.contact, "")

    def test_add_skill_ignores_case_duplicates(self):
        resume = StructuredResume(skills=["Python"])
        self.assertFalse(resume.add_skill("python"))
        self.assertFalse(resume.add_skill("  "))
        self.assertTrue(resume.add_skill(" SQL "))
        self.assertEqual(resume.skills, ["Python", "SQL"])

    def test_refresh_contact(self):
        resume = StructuredResume(email="a@b.io", phone="555-123-4567")
        resume.refresh_contact()
        self.assertEqual(resume.contact, "a@b.io | 555-123-4567")

        resume.phone = None
        resume.refresh_contact()
        self.assertEqual(resume.contact, "a@b.io")

    def test_to_dict_uses_camel_case_and_drops_none(self):
        resume = StructuredResume(
            name="Jane Doe",
            experience=[ExperienceEntry(id="exp-1", title="Engineer", is_modified=True)],
            education=[EducationEntry(id="edu-1", degree="BSc")],
        )
        data = resume.to_dict()
        self.assertNotIn("email", data)
        self.assertTrue(data["experience"][0]["isModified"])
        self.assertNotIn("institution", data["education"][0])

    def test_from_dict_round_trip(self):
        original = StructuredResume(
            name="Jane Doe",
            email="jane@example.com",
            skills=["Python", "SQL"],
            experience=[ExperienceEntry(id="exp-1", title="Engineer", company="Acme",
                                        description="• Built things", bullets=["Built things"])],
        )
        restored = StructuredResume.from_dict(original.to_dict())
        self.assertEqual(restored, original)


class TestJobDescription(unittest.TestCase):
    def test_display_name(self):
        self.assertEqual(JobDescription(title="Engineer", company="Acme").display_name, "Engineer at Acme")
        self.assertEqual(JobDescription(title="Engineer").display_name, "Engineer")

    def test_from_dict_accepts_form_text(self):
        job = JobDescription.from_dict({
            "title": " Data Analyst ",
            "qualifications": "SQL\n\nExcel\n",
            "keywords": "dashboards, reporting",
            "rawText": "Full posting",
        })
        self.assertEqual(job.title, "Data Analyst")
        self.assertEqual(job.qualifications, ["SQL", "Excel"])
        self.assertEqual(job.keywords, ["dashboards", "reporting"])
        self.assertEqual(job.raw_text, "Full posting")
        self.assertIsNone(job.company)


class TestAnalysisResult(unittest.TestCase):
    def test_to_dict(self):
        stamp = datetime(2026, 1, 2, tzinfo=timezone.utc)
        result = AnalysisResult(
            resume=StructuredResume(name="Jane"),
            job_description=JobDescription(title="Engineer"),
            tailored_output=TailoredOutput(score=42),
            timestamp=stamp,
        )
        data = result.to_dict()
        self.assertEqual(data["tailoredOutput"]["score"], 42)
        self.assertEqual(data["timestamp"], stamp.isoformat())
        self.assertNotIn("coverLetterDraft", data["tailoredOutput"])


if __name__ == '__main__':
    unittest.main()
