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

import os
import unittest
from unittest.mock import patch, MagicMock

from resume_tailor import config, llm_client
from resume_tailor.config import Settings
from resume_tailor.models import ExperienceEntry, JobDescription, StructuredResume


def sample_resume():
    return StructuredResume(
        name="Sam Lee",
        skills=["Go", "SQL", "AWS", "Linux", "Docker", "Bash"],
        experience=[ExperienceEntry(id="exp-1", title="Backend Engineer", company="Acme")],
    )


def sample_job():
    return JobDescription(
        title="Platform Engineer",
        company="Globex",
        qualifications=["Kubernetes", "Terraform", "Go", "On-call experience"],
    )


class TestPrompt(unittest.TestCase):
    def setUp(self):
        self.writer = llm_client.CoverLetterWriter(settings=Settings())

    def test_prompt_contents(self):
        prompt = self.writer.build_prompt(sample_resume(), sample_job())
        self.assertIn("Sam Lee applying for the position of Platform Engineer", prompt)
        self.assertIn("- Skills: Go, SQL, AWS, Linux, Docker\n", prompt)
        self.assertIn("- Experience: Backend Engineer at Acme", prompt)
        self.assertIn("Kubernetes\nTerraform\nGo", prompt)
        self.assertNotIn("On-call experience", prompt)

    def test_entry_level_without_experience(self):
        prompt = self.writer.build_prompt(StructuredResume(name="Ada"), sample_job())
        self.assertIn("- Experience: Entry level", prompt)

    def test_template_letter(self):
        letter = self.writer.template_letter(sample_resume(), sample_job())
        self.assertTrue(letter.startswith("Dear Hiring Manager,"))
        self.assertIn("Platform Engineer position at Globex", letter)
        self.assertTrue(letter.endswith("Sincerely,\nSam Lee"))


class TestWrite(unittest.TestCase):
    def setUp(self):
        config._ca_bundle_override = None
        self.env = patch.dict(os.environ, {}, clear=True)
        self.env.start()

    def tearDown(self):
        self.env.stop()

    def test_no_key_uses_template(self):
        writer = llm_client.CoverLetterWriter(settings=Settings())
        with patch.object(writer, '_call_llm') as mock_call:
            letter = writer.write(sample_resume(), sample_job())
        mock_call.assert_not_called()
        self.assertTrue(letter.startswith("Dear Hiring Manager,"))

    @patch('resume_tailor.llm_client.openai.OpenAI')
    def test_openai(self, mock_openai):
        response = MagicMock()
        response.choices[0].message.content = "  Dear Team,\nHire me.  "
        mock_openai.return_value.chat.completions.create.return_value = response

        writer = llm_client.CoverLetterWriter(provider="openai", settings=Settings(openai_api_key="sk-test"))
        letter = writer.write(sample_resume(), sample_job())

        self.assertEqual(letter, "Dear Team,\nHire me.")
        mock_openai.assert_called_once_with(api_key="sk-test")
        kwargs = mock_openai.return_value.chat.completions.create.call_args.kwargs
        self.assertEqual(kwargs["model"], llm_client.OPENAI_MODEL)

    @patch('resume_tailor.llm_client.genai.Client')
    def test_gemini_falls_through_models(self, mock_client):
        response = MagicMock()
        response.text = "Dear Hiring Team,"
        mock_client.return_value.models.generate_content.side_effect = [RuntimeError("404"), response]

        writer = llm_client.CoverLetterWriter(settings=Settings(llm_provider="gemini", gemini_api_key="g-key"))
        self.assertEqual(writer.provider, "gemini")
        self.assertEqual(writer.write(sample_resume(), sample_job()), "Dear Hiring Team,")

        models = [c.kwargs["model"] for c in mock_client.return_value.models.generate_content.call_args_list]
        self.assertEqual(models, list(llm_client.GEMINI_MODELS))

    @patch('resume_tailor.llm_client.genai.Client')
    def test_provider_failure_uses_template(self, mock_client):
        mock_client.return_value.models.generate_content.side_effect = RuntimeError("quota")
        writer = llm_client.CoverLetterWriter(provider="gemini", settings=Settings(gemini_api_key="g-key"))
        with self.assertLogs("resume_tailor.llm_client", level="WARNING"):
            letter = writer.write(sample_resume(), sample_job())
        self.assertTrue(letter.startswith("Dear Hiring Manager,"))

    @patch('resume_tailor.llm_client.openai.OpenAI')
    def test_empty_response_uses_template(self, mock_openai):
        response = MagicMock()
        response.choices[0].message.content = "   "
        mock_openai.return_value.chat.completions.create.return_value = response
        writer = llm_client.CoverLetterWriter(settings=Settings(openai_api_key="sk-test"))
        self.assertTrue(writer.write(sample_resume(), sample_job()).startswith("Dear Hiring Manager,"))

    def test_unknown_provider_defaults_to_openai(self):
        writer = llm_client.CoverLetterWriter(provider="other", settings=Settings(openai_api_key="sk"))
        self.assertEqual(writer.provider, "openai")
        self.assertEqual(writer.api_key, "sk")


if __name__ == '__main__':
    unittest.main()
