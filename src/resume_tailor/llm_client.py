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
Cover letter drafting through an LLM provider (OpenAI or Google AI Studio).
Falls back to a templated draft when no key is configured or the call fails.
"""

import logging
from typing import Optional

import openai
from google import genai

from resume_tailor.config import Settings, configure_ssl_env, load_settings
from resume_tailor.models import JobDescription, StructuredResume

# Logger is configured in main.py
logger = logging.getLogger(__name__)

OPENAI_MODEL = "gpt-4o-mini"
GEMINI_MODELS = ("gemini-2.0-flash", "gemini-1.5-flash")


class CoverLetterWriter:
    """
    Drafts a cover letter for one resume and job.
    """
    def __init__(self, provider: Optional[str] = None, settings: Optional[Settings] = None):
        self.settings = settings or load_settings()
        self.provider = (provider or self.settings.llm_provider or "openai").lower()
        if self.provider == "gemini":
            self.api_key = self.settings.gemini_api_key
        else:
            self.provider = "openai"
            self.api_key = self.settings.openai_api_key
        if not self.api_key:
            logger.warning(f"No {self.provider} API key found. Cover letters will use the template.")

    def build_prompt(self, resume: StructuredResume, job: JobDescription) -> str:
        if resume.experience:
            first = resume.experience[0]
            experience = first.title + (f" at {first.company}" if first.company else "")
        else:
            experience = "Entry level"
        requirements = "\n".join(job.qualifications[:3])

        return f"""Write a professional cover letter for {resume.name} applying for the position of {job.title}.

Resume highlights:
- Skills: {', '.join(resume.skills[:5])}
- Experience: {experience}

Job requirements:
{requirements}

Write a concise, professional cover letter. Return only the body of the letter, starting with the salutation."""

    def template_letter(self, resume: StructuredResume, job: JobDescription) -> str:
        company = job.company or "your organisation"
        lines = ["Dear Hiring Manager,", ""]
        lines.append(
            f"I am writing to apply for the {job.title} position at {company}."
        )
        if resume.skills:
            lines.append(
                f"My background in {', '.join(resume.skills[:3])} has prepared me to contribute from day one."
            )
        if resume.experience:
            first = resume.experience[0]
            where = f" at {first.company}" if first.company else ""
            lines.append(f"Most recently I worked as {first.title}{where}.")
        if job.qualifications:
            lines.append(
                f"I am confident I can meet your requirements, including {', '.join(job.qualifications[:3])}."
            )
        lines.extend(["", "Thank you for your time and consideration.", "", "Sincerely,", resume.name])
        return "\n".join(lines)

    def _call_llm(self, prompt: str) -> str:
        """Calls the configured provider. Raises on failure."""
        # Ensure custom CA bundle is visible to httpx-based SDKs
        configure_ssl_env()

        if self.provider == "openai":
            client = openai.OpenAI(api_key=self.api_key)
            response = client.chat.completions.create(
                model=OPENAI_MODEL,
                messages=[{"role": "user", "content": prompt}],
                temperature=0.7,
            )
            return response.choices[0].message.content

        client = genai.Client(api_key=self.api_key)
        last_exception = None
        for model_name in GEMINI_MODELS:
            try:
                logger.info(f"Attempting model: {model_name}")
                response = client.models.generate_content(model=model_name, contents=prompt)
                return response.text
            except Exception as e:
                logger.warning(f"Model {model_name} failed: {e}")
                last_exception = e
        raise last_exception

    def write(self, resume: StructuredResume, job: JobDescription) -> str:
        if not self.api_key:
            return self.template_letter(resume, job)
        try:
            text = self._call_llm(self.build_prompt(resume, job))
        except Exception as e:
            logger.warning(f"Cover letter generation failed: {e}. Using template.")
            return self.template_letter(resume, job)
        if not text or not text.strip():
            logger.warning("Provider returned an empty cover letter. Using template.")
            return self.template_letter(resume, job)
        return text.strip()
