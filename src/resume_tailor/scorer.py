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
Deterministic resume-to-job match scoring.

The score blends three components (0-100 each):
  - skills: share of job qualifications covered by resume skills
  - experience: share of the job's action verbs that also appear in the resume
  - keywords: share of the job's words (longer than 3 chars) found in the resume
"""

import math
import re
import logging
from typing import List

from resume_tailor.models import JobDescription, SkillAnalysis, StructuredResume

logger = logging.getLogger(__name__)

SKILL_WEIGHT = 0.5
EXPERIENCE_WEIGHT = 0.3
KEYWORD_WEIGHT = 0.2

ACTION_VERBS = (
    "develop", "manage", "lead", "design", "implement", "create",
    "analyze", "optimize", "coordinate", "execute", "build",
)
NEUTRAL_EXPERIENCE_SCORE = 50.0
MIN_KEYWORD_LENGTH = 4

_WORD_SPLIT_RE = re.compile(r"\W+")


def round_half_up(value: float) -> int:
    """Rounds .5 away from zero for positive values (Python's round() is banker's rounding)."""
    return int(math.floor(value + 0.5))


def analyze_skills(skills: List[str], qualifications: List[str]) -> SkillAnalysis:
    """
    Splits the job qualifications into matched and missing.

    A qualification counts as matched when any resume skill is a substring of
    it or vice versa, ignoring case. This is deliberately permissive: "Java"
    matches "JavaScript".
    """
    normalized = [s.lower().strip() for s in skills]
    normalized = [s for s in normalized if s]

    analysis = SkillAnalysis()
    for qualification in qualifications:
        wanted = qualification.lower().strip()
        if any(skill in wanted or wanted in skill for skill in normalized):
            analysis.matched.append(qualification)
        else:
            analysis.missing.append(qualification)

    if qualifications:
        analysis.match_percentage = len(analysis.matched) / len(qualifications) * 100
    return analysis


def _words(text: str) -> List[str]:
    return [w for w in _WORD_SPLIT_RE.split(text.lower()) if len(w) >= MIN_KEYWORD_LENGTH]


def keyword_match(resume_text: str, job_text: str) -> float:
    """Percentage of job words (duplicates included) that the resume also uses."""
    resume_words = set(_words(resume_text))
    job_words = _words(job_text)
    if not job_words:
        return 0.0
    matched = sum(1 for w in job_words if w in resume_words)
    return matched / len(job_words) * 100


def experience_relevance(resume_text: str, job_text: str) -> float:
    """Percentage of the action verbs present in the job that the resume also contains."""
    job_lower = job_text.lower()
    resume_lower = resume_text.lower()

    wanted = [verb for verb in ACTION_VERBS if verb in job_lower]
    if not wanted:
        return NEUTRAL_EXPERIENCE_SCORE
    matches = sum(1 for verb in wanted if verb in resume_lower)
    return matches / len(wanted) * 100


def calculate_match_score(resume_text: str, job_text: str, analysis: SkillAnalysis) -> int:
    """Weighted overall score, an integer in [0, 100]. Degrades to 0 on unexpected errors."""
    try:
        skill_score = analysis.match_percentage
        experience_score = experience_relevance(resume_text, job_text)
        keyword_score = keyword_match(resume_text, job_text)

        total = (skill_score * SKILL_WEIGHT
                 + experience_score * EXPERIENCE_WEIGHT
                 + keyword_score * KEYWORD_WEIGHT)
        logger.debug(
            f"Score components: skills={skill_score:.1f} experience={experience_score:.1f} "
            f"keywords={keyword_score:.1f} total={total:.2f}"
        )
        return max(0, min(100, round_half_up(total)))
    except Exception as e:
        logger.error(f"Error calculating match score: {e}")
        return 0


def resume_to_text(resume: StructuredResume) -> str:
    """Plain-text rendering of a resume for keyword and verb scanning."""
    parts = [resume.name, resume.contact, resume.summary or "", ", ".join(resume.skills)]
    for edu in resume.education:
        parts.extend([edu.degree, edu.institution or "", edu.year or "", edu.details or ""])
    for exp in resume.experience:
        parts.extend([exp.title, exp.company or "", exp.duration or "", exp.description])
        parts.extend(exp.bullets)
    parts.extend(resume.projects)
    parts.extend(resume.certifications)
    return "\n".join(p for p in parts if p)


def job_to_text(job: JobDescription) -> str:
    """Plain-text rendering of a job description for keyword and verb scanning."""
    parts = [job.title, job.company or ""]
    parts.extend(job.responsibilities)
    parts.extend(job.qualifications)
    parts.extend(job.keywords)
    parts.append(job.raw_text or "")
    return "\n".join(p for p in parts if p)
