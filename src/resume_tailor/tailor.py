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
Heuristic resume tailoring: skill augmentation, summary rewrite and
action-verb experience edits, plus the suggestion/recommendation text shown
next to the score.
"""

import copy
import re
import logging
from dataclasses import fields
from datetime import datetime, timezone
from typing import List, Optional

from resume_tailor.models import (
    JobDescription,
    Modifications,
    SkillAnalysis,
    StructuredResume,
    TailoredOutput,
    TailoredResume,
)
from resume_tailor.scorer import (
    analyze_skills,
    calculate_match_score,
    job_to_text,
    resume_to_text,
)

logger = logging.getLogger(__name__)

MAX_ADDED_SKILLS = 3
TRANSFERABLE_KEYWORDS = (
    "communication", "leadership", "team", "analysis", "problem-solving", "management",
)

STRONG_VERBS = (
    "Spearheaded", "Developed", "Implemented", "Led", "Designed",
    "Optimized", "Delivered", "Engineered", "Streamlined", "Architected",
)
_STRONG_VERBS_LOWER = {v.lower() for v in STRONG_VERBS}

MIN_SUMMARY_LENGTH = 20
MAX_SUMMARY_LENGTH = 500
SUMMARY_TOP_SKILLS = 4
SUMMARY_MAX_KEYWORDS = 2
_SUMMARY_ANCHOR_RE = re.compile(r"\b(professional|specialist|expert)\b", re.IGNORECASE)
_LEADING_GLYPH_RE = re.compile(r"^(\s*[•\-*●]\s*)")
_ACRONYM_RE = re.compile(r"[A-Z]{2}")

EXCELLENT_SCORE = 80
GOOD_SCORE = 60


def _augment_skills(tailored: TailoredResume, analysis: SkillAnalysis):
    candidates = [
        skill for skill in analysis.missing
        if len(skill.split()) <= 2 or any(k in skill.lower() for k in TRANSFERABLE_KEYWORDS)
    ][:MAX_ADDED_SKILLS]
    for skill in candidates:
        if tailored.add_skill(skill):
            tailored.modifications.added_skills.append(skill.strip())


def _template_summary(original: StructuredResume) -> str:
    top = original.skills[:SUMMARY_TOP_SKILLS]
    count = len(original.experience)

    text = "Dedicated professional"
    if count:
        text += f" with {count} role{'s' if count != 1 else ''} of hands-on experience"
    if top:
        listed = top[0] if len(top) == 1 else f"{', '.join(top[:-1])} and {top[-1]}"
        text += f", skilled in {listed}"
    return text + "."


def _tailor_summary(summary: Optional[str], original: StructuredResume, job: JobDescription) -> str:
    if not summary or len(summary.strip()) < MIN_SUMMARY_LENGTH:
        return _template_summary(original)

    text = summary.strip()
    title_words = job.title.split()
    if title_words and job.title.strip().lower() not in text.lower():
        text = _SUMMARY_ANCHOR_RE.sub(lambda m: f"{title_words[0]} {m.group(1)}", text, count=1)

    absent = [k for k in job.keywords if k.strip() and k.lower() not in text.lower()]
    absent = absent[:SUMMARY_MAX_KEYWORDS]
    if absent:
        base = text if text.endswith((".", "!", "?")) else text + "."
        candidate = f"{base} Experienced with {' and '.join(absent)}."
        if len(candidate) < MAX_SUMMARY_LENGTH:
            text = candidate
    return text


def _lead_with_verb(description: str, verb: str) -> str:
    match = _LEADING_GLYPH_RE.match(description)
    prefix = match.group(1) if match else ""
    body = description[len(prefix):]
    # Keep acronyms such as "API" intact
    if _ACRONYM_RE.match(body):
        return f"{prefix}{verb} {body}"
    return f"{prefix}{verb} {body[0].lower()}{body[1:]}"


def _starts_with_strong_verb(description: str) -> bool:
    body = _LEADING_GLYPH_RE.sub("", description, count=1)
    words = body.split()
    return bool(words) and words[0].strip(",.;:").lower() in _STRONG_VERBS_LOWER


def _tailor_experience(tailored: TailoredResume):
    for index, entry in enumerate(tailored.experience):
        if not _LEADING_GLYPH_RE.sub("", entry.description).strip():
            continue
        if _starts_with_strong_verb(entry.description):
            continue
        verb = STRONG_VERBS[index % len(STRONG_VERBS)]
        entry.description = _lead_with_verb(entry.description, verb)
        # The description leads with the first bullet, keep the two in step
        if entry.bullets and entry.bullets[0].strip() and not _starts_with_strong_verb(entry.bullets[0]):
            entry.bullets[0] = _lead_with_verb(entry.bullets[0], verb)
        entry.is_modified = True
        tailored.modifications.modified_experience.append(entry.id)


def generate_tailored_resume(resume: StructuredResume, job: JobDescription,
                             analysis: SkillAnalysis) -> TailoredResume:
    """
    Produces a job-targeted copy of resume with a ledger of every change.
    The input resume is never mutated.
    """
    original = copy.deepcopy(resume)
    working = copy.deepcopy(resume)

    tailored = TailoredResume(
        **{f.name: getattr(working, f.name) for f in fields(StructuredResume)},
        original_resume=original,
        modifications=Modifications(),
        tailored_for_job=job.display_name,
        generated_at=datetime.now(timezone.utc).isoformat(),
    )

    _augment_skills(tailored, analysis)

    new_summary = _tailor_summary(tailored.summary, original, job)
    if new_summary != (original.summary or "").strip():
        tailored.summary = new_summary
        tailored.modifications.modified_summary = True

    _tailor_experience(tailored)

    mods = tailored.modifications
    logger.info(
        f"Tailored for '{tailored.tailored_for_job}': +{len(mods.added_skills)} skills, "
        f"{len(mods.modified_experience)} experience edits, summary changed={mods.modified_summary}"
    )
    return tailored


def generate_suggestions(resume: StructuredResume, job: JobDescription,
                         analysis: SkillAnalysis) -> List[str]:
    suggestions = []

    if analysis.missing:
        suggestions.append(
            f"Add the following skills to your resume if you have them: {', '.join(analysis.missing[:5])}"
        )
    if not resume.experience:
        suggestions.append("Add relevant work experience that demonstrates your capabilities")
    if not resume.projects:
        suggestions.append("Include personal or academic projects that showcase relevant skills")

    wants_certs = any(
        "certification" in q.lower() or "certified" in q.lower() for q in job.qualifications
    )
    if wants_certs and not resume.certifications:
        suggestions.append("Consider adding relevant certifications mentioned in the job description")

    suggestions.append(f'Incorporate keywords from the job description: "{job.title}"')
    suggestions.append("Quantify your achievements with numbers, percentages, or metrics where possible")
    return suggestions


def generate_recommendations(resume: StructuredResume, job: JobDescription,
                             analysis: SkillAnalysis, score: int) -> List[str]:
    if score >= EXCELLENT_SCORE:
        recommendations = ["Excellent match! Your resume aligns well with this position."]
    elif score >= GOOD_SCORE:
        recommendations = ["Good match with room for improvement. Follow the suggestions below."]
    else:
        recommendations = ["Consider significant revisions to better match this position:"]

    if analysis.matched:
        recommendations.append(
            f"Highlight these matched skills prominently: {', '.join(analysis.matched[:3])}"
        )
    if analysis.missing:
        recommendations.append(
            f"Consider acquiring or mentioning these skills: {', '.join(analysis.missing[:3])}"
        )
    if resume.experience:
        recommendations.append("Tailor your experience descriptions to match the job responsibilities")

    recommendations.append("Use action verbs and quantify achievements in your bullet points")
    recommendations.append("Customize your resume summary/objective to align with this specific role")
    return recommendations


def analyze_resume(resume: StructuredResume, job: JobDescription,
                   cover_letter_writer=None) -> TailoredOutput:
    """
    Full analysis of one resume against one job.

    Args:
        resume: The parsed resume. Not modified.
        job: The target job description.
        cover_letter_writer: Optional object with ``write(resume, job) -> str``.
    """
    resume_text = resume_to_text(resume)
    job_text = job_to_text(job)

    analysis = analyze_skills(resume.skills, job.qualifications)
    score = calculate_match_score(resume_text, job_text, analysis)
    logger.info(f"Match score for '{job.display_name}': {score}")

    output = TailoredOutput(
        matched_skills=list(analysis.matched),
        missing_skills=list(analysis.missing),
        suggested_edits=generate_suggestions(resume, job, analysis),
        score=score,
        recommendations=generate_recommendations(resume, job, analysis, score),
        tailored_resume=generate_tailored_resume(resume, job, analysis),
    )

    if cover_letter_writer is not None:
        output.cover_letter_draft = cover_letter_writer.write(resume, job)
    return output
