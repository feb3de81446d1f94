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
Data models for the Resume Tailor application.

Attributes are snake_case; ``to_dict()`` produces the camelCase shape read by
renderers and exporters, which must stay stable.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional

UNKNOWN_NAME = "Unknown"


def _drop_none(data: Dict[str, Any]) -> Dict[str, Any]:
    return {k: v for k, v in data.items() if v is not None}


@dataclass
class EducationEntry:
    """A single education record. Only the degree is mandatory."""
    id: str
    degree: str
    institution: Optional[str] = None
    year: Optional[str] = None
    details: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return _drop_none({
            "id": self.id,
            "degree": self.degree,
            "institution": self.institution,
            "year": self.year,
            "details": self.details,
        })

    @classmethod
    def from_dict(cls, raw: Dict[str, Any]) -> "EducationEntry":
        return cls(
            id=str(raw.get("id", "")),
            degree=raw.get("degree", ""),
            institution=raw.get("institution"),
            year=raw.get("year"),
            details=raw.get("details"),
        )


@dataclass
class ExperienceEntry:
    """
    A single work experience record.
    is_modified starts False and is only ever flipped to True by the tailoring pass.
    """
    id: str
    title: str
    company: Optional[str] = None
    duration: Optional[str] = None
    description: str = ""
    bullets: List[str] = field(default_factory=list)
    is_modified: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return _drop_none({
            "id": self.id,
            "title": self.title,
            "company": self.company,
            "duration": self.duration,
            "description": self.description,
            "bullets": list(self.bullets),
            "isModified": self.is_modified,
        })

    @classmethod
    def from_dict(cls, raw: Dict[str, Any]) -> "ExperienceEntry":
        return cls(
            id=str(raw.get("id", "")),
            title=raw.get("title", ""),
            company=raw.get("company"),
            duration=raw.get("duration"),
            description=raw.get("description", "") or "",
            bullets=list(raw.get("bullets") or []),
            is_modified=bool(raw.get("isModified", False)),
        )


@dataclass
class StructuredResume:
    """
    Canonical parsed representation of a resume.
    Skills keep insertion order; use add_skill() to keep them free of duplicates.
    """
    name: str = UNKNOWN_NAME
    contact: str = ""
    email: Optional[str] = None
    phone: Optional[str] = None
    location: Optional[str] = None
    summary: Optional[str] = None
    education: List[EducationEntry] = field(default_factory=list)
    experience: List[ExperienceEntry] = field(default_factory=list)
    skills: List[str] = field(default_factory=list)
    projects: List[str] = field(default_factory=list)
    certifications: List[str] = field(default_factory=list)

    def has_skill(self, skill: str) -> bool:
        wanted = skill.strip().lower()
        return any(s.strip().lower() == wanted for s in self.skills)

    def add_skill(self, skill: str) -> bool:
        """Appends a skill unless an equal one (ignoring case) exists. Returns True if added."""
        skill = skill.strip()
        if not skill or self.has_skill(skill):
            return False
        self.skills.append(skill)
        return True

    def refresh_contact(self):
        """Rebuilds the display contact string from email and phone."""
        self.contact = " | ".join(p for p in (self.email, self.phone) if p)

    def to_dict(self) -> Dict[str, Any]:
        return _drop_none({
            "name": self.name,
            "contact": self.contact,
            "email": self.email,
            "phone": self.phone,
            "location": self.location,
            "summary": self.summary,
            "education": [e.to_dict() for e in self.education],
            "experience": [e.to_dict() for e in self.experience],
            "skills": list(self.skills),
            "projects": list(self.projects),
            "certifications": list(self.certifications),
        })

    @classmethod
    def from_dict(cls, raw: Dict[str, Any]) -> "StructuredResume":
        resume = cls(
            name=raw.get("name") or UNKNOWN_NAME,
            contact=raw.get("contact", "") or "",
            email=raw.get("email"),
            phone=raw.get("phone"),
            location=raw.get("location"),
            summary=raw.get("summary"),
            education=[EducationEntry.from_dict(e) for e in raw.get("education") or []],
            experience=[ExperienceEntry.from_dict(e) for e in raw.get("experience") or []],
            projects=list(raw.get("projects") or []),
            certifications=list(raw.get("certifications") or []),
        )
        for skill in raw.get("skills") or []:
            resume.add_skill(skill)
        return resume


@dataclass
class JobDescription:
    """User-submitted job posting. Never derived from the resume."""
    title: str
    company: Optional[str] = None
    responsibilities: List[str] = field(default_factory=list)
    qualifications: List[str] = field(default_factory=list)
    keywords: List[str] = field(default_factory=list)
    raw_text: Optional[str] = None

    @property
    def display_name(self) -> str:
        return f"{self.title} at {self.company}" if self.company else self.title

    def to_dict(self) -> Dict[str, Any]:
        return _drop_none({
            "title": self.title,
            "company": self.company,
            "responsibilities": list(self.responsibilities),
            "qualifications": list(self.qualifications),
            "keywords": list(self.keywords),
            "rawText": self.raw_text,
        })

    @classmethod
    def from_dict(cls, raw: Dict[str, Any]) -> "JobDescription":
        def as_list(value) -> List[str]:
            # Form input arrives either as a list or as newline separated text
            if isinstance(value, str):
                return [line.strip() for line in value.split("\n") if line.strip()]
            return [str(v).strip() for v in value or [] if str(v).strip()]

        keywords = raw.get("keywords") or []
        if isinstance(keywords, str):
            keywords = [k.strip() for k in keywords.split(",") if k.strip()]

        return cls(
            title=str(raw.get("title", "")).strip(),
            company=raw.get("company") or None,
            responsibilities=as_list(raw.get("responsibilities")),
            qualifications=as_list(raw.get("qualifications")),
            keywords=[str(k).strip() for k in keywords if str(k).strip()],
            raw_text=raw.get("rawText") or raw.get("raw_text") or None,
        )


@dataclass
class SkillAnalysis:
    """Matched/missing split of the job qualifications."""
    matched: List[str] = field(default_factory=list)
    missing: List[str] = field(default_factory=list)
    match_percentage: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "matched": list(self.matched),
            "missing": list(self.missing),
            "matchPercentage": self.match_percentage,
        }


@dataclass
class Modifications:
    """Ledger of what the tailoring pass changed, recorded as it goes."""
    added_skills: List[str] = field(default_factory=list)
    removed_skills: List[str] = field(default_factory=list)
    modified_experience: List[str] = field(default_factory=list)
    modified_summary: bool = False
    modified_education: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "addedSkills": list(self.added_skills),
            "removedSkills": list(self.removed_skills),
            "modifiedExperience": list(self.modified_experience),
            "modifiedSummary": self.modified_summary,
            "modifiedEducation": list(self.modified_education),
        }


@dataclass
class TailoredResume(StructuredResume):
    """A StructuredResume with heuristic job-targeted edits plus a change ledger."""
    original_resume: Optional[StructuredResume] = None
    modifications: Modifications = field(default_factory=Modifications)
    tailored_for_job: str = ""
    generated_at: str = ""

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data.update({
            "originalResume": self.original_resume.to_dict() if self.original_resume else None,
            "modifications": self.modifications.to_dict(),
            "tailoredForJob": self.tailored_for_job,
            "generatedAt": self.generated_at,
        })
        return _drop_none(data)


@dataclass
class TailoredOutput:
    """Top-level result of one analysis run."""
    matched_skills: List[str] = field(default_factory=list)
    missing_skills: List[str] = field(default_factory=list)
    suggested_edits: List[str] = field(default_factory=list)
    score: int = 0
    recommendations: List[str] = field(default_factory=list)
    cover_letter_draft: Optional[str] = None
    tailored_resume: Optional[TailoredResume] = None

    def to_dict(self) -> Dict[str, Any]:
        return _drop_none({
            "matchedSkills": list(self.matched_skills),
            "missingSkills": list(self.missing_skills),
            "suggestedEdits": list(self.suggested_edits),
            "score": self.score,
            "recommendations": list(self.recommendations),
            "coverLetterDraft": self.cover_letter_draft,
            "tailoredResume": self.tailored_resume.to_dict() if self.tailored_resume else None,
        })


@dataclass
class AnalysisResult:
    """What one completed analysis produced, as stored for history views."""
    resume: StructuredResume
    job_description: JobDescription
    tailored_output: TailoredOutput
    timestamp: datetime

    def to_dict(self) -> Dict[str, Any]:
        return {
            "resume": self.resume.to_dict(),
            "jobDescription": self.job_description.to_dict(),
            "tailoredOutput": self.tailored_output.to_dict(),
            "timestamp": self.timestamp.isoformat(),
        }
