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
Heuristic conversion of resume text into a StructuredResume.

Two strategies are available:
  - narrative: prose biographies that open with a literal "Name:" label
  - structured: conventional resumes with section headings (the default)
"""

import re
import logging
from typing import Dict, List, Optional, Tuple

from resume_tailor.models import (
    UNKNOWN_NAME,
    EducationEntry,
    ExperienceEntry,
    StructuredResume,
)

logger = logging.getLogger(__name__)

# --- Section headings ---

SECTION_HEADERS: Dict[str, Tuple[str, ...]] = {
    "summary": ("summary", "professional summary", "profile", "objective",
                "about me", "career objective"),
    "education": ("education", "academic background", "academic qualifications",
                  "education and training"),
    "experience": ("experience", "work experience", "professional experience",
                   "employment history", "work history", "employment"),
    "skills": ("skills", "technical skills", "core competencies", "key skills",
               "competencies", "technologies"),
    "projects": ("projects", "personal projects", "key projects", "academic projects"),
    "certifications": ("certifications", "certificates", "licenses",
                       "licenses & certifications"),
}

_HEADER_LOOKUP = {
    synonym: section
    for section, synonyms in SECTION_HEADERS.items()
    for synonym in synonyms
}

_INLINE_HEADER_RE = re.compile(
    r"^\s*(" + "|".join(sorted((re.escape(s) for s in _HEADER_LOOKUP), key=len, reverse=True))
    + r")\s*:\s*(\S.*)$",
    re.IGNORECASE,
)

LOOSE_WINDOW = 2000
_LOOSE_CUT_RE = re.compile(r"\n\s*\n(?=[A-Z][A-Za-z &]{2,40}:?\s*\n)")

# --- Contact details ---

EMAIL_RE = re.compile(r"[\w.+-]+@[\w-]+(?:\.[\w-]+)*\.[A-Za-z]{2,}")

# Ordered: first match wins
PHONE_PATTERNS = (
    re.compile(r"\+\d{1,3}[\s.-]?\(?\d{1,4}\)?(?:[\s.-]?\d{2,4}){2,4}(?!\d)"),
    re.compile(r"(?<!\d)\(?\d{3}\)?[\s.-]?\d{3}[\s.-]?\d{4}(?!\d)"),
    re.compile(r"(?<!\d)\d{5}[\s-]?\d{5}(?!\d)"),
)

_NAME_FIELD_RE = re.compile(r"^\s*name\s*:\s*(.+)$", re.IGNORECASE | re.MULTILINE)
_LOCATION_FIELD_RE = re.compile(r"^\s*(?:location|address)\s*:\s*(.+)$", re.IGNORECASE | re.MULTILINE)
_CITY_RE = re.compile(r"[A-Z][A-Za-z .'-]{1,40},\s*(?:[A-Z]{2}|[A-Z][A-Za-z .'-]{2,40})")

# --- Dates ---

_MONTH = (r"(?:jan(?:uary)?|feb(?:ruary)?|mar(?:ch)?|apr(?:il)?|may|june?|july?"
          r"|aug(?:ust)?|sep(?:t(?:ember)?)?|oct(?:ober)?|nov(?:ember)?|dec(?:ember)?)\.?")
_MONTH_YEAR = rf"(?:\b{_MONTH}\s+(?:19|20)\d{{2}}|\d{{1,2}}/(?:19|20)\d{{2}})"
_PRESENT = r"(?:present|current|now|today)"
_RANGE_SEP = r"\s*(?:-|–|—|to)\s*"

MONTH_RANGE_RE = re.compile(rf"{_MONTH_YEAR}{_RANGE_SEP}(?:{_MONTH_YEAR}|{_PRESENT})", re.IGNORECASE)
YEAR_RANGE_RE = re.compile(
    rf"(?<!\d)(?:19|20)\d{{2}}{_RANGE_SEP}(?:(?:19|20)\d{{2}}|{_PRESENT})(?!\d)", re.IGNORECASE
)
YEAR_RE = re.compile(rf"(?<!\d)(?:19|20)\d{{2}}(?:{_RANGE_SEP}(?:(?:19|20)\d{{2}}|{_PRESENT}))?(?!\d)", re.IGNORECASE)
_SINGLE_DATE_RE = re.compile(rf"{_MONTH_YEAR}|(?<!\d)(?:19|20)\d{{2}}(?!\d)|\b{_PRESENT}\b", re.IGNORECASE)

# --- Bullets ---

BULLET_GLYPHS = "•-*●"
_BULLET_RE = re.compile(r"^\s*[•\-*●▪◦]\s*")
# "2015 - B.S. Computer Science", not a bare "2015"
_YEAR_PREFIXED_RE = re.compile(r"^\s*(?:19|20)\d{2}\b.*[A-Za-z]{2}")

# --- Education ---

DEGREE_KEYWORDS = (
    "bachelor", "master", "phd", "ph.d", "doctorate", "associate", "diploma",
    "degree", "b.s.", "b.sc", "m.s.", "m.sc", "mba", "b.a.", "m.a.", "b.tech",
    "m.tech", "b.e.",
)
INSTITUTION_KEYWORDS = ("university", "college", "institute")
EDUCATION_KEYWORDS = DEGREE_KEYWORDS + INSTITUTION_KEYWORDS
MAX_FLAT_EDUCATION = 3


def _keyword_re(keywords) -> re.Pattern:
    alternatives = "|".join(re.escape(k) for k in keywords)
    return re.compile(rf"(?<![a-z])(?:{alternatives})(?:'?s)?(?![a-z])", re.IGNORECASE)


_DEGREE_RE = _keyword_re(DEGREE_KEYWORDS)
_INSTITUTION_RE = _keyword_re(INSTITUTION_KEYWORDS)
_EDUCATION_RE = _keyword_re(EDUCATION_KEYWORDS)

# --- Experience ---

ROLE_NOUNS = (
    "Developer", "Engineer", "Manager", "Analyst", "Designer", "Consultant",
    "Architect", "Director", "Lead", "Specialist", "Administrator", "Intern",
    "Scientist", "Coordinator", "Officer", "Associate", "Assistant", "Technician",
    "Programmer", "Head", "President", "Founder",
)
_JOB_TITLE_RE = re.compile(
    r"^(?:[A-Z][\w&/.'-]*\s+(?:[\w&/.'()-]+\s+){0,6}?)?(?:"
    + "|".join(ROLE_NOUNS) + r")s?\b"
)
_TITLE_COMPANY_SEP_RE = re.compile(r"\s*\|\s*|\s*@\s*|\s+at\s+|\s+[–—-]\s+")

# --- Skills ---

SKILL_SPLIT_RE = re.compile(r"[,;•●|▪◦\n]")
_SKILL_LABEL_RE = re.compile(r"^[A-Za-z][\w &/()-]{0,40}:\s*")
SKILL_STOPWORDS = {
    "and", "or", "etc", "etc.", "skills", "including", "with", "the", "other",
    "various", "n/a", "tools", "others",
}

REFERENCE_SKILLS = (
    "Python", "Java", "JavaScript", "TypeScript", "C++", "C#", "Ruby", "PHP",
    "Swift", "Kotlin", "Golang", "Rust", "Scala", "SQL", "HTML", "CSS",
    "React", "Angular", "Vue", "Node.js", "Express", "Django", "Flask",
    "Spring", ".NET", "AWS", "Azure", "GCP", "Google Cloud", "Docker",
    "Kubernetes", "Terraform", "Jenkins", "Git", "Linux", "PostgreSQL",
    "MySQL", "MongoDB", "Redis", "GraphQL", "REST", "Machine Learning",
    "Data Analysis", "TensorFlow", "PyTorch", "Pandas", "Agile", "Scrum",
    "CI/CD", "DevOps", "Microservices", "Excel", "Tableau", "Figma",
)

# --- Narrative ---

NARRATIVE_LABEL = "Name:"
NARRATIVE_SKILLS = (
    "Python", "Java", "JavaScript", "TypeScript", "C++", "C#", "Ruby", "PHP",
    "Swift", "Kotlin", "Rust", "SQL", "HTML", "CSS", "React", "Angular",
    "Vue", "Node.js", "Django", "Flask", "AWS", "Azure", "Docker",
    "Kubernetes", "Git", "Linux", "MongoDB", "PostgreSQL", "TensorFlow",
    "Machine Learning",
)
_PHRASE_END = r"(?=[.,;\n]|\s+(?:from|at)\s|$)"
NARRATIVE_DEGREE_PATTERNS = (
    re.compile(rf"\b(Bachelor(?:'s)?(?:\s+degree)?\s+(?:of|in)\s+[^.,;\n]+?){_PHRASE_END}", re.IGNORECASE),
    re.compile(rf"\b(Master(?:'s)?(?:\s+degree)?\s+(?:of|in)\s+[^.,;\n]+?){_PHRASE_END}", re.IGNORECASE),
    re.compile(rf"\bpursuing\s+an?\s+([^.,;\n]+?){_PHRASE_END}", re.IGNORECASE),
    re.compile(rf"\b((?:B\.S\.|B\.Sc\.|M\.S\.|M\.Sc\.)\s+in\s+[^.,;\n]+?){_PHRASE_END}"),
)
_NARRATIVE_INSTITUTION_RE = re.compile(
    r"^\s+(?:at|from)\s+((?:the\s+)?[A-Z][\w&'-]*(?:\s+(?:of|for|and|[A-Z][\w&'-]*))*)"
)
_NARRATIVE_LOCATION_RE = re.compile(r"\bfrom\s+([A-Z][\w'-]*(?:(?:,\s*|\s+)[A-Z][\w'-]*)*)")
_NARRATIVE_SKILL_TRIGGER_RE = re.compile(
    r"\b(?:expertise|proficient|experience)\s+(?:in|with)\s+([^.;\n]+)", re.IGNORECASE
)
_NARRATIVE_PROJECT_RE = re.compile(r"([A-Z][\w'-]*(?:\s+[A-Z][\w'-]*)*)\s+[—–-]\s+(an?\s+[^.\n]+)")
_NARRATIVE_ROLE_RE = re.compile(
    r"[Ss]erving\s+as\s+(?:the\s+|an?\s+)?([\w &'/-]+?)"
    r"(?:\s+(?:at|of|for)\s+((?:the\s+)?[A-Z][\w&'-]*(?:\s+[A-Z][\w&'-]*)*))?"
    r"(?=[.,;\n]|\s+(?:for|since|where|in|and|from)\b|$)"
)
MAX_NARRATIVE_ENTRIES = 2


# ---------------------------------------------------------------------------
# Shared helpers
# ---------------------------------------------------------------------------

def _normalize(line: str) -> str:
    return re.sub(r"\s+", " ", line).strip()


def _header_section(line: str) -> Optional[str]:
    key = _normalize(line).rstrip(":").strip().lower()
    return _HEADER_LOOKUP.get(key)


def _is_bullet(line: str) -> bool:
    return bool(_BULLET_RE.match(line)) and bool(line.strip()[1:].strip())


def _strip_bullet(line: str) -> str:
    return _BULLET_RE.sub("", line, count=1).strip()


def _has_letters(text: str) -> bool:
    return any(c.isalpha() for c in text)


def _is_substantial(text: str) -> bool:
    return len(text.strip()) >= 2 and _has_letters(text)


def extract_email(text: str) -> Optional[str]:
    match = EMAIL_RE.search(text)
    return match.group(0) if match else None


def extract_phone(text: str) -> Optional[str]:
    for pattern in PHONE_PATTERNS:
        match = pattern.search(text)
        if match:
            return match.group(0).strip()
    return None


def find_sections(text: str) -> Dict[str, str]:
    """
    Splits text into named sections using heading lines.

    A heading is a line equal (ignoring case and a trailing colon) to a known
    synonym. "Skills: Python, SQL" style lines open the section and keep the
    text after the colon.
    """
    collected: Dict[str, List[str]] = {}
    current = None
    for line in text.splitlines():
        section = _header_section(line)
        if section:
            current = section
            collected.setdefault(section, [])
            continue
        inline = _INLINE_HEADER_RE.match(line)
        if inline:
            current = _HEADER_LOOKUP[inline.group(1).lower()]
            collected.setdefault(current, []).append(inline.group(2))
            continue
        if current:
            collected[current].append(line)
    return {k: "\n".join(v).strip() for k, v in collected.items()}


def _loose_section(text: str, keywords) -> Optional[str]:
    """Last-resort lookup: any occurrence of the keyword plus a bounded window after it."""
    for kw in keywords:
        match = re.search(rf"\b{re.escape(kw)}\b[ \t]*:?", text, re.IGNORECASE)
        if not match:
            continue
        window = text[match.end():match.end() + LOOSE_WINDOW]
        cut = _LOOSE_CUT_RE.search(window)
        if cut:
            window = window[:cut.start()]
        window = window.strip()
        if window:
            return window
    return None


def get_section(text: str, name: str, sections: Optional[Dict[str, str]] = None) -> Optional[str]:
    if sections is None:
        sections = find_sections(text)
    found = sections.get(name)
    if found:
        return found
    return _loose_section(text, SECTION_HEADERS[name])


# ---------------------------------------------------------------------------
# Name / location
# ---------------------------------------------------------------------------

def _looks_like_name(line: str) -> bool:
    line = line.strip()
    if not 2 <= len(line) <= 50:
        return False
    if _header_section(line) or line.isupper():
        return False
    if re.search(r"[\d@|]", line):
        return False
    words = line.split()
    if len(words) > 5:
        return False
    return all(w[0].isupper() for w in words)


def _extract_name(text: str, lines: List[str]) -> str:
    field_match = _NAME_FIELD_RE.search(text)
    if field_match:
        value = field_match.group(1).strip().rstrip(".")
        if value:
            return value
    for line in lines[:2]:
        if _looks_like_name(line):
            return line.strip()
    return UNKNOWN_NAME


def _extract_location(text: str, header_lines: List[str], name: str) -> Optional[str]:
    field_match = _LOCATION_FIELD_RE.search(text)
    if field_match:
        return field_match.group(1).strip()
    for line in header_lines:
        for segment in re.split(r"\s*[|•·]\s*", line):
            segment = segment.strip()
            if not segment or segment == name or len(segment) > 60:
                continue
            if EMAIL_RE.search(segment) or re.search(r"\d", segment):
                continue
            if _CITY_RE.fullmatch(segment):
                return segment
    return None


# ---------------------------------------------------------------------------
# Education
# ---------------------------------------------------------------------------

def _split_at(lines: List[str], predicate) -> List[List[str]]:
    blocks: List[List[str]] = []
    for line in lines:
        if not line.strip():
            continue
        if predicate(line) or not blocks:
            blocks.append([line])
        else:
            blocks[-1].append(line)
    return blocks


def _split_on_blank_lines(section: str) -> List[List[str]]:
    paragraphs = [p for p in re.split(r"\n\s*\n", section) if p.strip()]
    return [[l for l in p.splitlines() if l.strip()] for p in paragraphs]


def _education_blocks(section: str) -> List[List[str]]:
    lines = section.splitlines()
    cascade = (
        lambda: _split_on_blank_lines(section),
        lambda: _split_at(lines, lambda l: _is_bullet(l) or bool(_YEAR_PREFIXED_RE.match(l))),
        lambda: _split_at(lines, lambda l: bool(_DEGREE_RE.search(l))),
    )
    for splitter in cascade:
        blocks = splitter()
        if len(blocks) > 1:
            return blocks
    return [[l for l in lines if l.strip()]]


def _strip_year(text: str) -> str:
    return YEAR_RE.sub("", text).strip(" ,|-–—()")


def _parse_education_block(block: List[str], entry_id: str) -> Optional[EducationEntry]:
    lines = [_strip_bullet(l) for l in block if l.strip()]
    degree_idx = next((i for i, l in enumerate(lines) if _DEGREE_RE.search(l)), None)
    if degree_idx is None:
        degree_idx = next((i for i, l in enumerate(lines) if _EDUCATION_RE.search(l)), None)
    if degree_idx is None:
        return None

    year = None
    for line in lines:
        match = YEAR_RE.search(line)
        if match:
            year = match.group(0)
            break

    degree = _strip_year(lines[degree_idx]) or lines[degree_idx]
    institution = None

    # "B.S. Computer Science, Stanford University"
    parts = [p.strip() for p in re.split(r",|\s+[–—-]\s+|\s+at\s+", degree, maxsplit=1)]
    if len(parts) == 2 and _INSTITUTION_RE.search(parts[1]) and not _INSTITUTION_RE.search(parts[0]):
        degree, institution = parts

    details = []
    for i, line in enumerate(lines):
        if i == degree_idx:
            continue
        remainder = _strip_year(line)
        if not _is_substantial(remainder):
            continue
        if institution is None and len(remainder) >= 3:
            institution = remainder
        else:
            details.append(line)

    return EducationEntry(
        id=entry_id,
        degree=degree,
        institution=institution,
        year=year,
        details="; ".join(details) if details else None,
    )


def _flat_education(lines: List[str]) -> List[EducationEntry]:
    entries = []
    for line in lines:
        if len(entries) >= MAX_FLAT_EDUCATION:
            break
        if _header_section(line) or not _EDUCATION_RE.search(line):
            continue
        year = YEAR_RE.search(line)
        entries.append(EducationEntry(
            id=f"edu-{len(entries) + 1}",
            degree=_strip_bullet(line),
            year=year.group(0) if year else None,
        ))
    return entries


def parse_education(section: Optional[str], all_lines: List[str]) -> List[EducationEntry]:
    entries: List[EducationEntry] = []
    if section:
        for block in _education_blocks(section):
            entry = _parse_education_block(block, f"edu-{len(entries) + 1}")
            if entry:
                entries.append(entry)
    if not entries:
        entries = _flat_education(all_lines)
    return entries


# ---------------------------------------------------------------------------
# Experience
# ---------------------------------------------------------------------------

def find_duration(line: str) -> Optional[str]:
    match = MONTH_RANGE_RE.search(line) or YEAR_RANGE_RE.search(line)
    return match.group(0) if match else None


def _without_dates(line: str) -> str:
    text = MONTH_RANGE_RE.sub("", line)
    text = YEAR_RANGE_RE.sub("", text)
    text = _SINGLE_DATE_RE.sub("", text)
    return re.sub(r"\s{2,}", " ", text).strip(" ,|-–—()@")


def _is_date_line(line: str) -> bool:
    return bool(_SINGLE_DATE_RE.search(line)) and not _is_substantial(_without_dates(line))


def _is_heading_like(line: str) -> bool:
    stripped = line.strip()
    return (
        bool(stripped)
        and len(stripped) <= 80
        and not _is_bullet(stripped)
        and not find_duration(stripped)
    )


def _split_on_dates(lines: List[str]) -> List[List[str]]:
    anchors = [i for i, l in enumerate(lines) if find_duration(l)]
    if len(anchors) < 2:
        return []

    starts = [0]
    for prev, anchor in zip(anchors, anchors[1:]):
        start = anchor
        # "Title | Company | 2020 - 2022" already carries its own heading
        if not _is_substantial(_without_dates(lines[anchor])):
            while (anchor - start < 2 and start - 1 > prev
                   and _is_heading_like(lines[start - 1])):
                start -= 1
        starts.append(start)

    blocks = []
    for begin, end in zip(starts, starts[1:] + [len(lines)]):
        block = [l for l in lines[begin:end] if l.strip()]
        if block:
            blocks.append(block)
    return blocks


def _experience_blocks(section: str) -> List[List[str]]:
    lines = section.splitlines()
    cascade = (
        lambda: _split_on_dates(lines),
        lambda: _split_on_blank_lines(section),
        lambda: _split_at(lines, lambda l: not _is_bullet(l) and bool(_JOB_TITLE_RE.match(l.strip()))),
    )
    for splitter in cascade:
        blocks = splitter()
        if len(blocks) > 1:
            return blocks
    return [[l for l in lines if l.strip()]]


def split_title_company(text: str) -> Tuple[str, Optional[str]]:
    """Splits "Title | Company", "Title @ Company" and "Title at Company" lines."""
    parts = [p.strip() for p in _TITLE_COMPANY_SEP_RE.split(text) if p and p.strip()]
    if not parts:
        return text.strip(), None
    return parts[0], (parts[1] if len(parts) > 1 else None)


def _parse_experience_block(block: List[str], entry_id: str) -> Optional[ExperienceEntry]:
    lines = [l.strip() for l in block if l.strip()]
    if not lines or sum(len(l) for l in lines) < 5:
        return None

    duration = None
    for line in lines:
        duration = find_duration(line)
        if duration:
            break

    title, company = None, None
    used = set()
    for i, line in enumerate(lines[:3]):
        if _is_bullet(line):
            continue
        rest = _without_dates(line)
        if _is_substantial(rest):
            title, company = split_title_company(rest)
            used.add(i)
            break
    if title is None:
        return None

    if company is None:
        for i in range(max(used) + 1, min(4, len(lines))):
            line = lines[i]
            if _is_bullet(line) or _is_date_line(line):
                continue
            rest = _without_dates(line)
            if _is_substantial(rest) and len(rest) <= 80 and not rest.endswith("."):
                company = rest
                used.add(i)
            break

    bullets = []
    remaining = []
    for i, line in enumerate(lines):
        if i in used:
            continue
        if _is_bullet(line):
            bullets.append(_strip_bullet(line))
        elif not _is_date_line(line):
            remaining.append(line)

    if bullets:
        description = "\n".join(f"• {b}" for b in bullets)
    else:
        description = " ".join(remaining)

    return ExperienceEntry(
        id=entry_id,
        title=title,
        company=company,
        duration=duration,
        description=description,
        bullets=bullets,
    )


def parse_experience(section: Optional[str]) -> List[ExperienceEntry]:
    if not section:
        return []
    entries: List[ExperienceEntry] = []
    for block in _experience_blocks(section):
        entry = _parse_experience_block(block, f"exp-{len(entries) + 1}")
        if entry:
            entries.append(entry)
    return entries


# ---------------------------------------------------------------------------
# Skills / projects / certifications
# ---------------------------------------------------------------------------

def _term_re(term: str) -> re.Pattern:
    return re.compile(rf"(?<![\w+#.]){re.escape(term)}(?![\w+#])", re.IGNORECASE)


def scan_reference_skills(text: str) -> List[str]:
    """Whole-word scan for well known technology terms, each reported once."""
    return [term for term in REFERENCE_SKILLS if _term_re(term).search(text)]


def parse_skills(section: Optional[str], full_text: str) -> List[str]:
    holder = StructuredResume()
    if section:
        for raw in SKILL_SPLIT_RE.split(section):
            skill = raw.strip().lstrip("-*").strip()
            skill = _SKILL_LABEL_RE.sub("", skill).strip().rstrip(".")
            if not 2 <= len(skill) <= 59:
                continue
            if skill.lower() in SKILL_STOPWORDS:
                continue
            holder.add_skill(skill)
    if not holder.skills:
        for term in scan_reference_skills(full_text):
            holder.add_skill(term)
    return holder.skills


def parse_projects(section: Optional[str]) -> List[str]:
    if not section:
        return []
    paragraphs = [p.strip() for p in re.split(r"\n\s*\n", section) if p.strip()]
    if len(paragraphs) == 1:
        bullet_lines = [_strip_bullet(l) for l in paragraphs[0].splitlines() if _is_bullet(l)]
        if len(bullet_lines) > 1:
            return bullet_lines
    return [_normalize(p) for p in paragraphs if len(p) >= 20]


def parse_certifications(section: Optional[str]) -> List[str]:
    if not section:
        return []
    certs = []
    for line in section.splitlines():
        cert = _strip_bullet(line)
        if 1 <= len(cert) <= 99:
            certs.append(cert)
    return certs


# ---------------------------------------------------------------------------
# Strategies
# ---------------------------------------------------------------------------

def parse_structured(text: str) -> StructuredResume:
    """Section-heading driven parse of a conventional resume."""
    lines = [l for l in text.splitlines() if l.strip()]
    sections = find_sections(text)

    resume = StructuredResume()
    resume.email = extract_email(text)
    resume.phone = extract_phone(text)
    resume.refresh_contact()
    resume.name = _extract_name(text, lines)

    header_lines = []
    for line in lines[:10]:
        if _header_section(line) or _INLINE_HEADER_RE.match(line):
            break
        header_lines.append(line)
    resume.location = _extract_location(text, header_lines, resume.name)

    summary = get_section(text, "summary", sections)
    if summary:
        resume.summary = _normalize(summary)

    resume.education = parse_education(get_section(text, "education", sections), lines)
    resume.experience = parse_experience(get_section(text, "experience", sections))
    resume.skills = parse_skills(get_section(text, "skills", sections), text)
    resume.projects = parse_projects(get_section(text, "projects", sections))
    resume.certifications = parse_certifications(get_section(text, "certifications", sections))

    logger.debug(
        f"Structured parse: name={resume.name!r}, {len(resume.education)} education, "
        f"{len(resume.experience)} experience, {len(resume.skills)} skills"
    )
    return resume


def _reorder_name(raw: str) -> str:
    raw = raw.strip()
    if "," in raw:
        last, first = [p.strip() for p in raw.split(",", 1)]
        if first and last:
            return f"{first} {last}"
    return raw


def parse_narrative(text: str) -> StructuredResume:
    """Parse of a prose biography that starts with a "Name:" label."""
    resume = StructuredResume()

    match = re.match(r"\s*Name:\s*([^.\n]+)", text)
    if match:
        resume.name = _reorder_name(match.group(1)) or UNKNOWN_NAME

    resume.email = extract_email(text)
    resume.phone = extract_phone(text)
    resume.refresh_contact()

    location = _NARRATIVE_LOCATION_RE.search(text)
    if location:
        resume.location = location.group(1).strip()

    seen_degrees = set()
    for pattern in NARRATIVE_DEGREE_PATTERNS:
        for found in pattern.finditer(text):
            degree = found.group(1).strip()
            if degree.lower() in seen_degrees:
                continue
            seen_degrees.add(degree.lower())
            institution = _NARRATIVE_INSTITUTION_RE.match(text[found.end():])
            resume.education.append(EducationEntry(
                id=f"edu-{len(resume.education) + 1}",
                degree=degree,
                institution=institution.group(1).strip() if institution else None,
            ))

    for trigger in _NARRATIVE_SKILL_TRIGGER_RE.finditer(text):
        for item in re.split(r",|\band\b", trigger.group(1)):
            skill = item.strip()
            if 2 <= len(skill) <= 40:
                resume.add_skill(skill)
    lowered = text.lower()
    for term in NARRATIVE_SKILLS:
        if term.lower() in lowered:
            resume.add_skill(term)

    for found in _NARRATIVE_PROJECT_RE.finditer(text):
        if len(resume.projects) >= MAX_NARRATIVE_ENTRIES:
            break
        resume.projects.append(f"{found.group(1)} — {found.group(2).strip()}")

    role = _NARRATIVE_ROLE_RE.search(text)
    if role:
        sentence_start = text.rfind(".", 0, role.start()) + 1
        sentence_end = text.find(".", role.end())
        sentence = text[sentence_start:sentence_end if sentence_end != -1 else len(text)]
        resume.experience.append(ExperienceEntry(
            id="exp-1",
            title=role.group(1).strip(),
            company=role.group(2).strip() if role.group(2) else None,
            description=_normalize(sentence),
        ))

    logger.debug(
        f"Narrative parse: name={resume.name!r}, {len(resume.education)} education, "
        f"{len(resume.experience)} experience, {len(resume.skills)} skills"
    )
    return resume


def is_narrative(text: str) -> bool:
    return text.lstrip().startswith(NARRATIVE_LABEL)


def extract_structured_data(text: str) -> StructuredResume:
    """Routes the text to the narrative or structured strategy."""
    if is_narrative(text):
        logger.info("Detected narrative resume format")
        return parse_narrative(text)
    return parse_structured(text)


def validate_resume(resume: StructuredResume) -> bool:
    """A resume is usable when it has a real name and at least one content section."""
    if not resume.name or resume.name.strip() == UNKNOWN_NAME:
        return False
    return bool(resume.education or resume.experience or resume.skills)
