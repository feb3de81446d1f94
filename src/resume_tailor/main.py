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
Main entry point for the Resume Tailor CLI.
"""

import argparse
import json
import logging
import sys
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table

from resume_tailor.config import load_settings, set_ca_bundle_override
from resume_tailor.errors import ResumeTailorError
from resume_tailor.generator import DEFAULT_THEME, ResumeDocxGenerator, resolve_theme_color
from resume_tailor.models import JobDescription, TailoredOutput
from resume_tailor.pdf_export import write_resume_pdf
from resume_tailor.pipeline import TailoringSession

logger = logging.getLogger(__name__)

LOG_DIR = Path("user_content/logs")
OUTPUT_SUFFIXES = (".docx", ".pdf")
NOISY_LOGGERS = ("httpx", "httpcore", "urllib3", "requests")


def setup_logging(verbosity: int, quiet: bool = False, default_level: str = "INFO",
                  console: Console = None):
    """
    Configures logging:
    - File: user_content/logs/resume_tailor.log (DEBUG)
    - Console: default=LOG_LEVEL, -q=ERROR, -v=WARNING, -vv=INFO, -vvv=DEBUG
    """
    LOG_DIR.mkdir(parents=True, exist_ok=True)
    log_file = LOG_DIR / "resume_tailor.log"

    root = logging.getLogger()
    root.setLevel(logging.DEBUG)

    file_handler = logging.FileHandler(log_file)
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s'))
    root.addHandler(file_handler)

    if quiet:
        level = logging.ERROR
    elif verbosity == 1:
        level = logging.WARNING
    elif verbosity == 2:
        level = logging.INFO
    elif verbosity >= 3:
        level = logging.DEBUG
    else:
        level = logging.getLevelName(default_level)
        if not isinstance(level, int):
            level = logging.INFO

    console_handler = RichHandler(
        console=console or Console(stderr=True),
        show_path=False,
        rich_tracebacks=verbosity >= 3,
    )
    console_handler.setLevel(level)
    console_handler.setFormatter(logging.Formatter('%(message)s'))
    root.addHandler(console_handler)

    # Silence some noisy libs if not in super debug
    if verbosity < 3:
        for name in NOISY_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="resume-tailor",
        description="Score a resume against a job description and produce a tailored copy",
    )
    parser.add_argument("--resume", required=True, help="Resume file (PDF, DOCX or TXT)")
    parser.add_argument("--job", help="Job description as a JSON file (title, company, qualifications, ...)")
    parser.add_argument("--title", help="Job title (when --job is not used)")
    parser.add_argument("--company", default="", help="Hiring company")
    parser.add_argument("--qualification", action="append", default=[], help="A required qualification (repeatable)")
    parser.add_argument("--responsibility", action="append", default=[], help="A responsibility of the role (repeatable)")
    parser.add_argument("--keywords", default="", help="Comma-separated job keywords")
    parser.add_argument("--output", help="Write the tailored resume to this .docx or .pdf file")
    parser.add_argument("--theme", default=DEFAULT_THEME, help="Accent theme: Rose, Blue, Green, Purple, Orange, Slate, None or a hex colour")
    parser.add_argument("--template", help="DOCX template whose styles are reused for DOCX output")
    parser.add_argument("--enhance", action="store_true", help="Fill missing name/company/location with hosted entity recognition")
    parser.add_argument("--cover-letter", action="store_true", help="Draft a cover letter (LLM when a key is configured)")
    parser.add_argument("--json", action="store_true", help="Print the analysis as JSON instead of a summary")
    parser.add_argument("--ca-bundle", help="Path to a custom CA certificate bundle for HTTPS verification (proxy environments)")
    parser.add_argument("-v", "--verbose", action="count", default=0, help="Increase output verbosity (-v=WARNING, -vv=INFO, -vvv=DEBUG)")
    parser.add_argument("-q", "--quiet", action="store_true", help="Suppress status output (ERROR only)")
    return parser


def load_job(args, parser) -> JobDescription:
    """Builds the job description from --job or the individual flags."""
    if args.job:
        try:
            raw = json.loads(Path(args.job).read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            parser.error(f"Could not read job description {args.job}: {e}")
        if not isinstance(raw, dict):
            parser.error(f"Job description {args.job} must be a JSON object")
        job = JobDescription.from_dict(raw)
    elif args.title:
        job = JobDescription(
            title=args.title.strip(),
            company=args.company,
            responsibilities=args.responsibility,
            qualifications=args.qualification,
            keywords=[k.strip() for k in args.keywords.split(",") if k.strip()],
        )
    else:
        parser.error("Either --job or --title is required.")

    if not job.title:
        parser.error("The job description needs a title.")
    return job


def cover_letter_path(output: Path) -> Path:
    return output.with_name(f"{output.stem}_CoverLetter.docx")


def write_outputs(args, session: TailoringSession, output: TailoredOutput):
    path = Path(args.output)
    if path.parent and not path.parent.exists():
        path.parent.mkdir(parents=True, exist_ok=True)
        logger.info(f"Created output directory: {path.parent}")

    resume = output.tailored_resume or session.resume
    generator = ResumeDocxGenerator(template_path=args.template, theme_color=args.theme)
    if path.suffix.lower() == ".pdf":
        logger.info(f"Generating PDF to: {path}")
        write_resume_pdf(resume, str(path), theme=args.theme)
    else:
        logger.info(f"Generating DOCX to: {path}")
        generator.generate(resume, str(path))

    if output.cover_letter_draft:
        generator.generate_cover_letter(resume, output.cover_letter_draft, str(cover_letter_path(path)))


def render_summary(console: Console, session: TailoringSession, output: TailoredOutput):
    score = output.score
    color = "green" if score >= 80 else "yellow" if score >= 60 else "red"
    bar = "█" * (score // 5) + "░" * (20 - score // 5)
    title = session.job.display_name if session.job else "Job"
    console.print(Panel(f"[bold {color}]{score}%[/] [{color}]{bar}[/]", title=f"Match: {title}", expand=False))

    skills = Table(show_header=True, header_style="bold")
    skills.add_column("Matched", style="green")
    skills.add_column("Missing", style="red")
    for i in range(max(len(output.matched_skills), len(output.missing_skills))):
        matched = output.matched_skills[i] if i < len(output.matched_skills) else ""
        missing = output.missing_skills[i] if i < len(output.missing_skills) else ""
        skills.add_row(matched, missing)
    if skills.row_count:
        console.print(skills)

    console.print("[bold]Recommendations[/]")
    for line in output.recommendations:
        console.print(f"  • {line}")
    console.print("[bold]Suggested edits[/]")
    for line in output.suggested_edits:
        console.print(f"  • {line}")

    tailored = output.tailored_resume
    if tailored is not None:
        mods = tailored.modifications
        console.print(
            f"[dim]Tailoring: +{len(mods.added_skills)} skills, "
            f"{len(mods.modified_experience)} experience edits, "
            f"summary {'rewritten' if mods.modified_summary else 'unchanged'}[/]"
        )
    if output.cover_letter_draft:
        console.print(Panel(output.cover_letter_draft, title="Cover letter draft"))


def _run(args, parser) -> int:
    if args.output and Path(args.output).suffix.lower() not in OUTPUT_SUFFIXES:
        parser.error("--output must end in .docx or .pdf")
    try:
        resolve_theme_color(args.theme)
    except ValueError as e:
        parser.error(str(e))
    job = load_job(args, parser)

    session = TailoringSession(settings=load_settings())
    resume_path = Path(args.resume)
    logger.info(f"Reading resume from: {resume_path}")
    try:
        data = resume_path.read_bytes()
    except OSError as e:
        logger.error(f"Could not read {resume_path}: {e}")
        return 1

    try:
        session.load_resume(data, resume_path.name, enhance=args.enhance)
        output = session.analyze(job, cover_letter=args.cover_letter)
    except ResumeTailorError as e:
        logger.debug(f"Pipeline error: {e}")
        logger.error(e.user_message)
        return 1

    if args.json:
        print(json.dumps(output.to_dict(), indent=2))
    else:
        render_summary(Console(), session, output)

    if args.output:
        try:
            write_outputs(args, session, output)
        except (OSError, ValueError) as e:
            logger.error(f"Error generating output: {e}")
            return 1

    logger.info("Done!")
    return 0


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)

    # Configure custom CA bundle if provided via CLI
    if args.ca_bundle:
        set_ca_bundle_override(args.ca_bundle)

    setup_logging(args.verbose, quiet=args.quiet, default_level=load_settings().log_level)
    try:
        sys.exit(_run(args, parser))
    except KeyboardInterrupt:
        # Use stderr so it captures attention even if stdout is redirected
        sys.stderr.write("\n\033[31m[-] Cancelled by user\033[0m\n")
        sys.exit(130)


if __name__ == "__main__":
    main()
