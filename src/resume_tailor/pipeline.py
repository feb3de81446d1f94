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
Upload -> parse -> analyze orchestration with run-id based cancellation.

Every load or analysis takes a fresh run id. Work that finishes after a newer
run started (or after cancel()) is discarded instead of overwriting state.
"""

import copy
import logging
from collections import deque
from datetime import datetime, timezone
from typing import Deque, Optional

from resume_tailor import ingest
from resume_tailor.config import Settings, load_settings
from resume_tailor.enhancement import EntityRecognitionClient, enhance_resume
from resume_tailor.errors import (
    AnalysisComputationError,
    ExtractionValidationFailed,
    ResumeNotLoaded,
    ResumeTailorError,
)
from resume_tailor.llm_client import CoverLetterWriter
from resume_tailor.models import AnalysisResult, JobDescription, StructuredResume, TailoredOutput
from resume_tailor.parser import extract_structured_data, validate_resume
from resume_tailor.tailor import analyze_resume

logger = logging.getLogger(__name__)

HISTORY_LIMIT = 50


class TailoringSession:
    """
    Holds the current resume, its pristine snapshot and the latest analysis.
    Not thread-safe; cancellation is cooperative through the run counter.
    """

    def __init__(self, settings: Optional[Settings] = None,
                 ner_client: Optional[EntityRecognitionClient] = None,
                 cover_letter_writer: Optional[CoverLetterWriter] = None):
        self.settings = settings or load_settings()
        self._ner_client = ner_client
        self._cover_letter_writer = cover_letter_writer
        self._run_id = 0
        # Oldest analyses drop off once the limit is reached
        self.history: Deque[AnalysisResult] = deque(maxlen=HISTORY_LIMIT)
        self._clear()

    def _clear(self):
        self.resume: Optional[StructuredResume] = None
        self.original_resume: Optional[StructuredResume] = None
        self.filename: Optional[str] = None
        self.job: Optional[JobDescription] = None
        self.output: Optional[TailoredOutput] = None
        self.error: Optional[str] = None

    # --- run bookkeeping ---

    @property
    def current_run(self) -> int:
        return self._run_id

    def begin_run(self) -> int:
        self._run_id += 1
        return self._run_id

    def is_current(self, run_id: int) -> bool:
        return run_id == self._run_id

    def cancel(self):
        """Invalidates in-flight work and clears all state."""
        self._run_id += 1
        self._clear()
        logger.info("Session cancelled")

    # --- collaborators ---

    @property
    def ner_client(self) -> EntityRecognitionClient:
        if self._ner_client is None:
            self._ner_client = EntityRecognitionClient(self.settings)
        return self._ner_client

    @property
    def cover_letter_writer(self) -> CoverLetterWriter:
        if self._cover_letter_writer is None:
            self._cover_letter_writer = CoverLetterWriter(settings=self.settings)
        return self._cover_letter_writer

    # --- operations ---

    def load_resume(self, data: bytes, filename: str, mime_type: Optional[str] = None,
                    enhance: bool = False) -> Optional[StructuredResume]:
        """
        Extracts, parses and validates an uploaded resume.

        Returns the parsed resume, or None when the run was superseded.

        Raises:
            UnsupportedFormat, ExtractionFailure: the file could not be read.
            ExtractionValidationFailed: nothing usable was found in the text.
        """
        run_id = self.begin_run()
        self.error = None
        logger.info(f"Loading resume {filename} (run {run_id})")

        try:
            ingest.check_size(data, self.settings.max_upload_bytes)
            text = ingest.extract_text(data, filename, mime_type)
            if not self.is_current(run_id):
                logger.debug(f"Run {run_id} superseded after extraction")
                return None

            resume = extract_structured_data(text)
            if enhance:
                resume = enhance_resume(resume, text, self.ner_client)
            if not self.is_current(run_id):
                logger.debug(f"Run {run_id} superseded after parsing")
                return None

            if not validate_resume(resume):
                logger.warning(f"Validation failed for {filename}: {resume.to_dict()}")
                raise ExtractionValidationFailed(
                    f"Parsed resume from {filename} has no name or no content sections"
                )
        except ResumeTailorError as e:
            if not self.is_current(run_id):
                return None
            self.error = e.user_message
            self.resume = None
            self.original_resume = None
            raise

        self.resume = resume
        self.original_resume = copy.deepcopy(resume)
        self.filename = filename
        self.output = None
        logger.info(
            f"Loaded resume for {resume.name}: {len(resume.experience)} experience, "
            f"{len(resume.education)} education, {len(resume.skills)} skills"
        )
        return resume

    def analyze(self, job: JobDescription, cover_letter: bool = False) -> Optional[TailoredOutput]:
        """
        Scores and tailors the pristine resume against job.

        Returns the output, or None when the run was superseded.
        """
        if self.original_resume is None:
            self.error = ResumeNotLoaded.default_user_message
            raise ResumeNotLoaded("analyze() called before a resume was loaded")

        run_id = self.begin_run()
        self.error = None
        writer = self.cover_letter_writer if cover_letter else None

        try:
            output = analyze_resume(copy.deepcopy(self.original_resume), job, writer)
        except Exception as e:
            if not self.is_current(run_id):
                return None
            logger.error(f"Analysis failed: {e}")
            err = AnalysisComputationError(f"Failed to analyze resume: {e}")
            self.error = err.user_message
            self.output = None
            raise err from e

        if not self.is_current(run_id):
            logger.debug(f"Run {run_id} superseded during analysis")
            return None

        self.job = job
        self.output = output
        if output.tailored_resume is not None:
            self.resume = output.tailored_resume
        self.history.append(AnalysisResult(
            resume=copy.deepcopy(self.original_resume),
            job_description=job,
            tailored_output=output,
            timestamp=datetime.now(timezone.utc),
        ))
        return output

    def revert(self) -> Optional[StructuredResume]:
        """Discards tailoring edits and restores the resume as uploaded."""
        if self.original_resume is not None:
            self.resume = copy.deepcopy(self.original_resume)
        return self.resume
