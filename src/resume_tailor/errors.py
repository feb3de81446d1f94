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
Exception hierarchy for Resume Tailor.

Every error carries a ``user_message`` that is safe to show to the person who
uploaded the file. The technical detail goes to the logs via ``str(exc)``.
"""


class ResumeTailorError(Exception):
    """Base class for all Resume Tailor errors."""
    default_user_message = "Something went wrong while processing your resume."

    def __init__(self, message: str = "", user_message: str = None):
        super().__init__(message or self.default_user_message)
        self.user_message = user_message or self.default_user_message


class UnsupportedFormat(ResumeTailorError):
    """The uploaded file is not a PDF, DOCX or plain text document."""
    default_user_message = (
        "Unsupported file type. Please upload a PDF, DOCX or TXT file."
    )


class ExtractionFailure(ResumeTailorError):
    """The decoder for a supported format raised (corrupt, encrypted, not a zip...)."""
    default_user_message = (
        "Failed to extract text from the file. "
        "Please make sure the file is not corrupted or password protected."
    )


class FileTooLarge(ExtractionFailure):
    default_user_message = "The file is too large. Please upload a smaller file."


class ExtractionValidationFailed(ResumeTailorError):
    """Text was extracted but the parsed resume has no usable content."""
    default_user_message = (
        "Could not extract the required information from your resume. "
        "Please make sure it clearly shows your name and at least one of "
        "education, experience or skills under standard section headings "
        "(e.g. 'Experience', 'Education', 'Skills')."
    )


class EnhancementUnavailable(ResumeTailorError):
    """The entity recognition service could not be used. Never shown to the user."""
    default_user_message = "Resume enhancement is currently unavailable."


class AnalysisComputationError(ResumeTailorError):
    default_user_message = "Failed to analyze resume. Please try again."


class ResumeNotLoaded(ResumeTailorError):
    default_user_message = "Please upload a resume before running the analysis."
