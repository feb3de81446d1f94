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
Optional named-entity-recognition pass over the raw resume text.

Fills gaps left by the heuristic parser (name, employers, location) using the
Hugging Face hosted token-classification endpoint. Best effort only: the
heuristic result is returned unchanged whenever the service cannot be used.
"""

import copy
import logging
from dataclasses import dataclass, field
from typing import List, Optional

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from resume_tailor.config import Settings, get_ca_bundle, load_settings
from resume_tailor.errors import EnhancementUnavailable
from resume_tailor.models import UNKNOWN_NAME, StructuredResume
from resume_tailor.parser import extract_structured_data

logger = logging.getLogger(__name__)

MAX_INPUT_CHARS = 4000
CONNECT_TIMEOUT = 3.05
RETRY_ATTEMPTS = 1


@dataclass
class Entity:
    text: str
    score: float


@dataclass
class EntityResult:
    persons: List[Entity] = field(default_factory=list)
    organizations: List[Entity] = field(default_factory=list)
    locations: List[Entity] = field(default_factory=list)

    def is_empty(self) -> bool:
        return not (self.persons or self.organizations or self.locations)


class EntityRecognitionClient:
    """
    Thin wrapper around the hosted NER model.
    Raises EnhancementUnavailable for every failure mode.
    """
    GROUPS = {"PER": "persons", "ORG": "organizations", "LOC": "locations"}

    def __init__(self, settings: Optional[Settings] = None, session: Optional[requests.Session] = None):
        self.settings = settings or load_settings()
        self.session = session or self._build_session()

    @staticmethod
    def _build_session() -> requests.Session:
        """Session with a single retry for a cold (503) or throttled model."""
        retry = Retry(
            total=RETRY_ATTEMPTS,
            backoff_factor=0.5,
            status_forcelist=(429, 502, 503, 504),
            allowed_methods=frozenset({"POST"}),
            raise_on_status=False,
        )
        session = requests.Session()
        session.mount("https://", HTTPAdapter(max_retries=retry))
        return session

    @property
    def available(self) -> bool:
        return bool(self.settings.huggingface_api_key)

    def _post(self, text: str):
        if not self.available:
            raise EnhancementUnavailable("No Hugging Face API key configured")

        url = self.settings.ner_endpoint
        headers = {"Authorization": f"Bearer {self.settings.huggingface_api_key}"}
        payload = {
            "inputs": text[:MAX_INPUT_CHARS],
            "parameters": {"aggregation_strategy": "simple"},
        }
        timeout = (min(CONNECT_TIMEOUT, self.settings.enhancement_timeout), self.settings.enhancement_timeout)

        logger.debug(f"Requesting entities from {url}")
        try:
            response = self.session.post(url, headers=headers, json=payload,
                                         timeout=timeout, verify=get_ca_bundle())
            response.raise_for_status()
            return response.json()
        except requests.exceptions.RequestException as e:
            raise EnhancementUnavailable(f"Entity recognition request failed: {e}") from e
        except ValueError as e:
            raise EnhancementUnavailable(f"Entity recognition returned invalid JSON: {e}") from e

    def extract_entities(self, text: str) -> EntityResult:
        raw = self._post(text)

        # Some deployments wrap the list once more, one entry per input
        if isinstance(raw, list) and raw and isinstance(raw[0], list):
            raw = raw[0]
        if not isinstance(raw, list):
            raise EnhancementUnavailable(f"Unexpected entity payload: {str(raw)[:200]}")

        result = EntityResult()
        for item in raw:
            if not isinstance(item, dict):
                continue
            group = item.get("entity_group") or item.get("entity") or ""
            # Ungrouped output uses IOB tags such as "B-PER"
            group = group.split("-")[-1].upper()
            attr = self.GROUPS.get(group)
            if not attr:
                continue
            word = str(item.get("word", "")).strip()
            try:
                score = float(item.get("score", 0.0))
            except (TypeError, ValueError):
                continue
            if not word or word.startswith("##") or score < self.settings.ner_min_score:
                continue
            getattr(result, attr).append(Entity(text=word, score=score))

        logger.debug(
            f"Entities: {len(result.persons)} persons, {len(result.organizations)} "
            f"organizations, {len(result.locations)} locations"
        )
        return result


def merge_entities(resume: StructuredResume, entities: EntityResult) -> StructuredResume:
    """Returns a copy of resume with only the empty fields filled from entities."""
    merged = copy.deepcopy(resume)

    if entities.persons and (not merged.name or merged.name == UNKNOWN_NAME):
        merged.name = entities.persons[0].text
        logger.info(f"Name recovered by entity recognition: {merged.name}")

    orgs = [e.text for e in entities.organizations]
    for index, entry in enumerate(merged.experience):
        if index >= len(orgs):
            break
        if not entry.company:
            entry.company = orgs[index]

    if entities.locations and not merged.location:
        merged.location = entities.locations[0].text

    return merged


def enhance_resume(resume: StructuredResume, text: str,
                   client: Optional[EntityRecognitionClient] = None) -> StructuredResume:
    """
    Applies the NER pass on top of a heuristic parse.
    Never raises: any failure returns the baseline unchanged.
    """
    client = client or EntityRecognitionClient()
    try:
        entities = client.extract_entities(text)
    except EnhancementUnavailable as e:
        logger.warning(f"Enhancement skipped: {e}")
        return resume
    except Exception as e:
        logger.warning(f"Enhancement failed unexpectedly, using basic parse: {e}")
        return resume
    return merge_entities(resume, entities)


def extract_structured_data_with_ai(text: str,
                                    client: Optional[EntityRecognitionClient] = None) -> StructuredResume:
    """Heuristic parse followed by the best-effort enhancement pass."""
    return enhance_resume(extract_structured_data(text), text, client)
