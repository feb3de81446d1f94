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

import unittest
from unittest.mock import MagicMock, patch

import requests

from resume_tailor import config
from resume_tailor.config import Settings
from resume_tailor.enhancement import (
    Entity,
    EntityRecognitionClient,
    EntityResult,
    enhance_resume,
    extract_structured_data_with_ai,
    merge_entities,
)
from resume_tailor.errors import EnhancementUnavailable
from resume_tailor.models import UNKNOWN_NAME, ExperienceEntry, StructuredResume

NER_RESPONSE = [
    {"entity_group": "PER", "word": "Jane Doe", "score": 0.99},
    {"entity_group": "ORG", "word": "Acme Corp", "score": 0.95},
    {"entity_group": "ORG", "word": "##Lab", "score": 0.91},
    {"entity_group": "ORG", "word": "Globex", "score": 0.30},
    {"entity_group": "LOC", "word": "Berlin", "score": 0.88},
    {"entity_group": "MISC", "word": "Python", "score": 0.97},
]


def make_client(payload=None, side_effect=None, api_key="hf_test"):
    session = MagicMock()
    if side_effect is not None:
        session.post.side_effect = side_effect
    else:
        response = MagicMock()
        response.json.return_value = payload
        session.post.return_value = response
    settings = Settings(huggingface_api_key=api_key)
    return EntityRecognitionClient(settings=settings, session=session), session


class TestEntityRecognitionClient(unittest.TestCase):
    def setUp(self):
        config._ca_bundle_override = None

    def test_groups_and_filters(self):
        client, _ = make_client(NER_RESPONSE)
        result = client.extract_entities("Jane Doe works at Acme Corp in Berlin")
        self.assertEqual([e.text for e in result.persons], ["Jane Doe"])
        self.assertEqual([e.text for e in result.organizations], ["Acme Corp"])
        self.assertEqual([e.text for e in result.locations], ["Berlin"])

    def test_request_shape(self):
        client, session = make_client([])
        client.extract_entities("x" * 5000)

        args, kwargs = session.post.call_args
        self.assertEqual(args[0], "https://api-inference.huggingface.co/models/dslim/bert-base-NER")
        self.assertEqual(kwargs["headers"]["Authorization"], "Bearer hf_test")
        self.assertEqual(len(kwargs["json"]["inputs"]), 4000)
        self.assertEqual(kwargs["timeout"], (3.05, 5.0))

    def test_iob_tags_and_nested_list(self):
        payload = [[{"entity": "B-PER", "word": "Ada", "score": 0.9}]]
        client, _ = make_client(payload)
        result = client.extract_entities("Ada")
        self.assertEqual([e.text for e in result.persons], ["Ada"])

    def test_no_api_key(self):
        client, session = make_client([], api_key=None)
        self.assertFalse(client.available)
        with self.assertRaises(EnhancementUnavailable):
            client.extract_entities("text")
        session.post.assert_not_called()

    def test_network_error(self):
        client, _ = make_client(side_effect=requests.exceptions.ConnectTimeout("slow"))
        with self.assertRaises(EnhancementUnavailable):
            client.extract_entities("text")

    def test_http_error(self):
        client, session = make_client([])
        session.post.return_value.raise_for_status.side_effect = requests.exceptions.HTTPError("503")
        with self.assertRaises(EnhancementUnavailable):
            client.extract_entities("text")

    def test_invalid_json(self):
        client, session = make_client()
        session.post.return_value.json.side_effect = ValueError("not json")
        with self.assertRaises(EnhancementUnavailable):
            client.extract_entities("text")

    def test_unexpected_payload(self):
        client, _ = make_client({"error": "Model is loading"})
        with self.assertRaises(EnhancementUnavailable):
            client.extract_entities("text")

    def test_default_session_retries(self):
        client = EntityRecognitionClient(settings=Settings())
        adapter = client.session.get_adapter("https://api-inference.huggingface.co")
        self.assertEqual(adapter.max_retries.total, 1)
        self.assertIn(503, adapter.max_retries.status_forcelist)


class TestMergeEntities(unittest.TestCase):
    def setUp(self):
        self.entities = EntityResult(
            persons=[Entity("Jane Doe", 0.9)],
            organizations=[Entity("Acme", 0.9), Entity("Globex", 0.9)],
            locations=[Entity("Berlin", 0.9)],
        )

    def test_fills_only_missing_fields(self):
        resume = StructuredResume(experience=[
            ExperienceEntry(id="exp-1", title="Dev"),
            ExperienceEntry(id="exp-2", title="Dev", company="Initech"),
        ])
        merged = merge_entities(resume, self.entities)
        self.assertEqual(merged.name, "Jane Doe")
        self.assertEqual([e.company for e in merged.experience], ["Acme", "Initech"])
        self.assertEqual(merged.location, "Berlin")
        # Input untouched
        self.assertEqual(resume.name, UNKNOWN_NAME)
        self.assertIsNone(resume.experience[0].company)

    def test_never_overwrites(self):
        resume = StructuredResume(name="John Roe", location="Paris")
        merged = merge_entities(resume, self.entities)
        self.assertEqual(merged.name, "John Roe")
        self.assertEqual(merged.location, "Paris")


class TestEnhanceResume(unittest.TestCase):
    def test_failure_returns_baseline(self):
        client = MagicMock()
        client.extract_entities.side_effect = EnhancementUnavailable("down")
        resume = StructuredResume(name="Jane", skills=["Go"])
        self.assertIs(enhance_resume(resume, "text", client), resume)

    def test_unexpected_error_is_absorbed(self):
        client = MagicMock()
        client.extract_entities.side_effect = KeyError("boom")
        resume = StructuredResume(name="Jane")
        self.assertIs(enhance_resume(resume, "text", client), resume)

    def test_success_merges(self):
        client = MagicMock()
        client.extract_entities.return_value = EntityResult(persons=[Entity("Jane Doe", 0.9)])
        enhanced = enhance_resume(StructuredResume(skills=["Go"]), "text", client)
        self.assertEqual(enhanced.name, "Jane Doe")

    @patch('resume_tailor.enhancement.extract_structured_data')
    def test_with_ai_runs_basic_parse_first(self, mock_parse):
        mock_parse.return_value = StructuredResume(skills=["Go"])
        client = MagicMock()
        client.extract_entities.return_value = EntityResult(persons=[Entity("Jane Doe", 0.9)])

        resume = extract_structured_data_with_ai("some text", client)
        mock_parse.assert_called_once_with("some text")
        self.assertEqual(resume.name, "Jane Doe")
        self.assertEqual(resume.skills, ["Go"])


if __name__ == '__main__':
    unittest.main()
