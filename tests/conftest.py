"""Pytest configuration and shared fixtures."""

import json

import pytest

from dataclysm.pipeline.collaborators import SessionConfig


SAMPLE_CSV = (
    "Name,Age,Active,City\n"
    "Alice,30,true,Paris\n"
    "Bob,N/A,false,\n"
    "\n"
    "Carol,25,TRUE,\"Lyon, FR\"\n"
    "Dan,,yes,Berlin\n"
)

ANALYSIS_REPLY = {
    "rowCount": 4,
    "columnCount": 4,
    "overallHealthScore": 72,
    "columns": [
        {"name": "Name", "type": "string", "missingCount": 0, "uniqueCount": 4,
         "issues": [], "sampleValues": ["Alice", "Bob"]},
        {"name": "Age", "type": "number", "missingCount": 1, "uniqueCount": 3,
         "issues": ["'N/A' in numeric column"], "sampleValues": ["30", "N/A"]},
        {"name": "Active", "type": "boolean", "missingCount": 0, "uniqueCount": 3,
         "issues": ["'yes' is not a boolean"], "sampleValues": ["true", "yes"]},
        {"name": "City", "type": "string", "missingCount": 1, "uniqueCount": 3,
         "issues": [], "sampleValues": ["Paris"]},
    ],
    "criticalIssues": ["Mixed values in Age"],
    "recommendedActions": [
        {"id": "a1", "type": "impute", "title": "Fill missing ages",
         "description": "Use the median", "impact": "high", "columnTarget": "Age"},
        {"id": "a2", "type": "fix_typos", "title": "Normalize booleans",
         "description": "Map yes/no", "impact": "low", "columnTarget": "Active"},
    ],
}


class FakeLLM:
    """Stand-in for call_gemini_api returning queued replies in order."""

    def __init__(self, *replies):
        self.replies = list(replies)
        self.prompts = []

    def __call__(self, prompt, **kwargs):
        self.prompts.append(prompt)
        if not self.replies:
            return None
        reply = self.replies.pop(0)
        if reply is None or isinstance(reply, str):
            return reply
        return json.dumps(reply)


@pytest.fixture
def sample_csv():
    return SAMPLE_CSV


@pytest.fixture
def analysis_reply():
    return json.loads(json.dumps(ANALYSIS_REPLY))


@pytest.fixture
def quiet_config():
    return SessionConfig(verbose=False)


@pytest.fixture
def fake_llm():
    return FakeLLM
