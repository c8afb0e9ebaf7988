import copy

import pytest


class FakeLLM:
    """Replays canned completions; an Exception entry is raised instead."""

    def __init__(self, *responses):
        self.responses = list(responses)
        self.calls = []

    async def complete(self, system, prompt, max_output_tokens):
        self.calls.append({"system": system, "prompt": prompt, "max_output_tokens": max_output_tokens})
        if len(self.responses) > 1:
            response = self.responses.pop(0)
        else:
            response = self.responses[0]
        if isinstance(response, Exception):
            raise response
        return response


class RecordingSleep:
    def __init__(self):
        self.delays = []

    async def __call__(self, delay):
        self.delays.append(delay)


_VALID = {
    "version": "1.0",
    "generatedAt": "2025-03-01T10:00:00.000Z",
    "userData": {
        "name": "Giulia Bianchi",
        "role": "Navigatrice di Rotte Orbitali",
        "theme": "design",
        "manifesto": "Trasformo il rumore in segnali chiari.",
        "identityNegations": [
            "Non sono il mio [[job title]].",
            "Non sono i miei [[file Figma]].",
            "Non sono le mie [[certificazioni]].",
            "Io non sono la mia [[scrivania]].",
            "Non sono il mio [[CV]].",
        ],
        "backgroundAudio": {"trackId": "neon_orbit_synthwave", "volume": 0.3},
        "core": "Chiarezza",
        "coreDescription": "Rendo semplice ciò che sembra complesso.",
        "skills": [
            {
                "id": i,
                "name": f"Capacità {i}",
                "type": "design",
                "planetType": "skill",
                "level": 60 + i,
                "orbitRadius": 100 + 40 * i,
                "speed": 30,
                "description": f"Uso la capacità {i} ogni giorno.",
                "relevance": 7,
                "hoverInfo": f"Capacità {i} in pratica",
            }
            for i in range(1, 8)
        ],
        "socialLinks": [
            {
                "id": "linkedin",
                "name": "LinkedIn",
                "planetType": "social",
                "url": "https://www.linkedin.com/in/giulia-bianchi",
                "icon": "linkedin",
                "orbitRadius": 350,
                "speed": 60,
                "relevance": 7,
                "hoverInfo": "Percorso professionale",
                "previewDescription": "Il mio percorso e le persone con cui ho lavorato.",
            }
        ],
        "lessonsLearned": [
            {
                "id": f"lesson-{i}",
                "title": f"Lezione {i}",
                "year": 2020 + i,
                "incidentReport": "Un lancio rimandato.",
                "lessonExtracted": "Testare prima con gli utenti.",
                "quote": "“Meglio presto che perfetto.”",
                "orbitRadius": 500,
                "speed": 100,
                "relevance": 8,
                "hoverInfo": "Testare prima",
            }
            for i in range(1, 3)
        ],
        "projects": [
            {
                "id": i,
                "title": f"Missione {i}",
                "skillId": i,
                "description": "Ridisegno di un flusso di onboarding.",
                "outcome": "Meno abbandoni.",
                "tags": ["alignment", "feedback loops"],
            }
            for i in range(1, 5)
        ],
        "failure": {
            "title": "Lancio Prematuro",
            "lesson": "Validare prima di scalare.",
            "story": "Abbiamo rilasciato senza test e abbiamo dovuto tornare indietro.",
        },
    },
    "meta": {
        "sourceSummary": {"filesCount": 1, "linksCount": 1},
        "confidence": 0.8,
        "limitations": [],
    },
}


@pytest.fixture
def valid_data():
    """A fresh, schema-valid anti-portfolio in wire shape."""
    return copy.deepcopy(_VALID)


@pytest.fixture
def fake_sleep():
    return RecordingSleep()


@pytest.fixture
def make_llm():
    return FakeLLM
