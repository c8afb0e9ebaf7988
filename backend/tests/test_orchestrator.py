import json

import pytest

from antiportfolio.config import Settings
from antiportfolio.exceptions import (
    ExtractionError,
    InputError,
    ModelOutputError,
    OperationFailedError,
)
from antiportfolio.services.orchestrator import AntiPortfolioBuilder, SourceFile, parse_links

CV_TEXT = "GIULIA BIANCHI\nProduct designer a Milano.\nEsperienze: ricerca utente, workshop."

ANALYSIS_JSON = json.dumps({
    "experiences": {"companies": ["Studio Nord"], "roles": ["Designer"]},
    "lessons": ["Testare presto"],
    "confidence": {"overall": 2},
})


def _generation_text():
    payload = {
        "version": "1.0",
        "userData": {
            "name": "Mario Rossi",
            "role": "Navigatrice di Rotte",
            "theme": "space",
            "skills": [{"id": i, "name": f"Capacità {i}", "level": 70} for i in range(1, 10)],
            "projects": [{"id": 1, "title": "Onboarding", "skillId": 42}],
        },
    }
    # Fenced, with a trailing comma: needs the repair stage.
    return "```json\n" + json.dumps(payload)[:-1] + ",}\n```"


class FakeExtractor:
    def __init__(self, text="", error=None):
        self.text = text
        self.error = error
        self.calls = []

    async def __call__(self, source):
        self.calls.append(source)
        if self.error:
            raise self.error
        return self.text


def _builder(llm, fake_sleep, pdf=None, web=None, **overrides):
    settings = Settings(max_retries=2, web_max_retries=1, retry_base_delay=0.5, max_links=3, **overrides)
    return AntiPortfolioBuilder(
        llm=llm,
        settings=settings,
        pdf_extractor=pdf or FakeExtractor(CV_TEXT),
        web_extractor=web or FakeExtractor("Portfolio di Giulia con casi studio."),
        sleep=fake_sleep,
    )


def _pdf(name="cv.pdf", data=b"%PDF-1.4 fake", content_type="application/pdf"):
    return SourceFile(filename=name, content_type=content_type, data=data)


@pytest.mark.asyncio
async def test_full_pipeline_produces_valid_wire_object(make_llm, fake_sleep):
    llm = make_llm(ANALYSIS_JSON, _generation_text())
    builder = _builder(llm, fake_sleep)

    result = await builder.build([_pdf()], ["giulia.design"], "Amo capire le persone.")

    user = result["userData"]
    assert result["version"] == "1.0"
    assert user["name"] == "Giulia Bianchi"
    assert user["theme"] == "tech"
    assert len(user["skills"]) == 7
    assert user["projects"][0]["skillId"] == user["skills"][0]["id"]
    assert result["meta"]["sourceSummary"] == {"filesCount": 1, "linksCount": 1}
    assert fake_sleep.delays == []


@pytest.mark.asyncio
async def test_prompts_carry_content_hint_and_counts(make_llm, fake_sleep):
    llm = make_llm(ANALYSIS_JSON, _generation_text())
    await _builder(llm, fake_sleep).build([_pdf()], ["giulia.design"], "Amo capire le persone.")

    analysis_prompt = llm.calls[0]["prompt"]
    assert "=== User Narrative (Briefing di missione) ===\nAmo capire le persone." in analysis_prompt
    assert "=== File: cv.pdf ===" in analysis_prompt
    assert "=== Web: https://giulia.design ===" in analysis_prompt
    assert llm.calls[0]["max_output_tokens"] == 4000

    generation_prompt = llm.calls[1]["prompt"]
    assert "Giulia Bianchi" in generation_prompt
    assert "filesCount=1" in generation_prompt
    assert '"files": 1' in generation_prompt
    assert llm.calls[1]["max_output_tokens"] == 5000


@pytest.mark.asyncio
async def test_unparseable_analysis_is_retried(make_llm, fake_sleep):
    llm = make_llm("Sorry, I cannot help", ANALYSIS_JSON, _generation_text())
    result = await _builder(llm, fake_sleep).build([_pdf()])
    assert result["userData"]["name"] == "Giulia Bianchi"
    assert len(llm.calls) == 3
    assert fake_sleep.delays == [0.5]


@pytest.mark.asyncio
async def test_model_output_error_survives_retries(make_llm, fake_sleep):
    llm = make_llm(ANALYSIS_JSON, "still not json")
    with pytest.raises(ModelOutputError):
        await _builder(llm, fake_sleep).build([_pdf()])
    assert len(llm.calls) == 4
    assert fake_sleep.delays == [0.5, 1.0]


@pytest.mark.asyncio
async def test_model_transport_error_is_tagged_with_operation(make_llm, fake_sleep):
    llm = make_llm(ConnectionError("network down"))
    with pytest.raises(OperationFailedError) as exc_info:
        await _builder(llm, fake_sleep).build([_pdf()])
    assert exc_info.value.operation == "ai:analyze"
    assert len(llm.calls) == 3


@pytest.mark.asyncio
async def test_no_inputs_is_an_input_error(make_llm, fake_sleep):
    llm = make_llm(ANALYSIS_JSON)
    with pytest.raises(InputError, match="At least one file or one link"):
        await _builder(llm, fake_sleep).build([], [], "only a briefing")
    assert llm.calls == []


@pytest.mark.asyncio
async def test_non_pdf_and_oversize_files_are_dropped(make_llm, fake_sleep):
    pdf = FakeExtractor(CV_TEXT)
    builder = _builder(make_llm(ANALYSIS_JSON), fake_sleep, pdf=pdf, upload_max_size=10)
    files = [_pdf("notes.txt", b"hello", "text/plain"), _pdf("big.pdf", b"x" * 11)]
    with pytest.raises(InputError, match="No content could be extracted"):
        await builder.build(files)
    assert pdf.calls == []


@pytest.mark.asyncio
async def test_pdf_failure_propagates_after_retries(make_llm, fake_sleep):
    pdf = FakeExtractor(error=ExtractionError("PDF extraction timeout"))
    with pytest.raises(ExtractionError, match="timeout"):
        await _builder(make_llm(ANALYSIS_JSON), fake_sleep, pdf=pdf).build([_pdf()])
    assert len(pdf.calls) == 3


@pytest.mark.asyncio
async def test_links_are_capped_and_web_retries_are_separate(make_llm, fake_sleep):
    web = FakeExtractor("testo")
    llm = make_llm(ANALYSIS_JSON, _generation_text())
    links = [f"https://example.com/{i}" for i in range(5)]
    await _builder(llm, fake_sleep, web=web).build([], links)
    assert web.calls == links[:3]

    failing = FakeExtractor(error=RuntimeError("dns"))
    with pytest.raises(OperationFailedError) as exc_info:
        await _builder(make_llm(ANALYSIS_JSON), fake_sleep, web=failing).build([], ["example.com"])
    assert exc_info.value.operation == "web:https://example.com"
    assert len(failing.calls) == 2


def test_parse_links():
    assert parse_links('["github.com/giulia", 3, "", "https://x.io"]') == ["https://github.com/giulia", "https://x.io"]
    assert parse_links("not json") == []
    assert parse_links('{"a": 1}') == []
    assert parse_links(None) == []
