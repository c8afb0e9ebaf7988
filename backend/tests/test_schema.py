import pytest

from antiportfolio.exceptions import SchemaValidationError
from antiportfolio.schemas import AntiPortfolioData, to_wire, validate_anti_portfolio
from antiportfolio.schemas.audio_tracks import (
    BACKGROUND_AUDIO_TRACK_IDS,
    DEFAULT_TRACK_ID,
    get_background_audio_track_file,
)


def _violation_paths(exc_info):
    return [v.path for v in exc_info.value.violations]


def test_valid_object_passes(valid_data):
    model = validate_anti_portfolio(valid_data)
    assert isinstance(model, AntiPortfolioData)
    assert model.user_data.skills[0].planet_type == "skill"
    assert to_wire(model)["userData"]["socialLinks"][0]["previewDescription"].startswith("Il mio percorso")


def test_string_number_is_rejected_not_coerced(valid_data):
    valid_data["userData"]["skills"][0]["level"] = "80"
    with pytest.raises(SchemaValidationError) as exc_info:
        validate_anti_portfolio(valid_data)
    assert _violation_paths(exc_info) == ["userData.skills[0].level"]
    assert exc_info.value.violations[0].actual == "80"


def test_out_of_range_values_are_reported(valid_data):
    valid_data["userData"]["skills"][2]["level"] = 150
    valid_data["userData"]["lessonsLearned"][1]["orbitRadius"] = 1200
    with pytest.raises(SchemaValidationError) as exc_info:
        validate_anti_portfolio(valid_data)
    assert set(_violation_paths(exc_info)) == {
        "userData.skills[2].level",
        "userData.lessonsLearned[1].orbitRadius",
    }
    assert "100" in exc_info.value.violations[0].expected


def test_enum_url_and_track_violations(valid_data):
    valid_data["userData"]["theme"] = "space"
    valid_data["userData"]["socialLinks"][0]["url"] = "not a url"
    valid_data["userData"]["backgroundAudio"]["trackId"] = "mystery"
    with pytest.raises(SchemaValidationError) as exc_info:
        validate_anti_portfolio(valid_data)
    assert set(_violation_paths(exc_info)) == {
        "userData.theme",
        "userData.socialLinks[0].url",
        "userData.backgroundAudio.trackId",
    }


def test_missing_section_and_wrong_version(valid_data):
    del valid_data["userData"]["failure"]
    valid_data["version"] = "2.0"
    with pytest.raises(SchemaValidationError) as exc_info:
        validate_anti_portfolio(valid_data)
    assert set(_violation_paths(exc_info)) == {"version", "userData.failure"}


def test_dangling_skill_reference_is_allowed(valid_data):
    valid_data["userData"]["projects"][0]["skillId"] = 99
    validate_anti_portfolio(valid_data)


def test_optional_user_data_fields_have_defaults(valid_data):
    del valid_data["userData"]["identityNegations"]
    del valid_data["userData"]["backgroundAudio"]
    user = validate_anti_portfolio(valid_data).user_data
    assert user.identity_negations == []
    assert user.background_audio.track_id == DEFAULT_TRACK_ID
    assert user.background_audio.volume == 0.3


def test_error_message_summarizes_violations(valid_data):
    valid_data["meta"]["confidence"] = 3
    with pytest.raises(SchemaValidationError) as exc_info:
        validate_anti_portfolio(valid_data)
    assert str(exc_info.value).startswith("Schema validation failed: meta.confidence")
    assert exc_info.value.violations[0].to_dict()["actual"] == 3


def test_audio_track_catalogue():
    assert len(BACKGROUND_AUDIO_TRACK_IDS) == 6
    assert get_background_audio_track_file("quiet_gravity_piano") == "/audio/quiet_gravity_piano.mp3"
    assert get_background_audio_track_file("nope") is None
