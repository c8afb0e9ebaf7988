import json

import pytest

from antiportfolio.exceptions import InputError, SchemaValidationError
from antiportfolio.schemas import to_wire
from antiportfolio.services.flight_log import FLIGHT_LOG_KEY, dump_flight_log, load_flight_log


def test_storage_key_is_versioned():
    assert FLIGHT_LOG_KEY == "antiPortfolio.flightLog.v1"


def test_dump_then_load_preserves_content(valid_data):
    text = dump_flight_log(valid_data)
    assert json.loads(text)["userData"]["name"] == "Giulia Bianchi"
    assert to_wire(load_flight_log(text)) == to_wire(load_flight_log(text.encode("utf-8")))


def test_dump_rejects_invalid_objects(valid_data):
    valid_data["userData"]["theme"] = "space"
    with pytest.raises(SchemaValidationError):
        dump_flight_log(valid_data)


def test_bad_json_is_rejected():
    with pytest.raises(InputError, match="not valid JSON"):
        load_flight_log("{not json")


def test_invalid_shape_is_rejected_not_partially_accepted(valid_data):
    valid_data["userData"]["skills"][0]["relevance"] = 11
    with pytest.raises(SchemaValidationError) as exc_info:
        load_flight_log(json.dumps(valid_data))
    assert [v.path for v in exc_info.value.violations] == ["userData.skills[0].relevance"]
