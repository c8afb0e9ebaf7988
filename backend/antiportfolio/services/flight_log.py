"""
Flight Log codec: the downloadable / re-loadable JSON form of an anti-portfolio.

Loading is all-or-nothing: malformed JSON or an object that fails the schema
is rejected, never partially accepted.
"""
import json
import logging
from typing import Any, Dict, Union

from ..exceptions import InputError
from ..schemas import AntiPortfolioData, to_wire, validate_anti_portfolio

logger = logging.getLogger(__name__)

# Storage slot used by clients that persist the last generated log.
FLIGHT_LOG_KEY = "antiPortfolio.flightLog.v1"


def dump_flight_log(data: Union[AntiPortfolioData, Dict[str, Any]], indent: int = 2) -> str:
    """Serialize a (validated) anti-portfolio to Flight Log JSON."""
    if not isinstance(data, AntiPortfolioData):
        data = validate_anti_portfolio(data)
    return json.dumps(to_wire(data), ensure_ascii=False, indent=indent)


def load_flight_log(raw: Union[str, bytes]) -> AntiPortfolioData:
    """
    Parse and validate a Flight Log.

    Raises:
        InputError: the payload is not JSON
        SchemaValidationError: the JSON is not a valid anti-portfolio
    """
    try:
        parsed = json.loads(raw)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        logger.warning("Rejected flight log: %s", e)
        raise InputError(f"Flight log is not valid JSON: {e}") from e
    return validate_anti_portfolio(parsed)
