# tests/conftest.py
import logging
from typing import Any, Dict, List

import pytest

from intraday_schemas.market_data import IntradayItem

from tests.helpers import SCENARIO_ITEMS, make_payload, tool_result


def pytest_configure(config):
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )


@pytest.fixture
def scenario_items() -> List[IntradayItem]:
    """09:30:00 @100 x10, 09:31:30 @101 x5, 09:35:00 @99 x7"""
    return [IntradayItem.model_validate(i) for i in SCENARIO_ITEMS]


@pytest.fixture
def scenario_result() -> Dict[str, Any]:
    return tool_result(make_payload(SCENARIO_ITEMS))
