from __future__ import annotations

from pathlib import Path

import pytest

from sqlfragment import Fragment

here = Path(__file__).parent
root_path = here.parent


@pytest.fixture
def location_condition() -> Fragment:
    return Fragment("state = $1 AND type = $2", ["California", "Post Office"])


@pytest.fixture
def location_query(location_condition: Fragment) -> Fragment:
    return Fragment("SELECT * FROM locations WHERE $1 AND is_deleted = $2", [location_condition, False])
