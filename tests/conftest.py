"""pytest fixtures shared by the house automation test suites."""

import pytest


@pytest.fixture(autouse=True)
async def auto_enable_custom_integrations(enable_custom_integrations):
    """Let Home Assistant load house_automation from custom_components."""
    return
