"""Shared fixtures for the Ladrillos test suite."""

from pathlib import Path

import pytest

from ladrillos.config import reset_render_config
from ladrillos.context import set_current_post
from ladrillos.registry import BlockTypeRegistry, create_registry_with_defaults

FIXTURES_DIR = Path(__file__).parent / "fixtures" / "blocks"


@pytest.fixture(autouse=True)
def _reset_ambient_state():
    """Undo test-only registrations and ambient state after each test."""
    yield
    registry = BlockTypeRegistry.get_instance()
    if registry.is_registered("core/test"):
        registry.unregister("core/test")
    set_current_post(None)
    reset_render_config()


@pytest.fixture
def registry() -> BlockTypeRegistry:
    """An isolated registry with the core block types."""
    return create_registry_with_defaults()


@pytest.fixture
def fixtures_dir() -> Path:
    return FIXTURES_DIR
