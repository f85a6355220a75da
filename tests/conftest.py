"""Pytest configuration and shared fixtures for casework tests."""

from __future__ import annotations

import pytest

from casework.application.session import DesignSession
from casework.domain import HierarchyStore, SelectionEngine
from casework.infrastructure import SceneGraphAdapter, VisualHandleError


def pytest_configure(config: pytest.Config) -> None:
    """Configure pytest with custom markers."""
    config.addinivalue_line(
        "markers", "integration: tests exercising several layers together"
    )


# =============================================================================
# Adapters
# =============================================================================


class FlakyAdapter(SceneGraphAdapter):
    """Scene graph adapter that fails the n-th panel representation build.

    ``fail_on`` counts builds from 1; None disables the failure.
    """

    def __init__(self, fail_on: int | None = None, **kwargs) -> None:
        super().__init__(**kwargs)
        self.fail_on = fail_on
        self.builds = 0

    def build_panel_representation(self, *args, **kwargs):
        self.builds += 1
        if self.fail_on is not None and self.builds == self.fail_on:
            raise VisualHandleError("GPU out of memory")
        return super().build_panel_representation(*args, **kwargs)


@pytest.fixture
def flaky_adapter_cls() -> type[FlakyAdapter]:
    return FlakyAdapter


@pytest.fixture
def adapter() -> SceneGraphAdapter:
    return SceneGraphAdapter()


@pytest.fixture
def store(adapter: SceneGraphAdapter) -> HierarchyStore:
    return HierarchyStore(adapter)


@pytest.fixture
def selection(store: HierarchyStore) -> SelectionEngine:
    return SelectionEngine(store)


@pytest.fixture
def floor_id(store: HierarchyStore) -> str:
    """Ground floor of a fresh project."""
    project = store.create_project("Kitchen")
    return project.floors[0]


@pytest.fixture
def session(adapter: SceneGraphAdapter) -> DesignSession:
    session = DesignSession(HierarchyStore(adapter))
    session.bootstrap("Test Project")
    return session


@pytest.fixture
def base_cabinet_entry() -> dict:
    return {
        "id": "base-600",
        "name": "Base 600",
        "width": 600,
        "height": 720,
        "depth": 560,
        "thickness": 18,
        "options": {"backType": "groove", "topStyle": "betweenSides"},
    }
