from __future__ import annotations

import pytest

from src.assessment.catalog import Catalog, load_default_catalog


@pytest.fixture(scope="session")
def catalog() -> Catalog:
    return load_default_catalog()


@pytest.fixture
def make_catalog():
    """Build a small in-memory catalog from raw question dicts."""

    def _make(*questions: dict, ministries: dict | None = None) -> Catalog:
        return Catalog.model_validate({
            "version": "test",
            "questions": list(questions),
            "ministries": ministries or {},
        })

    return _make
