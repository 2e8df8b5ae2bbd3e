"""Smoke tests for package imports.

This module verifies that all key packages can be imported successfully.
It serves as a basic sanity check for the project structure.
"""

import pytest


@pytest.mark.unit
class TestSmokeImports:
    """Smoke tests to verify all key packages are importable."""

    def test_import_package(self) -> None:
        import docsearch
        assert docsearch.__version__

    def test_import_core(self) -> None:
        from docsearch import core
        assert core is not None

    def test_import_libs(self) -> None:
        from docsearch.libs import backend, embedding, reranker
        assert backend is not None
        assert embedding is not None
        assert reranker is not None

    def test_import_tasks(self) -> None:
        from docsearch import tasks
        assert tasks is not None

    def test_import_observability(self) -> None:
        from docsearch import observability
        assert observability is not None
