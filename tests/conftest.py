"""Shared pytest fixtures for ideadeps tests."""

from __future__ import annotations

import pytest

from ideadeps.descriptor import PathFactory
from ideadeps.testing import FakeRepository, RecordingExtractor


@pytest.fixture
def repository():
    return FakeRepository()


@pytest.fixture
def extractor(repository):
    return RecordingExtractor(repository=repository, base_dir="/module")


@pytest.fixture
def path_factory():
    return PathFactory({"MODULE_DIR": "/module"})
