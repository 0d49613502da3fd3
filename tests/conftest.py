import os

import pytest
from fastapi.testclient import TestClient

from dirserve.config import ServeConfig
from main import create_app

TESTDATA = os.path.join(os.path.dirname(__file__), "testdata")


@pytest.fixture
def make_client():
    """Build a TestClient serving a testdata tree (or any absolute path)."""
    def _make(test_dir: str = "root", **options) -> TestClient:
        config = ServeConfig(directory=os.path.join(TESTDATA, test_dir), **options)
        return TestClient(create_app(config))
    return _make
