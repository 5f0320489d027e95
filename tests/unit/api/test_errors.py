"""Test error to status mapping."""

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from namefinder.api.errors import register_exception_handlers, status_for
from namefinder.exceptions import (
    AppError,
    ConfigurationError,
    DataSourceError,
    LLMProviderError,
    ValidationError,
)


class TestStatusFor:
    """Test status_for."""

    @pytest.mark.parametrize(
        "error,status_code",
        [
            (ValidationError("bad"), 400),
            (DataSourceError("missing"), 404),
            (LLMProviderError("down"), 502),
            (ConfigurationError("no key"), 503),
            (AppError("other"), 500),
            (RuntimeError("boom"), 500),
        ],
    )
    def test_should_map_error_types(self, error, status_code):
        """Test each mapped error type."""
        assert status_for(error) == status_code


class TestAppErrorHandler:
    """Test registered handlers."""

    @pytest.fixture
    def client(self):
        app = FastAPI()
        register_exception_handlers(app)

        @app.get("/missing")
        async def missing():
            raise DataSourceError("No data for year 1999")

        @app.get("/broken")
        async def broken():
            raise AppError("secret internals")

        return TestClient(app)

    def test_should_return_error_detail(self, client):
        """Test client errors expose the message."""
        response = client.get("/missing")

        assert response.status_code == 404
        assert response.json() == {"detail": "No data for year 1999"}

    def test_should_hide_unmapped_error_detail(self, client):
        """Test internal errors are generic."""
        response = client.get("/broken")

        assert response.status_code == 500
        assert response.json() == {"detail": "Internal server error"}
