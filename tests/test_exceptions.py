"""Tests for custom exceptions."""

import pytest

from hoarder_sync.core.exceptions import (
    ConfigurationError,
    HoarderSyncError,
    ParseError,
    TransportError,
)


class TestHoarderSyncError:
    def test_message(self):
        assert str(HoarderSyncError("something broke")) == "something broke"

    def test_has_no_retry_state(self):
        assert not hasattr(HoarderSyncError("x"), "retryable")


class TestTransportError:
    """The status code is kept for callers and logs."""

    @pytest.mark.parametrize("status", [None, 401, 503])
    def test_status_code(self, status):
        error = TransportError("x", status_code=status)

        assert error.status_code == status
        assert str(error) == "x"

    def test_is_sync_error(self):
        assert isinstance(TransportError("x"), HoarderSyncError)


class TestOtherErrors:
    def test_parse_error_is_sync_error(self):
        assert isinstance(ParseError("bad payload"), HoarderSyncError)

    def test_configuration_error_is_separate(self):
        assert not issubclass(ConfigurationError, HoarderSyncError)
