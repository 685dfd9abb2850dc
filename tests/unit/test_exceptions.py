"""Tests for kill_on_startup/exceptions."""

from __future__ import annotations

import pytest

from kill_on_startup.exceptions import (
    ApplicationError,
    DuplicateEventError,
    GracePeriodExpiredOrDisabledError,
    KillOnStartupError,
    SessionClosedError,
    UnknownEventError,
)


class TestCoordinatorExceptions:
    """Tests for coordinator exception classes."""

    @pytest.mark.parametrize(
        "error_cls",
        [DuplicateEventError, UnknownEventError, GracePeriodExpiredOrDisabledError, SessionClosedError],
    )
    def test_inherits_from_base(self, error_cls) -> None:
        assert issubclass(error_cls, KillOnStartupError)
        assert issubclass(error_cls, ApplicationError)

    def test_keyed_errors_carry_identity(self) -> None:
        err = GracePeriodExpiredOrDisabledError(12, 34, session_id="s1")

        assert err.pid == 12
        assert err.generation_token == 34
        assert err.session_id == "s1"
        assert "pid 12" in str(err)

    def test_session_closed_default_message(self) -> None:
        err = SessionClosedError()

        assert "dismissed" in str(err)

    def test_application_error_stores_kwargs(self) -> None:
        err = ApplicationError("boom", field="x", value=1)

        assert str(err) == "boom"
        assert err.field == "x"
        assert err.value == 1
