"""
Unit tests for the error taxonomy and the transactional decorator.
"""

import pytest
from sqlalchemy.exc import (
    IntegrityError,
    InvalidRequestError,
    OperationalError,
    ProgrammingError,
)

from taskminer.utils.db_decorators import transactional
from taskminer.utils.exceptions import (
    AuthorizationError,
    InconsistentStateError,
    QuotaExceededError,
    TaskMinerError,
    TransientBackendError,
    ValidationError,
    is_retryable,
    is_user_error,
    must_alert,
    user_message_for,
)


class TestErrorCategories:
    """Test handling categories."""

    def test_user_message_default(self):
        """Test default message per error class."""
        assert QuotaExceededError().user_message == (
            "All tasks for today are completed"
        )
        assert AuthorizationError().user_message == "Access denied"

    def test_user_message_custom_and_context(self):
        """Test custom message and context."""
        error = ValidationError("Minimum amount is $20", amount="15")
        assert str(error) == "Minimum amount is $20"
        assert error.context == {"amount": "15"}

    def test_retryable(self):
        """Test transient errors are retryable."""
        assert is_retryable(TransientBackendError()) is True
        assert is_retryable(TimeoutError()) is True
        assert is_retryable(ValidationError()) is False

    def test_user_errors(self):
        """Test user-caused errors."""
        assert is_user_error(QuotaExceededError()) is True
        assert is_user_error(InconsistentStateError()) is False

    def test_must_alert(self):
        """Test consistency errors are alerted."""
        assert must_alert(InconsistentStateError()) is True
        assert must_alert(ValidationError()) is False

    def test_unknown_error_message_does_not_leak(self):
        """Test internals never reach the UI."""
        message = user_message_for(RuntimeError("secret stack detail"))
        assert "secret" not in message
        assert message == TaskMinerError.default_message


class _Service:
    def __init__(self, session, error=None):
        self.session = session
        self.error = error

    @transactional
    async def run(self):
        if self.error:
            raise self.error
        return "ok"


class TestTransactional:
    """Test commit/rollback and error translation."""

    @pytest.mark.asyncio
    async def test_commit_on_success(self, mock_session):
        """Test result is returned after commit."""
        assert await _Service(mock_session).run() == "ok"
        mock_session.commit.assert_awaited_once()
        mock_session.rollback.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_ledger_error_passes_through(self, mock_session):
        """Test ledger errors are re-raised unchanged after rollback."""
        with pytest.raises(QuotaExceededError):
            await _Service(mock_session, QuotaExceededError()).run()
        mock_session.rollback.assert_awaited_once()
        mock_session.commit.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_operational_error_is_transient(self, mock_session):
        """Test lock conflicts become retryable errors."""
        error = OperationalError("UPDATE", {}, Exception("lock timeout"))
        with pytest.raises(TransientBackendError):
            await _Service(mock_session, error).run()

    @pytest.mark.asyncio
    async def test_integrity_error_is_transient(self, mock_session):
        """Test unique conflicts become retryable errors."""
        error = IntegrityError("INSERT", {}, Exception("duplicate"))
        with pytest.raises(TransientBackendError):
            await _Service(mock_session, error).run()

    @pytest.mark.asyncio
    async def test_other_db_error_is_inconsistent(self, mock_session):
        """Test other driver errors become consistency errors."""
        error = ProgrammingError("SELECT", {}, Exception("bad sql"))
        with pytest.raises(InconsistentStateError):
            await _Service(mock_session, error).run()

    @pytest.mark.asyncio
    async def test_orm_error_is_inconsistent(self, mock_session):
        """Test non-driver SQLAlchemy errors become consistency errors."""
        error = InvalidRequestError("Instance is not persistent")
        with pytest.raises(InconsistentStateError) as exc_info:
            await _Service(mock_session, error).run()
        assert exc_info.value.__cause__ is error
        mock_session.rollback.assert_awaited_once()
        mock_session.commit.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_other_errors_propagate(self, mock_session):
        """Test unrelated errors are not translated."""
        with pytest.raises(KeyError):
            await _Service(mock_session, KeyError("x")).run()
        mock_session.rollback.assert_awaited_once()
