"""
Postboard — Read Retry Tests
==============================

What:  read_with_retry() retries transient database errors only, rolling
       the session back before each new attempt.
"""

import warnings
from unittest.mock import AsyncMock, MagicMock

import pytest
from sqlalchemy.exc import IntegrityError, OperationalError

from postboard.services.retry import (
    DEFAULT_READ_RETRY,
    SESSION_INFO_KEY,
    ReadRetry,
    policy_for,
    read_with_retry,
)


def _transient():
    return OperationalError("SELECT 1", {}, Exception("connection reset"))


class TestReadWithRetry:

    def setup_method(self):
        self.policy = ReadRetry(max_attempts=3, min_wait=0, max_wait=0)

    @pytest.mark.asyncio
    async def test_recovers_after_transient_error(self, mock_db_session):
        mock_db_session.info = {SESSION_INFO_KEY: self.policy}
        operation = AsyncMock(side_effect=[_transient(), "rows"])

        assert await read_with_retry(mock_db_session, operation) == "rows"
        assert operation.await_count == 2
        mock_db_session.rollback.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_gives_up_after_max_attempts(self, mock_db_session):
        mock_db_session.info = {SESSION_INFO_KEY: self.policy}
        operation = AsyncMock(side_effect=_transient())

        with pytest.raises(OperationalError):
            await read_with_retry(mock_db_session, operation)
        assert operation.await_count == 3

    @pytest.mark.asyncio
    async def test_non_transient_errors_are_not_retried(self, mock_db_session):
        mock_db_session.info = {SESSION_INFO_KEY: self.policy}
        operation = AsyncMock(
            side_effect=IntegrityError("INSERT", {}, Exception("duplicate key"))
        )

        with pytest.raises(IntegrityError):
            await read_with_retry(mock_db_session, operation)
        assert operation.await_count == 1
        mock_db_session.rollback.assert_not_awaited()


class TestPolicyFor:

    def test_policy_from_session_info(self, mock_db_session):
        assert policy_for(mock_db_session).max_attempts == 1

    def test_default_without_info(self):
        assert policy_for(object()) is DEFAULT_READ_RETRY

    def test_from_settings(self, settings):
        policy = ReadRetry.from_settings(settings)
        assert policy.max_attempts == settings.retry_max_attempts
        assert policy.max_wait == settings.retry_max_wait


class TestBackoff:

    def test_builds_without_deprecation_warnings(self):
        with warnings.catch_warnings():
            warnings.simplefilter("error", DeprecationWarning)
            ReadRetry(min_wait=0.1, max_wait=2.0).retrying()

    def test_wait_is_capped(self):
        wait = ReadRetry(min_wait=0.1, max_wait=2.0).retrying().wait
        for attempt in (1, 3, 10):
            assert 0.1 <= wait(MagicMock(attempt_number=attempt)) <= 2.1
