"""
Integration tests for ledger initialization and logging setup.
"""

from decimal import Decimal

import pytest
from loguru import logger

from taskminer.bootstrap import init_ledger, shutdown_ledger
from taskminer.config.settings import settings
from taskminer.log_setup import setup_logging


class TestSetupLogging:
    """Test file sink configuration."""

    def test_writes_to_log_file(self, tmp_path):
        """Messages reach the configured file."""
        log_file = tmp_path / "ledger.log"
        handler_id = setup_logging(log_file=str(log_file), level="DEBUG")
        try:
            logger.debug("ledger probe")
        finally:
            logger.remove(handler_id)

        content = log_file.read_text(encoding="utf-8")
        assert "Logging configured" in content
        assert "ledger probe" in content


class TestInitLedger:
    """Test engine and gateway wiring."""

    @pytest.mark.asyncio
    async def test_init_creates_working_gateway(self, tmp_path, monkeypatch):
        """Initialized gateway serves operations on created tables."""
        monkeypatch.setattr(settings, "log_file", str(tmp_path / "boot.log"))

        engine, gateway = await init_ledger(create_tables=True)
        try:
            assert gateway.timeout == settings.operation_timeout_seconds
            assert gateway.max_retries == settings.max_retries

            profile = await gateway.register_user("boot-user")
            balances = await gateway.get_balances("boot-user")

            assert profile.user_id == "boot-user"
            assert balances.available_balance == Decimal("0")
        finally:
            await shutdown_ledger(engine)
