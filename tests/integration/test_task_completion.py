"""
Integration tests for task completion.

Tests cover:
- Reward crediting and daily quota
- No-op at the quota boundary
- Weekend quota (Saturday at LV2)
- The gateway always uses the current task day
- Commission triggered in the same transaction, rolled back with it
"""

from datetime import date
from decimal import Decimal

import pytest

from taskminer.repositories.task_completion_repository import (
    TaskCompletionRepository,
)
from taskminer.services.referral.commission_distributor import (
    CommissionDistributor,
)
from taskminer.services.task.completion_service import TaskCompletionService
from taskminer.utils.exceptions import (
    InconsistentStateError,
    NotFoundError,
    QuotaExceededError,
)

MONDAY = date(2026, 10, 19)
TUESDAY = date(2026, 10, 20)
SATURDAY = date(2026, 10, 24)


class TestCompleteTask:
    """Test completing tasks through the gateway."""

    @pytest.mark.asyncio
    async def test_reward_credited(self, gateway, make_profile, task_day):
        """Test one task credits reward to every self balance field."""
        await make_profile("alice")

        result = await gateway.complete_task("alice")

        assert result.task_date == MONDAY
        assert result.tasks_completed == 1
        assert result.quota == 4
        assert result.remaining == 3
        assert result.reward == Decimal("1")

        balances = await gateway.get_balances("alice")
        assert balances.available_balance == Decimal("1")
        assert balances.total_balance == Decimal("1")
        assert balances.today_commission == Decimal("1")
        assert balances.total_revenue == Decimal("1")
        assert balances.total_commission == Decimal("0")

    @pytest.mark.asyncio
    async def test_quota_boundary_is_noop(
        self, gateway, make_profile, task_day
    ):
        """Test calls at quota change neither balances nor the record."""
        await make_profile("alice")
        for _ in range(4):
            await gateway.complete_task("alice")

        before = await gateway.get_balances("alice")

        with pytest.raises(QuotaExceededError):
            await gateway.complete_task("alice")
        with pytest.raises(QuotaExceededError):
            await gateway.complete_task("alice")

        after = await gateway.get_balances("alice")
        progress = await gateway.get_task_progress("alice", day=MONDAY)

        assert after == before
        assert progress.completed == 4
        assert progress.earnings == Decimal("4")
        assert progress.is_done is True

    @pytest.mark.asyncio
    async def test_weekend_quota_level_2(
        self, gateway, make_profile, task_day
    ):
        """Test LV2 completes exactly 10 tasks on a Saturday."""
        await make_profile("carol", level=2)
        task_day(SATURDAY)

        for _ in range(10):
            result = await gateway.complete_task("carol")

        assert result.tasks_completed == 10
        assert result.quota == 10
        assert result.earnings_today == Decimal("10")

        with pytest.raises(QuotaExceededError):
            await gateway.complete_task("carol")

        progress = await gateway.get_task_progress("carol", day=SATURDAY)
        assert progress.completed == 10
        assert progress.is_weekend is True
        assert progress.earnings == 10 * progress.reward_per_task

    @pytest.mark.asyncio
    async def test_quota_resets_per_day(self, gateway, make_profile, task_day):
        """Test a new task day starts a new counter."""
        await make_profile("alice")
        for _ in range(4):
            await gateway.complete_task("alice")

        task_day(TUESDAY)
        result = await gateway.complete_task("alice")

        assert result.task_date == TUESDAY
        assert result.tasks_completed == 1

    @pytest.mark.asyncio
    async def test_unknown_user(self, gateway, task_day):
        """Test completing a task without a profile."""
        with pytest.raises(NotFoundError):
            await gateway.complete_task("ghost")


class TestTaskDay:
    """The gateway never lets the caller choose the task day."""

    @pytest.mark.asyncio
    async def test_caller_cannot_pass_day(self, gateway):
        """Test the mutating entry point has no day argument."""
        with pytest.raises(TypeError):
            await gateway.complete_task("alice", day=TUESDAY)

    @pytest.mark.asyncio
    async def test_one_quota_per_real_day(self, gateway, make_profile):
        """Test earnings on the real task day stop at one day's quota."""
        await make_profile("dave")
        progress = await gateway.get_task_progress("dave")

        rejected = 0
        for _ in range(progress.quota + 3):
            try:
                await gateway.complete_task("dave")
            except QuotaExceededError:
                rejected += 1

        balances = await gateway.get_balances("dave")
        after = await gateway.get_task_progress("dave")

        assert rejected == 3
        assert after.completed == progress.quota
        assert balances.available_balance == (
            progress.quota * progress.reward_per_task
        )


class TestDoubleSubmit:
    """Repeated submissions never exceed the quota."""

    @pytest.mark.asyncio
    async def test_submissions_beyond_quota(
        self, gateway, make_profile, task_day
    ):
        """Test earnings equal the credited balance after extra submits."""
        inviter = await make_profile("alice")
        await make_profile("bob", inviter=inviter)

        outcomes = []
        for _ in range(7):
            try:
                await gateway.complete_task("bob")
                outcomes.append("ok")
            except QuotaExceededError:
                outcomes.append("quota")

        progress = await gateway.get_task_progress("bob", day=MONDAY)
        bob = await gateway.get_balances("bob")
        alice = await gateway.get_balances("alice")

        assert outcomes.count("ok") == progress.quota == 4
        assert progress.completed <= progress.quota
        assert bob.available_balance == progress.earnings == Decimal("4")
        assert alice.level1_commission == Decimal("0.12")

    @pytest.mark.asyncio
    async def test_counter_update_refuses_at_quota(
        self, session, make_profile
    ):
        """Test the conditional counter update is a no-op at the ceiling."""
        await make_profile("alice")
        repo = TaskCompletionRepository(session)
        record = await repo.create(
            user_id="alice",
            task_date=MONDAY,
            tasks_completed=0,
            earnings=Decimal("0"),
        )

        applied = [
            await repo.increment_if_below(record.id, 2, Decimal("1"))
            for _ in range(4)
        ]
        await session.commit()

        record = await repo.get_for_day("alice", MONDAY)
        assert applied == [True, True, False, False]
        assert record.tasks_completed == 2
        assert record.earnings == Decimal("2")


class TestAtomicity:
    """A failed commission credit rolls back the whole completion."""

    @pytest.mark.asyncio
    async def test_commission_failure_rolls_back(
        self, gateway, make_profile, task_day, monkeypatch
    ):
        """Test self credit, counter and ancestor credit are all undone."""
        inviter = await make_profile("alice", level=1)
        await make_profile("bob", inviter=inviter)

        distribute = CommissionDistributor.distribute

        async def failing_distribute(self, earning_user_id, task_reward):
            # Ancestor credits are applied before the failure
            await distribute(self, earning_user_id, task_reward)
            raise InconsistentStateError(
                "Commission credit did not apply", user_id=earning_user_id
            )

        monkeypatch.setattr(
            CommissionDistributor, "distribute", failing_distribute
        )

        with pytest.raises(InconsistentStateError):
            await gateway.complete_task("bob")

        bob = await gateway.get_balances("bob")
        alice = await gateway.get_balances("alice")
        progress = await gateway.get_task_progress("bob", day=MONDAY)

        assert bob.available_balance == Decimal("0")
        assert bob.total_revenue == Decimal("0")
        assert progress.completed == 0
        assert progress.earnings == Decimal("0")
        assert alice.level1_commission == Decimal("0")
        assert alice.total_commission == Decimal("0")


class TestTaskCompletionService:
    """Test service-level behaviour."""

    @pytest.mark.asyncio
    async def test_progress_without_tasks(self, session, make_profile):
        """Test progress of a user who did nothing today."""
        await make_profile("alice", level=1)
        service = TaskCompletionService(session)

        progress = await service.get_progress("alice", day=MONDAY)

        assert progress.completed == 0
        assert progress.quota == 12
        assert progress.remaining == 12
        assert progress.earnings == Decimal("0")
        assert progress.reward_per_task == Decimal("0.5")

    @pytest.mark.asyncio
    async def test_history_newest_first(self, session, make_profile):
        """Test task history ordering."""
        await make_profile("alice")
        service = TaskCompletionService(session)

        await service.complete_task("alice", day=MONDAY)
        await service.complete_task("alice", day=TUESDAY)

        history = await service.get_history("alice")

        assert [h.task_date for h in history] == [TUESDAY, MONDAY]

    @pytest.mark.asyncio
    async def test_vip_quota(self, session, make_profile):
        """Test VIP profiles use the VIP table."""
        await make_profile("vera", level=1, is_vip=True)
        service = TaskCompletionService(session)

        result = await service.complete_task("vera", day=MONDAY)

        assert result.quota == 16
        assert result.reward == Decimal("0.5")
