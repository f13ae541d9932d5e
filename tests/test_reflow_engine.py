# SPDX-License-Identifier: Apache-2.0
"""Tests for reflow planning."""

from __future__ import annotations

import pytest

from resume_layout.core.errors import LayoutError, ReflowOverflowError
from resume_layout.core.models import TextRun
from resume_layout.core.reflow_engine import ReflowEngine, apply_reflow, overflow_runs


@pytest.fixture
def runs() -> list[TextRun]:
    """Runs on two pages."""
    return [
        TextRun("EXPERIENCE", 50.0, 600.0, 14.0, 0),
        TextRun("Job A", 50.0, 580.0, 10.0, 0),
        TextRun("Did things", 60.0, 565.0, 10.0, 0),
        TextRun("EDUCATION", 50.0, 400.0, 14.0, 0),
        TextRun("PROJECTS", 50.0, 700.0, 14.0, 1),
        TextRun("Thing", 50.0, 300.0, 10.0, 1),
    ]


class TestPlanReflow:
    """Tests for ReflowEngine.plan_reflow."""

    def test_selects_runs_at_or_below(self, runs: list[TextRun]) -> None:
        """Runs with y <= from_y on the page are affected, in input order."""
        plan = ReflowEngine(runs).plan_reflow(0, 40.0, 580.0)
        assert [r.text for r in plan.affected_runs] == ["Job A", "Did things", "EDUCATION"]
        assert plan.delta_y == 50.0
        assert plan.threshold_y == 580.0
        assert not plan.overflow

    def test_other_pages_untouched(self, runs: list[TextRun]) -> None:
        """Runs on other pages are never selected."""
        plan = ReflowEngine(runs).plan_reflow(1, 20.0, 800.0)
        assert {r.page_index for r in plan.affected_runs} == {1}
        assert len(plan.affected_runs) == 2

    def test_runs_above_untouched(self, runs: list[TextRun]) -> None:
        """The heading above the insertion does not move."""
        plan = ReflowEngine(runs).plan_reflow(0, 40.0, 590.0)
        assert all(r.text != "EXPERIENCE" for r in plan.affected_runs)

    @pytest.mark.parametrize("from_y", [0.0, 300.0, 580.0, 10_000.0])
    def test_zero_height_is_noop(self, runs: list[TextRun], from_y: float) -> None:
        """inserted_height = 0 affects no runs for any from_y."""
        plan = ReflowEngine(runs).plan_reflow(0, 0.0, from_y)
        assert plan.affected_runs == ()
        assert plan.delta_y == 0.0
        assert plan.is_noop
        assert not plan.overflow

    def test_overflow_flagged(self) -> None:
        """Run at y=60 shifted by 40+10 lands at 10 < 50: overflow."""
        engine = ReflowEngine([TextRun("footer", 50.0, 60.0, 10.0)])
        plan = engine.plan_reflow(0, 40.0, 100.0)
        assert plan.overflow
        assert plan.shifted_runs()[0].y == 10.0
        assert overflow_runs(plan) == [TextRun("footer", 50.0, 60.0, 10.0)]

    def test_landing_on_margin_is_not_overflow(self) -> None:
        """Exactly at the bottom margin still fits."""
        engine = ReflowEngine([TextRun("last", 50.0, 100.0, 10.0)])
        assert not engine.plan_reflow(0, 40.0, 100.0).overflow

    def test_custom_clearance_and_margin(self) -> None:
        """Clearance and bottom margin are configurable."""
        engine = ReflowEngine(
            [TextRun("last", 50.0, 100.0, 10.0)], clearance=0.0, bottom_margin=20.0
        )
        plan = engine.plan_reflow(0, 80.0, 100.0)
        assert plan.delta_y == 80.0
        assert not plan.overflow
        assert plan.bottom_margin == 20.0

    def test_empty_page(self) -> None:
        """An empty document yields an empty, non-overflowing plan."""
        plan = ReflowEngine([]).plan_reflow(0, 40.0, 500.0)
        assert plan.affected_runs == ()
        assert not plan.overflow


class TestApplyReflow:
    """Tests for apply_reflow."""

    def test_shifts_affected_only(self, runs: list[TextRun]) -> None:
        """Only affected runs move; order is preserved."""
        plan = ReflowEngine(runs).plan_reflow(0, 40.0, 580.0)
        shifted = apply_reflow(runs, plan)
        assert [r.y for r in shifted] == [600.0, 530.0, 515.0, 350.0, 700.0, 300.0]
        assert runs[1].y == 580.0

    def test_overflow_rejected(self) -> None:
        """An overflowing plan is not applied without force."""
        runs = [TextRun("footer", 50.0, 60.0, 10.0)]
        plan = ReflowEngine(runs).plan_reflow(0, 40.0, 100.0)
        with pytest.raises(ReflowOverflowError) as exc_info:
            apply_reflow(runs, plan)
        assert isinstance(exc_info.value, LayoutError)
        assert exc_info.value.stage == "reflow"
        assert exc_info.value.plan is plan

    def test_overflow_forced(self) -> None:
        """force=True applies an overflowing plan."""
        runs = [TextRun("footer", 50.0, 60.0, 10.0)]
        plan = ReflowEngine(runs).plan_reflow(0, 40.0, 100.0)
        assert apply_reflow(runs, plan, force=True)[0].y == 10.0

    def test_noop_returns_copy(self, runs: list[TextRun]) -> None:
        """A no-op plan returns an equal, separate list."""
        plan = ReflowEngine(runs).plan_reflow(0, 0.0, 580.0)
        result = apply_reflow(runs, plan)
        assert result == runs
        assert result is not runs
