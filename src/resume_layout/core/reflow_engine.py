# SPDX-License-Identifier: Apache-2.0
"""Reflow planning after a content insertion.

When content of height ``h`` is placed starting at ``from_y``, every run on
the same page at or below ``from_y`` must move down by ``h + clearance``.
Plans are advisory: the content writer applies them. A plan that would
push content below the page's bottom margin is flagged as overflow and
is never applied without an explicit override.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence

from .errors import ReflowOverflowError
from .models import ReflowPlan, TextRun

logger = logging.getLogger(__name__)


class ReflowEngine:
    """Plan vertical shifts of existing runs."""

    DEFAULT_CLEARANCE = 10.0
    DEFAULT_BOTTOM_MARGIN = 50.0

    def __init__(
        self,
        runs: Iterable[TextRun],
        clearance: float = DEFAULT_CLEARANCE,
        bottom_margin: float = DEFAULT_BOTTOM_MARGIN,
    ) -> None:
        """Initialize ReflowEngine.

        Args:
            runs: Existing runs of the document snapshot
            clearance: Extra space added below the inserted content
            bottom_margin: Lowest y a shifted run may occupy
        """
        self._runs = tuple(runs)
        self._clearance = float(clearance)
        self._bottom_margin = float(bottom_margin)

    def plan_reflow(
        self,
        page_index: int,
        inserted_height: float,
        from_y: float,
    ) -> ReflowPlan:
        """Plan the shift needed to make room for inserted content.

        Args:
            page_index: Page receiving the content
            inserted_height: Vertical extent of the new content
            from_y: Y where the new content starts

        Returns:
            ReflowPlan; a no-op plan when ``inserted_height`` <= 0
        """
        if inserted_height <= 0:
            return ReflowPlan(
                page_index=page_index,
                threshold_y=from_y,
                delta_y=0.0,
                bottom_margin=self._bottom_margin,
            )

        delta_y = inserted_height + self._clearance
        affected = tuple(
            run
            for run in self._runs
            if run.page_index == page_index and run.y <= from_y
        )
        overflow = any(run.y - delta_y < self._bottom_margin for run in affected)

        plan = ReflowPlan(
            page_index=page_index,
            threshold_y=from_y,
            delta_y=delta_y,
            affected_runs=affected,
            overflow=overflow,
            bottom_margin=self._bottom_margin,
        )
        if overflow:
            logger.warning(
                "Reflow on page %d overflows: %d of %d run(s) below margin %.1f",
                page_index,
                len(overflow_runs(plan)),
                len(affected),
                self._bottom_margin,
            )
        else:
            logger.debug(
                "Reflow on page %d: %d run(s) shifted by %.1f",
                page_index,
                len(affected),
                delta_y,
            )
        return plan


def overflow_runs(plan: ReflowPlan) -> list[TextRun]:
    """Affected runs that would land below the plan's bottom margin."""
    return [
        run
        for run in plan.affected_runs
        if run.y - plan.delta_y < plan.bottom_margin
    ]


def apply_reflow(
    runs: Sequence[TextRun],
    plan: ReflowPlan,
    force: bool = False,
) -> list[TextRun]:
    """Return a copy of ``runs`` with the plan's shift applied.

    Args:
        runs: Runs to shift (not modified)
        plan: Plan from ReflowEngine.plan_reflow()
        force: Apply even if the plan overflows

    Returns:
        New run list in the original order

    Raises:
        ReflowOverflowError: If the plan overflows and ``force`` is False
    """
    if plan.overflow and not force:
        raise ReflowOverflowError(plan, len(overflow_runs(plan)))
    if plan.is_noop:
        return list(runs)

    affected = set(plan.affected_runs)
    return [run.shifted(plan.delta_y) if run in affected else run for run in runs]
