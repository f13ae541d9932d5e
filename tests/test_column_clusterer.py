# SPDX-License-Identifier: Apache-2.0
"""Tests for column clustering."""

from __future__ import annotations

import pytest

from resume_layout.core.column_clusterer import ColumnClusterer, find_column_index
from resume_layout.core.models import ColumnBand

PAGE_WIDTH = 612.0


@pytest.fixture
def clusterer() -> ColumnClusterer:
    """Clusterer with default thresholds."""
    return ColumnClusterer()


class TestColumnStarts:
    """Tests for gap detection."""

    def test_gap_equal_to_threshold_does_not_split(self, clusterer: ColumnClusterer) -> None:
        """A gap of exactly 50 stays in the same column."""
        assert clusterer.column_starts([50.0, 100.0]) == [50.0]

    def test_gap_above_threshold_splits(self, clusterer: ColumnClusterer) -> None:
        """A gap strictly greater than 50 starts a new column."""
        assert clusterer.column_starts([50.0, 100.01]) == [50.0, 100.01]

    def test_unsorted_input(self, clusterer: ColumnClusterer) -> None:
        """Input order does not matter."""
        assert clusterer.column_starts([305.0, 50.0, 300.0, 52.0]) == [50.0, 300.0]

    def test_chained_small_gaps(self, clusterer: ColumnClusterer) -> None:
        """Gaps are measured between neighbours, not from the column start."""
        assert clusterer.column_starts([50.0, 90.0, 130.0, 170.0]) == [50.0]

    def test_custom_threshold(self) -> None:
        """A smaller threshold splits more eagerly."""
        clusterer = ColumnClusterer(gap_threshold=20.0)
        assert clusterer.column_starts([50.0, 75.0]) == [50.0, 75.0]


class TestCluster:
    """Tests for band construction."""

    def test_two_clusters(self, clusterer: ColumnClusterer) -> None:
        """x=[50,52,300,305] yields [(50,290),(300,pageWidth-50)]."""
        bands = clusterer.cluster([50.0, 52.0, 300.0, 305.0], PAGE_WIDTH)
        assert bands == [
            ColumnBand(0, 50.0, 290.0),
            ColumnBand(1, 300.0, PAGE_WIDTH - 50.0),
        ]

    def test_single_cluster_spans_page(self, clusterer: ColumnClusterer) -> None:
        """All x within the threshold gives one band to the right margin."""
        bands = clusterer.cluster([50.0, 60.0, 70.0], PAGE_WIDTH)
        assert bands == [ColumnBand(0, 50.0, 562.0)]

    def test_empty_input_full_width_band(self, clusterer: ColumnClusterer) -> None:
        """No runs gives a single band between the margins."""
        assert clusterer.cluster([], PAGE_WIDTH) == [ColumnBand(0, 50.0, 562.0)]

    def test_custom_margins(self) -> None:
        """Clearance and right margin are configurable."""
        clusterer = ColumnClusterer(clearance=5.0, margin_right=30.0)
        bands = clusterer.cluster([40.0, 200.0], 600.0)
        assert bands == [ColumnBand(0, 40.0, 195.0), ColumnBand(1, 200.0, 570.0)]

    def test_bands_ordered_and_non_overlapping(self, clusterer: ColumnClusterer) -> None:
        """Bands come in x order and never overlap."""
        bands = clusterer.cluster([400.0, 40.0, 220.0, 45.0, 225.0], PAGE_WIDTH)
        assert [b.index for b in bands] == [0, 1, 2]
        for left, right in zip(bands, bands[1:]):
            assert left.end_x < right.start_x
        assert all(b.start_x < b.end_x for b in bands)

    def test_deterministic(self, clusterer: ColumnClusterer) -> None:
        """Same multiset of x-values gives identical bands."""
        xs = [300.0, 50.0, 52.0, 305.0, 51.0]
        assert clusterer.cluster(xs, PAGE_WIDTH) == clusterer.cluster(
            list(reversed(xs)), PAGE_WIDTH
        )

    def test_start_inside_right_margin(self, clusterer: ColumnClusterer) -> None:
        """A last column starting past the right margin still has positive width."""
        bands = clusterer.cluster([50.0, 580.0], PAGE_WIDTH)
        last = bands[-1]
        assert last.start_x == 580.0
        assert last.end_x > last.start_x

    def test_clearance_wider_than_gap(self) -> None:
        """A squeezed band ends between its start and the next start."""
        clusterer = ColumnClusterer(gap_threshold=5.0, clearance=10.0)
        bands = clusterer.cluster([50.0, 56.0], PAGE_WIDTH)
        assert bands == [ColumnBand(0, 50.0, 53.0), ColumnBand(1, 56.0, 562.0)]
        assert bands[0].end_x < bands[1].start_x


class TestFindColumnIndex:
    """Tests for band membership lookup."""

    BANDS = [ColumnBand(0, 50.0, 290.0), ColumnBand(1, 300.0, 562.0)]

    def test_inside_band(self) -> None:
        """Points inside a band resolve to its index."""
        assert find_column_index(self.BANDS, 100.0) == 0
        assert find_column_index(self.BANDS, 300.0) == 1

    def test_gap_defaults_to_zero(self) -> None:
        """Points in the clearance gap fall back to column 0."""
        assert find_column_index(self.BANDS, 295.0) == 0

    def test_outside_defaults_to_zero(self) -> None:
        """Points outside every band fall back to column 0."""
        assert find_column_index(self.BANDS, 600.0) == 0
        assert find_column_index([], 100.0) == 0
