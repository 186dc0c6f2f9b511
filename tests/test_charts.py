from __future__ import annotations

import pytest

from wcr.chart_dimensions import dimensions_chart, gap_chart, heatmap_chart, performance_tier
from wcr.chart_radar import dual_radar_chart, overlay_radar_chart, radar_chart, radar_profile
from wcr.chart_trajectory import trajectory_chart
from wcr.chart_world import world_ranking_chart
from wcr.charts import close_polygon, entity_color, fmt_number, with_alpha
from wcr.constants import (
    AGGREGATE_OUTLINE,
    COUNTRY_COLORS,
    DEFAULT_COLOR,
    GCC_AVERAGE,
    GCC_SIMPLE,
    GCC_WEIGHTED,
    GOLD,
    MEMBERS,
    REGION_AGGREGATE,
    TRAJECTORY_SERIES,
)
from wcr.data import Dataset
from wcr.errors import EntityNotFound, InvalidParameter


def _series(spec, name):
    return next(s for s in spec.series if s.name == name)


class TestHelpers:
    def test_entity_color_precedence(self):
        assert entity_color("UAE", REGION_AGGREGATE) == COUNTRY_COLORS["UAE"]
        assert entity_color(GCC_WEIGHTED, REGION_AGGREGATE) == GOLD
        assert entity_color("France", "Other") == DEFAULT_COLOR
        assert entity_color("France") == DEFAULT_COLOR

    def test_with_alpha(self):
        assert with_alpha("#B8A358", "33") == "#B8A35833"
        assert with_alpha("rgba(0,0,0,1)", "33") == "rgba(0,0,0,1)"

    def test_close_polygon(self):
        cats, vals = close_polygon(["a", "b", "c"], [1, 2, 3])
        assert cats == ["a", "b", "c", "a"]
        assert vals == [1.0, 2.0, 3.0, 1.0]
        assert close_polygon([], []) == ([], [])

    def test_fmt_number(self):
        assert fmt_number(21.0) == "21"
        assert fmt_number(19.3333) == "19.3"


class TestWorldRanking:
    def test_weighted_aggregate_is_inserted(self, dataset: Dataset):
        spec = world_ranking_chart(dataset, "Weighted")
        bars = spec.series[0]
        assert len(bars.x) == 70
        assert bars.style["rank"] == list(range(1, 71))
        idx = bars.x.index("GCC (GDP-Weighted)")
        assert bars.color[idx] == GOLD
        assert bars.style["outline_color"][idx] == AGGREGATE_OUTLINE
        assert bars.style["outline_width"][idx] == 2
        assert bars.color[bars.x.index("UAE")] == COUNTRY_COLORS["UAE"]
        assert bars.color[bars.x.index("France")] == DEFAULT_COLOR
        assert "GCC (Simple Avg)" not in bars.x

    def test_rank_annotation(self, dataset: Dataset):
        spec = world_ranking_chart(dataset, "weighted")
        assert spec.layout.options["aggregate"] == GCC_WEIGHTED
        assert spec.layout.options["aggregate_rank"] == 13
        (note,) = spec.layout.annotations
        assert note.text == "#13"
        assert note.color == GOLD
        assert note.y == pytest.approx(dataset.overall_score(GCC_WEIGHTED) + 3)

    def test_simple_method(self, dataset: Dataset):
        spec = world_ranking_chart(dataset, "Simple")
        assert spec.layout.options["aggregate"] == GCC_SIMPLE
        assert spec.layout.options["aggregate_rank"] == 18
        assert "GCC (Simple Avg)" in spec.series[0].x

    def test_default_window(self, dataset: Dataset):
        spec = world_ranking_chart(dataset)
        assert spec.layout.axes["x"]["range"] == [-0.5, 24.5]
        assert spec.vega_lite["$schema"].startswith("https://vega.github.io/schema/vega-lite/")

    def test_invalid_method(self, dataset: Dataset):
        with pytest.raises(InvalidParameter):
            world_ranking_chart(dataset, "Median")


class TestTrajectory:
    def test_all_series_present(self, dataset: Dataset):
        spec = trajectory_chart(dataset)
        assert [s.name for s in spec.series] == ["UAE", "Qatar", "Saudi Arabia", "Bahrain", "Kuwait", "Oman", GCC_AVERAGE]
        assert spec.layout.options["highlight_all"] is True
        assert spec.layout.annotations == []
        assert spec.layout.axes["y"]["reversed"] is True
        assert _series(spec, "Oman").x == [2025]

    def test_empty_highlight_matches_all(self, dataset: Dataset):
        assert trajectory_chart(dataset, []).to_dict() == trajectory_chart(dataset, "All").to_dict()
        assert trajectory_chart(dataset, None).to_dict() == trajectory_chart(dataset, ["All"]).to_dict()

    def test_average_line_style(self, dataset: Dataset):
        avg = _series(trajectory_chart(dataset), GCC_AVERAGE)
        assert avg.style["dash"] == "dash"
        assert avg.style["width"] == 4
        assert avg.color == GOLD
        assert avg.y[1] == pytest.approx(21.0)

    def test_subset_mutes_the_rest(self, dataset: Dataset):
        spec = trajectory_chart(dataset, ["UAE"])
        uae = _series(spec, "UAE")
        qatar = _series(spec, "Qatar")
        avg = _series(spec, GCC_AVERAGE)
        assert uae.style["opacity"] == 1.0 and uae.style["width"] == 2 and uae.style["marker_size"] == 10
        assert qatar.style["opacity"] == 0.2 and qatar.style["width"] == 1 and qatar.style["marker_size"] == 5
        assert avg.style["width"] == 1
        assert spec.layout.options["highlight_all"] is False
        (note,) = spec.layout.annotations
        assert note.text == "UAE #5"
        assert (note.x, note.y) == (2025, 5.0)

    def test_every_series_selected_matches_all(self, dataset: Dataset):
        spec = trajectory_chart(dataset, list(TRAJECTORY_SERIES))
        assert spec.to_dict() == trajectory_chart(dataset, "All").to_dict()
        assert spec.layout.annotations == []
        assert spec.layout.options["highlight_all"] is True

    def test_unknown_highlight(self, dataset: Dataset):
        with pytest.raises(EntityNotFound):
            trajectory_chart(dataset, ["Atlantis"])


class TestDimensions:
    def test_tiers(self):
        assert performance_tier(80.0)[0] == "Strong"
        assert performance_tier(79.99)[0] == "Good"
        assert performance_tier(65.0)[0] == "Good"
        assert performance_tier(64.9)[0] == "Moderate"

    def test_bars_sorted_ascending(self, dataset: Dataset):
        bars = dimensions_chart(dataset).series[0]
        assert bars.y == ["Infrastructure", "Economic Performance", "Government Efficiency", "Business Efficiency"]
        assert bars.x == sorted(bars.x)
        assert bars.style["performance"] == ["Moderate", "Good", "Good", "Strong"]
        assert all(label.endswith(")") and "(Rank #" in label for label in bars.labels)

    def test_heatmap_matrix(self, dataset: Dataset):
        spec = heatmap_chart(dataset)
        cells = spec.series[0]
        assert cells.y == list(MEMBERS)
        assert len(cells.z) == 6 and all(len(row) == 5 for row in cells.z)
        assert cells.z[0] == pytest.approx([96.09, 79.64, 87.28, 92.55, 69.0])
        assert cells.style["zmin"] == 45.0 and cells.style["zmax"] == 100.0

    @pytest.mark.parametrize("method", ["Weighted", "Simple"])
    def test_gap_segments_sum_to_100(self, dataset: Dataset, method: str):
        spec = gap_chart(dataset, method)
        achieved, gap = spec.series
        assert achieved.y == gap.y
        for a, g in zip(achieved.x, gap.x):
            assert a + g == pytest.approx(100.0, abs=1e-9)
        assert spec.layout.options["largest_gap"] == "Infrastructure"

    def test_gap_annotation(self, dataset: Dataset):
        spec = gap_chart(dataset, "Weighted")
        (note,) = spec.layout.annotations
        infra = dataset.factor_row(GCC_WEIGHTED)["infra_score"]
        assert note.y == "Infrastructure"
        assert note.text == f"{round(100 - infra):.0f}-point opportunity"
        assert note.x == pytest.approx(infra + (100 - infra) / 2)


class TestRadar:
    def test_profile_is_closed(self, dataset: Dataset):
        profile = radar_profile(dataset, "Qatar")
        assert len(profile["categories"]) == 5
        assert profile["categories"][0] == profile["categories"][-1] == "Economic Performance"
        assert profile["values"][0] == profile["values"][-1]

    @pytest.mark.parametrize(
        "build",
        [
            lambda ds: radar_chart(ds),
            lambda ds: dual_radar_chart(ds, "Oman", "Simple"),
            lambda ds: overlay_radar_chart(ds, "Kuwait"),
        ],
    )
    def test_every_polygon_closes(self, dataset: Dataset, build):
        spec = build(dataset)
        assert spec.series
        for s in spec.series:
            assert s.x[0] == s.x[-1]
            assert s.y[0] == s.y[-1]
        assert "$schema" in spec.vega_lite

    def test_single_radar_fill(self, dataset: Dataset):
        (s,) = radar_chart(dataset).series
        assert s.style["fillcolor"] == GOLD + "33"

    def test_dual_radar_panels(self, dataset: Dataset):
        spec = dual_radar_chart(dataset, "UAE", "Weighted")
        assert [s.style["subplot"] for s in spec.series] == ["polar", "polar2"]
        assert [a.x for a in spec.layout.annotations] == [0.225, 0.775]
        assert all(a.ref == "paper" for a in spec.layout.annotations)

    def test_overlay_legend_names(self, dataset: Dataset):
        spec = overlay_radar_chart(dataset, "UAE", "Weighted")
        names = [s.name for s in spec.series]
        assert names[1] == "UAE (96.1)"
        assert names[0].startswith(GCC_WEIGHTED + " (")
        assert spec.series[1].style["fillcolor"] == COUNTRY_COLORS["UAE"] + "22"

    def test_unknown_entity(self, dataset: Dataset):
        with pytest.raises(EntityNotFound):
            radar_chart(dataset, "France")
        with pytest.raises(EntityNotFound):
            dual_radar_chart(dataset, "France")
