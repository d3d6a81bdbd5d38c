"""Tests for the dashboard image renderer."""

from pathlib import Path

import pytest
from PIL import Image

from conftest import days_before, make_series
from hackagoal.dashboard.renderer import DashboardRenderer
from hackagoal.goals.metrics import compute_metrics
from hackagoal.goals.models import GoalConfig, GoalMode


@pytest.mark.parametrize("mode", [GoalMode.DAILY, GoalMode.TOTAL])
def test_render_writes_png(tmp_path, today, mode):
    config = GoalConfig(mode=mode, daily_goal_hours=1.0, target_total_hours=225.0)
    series = make_series(days_before(today, 5400, 0, 3600, 36000, 600))
    metrics = compute_metrics(series, 50 * 3600, config, today)

    renderer = DashboardRenderer(str(tmp_path / "images"))
    filename, file_path = renderer.render(metrics, config, "U123")

    assert Path(file_path).exists()
    assert filename.startswith("dashboard-")
    with Image.open(file_path) as image:
        assert image.size == (800, 480)


def test_card_values_follow_mode(tmp_path, today):
    renderer = DashboardRenderer(str(tmp_path))
    daily = GoalConfig(mode=GoalMode.DAILY, daily_goal_hours=2.0)
    total = GoalConfig(mode=GoalMode.TOTAL, target_total_hours=225.0)

    daily_titles = [c[0] for c in renderer._card_values(compute_metrics([], 0, daily, today), daily)]
    total_titles = [c[0] for c in renderer._card_values(compute_metrics([], 0, total, today), total)]

    assert "PROJECTION" in daily_titles
    assert "DAILY TARGET" in total_titles
    assert len(daily_titles) == len(total_titles) == 7


def test_repeated_renders_reuse_one_file_per_user(tmp_path, today):
    config = GoalConfig()
    metrics = compute_metrics([], 0, config, today)
    renderer = DashboardRenderer(str(tmp_path))

    _, first = renderer.render(metrics, config, "U123")
    _, second = renderer.render(metrics, config, "U123")
    _, other = renderer.render(metrics, config, "U1/../x")

    assert first == second
    assert other != first
    assert Path(other).parent == tmp_path
    assert sorted(p.name for p in tmp_path.iterdir()) == [
        "dashboard-U123.png",
        "dashboard-U1____x.png",
    ]
