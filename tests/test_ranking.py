import pytest

from crack_monitor.models import parse_buildings
from crack_monitor.ranking import compute_crack_stats, rank_by


def _building(building_id, widths):
    return {
        "id": building_id,
        "name": f"B{building_id}",
        "waypoints": [{"label": "W", "cracks": [{"widthMm": w} for w in widths]}],
    }


def test_worked_example():
    buildings = parse_buildings([_building("A", [0.1, 0.35]), {"id": "B", "name": "BB"}])
    stats = compute_crack_stats(buildings)
    assert stats.total_cracks == 2
    assert [e.id for e in stats.top_by_count] == ["A"]
    assert stats.top_by_max_width[0].max_width == 0.35
    assert stats.top_by_avg_width[0].avg_width == pytest.approx(0.225)


def test_null_widths_are_excluded(buildings):
    stats = compute_crack_stats(buildings)
    # Hanbit: 2 widths, Namsan: 1 non-null width, Riverside: none
    assert stats.total_cracks == 3
    namsan = next(e for e in stats.top_by_count if e.id == 3)
    assert namsan.crack_count == 1
    assert namsan.avg_width == 0.25


def test_rankings_are_top_three_descending_without_empty_buildings():
    buildings = parse_buildings([
        _building(1, [0.1]),
        _building(2, [0.2, 0.2, 0.2]),
        {"id": 3, "name": "no cracks", "waypoints": []},
        _building(4, [0.5, 0.1]),
        _building(5, [0.05, 0.05, 0.05, 0.05]),
        _building(6, [None, None]),
    ])
    stats = compute_crack_stats(buildings)

    for ranking, key in ((stats.top_by_count, 'crack_count'),
                         (stats.top_by_max_width, 'max_width'),
                         (stats.top_by_avg_width, 'avg_width')):
        assert len(ranking) <= 3
        values = [getattr(e, key) for e in ranking]
        assert values == sorted(values, reverse=True)
        assert not {3, 6} & {e.id for e in ranking}

    assert [e.id for e in stats.top_by_count] == [5, 2, 4]
    assert [e.id for e in stats.top_by_max_width] == [4, 2, 1]


def test_ties_keep_input_order():
    buildings = parse_buildings([_building(i, [0.2]) for i in range(1, 6)])
    stats = compute_crack_stats(buildings)
    assert [e.id for e in stats.top_by_count] == [1, 2, 3]
    assert [e.id for e in stats.top_by_max_width] == [1, 2, 3]


def test_empty_input():
    stats = compute_crack_stats(())
    assert stats.total_cracks == 0
    assert stats.top_by_count == ()


def test_top_n_is_configurable():
    buildings = parse_buildings([_building(i, [i / 10]) for i in range(1, 6)])
    assert len(compute_crack_stats(buildings, top_n=5).top_by_max_width) == 5
    assert len(compute_crack_stats(buildings, top_n=1).top_by_max_width) == 1


def test_rank_by_rejects_unknown_key():
    with pytest.raises(ValueError):
        rank_by([], 'name')
