import codecs

import pandas as pd

from crack_monitor.models import Building
from crack_monitor.ranking import compute_crack_stats
from crack_monitor.report import (
    SUMMARY_COLUMNS,
    build_crack_dataframe,
    build_ranking_dataframe,
    build_summary_dataframe,
    generate_csv_report,
    summary_to_csv
)


def test_summary_rows_sorted_by_max_width(buildings):
    df = build_summary_dataframe(buildings)
    assert list(df.columns) == SUMMARY_COLUMNS
    assert list(df['건물 ID']) == [1, 3, 2]
    assert list(df['위험도']) == ["심각", "주의", "관찰"]
    assert df.loc[2, '균열 수'] == 0
    assert df.loc[0, '균열 유형'] == "hairline, structural"


def test_empty_summary_has_columns():
    df = build_summary_dataframe([])
    assert df.empty
    assert list(df.columns) == SUMMARY_COLUMNS


def test_crack_dataframe(buildings):
    df = build_crack_dataframe(buildings[2])
    assert list(df['위치']) == ["Roof", "Roof"]
    assert pd.isna(df.loc[1, '균열 폭 (mm)'])


def test_csv_export(buildings, tmp_path):
    path = generate_csv_report(buildings, tmp_path / "out" / "summary.csv")
    assert path.exists()

    df = pd.read_csv(path, encoding='utf-8-sig')
    assert list(df.columns) == SUMMARY_COLUMNS
    assert len(df) == 3

    data = summary_to_csv(build_summary_dataframe(buildings))
    assert data == path.read_bytes()
    assert data.startswith(codecs.BOM_UTF8)
    assert data.decode('utf-8-sig').splitlines()[0] == ",".join(SUMMARY_COLUMNS)


def test_ranking_dataframe_keeps_names_intact():
    stats = compute_crack_stats([
        Building.from_dict({"id": 7, "name": "A | B Tower", "waypoints": [{"cracks": [{"widthMm": 0.4}]}]}),
        Building.from_dict({"id": 8, "waypoints": [{"cracks": [{"widthMm": 0.1}]}]}),
    ])
    df = build_ranking_dataframe(stats.top_by_max_width, lambda e: f"{e.max_width:.1f} mm")
    assert list(df['순위']) == [1, 2]
    assert list(df['건물']) == ["A | B Tower", "-"]
    assert list(df['값']) == ["0.4 mm", "0.1 mm"]
