"""
report.py - Building Summary Report

Tabular per-building summary for the dashboard table and CSV export.

CSV columns (Korean, matching the dashboard labels):
- 건물 ID, 건물명, 주소
- 균열 수, 최대 균열 폭 (mm), 평균 균열 폭 (mm)   (card-view metrics)
- 위험도: 심각/주의/관찰
- 마지막 점검일, 균열 유형
"""

from pathlib import Path
from typing import Callable, Sequence, Union
import logging

import pandas as pd

from .metrics import (
    building_severity,
    extract_building_metrics,
    extract_cracks,
    get_severity_label
)
from .models import Building

logger = logging.getLogger(__name__)

# BOM so spreadsheet tools detect the Korean headers
CSV_ENCODING = 'utf-8-sig'

RANKING_COLUMNS = ['순위', '건물', '값']

SUMMARY_COLUMNS = [
    '건물 ID',
    '건물명',
    '주소',
    '균열 수',
    '최대 균열 폭 (mm)',
    '평균 균열 폭 (mm)',
    '위험도',
    '마지막 점검일',
    '균열 유형',
]


def build_summary_dataframe(buildings: Sequence[Building], **thresholds) -> pd.DataFrame:
    """
    One row per building, sorted by maximum width (highest first).

    Args:
        buildings: Buildings to summarise (typically the filtered list)
        **thresholds: Optional classify_severity() threshold overrides

    Returns:
        pandas.DataFrame with SUMMARY_COLUMNS
    """
    rows = []
    for building in buildings:
        metrics = extract_building_metrics(building)
        rows.append({
            '건물 ID': building.id,
            '건물명': building.name or '',
            '주소': building.address or '',
            '균열 수': metrics.crack_count,
            '최대 균열 폭 (mm)': round(metrics.max_width, 2),
            '평균 균열 폭 (mm)': metrics.avg_width,
            '위험도': get_severity_label(building_severity(building, **thresholds)),
            '마지막 점검일': metrics.last_checked or '',
            '균열 유형': ', '.join(metrics.crack_types),
        })

    df = pd.DataFrame(rows, columns=SUMMARY_COLUMNS)
    if not df.empty:
        df = df.sort_values('최대 균열 폭 (mm)', ascending=False, kind='stable').reset_index(drop=True)
    return df


def build_crack_dataframe(building: Building) -> pd.DataFrame:
    """Per-crack table of a single building (detail view)."""
    rows = [{
        '위치': crack.waypoint_label or '',
        '균열 유형': crack.crack_type or '',
        '균열 폭 (mm)': crack.width_mm,
        '점검 시각': crack.checked_at,
    } for crack in extract_cracks(building)]
    return pd.DataFrame(rows, columns=['위치', '균열 유형', '균열 폭 (mm)', '점검 시각'])


def summary_to_csv(df: pd.DataFrame) -> bytes:
    """UTF-8 (with BOM) CSV bytes of a summary DataFrame, same encoding as generate_csv_report()."""
    return df.to_csv(index=False).encode(CSV_ENCODING)


def build_ranking_dataframe(entries: Sequence, value_fn: Callable) -> pd.DataFrame:
    """Ranking table (rank, building name, formatted value) for one top-N list."""
    rows = [{
        '순위': rank,
        '건물': entry.name or '-',
        '값': value_fn(entry),
    } for rank, entry in enumerate(entries, start=1)]
    return pd.DataFrame(rows, columns=RANKING_COLUMNS)


def generate_csv_report(
    buildings: Sequence[Building],
    output_path: Union[str, Path],
    **thresholds
) -> Path:
    """
    Write the building summary to a UTF-8 CSV file.

    Args:
        buildings: Buildings to export
        output_path: Path for output CSV file

    Returns:
        Path of the written file
    """
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    df = build_summary_dataframe(buildings, **thresholds)
    df.to_csv(output_path, index=False, encoding=CSV_ENCODING)

    logger.info(f"CSV report saved: {output_path} ({len(df)} buildings)")
    return output_path
