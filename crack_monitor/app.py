"""
app.py - Building Crack Monitoring Dashboard

Streamlit web application over the building inspection API.

Features:
- Summary cards (building count, crack count)
- Top-3 rankings by crack count, maximum width and average width
- Free-text search and severity filter buttons
- Building card grid with crack types, thumbnail and metrics
- Per-building detail view (waypoint crack table + width chart)
- CSV export of the filtered building list

Usage:
    streamlit run crack_monitor/app.py
"""

import html
import streamlit as st
from pathlib import Path
from datetime import datetime

# Page config must be first Streamlit command
st.set_page_config(
    page_title="건물 균열 모니터링",
    page_icon="🏢",
    layout="wide",
    initial_sidebar_state="collapsed"
)

# Import project modules
import sys
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from crack_monitor.api_client import BuildingApiClient
from crack_monitor.config_loader import load_config, get_default_config
from crack_monitor.exceptions import ConfigurationError
from crack_monitor.logger import setup_logging, setup_logging_from_config, get_logger
from crack_monitor.metrics import (
    SEVERITY_FILTER_ORDER,
    building_severity,
    extract_building_metrics,
    get_severity_color,
    get_severity_label,
    thresholds_from_config
)
from crack_monitor.models import parse_timestamp
from crack_monitor.report import (
    build_crack_dataframe,
    build_ranking_dataframe,
    build_summary_dataframe,
    summary_to_csv
)
from crack_monitor.store import DashboardStore, LoadStatus

# Initialize logging system
try:
    config = load_config()
    setup_logging_from_config(config)
except Exception as e:
    # Fallback if config loading fails
    config = get_default_config()
    setup_logging()
    print(f"Warning: Failed to load config, using defaults: {e}")

logger = get_logger(__name__)


# =============================================================================
# CUSTOM CSS STYLING
# =============================================================================
def apply_custom_css():
    st.markdown("""
    <style>
    .main-header {
        font-size: 2.2rem;
        font-weight: 800;
        padding: 0.5rem 0 1rem 0;
    }

    .crack-tag {
        display: inline-block;
        background: rgba(233, 69, 96, 0.15);
        color: #e94560;
        border-radius: 12px;
        padding: 2px 10px;
        margin: 2px 4px 2px 0;
        font-size: 0.85rem;
    }

    .image-placeholder {
        background: rgba(128, 128, 128, 0.15);
        border-radius: 10px;
        height: 160px;
        display: flex;
        align-items: center;
        justify-content: center;
        color: #888;
    }

    .severity-badge {
        border-radius: 8px;
        padding: 2px 8px;
        color: white;
        font-weight: 600;
        font-size: 0.8rem;
    }

    #MainMenu {visibility: hidden;}
    footer {visibility: hidden;}
    </style>
    """, unsafe_allow_html=True)


# =============================================================================
# SESSION STATE INITIALIZATION
# =============================================================================
def init_session_state():
    """Create the dashboard store once per browser session."""
    if 'store' not in st.session_state:
        store = DashboardStore(
            top_n=int(config['ranking']['top_n']),
            thresholds=thresholds_from_config(config)
        )
        store.subscribe(
            lambda state: logger.debug(
                f"Dashboard state: {state.status.value}, term={state.search_term!r}, "
                f"filters={sorted(level.value for level in state.active_filters)}"
            )
        )
        st.session_state.store = store
    if 'selected_building_id' not in st.session_state:
        st.session_state.selected_building_id = None


# =============================================================================
# HELPER FUNCTIONS
# =============================================================================
def format_date(timestamp) -> str:
    """Korean short date (e.g. '2025. 5. 1.'), or '-' if missing."""
    parsed = parse_timestamp(timestamp)
    if parsed is None:
        return "-"
    return f"{parsed.year}. {parsed.month}. {parsed.day}."


def load_buildings(store: DashboardStore) -> None:
    """Run the single initial fetch if it has not happened yet."""
    if store.state.status is not LoadStatus.LOADING:
        return
    try:
        client = BuildingApiClient.from_config(config)
    except ConfigurationError as e:
        logger.error(f"Invalid API configuration: {e}")
        st.error(f"설정 오류: {e}")
        st.stop()
    with st.spinner("건물 데이터를 불러오는 중..."):
        store.load(client)


def select_building(building_id) -> None:
    st.session_state.selected_building_id = building_id


def severity_badge(level) -> str:
    return (
        f'<span class="severity-badge" style="background: {get_severity_color(level)};">'
        f'{get_severity_label(level)}</span>'
    )


# =============================================================================
# UI COMPONENTS
# =============================================================================
def render_header():
    st.markdown(f'<div class="main-header">🏢 {config["ui"]["page_title"]}</div>', unsafe_allow_html=True)


def render_ranking_table(title: str, entries, value_fn):
    st.markdown(f"**{title}**")
    if not entries:
        st.caption("데이터 없음")
        return
    st.dataframe(build_ranking_dataframe(entries, value_fn), width='stretch', hide_index=True)


def render_summary(state):
    """Render summary cards and the three rankings."""
    stats = state.crack_stats

    col1, col2, col3, col4, col5 = st.columns(5)
    with col1:
        st.metric("총 건물 수", f"{len(state.buildings)}")
    with col2:
        st.metric("발견된 균열 수", f"{stats.total_cracks}")
    with col3:
        render_ranking_table("건물별 균열 수 순위", stats.top_by_count,
                             lambda e: f"{e.crack_count}건")
    with col4:
        render_ranking_table("건물별 최대 균열 폭 순위", stats.top_by_max_width,
                             lambda e: f"{e.max_width:.1f} mm")
    with col5:
        render_ranking_table("평균 균열 폭 순위", stats.top_by_avg_width,
                             lambda e: f"{e.avg_width:.1f} mm")


def render_controls(store: DashboardStore):
    """Render the search box and severity filter buttons."""
    col_search, col_filters = st.columns([3, 2])

    with col_search:
        term = st.text_input(
            "검색",
            key="search_input",
            placeholder="🔍 검색어를 입력하세요",
            label_visibility="collapsed"
        )
        store.set_search_term(term)

    with col_filters:
        button_cols = st.columns(len(SEVERITY_FILTER_ORDER))
        for col, level in zip(button_cols, SEVERITY_FILTER_ORDER):
            with col:
                st.button(
                    get_severity_label(level),
                    key=f"filter_{level.value}",
                    type="primary" if level in store.state.active_filters else "secondary",
                    on_click=store.toggle_filter,
                    args=(level,),
                    width='stretch'
                )


def render_building_card(building, thresholds: dict, index: int):
    """Render one building card."""
    metrics = extract_building_metrics(building)
    severity = building_severity(building, **thresholds)

    with st.container(border=True):
        st.markdown(f"### {html.escape(building.name or '-')} {severity_badge(severity)}", unsafe_allow_html=True)
        st.caption(building.address or " ")

        if metrics.crack_types:
            tags = "".join(f'<span class="crack-tag">{html.escape(t)}</span>' for t in metrics.crack_types)
        else:
            tags = '<span class="crack-tag">크랙 없음</span>'
        st.markdown(tags, unsafe_allow_html=True)

        if building.thumbnail:
            st.image(building.thumbnail, caption=f"{building.name} 균열 확장 이미지", width='stretch')
        else:
            st.markdown('<div class="image-placeholder">[균열 확장 이미지]</div>', unsafe_allow_html=True)

        st.markdown(
            f"균열 수: **{metrics.crack_count}**  \n"
            f"최대 균열 폭: **{metrics.max_width:g} mm**  \n"
            f"평균 균열 폭: **{metrics.avg_width:.2f} mm**  \n"
            f"마지막 점검일: **{format_date(metrics.last_checked)}**"
        )
        st.button(
            "대시보드 바로가기",
            key=f"open_{index}_{building.id}",
            on_click=select_building,
            args=(building.id,),
            width='stretch'
        )


def render_building_grid(buildings, thresholds: dict):
    if not buildings:
        st.info("검색 결과가 없습니다.")
        return

    per_row = int(config['ui']['columns'])
    for start in range(0, len(buildings), per_row):
        cols = st.columns(per_row)
        for offset, (col, building) in enumerate(zip(cols, buildings[start:start + per_row])):
            with col:
                render_building_card(building, thresholds, start + offset)


def render_export(buildings, thresholds: dict):
    df = build_summary_dataframe(buildings, **thresholds)
    with st.expander("📊 건물 요약 표"):
        st.dataframe(df, width='stretch', hide_index=True)
        st.download_button(
            label="📥 요약 다운로드 (CSV)",
            data=summary_to_csv(df),
            file_name=f"building_cracks_{datetime.now().strftime('%Y%m%d_%H%M%S')}.csv",
            mime="text/csv",
            width='stretch'
        )


def render_building_detail(building, thresholds: dict):
    """Render the per-building dashboard."""
    import plotly.express as px

    st.button("← 목록으로", on_click=select_building, args=(None,))

    metrics = extract_building_metrics(building)
    severity = building_severity(building, **thresholds)

    st.markdown(f"## {html.escape(building.name or '-')} {severity_badge(severity)}", unsafe_allow_html=True)
    st.caption(building.address or "")

    col1, col2, col3, col4 = st.columns(4)
    with col1:
        st.metric("균열 수", metrics.crack_count)
    with col2:
        st.metric("최대 균열 폭", f"{metrics.max_width:g} mm")
    with col3:
        st.metric("평균 균열 폭", f"{metrics.avg_width:.2f} mm")
    with col4:
        st.metric("마지막 점검일", format_date(metrics.last_checked))

    df = build_crack_dataframe(building)
    if df.empty:
        st.info("등록된 균열이 없습니다.")
        return

    chart_df = df.dropna(subset=['균열 폭 (mm)', '점검 시각'])
    if not chart_df.empty:
        fig = px.scatter(
            chart_df,
            x='점검 시각',
            y='균열 폭 (mm)',
            color='위치',
            symbol='균열 유형'
        )
        fig.add_hline(y=thresholds.get('severe_threshold', 0.3), line_dash="dash", line_color="#ff4444")
        fig.add_hline(y=thresholds.get('caution_threshold', 0.2), line_dash="dot", line_color="#ffaa00")
        st.plotly_chart(fig, width='stretch')

    for label, group in df.groupby('위치', sort=False):
        with st.expander(f"📍 {label or '-'} ({len(group)}건)"):
            st.dataframe(group.drop(columns=['위치']), width='stretch', hide_index=True)


# =============================================================================
# MAIN APPLICATION
# =============================================================================
def main():
    """Main application entry point."""
    apply_custom_css()
    init_session_state()

    store: DashboardStore = st.session_state.store
    load_buildings(store)
    state = store.state

    if state.status is LoadStatus.ERROR:
        st.error(f"오류: {state.error}")
        return
    if state.status is LoadStatus.LOADING:
        st.info("건물 데이터를 불러오는 중...")
        return

    thresholds = state.thresholds

    selected_id = st.session_state.selected_building_id
    if selected_id is not None:
        building = next((b for b in state.buildings if b.id == selected_id), None)
        if building is not None:
            render_building_detail(building, thresholds)
            return
        logger.warning(f"Selected building {selected_id!r} not found; returning to list")
        st.session_state.selected_building_id = None

    render_header()
    render_summary(state)
    st.markdown("---")

    render_controls(store)
    filtered = store.state.filtered_buildings
    render_building_grid(filtered, thresholds)
    render_export(filtered, thresholds)


if __name__ == "__main__":
    main()
