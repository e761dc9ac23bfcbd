"""
대시보드 페이지
===============
주문 이력 KPI(오늘/이번 달/일별/월별/판매몰별) + 메뉴판 현황.
"""
import logging
from datetime import date

import plotly.express as px
import plotly.graph_objects as go
import streamlit as st
from plotly.subplots import make_subplots

from app.api.google_sheets_client import SheetFetchError
from app.config import settings
from app.dashboard_utils import (
    SS_SPLIT_RESULTS,
    fetch_sheet_records,
    get_menu,
    load_menu,
    render_grid,
    render_kpi_row,
)
from app.constants import KPI_MENU_BRAND_TOP_N
from app.services.kpi import (
    COL_DATE,
    COL_MALL,
    COL_MONTH,
    COL_ORDER_COUNT,
    COL_SALES_COUNT,
    available_years,
    build_kpi_rows,
    daily_stats,
    filter_rows,
    mall_daily_stats,
    mall_stats,
    month_stats,
    monthly_stats,
    period_stats,
    today_stats,
)
from app.services.order_splitter import summarize

logger = logging.getLogger(__name__)


def _split_columns(value: str):
    return [c.strip() for c in value.split(",") if c.strip()]


def _count_chart(df, x_col: str, title: str):
    """주문건수(막대) + 판매수량(선) 이중축 차트"""
    fig = make_subplots(specs=[[{"secondary_y": True}]])
    fig.add_trace(
        go.Bar(x=df[x_col], y=df[COL_ORDER_COUNT], name=COL_ORDER_COUNT, marker_color="#4dabf7", opacity=0.7),
        secondary_y=False,
    )
    fig.add_trace(
        go.Scatter(x=df[x_col], y=df[COL_SALES_COUNT], name=COL_SALES_COUNT, line=dict(color="#ff6b6b", width=2)),
        secondary_y=True,
    )
    fig.update_layout(
        title=title,
        height=350,
        margin=dict(t=40, b=10, l=10, r=10),
        legend=dict(orientation="h", y=1.12),
    )
    fig.update_yaxes(title_text=COL_ORDER_COUNT, secondary_y=False)
    fig.update_yaxes(title_text=COL_SALES_COUNT, secondary_y=True)
    st.plotly_chart(fig, use_container_width=True)


def render():
    st.title("📊 대시보드")

    _render_kpi()
    st.divider()
    _render_menu_panel()


def _render_kpi():
    try:
        records = fetch_sheet_records(settings.order_history_gid)
    except SheetFetchError as e:
        logger.error(f"주문 이력 로드 실패: {e}")
        st.error(f"주문 이력을 불러오지 못했습니다: {e.message}")
        return

    rows = build_kpi_rows(
        records,
        _split_columns(settings.kpi_date_columns),
        settings.kpi_quantity_column,
        _split_columns(settings.kpi_mall_columns),
    )
    if not rows:
        st.info("주문 이력이 없습니다.")
        return

    today = date.today()
    _today = today_stats(rows, today)
    _month = month_stats(rows, today)
    render_kpi_row([
        ("오늘 주문", f"{_today.order_count:,}건"),
        ("오늘 판매수량", f"{_today.sales_count:,}개"),
        ("이번 달 주문", f"{_month.order_count:,}건"),
        ("이번 달 판매수량", f"{_month.sales_count:,}개"),
    ])

    # ── 필터 ──
    _f1, _f2, _f3 = st.columns([1, 2, 1])
    years = available_years(rows)
    with _f1:
        _year = st.selectbox("연도", ["전체"] + years, key="kpi_year")
    year = None if _year == "전체" else int(_year)
    year_rows = filter_rows(rows, year=year)

    with _f2:
        _range = st.date_input("일별 기간", value=(), key="kpi_range")
    start_date = end_date = None
    if isinstance(_range, (tuple, list)) and len(_range) == 2:
        start_date, end_date = _range[0].isoformat(), _range[1].isoformat()

    with _f3:
        _months = monthly_stats(year_rows)[COL_MONTH].tolist()
        _month_sel = st.selectbox("월", ["전체"] + _months[::-1], key="kpi_month")
    month = None if _month_sel == "전체" else _month_sel

    filtered = filter_rows(rows, year=year, start_date=start_date, end_date=end_date, month=month)
    _period = period_stats(filtered)
    st.caption(f"선택 기간: 주문 {_period.order_count:,}건 / 판매수량 {_period.sales_count:,}개")

    tab_daily, tab_monthly, tab_mall = st.tabs(["일별", "월별", "판매몰별"])

    with tab_daily:
        daily = daily_stats(filtered)
        if daily.empty:
            st.info("해당 기간 데이터가 없습니다.")
        else:
            _count_chart(daily, COL_DATE, "일별 주문 추이 (최근 30일)")
            st.dataframe(daily, hide_index=True, use_container_width=True)

    with tab_monthly:
        monthly = monthly_stats(filter_rows(rows, year=year))
        if monthly.empty:
            st.info("해당 연도 데이터가 없습니다.")
        else:
            _count_chart(monthly, COL_MONTH, "월별 주문 추이")
            st.dataframe(monthly, hide_index=True, use_container_width=True)

    with tab_mall:
        malls = mall_stats(filtered)
        if malls.empty:
            st.info("판매몰 데이터가 없습니다.")
            return
        chart_col, pie_col = st.columns([3, 2])
        with chart_col:
            st.bar_chart(malls.set_index(COL_MALL)[[COL_SALES_COUNT]])
        with pie_col:
            _pie = malls[malls[COL_SALES_COUNT] > 0]
            if not _pie.empty:
                fig = px.pie(_pie, values=COL_SALES_COUNT, names=COL_MALL, title="판매몰 비중",
                             hole=0.4, color_discrete_sequence=px.colors.qualitative.Set2)
                fig.update_layout(margin=dict(t=40, b=10, l=10, r=10), height=300, showlegend=True)
                st.plotly_chart(fig, use_container_width=True)
        render_grid(malls, key="kpi_mall_grid", height=300)

        _mall = st.selectbox("판매몰 상세", malls[COL_MALL].tolist(), key="kpi_mall_drill")
        if _mall:
            drill = mall_daily_stats(filtered, _mall)
            if not drill.empty:
                _count_chart(drill, COL_DATE, f"{_mall} 일별 추이")


def _render_menu_panel():
    st.subheader("📋 메뉴판")

    _m1, _m2 = st.columns([3, 1])
    with _m2:
        _btn_refresh = st.button("메뉴판 새로고침", key="btn_menu_refresh", use_container_width=True)

    menu = get_menu()
    if _btn_refresh or menu is None:
        try:
            menu = load_menu(force=_btn_refresh)
            if _btn_refresh:
                st.success(f"메뉴판 새로고침 완료: {len(menu):,}개 옵션")
        except SheetFetchError as e:
            logger.error(f"메뉴판 로드 실패: {e}")
            st.error(f"메뉴판을 불러오지 못했습니다: {e.message}")
            return

    split_results = st.session_state.get(SS_SPLIT_RESULTS) or {}
    split_orders, split_qty = summarize(split_results)

    with _m1:
        render_kpi_row([
            ("등록 옵션", f"{len(menu):,}개"),
            ("브랜드", f"{len(menu.brand_counts()):,}개"),
            ("분리된 주문", f"{split_orders:,}건"),
            ("분리된 수량", f"{split_qty:,}개"),
        ])

    top_brands = menu.brand_counts()[:KPI_MENU_BRAND_TOP_N]
    if top_brands:
        cols = st.columns(len(top_brands))
        for col, (brand, count) in zip(cols, top_brands):
            col.metric(brand, f"{count:,}개")
