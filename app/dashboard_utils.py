"""
대시보드 공통 유틸리티
=====================
시트 로드(캐시), 세션 상태, 포맷터, 그리드/KPI 카드 등 모든 페이지에서 공유하는 함수.
"""
from typing import Dict, List, Optional

import streamlit as st
import pandas as pd
from st_aggrid import AgGrid, GridOptionsBuilder

from app.api.google_sheets_client import GoogleSheetsClient
from app.config import settings
from app.models.menu import Menu
from app.services.brand_classifier import build_full_menu, build_menu

XLSX_MIME = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
CSV_MIME = "text/csv"

# 세션 상태 키
SS_MENU = "menu"                    # Menu (브랜드 매칭용)
SS_FULL_MENU = "menu_full"          # Menu (개별주문 상품/옵션 선택용)
SS_SPLIT_RESULTS = "split_results"  # {브랜드: [ClassifiedOrder]}


# ─── 데이터 접근 ───

@st.cache_data(ttl=300)
def fetch_sheet_rows(gid: str) -> List[List[str]]:
    """구글시트 → 행 목록 (5분 캐시). 실패 시 SheetFetchError는 호출부에서 처리"""
    return GoogleSheetsClient.from_settings().fetch_rows(gid)


@st.cache_data(ttl=60)
def fetch_sheet_records(gid: str) -> List[Dict[str, str]]:
    """구글시트 → [{헤더: 값}] (1분 캐시, 주문 이력용)"""
    return GoogleSheetsClient.from_settings().fetch_records(gid)


def load_menu(force: bool = False) -> Menu:
    """
    메뉴판 시트 로드 → 세션에 저장

    브랜드 매칭용(Menu)과 개별주문 선택용(전체 메뉴판)을 같은 행에서 만든다.
    """
    if force:
        fetch_sheet_rows.clear()
    rows = fetch_sheet_rows(settings.menu_sheet_gid)
    menu = build_menu(rows)
    st.session_state[SS_MENU] = menu
    st.session_state[SS_FULL_MENU] = build_full_menu(rows)
    return menu


def get_menu() -> Optional[Menu]:
    """세션에 로드된 브랜드 매칭용 메뉴판 (없으면 None)"""
    return st.session_state.get(SS_MENU)


def get_full_menu() -> Optional[Menu]:
    """세션에 로드된 전체 메뉴판 (상품명/공급가/택배비)"""
    return st.session_state.get(SS_FULL_MENU)


# ─── 포맷터 ───

def fmt_won(val) -> str:
    """₩12,345"""
    return f"₩{int(val or 0):,}"


# ─── AgGrid 래퍼 ───

def render_grid(df: pd.DataFrame, key: str, height: int = 450,
                page_size: int = 20, wide_cols: dict = None):
    """AgGrid 표준 래퍼 (일관된 설정)"""
    gb = GridOptionsBuilder.from_dataframe(df)
    gb.configure_pagination(paginationAutoPageSize=False, paginationPageSize=page_size)
    gb.configure_default_column(resizable=True, sorteable=True, filterable=True)
    if wide_cols:
        for col, width in wide_cols.items():
            gb.configure_column(col, width=width)
    grid_opts = gb.build()
    return AgGrid(df, gridOptions=grid_opts, height=height, theme="streamlit", key=key)


# ─── KPI 카드 ───

def render_kpi_row(metrics: list):
    """
    KPI 카드 행 렌더링.
    metrics: [(label, value, delta?, delta_color?), ...]
    """
    cols = st.columns(len(metrics))
    for col, item in zip(cols, metrics):
        label, value = item[0], item[1]
        delta = item[2] if len(item) > 2 else None
        delta_color = item[3] if len(item) > 3 else "normal"
        col.metric(label, value, delta=delta, delta_color=delta_color)
