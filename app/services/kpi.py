"""
주문 KPI 집계 모듈
==================
주문 이력 시트 → 오늘/이번 달/일별/월별/판매몰별 통계

사용법:
    rows = build_kpi_rows(records, ["발주일"], "수량", ["판매몰"])
    rows = filter_rows(rows, year=2025, month="2025-01")
    daily = daily_stats(rows)   # DataFrame[날짜, 주문건수, 판매수량]
"""
import re
import logging
from datetime import date
from typing import Any, Dict, List, Optional, Sequence

import pandas as pd

from app.constants import KPI_DAILY_WINDOW_DAYS, UNCLASSIFIED_BRAND
from app.models.kpi import KPIStats, OrderKPIRow
from app.utils.excel import parse_int

logger = logging.getLogger(__name__)

COMPACT_DATE_PATTERN = re.compile(r"^(\d{4})(\d{2})(\d{2})(?:\D|$)")
SEPARATED_DATE_PATTERN = re.compile(r"^(\d{4})\s*[-./년]\s*(\d{1,2})\s*[-./월]\s*(\d{1,2})")

COL_DATE = "날짜"
COL_MONTH = "월"
COL_MALL = "판매몰"
COL_ORDER_COUNT = "주문건수"
COL_SALES_COUNT = "판매수량"


def normalize_date_string(value: Any) -> str:
    """
    날짜 문자열 정규화

    Args:
        value: "20250105", "2025.1.5", "2025-01-05 13:00", "2025년 1월 5일" 등

    Returns:
        "YYYY-MM-DD" 또는 "" (해석 불가)
    """
    if value is None:
        return ""
    text = str(value).strip()
    if not text:
        return ""

    match = COMPACT_DATE_PATTERN.match(text) or SEPARATED_DATE_PATTERN.match(text)
    if not match:
        return ""

    year, month, day = (int(g) for g in match.groups())
    if not (1 <= month <= 12 and 1 <= day <= 31):
        return ""
    return f"{year:04d}-{month:02d}-{day:02d}"


def _first_present(record: Dict[str, Any], columns: Sequence[str]) -> str:
    for col in columns:
        value = record.get(col)
        if value is not None and str(value).strip():
            return str(value).strip()
    return ""


def build_kpi_rows(
    records: Sequence[Dict[str, Any]],
    date_columns: Sequence[str],
    quantity_column: str,
    mall_columns: Sequence[str],
) -> List[OrderKPIRow]:
    """
    주문 이력 레코드(헤더 → 값) → OrderKPIRow

    수량은 정수 파싱 실패 시 0.
    """
    return [
        OrderKPIRow(
            order_date=_first_present(r, date_columns),
            sales_count=parse_int(r.get(quantity_column), 0),
            sales_mall=_first_present(r, mall_columns),
        )
        for r in records
    ]


def available_years(rows: Sequence[OrderKPIRow]) -> List[int]:
    """데이터에 있는 연도 (최신순)"""
    years = {int(d[:4]) for d in (normalize_date_string(r.order_date) for r in rows) if d}
    return sorted(years, reverse=True)


def filter_rows(
    rows: Sequence[OrderKPIRow],
    year: Optional[int] = None,
    start_date: Optional[str] = None,
    end_date: Optional[str] = None,
    month: Optional[str] = None,
) -> List[OrderKPIRow]:
    """
    연도 → 일별 범위 → 월 순서로 필터

    Args:
        year: 연도 (None=전체)
        start_date, end_date: "YYYY-MM-DD" (둘 다 있을 때만 적용, 양끝 포함)
        month: "YYYY-MM"
    """
    result = list(rows)
    if year:
        result = [r for r in result if normalize_date_string(r.order_date).startswith(str(year))]
    if start_date and end_date:
        result = [
            r for r in result
            if start_date <= normalize_date_string(r.order_date) <= end_date
        ]
    if month:
        result = [r for r in result if normalize_date_string(r.order_date).startswith(month)]
    return result


def _stats(rows: Sequence[OrderKPIRow]) -> KPIStats:
    return KPIStats(order_count=len(rows), sales_count=sum(r.sales_count for r in rows))


def period_stats(rows: Sequence[OrderKPIRow]) -> KPIStats:
    return _stats(rows)


def today_stats(rows: Sequence[OrderKPIRow], today: Optional[date] = None) -> KPIStats:
    target = (today or date.today()).isoformat()
    return _stats([r for r in rows if normalize_date_string(r.order_date) == target])


def month_stats(rows: Sequence[OrderKPIRow], today: Optional[date] = None) -> KPIStats:
    target = (today or date.today()).strftime("%Y-%m")
    return _stats([r for r in rows if normalize_date_string(r.order_date).startswith(target)])


def _to_frame(rows: Sequence[OrderKPIRow]) -> pd.DataFrame:
    df = pd.DataFrame(
        {
            COL_DATE: [normalize_date_string(r.order_date) for r in rows],
            COL_MALL: [r.sales_mall or UNCLASSIFIED_BRAND for r in rows],
            COL_SALES_COUNT: [r.sales_count for r in rows],
        },
        columns=[COL_DATE, COL_MALL, COL_SALES_COUNT],
    )
    df[COL_MONTH] = df[COL_DATE].astype(str).str[:7]
    return df


def _aggregate(df: pd.DataFrame, by: str) -> pd.DataFrame:
    if df.empty:
        return pd.DataFrame(columns=[by, COL_ORDER_COUNT, COL_SALES_COUNT])
    return (
        df.groupby(by, sort=False)
        .agg(**{COL_ORDER_COUNT: (COL_SALES_COUNT, "size"), COL_SALES_COUNT: (COL_SALES_COUNT, "sum")})
        .reset_index()
    )


def daily_stats(rows: Sequence[OrderKPIRow], window: int = KPI_DAILY_WINDOW_DAYS) -> pd.DataFrame:
    """최근 window일 (날짜 오름차순)"""
    df = _to_frame(rows)
    df = df[df[COL_DATE] != ""]
    stats = _aggregate(df, COL_DATE)
    stats = stats.sort_values(COL_DATE, ascending=False).head(window)
    return stats.sort_values(COL_DATE).reset_index(drop=True)


def monthly_stats(rows: Sequence[OrderKPIRow]) -> pd.DataFrame:
    """월별 (오름차순)"""
    df = _to_frame(rows)
    df = df[df[COL_DATE] != ""]
    return _aggregate(df, COL_MONTH).sort_values(COL_MONTH).reset_index(drop=True)


def mall_stats(rows: Sequence[OrderKPIRow]) -> pd.DataFrame:
    """판매몰별 (판매수량 많은 순, 판매몰 없으면 "미분류")"""
    stats = _aggregate(_to_frame(rows), COL_MALL)
    return stats.sort_values(COL_SALES_COUNT, ascending=False, kind="stable").reset_index(drop=True)


def mall_daily_stats(rows: Sequence[OrderKPIRow], mall: str) -> pd.DataFrame:
    """특정 판매몰의 일별 추이 (드릴다운)"""
    mall_rows = [r for r in rows if (r.sales_mall or UNCLASSIFIED_BRAND) == mall]
    df = _to_frame(mall_rows)
    df = df[df[COL_DATE] != ""]
    return _aggregate(df, COL_DATE).sort_values(COL_DATE).reset_index(drop=True)
