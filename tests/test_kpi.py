"""
kpi.py 테스트
=============
날짜 정규화, 필터, 일별/월별/판매몰별 집계 테스트
"""
import pytest
import sys
from datetime import date
from pathlib import Path

# 프로젝트 루트 추가
sys.path.insert(0, str(Path(__file__).parent.parent))

from app.models.kpi import OrderKPIRow
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
    normalize_date_string,
    period_stats,
    today_stats,
)


class TestNormalizeDate:
    """normalize_date_string 테스트"""

    @pytest.mark.parametrize("value,expected", [
        ("20250105", "2025-01-05"),
        ("2025-01-05", "2025-01-05"),
        ("2025.1.5", "2025-01-05"),
        ("2025/01/05", "2025-01-05"),
        ("2025-01-05 13:45:00", "2025-01-05"),
        ("2025년 1월 5일", "2025-01-05"),
        ("20250105 09:00", "2025-01-05"),
    ])
    def test_valid_formats(self, value, expected):
        assert normalize_date_string(value) == expected

    @pytest.mark.parametrize("value", ["", None, "abc", "20251305", "2025-02-40", "202501051"])
    def test_invalid(self, value):
        """해석 불가 → 빈 문자열"""
        assert normalize_date_string(value) == ""


class TestBuildRows:
    """주문 이력 레코드 → KPI 행"""

    def test_column_fallbacks(self):
        """날짜/판매몰은 후보 컬럼 중 첫 값"""
        records = [
            {"발주일": "", "주문일자": "2025.1.5", "수량": "3", "판매몰": "", "쇼핑몰명(1)": "스마트스토어"},
            {"발주일": "20250106", "수량": "abc"},
        ]
        rows = build_kpi_rows(records, ["발주일", "주문일자"], "수량", ["판매몰", "쇼핑몰명(1)"])
        assert rows[0] == OrderKPIRow("2025.1.5", 3, "스마트스토어")
        assert rows[1] == OrderKPIRow("20250106", 0, "")


class TestAggregation:
    """필터/집계 테스트"""

    def setup_method(self):
        self.rows = [
            OrderKPIRow("20241231", 1, "쿠팡"),
            OrderKPIRow("2025-01-05", 2, "쿠팡"),
            OrderKPIRow("2025.1.5", 3, "스마트스토어"),
            OrderKPIRow("20250110", 1, ""),
            OrderKPIRow("2025-02-01", 5, "스마트스토어"),
            OrderKPIRow("날짜없음", 7, "쿠팡"),
        ]

    def test_available_years(self):
        """최신순"""
        assert available_years(self.rows) == [2025, 2024]

    def test_filter_year(self):
        assert len(filter_rows(self.rows, year=2025)) == 4

    def test_filter_range_inclusive(self):
        """일별 범위는 양끝 포함"""
        rows = filter_rows(self.rows, start_date="2025-01-05", end_date="2025-01-10")
        assert period_stats(rows).order_count == 3
        assert period_stats(rows).sales_count == 6

    def test_filter_month(self):
        rows = filter_rows(self.rows, year=2025, month="2025-02")
        assert [r.sales_count for r in rows] == [5]

    def test_today_and_month_stats(self):
        stats = today_stats(self.rows, today=date(2025, 1, 5))
        assert (stats.order_count, stats.sales_count) == (2, 5)
        stats = month_stats(self.rows, today=date(2025, 1, 20))
        assert (stats.order_count, stats.sales_count) == (3, 6)

    def test_daily_stats(self):
        """날짜 오름차순, 날짜 없는 행 제외"""
        daily = daily_stats(self.rows)
        assert daily[COL_DATE].tolist() == ["2024-12-31", "2025-01-05", "2025-01-10", "2025-02-01"]
        assert daily[COL_ORDER_COUNT].tolist() == [1, 2, 1, 1]
        assert daily[COL_SALES_COUNT].tolist() == [1, 5, 1, 5]

    def test_daily_stats_window(self):
        """최근 window일만"""
        daily = daily_stats(self.rows, window=2)
        assert daily[COL_DATE].tolist() == ["2025-01-10", "2025-02-01"]

    def test_monthly_stats(self):
        monthly = monthly_stats(self.rows)
        assert monthly[COL_MONTH].tolist() == ["2024-12", "2025-01", "2025-02"]
        assert monthly[COL_SALES_COUNT].tolist() == [1, 6, 5]

    def test_mall_stats(self):
        """판매수량 많은 순, 빈 판매몰은 미분류"""
        malls = mall_stats(self.rows)
        assert malls[COL_MALL].tolist() == ["쿠팡", "스마트스토어", "미분류"]
        assert malls[COL_SALES_COUNT].tolist() == [10, 8, 1]
        assert malls[COL_ORDER_COUNT].tolist() == [3, 2, 1]

    def test_mall_daily_stats(self):
        drill = mall_daily_stats(self.rows, "스마트스토어")
        assert drill[COL_DATE].tolist() == ["2025-01-05", "2025-02-01"]

    def test_empty(self):
        """빈 입력도 컬럼이 있는 빈 DataFrame"""
        assert daily_stats([]).empty
        assert monthly_stats([]).empty
        assert list(mall_stats([]).columns) == [COL_MALL, COL_ORDER_COUNT, COL_SALES_COUNT]
        assert available_years([]) == []


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
