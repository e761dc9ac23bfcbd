"""주문 KPI 모델"""
from dataclasses import dataclass


@dataclass(frozen=True)
class OrderKPIRow:
    """주문 이력 한 행 (KPI 집계 단위)"""
    order_date: str   # 원본 문자열, 집계 시 normalize_date_string 적용
    sales_count: int
    sales_mall: str = ""


@dataclass
class KPIStats:
    """기간 KPI (주문 건수 / 판매 수량)"""
    order_count: int = 0
    sales_count: int = 0
