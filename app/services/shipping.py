"""
묶음배송 택배비 모듈
====================
같은 (주소, 브랜드)로 가는 주문은 한 박스로 나가므로 택배비를 한 번만 청구한다.

정책:
    FIRST_SEEN   : 그룹의 첫 주문이 자기 택배비를 부담 (개별주문 추가/합계)
    MAX_IN_GROUP : 그룹 내 최대 택배비를 첫 주문에 부과 (기존 발주서 합치기)

사용법:
    billed = apply_grouped_shipping(orders)
    total = grand_total(billed)
"""
from dataclasses import replace
from enum import Enum
from typing import Dict, List, Sequence, Set, Tuple

from app.models.order import ClassifiedOrder


class ShippingPolicy(str, Enum):
    """그룹 대표 택배비 결정 방식"""
    FIRST_SEEN = "first_seen"
    MAX_IN_GROUP = "max_in_group"


def _group_max_fees(orders: Sequence[ClassifiedOrder]) -> Dict[Tuple[str, str], int]:
    maxima: Dict[Tuple[str, str], int] = {}
    for order in orders:
        key = order.group_key
        maxima[key] = max(maxima.get(key, order.unit_shipping_fee), order.unit_shipping_fee)
    return maxima


def apply_grouped_shipping(
    orders: Sequence[ClassifiedOrder],
    policy: ShippingPolicy = ShippingPolicy.FIRST_SEEN,
) -> List[ClassifiedOrder]:
    """
    (주소, 브랜드) 그룹별로 택배비 1회 부과

    주소는 정규화하지 않고 문자열 그대로 비교한다.

    Args:
        orders: 순서가 의미 있는 주문 목록
        policy: 그룹 대표 택배비 결정 방식

    Returns:
        shipping_fee_applied가 채워진 새 ClassifiedOrder 목록 (입력 순서 유지)
    """
    maxima = _group_max_fees(orders) if policy == ShippingPolicy.MAX_IN_GROUP else {}
    billed: Set[Tuple[str, str]] = set()
    result: List[ClassifiedOrder] = []

    for order in orders:
        key = order.group_key
        if key in billed:
            fee = 0
        else:
            billed.add(key)
            fee = maxima[key] if maxima else order.unit_shipping_fee
        result.append(replace(order, shipping_fee_applied=fee))

    return result


def order_total(order: ClassifiedOrder) -> int:
    """공급가 × 수량 + 적용 택배비"""
    return order.total_amount


def grand_total(orders: Sequence[ClassifiedOrder]) -> int:
    return sum(order_total(o) for o in orders)


def total_shipping(orders: Sequence[ClassifiedOrder]) -> int:
    return sum(o.shipping_fee_applied for o in orders)
