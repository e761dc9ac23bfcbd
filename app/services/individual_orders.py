"""
개별주문 모듈
=============
수기로 입력한 주문 → 발주서 양식 행 생성, 기존 발주서와 합치기

택배비는 (주소, 브랜드) 묶음 기준으로 한 번만 부과한다.
    - 발주서 생성/합계: FIRST_SEEN
    - 기존 발주서와 합치기: MAX_IN_GROUP
"""
import logging
from typing import Any, Dict, List, Optional, Sequence, Tuple

from app.constants import (
    INDIVIDUAL_MALL_NAME,
    INDIVIDUAL_MALL_ORDER_PREFIX,
    INDIVIDUAL_ORDER_COLUMNS,
    INDIVIDUAL_ORDER_FILENAME,
    INDIVIDUAL_ORDER_PREFIX,
    MERGED_ORDER_FILENAME,
)
from app.models.menu import Menu, MenuEntry
from app.models.order import ClassifiedOrder, IndividualOrder, OrderRecord
from app.services.brand_classifier import resolve_brand
from app.services.shipping import ShippingPolicy, apply_grouped_shipping

logger = logging.getLogger(__name__)


# ─── 메뉴 선택 헬퍼 ───

def categories(full_menu: Menu) -> List[str]:
    """상품명 목록 (메뉴판 순서, 중복 제거)"""
    seen: Dict[str, None] = {}
    for entry in full_menu.entries():
        if entry.product_name:
            seen.setdefault(entry.product_name, None)
    return list(seen)


def options_for(full_menu: Menu, category: str) -> List[MenuEntry]:
    """상품명에 속한 옵션 항목들"""
    return [e for e in full_menu.entries() if e.product_name == category and e.option_text]


def find_entry(full_menu: Menu, category: str, option: str) -> Optional[MenuEntry]:
    for entry in options_for(full_menu, category):
        if entry.option_text == option:
            return entry
    return None


# ─── 분류/택배비 ───

def to_classified(order: IndividualOrder, menu: Menu) -> ClassifiedOrder:
    """개별주문 → ClassifiedOrder (브랜드는 옵션으로 매칭)"""
    record = OrderRecord(
        option_primary=order.product_name,
        option_secondary=order.option,
        quantity=max(int(order.quantity or 1), 1),
        address=order.address,
        recipient_name=order.recipient_name,
        recipient_phone=order.recipient_phone,
    )
    return ClassifiedOrder(
        record=record,
        brand=resolve_brand(order.product_name, order.option, menu),
        unit_supply_price=order.supply_price,
        unit_shipping_fee=order.shipping_fee,
        shipping_fee_applied=order.shipping_fee,
        display_option=order.option,
    )


def grouped_orders(
    orders: Sequence[IndividualOrder],
    menu: Menu,
    policy: ShippingPolicy = ShippingPolicy.FIRST_SEEN,
) -> List[ClassifiedOrder]:
    return apply_grouped_shipping([to_classified(o, menu) for o in orders], policy)


def order_totals(orders: Sequence[IndividualOrder], menu: Menu) -> Tuple[List[int], int]:
    """
    주문별 결제 금액과 총합

    Returns:
        ([주문별 금액, ...], 총합)
    """
    billed = grouped_orders(orders, menu)
    totals = [o.total_amount for o in billed]
    return totals, sum(totals)


# ─── 발주서 생성 ───

def _order_sheet_row(idx: int, today: str, order: IndividualOrder, shipping_fee: int) -> Dict[str, Any]:
    values = [
        idx,
        today,
        f"{INDIVIDUAL_ORDER_PREFIX}{today}{idx:04d}",
        f"{INDIVIDUAL_MALL_ORDER_PREFIX}{idx:04d}",
        "",
        order.recipient_name,
        order.recipient_phone,
        "",
        order.address,
        "",
        order.product_name,
        order.option,
        order.option,
        order.quantity,
        order.supply_price,
        "",
        "",
        "",
        "",
        shipping_fee,
        order.recipient_name,
        order.recipient_phone,
        "",
        "",
        INDIVIDUAL_MALL_NAME,
        "",
    ]
    return dict(zip(INDIVIDUAL_ORDER_COLUMNS, values))


def generate_order_sheet(
    orders: Sequence[IndividualOrder],
    menu: Menu,
    today: str,
    policy: ShippingPolicy = ShippingPolicy.FIRST_SEEN,
) -> List[Dict[str, Any]]:
    """
    개별주문 → 발주서 양식 행 (딕셔너리, 키 = 컬럼명)

    Args:
        orders: 입력 순서대로의 개별주문
        menu: 브랜드 매칭용 메뉴판
        today: 수집일자 (YYYYMMDD)
        policy: 묶음배송 택배비 정책

    Returns:
        INDIVIDUAL_ORDER_COLUMNS 순서의 딕셔너리 목록
    """
    billed = grouped_orders(orders, menu, policy)
    rows = [
        _order_sheet_row(idx, today, order, classified.shipping_fee_applied)
        for idx, (order, classified) in enumerate(zip(orders, billed), start=1)
    ]
    logger.info(f"개별주문 발주서 생성: {len(rows)}건")
    return rows


def merge_with_existing(
    existing_rows: Sequence[Sequence[Any]],
    orders: Sequence[IndividualOrder],
    menu: Menu,
    today: str,
) -> List[List[Any]]:
    """
    기존 발주서(헤더 포함) 뒤에 개별주문 행 붙이기

    개별주문끼리의 묶음배송은 그룹 내 최대 택배비로 한 번 부과한다.
    기존 발주서 행은 건드리지 않는다.
    """
    if existing_rows:
        header = list(existing_rows[0])
        data_rows = [list(r) for r in existing_rows[1:]]
    else:
        header = list(INDIVIDUAL_ORDER_COLUMNS)
        data_rows = []

    generated = generate_order_sheet(orders, menu, today, ShippingPolicy.MAX_IN_GROUP)
    individual_rows = [list(r.values()) for r in generated]

    logger.info(f"발주서 합치기: 기존 {len(data_rows)}행 + 개별주문 {len(individual_rows)}행")
    return [header, *data_rows, *individual_rows]


def individual_order_filename(today: str) -> str:
    return INDIVIDUAL_ORDER_FILENAME.format(date=today)


def merged_order_filename(today: str) -> str:
    return MERGED_ORDER_FILENAME.format(date=today)
