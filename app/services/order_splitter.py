"""
발주서 브랜드별 분리 모듈
=========================
원본 발주서(일반 발주서123) 행 → 브랜드(공급처)별 주문 목록

사용법:
    results = split_orders(rows, menu)
    for bucket in bucket_view(results):
        print(bucket.brand, bucket.order_count, bucket.total_quantity)
"""
import re
import logging
from dataclasses import dataclass
from datetime import date
from typing import Any, Dict, List, Optional, Sequence, Tuple

from app.constants import (
    BRAND_SHEET_FILENAME,
    DEFAULT_QUANTITY,
    DISPLAY_OPTION_MAX_LENGTH,
    SOURCE_COL_ADDRESS,
    SOURCE_COL_FIRST,
    SOURCE_COL_OPTION_PRIMARY,
    SOURCE_COL_OPTION_SECONDARY,
    SOURCE_COL_PHONE,
    SOURCE_COL_PHONE_FALLBACKS,
    SOURCE_COL_QUANTITY,
    SOURCE_COL_RECIPIENT_NAME,
    SOURCE_RAW_END,
    SOURCE_RAW_START,
    UNCLASSIFIED_BRAND,
)
from app.models.menu import Menu
from app.models.order import BrandBucket, ClassifiedOrder, OrderRecord
from app.services.brand_classifier import resolve_entry
from app.utils.excel import cell_text, cell_value, is_blank, parse_int

logger = logging.getLogger(__name__)

ORDER_DATE_PATTERN = re.compile(r"(\d{8})")


@dataclass(frozen=True)
class ColumnLayout:
    """원본 발주서 컬럼 위치 (0부터, 시트 양식이 바뀌면 여기만 조정)"""
    first: int = SOURCE_COL_FIRST
    option_primary: int = SOURCE_COL_OPTION_PRIMARY
    option_secondary: int = SOURCE_COL_OPTION_SECONDARY
    quantity: int = SOURCE_COL_QUANTITY
    recipient_name: int = SOURCE_COL_RECIPIENT_NAME
    phone: int = SOURCE_COL_PHONE
    phone_fallbacks: Tuple[int, ...] = SOURCE_COL_PHONE_FALLBACKS
    address: int = SOURCE_COL_ADDRESS
    raw_start: int = SOURCE_RAW_START
    raw_end: int = SOURCE_RAW_END


DEFAULT_LAYOUT = ColumnLayout()


def parse_quantity(value: Any) -> int:
    """수량 파싱: 실패/누락/1 미만은 1"""
    qty = parse_int(value, DEFAULT_QUANTITY)
    return qty if qty >= 1 else DEFAULT_QUANTITY


def _backfill_phone(row: Sequence[Any], layout: ColumnLayout) -> str:
    """수취인 전화번호가 비었으면 대체 컬럼 순서대로 사용"""
    phone = cell_value(row, layout.phone)
    if not is_blank(phone):
        return cell_text(row, layout.phone)
    for idx in layout.phone_fallbacks:
        if not is_blank(cell_value(row, idx)):
            return cell_text(row, idx).strip()
    return ""


def to_order_record(row: Sequence[Any], layout: ColumnLayout = DEFAULT_LAYOUT) -> OrderRecord:
    """
    원본 행 → OrderRecord (컬럼 매핑)

    연락처 보정은 raw_columns에도 반영한다.
    """
    raw = [cell_value(row, idx) for idx in range(layout.raw_start, layout.raw_end)]
    phone = _backfill_phone(row, layout)

    phone_offset = layout.phone - layout.raw_start
    if 0 <= phone_offset < len(raw) and is_blank(raw[phone_offset]) and phone:
        raw[phone_offset] = phone

    return OrderRecord(
        option_primary=cell_text(row, layout.option_primary),
        option_secondary=cell_text(row, layout.option_secondary),
        quantity=parse_quantity(cell_value(row, layout.quantity)),
        address=cell_text(row, layout.address).strip(),
        recipient_name=cell_text(row, layout.recipient_name).strip(),
        recipient_phone=phone,
        raw_columns=tuple(raw),
    )


def classify_record(record: OrderRecord, menu: Menu) -> ClassifiedOrder:
    """OrderRecord + 메뉴판 → ClassifiedOrder (택배비는 그룹핑 전 단가)"""
    entry = resolve_entry(record.option_primary, record.option_secondary, menu)
    if entry is None or not entry.brand:
        brand, supply_price, shipping_fee = UNCLASSIFIED_BRAND, 0, 0
    else:
        brand, supply_price, shipping_fee = entry.brand, entry.supply_price, entry.shipping_fee

    return ClassifiedOrder(
        record=record,
        brand=brand,
        unit_supply_price=supply_price,
        unit_shipping_fee=shipping_fee,
        shipping_fee_applied=shipping_fee,
        display_option=record.option_secondary[:DISPLAY_OPTION_MAX_LENGTH],
    )


def split_orders(
    rows: Sequence[Sequence[Any]],
    menu: Menu,
    layout: ColumnLayout = DEFAULT_LAYOUT,
) -> Dict[str, List[ClassifiedOrder]]:
    """
    원본 발주서 → 브랜드별 주문 목록

    Args:
        rows: 헤더 포함 원본 행
        menu: 메뉴판
        layout: 컬럼 위치

    Returns:
        {브랜드: [ClassifiedOrder, ...]} (브랜드 순서는 첫 등장 순)
    """
    results: Dict[str, List[ClassifiedOrder]] = {}
    skipped = 0

    for row in rows[1:]:
        if is_blank(cell_value(row, layout.first)):
            skipped += 1
            continue
        order = classify_record(to_order_record(row, layout), menu)
        results.setdefault(order.brand, []).append(order)

    total = sum(len(v) for v in results.values())
    unclassified = len(results.get(UNCLASSIFIED_BRAND, []))
    logger.info(
        f"브랜드별 분리 완료: {total}건 → {len(results)}개 브랜드 "
        f"(미분류 {unclassified}건, 빈 행 {skipped}건)"
    )
    return results


def bucket_view(results: Dict[str, List[ClassifiedOrder]]) -> List[BrandBucket]:
    """화면 표시용, 주문 건수 많은 순"""
    buckets = [BrandBucket(brand=b, orders=list(o)) for b, o in results.items()]
    return sorted(buckets, key=lambda b: b.order_count, reverse=True)


def summarize(results: Dict[str, List[ClassifiedOrder]]) -> Tuple[int, int]:
    """(전체 주문 건수, 전체 수량)"""
    total_orders = sum(len(orders) for orders in results.values())
    total_qty = sum(o.quantity for orders in results.values() for o in orders)
    return total_orders, total_qty


def brand_sheet_rows(orders: Sequence[ClassifiedOrder]) -> List[List[Any]]:
    """브랜드별 발주서 데이터 행 (순번 + 원본 컬럼)"""
    return [[idx, *order.record.raw_columns] for idx, order in enumerate(orders, start=1)]


def brand_sheet_filename(order_date: str, brand: str) -> str:
    """브랜드별 발주서 파일명 (브랜드명의 "/"는 "_"로)"""
    return BRAND_SHEET_FILENAME.format(date=order_date, brand=brand.replace("/", "_"))


def extract_order_date(filename: str, today: Optional[date] = None) -> str:
    """파일명에서 8자리 날짜 추출 (없으면 오늘 YYYYMMDD)"""
    match = ORDER_DATE_PATTERN.search(filename or "")
    if match:
        return match.group(1)
    return (today or date.today()).strftime("%Y%m%d")
