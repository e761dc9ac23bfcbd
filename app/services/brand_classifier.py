"""
브랜드 분류 모듈
================
주문 옵션 문자열 → 메뉴판 브랜드(공급처) 매칭

매칭 우선순위:
    1. 옵션(확정) 정확히 일치
    2. 옵션(수집) 정확히 일치
    3. 정규화(앞쪽 [태그] 제거 + 연속 공백 정리) 후 일치
    4. 정규화 키가 6자 이상이면 양방향 부분일치 (메뉴판 순서상 첫 매칭)
    5. 모두 실패하면 "미분류"

사용법:
    menu = build_menu(rows)
    brand = resolve_brand("빨간우산", "[특가] 빨간우산 장우산", menu)
"""
import re
import logging
from typing import Any, Optional, Sequence

from app.constants import (
    FUZZY_MATCH_MIN_KEY_LENGTH,
    MENU_COL_BRAND,
    MENU_COL_NO,
    MENU_COL_OPTION,
    MENU_COL_PRODUCT_NAME,
    MENU_COL_SHIPPING_FEE,
    MENU_COL_SUPPLY_PRICE,
    MISSING_CELL_TEXT,
    UNCLASSIFIED_BRAND,
)
from app.models.menu import Menu, MenuEntry

logger = logging.getLogger(__name__)

# 맨 앞의 [태그] 하나만 제거 (중첩/반복 태그는 그대로)
LEADING_TAG_PATTERN = re.compile(r"^\[.*?\]\s*")
WHITESPACE_PATTERN = re.compile(r"\s+")
MONEY_STRIP_PATTERN = re.compile(r"[₩,]")


def normalize_text(text: Optional[Any]) -> str:
    """
    매칭용 텍스트 정규화

    Args:
        text: 원본 값 (None 허용)

    Returns:
        "[Special] Widget  A" → "Widget A"
    """
    if text is None:
        return ""
    normalized = str(text).strip()
    if not normalized:
        return ""
    normalized = LEADING_TAG_PATTERN.sub("", normalized, count=1)
    return WHITESPACE_PATTERN.sub(" ", normalized)


def _is_substring_match(key: str, option: str) -> bool:
    """양방향 포함 여부 (빈 옵션은 모든 키에 포함된다)"""
    return option in key or key in option


def resolve_entry(option_primary: str, option_secondary: str, menu: Menu) -> Optional[MenuEntry]:
    """
    옵션 문자열에 해당하는 메뉴판 항목 찾기

    Args:
        option_primary: 옵션(수집)
        option_secondary: 옵션(확정), 보통 더 구체적인 SKU 라벨
        menu: 메뉴판

    Returns:
        MenuEntry 또는 None (매칭 실패)
    """
    option_primary = option_primary or ""
    option_secondary = option_secondary or ""

    entry = menu.entry_for(option_secondary)
    if entry is not None:
        return entry
    entry = menu.entry_for(option_primary)
    if entry is not None:
        return entry

    n1 = normalize_text(option_primary)
    n2 = normalize_text(option_secondary)

    for key, entry in menu.items():
        nk = normalize_text(key)
        if not nk:
            continue
        if nk == n1 or nk == n2:
            return entry
        if len(nk) >= FUZZY_MATCH_MIN_KEY_LENGTH:
            if _is_substring_match(nk, n1) or _is_substring_match(nk, n2):
                return entry

    return None


def resolve_brand(option_primary: str, option_secondary: str, menu: Menu) -> str:
    """옵션 문자열 → 브랜드명 (매칭 실패 시 "미분류")"""
    entry = resolve_entry(option_primary, option_secondary, menu)
    if entry is None or not entry.brand:
        return UNCLASSIFIED_BRAND
    return entry.brand


# ─── 메뉴판 구성 ───

def _clean_cell(value: Any) -> str:
    """셀 값 → 문자열 ("nan"/None은 빈 문자열)"""
    if value is None:
        return ""
    text = str(value).strip()
    if text == MISSING_CELL_TEXT:
        return ""
    return text


def parse_money(value: Any) -> int:
    """"₩12,000" → 12000 (실패 시 0)"""
    text = MONEY_STRIP_PATTERN.sub("", _clean_cell(value))
    try:
        return int(float(text))
    except (ValueError, OverflowError):
        return 0


def build_menu(rows: Sequence[Sequence[Any]]) -> Menu:
    """
    메뉴판 시트 행 → 브랜드 매칭용 Menu

    공급가/택배비 컬럼이 있으면 함께 담는다.

    Args:
        rows: 헤더 포함 시트 행 목록

    Returns:
        Menu (옵션 또는 브랜드가 비었거나 "nan"인 행 제외)
    """
    menu = Menu()
    for row in rows[1:]:
        if len(row) <= MENU_COL_BRAND:
            continue
        option = _clean_cell(row[MENU_COL_OPTION])
        brand = _clean_cell(row[MENU_COL_BRAND])
        if not (option and brand):
            continue
        has_fees = len(row) > MENU_COL_SHIPPING_FEE
        menu.add(MenuEntry(
            option_text=option,
            brand=brand,
            product_name=_clean_cell(row[MENU_COL_PRODUCT_NAME]),
            supply_price=parse_money(row[MENU_COL_SUPPLY_PRICE]) if has_fees else 0,
            shipping_fee=parse_money(row[MENU_COL_SHIPPING_FEE]) if has_fees else 0,
        ))

    logger.info(f"메뉴판 구성: {len(menu)}개 옵션")
    return menu


def build_full_menu(rows: Sequence[Sequence[Any]]) -> Menu:
    """
    메뉴판 시트 행 → Menu (상품명/공급가/택배비 포함)

    6개 미만 컬럼인 행은 건너뛴다. 브랜드 매칭에도 그대로 쓸 수 있다.
    """
    menu = Menu()
    for idx, row in enumerate(rows[1:], start=1):
        if len(row) <= MENU_COL_SHIPPING_FEE:
            continue
        option = _clean_cell(row[MENU_COL_OPTION])
        brand = _clean_cell(row[MENU_COL_BRAND])
        if not option:
            continue
        try:
            no = int(float(_clean_cell(row[MENU_COL_NO])))
        except (ValueError, OverflowError):
            no = idx
        menu.add(MenuEntry(
            option_text=option,
            brand=brand,
            product_name=_clean_cell(row[MENU_COL_PRODUCT_NAME]),
            supply_price=parse_money(row[MENU_COL_SUPPLY_PRICE]),
            shipping_fee=parse_money(row[MENU_COL_SHIPPING_FEE]),
            no=no,
        ))

    logger.info(f"전체 메뉴판 구성: {len(menu)}개 옵션")
    return menu
