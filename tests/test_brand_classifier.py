"""
brand_classifier.py 테스트
==========================
옵션 정규화, 브랜드 매칭 우선순위, 메뉴판 구성 테스트
"""
import pytest
import sys
from pathlib import Path

# 프로젝트 루트 추가
sys.path.insert(0, str(Path(__file__).parent.parent))

from app.constants import UNCLASSIFIED_BRAND
from app.models.menu import Menu, MenuEntry
from app.services.brand_classifier import (
    build_full_menu,
    build_menu,
    normalize_text,
    parse_money,
    resolve_brand,
    resolve_entry,
)


class TestNormalizeText:
    """normalize_text 테스트"""

    def test_strip_leading_tag(self):
        """앞쪽 [태그] 제거"""
        assert normalize_text("[Special] Widget A") == "Widget A"

    def test_collapse_whitespace(self):
        """연속 공백 정리"""
        assert normalize_text("  빨간   우산  장우산 ") == "빨간 우산 장우산"

    def test_only_first_tag_removed(self):
        """태그는 맨 앞 하나만 제거"""
        assert normalize_text("[특가][무료배송] 우산") == "[무료배송] 우산"

    def test_tag_not_at_start(self):
        """중간 태그는 그대로"""
        assert normalize_text("우산 [특가]") == "우산 [특가]"

    def test_none_and_empty(self):
        """None/빈 문자열"""
        assert normalize_text(None) == ""
        assert normalize_text("   ") == ""


class TestResolveBrand:
    """resolve_brand 매칭 우선순위 테스트"""

    def setup_method(self):
        self.menu = Menu.from_dict({
            "빨간우산": "우산브랜드",
            "파란우산 장우산 대형": "장우산브랜드",
            "Widget A": "위젯브랜드",
            "짧은옵션": "짧은브랜드",
        })

    def test_secondary_exact_match(self):
        """옵션(확정) 정확히 일치"""
        assert resolve_brand("무관한 옵션", "빨간우산", self.menu) == "우산브랜드"

    def test_primary_exact_match(self):
        """옵션(수집) 정확히 일치"""
        assert resolve_brand("빨간우산", "없는옵션", self.menu) == "우산브랜드"

    def test_secondary_beats_primary(self):
        """확정 옵션 정확 일치가 수집 옵션보다 우선"""
        assert resolve_brand("빨간우산", "Widget A", self.menu) == "위젯브랜드"

    def test_normalized_match(self):
        """태그 제거 후 일치"""
        assert resolve_brand("기타", "[Special] Widget  A", self.menu) == "위젯브랜드"

    def test_substring_match_long_key(self):
        """6자 이상 키는 부분일치 허용"""
        assert resolve_brand("기타", "[특가] 파란우산 장우산 대형 2개입", self.menu) == "장우산브랜드"

    def test_option_contained_in_key(self):
        """옵션이 키 안에 포함되는 방향도 허용"""
        assert resolve_brand("기타", "장우산 대형", self.menu) == "장우산브랜드"

    def test_short_key_never_substring(self):
        """5자 이하 키는 부분일치 안 함"""
        menu = Menu.from_dict({"ABCDE": "다섯글자"})
        assert resolve_brand("", "ABCDE 특대", menu) == UNCLASSIFIED_BRAND

    def test_six_char_key_substring(self):
        """정확히 6자 키는 부분일치"""
        menu = Menu.from_dict({"ABCDEF": "여섯글자"})
        assert resolve_brand("기타", "ABCDEF 특대", menu) == "여섯글자"

    def test_no_match(self):
        """매칭 실패 → 미분류"""
        assert resolve_brand("전혀 없는 상품", "없는 옵션", self.menu) == UNCLASSIFIED_BRAND

    def test_empty_option_contained_in_long_key(self):
        """빈 옵션은 6자 이상 키 모두에 포함 → 메뉴판 순서상 첫 긴 키"""
        assert resolve_brand("", "전혀 다른 상품", self.menu) == "장우산브랜드"

    def test_empty_options_match_first_long_key(self):
        """옵션이 모두 비어도 첫 긴 키로 분류"""
        assert resolve_brand("", "", self.menu) == "장우산브랜드"

    def test_empty_option_short_keys_only(self):
        """5자 이하 키뿐이면 빈 옵션도 미분류"""
        menu = Menu.from_dict({"빨간우산": "우산브랜드", "ABCDE": "다섯글자"})
        assert resolve_brand("", "", menu) == UNCLASSIFIED_BRAND

    def test_first_fuzzy_match_wins(self):
        """부분일치가 여러 개면 메뉴판 순서상 첫 번째"""
        menu = Menu.from_dict({
            "초록우산 장우산": "첫번째",
            "초록우산 장우산 세트": "두번째",
        })
        assert resolve_brand("기타", "초록우산 장우산 세트 2개", menu) == "첫번째"

    def test_empty_brand_is_unclassified(self):
        """브랜드가 빈 항목에 매칭되면 미분류"""
        menu = Menu([MenuEntry(option_text="브랜드없는옵션", brand="")])
        assert resolve_brand("", "브랜드없는옵션", menu) == UNCLASSIFIED_BRAND

    def test_resolve_entry_returns_prices(self):
        """resolve_entry는 가격 정보가 담긴 항목을 반환"""
        menu = Menu([MenuEntry("빨간우산", "우산브랜드", supply_price=1000, shipping_fee=2500)])
        entry = resolve_entry("", "빨간우산", menu)
        assert entry is not None
        assert entry.supply_price == 1000
        assert entry.shipping_fee == 2500

    def test_none_inputs(self):
        """None 입력도 예외 없이 처리"""
        assert resolve_brand(None, None, self.menu) == "장우산브랜드"
        assert resolve_brand(None, None, Menu.from_dict({"빨간우산": "우산브랜드"})) == UNCLASSIFIED_BRAND


class TestBuildMenu:
    """메뉴판 구성 테스트"""

    def setup_method(self):
        self.rows = [
            ["no", "productName", "option", "brand", "supplyPrice", "shippingFee"],
            ["1", "우산", "빨간우산", "우산브랜드", "₩1,000", "2,500"],
            ["2", "우산", "nan", "우산브랜드", "1000", "2500"],
            ["3", "우산", "파란우산", "nan", "1000", "2500"],
            ["4", "우산", "노란우산", " 노랑브랜드 ", "abc", ""],
            ["5", "우산", "빨간우산", "새브랜드", "1200", "3000"],
            ["x", "모자"],
        ]

    def test_build_menu_skips_nan(self):
        """옵션/브랜드가 nan인 행 제외"""
        menu = build_menu(self.rows)
        assert len(menu) == 2
        assert "파란우산" not in menu
        assert menu.brand_for("노란우산") == "노랑브랜드"

    def test_last_write_wins(self):
        """같은 옵션이 두 번 나오면 마지막 행"""
        menu = build_menu(self.rows)
        assert menu.brand_for("빨간우산") == "새브랜드"
        assert menu.entry_for("빨간우산").shipping_fee == 3000

    def test_build_menu_short_rows(self):
        """4칸 미만 행은 건너뜀"""
        menu = build_menu([["h"], ["1", "우산", "빨간우산"]])
        assert len(menu) == 0

    def test_build_full_menu(self):
        """전체 메뉴판: 가격 파싱 + 브랜드 없는 행도 포함"""
        menu = build_full_menu(self.rows)
        assert "파란우산" in menu
        assert menu.entry_for("노란우산").supply_price == 0

    def test_full_menu_no_fallback(self):
        """no 파싱 실패 시 행 번호"""
        rows = [
            ["no", "productName", "option", "brand", "supplyPrice", "shippingFee"],
            ["", "모자", "검정모자", "모자브랜드", "5000", "3000"],
        ]
        entry = build_full_menu(rows).entry_for("검정모자")
        assert entry.no == 1
        assert entry.product_name == "모자"

    def test_parse_money(self):
        """금액 파싱"""
        assert parse_money("₩12,000") == 12000
        assert parse_money("3000.0") == 3000
        assert parse_money("nan") == 0
        assert parse_money(None) == 0

    def test_parse_money_overflow(self):
        """무한대/지수 초과 값은 0"""
        assert parse_money("1e999") == 0
        assert parse_money("inf") == 0
        assert parse_money("-Infinity") == 0

    def test_full_menu_no_overflow_fallback(self):
        """no가 무한대면 행 번호, 가격 초과값은 0"""
        rows = [
            ["no", "productName", "option", "brand", "supplyPrice", "shippingFee"],
            ["inf", "모자", "검정모자", "모자브랜드", "1e999", "3000"],
        ]
        entry = build_full_menu(rows).entry_for("검정모자")
        assert entry.no == 1
        assert entry.supply_price == 0
        assert entry.shipping_fee == 3000

    def test_brand_counts(self):
        """브랜드별 옵션 수 (많은 순)"""
        menu = Menu.from_dict({"a": "A", "b": "A", "c": "B"})
        assert menu.brand_counts() == [("A", 2), ("B", 1)]


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
