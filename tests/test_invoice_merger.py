"""
invoice_merger.py 테스트
========================
업체 송장 수집 → 원본 발주서 합치기 테스트
"""
import pytest
import sys
from pathlib import Path

# 프로젝트 루트 추가
sys.path.insert(0, str(Path(__file__).parent.parent))

from app.services.invoice_merger import (
    collect_invoices,
    invoice_result_filename,
    merge_invoices,
)


def sheet_row(order_no, invoice=""):
    row = [""] * 21
    row[2] = order_no
    row[18] = invoice
    return row


HEADER = [f"col{i}" for i in range(21)]


class TestCollectInvoices:
    """collect_invoices 테스트"""

    def test_collect(self):
        sheets = [[HEADER, sheet_row("A1", "111"), sheet_row("A2", "222")]]
        assert collect_invoices(sheets) == {"A1": "111", "A2": "222"}

    def test_skip_blank_and_nan(self):
        """빈 값/"nan"은 건너뜀"""
        sheets = [[HEADER, sheet_row("A1", ""), sheet_row("A2", "nan"), sheet_row("nan", "333")]]
        assert collect_invoices(sheets) == {}

    def test_later_file_overwrites(self):
        """뒤 파일이 앞 파일을 덮어씀"""
        sheets = [
            [HEADER, sheet_row("A1", "111")],
            [HEADER, sheet_row("A1", "999")],
        ]
        assert collect_invoices(sheets) == {"A1": "999"}

    def test_numeric_cells(self):
        """엑셀에서 숫자로 읽힌 주문번호/송장"""
        row = [None] * 19
        row[2] = 12345.0
        row[18] = 678901234567.0
        assert collect_invoices([[HEADER, row]]) == {"12345": "678901234567"}


class TestMergeInvoices:
    """merge_invoices 테스트"""

    def setup_method(self):
        self.source = [HEADER, sheet_row("A1"), sheet_row("A2"), sheet_row("A3")]

    def test_merge_counts(self):
        """송장 수와 실제 매칭 행 수"""
        result = merge_invoices(self.source, {"A1": "111", "A3": "333", "ZZ": "999"})
        assert result.invoice_count == 3
        assert result.matched_rows == 2
        assert result.rows[1][18] == "111"
        assert result.rows[2][18] == ""
        assert result.rows[3][18] == "333"

    def test_source_not_mutated(self):
        merge_invoices(self.source, {"A1": "111"})
        assert self.source[1][18] == ""

    def test_header_untouched(self):
        """헤더 행은 매칭 대상 아님"""
        source = [["x", "y", "A1"], sheet_row("A1")]
        result = merge_invoices(source, {"A1": "111"})
        assert result.rows[0] == ["x", "y", "A1"]
        assert result.matched_rows == 1

    def test_short_row_padded(self):
        """짧은 행은 송장 열까지 늘림"""
        result = merge_invoices([HEADER, ["1", "", "A1"]], {"A1": "111"})
        assert len(result.rows[1]) == 19
        assert result.rows[1][18] == "111"


class TestInvoiceFilename:
    """결과 파일명 테스트"""

    def test_append_suffix(self):
        assert invoice_result_filename("20250105_발주서.xlsx") == "20250105_발주서_송장입력완료.xlsx"

    def test_suffix_not_duplicated(self):
        assert invoice_result_filename("발주서_송장입력완료.xls") == "발주서_송장입력완료.xlsx"

    def test_csv_extension(self):
        assert invoice_result_filename("발주서.xlsx", ".csv") == "발주서_송장입력완료.csv"


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
