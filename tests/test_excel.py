"""
excel.py 테스트
===============
셀 헬퍼, 업로드 파일 읽기, 발주서 xlsx/csv 생성 테스트
"""
import io
import pytest
import sys
from pathlib import Path

from openpyxl import Workbook, load_workbook

# 프로젝트 루트 추가
sys.path.insert(0, str(Path(__file__).parent.parent))

from app.constants import BRAND_SHEET_HEADER
from app.utils.excel import (
    brand_sheet_to_excel_bytes,
    cell_text,
    cell_value,
    invoice_sheet_to_excel_bytes,
    is_blank,
    parse_int,
    read_sheet_rows,
    records_to_excel_bytes,
    rows_to_csv_bytes,
)


def brand_row(no, name):
    row = [no] + [""] * 20
    row[5] = name
    return row


class TestCellHelpers:
    """셀 값 헬퍼 테스트"""

    def test_cell_value_out_of_range(self):
        assert cell_value(["a"], 3) is None
        assert cell_value(["a"], -1) is None

    def test_cell_value_nan(self):
        assert cell_value([float("nan")], 0) is None

    def test_cell_text_integer_float(self):
        """엑셀 숫자 12345.0 → "12345" """
        assert cell_text([12345.0], 0) == "12345"
        assert cell_text([1.5], 0) == "1.5"
        assert cell_text([None], 0) == ""

    def test_is_blank(self):
        assert is_blank(None)
        assert is_blank("  ")
        assert is_blank(float("nan"))
        assert not is_blank(0)

    def test_parse_int(self):
        assert parse_int("3", 1) == 3
        assert parse_int(" 2개", 1) == 2
        assert parse_int("abc", 1) == 1
        assert parse_int(True, 1) == 1
        assert parse_int(float("nan"), 0) == 0
        assert parse_int(float("inf"), 0) == 0


class TestReadSheetRows:
    """업로드 파일 읽기 테스트"""

    def test_read_xlsx(self):
        wb = Workbook()
        ws = wb.active
        ws.append(["no", "option", "qty"])
        ws.append([1, "빨간우산", None])
        buf = io.BytesIO()
        wb.save(buf)
        buf.seek(0)

        rows = read_sheet_rows(buf, "20250105_발주서.xlsx")
        assert rows[0] == ["no", "option", "qty"]
        assert rows[1][1] == "빨간우산"
        assert rows[1][2] is None

    def test_read_csv(self):
        buf = io.BytesIO("no,option\n1,빨간우산\n".encode("utf-8"))
        rows = read_sheet_rows(buf, "orders.csv")
        assert rows == [["no", "option"], ["1", "빨간우산"]]


class TestBrandSheet:
    """브랜드별 발주서 xlsx 테스트"""

    def setup_method(self):
        rows = [brand_row(1, "홍길동"), brand_row(2, "김철수"), brand_row(3, "홍길동")]
        self.wb = load_workbook(io.BytesIO(brand_sheet_to_excel_bytes(BRAND_SHEET_HEADER, rows)))
        self.ws = self.wb.active

    def test_header_style(self):
        """헤더: 남색 배경 + 흰색 굵은 글씨"""
        cell = self.ws.cell(row=1, column=1)
        assert cell.value == "순번"
        assert cell.font.bold
        assert cell.fill.start_color.rgb.endswith("1E3C72")

    def test_header_alignment(self):
        """헤더 가운데 정렬 (가로/세로)"""
        cell = self.ws.cell(row=1, column=2)
        assert cell.alignment.horizontal == "center"
        assert cell.alignment.vertical == "center"

    def test_duplicate_name_highlight(self):
        """같은 이름이 두 번 이상이면 노란색"""
        assert self.ws.cell(row=2, column=1).fill.start_color.rgb.endswith("FFEB9C")
        assert self.ws.cell(row=4, column=6).fill.start_color.rgb.endswith("FFEB9C")
        assert self.ws.cell(row=3, column=1).fill.fill_type is None

    def test_column_widths(self):
        """주소 40, 상품명/옵션 25, 나머지 12"""
        assert self.ws.column_dimensions["I"].width == 40
        assert self.ws.column_dimensions["K"].width == 25
        assert self.ws.column_dimensions["A"].width == 12

    def test_empty_rows(self):
        """데이터가 없어도 헤더만 있는 파일"""
        wb = load_workbook(io.BytesIO(brand_sheet_to_excel_bytes(BRAND_SHEET_HEADER, [])))
        assert wb.active.max_row == 1


class TestInvoiceSheet:
    """송장 입력 완료 xlsx 테스트"""

    def test_invoice_fill(self):
        header = [f"col{i}" for i in range(19)]
        with_invoice = [""] * 19
        with_invoice[18] = "123456789"
        without_invoice = [""] * 19
        wb = load_workbook(io.BytesIO(invoice_sheet_to_excel_bytes([header, with_invoice, without_invoice])))
        ws = wb.active
        assert ws.cell(row=2, column=19).fill.start_color.rgb.endswith("C6EFCE")
        assert ws.cell(row=3, column=19).fill.fill_type is None


class TestExports:
    """기타 내보내기 테스트"""

    def test_records_to_excel(self):
        data = records_to_excel_bytes([{"No.": 1, "수취인명": "홍길동"}], "개별주문")
        ws = load_workbook(io.BytesIO(data))["개별주문"]
        assert [c.value for c in ws[1]] == ["No.", "수취인명"]
        assert ws.cell(row=2, column=2).value == "홍길동"

    def test_csv_bom_and_quotes(self):
        """UTF-8 BOM + 모든 셀 큰따옴표"""
        data = rows_to_csv_bytes([["주문번호", "송장"], ["A1", 12345.0]])
        assert data.startswith(b"\xef\xbb\xbf")
        lines = data.decode("utf-8-sig").splitlines()
        assert lines == ['"주문번호","송장"', '"A1","12345"']


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
