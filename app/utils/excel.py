"""
스프레드시트 입출력 유틸리티
============================
업로드된 엑셀(.xlsx/.xls/.csv) → 행 목록, 행 목록 → 스타일 적용된 xlsx/csv bytes

사용법:
    rows = read_sheet_rows(uploaded_file, filename="20250105_발주서.xlsx")
    xlsx = brand_sheet_to_excel_bytes(rows_with_header)
"""
import csv
import io
import logging
import math
import re
from collections import Counter
from typing import Any, Dict, List, Optional, Sequence

import pandas as pd
from openpyxl import Workbook
from openpyxl.styles import Alignment, Border, Font, PatternFill, Side
from openpyxl.utils import get_column_letter

from app.constants import (
    BORDER_COLOR,
    BRAND_SHEET_DEFAULT_WIDTH,
    BRAND_SHEET_NAME_COL,
    BRAND_SHEET_WIDE_COLS,
    DUPLICATE_NAME_FILL_COLOR,
    HEADER_FILL_COLOR,
    HEADER_FONT_COLOR,
    INVOICE_OK_FILL_COLOR,
    MISSING_CELL_TEXT,
    SOURCE_COL_INVOICE,
)

logger = logging.getLogger(__name__)

Row = List[Any]

_LEADING_INT_PATTERN = re.compile(r"^\s*([+-]?\d+)")


# ─── 셀 값 헬퍼 ───

def cell_value(row: Sequence[Any], idx: int) -> Any:
    """범위 밖/NaN 셀은 None"""
    if idx < 0 or idx >= len(row):
        return None
    value = row[idx]
    if isinstance(value, float) and math.isnan(value):
        return None
    return value


def cell_text(row: Sequence[Any], idx: int) -> str:
    """셀 값 → 문자열 (None/빈 값은 "")"""
    value = cell_value(row, idx)
    if value is None:
        return ""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def is_blank(value: Any) -> bool:
    """None, NaN, 공백 문자열이면 True"""
    if value is None:
        return True
    if isinstance(value, float) and math.isnan(value):
        return True
    return str(value).strip() == ""


def is_missing_text(text: str) -> bool:
    """빈 값 또는 "nan" 문자열"""
    text = (text or "").strip()
    return not text or text == MISSING_CELL_TEXT


def parse_int(value: Any, default: int) -> int:
    """
    앞쪽 정수 파싱 ("3", 3.0, "2개" → 3, 3, 2)

    Args:
        value: 셀 값
        default: 파싱 실패 시 값

    Returns:
        정수 또는 default
    """
    if value is None or isinstance(value, bool):
        return default
    if isinstance(value, (int, float)):
        if isinstance(value, float) and not math.isfinite(value):
            return default
        return int(value)
    match = _LEADING_INT_PATTERN.match(str(value))
    if not match:
        return default
    return int(match.group(1))


# ─── 읽기 ───

def read_sheet_rows(file, filename: str = "") -> List[Row]:
    """
    업로드 파일의 첫 시트를 헤더 포함 행 목록으로 읽기

    Args:
        file: 파일 경로 또는 파일 객체 (Streamlit UploadedFile 포함)
        filename: 확장자 판별용 파일명

    Returns:
        [[셀, ...], ...] (빈 셀은 None)
    """
    name = (filename or getattr(file, "name", "") or "").lower()
    if name.endswith(".csv"):
        df = pd.read_csv(file, header=None, dtype=object, keep_default_na=False)
    else:
        engine = "xlrd" if name.endswith(".xls") else "openpyxl"
        df = pd.read_excel(file, sheet_name=0, header=None, dtype=object, engine=engine)

    df = df.astype(object).where(pd.notna(df), None)
    rows = [list(r) for r in df.itertuples(index=False, name=None)]
    logger.info(f"시트 읽기 완료: {name or '(이름 없음)'} {len(rows)}행")
    return rows


# ─── 쓰기 (스타일) ───

def _fill(color: str) -> PatternFill:
    return PatternFill(start_color=color, end_color=color, fill_type="solid")


def _thin_border() -> Border:
    side = Side(style="thin", color=BORDER_COLOR)
    return Border(left=side, right=side, top=side, bottom=side)


def _style_header_row(ws, num_cols: int, border: Optional[Border] = None):
    """1행 헤더 스타일링"""
    header_fill = _fill(HEADER_FILL_COLOR)
    header_font = Font(bold=True, color=HEADER_FONT_COLOR)
    for ci in range(1, num_cols + 1):
        c = ws.cell(row=1, column=ci)
        c.fill = header_fill
        c.font = header_font
        c.alignment = Alignment(horizontal="center", vertical="center")
        if border is not None:
            c.border = border


def _workbook_bytes(wb: Workbook) -> bytes:
    buf = io.BytesIO()
    wb.save(buf)
    return buf.getvalue()


def brand_sheet_to_excel_bytes(header: Sequence[str], rows: Sequence[Row], sheet_name: str = "발주서") -> bytes:
    """
    브랜드별 발주서 xlsx 생성

    - 헤더: 남색 배경 + 흰색 굵은 글씨
    - 모든 셀 얇은 테두리
    - 같은 이름(수취인)이 두 번 이상 나오는 행은 노란색 하이라이트
    - 주소/상품명/옵션 열은 넓게

    Args:
        header: 헤더 (데이터 열 수만큼 잘라서 사용)
        rows: 데이터 행 (순번 포함)
        sheet_name: 시트명

    Returns:
        xlsx bytes
    """
    use_header = list(header[: len(rows[0])]) if rows else list(header)

    name_counts = Counter(cell_text(r, BRAND_SHEET_NAME_COL) for r in rows)
    duplicate_names = {name for name, count in name_counts.items() if count > 1}

    wb = Workbook()
    ws = wb.active
    ws.title = sheet_name
    ws.append(use_header)
    for r in rows:
        ws.append(list(r))

    border = _thin_border()
    _style_header_row(ws, len(use_header), border)

    duplicate_fill = _fill(DUPLICATE_NAME_FILL_COLOR)
    for ri, r in enumerate(rows, start=2):
        is_duplicate = cell_text(r, BRAND_SHEET_NAME_COL) in duplicate_names
        for ci in range(1, len(r) + 1):
            c = ws.cell(row=ri, column=ci)
            c.border = border
            if is_duplicate:
                c.fill = duplicate_fill

    for idx in range(len(use_header)):
        width = BRAND_SHEET_WIDE_COLS.get(idx, BRAND_SHEET_DEFAULT_WIDTH)
        ws.column_dimensions[get_column_letter(idx + 1)].width = width

    return _workbook_bytes(wb)


def invoice_sheet_to_excel_bytes(rows: Sequence[Row], sheet_name: str = "발주서") -> bytes:
    """
    송장 입력 완료 발주서 xlsx 생성 (헤더 포함 행 목록)

    송장번호가 들어간 셀은 초록색으로 표시한다.
    """
    wb = Workbook()
    ws = wb.active
    ws.title = sheet_name
    for r in rows:
        ws.append(list(r))

    if rows:
        _style_header_row(ws, len(rows[0]))

    ok_fill = _fill(INVOICE_OK_FILL_COLOR)
    for ri in range(2, len(rows) + 1):
        invoice = cell_text(rows[ri - 1], SOURCE_COL_INVOICE)
        if not is_missing_text(invoice):
            ws.cell(row=ri, column=SOURCE_COL_INVOICE + 1).fill = ok_fill

    return _workbook_bytes(wb)


def rows_to_excel_bytes(rows: Sequence[Row], sheet_name: str) -> bytes:
    """헤더 포함 행 목록 → 스타일 없는 xlsx"""
    wb = Workbook()
    ws = wb.active
    ws.title = sheet_name
    for r in rows:
        ws.append(list(r))
    return _workbook_bytes(wb)


def records_to_excel_bytes(records: Sequence[Dict[str, Any]], sheet_name: str) -> bytes:
    """딕셔너리 목록 → xlsx (키 순서가 헤더)"""
    buf = io.BytesIO()
    with pd.ExcelWriter(buf, engine="openpyxl") as writer:
        pd.DataFrame(list(records)).to_excel(writer, sheet_name=sheet_name, index=False)
    return buf.getvalue()


def rows_to_csv_bytes(rows: Sequence[Row]) -> bytes:
    """
    행 목록 → CSV bytes (UTF-8 BOM, 모든 셀 큰따옴표)

    엑셀에서 한글이 깨지지 않도록 BOM을 붙인다.
    """
    df = pd.DataFrame([[cell_text(r, idx) for idx in range(len(r))] for r in rows])
    return df.to_csv(index=False, header=False, quoting=csv.QUOTE_ALL).encode("utf-8-sig")
