"""
송장 입력 모듈
==============
업체에서 송장번호를 채워 보낸 발주서들을 원본 발주서에 합친다.
주문번호(3번째 열) 기준으로 송장번호(19번째 열)를 덮어쓴다.
"""
import logging
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Sequence

from app.constants import INVOICE_DONE_SUFFIX, SOURCE_COL_INVOICE, SOURCE_COL_ORDER_NO
from app.utils.excel import cell_text, is_missing_text

logger = logging.getLogger(__name__)


@dataclass
class InvoiceMergeResult:
    """송장 합치기 결과"""
    rows: List[List[Any]]
    invoice_count: int  # 업로드 파일에서 읽은 (주문번호 → 송장) 수
    matched_rows: int   # 원본에서 실제로 채워진 행 수


def collect_invoices(sheets: Iterable[Sequence[Sequence[Any]]]) -> Dict[str, str]:
    """
    업체 발주서들 → {주문번호: 송장번호}

    빈 값 또는 "nan"은 건너뛰고, 뒤에 올린 파일이 앞 파일을 덮어쓴다.
    """
    invoices: Dict[str, str] = {}
    for rows in sheets:
        for row in rows[1:]:
            order_no = cell_text(row, SOURCE_COL_ORDER_NO).strip()
            invoice = cell_text(row, SOURCE_COL_INVOICE).strip()
            if is_missing_text(order_no) or is_missing_text(invoice):
                continue
            invoices[order_no] = invoice
    return invoices


def merge_invoices(source_rows: Sequence[Sequence[Any]], invoices: Dict[str, str]) -> InvoiceMergeResult:
    """
    원본 발주서에 송장번호 채우기

    Args:
        source_rows: 헤더 포함 원본 행 (변경하지 않음)
        invoices: collect_invoices 결과

    Returns:
        InvoiceMergeResult
    """
    merged: List[List[Any]] = []
    matched = 0

    for idx, row in enumerate(source_rows):
        new_row = list(row)
        if idx > 0:
            order_no = cell_text(row, SOURCE_COL_ORDER_NO).strip()
            invoice = invoices.get(order_no)
            if invoice:
                if len(new_row) <= SOURCE_COL_INVOICE:
                    new_row.extend([None] * (SOURCE_COL_INVOICE + 1 - len(new_row)))
                new_row[SOURCE_COL_INVOICE] = invoice
                matched += 1
        merged.append(new_row)

    logger.info(f"송장 입력: 송장 {len(invoices)}건 중 원본 {matched}행 매칭")
    return InvoiceMergeResult(rows=merged, invoice_count=len(invoices), matched_rows=matched)


def strip_excel_extension(filename: str) -> str:
    lower = filename.lower()
    for ext in (".xlsx", ".xls", ".csv"):
        if lower.endswith(ext):
            return filename[: -len(ext)]
    return filename


def invoice_result_filename(source_filename: str, extension: str = ".xlsx") -> str:
    """원본 파일명 + "_송장입력완료" (이미 붙어 있으면 그대로)"""
    base = strip_excel_extension(source_filename or "발주서")
    if INVOICE_DONE_SUFFIX.lstrip("_") in base:
        return f"{base}{extension}"
    return f"{base}{INVOICE_DONE_SUFFIX}{extension}"
