"""
주문서 분리 페이지
==================
원본 발주서 업로드 → 브랜드별 발주서 분리/다운로드, 업체 송장 파일 합치기.
"""
import logging

import pandas as pd
import streamlit as st

from app.api.google_sheets_client import SheetFetchError
from app.constants import BRAND_SHEET_HEADER, UNCLASSIFIED_BRAND
from app.dashboard_utils import (
    CSV_MIME,
    SS_SPLIT_RESULTS,
    XLSX_MIME,
    fmt_won,
    get_menu,
    load_menu,
    render_grid,
    render_kpi_row,
)
from app.services.invoice_merger import collect_invoices, invoice_result_filename, merge_invoices
from app.services.order_splitter import (
    brand_sheet_filename,
    brand_sheet_rows,
    bucket_view,
    extract_order_date,
    split_orders,
    summarize,
)
from app.services.shipping import apply_grouped_shipping, grand_total, total_shipping
from app.utils.excel import (
    brand_sheet_to_excel_bytes,
    invoice_sheet_to_excel_bytes,
    read_sheet_rows,
    rows_to_csv_bytes,
)

logger = logging.getLogger(__name__)

SS_ORDER_DATE = "split_order_date"


def render():
    st.title("✂️ 주문서 분리")

    tab_split, tab_invoice = st.tabs(["브랜드별 분리", "송장 입력"])
    with tab_split:
        _render_split()
    with tab_invoice:
        _render_invoice()


def _ensure_menu():
    menu = get_menu()
    if menu is not None:
        return menu
    try:
        return load_menu()
    except SheetFetchError as e:
        logger.error(f"메뉴판 로드 실패: {e}")
        st.error(f"메뉴판을 불러오지 못했습니다: {e.message}")
        return None


def _render_split():
    st.caption("일반 발주서(엑셀/CSV)를 올리면 메뉴판 기준으로 브랜드별 발주서를 만듭니다.")

    _src = st.file_uploader("원본 발주서", type=["xlsx", "xls", "csv"], key="split_src")
    if _src is None:
        return

    order_date = extract_order_date(_src.name)
    st.text(f"발주일: {order_date}")

    if st.button("브랜드별 분리", type="primary", key="btn_split"):
        menu = _ensure_menu()
        if menu is None:
            return
        try:
            rows = read_sheet_rows(_src, _src.name)
        except Exception as e:
            logger.error(f"발주서 읽기 실패: {_src.name} - {e}")
            st.error(f"파일을 읽을 수 없습니다: {e}")
            return
        st.session_state[SS_SPLIT_RESULTS] = split_orders(rows, menu)
        st.session_state[SS_ORDER_DATE] = order_date

    results = st.session_state.get(SS_SPLIT_RESULTS)
    if not results:
        return
    order_date = st.session_state.get(SS_ORDER_DATE, order_date)

    total_orders, total_qty = summarize(results)
    unclassified = len(results.get(UNCLASSIFIED_BRAND, []))
    render_kpi_row([
        ("전체 주문", f"{total_orders:,}건"),
        ("전체 수량", f"{total_qty:,}개"),
        ("브랜드", f"{len(results):,}개"),
        ("미분류", f"{unclassified:,}건", None if not unclassified else "확인 필요", "inverse"),
    ])

    buckets = bucket_view(results)
    summary_df = pd.DataFrame([
        {
            "브랜드": f"⚠️ {b.brand}" if b.brand == UNCLASSIFIED_BRAND else b.brand,
            "주문건수": b.order_count,
            "수량": b.total_quantity,
        }
        for b in buckets
    ])
    render_grid(summary_df, key="split_summary_grid", height=300)

    st.subheader("브랜드별 발주서")
    for bucket in buckets:
        billed = apply_grouped_shipping(bucket.orders)
        label = f"{bucket.brand} ({bucket.order_count}건 / {bucket.total_quantity}개)"
        with st.expander(label, expanded=bucket.brand == UNCLASSIFIED_BRAND):
            preview = pd.DataFrame([
                {
                    "수취인": o.record.recipient_name,
                    "주소": o.address,
                    "옵션": o.display_option,
                    "수량": o.quantity,
                    "택배비": o.shipping_fee_applied,
                    "합계": o.total_amount,
                }
                for o in billed
            ])
            st.dataframe(preview, hide_index=True, use_container_width=True)
            st.caption(f"택배비 {fmt_won(total_shipping(billed))} / 합계 {fmt_won(grand_total(billed))}")

            data = brand_sheet_to_excel_bytes(BRAND_SHEET_HEADER, brand_sheet_rows(bucket.orders))
            st.download_button(
                "📥 엑셀 다운로드",
                data,
                file_name=brand_sheet_filename(order_date, bucket.brand),
                mime=XLSX_MIME,
                key=f"dl_brand_{bucket.brand}",
                use_container_width=True,
            )


def _render_invoice():
    st.caption("업체에서 송장번호를 채운 발주서들을 원본 발주서에 합칩니다 (주문번호 기준).")

    _src = st.file_uploader("원본 발주서", type=["xlsx", "xls", "csv"], key="inv_src")
    _vendor_files = st.file_uploader(
        "업체 발주서 (송장 포함, 여러 개 가능)",
        type=["xlsx", "xls", "csv"],
        accept_multiple_files=True,
        key="inv_vendor_files",
    )

    if not (_src and _vendor_files):
        return
    if not st.button("송장 합치기", type="primary", key="btn_inv_merge"):
        return

    try:
        source_rows = read_sheet_rows(_src, _src.name)
        vendor_sheets = [read_sheet_rows(f, f.name) for f in _vendor_files]
    except Exception as e:
        logger.error(f"송장 파일 읽기 실패: {e}")
        st.error(f"파일을 읽을 수 없습니다: {e}")
        return

    invoices = collect_invoices(vendor_sheets)
    if not invoices:
        st.warning("업체 발주서에서 송장번호를 찾지 못했습니다.")
        return

    result = merge_invoices(source_rows, invoices)
    st.success(f"송장 {result.invoice_count:,}건 중 {result.matched_rows:,}행 입력 완료")
    if result.matched_rows < result.invoice_count:
        st.warning(f"원본에 없는 주문번호 {result.invoice_count - result.matched_rows:,}건")

    _c1, _c2 = st.columns(2)
    with _c1:
        st.download_button(
            "📥 엑셀 다운로드",
            invoice_sheet_to_excel_bytes(result.rows),
            file_name=invoice_result_filename(_src.name),
            mime=XLSX_MIME,
            key="dl_inv_xlsx",
            type="primary",
            use_container_width=True,
        )
    with _c2:
        st.download_button(
            "📥 CSV 다운로드",
            rows_to_csv_bytes(result.rows),
            file_name=invoice_result_filename(_src.name, ".csv"),
            mime=CSV_MIME,
            key="dl_inv_csv",
            use_container_width=True,
        )
