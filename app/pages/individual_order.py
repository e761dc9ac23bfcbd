"""
개별주문 페이지
===============
메뉴판에서 상품/옵션 선택 → 수취인 입력(카카오 주소 검색) → 주문 목록
→ 발주서 생성 / 기존 발주서와 합치기 / Apps Script 저장·검색.
"""
import logging
from datetime import date

import pandas as pd
import streamlit as st

from app.api.apps_script_client import AppsScriptClient, AppsScriptError
from app.api.google_sheets_client import SheetFetchError
from app.api.kakao_local_client import KakaoApiError, KakaoLocalClient
from app.dashboard_utils import (
    XLSX_MIME,
    fmt_won,
    get_full_menu,
    get_menu,
    load_menu,
    render_kpi_row,
)
from app.models.order import IndividualOrder
from app.services.individual_orders import (
    categories,
    find_entry,
    generate_order_sheet,
    individual_order_filename,
    merge_with_existing,
    merged_order_filename,
    options_for,
    order_totals,
)
from app.utils.excel import read_sheet_rows, records_to_excel_bytes, rows_to_excel_bytes
from app.utils.validators import IndividualOrderValidator

logger = logging.getLogger(__name__)

# 세션 상태 키
SS_ORDERS = "individual_orders"          # [IndividualOrder]
SS_ADDRESS_RESULTS = "ind_address_results"
SS_ADD_MESSAGES = "ind_add_messages"     # [(level, message)] 다음 렌더에 표시
KEY_NAME = "ind_name"
KEY_PHONE = "ind_phone"
KEY_ADDRESS = "ind_address"
KEY_QTY = "ind_qty"
KEY_ADDR_QUERY = "ind_addr_query"
KEY_ADDR_CHOICE = "ind_addr_choice"


def _orders():
    return st.session_state.setdefault(SS_ORDERS, [])


def _apply_address(choice_key: str):
    """검색 결과 선택 → 주소 입력칸 (위젯 렌더 전에 바꿔야 하므로 콜백)"""
    choice = st.session_state.get(choice_key)
    if choice:
        st.session_state[KEY_ADDRESS] = choice


def _clear_orders():
    st.session_state[SS_ORDERS] = []


def clear_recipient_form(state):
    """수취인/주소 검색/수량 입력칸 초기화 (상품 선택은 유지)"""
    state[KEY_NAME] = ""
    state[KEY_PHONE] = ""
    state[KEY_ADDRESS] = ""
    state[KEY_ADDR_QUERY] = ""
    state[KEY_QTY] = 1
    state[SS_ADDRESS_RESULTS] = []
    state.pop(KEY_ADDR_CHOICE, None)


def add_order_from_form(state, product_name: str, option: str, supply_price: int, shipping_fee: int) -> bool:
    """
    입력칸 값으로 개별주문 추가

    검증을 통과하면 주문 목록에 넣고 입력칸을 비운다.
    화면에 띄울 메시지는 state[SS_ADD_MESSAGES]에 남긴다.

    Returns:
        추가 여부
    """
    order = IndividualOrder(
        recipient_name=str(state.get(KEY_NAME) or "").strip(),
        recipient_phone=str(state.get(KEY_PHONE) or "").strip(),
        address=str(state.get(KEY_ADDRESS) or "").strip(),
        product_name=product_name or "",
        option=option or "",
        quantity=int(state.get(KEY_QTY) or 1),
        supply_price=supply_price,
        shipping_fee=shipping_fee,
    )
    validator = IndividualOrderValidator()
    errors = validator.validate(order)
    if errors:
        state[SS_ADD_MESSAGES] = [("error", err.message) for err in errors]
        return False

    messages = [("warning", warn.message) for warn in validator.warnings(order)]
    orders = state.setdefault(SS_ORDERS, [])
    orders.append(order)
    logger.info(f"개별주문 추가: {order.recipient_name} / {order.option} × {order.quantity}")
    messages.append(("success", f"주문 추가 완료 ({len(orders)}건)"))
    state[SS_ADD_MESSAGES] = messages
    clear_recipient_form(state)
    return True


def _add_order(product_name: str, option: str, supply_price: int, shipping_fee: int):
    add_order_from_form(st.session_state, product_name, option, supply_price, shipping_fee)


def _show_add_messages():
    for level, message in st.session_state.pop(SS_ADD_MESSAGES, []):
        getattr(st, level)(message)


def render():
    st.title("📝 개별주문")

    if get_full_menu() is None:
        try:
            load_menu()
        except SheetFetchError as e:
            logger.error(f"메뉴판 로드 실패: {e}")
            st.error(f"메뉴판을 불러오지 못했습니다: {e.message}")
            return

    tab_input, tab_saved = st.tabs(["주문 입력", "저장된 주문"])
    with tab_input:
        _render_input()
        st.divider()
        _render_order_list()
    with tab_saved:
        _render_saved_orders()


def _render_input():
    full_menu = get_full_menu()

    # ── 상품 선택 ──
    st.subheader("상품 선택")
    _p1, _p2, _p3 = st.columns([2, 3, 1])
    with _p1:
        category = st.selectbox("상품", categories(full_menu), key="ind_category")
    with _p2:
        _opts = [e.option_text for e in options_for(full_menu, category)] if category else []
        option = st.selectbox("옵션", _opts, key="ind_option")
    with _p3:
        quantity = st.number_input("수량", min_value=1, step=1, key=KEY_QTY)

    entry = find_entry(full_menu, category, option) if category and option else None
    supply_price = entry.supply_price if entry else 0
    shipping_fee = entry.shipping_fee if entry else 0
    st.caption(
        f"공급가 {fmt_won(supply_price)} × {int(quantity)} + 택배비 {fmt_won(shipping_fee)} "
        f"= {fmt_won(supply_price * int(quantity) + shipping_fee)}"
    )

    # ── 수취인 ──
    st.subheader("수취인")
    _r1, _r2 = st.columns(2)
    with _r1:
        st.text_input("수취인명", key=KEY_NAME)
    with _r2:
        st.text_input("전화번호", key=KEY_PHONE, placeholder="010-1234-5678")
    st.text_input("주소", key=KEY_ADDRESS)

    with st.expander("🔍 주소 검색"):
        _s1, _s2 = st.columns([4, 1])
        with _s1:
            _query = st.text_input("도로명/지번/건물명", key=KEY_ADDR_QUERY)
        with _s2:
            st.markdown("<br>", unsafe_allow_html=True)
            _btn_search = st.button("검색", key="btn_addr_search", use_container_width=True)
        if _btn_search:
            try:
                st.session_state[SS_ADDRESS_RESULTS] = KakaoLocalClient.from_settings().search(_query)
            except KakaoApiError as e:
                logger.error(f"주소 검색 실패: {e}")
                st.error(f"주소 검색 실패: {e.message}")
        _results = st.session_state.get(SS_ADDRESS_RESULTS) or []
        if _results:
            st.radio("검색 결과", _results, key=KEY_ADDR_CHOICE)
            st.button("이 주소 사용", key="btn_addr_apply",
                      on_click=_apply_address, args=(KEY_ADDR_CHOICE,))
        elif _btn_search:
            st.info("검색 결과가 없습니다.")

    st.button(
        "➕ 주문 추가", type="primary", key="btn_add_order",
        on_click=_add_order, args=(category or "", option or "", supply_price, shipping_fee),
    )
    _show_add_messages()


def _render_order_list():
    orders = _orders()
    st.subheader(f"주문 목록 ({len(orders)}건)")
    if not orders:
        st.info("추가된 주문이 없습니다.")
        return

    menu = get_menu()
    totals, grand = order_totals(orders, menu)
    df = pd.DataFrame([
        {
            "수취인": o.recipient_name,
            "전화번호": o.recipient_phone,
            "주소": o.address,
            "상품": o.product_name,
            "옵션": o.option,
            "수량": o.quantity,
            "공급가": o.supply_price,
            "결제금액": total,
        }
        for o, total in zip(orders, totals)
    ])
    st.dataframe(df, hide_index=True, use_container_width=True)
    render_kpi_row([
        ("주문", f"{len(orders):,}건"),
        ("수량", f"{sum(o.quantity for o in orders):,}개"),
        ("총 결제금액", fmt_won(grand)),
    ])
    st.caption("같은 주소 + 같은 브랜드는 택배비를 한 번만 받습니다.")

    today = date.today().strftime("%Y%m%d")
    _a1, _a2, _a3 = st.columns(3)
    with _a1:
        sheet = generate_order_sheet(orders, menu, today)
        st.download_button(
            "📥 발주서 다운로드",
            records_to_excel_bytes(sheet, "개별주문"),
            file_name=individual_order_filename(today),
            mime=XLSX_MIME,
            key="dl_individual",
            type="primary",
            use_container_width=True,
        )
    with _a2:
        if st.button("💾 시트에 저장", key="btn_save_orders", use_container_width=True):
            try:
                count = AppsScriptClient.from_settings().save_orders(orders)
                st.success(f"{count}건 저장 완료")
            except AppsScriptError as e:
                logger.error(f"개별주문 저장 실패: {e}")
                st.error(f"저장 실패: {e.message}")
    with _a3:
        st.button("🗑️ 목록 비우기", key="btn_clear_orders", on_click=_clear_orders, use_container_width=True)

    with st.expander("📎 기존 발주서와 합치기"):
        _existing = st.file_uploader("일반 발주서", type=["xlsx", "xls", "csv"], key="ind_merge_src")
        if _existing is not None:
            try:
                existing_rows = read_sheet_rows(_existing, _existing.name)
            except Exception as e:
                logger.error(f"발주서 읽기 실패: {_existing.name} - {e}")
                st.error(f"파일을 읽을 수 없습니다: {e}")
                return
            merged = merge_with_existing(existing_rows, orders, menu, today)
            st.caption(f"기존 {max(len(existing_rows) - 1, 0):,}행 + 개별주문 {len(orders):,}행")
            st.download_button(
                "📥 합본 다운로드",
                rows_to_excel_bytes(merged, "발주서"),
                file_name=merged_order_filename(today),
                mime=XLSX_MIME,
                key="dl_merged",
                use_container_width=True,
            )


def _render_saved_orders():
    _q1, _q2, _q3 = st.columns([2, 2, 1])
    with _q1:
        _name = st.text_input("수취인명", key="saved_name")
    with _q2:
        _phone = st.text_input("전화번호", key="saved_phone")
    with _q3:
        st.markdown("<br>", unsafe_allow_html=True)
        _btn = st.button("조회", type="primary", key="btn_saved_search", use_container_width=True)

    if not _btn:
        return
    try:
        saved, search_mode = AppsScriptClient.from_settings().fetch_saved_orders(_name.strip(), _phone.strip())
    except AppsScriptError as e:
        logger.error(f"개별주문 조회 실패: {e}")
        st.error(f"불러오기 실패: {e.message}")
        return

    if not saved:
        st.info("검색 결과가 없습니다." if search_mode else "저장된 주문이 없습니다.")
        return

    st.caption(f"{'검색 결과' if search_mode else '전체'} {len(saved):,}건")
    st.dataframe(
        pd.DataFrame([
            {
                "저장시각": s.saved_time,
                "수취인": s.recipient_name,
                "전화번호": s.recipient_phone,
                "주소": s.address,
                "상품": s.product_name,
                "옵션": s.option,
                "수량": s.quantity,
                "결제금액": s.total,
            }
            for s in saved
        ]),
        hide_index=True,
        use_container_width=True,
    )
