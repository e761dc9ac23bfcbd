"""비즈니스 상수 - 매직넘버 중앙 관리"""

# 브랜드 분류
UNCLASSIFIED_BRAND = "미분류"  # 메뉴판 매칭 실패 시
MISSING_CELL_TEXT = "nan"     # 빈 숫자 셀이 문자열로 직렬화된 값
FUZZY_MATCH_MIN_KEY_LENGTH = 6  # 부분일치 허용 최소 키 길이 (5자 이하는 제외)
DISPLAY_OPTION_MAX_LENGTH = 40  # 화면 표시용 옵션 길이

# 수량
DEFAULT_QUANTITY = 1

# ──── 원본 발주서(일반 발주서123) 컬럼 위치 (0부터) ────
SOURCE_COL_FIRST = 0            # 빈 값이면 행 건너뜀
SOURCE_COL_ORDER_NO = 2         # 주문번호
SOURCE_COL_RECIPIENT_NAME = 5   # 수취인명
SOURCE_COL_PHONE = 6            # 수취인전화번호1
SOURCE_COL_ADDRESS = 8          # 수취인주소
SOURCE_COL_OPTION_PRIMARY = 11  # 옵션(수집)
SOURCE_COL_OPTION_SECONDARY = 12  # 옵션(확정)
SOURCE_COL_QUANTITY = 13        # 수량
SOURCE_COL_INVOICE = 18         # 송장번호
SOURCE_COL_PHONE_FALLBACKS = (21, 25)  # 주문자전화번호1, 수취인전화번호2
SOURCE_RAW_START = 1            # 브랜드별 발주서로 내보낼 구간 [start, end)
SOURCE_RAW_END = 21

# ──── 메뉴판 시트 컬럼 위치 ────
MENU_COL_NO = 0
MENU_COL_PRODUCT_NAME = 1
MENU_COL_OPTION = 2
MENU_COL_BRAND = 3
MENU_COL_SUPPLY_PRICE = 4
MENU_COL_SHIPPING_FEE = 5

# ──── 브랜드별 발주서 헤더 ────
BRAND_SHEET_HEADER = [
    "순번", "발주일", "주문번호", "주문번호(쇼핑)", "상품코드", "이름",
    "수취인전화번호1", "우편번호", "주소", "배송메세지", "상품명",
    "옵션1", "옵션2", "수량", "단가", "추가비용", "특이사항",
    "택배사", "운송장", "택배비", "보내는사람",
]
BRAND_SHEET_NAME_COL = 5        # 이름 (중복 하이라이트 기준)
BRAND_SHEET_WIDE_COLS = {8: 40, 10: 25, 11: 25, 12: 25}  # 주소, 상품명, 옵션
BRAND_SHEET_DEFAULT_WIDTH = 12

# ──── 개별주문 발주서 헤더 (원본 발주서와 같은 순서) ────
INDIVIDUAL_ORDER_COLUMNS = [
    "No.", "수집일자(YYYYMMDD)", "주문번호(사방넷)", "주문번호(쇼핑몰)",
    "상품코드(쇼핑몰)", "수취인명", "수취인전화번호1", "수취인우편번호(1)",
    "수취인주소(1)", "배송메세지", "상품명(수집)", "옵션(수집)", "옵션(확정)",
    "수량", "단가", "추가비용", "특이사항", "택배사", "송장번호", "택배비",
    "주문자명", "주문자전화번호1", "TEMP5", "비고", "쇼핑몰명(1)",
    "수취인전화번호2",
]
INDIVIDUAL_ORDER_PREFIX = "IND"
INDIVIDUAL_MALL_ORDER_PREFIX = "개별"
INDIVIDUAL_MALL_NAME = "개별주문"

# ──── 파일명 ────
BRAND_SHEET_FILENAME = "{date}_주문서확인처리_{brand}.xlsx"
INVOICE_DONE_SUFFIX = "_송장입력완료"
INDIVIDUAL_ORDER_FILENAME = "{date}_개별주문.xlsx"
MERGED_ORDER_FILENAME = "{date}_일반발주서123_합본.xlsx"

# ──── Excel 스타일 (ARGB 없는 RGB hex) ────
HEADER_FILL_COLOR = "1E3C72"
HEADER_FONT_COLOR = "FFFFFF"
BORDER_COLOR = "000000"
DUPLICATE_NAME_FILL_COLOR = "FFEB9C"
INVOICE_OK_FILL_COLOR = "C6EFCE"

# ──── KPI ────
KPI_DAILY_WINDOW_DAYS = 30
KPI_MENU_BRAND_TOP_N = 6

# ──── 외부 API ────
SHEET_EXPORT_URL = "https://docs.google.com/spreadsheets/d/{spreadsheet_id}/export?format=csv&gid={gid}"
KAKAO_LOCAL_BASE_URL = "https://dapi.kakao.com"
KAKAO_SEARCH_SIZE = 5
