"""애플리케이션 설정"""
from pydantic_settings import BaseSettings
from typing import Optional


class Settings(BaseSettings):
    """환경변수 기반 설정"""

    # Google Sheets
    spreadsheet_id: str = "141RCJ5K5P9CdhpW60ojMFSPV7mR6CPRz"
    menu_sheet_gid: str = "202191104"
    order_history_gid: str = "1771639339"
    individual_order_gid: str = "809784246"

    # Kakao Local API
    kakao_api_key: Optional[str] = None

    # Google Apps Script (개별주문 저장/검색)
    apps_script_url: Optional[str] = None

    # HTTP
    request_timeout: int = 15

    # KPI (주문 이력 시트 컬럼명)
    kpi_date_columns: str = "발주일,주문일자,수집일자(YYYYMMDD)"
    kpi_quantity_column: str = "수량"
    kpi_mall_columns: str = "판매몰,쇼핑몰명(1),쇼핑몰명"

    # Logging
    log_level: str = "INFO"

    class Config:
        env_file = ".env"
        case_sensitive = False


# 전역 설정 인스턴스
settings = Settings()
