"""
구글시트 CSV 내보내기 클라이언트
================================
공개 스프레드시트의 export?format=csv 엔드포인트로 시트를 행 목록으로 읽는다.

사용법:
    client = GoogleSheetsClient.from_settings()
    rows = client.fetch_rows(settings.menu_sheet_gid)
    records = client.fetch_records(settings.order_history_gid)
"""
import io
import logging
from typing import Dict, List, Optional

import pandas as pd
import requests

from app.config import Settings, settings
from app.constants import SHEET_EXPORT_URL

logger = logging.getLogger(__name__)


class SheetFetchError(Exception):
    """구글시트 읽기 오류"""
    def __init__(self, message: str, status_code: int = 0):
        self.message = message
        self.status_code = status_code
        super().__init__(f"[{status_code}] {message}" if status_code else message)


class GoogleSheetsClient:
    """구글시트 CSV 내보내기 클라이언트"""

    def __init__(self, spreadsheet_id: str, timeout: int = 15):
        self.spreadsheet_id = spreadsheet_id
        self.timeout = timeout
        self._session = requests.Session()

    @classmethod
    def from_settings(cls, cfg: Optional[Settings] = None) -> "GoogleSheetsClient":
        cfg = cfg or settings
        return cls(cfg.spreadsheet_id, timeout=cfg.request_timeout)

    def export_url(self, gid: str) -> str:
        return SHEET_EXPORT_URL.format(spreadsheet_id=self.spreadsheet_id, gid=gid)

    def _fetch_text(self, gid: str) -> str:
        url = self.export_url(gid)
        logger.debug(f"시트 CSV 요청: gid={gid}")
        try:
            response = self._session.get(url, timeout=self.timeout)
        except requests.exceptions.RequestException as e:
            raise SheetFetchError(f"구글시트 접근 실패 (gid={gid}): {e}") from e

        if response.status_code != 200:
            raise SheetFetchError(f"구글시트 응답 오류 (gid={gid})", response.status_code)

        response.encoding = "utf-8"
        return response.text

    def fetch_rows(self, gid: str) -> List[List[str]]:
        """
        시트 → 헤더 포함 행 목록 (모든 셀 문자열, 빈 셀은 "")

        Args:
            gid: 시트 탭 gid

        Returns:
            [[셀, ...], ...]

        Raises:
            SheetFetchError: 네트워크/응답/파싱 오류
        """
        text = self._fetch_text(gid)
        if not text.strip():
            return []

        try:
            df = pd.read_csv(io.StringIO(text), header=None, dtype=str, keep_default_na=False)
        except (pd.errors.ParserError, pd.errors.EmptyDataError) as e:
            raise SheetFetchError(f"CSV 파싱 실패 (gid={gid}): {e}") from e

        rows = [[cell.strip() for cell in row] for row in df.itertuples(index=False, name=None)]
        logger.info(f"시트 로드: gid={gid} {len(rows)}행")
        return rows

    def fetch_records(self, gid: str) -> List[Dict[str, str]]:
        """시트 → [{헤더: 값}, ...] (첫 행이 헤더)"""
        rows = self.fetch_rows(gid)
        if len(rows) < 2:
            return []
        headers = rows[0]
        return [
            {header: (row[idx] if idx < len(row) else "") for idx, header in enumerate(headers)}
            for row in rows[1:]
        ]
