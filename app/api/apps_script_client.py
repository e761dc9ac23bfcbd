"""
Google Apps Script 개별주문 저장소 클라이언트
============================================
POST {url}  body={"orders": [...], "sheet_gid": gid}  → 저장 건수
GET  {url}?name=&phone=                              → 저장된 주문 (검색)
"""
import logging
from typing import Any, Dict, List, Optional, Sequence, Tuple

import requests

from app.config import Settings, settings
from app.models.order import IndividualOrder, SavedOrder, to_int

logger = logging.getLogger(__name__)


class AppsScriptError(Exception):
    """Apps Script 호출 오류"""
    def __init__(self, message: str, status_code: int = 0):
        self.message = message
        self.status_code = status_code
        super().__init__(f"[{status_code}] {message}" if status_code else message)


class AppsScriptClient:
    """개별주문 저장/검색 클라이언트"""

    def __init__(self, url: Optional[str], sheet_gid: str = "", timeout: int = 15):
        self.url = url
        self.sheet_gid = sheet_gid
        self.timeout = timeout
        self._session = requests.Session()

    @classmethod
    def from_settings(cls, cfg: Optional[Settings] = None) -> "AppsScriptClient":
        cfg = cfg or settings
        return cls(cfg.apps_script_url, sheet_gid=cfg.individual_order_gid, timeout=cfg.request_timeout)

    def _require_url(self) -> str:
        if not self.url:
            raise AppsScriptError("APPS_SCRIPT_URL이 설정되지 않았습니다")
        return self.url

    @staticmethod
    def _parse_json(response) -> Dict[str, Any]:
        try:
            data = response.json()
        except ValueError:
            return {}
        return data if isinstance(data, dict) else {}

    def save_orders(self, orders: Sequence[IndividualOrder]) -> int:
        """
        개별주문 저장

        Args:
            orders: 저장할 주문

        Returns:
            저장 건수 (응답에 count가 없으면 보낸 건수)

        Raises:
            AppsScriptError: 요청 실패 또는 success=false 응답
        """
        url = self._require_url()
        payload = {"orders": [o.to_dict() for o in orders], "sheet_gid": self.sheet_gid}

        try:
            response = self._session.post(url, json=payload, timeout=self.timeout)
        except requests.exceptions.RequestException as e:
            raise AppsScriptError(f"개별주문 저장 실패: {e}") from e

        if response.status_code >= 400:
            raise AppsScriptError("개별주문 저장 응답 오류", response.status_code)

        data = self._parse_json(response)
        if data.get("success") is False:
            raise AppsScriptError(f"개별주문 저장 실패: {data.get('error', '알 수 없는 오류')}")

        count = to_int(data.get("count"), default=len(orders))
        logger.info(f"개별주문 저장 완료: {count}건")
        return count

    def fetch_saved_orders(
        self,
        name: Optional[str] = None,
        phone: Optional[str] = None,
    ) -> Tuple[List[SavedOrder], bool]:
        """
        저장된 개별주문 조회 (이름/전화번호로 검색 가능)

        Returns:
            (주문 목록, 검색 모드 여부)
        """
        url = self._require_url()
        params = {}
        if name:
            params["name"] = name
        if phone:
            params["phone"] = phone

        try:
            response = self._session.get(url, params=params or None, timeout=self.timeout)
        except requests.exceptions.RequestException as e:
            raise AppsScriptError(f"개별주문 불러오기 실패: {e}") from e

        if response.status_code != 200:
            raise AppsScriptError("서버 응답 오류", response.status_code)

        data = self._parse_json(response)
        if not data.get("success"):
            raise AppsScriptError(f"개별주문 불러오기 실패: {data.get('error', '알 수 없는 오류')}")

        orders = [SavedOrder.from_api(o) for o in data.get("orders") or []]
        search_mode = bool(data.get("searchMode", bool(params)))
        logger.info(f"개별주문 조회: {len(orders)}건 (검색={search_mode})")
        return orders, search_mode
