"""
카카오 로컬 API 클라이언트
==========================
주소 검색 / 키워드(장소) 검색 → 배송지 후보 문자열

사용법:
    client = KakaoLocalClient(api_key="...")
    candidates = client.search("판교역로 235")
"""
import logging
from typing import Any, Dict, List, Optional

import requests

from app.config import Settings, settings
from app.constants import KAKAO_LOCAL_BASE_URL, KAKAO_SEARCH_SIZE

logger = logging.getLogger(__name__)


class KakaoApiError(Exception):
    """카카오 API 오류"""
    def __init__(self, message: str, status_code: int = 0):
        self.message = message
        self.status_code = status_code
        super().__init__(f"[{status_code}] {message}" if status_code else message)


class KakaoLocalClient:
    """카카오 로컬 검색 API 클라이언트"""

    ADDRESS_PATH = "/v2/local/search/address.json"
    KEYWORD_PATH = "/v2/local/search/keyword.json"

    def __init__(self, api_key: Optional[str], timeout: int = 15):
        self.api_key = api_key
        self.timeout = timeout
        self._session = requests.Session()

    @classmethod
    def from_settings(cls, cfg: Optional[Settings] = None) -> "KakaoLocalClient":
        cfg = cfg or settings
        return cls(cfg.kakao_api_key, timeout=cfg.request_timeout)

    def _get(self, path: str, query: str) -> Dict[str, Any]:
        if not self.api_key:
            raise KakaoApiError("KAKAO_API_KEY가 설정되지 않았습니다")

        try:
            response = self._session.get(
                f"{KAKAO_LOCAL_BASE_URL}{path}",
                params={"query": query, "size": KAKAO_SEARCH_SIZE},
                headers={"Authorization": f"KakaoAK {self.api_key}"},
                timeout=self.timeout,
            )
        except requests.exceptions.RequestException as e:
            raise KakaoApiError(f"카카오 API 요청 실패: {e}") from e

        if response.status_code != 200:
            raise KakaoApiError("카카오 API 응답 오류", response.status_code)

        try:
            return response.json()
        except ValueError as e:
            raise KakaoApiError(f"카카오 API 응답 파싱 실패: {e}") from e

    def search_address(self, query: str) -> List[str]:
        """
        주소 검색

        도로명 주소를 우선하고 건물명이 있으면 "(건물명)"을 붙인다.
        """
        data = self._get(self.ADDRESS_PATH, query)
        results = []
        for doc in data.get("documents") or []:
            road = doc.get("road_address")
            addr = doc.get("address")
            if road:
                full_addr = road.get("address_name") or ""
                if road.get("building_name"):
                    full_addr += f" ({road['building_name']})"
            elif addr:
                full_addr = addr.get("address_name") or ""
            else:
                full_addr = doc.get("address_name") or ""
            if full_addr:
                results.append(full_addr)
        return results

    def search_keyword(self, query: str) -> List[str]:
        """키워드(장소명) 검색 → "주소 (장소명)" """
        data = self._get(self.KEYWORD_PATH, query)
        results = []
        for doc in data.get("documents") or []:
            place_name = doc.get("place_name") or ""
            display_addr = doc.get("road_address_name") or doc.get("address_name") or ""
            if place_name and display_addr:
                results.append(f"{display_addr} ({place_name})")
            elif display_addr:
                results.append(display_addr)
        return results

    def search(self, query: str) -> List[str]:
        """주소 + 키워드 검색 결과 합치기 (중복 제거, 순서 유지)"""
        query = (query or "").strip()
        if not query:
            return []
        combined = self.search_address(query) + self.search_keyword(query)
        results = list(dict.fromkeys(combined))
        logger.info(f"주소 검색 '{query}': {len(results)}건")
        return results
