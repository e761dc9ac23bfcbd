"""메뉴판 모델: 옵션 문자열 → 브랜드(공급처) 매핑"""
from collections import Counter
from dataclasses import dataclass
from typing import Dict, Iterator, List, Optional, Tuple


@dataclass(frozen=True)
class MenuEntry:
    """메뉴판 한 행 (옵션 단위)"""
    option_text: str
    brand: str
    product_name: str = ""
    supply_price: int = 0
    shipping_fee: int = 0
    no: int = 0


class Menu:
    """
    옵션 문자열 기준 메뉴판

    시트 행 순서(삽입 순서)를 유지하며, 같은 옵션이 다시 들어오면
    마지막 행이 이긴다.
    """

    def __init__(self, entries: Optional[List[MenuEntry]] = None):
        self._entries: Dict[str, MenuEntry] = {}
        for entry in entries or []:
            self.add(entry)

    @classmethod
    def from_dict(cls, mapping: Dict[str, str]) -> "Menu":
        """{옵션: 브랜드} 딕셔너리로 생성 (테스트/간이 입력용)"""
        return cls([MenuEntry(option_text=k, brand=v) for k, v in mapping.items()])

    def add(self, entry: MenuEntry):
        self._entries[entry.option_text] = entry

    def entry_for(self, option: str) -> Optional[MenuEntry]:
        return self._entries.get(option)

    def brand_for(self, option: str) -> Optional[str]:
        entry = self._entries.get(option)
        return entry.brand if entry else None

    def items(self) -> Iterator[Tuple[str, MenuEntry]]:
        return iter(self._entries.items())

    def entries(self) -> List[MenuEntry]:
        return list(self._entries.values())

    def brand_counts(self) -> List[Tuple[str, int]]:
        """브랜드별 옵션 수 (많은 순)"""
        return Counter(e.brand for e in self._entries.values()).most_common()

    def __contains__(self, option: str) -> bool:
        return option in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __bool__(self) -> bool:
        return bool(self._entries)

    def __repr__(self):
        return f"<Menu(entries={len(self._entries)})>"
