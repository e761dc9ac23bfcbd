"""발주서(주문) 모델"""
from dataclasses import dataclass, field, asdict
from typing import Any, Dict, List, Optional, Tuple


def to_int(value: Optional[Any], default: int = 0) -> int:
    """API 숫자 필드 변환 ("5,000", "2.0", None → 5000, 2, default)"""
    try:
        return int(float(str(value).replace(",", "")))
    except (TypeError, ValueError, OverflowError):
        return default


@dataclass(frozen=True)
class OrderRecord:
    """원본 발주서 한 행 (컬럼 매핑 후)"""
    option_primary: str
    option_secondary: str
    quantity: int
    address: str = ""
    recipient_name: str = ""
    recipient_phone: str = ""
    raw_columns: Tuple[Any, ...] = ()


@dataclass(frozen=True)
class ClassifiedOrder:
    """브랜드가 확정된 주문"""
    record: OrderRecord
    brand: str
    unit_supply_price: int = 0
    unit_shipping_fee: int = 0
    shipping_fee_applied: int = 0
    display_option: str = ""

    # OrderRecord 필드 바로가기
    @property
    def address(self) -> str:
        return self.record.address

    @property
    def quantity(self) -> int:
        return self.record.quantity

    @property
    def group_key(self) -> Tuple[str, str]:
        """묶음배송 그룹 키 (주소, 브랜드)"""
        return (self.record.address, self.brand)

    @property
    def total_amount(self) -> int:
        """공급가 × 수량 + 적용 택배비"""
        return self.unit_supply_price * self.record.quantity + self.shipping_fee_applied


@dataclass
class BrandBucket:
    """브랜드별 주문 묶음 (화면 표시용 뷰)"""
    brand: str
    orders: List[ClassifiedOrder] = field(default_factory=list)

    @property
    def order_count(self) -> int:
        return len(self.orders)

    @property
    def total_quantity(self) -> int:
        return sum(o.quantity for o in self.orders)


@dataclass
class IndividualOrder:
    """개별주문 입력 한 건"""
    recipient_name: str
    recipient_phone: str
    address: str
    product_name: str = ""
    option: str = ""
    quantity: int = 1
    supply_price: int = 0
    shipping_fee: int = 0

    @property
    def total(self) -> int:
        return self.supply_price * self.quantity + self.shipping_fee

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class SavedOrder:
    """Apps Script에 저장된 개별주문"""
    saved_time: str
    recipient_name: str
    recipient_phone: str
    address: str
    product_name: str = ""
    option: str = ""
    quantity: int = 0
    supply_price: int = 0
    shipping_fee: int = 0
    total: int = 0

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "SavedOrder":
        """API 응답 딕셔너리 → SavedOrder (숫자 필드는 관대하게 변환)"""
        return cls(
            saved_time=str(data.get("saved_time", "") or ""),
            recipient_name=str(data.get("recipient_name", "") or ""),
            recipient_phone=str(data.get("recipient_phone", "") or ""),
            address=str(data.get("address", "") or ""),
            product_name=str(data.get("product_name", "") or ""),
            option=str(data.get("option", "") or ""),
            quantity=to_int(data.get("quantity")),
            supply_price=to_int(data.get("supply_price")),
            shipping_fee=to_int(data.get("shipping_fee")),
            total=to_int(data.get("total")),
        )
