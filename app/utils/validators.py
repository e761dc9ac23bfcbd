"""
입력 검증 모듈
==============
개별주문 입력 폼 검증

사용법:
    validator = IndividualOrderValidator()
    errors = validator.validate(order)
    if errors:
        print(f"검증 실패: {errors}")
"""
import re
import logging
from typing import Any, List, Optional, Tuple
from dataclasses import dataclass

from app.models.order import IndividualOrder

logger = logging.getLogger(__name__)


@dataclass
class ValidationError:
    """검증 오류"""
    field: str
    message: str
    value: Any = None


class IndividualOrderValidator:
    """
    개별주문 검증기

    수취인명, 전화번호, 주소는 필수. 전화번호 형식은 경고만 남긴다.
    """

    # 010-1234-5678, 01012345678, 02-123-4567, 031-1234-5678
    PHONE_PATTERN = re.compile(r'^0\d{1,2}-?\d{3,4}-?\d{4}$')

    MIN_QUANTITY = 1

    REQUIRED_FIELDS = {
        "recipient_name": "수취인명",
        "recipient_phone": "전화번호",
        "address": "주소",
    }

    def validate_phone(self, phone: str) -> Optional[ValidationError]:
        """
        전화번호 형식 검증

        Args:
            phone: 전화번호 문자열

        Returns:
            ValidationError 또는 None (유효한 경우)
        """
        clean_phone = re.sub(r'[\s.]', '', str(phone or ''))
        if not self.PHONE_PATTERN.match(clean_phone):
            return ValidationError("recipient_phone", "전화번호 형식이 올바르지 않습니다", phone)
        return None

    def validate_quantity(self, quantity: Any) -> Optional[ValidationError]:
        try:
            qty = int(quantity)
        except (ValueError, TypeError):
            return ValidationError("quantity", f"수량이 숫자가 아닙니다: {quantity}", quantity)
        if qty < self.MIN_QUANTITY:
            return ValidationError("quantity", f"수량은 {self.MIN_QUANTITY}개 이상이어야 합니다", qty)
        return None

    def validate(self, order: IndividualOrder) -> List[ValidationError]:
        """
        개별주문 전체 검증

        Args:
            order: 입력된 주문

        Returns:
            ValidationError 리스트 (빈 리스트면 유효)
        """
        errors = []

        for field, label in self.REQUIRED_FIELDS.items():
            if not str(getattr(order, field, "") or "").strip():
                errors.append(ValidationError(field, f"{label}은(는) 필수입니다"))

        err = self.validate_quantity(order.quantity)
        if err:
            errors.append(err)

        return errors

    def warnings(self, order: IndividualOrder) -> List[ValidationError]:
        """저장은 가능하지만 확인이 필요한 항목"""
        warnings = []
        if order.recipient_phone:
            err = self.validate_phone(order.recipient_phone)
            if err:
                warnings.append(err)
        if not order.option:
            warnings.append(ValidationError("option", "옵션이 선택되지 않았습니다"))

        for w in warnings:
            logger.warning(f"검증 경고: {w.field} - {w.message}")
        return warnings


def validate_individual_order(order: IndividualOrder) -> Tuple[bool, List[str]]:
    """
    간단한 개별주문 검증 함수

    Args:
        order: 개별주문

    Returns:
        (유효 여부, 에러 메시지 리스트)
    """
    validator = IndividualOrderValidator()
    errors = validator.validate(order)

    if errors:
        return False, [e.message for e in errors]
    return True, []
