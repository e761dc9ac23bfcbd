"""유틸리티 모듈"""

from .validators import IndividualOrderValidator, ValidationError, validate_individual_order
from .excel import read_sheet_rows, cell_text, is_blank

__all__ = [
    "IndividualOrderValidator",
    "ValidationError",
    "validate_individual_order",
    "read_sheet_rows",
    "cell_text",
    "is_blank",
]
