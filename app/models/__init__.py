"""도메인 모델"""
from app.models.menu import Menu, MenuEntry
from app.models.order import (
    OrderRecord,
    ClassifiedOrder,
    BrandBucket,
    IndividualOrder,
    SavedOrder,
)
from app.models.kpi import OrderKPIRow, KPIStats

__all__ = [
    "Menu",
    "MenuEntry",
    "OrderRecord",
    "ClassifiedOrder",
    "BrandBucket",
    "IndividualOrder",
    "SavedOrder",
    "OrderKPIRow",
    "KPIStats",
]
