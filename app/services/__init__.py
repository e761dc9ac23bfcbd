"""서비스 모듈"""
from app.services.brand_classifier import (
    normalize_text,
    resolve_brand,
    resolve_entry,
    build_menu,
    build_full_menu,
)
from app.services.order_splitter import ColumnLayout, split_orders, bucket_view
from app.services.shipping import ShippingPolicy, apply_grouped_shipping, grand_total
from app.services.invoice_merger import collect_invoices, merge_invoices, InvoiceMergeResult

__all__ = [
    'normalize_text',
    'resolve_brand',
    'resolve_entry',
    'build_menu',
    'build_full_menu',
    'ColumnLayout',
    'split_orders',
    'bucket_view',
    'ShippingPolicy',
    'apply_grouped_shipping',
    'grand_total',
    'collect_invoices',
    'merge_invoices',
    'InvoiceMergeResult',
]
