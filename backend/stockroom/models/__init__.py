from .catalog import Category, Product, ProductVariant
from .inventory import InventoryLog, Alert, LOG_TYPES, ALERT_TYPES
from .sales import Sale, SaleItem, PAYMENT_METHODS

__all__ = [
    'Category', 'Product', 'ProductVariant',
    'InventoryLog', 'Alert', 'LOG_TYPES', 'ALERT_TYPES',
    'Sale', 'SaleItem', 'PAYMENT_METHODS',
]
