from .stores import StorePoint, CashRegister, Seller, SellerWorkSchedule
from .inventory import Supplier, Equipment
from .sales import Sale, SaleItem, CashLimitViolation, PAYMENT_CASH, PAYMENT_CASHLESS, PAYMENT_TYPES
from .orders import CustomerOrder, SupplierOrder

__all__ = [
    'StorePoint', 'CashRegister', 'Seller', 'SellerWorkSchedule',
    'Supplier', 'Equipment',
    'Sale', 'SaleItem', 'CashLimitViolation',
    'PAYMENT_CASH', 'PAYMENT_CASHLESS', 'PAYMENT_TYPES',
    'CustomerOrder', 'SupplierOrder',
]
