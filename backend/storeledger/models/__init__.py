from .auth import User, SessionToken
from .tenancy import Store
from .customers import Customer
from .inventory import Product, Supplier, PRODUCT_CATEGORIES
from .ledger import Sale, SaleLine, Buying, BuyingLine

__all__ = [
    'User', 'SessionToken', 'Store',
    'Customer', 'Supplier', 'Product', 'PRODUCT_CATEGORIES',
    'Sale', 'SaleLine', 'Buying', 'BuyingLine',
]
