from .inventory import Product
from .sales import Sale
from .auth import User
from .settings import LocalSetting

__all__ = [
    'Product',
    'Sale',
    'User',
    'LocalSetting',
]
