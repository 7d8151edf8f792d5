from .auth import User, SessionToken
from .purchasing import PurchaseOrder
from .company import CompanyProfile

__all__ = [
    'User', 'SessionToken',
    'PurchaseOrder',
    'CompanyProfile',
]
