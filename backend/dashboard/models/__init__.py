"""Importing this package registers every table on ``Base.metadata``."""
from .authz import Base, AdminAccount
from .product import Product
from .sale import Sale
from .settings import CompanySettings
from .audit import AuditLog

__all__ = ['Base', 'AdminAccount', 'Product', 'Sale', 'CompanySettings', 'AuditLog']
