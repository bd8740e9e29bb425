"""Test seeding utilities to reduce duplication.

These helpers create accounts, products and sales directly through the session and
hand back JWT headers obtained from the real login endpoint.
"""
from decimal import Decimal
from typing import Iterable, Optional
from dashboard import get_db
from dashboard.constants.roles import Role
from dashboard.models.authz import AdminAccount
from dashboard.models.product import Product
from dashboard.services.policy import Principal
from dashboard.services.principal import principal_from_account

PASSWORD = 'pw-secret'


def ensure_account(email: str, categories: Iterable[str] = (), role: Role = Role.ADMIN,
                   name: Optional[str] = None, password: str = PASSWORD) -> AdminAccount:
    """Idempotently ensure an account exists (by email). Returns the AdminAccount."""
    session = get_db()
    account = session.query(AdminAccount).filter_by(email=email.lower()).one_or_none()
    if not account:
        account = AdminAccount(name=name or email.split('@')[0], email=email.lower(), role=role,
                               assigned_categories=list(categories), password_hash='')
        account.set_password(password)
        session.add(account); session.commit(); session.refresh(account)
    return account


def ensure_super_admin(email: str = 'root@example.com') -> AdminAccount:
    return ensure_account(email, role=Role.SUPER_ADMIN, name='Root')


def principal_for(account: AdminAccount) -> Principal:
    return principal_from_account(account)


def make_product(name: str = 'Widget', category: str = 'Electronics', price: str = '10.00',
                 stock: int = 10, session=None) -> Product:
    session = session or get_db()
    product = Product(name=name, category=category, price=Decimal(price), stock=stock, images=[])
    session.add(product); session.commit(); session.refresh(product)
    return product


def login(client, email: str, password: str = PASSWORD) -> str:
    resp = client.post('/auth/login', json={'email': email, 'password': password})
    assert resp.status_code == 200, resp.get_json()
    return resp.get_json()['access_token']


def auth_headers(client, account: AdminAccount, password: str = PASSWORD):
    return {'Authorization': f'Bearer {login(client, account.email, password)}'}


def stock_of(product_id: int, session=None) -> int:
    session = session or get_db()
    return session.query(Product.stock).filter(Product.id == product_id).scalar()


__all__ = [
    'PASSWORD', 'ensure_account', 'ensure_super_admin', 'principal_for', 'make_product',
    'login', 'auth_headers', 'stock_of',
]
