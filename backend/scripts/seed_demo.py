#!/usr/bin/env python
"""Seed a super-admin, the demo catalog and a spread of past sales.

Usage:
    python backend/scripts/seed_demo.py             # seed normally
    python backend/scripts/seed_demo.py --dry-run   # run logic then rollback (no DB changes)
    python backend/scripts/seed_demo.py --no-sales  # accounts and products only
"""
from __future__ import annotations
import os, sys, argparse, random
from datetime import datetime, timedelta, timezone
from sqlalchemy import select, delete

# Allow running from repo root
sys.path.append(os.path.abspath('backend'))
sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from dashboard import create_app, get_db  # type: ignore  # noqa: E402
from dashboard.constants.roles import Role  # noqa: E402
from dashboard.models import Base, AdminAccount, Product, Sale  # noqa: E402
from dashboard.services import catalog, ledger  # noqa: E402
from dashboard.services.principal import principal_from_account  # noqa: E402
from seeds.demo_catalog import SUPER_ADMIN, PRODUCTS  # noqa: E402


def ensure_super_admin(session) -> AdminAccount:
    email = os.getenv('SEED_ADMIN_EMAIL', SUPER_ADMIN['email']).lower()
    account = session.execute(select(AdminAccount).where(AdminAccount.email == email)).scalar_one_or_none()
    if account is None:
        account = AdminAccount(name=SUPER_ADMIN['name'], email=email, role=Role.SUPER_ADMIN, assigned_categories=[])
        session.add(account)
        print(f"[INFO] Created super admin {email}")
    account.role = Role.SUPER_ADMIN
    account.set_password(os.getenv('SEED_ADMIN_PASSWORD', SUPER_ADMIN['password']))
    session.flush()
    return account


def seed_products(session, principal):
    # Fresh start: products cascade to their sales
    session.execute(delete(Sale))
    session.execute(delete(Product))
    session.flush()
    return [catalog.create_product(principal, dict(p), session=session) for p in PRODUCTS]


def seed_sales(session, principal, products, rng: random.Random):
    created = 0
    now = datetime.now(timezone.utc)
    for product in products:
        for _ in range(rng.randint(3, 5)):
            quantity = rng.randint(1, 5)
            if product.stock < quantity:
                break
            sale = ledger.record_sale(principal, product.id, quantity, session=session)
            sale.date = now - timedelta(days=rng.randint(0, 90))
            session.commit()
            created += 1
    return created


def parse_args():
    p = argparse.ArgumentParser(description='Seed demo dashboard data')
    p.add_argument('--dry-run', action='store_true', help='Rollback after operations (no commit)')
    p.add_argument('--no-sales', action='store_true', help='Skip sample sales')
    p.add_argument('--random-seed', type=int, default=42, help='Seed for the sample sales generator')
    return p.parse_args()


def main():
    args = parse_args()
    app = create_app()
    with app.app_context():
        session = get_db()
        # Lightweight bootstrap when migrations have not been run yet
        Base.metadata.create_all(session.get_bind())
        if args.dry_run:
            account = ensure_super_admin(session)
            print(f"[DRY-RUN] (rolled back) Would seed {len(PRODUCTS)} products for {account.email}")
            session.rollback()
            return
        account = ensure_super_admin(session)
        session.commit()
        principal = principal_from_account(account)
        products = seed_products(session, principal)
        print(f"[INFO] Created {len(products)} sample products")
        if not args.no_sales:
            count = seed_sales(session, principal, products, random.Random(args.random_seed))
            print(f"[INFO] Created {count} sample sales records")
        print('[DONE]')


if __name__ == '__main__':
    main()
