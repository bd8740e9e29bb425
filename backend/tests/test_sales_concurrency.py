import threading
import pytest
from decimal import Decimal
from sqlalchemy import create_engine, update
from sqlalchemy.orm import sessionmaker
from dashboard.errors import InsufficientStock
from dashboard.models import Base
from dashboard.models.product import Product
from dashboard.models.sale import Sale
from dashboard.services import ledger
from dashboard.services.policy import Principal

SUPER = Principal.build(1, 'super-admin')


@pytest.fixture()
def file_sessions(tmp_path):
    """Independent sessions over a file-backed database, one per simulated request."""
    engine = create_engine(
        f"sqlite+pysqlite:///{tmp_path / 'race.db'}",
        future=True,
        connect_args={'check_same_thread': False, 'timeout': 10},
    )
    Base.metadata.create_all(engine)
    factory = sessionmaker(bind=engine, expire_on_commit=False, autoflush=False)
    yield factory
    engine.dispose()


def _seed(factory, stock):
    with factory() as s:
        p = Product(name='Console', category='Electronics', price=Decimal('300.00'), stock=stock, images=[])
        s.add(p); s.commit()
        return p.id


def test_concurrent_sales_never_oversell(file_sessions):
    pid = _seed(file_sessions, 10)
    barrier = threading.Barrier(2)
    results, errors = [], []

    def sell(qty):
        session = file_sessions()
        try:
            barrier.wait()
            results.append(ledger.record_sale(SUPER, pid, qty, session=session).quantity)
        except InsufficientStock as exc:
            errors.append(exc)
        finally:
            session.close()

    threads = [threading.Thread(target=sell, args=(q,)) for q in (7, 6)]
    for t in threads:
        t.start()
    for t in threads:
        t.join(timeout=30)

    assert len(results) == 1 and len(errors) == 1
    with file_sessions() as s:
        assert s.get(Product, pid).stock == 10 - results[0]
        assert s.query(Sale).count() == 1


def test_stock_is_reread_inside_the_transaction(file_sessions):
    pid = _seed(file_sessions, 10)
    stale = file_sessions()
    assert stale.get(Product, pid).stock == 10
    # another request drains the stock after this session loaded the product
    with file_sessions() as other:
        other.execute(update(Product).where(Product.id == pid).values(stock=2))
        other.commit()
    stale.commit()
    with pytest.raises(InsufficientStock) as exc:
        ledger.record_sale(SUPER, pid, 5, session=stale)
    assert exc.value.available == 2
    sale = ledger.record_sale(SUPER, pid, 2, session=stale)
    assert sale.revenue == Decimal('600.00')
    assert stale.get(Product, pid).stock == 0
    stale.close()
