import pytest
from sqlalchemy.exc import OperationalError, IntegrityError
from dashboard import get_db
from dashboard.errors import NotFound, TransactionFailure
from dashboard.models.product import Product
from dashboard.services import ledger, transactions
from dashboard.services.policy import Principal
from dashboard.services.transactions import run_in_transaction
from tests.test_utils_seed import make_product, stock_of

SUPER = Principal.build(1, 'super-admin')


def _locked():
    return OperationalError('UPDATE products', {}, Exception('database is locked'))


def test_contention_is_retried_then_succeeds(monkeypatch):
    monkeypatch.setattr(transactions.time, 'sleep', lambda s: None)
    calls = []

    def op():
        calls.append(1)
        if len(calls) < 3:
            raise _locked()
        return 'done'

    assert run_in_transaction(get_db(), op, attempts=3) == 'done'
    assert len(calls) == 3


def test_contention_exhausted_becomes_transaction_failure(monkeypatch):
    monkeypatch.setattr(transactions.time, 'sleep', lambda s: None)

    def op():
        raise _locked()

    with pytest.raises(TransactionFailure) as exc:
        run_in_transaction(get_db(), op, attempts=2)
    payload = exc.value.to_payload()['error']
    assert payload['status'] == 503 and payload['retryable'] is True
    # store internals stay out of the message
    assert 'locked' not in payload['detail']


def test_domain_errors_propagate_without_retry():
    calls = []

    def op():
        calls.append(1)
        raise NotFound('Product not found')

    with pytest.raises(NotFound):
        run_in_transaction(get_db(), op)
    assert calls == [1]


def test_other_store_errors_roll_back_and_fail(monkeypatch):
    session = get_db()

    def op():
        session.add(Product(name='Half', category='Food', price=1, stock=1, images=[]))
        session.flush()
        raise IntegrityError('INSERT', {}, Exception('boom'))

    with pytest.raises(TransactionFailure):
        run_in_transaction(session, op)
    assert session.query(Product).filter_by(name='Half').count() == 0


def test_failed_sale_commit_applies_nothing(monkeypatch):
    monkeypatch.setattr(transactions.time, 'sleep', lambda s: None)
    phone = make_product('Phone', 'Electronics', stock=10)
    session = get_db()

    def broken_commit():
        raise _locked()

    monkeypatch.setattr(session, 'commit', broken_commit)
    with pytest.raises(TransactionFailure):
        ledger.record_sale(SUPER, phone.id, 3)
    monkeypatch.undo()
    assert stock_of(phone.id) == 10
    assert ledger.list_sales(SUPER) == []
