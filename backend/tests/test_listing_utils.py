import pytest
from dashboard import get_db
from dashboard.config.pagination import normalize_pagination, MAX_LIMIT, DEFAULT_LIMIT
from dashboard.errors import ValidationError
from dashboard.models.product import Product
from dashboard.utils.filters import apply_filters
from dashboard.utils.sorting import apply_multi_sort
from dashboard.utils.validation import parse_price, parse_int, validate_category_set
from tests.test_utils_seed import make_product


def test_normalize_pagination_clamps():
    assert normalize_pagination(None, None) == (DEFAULT_LIMIT, 0)
    assert normalize_pagination('1000', '-5') == (MAX_LIMIT, 0)
    assert normalize_pagination('0', '3') == (1, 3)
    with pytest.raises(ValidationError):
        normalize_pagination('ten', None)


def test_multi_sort_with_tie_breaker():
    make_product('B', 'Food', price='1.00')
    make_product('A', 'Food', price='1.00')
    make_product('C', 'Food', price='2.00')
    q = get_db().query(Product)
    allowed = {'price': Product.price, 'name': Product.name}
    rows = apply_multi_sort(q, '-price,name', allowed, Product.id.asc(), Product.id.asc()).all()
    assert [p.name for p in rows] == ['C', 'A', 'B']
    with pytest.raises(ValidationError):
        apply_multi_sort(q, 'nope', allowed, Product.id.asc(), Product.id.asc())


def test_apply_filters_skips_empty_and_validates():
    make_product('Keep', 'Food', stock=1)
    make_product('Drop', 'Home', stock=1)
    q = get_db().query(Product)
    specs = {
        'category': {'op': lambda q, v: q.filter(Product.category == v)},
        'min_stock': {'op': lambda q, v: q.filter(Product.stock >= v), 'coerce': int, 'validate': lambda v: v >= 0},
    }
    assert apply_filters(q, specs, {'category': ''}).count() == 2
    assert [p.name for p in apply_filters(q, specs, {'category': 'Food'})] == ['Keep']
    with pytest.raises(ValidationError):
        apply_filters(q, specs, {'min_stock': 'x'})
    with pytest.raises(ValidationError):
        apply_filters(q, specs, {'min_stock': '-1'})


def test_value_parsers():
    assert str(parse_price('5')) == '5.00'
    assert parse_int('7', 'stock', minimum=0) == 7
    with pytest.raises(ValidationError):
        parse_int(True, 'stock')
    assert validate_category_set(['Sports', 'Food', 'Sports']) == ['Food', 'Sports']
