from dashboard.constants.roles import Role
from dashboard.models.product import Product
from dashboard.services.policy import (
    Principal, CategoryFilter, MATCH_ALL, MATCH_NONE,
    can_read_category, can_write_category, visible_category_filter, can_manage_team, can_delete_account,
)
from tests.test_utils_seed import make_product, ensure_super_admin, ensure_account, principal_for
from dashboard import get_db

SUPER = Principal.build(1, 'super-admin')
ELEC = Principal.build(2, 'admin', ['Electronics'])
NOBODY = Principal.build(3, Role.ADMIN, [])


def test_super_admin_reads_and_writes_everything():
    for cat in ('Electronics', 'Food', 'Sports'):
        assert can_read_category(SUPER, cat)
        assert can_write_category(SUPER, cat)
    assert visible_category_filter(SUPER) is MATCH_ALL


def test_admin_limited_to_assigned_categories():
    assert can_read_category(ELEC, 'Electronics')
    assert can_write_category(ELEC, 'Electronics')
    assert not can_read_category(ELEC, 'Clothing')
    assert not can_write_category(ELEC, 'Clothing')
    assert not can_write_category(ELEC, None)
    assert not can_write_category(ELEC, ['Electronics'])
    assert not can_read_category(ELEC, {'Electronics': 1})
    f = visible_category_filter(ELEC)
    assert f.allows('Electronics') and not f.allows('Clothing')
    assert not f.allows(['Electronics'])


def test_zero_categories_means_zero_visibility():
    f = visible_category_filter(NOBODY)
    assert f is MATCH_NONE
    assert f.match_none
    assert not f.allows('Electronics')


def test_team_management_and_account_deletion_rules():
    assert can_manage_team(SUPER)
    assert not can_manage_team(ELEC)
    assert can_delete_account(SUPER, ELEC)
    assert not can_delete_account(SUPER, Principal.build(9, 'super-admin'))
    assert not can_delete_account(ELEC, NOBODY)


def test_role_parse_rejects_unknown_values():
    assert Role.parse('admin') is Role.ADMIN
    try:
        Role.parse('owner')
    except ValueError:
        pass
    else:
        raise AssertionError('unknown role accepted')


def test_filter_apply_narrows_query():
    make_product('Phone', 'Electronics')
    make_product('Shirt', 'Clothing')
    make_product('Apple', 'Food')
    session = get_db()
    q = session.query(Product)
    assert {p.name for p in MATCH_ALL.apply(q, Product.category).all()} == {'Phone', 'Shirt', 'Apple'}
    assert MATCH_NONE.apply(q, Product.category).all() == []
    two = CategoryFilter(categories=frozenset({'Clothing', 'Food'}))
    assert {p.name for p in two.apply(q, Product.category).all()} == {'Shirt', 'Apple'}


def test_principal_from_stored_account():
    root = principal_for(ensure_super_admin())
    assert root.is_super_admin
    admin = principal_for(ensure_account('scoped@example.com', ['Home', 'Food']))
    assert admin.role is Role.ADMIN
    assert admin.assigned_categories == frozenset({'Home', 'Food'})
