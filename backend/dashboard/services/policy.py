"""Category-scoping policy.

Pure decision functions over a ``Principal``; nothing here touches the database, the
request or the JWT. Callers decide what to do with a ``False`` answer.
"""
from __future__ import annotations
from dataclasses import dataclass, field
from typing import FrozenSet, Iterable, Optional
from sqlalchemy import false

from dashboard.constants.roles import Role


@dataclass(frozen=True)
class Principal:
    id: int
    role: Role
    assigned_categories: FrozenSet[str] = field(default_factory=frozenset)

    @classmethod
    def build(cls, id: int, role, assigned_categories: Optional[Iterable[str]] = None) -> 'Principal':
        return cls(id=id, role=Role.parse(role), assigned_categories=frozenset(assigned_categories or ()))

    @property
    def is_super_admin(self) -> bool:
        return self.role == Role.SUPER_ADMIN


@dataclass(frozen=True)
class CategoryFilter:
    """Visibility rule for category-labelled records.

    Exactly one of three shapes: everything, nothing, or membership in ``categories``.
    """
    match_all: bool = False
    categories: FrozenSet[str] = field(default_factory=frozenset)

    @property
    def match_none(self) -> bool:
        return not self.match_all and not self.categories

    def allows(self, category: Optional[str]) -> bool:
        if self.match_all:
            return True
        return isinstance(category, str) and category in self.categories

    def apply(self, query, category_column):
        """Return ``query`` narrowed to visible rows on ``category_column``."""
        if self.match_all:
            return query
        if self.match_none:
            return query.filter(false())
        return query.filter(category_column.in_(sorted(self.categories)))


MATCH_ALL = CategoryFilter(match_all=True)
MATCH_NONE = CategoryFilter()


def can_read_category(principal: Principal, category: Optional[str]) -> bool:
    if principal.is_super_admin:
        return True
    return isinstance(category, str) and category in principal.assigned_categories


def can_write_category(principal: Principal, category: Optional[str]) -> bool:
    # No write-only grants exist; writing follows the read rule
    return can_read_category(principal, category)


def visible_category_filter(principal: Principal) -> CategoryFilter:
    if principal.is_super_admin:
        return MATCH_ALL
    if not principal.assigned_categories:
        # zero categories means zero visibility, never "show all"
        return MATCH_NONE
    return CategoryFilter(categories=frozenset(principal.assigned_categories))


def can_manage_team(principal: Principal) -> bool:
    return principal.is_super_admin


def can_delete_account(principal: Principal, target) -> bool:
    """``target`` is anything carrying a ``role`` (an account row or another principal)."""
    return can_manage_team(principal) and Role.parse(target.role) != Role.SUPER_ADMIN


__all__ = [
    'Principal', 'CategoryFilter', 'MATCH_ALL', 'MATCH_NONE',
    'can_read_category', 'can_write_category', 'visible_category_filter',
    'can_manage_team', 'can_delete_account',
]
