# Ledger Insight - Financial analytics & projections for small businesses
# Copyright (c) 2025 Maxence Bernard (maxencebernardhub)
# Licensed under the MIT License. See LICENSE file for details.

"""
Category and subcategory resolution.

Transactions carry two representations of their category: a normalized
``category_id`` and a legacy free-text ``category`` name. Reports must
not each decide which one to trust, so this module is the single place
where a transaction is turned into a display label.

Resolution order for a transaction
----------------------------------
1. ``category_id`` found in the category list  -> category name
2. legacy ``category`` name (non-empty)          -> that name
3. ``category_id`` not found in the list         -> the raw id
4. nothing usable                                -> "Other"

Categories and subcategories form a one-level tree. It is stored as flat
lookups (id -> entity) plus an index subcategory_id -> category_id.
Unknown ids never raise: a single malformed record must not abort a
report.
"""

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Optional

from .models import CategoryItem, CategoryKind, SubcategoryItem, Transaction

logger = logging.getLogger(__name__)

UNCATEGORIZED = "Other"
NO_SUBCATEGORY = "No subcategory"


@dataclass(frozen=True)
class CategoryIndex:
    """Lookup tables for categories and subcategories."""

    categories: dict[str, CategoryItem] = field(default_factory=dict)
    subcategories: dict[str, SubcategoryItem] = field(default_factory=dict)
    parent_by_subcategory: dict[str, str] = field(default_factory=dict)

    @classmethod
    def build(
        cls,
        categories: Optional[Iterable[CategoryItem]] = None,
        subcategories: Optional[Iterable[SubcategoryItem]] = None,
    ) -> "CategoryIndex":
        by_id = {c.id: c for c in categories or ()}
        subs = {s.id: s for s in subcategories or ()}
        parents = {s.id: s.category_id for s in subs.values()}
        return cls(categories=by_id, subcategories=subs, parent_by_subcategory=parents)

    def category_name(self, category_id: Optional[str]) -> Optional[str]:
        if not category_id:
            return None
        item = self.categories.get(category_id)
        return item.name if item is not None else None

    def category_kind(self, category_id: Optional[str]) -> Optional[CategoryKind]:
        item = self.categories.get(category_id or "")
        return item.kind if item is not None else None

    def subcategory_name(self, subcategory_id: Optional[str]) -> Optional[str]:
        if not subcategory_id:
            return None
        item = self.subcategories.get(subcategory_id)
        return item.name if item is not None else None

    def parent_of(self, subcategory_id: str) -> Optional[str]:
        return self.parent_by_subcategory.get(subcategory_id)

    def category_label(self, transaction: Transaction) -> str:
        """Display label for the category of a transaction."""
        name = self.category_name(transaction.category_id)
        if name:
            return name

        legacy = (transaction.category or "").strip()
        if legacy:
            return legacy

        if transaction.category_id:
            logger.debug(
                "Unknown category id %r on transaction %s, using raw id",
                transaction.category_id,
                transaction.id,
            )
            return str(transaction.category_id)

        return UNCATEGORIZED

    def subcategory_label(self, transaction: Transaction) -> str:
        """Display label for the subcategory of a transaction."""
        if not transaction.subcategory_id:
            return NO_SUBCATEGORY
        return self.subcategory_name(transaction.subcategory_id) or NO_SUBCATEGORY

    def category_label_for_id(self, category_id: str) -> str:
        """Name of a category id, falling back to the raw id."""
        return self.category_name(category_id) or str(category_id)

    def subcategory_label_for_id(self, subcategory_id: str) -> str:
        """Name of a subcategory id, falling back to the raw id."""
        return self.subcategory_name(subcategory_id) or str(subcategory_id)


EMPTY_INDEX = CategoryIndex()
