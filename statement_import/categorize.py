"""Keyword categorization into the closed expense-category set.

Two entry points:

- :func:`auto_categorize` scans a free-text description against an ordered
  keyword table; the first category with a matching keyword wins.
- :func:`map_category_hint` resolves a supplied category string (a CSV
  category column, an OFX type hint) through a synonym dictionary first and
  falls back to the keyword scan on a miss.

Both default to ``"other"``; neither ever raises on unknown input.
"""

from __future__ import annotations

from .models import EXPENSE_CATEGORIES, ExpenseCategory, ParsedTransaction

# Ordered: earlier categories take precedence when keywords overlap
# (e.g. "gas" resolves to utilities before transportation).
CATEGORY_KEYWORDS: tuple[tuple[ExpenseCategory, tuple[str, ...]], ...] = (
    ("housing", ("rent", "mortgage", "property", "hoa", "home")),
    ("utilities", ("electric", "gas", "water", "internet", "phone", "utility", "power")),
    ("transportation", ("gas", "fuel", "uber", "lyft", "parking", "transit", "metro", "bus")),
    (
        "groceries",
        ("grocery", "supermarket", "walmart", "target", "costco", "trader joe", "whole foods"),
    ),
    ("healthcare", ("pharmacy", "doctor", "hospital", "medical", "dental", "vision", "health")),
    ("insurance", ("insurance", "geico", "state farm", "allstate", "progressive")),
    ("debt_payment", ("payment", "loan", "credit card", "amex", "chase", "capital one")),
    ("savings", ("transfer to savings", "investment", "vanguard", "fidelity", "schwab")),
    (
        "entertainment",
        ("netflix", "spotify", "hulu", "movie", "theater", "concert", "ticket"),
    ),
    (
        "dining",
        ("restaurant", "doordash", "ubereats", "grubhub", "starbucks", "coffee", "mcdonald"),
    ),
    ("personal", ("amazon", "shopping", "clothing", "apparel", "salon", "spa")),
    ("subscriptions", ("subscription", "monthly", "membership", "apple", "google")),
)

# Exact (case-insensitive) names a bank or OFX hint may use for a category.
CATEGORY_SYNONYMS: dict[str, ExpenseCategory] = {
    **{c: c for c in EXPENSE_CATEGORIES},  # type: ignore[misc]
    "rent": "housing",
    "mortgage": "housing",
    "utility": "utilities",
    "transport": "transportation",
    "travel": "transportation",
    "grocery": "groceries",
    "food": "groceries",
    "health": "healthcare",
    "medical": "healthcare",
    "debt": "debt_payment",
    "loan": "debt_payment",
    "investment": "savings",
    "restaurant": "dining",
    "shopping": "personal",
    "subscription": "subscriptions",
}

DEFAULT_CATEGORY: ExpenseCategory = "other"


def auto_categorize(description: str) -> ExpenseCategory:
    """Return the first category whose keyword occurs in ``description``."""

    lowered = description.lower()
    for category, keywords in CATEGORY_KEYWORDS:
        if any(keyword in lowered for keyword in keywords):
            return category
    return DEFAULT_CATEGORY


def map_category_hint(hint: str) -> ExpenseCategory:
    """Resolve a supplied category string to a canonical category."""

    mapped = CATEGORY_SYNONYMS.get(hint.strip().lower())
    if mapped is not None:
        return mapped
    return auto_categorize(hint)


def resolve_category(tx: ParsedTransaction) -> ExpenseCategory:
    """Prefer the transaction's category hint; else scan its description."""

    if tx.category:
        return map_category_hint(tx.category)
    return auto_categorize(tx.description)


__all__ = [
    "CATEGORY_KEYWORDS",
    "CATEGORY_SYNONYMS",
    "DEFAULT_CATEGORY",
    "auto_categorize",
    "map_category_hint",
    "resolve_category",
]
