"""Relevance Filter - narrows the catalog offered to the model per prompt.

Keyword heuristics only, no model call. The goal is fewer tool schemas in the
request (and fewer tokens), not perfect intent detection: when nothing
matches, every read domain is offered.
"""
import logging
import re
from typing import Any, Dict, List, Pattern, Set

from finassist.assistant import catalog

logger = logging.getLogger(__name__)


ENTRIES_KEYWORDS = [
    "spending", "expense", "expenses", "income", "savings", "investment", "investments",
    "transaction", "transactions", "entry", "entries", "spent", "earned", "earn",
    "net", "balance", "total", "average", "max", "min", "maximum", "minimum",
    "trend", "trends", "compare", "comparison", "category", "categories",
    "top", "highest", "lowest", "how much", "how many", "what", "show me",
    "monthly", "weekly", "yearly", "period", "range", "date",
]

BUDGET_KEYWORDS = [
    "budget", "budgets", "over budget", "under budget", "budget left",
    "budget remaining", "remaining budget", "budget used", "budget spent",
    "compliance", "align", "alignment", "exceed", "within budget",
    "budget status", "budget summary", "budget alignment",
]

CATEGORIES_KEYWORDS = [
    "add category", "new category", "create category", "list categories",
    "categories available", "show categories", "what categories",
    "category type", "categories for",
]

ACTION_VERBS = ["add", "create", "new", "set", "update", "record", "insert", "make"]

# Inflected forms count as the same verb ("setting a budget", "I added an expense")
ACTION_VERB_FORMS = [
    "adds", "added", "adding", "creates", "created", "creating", "sets", "setting",
    "updates", "updated", "updating", "records", "recorded", "recording",
    "inserts", "inserted", "inserting", "makes", "made", "making",
]

# Nouns that turn an action verb into a tracker mutation, by implicated domain
ACTION_NOUNS: Dict[str, List[str]] = {
    "entries": [
        "entry", "entries", "expense", "expenses", "income", "transaction",
        "transactions", "spending", "savings",
    ],
    "budget": ["budget", "budgets"],
    "categories": ["category", "categories"],
}


def _compile(keywords: List[str]) -> Pattern[str]:
    alternatives = "|".join(re.escape(k) for k in sorted(keywords, key=len, reverse=True))
    return re.compile(rf"\b(?:{alternatives})\b")


ENTRIES_PATTERN = _compile(ENTRIES_KEYWORDS)
BUDGET_PATTERN = _compile(BUDGET_KEYWORDS)
CATEGORIES_PATTERN = _compile(CATEGORIES_KEYWORDS)
ACTION_PATTERN = _compile(ACTION_VERBS + ACTION_VERB_FORMS)
ACTION_NOUN_PATTERNS: Dict[str, Pattern[str]] = {
    domain: _compile(nouns) for domain, nouns in ACTION_NOUNS.items()
}


def detect_domains(prompt: str) -> List[str]:
    """
    Classify a prompt into the catalog domains worth offering.

    Rules:
    1. Action verb plus a tracker noun: ``actions`` and the noun's domain(s).
    2. Otherwise each of entries, budget, categories is added when its
       keywords appear. A bare action verb skips these checks.
    3. Nothing matched: entries, budget and categories.
    4. ``utility`` always; ``categories`` whenever entries or budget is in.

    Returns:
        Domain names in catalog domain order
    """
    text = (prompt or "").lower()
    domains: Set[str] = set()

    is_action = bool(ACTION_PATTERN.search(text))
    if is_action:
        implicated = [d for d, pattern in ACTION_NOUN_PATTERNS.items() if pattern.search(text)]
        if implicated:
            domains.add("actions")
            domains.update(implicated)
    else:
        if ENTRIES_PATTERN.search(text):
            domains.add("entries")
        if BUDGET_PATTERN.search(text):
            domains.add("budget")
        if CATEGORIES_PATTERN.search(text):
            domains.add("categories")

    if not domains:
        domains.update(["entries", "budget", "categories"])

    domains.add("utility")
    if "entries" in domains or "budget" in domains:
        domains.add("categories")

    return [d for d in catalog.DOMAINS if d in domains]


def relevant_functions(prompt: str) -> List[Dict[str, Any]]:
    """
    Catalog subset for ``prompt`` with internal fields stripped.

    Each item is ``{name, description, parameters}``, de-duplicated by name.
    """
    selected: Dict[str, Dict[str, Any]] = {}
    for domain in detect_domains(prompt):
        for descriptor in catalog.by_domain(domain):
            selected.setdefault(descriptor.name, descriptor.public())

    functions = list(selected.values())
    logger.debug(
        f"Relevance filter offering {len(functions)}/{len(catalog.FUNCTION_CATALOG)} functions"
    )
    return functions
