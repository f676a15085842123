"""Aggregation engine — folds ledger entries into named metric buckets.

Pure functions (``evaluate_rule``, ``compute_order_metrics``) do the math;
``AggregationEngine`` only adds the ledger read. Rules:
  - no matching entries -> bucket absent
  - LATEST: the latest entry by (created_at, id) wins
  - SUM: included types add, negated types subtract; an empty side adds 0
  - several currencies -> the group holding the earliest entry is kept
"""

import logging
from collections import defaultdict
from collections.abc import Iterable
from datetime import datetime, timezone
from decimal import Decimal

from src.bs_common.datetime_utils import ensure_utc
from src.bs_common.money import ZERO
from src.bs_ledger.domain.models import AccountingEntry
from src.bs_ledger.domain.repository import AccountingEntryRepositoryProtocol
from src.bs_order_view.domain.models import MoneyAmount
from src.bs_order_view.domain.rules import (
    METRIC_RULES,
    RULE_ENTRY_TYPES,
    AggregationMode,
    MetricRule,
)

logger = logging.getLogger(__name__)

_EPOCH = datetime.min.replace(tzinfo=timezone.utc)


def _entry_order(entry: AccountingEntry) -> tuple[datetime, str]:
    return ensure_utc(entry.created_at) or _EPOCH, entry.id


def evaluate_rule(rule: MetricRule, entries: Iterable[AccountingEntry]) -> MoneyAmount | None:
    """Evaluate one bucket over the entries of a single order."""
    types = rule.entry_types
    matching = sorted(
        (e for e in entries if e.entry_type in types and getattr(e, rule.group_by.value)),
        key=_entry_order,
    )
    if not matching:
        return None

    if rule.mode is AggregationMode.LATEST:
        amount, currency = matching[-1].money(rule.group_by)
        return MoneyAmount.of(amount, currency)

    groups: dict[str, Decimal] = {}
    for entry in matching:
        amount, currency = entry.money(rule.group_by)
        signed = amount if entry.entry_type in rule.included else -amount
        groups[currency] = groups.get(currency, ZERO) + signed

    # dicts keep insertion order, so the first key came from the earliest entry
    dominant = next(iter(groups))
    if len(groups) > 1:
        logger.warning(
            "Mixed currencies in bucket: bucket=%s order_id=%s currencies=%s kept=%s",
            rule.name,
            matching[0].source_id,
            sorted(groups),
            dominant,
        )
    return MoneyAmount.of(groups[dominant], dominant)


def compute_order_metrics(
    entries: list[AccountingEntry],
    rules: Iterable[MetricRule] = METRIC_RULES,
) -> dict[str, MoneyAmount]:
    metrics: dict[str, MoneyAmount] = {}
    for rule in rules:
        value = evaluate_rule(rule, entries)
        if value is not None:
            metrics[rule.name] = value
    return metrics


class AggregationEngine:
    """Loads the ledger for a batch of orders in one query and evaluates every rule."""

    def __init__(self, ledger_repo: AccountingEntryRepositoryProtocol) -> None:
        self._ledger_repo = ledger_repo

    async def compute_metrics(self, order_ids: list[str]) -> dict[str, dict[str, MoneyAmount]]:
        entries = await self._ledger_repo.find(order_ids, RULE_ENTRY_TYPES)
        by_order: dict[str, list[AccountingEntry]] = defaultdict(list)
        for entry in entries:
            by_order[entry.source_id].append(entry)
        return {oid: compute_order_metrics(by_order.get(oid, [])) for oid in order_ids}
