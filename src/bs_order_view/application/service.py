"""OrderViewService — materializes order views from the ledger.

A projection batch is all-or-nothing: orders, merchants and metrics are
loaded and every view is assembled before the single bulk write. Any failure
before the write aborts the batch with nothing written and surfaces as
ProjectionError carrying the failing stage.
"""

import logging

from config.settings import settings
from src.bs_common.datetime_utils import time_track
from src.bs_common.errors import AppError, OrderNotFoundError, ProjectionError
from src.bs_common.object_id import parse_object_id
from src.bs_ledger.domain.repository import AccountingEntryRepositoryProtocol
from src.bs_merchant.domain.models import Merchant
from src.bs_merchant.domain.repository import MerchantRepositoryProtocol
from src.bs_order.domain.repository import OrderRepositoryProtocol
from src.bs_order_view.application.schemas import RebuildOrderViewResult
from src.bs_order_view.domain.aggregation import AggregationEngine
from src.bs_order_view.domain.projector import build_order_view
from src.bs_order_view.domain.repository import OrderViewRepositoryProtocol

logger = logging.getLogger(__name__)


class OrderViewService:
    def __init__(
        self,
        ledger_repo: AccountingEntryRepositoryProtocol,
        order_repo: OrderRepositoryProtocol,
        merchant_repo: MerchantRepositoryProtocol,
        view_repo: OrderViewRepositoryProtocol,
        batch_size: int | None = None,
    ) -> None:
        self._ledger_repo = ledger_repo
        self._order_repo = order_repo
        self._merchant_repo = merchant_repo
        self._view_repo = view_repo
        self._engine = AggregationEngine(ledger_repo)
        self._batch_size = batch_size or settings.ORDER_VIEW_UPDATE_BATCH_SIZE

    async def project(self, order_ids: list[str]) -> None:
        """Rebuild and replace the views of ``order_ids``; other views are untouched."""
        ids = list(dict.fromkeys(order_ids))
        if not ids:
            return

        stage = "orders"
        try:
            ids = list(dict.fromkeys(str(parse_object_id(oid)) for oid in ids))
            orders = await self._order_repo.find_by_ids(ids)
            found = {o.id for o in orders}
            missing = [oid for oid in ids if oid not in found]
            if missing:
                raise OrderNotFoundError(missing[0])

            stage = "merchants"
            merchants: dict[str, Merchant] = {}
            for order in orders:
                if order.merchant_id not in merchants:
                    merchants[order.merchant_id] = await self._merchant_repo.get_by_id(
                        order.merchant_id
                    )

            stage = "metrics"
            metrics = await self._engine.compute_metrics(ids)

            stage = "assemble"
            by_id = {o.id: o for o in orders}
            views = [
                build_order_view(by_id[oid], merchants[by_id[oid].merchant_id], metrics[oid])
                for oid in ids
            ]

            stage = "write"
            await self._view_repo.replace_many(views)
        except AppError as exc:
            logger.error(
                "Order view projection failed: stage=%s order_ids=%s error=%s",
                stage,
                ids,
                exc.message,
            )
            raise ProjectionError(ids, stage, exc.message) from exc

    async def rebuild(self, order_ids: list[str] | None = None) -> RebuildOrderViewResult:
        """Project in batches; with no ids, every order that has ledger entries."""
        logger.info("start rebuilding order view")
        if not order_ids:
            order_ids = await self._ledger_repo.get_distinct_by_source_id()

        batches = 0
        for start in range(0, len(order_ids), self._batch_size):
            batch = order_ids[start : start + self._batch_size]
            with time_track("update_order_view"):
                await self.project(batch)
            batches += 1
            logger.debug("Order view batch done: batch=%d size=%d", batches, len(batch))

        logger.info(
            "rebuilding order view finished successfully: orders=%d batches=%d",
            len(order_ids),
            batches,
        )
        return RebuildOrderViewResult(orders=len(order_ids), batches=batches)
