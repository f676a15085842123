"""Order view maintenance entry point.

Run with: python -m src.main [order_id ...]
Without ids every order that has ledger entries is rebuilt.
"""

import logging
import sys

import uvloop

from config.settings import settings
from src.bs_common.cache import get_cache
from src.bs_common.database import close_client, ensure_indexes, get_database, ping
from src.bs_common.errors import AppError
from src.bs_common.redis_client import close_redis
from src.bs_ledger.infrastructure.persistence import AccountingEntryRepository
from src.bs_merchant.infrastructure.persistence import MerchantRepository
from src.bs_order.infrastructure.persistence import OrderRepository
from src.bs_order_view.application.service import OrderViewService
from src.bs_order_view.infrastructure.persistence import OrderViewRepository

logger = logging.getLogger(__name__)


async def rebuild_order_view(order_ids: list[str]) -> int:
    """Startup: verify MongoDB, ensure indexes. Shutdown: close clients."""
    db = get_database()
    try:
        await ping(db)
        await ensure_indexes(db)
        service = OrderViewService(
            ledger_repo=AccountingEntryRepository(db),
            order_repo=OrderRepository(db),
            merchant_repo=MerchantRepository(db, await get_cache()),
            view_repo=OrderViewRepository(db),
        )
        result = await service.rebuild(order_ids or None)
        logger.info("Rebuild result: %s", result.model_dump())
        return 0
    except AppError as exc:
        logger.error("Rebuild aborted: code=%d message=%s", exc.code, exc.message)
        return 1
    finally:
        close_client()
        await close_redis()


def main(argv: list[str] | None = None) -> int:
    logging.basicConfig(
        level=settings.LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )
    args = sys.argv[1:] if argv is None else argv
    return uvloop.run(rebuild_order_view(args))


if __name__ == "__main__":
    sys.exit(main())
