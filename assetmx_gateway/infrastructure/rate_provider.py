"""Holder for the current rate table snapshot with atomic reload"""

import logging
import threading

from assetmx_gateway.domain.exceptions import ConfigError, RateStoreError
from assetmx_gateway.domain.rates import RateTable
from assetmx_gateway.infrastructure.clients.rate_store import RateStoreClient
from assetmx_gateway.infrastructure.observability.metrics import rate_reload_failures_counter

logger = logging.getLogger(__name__)


class RateProvider:
    """
    Owns the RateTable the engine prices against.

    Readers get a complete immutable snapshot; reload builds the next table in
    full and then swaps one reference, so a concurrent read sees either the old
    or the new configuration.
    """

    def __init__(self, initial: RateTable | None = None):
        self._table = initial or RateTable.default()
        self._lock = threading.Lock()

    def current(self) -> RateTable:
        return self._table

    def replace(self, table: RateTable) -> None:
        with self._lock:
            self._table = table

    async def reload(self, client: RateStoreClient) -> bool:
        """
        Fetch configuration from the store and swap it in.

        On store or validation failure the previous snapshot stays active.

        Returns: True if a new snapshot was installed
        """
        try:
            config = await client.fetch_config()
            table = RateTable.from_config(config)
        except (RateStoreError, ConfigError) as e:
            rate_reload_failures_counter.inc()
            logger.warning(
                f"Rate reload failed, keeping {self._table.source} snapshot: {e}",
            )
            return False

        self.replace(table)
        logger.info("Rate snapshot reloaded", extra={"source": table.source, "terms": table.terms})
        return True
