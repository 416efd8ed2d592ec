"""
Driver Telemetry API: Purge Service
======================================

What:  Deletes every driver and every reading in one transaction.
Who:   Called by DELETE /conductor/all. Meant for test environments:
       there is no confirmation step and no soft delete.
"""

import logging

from sqlalchemy import delete
from sqlalchemy.exc import SQLAlchemyError

from driver_telemetry.database import Store
from driver_telemetry.exceptions import StoreError
from driver_telemetry.models.driver import Driver
from driver_telemetry.models.reading import CompassReading, HeartRateReading, LocationReading
from driver_telemetry.schemas.common import PurgeResponse

logger = logging.getLogger(__name__)


async def purge_all(store: Store) -> PurgeResponse:
    """
    Remove all records of all four kinds.

    Returns:
        PurgeResponse with the number of rows deleted per table.

    Raises:
        StoreError: a delete failed; the transaction is rolled back (→ 500)
    """
    counts = {}
    try:
        async with store.session() as session:
            for key, model in (
                ("drivers_deleted", Driver),
                ("heart_rate_deleted", HeartRateReading),
                ("compass_deleted", CompassReading),
                ("location_deleted", LocationReading),
            ):
                result = await session.execute(delete(model))
                counts[key] = result.rowcount or 0
    except SQLAlchemyError as e:
        logger.error("Store error during purge: %s", str(e))
        raise StoreError(message=str(e), context={"operation": "purge_all"})

    logger.warning("Purged all records: %s", counts)
    return PurgeResponse(
        message="Todos los conductores y lecturas han sido borrados",
        **counts,
    )
