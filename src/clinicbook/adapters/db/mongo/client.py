"""
MongoDB connection bootstrap shared by the API process and the sweeper.
"""

import logging

import certifi
from beanie import init_beanie
from motor.motor_asyncio import AsyncIOMotorClient

from clinicbook.adapters.db.mongo.models import DOCUMENT_MODELS
from clinicbook.core.config import DatabaseSettings

logger = logging.getLogger("clinicbook.db")


def create_motor_client(settings: DatabaseSettings) -> AsyncIOMotorClient:
    """Create a Motor client; TLS is enabled only for Atlas SRV URIs."""
    if settings.uri.startswith("mongodb+srv://"):
        return AsyncIOMotorClient(
            settings.uri,
            serverSelectionTimeoutMS=settings.server_selection_timeout_ms,
            tls=True,
            tlsCAFile=certifi.where(),
            tlsAllowInvalidCertificates=False,
        )
    return AsyncIOMotorClient(
        settings.uri,
        serverSelectionTimeoutMS=settings.server_selection_timeout_ms,
    )


async def init_database(settings: DatabaseSettings) -> AsyncIOMotorClient:
    """Connect and register every document model with Beanie.

    Index creation happens here, including the unique day-ledger index the
    booking path relies on.
    """
    client = create_motor_client(settings)
    db = client[settings.db_name]
    await init_beanie(database=db, document_models=DOCUMENT_MODELS)
    logger.info("MongoDB connected (db=%s, models=%d)", settings.db_name, len(DOCUMENT_MODELS))
    return client
