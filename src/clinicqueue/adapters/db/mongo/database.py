"""MongoDB connection and Beanie initialisation."""

import logging

import certifi
from beanie import init_beanie
from motor.motor_asyncio import AsyncIOMotorClient

from clinicqueue.core.config import DatabaseSettings

from .models.directory_m import PatientDirectoryMongo, StaffMemberMongo
from .models.notification_m import ActivityLogMongo, NotificationEventMongo, NotificationMongo
from .models.queue_m import JourneyStepMongo, QueueEntryMongo


logger = logging.getLogger("clinicqueue")

DOCUMENT_MODELS = [
    QueueEntryMongo,
    JourneyStepMongo,
    NotificationMongo,
    NotificationEventMongo,
    ActivityLogMongo,
    PatientDirectoryMongo,
    StaffMemberMongo,
]


def create_client(settings: DatabaseSettings) -> AsyncIOMotorClient:
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
    """Connect to MongoDB and register the document models with Beanie."""
    client = create_client(settings)
    await init_beanie(database=client[settings.db_name], document_models=DOCUMENT_MODELS)
    logger.info(f"✅ Database connection established ({settings.db_name})")
    return client


async def ping(settings: DatabaseSettings) -> None:
    """Raise if the database does not answer a ping."""
    client = create_client(settings)
    try:
        await client.admin.command("ping")
    finally:
        client.close()
