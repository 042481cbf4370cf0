"""MongoDB client lifecycle and collection access."""

from asyncio import sleep
from logging import getLogger
from time import perf_counter

from motor.motor_asyncio import (
    AsyncIOMotorClient,
    AsyncIOMotorCollection,
    AsyncIOMotorDatabase,
)
from pymongo import ASCENDING, DESCENDING, TEXT, IndexModel
from pymongo.errors import PyMongoError

from content_api.configs import file_logger, settings
from content_api.errors import DatabaseConnectionError

logger = file_logger(getLogger(__name__))

BLOGS = "blogs"
CONTACTS = "contacts"
SUBSCRIPTIONS = "subscriptions"

INDEXES: dict[str, list[IndexModel]] = {
    BLOGS: [
        IndexModel(
            [("title", TEXT), ("content", TEXT), ("tags", TEXT)],
            name="blog_text_search",
        ),
        IndexModel([("slug", ASCENDING)], unique=True, name="blog_slug_unique"),
        IndexModel([("published", ASCENDING), ("createdAt", DESCENDING)]),
        IndexModel([("category", ASCENDING), ("published", ASCENDING)]),
    ],
    CONTACTS: [
        IndexModel([("status", ASCENDING), ("createdAt", DESCENDING)]),
        IndexModel([("email", ASCENDING)]),
    ],
    SUBSCRIPTIONS: [
        IndexModel([("email", ASCENDING)], unique=True, name="subscription_email_unique"),
        IndexModel(
            [("unsubscribeToken", ASCENDING)],
            unique=True,
            sparse=True,
            name="subscription_token_unique",
        ),
        IndexModel([("isActive", ASCENDING), ("verified", ASCENDING)]),
        IndexModel([("subscriptionType", ASCENDING), ("isActive", ASCENDING)]),
    ],
}


class MongoDatabase:
    """
    Owns the Motor client for the lifetime of the process.

    ``connect`` pings the server with exponential backoff before the
    application starts serving; ``disconnect`` closes the pool on shutdown.
    """

    def __init__(
        self,
        uri: str = settings.MONGODB_URI,
        database: str = settings.MONGODB_DATABASE,
        retries: int = settings.MONGODB_CONNECT_RETRIES,
    ) -> None:
        self._uri = uri
        self._database_name = database
        self._retries = max(1, retries)
        self.client: AsyncIOMotorClient | None = None
        self.db: AsyncIOMotorDatabase | None = None

    @property
    def is_connected(self) -> bool:
        return self.db is not None

    async def connect(self) -> None:
        """
        Connect and verify the server answers a ``ping``.

        Raises:
            DatabaseConnectionError: If every attempt fails.
        """
        last_error: Exception | None = None
        for attempt in range(1, self._retries + 1):
            start = perf_counter()
            client: AsyncIOMotorClient = AsyncIOMotorClient(
                self._uri,
                serverSelectionTimeoutMS=settings.MONGODB_SERVER_SELECTION_TIMEOUT_MS,
                tz_aware=True,
            )
            try:
                await client.admin.command("ping")
            except PyMongoError as e:
                client.close()
                last_error = e
                logger.warning(f"MongoDB connection attempt {attempt}/{self._retries} failed: {e}")
                if attempt < self._retries:
                    backoff = 2 ** (attempt - 1)
                    logger.info(f"Waiting {backoff}s before retrying MongoDB connection")
                    await sleep(backoff)
                continue

            self.client = client
            self.db = client[self._database_name]
            logger.info(
                f"Connected to MongoDB database '{self._database_name}' in {perf_counter() - start:.3f}s",
            )
            return

        raise DatabaseConnectionError(f"Could not connect to MongoDB: {last_error}")

    async def disconnect(self) -> None:
        if self.client is not None:
            self.client.close()
            logger.info("MongoDB connection closed")
        self.client = None
        self.db = None

    async def ping(self) -> bool:
        """Lightweight health probe used by the health endpoint."""
        if self.client is None:
            return False
        try:
            await self.client.admin.command("ping")
        except PyMongoError as e:
            logger.warning(f"MongoDB health check failed: {e}")
            return False
        return True

    def get_collection(self, name: str) -> AsyncIOMotorCollection:
        if self.db is None:
            raise DatabaseConnectionError("Database is not connected")
        return self.db[name]

    async def create_indexes(self) -> None:
        """Create every index the repositories rely on (idempotent)."""
        for name, indexes in INDEXES.items():
            try:
                created = await self.get_collection(name).create_indexes(indexes)
            except PyMongoError as e:
                logger.exception(f"Failed to create indexes on '{name}'")
                raise DatabaseConnectionError(f"Index creation failed on {name}: {e}") from e
            logger.info(f"Ensured indexes on '{name}': {', '.join(created)}")


mongo = MongoDatabase()


def get_database() -> MongoDatabase:
    """FastAPI dependency returning the process-wide database handle."""
    return mongo
