import asyncio
import uuid
from enum import Enum
from typing import Any, List, Optional, Sequence

from loguru import logger

from core.errors import SchemaBootstrapError, StorageError
from models.schemas import WordRecord

KEYSPACE = "grand_tour"
TABLE = "words"
REPLICATION_FACTOR = 3

CREATE_KEYSPACE = (
    f"CREATE KEYSPACE IF NOT EXISTS {KEYSPACE} WITH replication = "
    f"{{'class': 'SimpleStrategy', 'replication_factor': '{REPLICATION_FACTOR}'}}"
)
CREATE_TABLE = (
    f"CREATE TABLE IF NOT EXISTS {KEYSPACE}.{TABLE} "
    "(my_table_id uuid, word text, definition text, PRIMARY KEY (my_table_id))"
)
INSERT_WORD = f"INSERT INTO {KEYSPACE}.{TABLE} (my_table_id, word, definition) VALUES (?, ?, ?)"
SELECT_WORDS = f"SELECT * FROM {KEYSPACE}.{TABLE}"


class StoreState(str, Enum):
    DISCONNECTED = "disconnected"
    SCHEMA_VERIFYING = "schema_verifying"
    READY = "ready"
    FAILED = "failed"


def row_to_record(row) -> WordRecord:
    return WordRecord(id=row["my_table_id"], word=row["word"], definition=row["definition"])


class WordStore:
    """Word/definition rows on top of one shared driver session.

    The session is expected to use ``dict_factory`` so rows come back as
    mappings. Nothing here retries: a failed statement is reported to the
    caller as :class:`StorageError` and that's it.
    """

    def __init__(self, session):
        self._session = session
        self._insert_statement = None
        self.state = StoreState.DISCONNECTED

    def bootstrap_schema(self) -> None:
        """Create the keyspace and then the table if they are missing.

        Runs once, synchronously, before the HTTP server starts. Running it
        again is harmless.

        Raises:
            SchemaBootstrapError: either statement failed. The store is left
                in the ``FAILED`` state and must not be served.
        """
        self.state = StoreState.SCHEMA_VERIFYING
        try:
            self._session.execute(CREATE_KEYSPACE)
            self._session.execute(CREATE_TABLE)
            self._insert_statement = self._session.prepare(INSERT_WORD)
        except Exception as e:
            self.state = StoreState.FAILED
            logger.error(f"Schema bootstrap failed: {e}")
            raise SchemaBootstrapError(str(e)) from e

        self.state = StoreState.READY
        logger.info(f"Keyspace '{KEYSPACE}' and table '{TABLE}' are ready")

    async def add_word(self, word: str, definition: str) -> WordRecord:
        self._ensure_ready()
        record = WordRecord(id=uuid.uuid4(), word=word, definition=definition)
        await self._execute(self._insert_statement, (record.id, record.word, record.definition))
        return record

    async def list_words(self) -> List[WordRecord]:
        self._ensure_ready()
        rows = await self._execute(SELECT_WORDS)
        return [row_to_record(row) for row in rows]

    def _ensure_ready(self) -> None:
        if self.state is not StoreState.READY:
            raise StorageError(f"Word store is not ready (state: {self.state.value})")

    # Runs a statement through execute_async and collects every result page.
    # Driver callbacks fire on the driver's IO thread, so results are handed
    # back to the event loop with call_soon_threadsafe.
    async def _execute(self, statement, parameters: Optional[Sequence[Any]] = None) -> List[Any]:
        loop = asyncio.get_running_loop()
        try:
            response_future = self._session.execute_async(statement, parameters)
            rows = []
            while True:
                rows.extend(await _next_page(loop, response_future))
                if not response_future.has_more_pages:
                    return rows
                response_future.clear_callbacks()
                response_future.start_fetching_next_page()
        except Exception as e:
            logger.debug(f"Statement failed: {e}")
            raise StorageError(str(e)) from e


def _next_page(loop: asyncio.AbstractEventLoop, response_future) -> asyncio.Future:
    page = loop.create_future()

    def _resolve(rows):
        if not page.done():
            page.set_result(list(rows or []))

    def _reject(exc):
        if not page.done():
            page.set_exception(exc)

    response_future.add_callbacks(
        callback=lambda rows: loop.call_soon_threadsafe(_resolve, rows),
        errback=lambda exc: loop.call_soon_threadsafe(_reject, exc),
    )
    return page
