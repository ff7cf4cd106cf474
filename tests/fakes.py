"""
In-memory stand-ins for the cassandra-driver session and cluster
"""
from core.word_store import SELECT_WORDS


class FakePrepared:
    def __init__(self, query):
        self.query_string = query


class FakeResponseFuture:
    """Mimics the parts of cassandra.cluster.ResponseFuture the store uses."""

    def __init__(self, pages=None, error=None):
        self._pages = pages if pages is not None else [[]]
        self._error = error
        self._index = 0

    @property
    def has_more_pages(self):
        return self._error is None and self._index < len(self._pages) - 1

    def start_fetching_next_page(self):
        self._index += 1

    def clear_callbacks(self):
        pass

    def add_callbacks(self, callback, errback):
        if self._error is not None:
            errback(self._error)
        else:
            callback(self._pages[self._index])


class FakeSession:
    def __init__(self, page_size=5000):
        self.rows = {}
        self.executed = []
        self.page_size = page_size
        self.fail_schema = False
        self.fail_async = None
        self.raise_async = None

    def execute(self, query, parameters=None):
        if self.fail_schema:
            raise RuntimeError("keyspace creation rejected")
        self.executed.append(query)

    def prepare(self, query):
        return FakePrepared(query)

    def execute_async(self, statement, parameters=None):
        if self.raise_async is not None:
            raise self.raise_async
        if self.fail_async is not None:
            return FakeResponseFuture(error=self.fail_async)

        if isinstance(statement, FakePrepared):
            row_id, word, definition = parameters
            self.rows[row_id] = {"my_table_id": row_id, "word": word, "definition": definition}
            return FakeResponseFuture()

        assert statement == SELECT_WORDS
        rows = list(self.rows.values())
        pages = [rows[i:i + self.page_size] for i in range(0, len(rows), self.page_size)] or [[]]
        return FakeResponseFuture(pages=pages)


class FakeCluster:
    def __init__(self):
        self.is_shutdown = False

    def shutdown(self):
        self.is_shutdown = True
