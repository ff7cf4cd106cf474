import sys
from typing import Optional

import uvicorn
from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles
from loguru import logger

from apis.routes_words import router as word_router
from core.config import get_settings
from core.credentials import resolve_credentials
from core.database import connect, shutdown
from core.errors import ConfigError, SchemaBootstrapError
from core.logging_config import configure_logging
from core.word_store import WordStore


def create_app(store: WordStore, static_dir: Optional[str] = None) -> FastAPI:
    app = FastAPI(title="Grand Tour Words")
    app.state.store = store

    app.include_router(word_router, tags=["words"])

    @app.get("/health")
    def health():
        return {"status": "ok"}

    # mounted last so /words and /health win over the catch-all
    if static_dir:
        app.mount("/", StaticFiles(directory=static_dir, html=True), name="static")

    return app


def main() -> None:
    """Connect, make sure the schema exists, then serve.

    Nothing listens until the keyspace and table are confirmed; any startup
    failure ends the process with exit status 1.
    """
    try:
        settings = get_settings()
        configure_logging(settings.log_level, settings.log_file)
        credentials = resolve_credentials(settings)
        cluster, session = connect(credentials)
    except (ConfigError, SchemaBootstrapError) as e:
        logger.error(f"Startup failed: {e}")
        sys.exit(1)

    try:
        store = WordStore(session)
        store.bootstrap_schema()
        app = create_app(store, settings.static_dir)

        logger.info(f"Server is listening on port {settings.port}")
        uvicorn.run(app, host=settings.host, port=settings.port, log_config=None)
    except SchemaBootstrapError as e:
        logger.error(f"Startup failed: {e}")
        sys.exit(1)
    finally:
        shutdown(cluster)


if __name__ == "__main__":
    main()
