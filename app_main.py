"""Application entry point for DeckTalk."""

from __future__ import annotations

from deck_app.config import load_settings
from deck_app.constants.about import APP_NAME
from deck_app.core.catalog_loader import load_catalog_from_file, load_default_catalog
from deck_app.server.api_server import run_api_server
from deck_app.store import create_record_store
from deck_app.utils.logging_config import configure_logging


def main() -> None:
    """Initialize logging, load the catalog and serve the API."""
    logger = configure_logging()
    settings = load_settings()
    logger.info("Starting %s...", APP_NAME)

    if settings.catalog_path is not None:
        catalog = load_catalog_from_file(settings.catalog_path)
    else:
        catalog = load_default_catalog()
    logger.info("Loaded %d questions", len(catalog))

    record_store = create_record_store(settings)
    logger.info("API available at http://%s:%d/", settings.host, settings.port)
    run_api_server(catalog, record_store, host=settings.host, port=settings.port)


if __name__ == "__main__":
    main()
