"""Main entry point for the terminal order tracker."""
import logging
import sys

from settings import load_settings
from logging_config import setup_logging
from storage import JsonFileStore, OrderStorage
from orders import OrderModel
from controller import Controller
from cli import TerminalView

logger = logging.getLogger(__name__)


def main() -> int:
    settings = load_settings()
    setup_logging(settings.log_level, settings.log_file)
    storage = OrderStorage(JsonFileStore(settings.data_dir), settings.storage_key)
    model = OrderModel(storage)
    view = TerminalView(alt_screen=settings.alt_screen)
    Controller(model, view)
    logger.info("Started with %s", model)
    return view.run()

if __name__ == "__main__":
    sys.exit(main())
