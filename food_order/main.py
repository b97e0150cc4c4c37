"""Entry point for the food-order Textual app."""

from __future__ import annotations

import logging
from pathlib import Path

from food_order.config import DB_PATH, DEBUG_LOG_PATH
from food_order.context import create_context
from food_order.food_app import FoodOrderApp


def configure_logging(log_path: str = DEBUG_LOG_PATH, level: int = logging.DEBUG) -> None:
    """Send logs to a file; the terminal belongs to the TUI."""
    Path(log_path).parent.mkdir(parents=True, exist_ok=True)
    logging.basicConfig(
        filename=log_path,
        level=level,
        format="%(asctime)s [%(levelname)s] [%(name)s] %(message)s",
    )
    # httpx logs every request at INFO.
    logging.getLogger("httpx").setLevel(logging.WARNING)


def main() -> None:
    """Run the Textual application."""
    configure_logging()
    context = create_context(DB_PATH)
    try:
        FoodOrderApp(context).run()
    finally:
        context.close()


if __name__ == "__main__":
    main()
