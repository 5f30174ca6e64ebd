"""mnemos entry point."""

import logging
import os
import sys

from dotenv import find_dotenv, load_dotenv

from .cli import run_cli
from .config import load_config
from .logging import configure_logger


def main() -> None:
    """Main entry point."""
    load_dotenv(find_dotenv(usecwd=True))

    logging.basicConfig(
        level=os.getenv("MNEMOS_LOG_LEVEL", "WARNING").upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    config = load_config()
    configure_logger(log_dir=config.log_dir)

    sys.exit(run_cli(sys.argv[1:]))


if __name__ == "__main__":
    main()
