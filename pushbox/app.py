"""Application entry point and setup for the pushbox puzzle game."""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from PySide6.QtWidgets import QApplication

from pushbox.core.config import GameConfig, load_config
from pushbox.core.errors import ContentError
from pushbox.core.levels import LevelRepository
from pushbox.core.scores import ScoreStore
from pushbox.core.session import GameSession
from pushbox.ui.main_window import MainWindow

logger = logging.getLogger(__name__)


def configure_logging(debug: bool = False) -> None:
    """Configure application-wide logging with a standard format."""
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="pushbox", description="pushbox - crate pushing puzzles")
    parser.add_argument("--config", help="Path to a config.yaml with overrides")
    parser.add_argument("--levels", help="Level pack to play instead of the configured one")
    parser.add_argument("--scores", help="Score file to use instead of the configured one")
    parser.add_argument("--debug", action="store_true", help="Verbose logging and state dumps")
    return parser.parse_args(argv)


def build_session(config: GameConfig) -> GameSession:
    """Load levels and scores and create the session. Raises ``ContentError`` on bad content."""
    levels = LevelRepository(config.levels_file)
    scores = ScoreStore(config.scores_file)
    return GameSession(levels.all(), scores, debug=config.debug)


def run(argv: Optional[List[str]] = None) -> None:
    """Load content, then open the game window. Content errors end the process."""
    args = parse_args(argv)
    configure_logging(args.debug)

    try:
        config = load_config(args.config)
        if args.levels:
            config.levels_file = Path(args.levels)
        if args.scores:
            config.scores_file = Path(args.scores)
        config.debug = config.debug or args.debug
        session = build_session(config)
    except ContentError as e:
        logger.error("%s", e)
        sys.exit(1)

    app = QApplication(sys.argv[:1])
    app.setApplicationName("pushbox")
    app.setApplicationDisplayName("pushbox")

    window = MainWindow(session=session, config=config)
    window.show()

    sys.exit(app.exec())


if __name__ == "__main__":
    run()
