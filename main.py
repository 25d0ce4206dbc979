import logging
import sys

from PyQt6.QtWidgets import QApplication

from src.tint.app import TintApp
from src.tint.config import Config

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def main():
    """
    The main entry point for the Tint application.

    Loads the configuration, sets up logging, creates the QApplication and
    the TintApp controller, and runs the event loop until the user quits
    from the tray menu.
    """
    config = Config()
    logging.basicConfig(level=getattr(logging, config.log_level, logging.INFO), format=LOG_FORMAT)

    app = QApplication(sys.argv)
    # Tint lives in the system tray; closing the panel must not exit.
    app.setQuitOnLastWindowClosed(False)

    # Kept referenced for the lifetime of the event loop.
    tint = TintApp(app, config=config)

    sys.exit(app.exec())


if __name__ == "__main__":
    main()
