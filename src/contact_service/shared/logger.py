import logging
import re
import sys
from datetime import datetime
from pathlib import Path

from colorama import Fore, Style, init


class ColorFormatter(logging.Formatter):
    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.color_map = {
            logging.DEBUG: Fore.CYAN,
            logging.INFO: Fore.GREEN,
            logging.WARNING: Fore.YELLOW,
            logging.ERROR: Fore.RED,
            logging.CRITICAL: Fore.MAGENTA,
        }

    def format(self, record):
        color = self.color_map.get(record.levelno, Fore.WHITE)
        message = super().format(record)
        return f"{color}{message}{Style.RESET_ALL}"


class Logger:
    """Logging handle built once at startup and handed to every component.

    Writes to a dated file under ``log_dir`` and to a colored console stream.
    Call ``close()`` at shutdown to release both handlers.
    """

    def __init__(self, name, log_dir="logs", level=logging.INFO, console=True):
        Path(log_dir).mkdir(parents=True, exist_ok=True)
        init()

        self.logger = logging.getLogger(name)
        self.logger.setLevel(level)
        self.logger.propagate = False

        format_string_console = (
            f"{Style.BRIGHT}%(levelname)-10s "
            + f"{Style.DIM}%(name)-20s "
            + "%(module)s.%(funcName)-30s "
            + f"{Style.RESET_ALL}%(message)s"
        )
        format_string_file = re.sub(
            r"\x1b\[[0-9;]*m", "", "%(asctime)s - " + format_string_console
        )

        file_handler = logging.FileHandler(
            Path(log_dir) / f"{datetime.now().strftime('%Y-%m-%d')}.log"
        )
        file_handler.setFormatter(logging.Formatter(format_string_file))
        self._handlers: list[logging.Handler] = [file_handler]

        if console:
            console_handler = logging.StreamHandler(sys.stdout)
            console_handler.setFormatter(ColorFormatter(format_string_console))
            self._handlers.append(console_handler)

        for handler in self._handlers:
            self.logger.addHandler(handler)

    def get_logger(self) -> logging.Logger:
        return self.logger

    def close(self):
        for handler in self._handlers:
            self.logger.removeHandler(handler)
            handler.close()
        self._handlers.clear()
