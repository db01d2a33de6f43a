import logging
import os
from datetime import datetime
from logging.handlers import TimedRotatingFileHandler

from rich.console import Console
from rich.logging import RichHandler
from rich.traceback import install as install_rich_traceback

install_rich_traceback()


class DailyRotatingFileHandler(TimedRotatingFileHandler):
    """Writes into logs/<name>/<YYYY_MM_DD>/ (or logs/errors/<date>/), switching folders at midnight."""

    def __init__(self, filename, log_dir, log_filename_prefix, logger_name, is_error_handler=False, *args, **kwargs):
        self.log_dir = log_dir
        self.log_filename_prefix = log_filename_prefix
        self.logger_name = logger_name
        self.is_error_handler = is_error_handler
        super().__init__(filename, *args, **kwargs)

    def _current_filename(self) -> str:
        current_date = datetime.now().strftime("%Y_%m_%d")
        folder = "errors" if self.is_error_handler else self.logger_name
        current_log_dir = os.path.join(self.log_dir, folder, current_date)
        os.makedirs(current_log_dir, exist_ok=True)
        return os.path.normpath(
            os.path.join(current_log_dir, f"{self.log_filename_prefix}{self.logger_name}.log")
        )

    def emit(self, record):
        current_filename = self._current_filename()
        if os.path.normpath(self.baseFilename) != current_filename:
            if self.stream:
                self.stream.close()
            self.baseFilename = current_filename
            self.stream = self._open()
        super().emit(record)


class Logger(logging.Logger):
    def __init__(self, logger_name: str = '', log_filename_prefix: str = '', log_dir: str = None,
                 logger_debug: bool = False, log_to_file: bool = True) -> None:
        sanitized_name = logger_name.replace('/', '_').replace('\\', '_')

        level = logging.DEBUG if logger_debug else logging.INFO
        super().__init__(sanitized_name, level)

        self.log_filename_prefix = log_filename_prefix
        self.log_to_file = log_to_file

        if log_dir is None:
            # Imported lazily so tests can build loggers without a config file
            from coinchart.config.loader import config
            self.log_dir = config.LOG_DIR
        else:
            self.log_dir = log_dir

        self.date_format = "%d.%m.%Y %H:%M:%S"

        self._setup_logger()
        self.debug(f"Logger {sanitized_name} initialized with log directory: {self.log_dir}")

    def _get_log_dir(self, current_date: str, is_error: bool = False) -> str:
        folder = 'errors' if is_error else self.name
        log_dir = os.path.join(self.log_dir, folder, current_date)
        os.makedirs(log_dir, exist_ok=True)
        return log_dir

    def _get_log_filename(self, log_dir: str) -> str:
        name = self.name if self.name else "default"
        return os.path.join(log_dir, f"{self.log_filename_prefix}{name}.log")

    def _plain_formatter(self) -> logging.Formatter:
        if self.level == logging.DEBUG:
            format_string = "[{asctime}] {filename}.{funcName} - {message}"
        else:
            format_string = "[{asctime}] - {message}"
        return logging.Formatter(format_string, datefmt=self.date_format, style="{")

    def _setup_logger(self) -> None:
        if self.handlers:
            return

        self._add_console_handler()
        if self.log_to_file:
            current_date = datetime.now().strftime("%Y_%m_%d")
            self._add_file_handler(self._get_log_dir(current_date), logging_level=self.level, is_error=False)
            self._add_file_handler(self._get_log_dir(current_date, is_error=True), logging_level=logging.ERROR,
                                   is_error=True)

    def _add_console_handler(self):
        console = Console(color_system="auto", width=180)
        rich_handler = RichHandler(console=console, rich_tracebacks=False)
        rich_handler.setLevel(self.level)
        self.addHandler(rich_handler)

    def _add_file_handler(self, log_dir: str, logging_level: int, is_error: bool):
        handler = DailyRotatingFileHandler(
            self._get_log_filename(log_dir),
            self.log_dir,
            self.log_filename_prefix,
            self.name,
            is_error_handler=is_error,
            when='midnight',
            interval=1,
            backupCount=30,
            encoding='utf-8'
        )
        handler.setLevel(logging_level)
        handler.setFormatter(self._plain_formatter())
        handler.namer = lambda name: name.replace(".log", "") + ".log"
        handler.rotator = lambda source, _dest: self._log_rotator(source, is_error=is_error)
        self.addHandler(handler)

    def _log_rotator(self, source, is_error=False):
        new_dir = self._get_log_dir(datetime.now().strftime("%Y_%m_%d"), is_error=is_error)
        new_file = os.path.join(new_dir, os.path.basename(source))
        open(new_file, 'a').close()
