"""
Centralized logging manager for keychain-env
Log output goes to stderr so stdout stays usable with eval
"""
import sys

from loguru import logger

LOG_LEVELS = ("TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL")

class LoggingManager:
    def __init__(self, log_level: str = "WARNING"):
        self.log_level = log_level.upper()

    def setup(self):
        logger.remove()
        logger.add(lambda msg: print(msg, end="", file=sys.stderr), level=self.log_level)
        logger.debug(f"Logging initialized at level: {self.log_level}")

    def debug(self, message: str):
        logger.debug(message)

    def info(self, message: str):
        logger.info(message)

    def warning(self, message: str):
        logger.warning(message)

    def error(self, message: str):
        logger.error(message)
