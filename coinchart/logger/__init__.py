from coinchart.logger.logger import Logger

__all__ = ['Logger']
