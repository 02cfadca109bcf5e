"""
Portfolio Admin Core
====================

Core utilities shared by the admin modules.
"""

from .config import Config
from .database import Database
from .errors import PortfolioError
from .logging_service import LoggingService

__all__ = ['Config', 'Database', 'PortfolioError', 'LoggingService']
