from .config import ValidateConfig, ViewConfig
from .logging import setup_file_logging

__all__ = ['ValidateConfig', 'ViewConfig', 'setup_file_logging']
