# Clauseflags CLI Parser — (c) 2025 rtj.dev LLC — MIT Licensed
"""Global logger instance for clauseflags."""
import logging

logger: logging.Logger = logging.getLogger("clauseflags")
