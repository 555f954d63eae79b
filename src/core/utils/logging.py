"""
SiliconFlow Chat Proxy - Logging Utilities
"""

import logging
import sys
from typing import Any, Dict, Optional


def get_logger_with_context(module: str, level: Optional[str] = None) -> logging.Logger:
    """Get a logger with context."""
    logger = logging.getLogger(f"silicium.{module}")

    if not logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(
            logging.Formatter(
                "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
            )
        )
        logger.addHandler(handler)

    logger.setLevel(level or logging.INFO)
    return logger


def mask_headers(headers: Dict[str, Any]) -> Dict[str, Any]:
    """Copy of request headers that is safe to log."""
    masked = dict(headers)
    if "Authorization" in masked:
        masked["Authorization"] = "Bearer ****"
    return masked
