"""
Per-call options for NovaPay API methods

A dry run validates the request and builds the URL, then hands the payload to a
handler instead of sending it. Without a custom handler the payload is logged
through the client's logger.
"""

import logging
from dataclasses import dataclass
from typing import Any, Callable, Optional

from .canonical_json import marshal_indent

DryRunHandler = Callable[[str, str, Any], None]


def log_dry_run(logger: logging.Logger, method: str, url: str, payload: Any) -> None:
    """Default dry-run handler body: log the skipped request and its payload."""
    logger.info(f"Dry run: skipping request {method} {url}")
    if payload is None:
        logger.info("Dry run payload: <nil>")
        return
    if isinstance(payload, (bytes, bytearray)):
        logger.info(f"Dry run payload:\n{bytes(payload).decode('utf-8', errors='replace')}")
        return
    if isinstance(payload, str):
        logger.info(f"Dry run payload:\n{payload}")
        return
    logger.info(f"Dry run payload:\n{marshal_indent(payload)}")


@dataclass(frozen=True)
class RunOptions:
    """
    Options controlling a single SDK call

    Attributes:
        dry_run: Skip the HTTP request
        dry_run_handler: Receives (method, url, payload) of the skipped request
    """
    dry_run: bool = False
    dry_run_handler: Optional[DryRunHandler] = None

    def handle_dry_run(self, method: str, url: str, payload: Any, logger: logging.Logger) -> bool:
        """
        Run the dry-run handler if this call is a dry run.

        Returns:
            bool: True when the request must be skipped
        """
        if not self.dry_run:
            return False
        if self.dry_run_handler is not None:
            self.dry_run_handler(method, url, payload)
        else:
            log_dry_run(logger, method, url, payload)
        return True


def dry_run(handler: Optional[DryRunHandler] = None) -> RunOptions:
    """Options that skip the HTTP call, optionally inspecting the payload."""
    return RunOptions(dry_run=True, dry_run_handler=handler)
