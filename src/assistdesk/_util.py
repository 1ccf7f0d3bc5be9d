"""Shared CLI helpers: logging setup and message file loading."""

import json
import logging
from pathlib import Path
from typing import List, Union

from assistdesk.messaging.models import NormalizedMessage

logger = logging.getLogger(__name__)


def setup_logging(verbose: bool = False) -> None:
    """Shared logging setup for the command line."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def load_messages(path: Union[str, Path]) -> List[NormalizedMessage]:
    """Read a JSON list of message records.

    Records that fail to parse are logged and skipped.
    """
    with open(path) as f:
        records = json.load(f)
    if not isinstance(records, list):
        raise ValueError(f"{path}: expected a JSON list of messages")

    messages = []
    for i, record in enumerate(records):
        try:
            messages.append(NormalizedMessage.from_dict(record))
        except (KeyError, ValueError, TypeError) as e:
            logger.warning(f"Skipping message #{i} in {path}: {e}")
    return messages
