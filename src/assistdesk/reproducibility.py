"""Reproducibility utilities for scoring results.

Fingerprints score tables so a change in the catalogue or the formula shows
up as a changed hash, and records them in a JSON manifest that can be
re-checked later.
"""

import hashlib
import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Mapping, Union

from assistdesk.priorart.scoring import PatentScore

logger = logging.getLogger(__name__)

ScoreTable = Mapping[str, PatentScore]


def _jsonable(data: Any) -> Any:
    if isinstance(data, PatentScore):
        return data.to_dict()
    if isinstance(data, Mapping):
        return {str(k): _jsonable(v) for k, v in data.items()}
    if isinstance(data, (list, tuple)):
        return [_jsonable(v) for v in data]
    return data


def canonical_json(data: Any) -> str:
    """Serialize with sorted keys and compact separators."""
    return json.dumps(_jsonable(data), sort_keys=True, separators=(",", ":"))


def fingerprint(data: Any) -> str:
    """SHA256 hex digest of the canonical JSON form of ``data``.

    Args:
        data: JSON-compatible data, PatentScore objects, or mappings of them.

    Returns:
        Hexadecimal SHA256 hash string.
    """
    return hashlib.sha256(canonical_json(data).encode("utf-8")).hexdigest()


def write_manifest(path: Union[str, Path], scores: ScoreTable) -> Dict[str, Any]:
    """Write scores with their fingerprint to a JSON manifest.

    Args:
        path: Manifest file path. Parent directories are created.
        scores: Patent id -> PatentScore, as from score_all_patents().

    Returns:
        The manifest contents.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    manifest = {
        "generated_at": datetime.now(timezone.utc).isoformat(),
        "patent_count": len(scores),
        "sha256": fingerprint(scores),
        "scores": _jsonable(scores),
    }
    with open(path, "w") as f:
        json.dump(manifest, f, indent=2)

    logger.info(f"Wrote score manifest to {path} (sha256 {manifest['sha256'][:12]})")
    return manifest


def verify_manifest(path: Union[str, Path], scores: ScoreTable) -> bool:
    """Check that ``scores`` still match the fingerprint recorded at ``path``.

    Returns:
        True if the fingerprints match, False on mismatch or an unreadable
        manifest.
    """
    path = Path(path)
    try:
        with open(path, "r") as f:
            expected = json.load(f)["sha256"]
    except (json.JSONDecodeError, IOError, KeyError) as e:
        logger.warning(f"Could not load manifest {path}: {e}")
        return False

    actual = fingerprint(scores)
    if actual != expected:
        logger.error(f"Score fingerprint mismatch for {path}: expected {expected}, got {actual}")
        return False

    logger.info(f"Score fingerprint verified for {path}")
    return True
