"""assistdesk: message triage and prior-art confidence scoring."""

__version__ = "0.1.0"

from assistdesk.reproducibility import (
    fingerprint,
    verify_manifest,
    write_manifest,
)
