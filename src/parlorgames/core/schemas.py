"""Schema loading utility."""

import json
from pathlib import Path


def load_schema(path: Path) -> dict:
    """Load a JSON Schema file and return as dict."""
    with open(path) as f:
        return json.load(f)


def legacy_scores_schema(stats_schema: dict) -> dict:
    """Return the schema of the legacy bare-scores blob.

    The legacy format is exactly the ``scores`` object of the current one.
    """
    return stats_schema["properties"]["scores"]
