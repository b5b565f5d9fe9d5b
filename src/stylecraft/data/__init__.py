"""Packaged data — style tables, built-in design tokens, a11y rules, ARIA patterns."""

from __future__ import annotations

import json
from importlib import resources
from typing import Any


def load_json(name: str) -> Any:
    """Load ``stylecraft/data/<name>`` as JSON.  *name* may contain ``/``."""
    resource = resources.files(__name__)
    for part in name.split("/"):
        resource = resource.joinpath(part)
    with resource.open("r", encoding="utf-8") as f:
        return json.load(f)
