"""
Data loader for bundled reference data.

The JSON data files live alongside this module; currently that is
the referrer policy rating table under ``referrer/``.  A deployment
can replace the table with its own file via ``REFERRER_POLICY_FILE``.
"""

from __future__ import annotations

import json
import pathlib
from typing import Any

import pydantic

from privacy_check import config
from privacy_check.models import referrer
from privacy_check.utils import logger

log = logger.create_logger("Data")

_DATA_DIR = pathlib.Path(__file__).resolve().parent

_REFERRER_POLICY_FILE = "referrer/referrer-policies.json"


def _load_json(path: pathlib.Path) -> Any:
    """Read a JSON data file.

    Raises:
        FileNotFoundError: If *path* does not exist.
        json.JSONDecodeError: If *path* is not valid JSON.
    """
    return json.loads(path.read_text(encoding="utf-8"))


def load_referrer_policy_table(path: pathlib.Path) -> referrer.ReferrerPolicyTable:
    """Load and validate a referrer policy rating table.

    Raises:
        pydantic.ValidationError: If the file does not describe a
            valid table.
    """
    try:
        table = referrer.ReferrerPolicyTable.model_validate(_load_json(path))
    except pydantic.ValidationError:
        log.error("Invalid referrer policy table", {"path": str(path)})
        raise
    log.debug("Referrer policy table loaded", {"path": str(path), "policies": len(table.ratings)})
    return table


_referrer_policy_table: referrer.ReferrerPolicyTable | None = None


def get_referrer_policy_table() -> referrer.ReferrerPolicyTable:
    """Get the referrer policy rating table (lazy loaded and cached)."""
    global _referrer_policy_table
    if _referrer_policy_table is None:
        override = config.get_settings().referrer_policy_file
        path = pathlib.Path(override).expanduser() if override else _DATA_DIR / _REFERRER_POLICY_FILE
        _referrer_policy_table = load_referrer_policy_table(path)
    return _referrer_policy_table
