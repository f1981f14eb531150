"""Detect the terraform version constraint declared by a project.

Sources, in order:

1. ``versions.tf``: ``terraform { required_version = "..." }`` (only when
   ``detect_syntax`` is enabled);
2. the configured constraint file (``.terraform-version`` by default): the
   first non-blank line that is not a ``#`` comment.

When neither yields a value the empty constraint (match anything) is used.
"""

from __future__ import annotations

import logging
import os
from typing import Any, Optional

import hcl2

from wtf.config import Configuration
from wtf.constants import Constants
from wtf.errors import ConstraintFileError
from wtf.versioning.constraint import Constraint

logger = logging.getLogger(__name__)


def _unquote(value: str) -> str:
    value = value.strip()
    if len(value) >= 2 and value[0] == value[-1] == '"':
        value = value[1:-1]
    return value.strip()


def _required_version(document: Any) -> Optional[str]:
    blocks = document.get("terraform") if isinstance(document, dict) else None
    if isinstance(blocks, dict):
        blocks = [blocks]
    for block in blocks or []:
        if isinstance(block, dict) and "required_version" in block:
            value = block["required_version"]
            if isinstance(value, list):  # older parsers wrap attribute values
                value = value[0] if value else ""
            return _unquote(str(value))
    return None


def read_versions_tf(path: str) -> Optional[str]:
    """Return ``required_version`` from a ``versions.tf`` file, or None.

    Raises:
        ConstraintFileError: If the file is not valid HCL.
    """
    try:
        with open(path, "r", encoding="utf-8") as f:
            document = hcl2.load(f)
    except OSError as exc:
        raise ConstraintFileError(f"could not read {path}: {exc}") from exc
    except Exception as exc:  # pylint: disable=broad-exception-caught
        # hcl2 surfaces lark parser errors of several unrelated types
        raise ConstraintFileError(f"failed to parse {os.path.basename(path)}: {exc}") from exc
    value = _required_version(document)
    return value or None


def read_version_file(path: str) -> Optional[str]:
    """Return the constraint written in a plain version file, or None."""
    try:
        with open(path, "r", encoding="utf-8") as f:
            for line in f:
                line = line.strip()
                if line and not line.startswith("#"):
                    return line
    except OSError as exc:
        raise ConstraintFileError(f"could not read {path}: {exc}") from exc
    return None


def read_constraint(directory: str, config: Configuration) -> Constraint:
    """Find the constraint declared in ``directory``.

    Raises:
        ConstraintFileError: If a constraint file exists but cannot be parsed.
        ConstraintError: If the declared value is not a valid constraint.
    """
    if config.detect_syntax:
        versions_tf = os.path.join(directory, Constants.VERSIONS_TF_FILE)
        if os.path.isfile(versions_tf):
            value = read_versions_tf(versions_tf)
            if value:
                logger.debug("Constraint %r read from %s", value, versions_tf)
                return Constraint.parse(value)

    if config.version_constraint_file_name:
        version_file = os.path.join(directory, config.version_constraint_file_name)
        if os.path.isfile(version_file):
            value = read_version_file(version_file)
            if value:
                logger.debug("Constraint %r read from %s", value, version_file)
                return Constraint.parse(value)

    return Constraint()
