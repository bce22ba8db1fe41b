"""YAML document reader shared by the config and data loaders."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import yaml

from ..errors import InputReadError

logger = logging.getLogger(__name__)


def read_yaml_document(path: Path, kind: str = "document") -> Any:
    """Read and parse one YAML document.

    Parameters
    ----------
    path: Path
        Filesystem path of the document.
    kind: str
        Human-readable document kind used in error messages (e.g. "config").

    Returns
    -------
    Any
        The parsed document; ``None`` for an empty file.

    Raises
    ------
    InputReadError
        If the file cannot be read or is not valid YAML.
    """
    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise InputReadError(
            f"Unable to read {kind} file {path}: {exc.strerror or exc}", path
        ) from exc

    try:
        document = yaml.safe_load(raw)
    except yaml.YAMLError as exc:
        raise InputReadError(f"Invalid YAML in {kind} file {path}: {exc}", path) from exc

    logger.debug("documents.loaded", extra={"path": str(path), "kind": kind})
    return document
