from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from pydantic import ValidationError

from scenariotree.core.config import CONFIG_FILENAME, CompilerConfig, CompilerConfigFileSpec
from scenariotree.io.loaders.errors import LoaderError
from scenariotree.io.loaders.tree_loader import read_text_file


def _read_yaml(path: str) -> Dict[str, Any]:
    try:
        data = yaml.safe_load(read_text_file(path))
    except yaml.YAMLError as exc:
        raise LoaderError(path, "Invalid YAML", cause=exc) from exc
    return data or {}


def default_config_path() -> str:
    return str(Path.cwd() / CONFIG_FILENAME)


def load_config(path: Optional[str] = None) -> CompilerConfig:
    """Load compiler settings.

    An explicit ``path`` must exist. Without one, ``scenariotree.yaml`` in the
    working directory is used when present, otherwise defaults apply.
    """
    if path is None:
        path = default_config_path()
        if not os.path.exists(path):
            return CompilerConfig()
    elif not os.path.exists(path):
        raise LoaderError(path, "Config file not found")

    data = _read_yaml(path)
    try:
        spec = CompilerConfigFileSpec.model_validate(data)
    except ValidationError as exc:
        raise LoaderError(path, "Invalid scenariotree configuration", cause=exc) from exc
    return spec.scenariotree.build()


__all__ = ["default_config_path", "load_config"]
