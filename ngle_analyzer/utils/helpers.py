"""
helpers.py

File helpers for the packaged prompt YAML and the analysis JSON written by the CLI.
"""

import json
import os
import tempfile
from pathlib import Path
from typing import Any, Dict, Union

import yaml


def save_json(data: Any, file_path: Union[str, Path], indent: int = 2):
    """
    Writes an analysis (or any JSON-serialisable object) to disk.

    The file is written to a temporary sibling and then moved into place, so
    an interrupted run never leaves a truncated analysis behind. Accented
    text is kept as-is and the file ends with a newline.

    Args:
        data (Any): The object to serialize.
        file_path (Union[str, Path]): Destination path; parent directories are created.
        indent (int): Indentation level. Defaults to 2.
    """
    target = Path(file_path)
    target.parent.mkdir(parents=True, exist_ok=True)

    fd, tmp_name = tempfile.mkstemp(prefix=f".{target.name}.", dir=target.parent)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=indent, ensure_ascii=False)
            f.write("\n")
        os.replace(tmp_name, target)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise


def load_yaml(file_path: Union[str, Path]) -> Dict[str, Any]:
    """
    Reads a YAML mapping, such as the prompt file.

    An empty file yields an empty dict.

    Raises:
        FileNotFoundError: If the file does not exist.
        yaml.YAMLError: If the content is not valid YAML.
        ValueError: If the top level is not a mapping.
    """
    with Path(file_path).open("r", encoding="utf-8") as f:
        data = yaml.safe_load(f)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(f"{file_path}: expected a YAML mapping, got {type(data).__name__}")
    return data
