from __future__ import annotations

from pathlib import Path
from typing import Dict, Union


def load_class_names(metadata_path: Union[str, Path]) -> Dict[int, str]:
    """
    Load the class-id -> label table that sits next to a model.

    Two layouts are understood:

    - Darknet `.names` files (e.g. `coco.names`): one label per line, the id
      is the line index among non-empty lines.
    - The lightweight `metadata.yaml` mapping:

        names:
          0: apple
          1: carrot

    Detections only carry integer ids; this table is applied downstream.
    """

    path = Path(metadata_path)
    lines = path.read_text(encoding="utf-8").splitlines()

    if path.suffix.lower() in (".names", ".txt"):
        labels = [line.strip() for line in lines if line.strip()]
        return {i: label for i, label in enumerate(labels)}

    names: Dict[int, str] = {}
    in_names = False
    for raw in lines:
        line = raw.strip()
        if not line or line.startswith("#"):
            continue
        if line == "names:":
            in_names = True
            continue
        if not in_names or ":" not in line:
            continue

        left, right = line.split(":", 1)
        left = left.strip()
        if not left.isdigit():
            continue
        names[int(left)] = right.strip().strip("'").strip('"')

    return names
