# src/pushgate/util/fs.py: Filesystem utilities.
# This module provides safe filesystem operations. Settings are written
# atomically so that a hook running concurrently never reads a half-written
# policy file.

import os
from pathlib import Path


def atomic_write(path: str | Path, content: str):
    """Write content to a file atomically."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    temp_path = path.with_name(f"{path.name}.tmp")
    with open(temp_path, "w") as f:
        f.write(content)
    os.replace(temp_path, path)
