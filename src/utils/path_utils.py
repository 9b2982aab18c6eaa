import os
from pathlib import Path


def find_repo_root(start: Path | None = None, marker: str = "pyproject.toml") -> Path:
    """Locate the project root used for data and ``.env`` lookups.

    ``BLOODLINK_HOME`` wins when set. Otherwise walk upwards from ``start``
    until a folder containing ``marker`` is found, falling back to the
    current working directory for installed copies that ship without it.
    """
    home = os.getenv("BLOODLINK_HOME")
    if home:
        return Path(home).expanduser().resolve()

    p = (start or Path(__file__).resolve()).parent
    for candidate in [p, *p.parents]:
        if (candidate / marker).exists():
            return candidate
    return Path.cwd()
