"""Code provenance for sweep summaries.

Records the short git SHA of the checkout the simulation code lives in,
so a summary file can be traced back to the code that produced it.
"""

import subprocess
from pathlib import Path

# Repository root of this checkout (src/reproducibility/ -> root)
CODE_ROOT = Path(__file__).resolve().parents[2]


def get_git_hash(repo: Path | None = None) -> str:
    """Short SHA of HEAD, suffixed with '-dirty' for uncommitted changes.

    Args:
        repo: Directory inside the repository; defaults to this checkout.

    Returns:
        "a3f9c1d", "a3f9c1d-dirty", or "unknown" when git or the
        repository is unavailable.
    """
    try:
        return subprocess.check_output(
            ["git", "describe", "--always", "--dirty", "--abbrev=7", "--exclude=*"],
            cwd=repo or CODE_ROOT,
            stderr=subprocess.DEVNULL,
        ).decode().strip()
    except (subprocess.CalledProcessError, FileNotFoundError, NotADirectoryError):
        return "unknown"
