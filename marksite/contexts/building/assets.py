"""Static assets shipped with the package and copied into every built site."""

from pathlib import Path
from typing import List

from marksite.utils.file_io import copy_file

ASSETS_PATH = Path(__file__).resolve().parents[2] / "assets"
STATIC_ASSETS = ["style.css", "script.js", "theme.js", "math.css"]


def copy_static_assets(output_dir: Path, assets_path: Path = ASSETS_PATH) -> List[Path]:
    """
    Copy the bundled stylesheets and scripts to the site root.

    Returns:
        Paths of the copied files
    """
    return [copy_file(assets_path / name, Path(output_dir) / name) for name in STATIC_ASSETS]
