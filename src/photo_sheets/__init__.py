"""Top-level package for Photo Sheets.

Provides subpackages:
- photo_sheets.layout – page geometry, grid planning and pagination
- photo_sheets.crops – per-photo crop state, persistence and transforms
- photo_sheets.interaction – selection and drag state machine
- photo_sheets.output – rasterisation and PDF export
- photo_sheets.gui – PySide6 app
"""

def _get_version() -> str:
    """Get version from pyproject.toml (dev) or importlib.metadata (installed)."""
    from pathlib import Path

    pyproject = Path(__file__).resolve().parent.parent.parent / "pyproject.toml"
    if pyproject.exists():
        try:
            content = pyproject.read_text()
            for line in content.splitlines():
                if line.strip().startswith("version"):
                    # Parse: version = "0.3.0"
                    return line.split("=")[1].strip().strip('"').strip("'")
        except Exception:
            pass

    try:
        from importlib.metadata import version as pkg_version
        return pkg_version("photo-sheets")
    except Exception:
        return "0.0.0"

__version__ = _get_version()
__copyright__ = "Copyright 2026 Photo Sheets contributors"
__all__: list[str] = ["__version__", "__copyright__"]
