"""Asset discovery for bundled editor and page templates.

Locates files shipped inside the editdocs package.
"""

from importlib.resources import files
from pathlib import Path


def get_editor_dir() -> Path:
    """Return path to the bundled editor UI.

    Returns:
        Path to the directory containing editor.html and its scripts.

    Raises:
        FileNotFoundError: If the editor assets are not bundled.
    """
    editor = files("editdocs").joinpath("static", "editor")
    if not editor.is_dir():
        msg = "Bundled editor assets not found. Reinstall the editdocs package."
        raise FileNotFoundError(msg)
    return Path(str(editor))


def get_templates_dir() -> Path:
    """Return path to the bundled default page template directory."""
    return Path(str(files("editdocs").joinpath("templates")))
