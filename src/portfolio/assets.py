"""Asset discovery for bundled frontend assets.

Locates the stylesheet and other static files shipped inside the portfolio
package.
"""

from importlib.resources import files
from pathlib import Path


def get_static_dir() -> Path:
    """Return path to bundled static assets.

    Returns:
        Path to the static directory containing frontend assets.

    Raises:
        FileNotFoundError: If static assets are not bundled.
    """
    static = files("portfolio").joinpath("static")
    if not static.is_dir():
        msg = "Bundled static assets not found. Reinstall the portfolio package."
        raise FileNotFoundError(msg)
    return Path(str(static))
