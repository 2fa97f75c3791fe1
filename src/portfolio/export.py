"""Static export of the whole site.

Renders every route to an HTML file so the site can be hosted without the
development server:

    dist/
    ├── index.html                  # /
    ├── about/index.html            # /about
    ├── projects/rover/index.html   # /projects/rover
    ├── 404.html
    └── static/                     # bundled assets
"""

import logging
import shutil
from pathlib import Path

from portfolio.assets import get_static_dir
from portfolio.views import PageViews

logger = logging.getLogger(__name__)


class StaticExporter:
    """Writes rendered pages and static assets to an output directory."""

    def __init__(self, views: PageViews, output_dir: Path) -> None:
        """Initialize exporter.

        Args:
            views: Page views to render routes with
            output_dir: Directory to write the site into (created if missing)
        """
        self._views = views
        self._output_dir = output_dir

    @property
    def output_dir(self) -> Path:
        return self._output_dir

    def export(self) -> list[Path]:
        """Render every route and copy static assets.

        Returns:
            Paths of the written HTML files, in route order

        Raises:
            ContentError: If a content file is malformed
        """
        self._output_dir.mkdir(parents=True, exist_ok=True)

        written: list[Path] = []
        for route in self._views.iter_paths():
            target = self.target_for(route)
            html = self._views.render(route)
            self._write(target, html)
            written.append(target)
            logger.debug("Wrote %s -> %s", route, target)

        not_found = self._output_dir / "404.html"
        self._write(not_found, self._views.render_not_found("/404"))
        written.append(not_found)

        static_target = self._output_dir / "static"
        shutil.copytree(get_static_dir(), static_target, dirs_exist_ok=True)

        logger.info("Exported %d page(s) to %s", len(written), self._output_dir)
        return written

    def target_for(self, route: str) -> Path:
        """Output file for a route ("/" -> index.html, "/about" -> about/index.html)."""
        relative = route.strip("/")
        if not relative:
            return self._output_dir / "index.html"
        return self._output_dir / relative / "index.html"

    def _write(self, target: Path, html: str) -> None:
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(html, encoding="utf-8")
