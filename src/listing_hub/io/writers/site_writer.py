"""
File-system writer for the generated site.

Every output targets its own path under the output root; parent directories
are created on demand.
"""

import json
from pathlib import Path
from typing import Any, Union

import structlog

logger = structlog.get_logger(__name__)


class SiteWriter:
    """
    Persist rendered documents and JSON dumps below an output directory.

    Args:
        output_dir: Root directory of the generated site
    """

    def __init__(self, output_dir: Union[str, Path]):
        self.output_dir = Path(output_dir)
        self.files_written = 0

    def prepare(self) -> None:
        """Create the output root and the fixed top-level sections."""
        for section in ("data", "companies", "cities", "states", "sitemaps", "sitemap"):
            (self.output_dir / section).mkdir(parents=True, exist_ok=True)

    def write_text(self, relative_path: str, content: str) -> Path:
        """Write ``content`` to ``output_dir/relative_path`` as UTF-8."""
        target = self.output_dir / relative_path
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(content, encoding="utf-8")
        self.files_written += 1
        return target

    def write_json(self, relative_path: str, data: Any) -> Path:
        """Serialize ``data`` to JSON at ``output_dir/relative_path``."""
        return self.write_text(relative_path, json.dumps(data, ensure_ascii=False))

    def write_page(self, section: str, slug: str, html: str) -> Path:
        """Write ``<section>/<slug>/index.html``."""
        return self.write_text(f"{section}/{slug}/index.html", html)
