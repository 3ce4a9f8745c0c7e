import logging
from pathlib import Path
from typing import Iterable, List, Optional

from postlint.settings import settings

logger = logging.getLogger(__name__)


class FileContentRepo:
    """Read-only view of a content root: one subdirectory per section."""

    def __init__(
        self,
        root: Path | str,
        extensions: Optional[Iterable[str]] = None,
        section_index_name: Optional[str] = None,
    ):
        self.root = Path(root)
        self.extensions = {
            ext.lower() for ext in (extensions or settings.CONTENT_EXTENSIONS)
        }
        self.section_index_name = section_index_name or settings.SECTION_INDEX_NAME

    def exists(self) -> bool:
        return self.root.is_dir()

    def list_post_files(self) -> List[Path]:
        if not self.exists():
            logger.warning(f"Content directory not found: {self.root}")
            return []
        return sorted(
            path
            for path in self.root.rglob("*")
            if path.is_file()
            and path.suffix.lower() in self.extensions
            and path.name != self.section_index_name
        )

    def relative_path(self, path: Path) -> str:
        return path.relative_to(self.root).as_posix()

    def read_text(self, path: Path) -> str:
        return path.read_text(encoding="utf-8")
