import json
import logging
from pathlib import Path
from typing import Dict, Optional

import frontmatter
import pydantic
import toml
import yaml

from postlint.schemas.blog import Author

logger = logging.getLogger(__name__)


def _load_json(text: str):
    return json.loads(text)


def _load_toml(text: str):
    return toml.loads(text)


def _load_yaml(text: str):
    return yaml.safe_load(text)


def _load_markdown(text: str):
    return frontmatter.loads(text).metadata


LOADERS = {
    ".json": _load_json,
    ".toml": _load_toml,
    ".yaml": _load_yaml,
    ".yml": _load_yaml,
    ".md": _load_markdown,
}


class FileAuthorsRepo:
    """
    Author records, one file per author, named after the author
    (``jane-doe.json`` holds ``{"name": "Jane Doe", ...}``).
    Records are keyed by their ``name`` field, falling back to the file stem.
    """

    def __init__(self, root: Path | str):
        self.root = Path(root)

    def load_authors(self) -> Dict[str, Author]:
        authors: Dict[str, Author] = {}
        if not self.root.is_dir():
            logger.warning(f"Authors directory not found: {self.root}")
            return authors

        for path in sorted(self.root.iterdir()):
            loader = LOADERS.get(path.suffix.lower())
            if not path.is_file() or loader is None:
                continue
            author = self._load_author(path, loader)
            if author is None:
                continue
            if author.name in authors:
                logger.warning(
                    f"Duplicate author record for {author.name!r} in {path.name}; keeping the first"
                )
                continue
            authors[author.name] = author

        logger.info(f"Loaded {len(authors)} author record(s) from {self.root}")
        return authors

    @staticmethod
    def _load_author(path: Path, loader) -> Optional[Author]:
        try:
            data = loader(path.read_text(encoding="utf-8"))
        except Exception as e:
            logger.warning(f"Skipping unreadable author file {path.name}: {e}")
            return None

        if data is None:
            data = {}
        if not isinstance(data, dict):
            logger.warning(f"Skipping author file {path.name}: not a mapping")
            return None

        # keys like `1: one` load as ints; records are keyed by str
        data = {str(key): value for key, value in data.items()}
        name = data.pop("name", None) or path.stem
        if not isinstance(name, str):
            logger.warning(f"Skipping author file {path.name}: name must be a string")
            return None
        try:
            return Author.model_validate({**data, "name": name})
        except pydantic.ValidationError as e:
            logger.warning(f"Skipping invalid author file {path.name}: {e}")
            return None


def load_authors(authors_dir: Path | str) -> Dict[str, Author]:
    return FileAuthorsRepo(authors_dir).load_authors()
