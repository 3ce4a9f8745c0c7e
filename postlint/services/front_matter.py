import logging
import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import toml
import yaml
from frontmatter.default_handlers import BaseHandler, TOMLHandler, YAMLHandler

logger = logging.getLogger(__name__)

# Keys understood by the canonical post record; everything else is pass-through.
KNOWN_KEYS = {
    "title",
    "description",
    "date",
    "updated",
    "draft",
    "template",
    "weight",
    "slug",
    "extra",
}
TAXONOMY_KEYS = ("authors", "tags", "categories")

_DATE_LIKE = re.compile(r"^\d{4}-\d{2}-\d{2}([Tt ][0-9:.+\-Zz]*)?$")


class FrontMatterError(Exception):
    """Raised when a file has no usable front-matter block."""


class FrontMatterYamlLoader(yaml.SafeLoader):
    """SafeLoader that keeps impossible timestamps (2024-13-45) as plain strings."""


def _construct_timestamp(loader, node):
    try:
        return yaml.SafeLoader.construct_yaml_timestamp(loader, node)
    except ValueError:
        return loader.construct_scalar(node)


FrontMatterYamlLoader.add_constructor("tag:yaml.org,2002:timestamp", _construct_timestamp)


class FrontMatterTomlDecoder(toml.TomlDecoder):
    """TOML decoder that keeps impossible date literals as plain strings."""

    def load_value(self, v, strictly_valid=True):
        try:
            return super().load_value(v, strictly_valid)
        except ValueError:
            if _DATE_LIKE.match(v.strip()):
                return v.strip(), "str"
            raise


@dataclass
class ParsedFrontMatter:
    format: str
    metadata: Dict[str, Any]
    content: str
    extra: Dict[str, Any] = field(default_factory=dict)


class FrontMatterFormat:
    """
    One front-matter notation. Subclasses only decide how the raw mapping
    maps onto the canonical keys; splitting and decoding are delegated to the
    matching python-frontmatter handler.
    """

    name: str = ""
    handler: BaseHandler

    def detect(self, text: str) -> bool:
        return bool(self.handler.detect(text))

    def parse(self, text: str) -> ParsedFrontMatter:
        try:
            raw_fm, content = self.handler.split(text)
        except ValueError as e:
            raise FrontMatterError(
                f"unterminated {self.name} front matter block"
            ) from e

        try:
            metadata = self.load(raw_fm)
        except (yaml.YAMLError, ValueError) as e:
            raise FrontMatterError(f"invalid {self.name} front matter: {e}") from e

        if metadata is None:
            metadata = {}
        if not isinstance(metadata, dict):
            raise FrontMatterError(
                f"{self.name} front matter must be a mapping, got {type(metadata).__name__}"
            )

        canonical, extra = self.normalize(metadata)
        return ParsedFrontMatter(
            format=self.name,
            metadata=canonical,
            content=content.strip(),
            extra=extra,
        )

    def load(self, raw_fm: str):
        return self.handler.load(raw_fm)

    def normalize(self, metadata: dict):
        raise NotImplementedError

    @staticmethod
    def _split_known(metadata: dict, skip=()):
        canonical = {k: v for k, v in metadata.items() if k in KNOWN_KEYS}
        extra = canonical.pop("extra", None)
        if extra is not None and not isinstance(extra, dict):
            raise FrontMatterError("'extra' must be a table/mapping")
        # YAML allows non-string keys (`2024: note`); extra is keyed by str
        extra = {str(key): value for key, value in (extra or {}).items()}
        for key, value in metadata.items():
            if key not in KNOWN_KEYS and key not in skip:
                extra.setdefault(str(key), value)
        return canonical, extra


class TomlFrontMatter(FrontMatterFormat):
    """``+++`` delimited TOML; taxonomies live in a nested ``[taxonomies]`` table."""

    name = "toml"
    handler = TOMLHandler()

    def load(self, raw_fm: str):
        return self.handler.load(raw_fm, decoder=FrontMatterTomlDecoder())

    def normalize(self, metadata: dict):
        canonical, extra = self._split_known(metadata, skip=("taxonomies",))
        taxonomies = metadata.get("taxonomies") or {}
        if not isinstance(taxonomies, dict):
            raise FrontMatterError("'taxonomies' must be a table")
        for key in TAXONOMY_KEYS:
            if key in taxonomies:
                canonical[key] = taxonomies[key]
        return canonical, extra


class YamlFrontMatter(FrontMatterFormat):
    """``---`` delimited YAML; ``tags``, ``categories`` and ``author(s)`` are flat keys."""

    name = "yaml"
    handler = YAMLHandler()

    def load(self, raw_fm: str):
        return self.handler.load(raw_fm, Loader=FrontMatterYamlLoader)

    def normalize(self, metadata: dict):
        canonical, extra = self._split_known(
            metadata, skip=TAXONOMY_KEYS + ("author",)
        )
        for key in ("tags", "categories"):
            if key in metadata:
                canonical[key] = metadata[key]

        if "authors" in metadata:
            if "author" in metadata:
                logger.debug("Both 'author' and 'authors' set; using 'authors'")
            canonical["authors"] = metadata["authors"]
        elif "author" in metadata:
            canonical["authors"] = metadata["author"]
        return canonical, extra


FORMATS: List[FrontMatterFormat] = [TomlFrontMatter(), YamlFrontMatter()]


def detect_format(
    text: str, formats: Optional[List[FrontMatterFormat]] = None
) -> Optional[FrontMatterFormat]:
    for fmt in formats or FORMATS:
        if fmt.detect(text):
            return fmt
    return None


def parse_front_matter(
    text: str, formats: Optional[List[FrontMatterFormat]] = None
) -> ParsedFrontMatter:
    """Detect the notation of ``text`` and parse it into the canonical keys."""
    text = text.lstrip("\ufeff").lstrip()
    fmt = detect_format(text, formats)
    if fmt is None:
        raise FrontMatterError("no front matter block (expected '+++' or '---')")
    parsed = fmt.parse(text)
    logger.debug(f"Parsed {fmt.name} front matter keys: {sorted(parsed.metadata)}")
    return parsed
