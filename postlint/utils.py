import math
import os


def count_words(text: str) -> int:
    return len(text.split())


def calculate_reading_time(text: str, words_per_minute: int = 200) -> str:
    minutes = math.ceil(count_words(text) / words_per_minute) or 1
    return f"{minutes} min"


def normalize_slug(path: str, slug_override: str | None = None) -> str:
    """Remove extension and use forward slashes; ``slug_override`` replaces the last segment."""
    base, _ = os.path.splitext(path.replace(os.sep, "/"))
    if slug_override:
        head, _, _ = base.rpartition("/")
        base = f"{head}/{slug_override}" if head else slug_override
    return base
