import pytest

from postlint.utils import calculate_reading_time, count_words, normalize_slug


@pytest.mark.parametrize(
    ("word_count", "expected"),
    [
        (0, "1 min"),
        (1, "1 min"),
        (200, "1 min"),
        (201, "2 min"),
        (400, "2 min"),
        (401, "3 min"),
    ],
)
def test_calculate_reading_time_rounds_up(word_count, expected):
    text = "word " * word_count
    assert calculate_reading_time(text.strip()) == expected


def test_reading_time_respects_words_per_minute():
    assert calculate_reading_time("a b c d", words_per_minute=2) == "2 min"
    assert count_words("  a\nb\tc ") == 3


def test_normalize_slug():
    assert normalize_slug("posts/2024/hello.md") == "posts/2024/hello"
    assert normalize_slug("hello.md", "custom") == "custom"
    assert normalize_slug("posts/hello.md", "custom") == "posts/custom"
