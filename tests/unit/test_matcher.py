# tests/unit/test_matcher.py: Unit tests for path pattern evaluation.

import re

from pushgate.matcher import matches, violating_paths


def test_include_is_a_partial_match():
    """Tests that the include pattern matches anywhere in the path."""
    assert matches("secrets/key.pem", re.compile(r"\.pem")) is True
    assert matches("secrets/key.pem.txt", re.compile(r"\.pem")) is True

def test_anchored_include():
    """Tests that authors anchor patterns to match the whole path."""
    include = re.compile(r"^secrets/.*\.pem$")
    assert matches("secrets/key.pem", include) is True
    assert matches("other/secrets/key.pem", include) is False
    assert matches("secrets/key.pem.txt", include) is False

def test_no_include_match():
    assert matches("readme.md", re.compile(r".*\.pem$")) is False

def test_exclude_takes_precedence():
    """Tests that a path matching the exclude pattern is never a violation."""
    include = re.compile(r".*\.pem$")
    exclude = re.compile(r"test/.*")
    assert matches("test/fixture.pem", include, exclude) is False
    assert matches("src/fixture.pem", include, exclude) is True
    assert matches("src/test/fixture.pem", include, exclude) is False

def test_violating_paths_keeps_order():
    include = re.compile(r"\.(jar|bin)$")
    paths = ["b.bin", "readme.md", "a.jar"]
    assert violating_paths(paths, include) == ["b.bin", "a.jar"]
