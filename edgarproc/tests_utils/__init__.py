"""Utilities for testing edgarproc."""
import edgarproc
from pathlib import Path

TEST_DIR = Path(*edgarproc.__path__) / ".." / "tests"
TEST_DIR.mkdir(exist_ok=True)

WEIGHTS_DIR = TEST_DIR / ".weights"
WEIGHTS_DIR.mkdir(exist_ok=True)
