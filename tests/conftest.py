"""
Shared pytest fixtures for hllcount tests.
"""

import logging
from pathlib import Path

import pytest


@pytest.fixture(scope="session")
def test_output_root() -> Path:
    """
    Returns the root test_output directory. Created once per test session.
    Plots written here persist after tests complete for easy inspection.
    """
    output_dir = Path(__file__).parent.parent / "test_output"
    output_dir.mkdir(exist_ok=True)
    return output_dir


@pytest.fixture
def test_output_dir(request, test_output_root) -> Path:
    """
    Returns a directory for the current test to write output files.
    Directory structure: test_output/<module_name>/<test_name>/
    """
    module_name = request.module.__name__.split(".")[-1]
    test_dir = test_output_root / module_name / request.node.name
    test_dir.mkdir(parents=True, exist_ok=True)
    return test_dir


@pytest.fixture
def write_text(tmp_path):
    """Write text to a file under tmp_path and return its path.

    Text is written as raw UTF-8 bytes so line terminators are preserved
    exactly as given.
    """

    def _write(text: str, name: str = "keys.txt") -> Path:
        path = tmp_path / name
        path.write_bytes(text.encode("utf-8"))
        return path

    return _write


@pytest.fixture(autouse=True)
def reset_hllcount_logging():
    """Reset logging state before and after each test.

    Leaves only the library's NullHandler on the hllcount logger and resets
    its level to NOTSET so one test's logging setup cannot leak into another.
    """
    logger = logging.getLogger("hllcount")

    def _reset():
        for handler in logger.handlers[:]:
            logger.removeHandler(handler)
            if not isinstance(handler, logging.NullHandler):
                handler.close()
        logger.addHandler(logging.NullHandler())
        logger.setLevel(logging.NOTSET)

    _reset()
    yield
    _reset()
