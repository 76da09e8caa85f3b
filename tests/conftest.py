"""
Pytest configuration and shared fixtures for all unarrow tests.

Building the Earley parser is the expensive part of a compilation, so parser
and driver instances are created once per session and shared.
"""

import shutil
import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))
from unarrow.compiler.driver import CompilerDriver
from unarrow.frontend.parser import Parser


# =============================================================================
# Session-scoped fixtures (shared across all tests)
# =============================================================================

@pytest.fixture(scope="session")
def session_parser():
    """
    Session-scoped parser shared across ALL tests.

    Safe to share: `parse` keeps no state between calls besides the file name
    of the current call.
    """
    return Parser()


@pytest.fixture(scope="session")
def session_compiler():
    """Session-scoped stateless compiler: fresh TransformContext per compilation."""
    return CompilerDriver()


# =============================================================================
# Class-scoped fixtures
# =============================================================================

@pytest.fixture(scope="class")
def parser(session_parser):
    """Class-scoped parser - returns session parser (stateless, safe to share)."""
    return session_parser


@pytest.fixture(scope="class")
def compiler(session_compiler):
    """Class-scoped compiler - returns session compiler (stateless, safe to share)."""
    return session_compiler


# =============================================================================
# Helper fixtures
# =============================================================================

@pytest.fixture(scope="session")
def parse(session_parser):
    """Parse JavaScript source to a Program."""
    def _parse(source: str, source_file: str = "test.js"):
        return session_parser.parse(source, source_file)
    return _parse


@pytest.fixture(scope="session")
def compile_js(session_compiler):
    """Compile JavaScript source and assert success; returns the CompilationResult."""
    def _compile(source: str, **kwargs):
        result = session_compiler.compile(source, **kwargs)
        assert result.success, result.format_diagnostics(color=False)
        return result
    return _compile


@pytest.fixture(scope="session")
def node_executable():
    """Path to `node`; tests that execute generated code are skipped without it."""
    path = shutil.which("node")
    if path is None:
        pytest.skip("node is not installed")
    return path


# =============================================================================
# Markers
# =============================================================================

def pytest_configure(config):
    """Register custom markers for test organization."""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests"
    )
    config.addinivalue_line(
        "markers", "unit: marks tests as unit tests"
    )
    config.addinivalue_line(
        "markers", "runtime: executes generated JavaScript under node"
    )
