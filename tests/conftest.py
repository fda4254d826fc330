"""Pytest configuration for the ParsecLex test suite.

Hypothesis profiles (max_examples is set here and nowhere else):
- dev: 500 examples, the default for local runs
- ci: 50 derandomized examples
- verbose: 100 examples with progress output

The profile comes from HYPOTHESIS_PROFILE when set to one of the names
above, else "ci" when CI=true, else "dev":

    HYPOTHESIS_PROFILE=verbose pytest tests/

Tests marked @pytest.mark.fuzz feed arbitrary text to whole grammars and
are skipped unless selected with: pytest -m fuzz
"""

import logging
import os

import pytest
from hypothesis import Phase, Verbosity, settings

_ALL_PHASES = [Phase.explicit, Phase.reuse, Phase.generate, Phase.shrink]

# =============================================================================
# HYPOTHESIS PROFILES
# =============================================================================

settings.register_profile("dev", max_examples=500, phases=_ALL_PHASES)

settings.register_profile(
    "ci",
    max_examples=50,
    phases=_ALL_PHASES,
    derandomize=True,
    print_blob=True,
)

settings.register_profile(
    "verbose",
    max_examples=100,
    phases=_ALL_PHASES,
    verbosity=Verbosity.verbose,
)


def _detect_profile() -> str:
    """Pick the Hypothesis profile for this run."""
    explicit = os.environ.get("HYPOTHESIS_PROFILE")
    if explicit in ("dev", "ci", "verbose"):
        return explicit
    if os.environ.get("CI") == "true":
        return "ci"
    return "dev"


settings.load_profile(_detect_profile())


# =============================================================================
# FUZZ MARKER
# =============================================================================


def pytest_configure(config: pytest.Config) -> None:
    """Register the 'fuzz' marker."""
    config.addinivalue_line(
        "markers",
        "fuzz: whole-grammar property tests over arbitrary text (run with -m fuzz)",
    )


def pytest_collection_modifyitems(
    config: pytest.Config, items: list[pytest.Item]
) -> None:
    """Skip fuzz-marked tests unless the -m expression names them."""
    if "fuzz" in str(config.getoption("-m", default="")):
        return

    skip_fuzz = pytest.mark.skip(reason="Fuzzing test - run with: pytest -m fuzz")
    for item in items:
        if "fuzz" in item.keywords:
            item.add_marker(skip_fuzz)


# =============================================================================
# SHARED FIXTURES
# =============================================================================


@pytest.fixture
def parseclex_logs(caplog: pytest.LogCaptureFixture) -> pytest.LogCaptureFixture:
    """caplog recording DEBUG and above from every parseclex logger."""
    caplog.set_level(logging.DEBUG, logger="parseclex")
    return caplog
