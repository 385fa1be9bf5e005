"""Test that project structure is correct and modules can be imported."""

import core.analyze
import core.browser
import core.detect
import core.manifests
import core.models
import core.synthesize
import core.versions
from core.models import BrowserConfig, Framework, PackageManager, ProjectAnalysis


def test_core_modules_importable():
    """Ensure core modules can be imported."""
    # This will fail if modules have syntax errors or missing dependencies

    # Basic smoke test - ensure key classes exist
    assert hasattr(core.models, "ProjectEvidence")
    assert hasattr(core.models, "BuildConfiguration")
    assert hasattr(core.detect, "identify")
    assert hasattr(core.analyze, "analyze_python_project")
    assert hasattr(core.browser, "resolve_browser_config")
    assert hasattr(core.synthesize, "synthesize")
    assert hasattr(core.versions, "VersionExtractor")
    assert hasattr(core.manifests, "try_read")


def test_model_creation():
    """Test that basic models can be instantiated."""
    analysis = ProjectAnalysis()
    assert analysis.package_manager == PackageManager.PIP
    assert analysis.is_api_only is True
    assert analysis.browser_config == BrowserConfig()

    assert Framework("pytest") == Framework.PYTEST
