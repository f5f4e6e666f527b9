"""Tests for sdkdocs.errors module."""

import pytest

from sdkdocs.errors import (
    AssetError,
    CommandError,
    ConfigError,
    DocsBuildError,
    ErrorCategory,
    GeneratorError,
    InvalidConfigError,
    MissingConfigError,
    RegistryError,
    UnsafePathError,
)


class TestCategories:
    """Each error family reports its own category."""

    @pytest.mark.parametrize(
        ("error", "category"),
        [
            (DocsBuildError("x"), ErrorCategory.INTERNAL),
            (ConfigError("x"), ErrorCategory.CONFIG),
            (MissingConfigError("output"), ErrorCategory.CONFIG),
            (UnsafePathError("x"), ErrorCategory.CONFIG),
            (RegistryError("x", returncode=1), ErrorCategory.PROCESS),
            (GeneratorError("x", returncode=2), ErrorCategory.PROCESS),
            (AssetError("x"), ErrorCategory.IO),
        ],
    )
    def test_default_category(self, error, category):
        assert error.category is category

    def test_category_override(self):
        error = ConfigError("x", category=ErrorCategory.IO)
        assert error.category is ErrorCategory.IO

    def test_hierarchy(self):
        assert issubclass(RegistryError, CommandError)
        assert issubclass(GeneratorError, CommandError)
        assert issubclass(MissingConfigError, ConfigError)
        assert issubclass(AssetError, DocsBuildError)


class TestDocsBuildError:
    def test_str_is_message(self):
        assert str(GeneratorError("Executing jazzy failed with status code: 3")) == (
            "Executing jazzy failed with status code: 3"
        )

    def test_with_context(self):
        error = ConfigError("Bad config").with_context(file="modules.yaml")
        assert error.context == {"file": "modules.yaml"}

    def test_cause_is_chained(self):
        cause = FileNotFoundError("VERSION")
        error = ConfigError("Version file not found", cause=cause)
        assert error.__cause__ is cause

    def test_to_dict(self):
        error = GeneratorError(
            "Executing jazzy failed with status code: 2",
            returncode=2,
            context={"module": "Foo.podspec"},
            cause=RuntimeError("boom"),
        )

        assert error.to_dict() == {
            "error_type": "GeneratorError",
            "message": "Executing jazzy failed with status code: 2",
            "category": "PROCESS",
            "context": {"module": "Foo.podspec"},
            "cause": "boom",
        }

    def test_to_dict_minimal(self):
        assert AssetError("x").to_dict() == {"error_type": "AssetError", "message": "x", "category": "IO"}

    def test_repr(self):
        assert repr(AssetError("x")) == "AssetError('x', category=IO)"


class TestConfigErrors:
    def test_missing_default_message(self):
        error = MissingConfigError("github_url")
        assert error.key == "github_url"
        assert str(error) == "Missing required configuration: github_url"

    def test_invalid_default_message(self):
        error = InvalidConfigError("modules[0]", 42)
        assert error.value == 42
        assert str(error) == "Invalid configuration for modules[0]: 42"


class TestCommandError:
    def test_carries_status_and_stderr(self):
        error = CommandError("failed", returncode=127, stderr="not found")
        assert error.returncode == 127
        assert error.stderr == "not found"
