"""Tests for sdkdocs.registry: temp package registry creation and teardown."""

from __future__ import annotations

from pathlib import Path

import pytest

from conftest import FakeRegistry, FakeRunner
from sdkdocs.errors import RegistryError
from sdkdocs.proc import CommandResult
from sdkdocs.registry import ScriptPackageRegistry, temp_package_registry


def _registry(stdout: str = "", returncode: int = 0) -> tuple[ScriptPackageRegistry, FakeRunner]:
    runner = FakeRunner(lambda argv: CommandResult(args=argv, returncode=returncode, stdout=stdout))
    return ScriptPackageRegistry(Path("ci_scripts/make_temp_spec_repo.sh"), runner=runner), runner


class TestScriptPackageRegistry:
    def test_create_returns_last_output_line(self, tmp_path):
        registry, runner = _registry(stdout=f"Creating repo...\nDone\n{tmp_path}/specs   \n")
        assert registry.create() == tmp_path / "specs"
        assert runner.calls == [("ci_scripts/make_temp_spec_repo.sh",)]

    def test_create_fails_on_non_zero_status(self):
        registry, _ = _registry(stdout="/tmp/specs\n", returncode=2)
        with pytest.raises(RegistryError, match="status code: 2") as exc_info:
            registry.create()
        assert exc_info.value.returncode == 2

    def test_create_fails_without_output(self):
        registry, _ = _registry(stdout="\n")
        with pytest.raises(RegistryError, match="no path"):
            registry.create()

    def test_destroy_removes_tree(self, tmp_path):
        repo = tmp_path / "specs"
        (repo / "Foo" / "1.0").mkdir(parents=True)
        (repo / "Foo" / "1.0" / "Foo.podspec.json").write_text("{}")
        registry, _ = _registry()

        registry.destroy(repo)
        assert not repo.exists()

    def test_destroy_missing_path_is_noop(self, tmp_path):
        registry, _ = _registry()
        registry.destroy(tmp_path / "missing")


class TestTempPackageRegistry:
    def test_destroys_after_success(self, fake_registry):
        with temp_package_registry(fake_registry) as path:
            assert path.exists()
        assert fake_registry.destroyed == [path]
        assert not path.exists()

    def test_destroys_after_failure(self, fake_registry):
        with pytest.raises(RuntimeError):
            with temp_package_registry(fake_registry) as path:
                raise RuntimeError("step failed")
        assert fake_registry.destroyed == [path]
        assert not path.exists()

    def test_nothing_to_destroy_when_create_fails(self, tmp_path):
        registry = FakeRegistry(tmp_path, fail=True)
        with pytest.raises(RegistryError):
            with temp_package_registry(registry):
                pytest.fail("body must not run")
        assert registry.destroyed == []
