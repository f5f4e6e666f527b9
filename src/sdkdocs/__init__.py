"""
sdkdocs - documentation builds for multi-module SDKs.

Drives an external documentation generator (jazzy) once per SDK module,
renders a shared landing page linking to every module's docs, and
deduplicates the theme assets the generator copies into each module.

Example:
    >>> from pathlib import Path
    >>> from sdkdocs import BuildContext, DocsBuildOrchestrator
    >>> ctx = BuildContext.load(Path("."))
    >>> DocsBuildOrchestrator.from_context(ctx).run()
"""

from sdkdocs.config import BuildContext, BuildSettings, ModuleDescriptor
from sdkdocs.errors import DocsBuildError
from sdkdocs.orchestrator import BuildReport, BuildStage, DocsBuildOrchestrator

__version__ = "0.1.0"

__all__ = [
    "BuildContext",
    "BuildSettings",
    "ModuleDescriptor",
    "DocsBuildError",
    "BuildReport",
    "BuildStage",
    "DocsBuildOrchestrator",
    "__version__",
]
