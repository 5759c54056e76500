"""
Build-File Synthesizer.

Renders one declaration group per vendored module into libs/Android.bp and
vendors the backing artifacts next to it.
"""

from __future__ import annotations

import time
from collections.abc import Iterable, Sequence

from pydantic import BaseModel, Field

from ...core.exceptions import GraphInconsistencyError
from ...core.logging import get_logger
from ...core.types import ServiceResult
from ...models.module import DEFAULT_MIN_SDK_VERSION, Artifact, ArtifactFileType, Module
from ...storage import OutputTree
from ..availability import AvailabilityClassifier
from ..canonicalizer import NameCanonicalizer
from . import templates

logger = get_logger(__name__)

LIBS_BUILD_FILE = "Android.bp"
MANIFEST_ENTRY = "AndroidManifest.xml"
LICENSE_SUFFIX = ".license"


class SynthesisOutput(BaseModel):
    """Output of one synthesis pass."""

    vendored: list[str] = Field(default_factory=list, description="Vendored module names, in output order")
    platform_provided: list[str] = Field(default_factory=list)
    written_keys: list[str] = Field(default_factory=list, description="Files written below the libs root")
    declarations: int = Field(default=0, description="Number of declarations rendered")


def dependency_names(
    dependencies: Iterable[Module],
    canonicalizer: NameCanonicalizer,
    classifier: AvailabilityClassifier,
) -> list[str]:
    """Canonical, deduplicated, sorted names of a set of dependencies.

    Structurally excluded modules are dropped before naming.
    """
    return sorted({
        canonicalizer.module_name(dependency)
        for dependency in dependencies
        if not classifier.is_excluded(dependency)
    })


class BuildFileSynthesizer:
    """Writes libs/Android.bp and the vendored artifacts for a closure."""

    def __init__(
        self,
        tree: OutputTree,
        canonicalizer: NameCanonicalizer,
        classifier: AvailabilityClassifier,
        target_sdk: int,
        copyright_holders: Sequence[str] = ("The LineageOS Project",),
        license_id: str = "Apache-2.0",
    ) -> None:
        """Initialize the synthesizer.

        Args:
            tree: Output tree rooted at the libs directory.
            canonicalizer: Shared name canonicalizer.
            classifier: Shared availability classifier.
            target_sdk: SDK version used for modules without an artifact.
            copyright_holders: Holders listed in the generated header.
            license_id: SPDX license identifier of the generated header.
        """
        self.tree = tree
        self.canonicalizer = canonicalizer
        self.classifier = classifier
        self.target_sdk = target_sdk
        self.header = templates.render_header(copyright_holders, license_id)

    def format_dependencies(self, module: Module) -> list[str]:
        return dependency_names(module.dependencies, self.canonicalizer, self.classifier)

    def render_module(self, module: Module) -> str:
        """Render the declaration group of one vendored module."""
        name = self.canonicalizer.module_name(module)
        path = self.canonicalizer.module_path(module)
        deps = self.format_dependencies(module)
        artifact = module.artifact

        if artifact is None:
            return templates.render_aggregate_only(
                name, self.target_sdk, DEFAULT_MIN_SDK_VERSION, deps
            )

        if artifact.file_type == ArtifactFileType.AAR:
            return templates.render_aar(
                name,
                aar_path=f"{path}/{artifact.file_name}",
                manifest_path=f"{path}/{MANIFEST_ENTRY}",
                sdk_version=artifact.target_sdk_version,
                min_sdk_version=artifact.min_sdk_version,
                deps=deps,
                extract_jni=artifact.extracts_native_code,
            )

        return templates.render_jar(
            name,
            jar_path=f"{path}/{artifact.file_name}",
            sdk_version=artifact.target_sdk_version,
            min_sdk_version=artifact.min_sdk_version,
            deps=deps,
        )

    def _write_license(self, key: str, artifact: Artifact) -> list[str]:
        if not artifact.license_text:
            return []
        return [self.tree.write_text(f"{key}{LICENSE_SUFFIX}", artifact.license_text)]

    def _vendor_artifact(self, module: Module, artifact: Artifact) -> list[str]:
        """Copy the artifact, then its license sidecar, then (for AARs) the manifest."""
        dir_key = self.canonicalizer.module_path(module)
        self.tree.ensure_dir(dir_key)

        file_key = self.tree.copy_file(artifact.file, f"{dir_key}/{artifact.file_name}")
        written = [file_key]
        written += self._write_license(file_key, artifact)

        if artifact.file_type == ArtifactFileType.AAR:
            manifest_key = self.tree.extract_member(file_key, MANIFEST_ENTRY, dir_key)
            written.append(manifest_key)
            written += self._write_license(manifest_key, artifact)

        return written

    def _append_declaration(self, text: str) -> None:
        if not self.tree.exists(LIBS_BUILD_FILE):
            self.tree.write_text(LIBS_BUILD_FILE, self.header)
        self.tree.append_text(LIBS_BUILD_FILE, text)

    def synthesize(self, closure: Iterable[Module]) -> ServiceResult[SynthesisOutput]:
        """Vendor and declare every module of the closure the platform lacks.

        Modules are processed in the given order, which must be the sorted
        closure for the output to be reproducible.

        Args:
            closure: Transitive closure, sorted.

        Returns:
            ServiceResult containing SynthesisOutput.

        Raises:
            GraphInconsistencyError: If two vendored modules map to the same name.
            ArtifactIOError: On any vendoring failure.
        """
        start_time = time.perf_counter()

        vendored, provided = self.classifier.partition(closure)
        output = SynthesisOutput(
            platform_provided=[self.canonicalizer.module_name(m) for m in provided],
        )

        seen: dict[str, Module] = {}
        for module in vendored:
            name = self.canonicalizer.module_name(module)
            if name in seen:
                raise GraphInconsistencyError(
                    message=f"Module name '{name}' is produced by two vendored modules",
                    coordinate=str(module),
                    path=[str(seen[name]), str(module)],
                )
            seen[name] = module

            if module.artifact is not None:
                output.written_keys += self._vendor_artifact(module, module.artifact)

            self._append_declaration(self.render_module(module))
            output.vendored.append(name)
            output.declarations += 1 if module.artifact is None else 2

            logger.debug(
                "Vendored module",
                module=name,
                file=module.artifact.file_name if module.artifact else None,
            )

        if output.vendored:
            output.written_keys.append(LIBS_BUILD_FILE)

        duration_ms = (time.perf_counter() - start_time) * 1000
        logger.info(
            "Synthesized libs build file",
            vendored=len(output.vendored),
            platform_provided=len(output.platform_provided),
            declarations=output.declarations,
            duration_ms=duration_ms,
        )
        return ServiceResult.ok(output, duration_ms=duration_ms)
