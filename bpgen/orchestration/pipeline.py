"""
Generation pipeline for bpgen.

Runs one generation: flatten the resolved graph, wipe the vendored tree,
patch the hand-maintained Android.bp, then regenerate libs/Android.bp and the
vendored artifacts. Any error aborts the run.
"""

from __future__ import annotations

import time
import uuid
from collections.abc import Mapping
from datetime import datetime, timezone

from pydantic import BaseModel, Field

from ..core.config import Config
from ..core.logging import get_logger, run_context
from ..core.types import PlatformPredicate
from ..models.graph import ResolvedGraph
from ..services.availability import AvailabilityClassifier
from ..services.canonicalizer import DEFAULT_MODULE_NAMES, NameCanonicalizer
from ..services.flattener import FlattenedGraph, GraphFlattener
from ..services.flattener.service import ArtifactFactory
from ..services.patcher import AndroidBpPatcher
from ..services.synthesizer import BuildFileSynthesizer, dependency_names
from ..services.synthesizer.service import LIBS_BUILD_FILE
from ..storage import LocalOutputTree, OutputTree

logger = get_logger(__name__)


class GenerationResult(BaseModel):
    """Summary of a completed generation run."""

    run_id: str
    started_at: datetime
    completed_at: datetime
    duration_ms: float = 0.0

    direct_dependencies: int = 0
    closure_size: int = 0
    project_dependencies: list[str] = Field(
        default_factory=list, description="Names written to the hand-maintained list"
    )
    vendored: list[str] = Field(default_factory=list)
    platform_provided: list[str] = Field(default_factory=list)
    declarations: int = 0

    android_bp_patched: bool = False
    android_bp_changed: bool = False
    libs_build_file_hash: str | None = Field(
        default=None, description="SHA-256 of libs/Android.bp, None if no module was vendored"
    )
    written_files: list[str] = Field(default_factory=list)


class GenerateBpPipeline:
    """One generation run over a resolved graph.

    The classifier passed in is the single predicate instance shared by the
    canonicalizer, the synthesizer and the patcher list.
    """

    def __init__(
        self,
        config: Config,
        is_provided_by_platform: PlatformPredicate | None = None,
        name_table: Mapping[str, str] = DEFAULT_MODULE_NAMES,
        tree: OutputTree | None = None,
        artifact_factory: ArtifactFactory | None = None,
    ) -> None:
        """Initialize the pipeline.

        Args:
            config: Run configuration.
            is_provided_by_platform: Platform-availability predicate. Defaults
                to the patterns in ``config.platform_modules``.
            name_table: Read-only platform module name overrides.
            tree: Output tree for the libs directory.
            artifact_factory: Overrides archive inspection (mainly for tests).
        """
        self.config = config
        if is_provided_by_platform is None:
            self.classifier = AvailabilityClassifier.from_patterns(config.platform_modules)
        else:
            self.classifier = AvailabilityClassifier(is_provided_by_platform)
        self.canonicalizer = NameCanonicalizer(config.project_name, self.classifier, name_table)
        self.tree = tree or LocalOutputTree(config.libs_path)
        self.flattener = GraphFlattener(config.target_sdk, artifact_factory)
        self.synthesizer = BuildFileSynthesizer(
            self.tree,
            self.canonicalizer,
            self.classifier,
            config.target_sdk,
            copyright_holders=config.copyright_holders,
            license_id=config.license_id,
        )
        self.patcher = AndroidBpPatcher(config.android_bp_path, config.target_sdk)

    def flatten(self, graph: ResolvedGraph) -> FlattenedGraph:
        return self.flattener.flatten(graph).data

    def project_dependency_names(self, flattened: FlattenedGraph) -> list[str]:
        """Names for the hand-maintained list: direct deps plus jar-parented archives."""
        return dependency_names(flattened.project_dependencies, self.canonicalizer, self.classifier)

    def run(self, graph: ResolvedGraph) -> GenerationResult:
        """Execute the generation.

        Args:
            graph: Resolver output.

        Returns:
            GenerationResult describing what was written.

        Raises:
            BpGenError: Any failure; the libs directory may be partially
                written and is rebuilt by the next run.
        """
        run_id = str(uuid.uuid4())[:8]
        started_at = datetime.now(timezone.utc)
        start_time = time.perf_counter()

        with run_context(run_id=run_id, project=self.config.project_name):
            logger.info(
                "Starting generation",
                target_sdk=self.config.target_sdk,
                libs=str(self.config.libs_path),
            )

            # Stage 1: Flatten before touching the disk
            flattened = self.flatten(graph)

            # Stage 2: Drop every previously vendored file
            self.tree.wipe()

            # Stage 3: Patch the hand-maintained Android.bp
            names = self.project_dependency_names(flattened)
            patched = changed = False
            if self.config.patch_android_bp:
                patch_output = self.patcher.patch(names).data
                patched, changed = True, patch_output.changed
            else:
                logger.warning("Skipping Android.bp patch", file=str(self.config.android_bp_path))

            # Stage 4: Regenerate libs/Android.bp and vendor artifacts
            synthesis = self.synthesizer.synthesize(flattened.closure).data

            libs_hash = None
            local_bp = self.tree.get_local_path(LIBS_BUILD_FILE)
            if local_bp is not None:
                libs_hash = self.tree.compute_hash(local_bp.read_bytes())

            duration_ms = (time.perf_counter() - start_time) * 1000
            result = GenerationResult(
                run_id=run_id,
                started_at=started_at,
                completed_at=datetime.now(timezone.utc),
                duration_ms=duration_ms,
                direct_dependencies=len(flattened.direct),
                closure_size=len(flattened.closure),
                project_dependencies=names,
                vendored=synthesis.vendored,
                platform_provided=synthesis.platform_provided,
                declarations=synthesis.declarations,
                android_bp_patched=patched,
                android_bp_changed=changed,
                libs_build_file_hash=libs_hash,
                written_files=synthesis.written_keys,
            )
            logger.info(
                "Generation completed",
                vendored=len(result.vendored),
                platform_provided=len(result.platform_provided),
                duration_ms=duration_ms,
            )
            return result


def run_generation(config: Config, graph: ResolvedGraph, **kwargs: object) -> GenerationResult:
    """Convenience function to run one generation.

    Args:
        config: Run configuration.
        graph: Resolver output.
        **kwargs: Forwarded to GenerateBpPipeline.

    Returns:
        GenerationResult
    """
    pipeline = GenerateBpPipeline(config, **kwargs)  # type: ignore[arg-type]
    return pipeline.run(graph)
