"""
Graph Flattener.

Walks the resolver's first-level dependencies and produces the direct
dependency view and the deduplicated, sorted transitive closure that the rest
of a run works on.
"""

from __future__ import annotations

import time
from collections import defaultdict
from collections.abc import Callable, Iterable, Iterator
from dataclasses import dataclass, field

from ...core.exceptions import GraphInconsistencyError
from ...core.logging import get_logger
from ...core.types import ServiceResult
from ...models.graph import ResolvedArtifactDescriptor, ResolvedDependency, ResolvedGraph
from ...models.module import Artifact, ArtifactFileType, Module
from ..availability import is_bootstrap_module
from ..inspector import ArtifactInspector

logger = get_logger(__name__)

Identity = tuple[str, str, str]
ArtifactFactory = Callable[[ResolvedArtifactDescriptor], Artifact]


@dataclass(frozen=True)
class FlattenedGraph:
    """Views of a flattened dependency graph, all sorted by module identity."""

    direct: tuple[Module, ...]
    closure: tuple[Module, ...]
    archives_with_jar_parents: tuple[Module, ...] = field(default=())

    @property
    def project_dependencies(self) -> tuple[Module, ...]:
        """Direct dependencies plus archives that a jar-only parent cannot carry."""
        return tuple(sorted(set(self.direct) | set(self.archives_with_jar_parents)))

    def find(self, group: str, name: str) -> list[Module]:
        """All closure modules with the given coordinate (any version)."""
        return [m for m in self.closure if m.group == group and m.name == name]


class _Walk:
    """Single traversal over the resolved nodes."""

    def __init__(self) -> None:
        self.nodes: dict[Identity, ResolvedDependency] = {}
        self.parents: dict[Identity, set[Identity]] = defaultdict(set)
        self._path: list[Identity] = []
        self._on_path: set[Identity] = set()
        self._done: set[Identity] = set()

    def _check_consistent(self, node: ResolvedDependency) -> None:
        known = self.nodes[node.identity]
        if known is node:
            return
        known_children = sorted(c.identity for c in known.children)
        children = sorted(c.identity for c in node.children)
        known_file = known.artifact.file if known.artifact else None
        node_file = node.artifact.file if node.artifact else None
        if known_children != children or known_file != node_file:
            raise GraphInconsistencyError(
                message="Coordinate resolved to different children or artifacts",
                coordinate=str(node),
                path=[":".join(i) for i in self._path],
            )

    def _enter(self, node: ResolvedDependency) -> bool:
        """Record a node reached from the current path.

        Returns:
            bool: True if the node was pushed onto the path and its children
                still have to be walked.
        """
        identity = node.identity
        if identity in self._on_path:
            cycle = [":".join(i) for i in self._path[self._path.index(identity):]]
            raise GraphInconsistencyError(
                message="Dependency cycle",
                coordinate=str(node),
                path=cycle + [str(node)],
            )

        if identity in self.nodes:
            self._check_consistent(node)
        else:
            self.nodes[identity] = node

        if identity in self._done:
            return False

        self._path.append(identity)
        self._on_path.add(identity)
        return True

    def _leave(self) -> None:
        identity = self._path.pop()
        self._on_path.discard(identity)
        self._done.add(identity)

    def visit(self, node: ResolvedDependency) -> None:
        """Depth-first walk from one first-level node, without recursion."""
        if not self._enter(node):
            return
        # One child iterator per entry of self._path
        pending: list[Iterator[ResolvedDependency]] = [iter(node.children)]
        while pending:
            child = next(pending[-1], None)
            if child is None:
                pending.pop()
                self._leave()
                continue
            self.parents[child.identity].add(self._path[-1])
            if self._enter(child):
                pending.append(iter(child.children))

    def recursive_identities(self, node: ResolvedDependency) -> set[Identity]:
        """The node itself and everything reachable from it."""
        reachable: set[Identity] = set()
        stack = [node.identity]
        while stack:
            identity = stack.pop()
            if identity in reachable:
                continue
            reachable.add(identity)
            stack.extend(c.identity for c in self.nodes[identity].children)
        return reachable


class GraphFlattener:
    """Flattens a resolved graph into Module instances.

    Recursion depth and version selection are the resolver's business; this
    service only deduplicates by (group, name, version) and refuses graphs that
    contain a cycle or disagree with themselves.
    """

    def __init__(self, target_sdk: int, artifact_factory: ArtifactFactory | None = None) -> None:
        """Initialize the flattener.

        Args:
            target_sdk: Target SDK propagated into every Module.
            artifact_factory: Builds Artifacts from descriptors. Defaults to an
                ArtifactInspector for ``target_sdk``.
        """
        self.target_sdk = target_sdk
        self.artifact_factory = artifact_factory or ArtifactInspector(target_sdk).inspect

    def _convert(self, walk: _Walk) -> dict[Identity, Module]:
        """Build one Module per identity, children before parents."""
        modules: dict[Identity, Module] = {}

        for root in sorted(walk.nodes):
            stack = [root]
            while stack:
                identity = stack[-1]
                if identity in modules:
                    stack.pop()
                    continue
                node = walk.nodes[identity]
                missing = [c.identity for c in node.children if c.identity not in modules]
                if missing:
                    stack.extend(missing)
                    continue
                stack.pop()
                modules[identity] = Module(
                    group=node.group,
                    name=node.name,
                    version=node.version,
                    target_sdk=self.target_sdk,
                    dependencies=frozenset(modules[c.identity] for c in node.children),
                    artifact=self.artifact_factory(node.artifact) if node.artifact else None,
                )
        return modules

    @staticmethod
    def _archives_with_jar_parents(
        closure: Iterable[Module],
        parents: dict[Identity, set[Identity]],
        modules: dict[Identity, Module],
    ) -> list[Module]:
        result = []
        for module in closure:
            if module.artifact is None or module.artifact.file_type != ArtifactFileType.AAR:
                continue
            for parent_identity in parents.get(module.identity, ()):
                parent = modules[parent_identity].artifact
                if parent is not None and parent.file_type == ArtifactFileType.JAR:
                    result.append(module)
                    break
        return result

    def flatten(self, graph: ResolvedGraph) -> ServiceResult[FlattenedGraph]:
        """Flatten a resolved graph.

        Args:
            graph: Resolver output.

        Returns:
            ServiceResult containing the FlattenedGraph.

        Raises:
            GraphInconsistencyError: On a cycle or a coordinate resolved twice
                with different contents.
            ArtifactIOError: If an artifact cannot be inspected.
        """
        start_time = time.perf_counter()

        walk = _Walk()
        for node in graph.first_level:
            walk.visit(node)

        reachable: set[Identity] = set()
        for node in graph.first_level:
            reachable |= walk.recursive_identities(node)

        modules = self._convert(walk)
        closure = tuple(sorted(modules[i] for i in reachable))
        direct = tuple(sorted({
            modules[node.identity]
            for node in graph.first_level
            if not is_bootstrap_module(node.group, node.name)
        }))
        archives = tuple(self._archives_with_jar_parents(closure, walk.parents, modules))

        flattened = FlattenedGraph(direct=direct, closure=closure, archives_with_jar_parents=archives)

        duration_ms = (time.perf_counter() - start_time) * 1000
        logger.info(
            "Flattened dependency graph",
            direct=len(direct),
            closure=len(closure),
            archives_with_jar_parents=len(archives),
            duration_ms=duration_ms,
        )
        return ServiceResult.ok(flattened, duration_ms=duration_ms)
