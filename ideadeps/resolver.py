"""Scope resolution — match identities to scopes and settle conflicts.

Pipeline for one module::

    effective_rules -> build_index -> match_scopes -> resolve_conflicts -> records

Explicit library directories bypass matching and are placed first.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from pathlib import Path

import structlog

from ideadeps.buckets import BucketRegistry
from ideadeps.descriptor import ModuleDescriptor, PathFactory
from ideadeps.extractor import DeclarationExtractor, DependencyExtractor
from ideadeps.index import MembershipIndex, build_index
from ideadeps.models import (
    PRIMITIVE_SCOPES,
    DependencyKey,
    ResolutionResult,
    ResolvedDependency,
    Scope,
    SingleEntryModuleLibrary,
    UnresolvedRepoDependency,
)
from ideadeps.repository import ArtifactRepository
from ideadeps.rules import ScopeRule, effective_rules

log = structlog.get_logger("ideadeps.resolver")

# (preferred, dominated), each applied once, in this order.
# No rule relates PROVIDED and RUNTIME.
PRIORITY_RULES: tuple[tuple[Scope, Scope], ...] = (
    (Scope.PROVIDED, Scope.COMPILE),
    (Scope.COMPILE, Scope.RUNTIME),
)


def match_scopes(
    index: MembershipIndex, rules: Mapping[Scope, ScopeRule]
) -> dict[DependencyKey, list[Scope]]:
    """Scopes each identity qualifies for: in some plus bucket, in no minus bucket."""
    scopes_of: dict[DependencyKey, list[Scope]] = {}
    for key, entry in index.entries.items():
        matched = [
            scope
            for scope in PRIMITIVE_SCOPES
            if scope in rules
            and entry.found_in_any(rules[scope].plus)
            and not entry.found_in_any(rules[scope].minus)
        ]
        if matched:
            scopes_of[key] = matched
    return scopes_of


def resolve_conflicts(scopes: Iterable[Scope]) -> list[Scope]:
    surviving = list(dict.fromkeys(scopes))
    if len(surviving) < 2:
        return surviving
    for preferred, dominated in PRIORITY_RULES:
        if preferred in surviving and dominated in surviving:
            surviving.remove(dominated)
    return surviving


def resolve(
    index: MembershipIndex,
    rules: Mapping[Scope, ScopeRule],
    path_factory: PathFactory,
) -> list[ResolvedDependency]:
    """One record per (identity, surviving scope), in index then scope order."""
    records: list[ResolvedDependency] = []
    for key, scopes in match_scopes(index, rules).items():
        surviving = resolve_conflicts(scopes)
        if len(surviving) < len(scopes):
            log.debug(
                "resolver.scope_dropped",
                dependency=repr(key),
                matched=[s.label for s in scopes],
                kept=[s.label for s in surviving],
            )
        dependency = index.entries[key].dependency
        for scope in surviving:
            records.append(dependency.build(scope.label, path_factory))
    return records


def collect_unresolved(
    extractor: DependencyExtractor, rules: Mapping[Scope, ScopeRule]
) -> list[UnresolvedRepoDependency]:
    """Unresolved artifacts reachable from any scope, unique by display name, sorted."""
    by_name: dict[str, UnresolvedRepoDependency] = {}
    for scope in PRIMITIVE_SCOPES:
        rule = rules.get(scope)
        if rule is None:
            continue
        for dep in extractor.unresolved_external_dependencies(rule.plus, rule.minus):
            by_name.setdefault(dep.display_name, dep)
    return [by_name[name] for name in sorted(by_name)]


def inject_explicit(
    libraries: Mapping[str, Iterable[Path | str]], path_factory: PathFactory
) -> list[SingleEntryModuleLibrary]:
    """A library per existing directory, tagged with its scope label as given."""
    injected: list[SingleEntryModuleLibrary] = []
    for scope, paths in libraries.items():
        for path in paths:
            directory = Path(path)
            if not directory.is_dir():
                log.debug("resolver.explicit_library_skipped", scope=scope, path=str(directory))
                continue
            injected.append(
                SingleEntryModuleLibrary(library_file=path_factory.path(directory), scope=scope)
            )
    return injected


class ScopeResolver:
    """Resolve the IDE dependencies of one module.

    Usage::

        resolver = ScopeResolver()
        result = resolver.run(registry, descriptor)

    Every call builds its own rules and index; nothing is shared between
    calls, so one resolver may serve several modules.
    """

    def __init__(
        self,
        extractor: DependencyExtractor | None = None,
        repository: ArtifactRepository | None = None,
    ) -> None:
        self._extractor = extractor
        self._repository = repository

    def extractor_for(self, descriptor: ModuleDescriptor) -> DependencyExtractor:
        if self._extractor is not None:
            return self._extractor
        return DeclarationExtractor(repository=self._repository, base_dir=descriptor.base_dir)

    def provide(
        self, registry: BucketRegistry, descriptor: ModuleDescriptor
    ) -> list[ResolvedDependency]:
        path_factory = descriptor.path_factory()
        rules = effective_rules(registry, descriptor.scopes)
        index = build_index(
            rules,
            self.extractor_for(descriptor),
            offline=descriptor.offline,
            download_sources=descriptor.download_sources,
            download_javadoc=descriptor.download_javadoc,
        )

        records: list[ResolvedDependency] = []
        records.extend(inject_explicit(descriptor.explicit_libraries(), path_factory))
        records.extend(resolve(index, rules, path_factory))
        return list(dict.fromkeys(records))

    def unresolved(
        self, registry: BucketRegistry, descriptor: ModuleDescriptor
    ) -> list[UnresolvedRepoDependency]:
        if descriptor.offline:
            return []
        rules = effective_rules(registry, descriptor.scopes)
        return collect_unresolved(self.extractor_for(descriptor), rules)

    def run(self, registry: BucketRegistry, descriptor: ModuleDescriptor) -> ResolutionResult:
        log.info("resolver.start", module=descriptor.name, buckets=len(registry))
        result = ResolutionResult(
            dependencies=self.provide(registry, descriptor),
            unresolved=self.unresolved(registry, descriptor),
        )
        log.info(
            "resolver.done",
            module=descriptor.name,
            dependencies=len(result.dependencies),
            unresolved=len(result.unresolved),
        )
        return result


def resolve_module(
    registry: BucketRegistry,
    descriptor: ModuleDescriptor,
    extractor: DependencyExtractor | None = None,
) -> ResolutionResult:
    """Resolve a module with a fresh resolver."""
    return ScopeResolver(extractor=extractor).run(registry, descriptor)
