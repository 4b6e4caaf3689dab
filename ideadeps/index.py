"""Membership index — which buckets contain each dependency identity.

The index is built once per resolution pass over the union of every bucket
any scope rule mentions, so a dependency reachable through several buckets
is extracted per bucket only once and identified exactly once.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass, field

import structlog

from ideadeps.buckets import Bucket
from ideadeps.extractor import DependencyExtractor
from ideadeps.models import PRIMITIVE_SCOPES, DependencyKey, ExtractedDependency, Scope
from ideadeps.rules import ScopeRule

log = structlog.get_logger("ideadeps.index")


@dataclass
class IndexEntry:
    """First extracted payload for an identity plus every bucket it was found in."""

    dependency: ExtractedDependency
    buckets: list[Bucket] = field(default_factory=list)

    def found_in_any(self, buckets: Iterable[Bucket]) -> bool:
        return any(b in self.buckets for b in buckets)


@dataclass
class MembershipIndex:
    entries: dict[DependencyKey, IndexEntry] = field(default_factory=dict)

    def record(self, dependency: ExtractedDependency, bucket: Bucket) -> None:
        entry = self.entries.get(dependency.key)
        if entry is None:
            entry = self.entries[dependency.key] = IndexEntry(dependency=dependency)
        if bucket not in entry.buckets:
            entry.buckets.append(bucket)

    def buckets_of(self, key: DependencyKey) -> list[Bucket]:
        entry = self.entries.get(key)
        return list(entry.buckets) if entry is not None else []

    def __iter__(self) -> Iterator[DependencyKey]:
        return iter(self.entries)

    def __len__(self) -> int:
        return len(self.entries)

    def __contains__(self, key: object) -> bool:
        return key in self.entries


def indexed_buckets(rules: Mapping[Scope, ScopeRule]) -> tuple[Bucket, ...]:
    """Union of plus and minus buckets over all scopes, first occurrence wins."""
    ordered: dict[int, Bucket] = {}
    for scope in PRIMITIVE_SCOPES:
        rule = rules.get(scope)
        if rule is None:
            continue
        for bucket in (*rule.plus, *rule.minus):
            ordered.setdefault(id(bucket), bucket)
    return tuple(ordered.values())


def build_index(
    rules: Mapping[Scope, ScopeRule],
    extractor: DependencyExtractor,
    *,
    offline: bool = False,
    download_sources: bool = False,
    download_javadoc: bool = False,
) -> MembershipIndex:
    """Extract every referenced bucket once per dependency kind and index the results.

    Repository artifacts are not extracted at all when ``offline`` is set.
    Artifacts the extractor cannot resolve never reach the index.
    """
    buckets = indexed_buckets(rules)
    index = MembershipIndex()
    if offline:
        log.info("index.offline_skip_repository", buckets=len(buckets))

    for bucket in buckets:
        single = (bucket,)
        for project_dep in extractor.extract_project_dependencies(single, ()):
            index.record(project_dep, bucket)
        if not offline:
            for repo_dep in extractor.extract_repo_file_dependencies(
                single, (), download_sources, download_javadoc
            ):
                index.record(repo_dep, bucket)
        for file_dep in extractor.extract_local_file_dependencies(single, ()):
            index.record(file_dep, bucket)

    log.debug("index.built", buckets=[b.name for b in buckets], identities=len(index))
    return index
