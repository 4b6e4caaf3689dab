"""Scope rules — default plus/minus buckets merged with user overrides."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Protocol

import structlog

from ideadeps.buckets import Bucket, BucketRegistry
from ideadeps.models import LEGACY_SCOPE_ALIASES, PRIMITIVE_SCOPES, Scope

log = structlog.get_logger("ideadeps.rules")

DEFAULT_PLUS: dict[Scope, tuple[str, ...]] = {
    Scope.PROVIDED: ("compileOnly",),
    Scope.COMPILE: ("compileClasspath",),
    Scope.TEST: ("testCompileClasspath", "testRuntimeClasspath"),
    Scope.RUNTIME: ("runtimeClasspath",),
}

DEFAULT_MINUS: dict[Scope, tuple[str, ...]] = {
    Scope.PROVIDED: ("implementation", "apiElements"),
    Scope.COMPILE: (),
    Scope.TEST: ("runtimeClasspath",),
    Scope.RUNTIME: ("implementation",),
}


class PlusMinus(Protocol):
    """User override for one scope: extra bucket names to add and subtract."""

    plus: list[str]
    minus: list[str]


@dataclass(frozen=True)
class ScopeRule:
    """Effective buckets for one scope."""

    plus: tuple[Bucket, ...] = ()
    minus: tuple[Bucket, ...] = ()


def _lookup(
    registry: BucketRegistry, names: Iterable[str], scope: Scope, role: str
) -> list[Bucket]:
    found: list[Bucket] = []
    for name in names:
        bucket = registry.find_bucket(name)
        if bucket is None:
            # Build units may omit optional buckets.
            log.debug("rules.bucket_missing", scope=scope.label, role=role, bucket=name)
            continue
        found.append(bucket)
    return found


def _unique(buckets: Iterable[Bucket]) -> tuple[Bucket, ...]:
    return tuple({id(b): b for b in buckets}.values())


def effective_rule(
    registry: BucketRegistry,
    scope: Scope,
    user_plus: Iterable[str] | None = None,
    user_minus: Iterable[str] | None = None,
) -> ScopeRule:
    """Default rule for ``scope`` unioned with the user's bucket names."""
    plus = _lookup(registry, DEFAULT_PLUS[scope], scope, "plus")
    plus += _lookup(registry, user_plus or (), scope, "plus")
    minus = _lookup(registry, DEFAULT_MINUS[scope], scope, "minus")
    minus += _lookup(registry, user_minus or (), scope, "minus")
    return ScopeRule(plus=_unique(plus), minus=_unique(minus))


def effective_rules(
    registry: BucketRegistry,
    overrides: Mapping[str, PlusMinus] | None = None,
) -> dict[Scope, ScopeRule]:
    """Effective rule for every primitive scope, in processing order."""
    overrides = overrides or {}
    for name in overrides:
        if name in LEGACY_SCOPE_ALIASES:
            log.info(
                "rules.legacy_scope_ignored",
                scope=name,
                labels=list(LEGACY_SCOPE_ALIASES[name]),
            )

    rules: dict[Scope, ScopeRule] = {}
    for scope in PRIMITIVE_SCOPES:
        override = overrides.get(scope.name)
        rules[scope] = effective_rule(
            registry,
            scope,
            override.plus if override is not None else None,
            override.minus if override is not None else None,
        )
    return rules
