"""Dependency buckets (build configurations) and the registry that names them."""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field

from ideadeps.models import Declaration


@dataclass(eq=False)
class Bucket:
    """Named, ordered collection of dependency declarations.

    Buckets compare by identity: an inherited bucket and a detached copy of
    it are different buckets even while their contents match.
    """

    name: str
    declarations: list[Declaration] = field(default_factory=list)
    extends_from: list[Bucket] = field(default_factory=list)

    def __repr__(self) -> str:
        return f"Bucket({self.name!r})"

    def declare(self, *declarations: Declaration) -> Bucket:
        self.declarations.extend(declarations)
        return self

    def hierarchy(self) -> list[Bucket]:
        """This bucket followed by every bucket it inherits, depth first."""
        seen: dict[int, Bucket] = {}
        stack = [self]
        while stack:
            bucket = stack.pop()
            if id(bucket) in seen:
                continue
            seen[id(bucket)] = bucket
            stack.extend(reversed(bucket.extends_from))
        return list(seen.values())

    def all_declarations(self) -> list[Declaration]:
        """Own and inherited declarations, first occurrence wins."""
        return list(
            dict.fromkeys(d for bucket in self.hierarchy() for d in bucket.declarations)
        )

    def copy(self) -> Bucket:
        """Detached snapshot with the flattened contents and no hierarchy."""
        return Bucket(name=f"{self.name}Copy", declarations=self.all_declarations())


class BucketRegistry:
    """Buckets of one build unit, looked up by name."""

    def __init__(self, buckets: Iterable[Bucket] = ()) -> None:
        self._buckets: dict[str, Bucket] = {}
        for bucket in buckets:
            self.add(bucket)

    def add(self, bucket: Bucket) -> Bucket:
        self._buckets[bucket.name] = bucket
        return bucket

    def create(self, name: str, extends_from: Iterable[str] = ()) -> Bucket:
        """Bucket ``name`` inheriting the named buckets, creating any that are missing.

        An existing bucket keeps its identity and gains any new parents, so
        buckets already extending it keep seeing its contents.
        """
        parents = [self.find_bucket(n) or self.create(n) for n in extends_from]
        bucket = self.find_bucket(name)
        if bucket is None:
            return self.add(Bucket(name=name, extends_from=parents))
        for parent in parents:
            if parent is not bucket and parent not in bucket.extends_from:
                bucket.extends_from.append(parent)
        return bucket

    def find_bucket(self, name: str) -> Bucket | None:
        return self._buckets.get(name)

    @property
    def names(self) -> list[str]:
        return list(self._buckets)

    def __iter__(self) -> Iterator[Bucket]:
        return iter(self._buckets.values())

    def __len__(self) -> int:
        return len(self._buckets)

    def __contains__(self, name: object) -> bool:
        return name in self._buckets
