"""ideadeps: IDE classpath scope resolution for multi-bucket build units."""

__version__ = "0.1.0"

from ideadeps.buckets import Bucket, BucketRegistry
from ideadeps.descriptor import ModuleDescriptor, PathFactory, ScopeOverride, load_descriptor
from ideadeps.exceptions import (
    BuildFileError,
    DescriptorError,
    IdeaDepsError,
    UnknownScopeError,
)
from ideadeps.extractor import DeclarationExtractor, DependencyExtractor
from ideadeps.index import MembershipIndex, build_index
from ideadeps.loader import load_buckets
from ideadeps.models import (
    LocalFile,
    ModuleDependency,
    ProjectRef,
    RepoArtifact,
    ResolutionResult,
    Scope,
    SingleEntryModuleLibrary,
    UnresolvedRepoDependency,
)
from ideadeps.repository import LocalMavenRepository
from ideadeps.resolver import ScopeResolver, resolve_module
from ideadeps.rules import ScopeRule, effective_rule, effective_rules

__all__ = [
    "Bucket",
    "BucketRegistry",
    "BuildFileError",
    "DeclarationExtractor",
    "DependencyExtractor",
    "DescriptorError",
    "IdeaDepsError",
    "LocalFile",
    "LocalMavenRepository",
    "MembershipIndex",
    "ModuleDependency",
    "ModuleDescriptor",
    "PathFactory",
    "ProjectRef",
    "RepoArtifact",
    "ResolutionResult",
    "Scope",
    "ScopeOverride",
    "ScopeResolver",
    "ScopeRule",
    "SingleEntryModuleLibrary",
    "UnknownScopeError",
    "UnresolvedRepoDependency",
    "build_index",
    "effective_rule",
    "effective_rules",
    "load_buckets",
    "load_descriptor",
    "resolve_module",
]
