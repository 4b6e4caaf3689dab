"""Parser for Gradle build files (build.gradle / build.gradle.kts).

Collects dependency declarations per configuration and wires the standard
Java plugin configuration hierarchy on top of them.

Handles both Groovy DSL and Kotlin DSL syntax:
  - implementation "group:artifact:version[:classifier]"
  - implementation("group:artifact:version")
  - api(project(":submodule"))
  - compileOnly files("libs/a.jar", "libs/b.jar")
"""

from __future__ import annotations

import re
from pathlib import Path

from ideadeps.buckets import BucketRegistry
from ideadeps.build_files import register_parser
from ideadeps.models import Declaration, LocalFile, ProjectRef, RepoArtifact

# Gradle configuration names (not exhaustive, but covers the common ones)
_CONFIGS = (
    r"\b(?P<config>implementation|api|compileOnly|compileOnlyApi|runtimeOnly|"
    r"annotationProcessor|kapt|ksp|"
    r"testImplementation|testCompileOnly|testRuntimeOnly|"
    r"androidTestImplementation|debugImplementation|releaseImplementation|"
    r"optional|provided|compile|runtime|testCompile|testRuntime|"
    r"\w+Implementation|\w+Api|\w+CompileOnly|\w+RuntimeOnly)"
)

# configuration("group:artifact[:version[:classifier]]")
_COORD_RE = re.compile(
    rf"{_CONFIGS}"
    r"\s*\(?\s*"
    r"""["']"""                          # opening quote
    r"([A-Za-z0-9._-]+)"                # group
    r":"
    r"([A-Za-z0-9._-]+)"                # artifact
    r"(?::([A-Za-z0-9._+\-]+))?"        # optional version
    r"(?::([A-Za-z0-9._-]+))?"          # optional classifier
    r"""["']"""                          # closing quote
)

# configuration(project(":path")) / configuration project(path: ":path")
_PROJECT_RE = re.compile(
    rf"{_CONFIGS}"
    r"\s*\(?\s*project\s*\(\s*(?:path\s*[:=]\s*)?"
    r"""["']([^"']+)["']"""
)

# configuration(files("a.jar", "b.jar"))
_FILES_RE = re.compile(rf"{_CONFIGS}\s*\(?\s*files\s*\(([^)]*)\)")

_QUOTED_RE = re.compile(r"""["']([^"']+)["']""")

# (bucket, inherited buckets), parents listed before children.
# Legacy compile/runtime/testCompile/testRuntime feed their modern replacements.
JAVA_PLUGIN_BUCKETS: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("api", ()),
    ("compile", ()),
    ("runtime", ()),
    ("testCompile", ()),
    ("testRuntime", ()),
    ("implementation", ("api", "compile")),
    ("compileOnlyApi", ()),
    ("compileOnly", ("compileOnlyApi",)),
    ("runtimeOnly", ("runtime",)),
    ("compileClasspath", ("compileOnly", "implementation")),
    ("runtimeClasspath", ("runtimeOnly", "implementation")),
    ("apiElements", ("api", "compileOnlyApi")),
    ("testImplementation", ("implementation", "testCompile")),
    ("testCompileOnly", ()),
    ("testRuntimeOnly", ("runtimeOnly", "testRuntime")),
    ("testCompileClasspath", ("testCompileOnly", "testImplementation")),
    ("testRuntimeClasspath", ("testRuntimeOnly", "testImplementation")),
)


def _declarations(content: str) -> list[tuple[str, Declaration]]:
    """(configuration, declaration) pairs in source order."""
    found: list[tuple[int, str, Declaration]] = []

    for m in _COORD_RE.finditer(content):
        artifact = RepoArtifact(
            group=m.group(2), name=m.group(3), version=m.group(4), classifier=m.group(5)
        )
        found.append((m.start(), m.group("config"), artifact))

    for m in _PROJECT_RE.finditer(content):
        found.append((m.start(), m.group("config"), ProjectRef(m.group(2))))

    for m in _FILES_RE.finditer(content):
        for offset, path in enumerate(_QUOTED_RE.findall(m.group(2))):
            found.append((m.start() + offset, m.group("config"), LocalFile(path)))

    found.sort(key=lambda item: item[0])
    return [(config, decl) for _, config, decl in found]


class GradleBuildParser:
    build_system = "gradle"
    file_patterns = ["build.gradle", "build.gradle.kts"]

    def __init__(self, java_plugin: bool = True) -> None:
        self.java_plugin = java_plugin

    def parse(self, file_path: Path, content: str) -> BucketRegistry:
        registry = BucketRegistry()
        if self.java_plugin:
            for name, parents in JAVA_PLUGIN_BUCKETS:
                registry.create(name, parents)

        for config, decl in _declarations(content):
            bucket = registry.find_bucket(config) or registry.create(config)
            # Dedup
            if decl in bucket.declarations:
                continue
            bucket.declare(decl)

        return registry


register_parser(GradleBuildParser())
