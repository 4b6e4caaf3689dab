"""Tests for the Gradle build parser and build file loading."""

from __future__ import annotations

from pathlib import Path

import pytest

from ideadeps.build_files import PARSER_REGISTRY, discover_build_file
from ideadeps.descriptor import ModuleDescriptor
from ideadeps.exceptions import BuildFileError
from ideadeps.loader import load_buckets
from ideadeps.models import LocalFile, ProjectRef, RepoArtifact
from ideadeps.parsers.gradle_build import GradleBuildParser
from ideadeps.resolver import resolve_module
from ideadeps.testing import RecordingExtractor

BUILD_GRADLE = """\
plugins {
    id 'java-library'
}

dependencies {
    implementation "com.google.guava:guava:31.1-jre"
    api(project(":core"))
    compileOnly 'org.projectlombok:lombok:1.18.30'
    runtimeOnly("org.postgresql:postgresql:42.6.0")
    testImplementation "junit:junit:4.13.2"
    implementation files("libs/a.jar", "libs/b.jar")
    implementation project(path: ":util")
    implementation "org.lwjgl:lwjgl:3.3.1:natives-linux"
}
"""


def _parse(content: str, **kwargs):
    return GradleBuildParser(**kwargs).parse(Path("build.gradle"), content)


class TestGradleBuildParser:
    def test_registered(self):
        assert "gradle" in PARSER_REGISTRY

    def test_coordinates(self):
        registry = _parse(BUILD_GRADLE)
        assert RepoArtifact("com.google.guava", "guava", "31.1-jre") in (
            registry.find_bucket("implementation").declarations
        )
        assert registry.find_bucket("compileOnly").declarations == [
            RepoArtifact("org.projectlombok", "lombok", "1.18.30")
        ]
        assert registry.find_bucket("testImplementation").declarations == [
            RepoArtifact("junit", "junit", "4.13.2")
        ]

    def test_classifier(self):
        registry = _parse(BUILD_GRADLE)
        assert RepoArtifact("org.lwjgl", "lwjgl", "3.3.1", "natives-linux") in (
            registry.find_bucket("implementation").declarations
        )

    def test_project_references(self):
        registry = _parse(BUILD_GRADLE)
        assert registry.find_bucket("api").declarations == [ProjectRef(":core")]
        assert ProjectRef(":util") in registry.find_bucket("implementation").declarations

    def test_files(self):
        registry = _parse(BUILD_GRADLE)
        decls = registry.find_bucket("implementation").declarations
        assert LocalFile("libs/a.jar") in decls and LocalFile("libs/b.jar") in decls

    def test_source_order(self):
        registry = _parse(BUILD_GRADLE)
        assert registry.find_bucket("implementation").declarations == [
            RepoArtifact("com.google.guava", "guava", "31.1-jre"),
            LocalFile("libs/a.jar"),
            LocalFile("libs/b.jar"),
            ProjectRef(":util"),
            RepoArtifact("org.lwjgl", "lwjgl", "3.3.1", "natives-linux"),
        ]

    def test_kotlin_dsl(self):
        registry = _parse('dependencies {\n    implementation("io.ktor:ktor-server-core:2.3.4")\n}\n')
        assert registry.find_bucket("implementation").declarations == [
            RepoArtifact("io.ktor", "ktor-server-core", "2.3.4")
        ]

    def test_duplicates_declared_once(self):
        registry = _parse('implementation "a:b:1"\nimplementation "a:b:1"\n')
        assert len(registry.find_bucket("implementation").declarations) == 1

    def test_unknown_configuration_gets_own_bucket(self):
        registry = _parse('kapt "com.google.dagger:dagger-compiler:2.48"\n')
        kapt = registry.find_bucket("kapt")
        assert kapt is not None and kapt.extends_from == []

    def test_java_plugin_hierarchy(self):
        registry = _parse(BUILD_GRADLE)
        classpath = registry.find_bucket("compileClasspath")
        names = [b.name for b in classpath.hierarchy()]
        assert names[:4] == ["compileClasspath", "compileOnly", "compileOnlyApi", "implementation"]
        assert "api" in names
        runtime = [b.name for b in registry.find_bucket("runtimeClasspath").hierarchy()]
        assert "compileOnly" not in runtime

    def test_compile_only_api_wiring(self):
        registry = _parse('compileOnlyApi "g:a:1.0"\n')
        artifact = RepoArtifact("g", "a", "1.0")
        for name in ("compileOnly", "compileClasspath", "apiElements"):
            assert artifact in registry.find_bucket(name).all_declarations()
        assert artifact not in registry.find_bucket("runtimeClasspath").all_declarations()

    def test_without_java_plugin(self):
        registry = _parse('implementation "a:b:1"\n', java_plugin=False)
        assert registry.names == ["implementation"]


class TestLoadBuckets:
    def test_discovers_groovy_build_file(self, tmp_path):
        (tmp_path / "build.gradle").write_text(BUILD_GRADLE)
        parser, path = discover_build_file(tmp_path)
        assert parser.build_system == "gradle"
        assert path.name == "build.gradle"

    def test_discovers_kotlin_build_file(self, tmp_path):
        (tmp_path / "build.gradle.kts").write_text('implementation("a:b:1")\n')
        registry = load_buckets(tmp_path)
        assert registry.find_bucket("implementation").declarations == [RepoArtifact("a", "b", "1")]

    def test_missing_build_file(self, tmp_path):
        with pytest.raises(BuildFileError, match="No build file"):
            load_buckets(tmp_path)


class TestGradleScopes:
    def test_standard_configurations_map_to_scopes(self, tmp_path):
        (tmp_path / "build.gradle").write_text(BUILD_GRADLE)
        registry = load_buckets(tmp_path)
        descriptor = ModuleDescriptor(name="app", module_dir=tmp_path)

        result = resolve_module(registry, descriptor, RecordingExtractor(base_dir=tmp_path))

        scopes: dict[str, list[str]] = {}
        for dep in result.dependencies:
            label = getattr(dep, "module_version", None) or getattr(dep, "name", None)
            if label is None:
                label = dep.library_file.path
            scopes.setdefault(label, []).append(dep.scope)

        assert scopes == {
            "core": ["COMPILE"],
            "util": ["COMPILE"],
            "com.google.guava:guava:31.1-jre": ["COMPILE"],
            "org.lwjgl:lwjgl:3.3.1:natives-linux": ["COMPILE"],
            "$MODULE_DIR$/libs/a.jar": ["COMPILE"],
            "$MODULE_DIR$/libs/b.jar": ["COMPILE"],
            "org.projectlombok:lombok:1.18.30": ["PROVIDED"],
            "org.postgresql:postgresql:42.6.0": ["RUNTIME"],
            "junit:junit:4.13.2": ["TEST"],
        }
        assert result.unresolved == []

    def test_compile_only_and_runtime_only_double_emit(self, tmp_path):
        (tmp_path / "build.gradle").write_text(
            'compileOnly "a:b:1"\nruntimeOnly "a:b:1"\n'
        )
        result = resolve_module(
            load_buckets(tmp_path),
            ModuleDescriptor(name="app", module_dir=tmp_path),
            RecordingExtractor(base_dir=tmp_path),
        )
        assert [d.scope for d in result.dependencies] == ["PROVIDED", "RUNTIME"]

    def test_compile_only_api_is_compile(self, tmp_path):
        # Exported to consumers through apiElements, which PROVIDED subtracts.
        (tmp_path / "build.gradle").write_text('compileOnlyApi "g:a:1.0"\n')
        result = resolve_module(
            load_buckets(tmp_path),
            ModuleDescriptor(name="app", module_dir=tmp_path),
            RecordingExtractor(base_dir=tmp_path),
        )
        assert [(d.module_version, d.scope) for d in result.dependencies] == [
            ("g:a:1.0", "COMPILE")
        ]
