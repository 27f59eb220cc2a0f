"""
Tests for model populators — pom.xml, root package, system values and merge order.
"""

import os
import textwrap
from pathlib import Path

import pytest

from scaffoldkit.core.engine.populators import (
    MavenModelPopulator,
    ModelPopulator,
    RootPackageModelPopulator,
    SystemModelPopulator,
    build_model,
    find_root_package,
    java_version,
    set_if_absent,
)
from scaffoldkit.core.errors import ConfigError

POM = textwrap.dedent("""\
    <?xml version="1.0" encoding="UTF-8"?>
    <project xmlns="http://maven.apache.org/POM/4.0.0">
      <modelVersion>4.0.0</modelVersion>
      <parent>
        <groupId>org.springframework.boot</groupId>
        <artifactId>spring-boot-starter-parent</artifactId>
        <version>3.2.0</version>
      </parent>
      <groupId>com.example</groupId>
      <artifactId>demo</artifactId>
      <version>0.0.1-SNAPSHOT</version>
      <name>Demo</name>
      <description>Demo project</description>
      <properties>
        <java.version>1.8</java.version>
        <kotlin.version>1.9.0</kotlin.version>
      </properties>
    </project>
""")


class _Fixed(ModelPopulator):
    def __init__(self, values):
        self.values = values

    def contribute_to_model(self, project_root, model):
        for key, value in self.values.items():
            set_if_absent(model, key, value)


# ── Maven ───────────────────────────────────────────────────────────


class TestMavenPopulator:
    def test_reads_pom(self, tmp_path: Path):
        (tmp_path / "pom.xml").write_text(POM)
        model = {}
        MavenModelPopulator().contribute_to_model(tmp_path, model)

        assert model["artifact-id"] == "demo"
        assert model["artifact-version"] == "0.0.1-SNAPSHOT"
        assert model["project-name"] == "Demo"
        assert model["project-description"] == "Demo project"
        assert model["java-version"] == "8"
        assert model["maven-properties"]["kotlin-version"] == "1.9.0"
        assert model["maven-model"]["group-id"] == "com.example"
        assert model["artifact-path"].endswith(
            os.path.join("target", "demo-0.0.1-SNAPSHOT.jar")
        )

    def test_no_pom(self, tmp_path: Path):
        model = {}
        MavenModelPopulator().contribute_to_model(tmp_path, model)
        assert model == {}

    def test_invalid_pom(self, tmp_path: Path):
        (tmp_path / "pom.xml").write_text("<project>")
        with pytest.raises(ConfigError, match="Cannot parse"):
            MavenModelPopulator().contribute_to_model(tmp_path, {})

    def test_java_version(self):
        assert java_version("1.8") == "8"
        assert java_version("17") == "17"


# ── Root package ────────────────────────────────────────────────────


class TestRootPackage:
    def _app(self, root: Path, package_dir: str) -> None:
        source = root / "src" / "main" / "java" / package_dir / "DemoApplication.java"
        source.parent.mkdir(parents=True)
        source.write_text(
            f"package {package_dir.replace('/', '.')};\n\n"
            "@SpringBootApplication\npublic class DemoApplication {}\n"
        )

    def test_finds_boot_application(self, tmp_path: Path):
        self._app(tmp_path, "com/example/demo")
        assert find_root_package(tmp_path) == "com.example.demo"

    def test_populates_model(self, tmp_path: Path):
        self._app(tmp_path, "com/example/demo")
        model = {}
        RootPackageModelPopulator().contribute_to_model(tmp_path, model)
        assert model["root-package"] == "com.example.demo"
        assert model["root-package-dir"] == os.path.join("com", "example", "demo")

    def test_ignores_target(self, tmp_path: Path):
        stale = tmp_path / "target" / "src" / "main" / "java" / "old" / "App.java"
        stale.parent.mkdir(parents=True)
        stale.write_text("package old;\n@SpringBootApplication\nclass App {}\n")
        assert find_root_package(tmp_path) is None

    def test_no_application(self, tmp_path: Path):
        model = {}
        RootPackageModelPopulator().contribute_to_model(tmp_path, model)
        assert model == {}


# ── System ──────────────────────────────────────────────────────────


class TestSystemPopulator:
    def test_values(self, tmp_path: Path):
        model = {}
        SystemModelPopulator().contribute_to_model(tmp_path, model)
        assert model["file-separator"] == os.sep
        assert model["tmp-dir"]
        assert model["now"]
        assert isinstance(model["system-environment"], dict)


# ── Merge order ─────────────────────────────────────────────────────


class TestBuildModel:
    def test_set_if_absent(self):
        model = {"a": 1}
        assert set_if_absent(model, "a", 2) is False
        assert set_if_absent(model, "b", None) is False
        assert set_if_absent(model, "c", 3) is True
        assert model == {"a": 1, "c": 3}

    def test_arguments_win_over_populators(self, tmp_path: Path):
        model = build_model(
            tmp_path,
            {"artifact-id": "from-user"},
            [_Fixed({"artifact-id": "from-populator", "extra": "x"})],
        )
        assert model["artifact-id"] == "from-user"
        assert model["extra"] == "x"

    def test_first_populator_wins(self, tmp_path: Path):
        model = build_model(
            tmp_path,
            None,
            [_Fixed({"key": "first"}), _Fixed({"key": "second"})],
        )
        assert model["key"] == "first"

    def test_user_argument_beats_pom(self, tmp_path: Path):
        (tmp_path / "pom.xml").write_text(POM)
        model = build_model(tmp_path, {"artifact-id": "override"}, [MavenModelPopulator()])
        assert model["artifact-id"] == "override"
        assert model["artifact-version"] == "0.0.1-SNAPSHOT"
