"""
Shared test fixtures and configuration.
"""

import textwrap
from pathlib import Path

import pytest

from specforge.core.models.request import GenerationRequest


class FakeGenerator:
    """Generator stand-in: records requests, returns fixed file names.

    Source-looking names are placed under ``request.output``, everything
    else under ``request.resource_output``.
    """

    def __init__(self, files=("Foo.scala", "Bar.scala", "pets.smithy"), error=None):
        self.files = list(files)
        self.error = error
        self.calls: list[GenerationRequest] = []

    def __call__(self, request: GenerationRequest) -> list[Path]:
        self.calls.append(request)
        if self.error is not None:
            raise self.error
        return [
            (request.output if name.endswith(".scala") else request.resource_output) / name
            for name in self.files
        ]


@pytest.fixture
def fake_generator() -> FakeGenerator:
    return FakeGenerator()


@pytest.fixture
def generator_factory():
    """Build FakeGenerators with custom outputs or a failure."""
    return FakeGenerator


@pytest.fixture
def build_root(tmp_path: Path) -> Path:
    """A project with a specforge.yml, an input dir and a compile configuration."""
    content = textwrap.dedent("""\
        name: petstore
        generator: "specforge_test_gen:generate"
        repositories:
          - name: central
            kind: maven
            root: "https://repo1.maven.org/maven2/"
          - name: ivy-local
            kind: file
            root: "~/.ivy2/local"
        resolution:
          smithy4s:
            modules:
              - id: "com.acme:specs:1.0"
                artifacts: ["lib/specs-1.0.jar"]
        configurations:
          compile:
            allowed_namespaces: [acme.pets, acme.store]
            excluded_namespaces: [acme.store]
            transformers: [AddDefaults]
            internal_dependencies: [modules/common/common.jar]
    """)
    (tmp_path / "specforge.yml").write_text(content)
    (tmp_path / "src" / "compile" / "smithy").mkdir(parents=True)
    return tmp_path
