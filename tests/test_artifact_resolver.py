"""
Tests for dependency artifact resolution — local archives and marker artifacts.
"""

from pathlib import Path

from specforge.core.models.artifact import ArtifactOrigin
from specforge.core.models.report import DependencyReport
from specforge.core.services.artifact_resolver import (
    find_codegen_dependencies,
    resolve_dependency_artifacts,
)


def _report(**configurations) -> DependencyReport:
    return DependencyReport.model_validate({"configurations": configurations})


class TestFindCodegenDependencies:
    def test_collects_all_marker_artifacts(self):
        report = _report(
            smithy4s={
                "modules": [
                    {"id": "a:specs:1", "artifacts": ["a.jar", "a-sources.jar"]},
                    {"id": "b:specs:2", "artifacts": ["b.jar"]},
                ]
            },
            compile={"modules": [{"id": "c:lib:1", "artifacts": ["c.jar"]}]},
        )
        assert find_codegen_dependencies(report) == [
            Path("a.jar"),
            Path("a-sources.jar"),
            Path("b.jar"),
        ]

    def test_marker_not_resolved_is_empty(self):
        report = _report(compile={"modules": [{"artifacts": ["c.jar"]}]})
        assert find_codegen_dependencies(report) == []

    def test_no_report_is_empty(self):
        assert find_codegen_dependencies(None) == []

    def test_custom_marker(self):
        report = _report(specs={"modules": [{"artifacts": ["s.jar"]}]})
        assert find_codegen_dependencies(report, marker="specs") == [Path("s.jar")]


class TestResolveDependencyArtifacts:
    def test_local_before_external(self):
        report = _report(smithy4s={"modules": [{"artifacts": ["ext.jar"]}]})
        artifacts = resolve_dependency_artifacts(report, ["local.jar"])

        assert [a.path for a in artifacts] == [Path("local.jar"), Path("ext.jar")]
        assert [a.origin for a in artifacts] == [ArtifactOrigin.LOCAL, ArtifactOrigin.EXTERNAL]

    def test_duplicates_kept_in_insertion_order(self):
        report = _report(
            smithy4s={"modules": [{"artifacts": ["x.jar"]}, {"artifacts": ["x.jar"]}]}
        )
        artifacts = resolve_dependency_artifacts(report, ["x.jar", "y.jar", "x.jar"])

        assert [str(a.path) for a in artifacts] == ["x.jar", "y.jar", "x.jar", "x.jar", "x.jar"]

    def test_only_local_when_marker_missing(self):
        artifacts = resolve_dependency_artifacts(None, [Path("/abs/common.jar")])
        assert len(artifacts) == 1
        assert artifacts[0].origin is ArtifactOrigin.LOCAL

    def test_nothing_at_all(self):
        assert resolve_dependency_artifacts(None, []) == []
