"""
Tests for the codegen use case — full flow from specforge.yml to outputs.
"""

import textwrap
from pathlib import Path

from specforge.core.config.loader import load_build
from specforge.core.models.artifact import ArtifactOrigin, FileType
from specforge.core.persistence.audit import CodegenLedger
from specforge.core.persistence.cache_store import (
    MemoryCacheStore,
    cache_store_for,
    default_cache_dir,
)
from specforge.core.services.codegen_cache import CacheState
from specforge.core.use_cases.codegen import (
    clean_configuration,
    prepare_request,
    run_codegen,
    run_codegen_task,
)


def _two_configurations(tmp_path: Path) -> Path:
    content = textwrap.dedent("""\
        name: multi
        configurations:
          compile:
            library: false
          test: {}
    """)
    path = tmp_path / "specforge.yml"
    path.write_text(content)
    return path


class TestPrepareRequest:
    def test_request_from_build_file(self, build_root: Path):
        build = load_build(build_root / "specforge.yml")
        request = prepare_request(build, build.get_configuration("compile"), build_root)

        assert request.inputs == (build_root / "src" / "compile" / "smithy",)
        assert request.repositories == ("https://repo1.maven.org/maven2/",)
        assert request.transformers == ("AddDefaults",)
        assert [(a.path, a.origin) for a in request.local_jars] == [
            (build_root / "modules" / "common" / "common.jar", ArtifactOrigin.LOCAL),
            (Path("lib/specs-1.0.jar"), ArtifactOrigin.EXTERNAL),
        ]

    def test_explicit_report_overrides_inline_resolution(self, build_root: Path):
        from specforge.core.models.report import DependencyReport

        build = load_build(build_root / "specforge.yml")
        request = prepare_request(
            build, build.get_configuration("compile"), build_root, DependencyReport()
        )
        assert all(a.origin is ArtifactOrigin.LOCAL for a in request.local_jars)


class TestRunCodegenTask:
    def test_library_keeps_resources(self, build_root: Path, fake_generator):
        build = load_build(build_root / "specforge.yml")
        task = run_codegen_task(
            build, build.get_configuration("compile"), build_root, fake_generator,
            store=MemoryCacheStore(),
        )

        assert [p.name for p in task.classified.sources] == ["Foo.scala", "Bar.scala"]
        assert [p.name for p in task.classified.resources] == ["pets.smithy"]
        assert [p.name for p in task.outputs] == ["Foo.scala", "Bar.scala", "pets.smithy"]

    def test_non_library_drops_resources(self, tmp_path: Path, fake_generator):
        build = load_build(_two_configurations(tmp_path))
        task = run_codegen_task(
            build, build.get_configuration("compile"), tmp_path, fake_generator,
            store=MemoryCacheStore(),
        )

        assert task.request.skip == {FileType.RESOURCE}
        assert [p.name for p in task.outputs] == ["Foo.scala", "Bar.scala"]

    def test_uses_configuration_store_by_default(self, build_root: Path, fake_generator):
        build = load_build(build_root / "specforge.yml")
        run_codegen_task(build, build.get_configuration("compile"), build_root, fake_generator)
        assert (default_cache_dir(build_root, "compile") / "input.json").is_file()


class TestRunCodegen:
    def test_generates_then_reuses(self, build_root: Path, fake_generator):
        config = build_root / "specforge.yml"

        first = run_codegen(config_path=config, generator=fake_generator)
        second = run_codegen(config_path=config, generator=fake_generator)

        assert first.ok and second.ok
        assert len(fake_generator.calls) == 1
        assert first.tasks[0].outcome.state is CacheState.NO_PRIOR_RECORD
        assert second.tasks[0].outcome.state is CacheState.UNCHANGED
        assert first.outputs == second.outputs

    def test_adding_input_dir_changes_request(self, tmp_path: Path, fake_generator):
        config = _two_configurations(tmp_path)

        run_codegen(config_path=config, configurations=["test"], generator=fake_generator)
        (tmp_path / "src" / "test" / "smithy").mkdir(parents=True)
        result = run_codegen(config_path=config, configurations=["test"], generator=fake_generator)

        assert result.tasks[0].outcome.state is CacheState.CHANGED
        assert len(fake_generator.calls) == 2

    def test_runs_every_configuration_independently(self, tmp_path: Path, fake_generator):
        result = run_codegen(config_path=_two_configurations(tmp_path), generator=fake_generator)

        assert [t.configuration for t in result.tasks] == ["compile", "test"]
        assert default_cache_dir(tmp_path, "compile").is_dir()
        assert default_cache_dir(tmp_path, "test").is_dir()
        assert result.tasks[0].request.output != result.tasks[1].request.output

    def test_generator_failure_stops_build(self, tmp_path: Path, generator_factory):
        config = _two_configurations(tmp_path)
        failing = generator_factory(error=RuntimeError("pets.smithy:3: unknown shape"))

        result = run_codegen(config_path=config, generator=failing)

        assert not result.ok
        assert result.error == "pets.smithy:3: unknown shape"
        assert result.failed_configuration == "compile"
        assert result.tasks == []
        assert len(failing.calls) == 1

    def test_failure_then_retry_regenerates(self, build_root: Path, generator_factory):
        config = build_root / "specforge.yml"
        run_codegen(config_path=config, generator=generator_factory(error=OSError("disk full")))

        good = generator_factory()
        result = run_codegen(config_path=config, generator=good)

        assert result.tasks[0].outcome.state is CacheState.NO_PRIOR_RECORD
        assert len(good.calls) == 1

    def test_ledger_records_runs(self, build_root: Path, fake_generator, generator_factory):
        config = build_root / "specforge.yml"
        run_codegen(config_path=config, generator=fake_generator)
        run_codegen(config_path=config, generator=fake_generator)

        entries = CodegenLedger(project_root=build_root).read_all()
        assert [e.status for e in entries] == ["ok", "ok"]
        assert [e.regenerated for e in entries] == [True, False]
        assert entries[0].sources == 2
        assert entries[0].resources == 1

        cache_store_for(build_root, "compile").clear()
        run_codegen(
            config_path=build_root / "specforge.yml",
            configurations=["compile"],
            generator=generator_factory(error=ValueError()),
        )
        last = CodegenLedger(project_root=build_root).read_recent(1)[0]
        assert last.status == "failed"
        assert last.error == "ValueError"

    def test_unknown_configuration(self, build_root: Path, fake_generator):
        result = run_codegen(
            config_path=build_root / "specforge.yml",
            configurations=["nope"],
            generator=fake_generator,
        )
        assert result.error == "Unknown configuration 'nope'"
        assert fake_generator.calls == []

    def test_aliasing_configuration_names_never_share_a_store(self, tmp_path: Path, fake_generator):
        config = tmp_path / "specforge.yml"
        config.write_text(textwrap.dedent("""\
            generator: "unused:generate"
            configurations:
              compile: {}
              ./compile:
                output_dir: out2
                resource_dir: res2
        """))

        result = run_codegen(config_path=config, generator=fake_generator)

        assert "Invalid configuration name" in result.error
        assert fake_generator.calls == []
        assert not (tmp_path / ".state" / "codegen").exists()

    def test_missing_build_file(self, tmp_path: Path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        assert run_codegen().error == "No specforge.yml found."

    def test_no_generator_configured(self, tmp_path: Path):
        result = run_codegen(config_path=_two_configurations(tmp_path))
        assert "No generator configured" in result.error

    def test_unloadable_generator(self, build_root: Path):
        config = build_root / "specforge.yml"
        config.write_text(
            config.read_text().replace("specforge_test_gen:", "specforge_absent_gen:")
        )
        result = run_codegen(config_path=config)
        assert "Cannot import generator module" in result.error

    def test_report_file(self, build_root: Path, fake_generator):
        report = build_root / "resolution.json"
        report.write_text('{"smithy4s": {"modules": [{"artifacts": ["/repo/other.jar"]}]}}')

        result = run_codegen(
            config_path=build_root / "specforge.yml",
            report_path=report,
            generator=fake_generator,
        )

        external = [a.path for a in result.tasks[0].request.local_jars if a.origin is ArtifactOrigin.EXTERNAL]
        assert external == [Path("/repo/other.jar")]

    def test_dry_run_does_not_generate(self, build_root: Path, fake_generator):
        config = build_root / "specforge.yml"

        before = run_codegen(config_path=config, dry_run=True)
        run_codegen(config_path=config, generator=fake_generator)
        after = run_codegen(config_path=config, dry_run=True)

        assert before.plans == {"compile": CacheState.NO_PRIOR_RECORD}
        assert after.plans == {"compile": CacheState.UNCHANGED}
        assert len(fake_generator.calls) == 1

    def test_to_dict(self, build_root: Path, fake_generator):
        data = run_codegen(config_path=build_root / "specforge.yml", generator=fake_generator).to_dict()
        assert data["build"] == "petstore"
        assert data["tasks"][0]["state"] == "NoPriorRecord"
        assert len(data["tasks"][0]["sources"]) == 2


class TestCleanConfiguration:
    def test_removes_outputs_and_cache(self, build_root: Path, fake_generator):
        build = load_build(build_root / "specforge.yml")
        settings = build.get_configuration("compile")
        run_codegen(config_path=build_root / "specforge.yml", generator=fake_generator)
        (build_root / "target" / "src_managed" / "compile").mkdir(parents=True)

        removed = clean_configuration(settings, build_root)

        assert build_root / "target" / "src_managed" / "compile" in removed
        assert not default_cache_dir(build_root, "compile").exists()

        again = run_codegen(config_path=build_root / "specforge.yml", generator=fake_generator)
        assert again.tasks[0].outcome.state is CacheState.NO_PRIOR_RECORD

    def test_nothing_to_clean(self, tmp_path: Path):
        build = load_build(_two_configurations(tmp_path))
        assert clean_configuration(build.get_configuration("test"), tmp_path) == []
