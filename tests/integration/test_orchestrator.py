"""Integration tests for the plugin wiring."""

from pathlib import Path
from unittest.mock import MagicMock

import pytest

from grammarkit.core.constants import GrammarKitConstants
from grammarkit.core.exceptions import (
    ConfigurationError,
    PurgeError,
    ResolutionError,
    SetupError,
    VersionResolutionError,
)
from grammarkit.core.extension import GrammarKitExtension
from grammarkit.core.orchestrator import GrammarKitPlugin
from grammarkit.core.project import Project
from grammarkit.dependencies.builder import Branch
from grammarkit.dependencies.models import ExclusionRule, IvyRepository, MavenRepository
from grammarkit.dependencies.repository import LocalRepositoryResolver
from grammarkit.dependencies.version_resolver import VersionResolver


class TestGrammarKitPlugin:
    """Integration tests for GrammarKitPlugin.apply and project evaluation."""

    @pytest.fixture
    def project(self, project_dir: Path, maven_repo, fake_runner: MagicMock, java_home: str) -> Project:
        return Project(
            project_dir,
            runtime_version="8.5",
            resolver=LocalRepositoryResolver(maven_repo.root),
            runner=fake_runner,
            java_home=java_home,
        )

    @pytest.fixture
    def plugin(self, static_resolver: VersionResolver, mock_settings: None) -> GrammarKitPlugin:
        return GrammarKitPlugin(version_resolver=static_resolver)

    def test_rejects_old_runtime(self, project_dir: Path, plugin: GrammarKitPlugin) -> None:
        project = Project(project_dir, runtime_version="6.5")

        with pytest.raises(SetupError):
            plugin.apply(project)
        assert project.tasks.names() == []

    def test_registers_tasks_and_repositories(self, project: Project, plugin: GrammarKitPlugin) -> None:
        extension = plugin.apply(project)

        assert isinstance(extension, GrammarKitExtension)
        assert project.extensions[GrammarKitConstants.GROUP_NAME] is extension
        assert project.tasks.names() == ["generateLexer", "generateParser"]
        lexer = project.tasks.get_by_name("generateLexer")
        assert lexer.group == "grammarKit"
        assert lexer.description == "Generates lexers for IntelliJ-based plugin"
        assert project.repositories == [
            MavenRepository(url="https://cache-redirector.jetbrains.com/intellij-dependencies"),
            MavenRepository(url="https://cache-redirector.jetbrains.com/intellij-repository/releases"),
            IvyRepository(
                url="https://github.com/JetBrains/Grammar-Kit/releases/download",
                artifact_pattern="[revision]/grammar-kit-[revision].zip",
            ),
        ]

    def test_nothing_declared_before_evaluation(
        self,
        project: Project,
        plugin: GrammarKitPlugin,
        static_resolver: VersionResolver,
    ) -> None:
        plugin.apply(project)

        assert project.configurations.get_by_name("compileOnly").dependencies == []
        assert static_resolver.requests == []

    def test_latest_without_platform_takes_compile_only_branch(
        self,
        project: Project,
        plugin: GrammarKitPlugin,
        static_resolver: VersionResolver,
    ) -> None:
        plugin.apply(project)

        project.evaluate()
        project.evaluate()

        assert len(static_resolver.requests) == 1
        assert plugin.branch == Branch.COMPILE_ONLY
        compile_only = project.configurations.get_by_name("compileOnly")
        assert [dep.notation for dep in compile_only.dependencies] == [
            "com.github.JetBrains:Grammar-Kit:2022.3.2",
            "org.jetbrains.intellij.deps.jflex:jflex:1.9.2",
        ]
        assert compile_only.exclusions == [
            ExclusionRule(group="org.jetbrains.plugins", module="ant"),
            ExclusionRule(group="org.jetbrains.plugins", module="idea"),
        ]
        assert len(project.configurations.get_by_name("bom").dependencies) == 1
        assert project.configurations.get_by_name("grammarKitClassPath").dependencies == []

    def test_platform_takes_dedicated_branch(self, project: Project, plugin: GrammarKitPlugin) -> None:
        extension = plugin.apply(project)
        extension.grammar_kit_release = "2022.3.1"
        extension.intellij_release = "2023.1"

        project.evaluate()

        assert plugin.branch == Branch.DEDICATED_CLASSPATH
        assert len(project.configurations.get_by_name("grammarKitClassPath").dependencies) == 7
        assert project.configurations.get_by_name("compileOnly").dependencies == []
        assert project.configurations.get_by_name("bom").dependencies == []

    def test_version_lookup_failure_aborts_evaluation(
        self,
        project: Project,
        redirect_client,
        mock_settings: None,
    ) -> None:
        client, _ = redirect_client(status_code=404, location=None)
        plugin = GrammarKitPlugin(version_resolver=VersionResolver(client=client))
        plugin.apply(project)

        with pytest.raises(VersionResolutionError):
            project.evaluate()
        assert not project.is_evaluated

    def test_run_requires_evaluation(self, project: Project, plugin: GrammarKitPlugin) -> None:
        plugin.apply(project)

        with pytest.raises(ConfigurationError, match="evaluated"):
            project.run_task("generateLexer")


class TestGeneration:
    """End-to-end generation through the plugin with a local repository."""

    @pytest.fixture
    def project(self, project_dir: Path, maven_repo, fake_runner: MagicMock, java_home: str) -> Project:
        return Project(
            project_dir,
            runtime_version="7.6",
            resolver=LocalRepositoryResolver(maven_repo.root),
            runner=fake_runner,
            java_home=java_home,
        )

    @pytest.fixture
    def plugin(self, static_resolver: VersionResolver, mock_settings: None) -> GrammarKitPlugin:
        return GrammarKitPlugin(version_resolver=static_resolver)

    def configure_lexer(self, project: Project, purge_old_files: bool) -> Path:
        task = project.tasks.get_by_name("generateLexer")
        task.source = "src/main/grammars/Sample.flex"
        task.target_dir = "src/main/gen/org/example"
        task.target_class = "SampleLexer"
        task.purge_old_files = purge_old_files
        return task.target_file

    def test_lexer_uses_filtered_compile_classpath(
        self,
        project: Project,
        plugin: GrammarKitPlugin,
        maven_repo,
        fake_runner: MagicMock,
    ) -> None:
        jflex = maven_repo("org.jetbrains.intellij.deps.jflex:jflex:1.9.2")
        maven_repo("com.github.JetBrains:Grammar-Kit:2022.3.2")
        maven_repo("com.google.guava:guava:31.1")
        plugin.apply(project)
        project.configurations.get_by_name("implementation").add("com.google.guava:guava:31.1")
        self.configure_lexer(project, purge_old_files=False)

        project.evaluate()
        result = project.run_task("generateLexer")

        assert result.classpath == [jflex]
        assert fake_runner.call_args.args[0][3] == "jflex.Main"

    def test_parser_uses_required_libs(
        self,
        project: Project,
        plugin: GrammarKitPlugin,
        maven_repo,
    ) -> None:
        maven_repo("org.jetbrains.intellij.deps.jflex:jflex:1.9.2")
        grammar_kit = maven_repo("com.github.JetBrains:Grammar-Kit:2022.3.2")
        plugin.apply(project)
        task = project.tasks.get_by_name("generateParser")
        task.source = "src/main/grammars/Sample.bnf"
        task.target_root = "src/main/gen"
        task.path_to_parser = "org/example/SampleParser.java"
        task.path_to_psi_root = "org/example/psi"

        project.evaluate()
        result = project.run_task("generateParser")

        assert result.classpath == [grammar_kit]

    def test_dedicated_classpath_used_unfiltered(
        self,
        project: Project,
        plugin: GrammarKitPlugin,
        maven_repo,
    ) -> None:
        for notation in (
            "com.github.JetBrains:Grammar-Kit:2022.3.2",
            "org.jetbrains.intellij.deps.jflex:jflex:1.9.2",
            "com.jetbrains.intellij.platform:indexing-impl:2023.1",
            "com.jetbrains.intellij.platform:analysis-impl:2023.1",
            "com.jetbrains.intellij.platform:lang-impl:2023.1",
            "org.jetbrains.intellij.deps:asm-all:7.0.1",
        ):
            maven_repo(notation)
        maven_repo(
            "com.jetbrains.intellij.platform:core-impl:2023.1",
            depends_on=("com.jetbrains.rd:rd-core:2023.1", "org.jetbrains.plugins:idea:2023.1"),
        )
        extension = plugin.apply(project)
        extension.intellij_release = "2023.1"
        self.configure_lexer(project, purge_old_files=False)

        project.evaluate()
        result = project.run_task("generateLexer")

        names = sorted(file.name for file in result.classpath)
        assert names == sorted(
            [
                "Grammar-Kit-2022.3.2.jar",
                "jflex-1.9.2.jar",
                "indexing-impl-2023.1.jar",
                "analysis-impl-2023.1.jar",
                "core-impl-2023.1.jar",
                "lang-impl-2023.1.jar",
                "asm-all-7.0.1.jar",
            ]
        )

    def test_purge_runs_before_generation(
        self,
        project: Project,
        plugin: GrammarKitPlugin,
        maven_repo,
        fake_runner: MagicMock,
    ) -> None:
        maven_repo("org.jetbrains.intellij.deps.jflex:jflex:1.9.2")
        maven_repo("com.github.JetBrains:Grammar-Kit:2022.3.2")
        plugin.apply(project)
        target = self.configure_lexer(project, purge_old_files=True)
        target.parent.mkdir(parents=True)
        target.write_text("stale")
        seen: list[bool] = []
        runner_effect = fake_runner.side_effect
        fake_runner.side_effect = lambda command, cwd=None: (
            seen.append(target.exists()) or runner_effect(command, cwd=cwd)
        )

        project.evaluate()
        project.run_task("generateLexer")

        assert seen == [False]

    def test_purge_disabled_keeps_output(
        self,
        project: Project,
        plugin: GrammarKitPlugin,
        maven_repo,
    ) -> None:
        maven_repo("org.jetbrains.intellij.deps.jflex:jflex:1.9.2")
        maven_repo("com.github.JetBrains:Grammar-Kit:2022.3.2")
        plugin.apply(project)
        target = self.configure_lexer(project, purge_old_files=False)
        target.parent.mkdir(parents=True)
        target.write_text("stale")

        project.evaluate()
        project.run_task("generateLexer")

        assert target.read_text() == "stale"

    def test_failed_resolution_keeps_output(
        self,
        project: Project,
        plugin: GrammarKitPlugin,
        maven_repo,
        fake_runner: MagicMock,
    ) -> None:
        maven_repo("org.jetbrains.intellij.deps.jflex:jflex:1.9.2")
        plugin.apply(project)
        target = self.configure_lexer(project, purge_old_files=True)
        target.parent.mkdir(parents=True)
        target.write_text("previous")

        project.evaluate()
        with pytest.raises(ResolutionError, match="Grammar-Kit"):
            project.run_task("generateLexer")

        assert target.read_text() == "previous"
        fake_runner.assert_not_called()

    def test_parser_purges_both_paths(
        self,
        project: Project,
        plugin: GrammarKitPlugin,
        maven_repo,
        project_dir: Path,
    ) -> None:
        maven_repo("org.jetbrains.intellij.deps.jflex:jflex:1.9.2")
        maven_repo("com.github.JetBrains:Grammar-Kit:2022.3.2")
        plugin.apply(project)
        task = project.tasks.get_by_name("generateParser")
        task.source = "src/main/grammars/Sample.bnf"
        task.target_root = "src/main/gen"
        task.path_to_parser = "org/example/SampleParser.java"
        task.path_to_psi_root = "org/example/psi"
        task.purge_old_files = True
        (task.psi_dir / "impl").mkdir(parents=True)
        (task.psi_dir / "impl" / "SampleRootImpl.java").write_text("stale")
        task.parser_file.write_text("stale")
        unrelated = project_dir / "src/main/gen/org/example/SampleLexer.java"
        unrelated.write_text("keep")

        project.evaluate()
        project.run_task("generateParser")

        assert not task.psi_dir.exists()
        assert not task.parser_file.exists()
        assert unrelated.read_text() == "keep"

    def test_purge_failure_stops_task(
        self,
        project: Project,
        plugin: GrammarKitPlugin,
        maven_repo,
        fake_runner: MagicMock,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        maven_repo("org.jetbrains.intellij.deps.jflex:jflex:1.9.2")
        maven_repo("com.github.JetBrains:Grammar-Kit:2022.3.2")
        plugin.apply(project)
        target = self.configure_lexer(project, purge_old_files=True)
        target.parent.mkdir(parents=True)
        target.write_text("stale")
        monkeypatch.setattr(Path, "unlink", MagicMock(side_effect=PermissionError("read-only")))

        project.evaluate()
        with pytest.raises(PurgeError):
            project.run_task("generateLexer")
        fake_runner.assert_not_called()
