"""Main CLI entry point using Typer."""

from pathlib import Path

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from grammarkit import __version__
from grammarkit.core.constants import GrammarKitConstants
from grammarkit.core.exceptions import GrammarKitError

app = typer.Typer(
    name="grammarkit",
    help="Generate JFlex lexers and Grammar-Kit parsers for IntelliJ-based plugins",
    add_completion=True,
    rich_markup_mode="rich",
)

console = Console()

# Host runtime reported when the CLI itself plays the build host
CLI_RUNTIME_VERSION = "8.5"


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"[bold blue]grammarkit[/bold blue] version {__version__}")
        raise typer.Exit()


def fail(error: GrammarKitError) -> None:
    """Report a fatal error and exit non-zero."""
    console.print(f"[bold red]Error:[/bold red] {error}", soft_wrap=True)
    raise typer.Exit(code=1)


@app.callback()
def main(
    version: bool | None = typer.Option(
        None,
        "--version",
        "-v",
        help="Show version and exit.",
        callback=version_callback,
        is_eager=True,
    ),
    debug: bool = typer.Option(
        False,
        "--debug",
        "-d",
        help="Enable debug logging",
    ),
) -> None:
    """
    grammarkit - lexer and parser generation.

    Resolves the generator classpath, purges stale output and runs JFlex or
    Grammar-Kit.
    """
    from grammarkit.core.config import get_settings
    from grammarkit.core.orchestrator import configure_logging

    settings = get_settings()
    if debug:
        settings = settings.model_copy(update={"debug": True})
    configure_logging(settings)


def build_project(
    project_dir: Path,
    repository: Path | None,
    grammar_kit_release: str,
    jflex_release: str,
    intellij_release: str | None,
    runtime_version: str = CLI_RUNTIME_VERSION,
):
    """Set up a project, apply the plugin and configure its extension."""
    from grammarkit.core.config import get_settings
    from grammarkit.core.orchestrator import GrammarKitPlugin
    from grammarkit.core.project import Project
    from grammarkit.dependencies.repository import LocalRepositoryResolver

    resolver = LocalRepositoryResolver(repository) if repository else None
    project = Project(
        project_dir.resolve(),
        runtime_version=runtime_version,
        resolver=resolver,
        java_home=get_settings().java_home,
    )
    plugin = GrammarKitPlugin()
    extension = plugin.apply(project)
    extension.grammar_kit_release = grammar_kit_release
    extension.jflex_release = jflex_release
    extension.intellij_release = intellij_release
    return project, plugin, extension


# Shared options
ProjectDirOption = typer.Option(Path("."), "--project", "-p", help="Project directory")
RepositoryOption = typer.Option(
    None,
    "--repository",
    "-r",
    help="Local Maven-layout repository used to resolve dependencies",
)
GrammarKitReleaseOption = typer.Option(
    GrammarKitConstants.LATEST_VERSION,
    "--grammar-kit-release",
    help="Grammar-Kit release or 'latest'",
)
JFlexReleaseOption = typer.Option(
    GrammarKitConstants.JFLEX_DEFAULT_VERSION,
    "--jflex-release",
    help="JFlex release",
)
IntellijReleaseOption = typer.Option(
    None,
    "--intellij-release",
    help="IntelliJ platform release; builds a dedicated generator classpath",
)


@app.command("resolve-version")
def resolve_version(
    requested: str = typer.Argument(
        GrammarKitConstants.LATEST_VERSION,
        help="Grammar-Kit release to resolve",
    ),
) -> None:
    """
    Resolve a Grammar-Kit release, following the 'latest' redirect if needed.
    """
    from grammarkit.dependencies.version_resolver import VersionResolver

    try:
        version = VersionResolver().resolve(requested)
    except GrammarKitError as e:
        fail(e)
    console.print(version)


@app.command()
def classpath(
    project_dir: Path = ProjectDirOption,
    repository: Path | None = RepositoryOption,
    grammar_kit_release: str = GrammarKitReleaseOption,
    jflex_release: str = JFlexReleaseOption,
    intellij_release: str | None = IntellijReleaseOption,
) -> None:
    """
    Show declared dependencies and the classpath each generator would get.
    """
    try:
        project, plugin, extension = build_project(
            project_dir, repository, grammar_kit_release, jflex_release, intellij_release
        )
        project.evaluate()
    except GrammarKitError as e:
        fail(e)

    frozen = extension.frozen
    console.print(
        Panel(
            f"[bold]Grammar-Kit:[/bold] {frozen.grammar_kit_release}\n"
            f"[bold]JFlex:[/bold] {frozen.jflex_release}\n"
            f"[bold]IntelliJ:[/bold] {frozen.intellij_release or '-'}\n"
            f"[bold]Branch:[/bold] {plugin.branch.value if plugin.branch else '-'}",
            title="[bold blue]grammarKit[/bold blue]",
            border_style="blue",
        )
    )

    table = Table(title="Dependency Sets")
    table.add_column("Set", style="cyan")
    table.add_column("Dependencies", style="bold")
    table.add_column("Exclusions")
    for dependency_set in project.configurations:
        if not dependency_set.dependencies and not dependency_set.exclusions:
            continue
        table.add_row(
            dependency_set.name,
            "\n".join(str(dep) for dep in dependency_set.dependencies),
            "\n".join(str(rule) for rule in dependency_set.exclusions),
        )
    console.print(table)

    if repository is None:
        console.print("[dim]No --repository given; skipping file resolution[/dim]")
        return

    for task_name in project.tasks.names():
        task = project.tasks.get_by_name(task_name)
        try:
            files = task.classpath()
        except GrammarKitError as e:
            fail(e)
        console.print(f"\n[bold]{task_name}[/bold] ({len(files)} files)")
        for file in files:
            console.print(f"  {file}", soft_wrap=True)


if __name__ == "__main__":
    app()
