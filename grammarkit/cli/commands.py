"""Generator commands for grammarkit."""

from pathlib import Path

import typer

from grammarkit.cli.main import (
    GrammarKitReleaseOption,
    IntellijReleaseOption,
    JFlexReleaseOption,
    ProjectDirOption,
    RepositoryOption,
    app,
    build_project,
    console,
    fail,
)
from grammarkit.core.constants import GrammarKitConstants
from grammarkit.core.exceptions import GrammarKitError


@app.command("generate-lexer")
def generate_lexer(
    source: Path = typer.Argument(..., help="JFlex lexer definition (.flex)"),
    target_dir: Path = typer.Option(..., "--target-dir", "-t", help="Output directory"),
    target_class: str = typer.Option(..., "--target-class", "-c", help="Generated lexer class"),
    skeleton: Path | None = typer.Option(None, "--skeleton", help="Custom JFlex skeleton"),
    purge_old_files: bool = typer.Option(
        False,
        "--purge/--no-purge",
        help="Delete the previously generated lexer first",
    ),
    project_dir: Path = ProjectDirOption,
    repository: Path | None = RepositoryOption,
    grammar_kit_release: str = GrammarKitReleaseOption,
    jflex_release: str = JFlexReleaseOption,
    intellij_release: str | None = IntellijReleaseOption,
) -> None:
    """
    Generate a lexer with JFlex.

    Example:
        grammarkit generate-lexer src/main/grammars/Sample.flex -t src/main/gen/org/example -c SampleLexer
    """
    try:
        project, _, _ = build_project(
            project_dir, repository, grammar_kit_release, jflex_release, intellij_release
        )
        task = project.tasks.get_by_name(GrammarKitConstants.GENERATE_LEXER_TASK_NAME)
        task.source = source
        task.target_dir = target_dir
        task.target_class = target_class
        task.skeleton = skeleton
        task.purge_old_files = purge_old_files

        project.evaluate()
        result = project.run_task(task.name)
    except GrammarKitError as e:
        fail(e)

    console.print(f"[bold green]Generated {task.target_file}[/bold green]")
    if result.stdout.strip():
        console.print(f"[dim]{result.stdout.strip()}[/dim]")


@app.command("generate-parser")
def generate_parser(
    source: Path = typer.Argument(..., help="Grammar-Kit grammar (.bnf)"),
    target_root: Path = typer.Option(..., "--target-root", "-t", help="Output root directory"),
    path_to_parser: str = typer.Option(
        ...,
        "--path-to-parser",
        help="Parser file path relative to the output root",
    ),
    path_to_psi_root: str = typer.Option(
        ...,
        "--path-to-psi-root",
        help="PSI directory relative to the output root",
    ),
    purge_old_files: bool = typer.Option(
        False,
        "--purge/--no-purge",
        help="Delete the previously generated parser and PSI tree first",
    ),
    project_dir: Path = ProjectDirOption,
    repository: Path | None = RepositoryOption,
    grammar_kit_release: str = GrammarKitReleaseOption,
    jflex_release: str = JFlexReleaseOption,
    intellij_release: str | None = IntellijReleaseOption,
) -> None:
    """
    Generate a parser and PSI classes with Grammar-Kit.
    """
    try:
        project, _, _ = build_project(
            project_dir, repository, grammar_kit_release, jflex_release, intellij_release
        )
        task = project.tasks.get_by_name(GrammarKitConstants.GENERATE_PARSER_TASK_NAME)
        task.source = source
        task.target_root = target_root
        task.path_to_parser = path_to_parser
        task.path_to_psi_root = path_to_psi_root
        task.purge_old_files = purge_old_files

        project.evaluate()
        result = project.run_task(task.name)
    except GrammarKitError as e:
        fail(e)

    console.print(f"[bold green]Generated parser under {task.target_root_output_dir}[/bold green]")
    if result.stdout.strip():
        console.print(f"[dim]{result.stdout.strip()}[/dim]")
