"""Pytest configuration and shared fixtures."""

import os
import subprocess
from collections.abc import Callable, Generator
from pathlib import Path
from unittest.mock import MagicMock

import httpx
import pytest

# Set test environment
os.environ.setdefault("GRAMMARKIT_LOG_LEVEL", "DEBUG")
os.environ.setdefault("GRAMMARKIT_LATEST_RELEASE_URL", "https://example.invalid/releases/latest")


@pytest.fixture
def mock_settings() -> Generator:
    """Reset cached settings around a test."""
    from grammarkit.core.config import clear_settings_cache

    # Clear any cached settings
    clear_settings_cache()

    yield

    # Clear again after test
    clear_settings_cache()


@pytest.fixture
def redirect_client() -> Callable[..., tuple[httpx.Client, list[httpx.Request]]]:
    """Build an httpx client whose transport answers with a fixed response."""

    def _build(
        status_code: int = 302,
        location: str | None = "https://github.com/JetBrains/Grammar-Kit/releases/tag/2022.3.2",
        error: Exception | None = None,
    ) -> tuple[httpx.Client, list[httpx.Request]]:
        requests: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            if error is not None:
                raise error
            headers = {"Location": location} if location is not None else {}
            return httpx.Response(status_code, headers=headers)

        return httpx.Client(transport=httpx.MockTransport(handler)), requests

    return _build


@pytest.fixture
def static_resolver(redirect_client: Callable) -> Generator:
    """VersionResolver that never leaves the process."""
    from grammarkit.dependencies.version_resolver import VersionResolver

    client, requests = redirect_client()
    resolver = VersionResolver(client=client)
    resolver.requests = requests
    yield resolver
    client.close()


@pytest.fixture
def maven_repo(tmp_path: Path) -> Callable[..., Path]:
    """Publish fake jars (and optional POMs) into a Maven-layout directory.

    Returns a function ``publish(notation, depends_on=())`` giving the jar path.
    """
    root = tmp_path / "repository"
    root.mkdir()

    def publish(notation: str, depends_on: tuple[str, ...] = ()) -> Path:
        group, artifact, version = notation.split(":")
        directory = root.joinpath(*group.split(".")) / artifact / version
        directory.mkdir(parents=True, exist_ok=True)
        jar = directory / f"{artifact}-{version}.jar"
        jar.write_bytes(b"PK\x03\x04")

        if depends_on:
            entries = []
            for dependency in depends_on:
                dep_group, dep_artifact, dep_version = dependency.split(":")
                entries.append(
                    "<dependency>"
                    f"<groupId>{dep_group}</groupId>"
                    f"<artifactId>{dep_artifact}</artifactId>"
                    f"<version>{dep_version}</version>"
                    "</dependency>"
                )
            (directory / f"{artifact}-{version}.pom").write_text(
                '<project xmlns="http://maven.apache.org/POM/4.0.0">'
                f"<dependencies>{''.join(entries)}</dependencies>"
                "</project>"
            )
        return jar

    publish.root = root
    return publish


@pytest.fixture
def java_home(tmp_path: Path) -> str:
    """A fake JDK directory with an (empty) java launcher."""
    home = tmp_path / "jdk"
    launcher = home / "bin" / ("java.exe" if os.name == "nt" else "java")
    launcher.parent.mkdir(parents=True)
    launcher.write_text("")
    return str(home)


@pytest.fixture
def fake_runner() -> MagicMock:
    """Command runner that records calls and reports success."""
    runner = MagicMock()
    runner.side_effect = lambda command, cwd=None: subprocess.CompletedProcess(
        command, 0, stdout="generated", stderr=""
    )
    return runner


@pytest.fixture
def project_dir(tmp_path: Path) -> Path:
    """A project with a lexer definition and a grammar in place."""
    root = tmp_path / "project"
    grammars = root / "src" / "main" / "grammars"
    grammars.mkdir(parents=True)
    (grammars / "Sample.flex").write_text("%%\n%class SampleLexer\n%%\n")
    (grammars / "Sample.bnf").write_text("{ parserClass='org.example.SampleParser' }\nroot ::= 'a'\n")
    return root


# Markers
def pytest_configure(config: pytest.Config) -> None:
    """Configure custom pytest markers."""
    config.addinivalue_line("markers", "unit: mark test as unit test")
    config.addinivalue_line("markers", "integration: mark test as integration test")
