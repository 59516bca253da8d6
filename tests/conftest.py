"""Shared test fixtures for ImpactGuard."""

from __future__ import annotations

import shutil
import subprocess
from pathlib import Path

import pytest

PROJECT_FILES = {
    "auth/__init__.py": '"""Authentication package."""\n',
    "auth/session.py": '''"""Session handling."""


def login(user, password):
    """Check credentials and open a session."""
    return user is not None and bool(password)


def logout(user):
    return None
''',
    "api/__init__.py": '"""API package."""\n',
    "api/routes.py": '''"""API routes."""

from auth.session import login


def handle(user):
    """Handle a login request."""
    return login(user, "secret")
''',
    "app.py": '''"""Application entry point."""

from api import routes


def main():
    return routes.handle("alice")
''',
    "models.py": '''"""Shared payload types."""

from typing import Any


class UserResponse:
    id: int
    name: str


class Helper:
    value: int
''',
    "web/api.ts": '''export interface UserPayload {
  id: string;
  name: string;
}

export async function fetchUser(id: string): Promise<UserPayload> {
  return { id, name: "x" };
}
''',
    "web/client.ts": '''import { fetchUser } from "./api";

export async function load() {
  const user = await fetchUser("1");
  return user;
}
''',
    "tests/test_session.py": '''from auth.session import login


def test_login():
    assert login("alice", "pw")
''',
}


def write_files(root: Path, files: dict[str, str]) -> None:
    for rel, content in files.items():
        path = root / rel
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content)


def run_git(root: Path, *args: str) -> str:
    result = subprocess.run(
        ["git", "-c", "user.name=Test", "-c", "user.email=test@example.com", *args],
        cwd=root,
        capture_output=True,
        text=True,
        check=True,
    )
    return result.stdout


@pytest.fixture
def tmp_project(tmp_path: Path) -> Path:
    """A small mixed Python/TypeScript project with a known import graph.

    app.py -> api/routes.py -> auth/session.py, and web/client.ts -> web/api.ts.
    """
    write_files(tmp_path, PROJECT_FILES)
    return tmp_path


@pytest.fixture
def git_project(tmp_project: Path) -> Path:
    """tmp_project committed to a fresh git repository."""
    if shutil.which("git") is None:
        pytest.skip("git is not installed")
    run_git(tmp_project, "init", "-q")
    run_git(tmp_project, "add", ".")
    run_git(tmp_project, "commit", "-q", "-m", "initial")
    return tmp_project


@pytest.fixture
def git():
    """Run a git command in a repository and return its stdout."""
    return run_git
