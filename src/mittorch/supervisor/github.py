"""Clone the tracked repository and compare its HEAD with the branch tip on GitHub."""

from __future__ import annotations

import json
import logging
import shutil
import subprocess
from pathlib import Path
from urllib.error import HTTPError, URLError
from urllib.request import Request, urlopen

from mittorch.helpers import SUCCESS, UPDATED, WARNING, mask_token, normalize_token, status

log = logging.getLogger(__name__)

API_TIMEOUT = 10


class RepositoryError(RuntimeError):
    """git clone failed or a checkout could not be read."""


class RemoteShaError(RuntimeError):
    """GitHub branch lookup failed."""


def clone_url(account: str, repository: str, token: str | None = None) -> str:
    """https clone URL, with the token as userinfo when one is set."""
    tok = normalize_token(token)
    if tok:
        return f"https://{tok}@github.com/{account}/{repository}.git"
    return f"https://github.com/{account}/{repository}.git"


def prepare_repository(
    account: str,
    repository: str,
    branch: str,
    token: str | None = None,
    data_dir: Path = Path(".data"),
) -> Path:
    """Fresh clone of branch into data_dir/repository. Returns the checkout path."""
    data_dir.mkdir(parents=True, exist_ok=True)
    repo_path = data_dir / repository
    url = clone_url(account, repository, token)

    if repo_path.exists():
        status(WARNING, f"Removing existing directory {repo_path}")
        shutil.rmtree(repo_path)

    status(UPDATED, f"Cloning {mask_token(url)} (branch: {branch})")
    r = subprocess.run(
        ["git", "clone", "--branch", branch, url, str(repo_path)],
        capture_output=True,
        text=True,
    )
    if r.returncode != 0:
        detail = mask_token((r.stderr or "").strip())
        if normalize_token(token):
            msg = f"Failed to clone private repository — check token permissions: {detail}"
        else:
            msg = f"Failed to clone public repository: {detail}"
        raise RepositoryError(msg)
    status(SUCCESS, "Repository ready.")
    return repo_path


def is_repository(repo_path: Path) -> bool:
    return (repo_path / ".git").exists()


def get_local_commit_hash(repo_path: Path) -> str:
    """HEAD commit of the checkout at repo_path. Raises RepositoryError if it is not a git checkout."""
    if not is_repository(repo_path):
        msg = f"Not a git repository: {repo_path}"
        raise RepositoryError(msg)
    r = subprocess.run(
        ["git", "rev-parse", "HEAD"],
        capture_output=True,
        text=True,
        cwd=repo_path,
    )
    if r.returncode != 0:
        msg = f"git rev-parse HEAD failed in {repo_path}: {(r.stderr or '').strip()}"
        raise RepositoryError(msg)
    return r.stdout.strip()


def get_latest_remote_sha(
    account: str,
    repository: str,
    branch: str,
    token: str | None = None,
) -> str:
    """Tip commit SHA of branch from the GitHub API. Returns "" if the payload has none."""
    url = f"https://api.github.com/repos/{account}/{repository}/branches/{branch}"
    headers = {"User-Agent": "mittorch"}
    tok = normalize_token(token)
    if tok:
        headers["Authorization"] = f"token {tok}"

    req = Request(url, headers=headers)
    try:
        with urlopen(req, timeout=API_TIMEOUT) as response:
            data = json.loads(response.read().decode())
    except HTTPError as e:
        if e.code == 401:
            msg = "unauthorized: invalid or missing token"
        elif e.code == 404:
            msg = "repository not found (check visibility and account)"
        else:
            msg = f"GitHub API error: {e.code} {e.reason}"
        raise RemoteShaError(msg) from e
    except URLError as e:
        msg = f"Network error: {e.reason}"
        raise RemoteShaError(msg) from e
    # Timeouts and resets while reading the response are not wrapped in URLError.
    except OSError as e:
        msg = f"Network error: {e}"
        raise RemoteShaError(msg) from e
    except UnicodeDecodeError as e:
        msg = f"Invalid response encoding from GitHub API: {e}"
        raise RemoteShaError(msg) from e
    except json.JSONDecodeError as e:
        msg = f"Invalid JSON from GitHub API: {e}"
        raise RemoteShaError(msg) from e

    log.debug("branch payload keys for %s/%s@%s: %s", account, repository, branch, list(data))
    commit = data.get("commit") if isinstance(data, dict) else None
    sha = commit.get("sha") if isinstance(commit, dict) else None
    return sha if isinstance(sha, str) else ""
