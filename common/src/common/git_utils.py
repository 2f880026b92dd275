"""Git utilities: the client capability interface and its GitPython adapter."""

import re
from pathlib import Path
from typing import BinaryIO, Optional, Protocol, Union
from urllib.parse import urlsplit

from git import GitCommandError, InvalidGitRepositoryError, NoSuchPathError, Repo

from .logging import get_logger

logger = get_logger(__name__)

_COMMIT_ID_RE = re.compile(r"[0-9a-fA-F]{40}")
_SCHEME_RE = re.compile(r"^[A-Za-z][A-Za-z0-9+.-]*://")
# user@host:path, the scp-like syntax git accepts for ssh remotes
_SCP_LIKE_RE = re.compile(r"^(?:[^@/\s]+@)?(?P<host>[^:/\s]+):(?P<path>[^\s]*)$")
_LOCAL_FILE_RE = re.compile(r"^(?:[A-Za-z]:)?[\\/]|^\.{1,2}[\\/]|^\\\\")

# Header + indented message + raw file changes; one block per commit.
RAW_CHANGELOG_FORMAT = (
    "commit %H%n"
    "tree %T%n"
    "parent %P%n"
    "author %aN <%aE> %ai%n"
    "committer %cN <%cE> %ci%n"
    "%n"
    "%w(0,4,4)%B"
)


class GitError(Exception):
    """Base exception for git operations."""
    pass


class GitUrlError(GitError, ValueError):
    """Raised when a remote URL cannot be parsed."""
    pass


def is_commit_id(value: Optional[str]) -> bool:
    """True when ``value`` is a full 40 character hexadecimal object id."""
    return bool(value) and _COMMIT_ID_RE.fullmatch(value) is not None


def humanish_name(url: str) -> str:
    """Derive the short repository name from a remote URL.

    ``ssh://git@host:29418/team/repo.git`` and ``git@host:team/repo.git`` both
    give ``repo``; a path ending in ``/.git`` gives the directory before it.

    Raises:
        GitUrlError: If the URL is blank or has no usable path or host
    """
    if not url or not url.strip() or any(c.isspace() for c in url.strip()):
        raise GitUrlError(f"Malformed remote URL: {url!r}")
    url = url.strip()

    local = False
    host: Optional[str] = None
    if _SCHEME_RE.match(url):
        try:
            parsed = urlsplit(url)
        except ValueError as e:
            raise GitUrlError(f"Malformed remote URL: {url!r}") from e
        path = parsed.path
        host = parsed.hostname
        local = parsed.scheme == "file"
    elif _LOCAL_FILE_RE.match(url):
        path = url
        local = True
    else:
        match = _SCP_LIKE_RE.match(url)
        if match:
            path = match.group("path")
            host = match.group("host")
        else:
            path = url
            local = True

    if path in ("", "/"):
        path = host or ""
    elements = [e for e in re.split(r"[\\/]+" if local else r"/+", path) if e]
    if not elements:
        raise GitUrlError(f"Cannot derive a name from remote URL: {url!r}")

    name = elements[-1]
    if name == ".git":
        if len(elements) < 2:
            raise GitUrlError(f"Cannot derive a name from remote URL: {url!r}")
        name = elements[-2]
    elif name.endswith(".git"):
        name = name[: -len(".git")]
    if local and name.endswith(".bundle"):
        name = name[: -len(".bundle")]
    if not name:
        raise GitUrlError(f"Cannot derive a name from remote URL: {url!r}")
    return name


class GitClient(Protocol):
    """What the collector needs from a version-control client."""

    def resolve_reference(self, ref: str) -> str:
        """Return the commit id ``ref`` points at; raise GitError if it does not resolve."""
        ...

    def remote_url(self, name: str) -> Optional[str]:
        """Return the URL configured for remote ``name``, or None."""
        ...

    def probe_is_repository(self) -> bool:
        """True when the client can enumerate all commits of the repository."""
        ...

    def stream_changelog(self, exclude: str, include: str, out: BinaryIO) -> None:
        """Write the raw changelog of ``include`` minus ``exclude`` into ``out``."""
        ...


class GitPythonClient:
    """GitClient backed by GitPython, bound to one working directory."""

    def __init__(self, path: Union[str, Path]):
        self.path = str(path)
        self._repo: Optional[Repo] = None

    @property
    def repo(self) -> Repo:
        if self._repo is None:
            try:
                self._repo = Repo(self.path, search_parent_directories=True)
            except (InvalidGitRepositoryError, NoSuchPathError) as e:
                raise GitError(f"Not a git repository: {self.path}") from e
        return self._repo

    def resolve_reference(self, ref: str) -> str:
        try:
            return self.repo.git.rev_parse("--verify", f"{ref}^{{commit}}").strip().lower()
        except GitCommandError as e:
            raise GitError(f"Unknown revision {ref!r}: {e.stderr.strip() if e.stderr else e}") from e

    def remote_url(self, name: str) -> Optional[str]:
        try:
            value = self.repo.git.config("--get", f"remote.{name}.url")
        except GitCommandError:
            # git config exits 1 when the key is unset
            return None
        return value.strip() or None

    def probe_is_repository(self) -> bool:
        try:
            self.repo.git.rev_list("--all", "--count")
            return True
        except (GitError, GitCommandError) as e:
            logger.debug("git.probe.failed", path=self.path, error=str(e))
            return False

    def stream_changelog(self, exclude: str, include: str, out: BinaryIO) -> None:
        try:
            self.repo.git.log(
                "--raw",
                "--no-abbrev",
                "-M",
                f"--format={RAW_CHANGELOG_FORMAT}",
                f"^{exclude}",
                include,
                "--",
                output_stream=out,
            )
        except GitCommandError as e:
            raise GitError(f"git log {exclude}..{include} failed: {e}") from e
