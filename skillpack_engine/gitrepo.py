"""RevisionControl backed by a local git checkout."""

from pathlib import Path
from typing import List, Optional, Union

from git import GitCommandError, InvalidGitRepositoryError, NoSuchPathError, Repo
from loguru import logger

from skillpack_engine.base import RevisionControl
from skillpack_engine.errors import ChangeDetectionError


class GitRevisionControl(RevisionControl):
    """Answers change-detection queries with GitPython."""

    def __init__(self, repo_path: Union[str, Path] = ".", remote: str = "origin"):
        try:
            self.repo = Repo(repo_path, search_parent_directories=True)
        except (InvalidGitRepositoryError, NoSuchPathError) as e:
            raise ChangeDetectionError(f"Not a git repository: {repo_path}") from e
        self.remote = remote
        self.root = Path(self.repo.working_tree_dir).resolve() if self.repo.working_tree_dir else None

    def latest_tag(self) -> Optional[str]:
        try:
            tag = self.repo.git.describe("--tags", "--abbrev=0").strip()
        except GitCommandError:
            return None
        return tag or None

    def has_ref(self, ref: str) -> bool:
        try:
            self.repo.git.rev_parse("--verify", "--quiet", ref)
        except GitCommandError:
            return False
        return True

    def fetch_ref(self, ref: str) -> None:
        refspec = ref
        remote_prefix = f"{self.remote}/"
        if ref.startswith(remote_prefix):
            # origin/main is not a ref on the remote; fetch the branch into its tracking ref
            branch = ref[len(remote_prefix):]
            refspec = f"+refs/heads/{branch}:refs/remotes/{self.remote}/{branch}"

        logger.info(f"Fetching ref: {ref}")
        try:
            self.repo.git.fetch("--depth=1", self.remote, refspec)
        except GitCommandError as e:
            raise ChangeDetectionError(f"Failed to fetch ref: {ref}") from e

    def changed_files(self, since: str, until: str = "HEAD") -> List[str]:
        try:
            output = self.repo.git.diff("--name-only", f"{since}...{until}")
        except GitCommandError as e:
            raise ChangeDetectionError(f"Failed to get changed files: {e.stderr or e}") from e
        return [line.strip() for line in output.splitlines() if line.strip()]
