"""
Git change selection.

Handles:
- Repository detection using subprocess (no GitPython dependency)
- Files changed since a revision, working tree included
- Untracked files that are not ignored

Used to restrict analysis to what a branch or commit touched.
"""

import subprocess
from pathlib import Path
from typing import List, Set, Tuple


class GitRepository:
    """Answers change-set questions about one Git work tree."""

    def __init__(self, path: str):
        self.path = Path(path).resolve()

        result = subprocess.run(
            ["git", "rev-parse", "--show-toplevel"],
            cwd=self.path if self.path.is_dir() else self.path.parent,
            capture_output=True,
            text=True,
            encoding="utf-8",
            errors="replace",
        )
        if result.returncode != 0:
            raise ValueError(f"Not a Git repository: {path}")
        self.top_level = Path(result.stdout.strip()).resolve()

    def _run_git(self, args: List[str]) -> Tuple[int, str, str]:
        result = subprocess.run(
            ["git"] + args,
            cwd=self.top_level,
            capture_output=True,
            text=True,
            encoding="utf-8",
            errors="replace",
        )
        if result.returncode != 0:
            raise RuntimeError(
                f"Git command failed: {' '.join(args)}\n{result.stderr}"
            )
        return result.returncode, result.stdout, result.stderr

    def _paths(self, stdout: str) -> Set[Path]:
        return {
            (self.top_level / line).resolve()
            for line in stdout.splitlines()
            if line.strip()
        }

    def changed_files(self, since: str) -> List[Path]:
        """
        Files added, copied, modified or renamed since `since`.

        Compares the revision with the working tree, so uncommitted edits
        count. Untracked, non-ignored files are included. Deleted files are
        not. Returns absolute paths, sorted.
        """
        _, diffed, _ = self._run_git(
            ["diff", "--name-only", "--diff-filter=ACMR", since, "--"]
        )
        _, untracked, _ = self._run_git(
            ["ls-files", "--others", "--exclude-standard"]
        )
        return sorted(self._paths(diffed) | self._paths(untracked))


def get_changed_files(repo_path: str, since: str) -> List[Path]:
    return GitRepository(repo_path).changed_files(since)
