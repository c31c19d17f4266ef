"""Shared test fixtures — sample git output, sample diffs, temp git repos."""

from __future__ import annotations

import logging
import subprocess
import textwrap
from pathlib import Path
from typing import Callable

import pytest

HEAD_HASH = "4b825dc642cb6eb9a060e54bf8d69288fbee4904"
PARENT_HASH = "e69de29bb2d1d6434b8b29ae775ad8c2e48c5391"
OTHER_PARENT_HASH = "d670460b4b4aece5915caf5c68d12f560a9fe3e4"


@pytest.fixture(autouse=True)
def reset_package_logger():
    """Undo configure_logging() so caplog sees records after CLI tests."""
    yield
    logger = logging.getLogger("gitpilot")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)
    logger.propagate = True


# --- git output samples -----------------------------------------------------


@pytest.fixture
def sample_commit_output() -> str:
    """``git show --no-patch --format=COMMIT_FORMAT`` for an ordinary commit."""
    return textwrap.dedent(f"""\
        {HEAD_HASH}
        shortcommit 4b825dc
        author_name Jane Doe
        author_email jane@example.com
        timestamp 1700000000
        {PARENT_HASH}
        message Fix off-by-one in pager
    """)


@pytest.fixture
def sample_root_commit_output() -> str:
    """A root commit renders an empty parents line."""
    return textwrap.dedent(f"""\
        {HEAD_HASH}
        shortcommit 4b825dc
        author_name Jane Doe
        author_email jane@example.com
        timestamp 1700000000

        message Initial commit
    """)


@pytest.fixture
def sample_merge_commit_output() -> str:
    return textwrap.dedent(f"""\
        {HEAD_HASH}
        shortcommit 4b825dc
        author_name Jane Doe
        author_email jane@example.com
        timestamp 1700000000
        {PARENT_HASH} {OTHER_PARENT_HASH}
        message Merge branch 'feature'
    """)


@pytest.fixture
def sample_status_v2() -> str:
    """``git status --porcelain=v2 --branch`` with one record of each kind."""
    return (
        "# branch.oid 4b825dc642cb6eb9a060e54bf8d69288fbee4904\n"
        "# branch.head main\n"
        "# branch.upstream origin/main\n"
        "# branch.ab +1 -0\n"
        "1 .M N... 100644 100644 100644 aaaa111 aaaa111 src/app.py\n"
        "1 A. N... 000000 100644 100644 0000000 bbbb222 src/new module.py\n"
        "1 D. N... 100644 000000 000000 cccc333 0000000 old.txt\n"
        "1 .D N... 100644 100644 000000 dddd444 dddd444 gone.txt\n"
        "2 R. N... 100644 100644 100644 eeee555 eeee555 R100 docs/guide.md\tguide.md\n"
        "u UU N... 100644 100644 100644 100644 ffff666 ffff777 ffff888 conflict.txt\n"
        "? scratch.txt\n"
        "! build/\n"
    )


@pytest.fixture
def sample_branch_output() -> str:
    """``git branch --format=BRANCH_INFO_FORMAT``."""
    return (
        f"main {HEAD_HASH} * origin/main\n"
        f"feature/login {PARENT_HASH}  \n"
        f"release {OTHER_PARENT_HASH}   origin/release\n"
    )


@pytest.fixture
def sample_numstat() -> str:
    return "3\t0\tsrc/lib.rs\n-\t-\tbinary.png\n12\t4\tdocs/read me.md\n"


# --- unified diff samples ---------------------------------------------------


@pytest.fixture
def sample_diff_modified() -> str:
    """A diff modifying an existing file."""
    return textwrap.dedent("""\
        diff --git a/app.py b/app.py
        index 1234567..abcdef0 100644
        --- a/app.py
        +++ b/app.py
        @@ -10,2 +10,3 @@ def main():
             setup()
        -    run()
        +    run(verbose=True)
        +    teardown()
    """)


@pytest.fixture
def sample_diff_new_file() -> str:
    """A diff adding a new file."""
    return textwrap.dedent("""\
        diff --git a/hello.py b/hello.py
        new file mode 100644
        index 0000000..e69de29
        --- /dev/null
        +++ b/hello.py
        @@ -0,0 +1,3 @@
        +def greet(name):
        +    return f"Hello, {name}!"
        +
    """)


@pytest.fixture
def sample_diff_deleted() -> str:
    return textwrap.dedent("""\
        diff --git a/legacy.py b/legacy.py
        deleted file mode 100644
        index abc1234..0000000
        --- a/legacy.py
        +++ /dev/null
        @@ -1,2 +0,0 @@
        -import os
        -print(os.getcwd())
    """)


@pytest.fixture
def sample_diff_binary() -> str:
    """A diff with a binary file."""
    return textwrap.dedent("""\
        diff --git a/image.png b/image.png
        new file mode 100644
        Binary files /dev/null and b/image.png differ
    """)


@pytest.fixture
def sample_diff_rename() -> str:
    """A diff with a renamed file."""
    return textwrap.dedent("""\
        diff --git a/old_name.py b/new_name.py
        similarity index 97%
        rename from old_name.py
        rename to new_name.py
        index abc1234..def5678 100644
        --- a/old_name.py
        +++ b/new_name.py
        @@ -1,0 +2,1 @@
        +# New line added after rename
    """)


@pytest.fixture
def sample_diff_mode_only() -> str:
    """A diff with only file mode change."""
    return textwrap.dedent("""\
        diff --git a/script.sh b/script.sh
        old mode 100644
        new mode 100755
    """)


@pytest.fixture
def sample_diff_no_newline() -> str:
    """A diff with 'No newline at end of file' marker."""
    return textwrap.dedent("""\
        diff --git a/data.txt b/data.txt
        new file mode 100644
        index 0000000..abc1234
        --- /dev/null
        +++ b/data.txt
        @@ -0,0 +1 @@
        +final line without newline
        \\ No newline at end of file
    """)


# --- temp repositories ------------------------------------------------------


def _git(repo: Path, *args: str) -> str:
    result = subprocess.run(
        ["git", *args], cwd=repo, capture_output=True, check=True, text=True,
    )
    return result.stdout


@pytest.fixture
def git() -> Callable[..., str]:
    """Run raw git in a repo: ``git(repo, "add", ".")``."""
    return _git


@pytest.fixture
def tmp_git_repo(tmp_path: Path) -> Path:
    """Create a temporary git repository with one commit on ``main``."""
    repo = tmp_path / "repo"
    repo.mkdir()
    subprocess.run(["git", "init", str(repo)], capture_output=True, check=True)
    _git(repo, "symbolic-ref", "HEAD", "refs/heads/main")
    _git(repo, "config", "user.email", "test@test.com")
    _git(repo, "config", "user.name", "Test")
    _git(repo, "config", "commit.gpgsign", "false")
    # Initial commit
    (repo / "README.md").write_text("# Test\n")
    _git(repo, "add", ".")
    _git(repo, "commit", "-m", "init")
    return repo
