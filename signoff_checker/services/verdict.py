import re
from typing import Iterable

from signoff_checker.constants import CONTRIBUTING_FILE
from signoff_checker.schemas.github import CommitRecord, Verdict

SIGNED_OFF_BY_PATTERN = re.compile(r"^signed-off-by:", re.IGNORECASE | re.MULTILINE)

FAILURE_DESCRIPTION = "A commit in PR is missing Signed-off-by"
SUCCESS_DESCRIPTION = "Commit has Signed-off-by"


def has_sign_off(message: str) -> bool:
    return SIGNED_OFF_BY_PATTERN.search(message) is not None


def contributing_url(owner: str, repo: str) -> str:
    return f"https://github.com/{owner}/{repo}/blob/master/{CONTRIBUTING_FILE}"


def compute_verdict(owner: str, repo: str, commits: Iterable[CommitRecord]) -> Verdict:
    """Decide the status shared by every commit of a pull request.

    A single unsigned commit fails the whole set.
    """
    signed = all(has_sign_off(commit.message) for commit in commits)
    return Verdict(
        signed=signed,
        state="success" if signed else "failure",
        description=SUCCESS_DESCRIPTION if signed else FAILURE_DESCRIPTION,
        target_url=contributing_url(owner, repo),
    )
