from .types import Outcome

# Wording emitted by virtme-ng when the requested kernel image cannot be
# resolved. Tested against virtme-ng 1.33; may change between releases.
MISSING_KERNEL_PATTERNS: tuple[str, ...] = (
    "failed to retrieve content",
    "does not exist",
)


def classify(succeeded: bool, stdout: str, stderr: str) -> tuple[Outcome, str]:
    if succeeded:
        return Outcome.SUCCESS, stdout

    if any(pattern in stderr for pattern in MISSING_KERNEL_PATTERNS):
        return Outcome.MISSING, stderr

    return Outcome.FAILURE, stderr
