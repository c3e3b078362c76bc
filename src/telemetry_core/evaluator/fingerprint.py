"""Error fingerprinting for grouping."""

import hashlib

STACK_LINES = 3


def generate_fingerprint(message: str, stack: str | None, source: str) -> str:
    """Stable hash of ``source:message:first-3-stack-lines``.

    Identical inputs always produce identical fingerprints, across processes.
    """
    stack_lines = "|".join(stack.split("\n")[:STACK_LINES]) if stack else ""
    content = f"{source}:{message}:{stack_lines}"
    return hashlib.sha256(content.encode("utf-8")).hexdigest()[:16]
