from __future__ import annotations

"""Error taxonomy for tree compilation."""

from typing import Optional, Sequence


class ScenarioTreeError(RuntimeError):
    """Base class for every failure raised while compiling a tree."""


class MalformedTreeError(ScenarioTreeError):
    """Tree text cannot be parsed (indentation, keyword or emptiness problems)."""

    def __init__(self, message: str, *, line: Optional[int] = None, text: Optional[str] = None):
        self.message = message
        self.line = line
        self.text = text
        super().__init__(self._build_message())

    def _build_message(self) -> str:
        if self.line is None:
            return self.message
        if self.text is not None:
            return f"line {self.line}: {self.message}: {self.text.strip()!r}"
        return f"line {self.line}: {self.message}"


class TreeValidationError(ScenarioTreeError):
    """A parsed tree violates a structural invariant."""

    def __init__(self, message: str, *, line: Optional[int] = None, labels: Sequence[str] = ()):
        self.message = message
        self.line = line
        self.labels = tuple(labels)
        super().__init__(self._build_message())

    def _build_message(self) -> str:
        parts = []
        if self.line:
            parts.append(f"line {self.line}")
        parts.append(self.message)
        base = ": ".join(parts)
        if self.labels:
            return f"{base} [{' > '.join(self.labels)}]"
        return base


class EmptyTreeError(TreeValidationError):
    pass


class DanglingLeafError(TreeValidationError):
    pass


class ChildlessBranchError(TreeValidationError):
    pass


class SingleChildBranchError(TreeValidationError):
    pass


class DuplicateSiblingLabelError(TreeValidationError):
    pass


class DuplicatePathError(TreeValidationError):
    pass


class ArtifactFormatError(ScenarioTreeError):
    """A previously emitted scaffold cannot be read back."""

    def __init__(self, message: str, *, line: Optional[int] = None):
        self.message = message
        self.line = line
        super().__init__(f"line {line}: {message}" if line else message)


__all__ = [
    "ArtifactFormatError",
    "ChildlessBranchError",
    "DanglingLeafError",
    "DuplicatePathError",
    "DuplicateSiblingLabelError",
    "EmptyTreeError",
    "MalformedTreeError",
    "ScenarioTreeError",
    "SingleChildBranchError",
    "TreeValidationError",
]
