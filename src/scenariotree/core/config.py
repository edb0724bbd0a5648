from __future__ import annotations

"""Compiler settings and the schema of ``scenariotree.yaml``.

Expected format:

scenariotree:
  output_dir: tests/generated
  test_prefix: test_
  placeholder: skip
  jobs: 4
  extra_stopwords: [should]
"""

from typing import List, Literal, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator

from scenariotree.core.naming import STOPWORDS
from scenariotree.core.tree.models import KEYWORDS

CONFIG_FILENAME = "scenariotree.yaml"


class CompilerConfig(BaseModel):
    """Resolved settings used by the compile service."""

    output_dir: Optional[str] = None
    test_prefix: str = "test_"
    placeholder: Literal["skip", "fail"] = "skip"
    jobs: int = 1
    stopwords: Tuple[str, ...] = tuple(sorted(STOPWORDS))

    model_config = {"frozen": True}


class CompilerConfigEntrySpec(BaseModel):
    output_dir: Optional[str] = None
    test_prefix: str = "test_"
    placeholder: Literal["skip", "fail"] = "skip"
    jobs: int = Field(default=1, ge=1)
    extra_stopwords: List[str] = Field(default_factory=list)

    model_config = ConfigDict(extra="forbid")

    @field_validator("test_prefix")
    @classmethod
    def _validate_prefix(cls, value: str) -> str:
        if not value.isidentifier():
            raise ValueError(f"test_prefix must start a valid Python identifier, got {value!r}")
        return value

    @field_validator("extra_stopwords")
    @classmethod
    def _lowercase_stopwords(cls, value: List[str]) -> List[str]:
        words = [word.strip().lower() for word in value if word.strip()]
        keywords = sorted(set(words) & set(KEYWORDS))
        if keywords:
            raise ValueError(f"node keywords cannot be stopwords: {', '.join(keywords)}")
        return words

    def build(self) -> CompilerConfig:
        return CompilerConfig(
            output_dir=self.output_dir,
            test_prefix=self.test_prefix,
            placeholder=self.placeholder,
            jobs=self.jobs,
            stopwords=tuple(sorted(STOPWORDS | set(self.extra_stopwords))),
        )


class CompilerConfigFileSpec(BaseModel):
    scenariotree: CompilerConfigEntrySpec = Field(default_factory=CompilerConfigEntrySpec)

    model_config = ConfigDict(extra="forbid")


__all__ = ["CONFIG_FILENAME", "CompilerConfig", "CompilerConfigEntrySpec", "CompilerConfigFileSpec"]
