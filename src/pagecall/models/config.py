"""Sampling configuration for chat-completion calls.

SamplingConfig is fixed for the duration of a run and forwarded unchanged
on every turn. Defaults reproduce the settings the loop was tuned with.
"""

from __future__ import annotations

import types
from dataclasses import dataclass, fields as dc_fields

DEFAULT_MODEL = "gpt-4-0613"


@dataclass(frozen=True)
class SamplingConfig:
    """Fully-typed sampling configuration.

    A field set to None is omitted from the request payload, leaving the
    provider default in effect.

    Example::

        from pagecall import SamplingConfig
        config = SamplingConfig(model="gpt-4o", temperature=0.2)
    """

    model: str | None = DEFAULT_MODEL
    temperature: float | None = 0.7
    max_tokens: int | None = 1600
    frequency_penalty: float | None = 0.0
    presence_penalty: float | None = 0.0
    top_p: float | None = 0.95
    extra: dict | None = None

    def __post_init__(self) -> None:
        if self.extra is not None:
            object.__setattr__(self, "extra", types.MappingProxyType(dict(self.extra)))

    def to_dict(self) -> dict:
        """Convert to a flat payload dict, merging extra keys at top level.

        Only includes non-None fields.
        """
        result: dict = {}
        for f in dc_fields(self):
            if f.name == "extra":
                continue
            value = getattr(self, f.name)
            if value is not None:
                result[f.name] = value
        if self.extra:
            result.update(self.extra)
        return result
