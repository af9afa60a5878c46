# hashstruct/core/config.py
from __future__ import annotations

import os
from dataclasses import dataclass, replace
from typing import Optional

from hashstruct.core.sink import Crc64Sink, Sink

DEFAULT_TAG_NAME = "hash"


@dataclass(frozen=True)
class HashOptions:
    sink: Optional[Sink] = None
    tag_name: str = DEFAULT_TAG_NAME

    @classmethod
    def load(cls) -> "HashOptions":
        tag_name = os.environ.get("HASHSTRUCT_TAG_NAME", DEFAULT_TAG_NAME)
        return cls(tag_name=tag_name)

    def validate(self) -> None:
        if not isinstance(self.tag_name, str):
            raise ValueError("tag_name must be a string")
        if self.sink is not None and not isinstance(self.sink, Sink):
            raise ValueError("sink must be a Sink")

    def resolved(self) -> "HashOptions":
        """Copy with defaults filled in; the receiver is left untouched."""
        self.validate()
        return replace(
            self,
            sink=self.sink if self.sink is not None else Crc64Sink(),
            tag_name=self.tag_name or DEFAULT_TAG_NAME,
        )
