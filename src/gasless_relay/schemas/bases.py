"""
Shared pydantic base for relayer wire models and authorization schemas.

Models accept both Python field names and wire aliases on input, and can
render a byte-stable JSON form used where a request must hash the same way
every time (the mock relayer derives its transaction reference from it).
"""

import json

from pydantic import BaseModel, ConfigDict


class CanonicalModel(BaseModel):
    """
    Base model with a deterministic JSON rendering.

    Example:
        class Ping(CanonicalModel):
            seq: int
            tag: str

        Ping(tag="a", seq=1).to_canonical_json()  # '{"seq":1,"tag":"a"}'
    """

    model_config = ConfigDict(populate_by_name=True)

    def to_canonical_json(self) -> str:
        """Wire-named fields, sorted keys, compact separators, UTF-8 kept as is."""
        return json.dumps(
            self.model_dump(mode="json", by_alias=True),
            sort_keys=True,
            separators=(",", ":"),
            ensure_ascii=False,
        )
