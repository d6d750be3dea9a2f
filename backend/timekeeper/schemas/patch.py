# backend/timekeeper/schemas/patch.py

from typing import Optional

from pydantic import BaseModel


class PatchOperation(BaseModel):
    """
    [request] PATCH /<entity>/{id}
    {"op": "replace", "path": "/status", "value": "DONE"}
    Only "replace" on a single whitelisted field is supported.
    """
    op: Optional[str] = None
    path: Optional[str] = None
    value: Optional[str] = None

    def __str__(self) -> str:
        return f"{{op={self.op!r}, path={self.path!r}, value={self.value!r}}}"
