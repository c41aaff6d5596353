"""Model of the Chromium preload list document.

Only the `entries` array is read; pinsets and the rest of the document are
ignored.
"""

from __future__ import annotations

from pydantic import BaseModel, Field
from pydantic.config import ConfigDict

from core.domain.models import PreloadEntry


class PreloadListFile(BaseModel):
    model_config = ConfigDict(extra="ignore")

    entries: list[PreloadEntry] = Field(default_factory=list)
