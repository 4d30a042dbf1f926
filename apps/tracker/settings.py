from __future__ import annotations

from pathlib import Path
from typing import Any, Literal

from ports.vision import Region
from pydantic import BaseModel, Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_STATE_FILE = Path("~/.xpbar-meter/state.toml")


class CaptureSettings(BaseModel):
    adapter: Literal["mss", "fake"] = "mss"


class RegionSettings(BaseModel):
    left: int
    top: int
    right: int
    bottom: int

    @model_validator(mode="before")
    @classmethod
    def _accept_csv(cls, data: Any) -> Any:
        # "left,top,right,bottom" as written on the command line / in env
        if isinstance(data, str):
            r = Region.parse(data)
            return {"left": r.left, "top": r.top, "right": r.right, "bottom": r.bottom}
        if isinstance(data, (list, tuple)) and len(data) == 4:
            return dict(zip(("left", "top", "right", "bottom"), data, strict=True))
        return data

    def to_region(self) -> Region:
        return Region(left=self.left, top=self.top, right=self.right, bottom=self.bottom)


class TrackerSettings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="XPB_", extra="ignore")

    capture: CaptureSettings = Field(default_factory=CaptureSettings)
    region: RegionSettings | None = None

    # "console" logs each reading; "tui" shows the live overlay
    ui: Literal["console", "tui"] = "console"
    precision: int = Field(default=2, ge=0, le=6)

    state_file: Path = DEFAULT_STATE_FILE
