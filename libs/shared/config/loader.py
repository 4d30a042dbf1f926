from __future__ import annotations

import json
import logging
import os
import tomllib
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Final

from ports.vision import Region

from apps.tracker.settings import TrackerSettings

LOG: Final = logging.getLogger("config")

ENV_PREFIX: Final = "XPB_"

# --- paths --------------------------------------------------------------------


def _repo_root() -> Path:
    """Heuristic: walk up from this file until we find pyproject.toml."""
    p = Path(__file__).resolve()
    for ancestor in [p, *p.parents]:
        if (ancestor / "pyproject.toml").exists():
            return ancestor
    return Path.cwd()


def _profiles_dir(env: Mapping[str, str]) -> Path:
    # Allow override (useful for tests): XPB_CONFIG_DIR points *at* profiles/
    override = env.get(f"{ENV_PREFIX}CONFIG_DIR")
    if override:
        return Path(override)
    return _repo_root() / "configs" / "profiles"


def _load_profile_table(env: Mapping[str, str], profile: str) -> dict[str, Any]:
    f = _profiles_dir(env) / f"{profile}.toml"
    if not f.exists():
        return {}
    text = f.read_text("utf-8")
    try:
        return tomllib.loads(text)
    except Exception as e:
        raise RuntimeError(f"Failed to parse profile TOML: {f}") from e


# --- env overlay helpers ------------------------------------------------------


def _coerce_env_value(raw: str) -> Any:
    """
    Try to parse JSON first (so dicts/numbers/bools work),
    then fall back to the original string.
    """
    try:
        return json.loads(raw)
    except Exception:
        return raw


def _collect_env_for(
    fields: set[str], env: Mapping[str, str], prefix: str = ENV_PREFIX
) -> dict[str, Any]:
    """
    Collect overrides like XPB_UI, XPB_PRECISION -> {'ui': '...'}.
    Case-insensitive; underscores only.
    """
    out: dict[str, Any] = {}
    upper_to_field = {f.upper(): f for f in fields}
    plen = len(prefix)
    for k, v in env.items():
        if not k.startswith(prefix):
            continue
        key = k[plen:].upper()
        if key in upper_to_field:
            out[upper_to_field[key]] = _coerce_env_value(v)
    return out


# --- public API ---------------------------------------------------------------


def load_tracker_settings(
    env: Mapping[str, str] | None = None, profile: str | None = None
) -> TrackerSettings:
    """
    Merge defaults (TrackerSettings) <- TOML [tracker] <- env XPB_*.
    Env examples: XPB_UI=tui, XPB_REGION="10,900,610,910", XPB_CAPTURE={"adapter":"fake"}
    """
    env = os.environ if env is None else env
    profile = (profile or env.get(f"{ENV_PREFIX}PROFILE") or "dev").strip()

    # start from defaults exposed by the model
    base = TrackerSettings.model_construct().model_dump()

    # TOML overlay
    toml_table = _load_profile_table(env, profile)
    toml_tracker = toml_table.get("tracker", {}) if isinstance(toml_table, dict) else {}
    if isinstance(toml_tracker, dict):
        base.update(toml_tracker)

    # env overlay
    env_over = _collect_env_for(set(base.keys()), env)
    base.update(env_over)

    # validate
    return TrackerSettings.model_validate(base)


# --- region state (last selected bar) -------------------------------------------


def load_saved_region(path: str | Path) -> Region | None:
    """Read the [region] table written by save_region(); None if absent or unusable."""
    p = Path(path).expanduser()
    if not p.exists():
        return None
    try:
        data = tomllib.loads(p.read_text("utf-8"))
    except Exception as e:
        LOG.warning("Ignoring unreadable region state %s: %r", p, e)
        return None
    table = data.get("region")
    if not isinstance(table, dict):
        return None
    try:
        return Region(
            left=int(table["left"]),
            top=int(table["top"]),
            right=int(table["right"]),
            bottom=int(table["bottom"]),
        )
    except (KeyError, TypeError, ValueError) as e:
        LOG.warning("Ignoring malformed region state %s: %r", p, e)
        return None


def save_region(path: str | Path, region: Region) -> Path:
    p = Path(path).expanduser()
    p.parent.mkdir(parents=True, exist_ok=True)
    lines = [
        "[region]",
        f"left = {int(region.left)}",
        f"top = {int(region.top)}",
        f"right = {int(region.right)}",
        f"bottom = {int(region.bottom)}",
    ]
    p.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return p
