"""Settings file loading and the persisted Live/PTR selection snapshot."""

from __future__ import annotations

import io
import os
import tomllib
from pathlib import Path
from typing import Any, Mapping

import tomli_w
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .models import OverwritePolicy, SideSelection

DEFAULT_CONFIG_FILENAME = "ptrsync.toml"
DEFAULT_SNAPSHOT_FILENAME = "ptrsync-selection.json"
DEFAULT_INSTALL_ROOT = r"C:\Program Files (x86)\World of Warcraft"
INSTALL_ROOT_ENV = "PTRSYNC_INSTALL_ROOT"


class ConfigError(RuntimeError):
    """Raised when a configuration file cannot be parsed or validated."""


def _expand_path(raw: str | os.PathLike[str] | Path, *, base_dir: Path) -> Path:
    """Return an absolute ``Path`` by expanding env vars and user segments."""

    text = str(raw)
    expanded = Path(os.path.expandvars(text)).expanduser()
    if expanded.is_absolute():
        return expanded.resolve(strict=False)
    return (base_dir / expanded).resolve(strict=False)


def default_install_root() -> Path:
    """Best-effort game root: ``$PTRSYNC_INSTALL_ROOT`` or the stock install location."""

    return Path(os.environ.get(INSTALL_ROOT_ENV) or DEFAULT_INSTALL_ROOT)


class Settings(BaseModel):
    """Options read from ``ptrsync.toml``."""

    model_config = ConfigDict(frozen=True)

    install_root: Path = Field(default_factory=default_install_root)
    snapshot_path: Path = Field(default_factory=lambda: Path.cwd() / DEFAULT_SNAPSHOT_FILENAME)
    strict_manual_entry: bool = False
    policy: OverwritePolicy | None = None

    @classmethod
    def from_raw(cls, raw: Mapping[str, Any], *, base_dir: Path) -> "Settings":
        if not isinstance(raw, Mapping):
            raise ConfigError(f"[settings] must be a table, not {type(raw).__name__}")
        values: dict[str, Any] = dict(raw)
        if "install_root" in values:
            values["install_root"] = _expand_path(values["install_root"], base_dir=base_dir)
        values["snapshot_path"] = _expand_path(values.get("snapshot_path", DEFAULT_SNAPSHOT_FILENAME), base_dir=base_dir)
        try:
            return cls.model_validate(values)
        except ValidationError as exc:
            raise ConfigError(f"Invalid [settings] table: {exc}") from exc


def load_settings(path: Path | None = None) -> Settings:
    """Load settings from ``path`` or ``./ptrsync.toml``.

    Without an explicit path a missing file yields the built-in defaults; an
    explicit path that does not exist is an error.
    """

    if path is None:
        candidate = Path.cwd() / DEFAULT_CONFIG_FILENAME
        if not candidate.exists():
            return Settings()
        path = candidate

    config_path = _resolve_config_path(path)
    try:
        with config_path.open("rb") as handle:
            data = tomllib.load(handle)
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(f"Configuration file '{config_path}' is not valid TOML: {exc}") from exc

    return Settings.from_raw(data.get("settings", {}), base_dir=config_path.parent)


def _resolve_config_path(path: Path) -> Path:
    path = Path(path)
    if not path.exists():
        raise ConfigError(f"Configuration file '{path}' does not exist")
    if path.is_dir():
        candidate = path / DEFAULT_CONFIG_FILENAME
        if not candidate.exists():
            raise ConfigError(f"Expected to find '{DEFAULT_CONFIG_FILENAME}' inside '{path}', but none was located")
        path = candidate

    return path.resolve(strict=False)


def render_config(*, install_root: str, snapshot_path: str, policy: OverwritePolicy | None = None) -> str:
    """Return the text of a starter ``ptrsync.toml``."""

    settings: dict[str, Any] = {
        "install_root": install_root,
        "snapshot_path": snapshot_path,
        "strict_manual_entry": False,
    }
    if policy is not None:
        settings["policy"] = policy.value

    buffer = io.StringIO()
    buffer.write("# ptrsync configuration\n")
    buffer.write('# policy: "mirror", "additive" or "ask"; leave it out to choose at every run\n\n')
    buffer.write(tomli_w.dumps({"settings": settings}))
    return buffer.getvalue()


class SavedSelection(BaseModel):
    """Live/PTR selections persisted between runs.

    The JSON field names are fixed; all eight must be present for an import to succeed.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    live_dir: str = Field(alias="LiveDir")
    ptr_dir: str = Field(alias="PtrDir")
    live_account: str = Field(alias="LiveAccount")
    live_realm: str = Field(alias="LiveRealm")
    live_character: str = Field(alias="LiveCharacter")
    ptr_account: str = Field(alias="PtrAccount")
    ptr_realm: str = Field(alias="PtrRealm")
    ptr_character: str = Field(alias="PtrCharacter")

    @classmethod
    def from_sides(cls, live: SideSelection, ptr: SideSelection) -> "SavedSelection":
        return cls(
            live_dir=str(live.install_dir),
            ptr_dir=str(ptr.install_dir),
            live_account=live.account,
            live_realm=live.realm,
            live_character=live.character,
            ptr_account=ptr.account,
            ptr_realm=ptr.realm,
            ptr_character=ptr.character,
        )

    def live(self) -> SideSelection:
        return SideSelection(Path(self.live_dir), self.live_account, self.live_realm, self.live_character)

    def ptr(self) -> SideSelection:
        return SideSelection(Path(self.ptr_dir), self.ptr_account, self.ptr_realm, self.ptr_character)


def load_snapshot(path: Path) -> SavedSelection | None:
    """Return the saved selection, or ``None`` if it is missing or incomplete."""

    if not path.is_file():
        return None
    try:
        return SavedSelection.model_validate_json(path.read_bytes())
    except (OSError, ValidationError):
        return None


def save_snapshot(path: Path, selection: SavedSelection) -> None:
    """Write exactly the eight snapshot fields to ``path``."""

    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(selection.model_dump_json(by_alias=True, indent=2) + "\n", encoding="utf-8")
