"""Core package for the ptrsync project."""

from .chain import SelectionChain, WizardExit, resolve_install_dir, resolve_side
from .cli import app, run
from .config import ConfigError, SavedSelection, Settings, load_settings, load_snapshot, save_snapshot
from .manager import SyncManager
from .manifest import MANIFEST
from .models import (
    Back,
    CopyAction,
    CopyManifestEntry,
    DirectorySyncMode,
    EntryKind,
    EntryResult,
    Exit,
    ManualEntry,
    NavigatorRequest,
    OverwritePolicy,
    Selected,
    SelectionResult,
    SideSelection,
    SyncReport,
)
from .navigator import list_folders, navigate
from .policy import copy_file, resolve_switches

__all__ = [
    "Back",
    "ConfigError",
    "CopyAction",
    "CopyManifestEntry",
    "DirectorySyncMode",
    "EntryKind",
    "EntryResult",
    "Exit",
    "MANIFEST",
    "ManualEntry",
    "NavigatorRequest",
    "OverwritePolicy",
    "SavedSelection",
    "Selected",
    "SelectionChain",
    "SelectionResult",
    "Settings",
    "SideSelection",
    "SyncManager",
    "SyncReport",
    "WizardExit",
    "app",
    "copy_file",
    "list_folders",
    "load_settings",
    "load_snapshot",
    "navigate",
    "resolve_install_dir",
    "resolve_side",
    "resolve_switches",
    "run",
    "save_snapshot",
]
