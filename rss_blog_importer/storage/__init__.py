"""
Vault file storage and the persistent settings record.
"""

from .settings import ImporterSettings, SettingsStore
from .vault import FileStore, VaultStore, join_path, normalize_path

__all__ = [
    "ImporterSettings",
    "SettingsStore",
    "FileStore",
    "VaultStore",
    "join_path",
    "normalize_path",
]
