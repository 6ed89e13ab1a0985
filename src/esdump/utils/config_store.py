import os
import json
import platform
from pathlib import Path
from typing import Dict, Optional
from datetime import datetime
import keyring
from keyring.errors import PasswordDeleteError
from esdump.constants import KEYRING_SERVICE

SECRET_FIELDS = ("password", "api_key")


class ConfigStore:
    """Connection profiles on disk, their secrets in the OS keyring"""

    def __init__(self):
        self.base_dir = self._get_config_dir()
        self.profiles_file = self.base_dir / "profiles.json"
        self.current_profile_file = self.base_dir / "current_profile"
        self.settings_file = self.base_dir / "settings.json"
        self._ensure_config_dir()

    def _get_config_dir(self) -> Path:
        """Get platform-specific config directory"""
        system = platform.system()
        if system == "Windows":
            base_dir = os.environ.get("APPDATA", "")
            return Path(base_dir) / "esdump"
        elif system == "Darwin":  # macOS
            return Path.home() / "Library" / "Application Support" / "esdump"
        else:  # Linux and others
            xdg_config = os.environ.get("XDG_CONFIG_HOME", "")
            if xdg_config:
                return Path(xdg_config) / "esdump"
            return Path.home() / ".esdump"

    def _ensure_config_dir(self):
        os.makedirs(self.base_dir, exist_ok=True)

    def _write_json(self, path: Path, data: Dict) -> None:
        with open(path, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2)

    def _read_json(self, path: Path) -> Dict:
        if not path.exists():
            return {}
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (json.JSONDecodeError, IOError):
            return {}
        return data if isinstance(data, dict) else {}

    def save_profile(self, profile_name: str, config: Dict) -> None:
        """Save a connection profile.

        ``password`` and ``api_key`` go to the keyring; the JSON file only
        records whether each one is set. A secret key present with a None
        value removes the stored secret, an absent key leaves it alone.
        """
        profiles = self.get_profiles()
        existing = profiles.get(profile_name, {})
        now = datetime.now().isoformat()

        public = {k: v for k, v in config.items() if k not in SECRET_FIELDS}
        for field in SECRET_FIELDS:
            if field not in config:
                if existing.get(f"has_{field}"):
                    public[f"has_{field}"] = True
                continue
            value = config[field]
            if value:
                keyring.set_password(self._secret_service(profile_name), field, value)
                public[f"has_{field}"] = True
            else:
                if existing.get(f"has_{field}"):
                    self._delete_secret(profile_name, field)
                public[f"has_{field}"] = False

        profiles[profile_name] = {
            **public,
            "name": profile_name,
            "created_at": existing.get("created_at", now),
            "updated_at": now,
        }
        self._write_json(self.profiles_file, profiles)

    def get_profiles(self) -> Dict:
        """Get all profiles"""
        return self._read_json(self.profiles_file)

    def get_profile_config(self, profile_name: str) -> Optional[Dict]:
        """Get a profile without its secrets"""
        return self.get_profiles().get(profile_name)

    def get_profile_secret(self, profile_name: str, field: str) -> Optional[str]:
        """Read ``password`` or ``api_key`` for a profile from the keyring"""
        return keyring.get_password(self._secret_service(profile_name), field)

    def delete_profile(self, profile_name: str) -> bool:
        """Delete a profile and its stored secrets"""
        profiles = self.get_profiles()
        if profile_name not in profiles:
            return False

        profile = profiles.pop(profile_name)
        self._write_json(self.profiles_file, profiles)

        for field in SECRET_FIELDS:
            if profile.get(f"has_{field}"):
                self._delete_secret(profile_name, field)

        if self.get_current_profile() == profile_name:
            self.current_profile_file.unlink()
        return True

    def set_current_profile(self, profile_name: str) -> None:
        """Set current active profile"""
        with open(self.current_profile_file, "w", encoding="utf-8") as f:
            f.write(profile_name)

    def get_current_profile(self) -> Optional[str]:
        """Get current active profile"""
        if not self.current_profile_file.exists():
            return None
        try:
            with open(self.current_profile_file, "r", encoding="utf-8") as f:
                return f.read().strip() or None
        except IOError:
            return None

    def get_settings(self) -> Dict:
        """Global settings (e.g. ``log_level``)"""
        return self._read_json(self.settings_file)

    def update_settings(self, **values) -> Dict:
        settings = self.get_settings()
        settings.update(values)
        self._write_json(self.settings_file, settings)
        return settings

    def _delete_secret(self, profile_name: str, field: str) -> None:
        try:
            keyring.delete_password(self._secret_service(profile_name), field)
        except PasswordDeleteError:
            pass

    @staticmethod
    def _secret_service(profile_name: str) -> str:
        return f"{KEYRING_SERVICE}:{profile_name}"
