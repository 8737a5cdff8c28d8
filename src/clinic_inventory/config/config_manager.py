"""
Configuration management for the clinic inventory tracker.

Handles application settings and secure storage of provider credentials.
"""

import json
import os
from pathlib import Path
from typing import Any, Dict, Optional

from cryptography.fernet import Fernet

CONFIG_DIR_ENV = "CLINIC_INVENTORY_CONFIG_DIR"


class ConfigManager:
    """
    Manages application configuration and settings.

    Provides encrypted storage for sensitive data like LLM API keys.
    """

    def __init__(self, config_dir: Optional[str] = None) -> None:
        """
        Initialize configuration manager.

        Args:
            config_dir: Directory for configuration files (defaults to
                $CLINIC_INVENTORY_CONFIG_DIR or "config")
        """
        self.config_dir = Path(config_dir or os.getenv(CONFIG_DIR_ENV, "config"))
        self.config_dir.mkdir(parents=True, exist_ok=True)

        self.config_file = self.config_dir / "app_config.json"
        self.credentials_file = self.config_dir / "credentials.enc"
        self.key_file = self.config_dir / ".key"

        self.config: Dict[str, Any] = {}
        self.credentials: Dict[str, Any] = {}

        self._init_encryption()
        self.load_config()

    def _init_encryption(self) -> None:
        """Load the credentials key, generating one on first run."""
        if not self.key_file.exists():
            self.key_file.write_bytes(Fernet.generate_key())
            _restrict_permissions(self.key_file)

        self.cipher = Fernet(self.key_file.read_bytes())

    def load_config(self) -> None:
        """Load configuration from files, filling in missing defaults."""
        defaults = self._get_default_config()
        if self.config_file.exists():
            self.config = _merge_defaults(defaults, json.loads(self.config_file.read_text()))
        else:
            self.config = defaults
            self.save_config()

        if self.credentials_file.exists():
            token = self.credentials_file.read_bytes()
            self.credentials = json.loads(self.cipher.decrypt(token))

    def save_config(self) -> None:
        """Save configuration to file."""
        self.config_file.write_text(json.dumps(self.config, indent=2))

    def save_credentials(self) -> None:
        """Save encrypted credentials to file."""
        token = self.cipher.encrypt(json.dumps(self.credentials).encode())
        self.credentials_file.write_bytes(token)
        _restrict_permissions(self.credentials_file)

    def _get_default_config(self) -> Dict[str, Any]:
        """Get default configuration."""
        return {
            "app_version": "0.1.0",
            "storage": {
                "data_dir": "data",
            },
            "restock": {
                "usage_window_days": 30,
                "supply_days": 30,
                "automated_supplier": "Automated Restock System",
            },
            "alerts": {
                "expiry_warning_days": 7,
                "expiry_critical_days": 3,
            },
            "api": {
                "host": "0.0.0.0",
                "port": 3000,
            },
            "logging": {
                "level": "INFO",
                "log_dir": "logs",
                "max_file_size_mb": 10,
                "backup_count": 5,
                "audit_max_entries": 5000
            },
            "llm": {
                "provider": "ollama",  # "ollama" or "gemini"
                "timeout_seconds": 60,
                "max_retries": 2,
                "retry_backoff_seconds": 1.0,
                "ollama": {
                    "model": "gemma3n:e2b-it-q4_K_M",
                    "base_url": "http://localhost:11434"
                },
                "gemini": {
                    "model": "gemini-2.5-flash-lite",
                    "temperature": 0.3,
                    "api_key_env": "GOOGLE_API_KEY"
                }
            }
        }

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get configuration value.

        Args:
            key: Configuration key (supports dot notation, e.g., "storage.data_dir")
            default: Default value if key not found

        Returns:
            Configuration value
        """
        node: Any = self.config
        for part in key.split("."):
            if not isinstance(node, dict) or node.get(part) is None:
                return default
            node = node[part]
        return node

    def set(self, key: str, value: Any, save: bool = True) -> None:
        """
        Set configuration value.

        Args:
            key: Configuration key (supports dot notation)
            value: Value to set
            save: Whether to save immediately
        """
        *parents, leaf = key.split(".")
        section = self.config
        for part in parents:
            section = section.setdefault(part, {})
        section[leaf] = value

        if save:
            self.save_config()

    def get_credential(self, key: str) -> Optional[str]:
        """Get a decrypted credential, or None if not stored."""
        return self.credentials.get(key)

    def set_credential(self, key: str, value: str, save: bool = True) -> None:
        """
        Set encrypted credential.

        Args:
            key: Credential key
            value: Credential value
            save: Whether to save immediately
        """
        self.credentials[key] = value
        if save:
            self.save_credentials()

    def remove_credential(self, key: str, save: bool = True) -> bool:
        """
        Remove a credential.

        Returns:
            True if credential was removed
        """
        removed = self.credentials.pop(key, None) is not None
        if removed and save:
            self.save_credentials()
        return removed

    def has_credential(self, key: str) -> bool:
        return key in self.credentials

    def reset_to_defaults(self) -> None:
        """Reset configuration to defaults."""
        self.config = self._get_default_config()
        self.save_config()

    def get_llm_api_key(self, provider: str) -> Optional[str]:
        """
        Get API key for an LLM provider.

        Stored credentials win over the environment variable named by
        ``llm.<provider>.api_key_env``.

        Args:
            provider: Provider name (gemini)

        Returns:
            API key or None if not configured
        """
        stored = self.get_credential(f"{provider}_api_key")
        if stored:
            return stored

        env_name = self.get(f"llm.{provider}.api_key_env")
        return os.getenv(env_name) if env_name else None

    def set_llm_api_key(self, provider: str, api_key: str) -> None:
        """Store an LLM provider API key encrypted."""
        self.set_credential(f"{provider}_api_key", api_key)


def _restrict_permissions(path: Path) -> None:
    if os.name != "nt":
        os.chmod(path, 0o600)


def _merge_defaults(defaults: Dict[str, Any], stored: Dict[str, Any]) -> Dict[str, Any]:
    """Overlay stored settings onto defaults, recursing into sections."""
    merged = dict(defaults)
    for key, value in stored.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _merge_defaults(merged[key], value)
        else:
            merged[key] = value
    return merged


# Global configuration instance
_config_manager: Optional[ConfigManager] = None


def get_config_manager() -> ConfigManager:
    """
    Get global configuration manager instance.

    Returns:
        ConfigManager instance
    """
    global _config_manager
    if _config_manager is None:
        _config_manager = ConfigManager()
    return _config_manager


def reset_config_manager() -> None:
    """Reset global configuration manager (mainly for testing)."""
    global _config_manager
    _config_manager = None
