from __future__ import annotations

from typing import Any

from rc4kit.libs.crypto.rc4 import DEFAULT_DROP
from rc4kit.schemas import KEY_ENCODINGS, CipherConfig


class ConfigAdapter:
    """High-level accessor for general and profile-specific configuration.

    All configuration resolution follows the order:

    **profile -> general -> built-in defaults**

    Args:
        config (dict[str, Any]): Fully loaded configuration mapping containing
            a ``general`` block and optionally a ``profiles`` block.

    Attributes:
        _config (dict[str, Any]): Internal stored configuration mapping.
    """

    def __init__(self, config: dict[str, Any]) -> None:
        self._config: dict[str, Any] = dict(config)

    def get_config(self) -> dict[str, Any]:
        """Return the full raw configuration mapping.

        Returns:
            dict[str, Any]: The stored configuration.
        """
        return self._config

    def get_cipher_config(self, profile: str | None = None) -> CipherConfig:
        """Build a CipherConfig by merging general and profile overrides.

        Args:
            profile (str | None): Optional profile name. ``None`` uses the
                general block only.

        Returns:
            CipherConfig: Resolved and validated cipher configuration.

        Raises:
            ValueError: If the profile does not exist or a value is invalid.
        """
        general_cfg = self._gen_cfg()
        profile_cfg = self._profile_cfg(profile) if profile else {}
        cfg = {**general_cfg, **profile_cfg}

        drop = cfg.get("drop", DEFAULT_DROP)
        if isinstance(drop, bool) or not isinstance(drop, int) or drop < 0:
            raise ValueError(f"Invalid 'drop': expected int >= 0, got {drop!r}")

        chunk_size = cfg.get("chunk_size", 65536)
        if isinstance(chunk_size, bool) or not isinstance(chunk_size, int):
            raise ValueError(f"Invalid 'chunk_size': expected int, got {chunk_size!r}")
        if chunk_size <= 0:
            raise ValueError(f"Invalid 'chunk_size': must be > 0, got {chunk_size}")

        key_encoding = str(cfg.get("key_encoding", "utf-8")).lower()
        if key_encoding not in KEY_ENCODINGS:
            raise ValueError(
                f"Invalid 'key_encoding': {key_encoding!r}, "
                f"expected one of {', '.join(KEY_ENCODINGS)}"
            )

        return CipherConfig(
            drop=drop,
            key_encoding=key_encoding,
            chunk_size=chunk_size,
        )

    def get_profiles(self) -> list[str]:
        """Return the names of all configured profiles.

        Returns:
            list[str]: Profile names in file order.

        Raises:
            ValueError: If ``profiles`` is not a table.
        """
        profiles = self._profiles_cfg()
        return [name for name, value in profiles.items() if isinstance(value, dict)]

    def get_log_level(self) -> str:
        """Return the configured logging level.

        Returns:
            str: Logging level or ``"INFO"`` if missing.

        Raises:
            ValueError: If ``general.debug`` is not a table or the level is
                not a string.
        """
        debug_cfg = self._gen_cfg().get("debug") or {}
        if not isinstance(debug_cfg, dict):
            raise ValueError(f"Invalid 'debug': expected a table, got {debug_cfg!r}")

        log_level = debug_cfg.get("log_level") or "INFO"
        if not isinstance(log_level, str):
            raise ValueError(f"Invalid 'log_level': expected str, got {log_level!r}")
        return log_level

    def _gen_cfg(self) -> dict[str, Any]:
        """Return general configuration mapping.

        Returns:
            dict[str, Any]: ``general`` config or empty dict.
        """
        general = self._config.get("general")
        return general if isinstance(general, dict) else {}

    def _profiles_cfg(self) -> dict[str, Any]:
        """Return the ``profiles`` mapping.

        Returns:
            dict[str, Any]: Profiles block or empty dict if absent.

        Raises:
            ValueError: If ``profiles`` is present but not a table.
        """
        profiles = self._config.get("profiles") or {}
        if not isinstance(profiles, dict):
            raise ValueError(f"Invalid 'profiles': expected a table, got {profiles!r}")
        return profiles

    def _profile_cfg(self, profile: str) -> dict[str, Any]:
        """Return configuration block for the given profile.

        Args:
            profile (str): Profile name.

        Returns:
            dict[str, Any]: Profile configuration.

        Raises:
            ValueError: If no such profile is configured.
        """
        value = self._profiles_cfg().get(profile)
        if not isinstance(value, dict):
            raise ValueError(f"Unknown profile: {profile!r}")
        return value
