"""
Connection profile access.

A connection profile is owned by the host. The plugin only reads it, using
the same lookup rules as the host's profile store: unset or empty strings
read as missing, unset booleans read as false and integers may be stored
as decimal strings.
"""

from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, Iterator, Mapping, Optional, Union

import yaml

from .exceptions import ProfileError
from .settings import default_values


ProfileValue = Union[str, bool, int]

_TRUE_STRINGS = {"1", "true", "yes", "on"}


class ConnectionProfile(Mapping[str, ProfileValue]):
    """
    Read-only view over a connection's stored options.

    Secrets (the password) are kept apart from the plain values, the way
    the host keeps them in its keyring rather than in the profile file.
    """

    def __init__(
        self,
        values: Optional[Mapping[str, ProfileValue]] = None,
        secrets: Optional[Mapping[str, str]] = None
    ):
        self._values = MappingProxyType(dict(values or {}))
        self._secrets = MappingProxyType(dict(secrets or {}))

    def __getitem__(self, key: str) -> ProfileValue:
        return self._values[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __repr__(self) -> str:
        # Secrets never show up in reprs or logs
        return f"ConnectionProfile({dict(self._values)!r}, secrets={sorted(self._secrets)!r})"

    def get_string(self, key: str) -> Optional[str]:
        """Return the value as a string, or None when unset or empty."""
        value = self._values.get(key)
        if value is None or isinstance(value, bool):
            return None
        text = str(value)
        return text if text else None

    def get_bool(self, key: str, default: bool = False) -> bool:
        """Return the value as a boolean; unset keys yield ``default``."""
        value = self._values.get(key)
        if value is None:
            return default
        if isinstance(value, bool):
            return value
        if isinstance(value, int):
            return value != 0
        return str(value).strip().lower() in _TRUE_STRINGS

    def get_int(self, key: str, default: int = 0) -> int:
        """Return the value as an integer; unset or unparsable keys yield ``default``."""
        value = self._values.get(key)
        if value is None or isinstance(value, bool):
            return default
        if isinstance(value, int):
            return value
        try:
            return int(str(value).strip())
        except ValueError:
            return default

    def get_secret(self, key: str) -> Optional[str]:
        """Return a secret value, falling back to a plain value of the same key."""
        secret = self._secrets.get(key)
        if secret:
            return secret
        return self.get_string(key)

    @classmethod
    def with_defaults(
        cls,
        values: Optional[Mapping[str, ProfileValue]] = None,
        secrets: Optional[Mapping[str, str]] = None
    ) -> 'ConnectionProfile':
        """Build a profile seeded with the settings schema defaults."""
        merged: Dict[str, Any] = default_values()
        merged.update(values or {})
        return cls(merged, secrets)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], apply_defaults: bool = False) -> 'ConnectionProfile':
        """
        Create a profile from a dictionary.

        A nested ``secrets`` mapping is split off into the secret store.
        """
        values = dict(data)
        secrets = values.pop('secrets', None) or {}
        if not isinstance(secrets, Mapping):
            raise ProfileError("Profile 'secrets' must be a mapping")

        for key, value in values.items():
            if value is not None and not isinstance(value, (str, bool, int)):
                raise ProfileError(
                    f"Profile option '{key}' must be a string, boolean or integer",
                    details={'option': key, 'type': type(value).__name__}
                )

        secrets = {k: str(v) for k, v in secrets.items() if v is not None}
        if apply_defaults:
            return cls.with_defaults(values, secrets)
        return cls(values, secrets)

    @classmethod
    def from_file(cls, profile_path: Union[str, Path], apply_defaults: bool = False) -> 'ConnectionProfile':
        """
        Load a profile from a YAML file.

        Args:
            profile_path: Path to YAML profile
            apply_defaults: Seed unset options with the schema defaults

        Returns:
            ConnectionProfile instance

        Raises:
            ProfileError: If the file cannot be read or parsed
        """
        path = Path(profile_path)
        if not path.exists():
            raise ProfileError(
                f"Profile file not found: {profile_path}",
                profile_path=str(profile_path)
            )

        try:
            with open(path, 'r') as f:
                data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ProfileError(
                f"Failed to parse YAML profile: {e}",
                profile_path=str(profile_path)
            ) from e
        except OSError as e:
            raise ProfileError(
                f"Failed to read profile file: {e}",
                profile_path=str(profile_path)
            ) from e

        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise ProfileError(
                "Profile root must be a mapping",
                profile_path=str(profile_path)
            )

        return cls.from_dict(data, apply_defaults=apply_defaults)

    def with_values(self, **overrides: ProfileValue) -> 'ConnectionProfile':
        """Return a copy with ``overrides`` applied; secrets are kept."""
        merged = dict(self._values)
        merged.update(overrides)
        return ConnectionProfile(merged, self._secrets)
