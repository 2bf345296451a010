"""Connection configuration for appwand."""

import os
from dataclasses import dataclass

_DEFAULT_TIMEOUT = 30.0


@dataclass
class PortalConfig:
    address: str
    username: str | None = None
    password: str | None = None
    verify_tls: bool = True
    timeout: float = _DEFAULT_TIMEOUT

    def __post_init__(self) -> None:
        self.address = self.address.strip()
        if not self.address:
            raise ValueError(
                "No device address configured.\n"
                "Tip: Pass --address or set APPWAND_ADDRESS."
            )
        # A bare host or host:port means the portal's default HTTPS endpoint
        if "://" not in self.address:
            self.address = f"https://{self.address}"
        self.address = self.address.rstrip("/") + "/"

    @property
    def auth(self) -> tuple[str, str] | None:
        if self.username is None:
            return None
        return (self.username, self.password or "")

    @classmethod
    def from_env(cls, **overrides) -> "PortalConfig":
        """Build a config from APPWAND_* environment variables.

        Keyword overrides that are not None take precedence over the environment.
        """
        timeout_env = os.getenv("APPWAND_TIMEOUT")
        try:
            timeout = float(timeout_env) if timeout_env else _DEFAULT_TIMEOUT
        except ValueError:
            raise ValueError(f"APPWAND_TIMEOUT must be a number, got '{timeout_env}'.")

        values = {
            "address": os.getenv("APPWAND_ADDRESS", ""),
            "username": os.getenv("APPWAND_USER"),
            "password": os.getenv("APPWAND_PASSWORD"),
            "verify_tls": os.getenv("APPWAND_INSECURE") != "1",
            "timeout": timeout,
        }
        values.update({key: value for key, value in overrides.items() if value is not None})
        return cls(**values)
