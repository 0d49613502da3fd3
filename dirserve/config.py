"""
Server configuration.
"""
import os

from pydantic import BaseModel, ConfigDict, DirectoryPath, ValidationInfo, field_validator

from .urlpath import normalize_prefix

DEFAULT_PORT = int(os.getenv("DIRSERVE_PORT", "4000"))


class ServeConfig(BaseModel):
    """Immutable settings shared by the router and the app factory."""

    model_config = ConfigDict(frozen=True)

    directory: DirectoryPath
    port: int = DEFAULT_PORT
    prefix: str = "/"
    cors: bool = True
    dot: bool = False
    explicit_index: bool = False
    spa: bool = False

    @field_validator("prefix")
    @classmethod
    def normalize(cls, value: str, info: ValidationInfo) -> str:
        # InvalidPrefix is a ValueError, so pydantic reports it as a validation error
        port = info.data.get("port", DEFAULT_PORT)
        return normalize_prefix(f"http://localhost:{port}", value)

    @property
    def base_url(self) -> str:
        return f"http://localhost:{self.port}"

    @property
    def root_label(self) -> str:
        """Base name of the served directory, used to label the listing root."""
        return self.directory.resolve().name or "/"
