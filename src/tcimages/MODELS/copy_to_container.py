"""
Models for content that a container runtime copies into a container
before or at startup.
"""
import logging
from pathlib import Path
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, model_validator

from ..errors import CopySourceError

logger = logging.getLogger(__name__)

CopySourceLike = Union["CopyDataSource", bytes, bytearray, str, Path]


class CopyDataSource(BaseModel):
    """
    Content to be staged: either inline bytes or a reference to a file
    on the host. File references are not read until `read()` is called.
    """
    model_config = ConfigDict(frozen=True)

    data: Optional[bytes] = None
    path: Optional[Path] = None

    @model_validator(mode="after")
    def _one_source(self) -> "CopyDataSource":
        if (self.data is None) == (self.path is None):
            raise ValueError("exactly one of 'data' or 'path' must be set")
        return self

    @classmethod
    def from_value(cls, value: CopySourceLike) -> "CopyDataSource":
        """
        Builds a source from the supported input types.

        :param value: bytes (inline), str (inline text, UTF-8),
                      a Path (file reference) or an existing source.
        :return: A CopyDataSource instance.
        """
        if isinstance(value, CopyDataSource):
            return value
        if isinstance(value, (bytes, bytearray)):
            return cls(data=bytes(value))
        if isinstance(value, Path):
            return cls(path=value)
        if isinstance(value, str):
            return cls(data=value.encode("utf-8"))
        raise TypeError(f"Unsupported copy source type: {type(value).__name__}")

    @property
    def is_inline(self) -> bool:
        return self.data is not None

    def read(self) -> bytes:
        """
        Resolves the content. Called by whatever stages the file into the
        container, never while the image is being configured.

        :return: The raw content.
        :raises CopySourceError: If a referenced file cannot be read.
        """
        if self.data is not None:
            return self.data

        logger.debug("Reading staged content from %s", self.path)
        try:
            return self.path.read_bytes()
        except OSError as e:
            raise CopySourceError(f"Cannot read {self.path}: {e}") from e


class CopyToContainer(BaseModel):
    """
    A content item and the absolute path it is copied to inside the container.
    """
    model_config = ConfigDict(frozen=True)

    target: str
    source: CopyDataSource
