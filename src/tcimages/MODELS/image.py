# Copyright 2024 Michael Maillet, Damien Davison, Sacha Davison
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""
The image capability contract read by container runtimes, and the
serialisable descriptor produced from it.
"""
import base64
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, Tuple

from pydantic import BaseModel

from .copy_to_container import CopyToContainer
from .wait_for import WaitFor


class Image(ABC):
    """
    Everything a generic container runtime needs to know to launch and
    supervise a container, without knowing the concrete image type.

    Implementations are immutable descriptions. Accessors never raise and
    never perform I/O.
    """

    @abstractmethod
    def name(self) -> str:
        """Repository name of the image, e.g. ``postgres``."""

    @abstractmethod
    def tag(self) -> str:
        """Version tag of the image, e.g. ``11-alpine``."""

    @abstractmethod
    def ready_conditions(self) -> List[WaitFor]:
        """Conditions the runtime observes, in order, before the container is usable."""

    def env_vars(self) -> Dict[str, str]:
        return {}

    def copy_to_sources(self) -> Tuple[CopyToContainer, ...]:
        return ()

    def cmd(self) -> Tuple[str, ...]:
        return ()

    def identity(self) -> Tuple[str, str]:
        return self.name(), self.tag()

    def image_ref(self) -> str:
        """Reference usable with ``docker pull``, e.g. ``postgres:11-alpine``."""
        return f"{self.name()}:{self.tag()}"

    # Long-form names for the same capabilities
    def readiness_conditions(self) -> List[WaitFor]:
        return self.ready_conditions()

    def environment_variables(self) -> Dict[str, str]:
        return self.env_vars()

    def files_to_stage(self) -> Tuple[CopyToContainer, ...]:
        return self.copy_to_sources()

    def startup_command(self) -> Tuple[str, ...]:
        return self.cmd()

    def describe(self) -> "ImageDescriptor":
        """
        Snapshots the image into a serialisable descriptor. File references
        are recorded by path and are not read.
        """
        return ImageDescriptor(
            name=self.name(),
            tag=self.tag(),
            env_vars=dict(self.env_vars()),
            ready_conditions=list(self.ready_conditions()),
            copy_to_sources=[StagedFile.from_copy(c) for c in self.copy_to_sources()],
            cmd=list(self.cmd()),
        )


class StagedFile(BaseModel):
    """
    Serialisable form of a CopyToContainer item.
    """
    target: str
    path: Optional[str] = None
    content: Optional[str] = None
    encoding: Optional[str] = None  # "utf-8" or "base64" when content is set

    @classmethod
    def from_copy(cls, item: CopyToContainer) -> "StagedFile":
        source = item.source
        if source.path is not None:
            return cls(target=item.target, path=str(source.path))
        try:
            return cls(target=item.target, content=source.data.decode("utf-8"), encoding="utf-8")
        except UnicodeDecodeError:
            return cls(
                target=item.target,
                content=base64.b64encode(source.data).decode("ascii"),
                encoding="base64",
            )


class ImageDescriptor(BaseModel):
    """
    A point-in-time description of an image, as handed to a container runtime.
    """
    name: str
    tag: str
    env_vars: Dict[str, str] = {}
    ready_conditions: List[WaitFor] = []
    copy_to_sources: List[StagedFile] = []
    cmd: List[str] = []

    @property
    def image_ref(self) -> str:
        return f"{self.name}:{self.tag}"

    def to_dict(self) -> Dict[str, Any]:
        """Plain dict with enums rendered as strings, suitable for JSON or YAML."""
        return self.model_dump(mode="json", exclude_none=True)
