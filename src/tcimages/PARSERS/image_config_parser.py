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
Parsers for YAML image configuration files.

Example::

    image: postgis
    db_name: geo
    user: admin
    password: ${DB_PASSWORD:-secret}
    init_sql:
      - path: sql/schema.sql
      - inline: "CREATE EXTENSION IF NOT EXISTS hstore;"
"""
import logging
import os
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml
from dotenv import dotenv_values
from pydantic import BaseModel, ConfigDict, ValidationError, field_validator, model_validator

from ..errors import ImageConfigError
from ..IMAGES import get_image_class
from ..MODELS.image import Image
from ..UTILS.string_interpolation import EnvironmentInterpolator

logger = logging.getLogger(__name__)


class InitSqlEntry(BaseModel):
    """
    One bootstrap script: a file reference or inline SQL.
    """
    model_config = ConfigDict(extra="forbid")

    path: Optional[str] = None
    inline: Optional[str] = None

    @model_validator(mode="after")
    def _one_source(self) -> "InitSqlEntry":
        if (self.path is None) == (self.inline is None):
            raise ValueError("init_sql entries need exactly one of 'path' or 'inline'")
        return self


class ImageConfig(BaseModel):
    """
    Declarative configuration for a database image.
    """
    model_config = ConfigDict(extra="forbid")

    image: str = "postgis"
    db_name: Optional[str] = None
    user: Optional[str] = None
    password: Optional[str] = None
    host_auth: bool = False
    fsync_enabled: bool = False
    init_sql: List[InitSqlEntry] = []

    @field_validator("db_name", "user", "password", mode="before")
    @classmethod
    def _scalars_as_text(cls, value: Any) -> Any:
        # YAML reads `password: 1234` as an int
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        return value

    @field_validator("init_sql", mode="before")
    @classmethod
    def _plain_paths(cls, value: Any) -> Any:
        # A bare string entry is shorthand for {path: ...}
        if isinstance(value, list):
            return [{"path": v} if isinstance(v, str) else v for v in value]
        return value

    def build(self, base_dir: str = ".") -> Image:
        """
        Applies this configuration to a default image.

        :param base_dir: Directory relative init_sql paths are resolved against.
                         Files are only referenced here, not read.
        :return: The configured image.
        :raises ImageConfigError: If the image name is unknown.
        """
        image = get_image_class(self.image)()

        if self.db_name is not None:
            image = image.with_db_name(self.db_name)
        if self.user is not None:
            image = image.with_user(self.user)
        if self.password is not None:
            image = image.with_password(self.password)
        if self.host_auth:
            image = image.with_host_auth()
        if self.fsync_enabled:
            image = image.with_fsync_enabled()

        for entry in self.init_sql:
            if entry.inline is not None:
                image = image.with_init_sql(entry.inline)
            else:
                image = image.with_init_sql(Path(base_dir) / entry.path)

        return image


class ImageConfigParser:
    """
    Parser for image configuration files.
    """
    def __init__(self, context: Optional[Dict[str, str]] = None, env_file: Optional[str] = None):
        """
        Initializes the parser with the variables available for interpolation.

        :param context: Variables for interpolation. Defaults to the process environment.
        :param env_file: Optional .env file. Its values are used only where the
                         context does not already define the variable.
        """
        context = dict(os.environ) if context is None else dict(context)
        if env_file:
            if not os.path.exists(env_file):
                raise ImageConfigError(f"Env file not found: {env_file}")
            file_values = {k: v for k, v in dotenv_values(env_file).items() if v is not None}
            logger.debug("Loaded %d variables from %s", len(file_values), env_file)
            file_values.update(context)
            context = file_values
        self.context = context

    def parse(self, config_path: str) -> ImageConfig:
        """
        Parses a configuration file from a path.

        :param config_path: Path to the YAML file.
        :return: Parsed configuration.
        """
        try:
            with open(config_path, 'r') as f:
                content = f.read()
        except OSError as e:
            raise ImageConfigError(f"Cannot read config file {config_path}: {e}") from e
        logger.debug("Parsing image config %s", config_path)
        return self.parse_from_string(content)

    def parse_from_string(self, content: str) -> ImageConfig:
        """
        Parses a configuration from YAML text.

        :param content: YAML content.
        :return: Parsed configuration.
        :raises ImageConfigError: On interpolation, YAML or validation errors.
        """
        try:
            content = EnvironmentInterpolator.interpolate(content, self.context)
        except KeyError as e:
            raise ImageConfigError(f"Variable {e.args[0]} is not set and has no default") from e

        try:
            data = yaml.safe_load(content)
        except (yaml.YAMLError, ValueError) as e:
            raise ImageConfigError(f"Invalid YAML: {e}") from e

        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise ImageConfigError("Image config must be a mapping")

        try:
            return ImageConfig.model_validate(data)
        except ValidationError as e:
            raise ImageConfigError(f"Invalid image config: {e}") from e

    def load(self, config_path: str) -> Image:
        """
        Parses a configuration file and builds the image it describes.
        Relative script paths are resolved against the file's directory.
        """
        config = self.parse(config_path)
        return config.build(base_dir=os.path.dirname(os.path.abspath(config_path)))
