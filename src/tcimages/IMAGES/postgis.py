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
PostGIS image, based on the ``postgis/postgis`` docker image.

The server inside is a regular Postgres, so configuration, readiness,
staged files and command all come from the wrapped Postgres description.
Only the image identity differs.
"""
from typing import Dict, List, Tuple

from pydantic import BaseModel, ConfigDict, Field

from ..MODELS.copy_to_container import CopySourceLike, CopyToContainer
from ..MODELS.image import Image
from ..MODELS.wait_for import WaitFor
from .postgres import Postgres

NAME = "postgis/postgis"
TAG = "17-3.5"


class Postgis(Image, BaseModel):
    """
    Immutable description of a disposable PostGIS container.

        >>> Postgis().with_db_name("geo").identity()
        ('postgis/postgis', '17-3.5')
    """
    model_config = ConfigDict(frozen=True)

    postgres: Postgres = Field(default_factory=Postgres)

    def with_host_auth(self) -> "Postgis":
        """Lets clients connect without a password."""
        return Postgis(postgres=self.postgres.with_host_auth())

    def with_db_name(self, db_name: str) -> "Postgis":
        return Postgis(postgres=self.postgres.with_db_name(db_name))

    def with_user(self, user: str) -> "Postgis":
        return Postgis(postgres=self.postgres.with_user(user))

    def with_password(self, password: str) -> "Postgis":
        return Postgis(postgres=self.postgres.with_password(password))

    def with_init_sql(self, init_sql: CopySourceLike) -> "Postgis":
        """
        Registers a script to run once the server accepts connections.
        Can be called multiple times; scripts are added, never replaced.

            >>> image = Postgis().with_init_sql(b"CREATE EXTENSION IF NOT EXISTS postgis_topology;")
        """
        return Postgis(postgres=self.postgres.with_init_sql(init_sql))

    def with_fsync_enabled(self) -> "Postgis":
        return Postgis(postgres=self.postgres.with_fsync_enabled())

    def name(self) -> str:
        return NAME

    def tag(self) -> str:
        return TAG

    def ready_conditions(self) -> List[WaitFor]:
        return self.postgres.ready_conditions()

    def env_vars(self) -> Dict[str, str]:
        return self.postgres.env_vars()

    def copy_to_sources(self) -> Tuple[CopyToContainer, ...]:
        return self.postgres.copy_to_sources()

    def cmd(self) -> Tuple[str, ...]:
        return self.postgres.cmd()
