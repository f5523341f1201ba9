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
Postgres image based on the official ``postgres`` docker image.
"""
from typing import Dict, List, Tuple

from pydantic import BaseModel, ConfigDict, Field

from ..MODELS.copy_to_container import CopyDataSource, CopySourceLike, CopyToContainer
from ..MODELS.image import Image
from ..MODELS.wait_for import WaitFor

NAME = "postgres"
TAG = "11-alpine"

INIT_DIR = "/docker-entrypoint-initdb.d"
READY_MESSAGE = "database system is ready to accept connections"


def _default_env() -> Tuple[Tuple[str, str], ...]:
    return (
        ("POSTGRES_DB", "postgres"),
        ("POSTGRES_PASSWORD", "postgres"),
        ("POSTGRES_USER", "postgres"),
    )


class Postgres(Image, BaseModel):
    """
    Immutable description of a disposable Postgres container.

    Builder methods return a new instance and leave the receiver untouched:

        >>> image = Postgres().with_db_name("app").with_user("admin")
        >>> image.env_vars()["POSTGRES_USER"]
        'admin'

    Nothing is validated here. A bad name or password only shows up when
    the container starts.
    """
    model_config = ConfigDict(frozen=True)

    # Sorted (name, value) pairs, so instances hash
    env: Tuple[Tuple[str, str], ...] = Field(default_factory=_default_env)
    init_sql: Tuple[CopyToContainer, ...] = ()
    fsync_enabled: bool = False

    def _with_env(self, key: str, value: str) -> "Postgres":
        env = dict(self.env)
        env[key] = value
        return self.model_copy(update={"env": tuple(sorted(env.items()))})

    def with_host_auth(self) -> "Postgres":
        """
        Lets clients connect without a password. See POSTGRES_HOST_AUTH_METHOD
        in the official image documentation.
        """
        return self._with_env("POSTGRES_HOST_AUTH_METHOD", "trust")

    def with_db_name(self, db_name: str) -> "Postgres":
        """Sets the name of the database created at startup."""
        return self._with_env("POSTGRES_DB", db_name)

    def with_user(self, user: str) -> "Postgres":
        return self._with_env("POSTGRES_USER", user)

    def with_password(self, password: str) -> "Postgres":
        return self._with_env("POSTGRES_PASSWORD", password)

    def with_init_sql(self, init_sql: CopySourceLike) -> "Postgres":
        """
        Registers a script to run once the server accepts connections.
        Scripts accumulate and run in the order they were added.

        :param init_sql: Inline bytes or text, or a Path read at staging time.
        :return: A new Postgres instance.
        """
        target = f"{INIT_DIR}/init_{len(self.init_sql)}.sql"
        item = CopyToContainer(target=target, source=CopyDataSource.from_value(init_sql))
        return self.model_copy(update={"init_sql": self.init_sql + (item,)})

    def with_fsync_enabled(self) -> "Postgres":
        """
        Turns fsync back on. It is off by default since durability does not
        matter for a throwaway test database.
        """
        return self.model_copy(update={"fsync_enabled": True})

    def name(self) -> str:
        return NAME

    def tag(self) -> str:
        return TAG

    def ready_conditions(self) -> List[WaitFor]:
        return [
            WaitFor.message_on_stderr(READY_MESSAGE),
            WaitFor.message_on_stdout(READY_MESSAGE),
        ]

    def env_vars(self) -> Dict[str, str]:
        return dict(self.env)

    def copy_to_sources(self) -> Tuple[CopyToContainer, ...]:
        return self.init_sql

    def cmd(self) -> Tuple[str, ...]:
        if not self.fsync_enabled:
            return ("-c", "fsync=off")
        return ()
