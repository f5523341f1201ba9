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
Converters for handing an image description to docker compose.
"""
import logging
import os
import posixpath
from typing import List, Tuple

from jinja2 import Environment

from ..MODELS.image import Image

logger = logging.getLogger(__name__)

STAGING_DIR = "initdb"

COMPOSE_TEMPLATE = """\
# Generated by tcimages from {{ image_ref }}
# Ready when:
{% for condition in ready_conditions %}
#   - {{ condition }}
{% endfor %}
services:
  {{ service }}:
    image: {{ image_ref | tojson }}
{% if environment %}
    environment:
{% for k, v in environment | dictsort %}
      {{ k }}: {{ v | compose_escape | tojson }}
{% endfor %}
{% endif %}
{% if command %}
    command: {{ command | map("compose_escape") | list | tojson }}
{% endif %}
{% if volumes %}
    volumes:
{% for host, target in volumes %}
      - {{ (host ~ ':' ~ target ~ ':ro') | compose_escape | tojson }}
{% endfor %}
{% endif %}
"""


def compose_escape(value: str) -> str:
    """
    Escapes ``$`` so docker compose does not interpolate it.
    """
    return value.replace("$", "$$")


class ComposeConverter:
    """
    Renders an image description as a docker compose service and stages
    its files next to the compose file.
    """

    def __init__(self, image: Image, service_name: str = "db"):
        """
        Initializes the compose converter.

        :param image: The image description to render.
        :param service_name: Name of the compose service.
        """
        self.image = image
        self.service_name = service_name
        environment = Environment(trim_blocks=True)
        environment.filters["compose_escape"] = compose_escape
        self.template = environment.from_string(COMPOSE_TEMPLATE)

    def stage_files(self, output_dir: str) -> List[Tuple[str, str]]:
        """
        Writes every staged item under ``<output_dir>/initdb``. External
        references are read here.

        :param output_dir: The directory holding the compose file.
        :return: (relative host path, container target) pairs, in staging order.
        :raises CopySourceError: If a referenced file cannot be read.
        """
        items = self.image.copy_to_sources()
        if not items:
            return []

        staging_dir = os.path.join(output_dir, STAGING_DIR)
        os.makedirs(staging_dir, exist_ok=True)

        mounts = []
        for item in items:
            filename = posixpath.basename(item.target)
            with open(os.path.join(staging_dir, filename), "wb") as f:
                f.write(item.source.read())
            logger.debug("Staged %s for %s", filename, item.target)
            mounts.append((f"./{STAGING_DIR}/{filename}", item.target))
        return mounts

    def render(self, volumes: List[Tuple[str, str]]) -> str:
        return self.template.render(
            image_ref=self.image.image_ref(),
            service=self.service_name,
            ready_conditions=[c.describe() for c in self.image.ready_conditions()],
            environment=self.image.env_vars(),
            command=list(self.image.cmd()),
            volumes=volumes,
        )

    def convert(self, output_dir: str = "compose") -> str:
        """
        Generates ``docker-compose.yml`` and the staged files.

        :param output_dir: The directory where files will be created.
        :return: The path to the compose file.
        """
        os.makedirs(output_dir, exist_ok=True)
        volumes = self.stage_files(output_dir)

        compose_path = os.path.join(output_dir, "docker-compose.yml")
        with open(compose_path, "w") as f:
            f.write(self.render(volumes))

        logger.info("Compose file for %s written to %s", self.image.image_ref(), compose_path)
        return compose_path
