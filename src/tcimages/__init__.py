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
tcimages - Test container image descriptions

Immutable, composable descriptions of disposable database containers
for integration tests. A container runtime reads the finished
description to launch and supervise the actual container.
"""

from .IMAGES.postgres import Postgres
from .IMAGES.postgis import Postgis
from .MODELS.image import Image, ImageDescriptor
from .MODELS.wait_for import WaitFor
from .MODELS.copy_to_container import CopyDataSource, CopyToContainer

__version__ = "0.1.0"
__author__ = "Michael Maillet, Damien Davison, Sacha Davison"
__license__ = "Apache-2.0"

__all__ = [
    "Postgres",
    "Postgis",
    "Image",
    "ImageDescriptor",
    "WaitFor",
    "CopyDataSource",
    "CopyToContainer",
]
