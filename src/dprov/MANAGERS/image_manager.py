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
Images committed from application containers.
"""
import io
import logging

from ..errors import ContainerNotCreatedError
from ..MODELS.container import Image
from ..MODELS.settings import Settings
from ..RUNNERS.executor import Executor

logger = logging.getLogger(__name__)


class ImageManager:
    """
    Commits containers into per-application images and removes them.
    """
    def __init__(self, settings: Settings, executor: Executor):
        self.settings = settings
        self.executor = executor

    def tag(self, image: Image) -> str:
        """
        Repository-qualified name of the image on the runtime.
        """
        return f"{self.settings.require('docker:repository-namespace')}/{image.name}"

    def commit(self, image: Image, container_id: str) -> Image:
        """
        Commits the container's filesystem as the image and records the new
        image id on it.

        :param image: The image to commit; its name selects the tag.
        :param container_id: Runtime id of the container to snapshot.
        :return: The same image, with ``id`` set.
        :raises ContainerNotCreatedError: if ``container_id`` is empty.
        :raises ExecutionError: if docker fails.
        """
        if not container_id:
            raise ContainerNotCreatedError(image.name)
        output = self._docker("commit", container_id, self.tag(image))
        image.id = output.strip()
        logger.info("committed container %s as %s (%s)", container_id, self.tag(image), image.id)
        return image

    def remove(self, image: Image) -> None:
        """
        Removes the image from the runtime.

        :raises ExecutionError: if docker fails.
        """
        self._docker("rmi", image.id)

    def _docker(self, *args: str) -> str:
        stdout = io.StringIO()
        self.executor.execute(self.settings.docker.binary, list(args), stdout=stdout, stderr=io.StringIO())
        return stdout.getvalue()
