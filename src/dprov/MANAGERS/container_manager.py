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
Container lifecycle on the Docker runtime: create, start, stop, remove and
network inspection.
"""
import io
import json
import logging
from typing import Optional

from pydantic import ValidationError

from ..errors import ContainerNotCreatedError, ExecutionError, InspectParseError, ProvisionError
from ..MODELS.container import App, Container, ContainerRecord, ContainerStatus, InspectOutput
from ..MODELS.settings import Settings
from ..REPOSITORY.repository import Repository
from ..RUNNERS.executor import Executor
from .container_store import ContainerStore

logger = logging.getLogger(__name__)


class ContainerManager:
    """
    Issues the docker commands that drive a container through its lifecycle
    and records created containers in the store.
    """
    def __init__(self,
                 settings: Settings,
                 executor: Executor,
                 store: ContainerStore,
                 repository: Optional[Repository] = None):
        """
        Initializes the container manager.

        :param settings: Provisioner settings.
        :param executor: Runs the docker binary.
        :param store: Receives a record for each created container.
        :param repository: Resolves the clone URL baked into the deploy command.
        """
        self.settings = settings
        self.executor = executor
        self.store = store
        self.repository = repository or Repository(settings)

    def create(self, app: App) -> Container:
        """
        Runs a detached container from the application's platform image. The
        container's command deploys the application from its repository.

        A runtime failure does not raise: the returned container has an empty
        id and a ``creation_failed`` status, and the failure is logged.

        :param app: The application to provision a unit for.
        :return: The container, created or not.
        :raises StoreError: if the record cannot be saved; the new container
            is removed from the runtime first.
        """
        image = f"{self.settings.require('docker:repository-namespace')}/{app.type}"
        deploy = f"{self.settings.docker.deploy_cmd} {self.repository.get_read_only_url(app.name)}"
        try:
            output = self._docker("run", "-d", image, deploy)
        except ExecutionError as e:
            logger.error("Error creating container %s: %s", app.name, e)
            return Container(name=app.name, type=app.type,
                             status=ContainerStatus.CREATION_FAILED, error=str(e))

        container = Container(name=app.name, type=app.type, id=output.strip())
        try:
            self.store.save(ContainerRecord(name=container.name, type=container.type, id=container.id))
        except ProvisionError:
            logger.error("Error storing container %s (%s), removing it", container.name, container.id)
            self._discard(container)
            raise
        logger.info("created container %s (%s)", container.name, container.id)
        return container

    def start(self, container: Container) -> None:
        """
        Starts the container. Containers run as soon as they are created, so
        there is nothing to do yet.
        """

    def stop(self, container: Container) -> None:
        """
        Stops the running container.

        :raises ExecutionError: if docker fails.
        """
        self._docker("stop", self._id(container))

    def remove(self, container: Container) -> None:
        """
        Removes the container from the runtime. The store record is left for
        the caller to delete.

        :raises ExecutionError: if docker fails.
        """
        self._docker("rm", self._id(container))
        logger.info("removed container %s (%s)", container.name, container.id)

    def ip(self, container: Container) -> str:
        """
        Returns the container's IP address, read from ``docker inspect``.

        :raises ExecutionError: if docker fails.
        :raises InspectParseError: if the output is not the expected JSON.
        """
        output = self._docker("inspect", self._id(container))
        try:
            data = json.loads(output)
            # docker inspect prints a list with one object per argument
            if isinstance(data, list):
                if not data:
                    raise InspectParseError(f"empty inspect output for container {container.name}")
                data = data[0]
            inspected = InspectOutput.model_validate(data)
        except (ValueError, ValidationError) as e:
            raise InspectParseError(f"cannot parse inspect output for container {container.name}: {e}") from e
        return inspected.network_settings.ip_address

    def get(self, name: str) -> Optional[Container]:
        """
        Rebuilds a container from its store record.

        :param name: The container name.
        :return: The container, or None if the store has no record of it.
        """
        record = self.store.get(name)
        if record is None:
            return None
        status = ContainerStatus.CREATED if record.id else ContainerStatus.CREATION_FAILED
        return Container(name=record.name, type=record.type, id=record.id, status=status)

    def _discard(self, container: Container):
        # a container the store does not know about must not keep running
        try:
            self._docker("rm", "-f", container.id)
        except ExecutionError as e:
            logger.error("Error removing orphaned container %s (%s): %s", container.name, container.id, e)

    def _id(self, container: Container) -> str:
        if not container.id:
            raise ContainerNotCreatedError(container.name)
        return container.id

    def _docker(self, *args: str) -> str:
        stdout = io.StringIO()
        stderr = io.StringIO()
        self.executor.execute(self.settings.docker.binary, list(args), stdout=stdout, stderr=stderr)
        return stdout.getvalue()
