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
Units backed by running containers.
"""
from typing import IO, Optional

from ..errors import ContainerNotCreatedError
from ..MODELS.container import Container
from ..MODELS.settings import Settings
from ..RUNNERS.executor import Executor


class ContainerUnit:
    """
    Runs shell commands inside a container through ``docker exec``, so a
    provisioned container can be handed to the repository sync.
    """
    def __init__(self, container: Container, executor: Executor, settings: Settings):
        if not container.id:
            raise ContainerNotCreatedError(container.name)
        self.container = container
        self.executor = executor
        self.settings = settings

    @property
    def name(self) -> str:
        return self.container.name

    def command(self, stdout: Optional[IO[str]], stderr: Optional[IO[str]], *cmd: str) -> None:
        """
        Runs ``cmd`` through ``/bin/sh -c`` in the container.

        :raises ExecutionError: if the command fails.
        """
        args = ["exec", self.container.id, "/bin/sh", "-c", " ".join(cmd)]
        self.executor.execute(self.settings.docker.binary, args, stdout=stdout, stderr=stderr)
