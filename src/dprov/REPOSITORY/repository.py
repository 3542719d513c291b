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
Git repository locations for applications and code synchronization on units.
"""
import io
import logging
from typing import IO, Optional, Protocol

from ..errors import ExecutionError
from ..MODELS.settings import Settings

logger = logging.getLogger(__name__)


class Unit(Protocol):
    """
    An addressable execution target, e.g. a running container of an application.
    ``command`` raises ExecutionError when the command fails.
    """
    name: str

    def command(self, stdout: Optional[IO[str]], stderr: Optional[IO[str]], *cmd: str) -> None:
        ...


class Repository:
    """
    Resolves repository URLs and paths for applications and keeps the working
    copy on a unit up to date.
    """
    def __init__(self, settings: Settings):
        """
        :param settings: Provisioner settings; the ``git`` section is used.
        """
        self.settings = settings

    def get_url(self, app_name: str) -> str:
        """
        Authenticated URL used to push to the application's repository.
        """
        host = self.settings.require("git:host")
        return f"{self.settings.git.user}@{host}:{app_name}.git"

    def get_read_only_url(self, app_name: str) -> str:
        """
        Anonymous URL units clone the application's repository from.
        """
        host = self.settings.require("git:host")
        return f"git://{host}/{app_name}.git"

    def get_path(self) -> str:
        """
        Path of the working copy on a unit.
        """
        return self.settings.require("git:unit-repo")

    def get_bare_path(self, app_name: str) -> str:
        """
        Path of the bare repository on the git host.
        """
        root = self.settings.require("git:root")
        return f"{root.rstrip('/')}/{app_name}.git"

    def clone(self, unit: Unit) -> str:
        """
        Runs a shallow clone of the unit's repository into the working copy path.

        :param unit: The unit to clone on; its name is the application name.
        :return: Combined output of the command.
        """
        cmd = f"git clone {self.get_read_only_url(unit.name)} {self.get_path()} --depth 1"
        return self._run(unit, cmd)

    def pull(self, unit: Unit) -> str:
        """
        Fast-forwards the existing working copy on the unit.

        :param unit: The unit to pull on.
        :return: Combined output of the command.
        """
        cmd = f"cd {self.get_path()} && git pull origin master"
        return self._run(unit, cmd)

    def clone_or_pull(self, unit: Unit) -> str:
        """
        Clones the repository on the unit, pulling instead when the clone fails.

        Any clone failure triggers the pull, not only an existing working copy.
        When the clone failed for another reason the pull's error is what the
        caller sees.

        :param unit: The unit to synchronize.
        :return: Combined output of whichever command succeeded.
        """
        try:
            return self.clone(unit)
        except ExecutionError as e:
            logger.warning("clone failed on unit %s, trying pull: %s", unit.name, e)
        return self.pull(unit)

    def _run(self, unit: Unit, cmd: str) -> str:
        buf = io.StringIO()
        logger.debug("running on unit %s: %s", unit.name, cmd)
        try:
            unit.command(buf, buf, cmd)
        except ExecutionError as e:
            if not e.output:
                e.output = buf.getvalue()
            raise
        return buf.getvalue()
