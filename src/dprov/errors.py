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
Error types raised by the provisioner.
"""
from typing import List, Optional


class ProvisionError(Exception):
    """
    Base class for every error raised by dprov.
    """


class ExecutionError(ProvisionError):
    """
    An external command could not be run or exited with a non-zero status.
    """
    def __init__(self,
                 cmd: str,
                 args: Optional[List[str]] = None,
                 returncode: Optional[int] = None,
                 output: str = "",
                 reason: Optional[str] = None):
        self.cmd = cmd
        self.args_list = list(args or [])
        self.returncode = returncode
        self.output = output
        self.reason = reason
        super().__init__(self._message())

    def _message(self) -> str:
        command = " ".join([self.cmd] + self.args_list)
        if self.reason:
            return f"{command}: {self.reason}"
        message = f"{command}: exit status {self.returncode}"
        if self.output.strip():
            message += f": {self.output.strip()}"
        return message


class InspectParseError(ProvisionError):
    """
    The runtime's inspect output was not valid JSON of the expected shape.
    """


class ConfigurationError(ProvisionError):
    """
    A required setting is missing or the configuration file is invalid.
    """
    def __init__(self, key: str, message: Optional[str] = None):
        self.key = key
        super().__init__(message or f"key {key!r} not found")


class ContainerNotCreatedError(ProvisionError):
    """
    The container has no runtime id, so the runtime cannot be asked about it.
    """
    def __init__(self, name: str):
        self.name = name
        super().__init__(f"container {name!r} was not created")


class StoreError(ProvisionError):
    """
    The container store could not be written.
    """
