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
Shared fakes and fixtures.
"""
import pytest

from dprov.errors import ExecutionError
from dprov.MANAGERS.container_store import MemoryContainerStore
from dprov.MODELS.settings import DockerSettings, GitSettings, Settings


class FakeExecutor:
    """
    Records every command instead of running it. ``outputs`` maps a docker
    subcommand to the stdout it prints; ``failures`` lists subcommands that fail.
    """
    def __init__(self, outputs=None, failures=()):
        self.outputs = outputs or {}
        self.failures = set(failures)
        self.commands = []

    def execute(self, cmd, args, stdout=None, stderr=None):
        self.commands.append((cmd, list(args)))
        sub = args[0] if args else ""
        if sub in self.failures:
            if stderr is not None:
                stderr.write("cool error")
            raise ExecutionError(cmd, args, returncode=1, output="cool error")
        if stdout is not None:
            stdout.write(self.outputs.get(sub, ""))

    def executed_cmd(self, cmd, args):
        return (cmd, list(args)) in self.commands


class CloneFailingExecutor(FakeExecutor):
    """
    Fails any command that runs a git clone, as docker exec does when the
    working copy already exists.
    """
    def execute(self, cmd, args, stdout=None, stderr=None):
        if any(a.startswith("git clone") for a in args):
            self.commands.append((cmd, list(args)))
            raise ExecutionError(cmd, args, returncode=128, output="destination path already exists")
        super().execute(cmd, args, stdout=stdout, stderr=stderr)


class FakeUnit:
    def __init__(self, name):
        self.name = name
        self.commands = []

    def command(self, stdout, stderr, *cmd):
        self.commands.append(cmd[0])
        if stdout is not None:
            stdout.write(f"ran {cmd[0]}\n")

    def ran_command(self, cmd):
        return cmd in self.commands


class FailingCloneUnit(FakeUnit):
    def command(self, stdout, stderr, *cmd):
        if cmd[0].startswith("git clone"):
            self.commands.append(cmd[0])
            raise ExecutionError("/bin/sh", list(cmd), returncode=128,
                                 output="Failed to clone repository, it already exists!")
        super().command(stdout, stderr, *cmd)


class FailingUnit(FakeUnit):
    def command(self, stdout, stderr, *cmd):
        self.commands.append(cmd[0])
        raise ExecutionError("/bin/sh", list(cmd), returncode=1, output="no route to host")


@pytest.fixture
def settings():
    return Settings(
        git=GitSettings(
            host="tsuru.plataformas.glb.com",
            root="/var/repositories",
            unit_repo="/home/application/current",
        ),
        docker=DockerSettings(repository_namespace="tsuru"),
    )


@pytest.fixture
def executor():
    return FakeExecutor()


@pytest.fixture
def store():
    return MemoryContainerStore()
