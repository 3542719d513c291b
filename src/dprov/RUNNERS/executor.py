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
Execution of external commands (docker, git) with captured output.
"""
import logging
import subprocess
from typing import IO, List, Optional, Protocol

from ..errors import ExecutionError

logger = logging.getLogger(__name__)


class Executor(Protocol):
    """
    Runs a command with arguments, writing its output to the given streams.
    Raises ExecutionError on a non-zero exit or when the command cannot run.
    """
    def execute(self,
                cmd: str,
                args: List[str],
                stdout: Optional[IO[str]] = None,
                stderr: Optional[IO[str]] = None) -> None:
        ...


class SubprocessExecutor:
    """
    Executor backed by the local system's processes.
    """
    def __init__(self, timeout: Optional[float] = None):
        """
        Initializes the executor.

        Args:
            timeout (Optional[float]): Seconds to wait for each command, None for no limit.
        """
        self.timeout = timeout

    def execute(self,
                cmd: str,
                args: List[str],
                stdout: Optional[IO[str]] = None,
                stderr: Optional[IO[str]] = None) -> None:
        """
        Runs the command and waits for it to finish.

        Args:
            cmd (str): Executable to run.
            args (List[str]): Arguments passed to the executable.
            stdout (Optional[IO[str]]): Stream receiving the command's stdout.
            stderr (Optional[IO[str]]): Stream receiving the command's stderr.
        """
        logger.debug("executing %s %s", cmd, " ".join(args))
        try:
            result = subprocess.run(
                [cmd] + list(args),
                capture_output=True,
                text=True,
                timeout=self.timeout,
                # Avoid shell=True for security reasons (CWE-78)
                shell=False,
            )
        except subprocess.TimeoutExpired as e:
            raise ExecutionError(cmd, args, reason=f"timed out after {e.timeout}s") from e
        except OSError as e:
            raise ExecutionError(cmd, args, reason=str(e)) from e

        if stdout is not None:
            stdout.write(result.stdout)
        if stderr is not None:
            stderr.write(result.stderr)

        if result.returncode != 0:
            raise ExecutionError(cmd, args, returncode=result.returncode,
                                 output=result.stderr or result.stdout)
