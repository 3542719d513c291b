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
Models for the provisioner configuration.
"""
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field

from ..errors import ConfigurationError


class GitSettings(BaseModel):
    """
    Where application repositories live and how units reach them.
    """
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    host: Optional[str] = None
    root: Optional[str] = None
    user: str = "git"
    unit_repo: Optional[str] = Field(default=None, alias="unit-repo")


class DockerSettings(BaseModel):
    """
    How containers are created on the runtime.
    """
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    repository_namespace: Optional[str] = Field(default=None, alias="repository-namespace")
    binary: str = "docker"
    deploy_cmd: str = Field(default="/var/lib/tsuru/deploy", alias="deploy-cmd")
    store_path: str = Field(default=".dprov/containers.json", alias="store-path")


class Settings(BaseModel):
    """
    Complete provisioner configuration, equivalent to a parsed dprov.yml.
    """
    model_config = ConfigDict(extra="ignore")

    git: GitSettings = Field(default_factory=GitSettings)
    docker: DockerSettings = Field(default_factory=DockerSettings)

    def require(self, key: str) -> str:
        """
        Returns a required setting by its ``section:name`` key.

        :param key: Dotted config key, e.g. ``git:host``.
        :return: The configured value.
        :raises ConfigurationError: if the setting is not set.
        """
        section_name, _, field_name = key.partition(":")
        section = getattr(self, section_name, None)
        value = getattr(section, field_name.replace("-", "_"), None) if section else None
        if not value:
            raise ConfigurationError(key)
        return value
