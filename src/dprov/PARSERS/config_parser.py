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
Parser for the provisioner's YAML configuration, with environment overrides.
"""
import os
from typing import Any, Dict, Optional

import yaml
from dotenv import dotenv_values
from pydantic import ValidationError

from ..errors import ConfigurationError
from ..MODELS.settings import Settings

# environment variable -> (section, yaml key)
ENV_OVERRIDES = {
    "DPROV_GIT_HOST": ("git", "host"),
    "DPROV_GIT_ROOT": ("git", "root"),
    "DPROV_GIT_USER": ("git", "user"),
    "DPROV_GIT_UNIT_REPO": ("git", "unit-repo"),
    "DPROV_DOCKER_REPOSITORY_NAMESPACE": ("docker", "repository-namespace"),
    "DPROV_DOCKER_BINARY": ("docker", "binary"),
}


class ConfigParser:
    """
    Loads ``Settings`` from a YAML file, a .env file and the process environment.
    Later sources override earlier ones.
    """
    def __init__(self, env_file: Optional[str] = None, environ: Optional[Dict[str, str]] = None):
        """
        :param env_file: Optional path to a .env file with DPROV_* overrides.
        :param environ: Environment to read overrides from. Defaults to os.environ.
        """
        self.env_file = env_file
        self.environ = dict(os.environ) if environ is None else environ

    def parse(self, config_path: Optional[str]) -> Settings:
        """
        Parses a configuration file from a path. A missing path yields
        settings built from the environment alone.

        :param config_path: Path to the YAML file.
        :return: Parsed settings.
        """
        content = ""
        if config_path:
            try:
                with open(config_path, 'r') as f:
                    content = f.read()
            except OSError as e:
                raise ConfigurationError(config_path, f"cannot read {config_path}: {e}") from e
        return self.parse_from_string(content)

    def parse_from_string(self, content: str) -> Settings:
        """
        Parses configuration from a YAML string.

        :param content: YAML content.
        :return: Parsed settings.
        """
        try:
            data = yaml.safe_load(content) if content else None
        except yaml.YAMLError as e:
            raise ConfigurationError("<root>", f"invalid configuration: {e}") from e
        if not data:
            data = {}
        if not isinstance(data, dict):
            raise ConfigurationError("<root>", "configuration must be a mapping")

        self._apply_overrides(data)
        try:
            return Settings.model_validate(data)
        except ValidationError as e:
            raise ConfigurationError("<root>", f"invalid configuration: {e}") from e

    def _apply_overrides(self, data: Dict[str, Any]):
        overrides: Dict[str, Optional[str]] = {}
        if self.env_file and os.path.exists(self.env_file):
            overrides.update(dotenv_values(self.env_file))
        overrides.update(self.environ)

        for var, (section, key) in ENV_OVERRIDES.items():
            value = overrides.get(var)
            if value:
                section_data = data.get(section)
                if not isinstance(section_data, dict):
                    section_data = {}
                    data[section] = section_data
                section_data[key] = value
