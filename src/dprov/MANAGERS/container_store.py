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
Durable storage of container records, keyed by container name.
"""
import json
import logging
import os
from pathlib import Path
from typing import Dict, List, Optional, Protocol

from ..errors import ConfigurationError, StoreError
from ..MODELS.container import ContainerRecord

logger = logging.getLogger(__name__)


class ContainerStore(Protocol):
    """
    Where container records live. Saving a name twice keeps the last record.
    """
    def save(self, record: ContainerRecord) -> None:
        ...

    def get(self, name: str) -> Optional[ContainerRecord]:
        ...

    def delete(self, name: str) -> bool:
        ...

    def list(self) -> List[ContainerRecord]:
        ...


class MemoryContainerStore:
    """
    Store kept in process memory.
    """
    def __init__(self):
        self._records: Dict[str, ContainerRecord] = {}

    def save(self, record: ContainerRecord) -> None:
        self._records[record.name] = record.model_copy()

    def get(self, name: str) -> Optional[ContainerRecord]:
        record = self._records.get(name)
        return record.model_copy() if record else None

    def delete(self, name: str) -> bool:
        return self._records.pop(name, None) is not None

    def list(self) -> List[ContainerRecord]:
        return [r.model_copy() for r in self._records.values()]


class JsonContainerStore:
    """
    Store persisted as a JSON index file on disk.
    """
    def __init__(self, path: str):
        """
        Initializes the store, loading any existing index.

        Args:
            path: Path of the JSON index file. Parent directories are created.
        """
        self.path = Path(path)
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise StoreError(f"cannot create container store directory {self.path.parent}: {e}") from e
        self._index = self._load_index()

    def _load_index(self) -> Dict[str, Dict[str, str]]:
        """Load the index from disk."""
        if not self.path.exists():
            return {}
        try:
            with open(self.path, 'r') as f:
                data = json.load(f)
        except (json.JSONDecodeError, IOError) as e:
            raise ConfigurationError("docker:store-path", f"cannot read container store {self.path}: {e}") from e
        containers = data.get("containers", {}) if isinstance(data, dict) else None
        if not isinstance(containers, dict):
            raise ConfigurationError("docker:store-path", f"container store {self.path} is not a container index")
        return containers

    def _save_index(self) -> None:
        """Save the index to disk."""
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        try:
            with open(tmp_path, 'w') as f:
                json.dump({"containers": self._index}, f, indent=2)
            os.replace(tmp_path, self.path)
        except OSError as e:
            raise StoreError(f"cannot write container store {self.path}: {e}") from e
        finally:
            if tmp_path.is_file():
                tmp_path.unlink()

    def save(self, record: ContainerRecord) -> None:
        previous = self._index.get(record.name)
        self._index[record.name] = record.model_dump()
        try:
            self._save_index()
        except StoreError:
            if previous is None:
                del self._index[record.name]
            else:
                self._index[record.name] = previous
            raise
        logger.debug("stored container record %s", record.name)

    def get(self, name: str) -> Optional[ContainerRecord]:
        entry = self._index.get(name)
        if entry is None:
            return None
        return ContainerRecord(**entry)

    def delete(self, name: str) -> bool:
        if name not in self._index:
            return False
        previous = self._index.pop(name)
        try:
            self._save_index()
        except StoreError:
            self._index[name] = previous
            raise
        return True

    def list(self) -> List[ContainerRecord]:
        return [ContainerRecord(**entry) for entry in self._index.values()]
