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
Unit tests for the container stores.
"""
import pytest

from dprov.errors import ConfigurationError, StoreError
from dprov.MANAGERS.container_store import JsonContainerStore, MemoryContainerStore
from dprov.MODELS.container import ContainerRecord


@pytest.fixture(params=["memory", "json"])
def any_store(request, tmp_path):
    if request.param == "memory":
        return MemoryContainerStore()
    return JsonContainerStore(str(tmp_path / "containers.json"))


class TestContainerStore:
    """Behaviour shared by every store."""

    def test_save_and_get(self, any_store):
        any_store.save(ContainerRecord(name="app", type="python", id="abc"))
        record = any_store.get("app")
        assert record.type == "python"
        assert record.id == "abc"

    def test_get_missing(self, any_store):
        assert any_store.get("nope") is None

    def test_last_writer_wins(self, any_store):
        any_store.save(ContainerRecord(name="app", type="python", id="abc"))
        any_store.save(ContainerRecord(name="app", type="ruby", id="def"))
        assert any_store.get("app").type == "ruby"
        assert len(any_store.list()) == 1

    def test_delete(self, any_store):
        any_store.save(ContainerRecord(name="app", type="python"))
        assert any_store.delete("app") is True
        assert any_store.delete("app") is False
        assert any_store.get("app") is None


class TestJsonContainerStore:
    """Tests specific to the file-backed store."""

    def test_survives_reopen(self, tmp_path):
        path = str(tmp_path / "state" / "containers.json")
        JsonContainerStore(path).save(ContainerRecord(name="app", type="python", id="abc"))
        assert JsonContainerStore(path).get("app").id == "abc"

    @pytest.mark.parametrize("content", [
        "{not json",
        "[]",
        "1",
        '"x"',
        '{"containers": []}',
    ])
    def test_corrupt_file(self, tmp_path, content):
        path = tmp_path / "containers.json"
        path.write_text(content)
        with pytest.raises(ConfigurationError):
            JsonContainerStore(str(path))

    def test_write_failure(self, tmp_path):
        path = tmp_path / "containers.json"
        store = JsonContainerStore(str(path))
        (tmp_path / "containers.json.tmp").mkdir()
        with pytest.raises(StoreError):
            store.save(ContainerRecord(name="app", type="python", id="abc"))
        assert store.get("app") is None
        assert not path.exists()

    def test_write_failure_keeps_previous_record(self, tmp_path):
        path = tmp_path / "containers.json"
        store = JsonContainerStore(str(path))
        store.save(ContainerRecord(name="app", type="python", id="abc"))
        (tmp_path / "containers.json.tmp").mkdir()
        with pytest.raises(StoreError):
            store.save(ContainerRecord(name="app", type="ruby", id="def"))
        with pytest.raises(StoreError):
            store.delete("app")
        assert store.get("app").id == "abc"
        assert JsonContainerStore(str(path)).get("app").id == "abc"
