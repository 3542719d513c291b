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
Unit tests for image commit and removal.
"""
import pytest

from conftest import FakeExecutor
from dprov.errors import ContainerNotCreatedError, ExecutionError
from dprov.MANAGERS.image_manager import ImageManager
from dprov.MODELS.container import Image


def test_commit(settings, executor):
    img = Image(name="app-name", id="image-id")
    ImageManager(settings, executor).commit(img, "container-id")
    assert executor.commands == [("docker", ["commit", "container-id", "tsuru/app-name"])]


def test_commit_records_image_id(settings):
    executor = FakeExecutor(outputs={"commit": "sha256:8f3a\n"})
    img = ImageManager(settings, executor).commit(Image(name="app-name"), "container-id")
    assert img.id == "sha256:8f3a"


def test_commit_propagates_error(settings):
    executor = FakeExecutor(failures=["commit"])
    img = Image(name="app-name", id="old-id")
    with pytest.raises(ExecutionError):
        ImageManager(settings, executor).commit(img, "container-id")
    assert img.id == "old-id"


def test_remove(settings, executor):
    img = Image(name="app-name", id="image-id")
    ImageManager(settings, executor).remove(img)
    assert executor.commands == [("docker", ["rmi", "image-id"])]


def test_remove_propagates_error(settings):
    executor = FakeExecutor(failures=["rmi"])
    with pytest.raises(ExecutionError):
        ImageManager(settings, executor).remove(Image(name="app-name", id="image-id"))


def test_commit_requires_container_id(settings, executor):
    with pytest.raises(ContainerNotCreatedError):
        ImageManager(settings, executor).commit(Image(name="app-name"), "")
    assert executor.commands == []
