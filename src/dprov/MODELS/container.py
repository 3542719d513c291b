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
Models representing provisioned containers, their images and the
applications they run.
"""
from typing import Optional
from enum import Enum
from pydantic import BaseModel, AliasChoices, ConfigDict, Field


class App(BaseModel):
    """
    An application asking for a unit. ``type`` names the platform image
    (python, ruby, ...) its containers are created from.
    """
    name: str
    type: str
    units: int = 1


class ContainerStatus(str, Enum):
    """
    Outcome of asking the runtime for a new container.
    """
    CREATED = "created"
    CREATION_FAILED = "creation_failed"


class Container(BaseModel):
    """
    One provisioned unit of an application.

    ``id`` stays empty when the runtime refused to create the container;
    ``status`` and ``error`` say why.
    """
    name: str
    type: str = ""
    id: str = ""
    status: ContainerStatus = ContainerStatus.CREATED
    error: Optional[str] = None

    @property
    def created(self) -> bool:
        return self.status == ContainerStatus.CREATED and bool(self.id)


class ContainerRecord(BaseModel):
    """
    What the container store keeps about a container, keyed by name.
    """
    name: str
    type: str
    id: str = ""


class Image(BaseModel):
    """
    A filesystem snapshot committed from a container, tagged per application.
    """
    name: str
    id: str = ""


class NetworkSettings(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    ip_address: str = Field(validation_alias=AliasChoices("IpAddress", "IPAddress"))


class InspectOutput(BaseModel):
    """
    The part of ``docker inspect`` output the provisioner reads.
    """
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    network_settings: NetworkSettings = Field(validation_alias="NetworkSettings")
