# Copyright 2026 Firefly Software Solutions Inc.
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
"""Build-time dependency injection container."""

from flyweave.container.builder import SERVICE_CONTAINER_ID, ContainerBuilder
from flyweave.container.class_loader import load_class
from flyweave.container.definition import Definition, Parameter, Reference
from flyweave.container.exceptions import (
    ClassNotFoundError,
    NoSuchParameterError,
    NoSuchServiceError,
    ServiceCreationException,
)
from flyweave.container.loader import YamlFileLoader

__all__ = [
    "SERVICE_CONTAINER_ID",
    "ClassNotFoundError",
    "ContainerBuilder",
    "Definition",
    "NoSuchParameterError",
    "NoSuchServiceError",
    "Parameter",
    "Reference",
    "ServiceCreationException",
    "YamlFileLoader",
    "load_class",
]
