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
"""AOP compilation configuration properties."""

from __future__ import annotations

from dataclasses import dataclass

from flyweave.core.config import config_properties


@config_properties(prefix="flyweave.aop")
@dataclass
class AopProperties:
    """Configuration for proxy compilation (flyweave.aop.*)."""

    cache_dir: str = ".flyweave/aop"
    use_compilation_cache: bool = True
    compilation_cache_provider_service: str = "flyweave_aop.file_cache_provider"
