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
"""Container ids shared by the AOP extension and the matching pass."""

POINTCUT_TAG = "flyweave_aop.pointcut"

INTERCEPTOR_LOADER_ID = "flyweave_aop.interceptor_loader"
POINTCUT_CONTAINER_ID = "flyweave_aop.pointcut_container"
COMPILATION_CACHE_ID = "flyweave_aop.compilation_cache"
FILE_CACHE_PROVIDER_ID = "flyweave_aop.file_cache_provider"
MEMORY_CACHE_PROVIDER_ID = "flyweave_aop.memory_cache_provider"

CACHE_DIR_PARAMETER = "flyweave_aop.cache_dir"
USE_COMPILATION_CACHE_PARAMETER = "flyweave_aop.use_compilation_cache"
CACHE_PROVIDER_PARAMETER = "flyweave_aop.compilation_cache_provider_service"

# Method a generated proxy exposes to receive its InterceptorLoader
SET_LOADER_METHOD = "__flyweave_set_loader__"
