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
"""Build-time AOP: pointcut matching, proxy generation and the compilation cache."""

from flyweave.aop.advice import AdviceIndexBuilder, ClassAdvice, advices_hash, merge_interceptors
from flyweave.aop.compilation_cache import CompilationCache
from flyweave.aop.extension import AopExtension
from flyweave.aop.generator import InterceptionGenerator, MethodFilter, ProxyCodeGenerator
from flyweave.aop.interception import InterceptorLoader, MethodInterceptor, MethodInvocation
from flyweave.aop.matching import MatchEngine
from flyweave.aop.matching_pass import CompilationResult, PointcutMatchingPass, ProxyRecord
from flyweave.aop.metadata import ClassMetadata, MethodMetadata, class_metadata_from_type
from flyweave.aop.naming import DefaultNamingStrategy
from flyweave.aop.paths import RelativePath, proxy_filename, relativize_path
from flyweave.aop.pointcut import ExpressionPointcut, Pointcut, matches_pattern
from flyweave.aop.registry import PointcutContainer, PointcutRegistry, PointcutSet, pointcuts_hash

__all__ = [
    "AdviceIndexBuilder",
    "AopExtension",
    "ClassAdvice",
    "ClassMetadata",
    "CompilationCache",
    "CompilationResult",
    "DefaultNamingStrategy",
    "ExpressionPointcut",
    "InterceptionGenerator",
    "InterceptorLoader",
    "MatchEngine",
    "MethodFilter",
    "MethodInterceptor",
    "MethodInvocation",
    "MethodMetadata",
    "Pointcut",
    "PointcutContainer",
    "PointcutMatchingPass",
    "PointcutRegistry",
    "PointcutSet",
    "ProxyCodeGenerator",
    "ProxyRecord",
    "RelativePath",
    "advices_hash",
    "class_metadata_from_type",
    "matches_pattern",
    "merge_interceptors",
    "pointcuts_hash",
    "proxy_filename",
    "relativize_path",
]
