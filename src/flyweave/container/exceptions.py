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
"""Container exceptions — fatal errors while building services."""

from __future__ import annotations

from flyweave.kernel.exceptions import InfrastructureException


class ServiceCreationException(InfrastructureException):
    """Fatal error while creating or looking up a service."""

    def __init__(self, subject: str, reason: str, code: str) -> None:
        self.subject = subject
        self.reason = reason
        super().__init__(message=f"{subject}: {reason}", code=code)


def _format(headline: str, kind: str, suggestions: list[str]) -> str:
    lines = [f"{kind}: {headline}"]
    if suggestions:
        lines.append("")
        lines.append(f"  Did you mean: {', '.join(suggestions)}")
    return "\n".join(lines)


class NoSuchServiceError(ServiceCreationException):
    """No definition is registered under the requested id."""

    def __init__(self, service_id: str, suggestions: list[str] | None = None) -> None:
        self.service_id = service_id
        self.suggestions = suggestions or []
        headline = f"No service with id '{service_id}' is defined"
        super().__init__(subject=service_id, reason=headline, code="CONTAINER_NO_SUCH_SERVICE")
        self.args = (_format(headline, "NoSuchServiceError", self.suggestions),)

    def __str__(self) -> str:
        return self.args[0] if self.args else ""


class NoSuchParameterError(ServiceCreationException):
    """No parameter is set under the requested name."""

    def __init__(self, name: str, suggestions: list[str] | None = None) -> None:
        self.name = name
        self.suggestions = suggestions or []
        headline = f"No parameter named '{name}' is set"
        super().__init__(subject=name, reason=headline, code="CONTAINER_NO_SUCH_PARAMETER")
        self.args = (_format(headline, "NoSuchParameterError", self.suggestions),)

    def __str__(self) -> str:
        return self.args[0] if self.args else ""


class ClassNotFoundError(ServiceCreationException):
    """A service class could not be imported."""

    def __init__(self, class_name: str, file: str | None = None, cause: str = "") -> None:
        self.class_name = class_name
        self.file = file
        reason = f"Class '{class_name}' could not be loaded"
        if file:
            reason += f" from '{file}'"
        if cause:
            reason += f" ({cause})"
        super().__init__(subject=class_name, reason=reason, code="CONTAINER_CLASS_NOT_FOUND")
