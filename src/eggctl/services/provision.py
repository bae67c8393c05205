"""ProvisionService: environment resolution, form fields, and API payloads.

Pipeline per request: LOAD documents → RESOLVE environment → BUILD fields
or ASSEMBLE payload → CHECK egg rules (warnings only) → REPORT.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ValidationError

from eggctl.config.logging import operation_context
from eggctl.domain import payloads
from eggctl.domain.fields import VisibilityPolicy, build_fields
from eggctl.domain.rules import service_rules, validate_environment
from eggctl.domain.sources import sources_from_vars, trace_environment
from eggctl.infrastructure.loader import (
    LoaderError,
    load_client,
    load_egg,
    load_package,
    load_panel_user,
    load_saved_fields,
    load_service_vars,
)
from eggctl.services.base import BaseService
from eggctl.services.contracts import (
    AddServerPayload,
    AddUserPayload,
    EditBuildPayload,
    EditServerPayload,
    EditStartupPayload,
    dump_validated,
)
from eggctl.services.result import ServiceResult

logger = logging.getLogger(__name__)

PathLike = Path | str


def _rule_warnings(errors: dict[str, list[str]]) -> list[str]:
    return [f"{key} {problem}" for key, problems in errors.items() for problem in problems]


def _validation_message(exc: ValidationError) -> str:
    first = exc.errors()[0]
    location = ".".join(str(part) for part in first["loc"]) or exc.title
    return f"{location}: {first['msg']}"


class ProvisionService(BaseService):
    """Resolves egg variables and assembles panel requests from input files."""

    def _guard(
        self, op: str, action: Callable[[], ServiceResult], **inputs: PathLike | None
    ) -> ServiceResult:
        """Run *action* for *op*, turning malformed input into a failed result.

        *inputs* are the document paths, bound to every log line emitted
        while the operation runs.
        """
        with operation_context(op, **inputs):
            return self._run(op, action)

    def _run(self, op: str, action: Callable[[], ServiceResult]) -> ServiceResult:
        try:
            result = action()
        except LoaderError as exc:
            logger.debug("Unreadable input for %s: %s", op, exc)
            return ServiceResult.failure(op, "INVALID_INPUT", str(exc), path=str(exc.path))
        except ValidationError as exc:
            logger.debug("Invalid input for %s: %s", op, exc)
            return ServiceResult.failure(
                op,
                "INVALID_INPUT",
                _validation_message(exc),
                errors=[
                    {"loc": [str(p) for p in e["loc"]], "msg": e["msg"]} for e in exc.errors()
                ],
            )
        if result.warnings:
            logger.info("%s finished with %d rule warning(s)", op, len(result.warnings))
        return result

    # --- Resolution ---

    def resolve(
        self,
        egg_path: PathLike,
        package_path: PathLike,
        *,
        vars_path: PathLike | None = None,
        saved_path: PathLike | None = None,
    ) -> ServiceResult:
        """Resolve the egg's environment and report where each value came from."""
        op = "resolve"

        def run() -> ServiceResult:
            egg = load_egg(egg_path)
            package = load_package(package_path)
            service_vars = load_service_vars(vars_path)
            saved = load_saved_fields(saved_path)

            sources = sources_from_vars(
                service_vars, package, saved, precedence=self.precedence
            )
            environment, origins = trace_environment(egg.variables, sources)
            warnings = _rule_warnings(validate_environment(egg.variables, environment))
            return ServiceResult(
                ok=True,
                op=op,
                data={"count": len(environment), "environment": environment},
                warnings=warnings,
                meta={"origins": origins, "precedence": [str(t) for t in self.precedence]},
            )

        return self._guard(
            op, run, egg=egg_path, package=package_path, vars=vars_path, saved=saved_path
        )

    def fields(
        self,
        egg_path: PathLike,
        package_path: PathLike,
        *,
        vars_path: PathLike | None = None,
        saved_path: PathLike | None = None,
        admin: bool = False,
    ) -> ServiceResult:
        """Build the ordered form fields a client or admin would see."""
        op = "fields"

        def run() -> ServiceResult:
            egg = load_egg(egg_path)
            package = load_package(package_path)
            service_vars = load_service_vars(vars_path)
            saved = load_saved_fields(saved_path)
            form = self._settings.form

            policy = VisibilityPolicy.from_package(
                package.meta, admin=admin, suffix=form.display_flag_suffix
            )
            sources = sources_from_vars(
                service_vars, package, saved, precedence=self.precedence
            )
            environment, _ = trace_environment(egg.variables, sources)
            fields = build_fields(
                egg.variables,
                environment,
                policy,
                static_values=service_vars.service_fields(),
                localize=self.localize,
                required_prefix=form.required_prefix,
            )
            items = [f.model_dump(mode="python") for f in fields]
            return ServiceResult(
                ok=True,
                op=op,
                data={"admin": admin, "count": len(items), "items": items},
            )

        return self._guard(
            op, run, egg=egg_path, package=package_path, vars=vars_path, saved=saved_path
        )

    def rules(
        self,
        egg_path: PathLike,
        *,
        package_path: PathLike | None = None,
        vars_path: PathLike | None = None,
        saved_path: PathLike | None = None,
    ) -> ServiceResult:
        """List each variable's egg rules; with a package, also check values.

        Failing values make the result fail with ``VALIDATION_FAILED``.
        """
        op = "rules"

        def run() -> ServiceResult:
            egg = load_egg(egg_path)
            rules = {
                key: [str(rule) for rule in parsed]
                for key, parsed in service_rules(egg.variables).items()
            }
            if package_path is None:
                return ServiceResult(ok=True, op=op, data={"count": len(rules), "rules": rules})

            package = load_package(package_path)
            sources = sources_from_vars(
                load_service_vars(vars_path),
                package,
                load_saved_fields(saved_path),
                precedence=self.precedence,
            )
            environment, _ = trace_environment(egg.variables, sources)
            errors = validate_environment(egg.variables, environment)
            if errors:
                return ServiceResult.failure(
                    op,
                    "VALIDATION_FAILED",
                    f"{len(errors)} variable(s) break their egg rules",
                    errors=errors,
                )
            return ServiceResult(
                ok=True,
                op=op,
                data={"count": len(rules), "rules": rules, "valid": True},
            )

        return self._guard(
            op, run, egg=egg_path, package=package_path, vars=vars_path, saved=saved_path
        )

    # --- Panel API payloads ---

    def _payload(
        self,
        op: str,
        contract: type[BaseModel],
        build: Callable[[], tuple[dict[str, Any], list[str]]],
        **inputs: PathLike | None,
    ) -> ServiceResult:
        def run() -> ServiceResult:
            payload, warnings = build()
            return ServiceResult(
                ok=True,
                op=op,
                data={"payload": dump_validated(contract, payload)},
                warnings=warnings,
            )

        return self._guard(op, run, **inputs)

    def add_user(self, client_path: PathLike) -> ServiceResult:
        """Payload for creating the panel user behind a billing client."""

        def build() -> tuple[dict[str, Any], list[str]]:
            return payloads.add_user_parameters(load_client(client_path)), []

        return self._payload("add_user", AddUserPayload, build, client=client_path)

    def add_server(
        self,
        egg_path: PathLike,
        package_path: PathLike,
        user_path: PathLike,
        *,
        vars_path: PathLike | None = None,
    ) -> ServiceResult:
        """Payload for creating a server for an existing panel user."""

        def build() -> tuple[dict[str, Any], list[str]]:
            egg = load_egg(egg_path)
            package = load_package(package_path)
            user = load_panel_user(user_path)
            service_vars = load_service_vars(vars_path)
            payload = payloads.add_server_parameters(
                service_vars, package, user, egg, precedence=self.precedence
            )
            errors = validate_environment(egg.variables, payload["environment"])
            return payload, _rule_warnings(errors)

        return self._payload(
            "add_server",
            AddServerPayload,
            build,
            egg=egg_path,
            package=package_path,
            user=user_path,
            vars=vars_path,
        )

    def edit_server(
        self,
        user_path: PathLike,
        *,
        vars_path: PathLike | None = None,
    ) -> ServiceResult:
        """Payload for editing a server's name, description, and owner."""

        def build() -> tuple[dict[str, Any], list[str]]:
            user = load_panel_user(user_path)
            return payloads.edit_server_parameters(load_service_vars(vars_path), user), []

        return self._payload(
            "edit_server", EditServerPayload, build, user=user_path, vars=vars_path
        )

    def edit_build(self, package_path: PathLike) -> ServiceResult:
        """Payload for editing a server's resource limits."""

        def build() -> tuple[dict[str, Any], list[str]]:
            return payloads.edit_server_build_parameters(load_package(package_path)), []

        return self._payload("edit_build", EditBuildPayload, build, package=package_path)

    def edit_startup(
        self,
        egg_path: PathLike,
        package_path: PathLike,
        *,
        vars_path: PathLike | None = None,
        saved_path: PathLike | None = None,
    ) -> ServiceResult:
        """Payload for editing a server's image, startup command, and environment."""

        def build() -> tuple[dict[str, Any], list[str]]:
            egg = load_egg(egg_path)
            payload = payloads.edit_server_startup_parameters(
                load_service_vars(vars_path),
                load_package(package_path),
                egg,
                load_saved_fields(saved_path),
                precedence=self.precedence,
            )
            errors = validate_environment(egg.variables, payload["environment"])
            return payload, _rule_warnings(errors)

        return self._payload(
            "edit_startup",
            EditStartupPayload,
            build,
            egg=egg_path,
            package=package_path,
            vars=vars_path,
            saved=saved_path,
        )
