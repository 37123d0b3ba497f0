"""Compiles declared bindings into host registrations, one binding at a time."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Mapping, Optional

from sitekeys.runtime import telemetry
from sitekeys.runtime.telemetry import span

from .models import BindingSpec, Registration, ensure_mode

if TYPE_CHECKING:
    from sitekeys.host.protocols import KeyHost


@dataclass(frozen=True, slots=True)
class RegistrationFailure:
    """A binding that was skipped; the rest of the pass carried on."""

    domain: str
    alias: str
    mode: str
    error: str
    stage: str = "bind"


@dataclass(slots=True)
class CompileReport:
    """Ordered outcome of one or more compilation passes."""

    registered: list[Registration] = field(default_factory=list)
    failures: list[RegistrationFailure] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failures


def _alias_of(spec: Any) -> str:
    if isinstance(spec, BindingSpec):
        return spec.alias
    if isinstance(spec, Mapping):
        return str(spec.get("alias"))
    return repr(spec)


class KeyCompiler:
    """Resolves leader, scope and description, then binds through the host.

    Every call to ``register_key`` is isolated: whatever goes wrong with one
    binding is logged and recorded on ``report``, never raised.
    """

    def __init__(
        self,
        host: "KeyHost",
        *,
        report: CompileReport | None = None,
        logger_name: str | None = None,
    ) -> None:
        self._host = host
        self.report = report if report is not None else CompileReport()
        self._logger_name = logger_name

    @property
    def host(self) -> "KeyHost":
        return self._host

    @property
    def logger_name(self) -> str | None:
        return self._logger_name

    @staticmethod
    def compile_key(
        domain: str,
        spec: BindingSpec | Mapping[str, Any],
        site_leader: str = "",
        mode: str = "n",
    ) -> Registration:
        """Resolve ``spec`` without touching the host."""

        checked_mode = ensure_mode(mode)
        binding = BindingSpec.coerce(spec)
        return Registration(
            mode=checked_mode,
            key=binding.final_key(domain, site_leader),
            description=binding.display_description,
            action=binding.action,
            domain=domain,
            predicate=binding.predicate(domain),
            category=binding.category,
            alias=binding.alias,
            hide=binding.hide,
        )

    def register_key(
        self,
        domain: str,
        spec: BindingSpec | Mapping[str, Any],
        site_leader: str = "",
        mode: str = "n",
    ) -> Optional[Registration]:
        try:
            with span(
                "keymaps::register_key",
                logger_name=self._logger_name,
                component="keymaps",
                metadata={"domain": domain, "mode": mode},
            ) as handle:
                registration = self.compile_key(domain, spec, site_leader, mode)
                handle.add_metadata("key", registration.key)
                self._host.bind_key(
                    registration.mode,
                    registration.key,
                    registration.description,
                    registration.action,
                    domain=registration.predicate,
                )
        except Exception as exc:
            self.record_failure(domain, _alias_of(spec), mode, exc)
            return None
        self.report.registered.append(registration)
        return registration

    def apply(self, registration: Registration) -> Optional[Registration]:
        """Bind an already compiled registration with the same isolation."""

        try:
            self._host.bind_key(
                registration.mode,
                registration.key,
                registration.description,
                registration.action,
                domain=registration.predicate,
            )
        except Exception as exc:
            self.record_failure(
                registration.domain, registration.alias, registration.mode, exc
            )
            return None
        self.report.registered.append(registration)
        return registration

    def record_failure(
        self,
        domain: str,
        alias: str,
        mode: str,
        exc: BaseException,
        *,
        stage: str = "bind",
    ) -> RegistrationFailure:
        failure = RegistrationFailure(
            domain=domain, alias=alias, mode=mode, error=str(exc), stage=stage
        )
        self.report.failures.append(failure)
        telemetry.record_event(
            "keymaps.registration_failed",
            level="error",
            data={
                "alias": alias,
                "mode": mode,
                "domain": domain,
                "stage": stage,
                "error": f"{type(exc).__name__}: {exc}",
            },
            logger_name=self._logger_name,
        )
        return failure


__all__ = [
    "CompileReport",
    "KeyCompiler",
    "RegistrationFailure",
]
