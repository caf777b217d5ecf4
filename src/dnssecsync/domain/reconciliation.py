"""Reconcile exported local keys against the keys published at the registrar.

The pipeline is strictly sequential: load both sides into the registry, verify
once, then derive action sets from the registry queries and issue one registrar
call per affected zone or key.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from functools import partial
from logging import getLogger
from typing import TYPE_CHECKING

from .errors import ProviderOperationError
from .ports.registrar import PublishRequest
from .registry import ZoneRegistry

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping

    from .keys import LocalKey
    from .ports.registrar import KeyRegistrar
    from .registry import PublishedKey

log = getLogger(__name__)

type OutcomeHook = Callable[[KeyOperationOutcome], None]


class OperationResult(StrEnum):
    OK = "OK"
    ERROR = "ERROR"


@dataclass(frozen=True, slots=True, kw_only=True)
class KeyOperationOutcome:
    """Result of one registrar add/delete call."""

    subject: str
    result: OperationResult
    key_id: str | None = None
    code: int | None = None
    message: str | None = None

    @property
    def ok(self) -> bool:
        return self.result is OperationResult.OK


@dataclass(slots=True)
class ReconciliationContext:
    """Everything one reconciliation run operates on.

    Built once per invocation and passed explicitly to every operation. Only the
    registrar session lives here: the control-plane session is used by the export
    step, which runs as its own invocation and hands its keys over through the
    export file.
    """

    registrar: KeyRegistrar
    registry: ZoneRegistry = field(default_factory=ZoneRegistry)


@dataclass(slots=True)
class LoadResult:
    local: int
    remote: int
    discarded: int


def load_local_keys(context: ReconciliationContext, keys: Mapping[str, LocalKey]) -> int:
    for origin, key in keys.items():
        context.registry.add_local(origin, key)
    log.info("%s local DNSSEC keys loaded", len(keys))
    return len(keys)


def load_remote_keys(context: ReconciliationContext) -> tuple[int, int]:
    """Feed every registrar key into the registry; returns (accepted, discarded)."""

    accepted = 0
    discarded = 0
    for key in context.registrar.list_keys():
        if context.registry.add_remote(key):
            accepted += 1
        else:
            discarded += 1
    log.info("%s published keys loaded (%s deleted entries skipped)", accepted, discarded)
    return accepted, discarded


def verify(context: ReconciliationContext) -> None:
    context.registry.verify()
    log.info("%s zones verified", len(context.registry))


def prepare(context: ReconciliationContext, local_keys: Mapping[str, LocalKey]) -> LoadResult:
    """Load both sides and classify the registry."""

    local = load_local_keys(context, local_keys)
    remote, discarded = load_remote_keys(context)
    verify(context)
    return LoadResult(local=local, remote=remote, discarded=discarded)


def publish_unpublished_keys(
    context: ReconciliationContext,
    *,
    on_outcome: OutcomeHook | None = None,
) -> list[KeyOperationOutcome]:
    """Submit the local key of every zone lacking a fully matching published key."""

    outcomes: list[KeyOperationOutcome] = []
    for zone in context.registry.unpublished_zones():
        local_key = zone.local_key
        if local_key is None:  # unpublished zones always carry a local key
            continue
        request = PublishRequest.for_key(local_key)
        outcome = _perform(
            subject=zone.origin,
            key_id=None,
            call=partial(context.registrar.add_key, request),
        )
        _emit(outcome, outcomes, on_outcome)
    return outcomes


def clean_orphaned_keys(
    context: ReconciliationContext,
    origin: str | None = None,
    *,
    on_outcome: OutcomeHook | None = None,
) -> list[KeyOperationOutcome]:
    """Delete published keys whose public key matches no local key."""

    return _delete_keys(context, context.registry.orphaned_keys(origin), on_outcome)


def clean_corrupted_keys(
    context: ReconciliationContext,
    origin: str | None = None,
    *,
    on_outcome: OutcomeHook | None = None,
) -> list[KeyOperationOutcome]:
    """Delete published keys sharing the local public key but differing in detail."""

    return _delete_keys(context, context.registry.corrupted_keys(origin), on_outcome)


def _delete_keys(
    context: ReconciliationContext,
    keys: list[PublishedKey],
    on_outcome: OutcomeHook | None,
) -> list[KeyOperationOutcome]:
    outcomes: list[KeyOperationOutcome] = []
    for key in keys:
        outcome = _perform(
            subject=key.origin,
            key_id=key.key_id,
            call=partial(context.registrar.delete_key, key.key_id),
        )
        _emit(outcome, outcomes, on_outcome)
    return outcomes


def _perform(*, subject: str, key_id: str | None, call: Callable[[], None]) -> KeyOperationOutcome:
    try:
        call()
    except ProviderOperationError as exc:
        log.warning("Registrar rejected request for %s: [%s] %s", subject, exc.code, exc.message)
        return KeyOperationOutcome(
            subject=subject,
            result=OperationResult.ERROR,
            key_id=key_id,
            code=exc.code,
            message=exc.message,
        )
    return KeyOperationOutcome(subject=subject, result=OperationResult.OK, key_id=key_id)


def _emit(
    outcome: KeyOperationOutcome,
    outcomes: list[KeyOperationOutcome],
    on_outcome: OutcomeHook | None,
) -> None:
    outcomes.append(outcome)
    if on_outcome is not None:
        on_outcome(outcome)
