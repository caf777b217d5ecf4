"""Application orchestration entry points."""

from __future__ import annotations

from contextlib import contextmanager
from logging import getLogger
from typing import TYPE_CHECKING

from dnssecsync.adapters.inwx import InwxRegistrar
from dnssecsync.adapters.ispconfig import IspConfigControlPlane
from dnssecsync.adapters.keyfile import read_local_keys, write_local_keys
from dnssecsync.config.storage import get_storage_config
from dnssecsync.domain.export import ExportResult, collect_local_keys
from dnssecsync.domain.reconciliation import ReconciliationContext, prepare

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator
    from contextlib import AbstractContextManager
    from pathlib import Path

    from dnssecsync.domain.ports.control_plane import ControlPlane
    from dnssecsync.domain.ports.registrar import KeyRegistrar

type ControlPlaneFactory = Callable[[], AbstractContextManager[ControlPlane]]
type RegistrarFactory = Callable[[], AbstractContextManager[KeyRegistrar]]


log = getLogger(__name__)


def export_local_keys(
    *,
    control_plane_factory: ControlPlaneFactory | None = None,
    export_path: Path | str | None = None,
    write: bool = True,
) -> ExportResult:
    """Collect the signing keys of every control-plane zone and optionally persist them.

    Nothing is written when collection fails.
    """

    factory = control_plane_factory or IspConfigControlPlane
    with factory() as control_plane:
        result = collect_local_keys(control_plane)

    if write:
        path = get_storage_config(export_path=export_path).ensure_export_dir()
        write_local_keys(path, result.keys)
        log.info("Exported %s zone keys to %s", len(result.keys), path)
    return result


@contextmanager
def reconciliation_session(
    *,
    registrar_factory: RegistrarFactory | None = None,
    export_path: Path | str | None = None,
) -> Iterator[ReconciliationContext]:
    """Yield a verified reconciliation context bound to an open registrar session.

    The exported keys are read before the registrar is contacted, so a missing or
    malformed artifact never opens a session.
    """

    path = get_storage_config(export_path=export_path).resolve_export_path()
    local_keys = read_local_keys(path)

    factory = registrar_factory or InwxRegistrar
    with factory() as registrar:
        context = ReconciliationContext(registrar=registrar)
        loaded = prepare(context, local_keys)
        log.info(
            "Registry ready: %s local keys, %s published keys, %s zones",
            loaded.local,
            loaded.remote,
            len(context.registry),
        )
        yield context
