"""Classification status for zones and published keys.

A status is the union of three independent facts:

* ``known``: the local control plane exported a key for the zone (for a single
  published key: its public key equals the local one),
* ``published``: the registrar holds at least one non-deleted key,
* ``data_matching``: a published key renders exactly the same canonical text as
  the local key.

Statuses only ever grow: combining two statuses ORs each fact.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .keys import LocalKey, RemoteKey


@dataclass(frozen=True, slots=True)
class KeyStatus:
    known: bool = False
    published: bool = False
    data_matching: bool = False

    def __or__(self, other: KeyStatus) -> KeyStatus:
        return KeyStatus(
            known=self.known or other.known,
            published=self.published or other.published,
            data_matching=self.data_matching or other.data_matching,
        )

    @property
    def is_ok(self) -> bool:
        return self.known and self.published and self.data_matching

    @property
    def is_unpublished(self) -> bool:
        """Locally known but without a fully matching published key."""

        return self.known and not self.data_matching

    @property
    def is_orphaned(self) -> bool:
        return self == ORPHANED

    @property
    def is_corrupted(self) -> bool:
        return self == CORRUPTED

    @property
    def flags(self) -> int:
        """Legacy bit encoding (known=1, published=2, data_matching=4), for logs."""

        return int(self.known) | int(self.published) << 1 | int(self.data_matching) << 2


NOT_CHECKED = KeyStatus()
KNOWN = KeyStatus(known=True)
PUBLISHED = KeyStatus(published=True)
DATA_MATCHING = KeyStatus(data_matching=True)
ORPHANED = PUBLISHED
CORRUPTED = KNOWN | PUBLISHED
OK = KNOWN | PUBLISHED | DATA_MATCHING


def match(local: LocalKey, remote: RemoteKey) -> KeyStatus:
    """Return the facts a published key contributes when compared to the local key.

    The result always carries ``published``: a key that reached the registry is
    published by definition.
    """

    status = PUBLISHED
    if remote.public_key == local.public_key:
        status |= KNOWN
    if remote.canonical() == local.canonical():
        status |= DATA_MATCHING
    return status
