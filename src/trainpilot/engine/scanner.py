"""Single-pass group scanner over ordered work items."""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass, replace

from trainpilot.contracts.config import MarkerConfig
from trainpilot.contracts.item import WorkItem
from trainpilot.engine.markers import CloseMarker, OpenMarker, PlainTitle, classify


@dataclass(frozen=True)
class Group:
    """Items collected between an open marker and the next boundary."""

    name: str
    anchor_id: int
    existing_id: int | None = None
    member_ids: tuple[int, ...] = ()


@dataclass(frozen=True)
class Idle:
    pass


@dataclass(frozen=True)
class Collecting:
    group: Group


ScanState = Idle | Collecting


def _emit(group: Group) -> Group | None:
    return group if group.member_ids else None


def step(state: ScanState, item: WorkItem, config: MarkerConfig) -> tuple[ScanState, Group | None]:
    """Advance the scanner by one item, returning the new state and any closed group."""
    match classify(item.title, config), state:
        case OpenMarker(name=name, existing_id=existing_id), Collecting(group=group):
            return Collecting(Group(name=name, anchor_id=item.id, existing_id=existing_id)), _emit(group)
        case OpenMarker(name=name, existing_id=existing_id), Idle():
            return Collecting(Group(name=name, anchor_id=item.id, existing_id=existing_id)), None
        case CloseMarker(), Collecting(group=group):
            return Idle(), _emit(group)
        case PlainTitle(), Collecting(group=group):
            return Collecting(replace(group, member_ids=(*group.member_ids, item.id))), None
        case _:
            return state, None


def scan(items: Iterable[WorkItem], config: MarkerConfig) -> Iterator[Group]:
    """Yield non-empty groups in the order their open markers appear."""
    state: ScanState = Idle()
    for item in items:
        state, emitted = step(state, item, config)
        if emitted is not None:
            yield emitted
    if isinstance(state, Collecting) and (last := _emit(state.group)) is not None:
        yield last


def scan_groups(items: Iterable[WorkItem], config: MarkerConfig) -> list[Group]:
    return list(scan(items, config))
