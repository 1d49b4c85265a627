"""Translation between Azure DevOps REST payloads and work item contracts."""

from __future__ import annotations

import math
from typing import Any

from trainpilot.contracts.config import FieldConfig
from trainpilot.contracts.exceptions import ProviderError
from trainpilot.contracts.item import ItemQuery, Relation, RelationType, WorkItem

TITLE = "System.Title"
WORK_ITEM_TYPE = "System.WorkItemType"
STATE = "System.State"
DESCRIPTION = "System.Description"
ITERATION_PATH = "System.IterationPath"
AREA_PATH = "System.AreaPath"
TAGS = "System.Tags"
STACK_RANK = "Microsoft.VSTS.Common.StackRank"

RELATED_LINK = "System.LinkTypes.Related"

_RELATION_TYPES: dict[str, RelationType] = {
    RELATED_LINK: RelationType.RELATED,
    "System.LinkTypes.Hierarchy-Forward": RelationType.CHILD,
    "System.LinkTypes.Hierarchy-Reverse": RelationType.PARENT,
}


def field_names(fields: FieldConfig) -> list[str]:
    return [
        TITLE,
        WORK_ITEM_TYPE,
        STATE,
        DESCRIPTION,
        ITERATION_PATH,
        TAGS,
        STACK_RANK,
        fields.notes,
        fields.estimate,
    ]


def _quote(value: str) -> str:
    return "'" + value.replace("'", "''") + "'"


def build_wiql(query: ItemQuery) -> str:
    clauses = [f"[{AREA_PATH}] UNDER {_quote(query.area_path)}"]
    if query.item_types:
        clauses.insert(0, f"[{WORK_ITEM_TYPE}] IN ({', '.join(_quote(t) for t in query.item_types)})")
    if query.excluded_states:
        clauses.append(f"[{STATE}] NOT IN ({', '.join(_quote(s) for s in query.excluded_states)})")
    return (
        "SELECT [System.Id] FROM WorkItems WHERE "
        + " AND ".join(clauses)
        + f" ORDER BY [{STACK_RANK}] ASC, [System.Id] ASC"
    )


def split_tags(raw: object) -> list[str]:
    if not isinstance(raw, str):
        return []
    return [tag.strip() for tag in raw.split(";") if tag.strip()]


def join_tags(tags: list[str]) -> str:
    return "; ".join(tags)


def parse_target_id(url: str) -> int | None:
    """Work item id from the last segment of a relation URL."""
    segment = url.rstrip("/").rsplit("/", 1)[-1]
    return int(segment) if segment.isascii() and segment.isdigit() else None


def _as_float(value: object) -> float | None:
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, int | float):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(value)
        except ValueError:
            return None
    else:
        return None
    return number if math.isfinite(number) else None


def _as_str(value: object) -> str:
    return value if isinstance(value, str) else ""


def relation_from_payload(payload: dict[str, Any]) -> Relation | None:
    target_id = parse_target_id(_as_str(payload.get("url")))
    if target_id is None:
        return None
    attributes = payload.get("attributes") or {}
    comment = attributes.get("comment") if isinstance(attributes, dict) else None
    return Relation(
        type=_RELATION_TYPES.get(_as_str(payload.get("rel")), RelationType.OTHER),
        target_id=target_id,
        comment=comment if isinstance(comment, str) else None,
    )


def work_item_from_payload(payload: dict[str, Any], fields: FieldConfig) -> WorkItem:
    raw_id = payload.get("id")
    if not isinstance(raw_id, int):
        raise ProviderError(f"Work item payload is missing an id: {payload!r}")
    values = payload.get("fields") or {}

    relations = [
        relation
        for relation in (relation_from_payload(raw) for raw in payload.get("relations") or [])
        if relation is not None
    ]
    iteration = _as_str(values.get(ITERATION_PATH)).strip()
    return WorkItem(
        id=raw_id,
        title=_as_str(values.get(TITLE)),
        item_type=_as_str(values.get(WORK_ITEM_TYPE)),
        state=_as_str(values.get(STATE)),
        description=_as_str(values.get(DESCRIPTION)),
        notes=_as_str(values.get(fields.notes)),
        iteration_path=iteration or None,
        tags=split_tags(values.get(TAGS)),
        estimate=_as_float(values.get(fields.estimate)),
        stack_rank=_as_float(values.get(STACK_RANK)),
        relations=relations,
    )


def add_field(field: str, value: object) -> dict[str, Any]:
    return {"op": "add", "path": f"/fields/{field}", "value": value}


def add_relation(target_url: str, comment: str) -> dict[str, Any]:
    return {
        "op": "add",
        "path": "/relations/-",
        "value": {"rel": RELATED_LINK, "url": target_url, "attributes": {"comment": comment}},
    }
