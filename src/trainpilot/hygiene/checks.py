"""Rule-based checks run against each aggregate and its members."""

from __future__ import annotations

from trainpilot.hygiene.base import HygieneCheck, HygieneContext, HygieneFinding, Severity

_DONE_STATES = frozenset({"done", "closed", "completed"})
_ACTIVE_STATES = frozenset({"active", "committed", "in progress"})
_NOT_STARTED_STATES = frozenset({"new", "proposed"})

_MIN_COMPLETION_PERCENT = 80.0
_MIN_DESCRIPTION_LENGTH = 20


class MemberCountCheck(HygieneCheck):
    name = "Member Count"
    description = "Aggregate links at least one member item"

    def check(self, context: HygieneContext) -> list[HygieneFinding]:
        count = len(context.members)
        if count >= 1:
            return [self._passed(context, f"Aggregate has {count} linked member(s)")]
        return [
            self._failed(
                context,
                "Aggregate has no linked member items",
                recommendation="Link at least one member item or remove the aggregate",
            )
        ]


class IterationAlignmentCheck(HygieneCheck):
    name = "Iteration Path Alignment"
    description = "Aggregate iteration path aligns with its members"

    def check(self, context: HygieneContext) -> list[HygieneFinding]:
        if not context.members:
            return []

        own_path = (context.aggregate.iteration_path or "").strip()
        if not own_path:
            return [
                self._failed(
                    context,
                    "Aggregate has no iteration path assigned",
                    severity=Severity.ERROR,
                    recommendation="Set an iteration path on the aggregate",
                )
            ]

        member_paths = sorted(
            {member.iteration_path.strip() for member in context.members if (member.iteration_path or "").strip()}
        )
        own = own_path.casefold()
        if any(_paths_align(own, path.casefold()) for path in member_paths):
            return [self._passed(context, f"Iteration {own_path!r} aligns with member iterations")]
        return [
            self._failed(
                context,
                f"Iteration {own_path!r} matches none of the member iterations: {', '.join(member_paths) or 'none'}",
                recommendation="Align the aggregate iteration path with its members or vice versa",
            )
        ]


def _paths_align(left: str, right: str) -> bool:
    return left == right or left.startswith(right) or right.startswith(left)


class StateConsistencyCheck(HygieneCheck):
    name = "State Consistency"
    description = "Aggregate state reflects the progress of its members"

    def check(self, context: HygieneContext) -> list[HygieneFinding]:
        states = [member.state.strip().casefold() for member in context.members if member.state.strip()]
        if not states:
            return []

        done = sum(1 for state in states if state in _DONE_STATES)
        active = sum(1 for state in states if state in _ACTIVE_STATES)
        completion = 100.0 * done / len(states)
        own_state = context.aggregate.state.strip().casefold()

        if own_state in _DONE_STATES and completion < _MIN_COMPLETION_PERCENT:
            return [
                self._failed(
                    context,
                    f"Aggregate is {context.aggregate.state!r} but only {completion:.1f}% of members are done",
                    recommendation="Review the aggregate state against member progress",
                )
            ]
        if own_state in _NOT_STARTED_STATES and (active or done):
            return [
                self._failed(
                    context,
                    f"Aggregate is {context.aggregate.state!r} but {active + done} member(s) are active or done",
                    recommendation="Move the aggregate forward to reflect member progress",
                )
            ]
        return [self._passed(context, f"State {context.aggregate.state!r}: {done} done, {active} active")]


class NotesDocumentationCheck(HygieneCheck):
    name = "Documentation"
    description = "Aggregate carries a meaningful description"

    def check(self, context: HygieneContext) -> list[HygieneFinding]:
        length = len(context.aggregate.description.strip())
        if length > _MIN_DESCRIPTION_LENGTH:
            return [self._passed(context, f"Description has {length} characters")]
        return [
            self._failed(
                context,
                f"Description has only {length} characters",
                recommendation="Describe the scope and status of the aggregate",
            )
        ]


DEFAULT_CHECKS: tuple[type[HygieneCheck], ...] = (
    MemberCountCheck,
    IterationAlignmentCheck,
    StateConsistencyCheck,
    NotesDocumentationCheck,
)
