"""DiffEngine: recursive structural comparison of two values.

Architecture:
- ``_compare`` enters a new position: it extends the branch path, records the
  pair of reference identities on the branch, and hands off to ``_dispatch``.
- ``_dispatch`` classifies both sides, applies the kind-pair rule from
  ``dispatch.select_kind`` and calls the comparator registered for the kind
  in ``self._table``.  An unmatched pair raises ``TypeMismatchError``.
- Leaf comparators (absent, boolean, integer, text) add a single node.
- Composite comparators (record, sequence, mapping) open a node, recurse
  into their members and roll their status up from the children.
- Indirection and dynamic comparators are transparent: they unwrap both
  sides and dispatch again under the same key, without a node of their own
  (except for nil vs nil, which is an Equal leaf).

The engine keeps no per-call state on ``self``; everything a single walk
needs travels in the ``Branch`` argument, so one engine can serve
concurrent comparisons.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any

from structural_diff.algorithm.alignment import (
    AlignmentMode,
    index_by_identity,
    select_mode,
)
from structural_diff.algorithm.config import ComparatorConfig
from structural_diff.algorithm.dispatch import select_kind
from structural_diff.cache import FieldPlan, FieldPlanCache, RecordPlan
from structural_diff.errors import (
    CycleDetectedError,
    DiffError,
    DuplicateKeyError,
    TypeMismatchError,
)
from structural_diff.tags import has_option, resolved_name
from structural_diff.tree.nodes import DiffNode, Status
from structural_diff.values.fields import read_field, record_fields
from structural_diff.values.kinds import (
    Kind,
    deref,
    is_tracked,
    kind_of,
    native,
    resolve_indirection,
    sequence_items,
)

__all__ = ["Branch", "DiffEngine"]

logger = logging.getLogger(__name__)

CompareFunc = Callable[[DiffNode, str, Any, Any, "Branch"], None]


@dataclass(frozen=True, slots=True)
class Branch:
    """Immutable per-branch walk state.

    Attributes:
        path:    Keys from the root down to the current position.
        visited: ``(id(left), id(right))`` pairs of every container or
                 reference entered on this branch.  ``None`` stands for a
                 side that is absent or not a container.
    """

    path: tuple[str, ...] = ()
    visited: frozenset[tuple[int | None, int | None]] = frozenset()

    def enter(self, left: Any, right: Any, key: str | None = None) -> Branch:
        """Return the branch state after stepping onto ``(left, right)``.

        ``key`` extends the path; transparent steps (dereferencing) pass None.

        Raises:
            CycleDetectedError: If the pair was already entered on this branch.
        """
        path = self.path if key is None else (*self.path, key)
        if not (is_tracked(left) or is_tracked(right)):
            return Branch(path, self.visited)
        pair = (
            id(left) if is_tracked(left) else None,
            id(right) if is_tracked(right) else None,
        )
        if pair in self.visited:
            raise CycleDetectedError(path)
        return Branch(path, self.visited | {pair})


def _type_name(value: Any) -> str:
    return "None" if value is None else type(value).__qualname__


class DiffEngine:
    """Recursive comparison engine bound to one immutable configuration.

    Example::

        from structural_diff.algorithm.engine import DiffEngine

        engine = DiffEngine()
        root = engine.run({"a": 1}, {"a": 2})
        root.child("a").status  # Status.MODIFIED
    """

    def __init__(
        self,
        config: ComparatorConfig | None = None,
        plans: FieldPlanCache | None = None,
    ) -> None:
        """Initialise the engine.

        Args:
            config: Comparison configuration.  Defaults to ``ComparatorConfig()``.
            plans:  Cache of record field plans.  A private cache sized by
                ``config.max_cache_size`` is created when None.
        """
        self._config = config if config is not None else ComparatorConfig()
        self._plans = (
            plans
            if plans is not None
            else FieldPlanCache(self.build_plan, max_size=self._config.max_cache_size)
        )
        self._table: dict[Kind, CompareFunc] = {
            Kind.ABSENT: self._compare_absent,
            Kind.BOOLEAN: self._compare_scalar,
            Kind.INTEGER: self._compare_scalar,
            Kind.TEXT: self._compare_scalar,
            Kind.RECORD: self._compare_record,
            Kind.SEQUENCE: self._compare_sequence,
            Kind.MAPPING: self._compare_mapping,
            Kind.INDIRECTION: self._compare_indirection,
            Kind.DYNAMIC: self._compare_dynamic,
        }

    @property
    def config(self) -> ComparatorConfig:
        return self._config

    @property
    def plans(self) -> FieldPlanCache:
        return self._plans

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def run(self, left: Any, right: Any) -> DiffNode:
        """Compare ``left`` (old) with ``right`` (new) and return the root node.

        Raises:
            DiffError: On the first fatal error.  ``err.tree`` holds the
                partially built root, or None if nothing was built.
        """
        holder = DiffNode(key="")
        root_key = self._config.root_key
        try:
            self._compare(holder, root_key, left, right, Branch())
        except DiffError as err:
            err.tree = holder.child(root_key)
            raise
        return holder.children[root_key]

    def build_plan(self, record_type: type) -> RecordPlan:
        """Resolve the field plan of a dataclass type under this configuration.

        Raises:
            DuplicateKeyError: If two compared fields resolve to the same name.
        """
        cfg = self._config
        fields: list[FieldPlan] = []
        identity: FieldPlan | None = None
        for descriptor in record_fields(record_type):
            plan = FieldPlan(
                key=resolved_name(cfg.tag_name, cfg.fallback_tag_names, descriptor)
                or descriptor.name,
                descriptor=descriptor,
                identity=has_option(cfg.tag_name, descriptor, cfg.id_option),
            )
            if plan.identity and identity is None:
                identity = plan
            if descriptor.private and cfg.skip_private_fields:
                continue
            if any(f.key == plan.key for f in fields):
                raise DuplicateKeyError(
                    plan.key,
                    f"two fields of {record_type.__qualname__} resolve to this name",
                )
            fields.append(plan)
        return RecordPlan(fields=tuple(fields), identity=identity)

    # ------------------------------------------------------------------
    # Recursion and dispatch
    # ------------------------------------------------------------------

    def _compare(
        self, parent: DiffNode, key: str, a: Any, b: Any, branch: Branch
    ) -> None:
        self._dispatch(parent, key, a, b, branch.enter(a, b, key))

    def _dispatch(
        self, parent: DiffNode, key: str, a: Any, b: Any, branch: Branch
    ) -> None:
        kind_a, kind_b = kind_of(a), kind_of(b)
        kind = select_kind(kind_a, kind_b)
        if kind is None:
            raise TypeMismatchError(kind_a, kind_b, _type_name(a), _type_name(b))
        self._table[kind](parent, key, a, b, branch)

    def _compare_surplus(
        self,
        parent: DiffNode,
        key: str,
        value: Any,
        created: bool,
        branch: Branch,
    ) -> None:
        """Compare a member that exists on one side only.

        A member holding None, a nil ``Ref``, an empty ``Dynamic`` or a dead
        weak reference still exists, so it becomes a Created/Deleted leaf
        instead of an absent-vs-absent Equal leaf.
        """
        if resolve_indirection(value) is not None:
            if created:
                self._compare(parent, key, None, value, branch)
            else:
                self._compare(parent, key, value, None, branch)
            return
        status = Status.CREATED if created else Status.DELETED
        parent.add_child(DiffNode(key=key, status=status))

    # ------------------------------------------------------------------
    # Composite bookkeeping
    # ------------------------------------------------------------------

    @staticmethod
    def _open(parent: DiffNode, key: str, a: Any, b: Any) -> DiffNode:
        if a is None:
            status = Status.CREATED
        elif b is None:
            status = Status.DELETED
        else:
            status = Status.EQUAL
        return parent.add_child(DiffNode(key=key, status=status))

    @staticmethod
    def _close(node: DiffNode, a: Any, b: Any) -> None:
        if a is not None and b is not None:
            node.roll_up()
        node.sort_children()

    # ------------------------------------------------------------------
    # Leaf comparators
    # ------------------------------------------------------------------

    def _compare_absent(
        self, parent: DiffNode, key: str, a: Any, b: Any, branch: Branch
    ) -> None:
        parent.add_child(DiffNode(key=key))

    def _compare_scalar(
        self, parent: DiffNode, key: str, a: Any, b: Any, branch: Branch
    ) -> None:
        if a is None:
            node = DiffNode(key=key, status=Status.CREATED, new_value=native(b))
        elif b is None:
            node = DiffNode(key=key, status=Status.DELETED, old_value=native(a))
        elif bool(a == b):
            node = DiffNode(key=key)
        else:
            node = DiffNode(
                key=key,
                status=Status.MODIFIED,
                old_value=native(a),
                new_value=native(b),
            )
        parent.add_child(node)

    # ------------------------------------------------------------------
    # Composite comparators
    # ------------------------------------------------------------------

    def _compare_record(
        self, parent: DiffNode, key: str, a: Any, b: Any, branch: Branch
    ) -> None:
        if a is not None and b is not None and type(a) is not type(b):
            raise TypeMismatchError(
                Kind.RECORD, Kind.RECORD, _type_name(a), _type_name(b)
            )

        plan = self._plans.get(type(a if a is not None else b))
        node = self._open(parent, key, a, b)
        if a is None or b is None:
            present = b if a is None else a
            for field_plan in plan.fields:
                value, ok = read_field(present, field_plan.descriptor)
                if ok:
                    self._compare_surplus(
                        node, field_plan.key, value, a is None, branch
                    )
                else:
                    self._compare(node, field_plan.key, None, None, branch)
            self._close(node, a, b)
            return
        for field_plan in plan.fields:
            self._compare(
                node,
                field_plan.key,
                self._read(a, field_plan),
                self._read(b, field_plan),
                branch,
            )
        self._close(node, a, b)

    def _compare_sequence(
        self, parent: DiffNode, key: str, a: Any, b: Any, branch: Branch
    ) -> None:
        left, right = sequence_items(a), sequence_items(b)
        mode = select_mode(
            left, right, self._probe, self._config.respect_sequence_order
        )
        logger.debug(
            "sequence at %s: %d vs %d elements, %s alignment",
            "/".join(branch.path),
            len(left),
            len(right),
            mode,
        )

        node = self._open(parent, key, a, b)
        if mode is AlignmentMode.IDENTITY:
            self._compare_members(
                node,
                index_by_identity(left, self._probe, "old"),
                index_by_identity(right, self._probe, "new"),
                branch,
            )
        else:
            overlap = min(len(left), len(right))
            for index in range(overlap):
                self._compare(node, str(index), left[index], right[index], branch)
            for index in range(overlap, len(left)):
                self._compare_surplus(node, str(index), left[index], False, branch)
            for index in range(overlap, len(right)):
                self._compare_surplus(node, str(index), right[index], True, branch)
        self._close(node, a, b)

    def _compare_mapping(
        self, parent: DiffNode, key: str, a: Any, b: Any, branch: Branch
    ) -> None:
        node = self._open(parent, key, a, b)
        self._compare_members(
            node, self._render_keys(a, "old"), self._render_keys(b, "new"), branch
        )
        self._close(node, a, b)

    def _compare_members(
        self,
        node: DiffNode,
        left: dict[str, Any],
        right: dict[str, Any],
        branch: Branch,
    ) -> None:
        """Compare two key-text indexed member sets under ``node``."""
        for member in sorted(left.keys() | right.keys()):
            if member in left and member in right:
                self._compare(node, member, left[member], right[member], branch)
            elif member in left:
                self._compare_surplus(node, member, left[member], False, branch)
            else:
                self._compare_surplus(node, member, right[member], True, branch)

    # ------------------------------------------------------------------
    # Transparent comparators
    # ------------------------------------------------------------------

    def _compare_indirection(
        self, parent: DiffNode, key: str, a: Any, b: Any, branch: Branch
    ) -> None:
        target_a, target_b = deref(a), deref(b)
        if target_a is None and target_b is None:
            parent.add_child(DiffNode(key=key))
            return
        self._dispatch(
            parent, key, target_a, target_b, branch.enter(target_a, target_b)
        )

    def _compare_dynamic(
        self, parent: DiffNode, key: str, a: Any, b: Any, branch: Branch
    ) -> None:
        held_a, held_b = deref(a), deref(b)
        self._dispatch(parent, key, held_a, held_b, branch.enter(held_a, held_b))

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _read(self, record: Any, field_plan: FieldPlan) -> Any:
        value, ok = read_field(record, field_plan.descriptor)
        return value if ok else None

    def _probe(self, element: Any) -> tuple[Any, FieldPlan] | None:
        """Return ``(record, identity field)`` for an identity-bearing element."""
        record = resolve_indirection(element)
        if kind_of(record) is not Kind.RECORD:
            return None
        identity = self._plans.get(type(record)).identity
        if identity is None:
            return None
        return record, identity

    @staticmethod
    def _render_keys(mapping: Mapping[Any, Any] | None, side: str) -> dict[str, Any]:
        rendered: dict[str, Any] = {}
        if mapping is None:
            return rendered
        for raw_key, value in mapping.items():
            text = str(native(raw_key))
            if text in rendered:
                raise DuplicateKeyError(
                    text, f"two keys of the {side} mapping render to this text"
                )
            rendered[text] = value
        return rendered
