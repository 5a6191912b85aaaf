"""
Ouderschaps API: Dossier Cascade Delete
=========================================

What:  Removes a dossier together with every row that hangs off it, all or
       nothing.
How:   The dependent tables are declared as foreign-key edges
       `(child table, fk column, parent table)` rooted at `dossiers`. The
       delete order is derived with Kahn's algorithm over those edges
       (declaration order breaks ties), so a child table is always emptied
       before its parent. All statements run on the request session; a
       failing step rolls the session back and nothing is removed.
Who:   services/dossier_service.py (DELETE /api/dossiers/{id}).

Derived order for the declared edges:
    bijdragen_kosten_kinderen, financiele_afspraken_kinderen → alimentaties
    alimentaties, ouderschapsplan_info, communicatie_afspraken,
    omgang, zorg, dossiers_kinderen, dossiers_partijen       → dossiers

Back references:
    `alimentaties.bijdrage_kosten_kinderen` points from a parent to one of
    its children. Such nullable columns are declared separately and set to
    NULL before the first delete, which keeps the edge graph acyclic.
"""

import heapq
import logging
from collections import OrderedDict
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Tuple

from sqlalchemy import Table, delete, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from ouderschaps_api.database import Base
from ouderschaps_api.exceptions import DatabaseError

logger = logging.getLogger(__name__)

ROOT_TABLE = "dossiers"


@dataclass(frozen=True)
class Edge:
    child: str
    fk_column: str
    parent: str


@dataclass(frozen=True)
class BackReference:
    table: str
    column: str


# Every table that references a dossier, directly or through another table.
DOSSIER_EDGES: Tuple[Edge, ...] = (
    Edge("bijdragen_kosten_kinderen", "alimentatie_id", "alimentaties"),
    Edge("financiele_afspraken_kinderen", "alimentatie_id", "alimentaties"),
    Edge("alimentaties", "dossier_id", ROOT_TABLE),
    Edge("ouderschapsplan_info", "dossier_id", ROOT_TABLE),
    Edge("communicatie_afspraken", "dossier_id", ROOT_TABLE),
    Edge("omgang", "dossier_id", ROOT_TABLE),
    Edge("zorg", "dossier_id", ROOT_TABLE),
    Edge("dossiers_kinderen", "dossier_id", ROOT_TABLE),
    Edge("dossiers_partijen", "dossier_id", ROOT_TABLE),
)

DOSSIER_BACK_REFERENCES: Tuple[BackReference, ...] = (
    BackReference("alimentaties", "bijdrage_kosten_kinderen"),
)


class CascadeCycleError(ValueError):
    pass


def plan_delete_order(edges: Sequence[Edge], root: str = ROOT_TABLE) -> List[str]:
    """
    Tables in delete order: every child before its parent, root last.

    Kahn's algorithm on the reversed graph: a table becomes ready once all
    tables that reference it have been emitted.

    Raises:
        CascadeCycleError: the edges contain a cycle.
    """
    tables: "OrderedDict[str, None]" = OrderedDict()
    for edge in edges:
        tables.setdefault(edge.child)
        tables.setdefault(edge.parent)
    tables.setdefault(root)

    # parent -> number of child tables not yet emitted
    pending_children: Dict[str, int] = {t: 0 for t in tables}
    parents_of: Dict[str, List[str]] = {t: [] for t in tables}
    for edge in edges:
        pending_children[edge.parent] += 1
        parents_of[edge.child].append(edge.parent)

    position = {t: i for i, t in enumerate(tables)}
    ready = [position[t] for t in tables if pending_children[t] == 0]
    heapq.heapify(ready)
    names = list(tables)
    order: List[str] = []
    while ready:
        table = names[heapq.heappop(ready)]
        order.append(table)
        for parent in parents_of[table]:
            pending_children[parent] -= 1
            if pending_children[parent] == 0:
                heapq.heappush(ready, position[parent])

    if len(order) != len(tables):
        stuck = sorted(t for t in tables if t not in order)
        raise CascadeCycleError(f"Foreign-key cycle between tables: {', '.join(stuck)}")
    return order


@dataclass
class CascadeReport:
    dossier_id: int
    deleted: Dict[str, int] = field(default_factory=dict)

    @property
    def total(self) -> int:
        return sum(self.deleted.values())

    @property
    def dossier_deleted(self) -> bool:
        return self.deleted.get(ROOT_TABLE, 0) > 0


class CascadeDeleter:
    """
    Executes the planned delete for one root id.

    Each table's rows are selected by walking its edges up to the root:
    a direct child of `dossiers` matches `dossier_id = :id`, a grandchild
    matches `alimentatie_id IN (SELECT id FROM alimentaties WHERE dossier_id = :id)`.
    """

    def __init__(
        self,
        edges: Sequence[Edge] = DOSSIER_EDGES,
        back_references: Sequence[BackReference] = DOSSIER_BACK_REFERENCES,
        root: str = ROOT_TABLE,
    ):
        self.edges = tuple(edges)
        self.back_references = tuple(back_references)
        self.root = root
        self.order = plan_delete_order(self.edges, root)
        self._edge_by_child = {edge.child: edge for edge in self.edges}

    def _table(self, name: str) -> Table:
        return Base.metadata.tables[name]

    def _row_filter(self, table_name: str, root_id: int):
        """WHERE clause selecting the rows of `table_name` that belong to root_id."""
        table = self._table(table_name)
        if table_name == self.root:
            return table.c.id == root_id
        edge = self._edge_by_child[table_name]
        parent = self._table(edge.parent)
        if edge.parent == self.root:
            return table.c[edge.fk_column] == root_id
        parent_ids = select(parent.c.id).where(self._row_filter(edge.parent, root_id))
        return table.c[edge.fk_column].in_(parent_ids)

    async def count_related(self, db: AsyncSession, root_id: int) -> Dict[str, int]:
        counts = {}
        for name in self.order:
            table = self._table(name)
            query = select(func.count()).select_from(table).where(self._row_filter(name, root_id))
            counts[name] = (await db.execute(query)).scalar_one()
        return counts

    async def _log_precheck(self, db: AsyncSession, root_id: int) -> None:
        try:
            counts = await self.count_related(db, root_id)
            logger.info("Deleting dossier %d, related rows: %s", root_id, counts)
        except Exception as e:
            logger.warning("Pre-delete row count for dossier %d failed: %s", root_id, e)

    async def delete(self, db: AsyncSession, root_id: int) -> CascadeReport:
        """
        Delete the root row and everything below it.

        Raises:
            DatabaseError: a step failed; the session has been rolled back.
        """
        await self._log_precheck(db, root_id)
        report = CascadeReport(dossier_id=root_id)
        step: Optional[str] = None
        try:
            for ref in self.back_references:
                step = f"{ref.table}.{ref.column}"
                table = self._table(ref.table)
                result = await db.execute(
                    update(table).where(self._row_filter(ref.table, root_id)).values({ref.column: None})
                )
                logger.info("Cascade dossier %d: cleared %s on %d rows", root_id, step, result.rowcount)

            for name in self.order:
                step = name
                table = self._table(name)
                result = await db.execute(delete(table).where(self._row_filter(name, root_id)))
                report.deleted[name] = result.rowcount
                logger.info("Cascade dossier %d: deleted %d rows from %s", root_id, result.rowcount, name)
        except Exception as e:
            await db.rollback()
            logger.error(
                "Cascade delete of dossier %d failed at %s, rolled back: %s", root_id, step, e, exc_info=True
            )
            raise DatabaseError(
                message=f"Failed to delete dossier {root_id}: {e}",
                context={"dossier_id": root_id, "step": step},
            )

        # Drop stale ORM instances of the removed rows from the session
        db.expire_all()
        return report


# Module-level singleton
dossier_cascade = CascadeDeleter()
