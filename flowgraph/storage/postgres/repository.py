"""
PostgreSQL workflow repository.

Maps Workflow models to the workflows / workflow_nodes / workflow_edges
tables. Each call runs in its own session and transaction.
"""

import logging
from typing import Optional
from uuid import UUID, uuid4

from sqlalchemy import delete, select, update

from flowgraph.core.errors import InvalidWorkflowError, WorkflowNotFoundError
from flowgraph.core.models import (
    EdgeDefinition,
    EdgeStyle,
    LabelStyle,
    NodeData,
    NodeDefinition,
    Position,
    Workflow,
)
from flowgraph.storage.postgres.database import Database
from flowgraph.storage.postgres.models import (
    WorkflowEdgeModel,
    WorkflowModel,
    WorkflowNodeModel,
)
from flowgraph.storage.repository import WorkflowRepository, parse_workflow_id

logger = logging.getLogger(__name__)


class PostgresWorkflowRepository(WorkflowRepository):
    """
    Repository for workflow definitions backed by PostgreSQL.

    Updates replace the node and edge rows wholesale.
    """

    def __init__(self, database: Database):
        self.database = database

    # ==================== Row Conversion ====================

    @staticmethod
    def _node_rows(workflow_id: UUID, workflow: Workflow) -> list[WorkflowNodeModel]:
        return [
            WorkflowNodeModel(
                workflow_id=workflow_id,
                node_id=node.id,
                node_type=node.type,
                sort_order=i,
                position_x=node.position.x,
                position_y=node.position.y,
                label=node.label,
                description=node.description,
                node_metadata=node.metadata,
            )
            for i, node in enumerate(workflow.nodes)
        ]

    @staticmethod
    def _edge_rows(workflow_id: UUID, workflow: Workflow) -> list[WorkflowEdgeModel]:
        return [
            WorkflowEdgeModel(
                workflow_id=workflow_id,
                edge_id=edge.id,
                source_node_id=edge.source,
                target_node_id=edge.target,
                sort_order=i,
                type=edge.edge_type,
                animated=edge.animated,
                stroke_color=edge.style.stroke,
                stroke_width=edge.style.stroke_width,
                label=edge.label,
                source_handle=edge.route_key,
                label_style=(
                    edge.label_style.model_dump(by_alias=True, exclude_none=True)
                    if edge.label_style else {}
                ),
            )
            for i, edge in enumerate(workflow.edges)
        ]

    @staticmethod
    def _to_workflow(model: WorkflowModel) -> Workflow:
        nodes = [
            NodeDefinition(
                id=row.node_id,
                type=row.node_type,
                position=Position(x=row.position_x, y=row.position_y),
                data=NodeData(
                    label=row.label,
                    description=row.description or "",
                    metadata=row.node_metadata or {},
                ),
            )
            for row in model.nodes
        ]
        edges = [
            EdgeDefinition(
                id=row.edge_id,
                source=row.source_node_id,
                target=row.target_node_id,
                route_key=row.source_handle,
                edge_type=row.type,
                animated=row.animated,
                label=row.label,
                style=EdgeStyle(stroke=row.stroke_color, stroke_width=row.stroke_width),
                label_style=LabelStyle.model_validate(row.label_style) if row.label_style else None,
            )
            for row in model.edges
        ]
        return Workflow(
            id=str(model.id),
            name=model.name,
            version=model.version,
            nodes=nodes,
            edges=edges,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )

    # ==================== Workflow Operations ====================

    async def create(self, workflow: Workflow) -> Workflow:
        """Insert a workflow with its nodes and edges at version 1."""
        workflow_id = parse_workflow_id(workflow.id) if workflow.id else uuid4()
        if workflow_id is None:
            raise InvalidWorkflowError(f"workflow id must be a UUID: {workflow.id}")

        async with self.database.session() as session:
            session.add(WorkflowModel(id=workflow_id, name=workflow.name, version=1))
            await session.flush()
            session.add_all(self._node_rows(workflow_id, workflow))
            session.add_all(self._edge_rows(workflow_id, workflow))

        logger.info(f"Created workflow {workflow_id} ({workflow.name})")
        return await self.get(str(workflow_id))

    async def get(self, workflow_id: str) -> Optional[Workflow]:
        """Get workflow by ID with nodes in definition order."""
        key = parse_workflow_id(workflow_id)
        if key is None:
            return None

        async with self.database.session() as session:
            result = await session.execute(
                select(WorkflowModel).where(WorkflowModel.id == key)
            )
            model = result.scalar_one_or_none()
            if model is None:
                return None
            return self._to_workflow(model)

    async def update(self, workflow: Workflow) -> Workflow:
        """Replace name, nodes and edges; the stored version is incremented."""
        key = parse_workflow_id(workflow.id)
        if key is None:
            raise WorkflowNotFoundError(workflow.id)

        async with self.database.session() as session:
            result = await session.execute(
                update(WorkflowModel)
                .where(WorkflowModel.id == key)
                .values(name=workflow.name, version=WorkflowModel.version + 1)
                .returning(WorkflowModel.version)
            )
            new_version = result.scalar_one_or_none()
            if new_version is None:
                raise WorkflowNotFoundError(workflow.id)

            await session.execute(
                delete(WorkflowEdgeModel).where(WorkflowEdgeModel.workflow_id == key)
            )
            await session.execute(
                delete(WorkflowNodeModel).where(WorkflowNodeModel.workflow_id == key)
            )
            session.add_all(self._node_rows(key, workflow))
            session.add_all(self._edge_rows(key, workflow))

        logger.info(f"Updated workflow {key} to version {new_version}")
        return await self.get(str(key))

    async def delete(self, workflow_id: str) -> bool:
        """Delete a workflow; nodes and edges cascade."""
        key = parse_workflow_id(workflow_id)
        if key is None:
            return False

        async with self.database.session() as session:
            result = await session.execute(
                delete(WorkflowModel).where(WorkflowModel.id == key)
            )
            return result.rowcount > 0
