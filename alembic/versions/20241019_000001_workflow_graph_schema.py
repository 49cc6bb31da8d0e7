"""Workflow graph schema with sample workflow

Revision ID: 20241019_000001
Revises: 
Create Date: 2024-10-19

"""
from typing import Sequence, Union
from uuid import UUID

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

from flowgraph.seed import weather_alert_workflow

# revision identifiers, used by Alembic.
revision: str = '20241019_000001'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # Create workflows table
    workflows = op.create_table(
        'workflows',
        sa.Column('id', postgresql.UUID(as_uuid=True), server_default=sa.text('gen_random_uuid()'), nullable=False),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('version', sa.Integer(), nullable=False, server_default='1'),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )

    # Create workflow_nodes table
    workflow_nodes = op.create_table(
        'workflow_nodes',
        sa.Column('id', postgresql.UUID(as_uuid=True), server_default=sa.text('gen_random_uuid()'), nullable=False),
        sa.Column('workflow_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('node_id', sa.String(50), nullable=False),
        sa.Column('node_type', sa.String(50), nullable=False),
        sa.Column('sort_order', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('position_x', sa.Float(), nullable=False),
        sa.Column('position_y', sa.Float(), nullable=False),
        sa.Column('label', sa.String(255), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('metadata', postgresql.JSONB(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['workflow_id'], ['workflows.id'], ondelete='CASCADE'),
        sa.UniqueConstraint('workflow_id', 'node_id', name='uq_workflow_nodes_workflow_node'),
    )
    op.create_index('ix_workflow_nodes_workflow_id', 'workflow_nodes', ['workflow_id'])

    # Create workflow_edges table
    workflow_edges = op.create_table(
        'workflow_edges',
        sa.Column('id', postgresql.UUID(as_uuid=True), server_default=sa.text('gen_random_uuid()'), nullable=False),
        sa.Column('workflow_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('edge_id', sa.String(50), nullable=False),
        sa.Column('source_node_id', sa.String(50), nullable=False),
        sa.Column('target_node_id', sa.String(50), nullable=False),
        sa.Column('sort_order', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('type', sa.String(50), nullable=False, server_default='smoothstep'),
        sa.Column('animated', sa.Boolean(), nullable=False, server_default=sa.text('false')),
        sa.Column('stroke_color', sa.String(50), nullable=False, server_default='#000000'),
        sa.Column('stroke_width', sa.Integer(), nullable=False, server_default='1'),
        sa.Column('label', sa.String(255), nullable=False, server_default=''),
        sa.Column('source_handle', sa.String(50), nullable=False, server_default=''),
        sa.Column('label_style', postgresql.JSONB(), nullable=False, server_default=sa.text("'{}'::jsonb")),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['workflow_id'], ['workflows.id'], ondelete='CASCADE'),
    )
    op.create_index('ix_workflow_edges_workflow_id', 'workflow_edges', ['workflow_id'])
    op.create_index('ix_workflow_edges_source_node_id', 'workflow_edges', ['source_node_id'])
    op.create_index('ix_workflow_edges_target_node_id', 'workflow_edges', ['target_node_id'])
    op.create_index('ix_workflow_edges_workflow_source', 'workflow_edges', ['workflow_id', 'source_node_id'])

    # Seed the weather alert workflow
    workflow = weather_alert_workflow()
    workflow_id = UUID(workflow.id)
    op.bulk_insert(workflows, [{'id': workflow_id, 'name': workflow.name, 'version': 1}])
    op.bulk_insert(workflow_nodes, [
        {
            'workflow_id': workflow_id,
            'node_id': node.id,
            'node_type': node.type,
            'sort_order': i,
            'position_x': node.position.x,
            'position_y': node.position.y,
            'label': node.label,
            'description': node.description,
            'metadata': node.metadata,
        }
        for i, node in enumerate(workflow.nodes)
    ])
    op.bulk_insert(workflow_edges, [
        {
            'workflow_id': workflow_id,
            'edge_id': edge.id,
            'source_node_id': edge.source,
            'target_node_id': edge.target,
            'sort_order': i,
            'type': edge.edge_type,
            'animated': edge.animated,
            'stroke_color': edge.style.stroke,
            'stroke_width': edge.style.stroke_width,
            'label': edge.label,
            'source_handle': edge.route_key,
            'label_style': edge.label_style.model_dump(by_alias=True, exclude_none=True) if edge.label_style else {},
        }
        for i, edge in enumerate(workflow.edges)
    ])


def downgrade() -> None:
    op.drop_index('ix_workflow_edges_workflow_source', table_name='workflow_edges')
    op.drop_index('ix_workflow_edges_target_node_id', table_name='workflow_edges')
    op.drop_index('ix_workflow_edges_source_node_id', table_name='workflow_edges')
    op.drop_index('ix_workflow_edges_workflow_id', table_name='workflow_edges')
    op.drop_table('workflow_edges')
    op.drop_index('ix_workflow_nodes_workflow_id', table_name='workflow_nodes')
    op.drop_table('workflow_nodes')
    op.drop_table('workflows')
