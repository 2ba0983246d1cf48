"""Create document and image tables

Revision ID: 001
Revises:
Create Date: 2026-10-19 00:00:00.000000
"""
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision = '001'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    """Create document and image tables with their lookup indexes."""

    op.create_table(
        'document',
        sa.Column('id', postgresql.UUID(as_uuid=True), server_default=sa.text('gen_random_uuid()'), nullable=False),

        # Write capability, issued once at creation
        sa.Column('modification_secret', sa.Text(), server_default=sa.text('gen_random_uuid()::text'), nullable=False),
        sa.Column('owner_external_id', sa.Text(), nullable=True),

        # Opaque CRDT snapshot
        sa.Column('data', sa.LargeBinary(), nullable=True),

        # Timestamps
        sa.Column('created_at', sa.TIMESTAMP(timezone=True), server_default=sa.text('NOW()'), nullable=False),
        sa.Column('updated_at', sa.TIMESTAMP(timezone=True), server_default=sa.text('NOW()'), nullable=False),
        sa.Column('last_accessed_at', sa.TIMESTAMP(timezone=True), server_default=sa.text('NOW()'), nullable=False),

        sa.PrimaryKeyConstraint('id'),
    )

    op.create_index('ix_document_owner_external_id', 'document', ['owner_external_id'])
    op.create_index('ix_document_last_accessed_at', 'document', ['last_accessed_at'])

    op.create_table(
        'image',
        sa.Column('id', postgresql.UUID(as_uuid=True), server_default=sa.text('gen_random_uuid()'), nullable=False),
        sa.Column('document_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('name', sa.Text(), nullable=False),
        sa.Column('mimetype', sa.Text(), nullable=False),
        sa.Column('created_at', sa.TIMESTAMP(timezone=True), server_default=sa.text('NOW()'), nullable=False),
        sa.Column('updated_at', sa.TIMESTAMP(timezone=True), server_default=sa.text('NOW()'), nullable=False),

        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['document_id'], ['document.id'], ondelete='CASCADE'),
    )

    op.create_index('ix_image_document_id', 'image', ['document_id'])

    # updated_at trigger for both tables
    op.execute("""
        CREATE OR REPLACE FUNCTION set_updated_at()
        RETURNS TRIGGER AS $$
        BEGIN
            NEW.updated_at = NOW();
            RETURN NEW;
        END;
        $$ LANGUAGE plpgsql;
    """)
    for table in ('document', 'image'):
        op.execute(f"""
            CREATE TRIGGER trg_{table}_updated_at
            BEFORE UPDATE ON {table}
            FOR EACH ROW EXECUTE FUNCTION set_updated_at();
        """)


def downgrade():
    """Drop image and document tables."""
    for table in ('image', 'document'):
        op.execute(f"DROP TRIGGER IF EXISTS trg_{table}_updated_at ON {table}")
    op.execute("DROP FUNCTION IF EXISTS set_updated_at()")

    op.drop_index('ix_image_document_id', table_name='image')
    op.drop_table('image')

    op.drop_index('ix_document_last_accessed_at', table_name='document')
    op.drop_index('ix_document_owner_external_id', table_name='document')
    op.drop_table('document')
