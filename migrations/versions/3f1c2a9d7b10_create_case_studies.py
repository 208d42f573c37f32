"""Create case_studies and media_attachments tables

Revision ID: 3f1c2a9d7b10
Revises:
Create Date: 2026-10-19 10:12:44.318502

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '3f1c2a9d7b10'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        'media_attachments',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('alt_text', sa.String(length=300), nullable=False),
        sa.Column('sizes', sa.JSON(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )

    op.create_table(
        'case_studies',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('slug', sa.String(length=220), nullable=False),
        sa.Column('title', sa.String(length=200), nullable=False),
        sa.Column('content', sa.Text(), nullable=False),
        sa.Column('excerpt', sa.String(length=300), nullable=False),
        sa.Column('client', sa.String(length=200), nullable=False),
        sa.Column('problem', sa.Text(), nullable=False),
        sa.Column('solution', sa.Text(), nullable=False),
        sa.Column('results', sa.Text(), nullable=False),
        sa.Column('technologies', sa.String(length=500), nullable=False),
        sa.Column('date_completed', sa.String(length=10), nullable=True),
        sa.Column('status', sa.String(length=20), nullable=False),
        sa.Column('featured_image_id', sa.Integer(), nullable=True),
        sa.Column('published_at', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=False),
        sa.Column('modified_at', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=False),
        sa.ForeignKeyConstraint(['featured_image_id'], ['media_attachments.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id'),
    )
    with op.batch_alter_table('case_studies', schema=None) as batch_op:
        batch_op.create_index(batch_op.f('ix_case_studies_slug'), ['slug'], unique=True)
        batch_op.create_index('ix_case_studies_status_published_at', ['status', 'published_at'], unique=False)


def downgrade():
    with op.batch_alter_table('case_studies', schema=None) as batch_op:
        batch_op.drop_index('ix_case_studies_status_published_at')
        batch_op.drop_index(batch_op.f('ix_case_studies_slug'))

    op.drop_table('case_studies')
    op.drop_table('media_attachments')
