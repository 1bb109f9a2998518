"""Create prompts table

Revision ID: 001_prompts
Revises: 
Create Date: 2026-10-19 12:00:00.000000

"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = '001_prompts'
down_revision = None
branch_labels = None
depends_on = None

TONES = ('formal', 'casual', 'friendly', 'professional', 'creative', 'concise')
TYPES = ('email', 'message', 'explanation', 'summary', 'proposal', 'report', 'other')


def upgrade() -> None:
    """Create prompts table"""
    op.create_table(
        'prompts',
        sa.Column('id', sa.Uuid(as_uuid=True), primary_key=True),
        sa.Column('user_id', sa.String(255), nullable=False),
        sa.Column('original_prompt', sa.Text, nullable=False),
        sa.Column('rewritten_prompt', sa.Text, nullable=False),
        sa.Column('tone', sa.Enum(*TONES, name='prompt_tone'), nullable=False),
        sa.Column('type', sa.Enum(*TYPES, name='prompt_type'), nullable=False),
        sa.Column('is_favorite', sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column('word_count_original', sa.Integer, nullable=False, server_default='0'),
        sa.Column('word_count_rewritten', sa.Integer, nullable=False, server_default='0'),
        sa.Column('processing_time', sa.Integer),
        sa.Column('model', sa.String(100)),
        sa.Column('api_cost', sa.Float, nullable=False, server_default='0'),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True)),
    )

    # Create indexes for efficient querying
    op.create_index('ix_prompts_user_id', 'prompts', ['user_id'])
    op.create_index('ix_prompts_is_favorite', 'prompts', ['is_favorite'])
    op.create_index('ix_prompts_created_at', 'prompts', ['created_at'])
    op.create_index('idx_prompts_user_created', 'prompts', ['user_id', 'created_at'])
    op.create_index('idx_prompts_user_favorite', 'prompts', ['user_id', 'is_favorite', 'created_at'])
    op.create_index('idx_prompts_user_type', 'prompts', ['user_id', 'type'])
    op.create_index('idx_prompts_user_tone', 'prompts', ['user_id', 'tone'])


def downgrade() -> None:
    """Drop prompts table"""
    op.drop_index('idx_prompts_user_tone')
    op.drop_index('idx_prompts_user_type')
    op.drop_index('idx_prompts_user_favorite')
    op.drop_index('idx_prompts_user_created')
    op.drop_index('ix_prompts_created_at')
    op.drop_index('ix_prompts_is_favorite')
    op.drop_index('ix_prompts_user_id')
    op.drop_table('prompts')
    sa.Enum(name='prompt_type').drop(op.get_bind(), checkfirst=True)
    sa.Enum(name='prompt_tone').drop(op.get_bind(), checkfirst=True)
