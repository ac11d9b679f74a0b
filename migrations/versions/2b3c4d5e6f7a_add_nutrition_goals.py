"""add nutrition goals

Revision ID: 2b3c4d5e6f7a
Revises: 1a2b3c4d5e6f
Create Date: 2026-10-08 09:00:00.000000

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '2b3c4d5e6f7a'
down_revision = '1a2b3c4d5e6f'
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        'nutrition_goals',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('period', sa.String(length=10), nullable=False, server_default='daily'),
        sa.Column('goal_type', sa.String(length=30), nullable=False, server_default='custom'),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('calorie_goal', sa.Numeric(10, 2), nullable=True),
        sa.Column('protein_goal', sa.Numeric(10, 2), nullable=True),
        sa.Column('carb_goal', sa.Numeric(10, 2), nullable=True),
        sa.Column('fat_goal', sa.Numeric(10, 2), nullable=True),
        sa.Column('fiber_goal', sa.Numeric(10, 2), nullable=True),
        sa.Column('sugar_goal', sa.Numeric(10, 2), nullable=True),
        sa.Column('sodium_goal', sa.Numeric(10, 2), nullable=True),
        sa.Column('water_goal', sa.Numeric(10, 2), nullable=True),
        sa.Column('tolerance_lower', sa.Integer(), nullable=False, server_default='90'),
        sa.Column('tolerance_upper', sa.Integer(), nullable=False, server_default='110'),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
    )
    op.create_index('ix_nutrition_goals_user_period_active', 'nutrition_goals', ['user_id', 'period', 'is_active'])


def downgrade():
    op.drop_index('ix_nutrition_goals_user_period_active', table_name='nutrition_goals')
    op.drop_table('nutrition_goals')
