"""initial schema

Revision ID: 1a2b3c4d5e6f
Revises: 
Create Date: 2026-10-01 09:00:00.000000

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '1a2b3c4d5e6f'
down_revision = None
branch_labels = None
depends_on = None

NUTRIENTS = (
    'calories', 'protein', 'carbs', 'fat', 'fiber', 'sugar', 'sodium',
)
MICRO_NUTRIENTS = (
    'saturated_fat', 'trans_fat', 'cholesterol', 'potassium',
    'vitamin_a', 'vitamin_c', 'calcium', 'iron',
)


def upgrade():
    conn = op.get_bind()
    insp = sa.inspect(conn)

    if not insp.has_table('roles'):
        op.create_table(
            'roles',
            sa.Column('id', sa.Integer(), primary_key=True),
            sa.Column('name', sa.String(length=50), nullable=False, unique=True),
            sa.Column('description', sa.String(length=255), nullable=True),
        )
        op.bulk_insert(
            sa.table('roles', sa.column('name', sa.String), sa.column('description', sa.String)),
            [
                {'name': 'USER', 'description': 'Regular user'},
                {'name': 'ADMIN', 'description': 'Administrator'},
            ],
        )

    if not insp.has_table('users'):
        op.create_table(
            'users',
            sa.Column('id', sa.Integer(), primary_key=True),
            sa.Column('name', sa.String(length=100), nullable=False, server_default=''),
            sa.Column('email', sa.String(length=120), nullable=False, unique=True),
            sa.Column('password', sa.String(length=255), nullable=False),
            sa.Column('role_id', sa.Integer(), sa.ForeignKey('roles.id'), nullable=True),
            sa.Column('timezone', sa.String(length=64), nullable=True),
            sa.Column('daily_calorie_goal', sa.Numeric(10, 2), nullable=True),
            sa.Column('daily_protein_goal', sa.Numeric(10, 2), nullable=True),
            sa.Column('daily_carb_goal', sa.Numeric(10, 2), nullable=True),
            sa.Column('daily_fat_goal', sa.Numeric(10, 2), nullable=True),
            sa.Column('created_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        )

    if not insp.has_table('foods'):
        op.create_table(
            'foods',
            sa.Column('id', sa.Integer(), primary_key=True),
            sa.Column('name', sa.String(length=255), nullable=False, index=True),
            sa.Column('brand', sa.String(length=255), nullable=True),
            sa.Column('barcode', sa.String(length=64), nullable=True, index=True),
            sa.Column('source', sa.String(length=20), nullable=False, server_default='manual'),
            sa.Column('external_id', sa.String(length=128), nullable=True),
            sa.Column('nutrient_basis_g', sa.Numeric(10, 2), nullable=False, server_default='100'),
            sa.Column('serving_size', sa.String(length=50), nullable=False, server_default='100g'),
            sa.Column('serving_size_g', sa.Numeric(10, 2), nullable=True),
            *[sa.Column(n, sa.Numeric(10, 2), nullable=False, server_default='0') for n in NUTRIENTS],
            *[sa.Column(n, sa.Numeric(10, 2), nullable=True) for n in MICRO_NUTRIENTS],
            sa.Column('image_url', sa.String(length=500), nullable=True),
            sa.Column('created_by_id', sa.Integer(), sa.ForeignKey('users.id', ondelete='SET NULL'), nullable=True),
            sa.Column('usage_count', sa.Integer(), nullable=False, server_default='0'),
            sa.Column('is_cached', sa.Boolean(), nullable=False, server_default=sa.false()),
            sa.Column('last_synced_at', sa.DateTime(), nullable=True),
            sa.Column('created_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
            sa.Column('updated_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        )

    if not insp.has_table('meals'):
        op.create_table(
            'meals',
            sa.Column('id', sa.Integer(), primary_key=True),
            sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
            sa.Column('name', sa.String(length=255), nullable=False),
            sa.Column('category', sa.String(length=20), nullable=False, server_default='snack'),
            sa.Column('date', sa.Date(), nullable=False),
            sa.Column('time', sa.String(length=5), nullable=True),
            sa.Column('is_custom_category', sa.Boolean(), nullable=False, server_default=sa.false()),
            sa.Column('notes', sa.Text(), nullable=True),
            sa.Column('created_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
            sa.Column('updated_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
            sa.CheckConstraint("category IN ('breakfast', 'lunch', 'dinner', 'snack')", name='ck_meals_category'),
        )
        op.create_index('ix_meals_user_date', 'meals', ['user_id', 'date'])

    if not insp.has_table('food_entries'):
        op.create_table(
            'food_entries',
            sa.Column('id', sa.Integer(), primary_key=True),
            sa.Column('meal_id', sa.Integer(), sa.ForeignKey('meals.id', ondelete='CASCADE'), nullable=False, index=True),
            sa.Column('food_id', sa.Integer(), sa.ForeignKey('foods.id'), nullable=False, index=True),
            sa.Column('quantity', sa.Numeric(10, 2), nullable=False),
            sa.Column('unit', sa.String(length=10), nullable=False, server_default='g'),
            sa.Column('created_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
            sa.Column('updated_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
            sa.CheckConstraint('quantity > 0', name='ck_food_entries_quantity'),
        )

    if not insp.has_table('daily_nutrition'):
        op.create_table(
            'daily_nutrition',
            sa.Column('id', sa.Integer(), primary_key=True),
            sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
            sa.Column('date', sa.Date(), nullable=False),
            *[sa.Column(f'total_{n}', sa.Numeric(10, 2), nullable=False, server_default='0')
              for n in NUTRIENTS + MICRO_NUTRIENTS],
            sa.Column('meal_count', sa.Integer(), nullable=False, server_default='0'),
            sa.Column('calorie_goal', sa.Numeric(10, 2), nullable=True),
            sa.Column('protein_goal', sa.Numeric(10, 2), nullable=True),
            sa.Column('carb_goal', sa.Numeric(10, 2), nullable=True),
            sa.Column('fat_goal', sa.Numeric(10, 2), nullable=True),
            sa.Column('water_intake_ml', sa.Integer(), nullable=False, server_default='0'),
            sa.Column('water_goal_ml', sa.Integer(), nullable=False, server_default='2000'),
            sa.Column('exercise_calories_burned', sa.Integer(), nullable=False, server_default='0'),
            sa.Column('notes', sa.Text(), nullable=True),
            sa.Column('created_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
            sa.Column('updated_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
            sa.UniqueConstraint('user_id', 'date', name='uq_daily_nutrition_user_date'),
        )

    if not insp.has_table('refresh_tokens'):
        op.create_table(
            'refresh_tokens',
            sa.Column('id', sa.Integer(), primary_key=True),
            sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False, index=True),
            sa.Column('token_hash', sa.String(length=64), nullable=False, unique=True),
            sa.Column('expires_at', sa.DateTime(), nullable=False),
            sa.Column('revoked_at', sa.DateTime(), nullable=True),
            sa.Column('created_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        )


def downgrade():
    # Drop in reverse dependency order
    for tbl in (
        'refresh_tokens',
        'daily_nutrition',
        'food_entries',
        'meals',
        'foods',
        'users',
        'roles',
    ):
        op.drop_table(tbl)
