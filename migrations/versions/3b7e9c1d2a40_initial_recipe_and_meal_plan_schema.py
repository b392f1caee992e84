"""Initial recipe and meal plan schema

Revision ID: 3b7e9c1d2a40
Revises:
Create Date: 2026-10-19 13:40:12.518204

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '3b7e9c1d2a40'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table('recipe',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('title', sa.String(length=256), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('image_url', sa.Text(), nullable=True),
        sa.Column('cuisine', sa.String(length=128), nullable=True),
        sa.Column('servings_amount', sa.Integer(), nullable=False),
        sa.Column('time_prep', sa.String(length=64), nullable=False),
        sa.Column('time_cook', sa.String(length=64), nullable=False),
        sa.Column('time_total', sa.String(length=64), nullable=False),
        sa.Column('source_type', sa.String(length=20), nullable=False),
        sa.Column('source_url', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )
    with op.batch_alter_table('recipe', schema=None) as batch_op:
        batch_op.create_index(batch_op.f('ix_recipe_title'), ['title'], unique=False)

    op.create_table('recipe_section',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('recipe_id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=128), nullable=False),
        sa.Column('order_index', sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(['recipe_id'], ['recipe.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id')
    )
    with op.batch_alter_table('recipe_section', schema=None) as batch_op:
        batch_op.create_index(batch_op.f('ix_recipe_section_recipe_id'), ['recipe_id'], unique=False)

    op.create_table('recipe_ingredient',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('recipe_id', sa.Integer(), nullable=False),
        sa.Column('section_id', sa.Integer(), nullable=True),
        sa.Column('raw_text', sa.Text(), nullable=False),
        sa.Column('quantity_numerator', sa.Integer(), nullable=True),
        sa.Column('quantity_denominator', sa.Integer(), nullable=True),
        sa.Column('unit', sa.String(length=64), nullable=True),
        sa.Column('item', sa.String(length=256), nullable=True),
        sa.Column('notes', sa.String(length=256), nullable=True),
        sa.Column('order_index', sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(['recipe_id'], ['recipe.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['section_id'], ['recipe_section.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id')
    )
    with op.batch_alter_table('recipe_ingredient', schema=None) as batch_op:
        batch_op.create_index(batch_op.f('ix_recipe_ingredient_recipe_id'), ['recipe_id'], unique=False)

    op.create_table('instruction',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('recipe_id', sa.Integer(), nullable=False),
        sa.Column('section_id', sa.Integer(), nullable=True),
        sa.Column('step_number', sa.Integer(), nullable=False),
        sa.Column('text', sa.Text(), nullable=False),
        sa.Column('notes', sa.String(length=256), nullable=True),
        sa.ForeignKeyConstraint(['recipe_id'], ['recipe.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['section_id'], ['recipe_section.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id')
    )
    with op.batch_alter_table('instruction', schema=None) as batch_op:
        batch_op.create_index(batch_op.f('ix_instruction_recipe_id'), ['recipe_id'], unique=False)

    op.create_table('recipe_note',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('recipe_id', sa.Integer(), nullable=False),
        sa.Column('kind', sa.String(length=64), nullable=False),
        sa.Column('text', sa.Text(), nullable=False),
        sa.Column('order_index', sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(['recipe_id'], ['recipe.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id')
    )
    with op.batch_alter_table('recipe_note', schema=None) as batch_op:
        batch_op.create_index(batch_op.f('ix_recipe_note_recipe_id'), ['recipe_id'], unique=False)

    op.create_table('meal_plan_entry',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('date', sa.String(length=10), nullable=False),
        sa.Column('meal_slot', sa.String(length=20), nullable=False),
        sa.Column('recipe_id', sa.Integer(), nullable=True),
        sa.Column('servings', sa.Integer(), nullable=True),
        sa.Column('notes', sa.String(length=256), nullable=True),
        sa.ForeignKeyConstraint(['recipe_id'], ['recipe.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('date', 'meal_slot', name='uq_meal_plan_entry_cell')
    )
    with op.batch_alter_table('meal_plan_entry', schema=None) as batch_op:
        batch_op.create_index(batch_op.f('ix_meal_plan_entry_date'), ['date'], unique=False)
        batch_op.create_index(batch_op.f('ix_meal_plan_entry_recipe_id'), ['recipe_id'], unique=False)


def downgrade():
    with op.batch_alter_table('meal_plan_entry', schema=None) as batch_op:
        batch_op.drop_index(batch_op.f('ix_meal_plan_entry_recipe_id'))
        batch_op.drop_index(batch_op.f('ix_meal_plan_entry_date'))
    op.drop_table('meal_plan_entry')

    for table in ('recipe_note', 'instruction', 'recipe_ingredient', 'recipe_section'):
        with op.batch_alter_table(table, schema=None) as batch_op:
            batch_op.drop_index(batch_op.f(f'ix_{table}_recipe_id'))
        op.drop_table(table)

    with op.batch_alter_table('recipe', schema=None) as batch_op:
        batch_op.drop_index(batch_op.f('ix_recipe_title'))
    op.drop_table('recipe')
