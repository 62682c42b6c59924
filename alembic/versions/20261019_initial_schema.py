"""Initial schema: users, cafes, categories, menu_items, activity_log

Revision ID: 20261019_initial
Revises:
Create Date: 2026-10-19 09:00:00.000000
"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '20261019_initial'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        'cafes',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('slug', sa.String(), nullable=False),
        sa.Column('tagline', sa.Text(), nullable=True),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('logo', sa.String(), nullable=True),
        sa.Column('cover_image', sa.String(), nullable=True),
        sa.Column('phone', sa.String(), nullable=True),
        sa.Column('email', sa.String(), nullable=True),
        sa.Column('address', sa.Text(), nullable=True),
        sa.Column('website', sa.String(), nullable=True),
        sa.Column('google_link', sa.String(), nullable=True),
        sa.Column('instagram', sa.String(), nullable=True),
        sa.Column('facebook', sa.String(), nullable=True),
        sa.Column('currency', sa.String(), server_default='₹'),
        sa.Column('primary_color', sa.String(), server_default='#2C5F2D'),
        sa.Column('secondary_color', sa.String(), server_default='#97BC62'),
        sa.Column('accent_color', sa.String(), server_default='#DAA520'),
        sa.Column('background_color', sa.String(), server_default='#FDFBF7'),
        sa.Column('text_color', sa.String(), server_default='#2D3436'),
        sa.Column('is_published', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('is_deployed', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('deployed_url', sa.String(), nullable=True),
        sa.Column('qr_code_path', sa.Text(), nullable=True),
        sa.Column('last_generated', sa.String(), nullable=True),
        sa.Column('created_by', sa.Integer(), nullable=True),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(), server_default=sa.func.now()),
    )
    op.create_index('ix_cafes_slug', 'cafes', ['slug'], unique=True)

    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('email', sa.String(), nullable=False),
        sa.Column('password', sa.String(), nullable=False),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('role', sa.String(), nullable=False, server_default='owner'),
        sa.Column('cafe_id', sa.Integer(), sa.ForeignKey('cafes.id', ondelete='SET NULL'), nullable=True),
        sa.Column('is_active', sa.Integer(), nullable=False, server_default='1'),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(), server_default=sa.func.now()),
    )
    op.create_index('ix_users_email', 'users', ['email'], unique=True)

    op.create_table(
        'categories',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('cafe_id', sa.Integer(), sa.ForeignKey('cafes.id', ondelete='CASCADE'), nullable=False),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('icon', sa.String(), server_default='🍽️'),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('sort_order', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('is_active', sa.Integer(), nullable=False, server_default='1'),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now()),
    )
    op.create_index('ix_categories_cafe_id', 'categories', ['cafe_id'])

    op.create_table(
        'menu_items',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('cafe_id', sa.Integer(), sa.ForeignKey('cafes.id', ondelete='CASCADE'), nullable=False),
        sa.Column('category_id', sa.Integer(), sa.ForeignKey('categories.id', ondelete='CASCADE'), nullable=False),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('price', sa.Float(), nullable=True),
        sa.Column('original_price', sa.Float(), nullable=True),
        sa.Column('image', sa.String(), nullable=True),
        sa.Column('calories', sa.Integer(), nullable=True),
        sa.Column('is_vegan', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('is_vegetarian', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('is_gluten_free', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('is_spicy', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('is_bestseller', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('is_popular', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('is_new', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('is_available', sa.Integer(), nullable=False, server_default='1'),
        sa.Column('sort_order', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(), server_default=sa.func.now()),
    )
    op.create_index('ix_menu_items_cafe_id', 'menu_items', ['cafe_id'])
    op.create_index('ix_menu_items_category_id', 'menu_items', ['category_id'])

    op.create_table(
        'activity_log',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('user_id', sa.Integer(), nullable=True),
        sa.Column('cafe_id', sa.Integer(), nullable=True),
        sa.Column('action', sa.String(), nullable=False),
        sa.Column('details', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now()),
    )
    op.create_index('ix_activity_log_user_id', 'activity_log', ['user_id'])
    op.create_index('ix_activity_log_cafe_id', 'activity_log', ['cafe_id'])


def downgrade():
    op.drop_table('activity_log')
    op.drop_table('menu_items')
    op.drop_table('categories')
    op.drop_table('users')
    op.drop_table('cafes')
