"""create employees, catalog (categories, brands, products) and audit tables

Revision ID: 3b1f6c2a9d10
Revises:
Create Date: 2026-10-18 10:12:41.118204
"""
from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa

revision: str = '3b1f6c2a9d10'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _base_columns():
    return [
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('created_by', sa.Integer(), nullable=True),
        sa.Column('updated_by', sa.Integer(), nullable=True),
    ]


def upgrade() -> None:
    op.create_table(
        'employees',
        *_base_columns(),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('job_title', sa.String(length=150), nullable=True),
        sa.Column('phone', sa.String(length=20), nullable=True),
        sa.Column('permissions', sa.JSON(), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False),
    )
    op.create_index('ix_employees_id', 'employees', ['id'])
    op.create_index('ix_employees_email', 'employees', ['email'], unique=True)

    op.create_table(
        'categories',
        *_base_columns(),
        sa.Column('name', sa.String(length=150), nullable=False),
        sa.Column('slug', sa.String(length=200), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('image', sa.String(length=500), nullable=True),
        sa.Column('parent_id', sa.Integer(), sa.ForeignKey('categories.id'), nullable=True),
        sa.Column('children', sa.JSON(), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.Column('version', sa.Integer(), nullable=False),
    )
    op.create_index('ix_categories_id', 'categories', ['id'])
    op.create_index('ix_categories_slug', 'categories', ['slug'])
    op.create_index('ix_categories_parent_id', 'categories', ['parent_id'])
    op.create_index('uq_categories_name_lower', 'categories', [sa.text('lower(name)')], unique=True)

    op.create_table(
        'brands',
        *_base_columns(),
        sa.Column('name', sa.String(length=150), nullable=False),
        sa.Column('slug', sa.String(length=200), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('logo', sa.JSON(), nullable=True),
        sa.Column('website', sa.String(length=500), nullable=True),
        sa.Column('countries', sa.JSON(), nullable=False),
        sa.Column('status', sa.Boolean(), nullable=False),
        sa.Column('order', sa.Integer(), nullable=False),
    )
    op.create_index('ix_brands_id', 'brands', ['id'])
    op.create_index('ix_brands_slug', 'brands', ['slug'], unique=True)

    op.create_table(
        'products',
        *_base_columns(),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('sku', sa.String(length=100), nullable=True),
        sa.Column('price', sa.Numeric(12, 2), nullable=False),
        sa.Column('status', sa.String(length=20), nullable=False),
        sa.Column('category_id', sa.Integer(), sa.ForeignKey('categories.id'), nullable=True),
        sa.Column('brand_id', sa.Integer(), sa.ForeignKey('brands.id'), nullable=True),
    )
    op.create_index('ix_products_id', 'products', ['id'])
    op.create_index('ix_products_sku', 'products', ['sku'])
    op.create_index('ix_products_category_id', 'products', ['category_id'])
    op.create_index('ix_products_brand_id', 'products', ['brand_id'])

    op.create_table(
        'audit_logs',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('employee_id', sa.Integer(), sa.ForeignKey('employees.id'), nullable=False),
        sa.Column('action_type', sa.String(length=100), nullable=False),
        sa.Column('target_model', sa.String(length=50), nullable=False),
        sa.Column('target_id', sa.Integer(), nullable=True),
        sa.Column('changes', sa.JSON(), nullable=False),
        sa.Column('metadata', sa.JSON(), nullable=False),
        sa.Column('ip_address', sa.String(length=45), nullable=True),
        sa.Column('user_agent', sa.Text(), nullable=True),
        sa.Column('endpoint', sa.String(length=255), nullable=True),
        sa.Column('request_id', sa.String(length=100), nullable=True),
        sa.Column('status', sa.String(length=20), nullable=False),
        sa.Column('error_message', sa.Text(), nullable=True),
        sa.Column('timestamp', sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index('ix_audit_logs_id', 'audit_logs', ['id'])
    op.create_index('ix_audit_logs_employee_id', 'audit_logs', ['employee_id'])
    op.create_index('ix_audit_logs_action_type', 'audit_logs', ['action_type'])
    op.create_index('ix_audit_logs_target_model', 'audit_logs', ['target_model'])
    op.create_index('ix_audit_logs_status', 'audit_logs', ['status'])
    op.create_index('ix_audit_logs_timestamp', 'audit_logs', ['timestamp'])
    op.create_index('ix_audit_logs_action_timestamp', 'audit_logs', ['action_type', 'timestamp'])
    op.create_index('ix_audit_logs_target', 'audit_logs', ['target_model', 'target_id'])


def downgrade() -> None:
    op.drop_table('audit_logs')
    op.drop_table('products')
    op.drop_table('brands')
    op.drop_index('uq_categories_name_lower', table_name='categories')
    op.drop_table('categories')
    op.drop_table('employees')
