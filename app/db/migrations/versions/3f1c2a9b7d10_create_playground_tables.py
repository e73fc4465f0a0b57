"""create_users_playground_tools_user_tool_state

Revision ID: 3f1c2a9b7d10
Revises:
Create Date: 2026-09-28 10:12:03.418227
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

from app.config import get_settings


# revision identifiers, used by Alembic.
revision: str = '3f1c2a9b7d10'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

SCHEMA = get_settings().db_schema
_doc = sa.JSON().with_variant(postgresql.JSONB(), 'postgresql')


def _ref(target: str) -> str:
    return f'{SCHEMA}.{target}' if SCHEMA else target


def upgrade() -> None:
    # 1. users
    op.create_table(
        'users',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('username', sa.String(length=64), nullable=False, comment='登录名'),
        sa.Column('email', sa.String(length=128), nullable=True, comment='邮箱'),
        sa.Column('hashed_pwd', sa.String(length=256), nullable=False, comment='密码哈希'),
        sa.Column('is_active', sa.Boolean(), server_default='true', nullable=False, comment='是否激活'),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False, comment='创建时间'),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False, comment='更新时间'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('username'),
        schema=SCHEMA,
    )

    # 2. playground_tools：owner 删除时置空
    op.create_table(
        'playground_tools',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('name', sa.String(length=128), nullable=False, comment='展示名称'),
        sa.Column('slug', sa.String(length=128), nullable=False, comment='URL 标识，全局唯一'),
        sa.Column('description', sa.Text(), nullable=True, comment='工具描述'),
        sa.Column('icon', sa.String(length=64), server_default='Beaker', nullable=False, comment='图标名'),
        sa.Column('component_name', sa.String(length=128), nullable=False, comment='前端组件名，与工具一一对应'),
        sa.Column('configuration', _doc, nullable=False, comment='工具级配置（所有用户共享）'),
        sa.Column('is_active', sa.Boolean(), server_default='true', nullable=False, comment='是否启用'),
        sa.Column('owner_user_id', sa.Uuid(), nullable=True, comment='所属用户，NULL 表示系统工具'),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False, comment='创建时间'),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False, comment='更新时间'),
        sa.ForeignKeyConstraint(['owner_user_id'], [_ref('users.id')], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('slug'),
        sa.UniqueConstraint('component_name'),
        schema=SCHEMA,
    )
    op.create_index('ix_playground_tools_is_active', 'playground_tools', ['is_active'], schema=SCHEMA)
    op.create_index('ix_playground_tools_owner_user_id', 'playground_tools', ['owner_user_id'], schema=SCHEMA)

    # 3. user_tool_state：任一父行删除时级联删除
    op.create_table(
        'user_tool_state',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('user_id', sa.Uuid(), nullable=False, comment='用户ID'),
        sa.Column('tool_id', sa.Uuid(), nullable=False, comment='工具ID'),
        sa.Column('saved_data', _doc, nullable=False, comment='用户工作数据（形状由工具自定义）'),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False, comment='创建时间'),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False, comment='更新时间'),
        sa.ForeignKeyConstraint(['user_id'], [_ref('users.id')], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['tool_id'], [_ref('playground_tools.id')], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('user_id', 'tool_id', name='uq_user_tool_state_user_tool'),
        schema=SCHEMA,
    )
    op.create_index('ix_user_tool_state_tool_id', 'user_tool_state', ['tool_id'], schema=SCHEMA)


def downgrade() -> None:
    op.drop_index('ix_user_tool_state_tool_id', table_name='user_tool_state', schema=SCHEMA)
    op.drop_table('user_tool_state', schema=SCHEMA)
    op.drop_index('ix_playground_tools_owner_user_id', table_name='playground_tools', schema=SCHEMA)
    op.drop_index('ix_playground_tools_is_active', table_name='playground_tools', schema=SCHEMA)
    op.drop_table('playground_tools', schema=SCHEMA)
    op.drop_table('users', schema=SCHEMA)
