"""
模型统一导出：Alembic 自动发现需要导入所有模型
"""

from app.db.models.base import Base
from app.db.models.tool import PlaygroundTool, UserToolState, normalize_slug
from app.db.models.user import User

__all__ = ["Base", "User", "PlaygroundTool", "UserToolState", "normalize_slug"]
