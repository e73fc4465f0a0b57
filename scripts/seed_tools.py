"""
种子数据脚本：写入默认 Playground 工具

运行方式：
    poetry run python scripts/seed_tools.py

幂等设计：按 slug 判断是否已存在，存在则更新展示字段，不存在则插入。
"""

import asyncio
import sys
from pathlib import Path

# 确保项目根目录在 sys.path 中
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from app.db.engine import async_session
from app.playground.admin import seed_default_tools


async def seed():
    """插入或更新默认工具"""
    async with async_session() as session:
        report = await seed_default_tools(session)

    for slug in report.created:
        print(f"  [新增] {slug}")
    for slug in report.updated:
        print(f"  [更新] {slug}")
    print(f"\n默认工具写入完成，共 {len(report.created) + len(report.updated)} 条")


if __name__ == "__main__":
    print("=== 开始写入默认工具 ===\n")
    asyncio.run(seed())
    print("\n=== 完成 ===")
