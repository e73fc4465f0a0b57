"""
工具移除脚本：删除工具行，用户数据随外键级联删除

运行方式：
    poetry run python scripts/remove_tool.py SLUG [--force]

只处理数据库中的记录，前端组件文件需手动清理。
"""

import argparse
import asyncio
import sys
from pathlib import Path

# 确保项目根目录在 sys.path 中
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from app.db.engine import async_session
from app.playground.admin import remove_tool


def _parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="移除 Playground 工具")
    parser.add_argument("slug", help="工具 slug")
    parser.add_argument("--force", action="store_true", help="跳过确认")
    return parser.parse_args()


async def main() -> int:
    args = _parse_args()

    if not args.force:
        answer = input(f"确认移除工具 {args.slug} 及其所有用户数据？[y/N] ")
        if answer.strip().lower() not in ("y", "yes"):
            print("已取消")
            return 1

    async with async_session() as session:
        report = await remove_tool(session, args.slug)

    if report is None:
        print(f"工具不存在: {args.slug}")
        return 1

    print(f"已移除 {report.name} ({report.slug})，清理用户数据 {report.removed_states} 条")
    return 0


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
