"""
工具列表脚本：查看所有 Playground 工具及其状态

运行方式：
    poetry run python scripts/list_tools.py [--active | --inactive] [--user USER_ID] [--json]
"""

import argparse
import asyncio
import json
import sys
import uuid
from pathlib import Path

# 确保项目根目录在 sys.path 中
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from app.db.engine import async_session
from app.playground.admin import list_tools
from app.tools.builtin_tools import create_builtin_registry


def _parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="列出 Playground 工具")
    status = parser.add_mutually_exclusive_group()
    status.add_argument("--active", action="store_true", help="只看已启用工具")
    status.add_argument("--inactive", action="store_true", help="只看未启用工具")
    parser.add_argument("--user", type=uuid.UUID, help="按所属用户 ID 过滤")
    parser.add_argument("--json", action="store_true", help="以 JSON 输出")
    return parser.parse_args()


def _as_dict(tool, owner) -> dict:
    return {
        "id": str(tool.id),
        "name": tool.name,
        "slug": tool.slug,
        "description": tool.description,
        "icon": tool.icon,
        "component_name": tool.component_name,
        "is_active": tool.is_active,
        "user": {"id": str(owner.id), "name": owner.username, "email": owner.email} if owner else None,
        "created_at": tool.created_at.isoformat() if tool.created_at else None,
        "updated_at": tool.updated_at.isoformat() if tool.updated_at else None,
    }


def _print_table(rows) -> None:
    registry = create_builtin_registry()
    headers = ["Name", "Slug", "Status", "Icon", "Component", "Owner", "Executable", "Created"]
    table = [
        [
            tool.name,
            tool.slug,
            "Active" if tool.is_active else "Inactive",
            tool.icon,
            tool.component_name,
            f"{owner.username} ({owner.email or '-'})" if owner else "System",
            "yes" if registry.has_tool(tool.slug) else "no",
            tool.created_at.strftime("%Y-%m-%d") if tool.created_at else "-",
        ]
        for tool, owner in rows
    ]
    widths = [max(len(str(cell)) for cell in column) for column in zip(headers, *table)]

    print(f"共 {len(rows)} 个工具：\n")
    print("  ".join(h.ljust(w) for h, w in zip(headers, widths)))
    print("  ".join("-" * w for w in widths))
    for line in table:
        print("  ".join(str(cell).ljust(w) for cell, w in zip(line, widths)))

    active = sum(1 for tool, _ in rows if tool.is_active)
    system = sum(1 for tool, _ in rows if tool.is_system)
    print("\n汇总：")
    print(f"• 启用: {active}, 未启用: {len(rows) - active}")
    print(f"• 系统工具: {system}, 用户工具: {len(rows) - system}")

    print("\n工具地址：")
    for tool, _ in rows:
        if tool.is_active:
            print(f"• {tool.name}: /playground/tools/{tool.slug}")


async def main() -> int:
    args = _parse_args()
    active = True if args.active else False if args.inactive else None

    async with async_session() as session:
        rows = await list_tools(session, active=active, owner_user_id=args.user)

    if args.json:
        print(json.dumps([_as_dict(tool, owner) for tool, owner in rows], ensure_ascii=False, indent=2))
    elif not rows:
        print("没有找到工具。")
    else:
        _print_table(rows)
    return 0


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
