"""
创建登录用户

运行方式：
    poetry run python scripts/create_user.py USERNAME [--email EMAIL]

密码从终端交互读取，不回显。
"""

import argparse
import asyncio
import getpass
import sys
from pathlib import Path

# 确保项目根目录在 sys.path 中
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from app.db.engine import async_session
from app.playground.admin import create_user


async def main() -> int:
    parser = argparse.ArgumentParser(description="创建登录用户")
    parser.add_argument("username")
    parser.add_argument("--email")
    args = parser.parse_args()

    password = getpass.getpass("密码: ")
    if not password or password != getpass.getpass("确认密码: "):
        print("两次输入的密码不一致或为空")
        return 1

    async with async_session() as session:
        try:
            user = await create_user(session, username=args.username, password=password, email=args.email)
        except ValueError as e:
            print(e)
            return 1

    print(f"用户已创建: {user.username} ({user.id})")
    return 0


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
