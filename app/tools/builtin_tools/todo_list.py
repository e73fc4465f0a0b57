"""
TodoListTool：待办列表（旧版执行接口）

服务端无状态：每次调用携带完整 todos，返回更新后的完整列表 + 统计快照。
新版前端直接通过 PUT 写 UserToolState.saved_data，本接口保留供 API 调用，
两条写入路径互不感知（见 DESIGN.md）。
"""

import uuid
from datetime import datetime, timezone
from typing import Any, Mapping

from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.tools.base import BaseTool, ToolResult


class TodoItem(BaseModel):
    """单个 Todo 条目，未知字段原样保留"""

    model_config = ConfigDict(extra="allow")

    id: str
    text: str = ""
    completed: bool = False

    @field_validator("id", mode="before")
    @classmethod
    def coerce_id_to_str(cls, v: object) -> str:
        """客户端有时传整数 id，统一转为字符串"""
        return str(v)


class _Params(BaseModel):
    action: str = "get"
    todos: list[TodoItem] = Field(default_factory=list, description="当前完整列表")
    todo_id: str | None = Field(default=None, alias="todoId")
    text: str = ""
    priority: str = "medium"
    category: str = ""
    due_date: str | None = Field(default=None, alias="dueDate")

    @field_validator("todo_id", mode="before")
    @classmethod
    def coerce_todo_id(cls, v: object) -> str | None:
        return None if v is None else str(v)


def _new_item(params: _Params) -> dict[str, Any]:
    return {
        "id": uuid.uuid4().hex[:13],
        "text": params.text,
        "completed": False,
        "priority": params.priority,
        "category": params.category,
        "dueDate": params.due_date,
        "created_at": datetime.now(timezone.utc).isoformat(),
    }


class TodoListTool(BaseTool):

    @property
    def slug(self) -> str:
        return "todo-list"

    @property
    def params_model(self) -> type[BaseModel]:
        return _Params

    def execute(self, params: _Params, config: Mapping[str, Any]) -> ToolResult:
        todos = [item.model_dump() for item in params.todos]

        # get 与未知 action 都原样返回列表
        match params.action:
            case "add":
                todos.append(_new_item(params))
            case "toggle":
                for todo in todos:
                    if todo["id"] == params.todo_id:
                        todo["completed"] = not todo["completed"]
                        break
            case "delete":
                todos = [t for t in todos if t["id"] != params.todo_id]
            case "clear_completed":
                todos = [t for t in todos if not t["completed"]]

        total = len(todos)
        completed = sum(1 for t in todos if t["completed"])
        return ToolResult.success(
            todos=todos,
            stats={
                "total": total,
                "completed": completed,
                "remaining": total - completed,
            },
        )
