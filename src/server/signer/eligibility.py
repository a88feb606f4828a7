"""
签名前的资格校验接口。

公开接口：
    - EligibilityOracle: 资格校验协议，实现 is_eligible(course_id, user_address) -> bool
    - AllowAllOracle: 默认实现，对所有请求放行
"""

from __future__ import annotations

from typing import Protocol


class EligibilityOracle(Protocol):
    async def is_eligible(self, course_id: str, user_address: str) -> bool:
        """判断用户是否有资格获得该课程的签名。"""
        ...


class AllowAllOracle:
    """不做任何资格限制。"""

    async def is_eligible(self, course_id: str, user_address: str) -> bool:
        return True
