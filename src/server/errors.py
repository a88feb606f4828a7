"""
网关统一的异常类型定义。

路由层根据异常类型映射 HTTP 状态码：
- ValidationError -> 400
- NotEligibleError -> 403
- DuplicateMintError -> 409
- RemoteCallError -> 500
- RemoteCallTimeoutError -> 504
- ConfigurationError -> 启动失败，进程不提供服务
"""


class GatewayError(Exception):
    """网关所有业务异常的基类。"""


class ValidationError(GatewayError, ValueError):
    """请求字段缺失或格式错误。"""


class NotEligibleError(GatewayError):
    """资格校验未通过，拒绝签名。"""


class DuplicateMintError(GatewayError):
    """同一 token_id 已铸造或正在铸造。"""


class RemoteCallError(GatewayError, RuntimeError):
    """链上合约调用失败，消息原样透传。"""


class RemoteCallTimeoutError(RemoteCallError, TimeoutError):
    """链上合约调用超时。"""


class ConfigurationError(GatewayError, RuntimeError):
    """启动配置缺失或无效。"""


def require_fields(**fields) -> None:
    """
    校验必填字段。None 或仅含空白的字符串视为缺失。
    :raises ValidationError: 列出全部缺失字段。
    """
    missing = [
        name
        for name, value in fields.items()
        if value is None or (isinstance(value, str) and not value.strip())
    ]
    if missing:
        raise ValidationError(f"缺少必填字段: {', '.join(missing)}")
