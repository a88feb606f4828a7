"""
签名服务的核心逻辑实现。
包括加载稳定的 Ed25519 签名身份、计算课程/用户摘要、生成与验证分离签名。
"""

import base64
import hashlib

import base58
from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives.asymmetric.ed25519 import (
    Ed25519PrivateKey,
    Ed25519PublicKey,
)
from cryptography.hazmat.primitives.serialization import Encoding, PublicFormat

from src.server.errors import ConfigurationError

KEY_TYPE_PREFIX = "ed25519:"
SEED_LENGTH = 32
SECRET_KEY_LENGTH = 64


class SigningIdentity:
    """
    网关长期使用的签名身份。
    进程启动时构造一次，签名与公钥披露共用同一个实例。
    """

    def __init__(self, private_key: Ed25519PrivateKey):
        self._private_key = private_key
        self._public_key_bytes = private_key.public_key().public_bytes(
            encoding=Encoding.Raw, format=PublicFormat.Raw
        )

    @classmethod
    def from_near_secret(cls, secret: str) -> "SigningIdentity":
        """
        从 NEAR 格式的私钥字符串加载签名身份。
        :param secret: 形如 ``ed25519:<base58>`` 的私钥，载荷为 64 字节（种子+公钥）或 32 字节种子。
        :return: SigningIdentity 实例。
        :raises ConfigurationError: 前缀、编码或长度不合法，或内嵌公钥与种子不匹配。
        """
        text = (secret or "").strip()
        if not text.startswith(KEY_TYPE_PREFIX):
            raise ConfigurationError("私钥必须以 'ed25519:' 开头")
        try:
            raw = base58.b58decode(text[len(KEY_TYPE_PREFIX):])
        except ValueError as e:
            raise ConfigurationError("私钥不是合法的 base58 编码") from e

        if len(raw) not in (SEED_LENGTH, SECRET_KEY_LENGTH):
            raise ConfigurationError(f"私钥长度无效: {len(raw)} 字节")

        identity = cls(Ed25519PrivateKey.from_private_bytes(raw[:SEED_LENGTH]))
        if len(raw) == SECRET_KEY_LENGTH and raw[SEED_LENGTH:] != identity.public_key_bytes:
            raise ConfigurationError("私钥内嵌的公钥与种子不匹配")
        return identity

    @property
    def public_key_bytes(self) -> bytes:
        return self._public_key_bytes

    @property
    def public_key_b64(self) -> str:
        return base64.b64encode(self._public_key_bytes).decode("utf-8")

    @property
    def near_public_key(self) -> str:
        """NEAR 格式的公钥（``ed25519:<base58>``），即账户的访问密钥。"""
        return KEY_TYPE_PREFIX + base58.b58encode(self._public_key_bytes).decode("ascii")

    def sign(self, data: bytes) -> bytes:
        return self._private_key.sign(data)

    def __repr__(self) -> str:
        return f"SigningIdentity(public_key={self.near_public_key})"


def compute_digest(course_id: str, user_address: str) -> str:
    """
    计算课程与用户地址绑定的摘要。
    :return: SHA-256(utf8("<course_id>:<user_address>")) 的小写十六进制字符串。
    """
    input_string = f"{course_id}:{user_address}"
    return hashlib.sha256(input_string.encode("utf-8")).hexdigest()


def sign_attestation(identity: SigningIdentity, course_id: str, user_address: str) -> tuple[str, str]:
    """
    对课程/用户摘要进行分离签名。
    签名对象为十六进制摘要字符串的 UTF-8 字节。
    :return: (十六进制摘要, Base64 编码的签名)
    """
    message = compute_digest(course_id, user_address)
    signature = identity.sign(message.encode("utf-8"))
    return message, base64.b64encode(signature).decode("utf-8")


def verify_attestation(
    public_key_b64: str, course_id: str, user_address: str, signature_b64: str
) -> bool:
    """
    使用固定公钥验证签名是否绑定给定的课程与用户。
    :param public_key_b64: Base64 编码的 32 字节 Ed25519 公钥。
    :param signature_b64: Base64 编码的签名。
    :return: 验证成功返回 True，否则返回 False。
    """
    try:
        public_key = Ed25519PublicKey.from_public_bytes(base64.b64decode(public_key_b64, validate=True))
        signature = base64.b64decode(signature_b64, validate=True)
        message = compute_digest(course_id, user_address)
        public_key.verify(signature, message.encode("utf-8"))
        return True
    except (ValueError, InvalidSignature):
        return False
