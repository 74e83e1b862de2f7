"""typesense クライアントライブラリの例外型定義"""

from __future__ import annotations


class TypesenseClientError(Exception):
    """typesense クライアントライブラリのエラー基底クラス。

    リモート呼び出しの結果として発生したエラーは status_code と
    レスポンスボディの生データ body を保持する。
    """

    def __init__(
        self,
        code: str,
        message: str,
        cause: Exception | None = None,
        status_code: int | None = None,
        body: bytes | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.status_code = status_code
        self.body = body
        if cause is not None:
            self.__cause__ = cause

    def __str__(self) -> str:
        return f"{self.code}: {super().__str__()}"

    @property
    def is_retryable(self) -> bool:
        """呼び出し側でリトライしてよいエラーかどうか。"""
        return self.code in (
            TypesenseClientErrorCodes.SERVER_ERROR,
            TypesenseClientErrorCodes.TRANSPORT_FAILURE,
        )


class TypesenseClientErrorCodes:
    """TypesenseClientError のエラーコード定数。"""

    INVALID_ARGUMENT: str = "INVALID_ARGUMENT"
    NOT_FOUND: str = "NOT_FOUND"
    CONFLICT: str = "CONFLICT"
    VALIDATION_FAILED: str = "VALIDATION_FAILED"
    UNAUTHORIZED: str = "UNAUTHORIZED"
    SERVER_ERROR: str = "SERVER_ERROR"
    UNKNOWN: str = "UNKNOWN"
    TRANSPORT_FAILURE: str = "TRANSPORT_FAILURE"
    CONFIG_ERROR: str = "CONFIG_ERROR"


def code_for_status(status_code: int) -> str:
    """HTTP ステータスコードをエラーコードに変換する。"""
    if status_code == 404:
        return TypesenseClientErrorCodes.NOT_FOUND
    if status_code == 409:
        return TypesenseClientErrorCodes.CONFLICT
    if status_code in (400, 422):
        return TypesenseClientErrorCodes.VALIDATION_FAILED
    if status_code in (401, 403):
        return TypesenseClientErrorCodes.UNAUTHORIZED
    if 500 <= status_code < 600:
        return TypesenseClientErrorCodes.SERVER_ERROR
    return TypesenseClientErrorCodes.UNKNOWN


def raise_for_status(status_code: int, body: bytes, context: str) -> None:
    """2xx 以外のレスポンスを TypesenseClientError として送出する。"""
    if 200 <= status_code < 300:
        return
    text = body.decode("utf-8", errors="replace")
    raise TypesenseClientError(
        code=code_for_status(status_code),
        message=f"{context}: HTTP {status_code}: {text}",
        status_code=status_code,
        body=body,
    )


def invalid_argument(message: str) -> TypesenseClientError:
    """ネットワーク呼び出し前の引数検証エラーを生成する。"""
    return TypesenseClientError(
        code=TypesenseClientErrorCodes.INVALID_ARGUMENT,
        message=message,
    )
