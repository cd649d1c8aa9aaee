class VoidoError(Exception):
    """voido 全体の基底例外。"""


class StoreError(VoidoError):
    """Record Store に対する操作の失敗。"""


class NotFoundError(StoreError):
    """参照した todo / subtask の id が存在しない。"""


class StoreIOError(StoreError):
    """Store の読み書きそのものの失敗 (DB ロック、ディスク、スキーマ等)。"""


class ValidationError(VoidoError):
    """Store に渡す前に入力値が不正と判定された。"""


class ExternalServiceError(VoidoError):
    """AI サジェストサービスの呼び出し失敗 (one-shot コマンド専用)。"""


class OpsError(VoidoError):
    """ops 層でのユースケース実行失敗を表す例外。"""


class InvalidValueError(StoreError, ValidationError):
    """Store が SQL を実行する前に弾いた値 (enum 外の status / 空の text 等)。"""
