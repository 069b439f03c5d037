"""
异常定义

所有被拒绝的操作都会抛给调用方，引擎本身不做重试
"""


class DaifugoError(Exception):
    """引擎异常基类"""


class InvalidMoveError(DaifugoError, ValueError):
    """出牌不合法 (状态不变，当前玩家保留出牌权)"""

    def __init__(self, message: str, seat: int = -1):
        super().__init__(message)
        self.seat = seat


class MalformedCharacterDataError(DaifugoError, ValueError):
    """角色数据缺少必填字段 (开局前的致命错误)"""


class ExchangeSelectionCountError(DaifugoError, ValueError):
    """换牌时选择的张数不对"""

    def __init__(self, expected: int, actual: int, seat: int = -1):
        super().__init__(f"Seat {seat} must select {expected} cards, got {actual}")
        self.expected = expected
        self.actual = actual
        self.seat = seat
