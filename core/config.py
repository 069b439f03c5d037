"""
配置

- AIParams: AI 评估权重
- GameConfig: 规则/牌局配置
- CharacterSpec: 角色数据 (开局前加载一次)
"""
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Union
import json
import logging

from .errors import MalformedCharacterDataError

logger = logging.getLogger(__name__)


PASS_RULES = ("literal", "active")


@dataclass(frozen=True)
class AIParams:
    """
    AI 评估权重

    Attributes:
        w_attack: 进攻倾向 (出牌的基础动力)
        w_defense: 防守倾向 (保留组合)
        w_revolution: 革命倾向
        w_trump: 保留王牌的倾向
        epsilon: 随机扰动幅度
    """
    w_attack: float = 0.5
    w_defense: float = 0.5
    w_revolution: float = 0.5
    w_trump: float = 0.5
    epsilon: float = 0.1

    @classmethod
    def from_dict(cls, d: Optional[Mapping[str, Any]]) -> 'AIParams':
        if not d:
            return cls()
        valid_keys = cls.__dataclass_fields__.keys()
        filtered = {k: float(v) for k, v in d.items() if k in valid_keys}
        return cls(**filtered)


@dataclass
class GameConfig:
    """
    牌局配置

    Attributes:
        num_players: 玩家数
        hand_size: 每人发牌张数
        pass_rule: 清场规则
            "literal": 连续 3 次过牌清场
            "active": 其余仍在出牌的玩家都过牌后清场
        seed: 随机种子
    """
    num_players: int = 4
    hand_size: int = 13
    pass_rule: str = "literal"
    seed: Optional[int] = None

    def __post_init__(self):
        if self.pass_rule not in PASS_RULES:
            raise ValueError(f"pass_rule must be one of {PASS_RULES}, got {self.pass_rule!r}")
        if self.num_players * self.hand_size > 52:
            raise ValueError(
                f"Cannot deal {self.hand_size} cards to {self.num_players} players"
            )

    @classmethod
    def from_dict(cls, d: dict) -> 'GameConfig':
        valid_keys = cls.__dataclass_fields__.keys()
        filtered = {k: v for k, v in d.items() if k in valid_keys}
        return cls(**filtered)


@dataclass
class CharacterSpec:
    """
    角色定义

    Attributes:
        id: 角色 ID
        name: 显示名
        is_ai: 是否由电脑控制
        params: AI 参数
        dialogues: 台词池 (仅供展示层使用)
    """
    id: str
    name: str
    is_ai: bool
    params: AIParams = field(default_factory=AIParams)
    dialogues: Dict[str, List[str]] = field(default_factory=dict)
    icon: str = ""
    color: str = ""
    description: str = ""

    @classmethod
    def from_dict(cls, char_id: str, d: Mapping[str, Any]) -> 'CharacterSpec':
        """
        从原始数据创建

        必填字段: name, isAI (兼容 isCpu / is_ai)

        Raises:
            MalformedCharacterDataError: 缺少必填字段或类型错误
        """
        if not isinstance(d, Mapping):
            raise MalformedCharacterDataError(f"Character {char_id!r} must be an object")

        name = d.get("name")
        if not name or not isinstance(name, str):
            raise MalformedCharacterDataError(f"Character {char_id!r} is missing 'name'")

        is_ai = None
        for key in ("isAI", "isCpu", "is_ai"):
            if key in d:
                is_ai = d[key]
                break
        if not isinstance(is_ai, bool):
            raise MalformedCharacterDataError(f"Character {char_id!r} is missing 'isAI'")

        params = d.get("params")
        if params is not None and not isinstance(params, Mapping):
            raise MalformedCharacterDataError(f"Character {char_id!r} has invalid 'params'")
        try:
            ai_params = AIParams.from_dict(params)
        except (TypeError, ValueError) as e:
            raise MalformedCharacterDataError(
                f"Character {char_id!r} has non-numeric params: {e}"
            ) from e

        return cls(
            id=char_id,
            name=name,
            is_ai=is_ai,
            params=ai_params,
            dialogues=dict(d.get("dialogues") or {}),
            icon=d.get("icon", ""),
            color=d.get("color", ""),
            description=d.get("description", ""),
        )


def load_characters(
    source: Union[str, Path, List[Mapping[str, Any]], Mapping[str, Mapping[str, Any]]],
) -> Dict[str, CharacterSpec]:
    """
    加载角色数据

    Args:
        source: JSON 文件路径、带 id 字段的列表、或 id -> 数据 的映射

    Returns:
        id -> CharacterSpec
    """
    if isinstance(source, (str, Path)):
        path = Path(source)
        with open(path, encoding="utf-8") as f:
            source = json.load(f)
        logger.debug(f"Read character data from {path}")

    characters: Dict[str, CharacterSpec] = {}
    if isinstance(source, Mapping):
        for char_id, data in source.items():
            characters[str(char_id)] = CharacterSpec.from_dict(str(char_id), data)
    elif isinstance(source, list):
        for data in source:
            if not isinstance(data, Mapping) or "id" not in data:
                raise MalformedCharacterDataError("Character entry is missing 'id'")
            char_id = str(data["id"])
            characters[char_id] = CharacterSpec.from_dict(char_id, data)
    else:
        raise MalformedCharacterDataError(
            f"Unsupported character data type: {type(source).__name__}"
        )

    logger.info(f"Loaded {len(characters)} characters")
    return characters
