"""
Core Layer - 纯游戏逻辑

Modules:
    cards: 牌定义、强度与牌组
    actions: 出牌类型与合法出牌生成
    rules: 规则引擎
    state: 手牌、玩家与局面状态
    exchange: 换牌
    agent: 决策提供者接口
    game: 回合状态机
    config: 配置与角色数据
    errors: 异常
"""
from .cards import (
    Suit,
    Card,
    Deck,
    SUITS,
    RANKS,
    FULL_DECK,
    DIAMOND_THREE,
    MAX_STRENGTH,
    strength,
    card_to_str,
    cards_to_str,
    str_to_cards,
    cards_to_array,
)

from .actions import (
    MoveType,
    Move,
    MoveGenerator,
    group_by_rank,
)

from .rules import RuleEngine, REVOLUTION_COUNT

from .errors import (
    DaifugoError,
    InvalidMoveError,
    MalformedCharacterDataError,
    ExchangeSelectionCountError,
)

from .config import (
    AIParams,
    GameConfig,
    CharacterSpec,
    load_characters,
)

from .state import (
    Phase,
    GameEvent,
    Hand,
    Player,
    RoundState,
    PlayerView,
    GameSnapshot,
    RANK_TITLES,
    create_players,
)

from .exchange import (
    Transfer,
    ExchangeResolver,
    plan_exchange,
    select_weakest,
    select_strongest,
)

from .agent import Agent

from .game import GameMaster

__all__ = [
    # cards
    "Suit",
    "Card",
    "Deck",
    "SUITS",
    "RANKS",
    "FULL_DECK",
    "DIAMOND_THREE",
    "MAX_STRENGTH",
    "strength",
    "card_to_str",
    "cards_to_str",
    "str_to_cards",
    "cards_to_array",
    # actions
    "MoveType",
    "Move",
    "MoveGenerator",
    "group_by_rank",
    # rules
    "RuleEngine",
    "REVOLUTION_COUNT",
    # errors
    "DaifugoError",
    "InvalidMoveError",
    "MalformedCharacterDataError",
    "ExchangeSelectionCountError",
    # config
    "AIParams",
    "GameConfig",
    "CharacterSpec",
    "load_characters",
    # state
    "Phase",
    "GameEvent",
    "Hand",
    "Player",
    "RoundState",
    "PlayerView",
    "GameSnapshot",
    "RANK_TITLES",
    "create_players",
    # exchange
    "Transfer",
    "ExchangeResolver",
    "plan_exchange",
    "select_weakest",
    "select_strongest",
    # agent
    "Agent",
    # game
    "GameMaster",
]
