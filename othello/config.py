# othello/config.py
from dataclasses import dataclass, field
from typing import List, Optional
import os
import tomllib

# Row 0 is rank 1. Kept exactly as tuned, including the -5 on B4/B5/G4/G5.
POSITION_WEIGHTS = [
    200, -20, 10, 5, 5, 10, -20, 200,
    -20, -30, -5, -5, -5, -5, -30, -20,
    10, -5, 2, 2, 2, 2, -5, 10,
    5, -5, 2, 1, 1, 2, -5, 5,
    5, -5, 2, 1, 1, 2, -5, 5,
    10, -5, 2, 2, 2, 2, -5, 10,
    -20, -30, -5, -5, -5, -5, -30, -20,
    200, -20, 10, 5, 5, 10, -20, 200,
]

@dataclass
class SearchConfig:
    depth: int = 5
    max_depth: int = 10  # hard cap against tree explosion

@dataclass
class EvalConfig:
    mobility_weight: int = 5
    position_weights: List[int] = field(default_factory=lambda: POSITION_WEIGHTS.copy())
    # total discs on board -> material multiplier
    opening_max_discs: int = 20
    midgame_max_discs: int = 40
    opening_disc_weight: float = 0.5
    midgame_disc_weight: float = 2.0
    endgame_disc_weight: float = 5.0

@dataclass
class AnalyzerConfig:
    # loss versus the engine's best move, in evaluation points
    TH_BEST: int = 0
    TH_EXCELLENT: int = 10
    TH_GOOD: int = 40
    TH_INACCURACY: int = 100
    TH_MISTAKE: int = 250

@dataclass
class UIConfig:
    engine_name: str = "YAO Othello"
    human_color: str = "black"
    ai_delay_s: float = 0.0

@dataclass
class Config:
    search: SearchConfig = field(default_factory=SearchConfig)
    eval: EvalConfig = field(default_factory=EvalConfig)
    analyzer: AnalyzerConfig = field(default_factory=AnalyzerConfig)
    ui: UIConfig = field(default_factory=UIConfig)
    log_level: str = "WARNING"

    @staticmethod
    def load_from_toml(path: Optional[str] = "config.toml") -> "Config":
        cfg = Config()
        if not path or not os.path.exists(path):
            return cfg
        with open(path, "rb") as f:
            raw = tomllib.load(f)
        for section in ("search", "eval", "analyzer", "ui"):
            target = getattr(cfg, section)
            for k, v in raw.get(section, {}).items():
                if hasattr(target, k):
                    setattr(target, k, v)
        if "log_level" in raw:
            cfg.log_level = str(raw["log_level"])
        return cfg

# single globally importable config instance
CONFIG = Config.load_from_toml(os.environ.get("OTHELLO_CONFIG_TOML", "config.toml"))
# allow env override of depth for quick debugging
override_depth = os.environ.get("OTHELLO_SEARCH_DEPTH")
if override_depth:
    try:
        CONFIG.search.depth = int(override_depth)
    except ValueError:
        pass
