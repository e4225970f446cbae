# chinese_whispers/config.py
from __future__ import annotations
from dataclasses import dataclass, asdict
from typing import Any, Dict, Optional


@dataclass
class ChineseWhispersConfig:
    """
    Settings for one Chinese Whispers clustering run.
    """
    num_iterations: int = 100          # propagation steps per node
    random_state: Optional[int] = None # seed for node sampling; None = fresh entropy
    batch_size: int = 1 << 20          # node ids drawn per sampler call
    verbose: bool = False

    def __post_init__(self):
        if self.num_iterations < 0:
            raise ValueError(f"num_iterations must be non-negative, got {self.num_iterations}")
        if self.batch_size < 1:
            raise ValueError(f"batch_size must be positive, got {self.batch_size}")

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)
