"""
bootstrap/config.py - Application configuration v1.0

Bootstrap Layer

Provides configuration loading from files, environment variables, and defaults.
"""

from __future__ import annotations
from dataclasses import dataclass, field, asdict
from typing import Any, Dict, List, Optional
from pathlib import Path
import os
import json
import logging

logger = logging.getLogger("bootstrap.config")

__all__ = [
    'LLMConfig',
    'LayoutConfig',
    'RelationshipConfig',
    'ScoringConfig',
    'LoggingConfig',
    'PharmaPlanConfig',
    'load_config',
    'DEFAULT_ALLOWED_RELATIONSHIP_TYPES',
]


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() == "true"


def _env_optional_int(name: str) -> Optional[int]:
    value = os.getenv(name)
    if value is None or value == "":
        return None
    return int(value)


DEFAULT_ALLOWED_RELATIONSHIP_TYPES = [
    "MATERIAL_FLOW",
    "PERSONNEL_FLOW",
    "REQUIRES_ACCESS",
    "PROHIBITED_NEAR",
]


@dataclass
class LLMConfig:
    """Text-generation provider configuration."""

    # Provider settings
    provider: str = "anthropic"  # anthropic | local | ollama | rule_based
    model: str = "claude-sonnet-4-20250514"
    api_key: str = ""
    base_url: Optional[str] = None  # For local LLM (Ollama)
    max_tokens: int = 2048
    temperature: float = 0.3
    timeout_seconds: int = 60

    # Safety
    fallback_to_deterministic: bool = True  # Template rationale if the LLM fails
    extraction_fallback: bool = False  # Rule-based room extraction if the LLM fails
    retry_attempts: int = 2
    retry_delay_ms: int = 1000

    @classmethod
    def from_env(cls) -> "LLMConfig":
        return cls(
            provider=os.getenv("PHARMAPLAN_LLM_PROVIDER", "anthropic"),
            model=os.getenv("PHARMAPLAN_LLM_MODEL", "claude-sonnet-4-20250514"),
            api_key=os.getenv("PHARMAPLAN_LLM_API_KEY", os.getenv("ANTHROPIC_API_KEY", "")),
            base_url=os.getenv("PHARMAPLAN_LLM_BASE_URL"),
            max_tokens=int(os.getenv("PHARMAPLAN_LLM_MAX_TOKENS", "2048")),
            temperature=float(os.getenv("PHARMAPLAN_LLM_TEMPERATURE", "0.3")),
            timeout_seconds=int(os.getenv("PHARMAPLAN_LLM_TIMEOUT", "60")),
            fallback_to_deterministic=_env_bool("PHARMAPLAN_LLM_FALLBACK", "true"),
            extraction_fallback=_env_bool("PHARMAPLAN_LLM_EXTRACTION_FALLBACK", "false"),
            retry_attempts=int(os.getenv("PHARMAPLAN_LLM_RETRY_ATTEMPTS", "2")),
            retry_delay_ms=int(os.getenv("PHARMAPLAN_LLM_RETRY_DELAY_MS", "1000")),
        )


@dataclass
class LayoutConfig:
    """Force simulation and geometry constants. Lengths are metres unless noted."""

    # Force simulation
    iterations: int = 150
    attraction_strength: float = 0.3
    repulsion_strength: float = 50.0
    clustering_strength: float = 0.2
    prohibited_repulsion_multiplier: float = 3.0
    repulsion_radius: float = 50.0
    damping: float = 0.8
    initial_extent: float = 100.0
    seed: Optional[int] = None

    # Overlap resolution
    min_distance: float = 2.0
    max_overlap_rounds: int = 10
    overlap_slack: float = 0.05

    # Projection (pixels)
    pixels_per_meter: float = 40.0
    canvas_margin: float = 100.0

    # Connectors and airlocks
    proximity_factor: float = 1.5
    airlock_gap_threshold: int = 2

    @classmethod
    def from_env(cls) -> "LayoutConfig":
        return cls(
            iterations=int(os.getenv("PHARMAPLAN_LAYOUT_ITERATIONS", "150")),
            attraction_strength=float(os.getenv("PHARMAPLAN_LAYOUT_ATTRACTION", "0.3")),
            repulsion_strength=float(os.getenv("PHARMAPLAN_LAYOUT_REPULSION", "50.0")),
            clustering_strength=float(os.getenv("PHARMAPLAN_LAYOUT_CLUSTERING", "0.2")),
            prohibited_repulsion_multiplier=float(
                os.getenv("PHARMAPLAN_LAYOUT_PROHIBITED_MULTIPLIER", "3.0")
            ),
            repulsion_radius=float(os.getenv("PHARMAPLAN_LAYOUT_REPULSION_RADIUS", "50.0")),
            damping=float(os.getenv("PHARMAPLAN_LAYOUT_DAMPING", "0.8")),
            initial_extent=float(os.getenv("PHARMAPLAN_LAYOUT_INITIAL_EXTENT", "100.0")),
            seed=_env_optional_int("PHARMAPLAN_LAYOUT_SEED"),
            min_distance=float(os.getenv("PHARMAPLAN_LAYOUT_MIN_DISTANCE", "2.0")),
            max_overlap_rounds=int(os.getenv("PHARMAPLAN_LAYOUT_OVERLAP_ROUNDS", "10")),
            overlap_slack=float(os.getenv("PHARMAPLAN_LAYOUT_OVERLAP_SLACK", "0.05")),
            pixels_per_meter=float(os.getenv("PHARMAPLAN_LAYOUT_PIXELS_PER_METER", "40.0")),
            canvas_margin=float(os.getenv("PHARMAPLAN_LAYOUT_MARGIN", "100.0")),
            proximity_factor=float(os.getenv("PHARMAPLAN_LAYOUT_PROXIMITY_FACTOR", "1.5")),
            airlock_gap_threshold=int(os.getenv("PHARMAPLAN_LAYOUT_AIRLOCK_GAP", "2")),
        )


@dataclass
class RelationshipConfig:
    """Relationship retrieval policy."""

    allowed_types: List[str] = field(
        default_factory=lambda: list(DEFAULT_ALLOWED_RELATIONSHIP_TYPES)
    )
    default_priority: int = 5
    degrade_on_query_error: bool = True  # False aborts the request on any failed pair
    rules_file: Optional[str] = None  # Extra JSON rules merged into the default store

    @classmethod
    def from_env(cls) -> "RelationshipConfig":
        allowed = os.getenv("PHARMAPLAN_RELATIONSHIP_TYPES")
        return cls(
            allowed_types=(
                [t.strip() for t in allowed.split(",") if t.strip()]
                if allowed else list(DEFAULT_ALLOWED_RELATIONSHIP_TYPES)
            ),
            default_priority=int(os.getenv("PHARMAPLAN_RELATIONSHIP_DEFAULT_PRIORITY", "5")),
            degrade_on_query_error=_env_bool("PHARMAPLAN_RELATIONSHIP_DEGRADE", "true"),
            rules_file=os.getenv("PHARMAPLAN_RELATIONSHIP_RULES_FILE"),
        )


@dataclass
class ScoringConfig:
    """Compliance scoring and suggestion thresholds."""

    prohibited_penalty: int = 10
    no_relationship_penalty: int = 20
    max_flow_distance: float = 125.0  # m, flows this long score zero efficiency
    high_cleanroom_utilization: float = 70.0  # %
    low_flow_efficiency: float = 0.6

    @classmethod
    def from_env(cls) -> "ScoringConfig":
        return cls(
            prohibited_penalty=int(os.getenv("PHARMAPLAN_SCORING_PROHIBITED_PENALTY", "10")),
            no_relationship_penalty=int(
                os.getenv("PHARMAPLAN_SCORING_NO_RELATIONSHIP_PENALTY", "20")
            ),
            max_flow_distance=float(os.getenv("PHARMAPLAN_SCORING_MAX_FLOW_DISTANCE", "125.0")),
            high_cleanroom_utilization=float(
                os.getenv("PHARMAPLAN_SCORING_HIGH_UTILIZATION", "70.0")
            ),
            low_flow_efficiency=float(os.getenv("PHARMAPLAN_SCORING_LOW_EFFICIENCY", "0.6")),
        )


@dataclass
class LoggingConfig:
    """Logging configuration."""

    level: str = "INFO"
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    log_file: Optional[str] = None
    json_logs: bool = False

    @classmethod
    def from_env(cls) -> "LoggingConfig":
        return cls(
            level=os.getenv("PHARMAPLAN_LOG_LEVEL", "INFO"),
            format=os.getenv(
                "PHARMAPLAN_LOG_FORMAT",
                "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            ),
            log_file=os.getenv("PHARMAPLAN_LOG_FILE"),
            json_logs=_env_bool("PHARMAPLAN_JSON_LOGS", "false"),
        )


@dataclass
class PharmaPlanConfig:
    """Root configuration for pharmaplan."""

    environment: str = "development"
    debug: bool = False
    version: str = "1.0.0"

    llm: LLMConfig = field(default_factory=LLMConfig)
    layout: LayoutConfig = field(default_factory=LayoutConfig)
    relationships: RelationshipConfig = field(default_factory=RelationshipConfig)
    scoring: ScoringConfig = field(default_factory=ScoringConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @classmethod
    def from_env(cls) -> "PharmaPlanConfig":
        """Create configuration from environment variables."""
        return cls(
            environment=os.getenv("PHARMAPLAN_ENVIRONMENT", "development"),
            debug=_env_bool("PHARMAPLAN_DEBUG", "false"),
            llm=LLMConfig.from_env(),
            layout=LayoutConfig.from_env(),
            relationships=RelationshipConfig.from_env(),
            scoring=ScoringConfig.from_env(),
            logging=LoggingConfig.from_env(),
        )

    @classmethod
    def from_file(cls, filepath: str) -> "PharmaPlanConfig":
        """Load configuration from JSON file."""
        path = Path(filepath)
        if not path.exists():
            logger.warning(f"Config file not found: {filepath}, using defaults")
            return cls.from_env()

        with open(path) as f:
            data = json.load(f)

        return cls._from_dict(data)

    @classmethod
    def _from_dict(cls, data: Dict[str, Any]) -> "PharmaPlanConfig":
        """Create config from dictionary, file values over environment."""
        config = cls.from_env()

        if "environment" in data:
            config.environment = data["environment"]
        if "debug" in data:
            config.debug = data["debug"]

        for section in ("llm", "layout", "relationships", "scoring", "logging"):
            if section not in data:
                continue
            target = getattr(config, section)
            for key, value in data[section].items():
                if hasattr(target, key):
                    setattr(target, key, value)
                else:
                    logger.warning(f"Unknown config key ignored: {section}.{key}")

        return config

    def to_dict(self) -> Dict[str, Any]:
        """Serialize config to dictionary (API key omitted)."""
        llm = asdict(self.llm)
        llm.pop("api_key", None)
        return {
            "environment": self.environment,
            "debug": self.debug,
            "version": self.version,
            "llm": llm,
            "layout": asdict(self.layout),
            "relationships": asdict(self.relationships),
            "scoring": asdict(self.scoring),
            "logging": asdict(self.logging),
        }


DEFAULT_CONFIG_PATHS = (
    "./pharmaplan.json",
    "./config/pharmaplan.json",
    "~/.pharmaplan/config.json",
)


def load_config(filepath: Optional[str] = None) -> PharmaPlanConfig:
    """
    Load configuration from file or environment.

    Args:
        filepath: Optional path to JSON config file

    Returns:
        PharmaPlanConfig instance
    """
    if filepath:
        config = PharmaPlanConfig.from_file(filepath)
    else:
        config = None
        for path in DEFAULT_CONFIG_PATHS:
            expanded = os.path.expanduser(path)
            if Path(expanded).exists():
                logger.info(f"Loading config from: {expanded}")
                config = PharmaPlanConfig.from_file(expanded)
                break

        if config is None:
            config = PharmaPlanConfig.from_env()

    logger.info(f"Configuration loaded: environment={config.environment}")
    return config
