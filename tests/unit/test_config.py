"""
test_config.py - Tests for configuration loading

Tests for:
- Defaults
- Environment overrides
- JSON file loading
- Serialization without secrets
"""

import json

import pytest


class TestPharmaPlanConfig:
    """Tests for PharmaPlanConfig."""

    def test_layout_defaults(self):
        """Placement constants have their documented defaults."""
        from pharmaplan.bootstrap.config import LayoutConfig

        config = LayoutConfig()
        assert config.iterations == 150
        assert config.attraction_strength == 0.3
        assert config.repulsion_strength == 50.0
        assert config.damping == 0.8
        assert config.min_distance == 2.0
        assert config.pixels_per_meter == 40.0
        assert config.canvas_margin == 100.0
        assert config.proximity_factor == 1.5
        assert config.seed is None

    def test_llm_fallback_defaults(self, monkeypatch):
        """Rationale falls back by default; room extraction does not."""
        from pharmaplan.bootstrap.config import LLMConfig

        monkeypatch.delenv("PHARMAPLAN_LLM_EXTRACTION_FALLBACK", raising=False)
        assert LLMConfig().fallback_to_deterministic is True
        assert LLMConfig().extraction_fallback is False
        assert LLMConfig.from_env().extraction_fallback is False

        monkeypatch.setenv("PHARMAPLAN_LLM_EXTRACTION_FALLBACK", "true")
        assert LLMConfig.from_env().extraction_fallback is True

    def test_env_overrides(self, monkeypatch):
        """Environment variables override defaults."""
        from pharmaplan.bootstrap.config import PharmaPlanConfig

        monkeypatch.setenv("PHARMAPLAN_LAYOUT_SEED", "99")
        monkeypatch.setenv("PHARMAPLAN_LLM_PROVIDER", "local")
        monkeypatch.setenv("PHARMAPLAN_RELATIONSHIP_DEGRADE", "false")
        monkeypatch.setenv("PHARMAPLAN_RELATIONSHIP_TYPES", "MATERIAL_FLOW, PROHIBITED_NEAR")

        config = PharmaPlanConfig.from_env()

        assert config.layout.seed == 99
        assert config.llm.provider == "local"
        assert config.relationships.degrade_on_query_error is False
        assert config.relationships.allowed_types == ["MATERIAL_FLOW", "PROHIBITED_NEAR"]

    def test_from_file(self, tmp_path, monkeypatch):
        """File values are applied per section; unknown keys are ignored."""
        from pharmaplan.bootstrap.config import PharmaPlanConfig

        monkeypatch.delenv("PHARMAPLAN_LAYOUT_SEED", raising=False)
        path = tmp_path / "pharmaplan.json"
        path.write_text(json.dumps({
            "environment": "test",
            "layout": {"seed": 7, "iterations": 50, "bogus": 1},
            "scoring": {"prohibited_penalty": 15},
        }))

        config = PharmaPlanConfig.from_file(str(path))

        assert config.environment == "test"
        assert config.layout.seed == 7
        assert config.layout.iterations == 50
        assert not hasattr(config.layout, "bogus")
        assert config.scoring.prohibited_penalty == 15

    def test_missing_file_uses_defaults(self, tmp_path):
        """A missing file is not an error."""
        from pharmaplan.bootstrap.config import PharmaPlanConfig

        config = PharmaPlanConfig.from_file(str(tmp_path / "absent.json"))
        assert config.layout.canvas_margin == 100.0

    def test_to_dict_omits_api_key(self):
        """Secrets never appear in serialized config."""
        from pharmaplan.bootstrap.config import PharmaPlanConfig

        config = PharmaPlanConfig()
        config.llm.api_key = "sk-secret"
        data = config.to_dict()

        assert "api_key" not in data["llm"]
        assert "sk-secret" not in json.dumps(data)
        assert data["layout"]["iterations"] == 150

    def test_load_config_explicit_path(self, tmp_path):
        """load_config reads the given file."""
        from pharmaplan.bootstrap.config import load_config

        path = tmp_path / "custom.json"
        path.write_text(json.dumps({"logging": {"level": "DEBUG"}}))

        assert load_config(str(path)).logging.level == "DEBUG"
