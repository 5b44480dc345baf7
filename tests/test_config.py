"""Unit tests for configuration loading and validation."""

import json
import sys
from pathlib import Path

# Add parent directory to path to import project modules
sys.path.insert(0, str(Path(__file__).parent.parent))

import pytest
from models.constants import DEFAULT_INSTRUMENT_DENYLIST, EXTENDED_INSTRUMENT_DENYLIST
from utils.config import ConfigError, apply_env_overrides, load_config, validate_config


@pytest.fixture
def config_file(tmp_path):
    path = tmp_path / "config.json"
    path.write_text(
        json.dumps(
            {
                "county_code": "079",
                "county_name": "Shelby",
                "filters": {"min_sale_price": 150000},
                "scraping": {"concurrency": 5},
            }
        )
    )
    return path


class TestLoadConfig:
    """Test file loading, defaults and env overrides."""

    def test_file_merged_over_defaults(self, config_file):
        config = load_config(config_file, environ={})

        assert config["county_code"] == "079"
        assert config["filters"]["min_sale_price"] == 150000
        assert config["filters"]["instrument_denylist"] == DEFAULT_INSTRUMENT_DENYLIST
        assert config["scraping"]["concurrency"] == 5
        assert config["scraping"]["request_delay_ms"] == 1000
        assert config["output"]["out_dir"] == "./data"

    def test_env_overrides(self, config_file):
        environ = {
            "MIN_SALE_PRICE": "200000",
            "INSTRUMENT_DENYLIST": "Quitclaim, Sheriff ,",
            "HEADLESS": "false",
            "SENDGRID_API_KEY": "SG.test",
            "EMAIL_TO": "a@example.com,b@example.com",
        }
        config = load_config(config_file, environ=environ)

        assert config["filters"]["min_sale_price"] == 200000
        assert config["filters"]["instrument_denylist"] == ["Quitclaim", "Sheriff"]
        assert config["scraping"]["headless"] is False
        assert config["email"]["sendgrid_api_key"] == "SG.test"
        assert config["email"]["to"] == "a@example.com,b@example.com"

    def test_invalid_env_value_ignored(self, config_file):
        config = load_config(config_file, environ={"CONCURRENCY": "many"})
        assert config["scraping"]["concurrency"] == 5

    def test_empty_env_value_ignored(self, config_file):
        config = load_config(config_file, environ={"COUNTY_CODE": ""})
        assert config["county_code"] == "079"

    def test_missing_explicit_file(self, tmp_path):
        with pytest.raises(ConfigError, match="not found"):
            load_config(tmp_path / "nope.json", environ={})

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text("{not json")
        with pytest.raises(ConfigError, match="Invalid JSON"):
            load_config(path, environ={})

    def test_defaults_not_mutated(self, config_file):
        first = load_config(config_file, environ={"MIN_SALE_PRICE": "1"})
        first["filters"]["instrument_denylist"].append("Anything")

        second = load_config(config_file, environ={})
        assert second["filters"]["min_sale_price"] == 150000
        assert "Anything" not in second["filters"]["instrument_denylist"]

    def test_apply_env_overrides_creates_section(self):
        config = apply_env_overrides({}, environ={"OUT_DIR": "/tmp/out"})
        assert config == {"output": {"out_dir": "/tmp/out"}}


class TestValidateConfig:
    """Test validation messages."""

    @pytest.fixture
    def valid(self, config_file):
        return load_config(
            config_file,
            environ={"SENDGRID_API_KEY": "SG.test", "EMAIL_TO": "a@example.com"},
        )

    def test_valid(self, valid):
        assert validate_config(valid) == []

    def test_email_required(self, config_file):
        config = load_config(config_file, environ={})
        errors = validate_config(config)
        assert "SENDGRID_API_KEY is required for email delivery" in errors
        assert "EMAIL_TO is required for email delivery" in errors

    def test_email_optional_for_dry_run(self, config_file):
        config = load_config(config_file, environ={})
        assert validate_config(config, require_email=False) == []

    @pytest.mark.parametrize("concurrency", [0, 11, "3"])
    def test_concurrency_bounds(self, valid, concurrency):
        valid["scraping"]["concurrency"] = concurrency
        assert "CONCURRENCY must be between 1 and 10" in validate_config(valid)

    def test_negative_values(self, valid):
        valid["filters"]["min_sale_price"] = -1
        valid["scraping"]["request_delay_ms"] = -5
        errors = validate_config(valid)
        assert "MIN_SALE_PRICE must be a non-negative number" in errors
        assert "REQUEST_DELAY_MS must be a non-negative number" in errors

    def test_null_numbers_reported(self, valid):
        valid["filters"]["min_sale_price"] = None
        valid["scraping"]["request_delay_ms"] = None
        errors = validate_config(valid)
        assert "MIN_SALE_PRICE must be a non-negative number" in errors
        assert "REQUEST_DELAY_MS must be a non-negative number" in errors

    def test_null_numbers_from_file(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text(json.dumps({"filters": {"min_sale_price": None}}))
        config = load_config(path, environ={})
        assert validate_config(config, require_email=False) == [
            "MIN_SALE_PRICE must be a non-negative number"
        ]


class TestDefaultDenylist:
    """Test the instrument denylist a run uses when nothing overrides it."""

    def test_resolved_default_list(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text("{}")
        config = load_config(path, environ={})
        assert config["filters"]["instrument_denylist"] == [
            "Quitclaim",
            "Deed of Trust",
            "Release",
            "Correction",
            "Trustee",
            "Executor",
            "Sheriff",
            "Tax Deed",
            "Affidavit",
        ]

    def test_extended_list_is_opt_in(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text("{}")
        config = load_config(path, environ={})
        assert config["filters"]["instrument_denylist"] != EXTENDED_INSTRUMENT_DENYLIST
        assert "TOD" not in config["filters"]["instrument_denylist"]
