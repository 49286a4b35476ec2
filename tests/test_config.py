"""Tests for config loading."""

from prompt_refiner.config import AppConfig, LLMConfig, UIConfig, load_config


class TestConfig:
    def test_defaults(self):
        config = AppConfig()
        assert config.llm.model == "claude-haiku-4-5-20251001"
        assert config.llm.max_retries == 1
        assert config.ui.max_input_chars == 10000

    def test_load_config_defaults(self, tmp_path):
        """Loading from non-existent path returns defaults."""
        config = load_config(tmp_path / "nonexistent.yaml")
        assert config.llm.timeout == 60
        assert config.ui.max_input_chars == 10000

    def test_load_config_from_yaml(self, tmp_path):
        yaml_path = tmp_path / "config.yaml"
        yaml_path.write_text(
            "llm:\n  model: test-model\n  max_retries: 3\nui:\n  max_input_chars: 500\n"
        )
        config = load_config(yaml_path)
        assert config.llm.model == "test-model"
        assert config.llm.max_retries == 3
        assert config.ui.max_input_chars == 500
        # Defaults for unspecified
        assert config.llm.temperature == 0.7

    def test_empty_yaml_gives_defaults(self, tmp_path):
        yaml_path = tmp_path / "config.yaml"
        yaml_path.write_text("")
        assert load_config(yaml_path) == AppConfig()

    def test_frozen(self):
        config = LLMConfig()
        try:
            config.model = "other"  # type: ignore[misc]
        except AttributeError:
            pass
        else:
            raise AssertionError("LLMConfig should be immutable")

    def test_ui_config_rejects_unknown_question_count(self):
        try:
            UIConfig(clarifying_questions=5)  # type: ignore[call-arg]
        except TypeError:
            pass
        else:
            raise AssertionError("UIConfig has no clarifying_questions setting")
