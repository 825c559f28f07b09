"""
Unit Tests for QuestionConfig and the markup helpers.
"""

import json

import pytest

from ddmarker.config import ChoiceSpec, QuestionConfig, classname_numeric_suffix
from ddmarker.core.errors import ConfigurationError
from ddmarker.core.models.geometry import Point


class TestClassnameNumericSuffix:
    """Tests for classname_numeric_suffix."""

    def test_when_prefix_present_then_number(self):
        assert classname_numeric_suffix("choices choice12 noofdrags3", "choice") == 12

    def test_when_only_similar_class_then_none(self):
        """'choices' has no digits, so it does not count as choiceN."""
        assert classname_numeric_suffix("choices infinite", "choice") is None

    def test_when_empty_then_none(self):
        assert classname_numeric_suffix("", "choice") is None


class TestChoiceSpec:
    """Tests for ChoiceSpec construction."""

    def test_from_markup_when_fixed_count_then_parsed(self):
        choice = ChoiceSpec.from_markup("choices choice2 noofdrags3", value="1,2", label="B")
        assert (choice.choice_no, choice.max_count, choice.unlimited, choice.value, choice.label) == (
            2, 3, False, "1,2", "B",
        )

    def test_from_markup_when_infinite_then_unlimited(self):
        choice = ChoiceSpec.from_markup("choices choice1 infinite")
        assert choice.unlimited is True
        assert choice.max_count == 0

    def test_from_markup_when_no_choice_number_then_raises_error(self):
        with pytest.raises(ConfigurationError, match="No choice number"):
            ChoiceSpec.from_markup("choices noofdrags1")

    def test_from_dict_when_missing_number_then_raises_error(self):
        with pytest.raises(ConfigurationError):
            ChoiceSpec.from_dict({"label": "A"})

    def test_from_dict_when_home_given_then_point(self):
        assert ChoiceSpec.from_dict({"no": 1, "home": [4, 5]}).home == Point(4, 5)

    def test_init_when_negative_count_then_raises_error(self):
        with pytest.raises(ConfigurationError):
            ChoiceSpec(choice_no=1, label="A", max_count=-1)


class TestQuestionConfig:
    """Tests for QuestionConfig."""

    def test_from_dict_when_complete_then_all_fields(self):
        config = QuestionConfig.from_dict({
            "topnode": "#q1",
            "bgimgurl": "bg.png",
            "readonly": True,
            "dropzones": [{"markertext": "Z", "shape": "circle", "coords": "1,1;1"}],
            "choices": [{"no": 1, "label": "A"}],
        })
        assert config.read_only is True
        assert config.dropzones[0].shape == "circle"
        assert config.choices[0].label == "A"

    @pytest.mark.parametrize("missing", ["topnode", "bgimgurl"])
    def test_from_dict_when_required_key_missing_then_raises_error(self, missing):
        data = {"topnode": "#q1", "bgimgurl": "bg.png"}
        del data[missing]
        with pytest.raises(ConfigurationError, match=missing):
            QuestionConfig.from_dict(data)

    def test_init_when_duplicate_choice_then_raises_error(self):
        with pytest.raises(ConfigurationError, match="Duplicate"):
            QuestionConfig.from_dict({
                "topnode": "#q1",
                "bgimgurl": "bg.png",
                "choices": [{"no": 1}, {"no": 1}],
            })

    def test_from_json_when_relative_image_then_resolved_next_to_file(self, tmp_path):
        path = tmp_path / "question.json"
        path.write_text(json.dumps({"topnode": "#q1", "bgimgurl": "bg.png"}))
        config = QuestionConfig.from_json(path)
        assert config.background_image_url == str(tmp_path / "bg.png")

    def test_from_json_when_invalid_json_then_raises_error(self, tmp_path):
        path = tmp_path / "question.json"
        path.write_text("{not json")
        with pytest.raises(ConfigurationError, match="Cannot read"):
            QuestionConfig.from_json(path)

    def test_to_dict_when_reloaded_then_equal(self, config_factory):
        config = config_factory(dropzones=[{"markertext": "Z", "shape": "circle", "coords": "1,1;1"}])
        assert QuestionConfig.from_dict(config.to_dict()) == config
