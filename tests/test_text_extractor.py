"""
test_text_extractor.py — Strategy chain for pulling JSON out of LLM prose.

Run:
    pytest tests/test_text_extractor.py -v
"""

from greencompass.services.text_extractor import (
    TextExtractor,
    from_array,
    from_fenced_block,
    from_object,
    text_extractor,
)


class TestExtract:

    def test_fenced_json_block(self):
        text = 'Here is the answer:\n```json\n{"energy":1.1,"transport":2.2,"waste":1.5}\n```'
        assert text_extractor.extract(text) == {"energy": 1.1, "transport": 2.2, "waste": 1.5}

    def test_bare_array_in_prose(self):
        text = 'Sure! Estimated values: [{"year":2020,"index":400}] based on trends.'
        assert text_extractor.extract(text) == [{"year": 2020, "index": 400}]

    def test_bare_object_in_prose(self):
        text = 'The factors are {"energy": 0.9, "transport": 2.3, "waste": 1.4}. Hope this helps.'
        assert text_extractor.extract(text) == {"energy": 0.9, "transport": 2.3, "waste": 1.4}

    def test_unparseable_prose_returns_none(self):
        assert text_extractor.extract("I cannot provide live emission data right now.") is None

    def test_empty_string_returns_none(self):
        assert text_extractor.extract("") is None

    def test_broken_json_returns_none(self):
        assert text_extractor.extract('{"energy": 0.9, "transport": }') is None

    def test_fenced_block_preferred_over_loose_json(self):
        text = 'Old guess {"energy": 9} — corrected:\n```json\n{"energy": 1}\n```'
        assert text_extractor.extract(text) == {"energy": 1}

    def test_fence_label_is_case_insensitive(self):
        assert text_extractor.extract('```JSON\n[1, 2]\n```') == [1, 2]

    def test_invalid_fence_falls_through_to_object(self):
        text = '```json\nnot json\n```\n{"waste": 1.5}'
        assert text_extractor.extract(text) == {"waste": 1.5}

    def test_array_after_brace_in_prose(self):
        text = 'Format used {year, index}:\n[{"year":2021,"index":410},{"year":2022,"index":415}]'
        assert text_extractor.extract(text) == [
            {"year": 2021, "index": 410},
            {"year": 2022, "index": 415},
        ]

    def test_object_with_nested_array_is_not_cut_down_to_the_array(self):
        text = (
            'Result: {"summary": {"current": 450}, '
            '"sectors": [{"name": "Energy", "value": 100}], "details": "ok"}'
        )
        result = text_extractor.extract(text)
        assert isinstance(result, dict)
        assert result["sectors"] == [{"name": "Energy", "value": 100}]


class TestStrategies:

    def test_fenced_block_without_fence(self):
        assert from_fenced_block('{"a": 1}') is None

    def test_array_rejects_non_array(self):
        assert from_array("no brackets here") is None

    def test_object_rejects_non_object(self):
        assert from_object("[1, 2, 3]") is None

    def test_array_inside_object_is_left_to_object_strategy(self):
        assert from_array('{"sectors": [{"name": "Energy"}]}') is None

    def test_array_after_unrelated_braces(self):
        assert from_array("Shape {year, index}: [1, 2]") == [1, 2]

    def test_custom_strategy_runs_first(self):
        def always_answer(text):
            return {"from": "custom"}

        extractor = TextExtractor(strategies=[always_answer, from_object])
        assert extractor.extract('{"from": "object"}') == {"from": "custom"}

    def test_custom_chain_without_match(self):
        extractor = TextExtractor(strategies=[from_fenced_block])
        assert extractor.extract('{"a": 1}') is None
