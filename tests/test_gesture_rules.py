"""
Tests for the Gesture Rule Set
==============================
"""

import numpy as np
import pytest

from signsense.core.types import GestureDefinition, FOUR_TIPS
from signsense.modules.recognition.gesture_rules import (
    DEFAULT_CATALOG, GestureRuleSet, build_catalog, is_space, is_thank_you,
)

from conftest import CATALOG_HANDS, FINGERS, make_hand


class TestCatalog:

    def test_catalog_size_and_order(self):
        names = list(DEFAULT_CATALOG.keys())
        assert len(names) == 33
        assert len(set(names)) == 33
        assert names[:7] == ["hello", "thank you", "yes", "no", "please", "EMERGENCY", "SPACE"]
        assert names[7:] == [chr(c) for c in range(ord("A"), ord("Z") + 1)]

    def test_categories(self):
        assert DEFAULT_CATALOG["hello"].category == "word"
        assert DEFAULT_CATALOG["EMERGENCY"].category == "control"
        assert DEFAULT_CATALOG["Q"].category == "letter"

    def test_translations(self):
        assert DEFAULT_CATALOG["hello"].label("gujarati") == "નમસ્તે"
        assert DEFAULT_CATALOG["thank you"].label("gujarati") == "આભાર"
        assert DEFAULT_CATALOG["A"].label("gujarati") == "A"

    def test_catalog_is_read_only(self):
        with pytest.raises(TypeError):
            DEFAULT_CATALOG["extra"] = DEFAULT_CATALOG["hello"]

    def test_duplicate_names_rejected(self):
        always = GestureDefinition("wave", "test", lambda f: True)
        with pytest.raises(ValueError, match="wave"):
            build_catalog([always, always])

    def test_custom_catalog(self, fist):
        catalog = build_catalog([
            GestureDefinition("always", "fires on every hand", lambda f: True),
            GestureDefinition("never", "never fires", lambda f: False),
        ])
        rules = GestureRuleSet(catalog)
        assert rules.names == ("always", "never")
        assert rules.evaluate(fist) == {"always": True, "never": False}
        assert "always" in rules
        assert len(rules) == 2


class TestWordRules:

    @pytest.fixture
    def rules(self):
        return GestureRuleSet()

    def test_evaluate_covers_whole_catalog(self, rules, fist):
        result = rules.evaluate(fist)
        assert list(result.keys()) == list(rules.names)
        assert all(isinstance(v, bool) for v in result.values())

    def test_fist_means_yes(self, rules, fist):
        fired = rules.matching(fist)
        assert "yes" in fired
        assert "hello" not in fired
        assert "no" not in fired
        assert "EMERGENCY" not in fired

    def test_open_hand_means_hello(self, rules, open_hand):
        fired = rules.matching(open_hand)
        assert "hello" in fired
        assert "yes" not in fired
        assert "thank you" not in fired

    def test_index_only_means_no(self, rules, index_only):
        fired = rules.matching(index_only)
        assert "no" in fired
        assert "yes" not in fired
        assert "hello" not in fired

    def test_fist_in_front_of_chest_is_emergency(self, rules):
        fired = rules.matching(make_hand(wrist=(0.5, 0.5)))
        assert "EMERGENCY" in fired
        assert "yes" in fired

    def test_level_fingertips_mean_thank_you(self, open_hand):
        open_hand[list(FOUR_TIPS), 1] = 0.40
        assert is_thank_you(open_hand)

    def test_please_needs_flat_depth_and_low_wrist(self, rules, open_hand):
        open_hand[list(FOUR_TIPS), 2] = 0.0
        assert "please" in rules.matching(open_hand)

        raised = make_hand(extended=FINGERS, wrist=(0.5, 0.45))
        raised[list(FOUR_TIPS), 2] = 0.0
        assert "please" not in rules.matching(raised)

    def test_space_is_flat_hand_tilted_down(self):
        frame = np.zeros((21, 3), dtype=np.float32)
        frame[0] = (0.5, 0.5, 0.0)
        frame[9] = (0.5, 0.7, 0.0)
        frame[list(FOUR_TIPS), 1] = 0.9
        assert is_space(frame)

        frame[9] = (0.5, 0.3, 0.0)
        assert not is_space(frame)


class TestLetterRules:

    @pytest.fixture
    def rules(self):
        return GestureRuleSet()

    def test_v_spread_fingers(self, rules):
        frame = make_hand(extended=("index", "middle"))
        frame[12, 0] = 0.56
        fired = rules.matching(frame)
        assert "V" in fired
        assert "U" not in fired

    def test_u_fingers_together(self, rules):
        frame = make_hand(extended=("index", "middle"))
        frame[12] = (0.46, 0.40, -0.02)
        fired = rules.matching(frame)
        assert "U" in fired
        assert "V" not in fired
        assert "R" not in fired

    def test_i_pinky_up(self, rules):
        fired = rules.matching(make_hand(extended=("pinky",)))
        assert "I" in fired
        assert "Y" not in fired
        assert "J" not in fired

    def test_l_index_and_thumb_out(self, rules):
        fired = rules.matching(make_hand(extended=("index",), thumb_sideways=True))
        assert "L" in fired
        assert "Z" not in fired

    def test_s_thumb_across_fist(self, rules, fist):
        fired = rules.matching(fist)
        assert "S" in fired
        assert "A" not in fired
        assert "E" not in fired

    def test_w_three_fingers(self, rules):
        fired = rules.matching(make_hand(extended=("index", "middle", "ring")))
        assert "W" in fired
        assert "B" not in fired

    def test_descriptions(self, rules):
        for name in rules.names:
            assert rules.describe(name)


class TestEveryGestureFires:

    @pytest.fixture(scope="class")
    def rules(self):
        return GestureRuleSet()

    def test_a_hand_for_every_catalog_entry(self):
        assert list(CATALOG_HANDS) == list(DEFAULT_CATALOG)

    @pytest.mark.parametrize("name", list(DEFAULT_CATALOG))
    def test_gesture_fires_on_its_hand(self, rules, name):
        assert rules.evaluate(CATALOG_HANDS[name]())[name]
