"""Tests for lowkeytype.classify: charge-once keystroke classification."""

from lowkeytype.classify import MistakeLedger, classify


class TestMistakeLedger:
    def test_charges_once(self):
        ledger = MistakeLedger()
        assert ledger.charge(3) is True
        assert ledger.charge(3) is False
        assert ledger.charged == 1
        assert 3 in ledger


class TestClassify:
    def test_marks_each_position(self):
        ledger = MistakeLedger()
        marks = classify(list("cot"), "cat", ledger)
        assert marks == [True, False, True]
        assert ledger.charged == 1

    def test_rescan_does_not_recharge(self):
        ledger = MistakeLedger()
        classify(list("cot"), "cat", ledger)
        classify(list("cot"), "cat", ledger)
        assert ledger.charged == 1

    def test_backspace_and_retype_same_mistake(self):
        ledger = MistakeLedger()
        classify(list("x"), "abc", ledger)
        classify([], "abc", ledger)
        classify(list("x"), "abc", ledger)
        assert ledger.charged == 1

    def test_fixing_a_mistake_keeps_the_charge(self):
        ledger = MistakeLedger()
        classify(list("x"), "abc", ledger)
        marks = classify(list("a"), "abc", ledger)
        assert marks == [True]
        assert ledger.charged == 1

    def test_overflow_positions_are_incorrect_and_charged_once(self):
        ledger = MistakeLedger()
        marks = classify(list("abcd"), "abc", ledger)
        assert marks == [True, True, True, False]
        assert ledger.charged == 1
        classify(list("abc"), "abc", ledger)
        classify(list("abcd"), "abc", ledger)
        assert ledger.charged == 1

    def test_empty_buffer(self):
        ledger = MistakeLedger()
        assert classify([], "abc", ledger) == []
        assert ledger.charged == 0

    def test_emptied_slot_is_charged(self):
        ledger = MistakeLedger()
        classify(list("a"), "abc", ledger)
        marks = classify([], "abc", ledger, removed=0)
        assert marks == []
        assert ledger.charged == 1
        assert 0 in ledger

    def test_emptied_slot_is_charged_once(self):
        ledger = MistakeLedger()
        classify(list("x"), "abc", ledger)
        classify([], "abc", ledger, removed=0)
        classify(list("x"), "abc", ledger)
        classify([], "abc", ledger, removed=0)
        assert ledger.charged == 1

    def test_emptied_overflow_slot_is_charged_once(self):
        ledger = MistakeLedger()
        classify(list("abcd"), "abc", ledger)
        classify(list("abc"), "abc", ledger, removed=3)
        classify(list("abcd"), "abc", ledger)
        classify(list("abc"), "abc", ledger, removed=3)
        assert ledger.charged == 1
