import itertools

import pytest
from clavis.commontypes import INVALID_CODE, ConfigurationError
from clavis.matcher import MatcherState, SequenceMatcher, TargetSequence

KONAMI = (38, 38, 40, 40, 37, 39, 37, 39, 88, 90)


class RecordingSwitches:
    def __init__(self):
        self.calls = []

    def set_value(self, switch_id, value):
        self.calls.append((switch_id, value))


def make_matcher(target, switch_id=3):
    switches = RecordingSwitches()
    return SequenceMatcher(target, switch_id, switches), switches


def submit_all(matcher, codes):
    return [matcher.submit(code) for code in codes]


def test_konami_fires_once():
    matcher, switches = make_matcher(KONAMI)
    results = submit_all(matcher, KONAMI)
    assert results == [False] * 9 + [True]
    assert switches.calls == [(3, True)]
    assert len(matcher.window) == 0
    assert matcher.state is MatcherState.ARMED


@pytest.mark.parametrize("position", range(len(KONAMI)))
def test_konami_with_one_position_altered(position):
    matcher, switches = make_matcher(KONAMI)
    altered = list(KONAMI)
    altered[position] = 65
    submit_all(matcher, altered)
    assert switches.calls == []


def test_match_after_leading_code_is_evicted():
    matcher, switches = make_matcher([37, 39])
    assert submit_all(matcher, [38, 37, 39]) == [False, False, True]
    assert switches.calls == [(3, True)]


def test_entering_twice_fires_twice():
    matcher, switches = make_matcher(KONAMI, switch_id=12)
    submit_all(matcher, KONAMI + KONAMI)
    assert switches.calls == [(12, True), (12, True)]
    assert matcher.fire_count == 2


def test_window_never_exceeds_target_length():
    matcher, switches = make_matcher([1, 2, 3])
    for code in [5, 6, 7, 8, 9, 1, 2, 4, 1]:
        matcher.submit(code)
        assert len(matcher.window) <= 3
    assert list(matcher.window) == [2, 4, 1]
    assert switches.calls == []


def test_failed_comparison_keeps_window():
    matcher, _ = make_matcher([1, 2])
    submit_all(matcher, [2, 2])
    assert list(matcher.window) == [2, 2]


def test_window_is_cleared_after_match():
    # the trailing 1 of the first match cannot start a second one
    matcher, switches = make_matcher([1, 1])
    assert submit_all(matcher, [1, 1, 1]) == [False, True, False]
    assert list(matcher.window) == [1]
    assert len(switches.calls) == 1


def test_single_code_sequence():
    matcher, switches = make_matcher([90])
    assert submit_all(matcher, [88, 90, 90]) == [False, True, True]
    assert len(switches.calls) == 2


def contains_run(stream, target):
    return any(tuple(stream[i : i + len(target)]) == tuple(target) for i in range(len(stream) - len(target) + 1))


@pytest.mark.parametrize("target", [(1,), (1, 2), (1, 1, 2), (2, 1, 2, 1)])
def test_fires_exactly_when_stream_contains_target(target):
    for length in range(0, 8):
        for stream in itertools.product((1, 2), repeat=length):
            matcher, switches = make_matcher(target)
            submit_all(matcher, stream)
            assert bool(switches.calls) == contains_run(stream, target), stream


def test_invalid_code_never_matches():
    target = TargetSequence.parse("38,up,40")
    assert target[1] is INVALID_CODE
    matcher, switches = make_matcher(target)
    submit_all(matcher, [38, INVALID_CODE, 40])
    submit_all(matcher, [38, 0, 40])
    assert switches.calls == []


@pytest.mark.parametrize("target", [(), tuple(range(11))])
def test_target_length_is_checked(target):
    with pytest.raises(ConfigurationError):
        make_matcher(target)


@pytest.mark.parametrize("switch_id", [0, -1])
def test_switch_id_must_be_positive(switch_id):
    with pytest.raises(ConfigurationError):
        make_matcher([1], switch_id=switch_id)


def test_match_is_logged(caplog):
    matcher, _ = make_matcher([37], switch_id=7)
    with caplog.at_level("INFO", logger="clavis.matcher"):
        matcher.submit(37)
    assert "Switch 7 is now ON" in caplog.text


@pytest.mark.parametrize(
    "text,expected",
    [
        ("38,38,40", (38, 38, 40)),
        (" 37 , 39 ", (37, 39)),
        ("", ()),
        ("   ", ()),
        ("90", (90,)),
    ],
)
def test_target_sequence_parse(text, expected):
    assert TargetSequence.parse(text) == expected


def test_target_sequence_str():
    assert str(TargetSequence.parse("38, 40,37")) == "38,40,37"
