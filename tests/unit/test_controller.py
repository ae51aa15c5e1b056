"""
Unit tests for ActiveTextController: rescans, batching, touches and dispatch.
"""
import pytest

from activetext.config import ScanConfig
from activetext.controller import ActiveTextController, TouchPhase
from activetext.interaction.selection import SelectionPhase
from activetext.models.element import ElementKind


class FakeClock:
    def __init__(self, now=0.0):
        self.now = now

    def __call__(self):
        return self.now


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def displays():
    return []


@pytest.fixture
def controller(matcher, clock, displays):
    return ActiveTextController(
        config=ScanConfig(enabled_kinds=["mention", "hashtag", "url"]),
        matcher=matcher,
        on_display=lambda text, index: displays.append((text, len(index))),
        clock=clock,
    )


# ===========================================================================
# Scanning
# ===========================================================================


class TestControllerScanning:

    def test_set_text_rescans_and_displays(self, controller, displays):
        controller.set_text("hello @john_doe #news")
        assert [s.element.value for s in controller.index] == ["john_doe", "news"]
        assert displays == [("hello @john_doe #news", 2)]

    def test_displayed_text_is_rewritten(self, controller):
        controller.url_max_length = 10
        controller.set_text("go www.example.com/long/path now")
        assert controller.text == "go www.exampl... now"
        assert controller.source_text == "go www.example.com/long/path now"

    def test_rescan_starts_from_source_text(self, controller):
        controller.set_text("go www.example.com/long/path now")
        controller.url_max_length = 10
        controller.url_max_length = None
        assert controller.text == "go www.example.com/long/path now"
        url = controller.index.elements(ElementKind.URL)[0]
        assert url.payload.original == "https://www.example.com/long/path"

    def test_filter_mention_triggers_rescan(self, controller):
        controller.set_text("@ann @bob")
        controller.filter_mention(lambda name: name != "ann")
        assert [e.value for e in controller.index.elements(ElementKind.MENTION)] == ["bob"]

    def test_filter_hashtag_triggers_rescan(self, controller):
        controller.set_text("#a1 #b2")
        controller.filter_hashtag(lambda tag: tag == "a1")
        assert [e.value for e in controller.index.elements(ElementKind.HASHTAG)] == ["a1"]

    def test_enabled_kinds_setter(self, controller, ticket_kind):
        controller.set_text("@ann TKT-9")
        controller.enabled_kinds = ["mention", ticket_kind]
        assert [e.value for e in controller.index.elements(ticket_kind)] == ["TKT-9"]

    def test_reconfigure_display_does_not_rescan(self, controller, displays):
        controller.set_text("#tag")
        result = controller.result
        controller.reconfigure_display()
        assert controller.result is result
        assert len(displays) == 2

    def test_customize_runs_single_rescan(self, controller, displays):
        with controller.customize() as c:
            c.set_text("@ann #tag")
            c.url_max_length = 5
            c.filter_mention(lambda _: True)
            assert displays == []
        assert len(displays) == 1
        assert len(controller.index) == 2

    def test_customize_defers_redisplay(self, controller, displays):
        controller.set_text("#tag")
        result = controller.result
        with controller.customize() as c:
            c.reconfigure_display()
            assert len(displays) == 1
        assert displays == [("#tag", 1), ("#tag", 1)]
        assert controller.result is result

    def test_customize_without_changes_is_silent(self, controller, displays):
        controller.set_text("#tag")
        with controller.customize():
            pass
        assert len(displays) == 1

    def test_nested_customize(self, controller, displays):
        with controller.customize():
            with controller.customize():
                controller.set_text("@ann")
            assert displays == []
        assert len(displays) == 1

    def test_empty_text_clears_elements(self, controller):
        controller.set_text("@ann")
        controller.set_text(None)
        assert controller.text == ""
        assert len(controller.index) == 0


# ===========================================================================
# Touch handling
# ===========================================================================


class TestControllerTouches:

    def test_tap_dispatches_once(self, controller):
        calls = []
        controller.handle_mention_tap(calls.append)
        controller.set_text("hello @john_doe!")
        assert controller.touch(TouchPhase.BEGAN, 8)
        assert controller.touch(TouchPhase.ENDED, 8)
        assert calls == ["john_doe"]
        assert controller.selection.phase is SelectionPhase.COMMITTED
        assert not controller.touch(TouchPhase.ENDED, 8)
        assert calls == ["john_doe"]

    def test_touch_on_inclusive_upper_bound(self, controller):
        calls = []
        controller.handle_mention_tap(calls.append)
        controller.set_text("hello @john_doe!")
        controller.touch(TouchPhase.BEGAN, 15)
        controller.touch(TouchPhase.ENDED, 15)
        assert calls == ["john_doe"]

    def test_cancel_does_not_dispatch(self, controller):
        calls = []
        controller.handle_mention_tap(calls.append)
        controller.set_text("hello @john_doe!")
        controller.touch(TouchPhase.BEGAN, 8)
        controller.touch(TouchPhase.CANCELLED, 8)
        assert not controller.touch(TouchPhase.ENDED, 8)
        assert calls == []

    def test_touch_off_elements_not_consumed(self, controller):
        controller.set_text("plain words @ann")
        assert not controller.touch(TouchPhase.BEGAN, 2)
        assert not controller.touch(TouchPhase.BEGAN, None)

    def test_moving_off_element_prevents_tap(self, controller):
        calls = []
        controller.handle_hashtag_tap(calls.append)
        controller.set_text("#release notes")
        controller.touch(TouchPhase.BEGAN, 3)
        assert controller.touch(TouchPhase.MOVED, 12)
        controller.touch(TouchPhase.ENDED, 12)
        assert calls == []

    def test_delegate_receives_unhandled_kinds(self, matcher, clock):
        delegated = []
        controller = ActiveTextController(
            config=ScanConfig(enabled_kinds=["hashtag"]),
            matcher=matcher,
            delegate=lambda text, kind: delegated.append((text, kind)),
            clock=clock,
        )
        controller.set_text("#news")
        controller.touch(TouchPhase.BEGAN, 1)
        controller.touch(TouchPhase.ENDED, 1)
        assert delegated == [("news", ElementKind.HASHTAG)]

    def test_url_tap_receives_canonical_url(self, controller):
        calls = []
        controller.handle_url_tap(calls.append)
        controller.set_text("docs at example.org/guide")
        controller.touch(TouchPhase.BEGAN, 10)
        controller.touch(TouchPhase.ENDED, 10)
        assert calls[0].geturl() == "https://example.org/guide"

    def test_custom_tap(self, matcher, clock, ticket_kind):
        calls = []
        controller = ActiveTextController(
            config=ScanConfig(enabled_kinds=[], custom_patterns={"ticket": r"TKT-\d+"}),
            matcher=matcher,
            clock=clock,
        )
        controller.handle_custom_tap(ticket_kind, calls.append)
        controller.set_text("see TKT-42")
        controller.touch(TouchPhase.BEGAN, 5)
        controller.touch(TouchPhase.ENDED, 5)
        assert calls == ["TKT-42"]

    def test_remove_handle_falls_back_to_delegate(self, matcher, clock):
        calls, delegated = [], []
        controller = ActiveTextController(
            matcher=matcher,
            delegate=lambda text, kind: delegated.append(text),
            clock=clock,
        )
        controller.handle_mention_tap(calls.append)
        controller.remove_handle(ElementKind.MENTION)
        controller.set_text("@ann")
        controller.touch(TouchPhase.BEGAN, 1)
        controller.touch(TouchPhase.ENDED, 1)
        assert calls == []
        assert delegated == ["ann"]

    def test_feedback_expires(self, controller, clock):
        selections = []
        controller.on_selection = lambda state: selections.append(state.phase)
        controller.set_text("#tag")
        controller.touch(TouchPhase.BEGAN, 1)
        controller.touch(TouchPhase.ENDED, 1)
        clock.now += 0.3
        assert controller.expire_selection()
        assert controller.selection.phase is SelectionPhase.NONE
        assert selections == [SelectionPhase.PENDING, SelectionPhase.COMMITTED, SelectionPhase.NONE]

    def test_rescan_clears_selection(self, controller):
        controller.set_text("#tag")
        controller.touch(TouchPhase.BEGAN, 1)
        controller.set_text("#other")
        assert controller.selection.phase is SelectionPhase.NONE

    def test_stationary_is_ignored(self, controller):
        controller.set_text("#tag")
        assert not controller.touch(TouchPhase.STATIONARY, 1)
        assert controller.selection.phase is SelectionPhase.NONE
