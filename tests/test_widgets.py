from __future__ import annotations

import math

import pytest

from fitbuddy.ui.widgets import Overlay, Stepper, SwipeableRow, ToastQueue, progress_ring


class FakeClock:
    def __init__(self) -> None:
        self.now = 100.0

    def __call__(self) -> float:
        return self.now


def test_stepper_clamps_and_rounds() -> None:
    stepper = Stepper(value=9.9, minimum=0, maximum=10, step=0.1)

    assert stepper.increment() == 10
    assert stepper.increment() == 10

    stepper = Stepper(value=0.1, step=0.25)
    assert stepper.decrement() == 0


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        pytest.param("42.5", 42.5, id="number"),
        pytest.param("abc", 0, id="garbage"),
        pytest.param("", 0, id="empty"),
        pytest.param("nan", 0, id="nan"),
        pytest.param("5000", 999, id="above-max"),
        pytest.param("-3", 0, id="below-min"),
    ],
)
def test_stepper_direct_entry(raw: str, expected: float) -> None:
    assert Stepper(value=10).set(raw) == expected


def test_toasts_expire_after_duration() -> None:
    clock = FakeClock()
    queue = ToastQueue(clock=clock)

    first = queue.show("Set saved", "success")
    sticky = queue.show("Offline", "error", duration_ms=0)
    clock.now += 2.5
    assert [t.id for t in queue.visible()] == [first.id, sticky.id]

    clock.now += 1
    assert [t.message for t in queue.visible()] == ["Offline"]

    queue.dismiss(sticky.id)
    assert queue.visible() == []


def test_toast_ids_are_unique() -> None:
    queue = ToastQueue(clock=FakeClock())

    ids = {queue.show(str(i)).id for i in range(5)}

    assert len(ids) == 5


def test_progress_ring_geometry() -> None:
    ring = progress_ring(25)

    assert ring.radius == 56
    assert ring.circumference == pytest.approx(2 * math.pi * 56)
    assert ring.dash_offset == pytest.approx(ring.circumference * 0.75)
    assert progress_ring(180).dash_offset == pytest.approx(0)


def test_swipe_left_past_threshold_reveals_delete() -> None:
    row = SwipeableRow()

    row.begin(300)
    row.move(295)
    assert row.offset == 0
    row.move(100)
    assert row.offset == -150

    assert row.end() == "delete"
    assert row.offset == -80


def test_swipe_right_needs_edit_enabled() -> None:
    row = SwipeableRow()
    row.begin(0)
    row.move(120)
    assert row.end() is None
    assert row.offset == 0

    editable = SwipeableRow(can_edit=True)
    editable.begin(0)
    editable.move(120)
    assert editable.end() == "edit"
    assert editable.offset == 80

    editable.reset()
    assert editable.revealed is None


def test_short_swipe_snaps_back() -> None:
    row = SwipeableRow()
    row.begin(200)
    row.move(150)

    assert row.end() is None
    assert row.offset == 0


def test_overlay_toggle() -> None:
    overlay = Overlay("add-food")

    overlay.toggle()
    assert overlay.is_open
    overlay.close()
    assert not overlay.is_open
    overlay.open()
    assert overlay.is_open


def test_single_step_swipe_matches_drag() -> None:
    row = SwipeableRow()

    assert row.swipe(-(row.threshold + 1)) == "delete"
    assert row.offset == -80
    assert row.swipe(-row.threshold) is None
    assert row.revealed is None
