"""Presentational primitives for the dashboard.

Each primitive keeps its state logic in a plain class and exposes a small
Streamlit renderer; the logic is exercised without a running Streamlit
session.
"""

from __future__ import annotations

import itertools
import math
import time
from dataclasses import dataclass, field
from typing import Any, Callable, List, Literal, Optional

import streamlit as st

ToastType = Literal["success", "error", "info", "warning"]

DEFAULT_TOAST_MS = 3000
SWIPE_THRESHOLD_PX = 80
SWIPE_CLAMP_PX = 150
SWIPE_REVEAL_PX = 80


@dataclass
class Stepper:
    """Numeric value bounded by ``minimum`` and ``maximum``."""

    value: float = 0
    minimum: float = 0
    maximum: float = 999
    step: float = 1

    def increment(self) -> float:
        self.value = round(min(self.value + self.step, self.maximum), 2)
        return self.value

    def decrement(self) -> float:
        self.value = round(max(self.value - self.step, self.minimum), 2)
        return self.value

    def set(self, raw: object) -> float:
        """Direct entry; unparsable input counts as zero."""

        try:
            parsed = float(raw)  # type: ignore[arg-type]
        except (TypeError, ValueError):
            parsed = 0.0
        if math.isnan(parsed):
            parsed = 0.0
        self.value = min(max(parsed, self.minimum), self.maximum)
        return self.value


@dataclass
class Toast:
    id: int
    message: str
    type: ToastType
    duration_ms: int
    created_at: float

    def expired(self, now: float) -> bool:
        if self.duration_ms <= 0:
            return False
        return (now - self.created_at) * 1000 >= self.duration_ms


@dataclass
class ToastQueue:
    """Pending toasts; those with a non-positive duration stay until dismissed."""

    clock: Callable[[], float] = time.monotonic
    toasts: List[Toast] = field(default_factory=list)
    _ids: "itertools.count[int]" = field(default_factory=itertools.count, repr=False)

    def show(
        self, message: str, type: ToastType = "info", duration_ms: int = DEFAULT_TOAST_MS
    ) -> Toast:
        toast = Toast(next(self._ids), message, type, duration_ms, self.clock())
        self.toasts.append(toast)
        return toast

    def dismiss(self, toast_id: int) -> None:
        self.toasts = [t for t in self.toasts if t.id != toast_id]

    def visible(self) -> List[Toast]:
        now = self.clock()
        self.toasts = [t for t in self.toasts if not t.expired(now)]
        return list(self.toasts)


@dataclass(frozen=True)
class RingGeometry:
    size: float
    stroke: float
    radius: float
    circumference: float
    dash_offset: float


def progress_ring(progress: float, size: float = 120, stroke: float = 8) -> RingGeometry:
    radius = (size - stroke) / 2
    circumference = 2 * math.pi * radius
    offset = circumference - min(progress, 100) / 100 * circumference
    return RingGeometry(size, stroke, radius, circumference, offset)


@dataclass
class SwipeableRow:
    """Horizontal drag tracking for rows with delete and edit actions."""

    threshold: float = SWIPE_THRESHOLD_PX
    can_delete: bool = True
    can_edit: bool = False
    offset: float = 0.0
    revealed: Optional[Literal["delete", "edit"]] = None
    _start_x: float = 0.0
    _current_x: float = 0.0

    def begin(self, x: float) -> None:
        self._start_x = self._current_x = x

    def move(self, x: float) -> None:
        self._current_x = x
        diff = x - self._start_x
        if abs(diff) > 10:
            self.offset = max(-SWIPE_CLAMP_PX, min(SWIPE_CLAMP_PX, diff))

    def end(self) -> Optional[Literal["delete", "edit"]]:
        diff = self._current_x - self._start_x
        self.revealed = None
        self.offset = 0.0
        if abs(diff) > self.threshold:
            if diff < 0 and self.can_delete:
                self.revealed = "delete"
                self.offset = -SWIPE_REVEAL_PX
            elif diff > 0 and self.can_edit:
                self.revealed = "edit"
                self.offset = SWIPE_REVEAL_PX
        return self.revealed

    def swipe(self, dx: float) -> Optional[Literal["delete", "edit"]]:
        """Complete a drag of ``dx`` pixels in one step."""
        self.begin(0.0)
        self.move(dx)
        return self.end()

    def reset(self) -> None:
        self.offset = 0.0
        self.revealed = None


@dataclass
class Overlay:
    """Open/close state shared by modals and bottom sheets."""

    key: str
    is_open: bool = False

    def open(self) -> None:
        self.is_open = True

    def close(self) -> None:
        self.is_open = False

    def toggle(self) -> None:
        self.is_open = not self.is_open


# Streamlit renderers


_TOAST_ICONS = {"success": "✅", "error": "⚠️", "info": "ℹ️", "warning": "⚠️"}


def render_toasts(queue: ToastQueue) -> None:
    for toast in queue.visible():
        st.toast(toast.message, icon=_TOAST_ICONS[toast.type])
        # st.toast manages its own lifetime once emitted.
        queue.dismiss(toast.id)


def card(title: Optional[str] = None, caption: Optional[str] = None):
    container = st.container(border=True)
    if title:
        container.markdown(f"**{title}**")
    if caption:
        container.caption(caption)
    return container


def skeleton(lines: int = 3, height: int = 16) -> None:
    bar = (
        f'<div style="height:{height}px;background:#262626;'
        'border-radius:6px;margin:6px 0"></div>'
    )
    st.markdown(bar * lines, unsafe_allow_html=True)


def stepper_input(
    label: str,
    stepper: Stepper,
    *,
    key: str,
    unit: str = "",
) -> float:
    minus, field_col, plus = st.columns([1, 3, 1])
    if minus.button("−", key=f"{key}-dec"):
        stepper.decrement()
        st.session_state[f"{key}-value"] = f"{stepper.value:g}"
    if plus.button("+", key=f"{key}-inc"):
        stepper.increment()
        st.session_state[f"{key}-value"] = f"{stepper.value:g}"
    raw = field_col.text_input(
        f"{label} ({unit})" if unit else label, value=f"{stepper.value:g}", key=f"{key}-value"
    )
    return stepper.set(raw)


def ring(progress: float, label: str, value: str, *, size: int = 120, stroke: int = 8) -> None:
    geometry = progress_ring(progress, size, stroke)
    center = size / 2
    st.markdown(
        f"""
<svg width="{size}" height="{size}" viewBox="0 0 {size} {size}">
  <circle cx="{center}" cy="{center}" r="{geometry.radius}" stroke="#262626"
    stroke-width="{stroke}" fill="none"/>
  <circle cx="{center}" cy="{center}" r="{geometry.radius}" stroke="#ffffff"
    stroke-width="{stroke}" fill="none" stroke-linecap="round"
    stroke-dasharray="{geometry.circumference:.2f}"
    stroke-dashoffset="{geometry.dash_offset:.2f}"
    transform="rotate(-90 {center} {center})"/>
  <text x="50%" y="48%" text-anchor="middle" fill="#ffffff" font-size="20">{value}</text>
  <text x="50%" y="64%" text-anchor="middle" fill="#a3a3a3" font-size="10">{label}</text>
</svg>
""",
        unsafe_allow_html=True,
    )


def modal(overlay: Overlay, title: str, body: Callable[[], None]) -> None:
    """Render ``body`` in a dialog while ``overlay`` is open."""

    if not overlay.is_open:
        return

    @st.dialog(title)
    def _dialog() -> None:
        body()
        if st.button("Close", key=f"{overlay.key}-close"):
            overlay.close()
            st.rerun()

    _dialog()


def bottom_sheet(overlay: Overlay, title: str, body: Callable[[], None]) -> None:
    """Render ``body`` in a bordered panel while ``overlay`` is open."""

    if not overlay.is_open:
        return
    with st.container(border=True):
        heading, close = st.columns([5, 1])
        heading.markdown(f"**{title}**")
        if close.button("✕", key=f"{overlay.key}-close"):
            overlay.close()
            st.rerun()
        body()


def swipe_actions(container: Any, key: str, *, can_edit: bool = False) -> Optional[str]:
    """Row handle standing in for a horizontal drag.

    The first press swipes the row left past its threshold and reveals the
    delete action; pressing the revealed action returns it. Streamlit has no
    pointer events, so the drag is collapsed into the press.
    """

    row: SwipeableRow = st.session_state.setdefault(
        f"{key}-swipe", SwipeableRow(can_edit=can_edit)
    )
    if row.revealed is None:
        if container.button("⟵", key=f"{key}-reveal", help="Swipe to reveal delete"):
            row.swipe(-(row.threshold + 1))
            st.rerun()
        return None
    if container.button("↺", key=f"{key}-snap-back", help="Cancel"):
        row.reset()
        st.rerun()
    label = "Delete" if row.revealed == "delete" else "Edit"
    if container.button(label, key=f"{key}-{row.revealed}", type="primary"):
        action = row.revealed
        row.reset()
        return action
    return None
