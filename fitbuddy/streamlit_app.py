"""Streamlit dashboard for the Fitness Buddy backend.

Run with ``streamlit run fitbuddy/streamlit_app.py``. Backend calls go through
the application use cases; the rest timer and live runs are driven through
the companion service.
"""

from __future__ import annotations

import asyncio
import logging
from datetime import date, datetime, time, timezone
from typing import Any, Awaitable, Callable, List, TypeVar

import pandas as pd
import streamlit as st

from fitbuddy.application.analytics import RANGES, LoadAnalyticsUseCase
from fitbuddy.application.auth import (
    CurrentUserUseCase,
    InvalidPhoneNumberError,
    LogoutUseCase,
    PhoneSignInUseCase,
)
from fitbuddy.application.dashboard import LoadDashboardUseCase
from fitbuddy.application.meals import (
    AddCustomEntryUseCase,
    AddLibraryEntryUseCase,
    CreateMealUseCase,
    LoadMealLogUseCase,
)
from fitbuddy.application.pages import PageScope, PageState
from fitbuddy.application.profile import LoadProfileUseCase, SaveProfileUseCase
from fitbuddy.application.runs import (
    LoadRunDetailUseCase,
    LoadRunLogUseCase,
    LogManualRunUseCase,
    ManualRunForm,
    RunNotFoundError,
)
from fitbuddy.application.workouts import (
    AddSetUseCase,
    CreateExerciseUseCase,
    CreateRoutineUseCase,
    DeleteSetUseCase,
    FinishSessionUseCase,
    LoadWorkoutLogUseCase,
    LoadWorkoutSessionUseCase,
    SaveSetUseCase,
    SessionNotFoundError,
    StartEmptySessionUseCase,
    StartRoutineUseCase,
)
from fitbuddy.domain.nutrition import meal_totals, search_library
from fitbuddy.domain.nutrition.energy import ACTIVITY_LABELS, GOAL_LABELS
from fitbuddy.domain.resistance import elapsed_since, search_exercises
from fitbuddy.domain.running import WEEKLY_GOAL_KM, average_pace, weekly_distance_km
from fitbuddy.models import (
    ExerciseCreate,
    FoodEntryCreate,
    FoodLibraryItem,
    FoodLibraryItemCreate,
    Meal,
    ShoeCreate,
    UserUpdate,
    WorkoutSet,
)
from fitbuddy.services.companion import CompanionClient, CompanionError, create_companion_client
from fitbuddy.services.fitness_api import (
    FitnessApiClient,
    FitnessApiError,
    create_fitness_api_client,
    google_login_url,
)
from fitbuddy.settings import Settings, get_settings
from fitbuddy.ui.maps import build_static_map, live_deck, static_map_html
from fitbuddy.ui.widgets import (
    Overlay,
    Stepper,
    ToastQueue,
    bottom_sheet,
    card,
    modal,
    render_toasts,
    ring,
    skeleton,
    stepper_input,
    swipe_actions,
)

logger = logging.getLogger("fitbuddy.streamlit_app")

T = TypeVar("T")

PAGES = (
    "Dashboard",
    "Workouts",
    "Workout session",
    "Runs",
    "Run detail",
    "Meals",
    "Analytics",
    "Profile",
)

TOKEN_KEY = "session_token"
TOASTS_KEY = "toasts"
PAGE_KEY = "page"
SESSION_ID_KEY = "active_session_id"
RUN_ID_KEY = "selected_run_id"
LIVE_RUN_KEY = "live_run_id"

RUN_TYPES = ("Run", "Race", "Long Run", "Recovery")


# plumbing


@st.cache_resource
def _companion(settings: Settings) -> CompanionClient:
    return create_companion_client(settings=settings)


def _toasts() -> ToastQueue:
    if TOASTS_KEY not in st.session_state:
        st.session_state[TOASTS_KEY] = ToastQueue()
    return st.session_state[TOASTS_KEY]


def _navigate(page: str, **state: Any) -> None:
    st.session_state.update(state)
    st.session_state[PAGE_KEY] = page
    st.rerun()


def _call(settings: Settings, action: Callable[[FitnessApiClient], Awaitable[T]]) -> T:
    """Run ``action`` against a fresh client carrying the stored session cookie."""

    async def _run() -> T:
        client = create_fitness_api_client(
            settings=settings, session_token=st.session_state.get(TOKEN_KEY)
        )
        try:
            return await action(client)
        finally:
            st.session_state[TOKEN_KEY] = client.session_token
            await client.aclose()

    return asyncio.run(_run())


def _mutate(
    settings: Settings,
    action: Callable[[FitnessApiClient], Awaitable[Any]],
    *,
    success: str,
    failure: str,
) -> bool:
    try:
        _call(settings, action)
    except (FitnessApiError, CompanionError) as exc:
        logger.warning("%s: %s", failure, exc)
        _toasts().show(failure, "error")
        return False
    _toasts().show(success, "success")
    return True


def _load(
    settings: Settings, page: str, factory: Callable[[FitnessApiClient], Awaitable[T]]
) -> PageState[T]:
    """Load a page into its loaded or error state.

    Script runs are serialized, so a load always finishes inside the run that
    started it and its scope is never closed early here.
    """

    return _call(settings, lambda api: PageScope(page).load(factory(api)))


def _render_state(state: PageState[Any]) -> bool:
    if state.loading:
        skeleton()
        return False
    if state.error is not None:
        st.error(state.error)
        return False
    return True


# pages


def dashboard_page(settings: Settings) -> None:
    st.header("Dashboard")
    state = _load(settings, "dashboard", lambda api: LoadDashboardUseCase(api)())
    if not _render_state(state) or state.data is None:
        return
    view = state.data
    if view.user:
        st.subheader(f"Hello, {view.user.name or 'athlete'}")
    today = view.today
    cols = st.columns(4)
    cols[0].metric("Calories", f"{today.total_calories:.0f}" if today else "0")
    cols[1].metric("Protein", f"{today.total_protein:.0f} g" if today else "0 g")
    cols[2].metric("Run", f"{(today.run_distance if today else 0) / 1000:.2f} km")
    cols[3].metric("Volume", f"{today.workout_volume_kg if today else 0:.0f} kg")

    st.subheader("Recent workouts")
    if not view.recent_sessions:
        st.info("No workouts logged yet.")
    for session in view.recent_sessions:
        with card(session.notes or "Workout", session.start_time.strftime("%a %d %b, %H:%M")):
            st.caption(f"{len(session.sets)} sets")
            if st.button("Open", key=f"dash-open-{session.id}"):
                _navigate("Workout session", **{SESSION_ID_KEY: session.id})


def workouts_page(settings: Settings) -> None:
    st.header("Workouts")
    state = _load(settings, "workouts", lambda api: LoadWorkoutLogUseCase(api)())
    if not _render_state(state) or state.data is None:
        return
    view = state.data

    if st.button("Start empty session", type="primary"):
        try:
            session = _call(settings, lambda api: StartEmptySessionUseCase(api)())
        except FitnessApiError:
            _toasts().show("Error starting session", "error")
        else:
            _navigate("Workout session", **{SESSION_ID_KEY: session.id})

    st.subheader("Routines")
    if not view.routines:
        st.caption("No routines yet.")
    for routine in view.routines:
        with card(routine.name, ", ".join(e.exercise_name for e in routine.exercises[:3])):
            start_col, delete_col = st.columns(2)
            if start_col.button("Start", key=f"routine-start-{routine.id}"):
                try:
                    session = _call(settings, lambda api, r=routine: StartRoutineUseCase(api)(r))
                except FitnessApiError:
                    _toasts().show("Error starting routine", "error")
                else:
                    _navigate("Workout session", **{SESSION_ID_KEY: session.id})
            if delete_col.button("Delete", key=f"routine-delete-{routine.id}"):
                if _mutate(
                    settings,
                    lambda api, r=routine: api.delete_routine(r.id),
                    success="Routine deleted",
                    failure="Error deleting routine",
                ):
                    st.rerun()

    with st.expander("Create routine"):
        with st.form("create-routine", clear_on_submit=True):
            name = st.text_input("Routine name")
            names = {e.id: e.name for e in view.exercises}
            chosen = st.multiselect("Exercises", list(names), format_func=names.get)
            if st.form_submit_button("Save routine"):
                if not name or not chosen:
                    st.warning("A routine needs a name and at least one exercise.")
                elif _mutate(
                    settings,
                    lambda api: CreateRoutineUseCase(api)(name, chosen),
                    success="Routine created",
                    failure="Error creating routine",
                ):
                    st.rerun()

    with st.expander("Create exercise"):
        with st.form("create-exercise", clear_on_submit=True):
            name = st.text_input("Name")
            category = st.text_input("Category")
            equipment = st.text_input("Equipment")
            if st.form_submit_button("Save exercise"):
                if not name or not category:
                    st.warning("Name and category are required.")
                elif _mutate(
                    settings,
                    lambda api: CreateExerciseUseCase(api)(
                        ExerciseCreate(name=name, category=category, equipment=equipment or None)
                    ),
                    success="Exercise created",
                    failure="Error creating exercise",
                ):
                    st.rerun()

    st.subheader("History")
    for session in view.sessions:
        with card(session.notes or "Workout", session.start_time.strftime("%a %d %b, %H:%M")):
            open_col, delete_col = st.columns(2)
            if open_col.button("Open", key=f"session-open-{session.id}"):
                _navigate("Workout session", **{SESSION_ID_KEY: session.id})
            if delete_col.button("Delete", key=f"session-delete-{session.id}"):
                if _mutate(
                    settings,
                    lambda api, s=session: api.delete_session(s.id),
                    success="Session deleted",
                    failure="Error deleting session",
                ):
                    st.rerun()


def _timer_command(command: Callable[[], Any]) -> None:
    try:
        command()
    except CompanionError as exc:
        logger.warning("Rest timer command failed: %s", exc)
        _toasts().show(f"Rest timer unavailable: {exc.message}", "error")
    st.rerun()


def _timer_panel(companion: CompanionClient) -> None:
    try:
        timer = companion.timer()
    except CompanionError as exc:
        st.caption(f"Rest timer unavailable: {exc.message}")
        return
    if not timer.is_running:
        return
    with card("Rest timer"):
        st.markdown(f"## {'🔴 ' if timer.overtime else ''}{timer.display}")
        cols = st.columns(5)
        if cols[0].button("−15", key="timer-minus"):
            _timer_command(lambda: companion.add_time(-15))
        if cols[1].button("+15", key="timer-plus"):
            _timer_command(lambda: companion.add_time(15))
        if timer.is_paused:
            if cols[2].button("Resume", key="timer-resume"):
                _timer_command(companion.resume_timer)
        elif cols[2].button("Pause", key="timer-pause"):
            _timer_command(companion.pause_timer)
        if cols[3].button("Stop", key="timer-stop"):
            _timer_command(companion.stop_timer)
        if cols[4].button("Refresh", key="timer-refresh"):
            st.rerun()


def workout_session_page(settings: Settings) -> None:
    session_id = st.session_state.get(SESSION_ID_KEY)
    if session_id is None:
        st.info("Pick a session from Workouts.")
        return
    companion = _companion(settings)
    try:
        state = _load(
            settings, "workout-session", lambda api: LoadWorkoutSessionUseCase(api)(session_id)
        )
    except SessionNotFoundError:
        st.error("Session not found.")
        return
    if not _render_state(state) or state.data is None:
        return
    view = state.data

    st.header(view.session.notes or "Workout")
    elapsed_col, volume_col = st.columns(2)
    elapsed = elapsed_since(view.session.start_time, datetime.now(timezone.utc))
    elapsed_col.metric("Elapsed", elapsed)
    volume_col.metric("Volume", f"{view.volume:.0f} kg")
    _timer_panel(companion)

    for group in view.groups:
        st.subheader(group.exercise_name)
        for number, workout_set in enumerate(group.sets, start=1):
            cols = st.columns([1, 2, 2, 2, 1, 1])
            cols[0].markdown(f"**{number}**")
            weight = cols[1].number_input(
                "kg", min_value=0.0, max_value=999.0, step=2.5,
                value=float(workout_set.weight_kg), key=f"w-{workout_set.id}",
            )
            reps = cols[2].number_input(
                "reps", min_value=0, max_value=999, step=1,
                value=int(workout_set.reps), key=f"r-{workout_set.id}",
            )
            rpe = cols[3].number_input(
                "RPE", min_value=0.0, max_value=10.0, step=0.5,
                value=float(workout_set.rpe or 0), key=f"rpe-{workout_set.id}",
            )
            updated = view.update_set_locally(
                workout_set.id, weight_kg=weight, reps=int(reps), rpe=rpe
            )
            if cols[4].button("✓", key=f"save-{workout_set.id}") and updated is not None:
                _save_set(settings, companion, updated)
            if swipe_actions(cols[5], f"set-{workout_set.id}") == "delete":
                if _mutate(
                    settings,
                    lambda api, s=workout_set: DeleteSetUseCase(api)(view, s.id),
                    success="Set deleted",
                    failure="Error deleting set",
                ):
                    st.rerun()
        add_key = f"add-{group.exercise_id}-{group.sets[0].id}"
        if st.button(f"Add set to {group.exercise_name}", key=add_key):
            last = group.sets[-1]
            if _mutate(
                settings,
                lambda api, g=group, s=last: AddSetUseCase(api)(
                    view, g.exercise_id, weight_kg=s.weight_kg, reps=s.reps, rpe=s.rpe or 0
                ),
                success="Set added",
                failure="Error adding set",
            ):
                st.rerun()

    with st.expander("Add exercise"):
        query = st.text_input("Search exercises", key="exercise-search")
        for exercise in search_exercises(view.exercises, query)[:20]:
            if st.button(f"{exercise.name} · {exercise.category}", key=f"pick-{exercise.id}"):
                if _mutate(
                    settings,
                    lambda api, e=exercise: AddSetUseCase(api)(view, e.id),
                    success="Exercise added",
                    failure="Error adding set",
                ):
                    st.rerun()

    if st.button("Finish session", type="primary"):
        finished = _call(settings, lambda api: FinishSessionUseCase(api, companion)(view.session.id))
        if finished:
            _toasts().show("Workout finished", "success")
            _navigate("Workouts")
        _toasts().show("Error finishing session", "error")
        st.rerun()


def _save_set(settings: Settings, companion: CompanionClient, workout_set: WorkoutSet) -> None:
    try:
        restarted = _call(settings, lambda api: SaveSetUseCase(api, companion)(workout_set))
    except FitnessApiError as exc:
        logger.warning("Error saving set: %s", exc)
        _toasts().show("Error saving set", "error")
        return
    _toasts().show("Set saved", "success")
    if not restarted:
        _toasts().show("Rest timer unavailable", "warning")
    st.rerun()


def _live_run_panel(settings: Settings) -> None:
    companion = _companion(settings)
    run_id = st.session_state.get(LIVE_RUN_KEY)
    if run_id is None:
        permission = st.selectbox(
            "Motion sensor", ("granted", "denied", "unavailable"), key="motion-permission"
        )
        if st.button("Start live run", type="primary"):
            try:
                snapshot = companion.start_live_run(permission)
            except CompanionError as exc:
                _toasts().show(f"Could not start live run: {exc.message}", "error")
            else:
                st.session_state[LIVE_RUN_KEY] = snapshot.id
                st.rerun()
        return

    try:
        snapshot = companion.live_run(run_id)
    except CompanionError as exc:
        st.warning(f"Live run unavailable: {exc.message}")
        if exc.status_code in (404, 409):
            st.session_state.pop(LIVE_RUN_KEY, None)
        return
    st.caption(f"Device endpoint: POST /v1/live-runs/{run_id}/positions and /motion")
    cols = st.columns(4)
    cols[0].metric("Distance", f"{snapshot.distance_meters / 1000:.2f} km")
    minutes, seconds = divmod(snapshot.duration_seconds, 60)
    cols[1].metric("Time", f"{minutes}:{seconds:02d}")
    cols[2].metric("Steps", snapshot.steps if snapshot.step_counting else "n/a")
    accuracy = snapshot.gps_accuracy
    cols[3].metric("GPS", f"±{accuracy} m" if accuracy is not None else "–")
    st.pydeck_chart(
        live_deck(snapshot.route, snapshot.position, mapbox_token=settings.mapbox_token)
    )

    unsaved = snapshot.status == "unsaved"
    if unsaved:
        st.warning("This run has not been saved yet. Retry the save or discard it.")
    refresh_col, stop_col, abandon_col = st.columns(3)
    if refresh_col.button("Refresh"):
        st.rerun()
    if stop_col.button("Retry save" if unsaved else "Stop & save", type="primary"):
        try:
            companion.stop_live_run(run_id, session_token=st.session_state.get(TOKEN_KEY))
        except CompanionError as exc:
            _toasts().show(f"Sync failed: {exc.message}", "error")
        else:
            _toasts().show("Run saved", "success")
            st.session_state.pop(LIVE_RUN_KEY, None)
        st.rerun()
    if abandon_col.button("Discard" if unsaved else "Abandon"):
        try:
            companion.abandon_live_run(run_id)
        except CompanionError as exc:
            logger.warning("Abandoning live run %s failed: %s", run_id, exc)
        st.session_state.pop(LIVE_RUN_KEY, None)
        st.rerun()


def runs_page(settings: Settings) -> None:
    st.header("Runs")
    with card("Live run"):
        _live_run_panel(settings)

    state = _load(settings, "runs", lambda api: LoadRunLogUseCase(api)())
    if not _render_state(state) or state.data is None:
        return
    view = state.data

    weekly = weekly_distance_km(view.runs, datetime.now(timezone.utc))
    st.metric("This week", f"{weekly:.1f} km", help=f"Goal {WEEKLY_GOAL_KM:.0f} km")
    st.progress(min(1.0, weekly / WEEKLY_GOAL_KM))

    with st.expander("Log a run manually"):
        with st.form("manual-run", clear_on_submit=True):
            day = st.date_input("Date", value=date.today())
            start = st.time_input("Start", value=time(7, 0))
            distance = st.number_input("Distance (km)", min_value=0.0, step=0.1)
            minutes = st.number_input("Duration (min)", min_value=0.0, step=1.0)
            elevation = st.number_input("Elevation gain (m)", min_value=0.0, step=1.0)
            heart_rate = st.number_input("Avg heart rate", min_value=0, step=1)
            shoe_labels = {s.id: s.label for s in view.shoes if s.is_active}
            shoe_id = st.selectbox(
                "Shoe", [None, *shoe_labels], format_func=lambda i: shoe_labels.get(i, "None")
            )
            run_type = st.selectbox("Type", RUN_TYPES)
            notes = st.text_input("Notes")
            if st.form_submit_button("Save run"):
                form = ManualRunForm(
                    start_time=datetime.combine(day, start).astimezone(timezone.utc),
                    distance_km=distance,
                    duration_minutes=minutes,
                    elevation_m=elevation or None,
                    avg_heart_rate=int(heart_rate) or None,
                    shoe_id=shoe_id,
                    run_type=run_type,
                    notes=notes,
                )
                if _mutate(
                    settings,
                    lambda api: LogManualRunUseCase(api)(form),
                    success="Run logged",
                    failure="Save failed.",
                ):
                    st.rerun()

    with st.expander("Add shoe"):
        with st.form("add-shoe", clear_on_submit=True):
            brand = st.text_input("Brand")
            model = st.text_input("Model")
            if st.form_submit_button("Save shoe"):
                if brand and model and _mutate(
                    settings,
                    lambda api: api.create_shoe(ShoeCreate(brand=brand, model=model)),
                    success="Shoe added",
                    failure="Error adding shoe",
                ):
                    st.rerun()

    if not view.runs:
        st.info("No runs yet.")
    for run in view.runs:
        title = f"{run.distance_meters / 1000:.2f} km · {run.run_type}"
        with card(title, run.start_time.strftime("%a %d %b, %H:%M")):
            cols = st.columns(4)
            cols[0].caption(f"{run.duration_seconds // 60}m {run.duration_seconds % 60}s")
            cols[1].caption(f"{average_pace(run.duration_seconds, run.distance_meters)} /km")
            if cols[2].button("Details", key=f"run-open-{run.id}"):
                _navigate("Run detail", **{RUN_ID_KEY: run.id})
            if cols[3].button("Delete", key=f"run-delete-{run.id}"):
                if _mutate(
                    settings,
                    lambda api, r=run: api.delete_run(r.id),
                    success="Run deleted",
                    failure="Error deleting run",
                ):
                    st.rerun()


def run_detail_page(settings: Settings) -> None:
    run_id = st.session_state.get(RUN_ID_KEY)
    if run_id is None:
        st.info("Pick a run from Runs.")
        return
    try:
        state = _load(settings, "run-detail", lambda api: LoadRunDetailUseCase(api)(run_id))
    except RunNotFoundError:
        st.error("Run not found.")
        return
    if not _render_state(state) or state.data is None:
        return
    detail = state.data
    run = detail.run

    st.header(f"{run.run_type} · {run.start_time.strftime('%d %b %Y')}")
    cols = st.columns(4)
    cols[0].metric("Distance", f"{run.distance_meters / 1000:.2f} km")
    cols[1].metric("Moving time", detail.moving_time)
    cols[2].metric("Pace", f"{detail.pace} /km")
    cols[3].metric("Elevation", f"{run.elevation_gain_meters:.0f} m")
    if run.shoe_name:
        st.caption(f"Shoe: {run.shoe_name}")
    if run.notes:
        st.caption(run.notes)

    static_map = build_static_map(
        detail.path, template=settings.tile_url_template, api_key=settings.tile_api_key
    )
    if static_map is not None:
        st.markdown(static_map_html(static_map), unsafe_allow_html=True)
    else:
        st.caption("No route recorded.")

    if detail.splits:
        st.subheader("Splits")
        st.dataframe(
            pd.DataFrame(
                [
                    {"km": s.index, "distance (m)": round(s.distance_m), "time": s.display_time}
                    for s in detail.splits
                ]
            ),
            hide_index=True,
        )
    if detail.elevation:
        st.subheader("Elevation")
        st.area_chart(pd.DataFrame(detail.elevation).set_index("index"))


def meals_page(settings: Settings) -> None:
    st.header("Nutrition")
    state = _load(settings, "meals", lambda api: LoadMealLogUseCase(api)())
    if not _render_state(state) or state.data is None:
        return
    view = state.data
    budget = view.budget

    ring_col, stats_col, water_col = st.columns(3)
    with ring_col:
        ring(budget.progress_percent, "remaining", f"{budget.remaining:.0f}")
    stats_col.metric("Goal", budget.target)
    stats_col.metric("Eaten", budget.eaten)
    stats_col.metric("Burned", f"{budget.burned:.0f}")
    with water_col:
        ring(view.water_progress, "water", f"{view.water_ml:.0f} ml")
        st.caption(f"{view.water_ml:.0f}ml / 3000ml")
        for amount in (250, 500):
            if st.button(f"+{amount} ml", key=f"water-{amount}"):
                if _mutate(
                    settings,
                    lambda api, a=amount: api.log_water(a),
                    success=f"+{amount}ml water",
                    failure="Failed to log water",
                ):
                    st.rerun()

    with st.form("create-meal", clear_on_submit=True):
        meal_name = st.text_input("New meal", placeholder="Breakfast, Lunch...")
        if st.form_submit_button("Add meal"):
            if _mutate(
                settings,
                lambda api: CreateMealUseCase(api)(meal_name),
                success="Meal created",
                failure="Failed to create meal",
            ):
                st.rerun()

    if not view.meals:
        st.info("No meals logged yet.")
    for meal in view.meals:
        totals = meal_totals(meal)
        with card(
            meal.name or "Meal",
            f"{meal.eaten_at.strftime('%H:%M')} · {totals.calories} kcal · "
            f"P {totals.protein_g:.1f}g · C {totals.carbs_g:.1f}g · F {totals.fat_g:.1f}g",
        ):
            for entry in meal.entries:
                name_col, kcal_col, delete_col = st.columns([4, 2, 1])
                name_col.write(entry.name)
                kcal_col.caption(f"{entry.calories} kcal")
                if swipe_actions(delete_col, f"entry-{entry.id}") == "delete":
                    if _mutate(
                        settings,
                        lambda api, e=entry: api.delete_entry(e.id),
                        success="Entry removed",
                        failure="Failed to delete entry",
                    ):
                        st.rerun()
            _meal_editor(settings, view.library, meal)


def _meal_editor(settings: Settings, library: List[FoodLibraryItem], meal: Meal) -> None:
    rename_col, delete_col = st.columns([4, 1])
    new_name = rename_col.text_input("Rename", value=meal.name or "", key=f"rename-{meal.id}")
    renamed = new_name and new_name != (meal.name or "")
    if renamed and rename_col.button("Rename", key=f"rename-btn-{meal.id}"):
        if _mutate(
            settings,
            lambda api: api.rename_meal(meal.id, new_name),
            success="Meal renamed",
            failure="Failed to rename meal",
        ):
            st.rerun()
    if delete_col.button("Delete meal", key=f"meal-delete-{meal.id}"):
        if _mutate(
            settings,
            lambda api: api.delete_meal(meal.id),
            success="Meal deleted",
            failure="Failed to delete meal",
        ):
            st.rerun()

    sheet_key = f"add-food-{meal.id}"
    sheet: Overlay = st.session_state.setdefault(sheet_key, Overlay(sheet_key))
    if not sheet.is_open and st.button("Add food", key=f"add-food-open-{meal.id}"):
        sheet.open()
        st.rerun()

    def _library_picker() -> None:
        query = st.text_input("Search library", key=f"lib-search-{meal.id}")
        grams: Stepper = st.session_state.setdefault(
            f"grams-{meal.id}", Stepper(value=100, minimum=1, maximum=2000, step=10)
        )
        stepper_input("Amount", grams, key=f"lib-grams-{meal.id}", unit="g")
        for item in search_library(library, query)[:15]:
            label = f"{item.name} · {item.calories_per_100g:.0f} kcal/100g"
            if st.button(label, key=f"lib-{meal.id}-{item.id}"):
                if _mutate(
                    settings,
                    lambda api, i=item: AddLibraryEntryUseCase(api)(meal.id, i, grams.value),
                    success="Food added",
                    failure="Failed to add food",
                ):
                    sheet.close()
                    st.rerun()

    bottom_sheet(sheet, "Add from library", _library_picker)

    with st.expander("Custom entry"):
        with st.form(f"custom-{meal.id}", clear_on_submit=True):
            name = st.text_input("Name")
            calories = st.number_input("Calories", min_value=0, step=1)
            protein = st.number_input("Protein (g)", min_value=0.0, step=0.5)
            carbs = st.number_input("Carbs (g)", min_value=0.0, step=0.5)
            fat = st.number_input("Fat (g)", min_value=0.0, step=0.5)
            save_to_library = st.checkbox("Also save per-100 g values to the library")
            if st.form_submit_button("Add entry") and name:
                entry = FoodEntryCreate(
                    name=name, calories=int(calories), protein_g=protein, carbs_g=carbs, fat_g=fat
                )
                if _mutate(
                    settings,
                    lambda api: AddCustomEntryUseCase(api)(meal.id, entry),
                    success="Food added",
                    failure="Failed to add food",
                ) and save_to_library:
                    _mutate(
                        settings,
                        lambda api: api.create_library_item(
                            FoodLibraryItemCreate(
                                name=name,
                                calories_per_100g=calories,
                                protein_per_100g=protein,
                                carbs_per_100g=carbs,
                                fat_per_100g=fat,
                            )
                        ),
                        success="Saved to library",
                        failure="Failed to save library item",
                    )
                st.rerun()


def analytics_page(settings: Settings) -> None:
    st.header("Analytics")
    days = st.radio("Range", RANGES, horizontal=True, format_func=lambda d: f"{d} days")
    state = _load(settings, "analytics", lambda api: LoadAnalyticsUseCase(api)(days))
    if not _render_state(state):
        return
    if not state.data:
        st.info("No data for this range.")
        return
    frame = pd.DataFrame([s.model_dump() for s in state.data]).set_index("date")
    frame["run_km"] = frame["run_distance"] / 1000
    st.subheader("Calories")
    st.bar_chart(frame[["total_calories", "exercise_calories"]])
    st.subheader("Macros")
    st.line_chart(frame[["total_protein", "total_carbs", "total_fat"]])
    st.subheader("Running (km)")
    st.bar_chart(frame["run_km"])
    st.subheader("Training volume (kg)")
    st.area_chart(frame["workout_volume_kg"])
    weights = frame["weight_kg"][frame["weight_kg"] > 0]
    if not weights.empty:
        st.subheader("Body weight")
        st.line_chart(weights)


def profile_page(settings: Settings) -> None:
    st.header("Profile")
    state = _load(settings, "profile", lambda api: LoadProfileUseCase(api)())
    if not _render_state(state) or state.data is None:
        return
    view = state.data
    user = view.user
    activity_keys = list(ACTIVITY_LABELS)
    goal_keys = list(GOAL_LABELS)

    with st.form("profile"):
        name = st.text_input("Name", value=user.name)
        height = st.number_input(
            "Height (cm)", min_value=0.0, value=float(user.height_cm or 0), step=1.0
        )
        born = user.birth_date()
        dob = st.date_input("Date of birth", value=born, min_value=date(1900, 1, 1))
        sex = st.radio("Sex", ("M", "F"), index=0 if user.sex != "F" else 1, horizontal=True)
        activity = st.selectbox(
            "Activity level",
            activity_keys,
            index=(
                activity_keys.index(user.activity_level)
                if user.activity_level in activity_keys
                else 0
            ),
            format_func=ACTIVITY_LABELS.get,
        )
        goal = st.selectbox(
            "Weight goal",
            goal_keys,
            index=goal_keys.index(user.weight_goal) if user.weight_goal in goal_keys else 1,
            format_func=GOAL_LABELS.get,
        )
        weight = st.number_input(
            "Current weight (kg)", min_value=0.0, value=float(view.latest_weight or 0), step=0.1
        )
        submitted = st.form_submit_button("Save profile")

    estimate = view.energy(date.today(), activity_level=activity, weight_goal=goal)
    if estimate is not None:
        cols = st.columns(3)
        cols[0].metric("BMR", estimate.display_bmr)
        cols[1].metric("Maintenance", estimate.maintenance)
        cols[2].metric("Target", estimate.target)
    else:
        st.caption("Add your height and date of birth to see energy targets.")

    if submitted:
        if not name:
            st.warning("Name is required.")
            return
        payload = UserUpdate(
            name=name,
            height_cm=height or None,
            dob=datetime.combine(dob, time(0), tzinfo=timezone.utc).isoformat() if dob else None,
            sex=sex,
            activity_level=activity,
            weight_goal=goal,
        )
        if _mutate(
            settings,
            lambda api: SaveProfileUseCase(api)(payload, weight or None, view.latest_metric),
            success="Profile saved",
            failure="Profile persistence failed",
        ):
            st.rerun()


def login_page(settings: Settings) -> None:
    st.header("Sign in")
    st.link_button("Continue with Google", google_login_url(settings.backend_url))

    phone_sheet: Overlay = st.session_state.setdefault("phone-sheet", Overlay("phone-login"))
    if st.button("Use phone number"):
        phone_sheet.open()

    def _phone_form() -> None:
        with st.form("phone-login"):
            phone = st.text_input("Phone number", placeholder="98765 43210")
            token = st.text_input("Verification token", type="password")
            if st.form_submit_button("Verify"):
                try:
                    user = _call(settings, lambda api: PhoneSignInUseCase(api)(token, phone))
                except InvalidPhoneNumberError as exc:
                    st.error(str(exc))
                except FitnessApiError as exc:
                    st.error(exc.message)
                else:
                    greeting = f"Welcome, {user.name}" if user and user.name else "Welcome"
                    _toasts().show(greeting, "success")
                    st.rerun()

    modal(phone_sheet, "Phone sign-in", _phone_form)

    with st.expander("Already have a session cookie?"):
        cookie = st.text_input("Session token", type="password", key="manual-token")
        if st.button("Use token") and cookie:
            st.session_state[TOKEN_KEY] = cookie
            st.rerun()


RENDERERS = {
    "Dashboard": dashboard_page,
    "Workouts": workouts_page,
    "Workout session": workout_session_page,
    "Runs": runs_page,
    "Run detail": run_detail_page,
    "Meals": meals_page,
    "Analytics": analytics_page,
    "Profile": profile_page,
}


def main() -> None:
    """Render the selected page for the signed-in user."""

    st.set_page_config(page_title="Fitness Buddy", layout="wide")
    settings = get_settings()
    logging.basicConfig()
    logging.getLogger("fitbuddy").setLevel(settings.log_level.upper())
    render_toasts(_toasts())

    try:
        user = _call(settings, lambda api: CurrentUserUseCase(api)())
    except FitnessApiError as exc:
        st.error(f"Backend unavailable: {exc.message}")
        return
    if user is None:
        login_page(settings)
        return

    with st.sidebar:
        st.title("Fitness Buddy")
        current = st.session_state.get(PAGE_KEY, "Dashboard")
        page = st.radio("Navigate", PAGES, index=PAGES.index(current))
        st.session_state[PAGE_KEY] = page
        if st.button("Log out"):
            try:
                _call(settings, lambda api: LogoutUseCase(api)())
            except FitnessApiError as exc:
                logger.warning("Logout failed: %s", exc)
            st.session_state[TOKEN_KEY] = None
            st.rerun()

    RENDERERS[page](settings)


if __name__ == "__main__":
    main()
