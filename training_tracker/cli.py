"""Command line: serve the API or track a workout against a running one."""

from __future__ import annotations

import argparse
import asyncio
import sys

from training_tracker.core.config import get_settings
from training_tracker.core.logging import configure_logging
from training_tracker.schemas.workout import TemplateExercise, WorkoutTemplateCreate
from training_tracker.tracker import SessionTracker, TrackerError, TrainingClient
from training_tracker.tracker.progress import summarize


def serve(host: str, port: int, reload: bool) -> None:
    import uvicorn

    uvicorn.run("training_tracker.main:app", host=host, port=port, reload=reload)


def _print_position(tracker: SessionTracker) -> None:
    session = tracker.session
    summary = tracker.summary()
    print(f"Session {session.id}: {session.workout_name} [{tracker.status.value}]")
    print(f"  {summary.completed_sets}/{summary.total_sets} sets ({summary.percent}%)")
    exercise = tracker.current_exercise
    if exercise is not None and tracker.status.is_active:
        print(
            f"  Next: {exercise.exercise_name} set {tracker.cursor.current_set}"
            f" of {exercise.total_sets}"
        )


async def list_workouts(tracker: SessionTracker, q: str | None) -> None:
    workouts = await tracker.load_workouts(q)
    if not workouts:
        print("No workouts found")
    for w in workouts:
        total_sets = sum(ex.sets for ex in w.exercises)
        print(
            f"{w.id}  {w.name}  ({len(w.exercises)} exercises, {total_sets} sets,"
            f" ~{w.estimated_duration} min, {w.difficulty.value})"
        )


async def demo_workout(tracker: SessionTracker) -> None:
    """Create a sample "Upper Body" workout if the user has none."""
    if await tracker.load_workouts():
        print("Workouts already exist")
        return
    workout = await tracker.client.create_workout(
        WorkoutTemplateCreate(
            name="Upper Body",
            description="Push and pull basics",
            exercises=[
                TemplateExercise(exercise_id="bench-press", exercise_name="Bench Press", sets=3, reps=10, weight=60),
                TemplateExercise(exercise_id="barbell-row", exercise_name="Barbell Row", sets=2, reps=12, weight=50),
            ],
            estimated_duration=30,
            tags=["strength", "upper"],
        )
    )
    print(f"Created demo workout {workout.id}")


async def show_history(tracker: SessionTracker) -> None:
    sessions = await tracker.client.list_sessions()
    if not sessions:
        print("No sessions yet")
    for s in sessions:
        summary = summarize(s.exercises)
        duration = f"{s.duration} min" if s.duration is not None else "-"
        print(
            f"{s.id}  {s.start_time:%Y-%m-%d %H:%M}  {s.workout_name}  {s.status.value}"
            f"  {summary.percent}%  {duration}"
        )


async def _resolved(tracker: SessionTracker, session_id: str | None) -> SessionTracker:
    if await tracker.resolve(session_id) is None:
        raise TrackerError("No active workout session")
    return tracker


async def run(args: argparse.Namespace, client: TrainingClient) -> None:
    settings = get_settings()
    async with client:
        tracker = SessionTracker(client, body_weight_kg=args.body_weight or settings.body_weight_kg)
        try:
            if args.cmd == "workouts":
                await list_workouts(tracker, args.q)
            elif args.cmd == "demo":
                await demo_workout(tracker)
            elif args.cmd == "history":
                await show_history(tracker)
            elif args.cmd == "start":
                await tracker.resolve()
                if tracker.session is not None:
                    raise TrackerError(f"Session {tracker.session_id} is still active; finish or pause it first")
                await tracker.start(args.workout_id)
                _print_position(tracker)
            elif args.cmd == "status":
                if await tracker.resolve(args.session) is None:
                    print("No active workout session")
                else:
                    _print_position(tracker)
            elif args.cmd == "complete-set":
                await _resolved(tracker, args.session)
                outcome = await tracker.complete_set()
                await tracker.flush()
                if outcome.session_finished:
                    print("Workout finished and saved")
                else:
                    if outcome.exercise_finished:
                        print("Exercise done, moving to the next one")
                    _print_position(tracker)
            elif args.cmd == "pause":
                await _resolved(tracker, args.session)
                session = await tracker.pause()
                print(f"Progress saved, session paused after {session.duration} min")
            elif args.cmd == "resume":
                await _resolved(tracker, args.session)
                await tracker.resume()
                _print_position(tracker)
            elif args.cmd == "finish":
                await _resolved(tracker, args.session)
                session = await tracker.finish()
                print(f"Workout finished and saved ({session.duration} min)")
        finally:
            await tracker.close()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="training-tracker", description="Workout session tracker")
    parser.add_argument("--url", default=None, help="training API base URL")
    parser.add_argument("--user", default=None, help="user id sent as X-User-Id")
    parser.add_argument("--body-weight", type=float, default=None, help="kg, for calorie estimates")
    sub = parser.add_subparsers(dest="cmd", required=True)

    srv = sub.add_parser("serve")
    srv.add_argument("--host", default="127.0.0.1")
    srv.add_argument("--port", type=int, default=8000)
    srv.add_argument("--reload", action="store_true")

    wk = sub.add_parser("workouts")
    wk.add_argument("--q", default=None)

    sub.add_parser("demo")
    sub.add_parser("history")

    st = sub.add_parser("start")
    st.add_argument("workout_id")

    for name in ("status", "complete-set", "pause", "resume", "finish"):
        p = sub.add_parser(name)
        p.add_argument("--session", default=None, help="session id (default: the active one)")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    settings = get_settings()
    configure_logging(settings.log_level)

    if args.cmd == "serve":
        serve(args.host, args.port, args.reload)
        return 0

    client = TrainingClient(args.url, user_id=args.user)
    try:
        asyncio.run(run(args, client))
    except TrackerError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
