import pytest

from training_tracker import cli
from training_tracker.tracker import TrainingClient


def test_parser_commands():
    parser = cli.build_parser()
    args = parser.parse_args(["--url", "http://api", "start", "abc"])
    assert args.cmd == "start" and args.workout_id == "abc" and args.url == "http://api"

    args = parser.parse_args(["complete-set", "--session", "s1"])
    assert args.cmd == "complete-set" and args.session == "s1"

    with pytest.raises(SystemExit):
        parser.parse_args([])


async def _run(api, *argv):
    args = cli.build_parser().parse_args(list(argv))
    await cli.run(args, TrainingClient(http_client=api))


async def test_cli_walkthrough(api, capsys):
    await _run(api, "demo")
    assert "Created demo workout" in capsys.readouterr().out

    await _run(api, "workouts")
    out = capsys.readouterr().out
    assert "Upper Body" in out and "2 exercises, 5 sets" in out
    workout_id = out.split()[0]

    await _run(api, "start", workout_id)
    out = capsys.readouterr().out
    assert "[in-progress]" in out
    assert "Next: Bench Press set 1 of 3" in out

    await _run(api, "complete-set")
    assert "Next: Bench Press set 2 of 3" in capsys.readouterr().out

    await _run(api, "pause")
    assert "session paused" in capsys.readouterr().out

    await _run(api, "status")
    out = capsys.readouterr().out
    assert "[paused]" in out and "1/5 sets (20%)" in out

    await _run(api, "resume")
    await _run(api, "finish")
    assert "Workout finished and saved" in capsys.readouterr().out

    await _run(api, "status")
    assert "No active workout session" in capsys.readouterr().out

    await _run(api, "history")
    assert "completed" in capsys.readouterr().out


async def test_cli_refuses_second_start(api, capsys):
    await _run(api, "demo")
    await _run(api, "workouts")
    workout_id = capsys.readouterr().out.splitlines()[-1].split()[0]
    await _run(api, "start", workout_id)

    from training_tracker.tracker import TrackerError

    with pytest.raises(TrackerError, match="still active"):
        await _run(api, "start", workout_id)


async def test_cli_actions_without_session(api):
    from training_tracker.tracker import TrackerError

    with pytest.raises(TrackerError, match="No active workout session"):
        await _run(api, "finish")


async def test_cli_complete_set_on_empty_session(api, capsys):
    from datetime import datetime, timezone

    from training_tracker.core.config import get_settings
    from training_tracker.core.enums import SessionStatus
    from training_tracker.db.session import async_session_maker
    from training_tracker.models.session import WorkoutSession
    from training_tracker.tracker import TrackerError

    await _run(api, "demo")
    await _run(api, "workouts")
    workout_id = capsys.readouterr().out.splitlines()[-1].split()[0]
    async with async_session_maker() as db:
        db.add(
            WorkoutSession(
                user_id=get_settings().tracker_user_id,
                workout_id=workout_id,
                workout_name="Upper Body",
                start_time=datetime.now(timezone.utc),
                exercises=[],
                status=SessionStatus.IN_PROGRESS,
            )
        )
        await db.commit()

    with pytest.raises(TrackerError, match="no exercises"):
        await _run(api, "complete-set")
