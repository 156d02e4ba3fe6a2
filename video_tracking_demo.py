#!/usr/bin/env python3
"""
Video Tracking Demo

Walks through one stretch of a game tracked from video: calibrating the
clock at the opening tip, recording shots with follow-up prompts, a
shooting foul with free throws, and the end-of-quarter prompt.
"""

import os
import sys
import tempfile

sys.path.insert(0, os.path.join(os.path.dirname(os.path.abspath(__file__)), "src"))

from logging_config import setup_database_logging, setup_logging
from database import ClockSyncDatabaseAPI, SQLiteStatGateway
from game_clock import AdvancementOutcome
from play_sequence import FoulType
from stat_recording import GameContext, PlayerRef, StatEvent, StatModifier, StatType
from tracking_session import VideoTrackingSession


def main():
    """Track a short sequence of plays against a throwaway database"""
    setup_logging(level="INFO", enable_file=False)
    setup_database_logging()

    print("🏀 Video Tracking Demo")
    print("=" * 50)

    db_path = os.path.join(tempfile.mkdtemp(), "demo_tracker.db")
    context = GameContext(game_id="demo-game", team_a_id="hawks", team_b_id="owls")
    guard = PlayerRef("hawks-guard", "hawks")
    center = PlayerRef("hawks-center", "hawks")
    wing = PlayerRef("owls-wing", "owls")

    session = VideoTrackingSession(
        context,
        SQLiteStatGateway(db_path),
        video_id="demo-video",
        clock_persistence=ClockSyncDatabaseAPI(db_path),
    )

    # Opening tip 30 seconds into the video
    session.calibrate(jumpball_ms=30_000, quarter_length_minutes=12)
    update = session.update_video_time(90_000)
    print(f"Clock after one minute of video: {update.clock.format()}")

    # Made basket -> assist prompt
    prompt = session.record_stat(StatEvent.create(
        context.game_id, "hawks", StatType.FIELD_GOAL, StatModifier.MADE, guard
    ))
    print(f"Prompt opened: {prompt.type.value}")
    session.engine.select_assist(center)

    # Missed three -> rebound prompt
    session.update_video_time(120_000)
    session.record_stat(StatEvent.create(
        context.game_id, "owls", StatType.THREE_POINTER, StatModifier.MISSED, wing
    ))
    session.engine.select_rebounder("hawks", center)

    # Shooting foul on a missed two -> clock frozen, two free throws
    session.update_video_time(150_000)
    session.engine.start_foul()
    session.engine.select_fouler("owls", wing)
    session.engine.select_foul_type(FoulType.SHOOTING_2PT)
    session.engine.select_victim(guard)
    session.engine.select_shot_outcome(False)
    print(f"Clock frozen at: {session.current_clock.format()}")

    session.update_video_time(175_000)
    print(f"Video moved on, clock still reads: {session.current_clock.format()}")
    session.engine.record_free_throw(True)
    session.engine.record_free_throw(True)
    session.resume_clock()
    print(f"Clock resumed: {session.current_clock.format()}")

    session.drain()
    print(f"Score after writes: {session.scoreboard}")

    # Run out the first quarter
    update = session.update_video_time(30_000 + 13 * 60_000)
    if update.outcome == AdvancementOutcome.ADVANCE_PROMPT:
        prompt = session.detector.pending_prompt
        print(f"Q{prompt.expired_quarter} over - advancing to period {prompt.next_period}")
        session.advance_quarter()
    print(f"Clock: {session.current_clock.format()}")

    # Undo the last free throw
    session.undo_last()
    session.drain()
    print(f"Score after undo: {session.refresh_scores()}")

    print()
    print("📝 Recorded stats")
    print("-" * 30)
    for stat in session.gateway.get_game_stats(context.game_id):
        who = stat.attributed_player_id or "team"
        print(f"Q{stat.quarter} {stat.game_time_minutes:02d}:{stat.game_time_seconds:02d} "
              f"{stat.team_id} {stat.stat_type.value} {stat.modifier or ''} ({who})")


if __name__ == "__main__":
    main()
