from __future__ import annotations

import argparse
import logging
import os
import random
from typing import List, Optional

from .ai import AIConfig, Tier
from .board import Coord, parse_player
from .db import db_record_game, load_stats, resolve_db_path
from .events import Event, GameEvent
from .scheduler import ImmediateScheduler, Scheduler, TimerScheduler
from .session import GameResult, GameSession


def _print_event(event: GameEvent) -> None:
    d = event.data
    if event.kind is Event.STONE_PLACED and d.get("ai"):
        print(f"AI ({d['player']}) plays {d['row']},{d['col']}")
    elif event.kind is Event.STONES_FLIPPED:
        print(f"  {d['count']} stone(s) flipped")
    elif event.kind is Event.PASS:
        print(f"{d['player'].capitalize()} has no legal move and passes.")
    elif event.kind is Event.AI_THINKING:
        print(f"AI ({d['tier']}) is thinking...")


def _print_result(result: GameResult) -> None:
    print(f"Final score  black {result.black} - white {result.white}")
    if result.outcome in ("win", "loss"):
        print("You win!" if result.outcome == "win" else "You lose.")
    elif result.outcome == "draw":
        print("Draw!")
    else:
        print(f"{result.outcome.capitalize()} wins!")


def _print_stats(db_path: str) -> None:
    stats = load_stats(db_path)
    print(f"Games: {stats.total_games}  wins: {stats.wins}  losses: {stats.losses}  draws: {stats.draws}")
    print(f"Win rate: {stats.win_rate * 100:.1f}%  streak: {stats.current_streak} (best {stats.max_streak})")
    print(f"Play time: {stats.total_play_time / 60:.0f} min  average game: {stats.average_game_time:.0f} s")
    print(f"Highest score: {stats.highest_score}  perfect wins: {stats.perfect_wins}")
    for tier in Tier:
        rec = stats.ai_stats.get(tier.value, {})
        print(f"  vs {tier.value:<6} {rec.get('wins', 0)}W {rec.get('losses', 0)}L")


def _parse_move(text: str) -> Coord:
    sep = ',' if ',' in text else ' '
    r_s, c_s = [t for t in text.split(sep) if t != '']
    return (int(r_s), int(c_s))


def main(argv: Optional[List[str]] = None) -> None:
    parser = argparse.ArgumentParser(description='Othello against a friend or a tiered heuristic AI')
    parser.add_argument('--ai', choices=[t.value for t in Tier], default=None, help='AI level (omit for two humans)')
    parser.add_argument('--ai-side', choices=['black', 'white'], default='white', help='Color played by the AI')
    parser.add_argument('--seed', type=int, default=None, help='RNG seed for the easy AI')
    parser.add_argument('--hint', action='store_true', help='Mark legal moves and print the best move')
    parser.add_argument('--db', default=None, help='SQLite DB file path for settings and statistics')
    parser.add_argument('--stats', action='store_true', help='Print stored statistics and exit')
    parser.add_argument('--delay', type=float, default=0.0, help='Seconds the AI waits before moving')
    parser.add_argument('--log-level', default=os.getenv('OTHELLO_LOG_LEVEL', 'WARNING'), help='Logging level')
    args = parser.parse_args(argv)

    logging.basicConfig(level=args.log_level.upper(), format='%(levelname)s %(name)s: %(message)s')
    db_path = resolve_db_path(args.db)

    if args.stats:
        _print_stats(db_path)
        return

    ai = AIConfig(tier=Tier.parse(args.ai), side=parse_player(args.ai_side)) if args.ai else None
    scheduler: Scheduler = TimerScheduler() if args.delay > 0 else ImmediateScheduler()

    def on_game_over(result: GameResult, s: GameSession) -> None:
        db_record_game(db_path, result, ai.tier if ai else None, s.elapsed())

    if ai is not None:
        print(f"AI ({ai.tier.value}) plays {ai.side.label}.")
    session = GameSession(
        ai=ai,
        scheduler=scheduler,
        rng=random.Random(args.seed),
        listeners=[_print_event],
        on_game_over=on_game_over,
        thinking_time=args.delay,
    )

    while session.active:
        if session.is_thinking:
            if isinstance(scheduler, TimerScheduler):
                scheduler.join(args.delay * 4 + 1.0)
            continue
        hint = session.hints() if args.hint else {"moves": [], "best": None}
        print(session.board.pretty(set(hint["moves"])))
        counts = session.board.count_stones()
        print(f"Black {counts.black} - White {counts.white}. {session.current_player.label.capitalize()} to move.")
        if hint["best"] is not None:
            print('Best move:', hint["best"])
        try:
            text = input('Enter your move as r,c or r c: ').strip()
        except EOFError:
            print()
            return
        try:
            move = _parse_move(text)
        except ValueError:
            print('Could not parse. Try again.')
            continue
        if not all(0 <= v < 8 for v in move):
            print('Off the board. Try again.')
            continue
        result = session.attempt_move(*move)
        if not result.ok:
            print(f'Illegal move ({result.reason.value}). Try again.')

    print(session.board.pretty())
    if session.last_result is not None:
        _print_result(session.last_result)
