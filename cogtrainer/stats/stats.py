from __future__ import annotations

"""Session aggregation: records, history stats, ratings and summaries."""

from typing import Any, Dict, List, Optional, Sequence
from uuid import uuid4

from ..results.schema import HistoryStats, SessionRecord, SessionState

IMPROVEMENT_MIN_RECORDS = 6
IMPROVEMENT_WINDOW = 3


def _mean(values: Sequence[float]) -> float:
    return sum(values) / len(values) if values else 0.0


def accuracy_of(correct: int, attempts: int) -> float:
    """Fraction correct in [0, 1]; 0 when nothing was attempted."""
    if attempts <= 0:
        return 0.0
    return min(1.0, max(0.0, correct / attempts))


def _game_metadata(game_kind: str, state: SessionState) -> Dict[str, Any]:
    correct_events = [e for e in state.events if e.correct]
    if game_kind == "word_chain":
        return {"chain_length": len(correct_events)}
    if game_kind == "color_trap":
        congruent = sum(1 for e in correct_events if e.challenge.content.get("congruent"))
        return {"congruent_correct": congruent, "incongruent_correct": len(correct_events) - congruent}
    if game_kind == "dot_dash":
        lengths = [len(e.challenge.answer) for e in correct_events]
        return {"longest_pattern": max(lengths) if lengths else 0}
    return {}


def summarize(
    state: SessionState,
    *,
    game_kind: str,
    difficulty_tag: str,
    time_spent_seconds: int,
    user_id: Optional[str] = None,
    session_id: Optional[str] = None,
    end_reason: Optional[str] = None,
) -> SessionRecord:
    """Fold a finished session's events into an immutable SessionRecord."""
    attempts = len(state.events)
    correct = sum(1 for e in state.events if e.correct)
    avg_rt = int(round(_mean([e.response_time_ms for e in state.events]))) if attempts else 0
    metadata: Dict[str, Any] = {
        "correct": correct,
        "attempts": attempts,
        "best_streak": state.best_streak,
        "avg_response_ms": avg_rt,
        "hints_used": state.hints_used,
        "lives_remaining": state.lives,
    }
    if end_reason:
        metadata["end_reason"] = end_reason
    metadata.update(_game_metadata(game_kind, state))
    return SessionRecord(
        game_kind=game_kind,
        final_score=state.score,
        final_level=state.level,
        accuracy=accuracy_of(correct, attempts),
        time_spent_seconds=max(0, int(time_spent_seconds)),
        difficulty_tag=difficulty_tag,
        metadata=metadata,
        session_id=session_id or str(uuid4()),
        user_id=user_id,
    )


def improvement_percent(scores: Sequence[float]) -> int:
    """Percent change from the first 3 scores to the last 3.

    0 with fewer than 6 scores, and 0 when the early mean is 0.
    """
    if len(scores) < IMPROVEMENT_MIN_RECORDS:
        return 0
    early = _mean(scores[:IMPROVEMENT_WINDOW])
    recent = _mean(scores[-IMPROVEMENT_WINDOW:])
    if early == 0:
        return 0
    return int(round((recent - early) / early * 100))


def history_stats(records: Sequence[SessionRecord]) -> HistoryStats:
    """Derive HistoryStats from records ordered oldest first."""
    if not records:
        return HistoryStats()
    scores = [r.final_score for r in records]
    return HistoryStats(
        games_played=len(records),
        best_score=int(max(scores)),
        average_score=int(round(_mean(scores))),
        average_accuracy_percent=int(round(_mean([r.accuracy for r in records]) * 100)),
        improvement_percent=improvement_percent(scores),
    )


def performance_rating(accuracy: float, avg_response_ms: int) -> str:
    if accuracy >= 0.9 and avg_response_ms < 2000:
        return "Excellent"
    if accuracy >= 0.8 and avg_response_ms < 3000:
        return "Great"
    if accuracy >= 0.7 and avg_response_ms < 4000:
        return "Good"
    if accuracy >= 0.6:
        return "Fair"
    return "Keep Practicing"


def recommendations(record: SessionRecord) -> List[str]:
    meta = record.metadata
    rt = int(meta.get("avg_response_ms", 0))
    tips: List[str] = []
    if record.accuracy < 0.7:
        tips.append("Focus on accuracy first. Take your time before answering.")
    if rt > 4000:
        tips.append("Try to respond a bit faster while maintaining accuracy.")
    if record.game_kind == "color_trap":
        congruent = int(meta.get("congruent_correct", 0))
        incongruent = int(meta.get("incongruent_correct", 0))
        if congruent > 0 and incongruent < congruent / 2:
            tips.append("Practice ignoring what the word says and focus only on the color you see.")
    if record.game_kind == "dot_dash" and int(meta.get("longest_pattern", 0)) >= 6 and record.accuracy >= 0.8:
        tips.append("Great job with complex patterns! You're developing strong sequential memory.")
    if int(meta.get("hints_used", 0)) > int(meta.get("correct", 0)) // 2 and int(meta.get("hints_used", 0)) > 0:
        tips.append("Try solving a few on your own before asking for a hint.")
    if record.accuracy >= 0.9:
        tips.append("Excellent work! Try increasing the difficulty level.")
    if not tips:
        tips.append("Keep practicing regularly to keep improving!")
    return tips


def format_summary(record: SessionRecord, stats: Optional[HistoryStats] = None) -> str:
    """Return a human-readable summary of one session."""
    meta = record.metadata
    lines = [
        f"Game: {record.game_kind}",
        f"Score: {record.final_score} (level {record.final_level})",
        f"Accuracy: {int(round(record.accuracy * 100))}% ({meta.get('correct', 0)}/{meta.get('attempts', 0)})",
        f"Best streak: {meta.get('best_streak', 0)}",
        f"Time: {record.time_spent_seconds}s",
        f"Rating: {performance_rating(record.accuracy, int(meta.get('avg_response_ms', 0)))}",
    ]
    if stats is not None and stats.games_played:
        lines.append(
            f"History: {stats.games_played} games, best {stats.best_score}, "
            f"average {stats.average_score}, improvement {stats.improvement_percent}%"
        )
    return "\n".join(lines)
