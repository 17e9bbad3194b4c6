"""
Daily aggregation: summarize each user's previous business day in a Slack thread.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, List, Optional, Sequence, Tuple

from ..models.core import DailyAdvice, EmotionRecord, EmotionScores
from ..utils.config import AggregationConfig
from ..utils.dynamo_client import EmotionStore
from ..utils.logging_config import get_logger
from ..utils.slack_client import SlackClient
from ..utils.timestamp_utils import previous_business_day
from .extraction import ExtractionClient

logger = get_logger(__name__)

# Maxima below this are left out of the summary
QUOTE_THRESHOLD = 0.4

SUMMARY_EMOTIONS = ('anger', 'contempt', 'disgust')

ScoredText = Tuple[EmotionScores, str]


@dataclass
class AggregationReport:
    """Outcome of one daily run."""
    date: str
    record_count: int = 0
    thread_ts: Optional[str] = None
    posted_users: List[str] = field(default_factory=list)


def group_by_user(records: Sequence[EmotionRecord]) -> Dict[str, List[ScoredText]]:
    """Group (scores, text) pairs per user, keeping record order within each user."""
    groups: Dict[str, List[ScoredText]] = {}
    for record in records:
        groups.setdefault(record.user_id, []).append((record.scores, record.text))
    return groups


def max_by_emotion(entries: Sequence[ScoredText], emotion: str) -> ScoredText:
    """
    Find the entry with the highest score for an emotion.

    Only a strictly greater score replaces the current holder, so ties keep the
    first-encountered entry.

    Raises:
        ValueError: If entries is empty
    """
    if not entries:
        raise ValueError(f'No entries to find max {emotion}')

    best = entries[0]
    for entry in entries[1:]:
        if getattr(entry[0], emotion) > getattr(best[0], emotion):
            best = entry
    return best


def format_header(date: str) -> str:
    return (f':star::star: *{date}* :star::star:\n'
            'Check out how you did yesterday and start your day off with AI recommended song!')


def format_summary(user_id: str, advice: DailyAdvice, maxima: Dict[str, ScoredText]) -> str:
    """Build a user's summary text: quoted maxima at or above the threshold, then advice and song."""
    lines = []
    for emotion in SUMMARY_EMOTIONS:
        scores, text = maxima[emotion]
        value = getattr(scores, emotion)
        if value >= QUOTE_THRESHOLD:
            lines.append(f'*Message with max {emotion} ({value})*: {text}')
    lines.append(f'*Advice*: {advice.advice}')
    lines.append(f'*Song Recommendation*: {advice.song}')

    body = '\n'.join(lines)
    return f':heart: <@{user_id}> :heart:\n{body}'


class AggregationPipeline:
    """Run once per day over the previous business day's records."""

    def __init__(self, config: AggregationConfig, extraction: ExtractionClient, store: EmotionStore, slack: SlackClient):
        self.config = config
        self.extraction = extraction
        self.store = store
        self.slack = slack

    def run(self, now: Optional[datetime] = None) -> AggregationReport:
        """
        Aggregate and post the daily summaries.

        Any failure aborts the remaining users; summaries already posted stay posted.

        Args:
            now: Reference instant for choosing the target date (current time if None)

        Returns:
            AggregationReport for the run
        """
        date = previous_business_day(now)
        report = AggregationReport(date=date)

        records = self.store.query_date(date)
        report.record_count = len(records)
        if not records:
            logger.info(f'No entries for {date}, nothing to post')
            return report

        report.thread_ts = self.slack.post_message(self.config.result_channel_id, format_header(date))

        for user_id, entries in group_by_user(records).items():
            self.summarize_user(report.thread_ts, user_id, entries)
            report.posted_users.append(user_id)

        logger.info(f'Posted daily summaries for {len(report.posted_users)} user(s) on {date}')
        return report

    def summarize_user(self, thread_ts: str, user_id: str, entries: Sequence[ScoredText]) -> None:
        """Request advice for one user and post their summary under the day's thread."""
        advice = self.extraction.advise_daily([scores for scores, _ in entries])
        logger.debug(f'userId: {user_id}, advice: {advice}')

        maxima = {emotion: max_by_emotion(entries, emotion) for emotion in SUMMARY_EMOTIONS}
        self.slack.post_message(self.config.result_channel_id, format_summary(user_id, advice, maxima), thread_ts=thread_ts)
