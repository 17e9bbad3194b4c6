"""
Unit tests for the queue-driven scoring pipeline.
"""

import json

import pytest

from emotion_monitor.services.scoring import ScoringPipeline, exceeded_alerts
from emotion_monitor.utils.config import ScoringConfig
from emotion_monitor.utils.dynamo_client import EmotionStoreError
from emotion_monitor.utils.errors import ExtractionFailedError

from .helpers import QUEUE_ARN, make_scores


def sqs_record(payload, source_arn=QUEUE_ARN, message_id='m-1'):
    record = {'messageId': message_id, 'body': payload if isinstance(payload, str) else json.dumps(payload)}
    if source_arn is not None:
        record['eventSourceARN'] = source_arn
    return record


@pytest.fixture
def pipeline(mock_extraction, mock_store, mock_slack):
    config = ScoringConfig(queue_arn=QUEUE_ARN, table_name='emotion-table', alert_threshold=0.5)
    return ScoringPipeline(config, mock_extraction, mock_store, mock_slack)


class TestThresholds:

    @pytest.mark.unit
    def test_strictly_greater_than(self):
        assert exceeded_alerts(make_scores(anger=0.51), 0.5) == ['anger']
        assert exceeded_alerts(make_scores(anger=0.50), 0.5) == []

    @pytest.mark.unit
    def test_only_anger_disgust_contempt_alert(self):
        scores = make_scores(fear=0.9, joy=0.9, sad=0.9, surprise=0.9)
        assert exceeded_alerts(scores, 0.5) == []

    @pytest.mark.unit
    def test_multiple_alerts_in_fixed_order(self):
        scores = make_scores(anger=0.7, contempt=0.8, disgust=0.9)
        assert exceeded_alerts(scores, 0.5) == ['anger', 'disgust', 'contempt']


class TestProcessBatch:

    @pytest.mark.unit
    def test_scores_persists_and_alerts(self, pipeline, mock_extraction, mock_store, mock_slack, message_payload):
        mock_extraction.score_emotion.return_value = make_scores(anger=0.51)

        report = pipeline.process_batch([sqs_record(message_payload)])

        assert report.scored == ['Ev0001']
        assert report.alerts == 1
        mock_extraction.score_emotion.assert_called_once_with('Why is the build broken again?')
        stored = mock_store.put_record.call_args.args[0]
        assert stored.event_id == 'Ev0001'
        assert stored.scores.anger == 0.51

        mock_slack.post_message.assert_called_once()
        call = mock_slack.post_message.call_args
        assert call.args[0] == 'C0001'
        assert '<@U0001>' in call.args[1]
        assert 'anger' in call.args[1]
        assert call.kwargs['thread_ts'] == '1728540000.000100'

    @pytest.mark.unit
    def test_score_at_threshold_does_not_alert(self, pipeline, mock_extraction, mock_store, mock_slack, message_payload):
        mock_extraction.score_emotion.return_value = make_scores(anger=0.50)

        report = pipeline.process_batch([sqs_record(message_payload)])

        assert report.alerts == 0
        mock_store.put_record.assert_called_once()
        mock_slack.post_message.assert_not_called()

    @pytest.mark.unit
    def test_each_exceeded_threshold_posts_separately(self, pipeline, mock_extraction, mock_slack, message_payload):
        mock_extraction.score_emotion.return_value = make_scores(anger=0.6, disgust=0.6, contempt=0.6, fear=0.9)

        report = pipeline.process_batch([sqs_record(message_payload)])

        assert report.alerts == 3
        texts = [call.args[1] for call in mock_slack.post_message.call_args_list]
        assert ['anger' in texts[0], 'disgust' in texts[1], 'contempt' in texts[2]] == [True, True, True]

    @pytest.mark.unit
    def test_wrong_source_is_skipped(self, pipeline, mock_extraction, message_payload):
        report = pipeline.process_batch([sqs_record(message_payload, source_arn='arn:aws:sqs:other')])

        assert report.rejected == 1
        mock_extraction.score_emotion.assert_not_called()

    @pytest.mark.unit
    def test_missing_source_is_accepted(self, pipeline, message_payload):
        report = pipeline.process_batch([sqs_record(message_payload, source_arn=None)])
        assert report.scored == ['Ev0001']

    @pytest.mark.unit
    def test_malformed_body_is_skipped(self, pipeline, mock_store, message_payload):
        del message_payload['event']['user']
        report = pipeline.process_batch([sqs_record('{not json'), sqs_record(message_payload), {'messageId': 'x'}])

        assert report.rejected == 3
        mock_store.put_record.assert_not_called()

    @pytest.mark.unit
    def test_extraction_failure_skips_only_that_item(self, pipeline, mock_extraction, mock_store, message_payload):
        second = json.loads(json.dumps(message_payload))
        second['event_id'] = 'Ev0002'
        mock_extraction.score_emotion.side_effect = [ExtractionFailedError('no tool use'), make_scores()]

        report = pipeline.process_batch([sqs_record(message_payload), sqs_record(second, message_id='m-2')])

        assert report.failed == ['Ev0001']
        assert report.scored == ['Ev0002']
        assert mock_store.put_record.call_count == 1

    @pytest.mark.unit
    def test_store_failure_aborts_batch(self, pipeline, mock_extraction, mock_store, message_payload):
        mock_store.put_record.side_effect = EmotionStoreError('throttled')

        with pytest.raises(EmotionStoreError):
            pipeline.process_batch([sqs_record(message_payload), sqs_record(message_payload, message_id='m-2')])
        assert mock_extraction.score_emotion.call_count == 1

    @pytest.mark.unit
    def test_redelivery_writes_same_key(self, pipeline, mock_store, message_payload):
        pipeline.process_batch([sqs_record(message_payload), sqs_record(message_payload, message_id='m-2')])

        keys = [call.args[0].event_id for call in mock_store.put_record.call_args_list]
        assert keys == ['Ev0001', 'Ev0001']

    @pytest.mark.unit
    def test_event_time_without_local_date_is_skipped(self, pipeline, mock_extraction, mock_store, message_payload):
        bad = json.loads(json.dumps(message_payload))
        bad['event_time'] = 10 ** 15
        good = json.loads(json.dumps(message_payload))
        good['event_id'] = 'Ev0002'

        report = pipeline.process_batch([sqs_record(bad), sqs_record(good, message_id='m-2')])

        assert report.rejected == 1
        assert report.scored == ['Ev0002']
        mock_extraction.score_emotion.assert_called_once()
        assert mock_store.put_record.call_args.args[0].event_id == 'Ev0002'
