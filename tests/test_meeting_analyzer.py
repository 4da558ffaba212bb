"""
Tests for the Meeting Analyzer and placeholder transcriber

Validates that:
1. "Speaker: text" lines become contiguous timed segments (150 wpm + 1s pause)
2. Known participants are mapped by name; unknown speakers get stable ids
3. Speaker analytics aggregate per speaker in order of first appearance
4. Insights, decisions and topics are derived from the transcript and narrative
5. Action items come from commitment language, plus an inventory item when
   the narrative mentions supplies
6. Plain transcription requests skip insights, action items and summary

Run with: pytest tests/test_meeting_analyzer.py -v
"""

import random

import pytest

from restaurant_insights.core.errors import UpstreamAnalysisError
from restaurant_insights.models.meeting import Participant
from restaurant_insights.services.meeting_analyzer import (
    DEFAULT_TOPIC,
    MeetingAnalyzer,
    analyze_emotion,
    determine_priority,
    engagement_label,
    extract_keywords,
    match_participant,
)
from restaurant_insights.services.transcription import (
    PLACEHOLDER_CONFIDENCE,
    PLACEHOLDER_TRANSCRIPT,
    PlaceholderTranscriber,
)


# ======================================================================
# Sample data factories
# ======================================================================

def _sample_participants() -> list[Participant]:
    return [Participant(id="p-sarah", name="Sarah", role="Sous Chef")]


def _analyzer(seed: int = 42) -> MeetingAnalyzer:
    return MeetingAnalyzer(rng=random.Random(seed))


# ======================================================================
# Text helpers
# ======================================================================

class TestTextHelpers:

    def test_emotion(self):
        assert analyze_emotion("That was a great service") == "positive"
        assert analyze_emotion("This is a big problem") == "negative"
        assert analyze_emotion("Great, but there is a problem") == "neutral"
        assert analyze_emotion("The delivery arrives at nine") == "neutral"

    def test_keywords(self):
        text = "The lunch prep is on track, but we need to discuss the new menu items"
        assert extract_keywords(text) == ["lunch", "prep", "track", "need", "discuss"]

    def test_priority(self):
        assert determine_priority("Yes, please schedule that immediately.") == "high"
        assert determine_priority("We should train the evening staff") == "medium"
        assert determine_priority("I'll help coordinate") == "low"

    def test_match_participant(self):
        participants = [Participant(id="p-1", name="Mike Chen")]
        assert match_participant("Mike", participants).id == "p-1"
        assert match_participant("MIKE CHEN", participants).id == "p-1"
        assert match_participant("Manager", participants) is None

    @pytest.mark.parametrize(
        "score, label", [(85, "high"), (70, "high"), (55, "moderate"), (10, "low")],
    )
    def test_engagement_label(self, score, label):
        assert engagement_label(score) == label


# ======================================================================
# Segments and speakers
# ======================================================================

class TestParseSegments:

    def test_one_segment_per_speaker_line(self):
        segments = _analyzer().parse_segments(PLACEHOLDER_TRANSCRIPT, [])
        assert len(segments) == 11
        assert segments[0].speaker_name == "Manager"
        assert segments[0].text.startswith("Good morning everyone")

    def test_timing_is_contiguous(self):
        segments = _analyzer().parse_segments(PLACEHOLDER_TRANSCRIPT, [])
        assert segments[0].start_time == 0
        # 9 words at 150 wpm
        assert segments[0].end_time == pytest.approx(3.6)
        for previous, current in zip(segments, segments[1:]):
            assert current.start_time == pytest.approx(previous.end_time + 1.0, abs=1e-2)
            assert current.end_time > current.start_time

    def test_participant_mapping_and_stable_ids(self):
        segments = _analyzer().parse_segments(PLACEHOLDER_TRANSCRIPT, _sample_participants())
        ids = {s.speaker_name: s.speaker_id for s in segments}
        assert ids == {"Manager": "speaker_1", "Sarah": "p-sarah", "Mike": "speaker_2"}
        for segment in segments:
            assert segment.speaker_id == ids[segment.speaker_name]

    def test_lines_without_speaker_are_skipped(self):
        segments = _analyzer().parse_segments("background noise\nManager: Hello team\n\n", [])
        assert [s.text for s in segments] == ["Hello team"]

    def test_segment_confidence_range(self):
        segments = _analyzer().parse_segments(PLACEHOLDER_TRANSCRIPT, [])
        assert all(0.85 <= s.confidence <= 0.95 for s in segments)

    def test_segment_emotion_and_keywords(self):
        segments = _analyzer().parse_segments(PLACEHOLDER_TRANSCRIPT, [])
        assert segments[3].emotion == "positive"  # "Great points..."
        assert segments[2].keywords == ["lunch", "prep", "track", "need", "discuss"]


class TestAnalyzeSpeakers:

    def test_order_of_first_appearance(self):
        analyzer = _analyzer()
        segments = analyzer.parse_segments(PLACEHOLDER_TRANSCRIPT, [])
        speakers = analyzer.analyze_speakers(segments)
        assert [s.speaker_name for s in speakers] == ["Manager", "Sarah", "Mike"]

    def test_aggregates(self):
        analyzer = _analyzer()
        segments = analyzer.parse_segments(PLACEHOLDER_TRANSCRIPT, [])
        speakers = analyzer.analyze_speakers(segments)

        total_words = sum(len(s.text.split()) for s in segments)
        assert sum(s.word_count for s in speakers) == total_words
        assert sum(s.speaking_pattern.dominance_score for s in speakers) == pytest.approx(
            100, abs=0.1,
        )
        for speaker in speakers:
            tone = speaker.emotional_tone
            assert tone.positive + tone.negative + tone.neutral == pytest.approx(100, abs=0.1)
            assert len(speaker.key_topics) <= 3

    def test_sarah_topics(self):
        analyzer = _analyzer()
        speakers = analyzer.analyze_speakers(
            analyzer.parse_segments(PLACEHOLDER_TRANSCRIPT, _sample_participants())
        )
        sarah = next(s for s in speakers if s.speaker_id == "p-sarah")
        assert "inventory" in sarah.key_topics


# ======================================================================
# Insights and action items
# ======================================================================

class TestInsights:

    def _insights(self, narrative: str = ""):
        analyzer = _analyzer()
        segments = analyzer.parse_segments(PLACEHOLDER_TRANSCRIPT, [])
        return segments, analyzer.extract_insights(narrative, segments)

    def test_basic_metrics(self):
        segments, insights = self._insights()
        assert insights.participant_count == 3
        assert insights.duration == segments[-1].end_time
        assert 60 < insights.engagement_score <= 100
        assert 85 <= insights.meeting_effectiveness <= 95

    def test_topics_and_follow_ups(self):
        _, insights = self._insights()
        assert insights.topics_discussed == [
            "Inventory Management",
            "Staff Training",
            "Equipment Maintenance",
            "Food Safety",
            "Menu Planning",
        ]
        assert len(insights.follow_up_items) == 5

    def test_narrative_adds_topics(self):
        _, insights = self._insights("Customers mentioned slow greetings")
        assert "Customer Service" in insights.topics_discussed

    def test_decisions(self):
        _, insights = self._insights()
        assert len(insights.key_decisions) == 4
        assert insights.key_decisions[-1].startswith("Perfect. Let's wrap up")

    def test_sentiment_progression(self):
        _, insights = self._insights()
        assert [p.timepoint for p in insights.sentiment_progression] == [0, 30, 60, 90, 120, 150]
        assert insights.sentiment_progression[0].sentiment == 75

    def test_empty_transcript(self):
        insights = _analyzer().extract_insights("", [])
        assert insights.duration == 0
        assert insights.participant_count == 0
        assert insights.engagement_score == 0
        assert insights.topics_discussed == [DEFAULT_TOPIC]
        assert insights.sentiment_progression == []


class TestActionItems:

    def _segments(self):
        return _analyzer().parse_segments(PLACEHOLDER_TRANSCRIPT, [])

    def test_commitment_language(self):
        items = MeetingAnalyzer.extract_action_items("", self._segments())
        by_id = {i.id: i for i in items}

        urgent = by_id["action_8"]
        assert urgent.priority == "high"
        assert urgent.assignee == "Manager"
        assert urgent.task.startswith("Yes, please schedule")

        assert by_id["action_2"].priority == "medium"
        assert "action_0" not in by_id
        assert "action_inventory" not in by_id

    def test_inventory_item_from_narrative(self):
        items = MeetingAnalyzer.extract_action_items(
            "Inventory levels for salmon are low.", self._segments(),
        )
        inventory = items[-1]
        assert inventory.id == "action_inventory"
        assert inventory.priority == "high"
        assert inventory.due_date == "Tomorrow"
        assert inventory.assignee == "Sarah"
        assert inventory.confidence == 0.9

    def test_inventory_item_without_supply_speaker(self):
        segments = _analyzer().parse_segments("Manager: Good work today.", [])
        items = MeetingAnalyzer.extract_action_items("check the supplier", segments)
        assert items[-1].assignee is None
        assert items[-1].speaker == "Unknown"


# ======================================================================
# analyze()
# ======================================================================

class TestAnalyze:

    def test_full_result(self):
        result = _analyzer().analyze(
            PLACEHOLDER_TRANSCRIPT, _sample_participants(), "", confidence=0.92,
        )
        assert result.confidence == 0.92
        assert len(result.transcription) == 11
        assert len(result.speaker_analysis) == 3
        assert result.meeting_insights is not None
        assert result.action_items
        assert result.summary.startswith("Meeting Summary: 3 participants discussed 5 main topics")

    def test_transcription_only(self):
        result = _analyzer().analyze(
            PLACEHOLDER_TRANSCRIPT, [], "", confidence=0.92, include_insights=False,
        )
        assert len(result.transcription) == 11
        assert result.meeting_insights is None
        assert result.action_items is None
        assert result.summary is None

    def test_empty_transcript(self):
        result = _analyzer().analyze("", [], "", confidence=0.5)
        assert result.transcription == []
        assert result.speaker_analysis == []
        assert result.action_items == []
        assert "low engagement" in result.summary


# ======================================================================
# Placeholder transcriber
# ======================================================================

class TestPlaceholderTranscriber:

    @pytest.mark.asyncio
    async def test_transcribes_decodable_audio(self):
        result = await PlaceholderTranscriber().transcribe("ZmFrZSBhdWRpbw==", "es")
        assert result.text == PLACEHOLDER_TRANSCRIPT
        assert result.confidence == PLACEHOLDER_CONFIDENCE
        assert result.language == "es"

    @pytest.mark.asyncio
    async def test_undecodable_audio(self):
        with pytest.raises(UpstreamAnalysisError, match="transcription failed"):
            await PlaceholderTranscriber().transcribe("%%%")
