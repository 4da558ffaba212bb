"""
Meeting Analyzer — Heuristic post-processing of a meeting transcript.

Parses "Speaker: text" lines into timed segments, then derives:
- per-segment emotion and keywords
- per-speaker speaking time, word count, tone and topics
- meeting insights (engagement, decisions, follow-ups, topics, sentiment arc)
- action items from commitment language
- a one-paragraph summary

Timing is estimated from word count at 150 words per minute with a one
second pause between turns. The narrative text is only keyword-searched.
"""

import logging
import random
import re
import string
from typing import Optional

from restaurant_insights.models.meeting import (
    EmotionalTone,
    MeetingActionItem,
    MeetingInsights,
    Participant,
    SentimentPoint,
    SpeakerAnalysis,
    SpeakingPattern,
    TranscriptionSegment,
    VoiceAnalysisResult,
)

logger = logging.getLogger(__name__)

# ======================================================================
# Constants
# ======================================================================

WORDS_PER_MINUTE = 150
PAUSE_SECONDS = 1.0

SEGMENT_CONFIDENCE_MIN = 0.85
SEGMENT_CONFIDENCE_SPREAD = 0.1
EFFECTIVENESS_MIN = 85.0
EFFECTIVENESS_SPREAD = 10.0

MAX_KEYWORDS = 5
MAX_SPEAKER_TOPICS = 3
MAX_DECISIONS = 5
AVERAGE_RESPONSE_TIME = 2.5

PROGRESSION_SAMPLE_EVERY = 2
PROGRESSION_STEP_SECONDS = 30
EMOTION_SENTIMENT = {"positive": 75, "negative": 25, "neutral": 50}

SEGMENT_PATTERN = re.compile(r"^([^:]+):\s*(.+)$")

POSITIVE_WORDS = ["great", "excellent", "good", "perfect", "awesome", "wonderful"]
NEGATIVE_WORDS = ["problem", "issue", "concern", "worried", "difficult", "bad"]

STOP_WORDS = {
    "the", "a", "an", "and", "or", "but", "in", "on", "at", "to", "for", "of", "with", "by",
}

RESTAURANT_TOPICS = [
    "inventory", "menu", "staff", "training", "customer", "food", "service", "schedule",
]

ACTION_CUES = ["will", "should", "need to", "schedule"]
URGENT_WORDS = ["immediately", "urgent", "asap", "critical", "emergency"]
IMPORTANT_WORDS = ["important", "priority", "must", "should", "need"]

DECISION_CUES = ["let's schedule", "yes, please", "handles", "organizes", "scheduled"]

# Topic label → keywords searched in the narrative and transcript
MEETING_TOPICS: dict[str, list[str]] = {
    "Inventory Management": ["inventory", "supplier", "stock"],
    "Staff Training": ["training", "train "],
    "Equipment Maintenance": ["repair", "cooler", "equipment", "maintenance"],
    "Food Safety": ["food safety", "temperature", "hygiene"],
    "Menu Planning": ["menu"],
    "Customer Service": ["customer", "guest"],
}
DEFAULT_TOPIC = "Daily Operations"

FOLLOW_UPS: dict[str, str] = {
    "Inventory Management": "Confirm delivery schedules with suppliers",
    "Staff Training": "Assess training effectiveness after session",
    "Equipment Maintenance": "Monitor equipment performance after repair",
    "Food Safety": "Review food safety and temperature logs",
    "Menu Planning": "Finalize new menu items before next week",
    "Customer Service": "Follow up on open customer feedback",
}

SUPPLY_KEYWORDS = ["inventory", "supplier"]


# ======================================================================
# Text helpers
# ======================================================================

def analyze_emotion(text: str) -> str:
    """positive / negative / neutral by counting sentiment words present."""
    lower = text.lower()
    positive = sum(1 for word in POSITIVE_WORDS if word in lower)
    negative = sum(1 for word in NEGATIVE_WORDS if word in lower)
    if positive > negative:
        return "positive"
    if negative > positive:
        return "negative"
    return "neutral"


def extract_keywords(text: str) -> list[str]:
    """First five words longer than three characters that are not stop words."""
    words = [w.strip(string.punctuation) for w in text.lower().split()]
    return [w for w in words if len(w) > 3 and w not in STOP_WORDS][:MAX_KEYWORDS]


def determine_priority(text: str) -> str:
    lower = text.lower()
    if any(word in lower for word in URGENT_WORDS):
        return "high"
    if any(word in lower for word in IMPORTANT_WORDS):
        return "medium"
    return "low"


def match_participant(
    speaker_name: str, participants: list[Participant],
) -> Optional[Participant]:
    """Case-insensitive containment in either direction."""
    speaker = speaker_name.lower()
    for participant in participants:
        name = participant.name.strip().lower()
        if name and (name in speaker or speaker in name):
            return participant
    return None


def engagement_label(score: float) -> str:
    if score >= 70:
        return "high"
    if score >= 40:
        return "moderate"
    return "low"


# ======================================================================
# Analyzer
# ======================================================================

class MeetingAnalyzer:
    """Derives structured meeting analytics from a transcript."""

    def __init__(self, rng: Optional[random.Random] = None):
        self.rng = rng or random.Random()

    # ------------------------------------------------------------------
    # Segments and speakers
    # ------------------------------------------------------------------

    def parse_segments(
        self, transcript: str, participants: list[Participant],
    ) -> list[TranscriptionSegment]:
        """
        Split the transcript into timed segments, one per "Speaker: text" line.

        Lines without a speaker prefix are skipped. Unknown speakers get a
        stable generated id per distinct name.
        """
        segments: list[TranscriptionSegment] = []
        generated_ids: dict[str, str] = {}
        current_time = 0.0

        for line in transcript.splitlines():
            match = SEGMENT_PATTERN.match(line.strip())
            if not match:
                continue

            speaker_name = match.group(1).strip()
            text = match.group(2).strip()
            duration = len(text.split()) / WORDS_PER_MINUTE * 60

            participant = match_participant(speaker_name, participants)
            if participant is not None:
                speaker_id = participant.id
            else:
                key = speaker_name.lower()
                if key not in generated_ids:
                    generated_ids[key] = f"speaker_{len(generated_ids) + 1}"
                speaker_id = generated_ids[key]

            segments.append(TranscriptionSegment(
                start_time=round(current_time, 3),
                end_time=round(current_time + duration, 3),
                speaker_id=speaker_id,
                speaker_name=speaker_name,
                text=text,
                confidence=round(
                    SEGMENT_CONFIDENCE_MIN + self.rng.random() * SEGMENT_CONFIDENCE_SPREAD, 4,
                ),
                emotion=analyze_emotion(text),
                keywords=extract_keywords(text),
            ))
            current_time += duration + PAUSE_SECONDS

        return segments

    def analyze_speakers(
        self, segments: list[TranscriptionSegment],
    ) -> list[SpeakerAnalysis]:
        """Aggregate segments per speaker, in order of first appearance."""
        by_speaker: dict[str, list[TranscriptionSegment]] = {}
        for segment in segments:
            by_speaker.setdefault(segment.speaker_id, []).append(segment)

        meeting_time = sum(s.duration for s in segments)
        analysis = []
        for speaker_id, speaker_segments in by_speaker.items():
            total_time = sum(s.duration for s in speaker_segments)
            count = len(speaker_segments)
            emotions = [s.emotion for s in speaker_segments]
            all_text = " ".join(s.text for s in speaker_segments).lower()

            analysis.append(SpeakerAnalysis(
                speaker_id=speaker_id,
                speaker_name=speaker_segments[0].speaker_name,
                total_speaking_time=round(total_time, 3),
                word_count=sum(s.word_count for s in speaker_segments),
                average_confidence=round(
                    sum(s.confidence for s in speaker_segments) / count, 4,
                ),
                emotional_tone=EmotionalTone(
                    positive=round(emotions.count("positive") / count * 100, 2),
                    negative=round(emotions.count("negative") / count * 100, 2),
                    neutral=round(
                        (count - emotions.count("positive") - emotions.count("negative"))
                        / count * 100, 2,
                    ),
                ),
                key_topics=[t for t in RESTAURANT_TOPICS if t in all_text][:MAX_SPEAKER_TOPICS],
                speaking_pattern=SpeakingPattern(
                    interruptions_count=0,
                    average_response_time=AVERAGE_RESPONSE_TIME,
                    dominance_score=round(total_time / meeting_time * 100, 2) if meeting_time else 0.0,
                ),
            ))
        return analysis

    # ------------------------------------------------------------------
    # Insights
    # ------------------------------------------------------------------

    @staticmethod
    def extract_topics(narrative_text: str, segments: list[TranscriptionSegment]) -> list[str]:
        haystack = (narrative_text + " " + " ".join(s.text for s in segments)).lower()
        topics = [
            label for label, keywords in MEETING_TOPICS.items()
            if any(keyword in haystack for keyword in keywords)
        ]
        return topics or [DEFAULT_TOPIC]

    @staticmethod
    def extract_decisions(segments: list[TranscriptionSegment]) -> list[str]:
        decisions = []
        for segment in segments:
            lower = segment.text.lower()
            if any(cue in lower for cue in DECISION_CUES) and segment.text not in decisions:
                decisions.append(segment.text)
        return decisions[:MAX_DECISIONS]

    @staticmethod
    def sentiment_progression(segments: list[TranscriptionSegment]) -> list[SentimentPoint]:
        progression = []
        timepoint = 0
        for segment in segments[::PROGRESSION_SAMPLE_EVERY]:
            progression.append(SentimentPoint(
                timepoint=timepoint,
                sentiment=EMOTION_SENTIMENT.get(segment.emotion or "neutral", 50),
            ))
            timepoint += PROGRESSION_STEP_SECONDS
        return progression

    def extract_insights(
        self, narrative_text: str, segments: list[TranscriptionSegment],
    ) -> MeetingInsights:
        speaker_count = len({s.speaker_id for s in segments})
        if segments:
            average_length = sum(len(s.text) for s in segments) / len(segments)
            engagement = min(100.0, speaker_count * 20 + average_length * 0.1)
            effectiveness = EFFECTIVENESS_MIN + self.rng.random() * EFFECTIVENESS_SPREAD
        else:
            engagement = 0.0
            effectiveness = 0.0

        topics = self.extract_topics(narrative_text, segments)
        return MeetingInsights(
            duration=segments[-1].end_time if segments else 0.0,
            participant_count=speaker_count,
            engagement_score=round(engagement, 2),
            key_decisions=self.extract_decisions(segments),
            follow_up_items=[FOLLOW_UPS[t] for t in topics if t in FOLLOW_UPS],
            meeting_effectiveness=round(effectiveness, 2),
            topics_discussed=topics,
            sentiment_progression=self.sentiment_progression(segments),
        )

    # ------------------------------------------------------------------
    # Action items and summary
    # ------------------------------------------------------------------

    @staticmethod
    def extract_action_items(
        narrative_text: str, segments: list[TranscriptionSegment],
    ) -> list[MeetingActionItem]:
        items: list[MeetingActionItem] = []
        for index, segment in enumerate(segments):
            lower = segment.text.lower()
            if not any(cue in lower for cue in ACTION_CUES):
                continue
            items.append(MeetingActionItem(
                id=f"action_{index}",
                task=segment.text,
                assignee=segment.speaker_name,
                priority=determine_priority(segment.text),
                context="Extracted from meeting conversation",
                speaker=segment.speaker_name or "Unknown",
                confidence=segment.confidence,
            ))

        narrative = narrative_text.lower()
        if any(keyword in narrative for keyword in SUPPLY_KEYWORDS):
            owner = next(
                (
                    s.speaker_name for s in segments
                    if any(keyword in s.text.lower() for keyword in SUPPLY_KEYWORDS)
                ),
                None,
            )
            items.append(MeetingActionItem(
                id="action_inventory",
                task="Coordinate with suppliers on outstanding inventory orders",
                assignee=owner,
                priority="high",
                due_date="Tomorrow",
                context="Inventory management task",
                speaker=owner or "Unknown",
                confidence=0.9,
            ))
        return items

    @staticmethod
    def summarize(insights: MeetingInsights) -> str:
        minutes = round(insights.duration / 60)
        return (
            f"Meeting Summary: {insights.participant_count} participants discussed "
            f"{len(insights.topics_discussed)} main topics over {minutes} minutes. "
            f"Topics covered: {', '.join(insights.topics_discussed)}. "
            f"{len(insights.key_decisions)} decisions and "
            f"{len(insights.follow_up_items)} follow-up items were recorded. "
            f"Meeting effectiveness rated at {insights.meeting_effectiveness:.0f}% with "
            f"{engagement_label(insights.engagement_score)} engagement levels."
        )

    # ------------------------------------------------------------------
    # Entry point
    # ------------------------------------------------------------------

    def analyze(
        self,
        transcript: str,
        participants: list[Participant],
        narrative_text: str,
        confidence: float,
        include_insights: bool = True,
    ) -> VoiceAnalysisResult:
        """
        Build the structured result for one transcript.

        When include_insights is False (plain transcription requests),
        meeting insights, action items and summary are left out.
        """
        segments = self.parse_segments(transcript, participants)
        speakers = self.analyze_speakers(segments)
        logger.debug(
            "Parsed %d segments from %d speakers", len(segments), len(speakers),
        )

        result = VoiceAnalysisResult(
            transcription=segments,
            speaker_analysis=speakers,
            confidence=confidence,
        )
        if include_insights:
            insights = self.extract_insights(narrative_text, segments)
            result.meeting_insights = insights
            result.action_items = self.extract_action_items(narrative_text, segments)
            result.summary = self.summarize(insights)
        return result
