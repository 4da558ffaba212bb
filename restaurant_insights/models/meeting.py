"""
Meeting Analysis Models — Pydantic schemas for the voice/meeting pipeline.

Defines request/response models for:
- POST /api/v1/voice/analyze — transcribe a recording and analyze the meeting
- Transcription segments, per-speaker analytics, and meeting insights
"""

from __future__ import annotations

from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

MeetingAnalysisType = Literal["transcription", "separation", "analysis", "meeting_notes"]
Emotion = Literal["positive", "negative", "neutral"]


class _WireModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


# ======================================================================
# Request models
# ======================================================================

class Participant(_WireModel):
    """A known meeting attendee the transcript can be mapped onto."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    id: str
    name: str
    voice_profile: Optional[str] = Field(default=None, alias="voiceProfile")
    role: Optional[str] = None


class VoiceAnalysisRequest(_WireModel):
    """Body of POST /api/v1/voice/analyze."""

    audio_data: str = Field(..., min_length=1, alias="audioData")  # base64
    participants: list[Participant] = Field(default_factory=list)
    analysis_type: MeetingAnalysisType = Field(..., alias="analysisType")
    language: str = "en"
    context: Optional[str] = None


# ======================================================================
# Result models
# ======================================================================

class TranscriptionSegment(_WireModel):
    start_time: float = Field(..., alias="startTime")  # seconds
    end_time: float = Field(..., alias="endTime")
    speaker_id: str = Field(..., alias="speakerId")
    speaker_name: Optional[str] = Field(default=None, alias="speakerName")
    text: str
    confidence: float
    emotion: Optional[Emotion] = None
    keywords: list[str] = Field(default_factory=list)

    @property
    def duration(self) -> float:
        return self.end_time - self.start_time

    @property
    def word_count(self) -> int:
        return len(self.text.split())


class EmotionalTone(_WireModel):
    """Share of a speaker's segments per emotion, in percent."""

    positive: float = 0.0
    negative: float = 0.0
    neutral: float = 0.0


class SpeakingPattern(_WireModel):
    interruptions_count: int = Field(default=0, alias="interruptionsCount")
    average_response_time: float = Field(default=0.0, alias="averageResponseTime")
    dominance_score: float = Field(default=0.0, alias="dominanceScore")


class SpeakerAnalysis(_WireModel):
    speaker_id: str = Field(..., alias="speakerId")
    speaker_name: Optional[str] = Field(default=None, alias="speakerName")
    total_speaking_time: float = Field(..., alias="totalSpeakingTime")
    word_count: int = Field(..., alias="wordCount")
    average_confidence: float = Field(..., alias="averageConfidence")
    emotional_tone: EmotionalTone = Field(..., alias="emotionalTone")
    key_topics: list[str] = Field(default_factory=list, alias="keyTopics")
    speaking_pattern: SpeakingPattern = Field(..., alias="speakingPattern")


class SentimentPoint(_WireModel):
    timepoint: float
    sentiment: int


class MeetingInsights(_WireModel):
    duration: float
    participant_count: int = Field(..., alias="participantCount")
    engagement_score: float = Field(..., alias="engagementScore")
    key_decisions: list[str] = Field(default_factory=list, alias="keyDecisions")
    follow_up_items: list[str] = Field(default_factory=list, alias="followUpItems")
    meeting_effectiveness: float = Field(..., alias="meetingEffectiveness")
    topics_discussed: list[str] = Field(default_factory=list, alias="topicsDiscussed")
    sentiment_progression: list[SentimentPoint] = Field(
        default_factory=list, alias="sentimentProgression",
    )


class MeetingActionItem(_WireModel):
    """A task or commitment detected in the conversation."""

    id: str
    task: str
    assignee: Optional[str] = None
    priority: Literal["high", "medium", "low"]
    due_date: Optional[str] = Field(default=None, alias="dueDate")
    context: str
    speaker: str
    confidence: float


class VoiceAnalysisResult(_WireModel):
    transcription: list[TranscriptionSegment] = Field(default_factory=list)
    speaker_analysis: list[SpeakerAnalysis] = Field(
        default_factory=list, alias="speakerAnalysis",
    )
    meeting_insights: Optional[MeetingInsights] = Field(default=None, alias="meetingInsights")
    action_items: Optional[list[MeetingActionItem]] = Field(default=None, alias="actionItems")
    summary: Optional[str] = None
    confidence: float


# ======================================================================
# API Response models
# ======================================================================

class VoiceAnalysisResponse(_WireModel):
    """Response from POST /api/v1/voice/analyze."""

    success: bool = True
    result: VoiceAnalysisResult
    processing_time: int = Field(..., alias="processingTime")  # milliseconds
