"""
Pytest configuration and fixtures for studio tests.
"""
import os
import pytest
from typing import List, Optional

# Set test environment before importing studio modules
os.environ["DEBUG"] = "true"

from studio.assembly.coordinator import AssemblyCoordinator
from studio.assembly.models import AssemblyStatus, RenderStatus, RenderSubmission, Timeline
from studio.providers.assembly.base import BaseAssemblyProvider
from studio.providers.exceptions import ProviderError
from studio.providers.music.base import BaseMusicProvider, MusicGenerationResult
from studio.providers.storage.base import BaseStorageProvider
from studio.providers.video.base import BaseVideoProvider, VideoGenerationResult
from studio.providers.voice.base import BaseVoiceProvider, VoiceoverGenerationResult


class FakeVideoProvider(BaseVideoProvider):
    """Deterministic video provider. Fails or raises on chosen call indices."""

    def __init__(self, available=True, fail_on=(), raise_on=(), on_call=None):
        self.available = available
        self.fail_on = set(fail_on)
        self.raise_on = set(raise_on)
        self.on_call = on_call
        self.calls: List[dict] = []

    @property
    def name(self) -> str:
        return "fake-video"

    @property
    def is_available(self) -> bool:
        return self.available

    async def generate(self, prompt, duration="short", aspect_ratio="16:9", project_id=None, scene_id=None):
        index = len(self.calls)
        self.calls.append({
            "prompt": prompt,
            "duration": duration,
            "aspect_ratio": aspect_ratio,
            "project_id": project_id,
            "scene_id": scene_id,
        })
        if self.on_call:
            self.on_call(index)
        if index in self.raise_on:
            raise RuntimeError("provider exploded")
        if index in self.fail_on:
            return VideoGenerationResult(success=False, error="content filtered")
        return VideoGenerationResult(success=True, video_url=f"https://cdn.test/clip-{index}.mp4")


class FakeMusicProvider(BaseMusicProvider):
    def __init__(self, available=True, succeed=True):
        self.available = available
        self.succeed = succeed
        self.calls: List[dict] = []

    @property
    def name(self) -> str:
        return "fake-music"

    @property
    def is_available(self) -> bool:
        return self.available

    async def generate(self, prompt, duration=10, mood=None, genre=None, project_id=None):
        self.calls.append({"prompt": prompt, "duration": duration, "mood": mood, "genre": genre})
        if not self.succeed:
            return MusicGenerationResult(success=False, error="music model offline")
        return MusicGenerationResult(success=True, audio_url="https://cdn.test/music.mp3", duration=duration)


class FakeVoiceProvider(BaseVoiceProvider):
    def __init__(self, available=True, succeed=True):
        self.available = available
        self.succeed = succeed
        self.calls: List[dict] = []

    @property
    def name(self) -> str:
        return "fake-voice"

    @property
    def is_available(self) -> bool:
        return self.available

    async def synthesize(self, text, voice="nova", model="tts-1", speed=1.0, project_id=None):
        self.calls.append({"text": text, "voice": voice, "model": model, "speed": speed})
        if not self.succeed:
            return VoiceoverGenerationResult(success=False, error="tts quota exceeded")
        return VoiceoverGenerationResult(success=True, audio_url="data:audio/mpeg;base64,AAAA", duration=3)


class FakeAssemblyProvider(BaseAssemblyProvider):
    """Render provider that walks through a scripted list of statuses."""

    def __init__(self, available=True, submission=None, statuses=None):
        self.available = available
        self.submission = submission or RenderSubmission(success=True, render_id="render-1")
        self.statuses = statuses or [
            AssemblyStatus(status=RenderStatus.RENDERING, progress=0.5),
            AssemblyStatus(status=RenderStatus.COMPLETED, video_url="https://render.test/final.mp4"),
        ]
        self.timelines: List[Timeline] = []
        self.polls = 0
        self.submit_error: Optional[Exception] = None
        self.poll_errors: List[Exception] = []

    @property
    def name(self) -> str:
        return "fake-assembly"

    @property
    def is_available(self) -> bool:
        return self.available

    async def submit(self, timeline: Timeline) -> RenderSubmission:
        self.timelines.append(timeline)
        if self.submit_error is not None:
            raise self.submit_error
        return self.submission

    async def poll(self, render_id: str) -> AssemblyStatus:
        self.polls += 1
        if self.poll_errors:
            raise self.poll_errors.pop(0)
        return self.statuses[min(self.polls, len(self.statuses)) - 1]


class FakeStorageProvider(BaseStorageProvider):
    def __init__(self, fail=False):
        self.fail = fail
        self.calls: List[tuple] = []

    @property
    def name(self) -> str:
        return "fake-storage"

    @property
    def is_available(self) -> bool:
        return True

    def _store(self, transient_url: str, project_id: str, scene_id: Optional[str]) -> str:
        self.calls.append((transient_url, project_id, scene_id))
        if self.fail:
            raise ProviderError("fake-storage", "upload failed")
        return f"https://storage.test/{project_id}/{transient_url.rsplit('/', 1)[-1]}"

    async def persist_video(self, transient_url: str, project_id: str, scene_id: Optional[str] = None) -> str:
        return self._store(transient_url, project_id, scene_id)

    async def persist_audio(self, transient_url: str, project_id: str, scene_id: Optional[str] = None) -> str:
        return self._store(transient_url, project_id, scene_id)


@pytest.fixture
def fake_video():
    return FakeVideoProvider()


@pytest.fixture
def fake_music():
    return FakeMusicProvider()


@pytest.fixture
def fake_voice():
    return FakeVoiceProvider()


@pytest.fixture
def fake_assembly():
    return FakeAssemblyProvider()


@pytest.fixture
def fake_storage():
    return FakeStorageProvider()


@pytest.fixture
def assembler(fake_assembly, fake_storage):
    """Assembly coordinator that polls without waiting."""
    return AssemblyCoordinator(
        provider=fake_assembly,
        storage=fake_storage,
        poll_interval=0,
        max_poll_seconds=5,
    )


@pytest.fixture
def pipeline(fake_video, fake_music, fake_voice, assembler):
    """Production pipeline wired to fake providers."""
    from studio.production.pipeline import ProductionPipeline

    return ProductionPipeline(
        video=fake_video,
        music=fake_music,
        voice=fake_voice,
        assembler=assembler,
    )


@pytest.fixture
def single_scene_request():
    """One 10 second scene, music on, voiceover off."""
    from studio.production.models import (
        AudioPreferences,
        ProductionRequest,
        ProductionSettings,
        SceneInput,
    )

    return ProductionRequest(
        project_id="proj-1",
        user_id="user-1",
        scenes=[SceneInput(id="s1", description="A lighthouse at dusk", duration=10)],
        settings=ProductionSettings(
            audio_preferences=AudioPreferences(include_music_track=True, include_voiceover=False),
        ),
    )
