"""
Animation pipeline orchestrator.

Drives one job through its phases, strictly forward and one unit of work
at a time:

    story -> characters -> scene images -> videos -> narration -> assembly -> finalize

Every phase iterates scenes in scene-number order; that order is the only
ordering key from story generation through the final timeline. Any phase
failure fails the whole job, except missing narration, which drops the
scene from assembly.
"""
import logging
import time
import uuid
from pathlib import Path
from typing import Callable, Dict, List, Optional, Union

from ..exceptions import JobFailedError
from ..models import (
    AssetKind,
    ClipPosition,
    CountryContext,
    GeneratedAsset,
    GenerationRequest,
    JobResult,
    MoodBeat,
    ProcessedClip,
    StoryStructure,
    Timeline,
)
from ..providers.exceptions import ProviderError
from ..providers.video import download_video, image_to_data_url
from ..services import content_safety, moods, prompts
from .enums import JobPhase
from .job import Job, JobProgress
from .workspace import WorkingArea, safe_name

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[JobProgress], None]


class PipelineOrchestrator:
    """
    End-to-end animation job runner.

    Collaborators are injected so the pipeline can run against fakes:
    story_service, image_provider, video_engine, voice_provider,
    clip_assembler, timeline_assembler and storage.
    """

    def __init__(
        self,
        story_service,
        image_provider,
        video_engine,
        voice_provider,
        clip_assembler,
        timeline_assembler,
        storage,
        work_root: Path,
        progress_callback: Optional[ProgressCallback] = None,
        video_downloader: Callable[[str, Path], Path] = download_video,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.story_service = story_service
        self.image_provider = image_provider
        self.video_engine = video_engine
        self.voice_provider = voice_provider
        self.clip_assembler = clip_assembler
        self.timeline_assembler = timeline_assembler
        self.storage = storage
        self.work_root = Path(work_root).resolve()
        self.progress_callback = progress_callback
        self.video_downloader = video_downloader
        self._clock = clock

    # ── Progress ─────────────────────────────────────────────────────

    @staticmethod
    def _report(
        job: Job,
        callback: Optional[ProgressCallback],
        message: str,
        current_scene: Optional[int] = None,
        total_scenes: Optional[int] = None,
    ):
        logger.info(f"[JOB {job.job_id}] {job.phase.display_name}: {message}")
        if callback is not None:
            callback(JobProgress(
                job_id=job.job_id,
                phase=job.phase,
                progress=job.phase.progress,
                current_scene=current_scene,
                total_scenes=total_scenes,
                message=message,
            ))

    # ── Entry point ──────────────────────────────────────────────────

    def run(
        self,
        request: Union[GenerationRequest, dict],
        job_id: Optional[str] = None,
        progress_callback: Optional[ProgressCallback] = None,
    ) -> JobResult:
        """
        Run a full animation job.

        ``progress_callback`` applies to this run only and takes precedence
        over the orchestrator-wide callback.

        Raises:
            InputValidationError: if the request is invalid (no job is started)
            JobFailedError: if any phase fails; carries the phase and cause
        """
        if not isinstance(request, GenerationRequest):
            request = GenerationRequest.parse(request)

        started = self._clock()
        job = Job(job_id=job_id or str(uuid.uuid4()), article=request.article, scene_count=request.scene_count)
        area = WorkingArea(self.work_root / f"animation_{job.job_id}")
        job.work_dir = str(area.root)
        callback = progress_callback or self.progress_callback

        def report(message: str, current_scene: Optional[int] = None, total_scenes: Optional[int] = None):
            self._report(job, callback, message, current_scene, total_scenes)

        def advance(phase: JobPhase, message: str):
            job.advance(phase)
            report(message)

        final_path: Optional[Path] = None
        durable_path: Optional[Path] = None

        logger.info(f"[JOB {job.job_id}] Starting: {len(request.article)} chars, {request.scene_count} scenes")
        report("Job created")

        try:
            area.create()

            country, story = self._story_phase(request)
            advance(JobPhase.STORY_READY, f"\"{story.title}\" ({len(story.scenes)} scenes)")

            characters = self._character_phase(story, country, area)
            advance(JobPhase.CHARACTERS_READY, f"{len(characters)} characters")

            scene_images = self._scene_phase(report, story, characters, country, area)
            advance(JobPhase.SCENES_READY, f"{len(scene_images)} scene images")

            videos = self._video_phase(report, story, scene_images, area)
            advance(JobPhase.VIDEOS_READY, f"{len(videos)} scene videos")

            narration = self._audio_phase(story, area)
            advance(JobPhase.AUDIO_READY, f"narration for {len(narration)}/{len(story.scenes)} scenes")

            final_path = area.file(f"final_{uuid.uuid4()}.mp4")
            timeline = self._assembly_phase(report, story, videos, narration, area, final_path)
            advance(JobPhase.ASSEMBLED, f"{len(timeline.clips)} clips, {timeline.total_duration:.1f}s")

            durable_path = self.storage.persist_final(final_path)
            job.final_path = str(durable_path)
            area.reclaim()

            processing_ms = int((self._clock() - started) * 1000)
            result = JobResult(
                job_id=job.job_id,
                video_path=str(durable_path),
                title=story.title,
                processing_time_ms=processing_ms,
                scene_count=len(story.scenes),
                clip_count=len(timeline.clips),
                duration_seconds=timeline.total_duration,
                overall_mood=story.overall_mood,
                mood_progression=[
                    MoodBeat(
                        scene_number=s.scene_number,
                        mood=s.mood,
                        intensity=s.mood_intensity,
                        emotional_tone=s.emotional_tone,
                    )
                    for s in story.scenes
                ],
                country=country.label,
            )
            advance(JobPhase.FINALIZED, f"Saved to {durable_path} in {processing_ms / 60000:.1f} min")
            return result

        except Exception as e:
            if job.phase.is_terminal:
                # Only the finalized progress report can fail here; the output is already durable
                raise
            failed_phase = job.fail(str(e))
            logger.error(f"[JOB {job.job_id}] Failed during {failed_phase}: {e}")
            self._discard_transient(final_path)
            report(f"Failed during {failed_phase}: {e}")
            raise JobFailedError(failed_phase, str(e), job.job_id) from e

    def _discard_transient(self, final_path: Optional[Path]):
        """Remove a non-durable final file; durable copies are always kept."""
        if final_path is None or not final_path.exists():
            return
        if self.storage.is_durable(final_path):
            return
        try:
            final_path.unlink()
            logger.info(f"[JOB] Removed transient output {final_path.name}")
        except OSError as e:
            logger.warning(f"[JOB] Could not remove transient output {final_path}: {e}")

    # ── Phases ───────────────────────────────────────────────────────

    def _story_phase(self, request: GenerationRequest):
        country: CountryContext = self.story_service.detect_country_context(request.article)
        story: StoryStructure = self.story_service.generate_story(request.article, request.scene_count, country)
        return country, story

    def _character_phase(
        self,
        story: StoryStructure,
        country: CountryContext,
        area: WorkingArea,
    ) -> Dict[str, GeneratedAsset]:
        characters: Dict[str, GeneratedAsset] = {}
        for character in story.characters:
            prompt = prompts.character_prompt(character.description, character.personality, country)
            path = area.path_for("characters", f"{safe_name(character.name, 'character')}_master.png")
            characters[character.name] = GeneratedAsset(
                kind=AssetKind.CHARACTER_IMAGE,
                owner=character.name,
                path=str(self.image_provider.generate(prompt, path)),
                provider=self.image_provider.name,
            )
            logger.info(f"[CHARACTERS] Generated {character.name}")
        return characters

    def _scene_phase(
        self,
        report: Callable[..., None],
        story: StoryStructure,
        characters: Dict[str, GeneratedAsset],
        country: CountryContext,
        area: WorkingArea,
    ) -> Dict[int, GeneratedAsset]:
        images: Dict[int, GeneratedAsset] = {}
        total = len(story.scenes)
        for scene in story.scenes:
            sanitized = content_safety.sanitize_scene_description(scene.description)
            if sanitized.was_modified:
                logger.info(f"[SCENES] Scene {scene.scene_number} description adapted ({sanitized.story_type})")

            referenced = [name for name in scene.characters if name in characters]
            prompt = prompts.scene_prompt(scene, sanitized.description, referenced, country)
            path = area.path_for("scenes", f"scene_{scene.scene_number}_{safe_name(scene.mood, 'mood')}.png")

            if referenced:
                references = [Path(characters[name].path) for name in referenced]
                image = self.image_provider.edit_with_references(references, prompt, path)
            else:
                image = self.image_provider.generate(prompt, path)

            images[scene.scene_number] = GeneratedAsset(
                kind=AssetKind.SCENE_IMAGE,
                owner=str(scene.scene_number),
                path=str(image),
                provider=self.image_provider.name,
            )
            report(f"Scene image {scene.scene_number} ready", scene.scene_number, total)
        return images

    def _video_phase(
        self,
        report: Callable[..., None],
        story: StoryStructure,
        scene_images: Dict[int, GeneratedAsset],
        area: WorkingArea,
    ) -> Dict[int, GeneratedAsset]:
        videos: Dict[int, GeneratedAsset] = {}
        total = len(story.scenes)
        for scene in story.scenes:
            motion = self.story_service.describe_motion(scene)
            motion_prompt = prompts.disney_motion_prompt(motion, scene)

            resolution = self.video_engine.resolve_video(
                image_to_data_url(Path(scene_images[scene.scene_number].path)),
                motion_prompt,
                scene.duration,
                scene.scene_type,
                scene.mood,
                scene.mood_intensity,
            )

            name = f"scene_{scene.scene_number}_{safe_name(scene.mood, 'mood')}_{uuid.uuid4()}.mp4"
            path = self.video_downloader(resolution.video_url, area.path_for("videos", name))
            videos[scene.scene_number] = GeneratedAsset(
                kind=AssetKind.RAW_VIDEO,
                owner=str(scene.scene_number),
                path=str(path),
                provider=f"{resolution.provider}/{resolution.strategy}",
            )
            report(
                f"Scene video {scene.scene_number} ready via {resolution.provider} ({resolution.strategy})",
                scene.scene_number,
                total,
            )
        return videos

    def _audio_phase(self, story: StoryStructure, area: WorkingArea) -> Dict[int, GeneratedAsset]:
        """Narration per scene. Scenes whose synthesis fails are left without audio."""
        voice_id = moods.voice_for_mood(story.overall_mood)
        narration: Dict[int, GeneratedAsset] = {}
        for scene in story.scenes:
            if not scene.narration.strip():
                logger.warning(f"[AUDIO] Scene {scene.scene_number} has no narration text")
                continue

            path = area.path_for("audio", f"narration_{scene.scene_number}_{safe_name(scene.mood, 'mood')}.mp3")
            settings = moods.voice_settings(scene.mood, scene.mood_intensity)
            try:
                audio = self.voice_provider.synthesize(scene.narration, voice_id, settings, path)
            except ProviderError as e:
                logger.warning(f"[AUDIO] No narration for scene {scene.scene_number}: {e}")
                continue

            narration[scene.scene_number] = GeneratedAsset(
                kind=AssetKind.NARRATION_AUDIO,
                owner=str(scene.scene_number),
                path=str(audio),
                provider=self.voice_provider.name,
            )
        return narration

    def _assembly_phase(
        self,
        report: Callable[..., None],
        story: StoryStructure,
        videos: Dict[int, GeneratedAsset],
        narration: Dict[int, GeneratedAsset],
        area: WorkingArea,
        final_path: Path,
    ) -> Timeline:
        included = [s for s in story.scenes if s.scene_number in narration]
        skipped = [s.scene_number for s in story.scenes if s.scene_number not in narration]
        if skipped:
            logger.warning(f"[ASSEMBLY] Skipping scenes without narration: {skipped}")

        clips: List[ProcessedClip] = []
        for index, scene in enumerate(included):
            position = ClipPosition.for_index(index, len(included))
            name = f"processed_scene_{scene.scene_number}_{safe_name(scene.mood, 'mood')}.mp4"
            clips.append(self.clip_assembler.process_scene(
                Path(videos[scene.scene_number].path),
                Path(narration[scene.scene_number].path),
                scene.narration,
                position,
                area.path_for("processed", name),
                scene.scene_number,
            ))
            report(f"Clip {scene.scene_number} processed", scene.scene_number, len(included))

        return self.timeline_assembler.assemble(clips, final_path)


def create_orchestrator(progress_callback: Optional[ProgressCallback] = None) -> PipelineOrchestrator:
    """Build an orchestrator wired to the configured providers and ffmpeg."""
    from ..config import config
    from ..providers import get_image_provider, get_text_provider, get_video_engine, get_voice_provider
    from ..rendering import ClipAssembler, MediaToolAdapter, TimelineAssembler
    from ..services import LocalDurableStorage, StoryService

    gen = config.generation
    media_tool = MediaToolAdapter(
        ffmpeg_path=config.paths.ffmpeg_path,
        ffprobe_path=config.paths.ffprobe_path,
        timeout=gen.ffmpeg_timeout,
        probe_timeout=gen.ffprobe_timeout,
    )

    def downloader(url: str, path: Path) -> Path:
        return download_video(url, path, timeout=gen.download_timeout)

    return PipelineOrchestrator(
        story_service=StoryService(get_text_provider()),
        image_provider=get_image_provider(),
        video_engine=get_video_engine(),
        voice_provider=get_voice_provider(),
        clip_assembler=ClipAssembler(
            media_tool,
            fade_duration=gen.fade_duration,
            subtitle_lead_out=gen.subtitle_lead_out,
            trim_padding=gen.trim_padding,
            fps=gen.fps,
            width=gen.width,
            height=gen.height,
        ),
        timeline_assembler=TimelineAssembler(media_tool),
        storage=LocalDurableStorage(config.paths.output_dir),
        work_root=config.paths.work_dir,
        progress_callback=progress_callback,
        video_downloader=downloader,
    )
