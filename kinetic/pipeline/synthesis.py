"""
Deterministic timeline synthesis.

Builds an ``AnimationTimeline`` from an enhanced script, beat analysis and
uploaded assets without calling out anywhere. The mock synthesis provider
uses it directly; the same inputs always produce the same timeline.

Layout:
- optional logo intro scene
- one text scene per sentence
- optional product image scene

Scene boundaries are spread evenly over the target length and snapped to
the nearest beat when there are enough beats. Transitions cycle
fade/slide/wipe between scenes; the last scene has none.
"""

import hashlib
import re
from itertools import cycle
from typing import Sequence

from ..engine.text import normalize_word
from ..providers.base import SynthesisRequest
from ..sync.beats import align_words_with_beats
from ..timeline.models import (
    MIN_SCENE_FRAMES,
    TRANSITION_FRAMES,
    AnimationSpec,
    AnimationTimeline,
    AnimationType,
    AudioConfig,
    Background,
    Easing,
    EnergyLevel,
    ImageLayer,
    LayerStyle,
    LayoutAlign,
    LogoLayer,
    Scene,
    TextAnimation,
    TextLayer,
    TransitionType,
    VideoConfig,
)


TRANSITION_CYCLE = (TransitionType.FADE, TransitionType.SLIDE, TransitionType.WIPE)

MAX_PRODUCT_IMAGES = 3

_SENTENCE_SPLIT = re.compile(r"(?<=[.!?])\s+")
_DECORATION = " \t\n✨"


def split_sentences(script: str) -> list[str]:
    """Split a script into sentences, dropping empty ones and decorations."""
    sentences = []
    for part in _SENTENCE_SPLIT.split(script.strip(_DECORATION)):
        sentence = part.strip(_DECORATION)
        if sentence:
            sentences.append(sentence)
    return sentences


def extract_emphasis_points(script: str) -> list[str]:
    """Last word of each sentence, when longer than 3 characters."""
    points = []
    for sentence in re.split(r"[.!?]+", script):
        words = sentence.split()
        if words and len(words[-1]) > 3:
            points.append(words[-1])
    return points


_EMOJI = re.compile("[\U0001F300-\U0001F9FF]")


def analyze_tone(script: str) -> dict[str, str]:
    """Rough tone and energy of a script from its punctuation.

    Returns:
        Dict with ``tone``, ``energy`` and ``sentiment``.
    """
    exclamations = script.count("!")
    questions = script.count("?")
    has_emoji = bool(_EMOJI.search(script))

    energy = EnergyLevel.MEDIUM
    if exclamations > 2 or has_emoji:
        energy = EnergyLevel.HIGH
    if questions > 2:
        energy = EnergyLevel.LOW

    if has_emoji:
        tone = "playful"
    elif exclamations > 1:
        tone = "energetic"
    else:
        tone = "calm"

    return {"tone": tone, "energy": energy.value, "sentiment": "positive"}


def scene_boundaries(count: int, target_frames: int, beats: Sequence[int] = ()) -> list[int]:
    """``count + 1`` increasing boundaries from 0 to ``target_frames``.

    Internal boundaries start evenly spaced and move to the nearest beat
    when at least ``count - 1`` beats exist and the move keeps every scene
    at least ``MIN_SCENE_FRAMES`` long.
    """
    if count <= 0:
        return [0]
    step = target_frames // count
    boundaries = [i * step for i in range(count)] + [target_frames]

    usable = [b for b in beats if 0 < b < target_frames]
    if len(usable) < count - 1:
        return boundaries

    for i in range(1, count):
        nearest = min(usable, key=lambda beat: (abs(beat - boundaries[i]), beat))
        if (
            nearest - boundaries[i - 1] >= MIN_SCENE_FRAMES
            and boundaries[i + 1] - nearest >= MIN_SCENE_FRAMES
        ):
            boundaries[i] = nearest
    return boundaries


def _words_in(sentence: str, candidates: Sequence[str]) -> list[str]:
    present = {normalize_word(w) for w in sentence.split(" ")}
    return [word for word in candidates if normalize_word(word) in present]


def _text_layer(index: int, sentence: str, emphasis: list[str], synced: bool) -> TextLayer:
    if synced:
        animation = AnimationSpec(type=AnimationType.BEAT_BOUNCE, duration_in_frames=20, easing=Easing.EASE_OUT)
        text_animation = TextAnimation.POP_IN
    elif index == 0:
        animation = AnimationSpec(type=AnimationType.SLIDE_UP, duration_in_frames=30, easing=Easing.EASE_OUT)
        text_animation = TextAnimation.FADE_UP
    else:
        animation = AnimationSpec(type=AnimationType.FADE_IN, duration_in_frames=20, easing=Easing.EASE_IN_OUT)
        text_animation = TextAnimation.FADE
    return TextLayer(
        id=f"layer_text_{index + 1}",
        content=sentence,
        emphasis_words=emphasis,
        text_animation=text_animation,
        animation=animation,
        style=LayerStyle(font_size=80, color="#ffffff", font_weight="bold", position="center"),
        beat_sync=synced,
    )


def _timeline_id(request: SynthesisRequest) -> str:
    if request.timeline_id:
        return request.timeline_id
    music = request.assets.music_file.url if request.assets.music_file else ""
    digest = hashlib.sha1(f"{request.enhancement.enhanced_script}|{music}".encode("utf-8"))
    return f"project_{digest.hexdigest()[:12]}"


def synthesize_timeline(request: SynthesisRequest) -> AnimationTimeline:
    """Build a timeline from the results of the earlier stages.

    Args:
        request: Enhanced script, beats, assets and output dimensions.

    Returns:
        AnimationTimeline whose ``video.total_frames`` equals the computed
        duration.

    Raises:
        ValueError: If the enhanced script contains no sentences.
    """
    sentences = split_sentences(request.enhancement.enhanced_script)
    if not sentences:
        raise ValueError("Enhanced script contains no sentences")

    assets = request.assets
    beats = request.beat_analysis.beats
    emphasized = request.enhancement.emphasized_words
    aligned = {normalize_word(a.word) for a in align_words_with_beats(emphasized, beats)}

    drafts: list[dict] = []
    if assets.logo is not None:
        drafts.append(
            {
                "id": "scene_intro",
                "name": "intro",
                "layers": [
                    LogoLayer(
                        id="layer_logo",
                        src=assets.logo.url,
                        width=200,
                        height=200,
                        animation=AnimationSpec(type=AnimationType.SCALE_IMPACT, duration_in_frames=40),
                        style=LayerStyle(position="center"),
                    )
                ],
                "layout_align": LayoutAlign.CENTER,
            }
        )

    for i, sentence in enumerate(sentences):
        emphasis = _words_in(sentence, emphasized)
        synced = any(normalize_word(w) in aligned for w in emphasis)
        drafts.append(
            {
                "id": f"scene_{i + 1}",
                "name": f"line {i + 1}",
                "layers": [_text_layer(i, sentence, emphasis, synced)],
                "layout_align": LayoutAlign.CENTER,
            }
        )

    if assets.product_images:
        images = assets.product_images[:MAX_PRODUCT_IMAGES]
        drafts.append(
            {
                "id": "scene_product",
                "name": "product",
                "layers": [
                    ImageLayer(
                        id=f"layer_product_{j + 1}",
                        src=image.url,
                        animation=AnimationSpec(type=AnimationType.FADE_IN, duration_in_frames=20, easing=Easing.EASE_OUT),
                        start_frame=j * 10,
                    )
                    for j, image in enumerate(images)
                ],
                "layout_align": LayoutAlign.BOTTOM,
                "background_image_url": images[0].url,
            }
        )

    boundaries = scene_boundaries(len(drafts), request.target_frames, beats)
    transitions = cycle(TRANSITION_CYCLE)
    scenes = []
    for i, draft in enumerate(drafts):
        last = i == len(drafts) - 1
        transition = TransitionType.NONE if last else next(transitions)
        overlap = 0 if last else TRANSITION_FRAMES
        # scene i starts at boundaries[i]; its outgoing overlap sits past the slot
        duration = boundaries[i + 1] - boundaries[i] + overlap
        scenes.append(Scene(duration_in_frames=duration, transition_type=transition, **draft))

    timeline = AnimationTimeline(
        id=_timeline_id(request),
        project_name=request.project_name,
        description=request.style_prompt or None,
        video=VideoConfig(
            fps=request.fps,
            width=request.width,
            height=request.height,
            background=Background(type="solid", color="#000000"),
        ),
        audio=AudioConfig(
            music_url=assets.music_file.url if assets.music_file else "",
            beats=list(beats),
            tempo=request.beat_analysis.tempo,
        ),
        scenes=scenes,
    )
    return timeline.with_derived_total()
