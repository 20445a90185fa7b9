"""
Word-level text evaluation.

Splits a text layer into words and computes each word's highlight, style
variant and animation state at a layer-local frame.
"""

import re
from typing import Iterable, Optional

from ..timeline.models import TextAnimation, TextStyle
from .easing import clamped, interpolate, seeded_random, spring
from .state import CharState, WordState


_NON_ALNUM = re.compile(r"[^a-z0-9]")

GLITCH_THRESHOLD = 0.8
GLITCH_SHADOW = "2px 0 red, -2px 0 cyan"


def normalize_word(word: str) -> str:
    """Lower-case and strip everything but ``[a-z0-9]``."""
    return _NON_ALNUM.sub("", word.lower())


def emphasis_set(words: Optional[Iterable[str]]) -> set[str]:
    return {normalize_word(w) for w in (words or [])}


def _style_variant(style: TextStyle, highlighted: bool, color: str, highlight_color: str) -> dict:
    if style == TextStyle.NEON and highlighted:
        return {
            "text_shadow": f"0 0 10px {highlight_color}, 0 0 20px {highlight_color}, 0 0 40px {highlight_color}",
            "color": "#fff",
        }
    if style == TextStyle.OUTLINE:
        width = 4 if highlighted else 2
        return {"text_stroke": f"{width}px {color}", "color": "transparent"}
    if style == TextStyle.SHADOW:
        return {"filter": "drop-shadow(0px 10px 15px rgba(0,0,0,0.8))"}
    return {}


def evaluate_text(
    text: str,
    frame: int,
    fps: int,
    emphasis_words: Optional[Iterable[str]] = None,
    highlight_color: str = "#3b82f6",
    animation: TextAnimation | str = TextAnimation.FADE,
    style: TextStyle | str = TextStyle.NONE,
) -> tuple[WordState, ...]:
    """Evaluate every word of ``text`` at a layer-local frame.

    Args:
        text: Layer content; words are separated by single spaces.
        frame: Frames since the layer started.
        fps: Timeline frame rate (drives springs).
        emphasis_words: Words to highlight, matched after ``normalize_word``.
        highlight_color: Color of highlighted words.
        animation: Word animation.
        style: Style variant.

    Returns:
        One WordState per word, in order.
    """
    animation = TextAnimation(animation)
    style = TextStyle(style)
    highlights = emphasis_set(emphasis_words)

    words = []
    char_counter = 0
    for index, word in enumerate(text.split(" ")):
        highlighted = normalize_word(word) in highlights
        color = highlight_color if highlighted else "inherit"
        props: dict = {"color": color}
        props.update(_style_variant(style, highlighted, color, highlight_color))

        if animation == TextAnimation.FADE:
            props["opacity"] = clamped(frame - index * 2, [0, 10], [0, 1])
        elif animation == TextAnimation.POP_IN:
            props["scale"] = spring(frame - index * 3, fps, damping=12)
        elif animation == TextAnimation.FADE_UP:
            progress = spring(frame - index * 3, fps, damping=14)
            props["translate_y"] = interpolate(progress, [0, 1], [50, 0])
            props["opacity"] = clamped(frame - index * 3, [0, 10], [0, 1])
        elif animation == TextAnimation.GLITCH:
            r = seeded_random(f"{index}-{frame // 4}")
            if r > GLITCH_THRESHOLD:
                props["translate_x"] = interpolate(r, [GLITCH_THRESHOLD, 1], [-10, 10])
                props["skew_x_deg"] = interpolate(r, [GLITCH_THRESHOLD, 1], [-20, 20])
                if style != TextStyle.OUTLINE:
                    props["text_shadow"] = GLITCH_SHADOW

        if animation == TextAnimation.TYPING:
            chars = []
            for char in word:
                # One character every 2 frames
                chars.append(CharState(char=char, visible=frame > char_counter * 2))
                char_counter += 1
            props["chars"] = tuple(chars)
        else:
            char_counter += len(word) + 1

        words.append(WordState(text=word, index=index, highlighted=highlighted, **props))

    return tuple(words)


def visible_text(words: Iterable[WordState]) -> str:
    """The text a viewer would read, honouring typing reveals."""
    parts = []
    for word in words:
        if word.chars is None:
            parts.append(word.text)
        else:
            parts.append("".join(c.char for c in word.chars if c.visible))
    return " ".join(parts).strip()
