"""
Card compositing.

The pipeline only depends on the RenderingEngine protocol. PillowCardRenderer
is the bundled engine: it lays out art, frame, gems, name banner and rules
text on a 764x1100 reference card and scales to the requested width.
"""

import logging
import re
from typing import Protocol

from PIL import Image, ImageDraw, ImageFont, ImageOps

from hearthrender.models.render import RenderJob
from hearthrender.services.font_registry import FontRegistry

logger = logging.getLogger(__name__)

REFERENCE_WIDTH = 764
REFERENCE_HEIGHT = 1100

CLASS_COLORS: dict[str, tuple[int, int, int]] = {
    "DEATHKNIGHT": (60, 70, 90),
    "DEMONHUNTER": (40, 80, 50),
    "DRUID": (110, 70, 40),
    "HUNTER": (40, 100, 40),
    "MAGE": (60, 80, 160),
    "PALADIN": (170, 130, 50),
    "PRIEST": (200, 200, 200),
    "ROGUE": (60, 60, 60),
    "SHAMAN": (50, 60, 130),
    "WARLOCK": (100, 50, 120),
    "WARRIOR": (140, 40, 30),
    "NEUTRAL": (120, 105, 90),
}

FRAME_COLOR = (95, 85, 75)
PREMIUM_FRAME_COLOR = (212, 175, 55)
GEM_COLOR = (40, 90, 200)
ATTACK_COLOR = (200, 160, 40)
HEALTH_COLOR = (190, 30, 30)
BANNER_COLOR = (45, 35, 30)
BODY_COLOR = (225, 210, 180)
TEXT_COLOR = (20, 15, 10)
NUMBER_COLOR = (255, 255, 255)

_MARKUP = re.compile(r"</?[bi]>|\[x\]")
_SCALING_MARKERS = re.compile(r"[$#](\d)")
# Keeps "_"-joined words on one line; wrap_text only breaks on " "
NBSP = "\u00a0"


class RenderingEngine(Protocol):
    """Anything that turns a RenderJob into a finished bitmap."""

    def render(self, job: RenderJob) -> Image.Image: ...


def clean_card_text(text: str | None) -> str:
    """Strip inline markup and scaling markers from catalog rules text."""
    if not text:
        return ""
    text = _MARKUP.sub("", text)
    text = _SCALING_MARKERS.sub(r"\1", text)
    return text.replace("_", NBSP)


def wrap_text(
    text: str,
    font: ImageFont.FreeTypeFont | ImageFont.ImageFont,
    max_width: float,
    draw: ImageDraw.ImageDraw,
) -> list[str]:
    """
    Greedy word wrap.

    Words wider than max_width (and scripts without spaces) are broken
    per character.
    """
    lines: list[str] = []
    for paragraph in text.split("\n"):
        current = ""
        for word in paragraph.split(" "):
            candidate = f"{current} {word}" if current else word
            if draw.textlength(candidate, font=font) <= max_width:
                current = candidate
                continue
            if current:
                lines.append(current)
            current = ""
            for char in word:
                if draw.textlength(current + char, font=font) > max_width and current:
                    lines.append(current)
                    current = ""
                current += char
        lines.append(current)
    return lines


class PillowCardRenderer:
    """Pillow implementation of RenderingEngine."""

    def __init__(self, fonts: FontRegistry) -> None:
        self.fonts = fonts
        self._font_cache: dict[tuple[str, int], ImageFont.FreeTypeFont | ImageFont.ImageFont] = {}

    def _font(self, family: str, size: int) -> ImageFont.FreeTypeFont | ImageFont.ImageFont:
        key = (family, size)
        if key not in self._font_cache:
            path = self.fonts.font_path(family)
            try:
                self._font_cache[key] = ImageFont.truetype(str(path), size)
            except OSError as exc:
                logger.warning("Cannot load %s from %s (%s), using default font", family, path, exc)
                self._font_cache[key] = ImageFont.load_default(size)
        return self._font_cache[key]

    def render(self, job: RenderJob) -> Image.Image:
        card = job.card
        profile = job.font_profile
        card_type = card.type.upper()

        canvas = Image.new("RGBA", (REFERENCE_WIDTH, REFERENCE_HEIGHT), (0, 0, 0, 0))
        draw = ImageDraw.Draw(canvas)

        card_class = (card.card_class or "NEUTRAL").upper()
        background = CLASS_COLORS.get(card_class, CLASS_COLORS["NEUTRAL"])
        frame = PREMIUM_FRAME_COLOR if job.premium else FRAME_COLOR
        draw.rounded_rectangle(
            (40, 40, 724, 1060), radius=48, fill=background, outline=frame, width=14
        )

        # Artwork
        texture = job.texture.convert("RGBA")
        if card_type == "MINION":
            box = (152, 110, 612, 650)
            art = ImageOps.fit(texture, (box[2] - box[0], box[3] - box[1]))
            mask = Image.new("L", art.size, 0)
            ImageDraw.Draw(mask).ellipse((0, 0, art.size[0], art.size[1]), fill=255)
            canvas.paste(art, box[:2], mask)
            draw.ellipse(box, outline=frame, width=12)
        else:
            box = (130, 130, 634, 560)
            art = ImageOps.fit(texture, (box[2] - box[0], box[3] - box[1]))
            canvas.paste(art, box[:2])
            draw.rectangle(box, outline=frame, width=12)

        # Name banner
        draw.rounded_rectangle(
            (90, 560, 674, 650), radius=20, fill=BANNER_COLOR, outline=frame, width=6
        )
        if card.name:
            draw.text(
                (382, 605),
                card.name,
                font=self._font(profile.title_font, 48),
                fill=NUMBER_COLOR,
                anchor="mm",
                stroke_width=3,
                stroke_fill=TEXT_COLOR,
            )

        # Rules text
        body_box = (150, 670, 614, 960)
        draw.rounded_rectangle(body_box, radius=16, fill=BODY_COLOR)
        body_font = self._font(profile.body_font_regular, profile.body_font_size)
        text_width = body_box[2] - body_box[0] - 30
        lines = wrap_text(clean_card_text(card.text), body_font, text_width, draw)
        block_height = len(lines) * profile.body_line_height
        y = (body_box[1] + body_box[3] - block_height) // 2 + profile.body_font_offset.y - 26
        x = (body_box[0] + body_box[2]) // 2 + profile.body_font_offset.x
        for line in lines:
            draw.text((x, y), line, font=body_font, fill=TEXT_COLOR, anchor="ma")
            y += profile.body_line_height

        # Gems
        gem_font = self._font(profile.gem_font, 96)
        self._gem(draw, (120, 140), GEM_COLOR, card.cost, gem_font)
        if card_type in ("MINION", "WEAPON"):
            self._gem(draw, (130, 975), ATTACK_COLOR, card.extra.get("attack"), gem_font)
            stat_key = "durability" if card_type == "WEAPON" else "health"
            self._gem(draw, (634, 975), HEALTH_COLOR, card.extra.get(stat_key), gem_font)
        elif card_type == "HERO" and card.extra.get("armor") is not None:
            self._gem(draw, (634, 975), FRAME_COLOR, card.extra.get("armor"), gem_font)

        height = round(job.resolution * REFERENCE_HEIGHT / REFERENCE_WIDTH)
        if job.resolution != REFERENCE_WIDTH:
            canvas = canvas.resize((job.resolution, height), Image.Resampling.LANCZOS)
        return canvas

    @staticmethod
    def _gem(
        draw: ImageDraw.ImageDraw,
        center: tuple[int, int],
        color: tuple[int, int, int],
        value: object,
        font: ImageFont.FreeTypeFont | ImageFont.ImageFont,
    ) -> None:
        if value is None:
            return
        cx, cy = center
        draw.ellipse((cx - 70, cy - 70, cx + 70, cy + 70), fill=color, outline=TEXT_COLOR, width=6)
        draw.text(
            (cx, cy),
            str(value),
            font=font,
            fill=NUMBER_COLOR,
            anchor="mm",
            stroke_width=4,
            stroke_fill=TEXT_COLOR,
        )
