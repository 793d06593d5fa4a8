from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class FontOffset:
    """Pixel offset applied to the body text block."""

    x: int = 0
    y: int = 0


@dataclass(frozen=True, slots=True)
class FontProfile:
    """
    Typography configuration for a single render.

    Attributes:
        title_font: Family used for the card name banner
        body_font_bold: Family for bold body text
        body_font_italic: Family for italic body text
        body_font_bold_italic: Family for bold italic body text
        body_font_regular: Family for regular body text
        gem_font: Family for cost/attack/health numbers
        body_font_size: Body text size at the reference card width
        body_line_height: Body line height at the reference card width
        body_font_offset: Offset of the body text block
    """

    title_font: str
    body_font_bold: str
    body_font_italic: str
    body_font_bold_italic: str
    body_font_regular: str
    gem_font: str
    body_font_size: int
    body_line_height: int
    body_font_offset: FontOffset

    def families(self) -> frozenset[str]:
        """All font families this profile needs registered."""
        return frozenset(
            {
                self.title_font,
                self.body_font_bold,
                self.body_font_italic,
                self.body_font_bold_italic,
                self.body_font_regular,
                self.gem_font,
            }
        )
