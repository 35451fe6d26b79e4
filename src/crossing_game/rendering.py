"""Drawing surface used by the Director and the HUD.

Thin wrapper over a pygame Surface offering the three primitives the game
needs: blit a (scaled) sub-rectangle of an image, draw text, clear.
"""

from typing import Dict, Optional, Sequence, Tuple

import pygame

from .sprites import Frame


Color = Tuple[int, int, int]

COLOR_BG = (40, 44, 52)
COLOR_RED = (224, 60, 60)
COLOR_WHITE = (255, 255, 255)
COLOR_BLACK = (0, 0, 0)


class Renderer:
    """Draw calls onto a target surface."""

    def __init__(self, surface: pygame.Surface):
        self.surface = surface
        self._fonts: Dict[int, pygame.font.Font] = {}

    @property
    def size(self) -> Tuple[int, int]:
        return self.surface.get_size()

    def clear(self, color: Color = COLOR_BG, rect: Optional[Sequence[int]] = None) -> None:
        """Fill rect (whole surface if None) with color."""
        self.surface.fill(color, rect)

    def draw_image(
        self,
        image: pygame.Surface,
        frame: Frame,
        x: float,
        y: float,
        width: float,
        height: float,
    ) -> None:
        """Draw the frame sub-rectangle of image scaled into (x, y, width, height).

        Only the part of the frame inside the image is drawn, at the scale the
        whole frame would have.
        """
        if frame.width <= 0 or frame.height <= 0:
            return
        src = pygame.Rect(frame.sx, frame.sy, frame.width, frame.height).clip(image.get_rect())
        if src.width == 0 or src.height == 0:
            return
        scale_x = width / frame.width
        scale_y = height / frame.height
        size = (round(src.width * scale_x), round(src.height * scale_y))
        region = image.subsurface(src)
        if size != (src.width, src.height):
            region = pygame.transform.scale(region, size)
        dest_x = x + (src.x - frame.sx) * scale_x
        dest_y = y + (src.y - frame.sy) * scale_y
        self.surface.blit(region, (round(dest_x), round(dest_y)))

    def draw_tile(self, image: pygame.Surface, x: float, y: float) -> None:
        """Draw a whole image at its natural size."""
        self.surface.blit(image, (round(x), round(y)))

    def fill_text(self, text: str, x: float, y: float, size: int = 72, color: Color = COLOR_RED) -> None:
        """Draw text with its baseline at y, like a canvas fillText."""
        font = self._font(size)
        rendered = font.render(text, True, color)
        self.surface.blit(rendered, (round(x), round(y - font.get_ascent())))

    def fill_rect(self, rect: Sequence[int], color: Color, width: int = 0) -> None:
        pygame.draw.rect(self.surface, color, rect, width)

    def _font(self, size: int) -> pygame.font.Font:
        if size not in self._fonts:
            if not pygame.font.get_init():
                pygame.font.init()
            self._fonts[size] = pygame.font.Font(None, size)
        return self._fonts[size]
