"""Image loading and caching.

Textures are requested by key (a path relative to the asset directory),
loaded once, and handed out by get(). The game ships without art, so a key
whose file is missing gets a flat coloured placeholder of the expected size.
"""

import logging
from pathlib import Path
from typing import Callable, Dict, Iterable, List, Optional, Tuple

import pygame


logger = logging.getLogger(__name__)

DEFAULT_PLACEHOLDER_SIZE: Tuple[int, int] = (101, 83)

# Placeholder colours (RGB), picked per key
_PALETTE = (
    (97, 175, 239),
    (152, 195, 121),
    (229, 192, 123),
    (224, 108, 117),
    (198, 120, 221),
    (86, 182, 194),
    (209, 154, 102),
    (171, 178, 191),
)

# Known keys get stable, recognisable placeholder colours
_KNOWN_COLORS = {
    "images/Stone Block.png": (120, 120, 128),
    "images/Grass Block.png": (96, 160, 80),
    "images/Cat Girl.png": (97, 175, 239),
}


class ResourceNotLoadedError(KeyError):
    """Raised when a texture key was never loaded."""


class ResourceLoader:
    """Loads images by key and signals readiness to registered callbacks."""

    def __init__(self, asset_dir: str = "."):
        self.asset_dir = Path(asset_dir)
        self._cache: Dict[str, pygame.Surface] = {}
        self._callbacks: List[Callable[[], None]] = []
        self._ready = False
        self.placeholders: List[str] = []

    def load(
        self,
        keys: Iterable[str],
        placeholder_sizes: Optional[Dict[str, Tuple[int, int]]] = None,
    ) -> None:
        """Load every key not yet cached, then fire the ready callbacks.

        Args:
            keys: Resource keys (paths relative to asset_dir)
            placeholder_sizes: Size of the placeholder to create per key when
                its file is missing. DEFAULT_PLACEHOLDER_SIZE otherwise.
        """
        placeholder_sizes = placeholder_sizes or {}
        self._ready = False
        for key in keys:
            if key in self._cache:
                continue
            size = placeholder_sizes.get(key, DEFAULT_PLACEHOLDER_SIZE)
            self._cache[key] = self._load_one(key, size)

        self._ready = True
        callbacks, self._callbacks = self._callbacks, []
        for callback in callbacks:
            callback()

    def _load_one(self, key: str, size: Tuple[int, int]) -> pygame.Surface:
        path = self.asset_dir / key
        if path.is_file():
            image = pygame.image.load(str(path))
            # convert_alpha needs an open display
            if pygame.display.get_init() and pygame.display.get_surface() is not None:
                image = image.convert_alpha()
            logger.debug("Loaded %s (%dx%d)", key, *image.get_size())
            return image

        logger.warning("Missing texture %s, using %dx%d placeholder", key, *size)
        self.placeholders.append(key)
        return make_placeholder(key, size)

    def on_ready(self, callback: Callable[[], None]) -> None:
        """Call callback once loading completes (immediately if already done)."""
        if self._ready:
            callback()
        else:
            self._callbacks.append(callback)

    def is_ready(self) -> bool:
        return self._ready

    def get(self, key: str) -> pygame.Surface:
        """Return a loaded image. Raises ResourceNotLoadedError for unknown keys."""
        try:
            return self._cache[key]
        except KeyError:
            raise ResourceNotLoadedError(key) from None

    def __contains__(self, key: str) -> bool:
        return key in self._cache


def make_placeholder(key: str, size: Tuple[int, int]) -> pygame.Surface:
    """Flat coloured surface standing in for a missing image."""
    color = _KNOWN_COLORS.get(key) or _PALETTE[sum(map(ord, key)) % len(_PALETTE)]
    surface = pygame.Surface(size, pygame.SRCALPHA)
    surface.fill(color + (255,))
    return surface
