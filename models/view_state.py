"""Pan/zoom state captured alongside history snapshots."""

from dataclasses import dataclass


@dataclass(frozen=True)
class ViewState:
    """Screen transform parameters, independent of pixel data.

    ``display_scale`` is the integer auto-fit magnification; ``zoom`` is the
    user's factor. Rendering always uses their product.
    """

    offset_x: float = 0.0
    offset_y: float = 0.0
    zoom: float = 1.0
    display_scale: int = 1

    @property
    def composite_scale(self) -> float:
        return self.zoom * self.display_scale
