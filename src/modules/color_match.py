"""
Add Colors Action for the Action Wizard.

Collects up to MAX_SESSION_COLORS palette-matched colours for an order.
Colours come from three sources:
    - eyedropper: a click on an uploaded image
    - manual: a palette code typed by the user
    - logo: dominant colours extracted from an uploaded logo

Rejected inputs (unknown code, colour cap reached) are reported as
warning side effects and leave the colour list unchanged. Image decode
failures propagate to the caller.
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Literal

from PIL import Image

from src.api.schemas import ColorAssignment, ColorAssignmentCreate
from src.config.policy import MAX_SESSION_COLORS
from src.core.action_protocol import ActionResult, BaseAction
from src.core.wizard_session import WizardSession
from src.lib.color_math import Rgb, hex_to_rgb, rgb_to_hex
from src.lib.errors import COLOR_LIMIT_REACHED, NOT_FOUND
from src.lib.exceptions import ColorLimitReachedError, PaletteCodeNotFoundError
from src.services.color_matcher import ColorMatch, QualityTier, match_palette_code, nearest_match
from src.services.image_sampler import ImageColorSampler
from src.services.palette_store import PaletteEntry, PaletteStore, get_palette_store

if TYPE_CHECKING:
    from src.core.action_runner import ActionRunner
    from src.services.gateway import PersistenceGateway

logger = logging.getLogger(__name__)

COLORS = "colors"

ColorSource = Literal["eyedropper", "manual", "logo"]


@dataclass(frozen=True)
class SelectedColor:
    """A colour chosen in this session and its palette match."""

    id: str
    hex: str
    rgb: Rgb
    matched: PaletteEntry
    distance: float
    quality_tier: QualityTier
    source: ColorSource

    @classmethod
    def from_match(cls, rgb: Rgb, match: ColorMatch, source: ColorSource) -> SelectedColor:
        return cls(
            id=str(uuid.uuid4()),
            hex=match.entry.hex if source == "manual" else rgb_to_hex(rgb),
            rgb=rgb,
            matched=match.entry,
            distance=match.distance,
            quality_tier=match.quality_tier,
            source=source,
        )

    def to_assignment(self) -> ColorAssignment:
        return ColorAssignment(
            hex=self.hex,
            palette_code=self.matched.code,
            palette_name=self.matched.name,
            distance=round(self.distance, 2),
            quality_tier=self.quality_tier.value,
            source=self.source,
        )


class AddColorsAction(BaseAction):
    """Pick colours from images for manufacturing specs."""

    action_id = "add-colors"
    hub_id = "orders"
    title = "Add colors to order"
    description = "Pick colors from images for manufacturing specs"
    pinned = True
    item_label = "order"

    def __init__(
        self,
        palette: PaletteStore | None = None,
        sampler: ImageColorSampler | None = None,
        max_colors: int = MAX_SESSION_COLORS,
    ) -> None:
        self._palette = palette
        self.sampler = sampler or ImageColorSampler()
        self.max_colors = max_colors

    @property
    def palette(self) -> PaletteStore:
        if self._palette is None:
            self._palette = get_palette_store()
        return self._palette

    def initial_data(self) -> dict[str, Any]:
        return {COLORS: ()}

    @staticmethod
    def colors(session: WizardSession) -> tuple[SelectedColor, ...]:
        return tuple(session.get(COLORS) or ())

    # =========================================================================
    # Colour Set Editing
    # =========================================================================

    def _append(self, runner: ActionRunner, color: SelectedColor) -> None:
        """
        Raises:
            ColorLimitReachedError: The session already holds max_colors
        """
        if len(self.colors(runner.session)) >= self.max_colors:
            raise ColorLimitReachedError(self.max_colors)
        runner.update_step_data(COLORS, lambda colors: (*(colors or ()), color))
        logger.debug(
            "Added %s colour %s -> %s (%s)",
            color.source, color.hex, color.matched.code, color.quality_tier.value,
        )

    def _warn_limit(self, runner: ActionRunner, error: ColorLimitReachedError) -> None:
        runner.warn("Color limit reached", f"You can pick up to {error.limit} colors.", COLOR_LIMIT_REACHED)

    def add_sampled_color(
        self,
        runner: ActionRunner,
        rgb: tuple[int, int, int],
        source: ColorSource = "eyedropper",
    ) -> SelectedColor | None:
        """Match an RGB colour against the palette and keep it. None if at the cap."""
        rgb = Rgb(*rgb)
        color = SelectedColor.from_match(rgb, nearest_match(rgb, self.palette), source)
        try:
            self._append(runner, color)
        except ColorLimitReachedError as e:
            self._warn_limit(runner, e)
            return None
        return color

    def pick_from_image(
        self,
        runner: ActionRunner,
        image: bytes | Image.Image,
        display_size: tuple[float, float],
        point: tuple[float, float],
    ) -> SelectedColor | None:
        """
        Eyedropper: sample the clicked pixel and add its match.

        The cap is checked before decoding so a pick at the cap is a no-op.

        Raises:
            ImageDecodeError: If the image bytes cannot be decoded
        """
        if len(self.colors(runner.session)) >= self.max_colors:
            self._warn_limit(runner, ColorLimitReachedError(self.max_colors))
            return None
        rgb = self.sampler.sample_point(image, display_size, point)
        return self.add_sampled_color(runner, rgb, "eyedropper")

    def add_manual_color(self, runner: ActionRunner, code: str) -> SelectedColor | None:
        """Add a colour by palette code. Unknown codes only produce a warning."""
        try:
            match = match_palette_code(code, self.palette)
        except PaletteCodeNotFoundError as e:
            logger.info("Manual palette code not found: %r", e.code)
            runner.warn("Color not found", f"No palette color matches '{e.code.strip()}'.", NOT_FOUND)
            return None
        color = SelectedColor.from_match(match.entry.rgb, match, "manual")
        try:
            self._append(runner, color)
        except ColorLimitReachedError as e:
            self._warn_limit(runner, e)
            return None
        return color

    def add_colors_from_logo(self, runner: ActionRunner, image: bytes | Image.Image) -> list[SelectedColor]:
        """
        Add the logo's primary and secondary colours (as many as fit).

        Raises:
            ImageDecodeError: If the image bytes cannot be decoded
        """
        dominant = self.sampler.extract_dominant_colors(image)
        added: list[SelectedColor] = []
        for hex_value in (dominant.primary, dominant.secondary):
            if hex_value is None:
                continue
            color = self.add_sampled_color(runner, hex_to_rgb(hex_value), "logo")
            if color is None:
                break
            added.append(color)
        return added

    def remove_color(self, runner: ActionRunner, color_id: str) -> None:
        runner.update_step_data(COLORS, lambda colors: tuple(c for c in colors or () if c.id != color_id))

    # =========================================================================
    # Validation & Submission
    # =========================================================================

    def _validate_choose(self, session: WizardSession) -> list[str]:
        if not self.colors(session):
            return ["Pick at least one color"]
        return []

    def _validate_confirm(self, session: WizardSession) -> list[str]:
        return self._validate_pick(session) + self._validate_choose(session)

    async def submit(self, session: WizardSession, gateway: PersistenceGateway) -> ActionResult:
        order = session.get("selected_item") or {}
        payload = ColorAssignmentCreate(
            order_id=order["id"],
            colors=[color.to_assignment() for color in self.colors(session)],
        )
        record = await gateway.create_color_assignments(payload)
        return ActionResult(
            title="Colors Saved",
            message=f"{record.assigned} colors added to order {order.get('order_code', order['id'])}",
            data={"assignments": record.model_dump()},
            invalidate=["orders"],
        )
