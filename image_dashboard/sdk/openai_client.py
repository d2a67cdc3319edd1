"""
Guarded OpenAI image client wrapper.

Records a usage event for every image request without modifying behavior.
"""

from dataclasses import replace
from typing import Any, Optional

from openai import OpenAI

from ..core.pricing import calculate_cost
from ..storage.errors import ValidationError
from ..storage.models import Operation, UsageEvent
from ..storage.presets import PresetStore
from ..storage.usage import UsageLedger


class GuardedImageClient:
    """OpenAI Images wrapper that tracks every attempt in a usage ledger.

    Successful calls are recorded with their computed cost; failed calls
    are recorded with cost 0 and the error text, then re-raised unchanged.
    """

    def __init__(
        self,
        ledger: UsageLedger,
        model: str = "dall-e-3",
        client: Optional[OpenAI] = None
    ):
        """Initialize guarded image client.

        Args:
            ledger: Usage ledger receiving one record per request
            model: Default OpenAI image model
            client: Preconfigured OpenAI client (created from the environment if omitted)

        Raises:
            ValueError: If model is missing/empty
        """
        if not model or not model.strip():
            raise ValueError("model is required and cannot be empty")

        self.ledger = ledger
        self.model = model
        self.client = client or OpenAI()

    def generate(
        self,
        prompt: str,
        size: Optional[str] = "1024x1024",
        quality: Optional[str] = None,
        style: Optional[str] = None,
        n: int = 1,
        model: Optional[str] = None,
        preset_name: Optional[str] = None
    ) -> Any:
        """Generate images from a prompt.

        Returns:
            OpenAI images response, unchanged

        Raises:
            ValidationError: If prompt is empty
            OpenAI API errors: Propagated after the failure is tracked
        """
        _require_prompt(prompt)
        model = model or self.model
        event = UsageEvent(
            model=model,
            operation=Operation.GENERATION,
            size=size,
            quality=quality,
            style=style,
            n=n,
            prompt=prompt,
            preset_name=preset_name
        )
        return self._call(
            event,
            self.client.images.generate,
            model=model,
            prompt=prompt,
            size=size,
            quality=quality,
            style=style,
            n=n
        )

    def edit(
        self,
        image: Any,
        prompt: str,
        mask: Any = None,
        size: Optional[str] = "1024x1024",
        n: int = 1,
        model: Optional[str] = None,
        preset_name: Optional[str] = None
    ) -> Any:
        """Edit an image according to a prompt.

        Args:
            image: File object or bytes of the source image
            prompt: Edit instructions
            mask: Optional mask image

        Raises:
            ValidationError: If prompt is empty
            OpenAI API errors: Propagated after the failure is tracked
        """
        _require_prompt(prompt)
        model = model or self.model
        event = UsageEvent(
            model=model,
            operation=Operation.EDIT,
            size=size,
            n=n,
            prompt=prompt,
            preset_name=preset_name
        )
        return self._call(
            event,
            self.client.images.edit,
            model=model,
            image=image,
            prompt=prompt,
            mask=mask,
            size=size,
            n=n
        )

    def create_variation(
        self,
        image: Any,
        size: Optional[str] = "1024x1024",
        n: int = 1,
        model: Optional[str] = None
    ) -> Any:
        """Create variations of an existing image."""
        model = model or self.model
        event = UsageEvent(
            model=model,
            operation=Operation.VARIATION,
            size=size,
            n=n
        )
        return self._call(
            event,
            self.client.images.create_variation,
            model=model,
            image=image,
            size=size,
            n=n
        )

    def generate_from_preset(
        self,
        presets: PresetStore,
        preset_id: str,
        prompt: Optional[str] = None,
        n: int = 1
    ) -> Any:
        """Generate images with a stored preset's parameters.

        The preset's usage counter is incremented before the request.

        Args:
            presets: Store holding the preset
            preset_id: Id of the preset to use
            prompt: Prompt overriding the preset's template

        Raises:
            NotFoundError: If the preset does not exist
        """
        preset = presets.get(preset_id)
        presets.increment_usage(preset_id)
        return self.generate(
            prompt=prompt or preset.prompt,
            size=preset.size,
            quality=preset.quality,
            style=preset.style,
            n=n,
            model=preset.model,
            preset_name=preset.name
        )

    def _call(self, event: UsageEvent, method: Any, **params: Any) -> Any:
        """Invoke an images endpoint and track the outcome."""
        kwargs = {key: value for key, value in params.items() if value is not None}
        try:
            response = method(**kwargs)
        except Exception as e:
            self.ledger.track(replace(event, success=False, cost=0, error_message=str(e)))
            raise

        produced = _images_returned(response, event.n)
        cost = calculate_cost(event.model, event.size, event.quality, produced)
        self.ledger.track(replace(event, n=produced, cost=cost))
        return response


def _images_returned(response: Any, requested: int) -> int:
    """Count the images in a response, or the requested count if it has no data list."""
    data = getattr(response, "data", None)
    if isinstance(data, list):
        return len(data)
    return requested


def _require_prompt(prompt: Optional[str]) -> None:
    if not prompt or not prompt.strip():
        raise ValidationError("prompt is required and cannot be empty", fields=["prompt"])
