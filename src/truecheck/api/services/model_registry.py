"""Central detector registry - registers all Hugging Face detectors once at startup."""
import logging
from typing import Any

from truecheck import config
from truecheck.api.models import remote_models

logger = logging.getLogger(__name__)


class ModelRegistry:
    """
    Central registry for the deepfake detectors.
    Detectors are registered once at startup and shared across requests.

    Every model id listed in HF_MODELS becomes one HuggingFaceDetector.
    Registration is network-free; a detector that later fails to answer is
    simply skipped for that request.
    """
    _registry: dict[str, Any] = {}

    @classmethod
    async def load_all(cls) -> None:
        """Register every configured detector."""
        for model_id in config.HF_MODELS:
            cls._registry[model_id] = remote_models.HuggingFaceDetector(model_id)

    @classmethod
    async def unload_all(cls) -> None:
        """Unload all detectors at shutdown."""
        cls._registry.clear()
        remote_models.close_client()
        logger.info("All detectors unloaded")

    @classmethod
    def register(cls, key: str, model: Any) -> None:
        cls._registry[key] = model

    @classmethod
    def detectors(cls) -> list[Any]:
        return list(cls._registry.values())

    @classmethod
    def loaded_models(cls) -> list[str]:
        """Return list of registered detectors."""
        return list(cls._registry)
