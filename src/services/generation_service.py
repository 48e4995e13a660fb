"""Generation orchestration: parameters, API call, file output, record, event.

``GenerationService.generate`` is the single entry point. It checks the
credential and the open project, derives the request parameters, calls the
Stability API once, writes the returned image into the project's images
directory, records the generation and notifies subscribers.
"""

from __future__ import annotations

import logging
import secrets
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Dict, Optional, Protocol

from config.generation_config import (
    ASPECT_RATIO_CANDIDATES,
    DEFAULT_CFG_SCALE,
    DEFAULT_MODEL,
    DEFAULT_STEPS,
    OUTPUT_FORMAT,
    SPECIAL_ASPECT_RATIOS,
    SQUARE_ASPECT_RATIO,
)
from services.errors import FileWriteError, MissingCredential, NoOpenProject
from services.generation_recorder import GenerationRecord, GenerationRecorder, NewGeneration
from services.notifications import GenerationCreated, GenerationEvents
from services.project_store import ProjectStore
from services.stability_client import StabilityClient
from utils.error_handling import log_exception

logger = logging.getLogger(__name__)


class CredentialSource(Protocol):
    def get(self) -> Optional[str]: ...


@dataclass
class GenerationRequest:
    prompt: str
    negative_prompt: Optional[str] = None
    model: Optional[str] = None
    steps: Optional[int] = DEFAULT_STEPS
    cfg_scale: Optional[float] = DEFAULT_CFG_SCALE
    width: Optional[int] = None
    height: Optional[int] = None
    seed: Optional[str] = None


@dataclass(frozen=True)
class GenerationResult:
    id: int
    image_path: Path


def derive_aspect_ratio(width: Optional[int], height: Optional[int]) -> str:
    """Map a pixel size to the closest aspect ratio label the API accepts."""
    if not width or not height or width == height:
        return SQUARE_ASPECT_RATIO

    special = SPECIAL_ASPECT_RATIOS.get((width, height))
    if special:
        return special

    ratio = width / height
    best_label, best_value = ASPECT_RATIO_CANDIDATES[0]
    best_diff = abs(ratio - best_value)
    for label, value in ASPECT_RATIO_CANDIDATES[1:]:
        diff = abs(ratio - value)
        if diff < best_diff:
            best_label, best_diff = label, diff
    return best_label


def resolve_model(model: Optional[str]) -> str:
    trimmed = (model or "").strip()
    return trimmed or DEFAULT_MODEL


def parse_seed(seed: Optional[str]) -> Optional[int]:
    """Integer seed from the form field, or None to let the server pick one."""
    if seed is None:
        return None
    text = str(seed).strip()
    if not text:
        return None
    try:
        return int(text)
    except ValueError as exc:
        raise ValueError(f"Seed must be an integer, got {seed!r}") from exc


def build_image_filename(now: Optional[datetime] = None, suffix: Optional[str] = None) -> str:
    """``YYYYMMDD_HHMMSS_<random>.<format>`` using local time."""
    now = now or datetime.now()
    suffix = suffix or secrets.token_hex(3)
    return f"{now:%Y%m%d_%H%M%S}_{suffix}.{OUTPUT_FORMAT}"


def build_request_fields(
    prompt: str,
    negative_prompt: Optional[str],
    model: str,
    seed: Optional[int],
    aspect_ratio: str,
) -> Dict[str, str]:
    fields = {
        "prompt": prompt,
        "output_format": OUTPUT_FORMAT,
        "model": model,
        "aspect_ratio": aspect_ratio,
    }
    if negative_prompt and negative_prompt.strip():
        fields["negative_prompt"] = negative_prompt
    if seed is not None:
        fields["seed"] = str(seed)
    return fields


class GenerationService:
    def __init__(
        self,
        store: ProjectStore,
        recorder: GenerationRecorder,
        credentials: CredentialSource,
        client: Optional[StabilityClient] = None,
        events: Optional[GenerationEvents] = None,
    ) -> None:
        self.store = store
        self.recorder = recorder
        self.credentials = credentials
        self.client = client or StabilityClient()
        self.events = events or GenerationEvents()

    def generate(self, request: GenerationRequest) -> GenerationResult:
        api_key = (self.credentials.get() or "").strip()
        if not api_key:
            raise MissingCredential()

        project_path = self.store.project_path
        if project_path is None or self.store.current() is None:
            raise NoOpenProject()

        if not request.prompt or not request.prompt.strip():
            raise ValueError("Prompt cannot be empty")

        model = resolve_model(request.model)
        seed = parse_seed(request.seed)
        aspect_ratio = derive_aspect_ratio(request.width, request.height)
        fields = build_request_fields(
            prompt=request.prompt,
            negative_prompt=request.negative_prompt,
            model=model,
            seed=seed,
            aspect_ratio=aspect_ratio,
        )

        logger.info(
            "Requesting image generation",
            extra={
                "event": "generation.requested",
                "model": model,
                "aspect_ratio": aspect_ratio,
                "project": str(project_path),
            },
        )
        image_bytes = self.client.generate_image(api_key, fields)

        with self.store.lock:
            # The user may have switched projects while the request was pending
            if self.store.project_path != project_path:
                raise NoOpenProject("The project was closed while the image was generating")

            images_dir = self.store.images_directory()
            filename = build_image_filename()
            image_path = images_dir / filename
            self._write_image(image_path, image_bytes)

            try:
                generation_id = self.recorder.append(
                    NewGeneration(
                        prompt=request.prompt,
                        image_path=filename,
                        negative_prompt=request.negative_prompt,
                        model=model,
                        seed=seed,
                        steps=request.steps,
                        guidance=request.cfg_scale,
                        width=request.width,
                        height=request.height,
                    )
                )
            except Exception:
                self._discard_image(image_path)
                raise

        logger.info(
            "Generated image %s",
            image_path.name,
            extra={"event": "generation.created", "generation_id": generation_id},
        )

        self.events.publish(GenerationCreated(id=generation_id, image_path=image_path))
        return GenerationResult(id=generation_id, image_path=image_path)

    def resolve_image_path(self, record: GenerationRecord) -> Optional[Path]:
        """Absolute path of a record's image in the active project."""
        images_dir = self.store.images_directory()
        if images_dir is None:
            return None
        return images_dir / record.image_path

    def _write_image(self, image_path: Path, image_bytes: bytes) -> None:
        try:
            image_path.parent.mkdir(parents=True, exist_ok=True)
            # "xb" refuses to overwrite an existing image
            with open(image_path, "xb") as f:
                f.write(image_bytes)
        except OSError as exc:
            raise FileWriteError(image_path, str(exc)) from exc

    def _discard_image(self, image_path: Path) -> None:
        """Remove an image whose record could not be stored."""
        try:
            image_path.unlink(missing_ok=True)
        except OSError as e:
            log_exception(e, "Failed to remove unrecorded image", extra={"path": str(image_path)})
