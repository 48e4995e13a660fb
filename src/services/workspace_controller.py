"""Controller for project and generation actions used by the UI."""

from __future__ import annotations

from pathlib import Path
from typing import Callable, List, Optional, Union

from config.app_settings import SETTINGS_FILE_NAME, ApiKeyStore, AppSettings, RecentProjects
from services.generation_recorder import GenerationRecord, GenerationRecorder
from services.generation_service import GenerationRequest, GenerationResult, GenerationService
from services.notifications import GenerationCreated, GenerationEvents
from services.project_store import ProjectStore, ProjectSummary
from services.stability_client import StabilityClient
from utils.env import get_data_dir
from utils.logging_utils import LOG_FILE_NAME, setup_logging


class WorkspaceController:
    """High-level orchestration for projects, credentials and generations."""

    def __init__(
        self,
        store: ProjectStore,
        settings: AppSettings,
        client: Optional[StabilityClient] = None,
        events: Optional[GenerationEvents] = None,
    ) -> None:
        self.store = store
        self.api_keys = ApiKeyStore(settings)
        self.recent = RecentProjects(settings)
        self.recorder = GenerationRecorder(store)
        self.events = events or GenerationEvents()
        self.generation = GenerationService(
            store=store,
            recorder=self.recorder,
            credentials=self.api_keys,
            client=client,
            events=self.events,
        )

    # API key
    def has_api_key(self) -> bool:
        return self.api_keys.has()

    def get_api_key(self) -> Optional[str]:
        return self.api_keys.get()

    def set_api_key(self, api_key: str) -> None:
        self.api_keys.set(api_key)

    # Projects
    def recent_projects(self) -> List[ProjectSummary]:
        return self.recent.list_projects(self.store)

    def create_project(self, path: Union[Path, str]) -> ProjectSummary:
        """Create a project, open it and remember it."""
        summary = self.store.create(path)
        self.open_project(summary.path)
        return self.store.current() or summary

    def open_project(self, path: Union[Path, str]) -> None:
        self.store.open(path)
        self.recent.add(path)

    def current_project(self) -> Optional[ProjectSummary]:
        return self.store.current()

    def close_project(self) -> None:
        self.store.close()

    # Generations
    def list_generations(self, limit: int = 50, offset: int = 0) -> List[GenerationRecord]:
        return self.recorder.list(limit=limit, offset=offset)

    def get_generation(self, generation_id: int) -> Optional[GenerationRecord]:
        return self.recorder.get_by_id(generation_id)

    def image_path_for(self, record: GenerationRecord) -> Optional[Path]:
        return self.generation.resolve_image_path(record)

    def generate_image(self, request: GenerationRequest) -> GenerationResult:
        return self.generation.generate(request)

    def on_generation_created(
        self, callback: Callable[[GenerationCreated], None]
    ) -> Callable[[], None]:
        return self.events.subscribe(callback)


def create_workspace_controller(
    data_dir: Optional[Path] = None,
    configure_logging: bool = True,
) -> WorkspaceController:
    """Assemble the controller with settings stored under ``data_dir``."""
    base_dir = Path(data_dir) if data_dir else get_data_dir()
    if configure_logging:
        setup_logging(log_file=base_dir / "logs" / LOG_FILE_NAME)
    settings = AppSettings(base_dir / SETTINGS_FILE_NAME)
    return WorkspaceController(store=ProjectStore(), settings=settings)
