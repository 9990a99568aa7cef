"""Dependency container — composition root for wiring all layers together."""

from __future__ import annotations

import os
from pathlib import Path

from prompt_splicer.l1_entities.config import AppConfig
from prompt_splicer.l1_entities.credentials import ProviderCredentials
from prompt_splicer.l2_use_cases.ai_gateway import AIGateway
from prompt_splicer.l2_use_cases.autosave_scheduler import AutosaveScheduler
from prompt_splicer.l2_use_cases.ports.clipboard import Clipboard
from prompt_splicer.l2_use_cases.ports.key_value_store import KeyValueStore
from prompt_splicer.l2_use_cases.ports.llm_client import LLMClient
from prompt_splicer.l2_use_cases.result_cache import ResultCache
from prompt_splicer.l2_use_cases.segment_store import SegmentStore
from prompt_splicer.l2_use_cases.session_persistence import SessionPersistence
from prompt_splicer.l3_interface_adapters.controllers.session_controller import SessionController
from prompt_splicer.l3_interface_adapters.gateways.file_kv_store import FileKeyValueStore
from prompt_splicer.l3_interface_adapters.gateways.openai_llm_client import OpenAICompatLLMClient
from prompt_splicer.l3_interface_adapters.gateways.paths import STORE_DIR
from prompt_splicer.l3_interface_adapters.gateways.preferences_repository import PreferencesRepository
from prompt_splicer.l3_interface_adapters.gateways.pyperclip_clipboard import PyperclipClipboard
from prompt_splicer.l4_frameworks_and_drivers.infra_config import InfraConfig


class DependencyContainer:
    """Creates and wires all concrete instances. Easy to override for testing."""

    def __init__(
        self,
        config: AppConfig,
        infra: InfraConfig | None = None,
        kv_store: KeyValueStore | None = None,
        clipboard: Clipboard | None = None,
    ) -> None:
        self.config = config
        self.infra = infra or InfraConfig()

        self.storage_dir = Path(self.infra.storage.directory) if self.infra.storage.directory else STORE_DIR
        self.kv_store: KeyValueStore = kv_store or FileKeyValueStore(self.storage_dir)
        self.clipboard: Clipboard = clipboard or PyperclipClipboard(self.storage_dir)
        self.preferences = PreferencesRepository(self.kv_store)

        self.cache = ResultCache(
            self.kv_store,
            ttl_seconds=config.cache.ttl_seconds,
            max_entries=config.cache.max_entries,
        )
        self.store = SegmentStore()
        self.persistence = SessionPersistence(self.kv_store)
        self.gateway = AIGateway(self.cache, timeout_seconds=config.provider.timeout_seconds)
        self.autosave = AutosaveScheduler(
            self.store,
            self.persistence,
            interval=config.autosave.interval_seconds,
            debounce=config.autosave.debounce_seconds,
        )

        self.controller = SessionController(
            config=config,
            store=self.store,
            gateway=self.gateway,
            persistence=self.persistence,
            clipboard=self.clipboard,
            client_factory=self.build_llm_client,
        )

    def build_llm_client(self, credentials: ProviderCredentials) -> LLMClient:
        return OpenAICompatLLMClient(api_key=credentials.api_key, base_url=self.infra.openai.base_url)

    def resolve_credentials(self) -> ProviderCredentials | None:
        """Config key wins, then the stored credential record, then OPENAI_API_KEY."""
        model = self.config.provider.model
        if self.infra.openai.api_key:
            return ProviderCredentials(api_key=self.infra.openai.api_key, model=model)
        stored = self.preferences.load_credentials()
        if stored is not None:
            return stored
        env_key = os.environ.get('OPENAI_API_KEY', '').strip()
        if env_key:
            return ProviderCredentials(api_key=env_key, model=model)
        return None

    def start_session(self) -> SessionController:
        """Restore the last session and configure the provider if credentials exist."""
        self.controller.restore_session()
        credentials = self.resolve_credentials()
        if credentials is not None:
            self.controller.configure_provider(credentials)
        return self.controller
