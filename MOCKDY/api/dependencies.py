from functools import lru_cache

from packages.mockdy_core.config import MockdyConfig
from packages.mockdy_core.logging import get_logger
from packages.mockdy_notion.oauth import NotionOAuthService
from packages.mockdy_notion.proxy import NotionPagesProxy
from packages.mockdy_notion.writer import NotionReportWriter
from packages.mockdy_providers.llm.base import ILLMProvider
from packages.mockdy_providers.llm.mock import MockLLMProvider
from packages.mockdy_qbank.repository import JsonFileProblemRepository
from packages.mockdy_qbank.service import ProblemBankService
from packages.mockdy_service.connection_service import NotionConnectionService
from packages.mockdy_service.interview_service import InterviewService
from packages.mockdy_session.infrastructure.memory_repo import MemoryInterviewRepository
from packages.mockdy_session.repository import InterviewStateRepository
from packages.mockdy_storage.kv_store import JsonFileKeyValueStore, KeyValueStore
from packages.mockdy_storage.local_repo import LocalConnectionRepository, LocalSessionRepository
from packages.mockdy_storage.repository import ConnectionRepository, SessionRepository

logger = get_logger("MOCKDY.api.dependencies")

# --- Providers (External Adapters) ---

@lru_cache
def get_config() -> MockdyConfig:
    return MockdyConfig.load()

@lru_cache
def get_llm_provider() -> ILLMProvider:
    """
    Singleton LLM Provider.
    Gemini when GOOGLE_API_KEY is set, scripted Mock otherwise.
    """
    config = get_config()
    if config.GOOGLE_API_KEY:
        # Deferred import: the Gemini SDK is heavy and only needed with a key
        from packages.mockdy_providers.llm.gemini_impl import GeminiLLMProvider
        return GeminiLLMProvider(config)

    logger.warning("GOOGLE_API_KEY not set. Falling back to MockLLMProvider.")
    return MockLLMProvider(latency_ms=50)

@lru_cache
def get_oauth_service() -> NotionOAuthService:
    return NotionOAuthService(get_config())

@lru_cache
def get_pages_proxy() -> NotionPagesProxy:
    return NotionPagesProxy(get_config())

# --- Repositories (Persistence) ---

@lru_cache
def get_key_value_store() -> KeyValueStore:
    """
    Singleton local store (File-based, one JSON file per key).
    """
    return JsonFileKeyValueStore(get_config().STORAGE_DIR)

@lru_cache
def get_session_repository() -> SessionRepository:
    return LocalSessionRepository(get_key_value_store())

@lru_cache
def get_connection_repository() -> ConnectionRepository:
    return LocalConnectionRepository(get_key_value_store())

@lru_cache
def get_interview_state_repository() -> InterviewStateRepository:
    """
    Singleton Interview State Repository (Memory).
    Must be shared across requests to maintain state.
    """
    return MemoryInterviewRepository(finished_ttl_sec=get_config().FINISHED_INTERVIEW_TTL_SEC)

@lru_cache
def get_problem_bank_service() -> ProblemBankService:
    """
    Singleton Problem Bank Service (packaged NeetCode 150 list).
    """
    return ProblemBankService(repository=JsonFileProblemRepository())

# --- Domain Services (Application Logic) ---

@lru_cache
def get_report_writer() -> NotionReportWriter:
    return NotionReportWriter(
        connection_repo=get_connection_repository(),
        oauth_service=get_oauth_service(),
        pages_proxy=get_pages_proxy(),
    )

def get_interview_service() -> InterviewService:
    """
    Transient Interview Service.
    Injected with Singleton Repositories and Providers.
    """
    return InterviewService(
        state_repo=get_interview_state_repository(),
        session_repo=get_session_repository(),
        connection_repo=get_connection_repository(),
        llm=get_llm_provider(),
        problem_bank=get_problem_bank_service(),
        report_writer=get_report_writer(),
    )

def get_connection_service() -> NotionConnectionService:
    return NotionConnectionService(
        connection_repo=get_connection_repository(),
        oauth_service=get_oauth_service(),
    )
