"""
https://python-dependency-injector.ets-labs.org/index.html
https://python-dependency-injector.ets-labs.org/examples/fastapi-sqlalchemy.html
"""

from dependency_injector import containers, providers

from src.platform.config.core_setting import settings
from src.platform.database.orm_db_setting import Database
from src.service.cinema.driven_adapter.repo.booking_repo_impl import BookingRepoImpl
from src.service.cinema.driven_adapter.repo.in_memory_cinema_store import InMemoryCinemaStore
from src.service.cinema.driven_adapter.repo.movie_repo_impl import MovieRepoImpl
from src.service.cinema.driven_adapter.repo.showtime_repo_impl import ShowtimeRepoImpl


def _storage_backend() -> str:
    return settings.STORAGE_BACKEND


class Container(containers.DeclarativeContainer):
    # Configuration
    config_service = providers.Object(settings)

    # Database (event-loop-aware engine built from settings)
    database = providers.Singleton(Database)

    # In-memory store (STORAGE_BACKEND=memory; used by tests and local demos)
    in_memory_store = providers.Singleton(InMemoryCinemaStore)

    storage_backend = providers.Callable(_storage_backend)

    # Repositories (stateless - use session_factory per call)
    movie_repo = providers.Selector(
        storage_backend,
        memory=in_memory_store.provided.movie_repo,
        database=providers.Singleton(MovieRepoImpl, session_factory=database.provided.session),
    )
    showtime_repo = providers.Selector(
        storage_backend,
        memory=in_memory_store.provided.showtime_repo,
        database=providers.Singleton(ShowtimeRepoImpl, session_factory=database.provided.session),
    )
    booking_repo = providers.Selector(
        storage_backend,
        memory=in_memory_store.provided.booking_repo,
        database=providers.Singleton(BookingRepoImpl, session_factory=database.provided.session),
    )


container = Container()


def cleanup() -> None:
    container.reset_singletons()
