import threading

from loguru import logger

from billboard.app import create_app
from billboard.config import get_config
from billboard.database import KeyValueStore
from billboard.refresh import RefreshPipeline
from billboard.scheduler import WeeklyScheduler
from billboard.songs import SongStore
from billboard.source import SourceClient


def main() -> None:
    config = get_config()

    # No service without storage, let this one crash the process
    store = KeyValueStore(config.song_db_file, timeout=config.store_timeout)
    songs = SongStore(store)

    pipeline = RefreshPipeline(
        SourceClient(config.source_api_url, timeout=config.http_timeout),
        songs,
        max_workers=config.refresh_workers,
    )
    scheduler = WeeklyScheduler(
        pipeline.refresh,
        weekday=config.refresh_weekday,
        at=config.refresh_time,
        interval_weeks=config.refresh_interval_weeks,
    )
    app = create_app(songs)

    threading.Thread(target=pipeline.refresh, name="cold-fill", daemon=True).start()
    scheduler.start()

    logger.info("Server starting on port :{} and route /billboard", config.port)
    try:
        app.run(host="0.0.0.0", port=config.port)  # noqa: S104
    finally:
        scheduler.stop()
        store.close()


if __name__ == "__main__":
    main()
