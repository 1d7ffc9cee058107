import threading
from concurrent.futures import Future, ThreadPoolExecutor, as_completed

from loguru import logger

from billboard.errors import BillboardError, StoreUnavailableError
from billboard.models import SongRecord, TrendingEntry
from billboard.songs import SongStore
from billboard.source import SourceClient, clean_artist


class RefreshPipeline:
    """Replace the stored songs with a freshly resolved set of top songs.

    Runs are serialized, so the startup fill and the weekly trigger can't
    interleave their clears and writes.
    """

    def __init__(
        self, client: SourceClient, songs: SongStore, max_workers: int = 8
    ) -> None:
        self._client = client
        self._songs = songs
        self._max_workers = max_workers
        self._lock = threading.Lock()

    def _resolve(self, entry: TrendingEntry) -> SongRecord | None:
        if not entry.name:
            logger.warning("Skipping song without a name: {}", entry)
            return None

        try:
            artist = clean_artist(entry.artist)
            result = self._client.resolve(entry.name, artist)
        except BillboardError as error:
            logger.warning("Skipping {}: {}", entry.name, error)
            return None

        if not result.success:
            logger.warning("Download failed for {}, skipping it", entry.name)
            return None

        return SongRecord(name=entry.name, artist=artist, url=result.url)

    def run(self) -> None:
        """Perform one refresh run.

        Raises if the top songs can't be fetched (the store is left as it was)
        or if the store can't be cleared. Failures for individual songs are
        logged and skipped.
        """
        with self._lock:
            logger.info("Starting billboard update")
            entries = self._client.fetch_trending()

            self._songs.reset()
            logger.info("Existing data deleted")

            saved = 0
            with (
                ThreadPoolExecutor(
                    self._max_workers, thread_name_prefix="resolve"
                ) as resolve_pool,
                ThreadPoolExecutor(
                    self._max_workers, thread_name_prefix="persist"
                ) as persist_pool,
            ):
                resolving = [resolve_pool.submit(self._resolve, e) for e in entries]
                persisting: dict[Future[None], SongRecord] = {}
                for resolved in as_completed(resolving):
                    song = resolved.result()
                    if song:
                        persisting[persist_pool.submit(self._songs.save, song)] = song

                for persisted in as_completed(persisting):
                    try:
                        persisted.result()
                        saved += 1
                    except StoreUnavailableError:
                        logger.exception(
                            "Failed to save {}", persisting[persisted].name
                        )

            logger.info(
                "Finished billboard update, saved {} of {} songs", saved, len(entries)
            )

    def refresh(self) -> bool:
        try:
            self.run()
        except BillboardError:
            logger.exception("Billboard update failed, keeping the existing songs")
            return False
        return True
