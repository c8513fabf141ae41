"""
Portal Image Service
====================

Generate-or-serve orchestration for portal images:

    validate → cache lookup → hit: read and return
                            → miss: single-flight(font → canvas → text → PNG → store) → return

Blocking work runs in worker threads. Concurrent requests for one uncached
address share a single generation, which keeps running (and populates the
cache) even if the request that started it goes away.
"""

import asyncio
import time
from typing import Any, Callable, Dict, Optional, TypeVar

from portal_glyphs.config.logging import get_logger
from portal_glyphs.config.settings import Settings
from portal_glyphs.core.address import validate_address
from portal_glyphs.core.errors import CacheIOError, GenerationTimeoutError, PortalImageError
from portal_glyphs.core.rendering.font_provider import FontProvider
from portal_glyphs.core.rendering.png_generator import PortalPNGGenerator
from portal_glyphs.core.singleflight import SingleFlight
from portal_glyphs.core.storage.cache_store import CacheStore
from portal_glyphs.models.schemas import ImageSource, PortalImageResult

logger = get_logger(__name__)

T = TypeVar("T")


class PortalImageService:
    """Serves portal images from the cache, generating them on first request."""

    def __init__(
        self,
        settings: Settings,
        font_provider: Optional[FontProvider] = None,
        cache_store: Optional[CacheStore] = None,
        generator: Optional[PortalPNGGenerator] = None,
    ):
        self.settings = settings
        self.font_provider = font_provider or FontProvider(
            settings.font_path, settings.image.font_size_px
        )
        self.cache_store = cache_store or CacheStore(settings.cache_dir)
        self.generator = generator or PortalPNGGenerator(
            settings.image, self.font_provider, compress_level=settings.png_compress_level
        )
        self.request_timeout = settings.request_timeout
        self.cache_retry_backoff = settings.cache_retry_backoff
        self._flights = SingleFlight()
        self.stats: Dict[str, int] = {"cache_hits": 0, "generated": 0, "failures": 0}
        self.logger: Any = logger.bind(component="portal_image_service")

    @property
    def in_flight(self) -> int:
        return self._flights.in_flight

    async def get_image(self, address: str) -> PortalImageResult:
        """
        Return the encoded image for ``address``.

        Raises:
            InvalidAddressError: Before any I/O, if the address is malformed
            FontLoadError, RenderError, EncodeError, CacheIOError: From the pipeline
            GenerationTimeoutError: If the request deadline expires
        """
        address = validate_address(address)

        try:
            return await asyncio.wait_for(self._get_image(address), timeout=self.request_timeout)
        except asyncio.TimeoutError:
            self.stats["failures"] += 1
            self.logger.error(
                "Portal image request timed out", address=address, timeout=self.request_timeout
            )
            raise GenerationTimeoutError(
                f"image not ready within {self.request_timeout}s", address=address
            )
        except PortalImageError:
            self.stats["failures"] += 1
            raise

    async def _get_image(self, address: str) -> PortalImageResult:
        if await asyncio.to_thread(self.cache_store.exists, address):
            data = await asyncio.to_thread(self._read_cached, address)
            self.stats["cache_hits"] += 1
            self.logger.debug("Serving from cache", address=address, file_size=len(data))
            return self._cached_result(address, data)

        return await self._flights.do(address, lambda: self._generate_flight(address))

    async def _generate_flight(self, address: str) -> PortalImageResult:
        result = await asyncio.to_thread(self._generate, address)
        if result.source is ImageSource.GENERATED:
            self.stats["generated"] += 1
        return result

    def _generate(self, address: str) -> PortalImageResult:
        # A flight that finished just before this one started may have stored it.
        if self.cache_store.exists(address):
            return self._cached_result(address, self._read_cached(address))

        result = self.generator.generate(address)
        self._with_cache_retry(self.cache_store.write, address, result.png_data)
        return result

    def _read_cached(self, address: str) -> bytes:
        return self._with_cache_retry(self.cache_store.read, address)

    def _cached_result(self, address: str, data: bytes) -> PortalImageResult:
        return PortalImageResult(
            address=address,
            png_data=data,
            width=self.settings.image.width,
            height=self.settings.image.height,
            file_size=len(data),
            source=ImageSource.CACHE,
            metadata={"path": str(self.cache_store.path_for(address))},
        )

    def _with_cache_retry(self, operation: Callable[..., T], *args: Any) -> T:
        """Run a cache operation, retrying it once after a short backoff."""
        try:
            return operation(*args)
        except CacheIOError as e:
            self.logger.warning(
                "Cache I/O failed, retrying once",
                path=str(e.path),
                error=str(e),
                backoff=self.cache_retry_backoff,
            )
            time.sleep(self.cache_retry_backoff)
            return operation(*args)
