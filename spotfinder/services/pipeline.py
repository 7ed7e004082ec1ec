"""
Nearest spot pipeline.

Sequences origin resolution, proximity search and ranking:

    IDLE -> RESOLVING -> SEARCHING -> RANKING -> DONE | FAILED

Stages run strictly one after another. The first failure ends the run and is
reported unchanged apart from the stage annotation; nothing is retried.
"""
import asyncio
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Awaitable, Optional, TypeVar

import httpx

from spotfinder.config.settings import Settings
from spotfinder.core.exceptions import (
    PipelineError,
    SpotFinderException,
    Stage,
    TransportFailureError,
)
from spotfinder.core.metrics import record_outcome, record_pipeline_latency, record_stage_latency
from spotfinder.models.places import Coordinate, Origin, RankedPlace, TagFilter
from spotfinder.services.geocoder import OriginResolver
from spotfinder.services.overpass_client import ProximitySearchClient
from spotfinder.services.ranker import rank

logger = logging.getLogger(__name__)

T = TypeVar("T")


class PipelineState(str, Enum):
    IDLE = "idle"
    RESOLVING = "resolving"
    SEARCHING = "searching"
    RANKING = "ranking"
    DONE = "done"
    FAILED = "failed"


@dataclass
class PipelineRun:
    """State of a single pipeline invocation."""
    origin: Origin
    radius_m: float
    state: PipelineState = PipelineState.IDLE
    history: list[PipelineState] = field(default_factory=lambda: [PipelineState.IDLE])
    coordinate: Optional[Coordinate] = None
    result: Optional[RankedPlace] = None
    error: Optional[SpotFinderException] = None

    def transition(self, state: PipelineState) -> None:
        logger.debug(f"Pipeline {self.state.value} -> {state.value}")
        self.state = state
        self.history.append(state)

    @property
    def succeeded(self) -> bool:
        return self.state == PipelineState.DONE


class NearestSpotPipeline:
    """Find the closest place matching a category to an origin."""

    def __init__(
        self,
        resolver: OriginResolver,
        search_client: ProximitySearchClient,
        tag_filter: TagFilter,
        radius_m: float = 2000.0,
    ):
        self.resolver = resolver
        self.search_client = search_client
        self.tag_filter = tag_filter
        self.radius_m = radius_m

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        http_client: Optional[httpx.AsyncClient] = None,
    ) -> "NearestSpotPipeline":
        return cls(
            resolver=OriginResolver(settings.geocoder, http_client=http_client),
            search_client=ProximitySearchClient(settings.search, http_client=http_client),
            tag_filter=TagFilter.from_settings(settings.category),
            radius_m=settings.search.radius_m,
        )

    def no_match_message(self, radius_m: float) -> str:
        return f"No {self.tag_filter.label} spots found within {radius_m / 1000:g}km"

    async def _stage(self, stage: Stage, step: Awaitable[T]) -> T:
        try:
            with record_stage_latency(stage.value):
                return await step
        except SpotFinderException as e:
            raise e.with_stage(stage)
        except asyncio.CancelledError:
            logger.info(f"Pipeline cancelled during {stage.value}")
            raise
        except Exception as e:
            logger.error(f"Unexpected failure during {stage.value}: {e!r}", exc_info=True)
            raise TransportFailureError(stage, e) from e

    async def execute(self, origin: Origin, radius_m: Optional[float] = None) -> PipelineRun:
        """
        Run the pipeline to a terminal state.

        Args:
            origin: Text or point origin
            radius_m: Search radius override; defaults to the configured radius

        Returns:
            PipelineRun in state DONE (with result) or FAILED (with error).
            Cancellation propagates as asyncio.CancelledError.
        """
        run = PipelineRun(origin=origin, radius_m=radius_m or self.radius_m)

        with record_pipeline_latency():
            try:
                run.transition(PipelineState.RESOLVING)
                run.coordinate = await self._stage(Stage.RESOLVE, self.resolver.resolve(origin))

                run.transition(PipelineState.SEARCHING)
                candidates = await self._stage(
                    Stage.SEARCH,
                    self.search_client.search(run.coordinate, run.radius_m, self.tag_filter),
                )

                run.transition(PipelineState.RANKING)
                with record_stage_latency(Stage.RANK.value):
                    place = rank(candidates, run.coordinate)
                if place is None:
                    raise PipelineError(
                        self.no_match_message(run.radius_m),
                        details={"radius_m": run.radius_m, "category": self.tag_filter.label},
                    )
            except SpotFinderException as e:
                run.error = e
                run.transition(PipelineState.FAILED)
                record_outcome(e.reason.value, e.stage.value if e.stage else None)
                logger.warning(
                    f"Pipeline failed at stage {e.stage.value if e.stage else 'unknown'}: "
                    f"{e.reason.value} ({e.message})",
                    extra={"stage": e.stage.value if e.stage else None, "reason": e.reason.value},
                )
                return run

        run.result = place
        run.transition(PipelineState.DONE)
        record_outcome(PipelineState.DONE.value)
        logger.info(
            f"Nearest {self.tag_filter.label} spot: {place.name} at {place.distance_m:.0f}m "
            f"from {len(candidates)} candidates"
        )
        return run

    async def find_nearest(self, origin: Origin, radius_m: Optional[float] = None) -> RankedPlace:
        """Return the nearest matching place or raise the run's error."""
        run = await self.execute(origin, radius_m)
        if run.error is not None:
            raise run.error
        return run.result
