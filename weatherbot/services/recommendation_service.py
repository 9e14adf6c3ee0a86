"""Generation orchestrator: extreme-weather override, LLM attempt, rule fallback."""

from __future__ import annotations

import asyncio
import logging
import secrets
import time

from weatherbot.core.cache import Clock, utc_now
from weatherbot.core.config import settings
from weatherbot.schemas.recommendation import (
    RecommendationRequest,
    RecommendationResult,
    RecommendationSet,
    ResultSource,
)
from weatherbot.services import clothing_rules
from weatherbot.services.availability_cache import AvailabilityCache
from weatherbot.services.confidence import EXTREME_CONFIDENCE, LLM_CONFIDENCE, rules_confidence
from weatherbot.services.extreme_weather import (
    ExtremeWeather,
    classify,
    safety_recommendation,
    safety_spoken_response,
)
from weatherbot.services.llm_generator import LLMGenerationError, LLMGenerator
from weatherbot.services.prompt_analysis import analyze_prompt, extract_timeframe
from weatherbot.services.response_parser import parse_llm_response


logger = logging.getLogger(__name__)


class RecommendationService:
    def __init__(
        self,
        generator: LLMGenerator | None = None,
        availability_cache: AvailabilityCache | None = None,
        *,
        clock: Clock = utc_now,
        generation_timeout: float | None = None,
        health_timeout: float | None = None,
    ) -> None:
        self.generator = generator
        self.availability = availability_cache or AvailabilityCache(
            ttl_seconds=settings.llm_availability_ttl_seconds, clock=clock
        )
        self._clock = clock
        self.generation_timeout = generation_timeout if generation_timeout is not None else settings.llm_timeout_sec
        self.health_timeout = health_timeout if health_timeout is not None else settings.llm_health_timeout_sec

    async def generate(self, request: RecommendationRequest) -> RecommendationResult:
        started = time.perf_counter()
        weather = request.weather

        extreme = classify(weather)
        if extreme is not ExtremeWeather.NONE:
            logger.info("Extreme weather (%s) for %s; returning safety guidance", extreme.value, request.profile.id)
            return self._result(
                request,
                safety_recommendation(extreme),
                safety_spoken_response(extreme),
                ResultSource.RULES,
                EXTREME_CONFIDENCE,
                started,
            )

        if await self.is_llm_available():
            llm_output = await self._generate_with_llm(request)
            if llm_output is not None:
                recommendations, spoken = llm_output
                logger.info("Recommendation for %s generated by %s", request.profile.id, self.generator.name)
                return self._result(request, recommendations, spoken, ResultSource.LLM, LLM_CONFIDENCE, started)

        logger.info("Recommendation for %s generated by rules", request.profile.id)
        recommendations = clothing_rules.recommend(weather, request.profile)
        return self._result(
            request,
            recommendations,
            clothing_rules.build_spoken_response(weather, recommendations),
            ResultSource.RULES,
            rules_confidence(weather),
            started,
        )

    async def is_llm_available(self) -> bool:
        if self.generator is None:
            return False
        cached = self.availability.get()
        if cached is not None:
            return cached

        try:
            available = bool(
                await asyncio.wait_for(asyncio.to_thread(self.generator.check_health), timeout=self.health_timeout)
            )
        except Exception as exc:
            logger.warning("LLM health check failed: %s", exc)
            available = False
        self.availability.set(available)
        if not available:
            logger.info(
                "LLM backend %s unavailable for the next %ss",
                self.generator.name,
                self.availability.ttl.total_seconds(),
            )
        return available

    def reset_availability(self) -> None:
        self.availability.reset()

    async def _generate_with_llm(self, request: RecommendationRequest) -> tuple[RecommendationSet, str] | None:
        analysis = analyze_prompt(request.prompt)
        timeframe = request.timeframe or extract_timeframe(request.prompt, self._clock())
        try:
            text = await asyncio.wait_for(
                asyncio.to_thread(self.generator.generate, request, analysis, timeframe),
                timeout=self.generation_timeout,
            )
        except asyncio.TimeoutError:
            logger.warning("LLM generation timed out after %ss; falling back to rules", self.generation_timeout)
            self.availability.set(False)
            return None
        except LLMGenerationError as exc:
            logger.warning("LLM generation failed, falling back to rules: %s", exc)
            self.availability.set(False)
            return None
        except Exception as exc:
            logger.warning("LLM generation raised unexpected %s, falling back to rules: %s", type(exc).__name__, exc)
            self.availability.set(False)
            return None

        parsed = parse_llm_response(text)
        if not parsed.is_usable:
            logger.warning("LLM response had no usable recommendations (%s); falling back to rules", parsed.format)
            return None

        spoken = parsed.spoken_response or clothing_rules.build_spoken_response(
            request.weather, parsed.recommendations
        )
        return parsed.recommendations, spoken

    def _result(
        self,
        request: RecommendationRequest,
        recommendations: RecommendationSet,
        spoken: str,
        source: ResultSource,
        confidence: float,
        started: float,
    ) -> RecommendationResult:
        created_at = self._clock()
        return RecommendationResult(
            id=new_recommendation_id(created_at.timestamp()),
            profile_id=request.profile.id,
            weather_data=request.weather,
            recommendations=recommendations,
            spoken_response=spoken,
            source=source,
            confidence=confidence,
            created_at=created_at,
            processing_time_ms=int((time.perf_counter() - started) * 1000),
        )


def new_recommendation_id(timestamp: float) -> str:
    return f"rec-{int(timestamp * 1000)}-{secrets.token_hex(4)}"
