"""Recommendation service — planner pass, live pricing, second planner pass."""

import json
import logging
from typing import Any

from app.exceptions import ValidationError
from app.prompts import render_prompt
from app.schemas.recommendation import DestinationEvidence
from app.services.planner_llm import PlannerLLM, planner_llm
from app.services.pricing_aggregator import PricingAggregator, pricing_aggregator

logger = logging.getLogger(__name__)


def _strip_fences(raw: str) -> str:
    """Clean markdown fencing if present."""
    text = raw.strip()
    if text.startswith("```"):
        text = text.split("\n", 1)[1] if "\n" in text else text[3:]
        if text.endswith("```"):
            text = text[:-3]
        text = text.strip()
    return text


def serialize_evidence(evidence: list[DestinationEvidence]) -> str:
    return json.dumps([e.to_planner_payload() for e in evidence], ensure_ascii=False)


class RecommendationService:
    """Runs the two planner passes around the pricing aggregation."""

    def __init__(
        self,
        llm: PlannerLLM | None = None,
        aggregator: PricingAggregator | None = None,
    ):
        self._llm = llm or planner_llm
        self._aggregator = aggregator or pricing_aggregator

    async def recommend(self, answers: dict, question_context: dict) -> dict[str, Any]:
        """Produce the final trip plan for a traveller's questionnaire.

        Raises:
            ValidationError: the first pass returned something other than a
                JSON array of candidates, or a candidate is incomplete.
        """
        candidates = await self.propose_candidates(answers, question_context)
        evidence = await self._aggregator.aggregate(candidates)
        return await self.finalize(answers, question_context, evidence)

    async def propose_candidates(self, answers: dict, question_context: dict) -> list[dict]:
        raw = await self._llm.complete(
            system=render_prompt("initial_system.md"),
            user=render_prompt(
                "initial_user.md",
                questionContext=json.dumps(question_context, ensure_ascii=False),
                answers=json.dumps(answers, ensure_ascii=False),
            ),
        )
        try:
            candidates = json.loads(_strip_fences(raw))
        except json.JSONDecodeError as e:
            raise ValidationError(f"Failed to parse initial planner response, {e}") from e
        if not isinstance(candidates, list):
            raise ValidationError("Initial planner response is not an array")

        logger.info(f"Planner proposed {len(candidates)} candidate destinations")
        return candidates

    async def finalize(
        self,
        answers: dict,
        question_context: dict,
        evidence: list[DestinationEvidence],
    ) -> dict[str, Any]:
        user_prompt = render_prompt(
            "final_user.md",
            questionContext=json.dumps(question_context, ensure_ascii=False),
            answers=json.dumps(answers, ensure_ascii=False),
            amadeusApiResponse=serialize_evidence(evidence),
        )
        logger.debug(f"Final planner prompt length: {len(user_prompt)}")

        raw = await self._llm.complete(
            system=render_prompt("final_system.md"),
            user=user_prompt,
            json_mode=True,
        )
        try:
            plan = json.loads(_strip_fences(raw))
        except json.JSONDecodeError as e:
            logger.error(f"Failed to parse final planner response: {e}")
            return {"trip_plan": []}
        if not isinstance(plan, dict):
            logger.error("Final planner response is not a JSON object")
            return {"trip_plan": []}
        return plan


recommendation_service = RecommendationService()
