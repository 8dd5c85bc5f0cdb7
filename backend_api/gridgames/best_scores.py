from __future__ import annotations

import logging

from django.db import transaction

from .models import BestScore

logger = logging.getLogger(__name__)


# PUBLIC_INTERFACE
class ModelBestScores:
    """BestScoreStore backed by the BestScore table.

    put() only ever raises a stored score; a lower value is ignored so two
    rounds finishing in either order leave the higher score behind.
    """

    def get(self, namespace: str, size: int) -> int:
        row = BestScore.objects.filter(namespace=namespace, size=size).values_list("score", flat=True).first()
        return row or 0

    def put(self, namespace: str, size: int, score: int) -> None:
        with transaction.atomic():
            best, created = BestScore.objects.select_for_update().get_or_create(
                namespace=namespace, size=size, defaults={"score": score}
            )
            if not created and score > best.score:
                best.score = score
                best.save(update_fields=["score", "updated_at"])
        logger.debug("Best score for %s %dx%d is now %d", namespace, size, size, best.score)
