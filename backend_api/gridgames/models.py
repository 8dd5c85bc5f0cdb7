from __future__ import annotations

from django.db import models


# PUBLIC_INTERFACE
class TimeStampedModel(models.Model):
    """Abstract base model providing created/updated timestamps.

    Notes:
        Keep this abstract model free of any logic that would access the Django
        app registry or execute queries at module import time. Only field
        declarations and Meta options are allowed here so that importing this
        module does not trigger AppRegistryNotReady during Django startup.
    """
    created_at = models.DateTimeField(auto_now_add=True, help_text="Time when the record was created.")
    updated_at = models.DateTimeField(auto_now=True, help_text="Time when the record was last updated.")

    class Meta:
        abstract = True


# PUBLIC_INTERFACE
# Puzzle rounds themselves are never stored; this is the only persisted state.
class BestScore(TimeStampedModel):
    """Highest score reached for a game namespace on a given board size.

    Fields:
    - namespace: game identifier the score belongs to (e.g., "2048")
    - size: board edge length
    - score: best score seen so far
    """
    namespace = models.CharField(max_length=32, db_index=True, help_text="Game namespace, e.g. 2048.")
    size = models.PositiveSmallIntegerField(help_text="Board edge length.")
    score = models.PositiveIntegerField(default=0, help_text="Best score reached.")

    class Meta:
        ordering = ["namespace", "size"]
        unique_together = (("namespace", "size"),)
        verbose_name = "Best Score"
        verbose_name_plural = "Best Scores"

    def __str__(self) -> str:  # pragma: no cover
        return f"{self.namespace} {self.size}x{self.size}: {self.score}"
