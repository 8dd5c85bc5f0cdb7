from __future__ import annotations

from typing import Any, Dict

from rest_framework import serializers

from .puzzles import DIFFICULTIES, GAME_MODES
from .puzzles.sliding import DIRECTIONS
from .rounds import RoundNotFound, get_store, gridgames_setting

STATUS_CHOICES = ["IN_PROGRESS", "WON", "LOST"]


# PUBLIC_INTERFACE
class StartRoundRequestSerializer(serializers.Serializer):
    """Request payload to start a new round.

    Fields:
    - mode (optional): normal, killer, 2048, ohh1 or nonogram
    - difficulty (optional): easy, medium or hard
    """

    mode = serializers.ChoiceField(required=False, choices=[(m, m) for m in GAME_MODES])
    difficulty = serializers.ChoiceField(required=False, choices=[(d, d) for d in DIFFICULTIES])

    def validate(self, attrs: Dict[str, Any]) -> Dict[str, Any]:
        attrs.setdefault("mode", gridgames_setting("DEFAULT_MODE"))
        attrs.setdefault("difficulty", gridgames_setting("DEFAULT_DIFFICULTY"))
        return attrs


# PUBLIC_INTERFACE
class RoundRequestSerializer(serializers.Serializer):
    """Base payload for any action on a live round; resolves round_id."""

    round_id = serializers.CharField(max_length=64)

    def validate_round_id(self, value: str) -> str:
        if not get_store().exists(value):
            raise serializers.ValidationError("Round not found.")
        return value


# PUBLIC_INTERFACE
class CellRequestSerializer(RoundRequestSerializer):
    """Payload addressing one cell of a round."""

    row = serializers.IntegerField(min_value=0)
    col = serializers.IntegerField(min_value=0)

    def validate(self, attrs: Dict[str, Any]) -> Dict[str, Any]:
        try:
            with get_store().checkout(attrs["round_id"]) as coordinator:
                inside = coordinator.contains(attrs["row"], attrs["col"])
                size = coordinator.size
        except RoundNotFound:
            raise serializers.ValidationError({"round_id": "Round not found."})
        if not inside:
            raise serializers.ValidationError(f"Cell must lie within the {size}x{size} board.")
        return attrs


# PUBLIC_INTERFACE
class DigitRequestSerializer(RoundRequestSerializer):
    """Payload for entering a digit; 0 clears the selected cell."""

    digit = serializers.IntegerField(min_value=0, max_value=9)


# PUBLIC_INTERFACE
class MoveRequestSerializer(RoundRequestSerializer):
    """Payload for sliding a 2048 board."""

    direction = serializers.ChoiceField(choices=[(d, d) for d in DIRECTIONS])


# PUBLIC_INTERFACE
class RestartRequestSerializer(RoundRequestSerializer):
    """Payload for replacing a round; omitted fields keep the current setting."""

    mode = serializers.ChoiceField(required=False, choices=[(m, m) for m in GAME_MODES])
    difficulty = serializers.ChoiceField(required=False, choices=[(d, d) for d in DIFFICULTIES])


# PUBLIC_INTERFACE
class RoundSnapshotSerializer(serializers.Serializer):
    """Read-only view of a round for rendering."""

    round_id = serializers.CharField()
    mode = serializers.CharField()
    difficulty = serializers.CharField()
    size = serializers.IntegerField()
    status = serializers.ChoiceField(choices=STATUS_CHOICES)
    elapsed_secs = serializers.IntegerField()
    elapsed = serializers.CharField(help_text="Elapsed time as MM:SS.")
    hints_used = serializers.IntegerField()
    # Sudoku only
    selected = serializers.ListField(child=serializers.IntegerField(), required=False, allow_null=True)
    notes_mode = serializers.BooleanField(required=False)
    sticky_digit = serializers.IntegerField(required=False, allow_null=True)
    board = serializers.DictField(help_text="Engine-specific grid state (cells, hints, cages, score...).")


# PUBLIC_INTERFACE
class ActionResponseSerializer(serializers.Serializer):
    """Response payload after an input action."""

    changed = serializers.BooleanField(help_text="Whether the action altered the round.")
    round = RoundSnapshotSerializer()


# PUBLIC_INTERFACE
class HintResponseSerializer(serializers.Serializer):
    """Response payload for a hint request."""

    round_id = serializers.CharField()
    type = serializers.CharField(allow_null=True)
    data = serializers.DictField(allow_null=True, help_text="Revealed row, col and value; null if nothing to reveal.")
    round = RoundSnapshotSerializer()


# PUBLIC_INTERFACE
class BestScoreSerializer(serializers.Serializer):
    """Best score entry."""

    namespace = serializers.CharField()
    size = serializers.IntegerField()
    score = serializers.IntegerField()
    updated_at = serializers.DateTimeField()
