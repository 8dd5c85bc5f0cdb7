from __future__ import annotations

import logging
from typing import Any, Callable, Dict, Type

from rest_framework import permissions, serializers, status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from drf_yasg import openapi
from drf_yasg.utils import swagger_auto_schema

from .models import BestScore
from .puzzles import GAME_MODES, GenerationError, SessionCoordinator, difficulty_labels
from .rounds import RoundNotFound, get_store
from .serializers import (
    ActionResponseSerializer,
    BestScoreSerializer,
    CellRequestSerializer,
    DigitRequestSerializer,
    HintResponseSerializer,
    MoveRequestSerializer,
    RestartRequestSerializer,
    RoundRequestSerializer,
    RoundSnapshotSerializer,
    StartRoundRequestSerializer,
)

logger = logging.getLogger(__name__)

_NOT_FOUND = {"error": "Round not found."}


def _round_payload(round_id: str, coordinator: SessionCoordinator) -> Dict[str, Any]:
    """Snapshot of the round with its id attached."""
    snap = coordinator.snapshot()
    snap["round_id"] = round_id
    return snap


def _run_action(
    request,
    serializer_cls: Type[serializers.Serializer],
    action: Callable[[SessionCoordinator, Dict[str, Any]], bool],
) -> Response:
    """Validate the payload, apply action to the round and report the result."""
    serializer = serializer_cls(data=request.data or {})
    serializer.is_valid(raise_exception=True)
    vd = serializer.validated_data
    round_id = vd["round_id"]
    try:
        with get_store().checkout(round_id) as coordinator:
            changed = action(coordinator, vd)
            payload = _round_payload(round_id, coordinator)
    except RoundNotFound:
        return Response(_NOT_FOUND, status=status.HTTP_404_NOT_FOUND)
    resp = {"changed": bool(changed), "round": payload}
    return Response(ActionResponseSerializer(resp).data, status=status.HTTP_200_OK)


# PUBLIC_INTERFACE
@api_view(['GET'])
@permission_classes([permissions.AllowAny])
def health(request):
    """Health check endpoint for the API.

    Returns:
    - 200 OK with {"message": "Server is up!"}
    """
    return Response({"message": "Server is up!"})


# PUBLIC_INTERFACE
@swagger_auto_schema(
    method="post",
    operation_id="start_round",
    operation_summary="Start a new round",
    operation_description="""
Generate a fresh puzzle for the requested game mode and difficulty and start
its timer.

Request body:
- mode (optional, default from settings): normal | killer | 2048 | ohh1 | nonogram
- difficulty (optional, default from settings): easy | medium | hard

Response:
- round snapshot including round_id, status, elapsed time and board state
""",
    request_body=StartRoundRequestSerializer,
    responses={200: RoundSnapshotSerializer},
    tags=["rounds"],
)
@api_view(["POST"])
@permission_classes([permissions.AllowAny])
def start_round(request):
    """Start a new round and return its first snapshot."""
    serializer = StartRoundRequestSerializer(data=request.data or {})
    serializer.is_valid(raise_exception=True)
    vd = serializer.validated_data

    try:
        round_id, coordinator = get_store().create(vd["mode"], vd["difficulty"])
    except (KeyError, ValueError) as e:
        return Response({"error": str(e)}, status=status.HTTP_400_BAD_REQUEST)
    except GenerationError as e:
        logger.error("Puzzle generation failed for %s/%s: %s", vd["mode"], vd["difficulty"], e)
        return Response({"error": str(e)}, status=status.HTTP_503_SERVICE_UNAVAILABLE)

    return Response(RoundSnapshotSerializer(_round_payload(round_id, coordinator)).data, status=status.HTTP_200_OK)


# PUBLIC_INTERFACE
@swagger_auto_schema(
    method="get",
    operation_id="round_detail",
    operation_summary="Get round state",
    operation_description="""
Fetch the current snapshot of a live round.

Path parameters:
- round_id (str): Round identifier returned by start-round.
""",
    responses={200: RoundSnapshotSerializer},
    tags=["rounds"],
)
@api_view(["GET"])
@permission_classes([permissions.AllowAny])
def get_round_detail(request, round_id: str):
    """Retrieve a live round by id."""
    try:
        with get_store().checkout(round_id) as coordinator:
            payload = _round_payload(round_id, coordinator)
    except RoundNotFound:
        return Response(_NOT_FOUND, status=status.HTTP_404_NOT_FOUND)
    return Response(RoundSnapshotSerializer(payload).data, status=status.HTTP_200_OK)


# PUBLIC_INTERFACE
@swagger_auto_schema(
    method="post",
    operation_id="select_cell",
    operation_summary="Select a Sudoku cell",
    operation_description="""
Point at a cell. In normal Sudoku this may auto-fill the sticky digit or toggle
which digit is sticky. Ignored for other modes and finished rounds.

Request body:
- round_id (str, required)
- row, col (int, required): zero-based, within the board
""",
    request_body=CellRequestSerializer,
    responses={200: ActionResponseSerializer},
    tags=["input"],
)
@api_view(["POST"])
@permission_classes([permissions.AllowAny])
def select_cell(request):
    """Select a cell of a Sudoku round."""
    return _run_action(request, CellRequestSerializer, lambda c, vd: c.select_cell(vd["row"], vd["col"]))


# PUBLIC_INTERFACE
@swagger_auto_schema(
    method="post",
    operation_id="input_number",
    operation_summary="Enter a digit",
    operation_description="""
Write a digit into the selected Sudoku cell (or toggle it as a note in notes
mode). 0 clears the cell. Wrong digits count as mistakes.

Request body:
- round_id (str, required)
- digit (int, required): 0-9
""",
    request_body=DigitRequestSerializer,
    responses={200: ActionResponseSerializer},
    tags=["input"],
)
@api_view(["POST"])
@permission_classes([permissions.AllowAny])
def input_number(request):
    """Enter a digit into the selected cell."""
    return _run_action(request, DigitRequestSerializer, lambda c, vd: c.input_number(vd["digit"]))


# PUBLIC_INTERFACE
@swagger_auto_schema(
    method="post",
    operation_id="toggle_cell",
    operation_summary="Cycle an Oh h1 or Nonogram cell",
    operation_description="""
Oh h1: empty -> color 1 -> color 2 -> empty (fixed cells are ignored).
Nonogram: empty -> filled -> marked -> empty.

Request body:
- round_id (str, required)
- row, col (int, required)
""",
    request_body=CellRequestSerializer,
    responses={200: ActionResponseSerializer},
    tags=["input"],
)
@api_view(["POST"])
@permission_classes([permissions.AllowAny])
def toggle_cell(request):
    """Cycle the state of one cell."""
    return _run_action(request, CellRequestSerializer, lambda c, vd: c.toggle_cell(vd["row"], vd["col"]))


# PUBLIC_INTERFACE
@swagger_auto_schema(
    method="post",
    operation_id="move",
    operation_summary="Slide the 2048 board",
    operation_description="""
Slide and merge every tile toward the given direction. A tile spawns only when
the board changed.

Request body:
- round_id (str, required)
- direction (str, required): up | down | left | right
""",
    request_body=MoveRequestSerializer,
    responses={200: ActionResponseSerializer},
    tags=["input"],
)
@api_view(["POST"])
@permission_classes([permissions.AllowAny])
def move(request):
    """Apply a 2048 move."""
    return _run_action(request, MoveRequestSerializer, lambda c, vd: c.move(vd["direction"]))


# PUBLIC_INTERFACE
@swagger_auto_schema(
    method="post",
    operation_id="toggle_notes",
    operation_summary="Toggle notes mode",
    operation_description="Switch Sudoku input between digits and pencil notes.",
    request_body=RoundRequestSerializer,
    responses={200: ActionResponseSerializer},
    tags=["input"],
)
@api_view(["POST"])
@permission_classes([permissions.AllowAny])
def toggle_notes(request):
    """Toggle Sudoku notes mode."""
    return _run_action(request, RoundRequestSerializer, lambda c, vd: c.toggle_notes_mode())


# PUBLIC_INTERFACE
@swagger_auto_schema(
    method="post",
    operation_id="request_hint",
    operation_summary="Request a hint",
    operation_description="""
Reveal one cell from the hidden solution (Sudoku, Oh h1, Nonogram). When there
is nothing left to reveal, or the mode has no hints, type and data are null and
the round is unchanged.

Request body:
- round_id (str, required)
""",
    request_body=RoundRequestSerializer,
    responses={200: HintResponseSerializer},
    tags=["input", "hints"],
)
@api_view(["POST"])
@permission_classes([permissions.AllowAny])
def request_hint(request):
    """Reveal one solution cell for the given round."""
    serializer = RoundRequestSerializer(data=request.data or {})
    serializer.is_valid(raise_exception=True)
    round_id = serializer.validated_data["round_id"]

    try:
        with get_store().checkout(round_id) as coordinator:
            payload = coordinator.request_hint() or {}
            snap = _round_payload(round_id, coordinator)
    except RoundNotFound:
        return Response(_NOT_FOUND, status=status.HTTP_404_NOT_FOUND)

    resp = {
        "round_id": round_id,
        "type": payload.get("type"),
        "data": payload.get("data"),
        "round": snap,
    }
    return Response(HintResponseSerializer(resp).data, status=status.HTTP_200_OK)


# PUBLIC_INTERFACE
@swagger_auto_schema(
    method="post",
    operation_id="restart_round",
    operation_summary="Restart a round",
    operation_description="""
Throw away the round's puzzle and generate a new one under the same round_id,
optionally switching mode and/or difficulty.

Request body:
- round_id (str, required)
- mode, difficulty (optional): keep the current values when omitted
""",
    request_body=RestartRequestSerializer,
    responses={200: RoundSnapshotSerializer},
    tags=["rounds"],
)
@api_view(["POST"])
@permission_classes([permissions.AllowAny])
def restart_round(request):
    """Start over in the same round slot."""
    serializer = RestartRequestSerializer(data=request.data or {})
    serializer.is_valid(raise_exception=True)
    vd = serializer.validated_data
    round_id = vd["round_id"]

    try:
        with get_store().checkout(round_id) as coordinator:
            coordinator.new_round(vd.get("mode"), vd.get("difficulty"))
            payload = _round_payload(round_id, coordinator)
    except RoundNotFound:
        return Response(_NOT_FOUND, status=status.HTTP_404_NOT_FOUND)
    except ValueError as e:
        return Response({"error": str(e)}, status=status.HTTP_400_BAD_REQUEST)
    except GenerationError as e:
        logger.error("Puzzle generation failed on restart of %s: %s", round_id, e)
        return Response({"error": str(e)}, status=status.HTTP_503_SERVICE_UNAVAILABLE)
    return Response(RoundSnapshotSerializer(payload).data, status=status.HTTP_200_OK)


# PUBLIC_INTERFACE
@swagger_auto_schema(
    method="post",
    operation_id="end_round",
    operation_summary="End a round",
    operation_description="Stop the round's timer and forget it.",
    request_body=RoundRequestSerializer,
    responses={204: "Round discarded."},
    tags=["rounds"],
)
@api_view(["POST"])
@permission_classes([permissions.AllowAny])
def end_round(request):
    """Discard a live round."""
    serializer = RoundRequestSerializer(data=request.data or {})
    serializer.is_valid(raise_exception=True)
    if not get_store().discard(serializer.validated_data["round_id"]):
        return Response(_NOT_FOUND, status=status.HTTP_404_NOT_FOUND)
    return Response(status=status.HTTP_204_NO_CONTENT)


# PUBLIC_INTERFACE
@swagger_auto_schema(
    method="get",
    operation_id="best_scores",
    operation_summary="List best scores",
    operation_description="""
Returns persisted best scores, one per (namespace, board size).

Query params:
- mode (optional): only this namespace, e.g. 2048
""",
    manual_parameters=[
        openapi.Parameter("mode", openapi.IN_QUERY, type=openapi.TYPE_STRING, required=False),
    ],
    responses={200: BestScoreSerializer(many=True)},
    tags=["scores"],
)
@api_view(["GET"])
@permission_classes([permissions.AllowAny])
def get_best_scores(request):
    """Best scores, optionally filtered by namespace."""
    qs = BestScore.objects.all()
    mode = (request.GET.get("mode") or "").strip().lower()
    if mode:
        qs = qs.filter(namespace=mode)
    serializer = BestScoreSerializer(qs, many=True)
    return Response(serializer.data, status=status.HTTP_200_OK)


# PUBLIC_INTERFACE
@swagger_auto_schema(
    method="get",
    operation_id="get_modes",
    operation_summary="List available game modes",
    operation_description="Returns supported game modes.",
    tags=["meta"],
    responses={200: openapi.Response("OK", schema=openapi.Schema(type=openapi.TYPE_ARRAY, items=openapi.Items(type=openapi.TYPE_STRING)))},
)
@api_view(["GET"])
@permission_classes([permissions.AllowAny])
def get_modes(request):
    """List available game modes."""
    return Response(list(GAME_MODES), status=status.HTTP_200_OK)


# PUBLIC_INTERFACE
@swagger_auto_schema(
    method="get",
    operation_id="get_difficulties",
    operation_summary="List difficulties with display labels",
    operation_description="Returns difficulty keys mapped to labels; 2048 is labelled by board size.",
    manual_parameters=[
        openapi.Parameter("mode", openapi.IN_QUERY, type=openapi.TYPE_STRING, required=False),
    ],
    tags=["meta"],
    responses={200: openapi.Response("OK", schema=openapi.Schema(type=openapi.TYPE_OBJECT))},
)
@api_view(["GET"])
@permission_classes([permissions.AllowAny])
def get_difficulties(request):
    """Difficulty labels for a mode (default: normal)."""
    mode = (request.GET.get("mode") or "normal").strip().lower()
    if mode not in GAME_MODES:
        return Response({"error": f"Unknown game mode: {mode!r}"}, status=status.HTTP_400_BAD_REQUEST)
    return Response(difficulty_labels(mode), status=status.HTTP_200_OK)
