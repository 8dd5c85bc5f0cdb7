from django.urls import path
from .views import (
    health,
    start_round,
    get_round_detail,
    select_cell,
    input_number,
    toggle_cell,
    move,
    toggle_notes,
    request_hint,
    restart_round,
    end_round,
    get_best_scores,
    get_modes,
    get_difficulties,
)

urlpatterns = [
    path('health/', health, name='Health'),
    path('start-round', start_round, name='start-round'),
    path('round/<str:round_id>', get_round_detail, name='round-detail'),
    path('select', select_cell, name='select-cell'),
    path('input', input_number, name='input-number'),
    path('toggle', toggle_cell, name='toggle-cell'),
    path('move', move, name='move'),
    path('notes', toggle_notes, name='toggle-notes'),
    path('hint', request_hint, name='request-hint'),
    path('restart', restart_round, name='restart-round'),
    path('end-round', end_round, name='end-round'),
    path('best-scores', get_best_scores, name='best-scores'),
    path('modes', get_modes, name='get-modes'),
    path('difficulties', get_difficulties, name='get-difficulties'),
]
