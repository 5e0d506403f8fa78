from django.urls import path
from pieces.views import pieces_view, piece_detail_view

urlpatterns = [
    path('', pieces_view, name='pieces-list'),
    path('<int:pk>', piece_detail_view, name='piece-detail'),
]
