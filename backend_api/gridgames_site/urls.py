from django.contrib import admin
from django.urls import include, path
from drf_yasg import openapi
from drf_yasg.views import get_schema_view
from rest_framework import permissions

schema_view = get_schema_view(
    openapi.Info(
        title="Grid Games API",
        default_version="v1",
        description="Sudoku, killer Sudoku, 2048, Oh h1 and Nonogram rounds.",
    ),
    public=True,
    permission_classes=(permissions.AllowAny,),
)

urlpatterns = [
    path("admin/", admin.site.urls),
    path("api/", include("gridgames.urls")),
    path("docs/", schema_view.with_ui("swagger", cache_timeout=0), name="api-docs"),
    path("swagger.json", schema_view.without_ui(cache_timeout=0), name="schema-json"),
]
