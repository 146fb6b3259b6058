from django.urls import path
from . import views

urlpatterns = [
    path('weather/', views.weather, name='weather'),
    path('health/', views.health, name='health'),
    path('schema/', views.openapi_schema, name='openapi_schema'),
    path('docs/', views.api_docs, name='api_docs'),
]
