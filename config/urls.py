from django.contrib import admin
from django.urls import path

from core.rpc import rpc_view

urlpatterns = [
    path('admin/', admin.site.urls),
    # Every store operation is a named procedure
    path('rpc/<str:name>', rpc_view, name='rpc'),
]
