# crmelectoral/urls.py

from django.contrib import admin
from django.urls import path, include

# Archivos estáticos en modo DEBUG (mapa GeoJSON, exportaciones)
from django.conf import settings
from django.conf.urls.static import static


urlpatterns = [
    # 1. La ruta de admin de Django (siempre debe estar)
    path('admin/', admin.site.urls),

    # 2. Todas las demás rutas viven en 'electoral.urls'
    path('', include('electoral.urls')),
]


# Solo si DEBUG=True: servir MEDIA_ROOT bajo MEDIA_URL
if settings.DEBUG:
    urlpatterns += static(settings.MEDIA_URL, document_root=settings.MEDIA_ROOT)
