import json
from pathlib import Path

from django.conf import settings
from django.core.management.base import BaseCommand, CommandError

from electoral.services.territorio import DescargaMapaError, MapaMunicipiosClient


class Command(BaseCommand):
    help = 'Descarga el GeoJSON de municipios de Colombia y guarda solo los de Antioquia.'

    def add_arguments(self, parser):
        parser.add_argument('--url', default=None, help='Fuente alternativa del GeoJSON.')
        parser.add_argument('--destino', default=None, help='Ruta de salida (por defecto MAPA_GEOJSON_PATH).')

    def handle(self, *args, **options):
        cliente = MapaMunicipiosClient(url=options['url'])
        destino = Path(options['destino'] or settings.MAPA_GEOJSON_PATH)

        self.stdout.write(self.style.HTTP_INFO(f'Descargando mapa desde {cliente.url}...'))
        try:
            mapa = cliente.descargar()
        except DescargaMapaError as e:
            raise CommandError(str(e))

        total = len(mapa['features'])
        if total == 0:
            raise CommandError('El archivo descargado no contiene municipios de Antioquia.')

        destino.parent.mkdir(parents=True, exist_ok=True)
        with destino.open('w', encoding='utf-8') as fh:
            json.dump(mapa, fh, ensure_ascii=False)

        self.stdout.write(self.style.SUCCESS(f'{total} municipios guardados en {destino}'))
