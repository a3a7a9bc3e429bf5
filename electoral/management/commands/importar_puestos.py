from pathlib import Path

from django.core.exceptions import ValidationError
from django.core.management.base import BaseCommand, CommandError

from electoral.services.importacion import importar_puestos


class Command(BaseCommand):
    help = 'Carga la tabla de referencia de puestos de votación desde un .csv o .xlsx.'

    def add_arguments(self, parser):
        parser.add_argument('archivo', type=str)

    def handle(self, *args, **options):
        ruta = Path(options['archivo'])
        if not ruta.is_file():
            raise CommandError(f"No existe el archivo {ruta}")

        try:
            with ruta.open('rb') as fh:
                resultado = importar_puestos(fh, ruta.name)
        except ValidationError as e:
            raise CommandError('; '.join(e.messages))

        self.stdout.write(self.style.SUCCESS(
            f'Puestos creados: {resultado.creados} | actualizados: {resultado.actualizados}'
        ))
        for error in resultado.errores:
            self.stdout.write(self.style.WARNING(error))
