from pathlib import Path

from django.core.exceptions import ValidationError
from django.core.management.base import BaseCommand, CommandError

from electoral.constants import REGISTRADO_POR_ADMIN
from electoral.services.importacion import importar_personas


class Command(BaseCommand):
    help = 'Importa personas desde un archivo .csv o .xlsx (mismo proceso que el panel de administración).'

    def add_arguments(self, parser):
        parser.add_argument('archivo', type=str, help='Ruta del archivo .csv o .xlsx')
        parser.add_argument(
            '--registrado-por',
            default=REGISTRADO_POR_ADMIN,
            help='Valor que se guarda en registrado_por para los registros nuevos.',
        )

    def handle(self, *args, **options):
        ruta = Path(options['archivo'])
        if not ruta.is_file():
            raise CommandError(f"No existe el archivo {ruta}")

        self.stdout.write(self.style.HTTP_INFO(f'Importando personas desde {ruta.name}...'))
        try:
            with ruta.open('rb') as fh:
                resultado = importar_personas(fh, ruta.name, registrado_por=options['registrado_por'])
        except ValidationError as e:
            raise CommandError('; '.join(e.messages))

        self.stdout.write(self.style.SUCCESS(
            f'Creados: {resultado.creados} | Actualizados: {resultado.actualizados} | '
            f'Vinculados a líder: {resultado.vinculados} | Procesados: {resultado.procesados}'
        ))
        for error in resultado.errores:
            self.stdout.write(self.style.WARNING(error))
