import time
from typing import Any

from django.core.management.base import BaseCommand
from django.db import transaction

from electoral.models import Persona
from electoral.reglas import derivar_estado


class Command(BaseCommand):
    help = 'Recalcula el estado (APROBADO/PENDIENTE/RECHAZADO) de todas las personas según sus municipios.'

    CHUNK_SIZE = 2000

    def add_arguments(self, parser):
        parser.add_argument(
            '--dry-run',
            action='store_true',
            help='Muestra cuántos registros cambiarían sin escribir en la base de datos.',
        )

    def print_progress_bar(self, iteration: int, total: int, prefix: str = '', suffix: str = '', length: int = 40, fill: str = '█'):
        """
        Barra de progreso en la terminal.
        """
        if total == 0:
            return
        percent = f"{100 * (iteration / float(total)):.1f}"
        filled_length = int(length * iteration // total)
        bar = fill * filled_length + '-' * (length - filled_length)
        self.stdout.write(f"\r{prefix} |{bar}| {percent}% {suffix}", ending="")
        self.stdout.flush()
        if iteration == total:
            self.stdout.write("")

    def handle(self, *args: Any, **options: Any) -> None:
        start_time = time.time()
        dry_run = options['dry_run']
        self.stdout.write(self.style.HTTP_INFO('RECÁLCULO DE ESTADOS' + (' (simulación)' if dry_run else '')))
        self.stdout.write('--------------------------------------------------')

        qs = Persona.objects.only('cedula', 'estado', 'municipio_votacion', 'municipio_puesto').order_by('cedula')
        total_registros = qs.count()
        self.stdout.write(f"Registros detectados: {total_registros}")

        cambios = {}
        conteo_por_estado = {}

        for i, persona in enumerate(qs.iterator(chunk_size=self.CHUNK_SIZE), 1):
            nuevo = derivar_estado(persona.municipio_votacion, persona.municipio_puesto)
            conteo_por_estado[nuevo] = conteo_por_estado.get(nuevo, 0) + 1
            if nuevo != persona.estado:
                cambios.setdefault(nuevo, []).append(persona.cedula)
            if i % 50 == 0 or i == total_registros:
                self.print_progress_bar(i, total_registros, prefix='Procesando:', suffix=f'({i}/{total_registros})')

        total_cambios = sum(len(cedulas) for cedulas in cambios.values())

        if not dry_run and total_cambios:
            # Un UPDATE por estado destino y por lote de cédulas
            with transaction.atomic():
                for estado, cedulas in cambios.items():
                    for inicio in range(0, len(cedulas), self.CHUNK_SIZE):
                        Persona.objects.filter(pk__in=cedulas[inicio:inicio + self.CHUNK_SIZE]).update(estado=estado)

        duration = time.time() - start_time
        self.stdout.write('--------------------------------------------------')
        for estado, cantidad in sorted(conteo_por_estado.items()):
            self.stdout.write(f"{estado}: {cantidad}")
        if dry_run:
            self.stdout.write(self.style.WARNING(f'Simulación: {total_cambios} registros cambiarían de estado.'))
        else:
            self.stdout.write(self.style.SUCCESS(f'Registros actualizados: {total_cambios}'))
        self.stdout.write(f"Tiempo total: {duration:.2f} segundos")
