from django.core.management.base import BaseCommand
from django.db import transaction
from django.db.models import F

from electoral.constants import RolPersona
from electoral.models import Persona


class Command(BaseCommand):
    help = 'Deja en NULL el líder de los líderes y corrige personas que se apuntan a sí mismas.'

    def add_arguments(self, parser):
        parser.add_argument('--dry-run', action='store_true')

    def handle(self, *args, **options):
        lideres = Persona.objects.lideres().exclude(cedula_lider__isnull=True)
        autoreferencias = Persona.objects.filter(cedula_lider_id=F('cedula')).exclude(rol=RolPersona.LIDER)

        self.stdout.write(f"Líderes con líder asignado: {lideres.count()}")
        self.stdout.write(f"Miembros que se apuntan a sí mismos: {autoreferencias.count()}")

        if options['dry_run']:
            self.stdout.write(self.style.WARNING('Simulación: no se escribió nada.'))
            return

        with transaction.atomic():
            total = lideres.update(cedula_lider=None) + autoreferencias.update(cedula_lider=None)

        self.stdout.write(self.style.SUCCESS(f'Registros corregidos: {total}'))
