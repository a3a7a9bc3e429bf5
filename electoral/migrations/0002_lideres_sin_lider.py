from django.db import migrations
from django.db.models import F


def limpiar_autoreferencias(apps, schema_editor):
    """
    Datos heredados guardaban al líder apuntándose a sí mismo (cedula_lider = cedula).
    Un líder no tiene líder: se deja en NULL.
    """
    Persona = apps.get_model('electoral', 'Persona')
    Persona.objects.filter(rol='lider').exclude(cedula_lider__isnull=True).update(cedula_lider=None)
    Persona.objects.filter(cedula_lider_id=F('cedula')).update(cedula_lider=None)


class Migration(migrations.Migration):

    dependencies = [
        ('electoral', '0001_initial'),
    ]

    operations = [
        migrations.RunPython(limpiar_autoreferencias, migrations.RunPython.noop),
    ]
