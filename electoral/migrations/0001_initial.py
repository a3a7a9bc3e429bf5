import django.db.models.deletion
import django.utils.timezone
from django.db import migrations, models

import electoral.models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
    ]

    operations = [
        migrations.CreateModel(
            name='AdminCode',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('codigo', models.CharField(max_length=50, unique=True)),
                ('activo', models.BooleanField(default=True)),
                ('descripcion', models.TextField(blank=True, null=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
            ],
            options={
                'verbose_name': 'Código de Administrador',
                'verbose_name_plural': 'Códigos de Administrador',
                'db_table': 'admin_codes',
                'ordering': ['-created_at'],
            },
        ),
        migrations.CreateModel(
            name='Sesion',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('token', models.CharField(default=electoral.models._token_sesion, max_length=64, unique=True)),
                ('cedula', models.CharField(blank=True, max_length=20, null=True)),
                ('es_admin', models.BooleanField(default=False)),
                ('expires_at', models.DateTimeField(default=electoral.models._expiracion_sesion)),
                ('cerrada', models.BooleanField(default=False)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
            ],
            options={
                'verbose_name': 'Sesión',
                'verbose_name_plural': 'Sesiones',
                'db_table': 'sesiones',
                'ordering': ['-created_at'],
            },
        ),
        migrations.CreateModel(
            name='PuestoVotacion',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('departamento', models.CharField(max_length=100)),
                ('municipio', models.CharField(db_index=True, max_length=100)),
                ('puesto', models.CharField(max_length=200)),
                ('direccion', models.CharField(blank=True, max_length=255, null=True, verbose_name='Dirección')),
            ],
            options={
                'verbose_name': 'Puesto de Votación',
                'verbose_name_plural': 'Puestos de Votación',
                'db_table': 'puestos_votacion',
                'ordering': ['municipio', 'puesto'],
                'unique_together': {('departamento', 'municipio', 'puesto')},
            },
        ),
        migrations.CreateModel(
            name='Persona',
            fields=[
                ('cedula', models.CharField(max_length=20, primary_key=True, serialize=False, verbose_name='Cédula')),
                ('nombre_completo', models.CharField(max_length=200, verbose_name='Nombre Completo')),
                ('telefono', models.CharField(blank=True, max_length=20, null=True, verbose_name='Teléfono')),
                ('email', models.EmailField(blank=True, max_length=254, null=True)),
                ('rol', models.CharField(choices=[('lider', 'Líder'), ('asociado', 'Asociado'), ('impulsor', 'Impulsor')], default='asociado', max_length=10)),
                ('lugar_votacion', models.CharField(blank=True, max_length=100, null=True, verbose_name='Lugar de Votación')),
                ('municipio_votacion', models.CharField(blank=True, max_length=100, null=True, verbose_name='Municipio donde vive')),
                ('municipio_puesto', models.CharField(blank=True, max_length=100, null=True, verbose_name='Municipio de Votación')),
                ('puesto_votacion', models.CharField(blank=True, max_length=200, null=True, verbose_name='Puesto de Votación')),
                ('mesa_votacion', models.CharField(blank=True, max_length=20, null=True, verbose_name='Mesa')),
                ('vota_en_bello', models.BooleanField(default=False)),
                ('votos_prometidos', models.PositiveIntegerField(default=0)),
                ('estado', models.CharField(choices=[('PENDIENTE', 'Pendiente'), ('APROBADO', 'Aprobado'), ('RECHAZADO', 'Rechazado')], default='PENDIENTE', max_length=10)),
                ('notas', models.TextField(blank=True, null=True)),
                ('registrado_por', models.CharField(blank=True, max_length=20, null=True)),
                ('fecha_registro', models.DateTimeField(default=django.utils.timezone.now, verbose_name='Fecha de Registro')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('cedula_lider', models.ForeignKey(blank=True, db_column='cedula_lider', limit_choices_to={'rol': 'lider'}, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='miembros', to='electoral.persona', verbose_name='Líder')),
            ],
            options={
                'verbose_name': 'Persona',
                'verbose_name_plural': 'Personas',
                'db_table': 'personas',
                'ordering': ['nombre_completo'],
                'indexes': [
                    models.Index(fields=['rol', 'estado'], name='personas_rol_estado_idx'),
                    models.Index(fields=['municipio_puesto'], name='personas_mpio_puesto_idx'),
                ],
            },
        ),
        migrations.CreateModel(
            name='ChatMessage',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('de_admin', models.BooleanField(default=False, verbose_name='Enviado por el administrador')),
                ('contenido', models.TextField()),
                ('leido', models.BooleanField(default=False)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('lider', models.ForeignKey(limit_choices_to={'rol': 'lider'}, on_delete=django.db.models.deletion.CASCADE, related_name='mensajes_chat', to='electoral.persona')),
            ],
            options={
                'verbose_name': 'Mensaje de Chat',
                'verbose_name_plural': 'Mensajes de Chat',
                'db_table': 'chat_messages',
                'ordering': ['created_at', 'id'],
            },
        ),
    ]
